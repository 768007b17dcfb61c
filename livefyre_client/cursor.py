# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Paging over personalized stream timelines.
"""

from datetime import datetime, timezone
from typing import Any

from .core import Network, Site
from .personalized_stream import PersonalizedStream
from .types import Topic


def format_cursor_time(moment: datetime) -> str:
    """UTC timestamp with millisecond precision, e.g. ``2025-01-31T12:00:00.250Z``."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class TimelineCursor:
    """
    Walks a timeline backwards (next) or forwards (previous) from a point in time.

    Attributes:
        resource: Timeline resource, e.g. ``<topic id>:topicStream``
        limit: Page size
        cursor_time: Current position, advanced by every page fetched
        has_next: Older items remain
        has_previous: Newer items remain
    """

    def __init__(
        self,
        stream: PersonalizedStream,
        core: Network | Site,
        resource: str,
        limit: int = 50,
        cursor_time: datetime | str | None = None,
    ):
        self.stream = stream
        self.core = core
        self.resource = resource
        self.limit = limit
        if cursor_time is None:
            cursor_time = datetime.now(timezone.utc)
        if isinstance(cursor_time, datetime):
            cursor_time = format_cursor_time(cursor_time)
        self.cursor_time: str = cursor_time
        self.has_next = False
        self.has_previous = False

    async def next(self) -> dict[str, Any]:
        """Fetch the page of items older than the cursor."""
        data = await self.stream.get_timeline_stream(
            self.core, self.resource, self.limit, until=self.cursor_time
        )
        self._advance(data, "next")
        return data

    async def previous(self) -> dict[str, Any]:
        """Fetch the page of items newer than the cursor."""
        data = await self.stream.get_timeline_stream(
            self.core, self.resource, self.limit, since=self.cursor_time
        )
        self._advance(data, "prev")
        return data

    def _advance(self, data: dict[str, Any], direction: str) -> None:
        cursor = (data.get("meta") or {}).get("cursor") or {}
        self.has_next = bool(cursor.get("hasNext", False))
        self.has_previous = bool(cursor.get("hasPrev", False))
        position = cursor.get(direction)
        if position:
            self.cursor_time = position


def topic_stream_cursor(
    stream: PersonalizedStream,
    core: Network | Site,
    topic: Topic,
    limit: int = 50,
    cursor_time: datetime | str | None = None,
) -> TimelineCursor:
    return TimelineCursor(stream, core, f"{topic.id}:topicStream", limit, cursor_time)


def personal_stream_cursor(
    stream: PersonalizedStream,
    network: Network,
    user_id: str,
    limit: int = 50,
    cursor_time: datetime | str | None = None,
) -> TimelineCursor:
    return TimelineCursor(
        stream, network, f"{network.user_urn(user_id)}:personalStream", limit, cursor_time
    )
