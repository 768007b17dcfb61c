# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Personalized stream API: topics, collection topics, subscriptions, timelines.

Topics belong to a Network or to a Site ("core"). Collections and users can
be tied to topics, and each topic and each user has a timeline that can be
paged with a TimelineCursor.

Usage:
    async with LivefyreClient() as client:
        stream = PersonalizedStream(client)
        topics = await stream.create_or_update_topics(network, {"1": "Sports"})
        await stream.add_collection_topics(site, collection_id, topics)
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from . import domain
from .client import LivefyreClient, parse_json, response_text
from .core import Network, Site
from .crypto import decode_token
from .exceptions import InvalidArgumentError, RemoteServiceError
from .types import Subscription, Topic, generate_topic_urn

logger = logging.getLogger(__name__)

MAX_LABEL_LENGTH = 128


def _topic_ids(topics: Iterable[Topic]) -> list[str]:
    return [topic.id for topic in topics]


def _check_label(label: str) -> None:
    if not label or len(label) > MAX_LABEL_LENGTH:
        raise InvalidArgumentError(
            f"topic label must be between 1 and {MAX_LABEL_LENGTH} characters."
        )


def _check_topics_in_network(network: Network, topics: Iterable[Topic]) -> None:
    for topic in topics:
        if not network.owns_topic(topic):
            raise InvalidArgumentError(
                f"topic {topic.id} does not belong to network {network.name}"
            )


class PersonalizedStream:
    """Wrappers around the v4 personalized stream endpoints."""

    def __init__(self, client: LivefyreClient):
        self.client = client

    @staticmethod
    def _base_url(core: Any) -> str:
        return f"{domain.quill(core)}/api/v4/"

    async def _call(
        self,
        method: str,
        url: str,
        token: str,
        json_data: Any = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        status, body = await self.client.request(
            method,
            url,
            params=params,
            headers={"Authorization": f"lftoken {token}"},
            json_data=json_data,
        )
        if status != 200:
            logger.warning(f"{method} {url} failed: status={status}")
            raise RemoteServiceError("Error contacting Livefyre.", status, response_text(body))
        document = parse_json(status, body)
        if not isinstance(document, dict):
            return {}
        return document.get("data") or {}

    # =========================================================================
    # Topics
    # =========================================================================

    async def get_topic(self, core: Network | Site, topic_id: str) -> Topic | None:
        """Fetch one topic by its short id. None if Livefyre has no such topic."""
        url = f"{self._base_url(core)}{generate_topic_urn(core, topic_id)}/"
        data = await self._call("GET", url, core.build_livefyre_token())
        topic = data.get("topic")
        return Topic.from_dict(topic) if topic else None

    async def create_or_update_topic(self, core: Network | Site, topic_id: str, label: str) -> Topic:
        topics = await self.create_or_update_topics(core, {topic_id: label})
        return topics[0]

    async def create_or_update_topics(
        self,
        core: Network | Site,
        topic_map: Mapping[str, str],
    ) -> list[Topic]:
        """
        Create or relabel topics.

        Args:
            core: Owning Network or Site
            topic_map: Short topic id -> label

        Returns:
            The topics sent, with full URN ids
        """
        topics = []
        for topic_id, label in topic_map.items():
            _check_label(label)
            topics.append(Topic.create(core, topic_id, label))

        url = f"{self._base_url(core)}{core.urn}:topics/"
        await self._call(
            "POST", url, core.build_livefyre_token(),
            json_data={"topics": [topic.to_dict() for topic in topics]},
        )
        logger.info(f"Created or updated {len(topics)} topics under {core.urn}")
        return topics

    async def get_topics(
        self,
        core: Network | Site,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Topic]:
        url = f"{self._base_url(core)}{core.urn}:topics/"
        data = await self._call(
            "GET", url, core.build_livefyre_token(),
            params={"limit": str(limit), "offset": str(offset)},
        )
        return [Topic.from_dict(topic) for topic in data.get("topics") or []]

    async def delete_topic(self, core: Network | Site, topic: Topic) -> bool:
        return await self.delete_topics(core, [topic]) == 1

    async def delete_topics(self, core: Network | Site, topics: Iterable[Topic]) -> int:
        """Returns the number of topics Livefyre deleted."""
        url = f"{self._base_url(core)}{core.urn}:topics/"
        data = await self._call(
            "PATCH", url, core.build_livefyre_token(),
            json_data={"delete": _topic_ids(topics)},
        )
        return data.get("deleted", 0)

    # =========================================================================
    # Collection topics
    # =========================================================================

    def _collection_topics_url(self, site: Site, collection_id: str) -> str:
        return f"{self._base_url(site)}{site.urn}:collection={collection_id}:topics/"

    async def get_collection_topics(self, site: Site, collection_id: str) -> list[str]:
        data = await self._call(
            "GET", self._collection_topics_url(site, collection_id), site.build_livefyre_token()
        )
        return list(data.get("topicIds") or [])

    async def add_collection_topics(
        self,
        site: Site,
        collection_id: str,
        topics: Iterable[Topic],
    ) -> int:
        topics = list(topics)
        _check_topics_in_network(site.network, topics)
        data = await self._call(
            "POST", self._collection_topics_url(site, collection_id), site.build_livefyre_token(),
            json_data={"topicIds": _topic_ids(topics)},
        )
        return data.get("added", 0)

    async def replace_collection_topics(
        self,
        site: Site,
        collection_id: str,
        topics: Iterable[Topic],
    ) -> dict[str, int]:
        """Make ``topics`` the collection's only topics. Returns added/removed counts."""
        topics = list(topics)
        _check_topics_in_network(site.network, topics)
        data = await self._call(
            "PUT", self._collection_topics_url(site, collection_id), site.build_livefyre_token(),
            json_data={"topicIds": _topic_ids(topics)},
        )
        return {"added": data.get("added", 0), "removed": data.get("removed", 0)}

    async def remove_collection_topics(
        self,
        site: Site,
        collection_id: str,
        topics: Iterable[Topic],
    ) -> int:
        topics = list(topics)
        _check_topics_in_network(site.network, topics)
        data = await self._call(
            "PATCH", self._collection_topics_url(site, collection_id), site.build_livefyre_token(),
            json_data={"delete": _topic_ids(topics)},
        )
        return data.get("removed", 0)

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def _subscriptions_url(self, network: Network, user_id: str) -> str:
        return f"{self._base_url(network)}{network.user_urn(user_id)}:subscriptions/"

    def _build_subscriptions(
        self,
        network: Network,
        user_token: str,
        topics: Iterable[Topic],
    ) -> tuple[str, list[dict[str, Any]]]:
        topics = list(topics)
        _check_topics_in_network(network, topics)
        user_id = decode_token(network.key, user_token).get("user_id")
        if not user_id:
            raise InvalidArgumentError("user token does not carry a user_id.")
        user_urn = network.user_urn(user_id)
        return user_id, [Subscription(to=topic.id, by=user_urn).to_dict() for topic in topics]

    async def get_subscriptions(self, network: Network, user_id: str) -> list[Subscription]:
        data = await self._call(
            "GET", self._subscriptions_url(network, user_id), network.build_livefyre_token()
        )
        return [Subscription.from_dict(sub) for sub in data.get("subscriptions") or []]

    async def add_subscriptions(
        self,
        network: Network,
        user_token: str,
        topics: Iterable[Topic],
    ) -> int:
        """Subscribe the token's user to ``topics``. Returns how many were added."""
        user_id, subscriptions = self._build_subscriptions(network, user_token, topics)
        data = await self._call(
            "POST", self._subscriptions_url(network, user_id), user_token,
            json_data={"subscriptions": subscriptions},
        )
        return data.get("added", 0)

    async def replace_subscriptions(
        self,
        network: Network,
        user_token: str,
        topics: Iterable[Topic],
    ) -> dict[str, int]:
        user_id, subscriptions = self._build_subscriptions(network, user_token, topics)
        data = await self._call(
            "PUT", self._subscriptions_url(network, user_id), user_token,
            json_data={"subscriptions": subscriptions},
        )
        return {"added": data.get("added", 0), "removed": data.get("removed", 0)}

    async def remove_subscriptions(
        self,
        network: Network,
        user_token: str,
        topics: Iterable[Topic],
    ) -> int:
        user_id, subscriptions = self._build_subscriptions(network, user_token, topics)
        data = await self._call(
            "PATCH", self._subscriptions_url(network, user_id), user_token,
            json_data={"delete": subscriptions},
        )
        return data.get("removed", 0)

    async def get_subscribers(
        self,
        network: Network,
        topic: Topic,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Subscription]:
        url = f"{self._base_url(network)}{topic.id}:subscribers/"
        data = await self._call(
            "GET", url, network.build_livefyre_token(),
            params={"limit": str(limit), "offset": str(offset)},
        )
        return [Subscription.from_dict(sub) for sub in data.get("subscriptions") or []]

    # =========================================================================
    # Timelines
    # =========================================================================

    async def get_timeline_stream(
        self,
        core: Network | Site,
        resource: str,
        limit: int = 50,
        until: str | None = None,
        since: str | None = None,
    ) -> dict[str, Any]:
        """
        Fetch one page of a timeline.

        Args:
            core: Network or Site whose token authorizes the read
            resource: Timeline resource, e.g. ``<topic id>:topicStream``
            limit: Page size
            until: Only items before this cursor time
            since: Only items after this cursor time (ignored if until is set)

        Returns:
            The full response document, including ``meta.cursor``
        """
        params = {"resource": resource, "limit": str(limit)}
        if until is not None:
            params["until"] = until
        elif since is not None:
            params["since"] = since

        url = f"{domain.bootstrap(core)}/api/v4/timeline/"
        status, body = await self.client.request(
            "GET", url, params=params,
            headers={"Authorization": f"lftoken {core.build_livefyre_token()}"},
        )
        if status != 200:
            raise RemoteServiceError("Error contacting Livefyre.", status, response_text(body))
        return parse_json(status, body)
