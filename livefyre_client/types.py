# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Core data types for the Livefyre SDK.

Data model:
- CollectionOptions: typed collection settings (type, topics, free-form extras)
- Topic: taxonomy tag scoped to a network or a site
- Subscription: a user's subscription to a topic's personal stream
- SyncResult: outcome of a collection create-or-update round trip
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .crypto import canonical_json
from .exceptions import InvalidArgumentError

TOPIC_SEGMENT = ":topic="


class CollectionType(str, Enum):
    """Recognized collection types."""
    REVIEWS = "reviews"
    SIDENOTES = "sidenotes"
    RATINGS = "ratings"
    COUNTING = "counting"
    LIVEBLOG = "liveblog"
    LIVECHAT = "livechat"
    LIVECOMMENTS = "livecomments"
    DEFAULT = ""


class SubscriptionType(str, Enum):
    """Subscription kinds understood by the personalized stream API."""
    PERSONAL_STREAM = "personalStream"


class SyncOutcome(str, Enum):
    """Terminal states of a successful collection sync."""
    CREATED = "created"
    UPDATED = "updated"


# =============================================================================
# Topic
# =============================================================================

@dataclass(frozen=True)
class Topic:
    """
    A personalization topic.

    Attributes:
        id: Full topic URN, e.g. ``urn:livefyre:test.fyre.co:topic=1``
        label: Human-readable label
        created_at: Creation time in epoch seconds (set by Livefyre)
        modified_at: Last modification time in epoch seconds (set by Livefyre)
    """
    id: str
    label: str
    created_at: int | None = None
    modified_at: int | None = None

    @classmethod
    def create(cls, core: Any, topic_id: str, label: str) -> "Topic":
        """Build a topic owned by ``core`` (a Network or a Site)."""
        return cls(id=generate_topic_urn(core, topic_id), label=label)

    @property
    def truncated_id(self) -> str:
        """The caller-supplied id, without the owner URN prefix."""
        index = self.id.find(TOPIC_SEGMENT)
        if index < 0:
            return self.id
        return self.id[index + len(TOPIC_SEGMENT):]

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id, "label": self.label}
        if self.created_at is not None:
            result["createdAt"] = self.created_at
        if self.modified_at is not None:
            result["modifiedAt"] = self.modified_at
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Topic":
        return cls(
            id=data["id"],
            label=data["label"],
            created_at=data.get("createdAt"),
            modified_at=data.get("modifiedAt"),
        )


def generate_topic_urn(core: Any, topic_id: str) -> str:
    return f"{core.urn}{TOPIC_SEGMENT}{topic_id}"


# =============================================================================
# Subscription
# =============================================================================

@dataclass(frozen=True)
class Subscription:
    """
    A user's subscription to a topic.

    Attributes:
        to: Topic id the user subscribes to
        by: User URN of the subscriber
        type: Subscription kind
        created_at: Creation time in epoch seconds (None until stored)
    """
    to: str
    by: str
    type: SubscriptionType = SubscriptionType.PERSONAL_STREAM
    created_at: int | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "to": self.to,
            "by": self.by,
            "type": self.type.value,
        }
        if self.created_at is not None:
            result["createdAt"] = self.created_at
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Subscription":
        try:
            sub_type = SubscriptionType(data["type"])
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown subscription type: {data['type']!r}") from e
        return cls(
            to=data["to"],
            by=data["by"],
            type=sub_type,
            created_at=data.get("createdAt"),
        )

    def created_at_datetime(self) -> datetime | None:
        if self.created_at is None:
            return None
        return datetime.fromtimestamp(self.created_at, tz=timezone.utc)


# =============================================================================
# Collection options
# =============================================================================

@dataclass(frozen=True)
class CollectionOptions:
    """
    Typed collection settings.

    Attributes:
        type: Collection type; None leaves it out of the collection attributes
        topics: Topics attached to the collection
        extra: Any further attributes (e.g. ``tags``), sent as-is
    """
    type: CollectionType | None = None
    topics: tuple[Topic, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.type is not None and not isinstance(self.type, CollectionType):
            try:
                object.__setattr__(self, "type", CollectionType(self.type))
            except ValueError as e:
                allowed = [t.value for t in CollectionType]
                raise InvalidArgumentError(
                    f"type is not a recognized type. should be one of these types: {allowed}"
                ) from e

        topics = tuple(self.topics)
        for topic in topics:
            if not isinstance(topic, Topic):
                raise InvalidArgumentError(f"topics must contain Topic instances, got {topic!r}")
        object.__setattr__(self, "topics", topics)

        try:
            canonical_json(self.to_dict())
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"options must be JSON serializable: {e}") from e

    @classmethod
    def from_value(cls, options: "CollectionOptions | Mapping[str, Any] | None") -> "CollectionOptions":
        """Accept an existing CollectionOptions, a plain mapping, or None."""
        if options is None:
            return cls()
        if isinstance(options, CollectionOptions):
            return options
        if not isinstance(options, Mapping):
            raise InvalidArgumentError(f"options must be a mapping, got {type(options).__name__}")

        extra = {k: v for k, v in options.items() if k not in ("type", "topics")}
        return cls(
            type=options.get("type"),
            topics=tuple(options.get("topics") or ()),
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        result = dict(self.extra)
        if self.type is not None:
            result["type"] = self.type.value
        if self.topics:
            result["topics"] = [topic.to_dict() for topic in self.topics]
        return result


# =============================================================================
# Sync result
# =============================================================================

@dataclass(frozen=True)
class SyncResult:
    """Outcome of LivefyreClient.create_or_update()."""
    outcome: SyncOutcome
    collection_id: str | None = None
