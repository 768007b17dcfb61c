# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Livefyre Python SDK - tokens, collections and personalized streams

Features:
- Network / Site / Collection identity model with URN derivation
- HS256 user auth and collection meta tokens, system token validation
- Collection checksums (canonical JSON + MD5, change detection only)
- Collection create-or-update, collection content, user sync
- Topics, collection topics, subscriptions and timeline cursors

Usage (tokens, no network I/O):
    from livefyre_client import Network

    network = Network("client-name.fyre.co", "<network key>")
    token = network.build_user_auth_token("alice", "Alice", 3600)
    assert network.validate_livefyre_token(network.build_livefyre_token())

Usage (collection sync):
    from livefyre_client import LivefyreClient, Network

    site = Network("client-name.fyre.co", "<network key>").get_site("303827", "<site key>")
    collection = site.build_collection("article-1", "Title", "https://example.com/a/1")

    async with LivefyreClient() as client:
        result = await client.create_or_update(collection)
        # result.outcome is SyncOutcome.CREATED or SyncOutcome.UPDATED
"""

from .client import AiohttpTransport, ClientConfig, LivefyreClient, Transport
from .core import Collection, Network, Site
from .crypto import (
    DEFAULT_EXPIRES,
    DEFAULT_USER,
    build_checksum,
    build_collection_meta_token,
    build_legacy_checksum,
    build_system_token,
    build_user_auth_token,
    canonical_json,
    collection_attributes,
    decode_token,
    validate_livefyre_token,
)
from .cursor import TimelineCursor, personal_stream_cursor, topic_stream_cursor
from .exceptions import InvalidArgumentError, LivefyreError, RemoteServiceError, TokenError
from .personalized_stream import PersonalizedStream
from .types import (
    CollectionOptions,
    CollectionType,
    Subscription,
    SubscriptionType,
    SyncOutcome,
    SyncResult,
    Topic,
)

__version__ = "0.1.0"
__all__ = [
    # Identity
    "Network",
    "Site",
    "Collection",
    # Types
    "CollectionOptions",
    "CollectionType",
    "Topic",
    "Subscription",
    "SubscriptionType",
    "SyncOutcome",
    "SyncResult",
    # Crypto
    "DEFAULT_EXPIRES",
    "DEFAULT_USER",
    "canonical_json",
    "collection_attributes",
    "build_checksum",
    "build_legacy_checksum",
    "build_user_auth_token",
    "build_system_token",
    "build_collection_meta_token",
    "decode_token",
    "validate_livefyre_token",
    # Client
    "LivefyreClient",
    "ClientConfig",
    "Transport",
    "AiohttpTransport",
    "PersonalizedStream",
    "TimelineCursor",
    "topic_stream_cursor",
    "personal_stream_cursor",
    # Errors
    "LivefyreError",
    "InvalidArgumentError",
    "TokenError",
    "RemoteServiceError",
]
