# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Livefyre Client - collection sync, collection content and user sync.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import quote

import aiohttp

from . import domain
from .core import Collection, Network
from .exceptions import InvalidArgumentError, RemoteServiceError
from .types import SyncOutcome, SyncResult

logger = logging.getLogger(__name__)

USER_SYNC_PLACEHOLDER = "{id}"


class Transport(Protocol):
    """
    Sends one HTTP request and returns ``(status, body)``.

    Implementations must not retry on their own.
    """

    async def send(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> tuple[int, bytes]:
        ...

    async def close(self) -> None:
        ...


@dataclass
class ClientConfig:
    """Livefyre client configuration."""
    timeout_ms: int = 5000
    connect_timeout_s: float = 2.0
    user_agent: str = "livefyre-python-sdk"


class AiohttpTransport:
    """Default transport, backed by a lazily created aiohttp session."""

    def __init__(self, config: ClientConfig | None = None):
        self.config = config or ClientConfig()
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(
                total=self.config.timeout_ms / 1000,
                connect=self.config.connect_timeout_s,
            )
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"Accept": "application/json", "User-Agent": self.config.user_agent},
            )
        return self._session

    async def send(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> tuple[int, bytes]:
        session = await self._get_session()
        async with session.request(method, url, params=params, headers=headers, data=body) as response:
            return response.status, await response.read()

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()


def response_text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


def parse_json(status: int, body: bytes) -> Any:
    """Decode a JSON response body, treating garbage as a remote failure."""
    try:
        return json.loads(body)
    except ValueError as e:
        raise RemoteServiceError(
            "Malformed JSON response from Livefyre.", status, response_text(body)
        ) from e


class LivefyreClient:
    """
    Async Livefyre API client.

    Every operation validates its input, builds its payload, then awaits at
    most two sequential requests. Nothing is retried except the single
    create -> update fallback of create_or_update().

    Usage:
        network = Network("client-name.fyre.co", "<network key>")
        site = network.get_site("303827", "<site key>")
        collection = site.build_collection("article-1", "Title", "https://example.com/a/1")

        async with LivefyreClient() as client:
            result = await client.create_or_update(collection)
            print(result.outcome, collection.collection_id)
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: Transport | None = None,
    ):
        self.config = config or ClientConfig()
        self._owns_transport = transport is None
        self.transport: Transport = transport or AiohttpTransport(self.config)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self.transport.close()

    async def request(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        json_data: Any = None,
    ) -> tuple[int, bytes]:
        """Send one request, JSON-encoding ``json_data`` when given."""
        body = None
        all_headers = dict(headers or {})
        if json_data is not None:
            body = json.dumps(json_data, separators=(",", ":")).encode("utf-8")
            all_headers["Content-Type"] = "application/json"

        logger.debug(f"{method} {url}")
        status, response_body = await self.transport.send(
            method, url, params=params, headers=all_headers or None, body=body
        )
        logger.debug(f"{method} {url} -> {status}")
        return status, response_body

    # =========================================================================
    # Collections
    # =========================================================================

    async def _invoke_collection_api(
        self, collection: Collection, action: str, payload: dict[str, str]
    ) -> tuple[int, bytes]:
        url = f"{domain.quill(collection)}/api/v3.0/site/{collection.site.id}/collection/{action}/"
        return await self.request(
            "POST",
            url,
            params={"sync": "1"},
            json_data=payload,
        )

    async def create_or_update(self, collection: Collection) -> SyncResult:
        """
        Create the collection on Livefyre, or update it if it already exists.

        On create, the id Livefyre assigns is stored on ``collection``.

        Raises:
            RemoteServiceError: On any status other than 200 on create,
                or 409 on create followed by anything other than 200 on update
            TokenError: If the meta token cannot be signed
        """
        payload = collection.build_payload()
        status, body = await self._invoke_collection_api(collection, "create", payload)
        if status == 200:
            data = parse_json(status, body)
            try:
                collection_id = data["data"]["collectionId"]
            except (KeyError, TypeError) as e:
                raise RemoteServiceError(
                    "Create response is missing data.collectionId.", status, response_text(body)
                ) from e
            collection.set_collection_id(collection_id)
            logger.info(f"Created collection {collection_id} for article {collection.article_id}")
            return SyncResult(SyncOutcome.CREATED, collection_id)

        if status == 409:
            logger.warning(
                f"Collection for article {collection.article_id} already exists, updating instead"
            )
            status, body = await self._invoke_collection_api(collection, "update", payload)
            if status == 200:
                logger.info(f"Updated collection for article {collection.article_id}")
                collection_id = collection.collection_id if collection.has_collection_id else None
                return SyncResult(SyncOutcome.UPDATED, collection_id)
            logger.warning(f"Collection update failed: status={status}")
            raise RemoteServiceError(
                "Error updating Livefyre collection.", status, response_text(body)
            )

        logger.warning(f"Collection create failed: status={status}")
        raise RemoteServiceError("Error creating Livefyre collection.", status, response_text(body))

    async def get_collection_content(self, collection: Collection) -> dict[str, Any]:
        """Fetch the collection's bootstrap (init) document."""
        network = collection.network
        url = (
            f"{domain.bootstrap(collection)}/bs3/{network.name}/{collection.site.id}/"
            f"{collection.encoded_article_id()}/init"
        )
        status, body = await self.request("GET", url)
        if status != 200:
            raise RemoteServiceError("Error contacting Livefyre.", status, response_text(body))
        return parse_json(status, body)

    # =========================================================================
    # Users
    # =========================================================================

    async def set_user_sync_url(self, network: Network, url_template: str) -> None:
        """
        Register the URL Livefyre pings to pull user profiles.

        Args:
            network: Network to configure
            url_template: Profile URL containing the literal ``{id}`` placeholder
        """
        if url_template is None or USER_SYNC_PLACEHOLDER not in url_template:
            raise InvalidArgumentError(f"urlTemplate does not contain {USER_SYNC_PLACEHOLDER}")

        status, body = await self.request(
            "POST",
            f"{domain.quill(network)}/",
            params={
                "actor_token": network.build_livefyre_token(),
                "pull_profile_url": url_template,
            },
        )
        if status != 204:
            raise RemoteServiceError("Error contacting Livefyre.", status, response_text(body))
        logger.info(f"User sync url set for network {network.name}")

    async def sync_user(self, network: Network, user_id: str) -> None:
        """Ask Livefyre to refresh ``user_id`` from the user sync url."""
        if not user_id:
            raise InvalidArgumentError("userId is required.")

        escaped_id = quote(user_id, safe="")
        status, body = await self.request(
            "POST",
            f"{domain.quill(network)}/api/v3_0/user/{escaped_id}/refresh",
            params={"lftoken": network.build_livefyre_token()},
        )
        if status != 200:
            raise RemoteServiceError("Error contacting Livefyre.", status, response_text(body))
        logger.info(f"Requested profile refresh for user {user_id}")
