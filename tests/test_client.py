# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""Tests for collection sync, collection content and user sync."""

import pytest

from livefyre_client import (
    InvalidArgumentError,
    Network,
    RemoteServiceError,
    SyncOutcome,
)
from livefyre_client.crypto import decode_token

from .conftest import NETWORK_KEY, SITE_KEY

CREATE_URL = "https://test.quill.fyre.co/api/v3.0/site/303827/collection/create/"
UPDATE_URL = "https://test.quill.fyre.co/api/v3.0/site/303827/collection/update/"


# =============================================================================
# create_or_update
# =============================================================================


@pytest.mark.asyncio
async def test_create_sets_collection_id(make_client, collection):
    client, transport = make_client((200, {"data": {"collectionId": "123"}}))

    result = await client.create_or_update(collection)

    assert result.outcome == SyncOutcome.CREATED
    assert result.collection_id == "123"
    assert collection.collection_id == "123"

    (request,) = transport.requests
    assert request.method == "POST"
    assert request.url == CREATE_URL
    assert request.params == {"sync": "1"}
    assert request.headers["Content-Type"] == "application/json"
    assert request.json["articleId"] == "articleId"
    assert request.json["checksum"] == "49c348e23cdb6e26fa42f4d0a5b537ae"
    assert decode_token(SITE_KEY, request.json["collectionMeta"])["title"] == "title"


@pytest.mark.asyncio
async def test_conflict_falls_back_to_update(make_client, collection):
    client, transport = make_client((409, "exists"), (200, {"data": {}}))

    result = await client.create_or_update(collection)

    assert result.outcome == SyncOutcome.UPDATED
    assert result.collection_id is None
    assert not collection.has_collection_id
    assert [r.url for r in transport.requests] == [CREATE_URL, UPDATE_URL]
    assert transport.requests[0].json == transport.requests[1].json


@pytest.mark.asyncio
async def test_conflict_then_update_failure(make_client, collection):
    client, transport = make_client((409, "exists"), (500, "boom"))

    with pytest.raises(RemoteServiceError) as exc_info:
        await client.create_or_update(collection)

    assert exc_info.value.status == 500
    assert exc_info.value.body == "boom"
    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_create_failure_does_not_update(make_client, collection):
    client, transport = make_client((403, "forbidden"))

    with pytest.raises(RemoteServiceError) as exc_info:
        await client.create_or_update(collection)

    assert exc_info.value.status == 403
    assert len(transport.requests) == 1
    assert not collection.has_collection_id


@pytest.mark.asyncio
async def test_create_with_malformed_body(make_client, collection):
    client, _ = make_client((200, "not json"))
    with pytest.raises(RemoteServiceError):
        await client.create_or_update(collection)


@pytest.mark.asyncio
async def test_create_without_collection_id(make_client, collection):
    client, _ = make_client((200, {"data": {}}))
    with pytest.raises(RemoteServiceError):
        await client.create_or_update(collection)
    assert not collection.has_collection_id


@pytest.mark.asyncio
async def test_insecure_network_uses_plain_quill(make_client):
    network = Network("test.fyre.co", NETWORK_KEY, ssl=False)
    collection = network.get_site("303827", SITE_KEY).build_collection(
        "articleId", "title", "http://www.url.com"
    )
    client, transport = make_client((200, {"data": {"collectionId": "9"}}))

    await client.create_or_update(collection)

    assert transport.requests[0].url == "http://quill.test.fyre.co/api/v3.0/site/303827/collection/create/"


# =============================================================================
# get_collection_content
# =============================================================================


@pytest.mark.asyncio
async def test_get_collection_content(make_client, collection):
    client, transport = make_client((200, {"headDocument": {"content": []}}))

    content = await client.get_collection_content(collection)

    assert content == {"headDocument": {"content": []}}
    (request,) = transport.requests
    assert request.method == "GET"
    assert request.url == "https://test.bootstrap.fyre.co/bs3/test.fyre.co/303827/YXJ0aWNsZUlk/init"


@pytest.mark.asyncio
async def test_get_collection_content_pads_article_id(make_client, site):
    collection = site.build_collection("ab", "title", "http://www.url.com")
    client, transport = make_client((200, {}))

    await client.get_collection_content(collection)

    assert transport.requests[0].url.endswith("/303827/YWI=/init")


@pytest.mark.asyncio
async def test_get_collection_content_failure(make_client, collection):
    client, _ = make_client((404, "missing"))
    with pytest.raises(RemoteServiceError) as exc_info:
        await client.get_collection_content(collection)
    assert exc_info.value.status == 404


# =============================================================================
# User sync
# =============================================================================


@pytest.mark.asyncio
async def test_set_user_sync_url(make_client, network):
    client, transport = make_client((204, b""))

    await client.set_user_sync_url(network, "http://example.com/users/{id}")

    (request,) = transport.requests
    assert request.method == "POST"
    assert request.url == "https://test.quill.fyre.co/"
    assert request.params["pull_profile_url"] == "http://example.com/users/{id}"
    assert network.validate_livefyre_token(request.params["actor_token"])


@pytest.mark.asyncio
async def test_set_user_sync_url_requires_placeholder(make_client, network):
    client, transport = make_client()

    with pytest.raises(InvalidArgumentError):
        await client.set_user_sync_url(network, "http://thisisa.test.url/")
    with pytest.raises(InvalidArgumentError):
        await client.set_user_sync_url(network, None)

    assert transport.requests == []


@pytest.mark.asyncio
async def test_set_user_sync_url_expects_204(make_client, network):
    client, _ = make_client((200, "ok"))
    with pytest.raises(RemoteServiceError):
        await client.set_user_sync_url(network, "http://example.com/users/{id}")


@pytest.mark.asyncio
async def test_sync_user(make_client, network):
    client, transport = make_client((200, {}))

    await client.sync_user(network, "alice")

    (request,) = transport.requests
    assert request.url == "https://test.quill.fyre.co/api/v3_0/user/alice/refresh"
    assert network.validate_livefyre_token(request.params["lftoken"])


@pytest.mark.asyncio
async def test_sync_user_escapes_user_id(make_client, network):
    client, transport = make_client((200, {}))

    await client.sync_user(network, "a/b c")

    (request,) = transport.requests
    assert request.url == "https://test.quill.fyre.co/api/v3_0/user/a%2Fb%20c/refresh"


@pytest.mark.asyncio
async def test_sync_user_failure(make_client, network):
    client, _ = make_client((500, "boom"))
    with pytest.raises(RemoteServiceError):
        await client.sync_user(network, "alice")


@pytest.mark.asyncio
async def test_client_closes_only_its_own_transport(make_client):
    client, transport = make_client()
    async with client:
        pass
    assert transport.closed is False
