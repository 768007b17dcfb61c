# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""Shared fixtures: a test network/site and an in-memory transport."""

import json
from dataclasses import dataclass, field
from typing import Any

import pytest

from livefyre_client import LivefyreClient, Network

NETWORK_NAME = "test.fyre.co"
NETWORK_KEY = "testkeytest"
SITE_ID = "303827"
SITE_KEY = "sitekeysite"


@dataclass
class SentRequest:
    method: str
    url: str
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    json: Any = None


class FakeTransport:
    """Records requests and replays scripted (status, body) responses in order."""

    def __init__(self, responses: list[tuple[int, Any]]):
        self.responses = list(responses)
        self.requests: list[SentRequest] = []
        self.closed = False

    async def send(self, method, url, params=None, headers=None, body=None):
        self.requests.append(SentRequest(
            method=method,
            url=url,
            params=dict(params or {}),
            headers=dict(headers or {}),
            json=json.loads(body) if body else None,
        ))
        status, payload = self.responses.pop(0)
        if isinstance(payload, (dict, list)):
            payload = json.dumps(payload).encode("utf-8")
        elif isinstance(payload, str):
            payload = payload.encode("utf-8")
        return status, payload

    async def close(self):
        self.closed = True


@pytest.fixture
def network():
    return Network(NETWORK_NAME, NETWORK_KEY)


@pytest.fixture
def site(network):
    return network.get_site(SITE_ID, SITE_KEY)


@pytest.fixture
def collection(site):
    return site.build_collection("articleId", "title", "http://www.url.com", {"tags": "tags"})


@pytest.fixture
def make_client():
    """Build a LivefyreClient whose transport answers with ``responses``."""
    def _make(*responses: tuple[int, Any]) -> tuple[LivefyreClient, FakeTransport]:
        transport = FakeTransport(list(responses))
        return LivefyreClient(transport=transport), transport
    return _make
