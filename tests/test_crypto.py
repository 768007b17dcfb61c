# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""Tests for canonical JSON, checksums and tokens."""

import re

import pytest

from livefyre_client.crypto import (
    DEFAULT_EXPIRES,
    build_checksum,
    build_collection_meta_token,
    build_legacy_checksum,
    build_system_token,
    build_user_auth_token,
    canonical_json,
    collection_attributes,
    decode_token,
    expiry_in_seconds,
    validate_livefyre_token,
)
from livefyre_client.exceptions import InvalidArgumentError, TokenError

NETWORK = "test.fyre.co"
SECRET = "testkeytest"


# =============================================================================
# Canonical JSON
# =============================================================================


def test_canonical_json_sorts_keys():
    """Canonical JSON should sort keys alphabetically."""
    assert canonical_json({"b": 1, "a": 2, "c": 3}) == b'{"a":2,"b":1,"c":3}'


def test_canonical_json_no_whitespace():
    result = canonical_json({"key": "value", "nested": {"inner": 123}})
    assert b" " not in result
    assert b"\n" not in result


def test_canonical_json_keeps_non_ascii_and_slashes():
    """Other clients hash raw UTF-8 and unescaped slashes."""
    result = canonical_json({"title": "café", "url": "http://a.com/b"})
    assert result == '{"title":"café","url":"http://a.com/b"}'.encode("utf-8")


def test_collection_attributes_required_fields_win():
    attributes = collection_attributes(
        {"title": "old", "tags": "t"}, article_id="a1", url="https://x.com", title="new"
    )
    assert list(attributes) == ["articleId", "tags", "title", "url"]
    assert attributes["title"] == "new"


# =============================================================================
# Checksums
# =============================================================================


def test_legacy_checksum_vector():
    assert build_legacy_checksum("title", "url", "tags") == "323f0074333c0c8c01951c0b3bf5f794"


def test_checksum_vector():
    attributes = collection_attributes({"tags": "tags"}, "articleId", "http://www.url.com", "title")
    assert build_checksum(attributes) == "49c348e23cdb6e26fa42f4d0a5b537ae"


def test_checksum_independent_of_insertion_order():
    first = {"title": "title", "url": "url", "tags": "tags"}
    second = {"tags": "tags", "url": "url", "title": "title"}
    assert build_checksum(first) == build_checksum(second)


def test_checksum_is_lowercase_hex():
    checksum = build_checksum({"a": "b"})
    assert re.fullmatch(r"[0-9a-f]{32}", checksum)


def test_checksum_changes_with_attributes():
    assert build_checksum({"title": "one"}) != build_checksum({"title": "two"})


# =============================================================================
# User auth tokens
# =============================================================================


def test_user_auth_token_claims():
    token = build_user_auth_token(NETWORK, SECRET, "some", "user", 86400)
    claims = decode_token(SECRET, token)

    assert claims["domain"] == NETWORK
    assert claims["user_id"] == "some"
    assert claims["display_name"] == "user"
    assert abs(claims["expires"] - expiry_in_seconds(86400)) <= 2


def test_user_auth_token_is_compact_jwt():
    token = build_user_auth_token(NETWORK, SECRET, "some", "user")
    assert token.count(".") == 2


@pytest.mark.parametrize("user_id", ["fjaowie.123", "alice\n", "\nalice", "al ice", "", "ålice"])
def test_user_auth_token_rejects_non_alphanumeric_user(user_id):
    with pytest.raises(InvalidArgumentError):
        build_user_auth_token(NETWORK, SECRET, user_id, "", 1.0)


def test_user_auth_token_rejects_bad_user_before_key_check():
    # The user id is validated first, so a missing key does not mask it.
    with pytest.raises(InvalidArgumentError):
        build_user_auth_token(NETWORK, "", "no spaces", "name")


@pytest.mark.parametrize("key", ["", None, 12345])
def test_user_auth_token_malformed_key(key):
    with pytest.raises(TokenError):
        build_user_auth_token(NETWORK, key, "system", "system")


def test_user_auth_token_requires_display_name():
    with pytest.raises(InvalidArgumentError):
        build_user_auth_token(NETWORK, SECRET, "system", None)


# =============================================================================
# Validation
# =============================================================================


def test_system_token_validates():
    token = build_system_token(NETWORK, SECRET)
    assert validate_livefyre_token(NETWORK, SECRET, token)


def test_expired_token_is_invalid():
    token = build_user_auth_token(NETWORK, SECRET, "system", "system", -10)
    assert not validate_livefyre_token(NETWORK, SECRET, token)


def test_non_system_user_is_invalid():
    token = build_user_auth_token(NETWORK, SECRET, "alice", "Alice", DEFAULT_EXPIRES)
    assert not validate_livefyre_token(NETWORK, SECRET, token)


def test_other_domain_is_invalid():
    token = build_system_token("other.fyre.co", SECRET)
    assert not validate_livefyre_token(NETWORK, SECRET, token)


def test_wrong_key_is_invalid():
    token = build_system_token(NETWORK, SECRET)
    assert not validate_livefyre_token(NETWORK, "another-key", token)


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c", None])
def test_garbage_token_is_invalid(token):
    assert not validate_livefyre_token(NETWORK, SECRET, token)


def test_decode_token_wrong_key_raises():
    token = build_system_token(NETWORK, SECRET)
    with pytest.raises(TokenError):
        decode_token("another-key", token)


# =============================================================================
# Collection meta tokens
# =============================================================================


def test_collection_meta_token_claims():
    attributes = collection_attributes(
        {"tags": "tags", "type": "reviews"}, "id", "url", "title"
    )
    token = build_collection_meta_token(SECRET, attributes)
    claims = decode_token(SECRET, token)

    assert claims["title"] == "title"
    assert claims["url"] == "url"
    assert claims["tags"] == "tags"
    assert claims["articleId"] == "id"
    assert claims["type"] == "reviews"
    assert "iss" not in claims


def test_collection_meta_token_with_issuer():
    token = build_collection_meta_token(SECRET, {"articleId": "id"}, issuer="urn:livefyre:test.fyre.co")
    assert decode_token(SECRET, token)["iss"] == "urn:livefyre:test.fyre.co"


def test_collection_meta_token_is_deterministic():
    attributes = collection_attributes({}, "id", "url", "title")
    assert build_collection_meta_token(SECRET, attributes) == build_collection_meta_token(
        SECRET, dict(reversed(list(attributes.items())))
    )
