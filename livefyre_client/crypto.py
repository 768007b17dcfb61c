# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Token and checksum primitives for the Livefyre SDK.

Provides:
- Canonical JSON serialization (sorted keys, no whitespace)
- Collection checksums (MD5 over canonical JSON)
- HS256 JWT signing and verification for user auth and collection meta tokens

Security model:
- Tokens are signed with the network key (user auth, network-issued
  collections) or the site key (site-issued collections)
- Checksums only detect stale collection payloads. MD5 is kept for wire
  compatibility with Livefyre and is NOT used for any security decision.
"""

import hashlib
import json
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from jose import jwt
from jose.exceptions import JOSEError

from .exceptions import InvalidArgumentError, TokenError

TOKEN_ALGORITHM = "HS256"

# Default lifetime of a system token, in seconds
DEFAULT_EXPIRES = 86400

# User id and display name of server-to-server tokens
DEFAULT_USER = "system"

_USER_ID_RE = re.compile(r"[A-Za-z0-9]+")


# =============================================================================
# Canonical JSON
# =============================================================================

def canonical_json(obj: Any) -> bytes:
    """
    Serialize object to canonical JSON.

    Rules:
    - Keys sorted lexicographically
    - No whitespace
    - Non-ASCII characters emitted as-is, UTF-8 encoded

    Unlike a full RFC 8785 encoder, strings are not Unicode-normalized: the
    bytes have to match what other Livefyre clients hash for the same
    collection.

    Example:
        >>> canonical_json({"url": "u", "title": "t"})
        b'{"title":"t","url":"u"}'
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def collection_attributes(
    options: Mapping[str, Any],
    article_id: str,
    url: str,
    title: str,
) -> dict[str, Any]:
    """
    Merge collection options with the required fields, sorted by key.

    ``articleId``, ``url`` and ``title`` always win over same-named options.
    """
    attributes = dict(options)
    attributes["articleId"] = article_id
    attributes["url"] = url
    attributes["title"] = title
    return dict(sorted(attributes.items()))


# =============================================================================
# Checksums
# =============================================================================

def _md5_hex(data: bytes) -> str:
    # Change detection only, never a security boundary.
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def build_checksum(attributes: Mapping[str, Any]) -> str:
    """
    Compute the checksum Livefyre uses to detect no-op collection updates.

    Args:
        attributes: Collection attributes (see collection_attributes())

    Returns:
        32-character lowercase hex MD5 digest of the canonical JSON
    """
    return _md5_hex(canonical_json(dict(attributes)))


def build_legacy_checksum(title: str, url: str, tags: str) -> str:
    """
    Checksum format of the older fixed-field token utility.

    The three fields are serialized in the fixed order url, tags, title
    rather than sorted, matching what that utility put on the wire.
    """
    legacy = {"url": url, "tags": tags, "title": title}
    return _md5_hex(json.dumps(legacy, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))


# =============================================================================
# Tokens
# =============================================================================

def check_key(key: Any) -> None:
    if not isinstance(key, (str, bytes)) or not key:
        raise TokenError("Failure creating token: signing key is missing or malformed.")


def _sign(key: str | bytes, claims: dict[str, Any]) -> str:
    check_key(key)
    try:
        return jwt.encode(claims, key, algorithm=TOKEN_ALGORITHM)
    except JOSEError as e:
        raise TokenError(f"Failure creating token: {e}") from e


def expiry_in_seconds(expires_in: float) -> int:
    """Absolute UTC expiry, in whole epoch seconds, ``expires_in`` seconds from now."""
    return int(datetime.now(timezone.utc).timestamp() + expires_in)


def build_user_auth_token(
    network_name: str,
    key: str | bytes,
    user_id: str,
    display_name: str,
    expires: float = DEFAULT_EXPIRES,
) -> str:
    """
    Build a user auth token signed with the network key.

    Args:
        network_name: Network name, stored in the ``domain`` claim
        key: Network secret key
        user_id: Alphanumeric user id
        display_name: Display name for the user
        expires: Seconds from now until the token expires

    Returns:
        Compact HS256 JWT

    Raises:
        InvalidArgumentError: If user_id is not alphanumeric or a field is missing
        TokenError: If the key is malformed
    """
    if not isinstance(user_id, str) or not _USER_ID_RE.fullmatch(user_id):
        raise InvalidArgumentError("userId is not alphanumeric.")
    if display_name is None:
        raise InvalidArgumentError("displayName is required.")
    if expires is None:
        raise InvalidArgumentError("expires is required.")
    if not network_name:
        raise InvalidArgumentError("network name is required to build a token.")

    claims = {
        "domain": network_name,
        "user_id": user_id,
        "display_name": display_name,
        "expires": expiry_in_seconds(expires),
    }
    return _sign(key, claims)


def build_system_token(network_name: str, key: str | bytes) -> str:
    """Token for server-to-server calls that are not tied to an end user."""
    return build_user_auth_token(network_name, key, DEFAULT_USER, DEFAULT_USER, DEFAULT_EXPIRES)


def build_collection_meta_token(
    key: str | bytes,
    attributes: Mapping[str, Any],
    issuer: str | None = None,
) -> str:
    """
    Sign a collection's attributes.

    Args:
        key: Network key when the collection is network issued, else site key
        attributes: Collection attributes (see collection_attributes())
        issuer: Network URN for network-issued collections; omitted otherwise

    Returns:
        Compact HS256 JWT whose claims are the sorted attributes
    """
    claims = dict(attributes)
    if issuer:
        claims["iss"] = issuer
    return _sign(key, dict(sorted(claims.items())))


def decode_token(key: str | bytes, token: str) -> dict[str, Any]:
    """
    Verify a token's signature and return its claims.

    Raises:
        TokenError: If the key is malformed, or the token is not a valid
            HS256 JWT signed with ``key``
    """
    check_key(key)
    if not isinstance(token, str) or not token:
        raise TokenError("Failure decoding token: token is empty.")
    try:
        return jwt.decode(token, key, algorithms=[TOKEN_ALGORITHM])
    except JOSEError as e:
        raise TokenError(f"Failure decoding token: {e}") from e


def validate_livefyre_token(network_name: str, key: str | bytes, token: str) -> bool:
    """
    Check that ``token`` is a live system token for this network.

    Returns False, never raises, when the token cannot be decoded.
    """
    try:
        claims = decode_token(key, token)
    except TokenError:
        return False

    expires = claims.get("expires")
    if not isinstance(expires, (int, float)):
        return False

    now = int(datetime.now(timezone.utc).timestamp())
    return (
        claims.get("domain") == network_name
        and claims.get("user_id") == DEFAULT_USER
        and expires >= now
    )
