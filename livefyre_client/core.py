# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Identity model: Network -> Site -> Collection.

Each level derives its URN from its parent:
    urn:livefyre:<network>
    urn:livefyre:<network>:site=<site_id>
    urn:livefyre:<network>:site=<site_id>:collection=<collection_id>

Objects are built locally. The only value Livefyre assigns is a collection's
id, which is set after a successful create (see LivefyreClient).
"""

import base64
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from . import crypto
from .exceptions import InvalidArgumentError, LivefyreError
from .types import CollectionOptions, Topic

URN_PREFIX = "urn:livefyre:"
SITE_SEGMENT = ":site="

MAX_TITLE_LENGTH = 255

URL_SCHEMES = ("http", "https")


def _require(value: Any, name: str) -> None:
    if value is None:
        raise InvalidArgumentError(f"{name} cannot be None.")


# =============================================================================
# Network
# =============================================================================

@dataclass(frozen=True)
class Network:
    """
    Root tenant. Owns the key used for user auth tokens.

    Attributes:
        name: Network domain, e.g. ``client-name.fyre.co``
        key: Shared secret
        ssl: Talk to Livefyre over https (default True)
    """
    name: str
    key: str = field(repr=False)
    ssl: bool = True

    def __post_init__(self):
        _require(self.name, "name")
        _require(self.key, "key")

    @classmethod
    def from_env(
        cls,
        name_var: str = "LIVEFYRE_NETWORK_NAME",
        key_var: str = "LIVEFYRE_NETWORK_KEY",
        ssl_var: str = "LIVEFYRE_SSL",
    ) -> "Network":
        """
        Load network credentials from environment variables.

        Example:
            # export LIVEFYRE_NETWORK_NAME=client-name.fyre.co
            # export LIVEFYRE_NETWORK_KEY=<secret>
            # export LIVEFYRE_SSL=false   # optional, defaults to true

            network = Network.from_env()
        """
        name = os.environ.get(name_var)
        key = os.environ.get(key_var)
        if not name or not key:
            raise InvalidArgumentError(
                f"Environment variables {name_var} and {key_var} must both be set."
            )
        ssl = os.environ.get(ssl_var, "true").strip().lower() not in ("0", "false", "no", "off")
        return cls(name=name, key=key, ssl=ssl)

    @property
    def network(self) -> "Network":
        return self

    @property
    def urn(self) -> str:
        return f"{URN_PREFIX}{self.name}"

    @property
    def network_name(self) -> str:
        """Short name: the first segment of the network domain."""
        return self.name.split(".")[0]

    def user_urn(self, user_id: str) -> str:
        return f"{self.urn}:user={user_id}"

    def build_user_auth_token(
        self,
        user_id: str,
        display_name: str,
        expires: float = crypto.DEFAULT_EXPIRES,
    ) -> str:
        return crypto.build_user_auth_token(self.name, self.key, user_id, display_name, expires)

    def build_livefyre_token(self) -> str:
        """System token, valid for one day."""
        return crypto.build_system_token(self.name, self.key)

    def validate_livefyre_token(self, token: str) -> bool:
        """
        True if ``token`` is an unexpired system token for this network.

        A token that cannot be decoded is invalid. A malformed network key is
        a configuration error and raises TokenError.
        """
        crypto.check_key(self.key)
        return crypto.validate_livefyre_token(self.name, self.key, token)

    def get_site(self, site_id: str, site_key: str) -> "Site":
        return Site(network=self, id=site_id, key=site_key)

    def is_network_topic(self, topic: Any) -> bool:
        """
        True if ``topic`` is owned by this network itself rather than one of its sites.

        Anything that is not a Topic is simply not a network topic.
        """
        if not isinstance(topic, Topic):
            return False
        if not topic.id.startswith(self.urn):
            return False
        return not topic.id[len(self.urn):].startswith(SITE_SEGMENT)

    def owns_topic(self, topic: Topic) -> bool:
        """True if ``topic`` belongs to this network or any of its sites."""
        return topic.id.startswith(self.urn + ":")


# =============================================================================
# Site
# =============================================================================

@dataclass(frozen=True)
class Site:
    """A network's sub-property, with its own key."""
    network: Network
    id: str
    key: str = field(repr=False)

    def __post_init__(self):
        _require(self.network, "network")
        _require(self.id, "site id")
        _require(self.key, "site key")

    @property
    def urn(self) -> str:
        return f"{self.network.urn}{SITE_SEGMENT}{self.id}"

    def build_livefyre_token(self) -> str:
        return self.network.build_livefyre_token()

    def build_collection(
        self,
        article_id: str,
        title: str,
        url: str,
        options: CollectionOptions | Mapping[str, Any] | None = None,
    ) -> "Collection":
        return Collection(site=self, article_id=article_id, title=title, url=url, options=options)


# =============================================================================
# Collection
# =============================================================================

def is_valid_full_url(url: str) -> bool:
    """True if ``url`` is an absolute http(s) URL with a host."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme.lower() in URL_SCHEMES and bool(parts.hostname)


@dataclass(frozen=True, eq=False)
class Collection:
    """
    A comment thread tied to one article.

    Everything except ``collection_id`` is fixed at construction and re-sent
    on every sync. ``network_issued`` is derived once from the topics: a
    collection carrying at least one network-level topic is signed with the
    network key and carries the network URN as issuer. Collections compare
    and hash by identity.

    Attributes:
        site: Owning site
        article_id: Stable external identifier of the article
        title: Article title, at most 255 characters
        url: Absolute article URL
        options: Typed options (a plain mapping is converted)
        network_issued: Derived, see above
    """
    site: Site
    article_id: str
    title: str
    url: str
    options: CollectionOptions = field(default_factory=CollectionOptions)
    network_issued: bool = field(init=False)
    _collection_id: str | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        _require(self.site, "site")
        if not self.article_id:
            raise InvalidArgumentError("articleId is required.")
        _require(self.title, "title")
        if len(self.title) > MAX_TITLE_LENGTH:
            raise InvalidArgumentError(f"title is longer than {MAX_TITLE_LENGTH} characters.")
        _require(self.url, "url")
        if not is_valid_full_url(self.url):
            raise InvalidArgumentError("url is not a valid url. see http://www.ietf.org/rfc/rfc2396.txt")

        options = CollectionOptions.from_value(self.options)
        object.__setattr__(self, "options", options)
        network = self.site.network
        object.__setattr__(
            self,
            "network_issued",
            any(network.is_network_topic(topic) for topic in options.topics),
        )

    @property
    def network(self) -> Network:
        return self.site.network

    @property
    def collection_id(self) -> str:
        if self._collection_id is None:
            raise LivefyreError("Call create_or_update() to have the collection id set!")
        return self._collection_id

    def set_collection_id(self, collection_id: str) -> None:
        """Record the id Livefyre assigned. Not synchronized across threads."""
        object.__setattr__(self, "_collection_id", collection_id)

    @property
    def has_collection_id(self) -> bool:
        return self._collection_id is not None

    @property
    def urn(self) -> str:
        return f"{self.site.urn}:collection={self.collection_id}"

    def attributes(self) -> dict[str, Any]:
        """Sorted attribute mapping shared by the checksum and the meta token."""
        return crypto.collection_attributes(
            self.options.to_dict(), self.article_id, self.url, self.title
        )

    def build_checksum(self) -> str:
        return crypto.build_checksum(self.attributes())

    def build_collection_meta_token(self) -> str:
        if self.network_issued:
            return crypto.build_collection_meta_token(
                self.network.key, self.attributes(), issuer=self.network.urn
            )
        return crypto.build_collection_meta_token(self.site.key, self.attributes())

    def build_payload(self) -> dict[str, str]:
        """Body of the collection create/update call."""
        return {
            "articleId": self.article_id,
            "checksum": self.build_checksum(),
            "collectionMeta": self.build_collection_meta_token(),
        }

    def build_livefyre_token(self) -> str:
        return self.site.build_livefyre_token()

    def encoded_article_id(self) -> str:
        """URL-safe base64 of the article id, padded to a multiple of 4 with '='."""
        return base64.urlsafe_b64encode(self.article_id.encode("utf-8")).decode("ascii")
