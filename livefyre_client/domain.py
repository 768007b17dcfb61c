# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Base URLs of the Livefyre services a Network, Site or Collection talks to.
"""

from typing import Any


def quill(core: Any) -> str:
    """Write API (collections, users, topics, subscriptions)."""
    network = core.network
    if network.ssl:
        return f"https://{network.network_name}.quill.fyre.co"
    return f"http://quill.{network.name}"


def bootstrap(core: Any) -> str:
    """Read API (collection content, timelines)."""
    network = core.network
    if network.ssl:
        return f"https://{network.network_name}.bootstrap.fyre.co"
    return f"http://bootstrap.{network.name}"
