#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Personalized Stream Example

Demonstrates:
- Creating network topics
- Subscribing a user to topics
- Paging the user's personal stream with a TimelineCursor

Requires LIVEFYRE_NETWORK_NAME and LIVEFYRE_NETWORK_KEY in the environment.
"""

import asyncio
import logging

from livefyre_client import LivefyreClient, Network, PersonalizedStream, personal_stream_cursor

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


async def main():
    network = Network.from_env()
    user_token = network.build_user_auth_token("alice", "Alice")

    async with LivefyreClient() as client:
        stream = PersonalizedStream(client)

        topics = await stream.create_or_update_topics(network, {"sports": "Sports", "tech": "Tech"})
        logger.info(f"Topics: {[t.id for t in topics]}")

        added = await stream.add_subscriptions(network, user_token, topics)
        logger.info(f"Subscriptions added: {added}")

        cursor = personal_stream_cursor(stream, network, "alice", limit=20)
        page = await cursor.next()
        logger.info(f"Got {len(page.get('data') or [])} items, more: {cursor.has_next}")

        removed = await stream.remove_subscriptions(network, user_token, topics)
        deleted = await stream.delete_topics(network, topics)
        logger.info(f"Cleanup: {removed} subscriptions, {deleted} topics")


if __name__ == "__main__":
    asyncio.run(main())
