#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Basic Livefyre SDK Usage Example

Demonstrates:
- Building and validating tokens
- Collection checksums and meta tokens
- Collection create-or-update
- Fetching collection content

Requires LIVEFYRE_NETWORK_NAME, LIVEFYRE_NETWORK_KEY, LIVEFYRE_SITE_ID and
LIVEFYRE_SITE_KEY in the environment.
"""

import asyncio
import logging
import os

from livefyre_client import LivefyreClient, Network, RemoteServiceError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


async def main():
    network = Network.from_env()
    site = network.get_site(os.environ["LIVEFYRE_SITE_ID"], os.environ["LIVEFYRE_SITE_KEY"])

    # Example 1: Tokens (no network I/O)
    logger.info("=== Example 1: Tokens ===")
    system_token = network.build_livefyre_token()
    logger.info(f"System token valid: {network.validate_livefyre_token(system_token)}")
    user_token = network.build_user_auth_token("alice", "Alice", expires=3600)
    logger.info(f"User token for alice: {user_token[:24]}...")

    # Example 2: Collection payload
    logger.info("=== Example 2: Collection ===")
    collection = site.build_collection(
        article_id="article-1",
        title="Hello, Livefyre",
        url="https://example.com/articles/1",
        options={"type": "livecomments", "tags": "news"},
    )
    logger.info(f"Checksum: {collection.build_checksum()}")
    logger.info(f"Network issued: {collection.network_issued}")

    # Example 3: Create or update, then read it back
    logger.info("=== Example 3: Sync ===")
    async with LivefyreClient() as client:
        try:
            result = await client.create_or_update(collection)
            logger.info(f"Sync outcome: {result.outcome.value}")
            if collection.has_collection_id:
                logger.info(f"Collection URN: {collection.urn}")

            content = await client.get_collection_content(collection)
            logger.info(f"Bootstrap keys: {sorted(content)}")
        except RemoteServiceError as e:
            logger.error(f"Livefyre rejected the request: {e} ({e.body})")


if __name__ == "__main__":
    asyncio.run(main())
