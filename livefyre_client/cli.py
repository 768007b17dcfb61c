# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Livefyre SDK CLI - tokens, checksums and collection sync from the shell.

Network credentials are read from LIVEFYRE_NETWORK_NAME / LIVEFYRE_NETWORK_KEY
(and optionally LIVEFYRE_SSL).

Usage:
    livefyre token                              # System token
    livefyre token --user alice --display-name Alice
    livefyre validate <token>                   # Exit 0 if valid
    livefyre checksum --article-id a1 --title T --url https://example.com/a1
    livefyre sync --site-id 303827 --site-key <key> --article-id a1 --title T --url ...
"""

import argparse
import asyncio
import logging
import sys

from .client import LivefyreClient
from .core import Collection, Network, Site
from .crypto import DEFAULT_EXPIRES, DEFAULT_USER
from .exceptions import LivefyreError
from .types import CollectionOptions


def _parse_options(pairs: list[str] | None) -> dict[str, str]:
    options = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Expected key=value, got {pair!r}")
        options[key] = value
    return options


def _add_collection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--article-id", required=True, help="Article identifier")
    parser.add_argument("--title", required=True, help="Article title (max 255 chars)")
    parser.add_argument("--url", required=True, help="Absolute article URL")
    parser.add_argument("--type", dest="collection_type", help="Collection type, e.g. reviews")
    parser.add_argument(
        "--option",
        action="append",
        metavar="KEY=VALUE",
        help="Extra collection attribute (repeatable), e.g. tags=news",
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="livefyre",
        description="Livefyre SDK - tokens, checksums and collection sync",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    token_parser = subparsers.add_parser("token", help="Build a user auth token")
    token_parser.add_argument("--user", default=DEFAULT_USER, help="Alphanumeric user id (default: system)")
    token_parser.add_argument("--display-name", default=DEFAULT_USER, help="Display name (default: system)")
    token_parser.add_argument(
        "--expires",
        type=float,
        default=DEFAULT_EXPIRES,
        help=f"Lifetime in seconds (default: {DEFAULT_EXPIRES})",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate a system token")
    validate_parser.add_argument("token", help="Token to validate")

    checksum_parser = subparsers.add_parser("checksum", help="Print a collection checksum")
    _add_collection_args(checksum_parser)

    sync_parser = subparsers.add_parser("sync", help="Create or update a collection")
    sync_parser.add_argument("--site-id", required=True, help="Site id")
    sync_parser.add_argument("--site-key", required=True, help="Site secret key")
    _add_collection_args(sync_parser)

    return parser


def _options_from_args(args: argparse.Namespace) -> CollectionOptions:
    return CollectionOptions(type=args.collection_type, extra=_parse_options(args.option))


def _collection_from_args(site: Site, args: argparse.Namespace) -> Collection:
    return site.build_collection(args.article_id, args.title, args.url, _options_from_args(args))


def cmd_token(args: argparse.Namespace) -> int:
    network = Network.from_env()
    print(network.build_user_auth_token(args.user, args.display_name, args.expires))
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    network = Network.from_env()
    if network.validate_livefyre_token(args.token):
        print("VALID")
        return 0
    print("INVALID")
    return 1


def cmd_checksum(args: argparse.Namespace) -> int:
    # Credentials do not enter the checksum
    site = Network(name="", key="").get_site("", "")
    print(_collection_from_args(site, args).build_checksum())
    return 0


async def cmd_sync(args: argparse.Namespace) -> int:
    network = Network.from_env()
    site = network.get_site(args.site_id, args.site_key)
    collection = _collection_from_args(site, args)

    async with LivefyreClient() as client:
        result = await client.create_or_update(collection)

    print(f"{result.outcome.value}: {result.collection_id or '-'}")
    return 0


async def main_async(args: argparse.Namespace) -> int:
    """Async main entry point."""
    if args.command == "token":
        return cmd_token(args)
    elif args.command == "validate":
        return cmd_validate(args)
    elif args.command == "checksum":
        return cmd_checksum(args)
    elif args.command == "sync":
        return await cmd_sync(args)
    else:
        parser = create_parser()
        parser.print_help()
        return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        return asyncio.run(main_async(args))
    except (LivefyreError, argparse.ArgumentTypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
