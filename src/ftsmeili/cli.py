"""
ftsmeili command line.

Usage:
    ftsmeili configure --host http://localhost:7700 --index nextcloud --api-key <key>
    ftsmeili check
    ftsmeili initialize
    ftsmeili reset <provider_id|all>
    ftsmeili serve
"""

import argparse
import asyncio
import json
import sys
from typing import Awaitable, Callable, List, Optional

from ftsmeili.engine.platform import MeilisearchPlatform
from ftsmeili.engine.runner import LoggingRunner
from ftsmeili.platform.config import settings
from ftsmeili.platform.config_service import (
    MEILISEARCH_API_KEY,
    MEILISEARCH_HOST,
    MEILISEARCH_INDEX,
    ConfigService,
)
from ftsmeili.platform.exceptions import FtsMeiliError
from ftsmeili.platform.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ftsmeili", description="Meilisearch full-text search platform")
    commands = parser.add_subparsers(dest="command", required=True)

    configure = commands.add_parser("configure", help="Show or change the configuration")
    configure.add_argument("--host", help="Address of the Meilisearch server")
    configure.add_argument("--index", help="Name of the index on Meilisearch")
    configure.add_argument("--api-key", help="API key for Meilisearch authentication")

    commands.add_parser("check", help="Check that Meilisearch is reachable")
    commands.add_parser("initialize", help="Create and configure the index")

    reset = commands.add_parser("reset", help="Remove a provider's documents, or everything with 'all'")
    reset.add_argument("provider_id")

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=settings.API_HOST)
    serve.add_argument("--port", type=int, default=settings.API_PORT)

    return parser


def configure(config_service: ConfigService, args: argparse.Namespace) -> int:
    config = {}
    if args.host is not None:
        config[MEILISEARCH_HOST] = args.host
    if args.index is not None:
        config[MEILISEARCH_INDEX] = args.index
    if args.api_key is not None:
        config[MEILISEARCH_API_KEY] = args.api_key

    if config:
        if not config_service.check_config(config):
            print("Invalid Meilisearch configuration values provided.", file=sys.stderr)
            return 1
        config_service.set_config(config)

    platform = MeilisearchPlatform(config_service)
    print(json.dumps(platform.get_configuration(), indent=4))
    return 0


async def _with_platform(
    config_service: ConfigService,
    action: Callable[[MeilisearchPlatform], Awaitable[int]],
) -> int:
    platform = MeilisearchPlatform(config_service)
    platform.set_runner(LoggingRunner())
    await platform.load_platform()
    try:
        return await action(platform)
    finally:
        await platform.close()


async def _check(platform: MeilisearchPlatform) -> int:
    if await platform.test_platform():
        print("Meilisearch is reachable.")
        return 0
    print("Meilisearch is not reachable.", file=sys.stderr)
    return 1


async def _initialize(platform: MeilisearchPlatform) -> int:
    await platform.initialize_index()
    print("Index initialized.")
    return 0


def main(argv: Optional[List[str]] = None, config_service: Optional[ConfigService] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    config_service = config_service or ConfigService()

    if args.command == "configure":
        return configure(config_service, args)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("ftsmeili.api.main:app", host=args.host, port=args.port)
        return 0

    async def _reset(platform: MeilisearchPlatform) -> int:
        await platform.reset_index(args.provider_id)
        print(f"Index reset: {args.provider_id}")
        return 0

    actions = {"check": _check, "initialize": _initialize, "reset": _reset}
    try:
        return asyncio.run(_with_platform(config_service, actions[args.command]))
    except FtsMeiliError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
