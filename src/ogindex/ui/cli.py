# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from ogindex.api import RegistryApi, error, to_json
from ogindex.app import build_registry_service, build_snapshot_store, resume, suspend
from ogindex.config import ConfigurationError, configure_logging, get_registry_config
from ogindex.config.env import env_value
from ogindex.domain.errors import SnapshotError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from ogindex.api import Envelope

log = logging.getLogger(__name__)

MUTATING_COMMANDS = frozenset({"register", "update", "unregister"})


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maintain the graphic collection registry")
    parser.add_argument(
        "--caller",
        type=str,
        default=None,
        help="Identity performing a mutation (defaults to $OGINDEX_CALLER)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    register = subparsers.add_parser("register", help="Register the collection of a service")
    register.add_argument("address", type=str, help="Service address publishing the metadata")

    update = subparsers.add_parser("update", help="Refresh a registered collection")
    update.add_argument("collection_id", type=int, help="Collection to refresh")
    update.add_argument("address", type=str, help="Service address publishing the metadata")

    unregister = subparsers.add_parser("unregister", help="Remove a collection and its graphics")
    unregister.add_argument("collection_id", type=int, help="Collection to remove")

    subparsers.add_parser("collections", help="List registered collection ids")

    collection = subparsers.add_parser("collection", help="Show a collection")
    collection.add_argument("collection_id", type=int)

    graphics = subparsers.add_parser("graphics", help="List the graphic ids of a collection")
    graphics.add_argument("collection_id", type=int)

    graphic = subparsers.add_parser("graphic", help="Show a graphic")
    graphic.add_argument("graphic_id", type=int)

    return parser.parse_args(list(argv))


async def _dispatch(api: RegistryApi, args: argparse.Namespace, caller: str) -> Envelope:
    match args.command:
        case "register":
            return await api.register_collection(caller, args.address)
        case "update":
            return await api.update_collection(caller, args.collection_id, args.address)
        case "unregister":
            return await api.unregister_collection(caller, args.collection_id)
        case "collections":
            return api.fetch_collections()
        case "collection":
            return api.fetch_collection(args.collection_id)
        case "graphics":
            return api.fetch_graphics(args.collection_id)
        case "graphic":
            return api.fetch_graphic(args.graphic_id)
        case _:
            raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Run one registry operation against the persisted snapshot."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(verbose=parsed_args.verbose)

    caller = parsed_args.caller or env_value("OGINDEX_CALLER") or ""
    if parsed_args.command in MUTATING_COMMANDS and not caller:
        log.error("Missing --caller (or OGINDEX_CALLER) for %s", parsed_args.command)
        sys.exit(2)

    try:
        config = get_registry_config()
    except ConfigurationError:
        log.exception("CLI configuration error")
        sys.exit(2)

    try:
        snapshots = build_snapshot_store()
    except SnapshotError as exc:
        log.critical("Registry snapshot unavailable: %s", exc)
        print(to_json(error(exc)))
        sys.exit(1)

    service = build_registry_service(config)
    try:
        resume(service, snapshots)
        envelope = asyncio.run(_dispatch(RegistryApi(service), parsed_args, caller))
        if "ok" in envelope and parsed_args.command in MUTATING_COMMANDS:
            suspend(service, snapshots)
    except SnapshotError as exc:
        log.critical("Registry snapshot unusable: %s", exc)
        envelope = error(exc)
    finally:
        snapshots.dispose()

    print(to_json(envelope))
    if "error" in envelope:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
