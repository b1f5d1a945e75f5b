"""Command-line access to the attribute service.

Every command goes through the same method registry other services use.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from .config import load_config
from .service import UserInformationService, create_service
from .store import SQLiteRecordStore
from .tools import build_registry

_VISIBILITY_WORDS = {"public": True, "true": True, "private": False, "false": False}


def _get_service(args: argparse.Namespace) -> UserInformationService:
    """Create a service configured from disk."""
    config = load_config(Path(args.config) if args.config else None)
    return create_service(config)


def _parse_pairs(pairs: list[str]) -> dict[str, str]:
    """Parse FIELD=VALUE arguments, keeping their order."""
    parsed: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise ValueError(f"Expected FIELD=VALUE, got '{pair}'")
        parsed[name] = value
    return parsed


def _run(args: argparse.Namespace, method: str, call_args: dict[str, Any]) -> int:
    service = _get_service(args)
    try:
        registry = build_registry(service)
        result = asyncio.run(registry.dispatch(method, call_args, caller=args.caller))
    finally:
        if isinstance(service.store, SQLiteRecordStore):
            service.store.close()

    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    print(json.dumps(result.metadata["result"], indent=2))
    return 0


def cmd_get(args: argparse.Namespace) -> int:
    """Print fields of an identity."""
    return _run(args, "get", {"owner_id": args.owner, "fields": args.fields})


def cmd_set(args: argparse.Namespace) -> int:
    """Store fields for the calling identity."""
    try:
        values = _parse_pairs(args.pairs)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    return _run(args, "set", {"values": values})


def cmd_perms(args: argparse.Namespace) -> int:
    """Print public/private state of the caller's fields."""
    return _run(args, "getPermissions", {"fields": args.fields})


def cmd_set_perms(args: argparse.Namespace) -> int:
    """Make the caller's fields public or private."""
    try:
        pairs = _parse_pairs(args.pairs)
        permissions = {}
        for name, word in pairs.items():
            flag = _VISIBILITY_WORDS.get(word.lower())
            if flag is None:
                raise ValueError(f"Expected public or private for '{name}', got '{word}'")
            permissions[name] = flag
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    return _run(args, "setPermissions", {"permissions": permissions})


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="userinfo",
        description="Read and write per-identity user information",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to config.json (default: ~/.userinfo/config.json)",
    )
    parser.add_argument(
        "--as",
        dest="caller",
        metavar="ID",
        help="Identity to act as (anonymous if omitted)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Sub-command help")

    get_parser = subparsers.add_parser("get", help="Read fields of an identity")
    get_parser.add_argument("owner", help="Identity whose fields are read")
    get_parser.add_argument("fields", nargs="+", help="Field names")

    set_parser = subparsers.add_parser("set", help="Store your own fields")
    set_parser.add_argument("pairs", nargs="+", metavar="FIELD=VALUE")

    perms_parser = subparsers.add_parser("perms", help="Show your fields' visibility")
    perms_parser.add_argument("fields", nargs="+", help="Field names")

    set_perms_parser = subparsers.add_parser("set-perms", help="Change your fields' visibility")
    set_perms_parser.add_argument("pairs", nargs="+", metavar="FIELD=public|private")

    return parser


def run_cli(argv: list[str] | None = None) -> int:
    """Run the CLI with given arguments.

    Args:
        argv: Command-line arguments. Uses sys.argv[1:] if None.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "get": cmd_get,
        "set": cmd_set,
        "perms": cmd_perms,
        "set-perms": cmd_set_perms,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)
