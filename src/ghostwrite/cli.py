"""Command-line surface.

Every command is translated into a router message, so the CLI sees exactly
what the popup and content script see.

Usage:
    ghostwrite status
    ghostwrite check "Their is a a problem here."
    ghostwrite humanize - < draft.txt
    ghostwrite set-key gw_xxx
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from ghostwrite.config import resolve_config
from ghostwrite.runtime import GhostwriteRuntime

# ruff: noqa: T201

_TEXT_COMMANDS = {
    "check": "CHECK_GRAMMAR",
    "humanize": "HUMANIZE_TEXT",
    "rewrite": "REWRITE_TEXT",
}
_PLAIN_COMMANDS = {
    "status": "GET_STATUS",
    "recheck": "RECHECK_API",
    "upgrade": "OPEN_UPGRADE",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghostwrite",
        description="AI humanize/rewrite with grammar checking",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--profile", help="Configuration profile to use")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("status", help="Show current capabilities and credits")
    commands.add_parser("recheck", help="Re-check the service and show status")
    commands.add_parser("upgrade", help="Open the upgrade page")
    for name, help_text in (
        ("check", "Grammar-check TEXT"),
        ("humanize", "Make TEXT sound natural, then grammar-check it"),
        ("rewrite", "Rewrite TEXT for clarity, then grammar-check it"),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("text", help="Text to process, or '-' to read stdin")
    key = commands.add_parser("set-key", help="Save the service API key")
    key.add_argument("api_key")
    return parser


def build_message(args: argparse.Namespace) -> dict[str, Any]:
    if args.command in _PLAIN_COMMANDS:
        return {"action": _PLAIN_COMMANDS[args.command]}
    if args.command == "set-key":
        return {"action": "SAVE_API_KEY", "apiKey": args.api_key}
    text = sys.stdin.read() if args.text == "-" else args.text
    return {"action": _TEXT_COMMANDS[args.command], "text": text}


async def run(args: argparse.Namespace) -> dict[str, Any]:
    config = resolve_config(profile=args.profile).to_frozen()
    runtime = GhostwriteRuntime.from_config(config)
    await runtime.start(schedule_rechecks=False)
    try:
        return await runtime.dispatch(build_message(args))
    finally:
        await runtime.stop()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        response = asyncio.run(run(args))
    except (ValueError, OSError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2

    print(json.dumps(response, indent=2, ensure_ascii=False))
    return 0 if response.get("success", True) else 1


if __name__ == "__main__":
    sys.exit(main())
