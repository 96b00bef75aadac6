#!/usr/bin/env python3
"""
CLI tool for sending update checks to the extension update service.

Usage:
    python -m update_svc.cli check bfdgpgibhagkpdlnjonhkabjoijopoge 0.9.0
    python -m update_svc.cli check ID1 1.0.0 ID2 0.5
    python -m update_svc.cli webstore bfdgpgibhagkpdlnjonhkabjoijopoge 0.9.0
    python -m update_svc.cli catalog
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import httpx
from colorama import Fore, Style, init as colorama_init

from .extension.types import RequestItem
from .protocol.codec import decode_update_response, encode_update_request, encode_webstore_query


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}"


def pair_items(values: list[str]) -> list[RequestItem]:
    """Turn ``ID VERSION [ID VERSION ...]`` arguments into request items."""
    if len(values) % 2 != 0:
        raise ValueError("Expected pairs of extension id and version")
    return [
        RequestItem(identifier=values[i], requested_version=values[i + 1])
        for i in range(0, len(values), 2)
    ]


def print_updates(body: bytes) -> None:
    """Pretty print the updates offered in a response document."""
    updates = decode_update_response(body)
    if not updates:
        print(colorize("No updates available", Style.DIM))
        return

    for update in updates:
        print(f"\n{colorize(update['appid'], Fore.YELLOW)}")
        print(f"  {colorize('Version:', Fore.CYAN)} {update['version']}")
        print(f"  {colorize('Codebase:', Fore.CYAN)} {update['codebase']}")
        print(f"  {colorize('SHA-256:', Fore.CYAN)} {update['hash_sha256']}")


def _print_result(response: httpx.Response, raw: bool) -> int:
    if response.status_code in (301, 302, 307, 308):
        print(colorize("Redirected upstream:", Style.BRIGHT), response.headers.get("location", ""))
        return 0

    if response.status_code != 200:
        print(colorize(f"Error: {response.status_code}", Fore.RED), file=sys.stderr)
        print(response.text, file=sys.stderr)
        return 1

    if raw:
        print(response.text)
    else:
        print_updates(response.content)
    return 0


async def cmd_check(args) -> int:
    """Send a batch update check."""
    try:
        items = pair_items(args.extensions)
    except ValueError as e:
        print(colorize(f"Error: {e}", Fore.RED), file=sys.stderr)
        return 2

    url = f"{args.base_url}/extensions"
    async with httpx.AsyncClient() as client:
        response = await client.post(
            url,
            content=encode_update_request(items),
            headers={"Content-Type": "application/xml"},
        )
    return _print_result(response, args.raw)


async def cmd_webstore(args) -> int:
    """Send a single extension (webstore style) update check."""
    item = RequestItem(identifier=args.id, requested_version=args.version)

    url = f"{args.base_url}/extensions"
    async with httpx.AsyncClient() as client:
        response = await client.get(url, params={"x": encode_webstore_query(item)})
    return _print_result(response, args.raw)


async def cmd_catalog(args) -> int:
    """List the extensions the server offers."""
    url = f"{args.base_url}/catalog"

    async with httpx.AsyncClient() as client:
        response = await client.get(url)

        if response.status_code != 200:
            print(colorize(f"Error: {response.status_code}", Fore.RED), file=sys.stderr)
            return 1

        data = response.json()

    print(colorize("\nExtensions:", Style.BRIGHT))
    for entry in data:
        line = f"  {colorize(entry['id'], Fore.YELLOW)} {entry['version']} {entry['title']}"
        if entry.get("blacklisted"):
            line += colorize(" (blacklisted)", Fore.RED)
        print(line)

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CLI tool for the Extension Update Service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--base-url",
        default="http://localhost:8192",
        help="Base URL of the update service",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Print the response XML instead of a summary",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    check_parser = subparsers.add_parser("check", help="Batch update check")
    check_parser.add_argument(
        "extensions", nargs="+", metavar="ID VERSION",
        help="Extension id and installed version pairs",
    )

    webstore_parser = subparsers.add_parser("webstore", help="Single extension update check")
    webstore_parser.add_argument("id", help="Extension id")
    webstore_parser.add_argument("version", help="Installed version")

    subparsers.add_parser("catalog", help="List offered extensions")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    colorama_init()

    if args.command == "check":
        return asyncio.run(cmd_check(args))
    elif args.command == "webstore":
        return asyncio.run(cmd_webstore(args))
    elif args.command == "catalog":
        return asyncio.run(cmd_catalog(args))
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
