#!/usr/bin/env python3
"""Watch the QuickApp list of a hub live.

Loads every QuickApp and QuickApp child, then follows the hub event
stream and reprints the table whenever the snapshot changes.

Usage
-----
Set environment variables and run::

    export HC3_HOST="192.168.1.57"
    export HC3_USER="admin"
    export HC3_PASSWORD="your-password"
    python scripts/watch_quickapps.py

Options::

    --sort COLUMN        Sort by id, name, type or modified (default: id)
    --desc               Sort descending
    --once               Print the initial list and exit
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyhc3 import SORT_COLUMNS, ConnectionState, Hc3Client, Hc3ConfigError, Hc3Error, env_config_provider  # noqa: E402
from pyhc3.models import Device  # noqa: E402


def _format_row(device: Device) -> str:
    modified = device.modified_at.strftime("%Y-%m-%d %H:%M:%S") if device.modified_at else "-"
    name = device.name or "-"
    if device.is_child:
        name = f"{name} (child)"
    return f"{device.id:>6}  {name:<40.40}  {(device.type or '-'):<36.36}  {modified}"


def _render(client: Hc3Client, column: str, descending: bool) -> None:
    devices = client.sorted_devices(column, descending=descending)
    state = client.connection_state
    print(f"\n== {len(devices)} QuickApps ({state}) ==")
    if not devices:
        print("  No QuickApps found")
        return
    print(f"{'id':>6}  {'name':<40}  {'type':<36}  modified")
    for device in devices:
        print(_format_row(device))


def _report_connection(state: ConnectionState) -> None:
    print(f"-- hub {state}", file=sys.stderr)


async def main() -> int:
    parser = argparse.ArgumentParser(description="Follow the QuickApp list of a hub.")
    parser.add_argument("--sort", choices=SORT_COLUMNS, default="id", help="Sort column")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--once", action="store_true", help="Print the initial list and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    provider = env_config_provider()
    try:
        provider()
    except Hc3ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    async with Hc3Client(provider) as client:
        client.add_snapshot_listener(lambda: _render(client, args.sort, args.desc))
        client.add_connection_listener(_report_connection)

        if args.once:
            try:
                await client.load_all()
            except Hc3Error as exc:
                print(f"Failed to load QuickApps: {exc}", file=sys.stderr)
                return 1
            return 0

        if not await client.connect():
            return 1

        try:
            await client.poller.join()
        except asyncio.CancelledError:
            pass
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        pass
