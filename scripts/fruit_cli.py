#!/usr/bin/env python3
"""Command line front end for the local fruit cache and cart.

Usage
-----
::

    python scripts/fruit_cli.py list            # serve the cache, refresh it if empty
    python scripts/fruit_cli.py add 3 --times 2 # add fruit #3 to the cart twice
    python scripts/fruit_cli.py cart            # show the cart

Options::

    --db PATH            sqlite database (default: $FRUITTIES_DB_PATH or sharedfruits.db)
    --base-url URL       Feed root URL (default: $FRUITTIES_BASE_URL)
    --json               Output as machine-readable JSON
    --wait SECONDS       How long ``list`` waits for a non-empty list
    -v, --verbose        Enable DEBUG logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyfruitties import FruitItem, FruittiesClient, FruittiesConfig, FruittiesError  # noqa: E402
from pyfruitties.models import CartEntryView  # noqa: E402


def _print_fruits(fruits: list[FruitItem], json_mode: bool) -> None:
    if json_mode:
        print(json.dumps([fruit.model_dump() for fruit in fruits], indent=2))
        return
    if not fruits:
        print("(no fruits cached)")
        return
    for fruit in fruits:
        print(f"{fruit.id:>4}  {fruit.name:<20} {fruit.full_name:<30} {fruit.calories} kcal")


def _print_cart(views: list[CartEntryView], json_mode: bool) -> None:
    if json_mode:
        print(json.dumps([view.model_dump() for view in views], indent=2))
        return
    if not views:
        print("(cart is empty)")
        return
    for view in views:
        print(f"{view.fruit.id:>4}  {view.fruit.name:<20} x{view.count}")


async def _cmd_list(client: FruittiesClient, args: argparse.Namespace) -> int:
    fruits: list[FruitItem] = []

    async def _first_non_empty() -> None:
        nonlocal fruits
        async for fruits in client.get_fruit_list():
            if fruits:
                return

    try:
        await asyncio.wait_for(_first_non_empty(), timeout=args.wait)
    except TimeoutError:
        print(f"Fruit list still empty after {args.wait:.1f}s", file=sys.stderr)
    _print_fruits(fruits, args.json_mode)
    return 0 if fruits else 1


async def _cmd_add(client: FruittiesClient, args: argparse.Namespace) -> int:
    entry = None
    for _ in range(args.times):
        entry = await client.add_to_cart(args.fruit_id)
    if entry is not None:
        if args.json_mode:
            print(json.dumps(entry.model_dump()))
        else:
            print(f"Fruit #{entry.id} is in the cart {entry.count} time(s)")
    return 0


async def _cmd_cart(client: FruittiesClient, args: argparse.Namespace) -> int:
    _print_cart(await client.cart_data().first(), args.json_mode)
    return 0


async def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Browse the local fruit cache and manage the cart")
    parser.add_argument("--db", help="sqlite database path")
    parser.add_argument("--base-url", help="Feed root URL")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--wait", type=float, default=10.0, help="Seconds 'list' waits for data")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="Show cached fruits, refreshing the cache if empty")
    add = sub.add_parser("add", help="Add a fruit to the cart")
    add.add_argument("fruit_id", type=int)
    add.add_argument("--times", type=int, default=1)
    sub.add_parser("cart", help="Show the cart")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.db:
        overrides["db_path"] = args.db
    if args.base_url:
        overrides["base_url"] = args.base_url

    handlers = {"list": _cmd_list, "add": _cmd_add, "cart": _cmd_cart}
    try:
        config = FruittiesConfig.from_env(**overrides)
        async with FruittiesClient(config) as client:
            return await handlers[args.command](client, args)
    except FruittiesError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
