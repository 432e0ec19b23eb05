"""Command line entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..core.config import Settings
from ..core.errors import OpskinsError
from .main import build_manager

log = logging.getLogger(__name__)


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="opskins-manager", description="Buy and withdraw OPSkins items."
    )
    p.add_argument("--api-key", help="defaults to $OPSKINS_API_KEY")
    p.add_argument("--account-name", help="label used in log output")
    p.add_argument("--app-id", type=int)
    p.add_argument("--context-id", type=int)
    p.add_argument("--data-dir", help="directory holding the inventory cache")
    p.add_argument("--dry-run", action="store_true", help="use an in-memory venue")
    p.add_argument("-v", "--verbose", action="store_true")

    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("inventory", help="list cached items")
    buy = sub.add_parser("buy", help="buy an item by market name")
    buy.add_argument("name")
    buy.add_argument("--max", type=float, dest="max_price")
    wd = sub.add_parser("withdraw", help="withdraw an item to Steam")
    wd.add_argument("item_id")
    return p


def _settings(args: argparse.Namespace) -> Settings:
    s = Settings.from_env()
    if args.api_key:
        s.api_key = args.api_key
    if args.account_name:
        s.account_name = args.account_name
    if args.app_id is not None:
        s.app_id = args.app_id
    if args.context_id is not None:
        s.context_id = args.context_id
    if args.data_dir:
        s.data_dir = Path(args.data_dir)
    if args.dry_run:
        # keep mock purchases out of the real account cache
        s.api_key = "dry-run"
    return s


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    try:
        manager = build_manager(_settings(args), dry_run=args.dry_run)
        if args.command == "inventory":
            for item in manager.inventory:
                print(f"{item.id}\t{item.name}")
        elif args.command == "buy":
            item = asyncio.run(manager.buy(args.name, args.max_price))
            print(f"{item.id}\t{item.name}")
        elif args.command == "withdraw":
            offer = asyncio.run(manager.withdraw(args.item_id))
            print(f"trade offer {offer.tradeoffer_id} from bot {offer.bot_id}")
            if offer.tradeoffer_error:
                print(f"warning: {offer.tradeoffer_error}", file=sys.stderr)
    except OpskinsError as e:
        log.debug("command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
