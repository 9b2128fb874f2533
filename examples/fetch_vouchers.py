#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import date

from fortnox import ClientSettings, FortnoxClient, FortnoxError


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fetch Fortnox vouchers for a date range")
    p.add_argument("from_date", type=date.fromisoformat)
    p.add_argument("to_date", type=date.fromisoformat)
    p.add_argument("--limit", type=int, default=500)
    p.add_argument("--all", action="store_true", help="Fetch every page")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    async with FortnoxClient.from_settings(ClientSettings.from_env()) as client:
        try:
            result = await client.get_vouchers(
                {"fromdate": args.from_date, "todate": args.to_date, "limit": args.limit},
                paginate=args.all,
            )
        except FortnoxError as e:
            print(f"Request failed: {e.error.describe()}")
            return

        print(f"Vouchers {args.from_date} .. {args.to_date}: {len(result)} (pages: {result.pages_fetched})")
        print(f"{'Series':6} | {'Number':>7} | {'Date':10} | Description")
        print("-" * 60)
        for v in result.items:
            print(
                f"{v.get('VoucherSeries', ''):6} | {v.get('VoucherNumber', ''):>7} | "
                f"{v.get('TransactionDate', ''):10} | {v.get('Description', '')}"
            )


if __name__ == "__main__":
    asyncio.run(main())
