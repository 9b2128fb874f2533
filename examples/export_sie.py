#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from fortnox import ClientSettings, FortnoxClient


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Download a Fortnox SIE export")
    p.add_argument("sie_type", nargs="?", default="4", choices=["1", "2", "3", "4"])
    p.add_argument("--financial-year", type=int, help="Financial year id (default: current)")
    p.add_argument("-o", "--output", type=Path, default=Path("export.se"))
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    filters = {"financialyear": args.financial_year} if args.financial_year else None

    async with FortnoxClient.from_settings(ClientSettings.from_env()) as client:
        info = await client.get_company_information()
        text = await client.get_sie_export(args.sie_type, filters)

    args.output.write_text(text, encoding="utf-8")
    print(f"SIE {args.sie_type} for {info.items.get('CompanyName', '?')} written to {args.output}")


if __name__ == "__main__":
    asyncio.run(main())
