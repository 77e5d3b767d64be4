#!/usr/bin/env python3
"""
ENTSO-E Explorer command line.

Parses an ENTSO-E XML document (from a file, or fetched for one day) into
rows, prints them as a table and optionally exports them to Excel. The
``current`` command shows today's price for the running quarter-hour.

Usage:
    entsoe-explorer parse response.xml [--export out.xlsx] [--prices] [--debug]
    entsoe-explorer fetch --date 2024-06-01 --document-type A44 [--domain 10YFR-RTE------C]
    entsoe-explorer current [--domain 10YFR-RTE------C]
"""

import argparse
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import requests

from .client import EntsoeClient
from .common import parse_date, print_banner, setup_logging
from .constants import DOC_TYPE_PRICES, DOCUMENT_TYPES, MISSING_DISPLAY
from .export import export_filename, export_to_excel, price_projection
from .normalizer import Row, current_price, parse_entsoe_xml, sort_rows
from .parsers import DecodeError, NoDataError

# Columns shown on the console; everything is exported
DISPLAY_COLUMNS = [
    'date', 'time', 'document_type', 'business_type', 'in_domain',
    'resource_type', 'position', 'quantity', 'price', 'currency_unit',
]


def create_argument_parser() -> argparse.ArgumentParser:
    """Create argument parser for the command line."""
    # --debug is accepted before or after the subcommand
    debug_flag = argparse.ArgumentParser(add_help=False)
    debug_flag.add_argument(
        '--debug', action='store_true', default=argparse.SUPPRESS, help='Enable debug logging'
    )

    parser = argparse.ArgumentParser(
        description="ENTSO-E Explorer - parse and export Transparency Platform data"
    )
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    parse_cmd = subparsers.add_parser('parse', parents=[debug_flag], help='Parse an XML file')
    parse_cmd.add_argument('xml_file', type=Path, help='ENTSO-E XML document')

    fetch_cmd = subparsers.add_parser('fetch', parents=[debug_flag], help='Fetch one day from the API')
    fetch_cmd.add_argument('--date', required=True, help='Day to fetch (YYYY-MM-DD, UTC)')
    fetch_cmd.add_argument(
        '--document-type',
        default=DOC_TYPE_PRICES,
        choices=sorted(DOCUMENT_TYPES),
        help='Document type code (default: A44 prices)'
    )
    fetch_cmd.add_argument('--save-xml', type=Path, help='Also save the raw XML response')

    current_cmd = subparsers.add_parser(
        'current', parents=[debug_flag], help='Show the price of the current quarter-hour'
    )

    for cmd in (fetch_cmd, current_cmd):
        cmd.add_argument('--domain', help='EIC code of the area (default: ENTSOE_DOMAIN)')

    for cmd in (parse_cmd, fetch_cmd):
        cmd.add_argument('--export', type=Path, help='Export rows to this .xlsx file')
        cmd.add_argument(
            '--prices',
            action='store_true',
            help='Export only timestamp, price, currency and price unit'
        )

    return parser


def print_rows(rows: List[Row]) -> None:
    """Print rows as a table, limited to the display columns."""
    df = pd.DataFrame(rows)
    columns = [c for c in DISPLAY_COLUMNS if c in df.columns]
    with pd.option_context('display.max_rows', None, 'display.width', 200):
        print(df[columns].to_string(index=False))


def print_current(result: Dict[str, Any]) -> None:
    """Print a current-price lookup with its neighbouring slots."""
    currency = result['currency']
    print(f"Now (local):   {result['now_local']:%Y-%m-%d %H:%M:%S}")
    print(f"Slot (local):  {result['slot_local']:%Y-%m-%d %H:%M} ({result['slot_local'].tzname()})")
    print(f"Slot (UTC):    {result['slot_utc']:%Y-%m-%dT%H:%M}Z")
    print(f"Price:         {result['price_per_mwh']:.2f} {currency}/MWh "
          f"({result['price_per_kwh']:.5f} {currency}/kWh)")
    if result['matched_delta_minutes']:
        print(f"Matched within {result['matched_delta_minutes']} min of the slot start")

    for label in ('previous', 'current', 'next'):
        row = result[label]
        if row is None:
            print(f"  {label:<9} {MISSING_DISPLAY}")
        else:
            print(f"  {label:<9} {row['date']} {row['time']}  {row['price']:.2f}")


def save_documents(documents: List[str], target: Path) -> List[Path]:
    """
    Write raw XML documents to disk.

    The first document goes to ``target``; further documents of a zipped
    response are numbered next to it (``raw-2.xml``, ``raw-3.xml``, ...).
    """
    paths = []
    for index, xml_content in enumerate(documents, start=1):
        path = target if index == 1 else target.with_name(f"{target.stem}-{index}{target.suffix}")
        path.write_text(xml_content, encoding='utf-8')
        paths.append(path)
    return paths


def _export(rows: List[Row], target: Path, prices_only: bool, logger) -> None:
    records = price_projection(rows) if prices_only else rows
    if target.is_dir():
        first = next((r for r in rows if r['timestamp'] is not None), None)
        day = first['date'] if first else 'unknown'
        target = target / export_filename(rows[0]['document_type'], day, day)
    export_to_excel(records, target)
    logger.info(f"✓ Data exported to {target}")


def run_current(args: argparse.Namespace, logger) -> bool:
    """Fetch today's prices and print the running quarter-hour."""
    now = datetime.now(timezone.utc)
    client = EntsoeClient(domain=args.domain)
    rows, _ = client.fetch_day(now.date(), DOC_TYPE_PRICES)

    result = current_price(rows, now)
    if result is None:
        logger.error(f"✗ No price found for the current slot ({len(rows)} rows fetched)")
        return False

    print_current(result)
    return True


def run(args: argparse.Namespace) -> bool:
    """
    Execute a parsed command line.

    Returns:
        True if successful, False otherwise
    """
    logger = setup_logging(debug=args.debug)
    print_banner(f"ENTSO-E Explorer - {args.command}", debug_mode=args.debug)

    try:
        if args.command == 'current':
            return run_current(args, logger)

        if args.command == 'parse':
            logger.info(f"Parsing {args.xml_file}...")
            rows = parse_entsoe_xml(args.xml_file.read_text(encoding='utf-8'))
        else:
            day = parse_date(args.date)
            client = EntsoeClient(domain=args.domain)
            rows, documents = client.fetch_day(day, args.document_type)
            if args.save_xml:
                for path in save_documents(documents, args.save_xml):
                    logger.info(f"✓ Saved raw XML to {path}")
    except NoDataError as e:
        logger.warning(str(e))
        return True
    except (DecodeError, ValueError, OSError, requests.RequestException) as e:
        logger.error(f"✗ {e}")
        return False

    logger.info(f"✓ Parsed {len(rows)} rows")
    if not rows:
        return True

    rows = sort_rows(rows)
    print_rows(rows)

    if args.export:
        try:
            _export(rows, args.export, args.prices, logger)
        except (ValueError, OSError) as e:
            logger.error(f"✗ Export failed: {e}")
            return False

    return True


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    success = run(args)
    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
