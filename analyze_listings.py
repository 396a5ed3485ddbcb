#!/usr/bin/env python3
"""
Analyze a CSV of listings for lot split potential.

Reads a listings export, runs the Austin lot split analysis on every
property, and writes the ranked results as CSV (and optionally full
text reports).

Usage:
    python analyze_listings.py listings.csv
    python analyze_listings.py mls_export.csv --mls --max-price 900000
    python analyze_listings.py listings.csv --output ranked.csv --report --top 5
"""

import argparse
import logging
import sys
from pathlib import Path

from config import get_settings
from zoning import AnalysisConfig, LotAnalyzer
from zoning.data_sources.listings import ListingsReader
from zoning.exceptions import ListingParseError
from zoning.export import export_csv

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Rank Austin listings by lot split potential",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analyze_listings.py listings.csv                    # Ranked CSV to stdout
  python analyze_listings.py mls.csv --mls                   # MLS export (acreage)
  python analyze_listings.py listings.csv -o ranked.csv      # Write to file
  python analyze_listings.py listings.csv --report --top 3   # Full reports
        """,
    )

    parser.add_argument("path", help="Path to listings CSV")
    parser.add_argument("--mls", action="store_true", help="Treat the file as an MLS export")
    parser.add_argument("--max-price", help="Maximum purchase price")
    parser.add_argument("--min-lot-area", help="Minimum lot area (SF)")
    parser.add_argument("--target-profit", help="Target profit margin (percent)")
    parser.add_argument("--renovation-budget", help="Renovation budget")
    parser.add_argument("--output", "-o", help="Write ranked CSV here instead of stdout")
    parser.add_argument("--report", "-r", action="store_true", help="Print full text reports")
    parser.add_argument("--top", "-n", type=int, default=None, help="Only keep the top N results")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = AnalysisConfig.from_mapping(
        {
            "max_price": args.max_price,
            "min_lot_area": args.min_lot_area,
            "target_profit_margin": args.target_profit,
            "renovation_budget": args.renovation_budget,
        },
        settings,
    )

    path = Path(args.path)
    if not path.exists():
        logger.error(f"File not found: {path}")
        return 1

    try:
        properties = ListingsReader(mls=args.mls).read_file(str(path))
    except ListingParseError as e:
        logger.error(f"Could not read {path}: {e}")
        return 1

    if not properties:
        logger.error("No valid properties found in the CSV file")
        return 1

    analyzer = LotAnalyzer(max_workers=settings.analysis_max_workers)
    results = analyzer.analyze_batch(properties, config)
    if args.top is not None:
        results = results[:args.top]

    csv_text = export_csv(results)
    if args.output:
        Path(args.output).write_text(csv_text, encoding="utf-8")
        logger.info(f"Wrote {len(results)} results to {args.output}")
    else:
        sys.stdout.write(csv_text)

    if args.report:
        for result in results:
            print(result.to_report())
            print()

    return 0


if __name__ == "__main__":
    sys.exit(main())
