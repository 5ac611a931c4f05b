#!/usr/bin/env python3
"""
FIRMS Monthly Prebake - Main Entry Point

Fetches NASA FIRMS fire detections for a bounding box month by month,
merges the sources and writes one compact GeoJSON file per month.

Process:
1. Resolves the MAP key (.env / environment), months, sources and bbox
2. For each month, skips files that already hold detections
3. Fetches every <=10-day window per source with rate-limit backoff
4. Deduplicates detections across sources and writes <prefix>-YYYY-MM.geojson

Usage:
    python -m firms_prebake.prebake_main --start 2020-06 --end 2020-09 --bbox=-125,32,-113.5,43
    python -m firms_prebake.prebake_main --months 2001-04,2001-06 --bbox=-125,32,-113.5,43 --sources MODIS_SP
"""

import argparse
import sys

from dotenv import load_dotenv

from .assembly import WRITTEN, run_prebake
from .config import DEFAULT_OUTPUT_DIR, DEFAULT_PREFIX, build_config
from .firms.sources import DEFAULT_SOURCES
from .validation import validate_and_report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Prebake monthly FIRMS fire detection GeoJSON files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m firms_prebake.prebake_main --start 2020-06 --end 2020-09 --bbox=-125,32,-113.5,43
  python -m firms_prebake.prebake_main --months 2001-04,2001-06 --bbox=-125,32,-113.5,43 --sources MODIS_SP
  python -m firms_prebake.prebake_main --start 2021-01 --end 2021-12 --bbox=-125,32,-113.5,43 --no-retry_empty
        """,
    )

    parser.add_argument("--start", type=str, help="First month, YYYY-MM (inclusive)")
    parser.add_argument("--end", type=str, help="Last month, YYYY-MM (inclusive)")
    parser.add_argument(
        "--months",
        type=str,
        help='Comma list of specific months to run (e.g. "2001-04,2001-06"); overrides --start/--end',
    )
    parser.add_argument(
        "--bbox", type=str, required=True, help="west,south,east,north (degrees)"
    )
    parser.add_argument(
        "--out",
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output folder (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--sources",
        type=str,
        default=DEFAULT_SOURCES,
        help=f"Comma list of FIRMS sources (default: {DEFAULT_SOURCES})",
    )
    parser.add_argument(
        "--throttle",
        type=int,
        help="Delay (ms) after each successful request (default: $FIRMS_THROTTLE_MS or 800)",
    )
    parser.add_argument(
        "--max_retries",
        "--maxRetries",
        dest="max_retries",
        type=int,
        help="Retries for 403/429 with backoff (default: $FIRMS_MAX_RETRIES or 4)",
    )
    parser.add_argument(
        "--retry_empty",
        "--retryEmpty",
        dest="retry_empty",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Rebuild existing month files that have 0 features (default: on)",
    )
    parser.add_argument(
        "--prefix",
        type=str,
        default=DEFAULT_PREFIX,
        help=f"Output file prefix (default: {DEFAULT_PREFIX})",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate the files written by this run",
    )
    return parser


def main(argv=None):
    """Main command-line interface for the prebake run."""
    args = build_parser().parse_args(argv)

    # Load environment variables from .env file
    load_dotenv()

    try:
        config = build_config(
            bbox=args.bbox,
            start=args.start,
            end=args.end,
            months=args.months,
            sources=args.sources,
            out_dir=args.out,
            prefix=args.prefix,
            throttle_ms=args.throttle,
            max_retries=args.max_retries,
            retry_empty=args.retry_empty,
        )
        decisions = run_prebake(config)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.validate:
        written = [d.path for d in decisions if d.status == WRITTEN]
        print("\n=== Validating Output Files ===")
        if validate_and_report(written, config.bbox):
            print("[SUCCESS] All validation checks passed!")
        else:
            print("[WARNING] Some validation checks failed - please review the issues above")

    return decisions


if __name__ == "__main__":
    main()
