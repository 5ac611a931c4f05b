#!/usr/bin/env python3
"""
FIRMS Archive Conversion - Main Entry Point

Turns a folder of FIRMS archive downloads into monthly GeoJSON files.

Usage:
    python -m firms_prebake.convert_main --in downloads/
    python -m firms_prebake.convert_main --in downloads/ --out data/firms --bbox=-125,32,-113.5,43
"""

import argparse
import sys

from .config import DEFAULT_OUTPUT_DIR, DEFAULT_PREFIX, parse_bbox
from .export import MonthStore
from .firms.geometry import DEFAULT_BBOX
from .ingest import convert_archive


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert FIRMS archive downloads into monthly GeoJSON files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m firms_prebake.convert_main --in downloads/
  python -m firms_prebake.convert_main --in downloads/ --out data/firms --bbox=-125,32,-113.5,43
        """,
    )
    parser.add_argument(
        "--in", dest="in_dir", type=str, required=True, help="Input folder with FIRMS CSV/JSON files"
    )
    parser.add_argument(
        "--out",
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output folder (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--bbox",
        type=str,
        default=DEFAULT_BBOX,
        help=f"west,south,east,north (default: {DEFAULT_BBOX})",
    )
    parser.add_argument(
        "--prefix",
        type=str,
        default=DEFAULT_PREFIX,
        help=f"Output file prefix (default: {DEFAULT_PREFIX})",
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        bbox = parse_bbox(args.bbox)
        written = convert_archive(args.in_dir, MonthStore(args.out, args.prefix), bbox)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)

    print("\n=== Conversion Complete ===")
    print(f"Months written: {len(written)}")
    print(f"Total features: {sum(written.values())}")
    return written


if __name__ == "__main__":
    main()
