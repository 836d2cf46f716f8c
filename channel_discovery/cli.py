#!/usr/bin/env python3
"""
Channel Discovery - Command Line Entry Point
Discover YouTube channels matching the configured criteria in one batch run.

Installation:
    1. pip install -e .
    2. Create a .env file with: YOUTUBE_API_KEY=your_api_key_here (or pass apiKey in INPUT.json)
    3. Get your API key from: https://console.cloud.google.com/
    4. Run: channel-discovery --input INPUT.json

Output:
    Each collected channel is appended to storage/datasets/default/records.jsonl,
    and the run summary is written to storage/key_value_stores/default/OUTPUT.json.
"""

import argparse
import logging
from typing import List, Optional

from .aggregation import export_records_to_csv
from .config import DEFAULT_STORAGE_DIR, ConfigError, load_config, setup_logging
from .pipeline import run_discovery
from .storage import open_storage

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Discover YouTube channels matching business-relevance filters.")
    parser.add_argument("--input", help="JSON input file (defaults to INPUT.json when present)")
    parser.add_argument("--api-key", help="YouTube Data API v3 key (overrides input and environment)")
    parser.add_argument("--seed", action="append", dest="seeds", help="Seed channel ID, URL or handle (repeatable)")
    parser.add_argument("--query", action="append", dest="queries", help="Channel search query (repeatable)")
    parser.add_argument("--max-channels", type=int, help="Maximum number of channels to collect")
    parser.add_argument("--storage-dir", default=DEFAULT_STORAGE_DIR, help="Root directory for results")
    parser.add_argument("--csv", help="Also export collected channels to this CSV file")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run one discovery job; returns the process exit code."""
    args = parse_args(argv)
    setup_logging(logging.WARNING if args.quiet else logging.INFO)

    overrides = {
        'apiKey': args.api_key,
        'seedChannels': args.seeds,
        'searchQueries': args.queries,
        'maxChannels': args.max_channels,
    }

    try:
        config = load_config(args.input, overrides)
        dataset, store = open_storage(args.storage_dir)
        summary = run_discovery(config, dataset=dataset, store=store)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    if args.csv:
        export_records_to_csv(summary['results'], args.csv)

    print(f"Collected {summary['info']['collected']} channels -> {dataset.path}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
