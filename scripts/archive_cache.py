#!/usr/bin/env python3
"""
Maintenance script for the durable APOD archive snapshot

The service trusts a stored snapshot forever, so this is how an operator
inspects, rebuilds or clears it.

Usage:
    python scripts/archive_cache.py --show
    python scripts/archive_cache.py --refresh
    python scripts/archive_cache.py --clear
    python scripts/archive_cache.py --pick 2025-01-15
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv  # noqa: E402

from landing.cache_manager import NullArchiveCache  # noqa: E402
from landing.errors import EmptyArchiveError  # noqa: E402
from landing.lib.logging_config import setup_logging  # noqa: E402
from landing.services.archive_provider import build_archive_provider  # noqa: E402
from landing.services.selector import select_entry  # noqa: E402


def show(provider):
    result = provider.cache.try_get(provider.cache_key)
    if result.error:
        print(f"✗ Snapshot could not be read: {result.error}")
        return 1
    if not result.hit:
        print("No snapshot stored")
        return 0

    entries = result.entries
    print(f"Snapshot {provider.cache_key}: {len(entries)} entries")
    if entries:
        newest = max(entries, key=lambda e: e.date)
        oldest = min(entries, key=lambda e: e.date)
        print(f"  newest: {newest.date} {newest.url}")
        print(f"  oldest: {oldest.date} {oldest.url}")
    return 0


def refresh(provider):
    result = provider.scraper.scrape()
    if result.error or not result.entries:
        print(f"✗ Scrape failed or returned no entries ({result.error}), snapshot left untouched")
        return 1

    written = provider.cache.put(provider.cache_key, result.entries)
    if not written.success:
        print(f"✗ Failed to write snapshot: {written.error}")
        return 1
    print(f"✓ Stored {len(result.entries)} entries")
    return 0


def clear(provider):
    if provider.cache.clear(provider.cache_key):
        print(f"✓ Cleared snapshot {provider.cache_key}")
        return 0
    print(f"✗ Failed to clear snapshot {provider.cache_key}")
    return 1


def pick(provider, day):
    try:
        entry = select_entry(provider.get_entries(), day)
    except EmptyArchiveError as e:
        print(f"✗ {e}")
        return 1
    print(f"{day}: {entry.date} {entry.url}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Inspect or rebuild the durable APOD archive snapshot'
    )
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument('--show', action='store_true', help='Print snapshot size and date range')
    group.add_argument('--refresh', action='store_true', help='Scrape the archive and overwrite the snapshot')
    group.add_argument('--clear', action='store_true', help='Delete the snapshot')
    group.add_argument(
        '--pick',
        type=date.fromisoformat,
        metavar='YYYY-MM-DD',
        help='Print the entry that would be selected on this date'
    )

    args = parser.parse_args(argv)

    load_dotenv(PROJECT_ROOT / '.env')
    setup_logging()

    provider = build_archive_provider()
    if isinstance(provider.cache, NullArchiveCache) and not args.pick:
        print("✗ No durable cache configured (set GCP_PROJECT or PROJECT_ID)")
        return 1

    if args.show:
        return show(provider)
    if args.refresh:
        return refresh(provider)
    if args.clear:
        return clear(provider)
    return pick(provider, args.pick)


if __name__ == '__main__':
    sys.exit(main())
