"""
Manual smoke run of the snapshot repository against the mock fetcher.

Usage:
    python scripts/try_repository.py [OPTIONS]

Options:
    --limit INTEGER     Number of records to fetch (default: from config)
    --callers INTEGER   Concurrent ensure_snapshot calls to issue (default: 3)
    --config PATH       Alternative cache.yml
    --verbose           Enable debug logging

Exit Codes:
    0: Success
    2: Fetch failed
"""

import argparse
import asyncio
import logging
import sys

from prototype_cache import (
    MockFetcher,
    PrototypeStore,
    SnapshotRepository,
    UpstreamFailure,
    load_cache_config,
)
from prototype_cache.common import status_label

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Fetch a snapshot from the mock upstream and print a summary',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--limit', type=int, default=None, help='Number of records to fetch')
    parser.add_argument('--callers', type=int, default=3, help='Concurrent callers')
    parser.add_argument('--config', type=str, default=None, help='Path to cache.yml')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser.parse_args()


async def run(args: argparse.Namespace) -> int:
    config = load_cache_config(args.config)
    store = PrototypeStore(
        ttl_ms=config.store.ttl_ms,
        max_data_size_bytes=config.store.max_data_size_bytes,
    )
    fetcher = MockFetcher(num_records=200, delay_seconds=0.2)
    repo = SnapshotRepository(fetcher, store=store)

    params = dict(config.fetch)
    if args.limit is not None:
        params['limit'] = args.limit

    try:
        results = await asyncio.gather(
            *(repo.ensure_snapshot(params) for _ in range(max(args.callers, 1)))
        )
    except UpstreamFailure as e:
        logger.error("Snapshot fetch failed", extra={'failure': e.failure.to_dict()})
        return 2

    logger.info(f"{len(results)} callers, {fetcher.attempt_count} upstream call(s)")
    logger.info(f"Snapshot size: {results[0].size}, bytes: {results[0].approx_size_bytes}")
    logger.info(f"Id range: {repo.analyze()}")

    sample = repo.get_random_one()
    if sample is not None:
        logger.info(
            f"Random pick: #{sample['id']} {sample['prototypeNm']} "
            f"({status_label(sample['status'])}) created {sample['createDate']}"
        )

    summary = repo.analyze_extended()
    logger.info(f"Top tags: {summary.top_tags[:5]}")
    return 0


def main() -> int:
    args = parse_args()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    return asyncio.run(run(args))


if __name__ == '__main__':
    sys.exit(main())
