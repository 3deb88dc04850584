#!/usr/bin/env python3
"""
Normalize stored link expirations to canonical UTC timestamps.

Values that parse are rewritten as ISO-8601 UTC with milliseconds; values
that do not parse are cleared. Running it twice changes nothing the second
time.

Usage:
    python normalize_expires.py --db-url sqlite:///./database.db
"""

import argparse
import asyncio
import sys
import os

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from qrlink.common.logging_config import setup_logging
from qrlink.database import RedisCache, create_link_store
from qrlink.maintenance import normalize_stored_expirations


async def main():
    parser = argparse.ArgumentParser(description="Normalize stored expiresAt values")
    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL", "sqlite:///./database.db"),
        help="Link store URL"
    )
    parser.add_argument(
        "--redis-url",
        default=os.getenv("REDIS_URL"),
        help="Redis URL; cached records of modified links are evicted"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args()

    logger = setup_logging(level="DEBUG" if args.verbose else "INFO")

    store = create_link_store(args.db_url, logger=logger)
    cache = None
    try:
        await store.open()
        if args.redis_url:
            cache = RedisCache(redis_url=args.redis_url, logger=logger)
            await cache.connect()

        await normalize_stored_expirations(store, cache=cache, logger=logger)
        return 0

    except Exception:
        logger.exception("Normalization failed")
        return 1
    finally:
        await store.close()
        if cache:
            await cache.close()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
