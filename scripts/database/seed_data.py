#!/usr/bin/env python3
"""
Seed a short-lived link for checking expiration by hand.

Inserts one link expiring a few seconds from now and prints the stored row.
Visit /r/<shortId> before and after the expiration to see the redirect turn
into the expired page.

Usage:
    python seed_data.py --db-url sqlite:///./database.db --seconds 10
"""

import argparse
import asyncio
import json
import sys
import os
from datetime import timedelta

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from qrlink.common.logging_config import setup_logging
from qrlink.database import create_link_store
from qrlink.service import QRLinkService
from qrlink.timestamps import utc_now


async def main():
    parser = argparse.ArgumentParser(description="Seed a link that expires soon")
    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL", "sqlite:///./database.db"),
        help="Link store URL"
    )
    parser.add_argument("--url", default="https://example.com/seeded", help="Destination URL")
    parser.add_argument("--seconds", type=int, default=10, help="Seconds until the link expires")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args()

    logger = setup_logging(level="DEBUG" if args.verbose else "INFO")

    store = create_link_store(args.db_url, logger=logger)
    try:
        await store.open()
        service = QRLinkService(store=store, logger=logger)

        expires_at = utc_now() + timedelta(seconds=args.seconds)
        link = await service.create_link(args.url, expires_at)

        # Read back what was actually stored, bypassing any cache
        stored = await store.find_by_short_id(link.short_id)
        print(json.dumps(stored.to_dict(), indent=2))
        return 0

    except Exception:
        logger.exception("Seeding failed")
        return 1
    finally:
        await store.close()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
