#!/usr/bin/env python3
"""
Command-line interface for QR link service.

Usage:
    python qrlink_cli.py shorten <url> [--expires-at WHEN]
    python qrlink_cli.py resolve <short_id>
    python qrlink_cli.py qr <type> --data JSON [--output FILE]
    python qrlink_cli.py repair-expirations
    python qrlink_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os
from typing import Optional

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from qrlink.common.logging_config import setup_logging
from qrlink.common.urls import build_short_url
from qrlink.database import RedisCache, create_link_store
from qrlink.exceptions import QRLinkError, ValidationError
from qrlink.qr_renderer import RenderOptions
from qrlink.service import Expired, NotFound, QRLinkService


def emit(payload: dict, error: bool = False) -> int:
    print(json.dumps(payload, indent=2), file=sys.stderr if error else sys.stdout)
    return 1 if error else 0


class QRLinkCLI:
    """Command-line interface for QR link service."""

    def __init__(
        self,
        db_url: str,
        base_url: str,
        redis_url: Optional[str] = None,
        verbose: bool = False,
    ):
        self.db_url = db_url
        self.base_url = base_url
        self.redis_url = redis_url
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service = None

    async def initialize(self):
        """Open the store and optional cache."""
        store = create_link_store(self.db_url, logger=self.logger)
        await store.open()

        cache = None
        if self.redis_url:
            cache = RedisCache(redis_url=self.redis_url, logger=self.logger)
            await cache.connect()

        self.service = QRLinkService(store=store, cache=cache, logger=self.logger)

    async def cleanup(self):
        if self.service:
            await self.service.close()

    def short_url_for(self, short_id: str) -> str:
        return build_short_url(short_id=short_id, base_url=self.base_url)

    async def shorten(self, url: str, expires_at: Optional[str] = None) -> int:
        """Create a short link."""
        if expires_at and expires_at.isdigit():
            expires_at = int(expires_at)
        try:
            link = await self.service.create_link(url, expires_at)
        except ValidationError as e:
            return emit({"success": False, "error": str(e)}, error=True)

        return emit({
            "success": True,
            "short_id": link.short_id,
            "short_url": self.short_url_for(link.short_id),
            "original_url": link.original_url,
            "expires_at": link.expires_at,
        })

    async def resolve(self, short_id: str) -> int:
        """Show what a visit to a short link would do."""
        resolution = await self.service.resolve(short_id)

        if isinstance(resolution, NotFound):
            return emit({"success": False, "status": "not_found", "short_id": short_id}, error=True)
        if isinstance(resolution, Expired):
            return emit({
                "success": False,
                "status": "expired",
                "short_id": short_id,
                "expired_at": resolution.display,
            }, error=True)
        return emit({"success": True, "status": "redirect", "location": resolution.url})

    async def qr(self, kind: str, data: dict, output: Optional[str] = None) -> int:
        """Render a QR code, to a file or as a data URI."""
        try:
            if output is None:
                result = await self.service.generate(kind, data, self.short_url_for)
                return emit({"success": True, "short_url": result.short_url, "qr_code": result.qr_code})

            image_format = "svg" if output.lower().endswith(".svg") else "png"
            options = RenderOptions(image_format=image_format)
            result = await self.service.generate_image(kind, data, self.short_url_for, options)
        except ValidationError as e:
            return emit({"success": False, "error": str(e)}, error=True)

        with open(output, "wb") as f:
            f.write(result.image)
        return emit({"success": True, "short_url": result.short_url, "output": output})

    async def repair_expirations(self) -> int:
        """Normalize every stored expiration."""
        report = await self.service.repair_expirations()
        return emit({
            "success": True,
            "scanned": report.scanned,
            "normalized": report.normalized,
            "cleared": report.cleared,
        })

    async def health(self) -> int:
        health_status = await self.service.health_check()
        return emit({"success": health_status["overall"], "health": health_status}, error=not health_status["overall"])


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="QR Link CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL that expires at the end of the year
  %(prog)s shorten https://example.com/page --expires-at 2030-12-31T23:59:59Z

  # Check where a short link goes
  %(prog)s resolve AbC123xY

  # Write a Wi-Fi QR code to a file
  %(prog)s qr wifi --data '{"ssid": "Office", "password": "secret"}' --output wifi.png

  # Fix up legacy expiration values
  %(prog)s repair-expirations
        """
    )

    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL", "sqlite:///./database.db"),
        help="Link store URL (default: from DATABASE_URL env or sqlite:///./database.db)"
    )
    parser.add_argument(
        "--redis-url",
        default=os.getenv("REDIS_URL"),
        help="Redis connection URL (optional, default: from REDIS_URL env)"
    )
    parser.add_argument(
        "--base-url",
        default=os.getenv("BASE_URL", "http://localhost:3000"),
        help="Base URL for printed short links"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Create a short link")
    shorten_parser.add_argument("url", help="Destination URL")
    shorten_parser.add_argument("--expires-at", help="Expiration (ISO-8601 or epoch milliseconds)")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a short link")
    resolve_parser.add_argument("short_id", help="Short ID to resolve")

    qr_parser = subparsers.add_parser("qr", help="Generate a QR code")
    qr_parser.add_argument("type", choices=["url", "text", "wifi", "email"], help="Payload type")
    qr_parser.add_argument("--data", required=True, help="Payload fields as JSON")
    qr_parser.add_argument("--output", help="Write the image here (.png or .svg)")

    subparsers.add_parser("repair-expirations", help="Normalize stored expirations")
    subparsers.add_parser("health", help="Check service health")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    cli = QRLinkCLI(
        db_url=args.db_url,
        base_url=args.base_url,
        redis_url=args.redis_url,
        verbose=args.verbose,
    )

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.expires_at)
        elif args.command == "resolve":
            return await cli.resolve(args.short_id)
        elif args.command == "qr":
            try:
                data = json.loads(args.data)
            except json.JSONDecodeError as e:
                return emit({"success": False, "error": f"--data is not valid JSON: {e}"}, error=True)
            return await cli.qr(args.type, data, args.output)
        elif args.command == "repair-expirations":
            return await cli.repair_expirations()
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    except QRLinkError as e:
        return emit({"success": False, "error": str(e)}, error=True)
    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
