#!/usr/bin/env python3
"""
Command-line interface for URL shortener storage.

Works directly against the configured backend (same environment variables
as the service).

Usage:
    python url_shortener_cli.py shorten <url>
    python url_shortener_cli.py get <short_code>
    python url_shortener_cli.py visit <short_code>
    python url_shortener_cli.py list
    python url_shortener_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from config import Config
from shortener.database import build_store
from shortener.errors import NotFoundError, ShortenerError
from shortener.service import URLShortenerService
from shortener.common.logging_config import setup_logging


def _print_json(payload: dict, error: bool = False) -> None:
    print(json.dumps(payload, indent=2, default=str), file=sys.stderr if error else sys.stdout)


class URLShortenerCLI:
    """Command-line interface for URL shortener."""

    def __init__(self, config: Config, verbose: bool = False):
        """Initialize CLI."""
        self.config = config
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service = None

    async def initialize(self):
        """Open the store and build the service."""
        store = build_store(self.config, logger=self.logger)
        await store.connect()
        self.service = URLShortenerService(store=store, logger=self.logger)

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    async def shorten(self, url: str) -> int:
        """Shorten a URL."""
        try:
            result = await self.service.shorten(url)
        except ShortenerError as e:
            _print_json({"success": False, "error": e.message}, error=True)
            return 1

        _print_json({
            "success": True,
            "short_code": result["short_code"],
            "long_url": result["long_url"],
            "created_at": result["created_at"].isoformat(),
            "already_existed": result["already_existed"],
        })
        return 0

    async def get(self, short_code: str) -> int:
        """Show a mapping without counting a visit."""
        try:
            mapping = await self.service.get_mapping(short_code)
        except NotFoundError:
            _print_json({"success": False, "error": f"Short code '{short_code}' not found"}, error=True)
            return 1
        except ShortenerError as e:
            _print_json({"success": False, "error": e.message}, error=True)
            return 1

        _print_json({"success": True, **mapping.to_dict()})
        return 0

    async def visit(self, short_code: str) -> int:
        """Resolve a short code the way a redirect does (counts a visit)."""
        try:
            long_url = await self.service.redirect(short_code)
        except NotFoundError:
            _print_json({"success": False, "error": f"Short code '{short_code}' not found"}, error=True)
            return 1
        except ShortenerError as e:
            _print_json({"success": False, "error": e.message}, error=True)
            return 1

        _print_json({"success": True, "short_code": short_code, "long_url": long_url})
        return 0

    async def list_urls(self) -> int:
        """List every mapping."""
        try:
            mappings = await self.service.list_all()
        except ShortenerError as e:
            _print_json({"success": False, "error": e.message}, error=True)
            return 1

        _print_json({
            "success": True,
            "count": len(mappings),
            "urls": [m.to_dict() for m in mappings],
        })
        return 0

    async def health(self) -> int:
        """Check storage health."""
        health_status = await self.service.health_check()
        _print_json({"success": True, "health": health_status})
        return 0 if health_status["overall"] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL using the local file backend
  %(prog)s --backend file shorten https://example.com/long/url

  # Look up a code without counting a visit
  %(prog)s get abc123

  # List every mapping
  %(prog)s list
        """
    )

    parser.add_argument(
        "--backend",
        choices=["mongodb", "file"],
        help="Storage backend (default: from STORAGE_BACKEND env)"
    )
    parser.add_argument("--mongodb-uri", help="MongoDB URI (default: from MONGODB_URI env)")
    parser.add_argument("--data-file", help="JSON snapshot path (default: from DATA_FILE env)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")

    get_parser = subparsers.add_parser("get", help="Show a mapping")
    get_parser.add_argument("short_code", help="Short code to lookup")

    visit_parser = subparsers.add_parser("visit", help="Resolve a code and count a visit")
    visit_parser.add_argument("short_code", help="Short code to visit")

    subparsers.add_parser("list", help="List every mapping")
    subparsers.add_parser("health", help="Check storage health")

    return parser


async def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    overrides = {}
    if args.backend:
        overrides["storage_backend"] = args.backend
    if args.mongodb_uri:
        overrides["mongodb_uri"] = args.mongodb_uri
    if args.data_file:
        overrides["data_file"] = args.data_file

    cli = URLShortenerCLI(config=Config(**overrides), verbose=args.verbose)

    try:
        await cli.initialize()
    except ShortenerError as e:
        _print_json({"success": False, "error": e.message}, error=True)
        return 1

    try:
        if args.command == "shorten":
            return await cli.shorten(args.url)
        elif args.command == "get":
            return await cli.get(args.short_code)
        elif args.command == "visit":
            return await cli.visit(args.short_code)
        elif args.command == "list":
            return await cli.list_urls()
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1
    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
