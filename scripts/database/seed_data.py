#!/usr/bin/env python3
"""
Seed sample mappings into the configured URL shortener store.

Usage:
    python seed_data.py --backend file --data-file data/urls.json --count 10
"""

import argparse
import asyncio
import sys
import os
import random

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from config import Config
from shortener.database import build_store
from shortener.errors import ShortenerError
from shortener.service import URLShortenerService
from shortener.common.logging_config import setup_logging


# Sample URLs for testing
SAMPLE_URLS = [
    "https://github.com/python/cpython",
    "https://docs.python.org/3/library/asyncio.html",
    "https://fastapi.tiangolo.com/",
    "https://www.mongodb.com/docs/languages/python/pymongo-driver/current/",
    "https://stackoverflow.com/questions/tagged/python",
    "https://news.ycombinator.com/",
    "https://www.reddit.com/r/programming/",
]


async def main():
    parser = argparse.ArgumentParser(description="Seed sample URL mappings")
    parser.add_argument("--backend", choices=["mongodb", "file"], help="Storage backend")
    parser.add_argument("--mongodb-uri", help="MongoDB URI")
    parser.add_argument("--data-file", help="JSON snapshot path for the file backend")
    parser.add_argument("--count", type=int, default=10, help="Number of URLs to create")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args()

    logger = setup_logging(level="DEBUG" if args.verbose else "INFO")

    overrides = {}
    if args.backend:
        overrides["storage_backend"] = args.backend
    if args.mongodb_uri:
        overrides["mongodb_uri"] = args.mongodb_uri
    if args.data_file:
        overrides["data_file"] = args.data_file
    config = Config(**overrides)

    try:
        store = build_store(config, logger=logger)
        await store.connect()
    except ShortenerError as e:
        logger.error(f"Error opening store: {e.message}")
        return 1

    service = URLShortenerService(store=store, logger=logger)

    logger.info(f"Creating {args.count} sample URLs...")

    created = 0
    try:
        for i in range(args.count):
            url = f"{random.choice(SAMPLE_URLS)}?seed={i}"

            try:
                result = await service.shorten(url)
            except ShortenerError as e:
                logger.warning(f"Failed to create URL {i}: {e.message}")
                continue

            logger.info(f"Created: {result['short_code']} -> {url}")
            created += 1

        logger.info(f"Successfully created {created} URLs")
        logger.info(f"Total URLs in store: {len(await service.list_all())}")
    finally:
        await service.close()

    return 0


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
