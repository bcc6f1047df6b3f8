#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: every request runs as its own task on the uvicorn event loop.
The file backend serialises writers with a reader/writer lock; the MongoDB
backend relies on per-document atomicity (visit increments may race).

Usage:
    python app.py

Environment variables:
    STORAGE_BACKEND - 'mongodb' (default) or 'file'
    MONGODB_URI - MongoDB connection URI (required for mongodb)
    DATA_FILE - JSON snapshot path for the file backend
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from shortener.database import build_store
from shortener.errors import StartupError
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from shortener.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info(f"Starting URL shortener service with {config.storage_backend} storage...")

    try:
        store = build_store(config, logger=logger)
        await store.connect()
    except StartupError as e:
        # Fatal: uvicorn aborts startup when the lifespan raises
        logger.critical(f"Storage backend unavailable: {e.message}")
        raise

    service = URLShortenerService(
        store=store,
        short_code_generator=ShortCodeGenerator(),
        logger=logger,
    )

    app.state.store = store
    app.state.service = service

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL shortener service...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'mongodb_uri'})}")

    app = create_app(
        store_instance=None,  # Set in lifespan
        service_instance=None,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)

    # uvicorn returns without raising when lifespan startup fails
    if not server.started:
        sys.exit(1)


if __name__ == "__main__":
    main()
