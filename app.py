#!/usr/bin/env python3
"""
Main entry point for the QR link service.

The link store, optional Redis cache and service are constructed once in the
application lifespan, kept on ``app.state`` and closed on shutdown.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - Link store URL (sqlite:///./database.db or postgresql://...)
    REDIS_URL - Redis connection URL (optional)
    BASE_URL - Base URL for short links when the request has no Host header
    PORT - Port to listen on
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from qrlink.common.logging_config import setup_logging
from qrlink.database import RedisCache, create_link_store
from qrlink.qr_renderer import QRRenderer, RenderOptions
from qrlink.service import QRLinkService
from qrlink.shortid import ShortIdGenerator
from web_app import create_app


def build_service(config: Config, logger) -> QRLinkService:
    """Wire the store, cache and renderer described by the configuration."""
    store = create_link_store(config.database_url, logger=logger)
    cache = None
    if config.redis_url:
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
    renderer = QRRenderer(
        defaults=RenderOptions(
            width=config.qr_width,
            margin=config.qr_margin,
            error_correction=config.qr_error_correction,
        ),
        logger=logger,
    )
    return QRLinkService(
        store=store,
        cache=cache,
        short_id_generator=ShortIdGenerator(default_length=config.short_id_length),
        renderer=renderer,
        logger=logger,
        max_collision_retries=config.max_collision_retries,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the service's connections on startup and close them on shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting QR link service...")
    service = build_service(config, logger)
    await service.store.open()
    if service.cache:
        await service.cache.connect()
    else:
        logger.info("Redis caching disabled")

    app.state.service = service
    logger.info("Service started successfully")

    try:
        yield
    finally:
        logger.info("Shutting down QR link service...")
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

    logger.info("QR Link Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url', 'redis_url'})}")

    app = create_app(service_instance=None, config=config, logger=logger)
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
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
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()
