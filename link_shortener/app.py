#!/usr/bin/env python3
"""
Main entry point for the link shortener service.

Concurrency: requests are served concurrently via async I/O (FastAPI + asyncpg
connection pool). Set APP_HTTP__WORKERS > 1 for multi-process scaling across
CPU cores (each worker has its own DB pool).

Usage:
    link-shortener

Configuration comes from config/*.toml and APP_-prefixed environment
variables, see link_shortener.config.
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .config import Config, load_config
from .lib.common.logging_config import setup_logging
from .lib.database.postgres import LinkDatabase
from .lib.database.queries import LinkQueries
from .lib.service import LinkService
from .lib.shortcode import ShortCodeGenerator
from .web_app import create_app


def build_service(config: Config, logger) -> LinkService:
    """Wire the database, persistence operations and service together."""
    db = LinkDatabase(config=config.database, logger=logger)
    return LinkService(
        db=db,
        queries=LinkQueries(logger=logger),
        short_code_generator=ShortCodeGenerator(default_length=config.shortener.hash_length),
        logger=logger,
        max_collision_retries=config.shortener.max_collision_retries,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger
    
    logger.info("Starting link shortener service...")
    
    service = build_service(config, logger)
    await service.db.connect()
    app.state.service = service
    
    logger.info("Service started successfully")
    
    yield
    
    logger.info("Shutting down link shortener service...")
    await service.close()
    logger.info("Service stopped")


def _setup(config: Config):
    """Configure logging and build the app for one process."""
    logger = setup_logging(
        level=config.telemetry.log_level,
        log_format=config.telemetry.log_format,
        log_file=config.telemetry.log_file,
    )
    
    app = create_app(service_instance=None, config=config, logger=logger)
    app.router.lifespan_context = lifespan
    return app, logger


def create_worker_app() -> FastAPI:
    """App factory run inside each uvicorn worker process."""
    app, _ = _setup(load_config())
    return app


def main():
    """Main entry point."""
    config = load_config()
    
    app, logger = _setup(config)
    
    logger.info("Link Shortener Service")
    # SecretStr keeps the database URL masked here
    logger.debug(f"Configuration: {config.model_dump()}")
    logger.info(f"Listening on http://{config.http.listen_address}:{config.http.listen_port}/")
    
    if config.http.workers > 1:
        # The supervisor only forks workers for an import string; each one
        # builds its own app, logging and pool. Signals are handled by uvicorn.
        logger.info(f"Starting {config.http.workers} worker processes")
        try:
            uvicorn.run(
                "link_shortener.app:create_worker_app",
                factory=True,
                host=config.http.listen_address,
                port=config.http.listen_port,
                workers=config.http.workers,
                log_level=config.telemetry.log_level.lower(),
                access_log=False,
            )
        except Exception as e:
            logger.error(f"Server error: {e}")
            sys.exit(1)
        return
    
    uvicorn_config = uvicorn.Config(
        app,
        host=config.http.listen_address,
        port=config.http.listen_port,
        log_level=config.telemetry.log_level.lower(),
        access_log=False,
    )
    
    server = uvicorn.Server(uvicorn_config)
    
    # Let in-flight requests finish before exiting
    def handle_signal(signum, frame):
        logger.info(f"Received signal {signal.Signals(signum).name}, initiating graceful shutdown...")
        server.should_exit = True
    
    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)
    if hasattr(signal, "SIGQUIT"):
        signal.signal(signal.SIGQUIT, handle_signal)
    
    try:
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
