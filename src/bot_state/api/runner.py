#!/usr/bin/env python3
"""FastAPI server runner."""

from __future__ import annotations

import argparse

import uvicorn

from bot_state.api.app import create_app
from bot_state.config.loader import load_config
from bot_state.logging import get_logger, setup_logging_from_config

logger = get_logger("api")


def main(argv: list[str] | None = None) -> None:
    """Run the FastAPI server."""
    parser = argparse.ArgumentParser(description="Bot state API server")
    parser.add_argument("--config", default=None, help="Path to config YAML")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging_from_config(config.logging)

    logger.info("Starting FastAPI server", host=config.api.host, port=config.api.port)

    try:
        uvicorn.run(
            create_app(config),
            host=config.api.host,
            port=config.api.port,
            log_config=None,  # Use our structlog setup
        )
    except Exception as e:
        logger.error("Failed to start server", error=str(e))
        raise


if __name__ == "__main__":
    main()
