"""Command-line entry point that runs the gateway under uvicorn."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import uvicorn

from .app import create_app
from .logging_config import setup_logging
from .settings import Settings

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    defaults = Settings()
    parser = argparse.ArgumentParser(description="Run the trickrace match server.")
    parser.add_argument("--host", default=defaults.host)
    parser.add_argument("--port", type=int, default=defaults.port)
    parser.add_argument("--log-level", default=defaults.log_level)
    parser.add_argument("--snapshot-dir", type=Path, default=defaults.snapshot_dir,
                        help="Directory for per-match JSON snapshots (disabled when omitted).")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_level)
    settings = Settings(
        host=args.host,
        port=args.port,
        snapshot_dir=args.snapshot_dir,
        log_level=args.log_level,
    )
    logger.info("Serving trickrace on %s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port,
                log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
