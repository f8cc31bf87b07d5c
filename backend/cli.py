"""Start the inventory API server.

Usage:
    python -m cli --storage-type <volatile|json|sqlite> [--file <path>] [--port 55555]
"""
import argparse
import logging
from typing import Optional

import uvicorn

from api.main import build_inventory, create_app
from domain.errors import StoreError
from repositories import STORAGE_TYPES
from settings import Settings

logger = logging.getLogger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Computer inventory server.")
    parser.add_argument(
        "--storage-type",
        choices=STORAGE_TYPES,
        required=True,
        help="The type of storage to use.",
    )
    parser.add_argument("--file", default=None, help="Optional. The file to use as database.")
    parser.add_argument("--host", default=None, help="Interface to bind.")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on.")
    parser.add_argument("--notify-url", default=None, help="Over-assignment listener URL.")
    parser.add_argument(
        "--no-notify", action="store_true", help="Disable over-assignment notifications."
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    config = Settings()
    config.STORAGE_TYPE = args.storage_type
    if args.file:
        config.STORAGE_FILE = args.file
    if args.host:
        config.HOST = args.host
    if args.port:
        config.PORT = args.port
    if args.notify_url:
        config.NOTIFY_URL = args.notify_url
    if args.no_notify:
        config.NOTIFY_ENABLED = False
    return config


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    config = settings_from_args(args)
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    try:
        inventory = build_inventory(config)
    except StoreError as exc:
        logger.error("Error initializing database: %s", exc)
        return 1

    logger.info("Starting server on port %d...", config.PORT)
    uvicorn.run(create_app(config, inventory), host=config.HOST, port=config.PORT)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
