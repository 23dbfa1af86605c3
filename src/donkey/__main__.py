"""Run the Donkey API server: ``python -m donkey`` or ``donkey``."""

from __future__ import annotations

import argparse
import logging

import uvicorn

from donkey.config import configure_logging, load_config

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="donkey", description=__doc__)
    parser.add_argument("--host", help="Bind address (default: DONKEY_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port (default: DONKEY_PORT or 31325)")
    parser.add_argument("--database-url", help="SQLAlchemy URL of the path store")
    parser.add_argument(
        "--user",
        action="append",
        default=[],
        help="Provision a user and home directory at startup (repeatable)",
    )
    args = parser.parse_args(argv)

    config = load_config()
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.database_url:
        config.database_url = args.database_url
    configure_logging(config)

    from donkey._donkey import Donkey
    from donkey.api import create_app

    service = Donkey(config)
    service.provision(args.user)
    app = create_app(service=service)

    logger.info("Starting Donkey on %s:%d (store: %s)", config.host, config.port, config.database_url)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
