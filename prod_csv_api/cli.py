"""
Command line entry point.

Modes:
  serve          Ask for the operator login, then start the HTTP API (default)
  hash-password  Print a bcrypt hash to use as APP_PASS_HASH
"""

from __future__ import annotations

import argparse
import getpass
from typing import List, Optional

import uvicorn
from loguru import logger

from .config import Settings, get_settings
from .errors import ConfigError
from .log import configure_logging
from .login import Credentials, LoginStatus, hash_password, run_login


def handle_serve(settings: Settings) -> int:
    if not settings.has_credentials:
        logger.error("Missing APP_USER or APP_PASS_HASH in environment")
        return 1

    credentials = Credentials(settings.app_user, settings.app_pass_hash)
    try:
        state = run_login(
            credentials,
            max_attempts=settings.login_max_attempts,
            backoff_unit=settings.login_backoff_seconds,
        )
    except KeyboardInterrupt:
        logger.warning("Login aborted")
        return 130

    if state.status is not LoginStatus.GRANTED:
        return 1

    logger.info("Starting server on http://{}:{} (docs at /docs)", settings.host, settings.port)
    uvicorn.run(
        "prod_csv_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_config=None,
    )
    return 0


def handle_hash_password() -> int:
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Repeat password: "):
        logger.error("Passwords do not match")
        return 1
    print(hash_password(password))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prod-csv-api",
        description="Serve the latest rows of production CSV logs over HTTP",
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="log in and start the HTTP API")
    sub.add_parser("hash-password", help="print a bcrypt hash for APP_PASS_HASH")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "hash-password":
        configure_logging(log_dir=None)
        return handle_hash_password()

    try:
        settings = get_settings()
    except ConfigError as exc:
        configure_logging(log_dir=None)
        logger.error(str(exc))
        return 1

    configure_logging(settings.log_level, settings.log_dir)
    try:
        return handle_serve(settings)
    except ConfigError as exc:
        logger.error(str(exc))
        return 1
