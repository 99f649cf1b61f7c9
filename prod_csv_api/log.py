"""Loguru setup shared by the CLI and the web app."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Union

from loguru import logger


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(level: str = "INFO", log_dir: Union[str, Path, None] = "logs") -> None:
    """
    Replace loguru's default sink with console + rotating file sinks.

    ``app.log`` receives everything at ``level`` and above, ``error.log``
    only errors. Pass ``log_dir=None`` for console output only.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    )

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_format = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
        logger.add(
            log_dir / "app.log",
            level=level,
            format=file_format,
            rotation="10 MB",
            retention="30 days",
            enqueue=True,
        )
        logger.add(
            log_dir / "error.log",
            level="ERROR",
            format=file_format,
            rotation="10 MB",
            retention="30 days",
            backtrace=True,
            enqueue=True,
        )

    # uvicorn and sqlalchemy log through the stdlib
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = [InterceptHandler()]
        logging.getLogger(name).propagate = False
