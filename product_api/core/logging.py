from __future__ import annotations

import logging
import sys
from typing import Optional

# uvicorn installs its own handlers on these; only their level is aligned here.
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(level: str = "INFO", *, sql_echo: bool = False) -> None:
    """
    Configure logging for the service process.

    The root logger gets one stdout handler (first call only). uvicorn's
    loggers follow LOG_LEVEL, and SQL statements are logged at INFO when
    DB_ECHO is on, through the same handler instead of SQLAlchemy's own.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    for name in SERVER_LOGGERS:
        logging.getLogger(name).setLevel(numeric_level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if sql_echo else logging.WARNING)

    root = logging.getLogger()
    if root.handlers:
        return

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        stream=sys.stdout,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "product_api")
