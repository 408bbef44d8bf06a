"""Logging and tracing setup for the matching engine."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from groupmatch.config import config


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(*, debug: bool = False, log_file: str | None = None) -> None:
    """Configure Python logging.

    - Console output at INFO+ (or DEBUG+ when debug=True) for operational logs.
    - Rotating file output at DEBUG+ for deep diagnostics.
    - Consistent structured format for easier log parsing.
    """

    log_file = log_file or config.LOG_FILE_PATH
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler.setFormatter(formatter)

    file_handler = RotatingFileHandler(
        log_file, maxBytes=2_000_000, backupCount=5
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    # Avoid duplicate handlers when reloading in dev.
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)


def setup_langsmith() -> bool:
    """Initialize LangSmith tracing of the matching graph if enabled.

    Tracing is optional and only activated when the API key is present and
    LANGSMITH_ENABLED is true. Returns whether tracing was switched on.
    """

    if not config.LANGSMITH_ENABLED or not config.LANGSMITH_API_KEY:
        return False

    os.environ["LANGCHAIN_TRACING_V2"] = "true"
    os.environ["LANGCHAIN_API_KEY"] = config.LANGSMITH_API_KEY

    try:
        from langsmith import Client

        Client()
        logging.getLogger(__name__).info("LangSmith tracing enabled")
        return True
    except Exception as exc:  # pragma: no cover - optional dependency
        logging.getLogger(__name__).warning(
            "LangSmith initialization failed: %s", str(exc)
        )
        return False


logger = logging.getLogger(__name__)
