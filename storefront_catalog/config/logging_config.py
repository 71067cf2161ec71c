# storefront_catalog/config/logging_config.py

"""Run-scoped logging for the catalog pipeline.

One invocation writes one file, ``logs/run_<YYYYMMDD_HHMMSS>.log``,
holding DEBUG output of every ``storefront_catalog.*`` logger. Only
warnings and errors reach stderr, which keeps JSON on stdout clean.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from storefront_catalog.config.settings import Settings

PIPELINE_LOGGER = "storefront_catalog"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(funcName)s:%(lineno)d | %(message)s"
)
_STDERR_FORMAT = "%(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _handler(
    handler: logging.Handler, level: int, fmt: str,
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    return handler


def setup_logging() -> Path:
    """Attach the run file and stderr handlers to the pipeline logger.

    Calling it again is a no-op that returns the file already in use.

    Returns:
        Path of this run's log file.
    """
    pipeline = logging.getLogger(PIPELINE_LOGGER)
    pipeline.setLevel(logging.DEBUG)

    for existing in pipeline.handlers:
        if isinstance(existing, logging.FileHandler):
            return Path(existing.baseFilename)

    Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = Settings.LOGS_DIR / f"run_{stamp}.log"

    pipeline.addHandler(
        _handler(
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.DEBUG,
            _FILE_FORMAT,
        )
    )
    pipeline.addHandler(
        _handler(
            logging.StreamHandler(sys.stderr),
            logging.WARNING,
            _STDERR_FORMAT,
        )
    )
    pipeline.debug("Run log opened at %s", log_file)
    return log_file
