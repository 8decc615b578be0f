"""Logging setup for the pestr command line."""
import logging
import os
import sys

LOG_LEVEL_ENV = "PESTR_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def log_level(verbosity: int = 0) -> int:
    """-v -> INFO, -vv -> DEBUG; otherwise PESTR_LOG_LEVEL (default WARNING)."""
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    name = (os.environ.get(LOG_LEVEL_ENV) or "WARNING").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(verbosity: int = 0) -> None:
    """Configure the root logger once; report output goes to stdout, logs to stderr."""
    global _configured
    level = log_level(verbosity)
    if _configured:
        logging.getLogger().setLevel(level)
        return
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    _configured = True
