"""Centralized logger configuration for the svcat CLI.

Command output goes to stdout, so log records are written to stderr with a
timestamped format that stays consistent across modules.
"""

import logging
import os
import sys
from typing import Optional, TextIO

# Track if root logger has been configured
_root_logger_configured = False

# Third-party loggers that are far too chatty at DEBUG
_NOISY_LOGGERS = ["urllib3", "urllib3.connectionpool"]


def configure_root_logger(
    level: Optional[str] = None,
    *,
    stream: Optional[TextIO] = None,
    force: bool = False,
) -> None:
    """Configure the root logger with standard formatting.

    Called once at CLI startup. Subsequent calls are no-ops unless ``force``
    is set, which the ``--verbose`` flag uses to switch to DEBUG.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, reads from SVCAT_LOG_LEVEL env var or defaults to WARNING.
        stream: Where to write records. Defaults to stderr.
        force: Reconfigure even if already configured.
    """
    global _root_logger_configured

    if _root_logger_configured and not force:
        return

    if level is None:
        level = os.environ.get("SVCAT_LOG_LEVEL", "WARNING")
    level = level.upper()

    formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Keep request-level noise out unless someone asks for it explicitly
    noisy_level = level if level not in ("DEBUG", "INFO") else "WARNING"
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)

    _root_logger_configured = True


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Return a logger for ``name``, configuring the root logger on first use.

    Args:
        name: Logger name (typically __name__ of the calling module)
        level: Optional log level override. If None, inherits from root.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.warning("Instance not ready yet")
        2024-01-15 10:30:45.123 | WARNING  | svcat.poller | Instance not ready yet
    """
    if not _root_logger_configured:
        configure_root_logger()

    logger = logging.getLogger(name)

    if level is not None:
        logger.setLevel(level.upper())

    return logger
