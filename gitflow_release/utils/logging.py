"""Logging utilities."""

import logging
import os
import sys
from typing import Mapping, Optional

LOGGER_NAME = "gitflow_release"

# Workflow log lines already carry a timestamp
ACTIONS_FORMAT = "%(levelname)s - %(message)s"
LOCAL_FORMAT = "[%(asctime)s] %(levelname)s - %(message)s"


def resolve_level(debug: bool = False, environ: Optional[Mapping[str, str]] = None) -> int:
    """
    DEBUG when asked for or when the workflow is re-run with debug logging.

    GitHub sets ``RUNNER_DEBUG=1`` for runs started with "Enable debug logging".
    """
    environ = os.environ if environ is None else environ
    if debug or environ.get("RUNNER_DEBUG") == "1":
        return logging.DEBUG
    return logging.INFO


def setup_logging(
    debug: bool = False,
    environ: Optional[Mapping[str, str]] = None
) -> logging.Logger:
    """
    Setup logging for the release action.

    Everything goes to stdout so it shows up in the workflow run log
    next to the ``::error::`` annotations. Timestamps are left out when
    running inside Actions.

    Args:
        debug: Force debug logging
        environ: Environment to read (default: os.environ)

    Returns:
        Configured logger
    """
    environ = os.environ if environ is None else environ
    level = resolve_level(debug, environ)
    format_str = ACTIONS_FORMAT if environ.get("GITHUB_ACTIONS") == "true" else LOCAL_FORMAT

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
