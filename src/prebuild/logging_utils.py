"""Logging setup for prebuild.

stdout is reserved for build directives read by Cargo, so every log record
goes to stderr.
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL_ENV = "PREBUILD_LOG_LEVEL"


def setup_logging(verbose: bool = False) -> None:
    """Setup logging for an orchestration run.

    Args:
        verbose: Log at DEBUG instead of INFO. PREBUILD_LOG_LEVEL wins over both.
    """
    level = logging.DEBUG if verbose else logging.INFO
    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        level = logging.getLevelName(env_level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers when main() is called more than once (tests)
    for handler in list(logger.handlers):
        if getattr(handler, "_prebuild", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler._prebuild = True  # type: ignore[attr-defined]
    logger.addHandler(console_handler)
