"""
Central logging configuration for planner_lite.

Installs a colorized console handler and keeps chatty third-party loggers at
WARNING so batch saves do not flood the console with per-request lines.
"""

import logging
import os
import sys
from typing import Optional

from colorlog import ColoredFormatter

LOG_FORMAT = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"

LOG_COLORS: dict[str, str] = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

# Third-party loggers that log every request at DEBUG/INFO
NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "asyncio")


def _resolve_level(level_name: Optional[str], default: int) -> int:
    if isinstance(level_name, str) and level_name.strip():
        level = logging.getLevelName(level_name.strip().upper())
        if isinstance(level, int):
            return level
    return default


def configure_lite_logging(
    debug_mode: bool = False,
    force_debug: Optional[bool] = None,
    level_name: Optional[str] = None,
) -> int:
    """
    Configure logging for planner_lite.

    Args:
        debug_mode: Whether to enable debug logging for planner_lite modules
        force_debug: Override debug mode setting (None to use env var detection)
        level_name: Root level name from configuration (e.g. "INFO")

    Returns:
        The root log level that was applied

    Environment Variables:
        PLANNER_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        PLANNER_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("PLANNER_DEBUG", "").lower() in ("1", "true", "yes", "on")
    env_log_level = os.getenv("PLANNER_LOG_LEVEL", "")

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else _resolve_level(level_name, logging.INFO)
    root_level = _resolve_level(env_log_level, root_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add a handler if none exist to avoid duplicate output
    if not root_logger.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S", log_colors=LOG_COLORS))
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("planner_lite").setLevel(logging.DEBUG if final_debug else root_level)

    root_logger.debug("Logging initialized at level %s", logging.getLevelName(root_level))
    return root_level


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for name in ("planner_lite", *NOISY_LOGGERS):
        status[name] = logging.getLevelName(logging.getLogger(name).level)
    return status
