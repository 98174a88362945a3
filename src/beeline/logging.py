# SPDX-License-Identifier: MIT

"""Console logging for the beeline CLI.

Log records go to stderr through Rich so they never mix with the progress
lines and tables printed on stdout.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PROJECT_PREFIX = "beeline"

# httpx logs every request URL at INFO, and the URL carries the auth token
DEFAULT_LIB_LEVELS = {"httpx": logging.WARNING, "httpcore": logging.WARNING}


class ThirdPartyPrefixFilter(logging.Filter):
    """Prefix third-party records with their top-level logger name, e.g. "[httpx]"."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(PROJECT_PREFIX):
            record.prefix = f"[{record.name.split('.')[0]}]"
        else:
            record.prefix = ""
        return True


def parse_log_level(level_name: str) -> int:
    """
    Convert a level name like "info" into its numeric logging level.

    Raises ValueError for unknown names.
    """
    level = logging.getLevelName(level_name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {level_name}")
    return level


def config_console_handler(
    level: int = logging.WARNING, debug_mode: bool = False
) -> RichHandler:
    console = Console(stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    fmt = (
        "%(prefix)s %(message)s"
        if not debug_mode
        else "%(asctime)s %(name)s: %(message)s"
    )
    handler.setFormatter(logging.Formatter(fmt=fmt))
    if not debug_mode:
        handler.addFilter(ThirdPartyPrefixFilter())

    return handler


def configure_logging(
    level: int = logging.WARNING,
    debug_mode: bool = False,
    logger_levels: Optional[dict[str, int]] = None,
) -> None:
    """
    Attach a single Rich console handler to the root logger.

    Calling this again replaces the handler instead of stacking a second one.
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)

    handler = config_console_handler(level=level, debug_mode=debug_mode)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug_mode else level)

    levels = dict(DEFAULT_LIB_LEVELS)
    if logger_levels is not None:
        levels.update(logger_levels)
    for name, lib_level in levels.items():
        logging.getLogger(name).setLevel(lib_level)
