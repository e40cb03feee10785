"""
Logging setup for brewdeck entrypoints.

The CLI calls ``setup_logging()`` once per process; the web command
runs inside that same process, so Flask request handlers inherit it.
Modules log through ``logging.getLogger(__name__)``.

Level precedence:
    --debug / --verbose / --quiet  >  BREWDECK_LOG_LEVEL  >  WARNING

BREWDECK_LOG_FILE adds a file handler; BREWDECK_LOG_FILE_LEVEL sets its
level independently of the console.
"""

from __future__ import annotations

import logging
import os
import sys

# Console formats, widening with verbosity
_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_CONSOLE_DEFAULT = ("%(levelname)s: %(message)s", None)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# werkzeug logs every request at INFO
_NOISY_LOGGERS = ("urllib3", "werkzeug")

ENV_LEVEL = "BREWDECK_LOG_LEVEL"
ENV_FILE = "BREWDECK_LOG_FILE"
ENV_FILE_LEVEL = "BREWDECK_LOG_FILE_LEVEL"


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level name from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Install console (and optional file) handlers on the root logger.

    Args:
        level: Console level name.
        log_file: Path for a full-detail log file, if any.
        log_file_level: Level for the file handler (defaults to ``level``).
        quiet_third_party: Pin chatty library loggers to WARNING unless
            the console is at DEBUG.
    """
    console_level = parse_level(level)
    if console_level <= logging.DEBUG:
        fmt, datefmt = _CONSOLE_FORMATS[logging.DEBUG]
    elif console_level <= logging.INFO:
        fmt, datefmt = _CONSOLE_FORMATS[logging.INFO]
    else:
        fmt, datefmt = _CONSOLE_DEFAULT

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else console_level
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def parse_level(level: str | None) -> int:
    """Level name → numeric level; anything unknown is WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
