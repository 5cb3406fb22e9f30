"""Logging setup: colored output on stdout and plain messages in a log file."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from . import dirs

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_COLORS = {
    logging.DEBUG: "\x1b[37m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
}
_RESET = "\x1b[0m"

_installed: list[logging.Handler] = []
_previous_excepthook = None


def resolve_log_level(testing: bool, verbose: bool, env_value: str | None = None) -> int:
    """Level from LOG_LEVEL if recognised, else debug when testing or verbose."""
    default = logging.DEBUG if testing or verbose else logging.INFO
    if env_value is None:
        return default
    return _LEVELS.get(env_value.lower(), default)


def log_filename(module: str, testing: bool, now: datetime | None = None) -> str:
    """Name of the log file for a module started at ``now``."""
    moment = now if now is not None else datetime.now().astimezone()
    prefix = f"{module}-testing" if testing else module
    return moment.strftime(f"{prefix}_%Y-%m-%dT%H-%M-%S%z.log")


class _ColoredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        color = _COLORS.get(record.levelno)
        level = f"{color}{record.levelname}{_RESET}" if color else record.levelname
        text = f"[{stamp}][{level}][{record.name}]: {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def _log_uncaught(exc_type, exc, tb) -> None:
    if issubclass(exc_type, KeyboardInterrupt) and _previous_excepthook is not None:
        _previous_excepthook(exc_type, exc, tb)
        return
    logging.getLogger("panic").critical("Uncaught exception", exc_info=(exc_type, exc, tb))


def setup_logger(
    module: str,
    testing: bool = False,
    verbose: bool = False,
    log_dir: Path | None = None,
) -> Path:
    """Configure the root logger and return the path of the new log file."""
    global _previous_excepthook

    directory = Path(log_dir) if log_dir is not None else dirs.get_log_dir(module)
    directory.mkdir(parents=True, exist_ok=True)
    logfile = directory / log_filename(module, testing)

    level = resolve_log_level(testing, verbose, os.environ.get("LOG_LEVEL"))
    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(_ColoredFormatter())
    file_handler = logging.FileHandler(logfile, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter("%(message)s"))
    for handler in (stream, file_handler):
        root.addHandler(handler)
        _installed.append(handler)
    root.setLevel(level)

    if sys.excepthook is not _log_uncaught:
        _previous_excepthook = sys.excepthook
        sys.excepthook = _log_uncaught
    return logfile