# src/scheduler_db/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "scheduler.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Minimum level that reaches the terminal, by logger prefix (longest prefix wins).
# The REPL prints its own replies, so connector chatter would interleave with them.
CONSOLE_MIN_LEVELS: dict[str, int] = {
    "scheduler_db": logging.DEBUG,
    "scheduler_db.connectors": logging.WARNING,
}
THIRD_PARTY_MIN_LEVEL = logging.ERROR


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable.

    Store and CLI records pass (subject to the handler level); the console
    connector only shows WARNING+; everything else, including captured
    'py.warnings', needs ERROR+.
    """

    def __init__(self, min_levels: dict[str, int] | None = None) -> None:
        super().__init__()
        levels = CONSOLE_MIN_LEVELS if min_levels is None else min_levels
        self._prefixes = sorted(levels.items(), key=lambda kv: len(kv[0]), reverse=True)

    def min_level_for(self, name: str) -> int:
        for prefix, level in self._prefixes:
            if name == prefix or name.startswith(prefix + "."):
                return level
        return THIRD_PARTY_MIN_LEVEL

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.min_level_for(record.name)


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(_ConsoleNoiseFilter())
    return handler


def _file_handler(log_file: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(str(log_file), encoding="utf-8")
    handler.setLevel(level)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/scheduler",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console gets filtered records at console_level; <log_dir>/scheduler.log
    gets everything at file_level. Replaces existing root handlers, so call it
    once at startup. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    for handler in (_console_handler(console_level), _file_handler(log_file, file_level)):
        handler.setFormatter(fmt)
        root.addHandler(handler)

    logging.captureWarnings(True)
    return log_file
