"""Logging for the model catalog.

Console output goes to stderr at the level named by ``MODELCATALOG_LOG_LEVEL``
(WARNING when unset). When a log directory is configured, every record down to
DEBUG is also written to a dated file, with ``extra=`` context appended as JSON.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union


LOGGER_NAME = "modelcatalog"
LOG_LEVEL_ENV_VAR = "MODELCATALOG_LOG_LEVEL"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord(LOGGER_NAME, logging.INFO, __file__, 0, "", None, None))
) | {"message", "asctime"}


def parse_level(name: Optional[str]) -> Optional[int]:
    """Numeric level for a name such as ``"debug"``; ``None`` when unrecognised."""
    if not name:
        return None
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else None


def log_file_path(log_dir: Union[str, Path]) -> Path:
    """The file records are written to for ``log_dir``, one per day."""
    return Path(log_dir) / f"modelcatalog_{datetime.now():%Y%m%d}.log"


class StructuredFormatter(logging.Formatter):
    """UTC ISO-8601 timestamps, with ``extra=`` context appended as sorted JSON."""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        if not context:
            return message
        return f"{message} | {json.dumps(context, sort_keys=True, default=str)}"


class CatalogLogger:
    """Wrapper over the ``modelcatalog`` stdlib logger.

    The underlying logger stays at DEBUG; the console handler filters by the
    configured level and the optional file handler keeps everything.
    """

    def __init__(self, name: str = LOGGER_NAME, log_dir: Optional[Path] = None):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        self._console_handler = self._find_or_add_console_handler()

        if log_dir is not None:
            self.attach_file_handler(log_file_path(log_dir))

    def _find_or_add_console_handler(self) -> logging.Handler:
        for handler in self.logger.handlers:
            if type(handler) is logging.StreamHandler:
                return handler
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(parse_level(os.getenv(LOG_LEVEL_ENV_VAR)) or logging.WARNING)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        self.logger.addHandler(handler)
        return handler

    @property
    def _file_handler(self) -> Optional[logging.FileHandler]:
        # Looked up on the stdlib logger so every wrapper sees the same file.
        for handler in self.logger.handlers:
            if isinstance(handler, logging.FileHandler):
                return handler
        return None

    @property
    def log_file(self) -> Optional[Path]:
        """Path of the active log file, if any."""
        handler = self._file_handler
        return Path(handler.baseFilename) if handler is not None else None

    def set_console_level(self, level_name: str) -> None:
        """Change console verbosity; unknown names are reported and ignored."""
        level = parse_level(level_name)
        if level is None:
            self.logger.warning("[logging] Unknown log level %r; keeping current level", level_name)
            return
        self._console_handler.setLevel(level)

    def attach_file_handler(self, log_file: Path) -> Path:
        """Write every record to ``log_file``, replacing any previous log file."""
        log_file = Path(os.path.abspath(log_file))
        if self.log_file == log_file:
            return log_file

        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(StructuredFormatter("%(asctime)s [%(levelname)s] %(message)s"))

        previous = self._file_handler
        if previous is not None:
            self.logger.removeHandler(previous)
            previous.close()
        self.logger.addHandler(handler)
        return log_file

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.error(message, *args, **kwargs)


_logger: Optional[CatalogLogger] = None


def get_logger() -> CatalogLogger:
    """Process-wide catalog logger."""
    global _logger
    if _logger is None:
        _logger = CatalogLogger()
    return _logger


def init_logger(log_dir: Optional[Path] = None) -> CatalogLogger:
    """Re-create the process-wide logger, optionally logging to ``log_dir``."""
    global _logger
    _logger = CatalogLogger(log_dir=log_dir)
    return _logger
