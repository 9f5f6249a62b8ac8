"""Logging setup shared by every ZeTranslate module.

Loggers live under a single namespace so that the command-line entry point can attach
console and file handlers once, while library modules only ever call ``LoggerUtils.get_logger``.
"""

from __future__ import annotations

import logging
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Final, Literal, NamedTuple, Self, TextIO

if TYPE_CHECKING:
    from models.config_models import General

__all__: list[str] = ["LogLevel", "LoggerUtils"]

type LevelType = Literal["NOTSET", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_LOG_LEVEL: Final[int] = logging.INFO
DEFAULT_NAMESPACE: Final[str] = "ZeTranslate"

LOG_FILE_MAX_BYTES: Final[int] = 2 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 2
CONSOLE_FORMAT: Final[str] = "%(message)s"
FILE_FORMAT: Final[str] = "%(asctime)s %(levelname)-8s %(process)5d %(lineno)4d %(name)-40s\t%(funcName)s\t%(message)s"


class LogLevel(NamedTuple):
    """Logging level as both name and numeric value."""

    name: str
    value: int


def _make_console_handler(*, silent: bool) -> logging.Handler:
    if silent:
        return logging.NullHandler()
    handler: logging.StreamHandler[TextIO] = logging.StreamHandler(sys.stderr)
    # Prompts and notifications share stderr, so only problems are echoed there.
    handler.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _make_file_handler(filename: str) -> logging.Handler:
    """Open a UTF-8 rotating log file that records everything down to DEBUG.

    Raises:
        OSError: If the file cannot be opened.
    """
    handler = RotatingFileHandler(
        filename, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


class LoggerUtils:
    """Singleton that attaches handlers to the ZeTranslate logger hierarchy.

    Attributes:
        _LOGGER_NAMESPACE (str): Prefix of every logger name handed out by ``get_logger``.
        _configured (bool): True once handlers are attached.
        _instance (LoggerUtils | None): The singleton instance.
    """

    _LOGGER_NAMESPACE: ClassVar[str] = DEFAULT_NAMESPACE
    _configured: ClassVar[bool] = False
    _instance: ClassVar[Self | None] = None

    def __new__(cls, *args, **kwargs) -> Self:
        _ = args, kwargs
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, filename: str | Path = "", *, use_null_console: bool = False) -> None:
        """Attach handlers to the namespace root logger. Later calls do nothing.

        Args:
            filename (str | Path): Log file path. Empty disables file logging.
            use_null_console (bool): Discard console output instead of writing to stderr.
        """
        if LoggerUtils._configured:
            return

        self.root_logger: logging.Logger = logging.getLogger(self._LOGGER_NAMESPACE)
        self.root_logger.setLevel(DEFAULT_LOG_LEVEL)
        self._attach(_make_console_handler(silent=use_null_console or sys.stderr is None))

        log_file: str = str(filename).strip()
        if log_file:
            try:
                self._attach(_make_file_handler(log_file))
            except OSError as err:
                self.root_logger.error("Cannot open log file %s (%s); file logging is disabled", log_file, err)

        warnings.showwarning = self._log_warning
        LoggerUtils._configured = True

    def _attach(self, handler: logging.Handler) -> None:
        if any(type(existing) is type(handler) for existing in self.root_logger.handlers):
            self.root_logger.warning("A %s is already attached", type(handler).__name__)
            handler.close()
            return
        self.root_logger.addHandler(handler)

    def _log_warning(
        self,
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: TextIO | None = None,
        line: str | None = None,
    ) -> None:
        _ = file, line
        self.root_logger.warning("%s (%s:%d): %s", category.__name__, filename, lineno, message)

    @classmethod
    def initialize(cls, namespace: str) -> None:
        """Use ``namespace`` as the root of every logger name.

        Raises:
            RuntimeError: If handlers are already attached.
        """
        if cls._configured:
            msg = f"Logging is already configured under '{cls._LOGGER_NAMESPACE}'"
            raise RuntimeError(msg)
        cls._LOGGER_NAMESPACE = namespace

    @classmethod
    def from_general(cls, general: General, *, debug: bool = False) -> LoggerUtils:
        """Configure logging from the ``[GENERAL]`` section.

        Args:
            general (General): Section holding ``LOG_FILE``, ``LOG_LEVEL`` and ``DEBUG``.
            debug (bool): Use DEBUG whatever level is configured.
        """
        log_file: str = str(Path(general.LOG_FILE).expanduser().resolve()) if general.LOG_FILE else ""
        utils = cls(log_file)
        utils.set_level("DEBUG" if debug or general.DEBUG else general.LOG_LEVEL)
        return utils

    def set_level(self, level: LevelType | str) -> None:
        """Set the namespace level. Unknown names fall back to INFO with a warning."""
        value: int | None = logging.getLevelNamesMapping().get(level.upper())
        if value is None:
            self.root_logger.warning("Unknown logging level '%s', using INFO", level)
            value = DEFAULT_LOG_LEVEL
        self.root_logger.setLevel(value)

    def get_level(self) -> LogLevel:
        value: int = self.root_logger.getEffectiveLevel()
        return LogLevel(logging.getLevelName(value), value)

    @staticmethod
    def get_logger(name: str | None = None) -> logging.Logger:
        """Logger ``name`` inside the namespace, or the namespace root when ``name`` is None."""
        namespace: str = LoggerUtils._LOGGER_NAMESPACE
        if not namespace:
            return logging.getLogger(name or None)
        return logging.getLogger(f"{namespace}.{name}" if name else namespace)
