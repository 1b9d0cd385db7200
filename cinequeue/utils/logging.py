"""Colored, marker-aware logging for CineQueue."""

import logging
import re
import sys
from collections.abc import Callable
from functools import lru_cache
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import ClassVar

import colorama
from colorama import Fore, Style

from cinequeue.utils import terminal

__all__ = ["CleanFormatter", "ColorFormatter", "Logger", "get_logger"]

# $$'tt0133093'$$ renders as a highlighted quoted value,
# $${page: 2}$$ as dimmed structured context.
QUOTED_PATTERN = re.compile(r"\$\$'((?:[^']|'(?!\$\$))*)'\$\$")
BRACED_PATTERN = re.compile(r"\$\$\{(.*?)\}\$\$")

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class _MarkerFormatter(logging.Formatter):
    """Base formatter that rewrites highlight markers for a single format call."""

    quoted_repl = "'\\1'"
    braced_repl = "{\\1}"

    def render_markers(self, msg: str) -> str:
        msg = QUOTED_PATTERN.sub(self.quoted_repl, msg)
        return BRACED_PATTERN.sub(self.braced_repl, msg)

    def decorate_level(self, levelname: str) -> str:
        return levelname

    def format(self, record: logging.LogRecord) -> str:
        saved = (record.msg, record.levelname)
        record.levelname = self.decorate_level(record.levelname)
        if isinstance(record.msg, str):
            record.msg = self.render_markers(record.msg)
        try:
            return super().format(record)
        finally:
            record.msg, record.levelname = saved


class CleanFormatter(_MarkerFormatter):
    """Strips the markers; used for log files and terminals without ANSI support."""


class ColorFormatter(_MarkerFormatter):
    """Colors level names and highlighted values with colorama escapes.

    Quoted values are light blue, structured context is dimmed, and level
    names use ``LEVEL_COLORS``.
    """

    LEVEL_COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.GREEN,
        "SUCCESS": Fore.GREEN + Style.BRIGHT,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.RED + Style.BRIGHT,
    }

    quoted_repl = f"{Fore.LIGHTBLUE_EX}'\\1'{Style.RESET_ALL}"
    braced_repl = f"{Style.DIM}{{\\1}}{Style.RESET_ALL}"

    def decorate_level(self, levelname: str) -> str:
        color = self.LEVEL_COLORS.get(levelname, "")
        return f"{color}{levelname}{Style.RESET_ALL}"


def _caller_owner(depth: int) -> str | None:
    """Name of the class whose method sits ``depth`` frames above the caller."""
    try:
        frame_locals = sys._getframe(depth + 1).f_locals
    except ValueError:
        return None

    owner = frame_locals.get("self")
    if owner is not None and not isinstance(owner, logging.Logger):
        return type(owner).__name__
    cls = frame_locals.get("cls")
    if isinstance(cls, type):
        return cls.__name__
    return None


def _enable_color() -> bool:
    try:
        if not terminal.supports_color():
            return False
        if sys.platform == "win32":
            colorama.just_fix_windows_console()
        else:
            colorama.init()
    except (AttributeError, ImportError, OSError):
        return False
    return True


class Logger(logging.Logger):
    """Logger with a SUCCESS level that tags messages with the calling class."""

    SUCCESS = logging.INFO + 5

    def __init__(self, name, level=logging.NOTSET):
        super().__init__(name, level)
        if logging.getLevelName(self.SUCCESS) != "SUCCESS":
            logging.addLevelName(self.SUCCESS, "SUCCESS")

    def _log(
        self,
        level,
        msg,
        args,
        exc_info=None,
        extra=None,
        stack_info=False,
        stacklevel=1,
    ):
        # Frames: _caller_owner <- _log <- info/debug/success <- caller
        owner = _caller_owner(2)
        if owner and isinstance(msg, str):
            msg = f"{owner}: {msg}"

        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )

    def success(self, msg, *args, **kwargs):
        """Log ``msg`` at the SUCCESS level."""
        if self.isEnabledFor(self.SUCCESS):
            self._log(self.SUCCESS, msg, args, **kwargs)

    def setup(self, log_level: str, log_dir: str | None = None) -> None:
        """Replace this logger's handlers with a console and optional file handler.

        Args:
            log_level (str): Level name, including the custom 'SUCCESS'.
            log_dir (str | None): Directory for ``<name>.<level>.log``; when
                None only the console handler is attached.
        """
        level = self.SUCCESS if log_level == "SUCCESS" else getattr(logging, log_level)
        self.setLevel(level)
        for handler in list(self.handlers):
            self.removeHandler(handler)

        fmt = "%(asctime)s - %(name)s - %(levelname)s\t"
        if level <= logging.DEBUG:
            fmt += "%(filename)s:%(lineno)d\t"
        fmt += "%(message)s"

        factory: Callable[..., logging.Formatter] = (
            ColorFormatter if _enable_color() else CleanFormatter
        )
        handlers: list[logging.Handler] = []

        if log_dir is not None:
            directory = Path(log_dir)
            directory.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                directory / f"{self.name}.{log_level}.log",
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
            file_handler.setFormatter(CleanFormatter(fmt, datefmt=DATE_FORMAT))
            handlers.append(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(factory(fmt, datefmt=DATE_FORMAT))
        handlers.append(console_handler)

        for handler in handlers:
            handler.setLevel(level)
            self.addHandler(handler)


logging.setLoggerClass(Logger)


def _get_logger(
    log_name: str, log_level: str = "INFO", log_dir: str | Path | None = None
) -> Logger:
    """Return the named Logger, (re)configured with the given level and directory."""
    logger = logging.getLogger(log_name)
    if not isinstance(logger, Logger):
        logger = Logger(log_name)

    logger.setup(str(log_level), str(log_dir) if log_dir is not None else None)
    return logger


@lru_cache(maxsize=1)
def get_logger() -> Logger:
    """Application logger configured from ``log_level`` and ``<data>/logs``."""
    from cinequeue.config.settings import get_config

    config = get_config()
    return _get_logger(
        log_name="CineQueue",
        log_level=str(config.log_level),
        log_dir=config.data_path / "logs",
    )
