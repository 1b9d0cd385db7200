"""Terminal capability detection."""

import locale
import os
import sys
from functools import lru_cache

import colorama

__all__ = ["supports_color", "supports_utf8"]

_WINDOWS_ANSI_HOSTS = ("ANSICON", "WT_SESSION")


@lru_cache(maxsize=1)
def supports_utf8() -> bool:
    """Return whether stdout can encode UTF-8 box drawing characters."""
    encoding = sys.stdout.encoding or locale.getpreferredencoding(False)
    return encoding.lower().replace("-", "").startswith("utf")


@lru_cache(maxsize=1)
def supports_color() -> bool:
    """Return whether ANSI color codes will render on stdout.

    Colors are disabled when stdout is not a TTY or when ``NO_COLOR`` is set.
    Windows consoles are only trusted when colorama patched them or a known
    ANSI-capable host is detected.

    Returns:
        bool: True if colored output should be emitted
    """
    if os.environ.get("NO_COLOR"):
        return False
    if not (hasattr(sys.stdout, "isatty") and sys.stdout.isatty()):
        return False

    if sys.platform == "win32":
        return (
            getattr(colorama, "fixed_windows_console", False)
            or any(host in os.environ for host in _WINDOWS_ANSI_HOSTS)
            or os.environ.get("TERM_PROGRAM") == "vscode"
        )

    return True
