from __future__ import annotations

import os
import sys


def is_tty_available() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def supports_fullscreen_ui() -> bool:
    """The picker needs both ends of a real terminal that understands cursor addressing."""
    if os.environ.get("TERM", "") == "dumb":
        return False
    return is_tty_available()
