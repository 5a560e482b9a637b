"""Terminal geometry and ANSI constants."""
from __future__ import annotations

import shutil
from types import SimpleNamespace

# ── Mutable terminal geometry ─────────────────────────────────────────────────
# Updated on SIGWINCH.

geo = SimpleNamespace(cols=0, rows=0)


def reinit_geometry() -> None:
    """Re-read terminal size and update the global geo namespace."""
    sz = shutil.get_terminal_size((80, 24))
    geo.cols = min(sz.columns, 120)
    geo.rows = sz.lines


reinit_geometry()  # initial read at import time


def sep(width: int | None = None) -> str:
    """Horizontal separator, full terminal width unless *width* is given."""
    return SEP_COLOR + "\u2500" * (geo.cols if width is None else width) + R


# ── ANSI helpers ──────────────────────────────────────────────────────────────

R = "\033[0m"
B = "\033[1m"
DIM = "\033[2m"
REVERSE = "\033[7m"

TITLE = "\033[38;2;255;165;0m"
SEP_COLOR = "\033[38;2;80;80;80m"
HEADER_DIM = "\033[38;2;100;100;100m"

CLEAR_EOL = "\033[K"
CLEAR_SCREEN = "\033[2J\033[H"
HOME = "\033[H"
CURSOR_HIDE = "\033[?25l"
CURSOR_SHOW = "\033[?25h"
BELL = "\a"
