"""Frame rendering for the message log viewport."""
from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Protocol, Sequence, TextIO

from .terminal import (
    B, CLEAR_EOL, CLEAR_SCREEN, CURSOR_HIDE, CURSOR_SHOW, DIM, HEADER_DIM,
    HOME, R, REVERSE, TITLE, geo, sep,
)
from .viewport import ROWS_TO_DISPLAY

if TYPE_CHECKING:
    from .viewport import Viewport

DEFAULT_TITLE = "Message Log"
KEY_HINTS = "\u2191/\u2193 move  \u2190/\u2192 page  q close"


class Renderer(Protocol):
    """Anything that can draw the visible part of a viewport."""

    def render(self, visible_slice: Sequence[str], cursor_row: int) -> None:
        ...


def _fit(line: str, width: int) -> str:
    """Pad or crop *line* to exactly *width* columns."""
    if width <= 0:
        return ""
    if len(line) > width:
        return line[: width - 1] + "\u2026"
    return f"{line:<{width}}"


# ── Frame ─────────────────────────────────────────────────────────────────────

def render_status_bar(cursor_row: int, offset: int, total: int) -> str:
    """Position readout on the left, key hints on the right."""
    if total == 0:
        pos = "  (empty)"
    else:
        pos = f"  line {offset + cursor_row + 1}/{total}"
    return f"{B}{pos}{R}{DIM}  \u00b7  {KEY_HINTS}{R}"


def render_frame(
    lines: Sequence[str],
    cursor_row: int,
    offset: int,
    total: int,
    *,
    rows: int = ROWS_TO_DISPLAY,
    cols: int | None = None,
    title: str = DEFAULT_TITLE,
) -> str:
    """Build one full frame as a single ANSI string.

    Layout, top to bottom: separator, title, "lines above" indicator,
    *rows* content rows (the cursor row in reverse video), "lines below"
    indicator, separator, status bar.  Every row ends with a
    clear-to-end-of-line so a frame can be drawn over the previous one.
    """
    if cols is None:
        cols = geo.cols
    K = CLEAR_EOL
    width = max(0, cols - 2)

    buf = [f"{sep(cols)}{K}\n", f"  {TITLE}{B}{title}{R}{K}\n"]

    if offset > 0:
        buf.append(f"{HEADER_DIM}  \u2191 {offset} lines above{R}{K}\n")
    else:
        buf.append(f"{K}\n")

    for row in range(rows):
        if row < len(lines):
            text = _fit(lines[row], width)
            if row == cursor_row:
                buf.append(f" {REVERSE}{text}{R}{K}\n")
            else:
                buf.append(f" {text}{K}\n")
        else:
            buf.append(f"{K}\n")

    below = total - offset - len(lines)
    if below > 0:
        buf.append(f"{HEADER_DIM}  \u2193 {below} lines below{R}{K}\n")
    else:
        buf.append(f"{K}\n")

    buf.append(f"{sep(cols)}{K}\n")
    buf.append(f"{render_status_bar(cursor_row, offset, total)}{K}")
    return "".join(buf)


# ── Terminal renderer ─────────────────────────────────────────────────────────

class TerminalRenderer:
    """Draws viewport frames to a terminal stream.

    The viewport only hands over the visible slice and the cursor row;
    the scroll offset and line count for the indicators come from the
    viewport bound with :meth:`attach`.
    """

    def __init__(
        self,
        rows: int = ROWS_TO_DISPLAY,
        stream: TextIO | None = None,
        *,
        title: str = DEFAULT_TITLE,
        cols: int | None = None,
    ) -> None:
        self.rows = rows
        self.stream = stream if stream is not None else sys.stdout
        self.title = title
        self.cols = cols
        self._viewport: Viewport | None = None
        self._first = True

    def attach(self, viewport: Viewport) -> None:
        self._viewport = viewport
        viewport.renderer = self

    def invalidate(self) -> None:
        """Force a full screen clear on the next frame (after a resize)."""
        self._first = True

    def render(self, visible_slice: Sequence[str], cursor_row: int) -> None:
        vp = self._viewport
        if vp is not None:
            offset, total = vp.scroll_offset, vp.total_count()
        else:
            offset, total = 0, len(visible_slice)

        prefix = CURSOR_HIDE + (CLEAR_SCREEN if self._first else HOME)
        self._first = False
        frame = render_frame(
            visible_slice, cursor_row, offset, total,
            rows=self.rows, cols=self.cols, title=self.title,
        )
        self.stream.write(prefix + frame)
        self.stream.flush()

    def clear(self) -> None:
        """Erase the screen and restore the terminal cursor."""
        self.stream.write(CLEAR_SCREEN + CURSOR_SHOW)
        self.stream.flush()
        self._first = True
