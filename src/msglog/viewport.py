"""Cursor and paging state machine over a snapshot of the log."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .log_buffer import LogBuffer

if TYPE_CHECKING:
    from .renderer import Renderer

ROWS_TO_DISPLAY = 9


class Button(enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    CANCEL = "cancel"


@dataclass(frozen=True)
class ViewportState:
    cursor: int = 0
    scroll_offset: int = 0

    @property
    def absolute(self) -> int:
        """Index of the selected line in the whole log."""
        return self.cursor + self.scroll_offset


class Viewport:
    """Window of *rows* consecutive lines into a :class:`LogBuffer`.

    The viewport works on a snapshot taken by :meth:`open` or
    :meth:`refresh`; appends made in between are not seen until the next
    refresh.  ``cursor`` is the row inside the window, ``scroll_offset``
    the index of the first visible line.
    """

    def __init__(
        self,
        buffer: LogBuffer,
        rows: int = ROWS_TO_DISPLAY,
        renderer: Renderer | None = None,
    ) -> None:
        if rows < 1:
            raise ValueError("rows must be >= 1")
        self.buffer = buffer
        self.rows = rows
        self.renderer = renderer
        self._lines: tuple[str, ...] = ()
        self._cursor = 0
        self._scroll = 0
        self._open = False

    # ── Lifecycle ─────────────────────────────────────────────────────────

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        """Show the tail of the log with the last line selected."""
        self._open = True
        self.refresh()

    def refresh(self) -> None:
        """Pick up buffer changes and jump back to the newest line."""
        self._lines = self.buffer.snapshot()
        self.move_cursor_to_end()

    def close(self) -> None:
        self._open = False

    # ── State ─────────────────────────────────────────────────────────────

    @property
    def state(self) -> ViewportState:
        return ViewportState(self._cursor, self._scroll)

    @property
    def scroll_offset(self) -> int:
        return self._scroll

    def cursor_row_index(self) -> int:
        return self._cursor

    def total_count(self) -> int:
        return len(self._lines)

    def visible_slice(self) -> tuple[str, ...]:
        return self._lines[self._scroll : self._scroll + self.rows]

    def selected_line(self) -> str | None:
        """The line under the cursor, or ``None`` for an empty log."""
        if not self._lines:
            return None
        return self._lines[self._cursor + self._scroll]

    def _max_scroll(self) -> int:
        return max(0, len(self._lines) - self.rows)

    def _max_cursor(self) -> int:
        return max(0, min(self.rows, len(self._lines)) - 1)

    def _set(self, cursor: int, scroll: int) -> bool:
        """Clamp and apply a new state.  Returns True if anything moved."""
        cursor = max(0, min(cursor, self._max_cursor()))
        scroll = max(0, min(scroll, self._max_scroll()))
        if (cursor, scroll) == (self._cursor, self._scroll):
            return False
        self._cursor, self._scroll = cursor, scroll
        self._render()
        return True

    def _render(self) -> None:
        if self.renderer is not None and self._open:
            self.renderer.render(self.visible_slice(), self._cursor)

    def redraw(self) -> None:
        """Render the current state again without moving."""
        self._render()

    # ── Navigation ────────────────────────────────────────────────────────

    def move_cursor_to_end(self) -> None:
        """Select the last line, scrolled so the window ends on it."""
        n = len(self._lines)
        last = max(n - 1, 0)
        self._cursor = min(last, self.rows - 1)
        self._scroll = n - self.rows if n > self.rows else 0
        self._render()

    def process_input(self, button: Button) -> bool:
        """Apply one navigation input.

        Returns True when the input was handled: the view moved or was
        closed.  Inputs at a boundary, or with nothing to move, return
        False and leave the state untouched.
        """
        if not self._open:
            return False
        if button is Button.CANCEL:
            self.close()
            return True

        n = len(self._lines)
        rows = self.rows
        cursor, scroll = self._cursor, self._scroll
        pos = cursor + scroll

        if button is Button.UP:
            if pos > 0:
                if cursor > 0:
                    return self._set(cursor - 1, scroll)
                return self._set(cursor, scroll - 1)
        elif button is Button.DOWN:
            if pos < n - 1:
                if cursor < rows - 1:
                    return self._set(cursor + 1, scroll)
                if scroll < n - rows:
                    return self._set(cursor, scroll + 1)
        elif button is Button.LEFT:
            # page back by rows-1 entries
            if pos > 0:
                if scroll >= rows - 1:
                    return self._set(0, scroll - (rows - 1))
                return self._set(0, 0)
        elif button is Button.RIGHT:
            # page forward by rows-1 entries
            if pos <= n - 1:
                if scroll + rows + (rows - 1) < n:
                    return self._set(rows - 1, scroll + (rows - 1))
                return self._set(rows - 1, n - rows)
        return False
