"""Tests for msglog.viewport."""
from __future__ import annotations

import random

import pytest

from msglog.log_buffer import LogBuffer
from msglog.viewport import ROWS_TO_DISPLAY, Button, Viewport, ViewportState


def _viewport(n: int, rows: int = ROWS_TO_DISPLAY) -> Viewport:
    buf = LogBuffer()
    for i in range(n):
        buf.append(f"line {i}")
    vp = Viewport(buf, rows=rows)
    vp.open()
    return vp


def _goto(vp: Viewport, cursor: int, scroll: int) -> None:
    vp._cursor, vp._scroll = cursor, scroll


class RecordingRenderer:
    def __init__(self) -> None:
        self.calls: list[tuple[tuple[str, ...], int]] = []

    def render(self, visible_slice, cursor_row):
        self.calls.append((tuple(visible_slice), cursor_row))


# ── Opening / move to end ────────────────────────────────────────────────────

def test_open_short_log():
    vp = _viewport(3)
    assert vp.state == ViewportState(cursor=2, scroll_offset=0)
    assert vp.visible_slice() == ("line 0", "line 1", "line 2")
    assert vp.selected_line() == "line 2"


def test_open_long_log():
    vp = _viewport(20)
    assert vp.state == ViewportState(cursor=8, scroll_offset=11)
    assert vp.visible_slice() == tuple(f"line {i}" for i in range(11, 20))
    assert vp.selected_line() == "line 19"


def test_open_exactly_rows():
    vp = _viewport(9)
    assert vp.state == ViewportState(cursor=8, scroll_offset=0)


def test_open_empty_log():
    vp = _viewport(0)
    assert vp.state == ViewportState(0, 0)
    assert vp.visible_slice() == ()
    assert vp.selected_line() is None
    assert vp.total_count() == 0


def test_move_cursor_to_end_idempotent():
    vp = _viewport(30)
    _goto(vp, 2, 5)
    vp.move_cursor_to_end()
    first = vp.state
    vp.move_cursor_to_end()
    assert vp.state == first == ViewportState(8, 21)


def test_state_absolute():
    assert ViewportState(3, 10).absolute == 13


def test_snapshot_isolated_until_refresh():
    vp = _viewport(5)
    vp.buffer.append("new line")
    assert vp.total_count() == 5
    vp.refresh()
    assert vp.total_count() == 6
    assert vp.selected_line() == "new line"


def test_refresh_jumps_to_end():
    vp = _viewport(30)
    vp.process_input(Button.LEFT)
    vp.buffer.append("latest")
    vp.refresh()
    assert vp.state == ViewportState(8, 22)
    assert vp.selected_line() == "latest"


def test_invalid_rows():
    with pytest.raises(ValueError):
        Viewport(LogBuffer(), rows=0)


# ── UP / DOWN ────────────────────────────────────────────────────────────────

def test_up_moves_cursor_first():
    vp = _viewport(20)
    assert vp.process_input(Button.UP) is True
    assert vp.state == ViewportState(7, 11)


def test_up_scrolls_at_top_row():
    vp = _viewport(20)
    _goto(vp, 0, 5)
    assert vp.process_input(Button.UP) is True
    assert vp.state == ViewportState(0, 4)


def test_up_at_first_line_unhandled():
    vp = _viewport(20)
    _goto(vp, 0, 0)
    assert vp.process_input(Button.UP) is False
    assert vp.state == ViewportState(0, 0)


def test_down_at_last_line_unhandled():
    vp = _viewport(20)
    assert vp.process_input(Button.DOWN) is False
    assert vp.state == ViewportState(8, 11)


def test_down_moves_cursor_then_scrolls():
    vp = _viewport(20)
    _goto(vp, 7, 0)
    assert vp.process_input(Button.DOWN) is True
    assert vp.state == ViewportState(8, 0)
    assert vp.process_input(Button.DOWN) is True
    assert vp.state == ViewportState(8, 1)


def test_down_short_log_stops_at_last():
    vp = _viewport(3)
    _goto(vp, 0, 0)
    assert vp.process_input(Button.DOWN) is True
    assert vp.process_input(Button.DOWN) is True
    assert vp.process_input(Button.DOWN) is False
    assert vp.state == ViewportState(2, 0)


# ── LEFT / RIGHT paging ──────────────────────────────────────────────────────

def test_right_pages_forward():
    vp = _viewport(30)
    _goto(vp, 0, 0)
    assert vp.process_input(Button.RIGHT) is True
    # 0 + 9 + 8 = 17 < 30
    assert vp.state == ViewportState(8, 8)


def test_right_clamps_to_end():
    vp = _viewport(30)
    _goto(vp, 0, 16)
    # 16 + 9 + 8 = 33 >= 30
    assert vp.process_input(Button.RIGHT) is True
    assert vp.state == ViewportState(8, 21)


def test_right_at_end_unhandled():
    vp = _viewport(30)
    assert vp.process_input(Button.RIGHT) is False
    assert vp.state == ViewportState(8, 21)


def test_right_on_last_page_moves_cursor_only():
    vp = _viewport(30)
    _goto(vp, 3, 21)
    assert vp.process_input(Button.RIGHT) is True
    assert vp.state == ViewportState(8, 21)


def test_right_short_log_clamps_cursor():
    vp = _viewport(4)
    _goto(vp, 0, 0)
    assert vp.process_input(Button.RIGHT) is True
    assert vp.state == ViewportState(3, 0)


def test_left_pages_back():
    vp = _viewport(30)
    assert vp.process_input(Button.LEFT) is True
    assert vp.state == ViewportState(0, 13)


def test_left_near_top_goes_to_start():
    vp = _viewport(30)
    _goto(vp, 4, 5)
    assert vp.process_input(Button.LEFT) is True
    assert vp.state == ViewportState(0, 0)


def test_left_at_start_unhandled():
    vp = _viewport(30)
    _goto(vp, 0, 0)
    assert vp.process_input(Button.LEFT) is False


def test_left_moves_cursor_only():
    vp = _viewport(5)
    assert vp.process_input(Button.LEFT) is True
    assert vp.state == ViewportState(0, 0)


# ── Empty log ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "button", [Button.UP, Button.DOWN, Button.LEFT, Button.RIGHT],
)
def test_empty_log_ignores_navigation(button):
    vp = _viewport(0)
    assert vp.process_input(button) is False
    assert vp.state == ViewportState(0, 0)


# ── CANCEL ───────────────────────────────────────────────────────────────────

def test_cancel_closes():
    vp = _viewport(20)
    before = vp.state
    assert vp.process_input(Button.CANCEL) is True
    assert not vp.is_open
    assert vp.state == before


def test_input_after_close_unhandled():
    vp = _viewport(20)
    vp.process_input(Button.CANCEL)
    assert vp.process_input(Button.UP) is False
    assert vp.process_input(Button.CANCEL) is False


# ── Invariants ───────────────────────────────────────────────────────────────

@pytest.mark.parametrize("n", [0, 1, 5, 9, 10, 17, 30, 120])
def test_random_walk_keeps_invariants(n):
    rng = random.Random(n)
    vp = _viewport(n)
    rows = vp.rows
    moves = [Button.UP, Button.DOWN, Button.LEFT, Button.RIGHT]
    for _ in range(500):
        vp.process_input(rng.choice(moves))
        s = vp.state
        assert 0 <= s.scroll_offset <= max(0, n - rows)
        assert 0 <= s.cursor <= max(0, min(rows, n) - 1)
        if n:
            assert 0 <= s.absolute <= n - 1
        assert vp.visible_slice() == vp.buffer.snapshot()[
            s.scroll_offset : s.scroll_offset + rows
        ]


def test_every_line_reachable_with_down():
    vp = _viewport(25)
    _goto(vp, 0, 0)
    seen = [vp.selected_line()]
    while vp.process_input(Button.DOWN):
        seen.append(vp.selected_line())
    assert seen == [f"line {i}" for i in range(25)]


# ── Rendering hook ───────────────────────────────────────────────────────────

def test_renderer_called_on_open_and_moves():
    buf = LogBuffer()
    for i in range(12):
        buf.append(f"line {i}")
    rec = RecordingRenderer()
    vp = Viewport(buf, renderer=rec)
    vp.open()
    assert rec.calls[-1] == (tuple(f"line {i}" for i in range(3, 12)), 8)

    calls = len(rec.calls)
    vp.process_input(Button.UP)
    assert len(rec.calls) == calls + 1
    assert rec.calls[-1][1] == 7


def test_renderer_not_called_on_unhandled():
    rec = RecordingRenderer()
    vp = Viewport(LogBuffer(), renderer=rec)
    vp.open()
    calls = len(rec.calls)
    vp.process_input(Button.DOWN)
    assert len(rec.calls) == calls


def test_renderer_not_called_while_closed():
    rec = RecordingRenderer()
    vp = Viewport(LogBuffer(), renderer=rec)
    vp.refresh()
    assert rec.calls == []
