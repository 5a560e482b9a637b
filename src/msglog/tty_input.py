"""Key decoding from /dev/tty on a background thread."""
from __future__ import annotations

import logging
import os
import queue
import re
import select
import signal
import termios
import threading

from .viewport import Button

logger = logging.getLogger(__name__)

# Regex to detect a trailing partial escape sequence
_PARTIAL_ESC = re.compile(rb"\x1b(?:$|\[[^a-zA-Z~]*$)")

_KEYS: list[tuple[bytes, Button]] = [
    (b"\x1b[5~", Button.LEFT),   # Page Up
    (b"\x1b[6~", Button.RIGHT),  # Page Down
    (b"\x1b[A", Button.UP),
    (b"\x1b[B", Button.DOWN),
    (b"\x1b[C", Button.RIGHT),
    (b"\x1b[D", Button.LEFT),
    (b"k", Button.UP),
    (b"j", Button.DOWN),
    (b"h", Button.LEFT),
    (b"l", Button.RIGHT),
    (b"q", Button.CANCEL),
    (b"x", Button.CANCEL),
]

_CSI_RE = re.compile(rb"\x1b\[[^a-zA-Z~]*[a-zA-Z~]")


def _enter_raw_mode(fd: int) -> list[object]:
    """Switch *fd* to non-canonical, no-echo, non-blocking reads.

    Returns the previous attributes for :meth:`TtyInput.cleanup`.
    """
    old = termios.tcgetattr(fd)
    raw = termios.tcgetattr(fd)
    raw[3] &= ~(termios.ICANON | termios.ECHO)
    raw[6][termios.VMIN] = 0
    raw[6][termios.VTIME] = 0
    termios.tcsetattr(fd, termios.TCSANOW, raw)
    return old


class TtyInput:
    """Reads keys from ``/dev/tty`` and queues :class:`Button` presses."""

    def __init__(self) -> None:
        self._events: queue.SimpleQueue[Button] = queue.SimpleQueue()
        self._tty_fd: int | None = None
        self._tty_old: list[object] | None = None

    @property
    def active(self) -> bool:
        return self._tty_fd is not None

    def start(self) -> None:
        """Open ``/dev/tty`` in raw mode and start the reader thread."""
        # SIGTTIN must be ignored in the *main* thread (signal.signal is a
        # no-op when called from a non-main thread).
        try:
            signal.signal(signal.SIGTTIN, signal.SIG_IGN)
        except (OSError, ValueError):
            pass

        try:
            self._tty_fd = os.open("/dev/tty", os.O_RDWR | os.O_NOCTTY)
            self._tty_old = _enter_raw_mode(self._tty_fd)
        except (OSError, termios.error):
            logger.exception("cannot open /dev/tty, keyboard input disabled")
            self.cleanup()
            return

        threading.Thread(target=self._input_loop, daemon=True).start()

    def drain(self) -> list[Button]:
        """Return every queued button press, oldest first."""
        out: list[Button] = []
        while True:
            try:
                out.append(self._events.get_nowait())
            except queue.Empty:
                return out

    def _input_loop(self) -> None:
        pending = b""
        while True:
            fd = self._tty_fd  # cleanup() may reset this from the main thread
            if fd is None:
                break
            try:
                ready, _, _ = select.select([fd], [], [], 0.05)
                chunk = os.read(fd, 256) if ready else b""
            except OSError:
                break
            if chunk:
                pending = self._parse(pending + chunk)

    def _parse(self, data: bytes) -> bytes:
        """Queue a button for every recognised key in *data*.

        Returns any trailing partial sequence to be prepended to the
        next read.
        """
        m = _PARTIAL_ESC.search(data)
        if m:
            remainder = data[m.start() :]
            data = data[: m.start()]
        else:
            remainder = b""

        i = 0
        while i < len(data):
            for seq, button in _KEYS:
                if data.startswith(seq, i):
                    self._events.put(button)
                    i += len(seq)
                    break
            else:
                # Skip unknown CSI sequences whole, anything else bytewise
                csi = _CSI_RE.match(data, i)
                i = csi.end() if csi else i + 1
        return remainder

    def cleanup(self) -> None:
        """Put the terminal back and close the tty fd."""
        fd, self._tty_fd = self._tty_fd, None
        old, self._tty_old = self._tty_old, None
        if fd is None:
            return
        if old is not None:
            try:
                termios.tcsetattr(fd, termios.TCSANOW, old)
            except (OSError, termios.error):
                logger.warning("could not restore terminal attributes")
        try:
            os.close(fd)
        except OSError:
            pass
