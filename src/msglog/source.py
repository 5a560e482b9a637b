"""Reading messages from files and streams.

Each input line is one message.  A line holding a JSON string, or a JSON
object with a ``msg``/``message`` field, contributes that value, which
lets a message carry embedded newlines.  Any other non-blank line is
taken verbatim.
"""
from __future__ import annotations

import codecs
import json
import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

_MESSAGE_KEYS = ("msg", "message")


def _new_decoder() -> codecs.IncrementalDecoder:
    return codecs.getincrementaldecoder("utf-8")(errors="replace")


def parse_message(line: str) -> str | None:
    """Turn one input line into a message, or ``None`` for a blank line."""
    line = line.rstrip()
    if not line.strip():
        return None
    if line[0] not in "\"{":
        return line
    try:
        obj = json.loads(line)
    except json.JSONDecodeError:
        return line

    if isinstance(obj, str):
        return obj
    if isinstance(obj, dict):
        for key in _MESSAGE_KEYS:
            if key in obj:
                value = obj[key]
                return value if isinstance(value, str) else str(value)
    return line


def read_messages(lines: Iterable[str]) -> list[str]:
    """Parse every line of a text stream (or any iterable of lines)."""
    out: list[str] = []
    for line in lines:
        msg = parse_message(line)
        if msg is not None:
            out.append(msg)
    return out


class MessageTail:
    """Incrementally read messages appended to a file.

    Tracks the read offset between polls, buffers a trailing line that
    has no newline yet, and starts over from the beginning when the file
    shrinks (truncated or replaced).

    Example:
        >>> tail = MessageTail(Path("game.log"))
        >>> tail.poll()  # messages written since the last poll
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.offset = 0
        self.partial = ""
        # Holds the bytes of a character split across two reads
        self._decoder = _new_decoder()

    def _read_new_lines(self) -> list[str]:
        if not self.path.exists():
            return []

        size = self.path.stat().st_size
        if size < self.offset:
            logger.debug("%s shrank, re-reading from start", self.path)
            self.offset = 0
            self.partial = ""
            self._decoder = _new_decoder()
        if size == self.offset:
            return []

        with self.path.open("rb") as f:
            f.seek(self.offset)
            data = f.read()
        self.offset += len(data)

        text = self.partial + self._decoder.decode(data)
        lines = text.split("\n")
        # Last element is "" after a trailing newline, else an incomplete line
        self.partial = lines.pop()
        return lines

    def poll(self) -> list[str]:
        """Messages completed since the previous poll."""
        return read_messages(self._read_new_lines())

    def flush(self) -> list[str]:
        """Take the unterminated last line as a message.

        For when no more writes are expected; undecodable trailing bytes
        become U+FFFD.
        """
        text = self.partial + self._decoder.decode(b"", final=True)
        self.partial = ""
        return read_messages([text])
