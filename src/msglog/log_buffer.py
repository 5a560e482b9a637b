"""Capacity-bounded, append-only buffer of display lines."""
from __future__ import annotations

import logging
import threading

from .wrapper import LINE_MAX_LEN, wrap

logger = logging.getLogger(__name__)

MAX_LOG_LENGTH = 500
TRUNCATED_LOG_LENGTH = MAX_LOG_LENGTH - 100


class LogBuffer:
    """Ordered display lines, oldest first.

    Once the buffer grows past *max_length* the oldest lines are dropped
    until *truncated_length* remain, so a full buffer is not trimmed
    again on every following append.
    """

    def __init__(
        self,
        max_length: int = MAX_LOG_LENGTH,
        truncated_length: int | None = None,
        *,
        line_max_len: int = LINE_MAX_LEN,
        echo_to_console: bool = False,
    ) -> None:
        if truncated_length is None:
            truncated_length = max(0, max_length - 100)
        if truncated_length < 0:
            raise ValueError("truncated_length must be >= 0")
        if truncated_length > max_length:
            raise ValueError(
                f"truncated_length ({truncated_length}) exceeds "
                f"max_length ({max_length})"
            )
        if line_max_len < 1:
            raise ValueError("line_max_len must be >= 1")

        self.max_length = max_length
        self.truncated_length = truncated_length
        self.line_max_len = line_max_len
        self.echo_to_console = echo_to_console
        self.lock = threading.RLock()
        self._lines: list[str] = []

    def append(self, message: str) -> None:
        """Wrap *message* and add its lines to the tail."""
        if self.echo_to_console:
            logger.info("%s", message)
        wrapped = wrap(message, self.line_max_len)
        with self.lock:
            self._lines.extend(wrapped)
            if len(self._lines) > self.max_length:
                dropped = len(self._lines) - self.truncated_length
                del self._lines[:dropped]
                logger.debug(
                    "log truncated: dropped %d oldest lines, %d remain",
                    dropped, len(self._lines),
                )

    def snapshot(self) -> tuple[str, ...]:
        """Immutable copy of the current lines."""
        with self.lock:
            return tuple(self._lines)

    def total_count(self) -> int:
        with self.lock:
            return len(self._lines)

    def __len__(self) -> int:
        return self.total_count()
