"""Bounded message log with a paginated terminal viewport."""
from __future__ import annotations

__version__ = "0.1.0"

from .log_buffer import MAX_LOG_LENGTH, TRUNCATED_LOG_LENGTH, LogBuffer
from .viewport import ROWS_TO_DISPLAY, Button, Viewport, ViewportState
from .wrapper import LINE_MAX_LEN, wrap

__all__ = [
    "LINE_MAX_LEN",
    "MAX_LOG_LENGTH",
    "ROWS_TO_DISPLAY",
    "TRUNCATED_LOG_LENGTH",
    "Button",
    "LogBuffer",
    "Viewport",
    "ViewportState",
    "__version__",
    "wrap",
]
