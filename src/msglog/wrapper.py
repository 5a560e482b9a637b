"""Message splitting, word wrapping and short-line merging."""
from __future__ import annotations

LINE_MAX_LEN = 50


def _wrap_words(part: str, max_len: int) -> list[str]:
    """Greedy word-wrap on single spaces.

    A word longer than *max_len* is kept whole on its own row; it is
    never hyphenated or hard-broken.
    """
    rows: list[str] = []
    acc = ""
    for word in part.split(" "):
        joined = f"{acc} {word}" if acc else word
        if acc and len(joined) > max_len:
            rows.append(acc)
            acc = word
        else:
            acc = joined
    rows.append(acc)
    return rows


def wrap(message: str, max_len: int = LINE_MAX_LEN) -> list[str]:
    """Turn one raw *message* into display lines of at most *max_len* chars.

    The message is split on newlines.  Over-long parts are word-wrapped;
    a part whose length plus the next part's length stays below
    *max_len* is merged with it using a single space.  ``wrap("")``
    yields ``[""]``.
    """
    parts = message.split("\n")
    lines: list[str] = []
    i = 0
    n = len(parts)
    while i < n:
        part = parts[i]
        if len(part) > max_len:
            lines.extend(_wrap_words(part, max_len))
            i += 1
        elif i + 1 < n and len(part) + len(parts[i + 1]) < max_len:
            lines.append(f"{part} {parts[i + 1]}")
            i += 2
        else:
            lines.append(part)
            i += 1
    return lines
