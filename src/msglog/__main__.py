"""Main entry point for msglog."""
from __future__ import annotations

import argparse
import logging
import signal
import sys
import time

from . import __version__
from .log_buffer import MAX_LOG_LENGTH, LogBuffer
from .renderer import TerminalRenderer
from .source import MessageTail, read_messages
from .terminal import BELL, CURSOR_SHOW, reinit_geometry
from .tty_input import TtyInput
from .viewport import ROWS_TO_DISPLAY, Button, Viewport
from .wrapper import LINE_MAX_LEN

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {n}")
    return n


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="msglog",
        description="Scrollable, bounded message log viewer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input is one message per line.  A line holding a JSON string, or a JSON
object with a "msg" or "message" field, may carry embedded newlines.

Examples:
  msglog battle.log
  msglog battle.log --follow          # keep appending as the file grows
  some-producer | msglog --rows 15
        """,
    )
    p.add_argument(
        "path", nargs="?", default="",
        help="Message file (default: read stdin)",
    )
    p.add_argument(
        "--follow", action="store_true",
        help="Keep polling PATH and append new messages as they arrive",
    )
    p.add_argument(
        "--rows", type=_positive_int, default=ROWS_TO_DISPLAY, metavar="N",
        help=f"Visible rows (default: {ROWS_TO_DISPLAY})",
    )
    p.add_argument(
        "--width", type=_positive_int, default=LINE_MAX_LEN, metavar="N",
        help=f"Maximum display line length (default: {LINE_MAX_LEN})",
    )
    p.add_argument(
        "--max-length", type=_positive_int, default=MAX_LOG_LENGTH, metavar="N",
        help=f"Lines kept before the oldest are dropped (default: {MAX_LOG_LENGTH})",
    )
    p.add_argument(
        "--echo", action="store_true",
        help="Also log every raw incoming message (see --log-file)",
    )
    p.add_argument(
        "--bell", action="store_true",
        help="Ring the terminal bell on each handled key",
    )
    p.add_argument(
        "--log-file", metavar="PATH",
        help="Write debug log to PATH",
    )
    p.add_argument(
        "--version", action="version",
        version=f"%(prog)s {__version__}",
    )
    return p


def _load_initial(
    args: argparse.Namespace, parser: argparse.ArgumentParser,
) -> tuple[list[str], MessageTail | None]:
    """Read the messages available at startup."""
    if args.path in ("", "-"):
        if args.follow:
            parser.error("--follow needs a file path")
        if sys.stdin.isatty():
            return [], None
        return read_messages(sys.stdin), None

    tail = MessageTail(args.path)
    messages = tail.poll()
    if not args.follow:
        # No more writes are expected, take the unterminated last line too
        messages.extend(tail.flush())
    return messages, tail


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(message)s",
        )

    buffer = LogBuffer(
        max_length=args.max_length,
        line_max_len=args.width,
        echo_to_console=args.echo,
    )

    try:
        messages, tail = _load_initial(args, parser)
    except OSError as exc:
        print(f"msglog: {exc}", file=sys.stderr)
        return 1
    if tail is not None and not args.follow and not tail.path.exists():
        print(f"msglog: {args.path}: no such file", file=sys.stderr)
        return 1

    for message in messages:
        buffer.append(message)
    logger.debug("loaded %d messages into %d lines", len(messages), len(buffer))

    viewport = Viewport(buffer, rows=args.rows)
    renderer = TerminalRenderer(rows=args.rows)
    renderer.attach(viewport)
    keys = TtyInput()

    def cleanup_and_exit(*_: object) -> None:
        keys.cleanup()
        try:
            renderer.clear()
        except Exception:
            pass
        sys.exit(0)

    signal.signal(signal.SIGTERM, cleanup_and_exit)

    # ── SIGWINCH: flag for main loop to reinit geometry ───────────────
    resize_pending = False

    def _on_sigwinch(_sig: int, _frame: object) -> None:
        nonlocal resize_pending
        resize_pending = True

    if hasattr(signal, "SIGWINCH"):
        signal.signal(signal.SIGWINCH, _on_sigwinch)

    keys.start()
    if not keys.active:
        # Nothing to navigate with: print the tail once and leave
        viewport.open()
        sys.stdout.write("\n" + CURSOR_SHOW)
        sys.stdout.flush()
        return 0

    viewport.open()
    try:
        while viewport.is_open:
            if resize_pending:
                resize_pending = False
                reinit_geometry()
                renderer.invalidate()
                viewport.redraw()

            pressed = keys.drain()
            for button in pressed:
                handled = viewport.process_input(button)
                if not viewport.is_open:
                    break
                if handled and args.bell and button is not Button.CANCEL:
                    sys.stdout.write(BELL)
                    sys.stdout.flush()
            if not viewport.is_open:
                break

            if args.follow and tail is not None:
                try:
                    new = tail.poll()
                    for message in new:
                        buffer.append(message)
                    if new:
                        viewport.refresh()
                except Exception:
                    logger.exception("content update failed")

            # 60 fps right after input, 20 fps idle
            time.sleep(0.016 if pressed else 0.05)
    except KeyboardInterrupt:
        pass
    finally:
        keys.cleanup()
        renderer.clear()

    return 0


if __name__ == "__main__":
    sys.exit(main())
