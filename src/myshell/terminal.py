"""Raw terminal mode and the control sequences used by the line editor."""

import contextlib
import logging
import os
import signal
import termios
import tty
from collections.abc import Iterator

logger = logging.getLogger(__name__)

BELL = "\a"
CRLF = "\r\n"
ERASE_CHAR = "\b \b"
CLEAR_LINE = "\r\x1b[K"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


class TerminalError(OSError):
    """The terminal could not be switched to raw mode."""


def is_terminal(fd: int) -> bool:
    return os.isatty(fd)


@contextlib.contextmanager
def raw_mode(fd: int) -> Iterator[None]:
    """Put the terminal on ``fd`` in raw mode for the duration of the block.

    The previous mode is restored on every exit path, including SIGTERM,
    which is turned into SystemExit while the block runs.
    """
    try:
        saved = termios.tcgetattr(fd)
        tty.setraw(fd)
    except (termios.error, OSError) as e:
        raise TerminalError(f"cannot enter raw mode: {e}") from e
    logger.debug("terminal %d in raw mode", fd)

    def _terminate(signum, frame):
        raise SystemExit(128 + signum)

    previous = signal.signal(signal.SIGTERM, _terminate)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        logger.debug("terminal %d restored", fd)

