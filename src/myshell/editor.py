"""Keystroke-level line editor with tab completion."""

import codecs
import contextlib
import logging
from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager
from enum import IntEnum
from typing import BinaryIO, TextIO, TypeAlias

from myshell.builtins import BUILTIN_REGISTRY
from myshell.completion import complete, longest_common_prefix
from myshell.environment import Environment
from myshell.terminal import BELL, CLEAR_LINE, CRLF, ERASE_CHAR, HIDE_CURSOR, SHOW_CURSOR

logger = logging.getLogger(__name__)

PROMPT = "$ "


class Key(IntEnum):
    INTERRUPT = 0x03
    TAB = 0x09
    NEWLINE = 0x0A
    RETURN = 0x0D
    BACKSPACE = 0x7F


ModeGuard: TypeAlias = Callable[[], AbstractContextManager[None]]


class LineEditor:
    """Reads one line at a time from raw keystrokes.

    ``mode`` is entered around every read; for a real terminal it is the
    raw-mode guard. With ``echo`` off nothing is written back, which suits
    piped input.
    """

    def __init__(
        self,
        env: Environment,
        stdin: BinaryIO,
        stdout: TextIO,
        *,
        prompt: str = PROMPT,
        builtins: Mapping[str, object] = BUILTIN_REGISTRY,
        mode: ModeGuard = contextlib.nullcontext,
        echo: bool = True,
    ) -> None:
        self.env = env
        self.stdin = stdin
        self.stdout = stdout
        self.prompt = prompt
        self.builtins = builtins
        self.mode = mode
        self.echo = echo
        self.buffer: list[str] = []
        self._tab_count = 0
        self._last_candidates: list[str] | None = None

    def read_line(self) -> str:
        """Block until Enter and return the typed line.

        Raises EOFError when input ends on an empty line and KeyboardInterrupt
        on Ctrl-C. The terminal mode is restored before either propagates.
        """
        with self.mode():
            return self._read()

    def _read(self) -> str:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self.buffer = []
        self._reset_tabs()

        while True:
            data = self.stdin.read(1)
            if not data:
                if not self.buffer:
                    raise EOFError
                return self._finish()

            match data[0]:
                case Key.INTERRUPT:
                    self._write(CRLF)
                    raise KeyboardInterrupt
                case Key.NEWLINE | Key.RETURN:
                    return self._finish()
                case Key.TAB:
                    self._complete()
                    continue
                case Key.BACKSPACE:
                    if self.buffer:
                        self.buffer.pop()
                        self._write(ERASE_CHAR)
                case _:
                    self.buffer.extend(decoder.decode(data))

            self._reset_tabs()
            self._redraw()

    def _finish(self) -> str:
        line = "".join(self.buffer)
        self.buffer = []
        self._write(CRLF)
        return line

    def _current_word(self) -> str:
        text = "".join(self.buffer)
        if not text or text.endswith(" "):
            return ""
        return text.rsplit(" ", 1)[-1]

    def _replace_word(self, word: str, replacement: str) -> None:
        del self.buffer[len(self.buffer) - len(word) :]
        self.buffer.extend(replacement)

    def _complete(self) -> None:
        word = self._current_word()
        candidates = complete(word, self.env, self.builtins)
        if candidates != self._last_candidates:
            self._tab_count = 0
        self._last_candidates = candidates
        self._tab_count += 1
        logger.debug("tab %d on %r: %d candidates", self._tab_count, word, len(candidates))

        match candidates:
            case []:
                self._write(BELL)
            case [only]:
                self._replace_word(word, only + " ")
                self._reset_tabs()
                self._redraw()
            case _:
                common = longest_common_prefix(candidates)
                if len(common) > len(word):
                    self._replace_word(word, common)
                    self._tab_count = 0
                    self._redraw()
                elif self._tab_count < 2:
                    self._write(BELL)
                else:
                    self._write(CRLF + "  ".join(candidates) + CRLF)
                    self._tab_count = 0
                    self._redraw()

    def _reset_tabs(self) -> None:
        self._tab_count = 0
        self._last_candidates = None

    def _redraw(self) -> None:
        self._write(HIDE_CURSOR + CLEAR_LINE + self.prompt + "".join(self.buffer) + SHOW_CURSOR)

    def _write(self, text: str) -> None:
        if self.echo:
            self.stdout.write(text)
            self.stdout.flush()
