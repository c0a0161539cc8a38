"""Main shell loop: prompt, read, tokenize, dispatch, route output."""

import contextlib
import functools
import logging
import os
import subprocess
import sys
from collections.abc import Mapping
from dataclasses import replace
from typing import TextIO

from myshell.builtins import BUILTIN_REGISTRY, BuiltinError, BuiltinHandler
from myshell.editor import PROMPT, LineEditor
from myshell.environment import Environment
from myshell.expansion import expand_variables
from myshell.redirection import CommandResult, RedirectionError, extract_redirection, route_output
from myshell.terminal import TerminalError, is_terminal, raw_mode
from myshell.tokenizer import tokenize

logger = logging.getLogger(__name__)

LOG_FILE_ENV = "MYSHELL_LOG"
LOG_LEVEL_ENV = "MYSHELL_LOG_LEVEL"


def run_program(path: str, argv: list[str], env: Environment) -> CommandResult:
    """Run an external program to completion and capture both streams.

    ``argv[0]`` is passed through as typed; ``path`` is what gets executed.
    A program that cannot be started reports the OS error as its error text.
    """
    try:
        completed = subprocess.run(
            argv,
            executable=path,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            cwd=env.pwd or None,
            env=env.child_environ(),
        )
    except (OSError, ValueError) as e:
        logger.debug("failed to start %s: %s", path, e)
        reason = e.strerror if isinstance(e, OSError) and e.strerror else e
        return CommandResult(error=f"{argv[0]}: {reason}\n")

    logger.debug("%s exited with %d", path, completed.returncode)
    return CommandResult(
        output=completed.stdout.decode("utf-8", errors="replace"),
        error=completed.stderr.decode("utf-8", errors="replace"),
    )


class Shell:
    """Shell state and main loop."""

    def __init__(
        self,
        env: Environment | None = None,
        *,
        builtins: Mapping[str, BuiltinHandler] = BUILTIN_REGISTRY,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.env = env if env is not None else Environment.from_os()
        self.env.builtin_names = frozenset(builtins)
        self.builtins = builtins
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    def execute(self, command: str, args: list[str]) -> CommandResult:
        """Run a builtin or external command and collect its result.

        An unknown command yields its "not found" message as ordinary output.
        """
        handler = self.builtins.get(command)
        if handler is not None:
            try:
                return CommandResult(output=handler(args, self.env))
            except BuiltinError as e:
                return CommandResult(error=f"{e}\n")

        path = self.env.find_executable(command)
        if path is None:
            logger.debug("%s not found on PATH", command)
            return CommandResult(output=f"{command}: command not found\n")
        return run_program(path, [command, *args], self.env)

    def run_command(self, line: str) -> None:
        """Full processing of one input line:

        1. Expand $HOME and $PWD
        2. Tokenize (quotes, escapes, leading ~)
        3. Split off the command name
        4. Extract the redirection directive
        5. Execute as builtin or external program
        6. Route output and error text
        """
        line = expand_variables(line.strip(), self.env)
        tokens = tokenize(line, home=self.env.home)
        if not tokens:
            self.stdout.write("no command provided\n")
            return

        command, args = tokens[0], tokens[1:]
        try:
            args, redirect = extract_redirection(args)
        except RedirectionError as e:
            self.stderr.write(f"myshell: {e}\n")
            return

        if redirect is not None:
            redirect = replace(redirect, target=self.env.resolve(redirect.target))

        result = self.execute(command, args)
        route_output(result, redirect, self.stdout, self.stderr)
        self.stdout.flush()
        self.stderr.flush()

    def run(self, editor: LineEditor) -> None:
        """Main shell loop. Returns when input ends."""
        while True:
            self.stdout.write(PROMPT)
            self.stdout.flush()
            try:
                line = editor.read_line()
            except EOFError:
                break
            self.run_command(line)


def configure_logging() -> None:
    """Log to the file named by MYSHELL_LOG, if set."""
    path = os.environ.get(LOG_FILE_ENV)
    if not path:
        return
    level = os.environ.get(LOG_LEVEL_ENV, "DEBUG").upper()
    logging.basicConfig(
        filename=path,
        level=logging.getLevelNamesMapping().get(level, logging.DEBUG),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )


def main() -> None:
    """Entry point."""
    configure_logging()
    env = Environment.from_os()
    fd = sys.stdin.fileno()
    interactive = is_terminal(fd)
    mode = functools.partial(raw_mode, fd) if interactive else contextlib.nullcontext
    editor = LineEditor(env, sys.stdin.buffer, sys.stdout, mode=mode, echo=interactive)

    shell = Shell(env)
    try:
        shell.run(editor)
    except KeyboardInterrupt:
        sys.exit(130)
    except TerminalError as e:
        print(f"myshell: {e}", file=sys.stderr)
        sys.exit(1)
