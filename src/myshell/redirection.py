"""Parse output redirection operators and route command output."""

import logging
from dataclasses import dataclass
from typing import TextIO

logger = logging.getLogger(__name__)

REDIRECT_OUT = ">"
REDIRECT_OUT_FD = "1>"
REDIRECT_APPEND = ">>"
REDIRECT_APPEND_FD = "1>>"
REDIRECT_ERR = "2>"
REDIRECT_ERR_APPEND = "2>>"

STDOUT_OPERATORS = frozenset({REDIRECT_OUT, REDIRECT_OUT_FD, REDIRECT_APPEND, REDIRECT_APPEND_FD})
STDERR_OPERATORS = frozenset({REDIRECT_ERR, REDIRECT_ERR_APPEND})
APPEND_OPERATORS = frozenset({REDIRECT_APPEND, REDIRECT_APPEND_FD, REDIRECT_ERR_APPEND})
OPERATORS = STDOUT_OPERATORS | STDERR_OPERATORS


class RedirectionError(ValueError):
    """A redirection operator was not followed by a target path."""


@dataclass(frozen=True)
class Redirect:
    """Where one stream of a command goes."""

    operator: str
    target: str

    @property
    def append(self) -> bool:
        return self.operator in APPEND_OPERATORS


@dataclass(frozen=True)
class CommandResult:
    """Complete output of one command, produced before any routing happens."""

    output: str = ""
    error: str = ""


def extract_redirection(tokens: list[str]) -> tuple[list[str], Redirect | None]:
    """Split a redirection directive off the argument list.

    Only the first operator is honored; everything after it belongs to the
    directive and anything beyond the target is ignored.

    Example: ['hi', '>', 'out.txt'] -> (['hi'], Redirect('>', 'out.txt'))

    Raises RedirectionError if the operator has no target.
    """
    for i, token in enumerate(tokens):
        if token in OPERATORS:
            if i + 1 >= len(tokens):
                raise RedirectionError("syntax error near unexpected token `newline'")
            return tokens[:i], Redirect(operator=token, target=tokens[i + 1])
    return list(tokens), None


def write_target(path: str, text: str, append: bool = False) -> None:
    """Write text to a redirection target, truncating unless appending."""
    mode = "a" if append else "w"
    with open(path, mode, encoding="utf-8") as fh:
        fh.write(text)


def route_output(
    result: CommandResult,
    redirect: Redirect | None,
    stdout: TextIO,
    stderr: TextIO,
) -> None:
    """Send a command's output and error text to the terminal or a file.

    A failure to write the target is reported on stdout and does not raise.
    """
    if redirect is None:
        stdout.write(result.output)
        if result.error:
            stderr.write(result.error)
        return

    logger.debug("redirecting %s to %s", redirect.operator, redirect.target)
    match redirect.operator:
        case op if op in STDERR_OPERATORS:
            if result.output:
                stdout.write(result.output)
            routed = result.error
        case _:
            routed = result.output
            if result.error:
                stderr.write(result.error)

    try:
        write_target(redirect.target, routed, append=redirect.append)
    except (OSError, ValueError) as e:
        # ValueError: the path contains a NUL byte
        logger.debug("write to %s failed: %s", redirect.target, e)
        reason = e.strerror if isinstance(e, OSError) and e.strerror else e
        stdout.write(f"myshell: {redirect.target}: {reason}\n")
