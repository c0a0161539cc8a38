"""Expansion of $HOME and $PWD from the shell environment."""

import re

from myshell.environment import Environment

EXPANDABLE = ("HOME", "PWD")

_NAME = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")


def expand_variables(line: str, env: Environment) -> str:
    """Expand $HOME, $PWD, ${HOME} and ${PWD} in the raw input line.

    Respects quoting: nothing is expanded inside single quotes, and a
    backslash-escaped ``$`` is left for the tokenizer. Any other variable
    reference is kept literally.
    """
    result: list[str] = []
    i = 0
    quote: str | None = None  # None, "'", or '"'

    while i < len(line):
        ch = line[i]

        if ch == "\\" and quote != "'" and i + 1 < len(line):
            result.append(line[i : i + 2])
            i += 2
            continue

        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
            result.append(ch)
            i += 1
            continue

        if ch == "$" and quote != "'":
            expanded, consumed = _expand_one_var(line, i, env)
            result.append(expanded)
            i += consumed
            continue

        result.append(ch)
        i += 1

    return "".join(result)


def _expand_one_var(line: str, pos: int, env: Environment) -> tuple[str, int]:
    """Expand the reference starting at line[pos] == '$'.

    Returns (text, characters_consumed).
    """
    if line.startswith("{", pos + 1):
        end = line.find("}", pos + 2)
        if end == -1:
            return ("${", 2)
        name = line[pos + 2 : end]
        consumed = end - pos + 1
    else:
        match = _NAME.match(line, pos + 1)
        if not match:
            return ("$", 1)
        name = match.group(0)
        consumed = 1 + len(name)

    if name not in EXPANDABLE:
        return (line[pos : pos + consumed], consumed)
    return (env.home if name == "HOME" else env.pwd, consumed)

