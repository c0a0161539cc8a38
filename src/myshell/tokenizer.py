"""Split a raw input line into arguments, honoring quotes and backslash escapes."""

from enum import Enum, auto

SEPARATOR = " "
ESCAPE = "\\"
SINGLE_QUOTE = "'"
DOUBLE_QUOTE = '"'
TILDE = "~"

# Inside double quotes a backslash only escapes these characters
DOUBLE_QUOTE_ESCAPABLE = frozenset({DOUBLE_QUOTE, ESCAPE, "$"})


class State(Enum):
    BARE = auto()
    BARE_ESCAPED = auto()
    SINGLE = auto()
    DOUBLE = auto()
    DOUBLE_ESCAPED = auto()


def transition(state: State, ch: str) -> tuple[State, str | None]:
    """Consume one character.

    Returns the next state and the text to append to the current token.
    A ``None`` text means the character separates tokens.
    """
    match state, ch:
        case State.BARE, " ":
            return State.BARE, None
        case State.BARE, "\\":
            return State.BARE_ESCAPED, ""
        case State.BARE, "'":
            return State.SINGLE, ""
        case State.BARE, '"':
            return State.DOUBLE, ""
        case State.BARE_ESCAPED, _:
            return State.BARE, ch
        case State.SINGLE, "'":
            return State.BARE, ""
        case State.DOUBLE, '"':
            return State.BARE, ""
        case State.DOUBLE, "\\":
            return State.DOUBLE_ESCAPED, ""
        case State.DOUBLE_ESCAPED, c if c in DOUBLE_QUOTE_ESCAPABLE:
            return State.DOUBLE, ch
        case State.DOUBLE_ESCAPED, _:
            return State.DOUBLE, ESCAPE + ch
        case _:
            return state, ch


def tokenize(line: str, home: str | None = None) -> list[str]:
    """Tokenize a shell input line.

    Single quotes keep everything literally, backslashes included. Outside
    quotes a backslash makes the next character literal. Inside double quotes
    a backslash is only consumed before ``"``, ``\\`` and ``$``.

    Never raises: an unterminated quote is closed at the end of the line.
    Runs of spaces collapse, so no empty token is ever produced.

    With ``home`` set, an unquoted ``~`` that starts a word and is followed
    by ``/``, a space or the end of the line is replaced by ``home``.
    """
    tokens: list[str] = []
    current: list[str] = []
    state = State.BARE
    word_start = True

    for i, ch in enumerate(line):
        if home and word_start and state is State.BARE and ch == TILDE:
            if line[i + 1 : i + 2] in ("", "/", SEPARATOR):
                current.append(home)
                word_start = False
                continue

        state, text = transition(state, ch)
        if text is None:
            if current:
                tokens.append("".join(current))
                current = []
            word_start = True
            continue

        word_start = False
        if text:
            current.append(text)

    if current:
        tokens.append("".join(current))
    return tokens
