"""myshell - an interactive shell with a raw-keystroke line editor."""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
