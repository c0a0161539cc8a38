"""Tab completion candidates for command names."""

import logging
import os
from collections.abc import Iterable, Mapping

from myshell.builtins import BUILTIN_REGISTRY
from myshell.environment import Environment

logger = logging.getLogger(__name__)


def complete(
    prefix: str,
    env: Environment,
    builtins: Mapping[str, object] = BUILTIN_REGISTRY,
) -> list[str]:
    """Builtins and PATH entries starting with ``prefix``, sorted and unique.

    An empty prefix has no candidates. The search path is read on every call.
    """
    if not prefix:
        return []

    matches = {name for name in builtins if name.startswith(prefix)}
    matches.update(_path_commands(prefix, env))
    return sorted(matches)


def longest_common_prefix(candidates: Iterable[str]) -> str:
    """Longest string every candidate starts with ("" for no candidates)."""
    return os.path.commonprefix(list(candidates))


def _path_commands(prefix: str, env: Environment) -> set[str]:
    """Names of non-directory entries on the search path starting with ``prefix``."""
    commands: set[str] = set()

    for directory in env.search_path():
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    if entry.name.startswith(prefix) and not entry.is_dir():
                        commands.add(entry.name)
        except OSError:
            logger.debug("skipping unreadable PATH entry %s", directory)
            continue

    return commands
