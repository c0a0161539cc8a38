"""Shell environment context: search path, working directory and home."""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

PATH_ENV = "PATH"
PWD_ENV = "PWD"
HOME_ENV = "HOME"


@dataclass
class Environment:
    """Mutable environment state shared by the dispatcher and builtins.

    ``pwd`` is authoritative for relative path resolution; the shell process
    itself never changes directory. ``builtin_names`` is set by the shell
    from its registry; None means the default registry.
    """

    path: str = ""
    pwd: str = ""
    home: str = ""
    builtin_names: frozenset[str] | None = field(default=None, compare=False)

    @classmethod
    def from_os(cls) -> "Environment":
        """Snapshot PATH, PWD and HOME from the process environment."""
        return cls(
            path=os.environ.get(PATH_ENV, ""),
            pwd=os.environ.get(PWD_ENV) or os.getcwd(),
            home=os.environ.get(HOME_ENV) or os.path.expanduser("~"),
        )

    def search_path(self) -> list[str]:
        """Directories of PATH in order, empty entries dropped."""
        return [d for d in self.path.split(os.pathsep) if d]

    def resolve(self, target: str) -> str:
        """Expand a leading ``~`` and anchor relative paths at ``pwd``."""
        if target == "~" or target.startswith("~/"):
            target = self.home + target[1:]
        if not os.path.isabs(target):
            target = os.path.join(self.pwd, target)
        return os.path.normpath(target)

    def find_executable(self, name: str) -> str | None:
        """Locate ``name`` on the search path.

        Names containing a slash are resolved against ``pwd`` instead.
        Returns None when nothing suitable exists.
        """
        if not name:
            return None
        if "/" in name:
            candidate = self.resolve(name)
            return candidate if os.path.isfile(candidate) else None

        for directory in self.search_path():
            candidate = os.path.join(directory, name)
            if os.path.isfile(candidate):
                logger.debug("resolved %s to %s", name, candidate)
                return candidate
        return None

    def child_environ(self) -> dict[str, str]:
        """Process environment for a child, with this context's values applied."""
        environ = dict(os.environ)
        environ[PATH_ENV] = self.path
        environ[PWD_ENV] = self.pwd
        environ[HOME_ENV] = self.home
        return environ
