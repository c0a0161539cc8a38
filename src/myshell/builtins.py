"""Built-in shell commands.

Each handler takes the argument list and the shell environment and returns
the text it writes to standard output. Failures raise ``BuiltinError``.
"""

import os
import sys
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TypeAlias

from myshell.environment import Environment

BuiltinHandler: TypeAlias = Callable[[list[str], Environment], str]


class BuiltinError(Exception):
    """A builtin rejected its arguments or could not complete."""


def builtin_exit(args: list[str], env: Environment) -> str:
    if not args:
        raise BuiltinError("exit: missing status code")
    if len(args) > 1:
        raise BuiltinError("exit: too many arguments")
    try:
        code = int(args[0])
    except ValueError:
        raise BuiltinError(f"exit: {args[0]}: numeric argument required") from None
    sys.exit(code)


def builtin_echo(args: list[str], env: Environment) -> str:
    if not args:
        raise BuiltinError("echo: missing argument")
    return " ".join(args) + "\n"


def builtin_type(args: list[str], env: Environment) -> str:
    if not args:
        raise BuiltinError("type: missing argument")
    name = args[0]
    registered = env.builtin_names if env.builtin_names is not None else BUILTIN_REGISTRY
    match name:
        case n if n in registered:
            return f"{name} is a shell builtin\n"
        case _:
            path = env.find_executable(name)
            if path:
                return f"{name} is {path}\n"
            return f"{name}: not found\n"


def builtin_pwd(args: list[str], env: Environment) -> str:
    if args:
        raise BuiltinError("pwd: too many arguments")
    if not env.pwd:
        raise BuiltinError("pwd: cannot get current working directory")
    return env.pwd + "\n"


def builtin_cd(args: list[str], env: Environment) -> str:
    if not args:
        raise BuiltinError("cd: missing argument")
    target = env.resolve(args[0])
    if not os.path.exists(target):
        raise BuiltinError(f"cd: {args[0]}: No such file or directory")
    if not os.path.isdir(target):
        raise BuiltinError(f"cd: {args[0]}: Not a directory")
    env.pwd = target
    return ""


BUILTIN_REGISTRY: Mapping[str, BuiltinHandler] = MappingProxyType(
    {
        "exit": builtin_exit,
        "echo": builtin_echo,
        "type": builtin_type,
        "pwd": builtin_pwd,
        "cd": builtin_cd,
    }
)
