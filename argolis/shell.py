"""
Argolis shell runner: the process-facing side of resolution.

parse_args(command, tokens=Unset) is what a script calls from its entry point.
It is the only place in the package that touches process-wide state:

- tokens default to sys.argv[1:] (the program name is stripped here);
- EarlyExit: help/version is rendered to stdout and the process exits with 0;
- Failed: the fault is printed on the stderr console and the process exits with 1;
- Parsed: the result mapping is returned.

Example
    from argolis import Command, Option, parse_args

    tool = Command("tool", options={"name": Option(required=True)})

    if __name__ == "__main__":
        values = parse_args(tool)
"""
import sys

from rich.console import Console

from .commands import Command, render_help, render_version
from .faults import trigger
from .resolver import ExitKind, Parsed, EarlyExit, Failed, resolve
from .utils import *


def parse_args(command, tokens=Unset, /, console=Unset):
    """
    Resolve tokens (or the live argument vector) and act on the outcome.

    Parameters
    - command: Command
    - tokens: Unset | str | Iterable[str]
      Unset reads sys.argv[1:]; strings are split shell-style.
    - console: Unset | rich.console.Console
      Destination for help/version output (stdout console by default).

    Returns
    - dict: the result mapping when resolution succeeds.

    Exits
    - status 0 after rendering help or version, status 1 after printing a fault.
    """
    if not isinstance(command, Command):
        raise TypeError("parse_args() first argument must be a command")
    tokens = coalesce(tokens, sys.argv[1:])

    match resolve(command, tokens):
        case Parsed(values=values):
            return values
        case EarlyExit(kind=ExitKind.HELP):
            render_help(command, console=coalesce(console, Console()))
            sys.exit(0)
        case EarlyExit(kind=ExitKind.VERSION):
            render_version(command, console=coalesce(console, Console()))
            sys.exit(0)
        case Failed(fault=fault):
            trigger(fault, shell=True, colorful=command.colorful, fancy=command.fancy)

    raise RuntimeError("unreachable")


__all__ = (
    "parse_args",
)
