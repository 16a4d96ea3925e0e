"""
Argolis faults and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every resolution failure.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- ResolveException: base type that carries a message + read-only options and
  knows how to render itself in a friendly, lowercased, and actionable way.
- One subclass per failure kind (alias conflicts, positional ordering, missing
  positionals, unknown options/arguments, missing or invalid option values,
  conflicting boolean states, missing required options).
- trigger(): central entry point to surface a fault (raise, or print and exit in shell mode).

Context carried in options
- code, title, hint: always present on faults raised by the resolver.
- key / alias / token / name / keys / usage: whichever identifies the culprit,
  so callers can build their own messages without re-reading the command.
- tool: the Command being resolved (attached at the resolve() boundary).

Integration
- The resolver raises faults internally and returns them wrapped in Failed(...).
- shell.parse_args() calls trigger(fault, shell=True) to print on stderr and exit(1).
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the resolver (stable identifiers).

    grouping (by high-level domain)
    - specification (1110x)
      • ALIAS_CONFLICT, INVALID_POSITIONAL_ORDER
    - options (1111x)
      • UNKNOWN_OPTION, MISSING_OPTION_VALUE, CONFLICTING_BOOLEAN_STATE,
        MISSING_REQUIRED_OPTION, INVALID_VALUE
    - positionals (1112x)
      • MISSING_POSITIONAL, UNKNOWN_ARGUMENT

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- specification errors ---
    ALIAS_CONFLICT              = 11101
    INVALID_POSITIONAL_ORDER    = 11102

    # --- option errors ---
    UNKNOWN_OPTION              = 11111
    MISSING_OPTION_VALUE        = 11112
    CONFLICTING_BOOLEAN_STATE   = 11113
    MISSING_REQUIRED_OPTION     = 11114
    INVALID_VALUE               = 11115

    # --- positional errors ---
    MISSING_POSITIONAL          = 11121
    UNKNOWN_ARGUMENT            = 11122

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ResolveException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        tool = self.options.get("tool")
        prog = text(getattr(main, "__prog__", tool.name if tool is not None else "argolis"), styler("prog-name"))
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code is not None else "?", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class AliasConflictError(ResolveException): ...
class InvalidPositionalOrderError(ResolveException): ...
class MissingPositionalError(ResolveException): ...
class UnknownOptionError(ResolveException): ...
class UnknownArgumentError(ResolveException): ...
class MissingOptionValueError(ResolveException): ...
class ConflictingBooleanStateError(ResolveException): ...
class MissingRequiredOptionError(ResolveException): ...
class InvalidValueError(ResolveException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ResolveException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via the stderr rich console followed by
      exit status 1; otherwise, the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "ResolveException",
    "AliasConflictError",
    "InvalidPositionalOrderError",
    "MissingPositionalError",
    "UnknownOptionError",
    "UnknownArgumentError",
    "MissingOptionValueError",
    "ConflictingBooleanStateError",
    "MissingRequiredOptionError",
    "InvalidValueError",
    "FaultCode",
    "trigger",
)
