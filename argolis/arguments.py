r"""
Argolis argument declarations.

Overview
- Declarations
  • Positional: an argument identified by its position (optional/required,
    single or variadic, with an optional default).
  • Option: a named, flag-introduced argument with a declared value type
    ("string", "boolean", "number", "array"), an optional short alias, a
    requiredness flag, and an optional default.

  An Option does not know its own canonical key; the owning Command maps
  canonical keys to Option declarations.

- Introspection & representation
  • SpecType metaclass provides stable __repr__/__rich_repr__ and exposes
    selected fields via read-only properties declared in __introspectable__.

Metadata (sanitized on construction)
- Shared
  • default: any value; Unset means "no default declared" (None is legal).
    Container defaults are exposed, and copied into results, as plain
    lists/dicts/sets (a tuple default reads back as a list).
  • descr: Unset | str | Text (short help), non-empty when provided.
- Positional only
  • name: identifier used as the result key (no leading dash, no whitespace).
  • required / variadic: bool.
  • type: free-form presentation label (defaults to "string"); never coerces.
- Option only
  • type: one of TYPES, defaults to "string".
  • alias: Unset | str, a bare short name without dashes (e.g. "v").
  • required: bool.

Structural rules that involve several declarations (alias reuse, positional
ordering, more than one variadic) are NOT checked here; they are resolution
faults reported by argolis.resolver.validate().

Quick example:
    >>> from argolis import Positional, Option
    >>> Positional("files", variadic=True, required=True)
    >>> Option(type="boolean", alias="v", descr="chatty output")
"""
import re

from rich.text import Text

from .utils import *

TYPES = ("string", "boolean", "number", "array")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the 'descr' field shared by all declarations.

    Raises
    - TypeError: if 'descr' is not a string, Text, or Unset.
    - ValueError: if 'descr' is a string but empty after trimming.

    Notes
    - This function mutates the provided metadata dict in place.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = descr


def _sanitize_flags(cls, metadata, /, *names):
    for name in names:
        if not isinstance(metadata[name], bool):
            raise TypeError(f"{cls.__typename__} {name!r} must be a boolean")


class Positional(metaclass=SpecType):
    """
    Positional argument declaration.

    Positionals must appear contiguously at the front of the command line; the
    resolver binds them left to right, reserving slots for later required
    positionals and for declarations after a variadic one.

    Properties
    - name, required, variadic, default, type, descr (read-only).
    - defaulted: whether a default was declared (distinguishes default=None).
    """

    __introspectable__ = (
        "name",
        "required",
        "variadic",
        "default",
        "type",
        "descr",
    )

    def __new__(
            cls,
            name,
            /,
            required=False,
            variadic=False,
            default=Unset,
            type="string",
            descr=Unset
    ):
        """
        Construct a Positional declaration.

        Parameters
        - name: str
          Result key. Must be non-empty, must not start with a dash, and must not
          contain whitespace.
        - required: bool
          Whether resolution fails when no token is available for it.
        - variadic: bool
          Whether it absorbs a run of zero or more tokens (result is a list).
        - default: Any
          Used when the positional is optional and receives no token.
          Containers are read back as plain containers: tuples and other
          sequences become lists, mappings become dicts, sets become sets.
        - type: str
          Presentation label only (shown in help); values stay raw strings.
        - descr: Unset | str | Text
          Short description for help.
        """
        metadata = {
            "name": name,
            "required": required,
            "variadic": variadic,
            "default": default,
            "type": type,
            "descr": descr,
        }
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not re.fullmatch(r"[^\s-]\S*", name):
            raise ValueError(f"{cls.__typename__} 'name' must be a non-empty word not starting with '-'")
        if not isinstance(type, str) or not type.strip():
            raise TypeError(f"{cls.__typename__} 'type' must be a non-empty string")
        metadata["type"] = type.strip()
        _sanitize_flags(cls, metadata, "required", "variadic")
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def defaulted(self):
        return self._default is not Unset


class Option(metaclass=SpecType):
    """
    Named option declaration.

    Highlights
    - type decides how values are consumed and coerced:
      • "boolean": presence sets True, "--no-<key>" sets False; no value token.
      • "number": one following token, converted to int or float.
      • "array": one following token per occurrence, accumulated in order.
      • "string": one following token, stored verbatim.
    - alias is a short name matched with a single dash ("-v") and also accepted
      with two dashes ("--v") after canonical keys fail to match.

    Properties
    - type, alias, required, default, descr (read-only).
    - defaulted: whether a default was declared (distinguishes default=None).
    """

    __introspectable__ = (
        "type",
        "alias",
        "required",
        "default",
        "descr",
    )

    def __new__(
            cls,
            type="string",
            alias=Unset,
            required=False,
            default=Unset,
            descr=Unset
    ):
        """
        Construct an Option declaration.

        Parameters
        - type: "string" | "boolean" | "number" | "array"
        - alias: Unset | str
          Bare short name, e.g. "o" for "-o". Leading dashes are rejected so
          the alias is stored exactly as it is compared.
        - required: bool
          Whether resolution fails when the option is absent after defaulting.
        - default: Any
          Stored when the option is absent from the tokens.
          Containers are read back as plain containers: tuples and other
          sequences become lists, mappings become dicts, sets become sets.
        - descr: Unset | str | Text
          Short description for help.
        """
        metadata = {
            "type": type,
            "alias": alias,
            "required": required,
            "default": default,
            "descr": descr,
        }
        if type not in TYPES:
            raise ValueError(f"{cls.__typename__} 'type' must be one of {", ".join(map(repr, TYPES))}")
        if not isinstance(alias, str | Unset):
            raise TypeError(f"{cls.__typename__} 'alias' must be a string")
        elif isinstance(alias, str) and not re.fullmatch(r"[^\s-]\S*", alias):
            raise ValueError(f"{cls.__typename__} 'alias' must be a non-empty word not starting with '-'")
        _sanitize_flags(cls, metadata, "required")
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def defaulted(self):
        return self._default is not Unset


__all__ = (
    # Classes (declarations)
    "Positional",
    "Option",

    # Constants
    "TYPES",
)
