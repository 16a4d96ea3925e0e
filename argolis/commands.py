"""
Argolis command layer: declare a command surface and render it.

What this module provides
- Command: the immutable Command Specification handed to the resolver:
  • name / descr / version identity fields,
  • an ordered sequence of Positional declarations,
  • an ordered mapping of canonical keys to Option declarations,
  • presentation flags (colorful, fancy) used by the renderers and the shell runner.

- Renderers (caller-side collaborators, never invoked by the resolver):
  • render_help(command): usage line, positionals, options, default options.
  • render_version(command): the version string or "no version specified".

Quick start
    from argolis import Command, Positional, Option, resolve

    tool = Command(
        "tool",
        descr="copy files around",
        version="1.2.0",
        positionals=[Positional("source", required=True), Positional("target")],
        options={
            "verbose": Option(type="boolean", alias="v"),
            "maxRetries": Option(type="number", default=3),
            "tag": Option(type="array"),
        },
    )
    outcome = resolve(tool, ["a.txt", "--max-retries", "5", "--tag", "x"])

Design notes
- Construction sanitizes shapes (types, empty names, duplicate positional names).
- Cross-declaration rules (alias reuse, positional ordering) are left
  to resolve(), which reports them as structured faults.
- Styling follows the host conventions: __main__.__styles__ overrides palette
  entries, __main__.__prog__ overrides the displayed program name.
"""
import re
from collections import defaultdict
from collections.abc import Iterable, Mapping

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .arguments import Positional, Option
from .utils import *


def _process_strings(cls, metadata):
    """
    Normalize scalar string/Text metadata fields (name, descr, version).

    - Validates type: each value must be str | Text | Unset.
    - Trims strings; empty strings are rejected.
    """
    for name in ("name", "descr", "version"):
        if not isinstance(object := metadata[name], str | Text | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = object


def _process_positionals(cls, metadata):
    """
    Stabilize positionals into a tuple, rejecting foreign objects and duplicate names.
    """
    if not isinstance(metadata["positionals"], Iterable) or isinstance(metadata["positionals"], str | Mapping):
        raise TypeError(f"{cls.__typename__} 'positionals' must be an iterable of positionals")
    names = set()
    for positional in (positionals := tuple(metadata["positionals"])):
        if not isinstance(positional, Positional):
            raise TypeError(f"{cls.__typename__} 'positionals' must be an iterable of positionals")
        elif positional.name in names:
            raise ValueError(f"{cls.__typename__} positional name {positional.name!r} is already in use")
        names.add(positional.name)
    metadata["positionals"] = positionals


def _process_options(cls, metadata):
    """
    Copy the options mapping, validating canonical keys and declaration types.

    Keys must be non-empty, must not start with a dash, and must not clash with
    a positional name (both share the result mapping).
    """
    if metadata["options"] is None:
        metadata["options"] = {}
        return
    if not isinstance(metadata["options"], Mapping):
        raise TypeError(f"{cls.__typename__} 'options' must be a mapping of keys to options")
    positionals = {positional.name for positional in metadata["positionals"]}
    options = {}
    for key, option in metadata["options"].items():
        if not isinstance(key, str):
            raise TypeError(f"{cls.__typename__} option keys must be strings")
        elif not re.fullmatch(r"[^\s-]\S*", key):
            raise ValueError(f"{cls.__typename__} option key {key!r} must be a non-empty word not starting with '-'")
        elif key in positionals:
            raise ValueError(f"{cls.__typename__} option key {key!r} is already used by a positional")
        if not isinstance(option, Option):
            raise TypeError(f"{cls.__typename__} option {key!r} must be an option declaration")
        options[key] = option
    metadata["options"] = options


class Command(metaclass=SpecType):
    """
    Command Specification: everything the resolver needs to read a token list.

    Properties
    - name, descr, version: identity and help scalars (descr/version may be None).
    - positionals: list of Positional declarations (fresh copy per access).
    - options: dict of canonical key -> Option (fresh copy per access, declaration order).
    - colorful, fancy: presentation flags for renderers and shell-mode faults.

    The instance never changes after construction, so one Command can be
    resolved any number of times, from any number of threads.
    """

    __introspectable__ = (
        "name",
        "descr",
        "version",
        "positionals",
        "options",
        "colorful",
        "fancy",
    )

    __displayable__ = (
        "name",
        "descr",
        "version",
        "positionals",
        "options",
    )

    def __new__(
            cls,
            name,
            /,
            descr=Unset,
            version=Unset,
            positionals=(),
            options=None,
            *,
            colorful=Unset,
            fancy=Unset
    ):
        """
        Construct a Command specification.

        Parameters
        - name: str | Text
          Display identifier, used in usage lines and fault headers.
        - descr: str | Text | Unset
          One-line summary shown in help.
        - version: str | Text | Unset
          Enables "--version"; shown by render_version().
        - positionals: Iterable[Positional]
          Ordered positional declarations (names must be unique).
        - options: Mapping[str, Option] | None
          Canonical key -> declaration, in declaration order.
        - colorful, fancy: bool | Unset
          Presentation flags (default False).

        Raises
        - TypeError/ValueError on malformed metadata.
        """
        metadata = {
            "name": name,
            "descr": descr,
            "version": version,
            "positionals": positionals,
            "options": options,
            "colorful": bool(coalesce(colorful, False)),
            "fancy": bool(coalesce(fancy, False)),
        }
        _process_strings(cls, metadata)
        _process_positionals(cls, metadata)
        _process_options(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def usage(self, *, detailed=True):
        """
        Return the synthesized usage line.

        - detailed=True: "<req> [opt] <many..> [options]" (help layout).
        - detailed=False: "<name1> <name2> ..." (missing-positional messages).
        """
        if not detailed:
            return " ".join([str(self.name)] + [f"<{positional.name}>" for positional in self._positionals])
        parts = [str(self.name)]
        for positional in self._positionals:
            label = positional.name + (".." if positional.variadic else "")
            parts.append(f"<{label}>" if positional.required else f"[{label}]")
        parts.append("[options]")
        return " ".join(parts)


def _palette(command, defaults):
    styles = defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if command.colorful else ""

    def text(fragment, style=""):
        # Normalize to Rich Text. In non-colorful mode, strip styles; preserve existing Text spans.
        if not fragment:
            return Text("")
        if not command.colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    return styler, text


def render_help(command, /, console=Unset):
    """
    Render help for a command to the console.

    Layout
    - Usage: "<prog> <req> [opt] [options]  <descr>"
    - Positionals: name, description, [type] (and [required] / [variadic] markers)
    - Options: "-a," alias, "--key", description, [type], [required], (default: ...)
    - Default options: -h, --help and, when a version is declared, -v, --version

    Palette keys
    - usage-label, program-name, usage-section, description-section
    - group-label, positional-name, option-name, alias-name, argument-description
    - type-label, required-label, default-label, panel-title
    """
    if not isinstance(command, Command):
        raise TypeError("render_help() argument must be a command")
    console = coalesce(console, Console())
    styler, text = _palette(command, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "usage-section": "bold #36C5F0",
        "description-section": "italic #A3A3A3",

        "group-label": "bold #FFFFFF",
        "positional-name": "bold #FFD600",
        "option-name": "bold #00E6FF",
        "alias-name": "bold #22C55E",
        "argument-description": "#9CA3AF",

        "type-label": "#36C5F0",
        "required-label": "bold #EF4444",
        "default-label": "#737373",

        "panel-title": "bold #FF4D94",
    })

    prog = getattr(__import__("__main__"), "__prog__", command.name)
    renders = []

    usage = Text.assemble(
        text("usage:", styler("usage-label")),
        " ",
        text(prog, styler("program-name")),
        " ",
        text(command.usage().partition(" ")[2], styler("usage-section")),
    )
    if command.descr:
        usage.append("  ").append(text(command.descr, styler("description-section")))
    renders.append(usage)

    def table():
        grid = Table(box=None, show_header=False, pad_edge=False, padding=(0, 2, 0, 0))
        grid.add_column(no_wrap=True)
        grid.add_column(no_wrap=True)
        grid.add_column(ratio=1)
        grid.add_column(no_wrap=True)
        return grid

    def markers(type, required, defaulted, default):
        markers = Text.assemble("[", text(type, styler("type-label")), "]")
        if required:
            markers.append(text("[required]", styler("required-label")))
        if defaulted:
            markers.append(" ").append(text(f"(default: {default!r})", styler("default-label")))
        return markers

    if command.positionals:
        grid = table()
        for positional in command.positionals:
            grid.add_row(
                "",
                text(positional.name + (".." if positional.variadic else ""), styler("positional-name")),
                text(positional.descr or "", styler("argument-description")),
                markers(positional.type, positional.required, positional.defaulted, positional.default),
            )
        renders.append(Text())
        renders.append(text("positionals:", styler("group-label")))
        renders.append(grid)

    if command.options:
        grid = table()
        for key, option in command.options.items():
            alias = text(f"-{option.alias},", styler("alias-name")) if option.alias else Text()
            grid.add_row(
                alias,
                text(f"--{key}", styler("option-name")),
                text(option.descr or "", styler("argument-description")),
                markers(option.type, option.required, option.defaulted, option.default),
            )
        renders.append(Text())
        renders.append(text("options:", styler("group-label")))
        renders.append(grid)

    # a declared alias takes the built-in short form over
    claimed = {option.alias for option in command.options.values()}
    grid = table()
    grid.add_row(
        text("-h,", styler("alias-name")) if "h" not in claimed else Text(),
        text("--help", styler("option-name")),
        text("show this help message and exit", styler("argument-description")),
        markers("boolean", False, False, None),
    )
    if command.version:
        grid.add_row(
            text("-v,", styler("alias-name")) if "v" not in claimed else Text(),
            text("--version", styler("option-name")),
            text("show the version number and exit", styler("argument-description")),
            markers("boolean", False, False, None),
        )
    renders.append(Text())
    renders.append(text("default options:", styler("group-label")))
    renders.append(grid)

    renderable = Group(*renders)
    if command.fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[ ", f"{command.name} HELP".upper(), " ]", style=styler("panel-title")),
            title_align="left",
        )
    console.print(renderable)


def render_version(command, /, console=Unset):
    """
    Render the version of a command: "<name> — <version>", or
    "<name> — no version specified" when the command declares none.
    """
    if not isinstance(command, Command):
        raise TypeError("render_version() argument must be a command")
    console = coalesce(console, Console())
    styler, text = _palette(command, {
        "program-name": "bold #FF4D94",
        "program-version": "bold #00E6FF",
        "missing-version": "italic #9CA3AF",
    })
    if command.version:
        version = text(command.version, styler("program-version"))
    else:
        version = text("no version specified", styler("missing-version"))
    console.print(Text(" — ").join((text(command.name, styler("program-name")), version)))


__all__ = (
    "Command",
    "render_help",
    "render_version",
)
