"""
Argolis resolver: turn a token list into a result mapping.

resolve(command, tokens) is a pure, synchronous transformation. It never reads
sys.argv, never prints, and never exits; it returns one of three outcomes:

- Parsed(values)          the result mapping (dict) keyed by positional names
                          and canonical option keys.
- EarlyExit(kind, command) help or version was requested; the caller renders.
- Failed(fault)           the first violation found, as a ResolveException.

Passes (each one is a public function so it can be exercised on its own)
1. validate(command)
   alias reuse → AliasConflictError; a required positional after an optional
   one, or a second variadic positional → InvalidPositionalOrderError.
2. detect_exit(command, tokens)
   "--help"/"-h" anywhere → help; "--version" (when a version is declared) or
   "-v" anywhere → version. Declared option keys and aliases shadow these names.
3. assign_positionals(command, tokens)
   binds the leading run of non-dash tokens to positionals and returns the
   set of token indices it consumed.
4. resolve_options(command, tokens, consumed, values)
   walks every unconsumed token, matching flags by key, alias, or casing
   variant, with a "no-" negation fallback for booleans, and coerces values.
5. apply_defaults(command, values)
   fills declared defaults, then enforces required options.

Token grammar
    --name value    --name (boolean)    --no-name (negated boolean)
    -a value        -a (boolean alias)  --tag x --tag y (array accumulation)
    a positional run preceding any dash-prefixed token

Numbers
    number options accept whatever float() accepts (after int() is tried first,
    so "3" stays 3); "nan"/"inf" spellings and anything else non-numeric fail
    with InvalidValueError, and so do integer literals longer than the
    interpreter's int conversion limit (sys.get_int_max_str_digits()).
"""
import copy
import itertools
import logging
import math
import re
import shlex
from collections.abc import Iterable
from enum import Enum
from typing import NamedTuple

from .commands import Command
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)


class ExitKind(Enum):
    HELP = "help"
    VERSION = "version"


class EarlyExitSignal(Exception):
    """
    Raised by EarlyExit.unwrap() so exception-driven callers can still tell a
    help/version request apart from a fault.
    """

    def __init__(self, outcome, /):
        super().__init__(outcome.kind.value)
        self.outcome = outcome


class Parsed(NamedTuple):
    values: dict

    def unwrap(self):
        return self.values


class EarlyExit(NamedTuple):
    kind: ExitKind
    command: Command

    @property
    def version(self):
        """The declared version for version requests; None means unspecified."""
        return self.command.version if self.kind is ExitKind.VERSION else None

    def unwrap(self):
        raise EarlyExitSignal(self)


class Failed(NamedTuple):
    fault: ResolveException

    def unwrap(self):
        raise self.fault


def validate(command, /):
    """
    Reject structurally invalid commands before any token is inspected.

    Raises
    - AliasConflictError: two options share an alias (names both keys).
    - InvalidPositionalOrderError: a required positional follows an optional
      one, or more than one positional is variadic.
    """
    owners = {}
    for key, option in command.options.items():
        if option.alias is None:
            continue
        if (owner := owners.setdefault(option.alias, key)) != key:
            raise AliasConflictError(
                "alias %r is used by both %r and %r" % (option.alias, owner, key),
                title="alias conflict",
                code=FaultCode.ALIAS_CONFLICT,
                hint="give each option its own alias",
                alias=option.alias,
                keys=(owner, key),
            )

    optional = None
    variadic = None
    for positional in command.positionals:
        if positional.variadic:
            if variadic is not None:
                raise InvalidPositionalOrderError(
                    "variadic positional %r cannot follow variadic positional %r" % (positional.name, variadic),
                    title="invalid positional order",
                    code=FaultCode.INVALID_POSITIONAL_ORDER,
                    hint="declare at most one variadic positional",
                    name=positional.name,
                )
            variadic = positional.name
        if not positional.required:
            optional = optional or positional.name
        elif optional is not None:
            raise InvalidPositionalOrderError(
                "required positional %r cannot follow optional positional %r" % (positional.name, optional),
                title="invalid positional order",
                code=FaultCode.INVALID_POSITIONAL_ORDER,
                hint="declare every required positional before the optional ones",
                name=positional.name,
            )
    logger.debug("command %r is structurally valid", command.name)


def _builtin(command, key, alias, /):
    # built-in exit names yield to whatever the command itself declares
    names = set()
    if key not in command.options:
        names.add("--" + key)
    if all(option.alias != alias for option in command.options.values()):
        names.add("-" + alias)
    return names


def detect_exit(command, tokens, /):
    """
    Return EarlyExit for a help or version request anywhere in tokens, else None.

    Help wins over version. "--version" only counts when the command declares a
    version; "-v" always counts (yielding an unspecified version when none is
    declared) unless an option claims alias "v".
    """
    present = set(tokens)
    if _builtin(command, "help", "h") & present:
        logger.debug("help requested for command %r", command.name)
        return EarlyExit(ExitKind.HELP, command)
    names = _builtin(command, "version", "v")
    if command.version is None:
        names.discard("--version")
    if names & present:
        logger.debug("version requested for command %r", command.name)
        return EarlyExit(ExitKind.VERSION, command)
    return None


def _missing_positional(command, positional, /):
    usage = command.usage(detailed=False)
    return MissingPositionalError(
        "missing required positional argument, i.e.: %r" % usage,
        title="missing positional",
        code=FaultCode.MISSING_POSITIONAL,
        hint="positionals must come first, before any option",
        name=positional.name,
        usage=usage,
    )


def assign_positionals(command, tokens, /):
    """
    Bind the leading non-dash tokens to the declared positionals.

    Returns
    - (values, consumed): values maps positional names to a string (or a list
      for variadics, or the declared default); consumed is the set of token
      indices claimed, so the option pass can skip exactly those.

    Raises
    - MissingPositionalError when a required positional gets no token.
    """
    candidates = list(itertools.takewhile(lambda token: not token.startswith("-"), tokens))
    positionals = command.positionals
    values = {}
    consumed = set()
    index = 0

    for position, positional in enumerate(positionals):
        if positional.variadic:
            # one slot is kept back for every positional declared after this one
            reserved = len(positionals) - position - 1
            stop = max(len(candidates) - reserved, index)
            taken = candidates[index:stop]
            if positional.required and not taken:
                raise _missing_positional(command, positional)
            if not taken and positional.defaulted:
                values[positional.name] = copy.deepcopy(positional.default)
            else:
                values[positional.name] = taken
            consumed.update(range(index, stop))
            index = stop
            continue

        required = sum(1 for later in positionals[position:] if later.required)
        available = len(candidates) - index
        if available and (positional.required or available > required):
            values[positional.name] = candidates[index]
            consumed.add(index)
            index += 1
        elif positional.required:
            raise _missing_positional(command, positional)
        elif positional.defaulted:
            values[positional.name] = copy.deepcopy(positional.default)

    logger.debug("positionals bound: %r", values)
    return values, consumed


def lookup(command, token, /):
    """
    Match a dash-prefixed token to an option declaration.

    Returns
    - (key, option, text): the canonical key and declaration, or (None, None, text)
      when nothing matched. text is the token without its dash prefix.

    Order
    - "--text": canonical keys by KEY_STRATEGIES, then aliases by ALIAS_STRATEGIES.
    - "-text": aliases by ALIAS_STRATEGIES only.
    Aliases are searched in option declaration order; first match wins.
    """
    options = command.options
    if token.startswith("--"):
        text = token[2:]
        for variant in variants(text, KEY_STRATEGIES):
            if variant in options:
                return variant, options[variant], text
    else:
        text = token[1:]
    if text:
        candidates = set(variants(text, ALIAS_STRATEGIES))
        for key, option in options.items():
            if option.alias is not None and option.alias in candidates:
                return key, option, text
    return None, None, text


def _conflicting(key, /):
    return ConflictingBooleanStateError(
        "option %r was given more than once; negated and truthy forms cannot be mixed" % key,
        title="conflicting boolean state",
        code=FaultCode.CONFLICTING_BOOLEAN_STATE,
        hint="keep a single '--%s' or '--no-%s'" % (key, key),
        key=key,
    )


def _number(value, key, /):
    try:
        return int(value)
    except ValueError:
        if re.fullmatch(r"\s*[+-]?\d+(?:_\d+)*\s*", value):
            # past sys.get_int_max_str_digits()
            raise InvalidValueError(
                "option %r value is out of range (%d digits)" % (key, len(value.strip())),
                title="invalid value",
                code=FaultCode.INVALID_VALUE,
                hint="pass a shorter number",
                key=key,
                token=value,
            ) from None
    try:
        number = float(value)
    except ValueError:
        number = math.nan
    if not math.isfinite(number):
        raise InvalidValueError(
            "option %r expects a number, got %r" % (key, value),
            title="invalid value",
            code=FaultCode.INVALID_VALUE,
            hint="pass a decimal number such as 3 or 2.5",
            key=key,
            token=value,
        )
    return number


def resolve_options(command, tokens, consumed, values, /):
    """
    Walk the unconsumed tokens left to right and store option values in values.

    Raises
    - UnknownArgumentError: a non-dash token no positional claimed.
    - UnknownOptionError: a flag matching no key, alias, or negation form.
    - MissingOptionValueError: a valued option without a usable next token.
    - ConflictingBooleanStateError: a boolean option given twice.
    - InvalidValueError: a number option given a non-numeric token.
    """
    options = command.options
    index = 0
    while index < len(tokens):
        if index in consumed:
            index += 1
            continue

        token = tokens[index]
        if not token.startswith("-"):
            raise UnknownArgumentError(
                "unknown argument %r" % token,
                title="unknown argument",
                code=FaultCode.UNKNOWN_ARGUMENT,
                hint="positionals must come first; run '%s --help' to see the expected usage" % command.name,
                token=token,
            )

        key, option, text = lookup(command, token)

        if option is None:
            negated = text.startswith("no-")
            name = text[3:] if negated else text
            camel = kebab_to_camel(name)
            key = camel if camel in options else name
            option = options.get(key)
            if option is None or option.type != "boolean":
                raise UnknownOptionError(
                    "unknown option: %s" % text,
                    title="unknown option",
                    code=FaultCode.UNKNOWN_OPTION,
                    hint="run '%s --help' to see all available options" % command.name,
                    token=text,
                )
            if name in values or camel in values:
                raise _conflicting(key)
            values[key] = not negated
            logger.debug("option %r set to %r from %r", key, values[key], token)
            index += 1
            continue

        def following():
            if index + 1 >= len(tokens) or tokens[index + 1].startswith("-"):
                raise MissingOptionValueError(
                    "missing value for %soption: %s" % ("array " * (option.type == "array"), key),
                    title="missing option value",
                    code=FaultCode.MISSING_OPTION_VALUE,
                    hint="pass a value right after '%s'" % token,
                    key=key,
                    token=token,
                )
            return tokens[index + 1]

        match option.type:
            case "boolean":
                if key in values:
                    raise _conflicting(key)
                values[key] = not token.startswith(("--no-", "-no-"))
            case "number":
                values[key] = _number(following(), key)
                index += 1
            case "array":
                values.setdefault(key, [])
                values[key].append(following())
                index += 1
            case _:
                values[key] = following()
                index += 1

        logger.debug("option %r set to %r from %r", key, values[key], token)
        index += 1


def apply_defaults(command, values, /):
    """
    Store declared defaults for absent options, then enforce required ones.

    Raises
    - MissingRequiredOptionError naming the alias (if any) and canonical key.
    """
    for key, option in command.options.items():
        if key not in values and option.defaulted:
            values[key] = copy.deepcopy(option.default)
            logger.debug("option %r defaulted to %r", key, values[key])

    for key, option in command.options.items():
        if option.required and key not in values:
            flags = ("-%s, " % option.alias if option.alias else "") + "--" + key
            raise MissingRequiredOptionError(
                "missing required option: %s" % flags,
                title="missing required option",
                code=FaultCode.MISSING_REQUIRED_OPTION,
                hint="pass '--%s <value>' or declare a default" % key,
                key=key,
                alias=option.alias,
            )


def _sanitized(tokens, /):
    if isinstance(tokens, str):
        try:
            return tuple(shlex.split(tokens))
        except ValueError as error:
            raise ValueError(f"resolve() second argument is not a valid shell string: {error}") from None
    if not isinstance(tokens, Iterable):
        raise TypeError("resolve() second argument must be a string or an iterable of strings")
    tokens = tuple(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("resolve() second argument must be a string or an iterable of strings")
    return tokens


def resolve(command, tokens, /):
    """
    Resolve tokens against a command specification.

    Parameters
    - command: Command
    - tokens: Iterable[str] already stripped of the program name, or a single
      shell-like string split with shlex.

    Returns
    - Parsed | EarlyExit | Failed. Faults carry the command under the 'tool'
      option so they can render a program name.

    Raises
    - TypeError for a non-command or non-string tokens (programming errors,
      not resolution faults).
    - ValueError for a shell-like string shlex cannot split (unbalanced quotes
      or a trailing escape).
    """
    if not isinstance(command, Command):
        raise TypeError("resolve() first argument must be a command")
    tokens = _sanitized(tokens)
    logger.debug("resolving %r against command %r", tokens, command.name)

    try:
        validate(command)
        if (signal := detect_exit(command, tokens)) is not None:
            return signal
        values, consumed = assign_positionals(command, tokens)
        resolve_options(command, tokens, consumed, values)
        apply_defaults(command, values)
    except ResolveException as fault:
        logger.debug("resolution of %r failed: %s", command.name, fault.message)
        return Failed(copy.replace(fault, tool=command))

    return Parsed(values)


__all__ = (
    "ExitKind",
    "EarlyExitSignal",
    "Parsed",
    "EarlyExit",
    "Failed",
    "validate",
    "detect_exit",
    "assign_positionals",
    "lookup",
    "resolve_options",
    "apply_defaults",
    "resolve",
)
