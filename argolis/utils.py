"""
Argolis utilities (internal helpers, carefully exposed)

Scope
- Core building blocks shared by the declaration, command, and resolver layers.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the higher-level layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated functions for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with
    fresh copies for containers to discourage accidental mutation of spec state.

- kebab_to_camel(text) / camel_to_kebab(text)
  • The two casing conversions behind dual kebab-case/camelCase option naming.

- variants(text, strategies)
  • Apply an ordered table of textual strategies and yield the distinct candidates.
    KEY_STRATEGIES and ALIAS_STRATEGIES are the two tables used by the resolver.

Internal helpers
- _immortalize(object): recursively materializes container copies (used by mirror()).
- SpecType: metaclass giving declaration classes a __typename__, mirrored
  properties, and stable __repr__/__rich_repr__.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> kebab_to_camel("max-retries")
    'maxRetries'
    >>> camel_to_kebab("maxRetries")
    'max-retries'
    >>> list(variants("max-retries", KEY_STRATEGIES))
    ['max-retries', 'maxRetries', 'maxretries']
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value (for example, a declared
    default of None), but the API needs a way to distinguish “not provided” from
    “provided as None”. A single instance, Unset, is exposed for that purpose.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when UnsetType appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Typical pattern: value = coalesce(user_value, default) to materialize a fallback
only when user_value is Unset (None and other falsey values are preserved).
"""


def coalesce(object, default=None, /):
    """
    Resolve an internal Unset sentinel to a concrete default.

    This returns the given object unless it is the Unset sentinel, in which case
    the provided default is returned. Falsey values like None, 0, "", or [] are
    preserved as-is; they are not treated as “unset”.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values, processing nested items.

    Behavior
    - Sequence (non-string): returns a new list with each element processed.
    - Mapping: returns a new dict, preserving keys and order, processing values.
    - Set: returns a new set with each element processed.
    - Anything else: returned as-is, with Unset resolved to None.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    else:
        return coalesce(object)


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and returns a fresh
    copy for container types, so callers can never mutate a declaration through
    its public surface.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


class SpecType(type):
    """
    Metaclass for declaration classes (positionals, options, commands).

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens)
      for consistent messages ("positional", "option", "command").
    - Expose every name in __introspectable__ as a read-only mirrored property.
    - Provide stable __repr__/__rich_repr__ driven by __displayable__ (or
      __introspectable__ when no narrower set is declared).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def kebab_to_camel(text, /):
    """
    Convert kebab-case to camelCase ("max-retries" -> "maxRetries").

    Only a hyphen followed by a lowercase letter is folded; anything else is
    kept verbatim, so already-camel text round-trips unchanged.
    """
    return re.sub(r"-([a-z])", lambda match: match[1].upper(), text)


def camel_to_kebab(text, /):
    """
    Convert camelCase to lowercase kebab-case ("maxRetries" -> "max-retries").
    """
    return re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", text).lower()


def _verbatim(text, /):
    return text


def _squashed(text, /):
    # camel-to-kebab with separators removed: "maxRetries" -> "maxretries"
    return camel_to_kebab(text).replace("-", "")


# Ordered strategies for matching raw flag text against canonical option keys.
KEY_STRATEGIES = (_verbatim, kebab_to_camel, _squashed)

# Ordered strategies for matching raw flag text against declared aliases.
ALIAS_STRATEGIES = (_verbatim, kebab_to_camel, camel_to_kebab)


def variants(text, strategies, /):
    """
    Yield the distinct textual candidates produced by applying each strategy
    to text, in strategy order.
    """
    seen = set()
    for strategy in strategies:
        if (candidate := strategy(text)) not in seen:
            seen.add(candidate)
            yield candidate


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "kebab_to_camel",
    "camel_to_kebab",
    "variants",

    # Types
    "UnsetType",
    "SpecType",

    # Constants
    "Unset",
    "KEY_STRATEGIES",
    "ALIAS_STRATEGIES",
)
