"""
Argosy utilities (small helpers shared by the command engine)

Overview
- UnsetType / Unset
  • Singleton sentinel meaning "not declared", distinct from None and "".
  • Used for parameter defaults: `count=` declares an empty default, `count` declares none.

- coalesce(value, default=None)
  • Materialize Unset into a concrete value while preserving None/""/0.

- rename(callable, name) / @rename("name")
  • Give generated callables a readable __name__/__qualname__.

- mirror("attr")
  • Read-only property over a private backing field, handing out copies of containers.

- casefold(name)
  • The one normalization applied to every command and parameter name lookup.

Names not listed in __all__ are internal.
"""
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    A parameter declared as `"count"` has no default (Unset) while `"count="`
    has the empty string as default. Both are falsey, so test with `is Unset`
    when the difference matters. `str | Unset` builds a union usable with
    isinstance().
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def _union(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    __or__ = __ror__ = _union

    def __reduce__(self):
        return "Unset"

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


def coalesce(value, default=None, /):
    """
    `default` when `value` is Unset, else `value` (None, 0 and "" included).
    """
    return default if value is Unset else value


def rename(*parameters):
    """
    Name a generated callable.

    - rename(function, name): sets __name__ and __qualname__, returns function.
    - rename(name): decorator doing the same.
    """
    match parameters:
        case (str() as name,):
            return lambda function: rename(function, name)
        case (function, str() as name) if callable(function):
            function.__name__ = function.__qualname__ = name
            return function
        case _:
            raise TypeError(f"rename() expects (callable, name) or (name,), got {parameters!r}")


def _frozen(value):
    if isinstance(value, Sequence) and not isinstance(value, str):
        return tuple(map(_frozen, value))
    if isinstance(value, Mapping):
        return {key: _frozen(item) for key, item in value.items()}
    if isinstance(value, Set):
        return frozenset(map(_frozen, value))
    return value


def mirror(name, /):
    """
    Read-only property over `self._<name>`.

    Sequences come out as tuples and sets as frozensets, so registry state
    cannot be mutated through the property.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _frozen(getattr(self, "_" + name))

    return property(getter)


def casefold(name, /):
    """
    Normalize a command or parameter name for lookups.
    """
    if not isinstance(name, str):
        raise TypeError("casefold() argument must be a string")
    return name.strip().lower()


Unset = UnsetType()


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
    "casefold",
)
