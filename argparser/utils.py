"""
argparser utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the argument, registry and parser layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for “parameter not provided”, kept distinct from None
    because None is the absent result of typed retrieval.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/""/0 are preserved.

- @rename("name")
  • Give generated helpers a stable __name__/__qualname__ for readable tracebacks.

- mirror("attr")
  • Read-only property over a private backing field (self._attr); containers are
    copied on the way out so callers cannot mutate parser state through them.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a parameter that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and "".
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a per-process singleton.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        # Unpickling must hand back the singleton, not a fresh object.
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values like None, 0 or "" are legitimate and returned unchanged.

    Examples
    - coalesce("port", "fallback") -> "port"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce("", "fallback")     -> ""
    """
    return object if object is not Unset else default


def rename(name, /):
    """
    Decorator giving a generated callable a stable __name__/__qualname__.

    Example
    - @rename("__repr__") on a function built inside a metaclass.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("rename() must decorate a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _snapshot(value):
    # Containers come out as immutable copies, recursively; strings stay as is.
    match value:
        case str():
            return value
        case Mapping():
            return {key: _snapshot(item) for key, item in value.items()}
        case Sequence():
            return tuple(_snapshot(item) for item in value)
        case Set():
            return frozenset(_snapshot(item) for item in value)
    return value


def mirror(name, /):
    """
    Define a read-only property that mirrors the private field "_{name}".

    Example
    - Given self._descr, declare descr = mirror("descr") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _snapshot(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a parameter default where None already means something (None is
the absent result of typed retrieval), and materialize it with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
