"""
Typed value resolution for stored argument strings.

Every argument value is stored canonically as a string; typed access converts
on demand and never caches. ValueKind is the closed set of requested types:

- STRING: identity.
- INT:    longest leading integer prefix (“8080abc” → 8080, “3.7” → 3).
- DOUBLE: longest leading floating-point prefix, plus inf/infinity/nan.
- BOOL:   case-insensitive membership in {"true", "1", "yes", "on"}.

Numeric kinds produce None (absent) when no numeric prefix exists; BOOL never
produces None, unrecognized strings are simply False. The two behaviors differ
on purpose and callers rely on both.
"""
import builtins
import re
from enum import Enum

_INTEGER = re.compile(r"\s*([+-]?\d+)")
_DECIMAL = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

TRUTHY = frozenset({"true", "1", "yes", "on"})


def to_string(value, /):
    return value


def to_int(value, /):
    if match := _INTEGER.match(value):
        return int(match[1])
    return None


def to_double(value, /):
    if match := _DECIMAL.match(value):
        return float(match[1])
    return None


def to_bool(value, /):
    return value.lower() in TRUTHY


class ValueKind(Enum):
    """
    tagged union of the types typed retrieval can produce.

    each member carries its python type and its converter; members can be
    looked up from the python type itself via ValueKind.of(int).
    """
    STRING = (str, to_string)
    INT = (int, to_int)
    DOUBLE = (float, to_double)
    BOOL = (bool, to_bool)

    def __init__(self, type, converter):
        self.type = type
        self.converter = converter

    def convert(self, value, /):
        """
        convert a stored string into this kind; None means absent.
        """
        if not isinstance(value, str):
            raise TypeError("convert() argument must be a string")
        return self.converter(value)

    @classmethod
    def of(cls, kind, /):
        """
        normalize a ValueKind member or one of str/int/float/bool into a member.
        """
        if isinstance(kind, cls):
            return kind
        for member in cls:
            if kind is member.type:
                return member
        raise TypeError("kind must be one of str, int, float, bool, or a ValueKind, not %r" % (
            getattr(kind, "__name__", builtins.type(kind).__name__),
        ))


def encode(value, /):
    """
    string-encode a default value.

    strings pass through, booleans become "true"/"false" and other numbers use
    their repr so they decode back to the same number.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return repr(value)
    raise TypeError("default value must be a string or a number")


__all__ = (
    "ValueKind",
    "TRUTHY",
    "encode",
)
