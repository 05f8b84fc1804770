r"""
argparser argument declarations and value holders.

Overview
- Kinds
  • Flag: named, presence-only switch (no payload), e.g. -v/--verbose.
  • Option: named, value-bearing argument, e.g. -p 8080 / --port=8080.
  • Positional: value identified by its position among non-option tokens.
  All three share the Argument base, tagged by ArgumentKind.

- State
  • value: the string received during parsing (meaningless unless is_set).
  • is_set: True once set_value()/set_flag() succeeded in the current parse.
  • default: string-encoded fallback (options only), used by typed access when unset.

- Typed access
  • get(kind) resolves the active string on demand (never cached) into
    str/int/float/bool; None is the absent result.
  • get_string/get_int/get_double/get_bool wrap get(): numeric absence raises
    ValidationError, string/bool absence yields ""/False.

- Fluent configuration
  • require(), default_to(), describe(), validator() return the argument itself.

Names
- Names are declared without dashes.
- Short names are exactly one letter or digit.
- Long names must match r"[^\W\d_](-?[^\W_]+)*" (unicode letters allowed).
- Positional names are any non-empty string not starting with '-'.

Quick example:
    >>> port = Option("p", "port", "listening port", 8080)
    >>> port.get(int)
    8080
    >>> port.set_value("9000")
    >>> port.get_int()
    9000
"""
import functools
import operator
import re
from enum import Enum

from rich.text import Text

from .conversions import ValueKind, encode
from .faults import FaultCode, ValidationError
from .utils import *


class ArgumentKind(Enum):
    FLAG = "flag"
    OPTION = "option"
    POSITIONAL = "positional"


class ArgumentType(type):
    """
    Metaclass giving argument classes stable, introspectable shapes.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_{name}" field (see mirror()).
    - Provide __repr__/__rich_repr__ limited to __displayable__ (or
      __introspectable__ when unset) for diagnostics and pretty printers.
    - Derive __typename__ from the class name for messages.
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
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(short='p', long='port', default='8080', ...)
            """
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


def _sanitize_descr(cls, descr, /):
    # Empty descriptions collapse to None; help rendering skips them.
    if not isinstance(descr, str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    if isinstance(descr, str):
        descr = descr.strip()
    return coalesce(descr) or None


def _sanitize_names(cls, short, long, /):
    r"""
    Internal: validate and normalize the short/long names of a Flag or Option.

    Rules
    - Unset or "" means “no such name”; at least one name is required.
    - short: exactly one letter or digit ("v", "p", "1").
    - long: r"[^\W\d_](-?[^\W_]+)*" ("port", "dry-run", "名-前").
    - names are given without leading dashes; "-v"/"--verbose" are rejected.

    Returns
    - tuple[str | None, str | None]: normalized (short, long).

    Raises
    - TypeError: non-string names, or no name at all.
    - ValueError: names of the wrong shape.
    """
    names = []
    for name, pattern, label in (
            (short, r"[^\W_]", "short"),
            (long, r"[^\W\d_](-?[^\W_]+)*", "long"),
    ):
        if not isinstance(name, str | Unset):
            raise TypeError(f"{cls.__typename__} {label} name must be a string")
        if not (name := coalesce(name, "").strip()):
            names.append(None)
            continue
        if name.startswith("-"):
            raise ValueError(f"{cls.__typename__} {label} name {name!r} must be given without leading dashes")
        if not re.fullmatch(pattern, name):
            if label == "short":
                raise ValueError(f"{cls.__typename__} short name {name!r} must be a single letter or digit")
            raise ValueError(f"{cls.__typename__} long name {name!r} must be a valid shell-style option name")
        names.append(name)

    if not any(names):
        raise TypeError(f"{cls.__typename__} must specify at least one name")
    return tuple(names)


class Argument(metaclass=ArgumentType):
    """
    Declaration and value holder for one flag, option or positional.

    Instances are normally created through the Registry add_* calls, which
    take ownership of them; the concrete classes are Flag, Option and
    Positional.

    Properties (read-only)
    - kind, short, long, name, descr, default, value, is_required, is_set.
    """

    __introspectable__ = (
        "kind",
        "short",
        "long",
        "name",
        "descr",
        "default",
        "value",
        "is_required",
        "is_set",
    )

    __kind__ = None

    def _initialize(self, *, short=None, long=None, name=None, descr=None, default=None, required=False):
        self._kind = type(self).__kind__
        self._short = short
        self._long = long
        self._name = name
        self._descr = descr
        self._default = default
        self._value = None
        self._is_required = bool(required)
        self._is_set = False
        self._validator = None

    @property
    def display(self):
        """
        User-facing spelling: the positional name, or --long / -short (long preferred).
        """
        if self._kind is ArgumentKind.POSITIONAL:
            return self._name
        return "--" + self._long if self._long else "-" + self._short

    @property
    def keys(self):
        """
        Every lookup key this argument is indexed under, in declaration order.
        """
        return tuple(filter(None, (self._short, self._long, self._name)))

    # ── fluent configuration ────────────────────────────────────────────────

    def require(self, flag=True, /):
        self._is_required = bool(flag)
        return self

    def default_to(self, value, /):
        """
        Set the string-encoded default used when the argument is not given.

        Numbers are encoded with repr(), booleans as "true"/"false"; an empty
        string clears the default. Only options carry defaults.
        """
        if self._kind is not ArgumentKind.OPTION:
            raise TypeError(f"{type(self).__typename__} cannot have a default value")
        self._default = encode(value) or None
        return self

    def describe(self, descr, /):
        self._descr = _sanitize_descr(type(self), descr)
        return self

    def validator(self, function, /):
        """
        Attach a predicate str -> bool checked by set_value(); None detaches it.
        """
        if function is not None and not callable(function):
            raise TypeError(f"{type(self).__typename__} validator must be callable")
        self._validator = function
        return self

    # ── mutation (parsing) ──────────────────────────────────────────────────

    def validate(self, value, /):
        """
        Return the validator verdict for value (True when none is attached).
        """
        return self._validator is None or bool(self._validator(value))

    def set_value(self, value, /):
        """
        Store value as the current value and mark the argument as set.

        Raises
        - ValidationError: on a flag, or when the validator rejects value.
        """
        if not isinstance(value, str):
            raise TypeError("set_value() argument must be a string")

        if self._kind is ArgumentKind.FLAG:
            raise ValidationError(
                "flag %r cannot take a value" % self.display,
                title="flag cannot take a value",
                code=FaultCode.FLAG_VALUE,
                input=self.display,
                value=value,
                hint="give %s alone, without a value" % self.display,
            )

        if not self.validate(value):
            raise ValidationError(
                "invalid value %r for %s %r" % (value, self._kind.value, self.display),
                title="invalid value",
                code=FaultCode.INVALID_VALUE,
                input=self.display,
                value=value,
                hint="check the accepted values of %s" % self.display,
            )

        self._value = value
        self._is_set = True

    def set_flag(self, flag=True, /):
        """
        Toggle a flag's presence.

        Raises
        - ValidationError: when this argument is not a flag.
        """
        if self._kind is not ArgumentKind.FLAG:
            raise ValidationError(
                "%s %r is not a flag" % (self._kind.value, self.display),
                title="not a flag",
                code=FaultCode.NON_FLAG_TOGGLE,
                input=self.display,
                hint="give %s a value instead" % self.display,
            )
        self._is_set = bool(flag)

    def _reset(self):
        self._value = None
        self._is_set = False

    # ── typed access ────────────────────────────────────────────────────────

    def get(self, kind=str, /):
        """
        Resolve the active string into the requested kind.

        Returns
        - bool for flags asked for BOOL: is_set, always.
        - None (absent) when unset without default, when a flag is asked for a
          string or a number, or when a numeric conversion fails.
        - otherwise the converted value of value (if set) or default.
        """
        kind = ValueKind.of(kind)

        if self._kind is ArgumentKind.FLAG:
            return self._is_set if kind is ValueKind.BOOL else None

        if not self._is_set and self._default is None:
            return None

        return kind.convert(self._value if self._is_set else self._default)

    def get_string(self):
        result = self.get(ValueKind.STRING)
        return "" if result is None else result

    def get_int(self):
        if (result := self.get(ValueKind.INT)) is None:
            raise ValidationError(
                "cannot convert value of %r to int" % self.display,
                title="not an integer",
                code=FaultCode.UNCONVERTIBLE_VALUE,
                input=self.display,
                hint="pass a whole number to %s" % self.display,
            )
        return result

    def get_double(self):
        if (result := self.get(ValueKind.DOUBLE)) is None:
            raise ValidationError(
                "cannot convert value of %r to double" % self.display,
                title="not a number",
                code=FaultCode.UNCONVERTIBLE_VALUE,
                input=self.display,
                hint="pass a number to %s" % self.display,
            )
        return result

    def get_bool(self):
        return bool(self.get(ValueKind.BOOL))


class Flag(Argument):
    """
    Named, presence-only switch; its value is its is_set boolean.
    """
    __displayable__ = ("short", "long", "descr", "is_required", "is_set")

    __kind__ = ArgumentKind.FLAG

    def __init__(self, short=Unset, long=Unset, descr=Unset, /):
        short, long = _sanitize_names(type(self), short, long)
        self._initialize(short=short, long=long, descr=_sanitize_descr(type(self), descr))


class Option(Argument):
    """
    Named argument consuming exactly one following or attached value.
    """
    __displayable__ = ("short", "long", "descr", "default", "value", "is_required", "is_set")

    __kind__ = ArgumentKind.OPTION

    def __init__(self, short=Unset, long=Unset, descr=Unset, default="", /):
        short, long = _sanitize_names(type(self), short, long)
        self._initialize(short=short, long=long, descr=_sanitize_descr(type(self), descr))
        self.default_to(default)


class Positional(Argument):
    """
    Argument bound by index among the non-option tokens.
    """
    __displayable__ = ("name", "descr", "value", "is_required", "is_set")

    __kind__ = ArgumentKind.POSITIONAL

    def __init__(self, name, descr=Unset, required=False, /):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} name must be a string")
        if not (name := name.strip()):
            raise ValueError(f"{type(self).__typename__} name cannot be empty")
        if name.startswith("-"):
            raise ValueError(f"{type(self).__typename__} name {name!r} cannot start with '-'")
        self._initialize(name=name, descr=_sanitize_descr(type(self), descr), required=required)


__all__ = (
    "ArgumentKind",
    "Argument",
    "Flag",
    "Option",
    "Positional",
)

# The metaclass is an implementation detail of the argument classes.
del ArgumentType
