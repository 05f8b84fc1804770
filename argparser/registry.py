"""
argparser registry: ownership and lookup of declared arguments.

The registry owns every Argument for the lifetime of its parser. It keeps
two views of the same objects:

- an ordered list (declaration order), significant for help layout and for
  positional slot assignment;
- a name index (short names, long names and positional names share a single
  namespace) used by the dispatcher and the typed getters.

Collisions are declaration-time errors: redeclaring an indexed name raises
TypeError and leaves the registry untouched. The names "h" and "help" are
reserved for the help request and cannot be declared by flags or options.
"""
from .arguments import ArgumentKind, Flag, Option, Positional
from .utils import Unset

RESERVED = frozenset({"h", "help"})


class Registry:
    """
    ordered container + name index of arguments.

    iteration yields arguments in declaration order; `name in registry` tests
    the index; len() counts arguments (not keys).
    """

    def __init__(self):
        self._arguments = []
        self._index = {}

    def _register(self, argument):
        # Check every key before indexing any, so a failed declaration leaves no trace.
        for key in argument.keys:
            if key in RESERVED and argument.kind is not ArgumentKind.POSITIONAL:
                raise TypeError(f"registry name {key!r} is reserved for help")
            if key in self._index:
                raise TypeError(f"registry name {key!r} is already in use by {self._index[key].display!r}")

        self._arguments.append(argument)
        self._index.update(dict.fromkeys(argument.keys, argument))
        return argument

    def add_flag(self, short=Unset, long=Unset, descr=Unset, /):
        """
        declare a presence-only flag and return it for fluent configuration.
        """
        return self._register(Flag(short, long, descr))

    def add_option(self, short=Unset, long=Unset, descr=Unset, default="", /):
        """
        declare a value-bearing option and return it for fluent configuration.

        default is string-encoded (numbers and booleans accepted); "" means none.
        """
        return self._register(Option(short, long, descr, default))

    def add_positional(self, name, descr=Unset, required=False, /):
        """
        declare a positional argument and return it for fluent configuration.

        positionals bind to leftover tokens by declaration order.
        """
        return self._register(Positional(name, descr, required))

    def find(self, name, /):
        """
        exact-match lookup; None when the name is not declared.
        """
        if not isinstance(name, str):
            raise TypeError("find() argument must be a string")
        return self._index.get(name)

    @property
    def positionals(self):
        return tuple(argument for argument in self._arguments if argument.kind is ArgumentKind.POSITIONAL)

    @property
    def switches(self):
        return tuple(argument for argument in self._arguments if argument.kind is not ArgumentKind.POSITIONAL)

    def reset(self):
        for argument in self._arguments:
            argument._reset()  # NOQA: registry owns its arguments

    def __iter__(self):
        return iter(tuple(self._arguments))

    def __len__(self):
        return len(self._arguments)

    def __contains__(self, name):
        return name in self._index

    def __repr__(self):
        return "registry(%s)" % ", ".join(argument.display for argument in self._arguments)


__all__ = (
    "Registry",
    "RESERVED",
)
