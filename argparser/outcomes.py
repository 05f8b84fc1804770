"""
Parse outcomes.

ArgParser.parse() never unwinds with a fault and never exits the process; it
returns one of:

- Success(parser)        every token was dispatched and every required
                         argument is set; query the parser's typed getters.
- Failure(fault)         the first fault met (fail-fast); arguments set before
                         it remain set.
- HelpRequested(help)    -h/--help was met; help holds the rendered help text.

All outcomes support structural matching:

    match parser.parse(tokens):
        case Success(parser):
            ...
        case Failure(fault):
            ...
        case HelpRequested(help):
            ...
"""
from typing import final

from .faults import ArgumentFault, HelpRequest


class Outcome:
    """
    base of the three parse outcomes.

    ok is True only for Success; unwrap() returns the parser on Success and
    raises otherwise (the fault itself, or HelpRequest).
    """
    __slots__ = ()

    ok = False

    def unwrap(self):
        raise NotImplementedError

    def __init_subclass__(cls, **options):
        if cls.__module__ != __name__:
            raise TypeError(f"type {cls.__name__!r} is not an acceptable base type")
        super().__init_subclass__(**options)


@final
class Success(Outcome):
    __slots__ = ("parser",)
    __match_args__ = ("parser",)

    ok = True

    def __init__(self, parser, /):
        self.parser = parser

    def unwrap(self):
        return self.parser

    def __repr__(self):
        return "success(%r)" % self.parser


@final
class Failure(Outcome):
    __slots__ = ("fault",)
    __match_args__ = ("fault",)

    def __init__(self, fault, /):
        if not isinstance(fault, ArgumentFault):
            raise TypeError("failure() argument must be an argument fault")
        self.fault = fault

    @property
    def kind(self):
        """
        The fault class, e.g. UnknownArgumentError.
        """
        return type(self.fault)

    @property
    def message(self):
        return str(self.fault)

    def unwrap(self):
        raise self.fault

    def __repr__(self):
        return "failure(%s: %s)" % (type(self.fault).__name__, self.fault)


@final
class HelpRequested(Outcome):
    __slots__ = ("help",)
    __match_args__ = ("help",)

    def __init__(self, help, /):
        self.help = help

    def unwrap(self):
        raise HelpRequest(self.help)

    def __repr__(self):
        return "help-requested()"


__all__ = (
    "Outcome",
    "Success",
    "Failure",
    "HelpRequested",
)
