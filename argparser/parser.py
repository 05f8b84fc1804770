"""
argparser parser: declare, parse, query.

What this module provides
- ArgParser: owns a Registry of arguments and turns a raw token list into
  bound argument state.
  • declaration: add_flag / add_option / add_positional (fluent Arguments).
  • parsing: parse(tokens) / parse_argv(argv) return an Outcome
    (Success, Failure or HelpRequested); nothing is raised and nothing exits.
  • querying: get / get_string / get_int / get_double / get_bool / is_set /
    positionals, reading argument state directly on every call.
  • help: help() (plain text) and print_help() (rich console).
- invoke(parser, prompt): CLI bootstrap turning outcomes into process exits.

Token grammar (single left-to-right pass, no backtracking)
- "-h" / "--help": help outcome; checked first on every step.
- "--name", "--name value", "--name=value": long flag or option.
- "-n", "-n value", "-nvalue": short flag or option; the short name is the
  single character after '-', trailing characters are the attached value.
- anything else (including a lone "-"): positional value.

After the pass, declared positionals take the collected positional values by
index, then required arguments are checked in declaration order (first
missing one fails).

Quick start
    from argparser import ArgParser, invoke

    parser = ArgParser("copy", "copy a file")
    parser.add_flag("v", "verbose", "verbose output")
    parser.add_option("b", "buffer", "buffer size", 4096)
    parser.add_positional("source", "file to read", True)
    parser.add_positional("target", "file to write")

    if __name__ == "__main__":
        invoke(parser)
        print(parser.get_int("buffer"), parser.get_string("source"))
"""
import contextlib
import copy
import difflib
import functools
import shlex
import sys
from collections import deque
from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .arguments import ArgumentKind
from .faults import *
from .formatting import render
from .outcomes import Success, Failure, HelpRequested
from .registry import Registry
from .utils import *

HELP = frozenset({"-h", "--help"})


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _sanitize_string(cls, label, value, /):
    # Program metadata: str | Text | Unset; blank strings collapse to None.
    if not isinstance(value, str | Text | Unset):
        raise TypeError(f"{cls.__name__} {label!r} must be a string")
    if isinstance(value, str):
        value = value.strip()
    return coalesce(value) or None


class ArgParser:
    """
    Command-line parser over a registry of flags, options and positionals.

    Parameters
    - prog: Unset | str
      Program name shown in usage; parse_argv() fills it from argv[0] when unset.
    - descr: Unset | str | Text
      Description shown at the top of the help screen.
    - version: Unset | str | Text
      Version line shown at the bottom of the help screen.
    - shell: bool
      Faults and warnings are printed with rich (and exit) instead of raised/warned.
    - fancy: bool
      Help and faults are drawn inside rich panels.
    - colorful: bool
      Help and faults are styled.

    Notes
    - One parser is built and parsed by a single owner; it holds no locks.
      Separate parsers share nothing.
    - Every parse() resets argument state first, so a parser can be reused.
    """

    def __init__(self, prog=Unset, descr=Unset, /, version=Unset, *, shell=False, fancy=False, colorful=False):
        self._prog = _sanitize_string(type(self), "prog", prog)
        self._descr = _sanitize_string(type(self), "descr", descr)
        self._version = _sanitize_string(type(self), "version", version)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._registry = Registry()
        self._positionals = []
        self._warnings = []
        self._index = 0

    prog = mirror("prog")
    descr = mirror("descr")
    version = mirror("version")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    @property
    def registry(self):
        return self._registry

    # ── metadata (fluent) ───────────────────────────────────────────────────

    def program(self, name, /):
        self._prog = _sanitize_string(type(self), "prog", name)
        return self

    def description(self, descr, /):
        self._descr = _sanitize_string(type(self), "descr", descr)
        return self

    def release(self, version, /):
        self._version = _sanitize_string(type(self), "version", version)
        return self

    # ── declaration ─────────────────────────────────────────────────────────

    def add_flag(self, short=Unset, long=Unset, descr=Unset, /):
        return self._registry.add_flag(short, long, descr)

    def add_option(self, short=Unset, long=Unset, descr=Unset, default="", /):
        return self._registry.add_option(short, long, descr, default)

    def add_positional(self, name, descr=Unset, required=False, /):
        return self._registry.add_positional(name, descr, required)

    def find(self, name, /):
        return self._registry.find(name)

    # ── faults ──────────────────────────────────────────────────────────────

    @property
    def _options(self):
        return {"tool": self, "shell": self._shell, "fancy": self._fancy, "colorful": self._colorful}

    def trigger(self, fault, /, **options):
        """
        surface a fault or warning with this parser's runtime options merged in.
        """
        return trigger(fault, **options, **self._options)

    def _unknown(self, token, input, candidates):
        suggestions = difflib.get_close_matches(input, candidates, 3)
        try:
            hint = "did you mean %r? run '%s --help' to see all options" % (suggestions[0], self._route)
        except IndexError:
            hint = "run '%s --help' to see all available options" % self._route
        return UnknownArgumentError(
            "unknown argument %r at %s position" % (input, _ordinal(self._index)),
            title="unknown argument",
            code=FaultCode.UNKNOWN_ARGUMENT,
            token=token,
            input=input,
            index=self._index,
            suggestions=suggestions,
            hint=hint,
        )

    def _missing_value(self, token, argument):
        return ParseError(
            "option %r at %s position expects a value" % (argument.display, _ordinal(self._index)),
            title="missing option value",
            code=FaultCode.MISSING_OPTION_VALUE,
            token=token,
            input=argument.display,
            index=self._index,
            hint="pass a value after it (for example: %s <value>)" % token,
        )

    def _warn(self, warning):
        # Held back until the pass is over; see _surface().
        self._warnings.append(copy.replace(warning, **self._options))

    def _surface(self):
        """
        emit the warnings collected by the last pass.

        a host escalating warnings to errors never aborts a parse: the
        escalated warning stays readable through warnings().
        """
        for warning in self._warnings:
            with contextlib.suppress(ArgumentWarning):
                trigger(warning)

    @property
    def _route(self):
        return self._prog or "prog"

    # ── dispatch ────────────────────────────────────────────────────────────

    def _apply(self, argument, value, token):
        """
        store a value (or a flag's presence) with the per-parse diagnostics.
        """
        if argument.is_set:
            self._warn(RepeatedArgumentWarning(
                "%s %r at %s position was already given; the last one wins" % (
                    argument.kind.value, argument.display, _ordinal(self._index)
                ),
                title="repeated %s" % argument.kind.value,
                code=FaultCode.REPEATED_ARGUMENT,
                token=token,
                input=argument.display,
                index=self._index,
                hint="keep a single %s" % argument.display,
            ))

        if value is Unset:
            argument.set_flag(True)
            return

        try:
            argument.set_value(value)
        except ValidationError as fault:
            raise copy.replace(fault, token=token, index=self._index) from None

    def _parse_long(self, token, tokens):
        """
        handle "--name", "--name value" and "--name=value".

        the name is everything before the first '='; the inline value (possibly
        empty) is everything after it.
        """
        input, equals, value = token[2:].partition("=")

        if (argument := self._registry.find(input)) is None or argument.kind is ArgumentKind.POSITIONAL:
            raise self._unknown(token, "--" + input, [
                "--" + switch.long for switch in self._registry.switches if switch.long
            ])

        if argument.kind is ArgumentKind.FLAG:
            if equals:
                raise ParseError(
                    "flag %r at %s position cannot have an inline value" % (argument.display, _ordinal(self._index)),
                    title="flag cannot take a value",
                    code=FaultCode.FLAG_ASSIGNMENT,
                    token=token,
                    input=argument.display,
                    index=self._index,
                    hint="remove everything from '=' (for example: --%s)" % input,
                )
            self._apply(argument, Unset, token)
            self._index += 1
            return

        if equals:
            if not value:
                self._warn(EmptyValueWarning(
                    "empty inline value for option %r at %s position" % (argument.display, _ordinal(self._index)),
                    title="empty inline value",
                    code=FaultCode.EMPTY_INLINE_VALUE,
                    token=token,
                    input=argument.display,
                    index=self._index,
                    hint="add a value after '=' (for example: %s=<value>)" % argument.display,
                ))
            self._apply(argument, value, token)
            self._index += 1
            return

        try:
            value = tokens.popleft()
        except IndexError:
            raise self._missing_value(token, argument) from None
        self._apply(argument, value, token)
        self._index += 2

    def _parse_short(self, token, tokens):
        """
        handle "-n", "-n value" and "-nvalue".

        only the first character after '-' names the argument; no clustering.
        """
        input, attached = token[1], token[2:]

        if (argument := self._registry.find(input)) is None or argument.kind is ArgumentKind.POSITIONAL:
            raise self._unknown(token, "-" + input, [
                "-" + switch.short for switch in self._registry.switches if switch.short
            ])

        if argument.kind is ArgumentKind.FLAG:
            self._apply(argument, Unset, token)
            self._index += 1
            return

        if attached:
            self._apply(argument, attached, token)
            self._index += 1
            return

        try:
            value = tokens.popleft()
        except IndexError:
            raise self._missing_value(token, argument) from None
        self._apply(argument, value, token)
        self._index += 2

    def _bind_positionals(self):
        """
        give the Nth declared positional the Nth positional value.

        surplus declared positionals stay unset; surplus values stay only in
        positionals().
        """
        for argument, value in zip(self._registry.positionals, self._positionals):
            argument.set_value(value)

    def validate_required(self):
        """
        fail on the first required argument (declaration order) left unset.

        Raises
        - MissingArgumentError naming the positional, or --long / -short.
        """
        for argument in self._registry:
            if argument.is_required and not argument.is_set:
                raise MissingArgumentError(
                    "missing required argument %r" % argument.display,
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    input=argument.display,
                    argument=argument,
                    hint="add %s or run '%s --help' to see the expected usage" % (argument.display, self._route),
                )

    def _parseargs(self, tokens):
        """
        run one full pass over tokens; faults propagate as exceptions.

        returns the help text when a help token was met, otherwise Unset.
        """
        self._registry.reset()
        self._positionals.clear()
        self._warnings.clear()
        self._index = 1

        while tokens:
            token = tokens.popleft()

            if token in HELP:
                return self.help()

            if token.startswith("--"):
                self._parse_long(token, tokens)
            elif token.startswith("-") and len(token) > 1:
                self._parse_short(token, tokens)
            else:
                self._positionals.append(token)
                self._index += 1

        self._bind_positionals()
        self.validate_required()
        return Unset

    def parse(self, tokens, /):
        """
        parse tokens (without the program name) into this parser's arguments.

        Returns
        - Success(self) when every token was dispatched and requirements hold.
        - Failure(fault) on the first fault; earlier arguments stay set.
        - HelpRequested(help) when -h/--help was met.

        Raises
        - TypeError when tokens is not an iterable of strings.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = deque(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be an iterable of strings")

        try:
            help = self._parseargs(tokens)
        except ArgumentFault as fault:
            outcome = Failure(copy.replace(fault, **({"index": self._index} | dict(fault.options) | self._options)))
        else:
            outcome = Success(self) if help is Unset else HelpRequested(help)

        self._surface()
        return outcome

    def parse_argv(self, argv, /):
        """
        parse a full argv; argv[0] becomes the program name when none is set.
        """
        argv = list(argv)
        if argv and not self._prog:
            self._prog = _sanitize_string(type(self), "prog", argv[0])
        return self.parse(argv[1:])

    # ── typed getters ───────────────────────────────────────────────────────

    def _lookup(self, name):
        if (argument := self._registry.find(name)) is None:
            raise ArgumentError(
                "argument %r not found" % name,
                title="argument not found",
                code=FaultCode.ARGUMENT_NOT_FOUND,
                input=name,
                hint="declare %r before querying it" % name,
            )
        return argument

    def get(self, name, kind=str, /):
        """
        typed value of the named argument; None when unknown, unset without
        default, or not convertible.
        """
        if (argument := self._registry.find(name)) is None:
            return None
        return argument.get(kind)

    def get_string(self, name, /):
        if (argument := self._registry.find(name)) is None:
            return ""
        return argument.get_string()

    def get_int(self, name, /):
        return self._lookup(name).get_int()

    def get_double(self, name, /):
        return self._lookup(name).get_double()

    def get_bool(self, name, /):
        if (argument := self._registry.find(name)) is None:
            return False
        return argument.get_bool()

    def is_set(self, name, /):
        if (argument := self._registry.find(name)) is None:
            return False
        return argument.is_set

    def positionals(self):
        """
        every positional token of the last parse, bound or not.
        """
        return tuple(self._positionals)

    def warnings(self):
        """
        every warning met by the last parse, in token order.
        """
        return tuple(self._warnings)

    # ── help ────────────────────────────────────────────────────────────────

    def help(self):
        return render(self).plain

    def print_help(self, *, stderr=False):
        renderable = render(self, colorful=self._colorful)
        if self._fancy:
            renderable = Panel(
                renderable,
                title="[ %s HELP ]" % str(self._prog).upper() if self._prog else "[ HELP ]",
                title_align="left",
            )
        Console(stderr=stderr).print(renderable)

    # ── bootstrap ───────────────────────────────────────────────────────────

    def __invoke__(self, prompt=Unset):
        """
        Parse a prompt and act on the outcome like a CLI would.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Behavior
        - HelpRequested: print help and exit with status 0.
        - Failure: surface the fault (shell → print + exit 1; else raise).
        - Success: return the parser.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
            if not self._prog and sys.argv:
                self._prog = _sanitize_string(type(self), "prog", sys.argv[0])
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        match self.parse(tokens):
            case HelpRequested():
                self.print_help()
                sys.exit(0)
            case Failure(fault):
                if self._shell:
                    self.print_help(stderr=True)
                trigger(fault)
        return self

    def __repr__(self):
        return "arg-parser(prog=%r, arguments=%r)" % (self._prog, self._registry)


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for parsers.

    Parameters
    - object: an instance providing __invoke__(prompt).
    - prompt: Unset (sys.argv[1:]), str (shlex.split) or Iterable[str].

    Returns
    - whatever __invoke__ returns (the parser on success).

    Raises
    - TypeError: when object does not implement __invoke__.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method")


__all__ = (
    "ArgParser",
    "invoke",
)
