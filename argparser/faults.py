"""
argparser faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue.
- ArgumentFault / ArgumentWarning: base types carrying message + options that
  know how to render themselves with rich and how to surface themselves.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

Hierarchy
- ArgumentFault
  • ArgumentError          (lookup failures)
    – UnknownArgumentError (token names an unregistered option)
    – MissingArgumentError (required argument never set)
  • ParseError             (missing option value, value given to a flag)
  • ValidationError        (validator rejection, invalid state transition)
- ArgumentWarning
  • EmptyValueWarning, RepeatedArgumentWarning
- HelpRequest              (help outcome unwrapped by a caller)

Integration
- The parser raises faults internally and converts them into Failure outcomes.
- In non-shell mode, trigger() raises exceptions and warns warnings; in shell
  mode, both are rendered with rich on stderr and exceptions exit with status 1.
"""
import copy
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - lookup (1110x): UNKNOWN_ARGUMENT, ARGUMENT_NOT_FOUND
    - structure (1111x): MISSING_OPTION_VALUE, FLAG_ASSIGNMENT
    - values (1112x): INVALID_VALUE, FLAG_VALUE, NON_FLAG_TOGGLE, UNCONVERTIBLE_VALUE
    - completeness (1113x): MISSING_ARGUMENT
    - warnings (12xxx): EMPTY_INLINE_VALUE, REPEATED_ARGUMENT

    normalize() lets a host remap codes to its own labels.
    """
    # --- lookup errors ---
    UNKNOWN_ARGUMENT     = 11101
    ARGUMENT_NOT_FOUND   = 11102

    # --- structural errors ---
    MISSING_OPTION_VALUE = 11111
    FLAG_ASSIGNMENT      = 11112

    # --- value errors ---
    INVALID_VALUE        = 11121
    FLAG_VALUE           = 11122
    NON_FLAG_TOGGLE      = 11123
    UNCONVERTIBLE_VALUE  = 11124

    # --- completeness errors ---
    MISSING_ARGUMENT     = 11131

    # --- warnings ---
    EMPTY_INLINE_VALUE   = 12111
    REPEATED_ARGUMENT    = 12112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, defaults, kind):
    # Shared rich layout for errors and warnings: header, message, hint.
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, defaults | getattr(main, "__styles__", {}))
    colorful = options.get("colorful", True)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), styles[style] if colorful else "")

    parser = options.get("tool")
    prog = getattr(main, "__prog__", getattr(parser, "prog", None) or "argparser")

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(code.normalize() if code is not None else kind, "code"),
        " | ",
        text(options.get("title", kind).title(), kind + "-title"),
        " ]"
    )
    message = text(fault.message, kind + "-message")
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class ArgumentFault(Exception):
    """
    base type of every parsing fault.

    carries a message (also the str() of the exception) and a read-only
    mapping of options: code, title, hint, plus contextual fields such as
    token, input and index.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ArgumentError(ArgumentFault): ...
class UnknownArgumentError(ArgumentError): ...
class MissingArgumentError(ArgumentError): ...
class ParseError(ArgumentFault): ...
class ValidationError(ArgumentFault): ...


class ArgumentWarning(Warning):
    """
    base type of non-fatal parsing diagnostics.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=4)
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyValueWarning(ArgumentWarning): ...
class RepeatedArgumentWarning(ArgumentWarning): ...


class HelpRequest(Exception):
    """
    raised when a help outcome is unwrapped; carries the rendered help text.
    """

    def __init__(self, help, /):
        super().__init__(help)
        self.help = help


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - typical options: tool, shell, fancy, colorful, plus any context the
      renderer may want to show (code, title, hint, token, index).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ArgumentFault",
    "ArgumentError",
    "UnknownArgumentError",
    "MissingArgumentError",
    "ParseError",
    "ValidationError",
    "ArgumentWarning",
    "EmptyValueWarning",
    "RepeatedArgumentWarning",
    "HelpRequest",
    "trigger",
)
