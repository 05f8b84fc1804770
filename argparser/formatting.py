"""
Help rendering.

render(parser) lays out the help screen as a rich Text; its .plain form is the
text returned by ArgParser.help():

    <description>

    Usage: <prog> [OPTIONS] <required> [<optional>]

    Positional arguments:
     input         source file (required)

    Options:
     -p, --port    listening port (default: 8080)
     -v, --verbose verbose output

    Version: <version>

Palette keys (override through a __styles__ mapping in __main__):
- description, usage-label, program-name, positional-name, option-name,
  flag-name, section-label, argument-description, default, required,
  version-label, version.
"""
import os.path
import sys
from collections import defaultdict

from rich.text import Text

from .arguments import ArgumentKind


def _label(argument):
    # Name cell of an argument row: "input", "-p, --port", "--verbose", "-v".
    if argument.kind is ArgumentKind.POSITIONAL:
        return argument.name
    return ", ".join(filter(None, (
        argument.short and "-" + argument.short,
        argument.long and "--" + argument.long,
    )))


def render(parser, *, colorful=False):
    """
    Render the full help screen of parser as rich Text.

    Sections appear only when they have content: the description block, the
    "[OPTIONS]" usage marker, the positional and option tables, the version line.
    Name cells are padded to the widest cell across both tables.
    """
    styles = defaultdict(str, {
        "description": "italic #A3A3A3",
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "section-label": "bold #FFFFFF",
        "positional-name": "bold #FFD600",
        "option-name": "bold #00E6FF",
        "flag-name": "bold #22C55E",
        "argument-description": "#9CA3AF",
        "default": "#737373",
        "required": "bold #EF4444",
        "version-label": "bold #36C5F0",
        "version": "#E5E7EB",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if isinstance(fragment, Text):
            return fragment.copy() if colorful else Text(fragment.plain)
        return Text(str(fragment), styler(style))

    arguments = list(parser.registry)
    positionals = [argument for argument in arguments if argument.kind is ArgumentKind.POSITIONAL]
    switches = [argument for argument in arguments if argument.kind is not ArgumentKind.POSITIONAL]
    width = max(map(len, map(_label, arguments)), default=0)

    help = Text()

    if parser.descr:
        help.append_text(text(parser.descr, "description")).append("\n\n")

    prog = parser.prog or os.path.basename(sys.argv[0])
    help.append_text(text("Usage:", "usage-label")).append(" ")
    help.append_text(text(prog, "program-name"))
    if switches:
        help.append(" [OPTIONS]")
    for argument in positionals:
        if argument.is_required:
            help.append(" ").append_text(text(argument.name, "positional-name"))
        else:
            help.append(" [").append_text(text(argument.name, "positional-name")).append("]")
    help.append("\n\n")

    def row(argument, style):
        line = Text(" ")
        line.append_text(text(_label(argument).ljust(width), style))
        if argument.descr:
            line.append(" ").append_text(text(argument.descr, "argument-description"))
        if argument.default is not None:
            line.append(" ").append_text(text("(default: %s)" % argument.default, "default"))
        if argument.is_required:
            line.append(" ").append_text(text("(required)", "required"))
        line.rstrip()
        return line.append("\n")

    if positionals:
        help.append_text(text("Positional arguments:", "section-label")).append("\n")
        for argument in positionals:
            help.append_text(row(argument, "positional-name"))

    if switches:
        if positionals:
            help.append("\n")
        help.append_text(text("Options:", "section-label")).append("\n")
        for argument in switches:
            help.append_text(row(argument, "flag-name" if argument.kind is ArgumentKind.FLAG else "option-name"))

    if parser.version:
        help.append("\n").append_text(text("Version:", "version-label")).append(" ")
        help.append_text(text(parser.version, "version"))

    help.rstrip()
    return help


__all__ = (
    "render",
)
