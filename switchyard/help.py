"""
Switchyard help rendering (rich-based, plain unless colorful).

Renderers
- render_summary(commands, stream): every command with its one-line description.
- render_command_detail(command, stream, skip_program_name): usage line, long
  description, aliases, options and the positional-argument note of one command.
- render_parsed_echo(command, values, stream): one-line "executing ..." confirmation.
- render_fault(fault, stream): a fault block (header, message, hint).

Every renderer writes to the stream it is given and nothing else.

Palette keys (override through __styles__ in __main__)
- usage-label, program-name, command-name, alias-name, description, details
- group-label, option-name, metavar, choice, option-description, marker
- hint, echo-label, echo-value
"""
import copy
import sys
from collections import defaultdict

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .options import Option
from .utils import pluralize, progname


def _console(stream, colorful):
    return Console(
        file=stream,
        force_terminal=True if colorful else None,
        no_color=not colorful,
        highlight=False,
        markup=False,
        emoji=False,
    )


def _styler(colorful):
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "command-name": "bold #36C5F0",
        "alias-name": "#36C5F0",
        "description": "#9CA3AF",
        "details": "italic #A3A3A3",
        "group-label": "bold #FFFFFF",
        "option-name": "bold #00E6FF",
        "metavar": "bold #FFD600",
        "choice": "bold #FF4D94",
        "option-description": "#9CA3AF",
        "marker": "#F97316",
        "hint": "italic #9CE19C",
        "echo-label": "bold #22C55E",
        "echo-value": "#E5E7EB",
    } | getattr(sys.modules.get("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        if fragment is None:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), styles[style] if colorful else "")

    return text


def _metavar(option, text):
    if option.choices:
        return Text.assemble("{", Text(",").join(text(choice, "choice") for choice in option.choices), "}")
    return text(option.metavar or "<%s>" % option.dest.replace("_", "-"), "metavar")


def render_summary(commands, stream, /, skip_program_name=False, *, colorful=False):
    """
    List every command (name, aliases) with its one-line description.
    """
    text = _styler(colorful)
    prog = "" if skip_program_name else progname() + " "

    usage = Text.assemble(
        text("usage", "usage-label"), ": ",
        text(prog, "program-name"),
        "<command> [options] [arguments]",
    )

    table = Table.grid(padding=(0, 4))
    table.add_column(no_wrap=True)
    table.add_column()
    for command in commands:
        names = Text(", ").join((
            text(command.name, "command-name"),
            *(text(alias, "alias-name") for alias in command.aliases),
        ))
        table.add_row(Text("  ") + names, text(command.descr, "description"))

    hint = text("run '%shelp <command>' for details on a command" % prog, "hint")

    _console(stream, colorful).print(Group(
        usage,
        Text(""),
        Text.assemble(text("available commands", "group-label"), ":"),
        table,
        Text(""),
        hint,
    ))


def render_command_detail(command, stream, /, skip_program_name=False, *, colorful=False):
    """
    Full help of one command.
    """
    text = _styler(colorful)
    renders = []

    header = Text.assemble("'", text(command.name, "command-name"), "'")
    if command.descr:
        header.append(" - ").append(text(command.descr, "description"))
    renders.append(header)

    if command.details:
        renders.extend((Text(""), text(command.details, "details")))

    usage = Text.assemble(text("usage", "usage-label"), ": ")
    if not skip_program_name:
        usage.append(text(progname(), "program-name")).append(" ")
    usage.append(text(command.name, "command-name"))
    if any(not option.hidden for option in command.options):
        usage.append(" [options]")
    if command.usage:
        usage.append(" ").append(text(command.usage, "metavar"))
    renders.extend((Text(""), usage))

    if command.aliases:
        renders.append(Text.assemble(
            text("aliases", "group-label"), ": ",
            Text(", ").join(text(alias, "alias-name") for alias in command.aliases),
        ))

    if options := [option for option in command.options if not option.hidden]:
        table = Table.grid(padding=(0, 4))
        table.add_column(no_wrap=True)
        table.add_column()
        for option in options:
            names = Text(", ").join(text(name, "option-name") for name in sorted(option.names, key=len))
            if isinstance(option, Option):
                names.append(" ").append(_metavar(option, text))
            descr = text(option.descr, "option-description")
            if option.required:
                descr.append(" ").append(text("(required)", "marker"))
            elif isinstance(option, Option) and option.default is not None:
                descr.append(" ").append(text("[default: %s]" % (option.default,), "marker"))
            table.add_row(Text("  ") + names, descr)
        renders.extend((Text(""), Text.assemble(text("options", "group-label"), ":"), table))

    if command.nargs is not None:
        renders.extend((Text(""), text("expects %s" % pluralize("argument", command.nargs), "hint")))

    _console(stream, colorful).print(Group(*renders))


def render_parsed_echo(command, values, stream, /, *, colorful=False):
    """
    One line confirming the command about to run and its resolved options.
    """
    text = _styler(colorful)
    line = Text.assemble(text("executing", "echo-label"), " ", text(command.name, "command-name"))
    if values:
        line.append(": ").append(Text(", ").join(
            text("%s=%r" % (dest, value), "echo-value") for dest, value in values.items()
        ))
    _console(stream, colorful).print(line, soft_wrap=True)


def render_fault(fault, stream, /, *, colorful=False):
    """
    Render a fault block (header, message, hint).
    """
    _console(stream, colorful).print(copy.replace(fault, colorful=colorful))


__all__ = (
    "render_summary",
    "render_command_detail",
    "render_parsed_echo",
    "render_fault",
)
