"""
Switchyard dispatch engine: turn an argument vector into an exit code.

dispatch(commands, arguments, stdout, stderr) walks four phases
1. routing: pick the command (single-command mode, 'help', name/alias lookup);
2. parsing: consume switches with the command's OptionSet;
3. validation: required options, then the positional-argument count;
4. execution: prepare() verdict, parsed echo, run().

With a single command, routing always selects it and drops a leading token equal
to its name or to any of its aliases (case-insensitive). A positional argument that
happens to spell an alias is therefore consumed; put '--' first to keep it.

Phases 1-3 never raise on user input. They yield either the next state or a fault
value, and the engine matches on the fault to choose what to print:
- routing faults (no command selected): a blank line, the fault, then the command
  summary on stderr. The summary is not shown alone: the fault block is
  printed first so the "did you mean" hint for a mistyped name stays visible;
- any later fault: a blank line, the fault and the selected command's help on stderr.
Both return NOT_RUN (-1), as does the explicit 'help' pseudo-command (which writes
to stdout).

Only programming errors escape: a bad commands collection, a command whose
Command.__init__ never ran, a prepare() returning something other than a verdict,
and whatever run() itself raises.
"""
import logging
import shlex
import sys
import warnings
from collections.abc import Iterable

from .commands import Command, Halt, ProceedType
from .faults import *
from .help import render_command_detail, render_fault, render_parsed_echo, render_summary
from .matcher import match, suggest
from .parser import Parsed
from .utils import Unset, pluralize

logger = logging.getLogger(__name__)

NOT_RUN = -1
"""
Exit code meaning "the command was not run" (help shown or input rejected).
"""


def _sanitize_commands(commands):
    # Programming errors: raised before any routing happens.
    if isinstance(commands, Command):
        commands = (commands,)
    elif isinstance(commands, str) or not isinstance(commands, Iterable):
        raise TypeError("dispatch() 'commands' must be a command or an iterable of commands")
    commands = tuple(commands)

    if not commands:
        raise ValueError("dispatch() requires at least one command")
    for command in commands:
        if not isinstance(command, Command):
            raise TypeError(f"dispatch() commands must be Command instances, got {type(command).__name__}")
        name = getattr(command, "_name", None)
        if not isinstance(name, str) or not name.strip():
            raise ValueError(
                f"command {type(command).__qualname__} has no name; "
                f"did it call Command.__init__ in its constructor?"
            )
    return commands


def _sanitize_arguments(arguments):
    if isinstance(arguments, str) or not isinstance(arguments, Iterable):
        raise TypeError("dispatch() 'arguments' must be an iterable of strings")
    arguments = tuple(arguments)
    if not all(isinstance(argument, str) for argument in arguments):
        raise TypeError("dispatch() arguments must be strings")
    return arguments


def _route(commands, arguments):
    """
    Phase 1: (command, tokens) on success, (None, fault) when nothing matched,
    or (command | None, None) when 'help' was requested.
    """
    if len(commands) == 1:
        command, = commands
        if arguments and match(commands, arguments[0]) is command:
            arguments = arguments[1:]
        logger.debug("single-command mode: %r", command.name)
        return command, arguments

    if not arguments:
        return None, NoArgumentsError(
            "no arguments specified",
            title="no command given",
            code=FaultCode.NO_ARGUMENTS,
            hint="pick one of the commands listed below",
        )

    if arguments[0].casefold() == "help":
        return match(commands, arguments[1] if len(arguments) > 1 else None), None

    if (command := match(commands, arguments[0])) is None:
        suggestion = suggest(commands, arguments[0])
        return None, UnknownCommandError(
            "command name %r not recognized" % arguments[0],
            title="unknown command",
            code=FaultCode.UNKNOWN_COMMAND,
            hint=("did you mean %r?" % suggestion) if suggestion else "see the commands listed below",
            input=arguments[0],
            suggestion=suggestion,
        )

    logger.debug("multi-command mode: %r selected", command.name)
    return command, arguments[1:]


def _validate(command, parsed):
    """
    Phase 3: the first validation fault for parsed, or None.
    """
    if (option := command.optionset.missing(parsed)) is not None:
        name = max(option.names, key=len)
        return MissingRequiredOptionError(
            "required option %r was not provided" % name,
            title="missing required option",
            code=FaultCode.MISSING_REQUIRED_OPTION,
            hint="pass it as %s=<value>" % name,
            argument=option,
        )

    if command.nargs is not None and len(parsed.remaining) != command.nargs:
        usage = f" {command.usage}" if command.usage else ""
        return WrongArgumentCountError(
            "expected %s but got %d" % (pluralize("argument", command.nargs), len(parsed.remaining)),
            title="wrong argument count",
            code=FaultCode.WRONG_ARGUMENT_COUNT,
            hint="usage: %s [options]%s" % (command.name, usage),
            expected=command.nargs,
            actual=len(parsed.remaining),
        )

    return None


def _execute(command, parsed, stdout, colorful):
    """
    Phase 4: prepare() verdict, echo, run().
    """
    remaining, values = parsed.remaining, parsed.values

    match command.prepare(remaining, **values):
        case Halt(code=code) if isinstance(code, int):
            logger.debug("%r halted by prepare() with exit code %d", command.name, code)
            return code
        case ProceedType():
            pass
        case verdict:
            raise TypeError(f"{command.name!r} prepare() must return Halt(<int>) or Proceed, got {verdict!r}")

    if not command.quiet:
        render_parsed_echo(command, values, stdout, colorful=colorful)

    code = command.run(remaining, **values)
    if code is None:
        code = 0
    elif not isinstance(code, int):
        raise TypeError(f"{command.name!r} run() must return an integer or None, got {type(code).__name__}")

    if code == NOT_RUN:
        warnings.warn(AmbiguousExitCodeWarning(
            "command %r returned %d, which also means 'not run'" % (command.name, NOT_RUN),
            title="ambiguous exit code",
            code=FaultCode.AMBIGUOUS_EXIT_CODE,
            hint="return another non-zero code to report failure",
            command=command,
        ), stacklevel=3)

    logger.debug("%r finished with exit code %d", command.name, code)
    return code


def dispatch(commands, arguments, stdout, stderr, /, skip_program_name=False, *, colorful=False):
    """
    Route arguments to one of commands and return the exit code.

    Parameters
    - commands: a Command, or a non-empty iterable of them (a Registry works).
    - arguments: the argument vector without the program name.
    - stdout / stderr: text streams for normal output and failure output.
    - skip_program_name: leave the program name out of usage lines.
    - colorful: style help and faults with ANSI colors.

    Returns
    - whatever the selected command returns (None counts as 0), the code carried by
      a Halt verdict, or NOT_RUN when help was shown or the input was rejected.

    Raises
    - TypeError / ValueError: malformed commands or arguments (programming errors).
    """
    commands = _sanitize_commands(commands)
    arguments = _sanitize_arguments(arguments)

    command, outcome = _route(commands, arguments)

    if outcome is None:
        if command is not None:
            render_command_detail(command, stdout, skip_program_name, colorful=colorful)
        else:
            render_summary(commands, stdout, skip_program_name, colorful=colorful)
        return NOT_RUN

    if command is not None:
        outcome = command.optionset.parse(outcome)
    if isinstance(outcome, Parsed):
        outcome = _validate(command, outcome) or outcome

    match outcome:
        case Parsed():
            return _execute(command, outcome, stdout, colorful)
        case CommandException() if command is not None:
            logger.debug("%r rejected its arguments: %s", command.name, type(outcome).__name__)
            stderr.write("\n")
            render_fault(outcome, stderr, colorful=colorful)
            render_command_detail(command, stderr, skip_program_name, colorful=colorful)
            return NOT_RUN
        case CommandException():
            logger.debug("no command selected: %s", type(outcome).__name__)
            stderr.write("\n")
            render_fault(outcome, stderr, colorful=colorful)
            render_summary(commands, stderr, skip_program_name, colorful=colorful)
            return NOT_RUN


def invoke(commands, prompt=Unset, /, *, colorful=Unset):
    """
    Dispatch from the process: sys.argv, sys.stdout and sys.stderr.

    prompt
    - Unset: sys.argv[1:]
    - str: split like a shell would (shlex.split)
    - iterable of str: used as-is

    colorful defaults to whether stdout is a terminal. The result is meant for
    sys.exit(); a negative code is reported by the shell as 255.
    """
    if prompt is Unset:
        prompt = sys.argv[1:]
    elif isinstance(prompt, str):
        prompt = shlex.split(prompt)

    if colorful is Unset:
        colorful = sys.stdout.isatty()

    return dispatch(commands, prompt, sys.stdout, sys.stderr, colorful=bool(colorful))


__all__ = (
    "NOT_RUN",
    "dispatch",
    "invoke",
)
