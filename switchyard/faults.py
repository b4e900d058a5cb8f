"""
Switchyard faults (errors and warnings) and their rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing dispatch failure.
- CommandException: base type for faults. A fault carries a message plus options
  (title, code, hint and any context) and renders itself with rich.
- CommandWarning: base type for non-fatal notices, emitted through warnings.warn.
- getdoc(): optional long description for a code, looked up in the host application.

Faults are values
- The option parser and the dispatcher's validation steps *return* faults instead of
  raising them. The dispatcher pattern-matches on the fault type to decide between
  general help and command help. Faults are still Exception subclasses so host code
  may raise them from its own layers if it wants to.

Host configuration (read from __main__)
- __prog__:   program name shown in the fault header.
- __styles__: palette overrides (keys listed in CommandException.__rich__).
- __codes__:  FaultCode → label remapping used by FaultCode.normalize().
- __docs__:   FaultCode → documentation string used by getdoc().
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset, progname


def _host(name, default, /):
    return getattr(sys.modules.get("__main__"), name, default)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (2110x): NO_ARGUMENTS, UNKNOWN_COMMAND
    - switches (2111x/2112x): MALFORMED_TOKEN, UNKNOWN_OPTION, FLAG_ASSIGNMENT,
      MISSING_OPTION_VALUE, DUPLICATED_OPTION, UNCASTABLE_VALUE, INVALID_CHOICE,
      MISSING_REQUIRED_OPTION
    - positionals (2113x): WRONG_ARGUMENT_COUNT
    - warnings (2211x): AMBIGUOUS_EXIT_CODE

    gaps between values leave room for additions without renumbering.
    """
    # --- routing ---
    NO_ARGUMENTS            = 21101
    UNKNOWN_COMMAND         = 21102

    # --- switches ---
    MALFORMED_TOKEN         = 21111
    UNKNOWN_OPTION          = 21112
    FLAG_ASSIGNMENT         = 21113
    MISSING_OPTION_VALUE    = 21114
    DUPLICATED_OPTION       = 21115
    UNCASTABLE_VALUE        = 21121
    INVALID_CHOICE          = 21122
    MISSING_REQUIRED_OPTION = 21123

    # --- positionals ---
    WRONG_ARGUMENT_COUNT    = 21131

    # --- warnings ---
    AMBIGUOUS_EXIT_CODE     = 22111

    def normalize(self):
        """
        return the display label for this code.

        the host may map codes to friendlier labels through __codes__ in __main__;
        otherwise the numeric value is used.
        """
        return str(_host("__codes__", {}).get(self, self.value))


def _render(fault, palette, title_style, message_style):
    # Shared layout for exceptions and warnings: header, message, hint.
    styles = defaultdict(str, palette | _host("__styles__", {}))
    colorful = fault.options.get("colorful", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), styles[style] if colorful else "")

    header = Text.assemble(
        "[ ",
        text(fault.options.get("prog") or progname(), "prog-name"),
        " — ",
        text(fault.options["code"].normalize() if "code" in fault.options else "", "code"),
        " | ",
        text(str(fault.options.get("title", "")).title(), title_style),
        " ]",
    )
    renders = [header, text(fault.message, message_style)]
    if hint := fault.options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
    return Group(*renders)


class CommandException(Exception):
    """
    base fault: a message plus read-only render/context options.

    common options
    - title: short headline (title-cased in the header).
    - code: FaultCode.
    - hint: one actionable sentence.
    - colorful: style the output (off by default).
    - prog: program name override for the header.
    - anything else is context (input, expected, actual, suggestions, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message or "")
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error-title", "error-message")

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


# --- routing (rendered as general help) ---
class NoArgumentsError(CommandException): ...
class UnknownCommandError(CommandException): ...

# --- switches (rendered as command help) ---
class MalformedTokenError(CommandException): ...
class UnknownOptionError(CommandException): ...
class FlagAssignmentError(CommandException): ...
class MissingOptionValueError(CommandException): ...
class DuplicatedOptionError(CommandException): ...
class UncastableValueError(CommandException): ...
class InvalidChoiceError(CommandException): ...
class MissingRequiredOptionError(CommandException): ...

# --- positionals (rendered as command help) ---
class WrongArgumentCountError(CommandException): ...


class CommandWarning(Warning):
    """
    base warning: same shape as CommandException, emitted with warnings.warn.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message or "")
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning-title", "warning-message")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class AmbiguousExitCodeWarning(CommandWarning): ...


def getdoc(code, /):
    """
    documentation for a fault code, taken from __docs__ in __main__ (or None).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return _host("__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "CommandException",
    "NoArgumentsError",
    "UnknownCommandError",
    "MalformedTokenError",
    "UnknownOptionError",
    "FlagAssignmentError",
    "MissingOptionValueError",
    "DuplicatedOptionError",
    "UncastableValueError",
    "InvalidChoiceError",
    "MissingRequiredOptionError",
    "WrongArgumentCountError",
    "CommandWarning",
    "AmbiguousExitCodeWarning",
    "getdoc",
)
