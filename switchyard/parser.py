"""
Switchyard option parser: consume switch tokens, keep positional tokens.

OptionSet(specs) indexes a command's Option/Flag specs by every name and parses a
token sequence against them. Parsing never raises on user input: it returns either a
Parsed result or the first fault found (a CommandException instance), so callers can
pattern-match on the outcome.

Token grammar
- '--name=value' / '-n=value'   inline value (options only; flags reject '=...')
- '--name value' / '-n value'   spaced value (options only)
- '--name' / '-n'               flag presence
- '--'                          end of switches; every later token is positional
- '-' and negative numbers ('-1', '-2.5') are positional tokens
- anything else not starting with '-' is positional, order preserved

Result
- Parsed.values:    {dest: value} for every spec (defaults for absent options, False for absent flags)
- Parsed.remaining: positional tokens in order
- Parsed.supplied:  dests given on the command line
"""
import difflib
import re
from collections import deque, namedtuple

from .faults import *
from .options import Option, Flag

Parsed = namedtuple("Parsed", ("values", "remaining", "supplied"))


def _ordinal(number):
    words = {1: "first", 2: "second", 3: "third", 4: "fourth", 5: "fifth",
             6: "sixth", 7: "seventh", 8: "eighth", 9: "ninth", 10: "tenth"}
    if number in words:
        return words[number]
    if 10 < number % 100 < 20:
        return f"{number}th"
    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _positional(token):
    return token == "-" or not token.startswith("-") or re.fullmatch(r"-\d[\d_.]*", token) is not None


class OptionSet:
    """
    Ordered, name-indexed collection of Option/Flag specs.

    Raises
    - TypeError: an element is not an Option or Flag.
    - ValueError: two specs share a name or a dest.
    """

    def __init__(self, specs=(), /):
        self._specs = []
        self._switches = {}
        dests = set()
        for spec in specs:
            if not isinstance(spec, Option | Flag):
                raise TypeError(f"option set elements must be options or flags, got {type(spec).__name__}")
            for name in spec.names:
                if name in self._switches:
                    raise ValueError(f"option name {name!r} is already in use")
            if spec.dest in dests:
                raise ValueError(f"option dest {spec.dest!r} is already in use")
            dests.add(spec.dest)
            self._switches.update(dict.fromkeys(spec.names, spec))
            self._specs.append(spec)

    def __iter__(self):
        return iter(self._specs)

    def __len__(self):
        return len(self._specs)

    def __contains__(self, name):
        return name in self._switches

    def __getitem__(self, name):
        return self._switches[name]

    def parse(self, tokens, /):
        """
        parse tokens into a Parsed result, or return the first fault.

        faults (returned, never raised)
        - MalformedTokenError:     token starts with '-' but is not a valid switch spelling
        - UnknownOptionError:      switch not declared (hint suggests the closest name)
        - FlagAssignmentError:     '--flag=value'
        - MissingOptionValueError: option at the end of input, followed by '--', or with an empty inline value
        - DuplicatedOptionError:   the same spec given twice (under any of its names)
        - UncastableValueError:    the 'type' converter raised ValueError or TypeError
        - InvalidChoiceError:      converted value is not one of the declared choices
        """
        tokens = deque(tokens)
        remaining = []
        values = {}
        index = 0

        while tokens:
            token = tokens.popleft()
            index += 1

            if token == "--":
                remaining.extend(tokens)
                break

            if _positional(token):
                remaining.append(token)
                continue

            match = re.fullmatch(r"(?P<input>--?[^\W\d_](?:-?[^\W_])*)(=(?P<value>[^\r\n]*))?", token)
            if not match:
                return MalformedTokenError(
                    "bad form of option or flag %r at %s position" % (token, _ordinal(index)),
                    title="malformed option or flag",
                    code=FaultCode.MALFORMED_TOKEN,
                    hint="use '--name', '--name value' or '--name=value' (put '--' before values starting with '-')",
                    input=token,
                    index=index,
                )

            input, value = match["input"], match["value"]

            try:
                spec = self._switches[input]
            except KeyError:
                suggestions = difflib.get_close_matches(input, self._switches.keys(), 3)
                if suggestions:
                    hint = "did you mean %r?" % suggestions[0]
                elif self._switches:
                    hint = "see the options listed below"
                else:
                    hint = "this command takes no options"
                return UnknownOptionError(
                    "unknown option or flag %r at %s position" % (input, _ordinal(index)),
                    title="unknown option or flag",
                    code=FaultCode.UNKNOWN_OPTION,
                    hint=hint,
                    input=input,
                    index=index,
                    suggestions=suggestions,
                )

            if spec.dest in values:
                kind = "option" if isinstance(spec, Option) else "flag"
                return DuplicatedOptionError(
                    "%s %r at %s position was already provided" % (kind, input, _ordinal(index)),
                    title="duplicated %s" % kind,
                    code=FaultCode.DUPLICATED_OPTION,
                    hint="keep a single %s; each %s can be given only once" % (kind, kind),
                    input=input,
                    index=index,
                    argument=spec,
                )

            if isinstance(spec, Flag):
                if value is not None:
                    return FlagAssignmentError(
                        "flag %r at %s position cannot have an inline value" % (input, _ordinal(index)),
                        title="flag cannot take a value",
                        code=FaultCode.FLAG_ASSIGNMENT,
                        hint="remove everything from '=' (for example: %s)" % input,
                        input=input,
                        index=index,
                        argument=spec,
                    )
                values[spec.dest] = True
                continue

            if value is None:
                if not tokens or tokens[0] == "--":
                    value = ""
                else:
                    value = tokens.popleft()
                    index += 1

            if not value:
                return MissingOptionValueError(
                    "option %r at %s position requires a value" % (input, _ordinal(index)),
                    title="missing option value",
                    code=FaultCode.MISSING_OPTION_VALUE,
                    hint="pass it inline (%s=<value>) or after a space (%s <value>)" % (input, input),
                    input=input,
                    index=index,
                    argument=spec,
                )

            try:
                converted = spec.type(value)
            except (ValueError, TypeError) as exception:
                return UncastableValueError(
                    "value %r for option %r at %s position is not valid" % (value, input, _ordinal(index)),
                    title="invalid option value",
                    code=FaultCode.UNCASTABLE_VALUE,
                    hint=str(exception) or "check the expected value type",
                    input=input,
                    index=index,
                    argument=spec,
                    exception=exception,
                )

            if spec.choices and converted not in spec.choices:
                return InvalidChoiceError(
                    "value %r for option %r at %s position is not an allowed choice" % (value, input, _ordinal(index)),
                    title="invalid choice",
                    code=FaultCode.INVALID_CHOICE,
                    hint="choose one of: %s" % ", ".join(map(str, spec.choices)),
                    input=input,
                    index=index,
                    argument=spec,
                    choices=spec.choices,
                )

            values[spec.dest] = converted

        supplied = frozenset(values)
        for spec in self._specs:
            values.setdefault(spec.dest, spec.default)
        return Parsed(values, tuple(remaining), supplied)

    def missing(self, parsed, /):
        """
        first required option not supplied in parsed, or None.
        """
        for spec in self._specs:
            if spec.required and spec.dest not in parsed.supplied:
                return spec
        return None


__all__ = (
    "OptionSet",
    "Parsed",
)
