"""
Switchyard command layer: declare the commands a dispatcher can route to.

What this module provides
- Command: abstract descriptor of one invocable command. Subclass it, describe the
  command in __init__ (name, description, options, required argument count) and
  implement run().
- command(...): build a Command from a plain function, reading its options from the
  function's keyword-only defaults (signature-driven, no subclass needed).
- Halt / Proceed: the two verdicts a pre-run hook (Command.prepare) can return.

Class form
    from switchyard import Command, Option, Flag

    class Copy(Command):
        def __init__(self):
            super().__init__(
                "copy",
                "copy a file",
                options=(Flag("-f", "--force", descr="overwrite the target"),),
                nargs=2,
                usage="<source> <target>",
            )

        def run(self, arguments, /, force=False):
            source, target = arguments
            ...
            return 0

Function form
    @command(nargs=1, usage="<name>")
    def greet(arguments, /, *, loud=Flag("-l", "--loud")):
        \"\"\"say hello\"\"\"
        ...

Contract
- run(arguments, /, **options) receives the positional tokens left after option
  parsing (a tuple) and every option value keyed by its dest. Returning None means 0.
- prepare(arguments, /, **options) runs after validation, before run(). Returning
  Halt(code) makes code the final exit code and skips run(); Proceed continues.
- Descriptors are read-only once built; the dispatcher never mutates them.
"""
import abc
import functools
import inspect
import operator
import re
from collections import namedtuple
from inspect import Parameter
from typing import final

from rich.text import Text

from .options import Option, Flag
from .parser import OptionSet
from .utils import *


Halt = namedtuple("Halt", ("code",))
Halt.__doc__ = """
Pre-run verdict: stop here and return 'code' as the exit code.
"""


@final
class ProceedType:
    """
    Pre-run verdict: continue to run(). Singleton, like Unset.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __repr__(self):
        return "Proceed"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'ProceedType' is not an acceptable base type")


Proceed = ProceedType()


class CommandType(abc.ABCMeta):
    """
    Metaclass for Command: abstract-method support plus introspection plumbing.

    - __typename__ derived from the class name ("ListFiles" → "list-files").
    - names in __introspectable__ become read-only mirror() properties.
    - __repr__/__rich_repr__ list those properties.
    """
    __introspectable__ = ()

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
            **options,
        )

        if "__introspectable__" in namespace:
            @rename("__repr__")
            def __repr__(self):
                return f"{type(self).__typename__}({
                    ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
                })"
            self.__repr__ = __repr__

            @rename("__rich_repr__")
            def __rich_repr__(self):
                for name in ("name", "descr", "aliases", "nargs"):
                    yield name, getattr(self, "_" + name, None)
            self.__rich_repr__ = __rich_repr__

        return self


class Command(metaclass=CommandType):
    """
    Abstract descriptor of one command.

    Properties (read-only)
    - name: identifier matched case-insensitively against the first argument.
    - descr: one-line description (help summary), or None.
    - details: long description (command help only), or None.
    - aliases: extra names matched like 'name'.
    - options: ordered Option/Flag specs.
    - nargs: exact number of positional arguments required, or None for no check.
    - usage: text describing the positional arguments in help, or None.
    - quiet: skip the "executing ..." echo before run().

    Subclasses must call Command.__init__; a command without a name is rejected by
    the dispatcher before any routing happens.
    """

    __introspectable__ = (
        "name",
        "descr",
        "details",
        "aliases",
        "options",
        "nargs",
        "usage",
        "quiet",
    )

    def __init__(
            self,
            name,
            descr=Unset,
            /,
            *,
            details=Unset,
            aliases=(),
            options=(),
            nargs=None,
            usage=Unset,
            quiet=False
    ):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{type(self).__typename__} 'name' cannot be empty")
        elif any(character.isspace() for character in name):
            raise ValueError(f"{type(self).__typename__} 'name' cannot contain whitespace")

        def scalar(field, value):
            # str | Text | Unset, trimmed; Unset becomes None
            if not isinstance(value, str | Text | Unset):
                raise TypeError(f"{type(self).__typename__} {field!r} must be a string")
            if isinstance(value, str) and not (value := value.strip()):
                raise ValueError(f"{type(self).__typename__} {field!r} cannot be empty")
            return coalesce(value)

        if isinstance(aliases, str):
            raise TypeError(f"{type(self).__typename__} 'aliases' must be an iterable of strings")
        sanitized = []
        for alias in aliases:
            if not isinstance(alias, str) or not alias.strip():
                raise ValueError(f"{type(self).__typename__} aliases must be non-empty strings")
            sanitized.append(alias.strip())

        if nargs is not None and (not isinstance(nargs, int) or isinstance(nargs, bool)):
            raise TypeError(f"{type(self).__typename__} 'nargs' must be an integer or None")
        elif nargs is not None and nargs < 0:
            raise ValueError(f"{type(self).__typename__} 'nargs' cannot be negative")

        self._name = name
        self._descr = scalar("descr", descr)
        self._details = scalar("details", details)
        self._aliases = tuple(sanitized)
        self._optionset = OptionSet(options)
        self._nargs = nargs
        self._usage = scalar("usage", usage)
        self._quiet = bool(quiet)

    @property
    def _options(self):
        return tuple(self._optionset)

    @property
    def optionset(self):
        """
        The OptionSet used to parse this command's switches.
        """
        return self._optionset

    def accept(self, spec, /):
        """
        Append an Option or Flag to this command (call from __init__ only).

        Returns the spec so it can be kept on the instance if needed.
        """
        self._optionset = OptionSet((*self._optionset, spec))
        return spec

    def prepare(self, arguments, /, **options):
        """
        Pre-run hook. Return Halt(code) to stop with 'code', or Proceed to continue.
        """
        return Proceed

    @abc.abstractmethod
    def run(self, arguments, /, **options):
        """
        Execute the command and return its exit code (None means 0).
        """
        raise NotImplementedError


def _process_signature(callback):
    """
    Split a callback's signature into option specs.

    Rules
    - the first positional parameter receives the positional tokens; it is optional.
    - every keyword-only parameter must default to an Option or Flag; its dest is the
      parameter name unless the spec declares another one.
    - other parameter kinds are rejected.
    """
    try:
        signature = inspect.signature(callback)
    except TypeError:
        raise TypeError("command 'callback' must be callable") from None
    except ValueError:
        raise ValueError("command 'callback' must be an inspectable callable") from None

    positional = False
    specs = []
    renames = {}
    for parameter in signature.parameters.values():
        match parameter.kind:
            case Parameter.POSITIONAL_ONLY | Parameter.POSITIONAL_OR_KEYWORD if not positional and parameter.default is Parameter.empty:
                positional = True
            case Parameter.KEYWORD_ONLY if isinstance(parameter.default, Option | Flag):
                specs.append(spec := parameter.default)
                renames[spec.dest] = parameter.name
            case Parameter.KEYWORD_ONLY:
                raise TypeError(f"command parameter {parameter.name!r} must default to an option or a flag")
            case _:
                raise TypeError(f"command parameter {parameter.name!r} has an unsupported kind")
    return positional, specs, renames


class FunctionCommand(Command):
    """
    Command backed by a plain function (see command()).
    """

    def __init__(self, callback, /, name=Unset, descr=Unset, **metadata):
        if not callable(callback):
            raise TypeError("function command 'callback' must be callable")
        positional, specs, renames = _process_signature(callback)
        if not positional:
            # No parameter receives positionals, so any stray token is a user error.
            metadata.setdefault("nargs", 0)
        super().__init__(
            coalesce(name, getattr(callback, "__name__", "").strip("_").replace("_", "-")),
            coalesce(descr, (inspect.getdoc(callback) or "").partition("\n")[0] or Unset),
            options=(*specs, *metadata.pop("options", ())),
            **metadata,
        )
        self._callback = callback
        self._positional = positional
        self._renames = renames

    def run(self, arguments, /, **options):
        kwargs = {self._renames.get(dest, dest): value for dest, value in options.items()}
        if self._positional:
            return self._callback(arguments, **kwargs)
        return self._callback(**kwargs)


def command(source=Unset, /, **metadata):
    """
    Create a Command from a function, directly or as a decorator.

    Forms
    - command(func, name="x", nargs=1)
    - @command
    - @command(name="x", nargs=1)

    Metadata is forwarded to Command.__init__ (name, descr, details, aliases, options,
    nargs, usage, quiet). name defaults to the function name with underscores turned
    into hyphens; descr defaults to the first docstring line. nargs defaults to 0 when
    the function has no parameter for the positional tokens.
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return FunctionCommand(source, **metadata)

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "Command",
    "FunctionCommand",
    "command",
    "Halt",
    "Proceed",
    "ProceedType",
)

del CommandType
