r"""
Switchyard option definitions.

Overview
- Option: named, value-bearing switch (e.g. -o/--output PATH).
- Flag: named, presence-only switch (e.g. -v/--verbose).

Both are plain, read-only specifications. A command owns an ordered collection of
them; the option parser (switchyard.parser) consumes tokens against that collection
and returns the resolved values keyed by each spec's 'dest'.

Metadata (sanitized on construction)
- names: one or more shell-style names matching r"--?[^\W\d_](?:-?[^\W_])*",
  unique within a spec. Declaration order is kept for help output.
- descr: Unset | str (short help), non-empty when provided.
- dest: keyword under which the value is delivered to the command. Defaults to the
  longest name without leading dashes, inner dashes turned into underscores
  ("--dry-run" → "dry_run"). Must be a valid identifier.
- hidden: bool, suppresses the spec from help.
- Option only
  • metavar: Unset | str, label for the value in help.
  • type: callable converter applied to the raw token.
  • default: value used when the option is absent (not converted).
  • choices: allowed converted values; duplicates rejected. Cannot be combined with metavar.
  • required: bool, the option must be supplied.

Quick example
    >>> Option("-j", "--jobs", type=int, default=1, descr="parallel jobs")
    option(names=('-j', '--jobs'), metavar=None, type=<class 'int'>, default=1, ...)
    >>> Flag("-n", "--dry-run").dest
    'dry_run'
"""
import functools
import keyword
import operator
import re
from collections.abc import Iterable, Set

from rich.text import Text

from .utils import *


class ArgumentType(type):
    """
    Metaclass giving specs a typename, read-only properties and a stable repr.

    - __typename__: class name split on capitals and hyphenated ("Option" → "option").
    - every name in __introspectable__ becomes a mirror() property over "_<name>".
    - __repr__/__rich_repr__ list the introspectable fields in order.
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
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate names/descr/dest shared by Option and Flag (mutates metadata).

    Raises
    - TypeError: missing names, non-string names/descr/dest.
    - ValueError: empty, malformed or duplicated names; empty descr; invalid dest.
    """
    names = []
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"--?[^\W\d_](?:-?[^\W_])*", name):
            raise ValueError(f"{cls.__typename__} name {name!r} is not a valid shell-style option name")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)
    metadata["names"] = tuple(names)

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if (dest := metadata["dest"]) is Unset:
        # Prefer the longest spelling: "--dry-run" over "-n".
        dest = max(names, key=len).lstrip("-").replace("-", "_")
    if not isinstance(dest, str):
        raise TypeError(f"{cls.__typename__} 'dest' must be a string")
    elif not dest.isidentifier() or keyword.iskeyword(dest):
        raise ValueError(f"{cls.__typename__} 'dest' must be a valid identifier, got {dest!r}")
    metadata["dest"] = dest


def _sanitize_value_metadata(cls, metadata, /):
    """
    Internal: validate metavar/type/choices of value-bearing options (mutates metadata).
    """
    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar)

    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be a non-string iterable")
    if not isinstance(choices, Set):
        sanitized = []
        for choice in choices:
            if choice in sanitized:
                raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
            sanitized.append(choice)
        choices = tuple(sanitized)
    metadata["choices"] = choices

    if metadata["metavar"] and metadata["choices"]:
        raise TypeError(f"{cls.__typename__} cannot have both 'metavar' and 'choices'")


class Option(metaclass=ArgumentType):
    """
    Named, value-bearing switch.

    The value is taken from the same token (--name=value) or the next one
    (--name value), converted with 'type' and checked against 'choices'.
    When absent, the command receives 'default' unless the option is required.
    """

    __introspectable__ = (
        "names",
        "metavar",
        "type",
        "default",
        "choices",
        "descr",
        "dest",
        "required",
        "hidden",
    )

    def __new__(
            cls,
            *names,
            metavar=Unset,
            type=str,
            default=None,
            choices=(),
            descr=Unset,
            dest=Unset,
            required=False,
            hidden=False
    ):
        metadata = {
            "names": names,
            "metavar": metavar,
            "type": type,
            "default": default,
            "choices": choices,
            "descr": descr,
            "dest": dest,
            "required": bool(required),
            "hidden": bool(hidden),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_value_metadata(cls, metadata)

        if metadata["required"] and metadata["hidden"]:
            raise TypeError(f"required {cls.__typename__} cannot be hidden")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class Flag(metaclass=ArgumentType):
    """
    Named, presence-only switch. Delivered as True when present, False otherwise.
    """

    __introspectable__ = (
        "names",
        "descr",
        "dest",
        "hidden",
    )

    def __new__(
            cls,
            *names,
            descr=Unset,
            dest=Unset,
            hidden=False
    ):
        metadata = {
            "names": names,
            "descr": descr,
            "dest": dest,
            "hidden": bool(hidden),
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def required(self):
        return False

    @property
    def default(self):
        return False


__all__ = (
    "Option",
    "Flag",
)

del ArgumentType
