"""
Switchyard utilities (small helpers shared by every layer).

Overview
- UnsetType / Unset
  • Sentinel for “not provided”, distinct from None (which stays a legitimate value).
- coalesce(value, default=None)
  • Materialize Unset into a default while keeping None/0/""/() untouched.
- rename(callable, name) / @rename("name")
  • Give generated callables a stable __name__/__qualname__.
- mirror("attr")
  • Read-only property over a private backing field, returning copies of containers.
- pluralize(word, count)
  • Tiny English pluralizer for counted nouns in fault messages ("1 argument", "2 arguments").
- progname()
  • Program name for usage lines: __prog__ in __main__, else basename of sys.argv[0].
- mglob(pattern)
  • Expand "pkg.commands.*" style module patterns into importable module names (used by discovery).

Names not listed in __all__ are internal.
"""
import builtins
import functools
import importlib
import os.path
import pkgutil
import re
import sys
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Sentinel type for values that were not provided.

    - Falsey, but never equal to None.
    - Singleton: UnsetType() always returns the same instance.
    - Sealed: subclassing raises TypeError.
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return object unless it is Unset, in which case return default.

    Falsey values (None, 0, "", ()) are preserved; only the sentinel is replaced.

    Examples
    - coalesce("build", "x") -> "build"
    - coalesce(Unset, "x")   -> "x"
    - coalesce(None, "x")    -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Assign __name__/__qualname__ to a callable, or return a decorator doing so.

    Forms
    - rename(callable, name) -> callable
    - rename(name)           -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    # Fresh containers on every read so callers cannot mutate the backing state.
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return frozenset(map(_immortalize, object))
    return object


def mirror(name, /):
    """
    Build a read-only property exposing self._{name}.

    Sequences come back as tuples, sets as frozensets and mappings as fresh dicts,
    so the public view never aliases the private field.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(word, count, /):
    """
    Return "<count> <word>" with word pluralized when count != 1.

    Only the regular English rules needed for fault copy are covered
    (s/sh/ch/x/z → +es, consonant+y → -ies, otherwise +s).

    Examples
    - pluralize("argument", 1) -> "1 argument"
    - pluralize("argument", 0) -> "0 arguments"
    - pluralize("switch", 2)   -> "2 switches"
    """
    if not isinstance(word, str):
        raise TypeError("pluralize() first argument must be a string")
    if not isinstance(count, int):
        raise TypeError("pluralize() second argument must be an integer")

    if count == 1 or not word:
        return f"{count} {word}"

    lower = word.lower()
    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = word + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = word[:-1] + "ies"
    else:
        plural = word + "s"
    return f"{count} {plural}"


@functools.cache
def _resolve_segment(segment):
    """
    translate one dot-free pattern segment into a regex snippet.
      *      → zero or more non-dot chars
      ?      → exactly one non-dot char
      [...]  → character class, [!...] negated
      \\x     → literal x
    """
    length = len(segment)
    index = 0
    parts = []
    while index < length:
        char = segment[index]
        if char == "\\" and index + 1 < length:
            parts.append(re.escape(segment[index + 1]))
            index += 2
            continue
        if char == "*":
            parts.append(r"[^.]*")
        elif char == "?":
            parts.append(r"[^.]")
        elif char == "[":
            start = index + 1
            negated = ""
            if start < length and segment[start] in ("!", "^"):
                negated = "^"
                start += 1
            pivot = start
            while pivot < length and segment[pivot] != "]":
                pivot += 2 if segment[pivot] == "\\" and pivot + 1 < length else 1
            if pivot >= length:
                parts.append(r"\[")
            else:
                parts.append(f"[{negated}{segment[start:pivot]}]")
                index = pivot
        else:
            parts.append(re.escape(char))
        index += 1
    return "".join(parts)


@functools.cache
def _compile_regex(pattern):
    parts = []
    for segment in pattern.split("."):
        if segment == "**":
            parts.append(r"(?:\.[A-Za-z_]\w*)*")
        else:
            parts.append(r"\." + _resolve_segment(segment))
    if parts and parts[0].startswith(r"\."):
        body = parts[0][2:] + "".join(parts[1:])
    else:
        body = "".join(parts)
    return re.compile(body)


def mglob(source, /):
    """
    expand a dotted module pattern into sorted, importable module names.

    rules
    - a plain dotted name is returned as-is (["pkg.mod"]).
    - '*', '?', '[...]' match inside one segment; '**' spans whole segments.
    - the pattern must start with at least one concrete segment, which is imported
      to walk its subpackages. an unimportable prefix yields [].

    examples
    - "app.commands.*"     → direct children of app.commands
    - "app.**.commands"    → every 'commands' module below app
    """
    if not isinstance(source, str):
        raise TypeError("mglob() argument must be a string")
    elif not (source := source.strip()):
        raise ValueError("mglob() argument must be a non-empty string")

    if re.fullmatch(r"(?!\d)\w+(\.(?!\d)\w+)*", source):
        return [source]

    prefixes = []
    for segment in source.split("."):
        if set(segment) & set("*?[]!\\") or not re.fullmatch(r"(?!\d)\w+", segment):
            break
        prefixes.append(segment)

    if not prefixes:
        raise ValueError("mglob() pattern must start with a concrete package segment")

    try:
        package = importlib.import_module(prefix := ".".join(prefixes))
    except ImportError:
        return []

    matches = set()

    if (pattern := _compile_regex(source)).fullmatch(prefix):
        matches.add(prefix)

    if hasattr(package, "__path__"):
        for metadata in pkgutil.walk_packages(package.__path__, prefix + "."):
            if pattern.fullmatch(name := metadata.name):
                matches.add(name)

    return sorted(matches)


def progname():
    """
    Name of the running program as shown in usage lines and fault headers.

    The host may set __prog__ in __main__; otherwise the basename of sys.argv[0]
    is used (falling back to "python" for interactive sessions).
    """
    try:
        return str(getattr(sys.modules["__main__"], "__prog__"))
    except (KeyError, AttributeError):
        pass
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "python"


Unset = UnsetType()
"""
Sentinel for “not provided”. Use coalesce(value, default) to materialize it.
"""


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "mglob",
    "progname",
    "UnsetType",
    "Unset",
)
