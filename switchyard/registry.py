"""
Switchyard command collection: explicit registration and module discovery.

- Registry: ordered, explicit list of commands. Register instances or classes
  (directly or as a class decorator), then hand the registry to dispatch().
- discover(source): scan one module, a dotted module name or a module pattern
  ("app.commands.*") for commands and return them sorted by qualified name.

What discovery picks up in each module
- concrete Command subclasses defined in that module which can be built with no
  arguments (they are instantiated; the others are skipped);
- top-level Command instances bound in that module (e.g. built with @command).
"""
import importlib
import inspect
import logging
from types import ModuleType

from .commands import Command
from .utils import mglob

logger = logging.getLogger(__name__)


def _constructible(cls):
    # Only classes whose __init__ can be called with no arguments.
    try:
        inspect.signature(cls).bind()
    except (TypeError, ValueError):
        return False
    return True


def _modules(source):
    if isinstance(source, ModuleType):
        return [source]
    if not isinstance(source, str):
        raise TypeError("discover() argument must be a module or a string")

    def imp(module):
        try:
            return importlib.import_module(module)
        except ImportError:
            raise TypeError(f"unable to import module {module!r}") from None

    return list(map(imp, mglob(source)))


def discover(source, /):
    """
    Collect the commands found in source, ordered by fully-qualified name.

    Parameters
    - source: a module object, a dotted module name, or an mglob pattern.

    Ordering
    - classes are keyed by "<module>.<qualname>", instances by "<module>.<attribute>".
    - the same instance bound to several names (or modules) is returned once.

    Raises
    - TypeError: source has the wrong type or a matched module cannot be imported.
    """
    found = {}
    seen = set()
    for module in _modules(source):
        for attribute, object in inspect.getmembers(module):
            if isinstance(object, Command):
                if id(object) in seen:
                    continue
                seen.add(id(object))
                found[f"{module.__name__}.{attribute}"] = object
            elif (
                    inspect.isclass(object) and
                    issubclass(object, Command) and
                    object.__module__ == module.__name__
            ):
                key = f"{object.__module__}.{object.__qualname__}"
                if inspect.isabstract(object):
                    logger.debug("skipping abstract command class %s", key)
                elif not _constructible(object):
                    logger.debug("skipping command class %s (needs constructor arguments)", key)
                else:
                    found[key] = object()

    logger.debug("discovered %d command(s) in %r", len(found), getattr(source, "__name__", source))
    return tuple(found[key] for key in sorted(found))


class Registry:
    """
    Ordered collection of commands built by explicit registration.

    Example
        registry = Registry()

        @registry.register
        class Build(Command):
            def __init__(self):
                super().__init__("build", "compile the project")

            def run(self, arguments, /, **options):
                ...

        dispatch(registry, sys.argv[1:], sys.stdout, sys.stderr)
    """

    def __init__(self, commands=(), /):
        self._commands = []
        for command in commands:
            self.register(command)

    @property
    def commands(self):
        return tuple(self._commands)

    def register(self, object, /):
        """
        Add a Command instance, or instantiate a Command subclass and add it.

        Returns object unchanged, so it can be used as a class decorator.

        Raises
        - TypeError: object is neither a Command nor a concrete Command subclass.
        """
        if isinstance(object, Command):
            command = object
        elif inspect.isclass(object) and issubclass(object, Command):
            if inspect.isabstract(object):
                raise TypeError(f"cannot register abstract command class {object.__qualname__!r}")
            command = object()
        else:
            raise TypeError("register() argument must be a command or a command class")

        self._commands.append(command)
        logger.debug("registered command %r", getattr(command, "_name", None))
        return object

    def include(self, source, /):
        """
        Register every command discover(source) finds, in discovery order.
        """
        for command in discover(source):
            self.register(command)
        return self

    def __iter__(self):
        return iter(self._commands)

    def __len__(self):
        return len(self._commands)

    def __contains__(self, object):
        return object in self._commands

    def __repr__(self):
        return f"registry({", ".join(repr(getattr(command, "_name", None)) for command in self._commands)})"


__all__ = (
    "Registry",
    "discover",
)
