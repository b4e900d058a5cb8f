"""
Command matching: resolve a token to a command.
"""
import difflib

from .utils import Unset


def _names(command):
    return (command.name, *command.aliases)


def match(commands, token, /):
    """
    Return the first command whose name or alias equals token, ignoring case.

    Iteration follows the order of 'commands'; the first hit wins and duplicate names
    are not reported. None/Unset tokens never match.
    """
    if token is None or token is Unset:
        return None
    folded = token.casefold()
    for command in commands:
        if any(name.casefold() == folded for name in _names(command)):
            return command
    return None


def suggest(commands, token, /):
    """
    Closest command name to token (for "did you mean" hints), or None.
    """
    names = {name.casefold(): name for command in commands for name in _names(command)}
    try:
        return names[difflib.get_close_matches(token.casefold(), names.keys(), 1)[0]]
    except IndexError:
        return None


__all__ = (
    "match",
    "suggest",
)
