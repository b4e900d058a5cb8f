"""
Help renderer tests (summary, command detail, parsed echo, faults).

Scope
- Plain (non-colorful) output written to the given stream only.
- Program name from __prog__ and its omission.
- Hidden options, required markers and defaults.

Conventions
- Test method names follow CamelCase per project convention.
- Streams are captured with io.StringIO.
"""
from __future__ import annotations

import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from switchyard import Command, Option, Flag, command
from switchyard import render_summary, render_command_detail, render_parsed_echo, render_fault
from switchyard.faults import FaultCode, UnknownCommandError


class Copy(Command):
    def __init__(self):
        super().__init__(
            "copy",
            "copy a file",
            details="Copies source into target, keeping permissions.",
            aliases=("cp",),
            options=(
                Flag("-f", "--force", descr="overwrite the target"),
                Option("-m", "--mode", choices=("fast", "safe"), default="safe", descr="copy strategy"),
                Option("--owner", metavar="USER", required=True, descr="new owner"),
                Flag("--debug-internals", hidden=True),
            ),
            nargs=2,
            usage="<source> <target>",
        )

    def run(self, arguments, /, **options):
        return 0


@command
def clean():
    """remove build artifacts"""


@command
def lint(arguments, /):
    """check style of the given paths"""


def _render(function, *arguments, **options):
    stream = io.StringIO()
    with mock.patch.object(sys.modules["__main__"], "__prog__", "tool", create=True):
        function(*arguments, stream, **options)
    return stream.getvalue()


class TestSummary(TestCase):
    """render_summary."""

    def testListsEveryCommand(self):
        output = _render(render_summary, (Copy(), clean))
        self.assertIn("usage: tool <command> [options] [arguments]", output)
        self.assertIn("available commands:", output)
        self.assertIn("copy, cp", output)
        self.assertIn("copy a file", output)
        self.assertIn("clean", output)
        self.assertIn("remove build artifacts", output)
        self.assertIn("run 'tool help <command>' for details on a command", output)

    def testCommandOrderIsKept(self):
        output = _render(render_summary, (clean, Copy()))
        self.assertLess(output.index("clean"), output.index("copy"))

    def testSkipProgramName(self):
        output = _render(render_summary, (Copy(), clean), skip_program_name=True)
        self.assertIn("usage: <command> [options] [arguments]", output)
        self.assertIn("run 'help <command>'", output)

    def testPlainOutputHasNoEscapes(self):
        self.assertNotIn("\x1b[", _render(render_summary, (Copy(), clean)))


class TestCommandDetail(TestCase):
    """render_command_detail."""

    def testHeaderUsageAndDetails(self):
        output = _render(render_command_detail, Copy())
        self.assertTrue(output.startswith("'copy' - copy a file\n"))
        self.assertIn("Copies source into target, keeping permissions.", output)
        self.assertIn("usage: tool copy [options] <source> <target>", output)
        self.assertIn("aliases: cp", output)

    def testOptionsList(self):
        output = _render(render_command_detail, Copy())
        self.assertIn("options:", output)
        self.assertIn("-f, --force", output)
        self.assertIn("overwrite the target", output)
        self.assertIn("-m, --mode {fast,safe}", output)
        self.assertIn("[default: safe]", output)
        self.assertIn("--owner USER", output)
        self.assertIn("new owner (required)", output)
        self.assertNotIn("--debug-internals", output)

    def testArgumentCountNote(self):
        self.assertIn("expects 2 arguments", _render(render_command_detail, Copy()))
        self.assertIn("expects 0 arguments", _render(render_command_detail, clean))
        self.assertNotIn("expects", _render(render_command_detail, lint))

    def testSkipProgramName(self):
        output = _render(render_command_detail, Copy(), skip_program_name=True)
        self.assertIn("usage: copy [options] <source> <target>", output)
        self.assertNotIn("tool", output)

    def testMinimalCommand(self):
        output = _render(render_command_detail, clean)
        self.assertIn("'clean' - remove build artifacts", output)
        self.assertIn("usage: tool clean\n", output)
        self.assertNotIn("options:", output)
        self.assertNotIn("aliases:", output)


class TestParsedEcho(TestCase):
    """render_parsed_echo."""

    def testSingleLineWithValues(self):
        output = _render(render_parsed_echo, Copy(), {"force": True, "mode": "fast"})
        self.assertEqual(output, "executing copy: force=True, mode='fast'\n")

    def testWithoutValues(self):
        self.assertEqual(_render(render_parsed_echo, clean, {}), "executing clean\n")


class TestFault(TestCase):
    """render_fault."""

    def testHeaderMessageAndHint(self):
        fault = UnknownCommandError(
            "command name 'bulid' not recognized",
            title="unknown command",
            code=FaultCode.UNKNOWN_COMMAND,
            hint="did you mean 'build'?",
        )
        output = _render(render_fault, fault)
        self.assertIn("tool", output)
        self.assertIn(str(FaultCode.UNKNOWN_COMMAND.value), output)
        self.assertIn("Unknown Command", output)
        self.assertIn("command name 'bulid' not recognized", output)
        self.assertIn("did you mean 'build'?", output)

    def testFaultIsNotMutated(self):
        fault = UnknownCommandError("x", title="t", code=FaultCode.UNKNOWN_COMMAND)
        _render(render_fault, fault, colorful=True)
        self.assertNotIn("colorful", fault.options)
        self.assertTrue(copy.replace(fault, colorful=True).options["colorful"])


if __name__ == "__main__":
    unittest.main()
