"""
Fault tests (FaultCode, CommandException, CommandWarning, getdoc).

Conventions
- Test method names follow CamelCase per project convention.
"""
from __future__ import annotations

import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from switchyard.faults import *


class TestFaultCode(TestCase):
    """FaultCode values and host remapping."""

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.NO_ARGUMENTS.normalize(), "21101")

    def testNormalizeUsesHostLabels(self):
        codes = {FaultCode.UNKNOWN_COMMAND: "E-ROUTE"}
        with mock.patch.object(sys.modules["__main__"], "__codes__", codes, create=True):
            self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "E-ROUTE")
            self.assertEqual(FaultCode.NO_ARGUMENTS.normalize(), "21101")

    def testGetdoc(self):
        docs = {FaultCode.WRONG_ARGUMENT_COUNT: "the command expects a fixed number of arguments"}
        with mock.patch.object(sys.modules["__main__"], "__docs__", docs, create=True):
            self.assertEqual(getdoc(FaultCode.WRONG_ARGUMENT_COUNT), docs[FaultCode.WRONG_ARGUMENT_COUNT])
            self.assertIsNone(getdoc(FaultCode.NO_ARGUMENTS))
        with self.assertRaises(TypeError):
            getdoc(21131)


class TestCommandException(TestCase):
    """Fault values."""

    def testMessageAndOptions(self):
        fault = WrongArgumentCountError("expected 2 arguments but got 1", expected=2, actual=1)
        self.assertIsInstance(fault, CommandException)
        self.assertEqual(str(fault), "expected 2 arguments but got 1")
        self.assertEqual(fault.options["expected"], 2)
        with self.assertRaises(TypeError):
            fault.options["expected"] = 3

    def testReplaceMergesOptions(self):
        fault = UnknownOptionError("unknown", hint="did you mean '--name'?")
        replaced = copy.replace(fault, colorful=True)
        self.assertIsInstance(replaced, UnknownOptionError)
        self.assertEqual(replaced.message, "unknown")
        self.assertEqual(replaced.options["hint"], "did you mean '--name'?")
        self.assertTrue(replaced.options["colorful"])

    def testRichRendering(self):
        fault = NoArgumentsError(
            "no arguments specified",
            title="no command given",
            code=FaultCode.NO_ARGUMENTS,
            hint="pick one of the commands listed below",
            prog="tool",
        )
        stream = io.StringIO()
        Console(file=stream, width=100).print(fault)
        lines = stream.getvalue().splitlines()
        self.assertEqual(lines[0], "[ tool — 21101 | No Command Given ]")
        self.assertEqual(lines[1], "no arguments specified")
        self.assertEqual(lines[2], " → pick one of the commands listed below")

    def testCanBeRaised(self):
        with self.assertRaises(CommandException):
            raise MissingRequiredOptionError("required option '--owner' was not provided")


class TestCommandWarning(TestCase):
    """Warnings share the fault shape."""

    def testAmbiguousExitCodeWarning(self):
        warning = AmbiguousExitCodeWarning("returned -1", code=FaultCode.AMBIGUOUS_EXIT_CODE)
        self.assertIsInstance(warning, Warning)
        self.assertIsInstance(warning, CommandWarning)
        self.assertEqual(copy.replace(warning, hint="x").options["code"], FaultCode.AMBIGUOUS_EXIT_CODE)


if __name__ == "__main__":
    unittest.main()
