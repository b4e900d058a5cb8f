"""
Option definition tests (Option, Flag).

Scope
- Name validation and dest derivation.
- Value metadata: metavar, type, choices, required/hidden.
- Read-only introspection and repr.

Conventions
- Test method names follow CamelCase per project convention.
"""
from __future__ import annotations

import unittest
from unittest import TestCase

from switchyard import Option, Flag


class TestOption(TestCase):
    """Behavioral tests for Option specifications."""

    def testOptionRequiresAtLeastOneName(self):
        with self.assertRaises(TypeError):
            Option()

    def testOptionNamesMustBeShellStyle(self):
        for name in ("jobs", "---jobs", "--jobs_count", "-1", "--"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Option(name)

    def testOptionNamesAllowI18N(self):
        self.assertEqual(Option("--größe").dest, "größe")

    def testOptionDuplicateNamesRejected(self):
        with self.assertRaises(ValueError):
            Option("--jobs", "--jobs")

    def testOptionDestFromLongestName(self):
        self.assertEqual(Option("-o", "--output-file").dest, "output_file")
        self.assertEqual(Option("-o", dest="target").dest, "target")

    def testOptionDestMustBeIdentifier(self):
        with self.assertRaises(ValueError):
            Option("--class")
        with self.assertRaises(ValueError):
            Option("--x", dest="not valid")

    def testOptionDefaults(self):
        option = Option("-j", "--jobs")
        self.assertEqual(option.names, ("-j", "--jobs"))
        self.assertIs(option.type, str)
        self.assertIsNone(option.default)
        self.assertIsNone(option.descr)
        self.assertIsNone(option.metavar)
        self.assertEqual(option.choices, ())
        self.assertFalse(option.required)
        self.assertFalse(option.hidden)

    def testOptionDescrIsTrimmedAndNonEmpty(self):
        self.assertEqual(Option("--x", descr="  parallel jobs ").descr, "parallel jobs")
        with self.assertRaises(ValueError):
            Option("--x", descr="   ")

    def testOptionTypeMustBeCallable(self):
        with self.assertRaises(TypeError):
            Option("--x", type="int")

    def testOptionChoicesDuplicatesRejected(self):
        with self.assertRaises(ValueError):
            Option("--mode", choices=["fast", "fast"])

    def testOptionChoicesMustNotBeString(self):
        with self.assertRaises(TypeError):
            Option("--mode", choices="fast")

    def testOptionChoicesAndMetavarAreExclusive(self):
        with self.assertRaises(TypeError):
            Option("--mode", metavar="MODE", choices=("fast", "safe"))

    def testOptionChoicesKeepSets(self):
        self.assertEqual(Option("--mode", choices={"fast", "safe"}).choices, frozenset({"fast", "safe"}))

    def testOptionRequiredCannotBeHidden(self):
        with self.assertRaises(TypeError):
            Option("--token", required=True, hidden=True)

    def testOptionIsReadOnly(self):
        option = Option("--jobs")
        with self.assertRaises(AttributeError):
            option.dest = "other"

    def testOptionRepr(self):
        self.assertTrue(repr(Option("--jobs", type=int, default=1)).startswith("option(names=('--jobs',)"))


class TestFlag(TestCase):
    """Behavioral tests for Flag specifications."""

    def testFlagDestFromLongestName(self):
        self.assertEqual(Flag("-n", "--dry-run").dest, "dry_run")

    def testFlagIsNeverRequired(self):
        flag = Flag("-v", "--verbose")
        self.assertFalse(flag.required)
        self.assertIs(flag.default, False)

    def testFlagNamesValidation(self):
        with self.assertRaises(ValueError):
            Flag("verbose")
        with self.assertRaises(TypeError):
            Flag(1)

    def testFlagRepr(self):
        self.assertEqual(
            repr(Flag("-v", descr="louder")),
            "flag(names=('-v',), descr='louder', dest='v', hidden=False)",
        )


if __name__ == "__main__":
    unittest.main()
