"""
Utilities tests (sentinel, coalesce, mirror, pluralize, progname, mglob).

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import sys
import unittest
from unittest import TestCase, mock

from switchyard.utils import *


class UnsetTest(TestCase):
    """Sentinel semantics and coalesce()."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)

    def testFalseyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, None)

    def testSealed(self):
        with self.assertRaises(TypeError):
            class Derived(UnsetType):  # NOQA: F-811
                pass

    def testCoalesceKeepsFalseyValues(self):
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "x"))
        self.assertEqual(coalesce("", "x"), "")
        self.assertEqual(coalesce(0, 1), 0)


class HelpersTest(TestCase):
    """rename(), mirror() and pluralize()."""

    def testRenameForms(self):
        def function():
            pass

        self.assertEqual(rename(function, "other").__name__, "other")
        self.assertEqual(rename("third")(function).__qualname__, "third")
        with self.assertRaises(TypeError):
            rename(1, "x")

    def testMirrorReturnsCopies(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [1, [2, 3]]

        holder = Holder()
        self.assertEqual(holder.items, (1, (2, 3)))
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testPluralize(self):
        self.assertEqual(pluralize("argument", 1), "1 argument")
        self.assertEqual(pluralize("argument", 0), "0 arguments")
        self.assertEqual(pluralize("switch", 2), "2 switches")
        self.assertEqual(pluralize("entry", 3), "3 entries")
        self.assertEqual(pluralize("key", 2), "2 keys")

    def testPluralizeRejectsBadTypes(self):
        with self.assertRaises(TypeError):
            pluralize(1, 1)
        with self.assertRaises(TypeError):
            pluralize("argument", "1")


class HostTest(TestCase):
    """progname() and mglob()."""

    def testPrognameFromMain(self):
        with mock.patch.object(sys.modules["__main__"], "__prog__", "tool", create=True):
            self.assertEqual(progname(), "tool")

    def testPrognameFromArgv(self):
        main = sys.modules["__main__"]
        with mock.patch.object(sys, "argv", ["/usr/local/bin/deploy", "x"]):
            if hasattr(main, "__prog__"):
                self.skipTest("__main__ defines __prog__")
            self.assertEqual(progname(), "deploy")

    def testMglobPlainName(self):
        self.assertEqual(mglob("switchyard.commands"), ["switchyard.commands"])

    def testMglobWildcard(self):
        modules = mglob("switchyard.*")
        self.assertIn("switchyard.dispatcher", modules)
        self.assertIn("switchyard.registry", modules)
        self.assertEqual(modules, sorted(modules))

    def testMglobUnimportablePrefix(self):
        self.assertEqual(mglob("no_such_package_here.*"), [])

    def testMglobRejectsBadInput(self):
        with self.assertRaises(TypeError):
            mglob(1)
        with self.assertRaises(ValueError):
            mglob("  ")
        with self.assertRaises(ValueError):
            mglob("*.commands")


if __name__ == "__main__":
    unittest.main()
