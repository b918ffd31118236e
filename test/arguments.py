"""
Arguments module behavioral tests.

Scope
- Option: name spelling rules, arity normalization, metavar/type constraints,
  scope derived from the owner, immutable replace().
- Positional: name rules, nargs shapes, optional variadics, usage metavars.

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import unittest
from unittest import TestCase

from commandant import Arity, Option, Positional, Scope


class TestOption(TestCase):
    """Behavioral tests for Option specifications."""

    def testShortAndLongNames(self):
        option = Option("--recursive", "-r")
        self.assertEqual(option.names, ("-r", "--recursive"))
        self.assertEqual(option.short, "-r")
        self.assertEqual(option.long, "--recursive")
        self.assertEqual(option.name, "recursive")

    def testLongOnly(self):
        option = Option("--dry-run")
        self.assertIsNone(option.short)
        self.assertEqual(option.name, "dry-run")

    def testLongNameIsRequired(self):
        with self.assertRaises(ValueError):
            Option("-r")

    def testAtMostOneShortAndOneLong(self):
        with self.assertRaises(ValueError):
            Option("-r", "-R", "--recursive")
        with self.assertRaises(ValueError):
            Option("--recursive", "--recurse")

    def testMalformedNamesRejected(self):
        for name in ("recursive", "-rr", "---x", "--1st", "-"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Option(name, "--valid")

    def testNamesMustBeStrings(self):
        with self.assertRaises(TypeError):
            Option(1)
        with self.assertRaises(TypeError):
            Option()

    def testDefaultArityIsPresenceOnly(self):
        option = Option("--recursive")
        self.assertIs(option.arity, Arity.NONE)
        self.assertFalse(option.takes_value)
        self.assertIsNone(option.metavar)

    def testArityAcceptsStrings(self):
        self.assertIs(Option("--quite", arity="required").arity, Arity.REQUIRED)
        self.assertIs(Option("--level", arity="optional").arity, Arity.OPTIONAL)
        with self.assertRaises(ValueError):
            Option("--quite", arity="many")

    def testMetavarDefaultsToName(self):
        self.assertEqual(Option("--quite", arity="required").metavar, "quite")
        self.assertEqual(Option("--quite", arity="required", metavar="quiet").metavar, "quiet")

    def testPresenceOnlyRejectsMetavarAndType(self):
        with self.assertRaises(TypeError):
            Option("--recursive", metavar="x")
        with self.assertRaises(TypeError):
            Option("--recursive", type=int)

    def testDescrRules(self):
        self.assertIsNone(Option("--recursive").descr)
        self.assertEqual(Option("--recursive", descr="  walk  ").descr, "walk")
        with self.assertRaises(ValueError):
            Option("--recursive", descr="   ")
        with self.assertRaises(TypeError):
            Option("--recursive", descr=1)

    def testTypeMustBeConvertible(self):
        with self.assertRaises(TypeError):
            Option("--threads", arity="required", type=42)

    def testScopeFollowsOwner(self):
        self.assertIs(Option("--verbose").scope, Scope.PUBLIC)
        self.assertIs(Option("--quite", owner="rmdir").scope, Scope.PRIVATE)

    def testReplaceStampsOwner(self):
        option = Option("-q", "--quite", arity="required", metavar="quiet", type=bool)
        stamped = copy.replace(option, owner="rmdir")
        self.assertIsNot(stamped, option)
        self.assertIsNone(option.owner)
        self.assertEqual(stamped.owner, "rmdir")
        self.assertEqual(stamped.names, option.names)
        self.assertEqual(stamped.metavar, "quiet")
        self.assertIs(stamped.type, bool)

    def testReadOnly(self):
        option = Option("--recursive")
        with self.assertRaises(AttributeError):
            option.long = "--other"

    def testRepr(self):
        self.assertTrue(repr(Option("-r", "--recursive")).startswith("option(names=('-r', '--recursive')"))


class TestPositional(TestCase):
    """Behavioral tests for Positional specifications."""

    def testRequiredByDefault(self):
        positional = Positional("dir")
        self.assertTrue(positional.required)
        self.assertFalse(positional.variadic)
        self.assertEqual(positional.metavar, "<dir>")

    def testOptionalAndVariadicMetavars(self):
        self.assertEqual(Positional("c", nargs="?").metavar, "[c]")
        self.assertEqual(Positional("d", nargs="*").metavar, "<d...>")
        self.assertEqual(Positional("d", nargs="*", optional=True).metavar, "[d...]")

    def testNargsValidated(self):
        with self.assertRaises(ValueError):
            Positional("x", nargs="+")
        with self.assertRaises(ValueError):
            Positional("x", nargs=2)

    def testOptionalOnlyForVariadic(self):
        with self.assertRaises(TypeError):
            Positional("x", optional=True)

    def testNameRules(self):
        self.assertEqual(Positional(" dir ").name, "dir")
        with self.assertRaises(ValueError):
            Positional("-dir")
        with self.assertRaises(ValueError):
            Positional("1dir")
        with self.assertRaises(TypeError):
            Positional(1)

    def testTypeKept(self):
        self.assertIs(Positional("count", type=int).type, int)


if __name__ == "__main__":
    unittest.main()
