"""
Tests for the utilities module (Absent sentinel and helpers).

Scope
- Absent: singleton identity, falsy semantics, representation, copy/pickle.
- coalesce(): only Absent is replaced.
- rename(), mirror(), ordinal().
- IntrospectableType: typename, read-only mirrors, repr.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from rich.console import Console
from rich.text import Text

from commandant import Command, Option, Positional, Registry
from commandant.utils import *


class AbsentTest(TestCase):
    """Semantic guarantees of the Absent sentinel."""

    def testSingleton(self):
        self.assertIs(AbsentType(), Absent)
        self.assertIs(AbsentType(), AbsentType())

    def testFalsyButDistinct(self):
        self.assertFalse(Absent)
        self.assertIsNot(Absent, None)
        self.assertNotEqual(Absent, False)
        self.assertNotEqual(Absent, 0)
        self.assertNotEqual(Absent, [])

    def testRepr(self):
        self.assertEqual(repr(Absent), "Absent")
        self.assertEqual(str(Absent), "Absent")

    def testRich(self):
        self.assertEqual(Absent.__rich__(), Text("Absent", style="dim"))

    def testRichConsolePrint(self):
        console = Console(record=True, color_system=None)
        console.print(Absent)
        self.assertEqual(console.export_text().strip(), "Absent")

    def testCopyPreservesIdentity(self):
        self.assertIs(copy.copy(Absent), Absent)
        self.assertIs(copy.deepcopy(Absent), Absent)
        self.assertIs(copy.deepcopy([Absent])[0], Absent)

    def testPicklePreservesIdentity(self):
        self.assertIs(pickle.loads(pickle.dumps(Absent)), Absent)

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Subclass(AbsentType):  # NOQA: F-811
                pass

    def testUnionAnnotation(self):
        self.assertEqual((Absent | int).__args__, (AbsentType, int))
        self.assertEqual((int | Absent).__args__, (int, AbsentType))


class HelpersTest(TestCase):
    """coalesce, rename, mirror and ordinal."""

    def testCoalesceReplacesOnlyAbsent(self):
        self.assertEqual(coalesce(Absent, "fallback"), "fallback")
        self.assertIsNone(coalesce(Absent))
        self.assertIs(coalesce(False, "fallback"), False)
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(None, "fallback"))

    def testRenameDirect(self):
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self):
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRenameRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()

    def testMirrorFreezesContainers(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")
            label = mirror("label")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}
                self._label = "x"

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        with self.assertRaises(TypeError):
            holder.table["b"] = 2
        self.assertEqual(holder.label, "x")
        with self.assertRaises(AttributeError):
            holder.label = "y"

    def testOrdinal(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(111), "111th")


class IntrospectableTypeTest(TestCase):
    """Generated surface shared by specs and registry objects."""

    def setUp(self):
        class ShortLabel(metaclass=IntrospectableType):
            __introspectable__ = ("text", "width")
            __displayable__ = ("text",)

            def __init__(self, text, width):
                self._text = text
                self._width = width

        self.cls = ShortLabel

    def testTypename(self):
        self.assertEqual(self.cls.__typename__, "short-label")

    def testReadOnlyProperties(self):
        label = self.cls("abc", [1, 2])
        self.assertEqual(label.width, (1, 2))
        with self.assertRaises(AttributeError):
            label.text = "other"

    def testReprUsesDisplayable(self):
        self.assertEqual(repr(self.cls("abc", 3)), "short-label(text='abc')")

    def testSharedBySpecsAndRegistry(self):
        for cls in (Option, Positional, Command, Registry):
            self.assertIs(type(cls), IntrospectableType)


if __name__ == "__main__":
    unittest.main()
