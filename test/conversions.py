"""
Conversions module behavioral tests.

Scope
- Built-in scalar converters (str, int radix forms, float, bool spellings, Path, Decimal).
- Shaped targets: list/tuple/set, optional (T | None), Literal, Enum.
- Empty input semantics (Absent, never a zero) and the ConversionError signal.
- Converter registration and convertibility checks.
"""
import decimal
import enum
import pathlib
import typing
import unittest
from unittest import TestCase

from commandant import Absent, ConversionError, convert, converter, converts, parse_bool


class Color(enum.Enum):
    RED = "r"
    GREEN = "g"


class Celsius:
    def __init__(self, degrees):
        self.degrees = degrees


class TestScalars(TestCase):
    def testStringIsIdentity(self):
        self.assertEqual(convert(str, "hello"), "hello")

    def testIntDecimalAndRadix(self):
        self.assertEqual(convert(int, "42"), 42)
        self.assertEqual(convert(int, "-7"), -7)
        self.assertEqual(convert(int, "010"), 10)
        self.assertEqual(convert(int, "0x1f"), 31)
        self.assertEqual(convert(int, "0b101"), 5)
        self.assertEqual(convert(int, "1_000"), 1000)

    def testFloat(self):
        self.assertEqual(convert(float, "2.5"), 2.5)

    def testBoolSpellings(self):
        for text in ("true", "YES", "on", "1"):
            self.assertIs(convert(bool, text), True)
        for text in ("false", "No", "off", "0"):
            self.assertIs(convert(bool, text), False)

    def testParseBoolRejectsGarbage(self):
        with self.assertRaises(ValueError):
            parse_bool("maybe")

    def testPathAndDecimal(self):
        self.assertEqual(convert(pathlib.Path, "/tmp/a"), pathlib.Path("/tmp/a"))
        self.assertEqual(convert(decimal.Decimal, "0.10"), decimal.Decimal("0.10"))

    def testConstructibleFromText(self):
        self.assertEqual(convert(Celsius, "21").degrees, "21")

    def testSingleTokenSequenceAccepted(self):
        self.assertEqual(convert(int, ["3"]), 3)


class TestEmptyInput(TestCase):
    def testScalarWithoutTokensIsAbsent(self):
        self.assertIs(convert(int, []), Absent)
        self.assertIs(convert(str, ()), Absent)

    def testListWithoutTokensIsEmpty(self):
        self.assertEqual(convert(list[int], []), [])

    def testOptionalWithoutTokensIsNone(self):
        self.assertIsNone(convert(int | None, []))
        self.assertIsNone(convert(typing.Optional[int], []))

    def testOptionalWithTokenConverts(self):
        self.assertEqual(convert(int | None, "5"), 5)


class TestShapes(TestCase):
    def testListElementWise(self):
        self.assertEqual(convert(list[float], ["1", "2.5"]), [1.0, 2.5])

    def testTupleAndSet(self):
        self.assertEqual(convert(tuple[int, ...], ["1", "2"]), (1, 2))
        self.assertEqual(convert(set[str], ["a", "a", "b"]), {"a", "b"})

    def testBareListKeepsText(self):
        self.assertEqual(convert(list, ["a", "b"]), ["a", "b"])

    def testUnionFirstMatchWins(self):
        self.assertEqual(convert(int | str, "12"), 12)
        self.assertEqual(convert(int | str, "twelve"), "twelve")

    def testLiteral(self):
        self.assertEqual(convert(typing.Literal["fast", "safe"], "safe"), "safe")
        self.assertEqual(convert(typing.Literal[1, 2], "2"), 2)
        with self.assertRaises(ConversionError):
            convert(typing.Literal["fast", "safe"], "slow")

    def testEnumByNameThenValue(self):
        self.assertIs(convert(Color, "RED"), Color.RED)
        self.assertIs(convert(Color, "g"), Color.GREEN)
        with self.assertRaises(ConversionError):
            convert(Color, "blue")


class TestFailures(TestCase):
    def testConversionErrorCarriesContext(self):
        with self.assertRaises(ConversionError) as context:
            convert(int, "abc", argument="--threads", index=3, command="run")
        fault = context.exception
        self.assertEqual(fault.raw, "abc")
        self.assertIs(fault.target, int)
        self.assertEqual(fault.input, "abc")
        self.assertEqual(fault.index, 3)
        self.assertEqual(fault.command, "run")
        self.assertIn("third position", fault.message)
        self.assertIsInstance(fault.options["exception"], ValueError)

    def testNoSilentZero(self):
        with self.assertRaises(ConversionError):
            convert(int, "")

    def testTooManyTokensForScalar(self):
        with self.assertRaises(ConversionError):
            convert(int, ["1", "2"])

    def testBadRawType(self):
        with self.assertRaises(TypeError):
            convert(int, 5)

    def testNonConvertibleTarget(self):
        with self.assertRaises(TypeError):
            convert(42, "x")


class TestRegistration(TestCase):
    def testConverterDecorator(self):
        class Pair:
            def __init__(self, left, right):
                self.left, self.right = left, right

        @converter(Pair)
        def _parse_pair(text):
            left, right = text.split(":")
            return Pair(left, right)

        pair = convert(Pair, "a:b")
        self.assertEqual((pair.left, pair.right), ("a", "b"))
        with self.assertRaises(ConversionError):
            convert(Pair, "ab")

    def testConverterRequiresType(self):
        with self.assertRaises(TypeError):
            converter("int")

    def testConverts(self):
        self.assertTrue(converts(int))
        self.assertTrue(converts(list[int]))
        self.assertTrue(converts(int | None))
        self.assertTrue(converts(Color))
        self.assertFalse(converts(42))


if __name__ == "__main__":
    unittest.main()
