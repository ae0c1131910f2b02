"""
Default converter tests.

Scope
- Validate the conversion table selected by converter_for() for common types.
- Validate strictness: surrounding whitespace, separators and unknown words
  are rejected with ValueError.
- Validate Ref cells.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import enum
import pathlib
import unittest
from decimal import Decimal
from unittest import TestCase

from commandeer import Char, Ref, convert, converter_for


class Color(enum.Enum):
    RED = "r"
    GREEN = "g"


class TestConvert(TestCase):
    """convert() and converter_for()."""

    def testStrings(self):
        self.assertEqual(convert(""), "")
        self.assertEqual(convert(" spaced ", str), " spaced ")

    def testChar(self):
        value = convert("xyz", Char)
        self.assertEqual(value, "x")
        self.assertIsInstance(value, Char)
        with self.assertRaises(ValueError):
            convert("", Char)

    def testBooleans(self):
        for token in ("true", "1", "yes", "on"):
            self.assertIs(convert(token, bool), True)
        for token in ("false", "0", "no", "off"):
            self.assertIs(convert(token, bool), False)
        for token in ("True", "y", ""):
            with self.subTest(token=token), self.assertRaises(ValueError):
                convert(token, bool)

    def testIntegers(self):
        self.assertEqual(convert("42", int), 42)
        self.assertEqual(convert("-7", int), -7)
        self.assertEqual(convert("+7", int), 7)
        for token in (" 42", "4_2", "4.0", "", "0x10"):
            with self.subTest(token=token), self.assertRaises(ValueError):
                convert(token, int)

    def testRealNumbers(self):
        self.assertEqual(convert("0.25", float), 0.25)
        self.assertEqual(convert("1e3", float), 1000.0)
        self.assertEqual(convert("1.10", Decimal), Decimal("1.10"))
        for token in (" 1.5", "1_000.0", "abc", ""):
            with self.subTest(token=token), self.assertRaises(ValueError):
                convert(token, float)
        with self.assertRaises(ValueError):
            convert("abc", Decimal)

    def testEnumsByName(self):
        self.assertIs(convert("GREEN", Color), Color.GREEN)
        with self.assertRaises(ValueError):
            convert("g", Color)

    def testFallbackCallsType(self):
        self.assertEqual(convert("a/b", pathlib.Path), pathlib.Path("a/b"))
        self.assertIs(converter_for(pathlib.Path), pathlib.Path)

    def testConverterIsCached(self):
        self.assertIs(converter_for(int), converter_for(int))

    def testRejectsNonTypes(self):
        with self.assertRaises(TypeError):
            converter_for("int")
        with self.assertRaises(TypeError):
            convert(42, int)


class TestRef(TestCase):
    """Ref cells."""

    def testDefaults(self):
        ref = Ref()
        self.assertIs(ref.type, str)
        self.assertIsNone(ref.value)

    def testReset(self):
        ref = Ref(int, 3)
        ref.value = 9
        ref.reset()
        self.assertEqual(ref.value, 3)

    def testRepr(self):
        self.assertEqual(repr(Ref(int, 3)), "ref[int](3)")

    def testRejectsNonType(self):
        with self.assertRaises(TypeError):
            Ref(3)


if __name__ == "__main__":
    unittest.main()
