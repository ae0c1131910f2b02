"""
Fault taxonomy and rendering tests.

Scope
- Validate the two error channels, their codes and builtin bases.
- Validate context options exposed as attributes (token, index, name).
- Validate rich rendering through report().

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured with a StringIO-backed rich Console.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from commandeer import CommandParser
from commandeer.faults import *


class TestTaxonomy(TestCase):
    """Channels, codes and bases."""

    def testChannelsAreDisjoint(self):
        for error in (DuplicateOptionError, OutOfRangeError, OutOfMemoryError):
            self.assertTrue(issubclass(error, ApiError))
            self.assertFalse(issubclass(error, CommandSyntaxError))
        for error in (UnknownOptionError, InvalidAliasError, OptionNotSetError):
            self.assertTrue(issubclass(error, CommandSyntaxError))
            self.assertFalse(issubclass(error, ApiError))

    def testBuiltinBases(self):
        self.assertTrue(issubclass(DuplicateOptionError, ValueError))
        self.assertTrue(issubclass(DuplicateCommandBlockError, ValueError))
        self.assertTrue(issubclass(InvalidOptionTypeError, TypeError))
        self.assertTrue(issubclass(OptionNotFoundError, LookupError))
        self.assertTrue(issubclass(ParameterNotFoundError, OptionNotFoundError))
        self.assertTrue(issubclass(OutOfRangeError, IndexError))
        self.assertTrue(issubclass(OutOfMemoryError, MemoryError))
        self.assertTrue(issubclass(TooManyParametersError, UnexpectedArgumentError))

    def testCodesAreUnique(self):
        codes = [error.code for error in (
            DuplicateCommandBlockError, DuplicateOptionError, OptionNotFoundError,
            ParameterNotFoundError, InvalidOptionTypeError, InvalidUniqueIdTypeError,
            OutOfRangeError, UniqueIdNotAssignedError, OutOfMemoryError,
            UnknownOptionError, MissingVariableValueError, UnexpectedArgumentError,
            TooManyParametersError, InvalidValueError, OptionNotSetError, InvalidAliasError,
        )]
        self.assertEqual(len(set(codes)), len(codes))
        self.assertEqual(set(codes), set(FaultCode))

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "22101")


class TestFaultObjects(TestCase):
    """Messages and context options."""

    def testSyntaxErrorContext(self):
        error = UnknownOptionError("unknown option '--x'", token="--x", index=3)
        self.assertEqual(str(error), "unknown option '--x'")
        self.assertEqual(error.token, "--x")
        self.assertEqual(error.index, 3)
        self.assertEqual(error.options["code"], FaultCode.UNKNOWN_OPTION)
        with self.assertRaises(TypeError):
            error.options["token"] = "--y"

    def testIndexDefaultsToNone(self):
        self.assertIsNone(InvalidValueError("bad", token="x").index)

    def testMissingAttributeRaises(self):
        with self.assertRaises(AttributeError):
            OutOfRangeError("out").token

    def testParserErrorsCarryName(self):
        parser = CommandParser("prog")
        parser.root.add_switch("verbose")
        with self.assertRaises(DuplicateOptionError) as context:
            parser.root.add_switch("verbose")
        self.assertEqual(context.exception.name, "verbose")


class TestRendering(TestCase):
    """Rich output."""

    def render(self, fault):
        console = Console(file=io.StringIO(), width=100, color_system=None)
        report(fault, console=console)
        return console.file.getvalue()

    def testHeaderMessageAndHint(self):
        output = self.render(UnknownOptionError("unknown option '--x'", token="--x", prog="tool"))
        self.assertIn("[ tool — 22101 | Unknown Option ]", output)
        self.assertIn("unknown option '--x'", output)
        self.assertIn(UnknownOptionError.hint, output)

    def testNoHintLine(self):
        output = self.render(InvalidValueError("bad value", token="x", prog="tool"))
        self.assertNotIn("→", output)

    def testFancyPanel(self):
        output = self.render(OutOfRangeError("index 4 is out of range", prog="tool", fancy=True))
        self.assertIn("╭", output)
        self.assertIn("index 4 is out of range", output)

    def testReportRejectsOtherExceptions(self):
        with self.assertRaises(TypeError):
            report(ValueError("plain"))

    def testGetdocWithoutDocs(self):
        self.assertIsNone(getdoc(FaultCode.INVALID_ALIAS))
        with self.assertRaises(TypeError):
            getdoc(22131)


if __name__ == "__main__":
    unittest.main()
