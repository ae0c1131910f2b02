"""
Command declaration and result block tests.

Scope
- Validate the declaration tree: sub-commands, navigation, lookups, unique ids.
- Validate CommandBlock accessors and their faults.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (CommandParser, CommandDecl, CommandBlock).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from commandeer import CommandParser, CommandBlock, OptionKind
from commandeer.faults import (
    DuplicateCommandBlockError,
    InvalidUniqueIdTypeError,
    UniqueIdNotAssignedError,
    OptionNotFoundError,
    ParameterNotFoundError,
    OptionNotSetError,
    CommandSyntaxError,
)


class TestDeclarationTree(TestCase):
    """CommandDecl composition and navigation."""

    def setUp(self) -> None:
        self.parser = CommandParser("prog", "test program")
        self.remote = self.parser.root.add_subcommand("remote", "manage remotes")
        self.add = self.remote.add_subcommand("add")

    def testRootIsNamedAfterProgram(self):
        self.assertEqual(self.parser.root.name, "prog")
        self.assertEqual(self.parser.root.descr, "test program")
        self.assertIsNone(self.parser.root.parent)

    def testNavigation(self):
        self.assertIs(self.add.parent, self.remote)
        self.assertIs(self.add.root, self.parser.root)
        self.assertEqual([decl.name for decl in self.add.path], ["prog", "remote", "add"])
        self.assertIs(self.parser.root.find_subcommand("remote"), self.remote)
        self.assertIsNone(self.parser.root.find_subcommand("add"))

    def testDuplicateSubcommandRaises(self):
        with self.assertRaises(DuplicateCommandBlockError):
            self.parser.root.add_subcommand("remote")
        with self.assertRaises(ValueError):
            self.parser.root.add_subcommand("remote")

    def testSameNameUnderDifferentParents(self):
        self.parser.root.add_subcommand("add")
        self.assertIsNot(self.parser.root.find_subcommand("add"), self.add)

    def testMalformedSubcommandName(self):
        with self.assertRaises(ValueError):
            self.parser.root.add_subcommand("--bad")
        with self.assertRaises(TypeError):
            self.parser.root.add_subcommand(None)

    def testLookups(self):
        verbose = self.remote.add_switch("verbose", "v")
        url = self.add.add_parameter("url")

        self.assertIs(self.remote.find_option("verbose"), verbose)
        self.assertIs(self.remote.find_alias("v"), verbose)
        self.assertIsNone(self.remote.find_option("url"))
        self.assertIs(self.add.find_option("url"), url)
        self.assertEqual(self.add.parameters, (url,))
        self.assertEqual(self.remote.local_options, {"verbose": verbose})
        self.assertEqual(url.kind, OptionKind.PARAMETER)

    def testExposedContainersAreDetached(self):
        self.remote.add_switch("verbose")
        options = self.remote.local_options
        options.clear()
        self.assertIn("verbose", self.remote.local_options)

    def testReprDoesNotRecurseThroughParent(self):
        self.assertIn("name='add'", repr(self.add))
        self.assertNotIn("parent", repr(self.add))


class TestUniqueId(TestCase):
    """Opaque identifiers attached to declarations."""

    def setUp(self) -> None:
        self.decl = CommandParser("prog").root.add_subcommand("build")

    def testUnassigned(self):
        self.assertFalse(self.decl.has_unique_id)
        with self.assertRaises(UniqueIdNotAssignedError):
            self.decl.get_unique_id()

    def testTypedRetrieval(self):
        self.decl.set_unique_id(7)
        self.assertEqual(self.decl.get_unique_id(int), 7)
        self.assertEqual(self.decl.get_unique_id(), 7)
        with self.assertRaises(InvalidUniqueIdTypeError):
            self.decl.get_unique_id(str)

    def testNoneIsAValidId(self):
        self.decl.set_unique_id(None)
        self.assertTrue(self.decl.has_unique_id)
        self.assertIsNone(self.decl.get_unique_id())


class TestCommandBlock(TestCase):
    """Accessors on parsed blocks."""

    def setUp(self) -> None:
        self.parser = CommandParser("prog")
        self.parser.root.add_variable("name", "n")
        self.parser.root.add_switch("dry")
        self.parser.root.add_parameter("source")
        self.parser.root.add_parameter("target")
        self.parser.parse_args(["prog", "-n", "x", "src"])
        self.block = self.parser.last_block

    def testValues(self):
        self.assertIsInstance(self.block, CommandBlock)
        self.assertIs(self.block.decl, self.parser.root)
        self.assertEqual(self.block.name, "prog")
        self.assertEqual(self.block.values, {"name": "x", "source": "src"})

    def testOptionValueDefaults(self):
        self.assertEqual(self.block.get_option_value("name"), "x")
        self.assertEqual(self.block.get_option_value("dry", None), None)
        with self.assertRaises(OptionNotFoundError):
            self.block.get_option_value("dry")

    def testParameterValues(self):
        self.assertEqual(self.block.get_parameter_value("source"), "src")
        self.assertEqual(self.block.get_parameter_value("target", "."), ".")
        with self.assertRaises(ParameterNotFoundError):
            self.block.get_parameter_value("target")

    def testParameterLookupRejectsOptions(self):
        with self.assertRaises(ParameterNotFoundError):
            self.block.get_parameter_value("name", "fallback")

    def testRequire(self):
        self.assertEqual(self.block.require("name"), "x")
        with self.assertRaises(OptionNotSetError) as context:
            self.block.require("target")
        self.assertIsInstance(context.exception, CommandSyntaxError)
        self.assertEqual(context.exception.token, "target")
        with self.assertRaises(OptionNotFoundError):
            self.block.require("missing")


if __name__ == "__main__":
    unittest.main()
