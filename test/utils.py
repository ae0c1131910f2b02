"""
Tests for the internal helpers.

This module verifies the guarantees the other layers rely on:
- Unset is a falsy, printable, sealed singleton usable in PEP 604 unions.
- coalesce() only replaces Unset.
- rename() and mirror() behave as documented.
- ordinal() produces the labels used in error messages.
- DeclarationType derives type names and representations.
"""
import copy
import unittest
from unittest import TestCase

from commandeer.utils import *


class UnsetTest(TestCase):
    """The Unset sentinel."""

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFalsyButDistinct(self) -> None:
        self.assertFalse(Unset)
        self.assertNotEqual(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testUnion(self) -> None:
        self.assertIsInstance("x", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(3, str | Unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):
    """coalesce(), rename(), mirror() and ordinal()."""

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)

    def testRename(self) -> None:
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")
        with self.assertRaises(TypeError):
            rename(1, "x")
        with self.assertRaises(TypeError):
            rename()

    def testMirrorDetachesContainers(self) -> None:
        class Holder:
            items = mirror("items")
            label = mirror("label")

            def __init__(self):
                self._items = [1, 2]
                self._label = "x"

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertEqual(holder.label, "x")
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(103), "103rd")
        self.assertEqual(ordinal(112), "112th")


class DeclarationTypeTest(TestCase):
    """Generated names, properties and representations."""

    def testGeneratedMembers(self) -> None:
        class SampleDecl(metaclass=DeclarationType):
            __introspectable__ = ("name", "tags")

            def __init__(self):
                self._name = "demo"
                self._tags = {"a"}

        sample = SampleDecl()
        self.assertEqual(SampleDecl.__typename__, "sample-decl")
        self.assertEqual(sample.tags, frozenset({"a"}))
        self.assertEqual(repr(sample), "sample-decl(name='demo', tags=frozenset({'a'}))")
        self.assertEqual(list(sample.__rich_repr__()), [("name", "demo"), ("tags", frozenset({"a"}))])


if __name__ == '__main__':
    unittest.main()
