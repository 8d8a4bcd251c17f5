"""
Utilities module tests (Unset sentinel and helpers).

Scope
- Validate the Unset singleton: identity, falsiness, repr, finality, copying.
- Validate coalesce(), rename(), mirror() and casefold().

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import pickle
import unittest
from unittest import TestCase

from argosy.utils import Unset, UnsetType, casefold, coalesce, mirror, rename


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyButDistinct(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, "")

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopyAndPicklePreserveIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnionWithTypes(self):
        self.assertIsInstance("name", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(3, str | Unset)

    def testFinalClass(self):
        with self.assertRaises(TypeError):
            type("derived", (UnsetType,), {})


class TestHelpers(TestCase):
    """Behavioral tests for the helper functions."""

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "default"), "default")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce("", "default"), "")
        self.assertIsNone(coalesce(None, "default"))

    def testRenameForms(self):
        def function():
            pass

        self.assertEqual(rename(function, "renamed").__name__, "renamed")

        @rename("decorated")
        def other():
            pass

        self.assertEqual(other.__qualname__, "decorated")
        with self.assertRaises(TypeError):
            rename(1, "name")

    def testMirrorHandsOutCopies(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a", {"b"}]

        holder = Holder()
        self.assertEqual(holder.items, ("a", frozenset({"b"})))
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testCasefold(self):
        self.assertEqual(casefold("  Zone "), "zone")
        with self.assertRaises(TypeError):
            casefold(None)


if __name__ == "__main__":
    unittest.main()
