"""
Tests for the argparser utilities.

This module verifies the guarantees of the small helpers shared across the
package:
- Unset: singleton identity, falsy semantics, copy/pickle identity, finality.
- coalesce: only Unset is replaced.
- rename: decorator renaming of generated callables.
- mirror: read-only properties returning detached snapshots.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from argparser.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, "")

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPreservesIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPicklePreservesIdentity(self) -> None:
        for protocol in range(pickle.HIGHEST_PROTOCOL + 1):
            with self.subTest(protocol=protocol):
                self.assertIs(pickle.loads(pickle.dumps(Unset, protocol)), Unset)

    def testUnionWithTypes(self) -> None:
        # isinstance() must accept the PEP 604 union built from the sentinel.
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(5, str | Unset))

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            class _(UnsetType):  # NOQA: F-811
                pass


class CoalesceTest(TestCase):

    def testUnsetIsReplaced(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalsyValuesArePreserved(self):
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertEqual(coalesce(0, "fallback"), 0)


class RenameTest(TestCase):

    def testDecorator(self):
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(5)
        with self.assertRaises(TypeError):
            rename("name")(5)


class MirrorTest(TestCase):

    def setUp(self):
        class Holder:
            items = mirror("items")
            title = mirror("title")

            def __init__(self):
                self._items = [1, [2, 3]]
                self._title = "holder"

        self.holder = Holder()

    def testReadsPrivateField(self):
        self.assertEqual(self.holder.title, "holder")

    def testReturnsDetachedSnapshot(self):
        self.assertEqual(self.holder.items, (1, (2, 3)))
        self.assertEqual(self.holder._items, [1, [2, 3]])

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.holder.title = "other"

    def testRejectsNonStringName(self):
        with self.assertRaises(TypeError):
            mirror(5)


if __name__ == '__main__':
    unittest.main()
