"""
Utilities behavioral tests (sentinel, coalesce, naming, records, wording).

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import unittest
from unittest import TestCase

from cmdfriend.utils import (
    Unset,
    UnsetType,
    RecordType,
    coalesce,
    mirror,
    pluralize,
    quantify,
    rename,
)


class TestUnset(TestCase):
    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Derived(UnsetType): ...

    def testUnion(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("text", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))


class TestCoalesce(TestCase):
    def testReplacesUnsetOnly(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "fallback"), "")


class TestRename(TestCase):
    def testDirect(self):
        function = rename(lambda: None, "named")
        self.assertEqual(function.__name__, "named")
        self.assertEqual(function.__qualname__, "named")

    def testDecorator(self):
        @rename("decorated")
        def function():
            pass
        self.assertEqual(function.__name__, "decorated")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):
    def testFrozenViews(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")
            keys = mirror("keys")
            count = mirror("count")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}
                self._keys = {"a"}
                self._count = 3

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertEqual(holder.keys, frozenset({"a"}))
        self.assertEqual(holder.count, 3)
        with self.assertRaises(TypeError):
            holder.table["b"] = 2
        with self.assertRaises(AttributeError):
            holder.count = 4


class TestRecordType(TestCase):
    def setUp(self):
        class PairRecord(metaclass=RecordType):
            __introspectable__ = ("left", "right")

            def __init__(self, left, right=0):
                object.__setattr__(self, "_left", left)
                object.__setattr__(self, "_right", right)

        self.PairRecord = PairRecord

    def testDisplayableDefaultsToUnset(self):
        self.assertIs(RecordType.__displayable__, Unset)
        self.assertIs(self.PairRecord.__displayable__, Unset)

    def testTypename(self):
        self.assertEqual(self.PairRecord.__typename__, "pair-record")

    def testRepr(self):
        self.assertEqual(repr(self.PairRecord(1, 2)), "pair-record(left=1, right=2)")

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.PairRecord(1).left = 2

    def testReplaceAndEquality(self):
        record = self.PairRecord(1, 2)
        self.assertEqual(copy.replace(record, right=3), self.PairRecord(1, 3))
        self.assertEqual(hash(record), hash(self.PairRecord(1, 2)))
        self.assertNotEqual(record, self.PairRecord(1, 3))


class TestWording(TestCase):
    def testPluralize(self):
        self.assertEqual(pluralize("argument"), "arguments")
        self.assertEqual(pluralize("required option"), "required options")
        self.assertEqual(pluralize("entry"), "entries")
        self.assertEqual(pluralize("day"), "days")
        self.assertEqual(pluralize("box"), "boxes")
        self.assertEqual(pluralize("Argument"), "Arguments")
        self.assertEqual(pluralize("ARGUMENT"), "ARGUMENTS")

    def testQuantify(self):
        self.assertEqual(quantify(1, "argument"), "1 argument")
        self.assertEqual(quantify(0, "argument"), "0 arguments")
        self.assertEqual(quantify(2, "argument"), "2 arguments")


if __name__ == "__main__":
    unittest.main()
