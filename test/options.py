"""
Options module behavioral tests (descriptor records and capabilities).

Scope
- Validate Descriptor construction: field sanitization, defaults, capability sets.
- Validate record semantics: read-only attributes, copy.replace, equality.
- Validate the derived forms (short/long/label) used by help and fault messages.

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import unittest
from unittest import TestCase

from cmdfriend import Descriptor, Capability, ALIAS, OPTIONAL, NO_CHAR_KEY, NO_LONG_KEY, HIDDEN, isletter
from cmdfriend.utils import Unset


class TestDescriptor(TestCase):
    """Behavioral tests for Descriptor construction."""

    def testPositionalFields(self):
        option = Descriptor("where", "w", OPTIONAL, 1, "Where to create the project")
        self.assertEqual(option.long_name, "where")
        self.assertEqual(option.key, "w")
        self.assertEqual(option.flags, frozenset({OPTIONAL}))
        self.assertEqual(option.arity, 1)
        self.assertEqual(option.description, "Where to create the project")

    def testSingleCapabilityIsWrapped(self):
        option = Descriptor("verbose", "v", HIDDEN)
        self.assertIsInstance(option.flags, frozenset)
        self.assertIn(HIDDEN, option.flags)

    def testIterableCapabilities(self):
        option = Descriptor("vscode", 2, [OPTIONAL, NO_CHAR_KEY])
        self.assertEqual(option.flags, frozenset({Capability.OPTIONAL, Capability.NO_CHAR_KEY}))

    def testArityDefaultsToZero(self):
        self.assertEqual(Descriptor("verbose", "v").arity, 0)

    def testDescriptionDefaultsToNone(self):
        self.assertIsNone(Descriptor("verbose", "v").description)

    def testAliasKeepsArityAndDescriptionUnset(self):
        alias = Descriptor("output", "o", ALIAS)
        self.assertIs(alias.arity, Unset)
        self.assertIs(alias.description, Unset)

    def testLongNameIsTrimmed(self):
        self.assertEqual(Descriptor("  where ", "w").long_name, "where")

    def testLongNameMustBeString(self):
        with self.assertRaises(TypeError):
            Descriptor(1, "w")

    def testLongNameCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Descriptor("   ", "w")

    def testLongNameCannotStartWithDash(self):
        with self.assertRaises(ValueError):
            Descriptor("--where", "w")

    def testLongNameCannotContainWhitespace(self):
        with self.assertRaises(ValueError):
            Descriptor("where to", "w")

    def testKeyMustBeSingleCharacter(self):
        with self.assertRaises(ValueError):
            Descriptor("where", "wh")

    def testKeyRejectsBooleans(self):
        with self.assertRaises(TypeError):
            Descriptor("where", True)

    def testKeyRejectsOtherTypes(self):
        with self.assertRaises(TypeError):
            Descriptor("where", 1.5)

    def testFlagsRejectNonCapabilities(self):
        with self.assertRaises(TypeError):
            Descriptor("where", "w", ["optional"])

    def testArityMustBeInteger(self):
        with self.assertRaises(TypeError):
            Descriptor("where", "w", (), "1")

    def testDescriptionCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Descriptor("where", "w", (), 1, "  ")


class TestDescriptorRecord(TestCase):
    """Behavioral tests for the record semantics of Descriptor."""

    def testReadOnly(self):
        option = Descriptor("where", "w")
        with self.assertRaises(AttributeError):
            option.key = "x"

    def testReplaceRevalidates(self):
        option = Descriptor("where", "w", OPTIONAL, 1)
        changed = copy.replace(option, arity=2)
        self.assertEqual(changed.arity, 2)
        self.assertEqual(option.arity, 1)
        with self.assertRaises(ValueError):
            copy.replace(option, key="xy")

    def testEquality(self):
        self.assertEqual(Descriptor("where", "w", OPTIONAL, 1), Descriptor("where", "w", {OPTIONAL}, 1))
        self.assertNotEqual(Descriptor("where", "w"), Descriptor("where", "W"))
        self.assertEqual(len({Descriptor("where", "w"), Descriptor("where", "w")}), 1)

    def testRepr(self):
        self.assertTrue(repr(Descriptor("where", "w")).startswith("descriptor(long_name='where'"))


class TestDescriptorForms(TestCase):
    """Behavioral tests for the short/long/label forms."""

    def testShortAndLong(self):
        option = Descriptor("where", "w")
        self.assertEqual(option.short, "-w")
        self.assertEqual(option.long, "--where")
        self.assertEqual(option.label, "-w / --where")

    def testNoCharKeyHasNoShortForm(self):
        option = Descriptor("vscode", 2, NO_CHAR_KEY)
        self.assertIsNone(option.short)
        self.assertEqual(option.label, "--vscode")

    def testNoLongKeyHasNoLongForm(self):
        option = Descriptor("secret", "s", NO_LONG_KEY)
        self.assertIsNone(option.long)
        self.assertEqual(option.short, "-s")

    def testIsLetter(self):
        self.assertTrue(isletter("w"))
        self.assertTrue(isletter("W"))
        self.assertFalse(isletter("+"))
        self.assertFalse(isletter("é"))
        self.assertFalse(isletter(2))


if __name__ == "__main__":
    unittest.main()
