"""
Flag descriptor tests (construction, binding, matching, and consumption).

Scope
- Validate name checks and metadata exposure.
- Validate single-occurrence consumption from a token deque, including short
  clusters, accumulation, and conversion faults.

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from collections import deque
from unittest import TestCase

from pennant import (
    Flag,
    FlagDefinitionError,
    DuplicateNameError,
    NeedsArgumentError,
    AlreadySpecifiedError,
    ConversionError,
    UnsupportedTypeError,
    FaultCode,
)


class Record:
    pass


class TestFlagConstruction(TestCase):
    """Construction-time validation of names and metadata."""

    def testRequiresAtLeastOneName(self):
        with self.assertRaises(FlagDefinitionError):
            Flag()

    def testRejectsBadNames(self):
        for name in ("name", "-ab", "--", "-", "--a b"):
            with self.subTest(name=name), self.assertRaises(FlagDefinitionError):
                Flag(name)

    def testRejectsDuplicateNames(self):
        with self.assertRaises(DuplicateNameError):
            Flag("--all", "--all")

    def testRejectsNonStringMetadata(self):
        with self.assertRaises(TypeError):
            Flag("-x", description=None)
        with self.assertRaises(TypeError):
            Flag("-x", mutexgroup=1)

    def testNames(self):
        flag = Flag("-v", "--verbose", "--loud")
        self.assertEqual(flag.names, ("-v", "--verbose", "--loud"))

    def testAccumulateNeedsIntField(self):
        with self.assertRaises(FlagDefinitionError):
            Flag("-v", accumulate=True).bind(Record(), "verbose", str)

    def testAccumulateRejectsListField(self):
        with self.assertRaises(FlagDefinitionError):
            Flag("-v", accumulate=True).bind(Record(), "levels", list[int])

    def testAccumulateAcceptsOptionalInt(self):
        flag = Flag("-v", accumulate=True).bind(Record(), "verbose", int | None)
        self.assertTrue(flag.bound)

    def testRejectsNonAsciiNames(self):
        for name in ("-\u00e9", "--na\u00efve"):
            with self.subTest(name=name), self.assertRaises(FlagDefinitionError):
                Flag(name)


class TestFlagMatching(TestCase):
    """Which tokens a flag recognizes and whether they take a value."""

    def testShortMatchesFirstCharacterOfCluster(self):
        flag = Flag("-a", "--all")
        self.assertTrue(flag.handles("-a"))
        self.assertTrue(flag.handles("-abc"))
        self.assertFalse(flag.handles("-ba"))

    def testLongMatchesWholeName(self):
        flag = Flag("-a", "--all")
        self.assertTrue(flag.handles("--all"))
        self.assertFalse(flag.handles("--al"))
        self.assertFalse(flag.handles("all"))

    def testNeedsExtraValueByKind(self):
        record = Record()
        self.assertFalse(Flag("-b").bind(record, "b", bool).needs_extra_value("-b"))
        self.assertTrue(Flag("-s").bind(record, "s", str).needs_extra_value("-s"))
        self.assertTrue(Flag("-l").bind(record, "l", list[int]).needs_extra_value("-l"))

    def testAccumulateNeedsValueOnlyInLongForm(self):
        flag = Flag("-v", "--verbose", accumulate=True).bind(Record(), "verbose", int)
        self.assertFalse(flag.needs_extra_value("-v"))
        self.assertTrue(flag.needs_extra_value("--verbose"))


class TestFlagParse(TestCase):
    """Consumption of one occurrence from the front of a token deque."""

    def testBoolConsumesOneToken(self):
        record = Record()
        flag = Flag("-q", "--quiet").bind(record, "quiet", bool)
        tokens = deque(["--quiet", "rest"])
        flag.parse(tokens)
        self.assertTrue(record.quiet)
        self.assertTrue(flag.specified)
        self.assertEqual(list(tokens), ["rest"])

    def testValueConsumesTwoTokens(self):
        record = Record()
        flag = Flag("-n", "--name").bind(record, "name", str)
        tokens = deque(["-n", "--looks-like-a-flag", "rest"])
        flag.parse(tokens)
        self.assertEqual(record.name, "--looks-like-a-flag")
        self.assertEqual(list(tokens), ["rest"])

    def testClusterIsRewritten(self):
        record = Record()
        flag = Flag("-a").bind(record, "a", bool)
        tokens = deque(["-abc"])
        flag.parse(tokens)
        self.assertTrue(record.a)
        self.assertEqual(list(tokens), ["-bc"])

    def testValueFlagInsideClusterRejected(self):
        flag = Flag("-n").bind(Record(), "n", str)
        with self.assertRaises(NeedsArgumentError):
            flag.parse(deque(["-nx", "value"]))

    def testMissingValueRejected(self):
        flag = Flag("-n", "--name").bind(Record(), "name", str)
        with self.assertRaises(NeedsArgumentError) as context:
            flag.parse(deque(["--name"]), index=4)
        fault = context.exception
        self.assertIs(fault.options["code"], FaultCode.NEEDS_ARGUMENT)
        self.assertEqual(fault.options["index"], 4)
        self.assertIn("fourth", fault.message)
        self.assertIs(fault.options["flag"], flag)

    def testRepeatedSingleFlagRejected(self):
        flag = Flag("-n").bind(Record(), "n", str)
        tokens = deque(["-n", "a", "-n", "b"])
        flag.parse(tokens)
        with self.assertRaises(AlreadySpecifiedError):
            flag.parse(tokens, index=3)

    def testListAppends(self):
        record = Record()
        record.tags = []
        flag = Flag("-t").bind(record, "tags", list[int])
        tokens = deque(["-t", "1", "-t", "2"])
        flag.parse(tokens)
        flag.parse(tokens, index=3)
        self.assertEqual(record.tags, [1, 2])

    def testAccumulateCountsShortOccurrences(self):
        record = Record()
        record.verbose = 0
        flag = Flag("-v", accumulate=True).bind(record, "verbose", int)
        tokens = deque(["-vvv"])
        while tokens:
            flag.parse(tokens)
        self.assertEqual(record.verbose, 3)

    def testAccumulateTakesValueInLongForm(self):
        record = Record()
        record.verbose = 0
        flag = Flag("-v", "--verbose", accumulate=True).bind(record, "verbose", int)
        flag.parse(deque(["--verbose", "5"]))
        self.assertEqual(record.verbose, 5)

    def testIntConversionFailure(self):
        record = Record()
        flag = Flag("-c").bind(record, "count", int)
        with self.assertRaises(ConversionError) as context:
            flag.parse(deque(["-c", "ten"]))
        self.assertIsInstance(context.exception.__cause__, ValueError)
        self.assertEqual(context.exception.options["value"], "ten")

    def testOptionalIntIsUnwrapped(self):
        record = Record()
        flag = Flag("-c").bind(record, "count", int | None)
        flag.parse(deque(["-c", "-7"]))
        self.assertEqual(record.count, -7)

    def testUnsupportedType(self):
        flag = Flag("-r").bind(Record(), "ratio", float)
        with self.assertRaises(UnsupportedTypeError):
            flag.parse(deque(["-r", "0.5"]))

    def testUnboundFlagRaises(self):
        with self.assertRaises(RuntimeError):
            Flag("-x").parse(deque(["-x", "value"]))


if __name__ == "__main__":
    unittest.main()
