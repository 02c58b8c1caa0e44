"""
ArgParser behavioral tests (flags, key=value pairs, positional order).

Scope
- Validate the separation of key=value options from positional arguments.
- Validate built-in flags, pass-through of unknown flags, and "--".
- Validate the typed help/version outcome and extensible flag sets.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from apprun import ArgParser, ConfigTree, Continue, Flag, MissingValueError, Terminate


class TestPairs(TestCase):
    """key=value options versus positional arguments."""

    def setUp(self):
        self.parser = ArgParser()

    def testInterspersedTokens(self):
        parsed = self.parser.parse(["foo", "bar=1", "doz"])
        self.assertEqual(parsed.args, ["foo", "doz"])
        self.assertEqual(parsed.options, {"bar": "1", "config": ""})

    def testPairsAndPositionals(self):
        parsed = self.parser.parse(["x", "bar=doz", "foo=1", "y"])
        self.assertEqual(parsed.args, ["x", "y"])
        self.assertEqual(parsed.options, {"foo": "1", "bar": "doz", "config": ""})

    def testDottedKeysNest(self):
        parsed = self.parser.parse(["foo=bar", "doz.bar=2", "doz.baz.qux=3"])
        self.assertEqual(parsed.options["doz"], {"bar": "2", "baz": {"qux": "3"}})

    def testValueKeepsEmbeddedEquals(self):
        parsed = self.parser.parse(["url=a=b=c"])
        self.assertEqual(parsed.options["url"], "a=b=c")

    def testEmptyValueStaysPositional(self):
        parsed = self.parser.parse(["foo=", "=bar"])
        self.assertEqual(parsed.args, ["foo=", "=bar"])
        self.assertNotIn("foo", parsed.options)

    def testScalarCollisionIsDropped(self):
        parsed = self.parser.parse(["foo=1", "foo.bar=2"])
        self.assertEqual(parsed.options["foo"], "1")

    def testParseIntoExistingTree(self):
        tree = ConfigTree(keep="yes")
        parsed = self.parser.parse(["a=1"], into=tree)
        self.assertIs(parsed.options, tree)
        self.assertEqual(tree, {"keep": "yes", "a": "1", "config": ""})


class TestFlags(TestCase):
    """Built-in and custom flags."""

    def setUp(self):
        self.parser = ArgParser()

    def testConfigDefaultsToEmptyString(self):
        self.assertEqual(self.parser.parse([]).options["config"], "")

    def testConfigShortFlag(self):
        parsed = self.parser.parse(["-c", "app.yaml", "run"])
        self.assertEqual(parsed.options["config"], "app.yaml")
        self.assertEqual(parsed.args, ["run"])

    def testConfigInlineLongFlag(self):
        parsed = self.parser.parse(["--config=app.yaml"])
        self.assertEqual(parsed.options["config"], "app.yaml")

    def testConfigWithoutValueRaises(self):
        with self.assertRaises(MissingValueError):
            self.parser.parse(["--config"])

    def testQuietSetsLoglevel(self):
        for flag in ("-q", "--quiet"):
            with self.subTest(flag=flag):
                self.assertEqual(self.parser.parse([flag]).options["loglevel"], "ERROR")

    def testHelpTerminates(self):
        for flag in ("-h", "-?", "--help"):
            with self.subTest(flag=flag):
                self.assertEqual(self.parser.parse(["a", flag]).outcome, Terminate(0, "help"))

    def testVersionTerminates(self):
        for flag in ("-v", "--version"):
            with self.subTest(flag=flag):
                self.assertEqual(self.parser.parse([flag]).outcome, Terminate(0, "version"))

    def testHelpWinsOverVersion(self):
        self.assertEqual(self.parser.parse(["-v", "-h"]).outcome.reason, "help")

    def testNoFlagContinues(self):
        self.assertEqual(self.parser.parse(["a"]).outcome, Continue())

    def testFlagsAreCaseSensitive(self):
        parsed = self.parser.parse(["-V", "-Q"])
        self.assertEqual(parsed.args, ["-V", "-Q"])
        self.assertIsInstance(parsed.outcome, Continue)

    def testUnknownFlagsPassThrough(self):
        parsed = self.parser.parse(["--dry-run", "x", "-n", "--level=3"])
        self.assertEqual(parsed.args, ["--dry-run", "x", "-n", "--level=3"])
        self.assertNotIn("--level", parsed.options)

    def testDoubleDashEndsFlags(self):
        parsed = self.parser.parse(["a=1", "--", "-h", "b=2"])
        self.assertEqual(parsed.args, ["-h", "b=2"])
        self.assertEqual(parsed.options, {"a": "1", "config": ""})
        self.assertIsInstance(parsed.outcome, Continue)

    def testCustomFlag(self):
        dry = Flag("-n", "--dry-run", action=lambda options, value: options.assign("run.dry", "1"))
        parsed = ArgParser(ArgParser().flags, dry).parse(["-n", "x"])
        self.assertEqual(parsed.options["run"], {"dry": "1"})
        self.assertEqual(parsed.flags, {"dry-run": True})
        self.assertEqual(parsed.args, ["x"])

    def testLaterFlagRebindsAlias(self):
        verbose = Flag("-v", "--verbose", action=lambda options, value: options.update(loglevel="DEBUG"))
        parsed = ArgParser(ArgParser().flags, verbose).parse(["-v"])
        self.assertIsInstance(parsed.outcome, Continue)
        self.assertEqual(parsed.options["loglevel"], "DEBUG")

    def testInvalidFlagNames(self):
        for names in ((), ("x",), ("-",), ("--a=b",)):
            with self.subTest(names=names):
                with self.assertRaises(ValueError):
                    Flag(*names)


if __name__ == "__main__":
    unittest.main()
