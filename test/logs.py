"""
Logging configuration tests (levels, appender descriptors, active logger).

Scope
- Validate level name translation, including TRACE and WARN/FATAL aliases.
- Validate each appender kind and the reconfiguration policy.
- Validate the active-logger context used by getlogger().

Conventions
- Test method names follow CamelCase per project convention.
- Loggers are namespaced under "apprun.test.logs" to stay isolated.
"""

from __future__ import annotations

import logging
import os
import tempfile
import unittest
from unittest import TestCase

from rich.logging import RichHandler

from apprun import TRACE, LoggerConfigError, getlogger, using
from apprun.logs import configure, level


class TestLevels(TestCase):

    def testNames(self):
        self.assertEqual(level("TRACE"), TRACE)
        self.assertEqual(level("debug"), logging.DEBUG)
        self.assertEqual(level("Warn"), logging.WARNING)
        self.assertEqual(level("FATAL"), logging.CRITICAL)
        self.assertEqual(level(" error "), logging.ERROR)

    def testNumbersPassThrough(self):
        self.assertEqual(level(logging.INFO), logging.INFO)

    def testTraceHasName(self):
        self.assertEqual(logging.getLevelName(TRACE), "TRACE")

    def testUnknownNames(self):
        for name in ("LOUD", "", None, True):
            with self.subTest(name=name):
                with self.assertRaises(LoggerConfigError):
                    level(name)


class TestConfigure(TestCase):
    """Appender descriptors."""

    name = "apprun.test.logs"

    def tearDown(self):
        configure(self.name, [])

    def testDefaultIsConsoleAtWarn(self):
        logger = configure(self.name)
        self.assertEqual(len(logger.handlers), 1)
        self.assertIsInstance(logger.handlers[0], RichHandler)
        self.assertEqual(logger.handlers[0].level, logging.WARNING)
        self.assertFalse(logger.propagate)

    def testEmptyListSilences(self):
        logger = configure(self.name, [])
        self.assertEqual([type(handler) for handler in logger.handlers], [logging.NullHandler])

    def testStreamAppender(self):
        logger = configure(self.name, [{"kind": "stream", "destination": "stdout", "threshold": "INFO"}])
        handler = logger.handlers[0]
        self.assertIsInstance(handler, logging.StreamHandler)
        self.assertEqual(handler.level, logging.INFO)

    def testFileAppender(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "app.log")
            logger = configure(self.name, [{"kind": "file", "destination": path, "format": "%(levelname)s %(message)s"}])
            logger.setLevel(logging.INFO)
            logger.info("written")
            configure(self.name, [])
            with open(path, encoding="utf-8") as stream:
                self.assertEqual(stream.read(), "INFO written\n")

    def testReconfigureReplacesHandlers(self):
        configure(self.name, [{"kind": "null"}, {"kind": "null"}])
        logger = configure(self.name, [{"kind": "null"}])
        self.assertEqual(len(logger.handlers), 1)

    def testInvalidDescriptors(self):
        for appenders in ("console", {"kind": "console"}, [{"kind": "syslog"}], [{"kind": "file"}], ["console"],
                          [{"kind": "null", "threshold": "LOUD"}]):
            with self.subTest(appenders=appenders):
                with self.assertRaises(LoggerConfigError):
                    configure(self.name, appenders)


class TestActiveLogger(TestCase):

    def testPackageLoggerOutsideContext(self):
        self.assertEqual(getlogger().name, "apprun")

    def testUsingNests(self):
        outer = logging.getLogger("apprun.test.outer")
        inner = logging.getLogger("apprun.test.inner")
        with using(outer):
            self.assertIs(getlogger(), outer)
            with using(inner):
                self.assertIs(getlogger(), inner)
            self.assertIs(getlogger(), outer)
        self.assertEqual(getlogger().name, "apprun")


if __name__ == "__main__":
    unittest.main()
