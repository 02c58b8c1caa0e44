"""
Lifecycle state machine tests.

Scope
- Validate UNINITIALIZED → PREPARED → EXECUTING transitions.
- Validate that a failing preparation step leaves the wrapper unprepared.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import logging
import unittest
from unittest import TestCase, mock

from apprun import App, ConfigLoader, ConfigLoadError
from apprun.lifecycle import Lifecycle, State


class TestStates(TestCase):

    def setUp(self):
        self.app = App(lambda options, *args: None, logger=[])

    def testStartsUninitialized(self):
        self.assertIs(self.app.lifecycle.state, State.UNINITIALIZED)
        self.assertFalse(self.app.lifecycle.prepared)

    def testPrepareOnce(self):
        self.assertTrue(self.app.lifecycle.prepare())
        self.assertFalse(self.app.lifecycle.prepare())
        self.assertIs(self.app.lifecycle.state, State.PREPARED)

    def testExecutingRestoresPreparedState(self):
        with self.app.lifecycle.executing():
            self.assertIs(self.app.lifecycle.state, State.EXECUTING)
        self.assertIs(self.app.lifecycle.state, State.PREPARED)

    def testExecutingRestoresStateOnError(self):
        with self.assertRaises(LookupError):
            with self.app.lifecycle.executing():
                raise LookupError
        self.assertIs(self.app.lifecycle.state, State.PREPARED)

    def testPrepareEnablesLogger(self):
        self.assertIsNone(self.app.logger())
        self.app.lifecycle.prepare()
        self.assertIsNotNone(self.app.logger())


class TestPreparationSteps(TestCase):
    """Order and failure of the preparation steps, using a stand-in owner."""

    def owner(self, **options):
        owner = mock.Mock(spec=["options", "app", "name", "load_config", "enable_logger"])
        owner.options = options
        owner.app = mock.Mock(spec=["init", "run"])
        owner.name = "tool"
        return owner

    def testStepsRunInOrder(self):
        owner = self.owner(config="")
        calls = mock.Mock()
        owner.load_config.side_effect = lambda source: calls.load(source)
        owner.enable_logger.side_effect = lambda: calls.logger()
        owner.app.init.side_effect = lambda options: calls.init(options)

        Lifecycle(owner).prepare()
        self.assertEqual([call[0] for call in calls.mock_calls], ["load", "logger", "init"])

    def testNoConfigOptionSkipsLoading(self):
        owner = self.owner()
        Lifecycle(owner).prepare()
        owner.load_config.assert_not_called()
        owner.app.init.assert_called_once_with(owner.options)

    def testApplicationWithoutInit(self):
        owner = self.owner()
        owner.app = mock.Mock(spec=["run"])
        self.assertTrue(Lifecycle(owner).prepare())

    def testClassIsNotInitialized(self):
        class Tool:
            inits = 0

            def init(self, options):
                Tool.inits += 1

        owner = self.owner()
        owner.app = Tool
        Lifecycle(owner).prepare()
        self.assertEqual(Tool.inits, 0)

    def testLoadFailureLeavesUninitialized(self):
        owner = self.owner(config="missing.yaml")
        owner.load_config.side_effect = ConfigLoadError("cannot read", source="missing.yaml")
        lifecycle = Lifecycle(owner)
        with self.assertRaises(ConfigLoadError):
            lifecycle.prepare()
        self.assertIs(lifecycle.state, State.UNINITIALIZED)
        owner.enable_logger.assert_not_called()

    def testInitFailureLeavesUninitialized(self):
        owner = self.owner()
        owner.app.init.side_effect = RuntimeError("init failed")
        lifecycle = Lifecycle(owner)
        with self.assertRaises(RuntimeError):
            lifecycle.prepare()
        self.assertIs(lifecycle.state, State.UNINITIALIZED)


class TestWrapperIntegration(TestCase):

    def testExplicitLoggerSurvivesPreparation(self):
        custom = logging.getLogger("apprun.test.lifecycle")
        app = App(lambda options: None, loader=ConfigLoader(directories=[]))
        app.logger(custom)
        app.lifecycle.prepare()
        self.assertIs(app.logger(), custom)
        self.assertEqual(custom.level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
