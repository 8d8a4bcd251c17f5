"""
Faults module tests (codes, rendering and replacement).

Scope
- Validate fault codes and their normalization.
- Validate rich rendering with and without hints and colors.
- Validate copy.replace() on command exceptions.
- Validate the registration error hierarchy.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from rich.console import Group
from rich.text import Text

from argosy.faults import *


class TestFaults(TestCase):
    """Behavioral tests for CommandException and RegistrationError."""

    def testCodes(self):
        self.assertIs(IncompleteCommandError.code, FaultCode.COMMAND_INCOMPLETE)
        self.assertIs(CommandException.code, FaultCode.DELEGATED_ERROR)
        self.assertEqual(FaultCode.ACCESS_DENIED.normalize(), "11102")

    def testMessageAndOptions(self):
        fault = AccessDeniedError("access denied", permission="app.commands.zone")
        self.assertEqual(str(fault), "access denied")
        self.assertEqual(fault.options["permission"], "app.commands.zone")
        self.assertEqual(str(CommandException()), "")

    def testRichWithoutHint(self):
        rendered = CommandException("this zone is locked", colorful=False).__rich__()
        self.assertEqual(rendered, Text("this zone is locked", ""))

    def testRichWithHint(self):
        rendered = InvalidArgumentError("invalid argument", hint="parameter description: count").__rich__()
        self.assertIsInstance(rendered, Group)
        message, hint = rendered.renderables
        self.assertEqual(message.plain, "invalid argument")
        self.assertEqual(hint.plain, " → parameter description: count")

    def testReplaceKeepsTypeAndMessage(self):
        fault = MissingArgumentError("parameter 'target' is required", parameter="target")
        replaced = copy.replace(fault, colorful=False)
        self.assertIsInstance(replaced, MissingArgumentError)
        self.assertEqual(str(replaced), str(fault))
        self.assertEqual(replaced.options, {"parameter": "target", "colorful": False})

    def testReplaceSkipsSubclassConstructor(self):
        class ZoneLockedError(CommandException):
            def __init__(self, zone):
                super().__init__(f"zone {zone} is locked", zone=zone)

        fault = ZoneLockedError("alpha")
        replaced = copy.replace(fault, colorful=False)
        self.assertIsInstance(replaced, ZoneLockedError)
        self.assertEqual(str(replaced), "zone alpha is locked")
        self.assertEqual(replaced.options, {"zone": "alpha", "colorful": False})
        self.assertEqual(fault.options, {"zone": "alpha"})

    def testRegistrationHierarchy(self):
        self.assertTrue(issubclass(DuplicateParameterError, DescriptorError))
        self.assertTrue(issubclass(DescriptorError, ValueError))
        self.assertTrue(issubclass(MissingDescriptorError, TypeError))
        for error in (SelfRegistrationError, ParentMismatchError, AliasCollisionError, MissingDescriptorError):
            self.assertTrue(issubclass(error, RegistrationError))
            self.assertFalse(issubclass(error, CommandException))
        self.assertEqual(str(AliasCollisionError("taken")), "taken")


if __name__ == "__main__":
    unittest.main()
