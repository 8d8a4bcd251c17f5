"""
Descriptors module tests (declaration parsing and validation).

Scope
- Validate the "name" / "name=default" parameter grammar and flags.
- Validate duplicate detection, parameter ordering and name rules.
- Validate descriptions, visibility and permission levels.
- Validate describe() memoization and TOML loading.

Conventions
- Test method names follow CamelCase per project convention.
- Declarations are plain mappings passed to parse(), as @command stores them.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argosy import Command, PermissionLevel, command, describe, loads, parse
from argosy.faults import (
    DescriptorError,
    DuplicateParameterError,
    MissingDescriptorError,
    ParameterOrderError,
    RegistrationError,
)
from argosy.utils import Unset


class TestParse(TestCase):
    """Behavioral tests for parse()."""

    def testPrimaryNameIsFirstName(self):
        descriptor = parse({"names": ("create", "new")})
        self.assertEqual(descriptor.name, "create")
        self.assertEqual(descriptor.names, ("create", "new"))

    def testEmptyNamesRejected(self):
        with self.assertRaises(DescriptorError):
            parse({"names": ()})

    def testNamesMustBeSingleWords(self):
        with self.assertRaises(DescriptorError):
            parse({"names": ("zone create",)})

    def testDuplicateNamesRejectedCaseInsensitively(self):
        with self.assertRaises(DescriptorError):
            parse({"names": ("zone", "ZONE")})

    def testUnknownKeysRejected(self):
        with self.assertRaises(DescriptorError):
            parse({"names": ("zone",), "aliases": ("z",)})

    def testStaticAndFloatingDefaults(self):
        descriptor = parse({"names": ("create",), "static": ("target",), "floating": ("count=1", "label=")})
        target, = descriptor.static
        count, label = descriptor.floating
        self.assertIs(target.default, Unset)
        self.assertFalse(target.has_default)
        self.assertFalse(target.floating)
        self.assertEqual(count.default, "1")
        self.assertTrue(count.floating)
        # an empty default is still a default
        self.assertEqual(label.default, "")
        self.assertTrue(label.has_default)

    def testOnlyLastStaticParameterMayHaveDefault(self):
        with self.assertRaises(ParameterOrderError):
            parse({"names": ("create",), "static": ("target=alpha", "count")})
        descriptor = parse({"names": ("create",), "static": ("target", "count=1")})
        self.assertTrue(descriptor.static[-1].has_default)

    def testDuplicateParameterAcrossKinds(self):
        with self.assertRaises(DuplicateParameterError) as context:
            parse({"names": ("create",), "static": ("target",), "floating": ("Target=x",)})
        self.assertEqual(str(context.exception), "duplicate parameter 'Target=x' detected in command")

    def testDuplicateFlagAndParameter(self):
        with self.assertRaises(DuplicateParameterError):
            parse({"names": ("delete",), "floating": ("force=no",), "flags": ("force",)})

    def testFlagsCannotHaveDefaults(self):
        with self.assertRaises(DescriptorError):
            parse({"names": ("delete",), "flags": ("force=yes",)})

    def testFlagsKeepDeclarationIndex(self):
        descriptor = parse({"names": ("delete",), "flags": ("force", "quiet")})
        self.assertEqual([(flag.name, flag.index) for flag in descriptor.flags], [("force", 0), ("quiet", 1)])

    def testParameterNamesMustBeValid(self):
        with self.assertRaises(DescriptorError):
            parse({"names": ("create",), "static": ("1st",)})
        with self.assertRaises(DescriptorError):
            parse({"names": ("create",), "static": "target"})

    def testDescriptionsFromStringsAndMappings(self):
        listed = parse({"names": ("create",), "static": ("target",), "descriptions": ("Target = name of the zone",)})
        mapped = parse({"names": ("create",), "static": ("target",), "descriptions": {"target": "name of the zone"}})
        self.assertEqual(listed.description("TARGET"), "name of the zone")
        self.assertEqual(mapped.description("target"), "name of the zone")
        self.assertIsNone(listed.description("count"))

    def testMalformedDescriptionRejected(self):
        with self.assertRaises(DescriptorError):
            parse({"names": ("create",), "descriptions": ("target: name",)})

    def testLookupsAreCaseInsensitive(self):
        descriptor = parse({"names": ("create",), "static": ("Target",), "flags": ("Force",)})
        self.assertIs(descriptor.parameter("target"), descriptor.static[0])
        self.assertIs(descriptor.flag("FORCE"), descriptor.flags[0])
        self.assertIsNone(descriptor.parameter("force"))

    def testTextFieldsAreTrimmed(self):
        descriptor = parse({"names": ("zone",), "parent": "  ", "descr": " manage zones ", "usage": ""})
        self.assertIsNone(descriptor.parent)
        self.assertIsNone(descriptor.usage)
        self.assertEqual(descriptor.descr, "manage zones")
        self.assertEqual(descriptor.long_descr, "")

    def testHiddenAndPermission(self):
        descriptor = parse({"names": ("debug",), "hidden": True, "permission": "DENY"})
        self.assertFalse(descriptor.help_visible)
        self.assertIs(descriptor.permission, PermissionLevel.DENY)
        self.assertIs(parse({"names": ("zone",)}).permission, PermissionLevel.OP)

    def testUnknownPermissionLevelRejected(self):
        with self.assertRaises(DescriptorError):
            parse({"names": ("zone",), "permission": "sometimes"})

    def testDescriptorErrorsAreRegistrationErrors(self):
        with self.assertRaises(RegistrationError):
            parse({"names": ("zone",), "hidden": "yes"})
        with self.assertRaises(ValueError):
            parse({"names": ("zone",), "hidden": "yes"})

    def testDescriptorPassesThrough(self):
        descriptor = parse({"names": ("zone",)})
        self.assertIs(parse(descriptor), descriptor)


class TestDescribe(TestCase):
    """Behavioral tests for describe() and the @command decorator."""

    def testDescribeIsMemoized(self):
        @command("zone", descr="manage zones")
        class Zone(Command):
            pass

        self.assertIs(describe(Zone), describe(Zone))
        self.assertEqual(describe(Zone).descr, "manage zones")

    def testUndeclaredTypeRaises(self):
        class Bare(Command):
            pass

        with self.assertRaises(MissingDescriptorError):
            describe(Bare)

    def testDeclarationIsNotInherited(self):
        @command("zone")
        class Zone(Command):
            pass

        class Child(Zone):
            pass

        with self.assertRaises(MissingDescriptorError):
            describe(Child)

    def testDecoratorAcceptsDescriptor(self):
        descriptor = parse({"names": ("zone", "z")})

        @command(descriptor)
        class Zone(Command):
            pass

        self.assertIs(describe(Zone), descriptor)

    def testDecoratorRejectsNonCommands(self):
        with self.assertRaises(TypeError):
            command("zone")(object)

    def testMalformedDeclarationSurfacesOnDescribe(self):
        @command("create", static=("target=alpha", "count"))
        class Create(Command):
            pass

        with self.assertRaises(ParameterOrderError):
            describe(Create)


class TestLoads(TestCase):
    """Behavioral tests for TOML declarations."""

    def testTablesBecomeDescriptors(self):
        descriptors = loads(
            '[create]\n'
            'names = ["create", "new"]\n'
            'static = ["target"]\n'
            'floating = ["count=1"]\n'
            'descriptions = { target = "name of the zone" }\n'
            'permission = "allow"\n'
        )
        create = descriptors["create"]
        self.assertEqual(create.names, ("create", "new"))
        self.assertEqual(create.floating[0].default, "1")
        self.assertEqual(create.description("target"), "name of the zone")
        self.assertIs(create.permission, PermissionLevel.ALLOW)


if __name__ == "__main__":
    unittest.main()
