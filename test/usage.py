"""
Usage module tests (usage line generation).

Scope
- Validate the parameter rendering of required, defaulted and flag parameters.
- Validate root, ancestor and command name fields.
- Validate template selection (explicit, hardcoded, groups, leaves).

Conventions
- Test method names follow CamelCase per project convention.
- Lines are compared verbatim, trailing space included.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argosy import HELP, USAGE, Command, UsageGenerator, command, parse

from support import make_dispatcher


@command("info", usage="/{0}{2}[page]", descr="show zone info")
class ZoneInfo(Command):
    def execute(self, actor, arguments, /):
        pass


class TestUsageGenerator(TestCase):
    """Behavioral tests for UsageGenerator."""

    def setUp(self):
        self.dispatcher = make_dispatcher()
        self.zone = self.dispatcher.get_command("zone")

    def testParameterRendering(self):
        descriptor = parse({
            "names": ("create",),
            "static": ("target", "owner="),
            "floating": ("count", "label=x"),
            "flags": ("force",),
        })
        self.assertEqual(
            UsageGenerator.parameters(descriptor),
            "<target> [owner] <--count> [--label] [-force] ",
        )

    def testLeafUsage(self):
        create = self.zone.get_command("create")
        self.assertEqual(create.usage(), "/zone create <target> [--count] ")

    def testGroupUsesHelpForm(self):
        region = self.zone.get_command("region")
        self.assertEqual(region.usage(), "/zone region ?")
        self.assertEqual(self.zone.usage(), "/zone ?")

    def testAncestorsBetweenRootAndCommand(self):
        start = self.zone.get_command("region").get_command("start")
        self.assertEqual(start.usage(), "/zone region start ")
        self.assertEqual(start.usage(template=HELP), "/zone region start ?")

    def testRootAliasOverridesPrimaryName(self):
        create = self.zone.get_command("new")
        self.assertEqual(create.usage(root_name="z"), "/z create <target> [--count] ")
        self.zone.alias = "z"
        self.assertEqual(create.usage(), "/z create <target> [--count] ")

    def testExplicitTemplateWins(self):
        region = self.zone.get_command("region")
        self.assertEqual(region.usage(template=USAGE), "/zone region ")

    def testHardcodedUsage(self):
        self.assertTrue(self.zone.register_command(ZoneInfo))
        info = self.zone.get_command("info")
        self.assertEqual(info.usage(), "/zone info [page]")

    def testFallbackRootUsage(self):
        self.assertEqual(self.dispatcher.fallback.usage(template=HELP), "/app ?")


if __name__ == "__main__":
    unittest.main()
