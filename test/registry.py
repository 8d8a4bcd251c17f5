"""
Registry module tests (CommandCollection).

Scope
- Validate alias registration, partial and total collisions.
- Validate lookup by name (case-insensitive) and by type.
- Validate removal of single aliases and of whole commands.
- Validate sorted iteration and cache invalidation.

Conventions
- Test method names follow CamelCase per project convention.
- Commands are constructed standalone (never attached to a dispatcher).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argosy import Command, CommandCollection, command


@command("create", "new")
class Create(Command):
    pass


@command("delete", "remove")
class Delete(Command):
    pass


@command("renew", "new")
class Renew(Command):
    pass


@command("new", "create")
class Shadow(Command):
    pass


class TestCommandCollection(TestCase):
    """Behavioral tests for CommandCollection."""

    def setUp(self):
        self.collection = CommandCollection()

    def testAddReturnsPrimaryAlias(self):
        create = Create()
        self.assertEqual(self.collection.add(create), "create")
        self.assertIs(self.collection.get("create"), create)
        self.assertIs(self.collection.get("NEW"), create)
        self.assertIs(self.collection.of(Create), create)

    def testPartialCollisionKeepsFreeNames(self):
        create = Create()
        renew = Renew()
        self.collection.add(create)
        self.assertEqual(self.collection.add(renew), "renew")
        self.assertIs(self.collection.get("new"), create)
        self.assertEqual(self.collection.aliases(renew), ["renew"])

    def testTotalCollisionLeavesCollectionUntouched(self):
        self.collection.add(Create())
        self.assertIsNone(self.collection.add(Shadow()))
        self.assertNotIn(Shadow, self.collection)
        self.assertEqual(len(self.collection), 1)

    def testSameTypeCannotBeAddedTwice(self):
        self.collection.add(Create())
        self.assertIsNone(self.collection.add(Create()))

    def testRemoveSingleAlias(self):
        create = Create()
        self.collection.add(create)
        self.assertTrue(self.collection.remove("new"))
        self.assertNotIn("new", self.collection)
        self.assertIn(create, self.collection)
        self.assertTrue(self.collection.remove("create"))
        self.assertNotIn(Create, self.collection)
        self.assertFalse(self.collection.remove("create"))

    def testRemoveAllByTypeOrInstance(self):
        create, delete = Create(), Delete()
        self.collection.add(create)
        self.collection.add(delete)
        self.assertTrue(self.collection.remove_all(Create))
        self.assertTrue(self.collection.remove_all(delete))
        self.assertFalse(self.collection)
        self.assertEqual(self.collection.names, [])
        self.assertFalse(self.collection.remove_all(Create))

    def testSortedIterationOnePerCommand(self):
        delete, create = Delete(), Create()
        self.collection.add(delete)
        self.collection.add(create)
        self.assertEqual(list(self.collection), [create, delete])
        self.assertEqual(self.collection.names, ["create", "delete", "new", "remove"])

    def testSortedCacheDroppedOnMutation(self):
        create = Create()
        self.collection.add(create)
        self.assertEqual(self.collection.sorted(), (create,))
        delete = Delete()
        self.collection.add(delete)
        self.assertEqual(self.collection.sorted(), (create, delete))
        self.collection.remove_all(create)
        self.assertEqual(self.collection.sorted(), (delete,))

    def testGetItemAndMissingNames(self):
        create = Create()
        self.collection.add(create)
        self.assertIs(self.collection["Create"], create)
        self.assertIsNone(self.collection.get("missing"))
        self.assertIsNone(self.collection.get(None))
        with self.assertRaises(KeyError):
            self.collection["missing"]


if __name__ == "__main__":
    unittest.main()
