"""
Argosy permission authority (in-memory reference implementation).

Command permissions are registered as the tree is built, e.g.
`app.commands.zone.create`, each with a default level deciding who holds it
when nobody was granted it explicitly:

- allow: everybody
- deny: nobody
- op: operators only (also the level of names that were never registered)

Actors may carry explicit grants, including wildcards over a registered subtree
(`app.commands.zone.*`). Explicit grants win over wildcards, and the most
specific wildcard wins over broader ones.

Registering many permissions at once should happen inside `batch()`: the
wildcard index is rebuilt once when the outermost batch closes instead of after
each registration.
"""
import contextlib
from collections import defaultdict

from .descriptors import PermissionLevel
from .utils import casefold


class Permission:
    """
    Handle returned by Permissions.register(); the description may be updated later.
    """

    def __init__(self, name, level, description="", /):
        self.name = name
        self.level = PermissionLevel(level)
        self.description = description

    def __repr__(self):
        return f"permission({self.name!r}, level={str(self.level)!r})"


class Permissions:
    """
    Registry of permission names plus the lookup answering "does actor X hold P".
    """

    def __init__(self):
        self._registry = {}
        self._wildcards = {}
        self._depth = 0
        self._stale = False

    def register(self, name, level=PermissionLevel.OP, description="", /):
        """
        Register `name` at `level`; registering an existing name returns its handle
        (refreshing the description when one is given).
        """
        key = casefold(name)
        if (permission := self._registry.get(key)) is not None:
            if description:
                permission.description = description
            return permission

        permission = self._registry[key] = Permission(key, level, description)
        self._stale = True
        if not self._depth:
            self._reindex()
        return permission

    def get(self, name, /):
        return self._registry.get(casefold(name))

    def __contains__(self, name):
        return isinstance(name, str) and casefold(name) in self._registry

    def has(self, actor, name, /):
        """
        Whether `actor` holds permission `name`.
        """
        key = casefold(name)
        grants = getattr(actor, "grants", {})
        if key in grants:
            return grants[key]

        parts = key.split(".")
        for index in range(len(parts) - 1, 0, -1):
            wildcard = ".".join(parts[:index]) + ".*"
            if wildcard in grants and key in self._wildcards.get(wildcard, ()):
                return grants[wildcard]

        permission = self._registry.get(key)
        match permission.level if permission is not None else PermissionLevel.OP:
            case PermissionLevel.ALLOW:
                return True
            case PermissionLevel.DENY:
                return False
            case _:
                return bool(getattr(actor, "is_op", False))

    def begin_batch(self):
        self._depth += 1

    def end_batch(self):
        if not self._depth:
            raise RuntimeError("end_batch() called without a matching begin_batch()")
        self._depth -= 1
        if not self._depth and self._stale:
            self._reindex()

    @contextlib.contextmanager
    def batch(self):
        """
        Scope bulk registrations; re-entrant.
        """
        self.begin_batch()
        try:
            yield self
        finally:
            self.end_batch()

    @property
    def batching(self):
        return self._depth > 0

    def _reindex(self):
        wildcards = defaultdict(set)
        for key in self._registry:
            parts = key.split(".")
            for index in range(1, len(parts)):
                wildcards[".".join(parts[:index]) + ".*"].add(key)
        self._wildcards = dict(wildcards)
        self._stale = False


__all__ = (
    "Permission",
    "Permissions",
)
