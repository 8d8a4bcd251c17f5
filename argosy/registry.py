"""
Argosy command registry: the collection of commands owned by a node or a dispatcher.

A CommandCollection maps every declared name of a command (lowercased) to the
command, and the command's type to the command. A command registered with
aliases ("create", "new") is reachable by each alias that was still free when it
was added; the first free alias is its primary alias in this collection.

Iteration yields commands sorted by primary name (case-sensitive), one entry per
command regardless of how many aliases it holds. The sorted listing is cached
and dropped on every membership change.
"""
from .utils import casefold


class CommandCollection:
    """
    Registry of commands keyed by alias and by type.

    Invariant: every command reachable by name is reachable by type and vice
    versa; add() and remove() restore it before returning.
    """

    def __init__(self):
        self._names = {}
        self._types = {}
        self._sorted = None

    def _invalidate(self):
        self._sorted = None

    def add(self, command, /):
        """
        Register `command` under every declared name that is still free.

        Returns the primary alias (the first free name), or None when every
        name is already taken or the command type is already present. In that
        case nothing is modified.
        """
        if type(command) in self._types:
            return None

        free = [name for name in command.descriptor.names if casefold(name) not in self._names]
        if not free:
            return None

        for name in free:
            self._names[casefold(name)] = command
        self._types[type(command)] = command
        self._invalidate()
        return free[0]

    def remove(self, name, /):
        """
        Remove a single alias. The command leaves the collection once its last
        alias is gone. Returns False when the alias was not registered.
        """
        try:
            command = self._names.pop(casefold(name))
        except KeyError:
            return False
        if command not in self._names.values():
            self._types.pop(type(command), None)
        self._invalidate()
        return True

    def remove_all(self, target, /):
        """
        Remove every alias of a command, given the command itself or its type.
        Returns False when nothing was registered for the target.
        """
        command = self._types.get(target) if isinstance(target, type) else target
        if command is None or self._types.get(type(command)) is not command:
            return False
        for name in [name for name, value in self._names.items() if value is command]:
            del self._names[name]
        del self._types[type(command)]
        self._invalidate()
        return True

    def get(self, name, default=None, /):
        """
        Look up a command by any of its aliases, case-insensitively.
        """
        if not isinstance(name, str):
            return default
        return self._names.get(casefold(name), default)

    def of(self, command_type, default=None, /):
        """
        Look up a command by its type.
        """
        return self._types.get(command_type, default)

    def sorted(self):
        """
        Commands ordered by primary name, cached until the next mutation.
        """
        if self._sorted is None:
            self._sorted = tuple(sorted(self._types.values(), key=lambda command: command.descriptor.name))
        return self._sorted

    @property
    def names(self):
        """
        Every registered alias, alphabetically.
        """
        return sorted(self._names)

    def aliases(self, command, /):
        """
        Aliases held by `command` in this collection, in insertion order.
        """
        return [name for name, value in self._names.items() if value is command]

    def __getitem__(self, name):
        if (command := self.get(name)) is None:
            raise KeyError(name)
        return command

    def __contains__(self, target):
        if isinstance(target, type):
            return target in self._types
        if isinstance(target, str):
            return casefold(target) in self._names
        return self._types.get(type(target)) is target

    def __iter__(self):
        return iter(self.sorted())

    def __len__(self):
        return len(self._types)

    def __bool__(self):
        return bool(self._types)

    def __repr__(self):
        return f"command-collection({", ".join(self.names)})"


__all__ = (
    "CommandCollection",
)
