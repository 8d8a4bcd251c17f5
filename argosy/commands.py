"""
Argosy command layer: declare commands and assemble them into a tree.

What this module provides
- Command: one live, registered command. Subclass it, declare its metadata with
  @command(...), override execute() to make it runnable, and register children
  from __init__ (or later) with register_command().
- command(...): class decorator attaching a declaration (names, parameters,
  help text, permission level) to a Command subclass. The declaration is parsed
  into a CommandDescriptor the first time the type is registered.

Quick start
    from argosy import Command, Dispatcher, command

    @command("create", "new", static=("target",), floating=("count=1",),
             descriptions=("target=name of the zone",), descr="create a zone")
    class Create(Command):
        def execute(self, actor, arguments):
            actor.tell(f"created {arguments.get_string('target')}")

    @command("zone", descr="manage zones")
    class Zone(Command):
        def __init__(self):
            super().__init__()
            self.register_command(Create)

    dispatcher = Dispatcher()
    dispatcher.register_command(Zone)
    dispatcher.dispatch(actor, "/zone create alpha --count 3")

Lifecycle of a Command
- constructed: descriptor known, children registered from __init__ are queued.
- attached: the dispatcher back-reference is set (once; later attempts do
  nothing), queued children are constructed and linked, every child is
  attached in turn, and the permission is derived from the now complete
  ancestor chain and registered with the permission authority.
- removed: unregister_command() drops it from its parent's collection.

Registration never raises for recognized mistakes (missing or malformed
declaration, a command registered under itself, a parent constraint that does
not hold, every alias already taken): it logs the problem and returns False.
"""
import functools
import operator
import re
import weakref
from types import MappingProxyType

from .descriptors import CommandDescriptor, describe, parse
from .faults import *
from .logging_setup import get_logger
from .messaging import Messenger, Paginator
from .registry import CommandCollection
from .usage import FLOATING_PREFIX, FLAG_PREFIX, USAGE, UsageGenerator
from .utils import *

logger = get_logger("commands")

_generator = UsageGenerator()
_messenger = Messenger()


class CommandType(type):
    """
    Metaclass giving every Command class a readable identity.

    Responsibilities
    - __typename__ derived from the class name (camel-case split with hyphens),
      used to label declaration errors and logs ("zone-create ...").
    - Stable __repr__/__rich_repr__ built from __introspectable__.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Command(metaclass=CommandType):
    """
    A registered command: a node of the command tree.

    Responsibilities
    - Holds its immutable CommandDescriptor, a weak reference to its parent and
      the CommandCollection of its children.
    - Registers and unregisters sub-commands (same surface as the dispatcher).
    - Derives its permission lazily and answers help visibility for an actor.
    - Renders its help page and its detailed parameter help.

    Extension points
    - execute(actor, arguments): override to make the command runnable. A
      command that does not override it is a pure group ("incomplete" when
      invoked directly).
    - on_tab_complete(actor, arguments, completions): adjust completion
      candidates in place.

    Notes
    - Subclasses overriding __init__ must call super().__init__() before
      registering children.
    """
    __introspectable__ = (
        "name",
        "aliases",
        "parent",
        "children",
        "can_execute",
    )

    def __init__(self, descriptor=Unset, /):
        if descriptor is Unset:
            self._descriptor = describe(type(self))
        else:
            self._descriptor = parse(descriptor, typename=type(self).__typename__)
        self._parent = None
        self._children = CommandCollection()
        self._queue = []
        self._dispatcher = None
        self._permission = None
        self._alias = None
        self._can_execute = type(self).execute is not Command.execute

    # --- identity ---

    @property
    def descriptor(self):
        return self._descriptor

    @property
    def name(self):
        return self._descriptor.name

    @property
    def aliases(self):
        return self._descriptor.names

    @property
    def parent(self):
        return self._parent() if self._parent is not None else None

    @property
    def children(self):
        return self._children

    @property
    def dispatcher(self):
        return self._dispatcher

    @property
    def can_execute(self):
        return self._can_execute

    @property
    def root(self):
        """
        The topmost command above this one (itself when it has no parent).
        """
        child, parent = self, self.parent
        while parent is not None:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Commands from the root down to this one, inclusive.
        """
        path = [command := self]
        while (command := command.parent) is not None:
            path.append(command)
        return tuple(reversed(path))

    @property
    def alias(self):
        """
        Name this command was invoked with as a root during the current dispatch.
        """
        return self._alias

    @alias.setter
    def alias(self, value):
        self._alias = value

    @property
    def messenger(self):
        return self._dispatcher.messenger if self._dispatcher is not None else _messenger

    def usage(self, template=None, root_name=None):
        """
        Usage line of this command (see UsageGenerator.generate).
        """
        generator = self._dispatcher.usage_generator if self._dispatcher is not None else _generator
        return generator.generate(self, root_name, template)

    # --- registration ---

    def register_command(self, command_type, /):
        """
        Register `command_type` as a sub-command.

        Before this command is attached to a dispatcher the type is queued and
        constructed on attachment; afterwards it is constructed right away.

        Returns
        - True when registered (or queued), False when rejected (the reason is logged).

        Raises
        - TypeError: command_type is not a Command subclass.
        """
        if not isinstance(command_type, type) or not issubclass(command_type, Command):
            raise TypeError("register_command() argument must be a command type")
        try:
            self._register(command_type)
        except (MissingDescriptorError, DescriptorError, SelfRegistrationError) as error:
            logger.error("[%s] %s: cannot register %s: %s", error.code.normalize(), self.name, command_type.__name__, error)
            return False
        except RegistrationError as error:
            logger.debug("[%s] %s: cannot register %s: %s", error.code.normalize(), self.name, command_type.__name__, error)
            return False
        return True

    def _register(self, command_type):
        if command_type is type(self):
            raise SelfRegistrationError(f"{self.name!r} cannot be registered as its own sub-command")

        descriptor = describe(command_type)
        if descriptor.parent and casefold(descriptor.parent) not in map(casefold, self.aliases):
            raise ParentMismatchError(
                f"{descriptor.name!r} must be registered under {descriptor.parent!r}, not {self.name!r}"
            )

        if self._dispatcher is None:
            if command_type not in self._queue and command_type not in self._children:
                self._queue.append(command_type)
            return

        if command_type in self._children:
            raise AliasCollisionError(f"{descriptor.name!r} is already registered under {self.name!r}")

        child = command_type()
        if self._children.add(child) is None:
            raise AliasCollisionError(
                f"every name of {descriptor.name!r} ({", ".join(descriptor.names)}) is already in use under {self.name!r}"
            )
        child._parent = weakref.ref(self)
        child.attach(self._dispatcher)

    def unregister_command(self, command_type, /):
        """
        Remove a sub-command (registered or still queued). Returns False when absent.
        """
        if command_type in self._queue:
            self._queue.remove(command_type)
            return True
        child = self._children.of(command_type)
        if child is None or not self._children.remove_all(child):
            return False
        child._parent = None
        return True

    def get_command(self, name, /):
        """
        Sub-command registered under `name` (any alias, any case), or None.
        """
        return self._children.get(name)

    def attach(self, dispatcher, /):
        """
        Bind this command (and its subtree) to a dispatcher.

        Called by the registration surfaces once the command is linked to its
        parent. Only the first call has an effect.
        """
        if self._dispatcher is not None:
            return
        self._dispatcher = dispatcher

        queue, self._queue = self._queue, []
        for command_type in queue:
            self.register_command(command_type)
        for child in self._children:
            child.attach(dispatcher)

        logger.debug("attached %s as %s", self.name, self.permission.name)

    # --- permissions ---

    @property
    def permission(self):
        """
        Permission handle, derived and registered on first access.

        The name joins the primary names from the topmost registered command down
        to this one under `<application>.commands`; the dispatcher's fallback
        root contributes no segment.

        Raises
        - RuntimeError: the command is not attached to a dispatcher yet.
        """
        if self._permission is None:
            if (dispatcher := self._dispatcher) is None:
                raise RuntimeError(f"command {self.name!r} is not attached to a dispatcher")

            names = []
            command = self
            while command is not None and command is not dispatcher.fallback:
                names.append(command.name)
                command = command.parent

            name = ".".join([dispatcher.settings.application.lower(), "commands", *reversed(names)])
            self._permission = dispatcher.permissions.register(
                name, self._descriptor.permission, self._descriptor.descr
            )
        return self._permission

    def is_help_visible(self, actor, /):
        """
        Whether `actor` should see this command in help listings and completions.
        """
        if not self._descriptor.help_visible:
            return False
        if getattr(actor, "permissible", False) and self._dispatcher is not None:
            return self._dispatcher.permissions.has(actor, self.permission.name)
        return True

    def require(self, actor, kind, /):
        """
        Raise InvalidActorError unless `actor` is an instance of `kind`.
        """
        if not isinstance(actor, kind):
            raise InvalidActorError(self.messenger.get("invalid_actor", getattr(actor, "kind", type(actor).__name__)))

    # --- help ---

    def _paginator(self, title):
        page_size = self._dispatcher.settings.page_size if self._dispatcher is not None else 6
        return Paginator(self.messenger, title, page_size=page_size)

    def show_help(self, actor, page=1, /):
        """
        Tell `actor` one page of usage lines: this command (when runnable), then
        its children, groups last. Commands the actor cannot see are skipped.
        """
        messenger = self.messenger
        paginator = self._paginator(messenger.get("help_title"))

        def definition(command):
            return messenger.definition(command.usage().rstrip(), command.descriptor.descr)

        with self._dispatcher.permissions.batch():
            if self._can_execute and self.is_help_visible(actor):
                paginator.add(definition(self))
            children = self._children.sorted()
            for child in [child for child in children if not child.children] + [child for child in children if child.children]:
                if child.is_help_visible(actor):
                    paginator.add(definition(child))

        paginator.show(actor, page)

    def show_detailed_help(self, actor, page=1, /):
        """
        Tell `actor` the full usage line, the long description, and every
        described parameter grouped as static parameters, floating parameters
        and flags. Parameters without a description are left out (and logged).
        """
        messenger = self.messenger
        descriptor = self._descriptor
        paginator = self._paginator(messenger.get("detailed_help_title", self.name))

        paginator.add(messenger.text(self.usage(template=descriptor.usage or USAGE).rstrip(), "usage"))
        if description := descriptor.long_descr or descriptor.descr:
            paginator.add(messenger.text(description, "description"))

        for section, entries in (
                ("static_parameters", [(f"<{parameter.name}>", parameter.name) for parameter in descriptor.static]),
                ("floating_parameters", [
                    (f"{FLOATING_PREFIX}{parameter.name} <value>", parameter.name) for parameter in descriptor.floating
                ]),
                ("flags", [(f"{FLAG_PREFIX}{flag.name}", flag.name) for flag in descriptor.flags]),
        ):
            lines = []
            for label, name in entries:
                if (description := descriptor.description(name)) is None:
                    logger.debug("missing parameter description for %r in command %r", name, self.name)
                    continue
                lines.append(messenger.definition(label, description))
            if lines:
                paginator.add(messenger.text(messenger.get(section), "section"))
                paginator.extend(lines)

        paginator.show(actor, page)

    # --- behavior ---

    def execute(self, actor, arguments, /):
        """
        Run the command. Not overridden: the command only groups sub-commands.
        """

    def on_tab_complete(self, actor, arguments, completions, /):
        """
        Adjust `completions` (a list) in place; the default leaves it untouched.
        """


def command(*names, **metadata):
    """
    Declare the metadata of a Command subclass.

    Forms
    - @command("create", "new", static=("target",), descr="create a zone")
    - @command(descriptor): reuse a ready CommandDescriptor (e.g. from load()).

    Accepted metadata keys: parent, static, floating, flags, descriptions, usage,
    descr, long_descr, hidden, permission (see argosy.descriptors). Nothing is
    validated here; the declaration is parsed when the type is first registered.
    """
    if len(names) == 1 and isinstance(names[0], CommandDescriptor):
        if metadata:
            raise TypeError("command() takes no metadata together with a descriptor")
        declaration = names[0]
    else:
        declaration = MappingProxyType({"names": names} | metadata)

    @rename("command")
    def wrapper(source, /):
        if not isinstance(source, type) or not issubclass(source, Command):
            raise TypeError("@command() must be applied to a command type")
        source.__declaration__ = declaration
        return source

    return wrapper


__all__ = (
    "Command",
    "command",
)
