"""
Argosy dispatcher: the entry point a host wires its command events to.

A Dispatcher owns
- the root commands registered by the host (`/zone`, `/warp`, ...),
- a fallback root, the AboutCommand named after the application (`/app`), which
  answers unknown labels and adopts the roots the settings do not list,
- the Messenger, UsageGenerator and permission authority shared by every
  command it holds.

Command handling (on_command) is a straight sequence of states:

    resolve -> permission check -> help / detailed help -> found check
            -> executable check -> bind arguments -> execute

A prompt whose first token names nothing lands on the fallback root with that
token left over, and is reported as "command not found".

Any CommandException raised on the way (routing faults, binding faults, or one
raised by the command itself) ends the sequence and is told to the actor. Other
exceptions propagate to the host.
"""
import copy
import shlex
from collections.abc import Iterable

from .arguments import Arguments
from .commands import Command
from .config import Settings
from .descriptors import PermissionLevel, describe
from .faults import *
from .logging_setup import get_logger
from .messaging import Messenger
from .permissions import Permissions
from .registry import CommandCollection
from .resolver import CommandResolver
from .usage import DETAILED_HELP_MARKER, HELP, HELP_MARKERS, UsageGenerator
from .utils import *

logger = get_logger("dispatcher")


class AboutCommand(Command):
    """
    Fallback root: prints the application name, version and description.
    """

    def __init__(self, settings, /):
        super().__init__({
            "names": (settings.application,),
            "descr": settings.description or f"about {settings.application}",
            "permission": PermissionLevel.ALLOW,
        })
        self._settings = settings

    def execute(self, actor, arguments, /):
        messenger = self.messenger
        settings = self._settings

        actor.tell(messenger.text(messenger.get("about_header", settings.application, settings.version), "header"))
        if settings.description:
            actor.tell(messenger.text(settings.description, "description"))
        actor.tell(messenger.text(messenger.get("about_hint", self.usage(template=HELP).rstrip()), "notice"))


class Dispatcher:
    """
    Routes command invocations to the command tree.

    Parameters
    - settings: Settings (defaults to Settings()).
    - permissions: permission authority (defaults to a fresh Permissions()).

    Subclasses may override register_commands() to register their roots; it is
    called once at the end of construction.
    """

    def __init__(self, settings=Unset, /, *, permissions=Unset):
        self._settings = coalesce(settings, Settings())
        self._permissions = coalesce(permissions, Permissions())
        self._messenger = Messenger(self._settings.messages, colorful=self._settings.colorful)
        self._usage_generator = UsageGenerator()
        self._roots = CommandCollection()
        self._fallback = AboutCommand(self._settings)
        with self._permissions.batch():
            self._fallback.attach(self)
        self.register_commands()

    # --- shared state ---

    @property
    def settings(self):
        return self._settings

    @property
    def permissions(self):
        return self._permissions

    @property
    def messenger(self):
        return self._messenger

    @property
    def usage_generator(self):
        return self._usage_generator

    @property
    def fallback(self):
        return self._fallback

    @property
    def roots(self):
        return self._roots

    @property
    def commands(self):
        """
        Registered roots sorted by name, followed by the fallback root.
        """
        return (*self._roots.sorted(), self._fallback)

    # --- registration ---

    def register_commands(self):
        """
        Hook: register the host's root commands. Does nothing by default.
        """

    def register_command(self, command_type, /):
        """
        Register `command_type` as a root command.

        A root whose primary name is missing from `settings.roots` (when that
        list is set) is registered under the fallback root instead.

        Returns
        - True when registered, False when rejected (the reason is logged).

        Raises
        - TypeError: command_type is not a Command subclass.
        """
        if not isinstance(command_type, type) or not issubclass(command_type, Command):
            raise TypeError("register_command() argument must be a command type")
        with self._permissions.batch():
            try:
                return self._register(command_type)
            except (MissingDescriptorError, DescriptorError) as error:
                logger.error("[%s] cannot register %s: %s", error.code.normalize(), command_type.__name__, error)
            except RegistrationError as error:
                logger.debug("[%s] cannot register %s: %s", error.code.normalize(), command_type.__name__, error)
        return False

    def _register(self, command_type):
        descriptor = describe(command_type)
        if self._settings.roots is not None and casefold(descriptor.name) not in self._settings.roots:
            logger.debug("mounting %s under %s", descriptor.name, self._fallback.name)
            return self._fallback.register_command(command_type)

        if descriptor.parent:
            raise ParentMismatchError(f"{descriptor.name!r} must be registered under {descriptor.parent!r}")
        if command_type in self._roots:
            raise AliasCollisionError(f"{descriptor.name!r} is already registered")

        command = command_type()
        if self._roots.add(command) is None:
            raise AliasCollisionError(
                f"every name of {descriptor.name!r} ({", ".join(descriptor.names)}) is already in use"
            )
        command.attach(self)
        logger.debug("registered root %s", descriptor.name)
        return True

    def unregister_command(self, command_type, /):
        """
        Remove a root command, or a command mounted under the fallback root.
        """
        return self._roots.remove_all(command_type) or self._fallback.unregister_command(command_type)

    def get_command(self, name, /):
        """
        Root command registered under `name`, then a command mounted under the
        fallback root; None when neither exists.
        """
        return self._roots.get(name) or self._fallback.get_command(name)

    def get_command_path(self, path, /):
        """
        Command at a dotted path such as "zone.region.start", or None.
        """
        resolver = CommandResolver()
        return resolver.resolve_path(self._roots, path) or resolver.resolve_path(self._fallback.children, path)

    # --- invocation ---

    def on_command(self, actor, label, tokens=(), /):
        """
        Handle `/label tokens...` for `actor`; the label selects the root and an
        unknown label selects the fallback root. Always returns True (the
        command was handled, even when the outcome is an error message).
        """
        tokens = tuple(tokens)
        if (root := self._roots.get(label)) is not None:
            root.alias = label
        else:
            root = self._fallback
            root.alias = root.name

        parsed = CommandResolver(root).resolve(root.children, tokens)
        try:
            self._handle(actor, root, parsed)
        except CommandException as fault:
            logger.debug("[%s] %s: %s", fault.code.normalize(), actor, fault)
            actor.tell(copy.replace(fault, colorful=self._messenger.colorful))
        return True

    def _handle(self, actor, root, parsed):
        messenger = self._messenger

        if parsed is None:
            raise CommandNotFoundError(messenger.get("command_not_found", root.usage(template=HELP).rstrip()))
        command, arguments, depth = parsed
        logger.debug("resolved %s to %s at depth %d", root.alias, command.name, depth)

        if getattr(actor, "permissible", False) and not self._permissions.has(actor, command.permission.name):
            raise AccessDeniedError(messenger.get("access_denied"), permission=command.permission.name)

        if arguments and arguments[0].lower() in HELP_MARKERS:
            command.show_help(actor, self._page(arguments))
            return
        if arguments and arguments[0] == DETAILED_HELP_MARKER:
            command.show_detailed_help(actor, self._page(arguments))
            return

        # nothing matched below the fallback root: the first token names no command
        if command is self._fallback and depth == 0 and arguments:
            raise CommandNotFoundError(messenger.get("command_not_found", root.usage(template=HELP).rstrip()))

        if not command.can_execute:
            raise IncompleteCommandError(messenger.get("command_incomplete", command.usage(template=HELP).rstrip()))

        command.execute(actor, Arguments(command, arguments))

    @staticmethod
    def _page(arguments):
        try:
            return int(arguments[1]) if len(arguments) > 1 else 1
        except ValueError:
            return 1

    def dispatch(self, actor, prompt, /):
        """
        Handle a full prompt ("/zone create alpha" or its tokens). The first
        token picks the root when one is registered under it; otherwise the
        whole prompt goes to the fallback root.
        """
        match prompt:
            case str():
                # quotes join words, backslashes are kept as typed
                lexer = shlex.shlex(prompt, posix=True)
                lexer.whitespace_split = True
                lexer.escape = ""
                lexer.commenters = ""
                try:
                    tokens = list(lexer)
                except ValueError:
                    tokens = prompt.split()
            case Iterable():
                tokens = [token.strip() for token in prompt if token.strip()]
            case _:
                raise TypeError(f"dispatch() prompt must be a string or an iterable, not {type(prompt).__name__}")

        if tokens and tokens[0].startswith("/"):
            tokens[0] = tokens[0][1:]
            if not tokens[0]:
                tokens.pop(0)

        if not tokens:
            return self.on_command(actor, self._fallback.name)
        if tokens[0] in self._roots or casefold(tokens[0]) == casefold(self._fallback.name):
            return self.on_command(actor, tokens[0], tokens[1:])
        return self.on_command(actor, self._fallback.name, tokens)

    def on_tab_complete(self, actor, tokens, /):
        """
        Completion candidates for a partially typed prompt (label first).
        """
        tokens = tuple(tokens)
        if not tokens:
            return []
        if len(tokens) == 1:
            # roots, commands mounted under the fallback root, and the fallback itself
            resolver, fallback = CommandResolver(), self._fallback
            matches = {
                *resolver.complete(self._roots, actor, tokens).matches,
                *resolver.complete(fallback.children, actor, tokens).matches,
            }
            if casefold(fallback.name).startswith(casefold(tokens[0])) and fallback.is_help_visible(actor):
                matches.add(fallback.name)
            return sorted(matches)

        if (root := self._roots.get(tokens[0])) is not None:
            remaining = tokens[1:]
        elif casefold(tokens[0]) == casefold(self._fallback.name):
            root, remaining = self._fallback, tokens[1:]
        else:
            root, remaining = self._fallback, tokens

        parsed = CommandResolver(root).complete(root.children, actor, remaining)
        matches = list(parsed.matches)
        if parsed.command is not None:
            parsed.command.on_tab_complete(actor, parsed.arguments, matches)
            if len(matches) > 1 and parsed.arguments in ((), ("",)):
                matches.append("?")
        return matches

    def __repr__(self):
        return f"dispatcher({self._settings.application!r}, roots={self._roots!r})"


__all__ = (
    "AboutCommand",
    "Dispatcher",
)
