"""
Argosy messaging: message templates, styling and pagination.

Every user-facing sentence the engine produces lives in MESSAGES and is looked
up through a Messenger, so a host can replace any of them via
`Settings.messages` without touching the engine. Templates use positional
str.format fields.

The Paginator splits long listings (help pages) into numbered pages of
`Settings.page_size` lines each.
"""
import math
from collections import defaultdict
from types import MappingProxyType

from rich.text import Text

MESSAGES = MappingProxyType({
    # --- routing ---
    "command_not_found": "command not found, type '{0}' for help",
    "access_denied": "access denied",
    "command_incomplete": "command incomplete, type '{0}' for help",

    # --- binding ---
    "too_many_arguments": "too many arguments, type '{0}' for help",
    "missing_argument": "parameter '{0}' is required, type '{1}' for help",
    "invalid_argument": "invalid argument for parameter '{0}', type '{1}' for help",
    "parameter_description": "parameter description: {0}",
    "duplicate_argument": "duplicate argument detected for parameter named '{0}'",
    "invalid_parameter": "'{0}' is not a valid parameter, type '{1}' for help",
    "invalid_flag": "'{0}' is not a valid flag, type '{1}' for help",
    "invalid_actor": "cannot execute command as {0}",

    # --- help ---
    "help_title": "commands",
    "detailed_help_title": "{0} help",
    "definition": "{0} - {1}",
    "static_parameters": "static parameters",
    "floating_parameters": "floating parameters",
    "flags": "flags",

    # --- pagination ---
    "page_header": "{0} (page {1} of {2})",
    "page_not_found": "page {0} was not found",
    "no_items": "no items to display",

    # --- about ---
    "about_header": "{0} {1}",
    "about_hint": "type '{0}' for a list of commands",
})


class Messenger:
    """
    Template lookup plus styling for one dispatcher.

    Parameters
    - messages: overrides for MESSAGES (unknown keys are kept and can be used
      by command implementations).
    - colorful: when False every style is dropped.
    """

    def __init__(self, messages=MappingProxyType({}), /, *, colorful=True):
        self._messages = MESSAGES | dict(messages)
        self.colorful = colorful

    def get(self, key, /, *args):
        return self._messages[key].format(*args)

    def style(self, key, /):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "header": "bold #FF4D94",  # magenta-pink page title
            "section": "bold #FFFFFF",  # white sub headers
            "usage": "bold #36C5F0",  # sky-blue usage lines
            "description": "#9CA3AF",  # muted gray descriptions
            "notice": "italic #FFD600",  # amber one-off notices
        } | getattr(main, "__styles__", {}))

        return styles[key] if self.colorful else ""

    def text(self, fragment, style="", /):
        """
        Build a Text styled with a palette key (unstyled when not colorful).
        """
        return Text(str(fragment), self.style(style) if style else "")

    def definition(self, usage, description, /):
        """
        A "<usage> - <description>" help line; just the usage when there is no description.
        """
        if not description:
            return self.text(usage, "usage")
        line = self.text(self.get("definition", usage, description), "description")
        if self.colorful and (index := line.plain.find(usage)) >= 0:
            line.stylize(self.style("usage"), index, index + len(usage))
        return line

    def __repr__(self):
        return f"messenger(colorful={self.colorful!r})"


class Paginator:
    """
    Collect lines, then send one page of them to an actor.
    """

    def __init__(self, messenger, title, /, *, page_size=6):
        self._messenger = messenger
        self._title = title
        self._page_size = page_size
        self._lines = []

    def add(self, line, /):
        self._lines.append(line if isinstance(line, Text) else Text(str(line)))
        return self

    def extend(self, lines, /):
        for line in lines:
            self.add(line)
        return self

    def __len__(self):
        return len(self._lines)

    @property
    def pages(self):
        return math.ceil(len(self._lines) / self._page_size)

    def show(self, actor, page=1, /):
        """
        Tell `actor` page number `page` (1-based).
        """
        messenger = self._messenger
        if not self._lines:
            actor.tell(messenger.text(messenger.get("no_items"), "notice"))
            return
        if not 1 <= page <= self.pages:
            actor.tell(messenger.text(messenger.get("page_not_found", page), "notice"))
            return

        actor.tell(messenger.text(messenger.get("page_header", self._title, page, self.pages), "header"))
        start = (page - 1) * self._page_size
        for line in self._lines[start:start + self._page_size]:
            actor.tell(line)


__all__ = (
    "MESSAGES",
    "Messenger",
    "Paginator",
)
