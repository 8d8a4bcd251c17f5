"""
Argosy actors: whoever types a command.

- Player: an interactive user; subject to permission checks and help filtering.
- ServerConsole: the host's own console; never subject to permission checks.

Every actor keeps a plain-text transcript of what it was told, which is what
hosts without a terminal (and tests) read back.
"""
from rich.console import Console
from rich.text import Text

from .utils import casefold


class Actor:
    """
    Base actor. `tell()` accepts anything rich can print; strings are shown
    verbatim (no markup), since usage lines are full of square brackets.
    """
    permissible = False
    kind = "actor"
    is_op = False

    def __init__(self, name, /, *, console=None):
        self.name = name
        self.grants = {}
        self._console = console
        self._recorder = Console(width=240, color_system=None, markup=False, highlight=False, emoji=False)
        self._transcript = []

    def tell(self, renderable, /):
        if isinstance(renderable, str):
            renderable = Text(renderable)
        with self._recorder.capture() as capture:
            self._recorder.print(renderable, soft_wrap=True)
        self._transcript.extend(line.rstrip() for line in capture.get().splitlines())
        if self._console is not None:
            self._console.print(renderable)

    @property
    def transcript(self):
        return list(self._transcript)

    def forget(self):
        self._transcript.clear()

    def __repr__(self):
        return f"{self.kind}({self.name!r})"


class Player(Actor):
    """
    An interactive actor holding explicit grants (`grant`/`revoke`).
    """
    permissible = True
    kind = "player"

    def __init__(self, name, /, *, op=False, console=None):
        super().__init__(name, console=console)
        self.is_op = op

    def grant(self, permission, value=True, /):
        self.grants[casefold(permission)] = value

    def revoke(self, permission, /):
        self.grants.pop(casefold(permission), None)


class ServerConsole(Actor):
    kind = "console"
    is_op = True

    def __init__(self, name="console", /, *, console=None):
        super().__init__(name, console=console)


__all__ = (
    "Actor",
    "Player",
    "ServerConsole",
)
