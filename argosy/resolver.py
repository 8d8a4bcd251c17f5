"""
Argosy resolver: map a token stream onto the command tree.

Resolution walks down from a collection, consuming one token per level while
the token names a registered child, and stops at the first token that does not
(or when tokens run out). The deepest matched command and whatever was not
consumed are returned together with the number of levels walked.

    zone region start now   ->  (start, ["now"], 3)
    zone nope               ->  (zone, ["nope"], 1)
    nope                    ->  (fallback, ["nope"], 0)   non-strict only

The same walk drives tab completion; see CommandResolver.complete().
"""
from typing import NamedTuple


class ParsedCommand(NamedTuple):
    command: object
    arguments: tuple
    depth: int


class ParsedTabComplete(NamedTuple):
    command: object
    arguments: tuple
    matches: list


class CommandResolver:
    """
    Recursive-descent resolver bound to an optional fallback command.

    The fallback is what non-strict resolution lands on when the first token
    names nothing in the collection (for a dispatcher root, the root itself).
    """

    def __init__(self, fallback=None, /):
        self._fallback = fallback

    @property
    def fallback(self):
        return self._fallback

    def resolve(self, collection, tokens, /, *, strict=False):
        """
        Resolve `tokens` against `collection`.

        Returns
        - ParsedCommand(command, remaining tokens, depth) once the first token
          matched; depth counts matched levels starting at 1.
        - ParsedCommand(fallback, all tokens, 0) when nothing matched, unless
          strict is set or there is no fallback, in which case None.
        """
        tokens = tuple(tokens)
        if not tokens or not tokens[0] or (command := collection.get(tokens[0])) is None:
            if strict or self._fallback is None:
                return None
            return ParsedCommand(self._fallback, tokens, 0)

        depth = 1
        tokens = tokens[1:]
        while tokens and (child := command.children.get(tokens[0])) is not None:
            command, tokens, depth = child, tokens[1:], depth + 1
        return ParsedCommand(command, tokens, depth)

    def resolve_path(self, collection, path, /):
        """
        Strictly resolve a dotted path ("zone.region.start"); None unless every
        segment names a command.
        """
        parsed = self.resolve(collection, path.split("."), strict=True)
        if parsed is None or parsed.arguments:
            return None
        return parsed.command

    @staticmethod
    def _search(collection, actor, prefix):
        prefix = prefix.lower()
        return [
            name for name in collection.names
            if name.startswith(prefix) and collection[name].is_help_visible(actor)
        ]

    def complete(self, collection, actor, tokens, /):
        """
        Produce completion candidates for partially typed `tokens`.

        - one token, or the first token names nothing: names in `collection`
          starting with that token (every visible name when the token is empty
          and it is the only one; nothing when it is empty but more follow).
        - resolved with exactly one token left and the command has children:
          its children's names starting with that token.
        - resolved with nothing left and the command has a parent: the names of
          its siblings, so a fully typed leaf still shows its alternatives.
        - otherwise no candidates.

        Only names whose command is help-visible to `actor` are offered, and
        prefixes compare case-insensitively. `command` in the result is None in
        the first case.
        """
        tokens = tuple(tokens)
        if not tokens:
            return ParsedTabComplete(None, (), self._search(collection, actor, ""))

        parsed = self.resolve(collection, tokens, strict=True)
        if parsed is None or len(tokens) == 1:
            if tokens[0]:
                matches = self._search(collection, actor, tokens[0])
            else:
                matches = self._search(collection, actor, "") if len(tokens) == 1 else []
            return ParsedTabComplete(None, (), matches)

        command, arguments, _ = parsed
        if len(arguments) == 1 and command.children:
            matches = self._search(command.children, actor, arguments[0])
        elif not arguments and command.parent is not None:
            matches = self._search(command.parent.children, actor, "")
        else:
            matches = []
        return ParsedTabComplete(command, arguments, matches)


__all__ = (
    "ParsedCommand",
    "ParsedTabComplete",
    "CommandResolver",
)
