"""
Argosy usage lines.

Templates use four positional fields:
- {0} session root name followed by a space ("zone ")
- {1} names of the ancestors between the root and the command, each followed
      by a space ("region ")
- {2} the command's own primary name followed by a space, empty for a root
- {3} the parameters, each followed by a space: `<name>` when required,
      `[name]` when defaulted, `--` before floating names, `-` before flags

A descriptor's hardcoded `usage` may use the same fields.
"""

FLOATING_PREFIX = "--"
FLAG_PREFIX = "-"

HELP_MARKERS = frozenset({"?", "help"})
DETAILED_HELP_MARKER = "??"

USAGE = "/{0}{1}{2}{3}"
"""Full usage: every parameter spelled out."""

HELP = "/{0}{1}{2}?"
"""Short form ending in the help marker; used for groups and in 'type ... for help' hints."""


class UsageGenerator:
    """
    Stateless formatter producing the usage line of a command.
    """

    @staticmethod
    def parameters(descriptor, /):
        """
        Render the {3} field for a descriptor.
        """
        fragments = []
        for parameter in descriptor.static:
            if parameter.has_default:
                fragments.append(f"[{parameter.name}] ")
            else:
                fragments.append(f"<{parameter.name}> ")
        for parameter in descriptor.floating:
            if parameter.has_default:
                fragments.append(f"[{FLOATING_PREFIX}{parameter.name}] ")
            else:
                fragments.append(f"<{FLOATING_PREFIX}{parameter.name}> ")
        for flag in descriptor.flags:
            fragments.append(f"[{FLAG_PREFIX}{flag.name}] ")
        return "".join(fragments)

    def generate(self, command, /, root_name=None, template=None):
        """
        Build the usage line of `command`.

        Parameters
        - root_name: name the root was invoked with; defaults to the root's current
          alias, then to its primary name.
        - template: explicit template; when omitted the descriptor's hardcoded usage
          wins, then HELP for commands with children, then USAGE.
        """
        root = command.root
        root_name = root_name or root.alias or root.descriptor.name

        ancestors = []
        parent = command.parent
        while parent is not None and parent.parent is not None:
            ancestors.append(parent.descriptor.name)
            parent = parent.parent

        if template is None:
            template = command.descriptor.usage or (HELP if command.children else USAGE)

        return template.format(
            root_name + " ",
            "".join(name + " " for name in reversed(ancestors)),
            command.descriptor.name + " " if command.parent is not None else "",
            self.parameters(command.descriptor),
        )


__all__ = (
    "FLOATING_PREFIX",
    "FLAG_PREFIX",
    "HELP_MARKERS",
    "DETAILED_HELP_MARKER",
    "USAGE",
    "HELP",
    "UsageGenerator",
)
