r"""
Argosy command descriptors: immutable metadata for one command type.

Overview
- PermissionLevel: default grant of a derived command permission (allow/deny/op).
- Parameter: a static (positional) or floating (`--name value`) parameter,
  with an optional default.
- Flag: a presence-only switch (`-name`).
- CommandDescriptor: names, parent constraint, parameters, descriptions, usage,
  help text, visibility and permission level of one command type.

Declaration contract (what a declaration mapping may carry)
- names: Iterable[str], non-empty; names[0] is the primary name.
- parent: str, optional; the primary name the command must be registered under.
- static / floating: Iterable[str] of "name" or "name=default"; only the final
  static parameter may carry a default.
- flags: Iterable[str] of bare names.
- descriptions: Iterable[str] of "name=text", or a mapping name -> text.
- usage: str, optional hardcoded usage template ({0}..{3} placeholders).
- descr / long_descr: str, short and long help text.
- hidden: bool, hide from help listings.
- permission: "allow" | "deny" | "op" (default "op").

Names never collide across static, floating and flags (case-insensitively).

Entry points
- parse(mapping): sanitize a declaration into a CommandDescriptor.
- describe(command_type): the descriptor attached to a command type by
  @command(...), parsed once and memoized.
- load(path) / loads(text): read declarations from a TOML document.
"""
import functools
import re
import tomllib
from collections.abc import Iterable, Mapping
from enum import StrEnum
from types import MappingProxyType

from .faults import *
from .utils import *


class PermissionLevel(StrEnum):
    """
    Who holds a freshly registered permission when nobody was granted it explicitly.
    """
    ALLOW = "allow"
    DENY = "deny"
    OP = "op"


class Parameter:
    """
    A value-bearing parameter.

    - name: declared name (case preserved for display, compared case-insensitively).
    - default: Unset when the parameter is required; any string (even "") otherwise.
    - floating: False for static (positional) parameters, True for `--name value` ones.
    """
    name = mirror("name")
    default = mirror("default")
    floating = mirror("floating")

    def __init__(self, name, default=Unset, /, *, floating=False):
        self._name = name
        self._default = default
        self._floating = floating

    @property
    def has_default(self):
        return self._default is not Unset

    def __repr__(self):
        kind = "floating" if self._floating else "static"
        if self.has_default:
            return f"{kind}({self._name!r}, default={self._default!r})"
        return f"{kind}({self._name!r})"

    def __rich_repr__(self):
        yield "name", self._name
        yield "default", self._default
        yield "floating", self._floating


class Flag:
    """
    A presence-only switch; `index` is its declaration position.
    """
    name = mirror("name")
    index = mirror("index")

    def __init__(self, name, index, /):
        self._name = name
        self._index = index

    def __repr__(self):
        return f"flag({self._name!r})"

    def __rich_repr__(self):
        yield "name", self._name
        yield "index", self._index


class CommandDescriptor:
    """
    Immutable metadata describing a command type.

    Instances are produced by parse() and are never mutated afterwards; every
    field is exposed read-only. Lookups by parameter name are case-insensitive.
    """
    __introspectable__ = (
        "names",
        "parent",
        "static",
        "floating",
        "flags",
        "descriptions",
        "usage",
        "descr",
        "long_descr",
        "help_visible",
        "permission",
    )

    names = mirror("names")
    parent = mirror("parent")
    static = mirror("static")
    floating = mirror("floating")
    flags = mirror("flags")
    usage = mirror("usage")
    descr = mirror("descr")
    long_descr = mirror("long_descr")
    help_visible = mirror("help_visible")
    permission = mirror("permission")

    def __init__(
            self,
            names,
            /,
            parent=None,
            static=(),
            floating=(),
            flags=(),
            descriptions=MappingProxyType({}),
            usage=None,
            descr="",
            long_descr="",
            help_visible=True,
            permission=PermissionLevel.OP,
    ):
        self._names = tuple(names)
        self._parent = parent
        self._static = tuple(static)
        self._floating = tuple(floating)
        self._flags = tuple(flags)
        self._descriptions = MappingProxyType(dict(descriptions))
        self._usage = usage
        self._descr = descr
        self._long_descr = long_descr
        self._help_visible = help_visible
        self._permission = PermissionLevel(permission)

        self._lookup = {casefold(parameter.name): parameter for parameter in self._static + self._floating}
        self._flagmap = {casefold(flag.name): flag for flag in self._flags}

    @property
    def name(self):
        """
        Primary name (first declared name).
        """
        return self._names[0]

    @property
    def descriptions(self):
        return self._descriptions

    def parameter(self, name, /):
        """
        Return the static or floating Parameter called `name`, or None.
        """
        return self._lookup.get(casefold(name))

    def flag(self, name, /):
        """
        Return the Flag called `name`, or None.
        """
        return self._flagmap.get(casefold(name))

    def description(self, name, /):
        """
        Return the description declared for parameter or flag `name`, or None.
        """
        return self._descriptions.get(casefold(name))

    def __repr__(self):
        return f"descriptor({", ".join("%s=%r" % pair for pair in self.__rich_repr__())})"

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)


_DECLARATION = MappingProxyType({
    "names": (),
    "parent": Unset,
    "static": (),
    "floating": (),
    "flags": (),
    "descriptions": (),
    "usage": Unset,
    "descr": Unset,
    "long_descr": Unset,
    "hidden": False,
    "permission": PermissionLevel.OP,
})

_NAME = re.compile(r"[^\W\d_][\w-]*")


def _process_names(typename, metadata):
    """
    Validate and normalize `names`: a non-empty iterable of unique, non-empty strings.

    Errors
    - DescriptorError: not an iterable of strings, empty, blank items, duplicates.
    """
    names = metadata["names"]
    if isinstance(names, str) or not isinstance(names, Iterable):
        raise DescriptorError(f"{typename} 'names' must be an iterable of strings")
    seen = set()
    result = []
    for name in names:
        if not isinstance(name, str):
            raise DescriptorError(f"{typename} 'names' must be an iterable of strings")
        elif not (name := name.strip()) or any(character.isspace() for character in name):
            raise DescriptorError(f"{typename} 'names' must contain non-empty single words")
        elif casefold(name) in seen:
            raise DescriptorError(f"{typename} 'names' cannot contain duplicates")
        seen.add(casefold(name))
        result.append(name)
    if not result:
        raise DescriptorError(f"{typename} 'names' cannot be empty")
    metadata["names"] = tuple(result)


def _process_strings(typename, metadata):
    """
    Trim scalar text fields; `parent` and `usage` become None when absent or blank,
    `descr` and `long_descr` become "".
    """
    for name, default in (("parent", None), ("usage", None), ("descr", ""), ("long_descr", "")):
        if not isinstance(object := metadata[name], str | Unset | None):
            raise DescriptorError(f"{typename} {name!r} must be a string")
        metadata[name] = object.strip() or default if isinstance(object, str) else default


def _split(typename, raw, /):
    # "name" -> (name, Unset); "name=default" -> (name, default)
    if not isinstance(raw, str):
        raise DescriptorError(f"{typename} parameters must be strings")
    name, separator, default = raw.partition("=")
    if not _NAME.fullmatch(name := name.strip()):
        raise DescriptorError(f"{typename} parameter {raw!r} must start with a valid name")
    return name, default if separator else Unset


def _process_parameters(typename, metadata):
    """
    Parse static/floating/flags declarations into Parameter and Flag objects.

    Errors
    - DuplicateParameterError: a name repeats across any of the three kinds.
    - ParameterOrderError: a static parameter other than the last one has a default.
    - DescriptorError: malformed entries, or a default given to a flag.
    """
    seen = set()

    def _claim(name, raw):
        if (key := casefold(name)) in seen:
            raise DuplicateParameterError(f"duplicate parameter {raw!r} detected in command", parameter=name)
        seen.add(key)

    def _sequence(name):
        if isinstance(object := metadata[name], str) or not isinstance(object, Iterable):
            raise DescriptorError(f"{typename} {name!r} must be an iterable of strings")
        return tuple(object)

    static = []
    declarations = _sequence("static")
    for index, raw in enumerate(declarations):
        name, default = _split(typename, raw)
        _claim(name, raw)
        if default is not Unset and index != len(declarations) - 1:
            raise ParameterOrderError(
                f"{typename} static parameter {name!r} cannot have a default, only the last one can", parameter=name
            )
        static.append(Parameter(name, default))

    floating = []
    for raw in _sequence("floating"):
        name, default = _split(typename, raw)
        _claim(name, raw)
        floating.append(Parameter(name, default, floating=True))

    flags = []
    for index, raw in enumerate(_sequence("flags")):
        name, default = _split(typename, raw)
        if default is not Unset:
            raise DescriptorError(f"{typename} flag {name!r} cannot have a default")
        _claim(name, raw)
        flags.append(Flag(name, index))

    metadata["static"] = tuple(static)
    metadata["floating"] = tuple(floating)
    metadata["flags"] = tuple(flags)


def _process_descriptions(typename, metadata):
    """
    Normalize descriptions into a mapping of casefolded name -> text.

    Accepts "name=text" strings or a mapping; entries for unknown names are kept
    (they are harmless, and help rendering only looks up declared parameters).
    """
    descriptions = metadata["descriptions"]
    if isinstance(descriptions, Mapping):
        pairs = descriptions.items()
    elif isinstance(descriptions, Iterable) and not isinstance(descriptions, str):
        pairs = []
        for raw in descriptions:
            if not isinstance(raw, str) or "=" not in raw:
                raise DescriptorError(f"{typename} 'descriptions' entries must look like 'name=text', got {raw!r}")
            name, _, text = raw.partition("=")
            pairs.append((name, text))
    else:
        raise DescriptorError(f"{typename} 'descriptions' must be a mapping or an iterable of strings")

    result = {}
    for name, text in pairs:
        if not isinstance(name, str) or not isinstance(text, str):
            raise DescriptorError(f"{typename} 'descriptions' must map names to strings")
        result[casefold(name)] = text.strip()
    metadata["descriptions"] = result


def _process_flags(typename, metadata):
    """
    Resolve `hidden` into help visibility and `permission` into a PermissionLevel.
    """
    if not isinstance(metadata["hidden"], bool):
        raise DescriptorError(f"{typename} 'hidden' must be a boolean")
    metadata["help_visible"] = not metadata.pop("hidden")
    try:
        metadata["permission"] = PermissionLevel(str(metadata["permission"]).lower())
    except ValueError:
        raise DescriptorError(
            f"{typename} 'permission' must be one of {", ".join(map(str, PermissionLevel))}"
        ) from None


def parse(declaration, /, *, typename="command"):
    """
    Build a CommandDescriptor from a declaration mapping.

    Parameters
    - declaration: Mapping[str, Any] following the contract in the module docstring.
    - typename: label used to prefix error messages (usually the command type name).

    Raises
    - DescriptorError (and its DuplicateParameterError/ParameterOrderError subclasses)
      on any contract violation. Nothing is partially built.
    """
    if isinstance(declaration, CommandDescriptor):
        return declaration
    if not isinstance(declaration, Mapping):
        raise DescriptorError(f"{typename} declaration must be a mapping")
    if unknown := declaration.keys() - _DECLARATION.keys():
        raise DescriptorError(f"{typename} declaration has unknown keys: {", ".join(sorted(map(str, unknown)))}")

    metadata = dict(_DECLARATION) | dict(declaration)
    _process_names(typename, metadata)
    _process_strings(typename, metadata)
    _process_parameters(typename, metadata)
    _process_descriptions(typename, metadata)
    _process_flags(typename, metadata)

    return CommandDescriptor(metadata.pop("names"), **metadata)


@functools.cache
def describe(command_type, /):
    """
    Return the descriptor declared on `command_type` (see commands.command).

    Only the type's own declaration counts; subclasses must declare their own.
    The result is memoized so each type is parsed once.

    Raises
    - MissingDescriptorError: the type carries no declaration.
    - DescriptorError: the declaration is malformed (not memoized; raised again
      on the next attempt).
    """
    try:
        declaration = vars(command_type)["__declaration__"]
    except (KeyError, TypeError):
        raise MissingDescriptorError(
            f"{getattr(command_type, "__name__", command_type)!r} has no command declaration", type=command_type
        ) from None
    return parse(declaration, typename=getattr(command_type, "__typename__", "command"))


def loads(source, /):
    """
    Parse every top-level TOML table of `source` as a declaration.

    Returns a dict mapping table names to CommandDescriptor objects, in document order.
    """
    document = tomllib.loads(source)
    return {name: parse(table, typename=name) for name, table in document.items() if isinstance(table, Mapping)}


def load(path, /):
    """
    File variant of loads().
    """
    with open(path, "rb") as file:
        document = tomllib.load(file)
    return {name: parse(table, typename=name) for name, table in document.items() if isinstance(table, Mapping)}


__all__ = (
    "PermissionLevel",
    "Parameter",
    "Flag",
    "CommandDescriptor",
    "parse",
    "describe",
    "load",
    "loads",
)
