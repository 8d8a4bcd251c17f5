r"""
Argosy arguments: bind the unconsumed tokens of a resolved command to its
declared parameters.

Grammar (per descriptor)
- Static parameters come first, in declaration order, one token each:
    /zone create alpha
- A token opening with a quote (" or ') swallows the following tokens until
  one closes the quote; the quotes are removed:
    /zone rename alpha "north gate"
- Floating parameters follow as `--name value`, flags as `-name`, in any order:
    /zone create alpha --count 3 -force

Binding faults (all CommandException subclasses, rendered by the dispatcher)
- TooManyArgumentsError: tokens left over and nothing named can absorb them.
- MissingArgumentError: a required static/floating parameter got no value.
- InvalidArgumentError: a token is in the wrong place, or a getter cannot
  convert a value (with the parameter description as hint).
- DuplicateArgumentError: a floating parameter was given twice.
- InvalidParameterError / InvalidFlagError: `--name` / `-name` is not declared.

Typed getters
    arguments.get_string("target")
    arguments.get_integer("count", 1, 64)
    arguments.get_boolean("force")        # flags answer directly
    arguments.get_enum("mode", Mode)
"""
import re
from collections import deque

from .faults import *
from .usage import FLOATING_PREFIX, FLAG_PREFIX, HELP
from .utils import *

_NAME = re.compile(r"[A-Za-z][\w-]*")

_TRUTHS = {
    "true": True, "yes": True, "on": True, "allow": True, "1": True,
    "false": False, "no": False, "off": False, "deny": False, "0": False,
}


def _literal(token, tokens):
    # joins a quoted literal spread across tokens; unquoted tokens pass through
    quote = token[:1]
    if quote not in ("\"", "'"):
        return token
    word = token[1:]
    if word.endswith(quote):
        return word[:-1]
    words = [word]
    while tokens:
        word = tokens.popleft()
        if word.endswith(quote):
            words.append(word[:-1])
            break
        words.append(word)
    return " ".join(words)


class Arguments:
    """
    Arguments bound to one resolved command.

    Construction performs the binding and raises the binding faults listed in
    the module docstring; a constructed instance is always complete (every
    required parameter has a value, every floating default is applied).
    """

    def __init__(self, command, tokens=(), /):
        self._command = command
        self._descriptor = command.descriptor
        self._raw = tuple(tokens)
        self._values = {}
        self._defaults = set()
        self._flags = set()
        self._static_size = 0
        self._floating_size = 0

        tokens = deque(self._raw)
        self._bind_static(tokens)

        if not self._descriptor.floating and not self._descriptor.flags:
            if tokens:
                raise TooManyArgumentsError(
                    self._message("too_many_arguments", self._usage()), remaining=tuple(tokens)
                )
            return

        self._bind_named(tokens)

    def _message(self, key, /, *args):
        return self._command.messenger.get(key, *args)

    def _usage(self):
        return self._command.usage(template=HELP).rstrip()

    def _missing(self, parameter):
        return MissingArgumentError(
            self._message("missing_argument", parameter.name, self._usage()), parameter=parameter.name
        )

    def _invalid(self, name, expected):
        hint = self._descriptor.description(name) or expected
        return InvalidArgumentError(
            self._message("invalid_argument", name, self._usage()),
            parameter=name,
            hint=self._message("parameter_description", hint) if hint else Unset,
        )

    def _store(self, parameter, value):
        key = casefold(parameter.name)
        if key in self._values:
            raise DuplicateArgumentError(self._message("duplicate_argument", parameter.name), parameter=parameter.name)
        if value is Unset:
            self._defaults.add(key)
            value = parameter.default
        self._values[key] = value

    def _bind_static(self, tokens):
        parameters = deque(self._descriptor.static)
        while parameters:
            parameter = parameters.popleft()
            value = Unset

            if tokens:
                token = tokens.popleft()
                if token.startswith(FLAG_PREFIX):
                    # only a defaulted final static parameter may give way to named ones
                    if parameters:
                        raise self._invalid(parameter.name, "")
                    if not parameter.has_default:
                        raise self._missing(parameter)
                    tokens.appendleft(token)
                else:
                    value = _literal(token, tokens)

            if value is Unset and not parameter.has_default:
                raise self._missing(parameter)
            self._store(parameter, value)
            self._static_size += 1

    def _bind_named(self, tokens):
        descriptor = self._descriptor
        while tokens:
            token = tokens.popleft()
            if token.startswith(FLOATING_PREFIX):
                name = token[len(FLOATING_PREFIX):]
                if (parameter := descriptor.parameter(name)) is None or not parameter.floating:
                    raise InvalidParameterError(self._message("invalid_parameter", name, self._usage()), parameter=name)
                if not tokens:
                    raise self._missing(parameter)
                self._store(parameter, _literal(tokens.popleft(), tokens))
                self._floating_size += 1
            elif token.startswith(FLAG_PREFIX):
                name = token[len(FLAG_PREFIX):]
                if (flag := descriptor.flag(name)) is None:
                    raise InvalidFlagError(self._message("invalid_flag", name, self._usage()), flag=name)
                self._flags.add(casefold(flag.name))
            else:
                raise self._invalid(token, "")

        for parameter in descriptor.floating:
            if casefold(parameter.name) in self._values:
                continue
            if not parameter.has_default:
                raise self._missing(parameter)
            self._store(parameter, Unset)

    # --- introspection ---

    @property
    def command(self):
        return self._command

    @property
    def raw(self):
        return self._raw

    def static_size(self):
        """
        Number of static parameters bound (declared ones, after binding).
        """
        return self._static_size

    def floating_size(self):
        """
        Number of floating parameters supplied explicitly.
        """
        return self._floating_size

    def expected_size(self):
        """
        Number of value-bearing parameters the command declares.
        """
        return len(self._descriptor.static) + len(self._descriptor.floating)

    def is_default(self, name, /):
        self._lookup(name)
        return casefold(name) in self._defaults

    def has_value(self, name, /):
        """
        Whether a value (given or defaulted) is bound for parameter `name`.
        """
        return name in self

    def __contains__(self, name):
        return isinstance(name, str) and casefold(name) in self._values

    def __iter__(self):
        return iter(self._values.items())

    def __repr__(self):
        return f"arguments({self._descriptor.name!r}, {dict(self._values)!r}, flags={sorted(self._flags)!r})"

    # --- typed getters ---

    def _lookup(self, name):
        try:
            return self._values[casefold(name)]
        except KeyError:
            if self._descriptor.flag(name) is not None:
                return None
            raise KeyError(f"command {self._descriptor.name!r} has no parameter named {name!r}") from None

    def get_flag(self, name, /):
        if self._descriptor.flag(name) is None:
            raise KeyError(f"command {self._descriptor.name!r} has no flag named {name!r}")
        return casefold(name) in self._flags

    def get_string(self, name, /, min=0, max=None):
        value = self._lookup(name)
        if value is None or len(value) < min or (max is not None and len(value) > max):
            expected = f"text of {min} to {max} characters" if max is not None else "text"
            raise self._invalid(name, expected)
        return value

    def get_name(self, name, /, max=16):
        value = self._lookup(name)
        if value is None or not _NAME.fullmatch(value) or len(value) > max:
            raise self._invalid(name, f"a name of letters, digits, '-' or '_', at most {max} characters")
        return value

    def _number(self, name, convert, expected, min, max):
        value = self._lookup(name)
        try:
            number = convert(value)
        except (TypeError, ValueError):
            raise self._invalid(name, expected) from None
        if (min is not None and number < min) or (max is not None and number > max):
            raise self._invalid(name, f"{expected} between {coalesce(min, '-∞')} and {coalesce(max, '∞')}")
        return number

    def get_integer(self, name, /, min=None, max=None):
        return self._number(name, int, "a whole number", min, max)

    def get_float(self, name, /, min=None, max=None):
        return self._number(name, float, "a number", min, max)

    def get_percent(self, name, /):
        value = self._lookup(name)
        try:
            value = value.strip().removesuffix("%")
            return float(value) if "." in value else int(value)
        except (AttributeError, ValueError):
            raise self._invalid(name, "a percentage such as 50%") from None

    def get_boolean(self, name, /):
        if self._descriptor.flag(name) is not None:
            return self.get_flag(name)
        value = self._lookup(name)
        try:
            return _TRUTHS[value.lower()]
        except (AttributeError, KeyError):
            raise self._invalid(name, "true or false") from None

    def get_enum(self, name, enum_type, /):
        value = self._lookup(name)
        for member in enum_type:
            if value is not None and member.name.lower() == value.lower():
                return member
        raise self._invalid(name, "one of " + ", ".join(member.name.lower() for member in enum_type))

    def get_list(self, name, /):
        value = self._lookup(name)
        if not value:
            raise self._invalid(name, "a comma separated list")
        return [item.strip() for item in value.split(",") if item.strip()]


def bind(command, tokens, /):
    """
    Bind `tokens` for `command`; raises the binding faults.
    """
    return Arguments(command, tokens)


__all__ = (
    "Arguments",
    "bind",
)
