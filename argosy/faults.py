"""
Argosy faults (dispatch-time and registration-time) and rendering.

Scope
- FaultCode: stable numeric identifiers for every recognized failure. Codes are
  grouped by domain so logs stay searchable.
- CommandException: base type for failures a user can cause while invoking a
  command (not found, access denied, bad arguments...). It carries a message plus
  options and knows how to render itself as one error line, optionally followed by
  a single hint line.
- RegistrationError: base type for failures a developer can cause while building
  the command tree (missing descriptor, duplicate parameter, alias collision...).
  These never reach users; the registration surfaces log them and return False.

UX goals
- Lowercased tone, one sentence, and the usage string of the nearest resolvable
  command whenever the user can do something about it.
- Styling configurable via a __styles__ mapping in __main__.

Integration
- The dispatcher catches CommandException only. Anything else raised by a
  command's execute() is not ours to hide and propagates to the host.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • COMMAND_NOT_FOUND, ACCESS_DENIED, COMMAND_INCOMPLETE
    - binding (1111x)
      • TOO_MANY_ARGUMENTS, MISSING_ARGUMENT, INVALID_ARGUMENT,
        DUPLICATE_ARGUMENT, INVALID_PARAMETER, INVALID_FLAG
    - actors (1112x)
      • INVALID_ACTOR
    - delegated (11131)
      • DELEGATED_ERROR, raised by command implementations themselves
    - descriptors (1210x)
      • MISSING_DESCRIPTOR, MALFORMED_DESCRIPTOR, DUPLICATE_PARAMETER, PARAMETER_ORDER
    - tree (1211x)
      • SELF_REGISTRATION, PARENT_MISMATCH, ALIAS_COLLISION
    """
    # --- routing errors (11xxx) ---
    COMMAND_NOT_FOUND    = 11101
    ACCESS_DENIED        = 11102
    COMMAND_INCOMPLETE   = 11103

    # --- binding errors (11xxx) ---
    TOO_MANY_ARGUMENTS   = 11111
    MISSING_ARGUMENT     = 11112
    INVALID_ARGUMENT     = 11113
    DUPLICATE_ARGUMENT   = 11114
    INVALID_PARAMETER    = 11115
    INVALID_FLAG         = 11116

    # --- actor errors (11xxx) ---
    INVALID_ACTOR        = 11121

    # --- delegated errors (11xxx) ---
    DELEGATED_ERROR      = 11131

    # --- descriptor errors (12xxx) ---
    MISSING_DESCRIPTOR   = 12101
    MALFORMED_DESCRIPTOR = 12102
    DUPLICATE_PARAMETER  = 12103
    PARAMETER_ORDER      = 12104

    # --- tree errors (12xxx) ---
    SELF_REGISTRATION    = 12111
    PARENT_MISMATCH      = 12112
    ALIAS_COLLISION      = 12113

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    A recognized, user-facing command failure.

    options
    - hint: optional second line (e.g. a parameter description).
    - colorful: style the output (default True).
    - any other context the raiser wants to keep (parameter, usage, actor...).

    Command implementations raise this (or a subclass) from execute() to report a
    problem to the invoking actor; the dispatcher renders it instead of crashing.
    """
    code = FaultCode.DELEGATED_ERROR

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message or ""

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "error-message": "#FF6B6B",  # soft red sentence
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        message = Text(str(self), styler("error-message"))
        if not (hint := self.options.get("hint")):
            return message
        return Group(message, Text.assemble(Text(" → ", styler("hint-arrow")), Text(str(hint), styler("hint"))))

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        # subclasses may take other constructor arguments, so __init__ is not called again
        clone = type(self).__new__(type(self), *self.args)
        clone.__dict__.update(self.__dict__)
        clone.options = MappingProxyType({**self.options, **overrides})
        return clone


class CommandNotFoundError(CommandException):
    code = FaultCode.COMMAND_NOT_FOUND

class AccessDeniedError(CommandException):
    code = FaultCode.ACCESS_DENIED

class IncompleteCommandError(CommandException):
    code = FaultCode.COMMAND_INCOMPLETE

class TooManyArgumentsError(CommandException):
    code = FaultCode.TOO_MANY_ARGUMENTS

class MissingArgumentError(CommandException):
    code = FaultCode.MISSING_ARGUMENT

class InvalidArgumentError(CommandException):
    code = FaultCode.INVALID_ARGUMENT

class DuplicateArgumentError(CommandException):
    code = FaultCode.DUPLICATE_ARGUMENT

class InvalidParameterError(CommandException):
    code = FaultCode.INVALID_PARAMETER

class InvalidFlagError(CommandException):
    code = FaultCode.INVALID_FLAG

class InvalidActorError(CommandException):
    code = FaultCode.INVALID_ACTOR


class RegistrationError(Exception):
    """
    A developer mistake detected while building the command tree.

    Registration surfaces (Dispatcher.register_command / Command.register_command)
    catch these, log them with their code, and report failure by returning False.
    """
    code = FaultCode.MALFORMED_DESCRIPTOR

    def __init__(self, message, /, **options):
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message


class MissingDescriptorError(RegistrationError, TypeError):
    code = FaultCode.MISSING_DESCRIPTOR

class DescriptorError(RegistrationError, ValueError):
    code = FaultCode.MALFORMED_DESCRIPTOR

class DuplicateParameterError(DescriptorError):
    code = FaultCode.DUPLICATE_PARAMETER

class ParameterOrderError(DescriptorError):
    code = FaultCode.PARAMETER_ORDER

class SelfRegistrationError(RegistrationError):
    code = FaultCode.SELF_REGISTRATION

class ParentMismatchError(RegistrationError):
    code = FaultCode.PARENT_MISMATCH

class AliasCollisionError(RegistrationError):
    code = FaultCode.ALIAS_COLLISION


__all__ = (
    "FaultCode",
    "CommandException",
    "CommandNotFoundError",
    "AccessDeniedError",
    "IncompleteCommandError",
    "TooManyArgumentsError",
    "MissingArgumentError",
    "InvalidArgumentError",
    "DuplicateArgumentError",
    "InvalidParameterError",
    "InvalidFlagError",
    "InvalidActorError",
    "RegistrationError",
    "MissingDescriptorError",
    "DescriptorError",
    "DuplicateParameterError",
    "ParameterOrderError",
    "SelfRegistrationError",
    "ParentMismatchError",
    "AliasCollisionError",
)
