"""
Cmdfriend faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain (registry authoring, tokens, arity, requirements)
  to keep messages consistent and logs searchable.
- CommandException: base type that carries a message + options and knows how to
  render itself (rich) and how to surface itself (raise, or print and exit).
- RegistryError / ParseError: the two families of faults. Registry errors are
  authoring defects of the option table; parse errors come from the argv.
- CommandExit: groups every fault collected by a deferred parse.
- trigger(): central entry point to surface any fault.
- getdoc(): optional description lookup for a code from the host application.

Policy
- terminate=False (default): the fault is raised to the caller.
- terminate=True: the fault is printed on the selected stream and the process
  exits with status 1.

Integration
- The parser builds faults with title/code/hint and hands them to its session,
  which merges the mode options and either defers them or calls trigger().
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum, StrEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class Stream(StrEnum):
    """
    output stream selected for fault text.
    """
    STDOUT = "stdout"
    STDERR = "stderr"


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - registry authoring (1100x)
      • DUPLICATE_KEY, DUPLICATE_NAME, INVALID_KEY, RESERVED_KEY,
        MALFORMED_ALIAS, INVALID_ARITY
    - tokens (1111x)
      • UNKNOWN_OPTION, NESTED_ARITY
    - arity (1112x)
      • MISSING_ARGUMENT, TOO_FEW_ARGUMENTS, TOO_MANY_ARGUMENTS
    - requirements (1113x)
      • MISSING_REQUIRED_OPTION

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- registry authoring errors (110xx) ---
    DUPLICATE_KEY               = 11001
    DUPLICATE_NAME              = 11002
    INVALID_KEY                 = 11003
    RESERVED_KEY                = 11004
    MALFORMED_ALIAS             = 11005
    INVALID_ARITY               = 11006

    # --- token errors (111xx) ---
    UNKNOWN_OPTION              = 11111
    NESTED_ARITY                = 11112

    # --- arity errors (111xx) ---
    MISSING_ARGUMENT            = 11121
    TOO_FEW_ARGUMENTS           = 11122
    TOO_MANY_ARGUMENTS          = 11123

    # --- requirement errors (111xx) ---
    MISSING_REQUIRED_OPTION     = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _prog(options):
    return options.get("prog") or getattr(__import__("__main__"), "__prog__", "cmdfriend")


class CommandException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = _palette({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })
        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            text(_prog(self.options), "prog-name"),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "?", "code"),
            " | ",
            text(self.options.get("title", type(self).__name__).title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")

        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("terminate", False):
            raise self from None
        Console(stderr=self.options.get("stream", Stream.STDERR) == Stream.STDERR).print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RegistryError(CommandException): ...
class DuplicateKeyError(RegistryError): ...
class DuplicateNameError(RegistryError): ...
class InvalidKeyError(RegistryError): ...
class ReservedKeyError(RegistryError): ...
class MalformedAliasError(RegistryError): ...
class InvalidArityError(RegistryError): ...


class ParseError(CommandException): ...
class UnknownOptionError(ParseError): ...
class NestedArityError(ParseError): ...
class MissingArgumentError(ParseError): ...
class TooFewArgumentsError(ParseError): ...
class TooManyArgumentsError(ParseError): ...
class MissingRequiredOptionError(ParseError): ...


class CommandExit(ExceptionGroup[CommandException]):
    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = _palette({
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title (Bad Exit)
        })
        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        header = Text.assemble("[ ", text(_prog(self.options), "prog-name"), " — ", text(self.message.title(), "title"), " ]")
        renders = [copy.replace(exception, fancy=False) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("terminate", False):
            raise self from None
        Console(stderr=self.options.get("stream", Stream.STDERR) == Stream.STDERR).print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - with terminate=True the fault is printed and the process exits; otherwise it is raised.

    typical options
    - prog, terminate, stream, fancy, colorful, title, code, hint, docs, and any
      context the reporter may want to show (descriptor, token, index, group...).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "Stream",
    "FaultCode",
    "CommandException",
    "RegistryError",
    "DuplicateKeyError",
    "DuplicateNameError",
    "InvalidKeyError",
    "ReservedKeyError",
    "MalformedAliasError",
    "InvalidArityError",
    "ParseError",
    "UnknownOptionError",
    "NestedArityError",
    "MissingArgumentError",
    "TooFewArgumentsError",
    "TooManyArgumentsError",
    "MissingRequiredOptionError",
    "CommandExit",
    "trigger",
    "getdoc",
)
