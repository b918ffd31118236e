"""
Commandant faults (registration and parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the core can
  surface. Codes are grouped by domain so logs and searches stay predictable.
- CommandException: base type that carries a message plus read-only options and
  knows how to render itself (Rich) and how to surface itself (raise or print+exit).
- RegistrationError / ParseError: the two fault classes. Registration faults are
  programmer errors found while building a registry; parse faults are caused by
  user input and always carry the offending token and its position.
- trigger(): central entry point to surface any fault with runtime options.
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: “unknown option '--bogus' at third position”.
- Short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- Parsing code raises the concrete fault directly (fail fast, exactly one fault).
- The runner calls trigger(fault, shell=..., ...): in non-shell mode the fault is
  raised; in shell mode it is rendered on stderr and the process exits with 1.
"""
import copy
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Absent

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the core (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND
    - options (1111x)
      • UNKNOWN_OPTION, FLAG_ASSIGNMENT, OPTION_VALUE_REQUIRED
    - positionals (1112x)
      • UNEXPECTED_ARGUMENT, MISSING_REQUIRED_ARGUMENT
    - conversions (1113x)
      • CONVERSION_ERROR
    - registration (2xxxx)
      • NO_COMMAND_DEFINED, DUPLICATE_COMMAND, DUPLICATE_OPTION, INVALID_POSITIONAL_SHAPE

    normalize() allows the host to remap codes to custom labels while keeping
    the numeric ids stable.
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101

    # --- option errors (11xxx) ---
    UNKNOWN_OPTION              = 11112
    FLAG_ASSIGNMENT             = 11113
    OPTION_VALUE_REQUIRED       = 11117

    # --- positional errors (11xxx) ---
    UNEXPECTED_ARGUMENT         = 11121
    MISSING_REQUIRED_ARGUMENT   = 11125

    # --- conversion errors (11xxx) ---
    CONVERSION_ERROR            = 11131

    # --- registration errors (21xxx) ---
    NO_COMMAND_DEFINED          = 21101
    DUPLICATE_COMMAND           = 21102
    DUPLICATE_OPTION            = 21111
    INVALID_POSITIONAL_SHAPE    = 21121

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
    Base fault: a message plus read-only rendering/context options.

    Subclasses declare __fault__ (FaultCode) and __title__ (short label); those
    seed the "code" and "title" options unless the raiser overrides them.

    Common options
    - code, title, hint: rendering header and guidance.
    - input: the offending token or name; index: its 1-based position.
    - program: program name shown in the header.
    - usage: usage line rendered under the message (set by the runner).
    - shell, fancy, colorful: presentation flags used by __trigger__/__rich__.
    """
    __fault__ = Absent
    __title__ = "error"

    def __init__(self, message="", /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"code": self.__fault__, "title": self.__title__} | options)

    @property
    def code(self):
        return self.options["code"]

    @property
    def title(self):
        return self.options["title"]

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def input(self):
        return self.options.get("input")

    @property
    def index(self):
        return self.options.get("index")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "usage": "#9CA3AF",  # muted gray usage line
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        program = self.options.get("program") or getattr(main, "__prog__", os.path.basename(sys.argv[0]))

        code = self.code.normalize() if isinstance(self.code, FaultCode) else "?"
        header = Text.assemble(
            "[ ",
            text(program, styler("prog-name")),
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        parts = [message]
        if self.hint:
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))
        if usage := self.options.get("usage"):
            parts.append(Text(""))
            parts.append(text(usage, styler("usage")))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left", width=console.width - 4)

        return Group(header, *parts)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RegistrationError(CommandException):
    """
    Programmer error in the registry definition; raised while building, before
    any user input is read. Never rendered as a user-facing parse failure.
    """
    __title__ = "invalid registry"


class NoCommandDefinedError(RegistrationError):
    __fault__ = FaultCode.NO_COMMAND_DEFINED
    __title__ = "no command defined"


class DuplicateCommandError(RegistrationError):
    __fault__ = FaultCode.DUPLICATE_COMMAND
    __title__ = "duplicate command"


class DuplicateOptionError(RegistrationError):
    __fault__ = FaultCode.DUPLICATE_OPTION
    __title__ = "duplicate option"


class InvalidPositionalShapeError(RegistrationError):
    __fault__ = FaultCode.INVALID_POSITIONAL_SHAPE
    __title__ = "invalid positional shape"


class ParseError(CommandException):
    """
    User-input fault. Options carry at least 'input' and 'index'; 'command' is
    the matched command name (or None before a command was matched) so the
    runner can render the right contextual usage next to the message.
    """
    __title__ = "invalid input"

    @property
    def command(self):
        return self.options.get("command")


class UnknownCommandError(ParseError):
    __fault__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


class UnknownOptionError(ParseError):
    __fault__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"


class MissingRequiredArgumentError(ParseError):
    __fault__ = FaultCode.MISSING_REQUIRED_ARGUMENT
    __title__ = "missing argument"


class OptionValueRequiredError(MissingRequiredArgumentError):
    __fault__ = FaultCode.OPTION_VALUE_REQUIRED
    __title__ = "missing option value"


class UnexpectedArgumentError(ParseError):
    __fault__ = FaultCode.UNEXPECTED_ARGUMENT
    __title__ = "unexpected argument"


class FlagAssignmentError(UnexpectedArgumentError):
    __fault__ = FaultCode.FLAG_ASSIGNMENT
    __title__ = "flag cannot take a value"


class ConversionError(ParseError):
    """
    A raw token could not be converted to its target type.

    Extra options
    - target: the requested type; raw: the offending text;
      argument: the option/positional name (when known);
      exception: the converter failure that was translated.
    """
    __fault__ = FaultCode.CONVERSION_ERROR
    __title__ = "conversion error"

    @property
    def target(self):
        return self.options.get("target")

    @property
    def raw(self):
        return self.options.get("raw")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace(...) before triggering.
    - in shell mode, rendering happens via rich console and the process exits;
      otherwise the fault is raised.
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
    returns None when no entry exists.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "CommandException",
    "RegistrationError",
    "NoCommandDefinedError",
    "DuplicateCommandError",
    "DuplicateOptionError",
    "InvalidPositionalShapeError",
    "ParseError",
    "UnknownCommandError",
    "UnknownOptionError",
    "MissingRequiredArgumentError",
    "OptionValueRequiredError",
    "UnexpectedArgumentError",
    "FlagAssignmentError",
    "ConversionError",
    "trigger",
    "getdoc",
)
