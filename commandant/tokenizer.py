"""
Commandant tokenizer: a single left-to-right pass that classifies argv.

States
- EXPECT_COMMAND (initial): the first token must name a command, or be a
  help (-h/--help) or version (-V/--version) flag.
- IN_COMMAND: every later token is an option flag (looked up in the command's
  visible set to learn its arity), an option value, or a positional.
- BIND (end of input reached inside a command), HELP, VERSION: terminal.

Classification rules
- flag-shaped: starts with '-', longer than one character, not a number
  ("-5" and "-1.5e3" are positionals, "-" alone too).
- "--" ends option processing; everything after it is positional.
- "--name=value" carries an inline value (value options only).
- required-value options take the next token unconditionally.
- optional-value options take the next token only when it is not flag-shaped.

Faults are raised at the offending token (position-first), never collected.
"""
import difflib
import functools
import re
from collections import deque, namedtuple
from enum import StrEnum

from .arguments import Arity
from .faults import *
from .registry import HELP, VERSION, Registry
from .utils import ordinal


class State(StrEnum):
    EXPECT_COMMAND = "expect-command"
    IN_COMMAND = "in-command"
    BIND = "bind"
    HELP = "help"
    VERSION = "version"


class TokenKind(StrEnum):
    COMMAND = "command"
    OPTION = "option"
    VALUE = "value"
    POSITIONAL = "positional"
    SEPARATOR = "separator"
    HELP = "help"
    VERSION = "version"


Token = namedtuple("Token", ("kind", "text", "index"))
Token.__doc__ = """
One classified argv token.

- kind: TokenKind
- text: the token as typed; for OPTION, the flag spelling without any
  '=value' tail; for an inline VALUE, the text after '='.
- index: 1-based position in argv (an inline VALUE shares its flag's index).
"""

Tokenized = namedtuple("Tokenized", ("state", "command", "tokens"))
Tokenized.__doc__ = """
Tokenizer outcome: terminal state, matched Command (or None), classified tokens.
"""

_pattern = re.compile(r"(?P<input>--?[^\W\d_](-?[^\W_]+)*)(=(?P<value>.*))?", re.DOTALL)


def _numeric(token):
    for parse in (float, functools.partial(int, base=0)):
        try:
            parse(token.replace("_", ""))
        except ValueError:
            continue
        return True
    return False


def flagged(token, /):
    """
    Return True when token is shaped like an option flag.
    """
    return token.startswith("-") and len(token) > 1 and not _numeric(token)


class Tokenizer:
    """
    Stateful classifier bound to one built registry.

    A Tokenizer can be reused: every tokenize() call starts from a fresh state,
    so the same argv always yields the same tokens.

    With versioned=False the program declares no version, so -V/--version is
    an unknown command like any other unregistered token.
    """

    def __init__(self, registry, /, *, versioned=True):
        if not isinstance(registry, Registry):
            raise TypeError("tokenizer() argument must be a registry")
        if not registry.built:
            raise TypeError("tokenizer() argument must be a built registry")
        self._registry = registry
        self._versioned = bool(versioned)
        self._reset()

    def _reset(self):
        self._state = State.EXPECT_COMMAND
        self._command = None
        self._pending = deque()
        self._index = 0
        self._literal = False
        self._output = []

    @property
    def state(self):
        return self._state

    @property
    def command(self):
        return self._command

    def tokenize(self, argv, /):
        """
        Classify argv and return a Tokenized result.

        Raises
        - UnknownCommandError, UnknownOptionError, FlagAssignmentError,
          OptionValueRequiredError: at the first offending token.
        """
        argv = tuple(argv)
        for token in argv:
            if not isinstance(token, str):
                raise TypeError("tokenize() argv must only contain strings")

        self._reset()
        self._pending.extend(argv)

        # nothing to run: show the program help
        if not self._pending:
            self._state = State.HELP

        while self._pending and self._state in (State.EXPECT_COMMAND, State.IN_COMMAND):
            token = self._next()
            if self._state is State.EXPECT_COMMAND:
                self._expect_command(token)
            else:
                self._in_command(token)

        if self._state is State.IN_COMMAND:
            self._state = State.BIND

        return Tokenized(self._state, self._command, tuple(self._output))

    def _next(self):
        self._index += 1
        return self._pending.popleft()

    def _emit(self, kind, text, index=None):
        self._output.append(Token(kind, text, self._index if index is None else index))

    def _expect_command(self, token):
        if token in HELP:
            self._emit(TokenKind.HELP, token)
            self._state = State.HELP
            return
        if self._versioned and token in VERSION:
            self._emit(TokenKind.VERSION, token)
            self._state = State.VERSION
            return
        if (command := self._registry.get(token)) is not None:
            self._emit(TokenKind.COMMAND, token)
            self._command = command
            self._state = State.IN_COMMAND
            return

        names = [command.name for command in self._registry]
        suggestions = difflib.get_close_matches(token, names, 5)
        if token in VERSION:
            hint = "this program declares no version"
        elif suggestions:
            hint = "did you mean %r? run with --help to see available commands" % suggestions[0]
        elif flagged(token):
            hint = "options go after the command name; run with --help to see available commands"
        else:
            hint = "run with --help to see available commands"
        raise UnknownCommandError(
            "unknown command %r at %s position" % (token, ordinal(self._index)),
            input=token,
            index=self._index,
            command=None,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_COMMAND),
        )

    def _in_command(self, token):
        if self._literal:
            self._emit(TokenKind.POSITIONAL, token)
        elif token == "--":
            self._emit(TokenKind.SEPARATOR, token)
            self._literal = True
        elif token in HELP:
            self._emit(TokenKind.HELP, token)
            self._state = State.HELP
        elif flagged(token):
            self._option(token)
        else:
            self._emit(TokenKind.POSITIONAL, token)

    def _unknown(self, input, **options):
        name = self._command.name
        suggestions = difflib.get_close_matches(input, self._registry.visible(name).keys(), 5)
        if input in VERSION and not self._versioned:
            hint = "this program declares no version"
        elif input in VERSION:
            hint = "%s is only recognized before the command name" % input
        elif suggestions:
            hint = "did you mean %r? run '%s --help' to see all options" % (suggestions[0], name)
        else:
            hint = "run '%s --help' to see all available options" % name
        return UnknownOptionError(
            "unknown option %r at %s position" % (input, ordinal(self._index)),
            **{
                "input": input,
                "index": self._index,
                "command": name,
                "suggestions": suggestions,
                "hint": hint,
                "docs": getdoc(FaultCode.UNKNOWN_OPTION),
            } | options,
        )

    def _option(self, token):
        if not (match := _pattern.fullmatch(token)):
            raise self._unknown(token, hint="option names look like '-x' or '--name' (or '--name=value')")

        input, value = match["input"], match["value"]
        name = self._command.name
        if (option := self._registry.lookup(name, input)) is None:
            raise self._unknown(input)

        self._emit(TokenKind.OPTION, input)

        match option.arity:
            case Arity.NONE:
                if value is not None:
                    raise FlagAssignmentError(
                        "flag %r at %s position cannot have a value" % (input, ordinal(self._index)),
                        input=input,
                        index=self._index,
                        command=name,
                        hint="remove everything from '=' (for example: %s)" % input,
                        docs=getdoc(FaultCode.FLAG_ASSIGNMENT),
                    )

            case Arity.REQUIRED:
                if value is not None:
                    self._emit(TokenKind.VALUE, value)
                elif self._pending:
                    self._emit(TokenKind.VALUE, self._next())
                else:
                    raise OptionValueRequiredError(
                        "option %r at %s position requires a value" % (input, ordinal(self._index)),
                        input=input,
                        index=self._index,
                        command=name,
                        hint="pass a value after it (for example: %s <%s>)" % (input, option.metavar),
                        docs=getdoc(FaultCode.OPTION_VALUE_REQUIRED),
                    )

            case Arity.OPTIONAL:
                if value is not None:
                    self._emit(TokenKind.VALUE, value)
                elif self._pending and not flagged(self._pending[0]):
                    self._emit(TokenKind.VALUE, self._next())


def tokenize(registry, argv, /, *, versioned=True):
    """
    Shortcut for Tokenizer(registry, versioned=versioned).tokenize(argv).
    """
    return Tokenizer(registry, versioned=versioned).tokenize(argv)


__all__ = (
    "State",
    "TokenKind",
    "Token",
    "Tokenized",
    "Tokenizer",
    "tokenize",
    "flagged",
)
