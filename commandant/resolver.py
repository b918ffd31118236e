"""
Commandant resolver: bind classified tokens to definitions and convert them.

resolve(registry, tokenized) turns a Tokenized result into one of
- Bound: command, converted positional values (handler order) and Context.
- HelpRequest: help for the program (command=None) or for one command.
- VersionRequest: the program version was asked for.

Binding rules
- scope: every option token is looked up private-first, then public (the
  tokenizer already rejected unknown flags, so a miss is an internal fault).
- options are converted at bind time through Option.type; repeated options
  keep the last occurrence.
- positionals fill required parameters in order, then the optional one, then
  the variadic; a shortfall or a leftover is a parse fault.
"""
from .arguments import Arity
from .context import Binding, Context
from .conversions import convert
from .faults import *
from .tokenizer import State, Tokenizer, TokenKind
from .utils import *


class Bound:
    """
    Successful parse: everything the dispatcher needs to call the handler.
    """

    def __init__(self, registry, command, values, context):
        self._registry = registry
        self._command = command
        self._values = tuple(values)
        self._context = context

    registry = mirror("registry")
    command = mirror("command")
    values = mirror("values")

    @property
    def context(self):
        return self._context

    def __eq__(self, other):
        if not isinstance(other, Bound):
            return NotImplemented
        return (
            self._command is other._command and
            self._values == other._values and
            dict(self._context) == dict(other._context)
        )

    __hash__ = None

    def __repr__(self):
        return "bound(command=%r, values=%r, context=%r)" % (self._command.name, self._values, self._context)


class HelpRequest:
    """
    Help was requested (or implied by an empty argv).
    """

    def __init__(self, registry, command=None):
        self._registry = registry
        self._command = command

    registry = mirror("registry")
    command = mirror("command")

    def __eq__(self, other):
        if not isinstance(other, HelpRequest):
            return NotImplemented
        return self._registry is other._registry and self._command is other._command

    __hash__ = None

    def __repr__(self):
        return "help-request(command=%r)" % (self._command and self._command.name)


class VersionRequest:
    def __init__(self, registry):
        self._registry = registry

    registry = mirror("registry")

    def __eq__(self, other):
        if not isinstance(other, VersionRequest):
            return NotImplemented
        return self._registry is other._registry

    __hash__ = None

    def __repr__(self):
        return "version-request()"


def _bind_option(registry, command, token, value):
    option = registry.lookup(command, token.text)
    if option is None:
        raise RuntimeError("internal fault: no definition for option %r in command %r" % (token.text, command.name))

    if value is None:
        # flags, and optional-value options given without a value
        if option.arity is Arity.REQUIRED:
            raise RuntimeError("internal fault: option %r was classified without its value" % token.text)
        return Binding(option, (), True, token.index)

    raw = (value.text,)
    converted = convert(
        option.type,
        raw,
        argument=token.text,
        index=value.index,
        command=command.name,
    )
    return Binding(option, raw, converted, token.index)


def _missing(command, positional, index):
    return MissingRequiredArgumentError(
        "missing required argument %s for command %r at %s position" % (positional.metavar, command.name, ordinal(index)),
        input=positional.name,
        index=index,
        command=command.name,
        hint="pass a value for %s (usage: %s %s)" % (
            positional.metavar,
            command.name,
            " ".join(positional.metavar for positional in command.positionals),
        ),
        docs=getdoc(FaultCode.MISSING_REQUIRED_ARGUMENT),
    )


def _convert(command, positional, token):
    return convert(
        positional.type,
        token.text,
        argument=positional.metavar,
        index=token.index,
        command=command.name,
    )


def distribute(command, tokens, /, *, end=None):
    """
    Assign positional tokens to a command's parameters and convert them.

    Parameters
    - command: Command
    - tokens: sequence of POSITIONAL Tokens, in order.
    - end: 1-based position just past the input (used to point at missing values).

    Returns
    - dict of positional name to converted value, in declaration order.
    """
    tokens = list(tokens)
    if end is None:
        end = tokens[-1].index + 1 if tokens else 1
    values = {}

    for positional in command.required:
        if not tokens:
            raise _missing(command, positional, end)
        values[positional.name] = _convert(command, positional, tokens.pop(0))

    if (positional := command.optional) is not None:
        values[positional.name] = _convert(command, positional, tokens.pop(0)) if tokens else Absent

    if (positional := command.variadic) is not None:
        collected = [_convert(command, positional, token) for token in tokens]
        tokens.clear()
        values[positional.name] = Absent if positional.optional and not collected else collected

    if tokens:
        token = tokens[0]
        raise UnexpectedArgumentError(
            "unexpected argument %r at %s position" % (token.text, ordinal(token.index)),
            input=token.text,
            index=token.index,
            command=command.name,
            hint="remove the extra value or run '%s --help' to see the expected usage" % command.name,
            docs=getdoc(FaultCode.UNEXPECTED_ARGUMENT),
        )

    return values


def resolve(registry, tokenized, /, *, program=None):
    """
    Bind a Tokenized result against the registry.

    Returns
    - Bound | HelpRequest | VersionRequest

    Raises
    - ConversionError, MissingRequiredArgumentError, UnexpectedArgumentError.
    - RuntimeError when the tokens do not describe a terminal state (internal fault).
    """
    match tokenized.state:
        case State.HELP:
            return HelpRequest(registry, tokenized.command)
        case State.VERSION:
            return VersionRequest(registry)
        case State.BIND:
            pass
        case _:
            raise RuntimeError("internal fault: cannot resolve tokens in state %r" % tokenized.state)

    command = tokenized.command
    tokens = list(tokenized.tokens)
    bindings = {}
    positionals = []
    end = max((token.index for token in tokens), default=0) + 1

    while tokens:
        token = tokens.pop(0)
        match token.kind:
            case TokenKind.OPTION:
                value = tokens.pop(0) if tokens and tokens[0].kind is TokenKind.VALUE else None
                binding = _bind_option(registry, command, token, value)
                # last occurrence wins
                bindings.pop(binding.option.name, None)
                bindings[binding.option.name] = binding
            case TokenKind.POSITIONAL:
                positionals.append(token)
            case TokenKind.COMMAND | TokenKind.SEPARATOR:
                pass
            case _:
                raise RuntimeError("internal fault: unexpected %s token %r" % (token.kind, token.text))

    values = distribute(command, positionals, end=end)
    context = Context(bindings, command=command.name, positionals=values, program=program)
    return Bound(registry, command, values.values(), context)


def parse(registry, argv, /, *, program=None, versioned=True):
    """
    Tokenize and resolve argv in one step.

    versioned=False rejects -V/--version (see Tokenizer).

    Returns
    - Bound | HelpRequest | VersionRequest
    """
    return resolve(registry, Tokenizer(registry, versioned=versioned).tokenize(argv), program=program)


__all__ = (
    "Bound",
    "HelpRequest",
    "VersionRequest",
    "distribute",
    "resolve",
    "parse",
)
