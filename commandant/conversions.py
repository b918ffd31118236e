"""
Commandant value conversion: raw text tokens into typed values.

Overview
- convert(target, raw, /, **context)
  • raw is a single token (str) or a sequence of tokens.
  • target is a type or a type hint; dispatch follows the hint's shape:
      list[T] / tuple[T, ...] / set[T] / frozenset[T] → element-wise conversion
      T | None                                        → None when there are no tokens
      Literal["a", "b"]                               → text must name one of the values
      Enum subclass                                   → member name, then member value
      anything else                                   → exactly one token through a converter
  • an empty raw bag for a scalar target yields Absent (“no values”), never a zero.

- converter(type): decorator registering the converter for a type in the table.
- converts(target): whether convert() knows how to reach the target.
- parse_bool(text): the boolean spelling used by the table.

Failure signal
- Converters raise ValueError/TypeError (or ArithmeticError for decimal); convert()
  translates any of them into a single ConversionError that names the raw text,
  the target and, when the caller passes it, the argument being converted.
  Nothing is coerced to a default and nothing is retried.

Quick example
    >>> convert(int, "0x1f")
    31
    >>> convert(list[float], ["1", "2.5"])
    [1.0, 2.5]
    >>> convert(int | None, [])
"""
import builtins
import decimal
import enum
import fractions
import pathlib
import types
import typing
from collections.abc import Sequence

from .faults import ConversionError
from .utils import Absent, ordinal

_converters = {}

_collections = (list, tuple, set, frozenset)

_truthy = frozenset({"true", "yes", "on", "1", "y", "t"})
_falsy = frozenset({"false", "no", "off", "0", "n", "f"})


def converter(target, /):
    """
    Register the decorated callable as the converter for target.

    The callable receives exactly one raw token and returns the typed value, or
    raises ValueError/TypeError when the text does not represent that type.
    Registering a type twice replaces the previous converter.

    Example
        @converter(ipaddress.IPv4Address)
        def _parse_ip(text):
            return ipaddress.IPv4Address(text)
    """
    if not isinstance(target, type):
        raise TypeError("converter() argument must be a type")

    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@converter() must be applied to a callable")
        _converters[target] = callback
        return callback

    return wrapper


def parse_bool(text, /):
    """
    Parse a boolean spelling (case-insensitive): true/yes/on/1 or false/no/off/0.
    """
    if (lowered := text.strip().lower()) in _truthy:
        return True
    if lowered in _falsy:
        return False
    raise ValueError(f"invalid boolean literal: {text!r}")


def _parse_int(text, /):
    # decimal first (keeps "010" as ten), then prefixed radix forms (0x, 0o, 0b)
    try:
        return int(text, 10)
    except ValueError:
        return int(text, 0)


converter(str)(str)
converter(int)(_parse_int)
converter(float)(float)
converter(complex)(complex)
converter(bool)(parse_bool)
converter(pathlib.Path)(pathlib.Path)
converter(decimal.Decimal)(decimal.Decimal)
converter(fractions.Fraction)(fractions.Fraction)


def _typename(target):
    return getattr(target, "__name__", None) or repr(target)


def _fail(target, text, context, exception=None):
    """
    Build the ConversionError for one raw token (position-first when known).
    """
    typename = _typename(target)
    if (argument := context.get("argument")) and (index := context.get("index")):
        message = "value %r for %s at %s position cannot be converted to %s" % (text, argument, ordinal(index), typename)
    elif argument:
        message = "value %r for %s cannot be converted to %s" % (text, argument, typename)
    else:
        message = "value %r cannot be converted to %s" % (text, typename)
    return ConversionError(message, **{"hint": "use a valid %s" % typename} | context | {
        "input": text,
        "raw": text,
        "target": target,
        "exception": exception,
    })


def converts(target, /):
    """
    Return True when convert() can produce target from raw text.
    """
    origin, args = typing.get_origin(target), typing.get_args(target)
    if origin in _collections:
        return converts(args[0]) if args else True
    if origin in (types.UnionType, typing.Union):
        return all(converts(member) for member in args if member is not types.NoneType)
    if origin is typing.Literal:
        return True
    return target in _converters or callable(target)


def convert(target, raw, /, **context):
    """
    Convert raw token(s) into target.

    Parameters
    - target: type or type hint (see module docstring for the supported shapes).
    - raw: str | Sequence[str]
    - context: extra options attached to a ConversionError (argument, index,
      command, ...). 'argument' names what is being converted in the message.

    Returns
    - the converted value; Absent when a scalar target receives no tokens.

    Raises
    - ConversionError: the text does not represent the target.
    - TypeError: the target is not convertible at all (programmer error).
    """
    if isinstance(raw, str):
        raw = (raw,)
    elif isinstance(raw, Sequence):
        raw = tuple(raw)
    else:
        raise TypeError("convert() second argument must be a string or a sequence of strings")

    origin, args = typing.get_origin(target), typing.get_args(target)
    if target in _collections:
        origin = target

    match origin:
        case builtins.list | builtins.tuple | builtins.set | builtins.frozenset:
            element = args[0] if args else str
            return origin(convert(element, token, **context) for token in raw)

        case types.UnionType | typing.Union:
            if not raw and types.NoneType in args:
                return None
            members = [member for member in args if member is not types.NoneType]
            if len(members) == 1:
                return convert(members[0], raw, **context)
            # first member that accepts the text wins, in declaration order
            failure = None
            for member in members:
                try:
                    return convert(member, raw, **context)
                except ConversionError as exception:
                    failure = exception
            raise failure

        case typing.Literal:
            if not raw:
                return Absent
            text = _single(target, raw, context)
            for value in args:
                if str(value) == text:
                    return value
            raise _fail(target, text, context | {
                "hint": "use one of: %s" % ", ".join(map(str, args)),
            })

    if not raw:
        return Absent

    text = _single(target, raw, context)

    if isinstance(target, type) and issubclass(target, enum.Enum):
        try:
            return target[text]
        except KeyError:
            pass
        for member in target:
            if str(member.value) == text:
                return member
        raise _fail(target, text, context | {
            "hint": "use one of: %s" % ", ".join(member.name for member in target),
        })

    function = _converters.get(target, target)
    if not callable(function):
        raise TypeError(f"convert() target {target!r} is not convertible from text")

    try:
        return function(text)
    except (ValueError, TypeError, ArithmeticError) as exception:
        raise _fail(target, text, context, exception) from exception


def _single(target, raw, context):
    if len(raw) > 1:
        raise ConversionError(
            "%d values cannot be converted to a single %s" % (len(raw), _typename(target)),
            **{"hint": "pass a single value"} | context | {"input": raw[1], "raw": raw, "target": target},
        )
    return raw[0]


__all__ = (
    "convert",
    "converter",
    "converts",
    "parse_bool",
)
