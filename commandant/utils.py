"""
Commandant utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the definition, parsing and rendering layers.

Overview
- AbsentType / Absent
  • Singleton sentinel for “not supplied”, distinct from None, False, 0, "" and [].
  • Falsey, printable as "Absent", renders dimmed in Rich, non-subclassable.

- coalesce(value, default=None)
  • Replace Absent with a concrete default, preserving every other value (falsey ones included).

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables for clean tracebacks.

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr) as an immutable view.

- ordinal(number)
  • Human-friendly ordinal labels (“first”, “second”, “11th”) for position-first messages.

- IntrospectableType
  • Metaclass shared by argument specs and registry objects: __typename__,
    mirror() properties for __introspectable__, stable __repr__/__rich_repr__.

Stability and contract
- Names in __all__ are re-exported by the package; everything else may change.

Quick examples
    >>> coalesce(Absent, "fallback")
    'fallback'
    >>> coalesce(False, "fallback")
    False
    >>> ordinal(3)
    'third'
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final

from rich.text import Text


@final
class AbsentType:
    """
    Sentinel type representing a value that was never supplied.

    Runtime contexts, optional positionals and unfilled variadics use the single
    instance, Absent, so a handler can tell “the user did not say” apart from
    “the user said false/zero/empty”.

    Characteristics
    - Boolean-false: bool(Absent) is False, but it is not None and not False.
    - Printable: repr(Absent) -> "Absent"; Rich renders it dimmed.
    - Non-subclassable and a singleton per process: AbsentType() is Absent.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., int | AbsentType).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Absent"

    def __rich__(self):
        return Text(repr(self), style="dim")

    def __reduce__(self):
        # Unpickling must hand back the singleton, not a copy.
        return "Absent"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'AbsentType' is not an acceptable base type")


Absent = AbsentType()
"""
The “not supplied” sentinel.

Notes
- Singleton: identity checks (`value is Absent`) are the supported comparison.
- Never stored in a runtime context: absent options are simply missing keys.
"""


def coalesce(object, default=None, /):
    """
    Resolve the Absent sentinel to a concrete default.

    Returns object unless it is Absent, in which case default is returned.
    Falsey values like None, 0, "", False or [] are preserved as-is.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Absent, "fallback") -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Absent else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (updated in place)
    - rename(name)           -> decorator

    Raises
    - TypeError on a non-callable target, a non-string name, a built-in that
      refuses attribute updates, or a wrong number of arguments.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Shallow read-only view of a container value.

    - Sequence (non-string) → tuple
    - Mapping               → MappingProxyType
    - Set                   → frozenset
    - anything else         → returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The property reads "_{name}" from the instance and returns it through
    _freeze, so containers come back as tuples, mapping proxies or frozensets.

    Example
    - Given self._options, declare options = mirror("options").
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


class IntrospectableType(type):
    """
    Metaclass for introspectable, read-only definition objects.

    - __typename__ derived from the class name (camel-case split with hyphens);
      it is used in validation messages and help output.
    - every name listed in __introspectable__ becomes a mirror() property.
    - stable __repr__/__rich_repr__ limited to __displayable__ when set.
    """
    __introspectable__ = ()
    __displayable__ = Absent

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(names=('-r', '--recursive'), arity=<Arity.NONE: 'none'>, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",

    # Types
    "AbsentType",
    "IntrospectableType",

    # Constants
    "Absent",
)
