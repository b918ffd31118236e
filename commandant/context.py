"""
Commandant runtime context: the read-only view a handler receives.

A Context maps option names (long name without dashes) to bound values:
- presence-only flags and value-less optional options → True
- value options → the converted value
- options the user never supplied → missing key (never stored as False)

Accessors
- get(name) → value | Absent
- get_or(name, default) → value, or default only when the key is missing
- get_or_else(name, factory) → value, or factory() when missing
- raw(name) → the raw value tokens as typed (tuple[str, ...])
- get_as(name, target) → read-time conversion of the raw tokens
"""
from collections.abc import Mapping
from types import MappingProxyType

from .conversions import convert
from .utils import *


class Binding:
    """
    One resolved option occurrence: its definition, raw tokens and value.
    """

    __slots__ = ("_option", "_raw", "_value", "_index")

    def __init__(self, option, raw, value, index=None):
        self._option = option
        self._raw = tuple(raw)
        self._value = value
        self._index = index

    option = mirror("option")
    raw = mirror("raw")

    @property
    def value(self):
        return self._value

    index = mirror("index")

    def __eq__(self, other):
        if not isinstance(other, Binding):
            return NotImplemented
        return (self._option, self._raw, self._value) == (other._option, other._raw, other._value)

    def __hash__(self):
        return hash((self._option.long, self._raw))

    def __repr__(self):
        return "binding(option=%r, raw=%r, value=%r)" % (self._option.long, self._raw, self._value)


class Context(Mapping):
    """
    Read-only mapping over the options bound for one parse.

    Attributes
    - command: name of the bound command.
    - positionals: mapping of positional name to converted value, in order.
    - program: program metadata passed by the runner (or None).
    - bindings: mapping of option name to Binding.
    """

    def __init__(self, bindings=(), /, *, command=None, positionals=(), program=None):
        if isinstance(bindings, Mapping):
            bindings = bindings.values()
        self._bindings = {binding.option.name: binding for binding in bindings}
        self._command = command
        self._positionals = dict(positionals)
        self._program = program

    command = mirror("command")
    positionals = mirror("positionals")

    @property
    def program(self):
        return self._program

    bindings = mirror("bindings")

    def __getitem__(self, name, /):
        return self._bindings[name].value

    def __iter__(self):
        return iter(self._bindings)

    def __len__(self):
        return len(self._bindings)

    def __contains__(self, name, /):
        return name in self._bindings

    def has(self, name, /):
        return name in self._bindings

    def get(self, name, /, default=Absent):
        """
        Return the bound value for name, or Absent when it was never supplied.
        """
        try:
            return self._bindings[name].value
        except KeyError:
            return default

    def get_or(self, name, default, /):
        """
        Return the bound value, substituting default only when name is missing.

        A supplied value is returned as-is even when it is falsy (False, 0, "").
        """
        return self.get(name, default)

    def get_or_else(self, name, factory, /):
        """
        Like get_or(), but the default is computed by factory() on demand.
        """
        if not callable(factory):
            raise TypeError("get_or_else() second argument must be callable")
        try:
            return self._bindings[name].value
        except KeyError:
            return factory()

    def raw(self, name, /):
        """
        Raw value tokens for name; () for flags and for missing options.
        """
        try:
            return self._bindings[name].raw
        except KeyError:
            return ()

    def get_as(self, name, target, /):
        """
        Convert the raw tokens of name to target at read time.

        Missing options and flags without a value yield what convert() gives
        for no tokens (Absent for scalars, [] for lists, None for optionals).
        """
        return convert(target, self.raw(name), argument=name, command=self._command)

    def __repr__(self):
        return "context(command=%r, options=%r, positionals=%r)" % (
            self._command, {name: binding.value for name, binding in self._bindings.items()}, self._positionals,
        )

    def __rich_repr__(self):
        yield "command", self._command
        yield "options", MappingProxyType({name: binding.value for name, binding in self._bindings.items()})
        yield "positionals", self.positionals


__all__ = (
    "Binding",
    "Context",
)
