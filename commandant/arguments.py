r"""
Commandant argument definitions.

Overview
- Specs
  • Option: named argument with one long name (--name) and an optional short
    name (-n); its arity says how many value tokens it consumes.
  • Positional: argument identified by position; required, optional ("?") or
    variadic ("*").

- Enumerations
  • Arity: NONE (presence-only flag), REQUIRED (exactly one value), OPTIONAL
    (one value when the next token is not flag-shaped).
  • Scope: PUBLIC (visible to every command) or PRIVATE (visible to its owner).

- Introspection & representation
  • IntrospectableType (utils) provides stable __repr__/__rich_repr__ and exposes the
    fields listed in __introspectable__ through read-only properties (mirror()).

Metadata (sanitized on construction)
- Shared
  • descr: Absent | str | Text (short help), non-empty when provided.
  • type: converter target (type or hint understood by conversions.convert).
- Option only
  • names: exactly one long and at most one short spelling.
  • arity: Arity | "none" | "required" | "optional".
  • metavar: value label in help (value-bearing options only); defaults to the name.
  • hidden: suppress from help.
  • owner: name of the command owning a private option (stamped by the registry).
- Positional only
  • name: identifier used for help and for Context.positionals.
  • nargs: None | "?" | "*".
  • optional: a variadic that binds Absent (not []) when it receives nothing.

Validation highlights
- Long names match r"--[^\W\d_](-?[^\W_]+)*"; short names match r"-[^\W\d_]".
- Presence-only options cannot declare a metavar or a non-default type.

Quick example:
    >>> from commandant.arguments import Option, Positional
    >>> recursive = Option("-r", "--recursive", descr="remove directories recursively")
    >>> quite = Option("-q", "--quite", arity="required", metavar="quiet")
    >>> dir = Positional("dir")
    ...
"""
import builtins
import re
from enum import StrEnum

from rich.text import Text

from .conversions import converts
from .utils import *


class Arity(StrEnum):
    """
    How many value tokens an option consumes.
    """
    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


class Scope(StrEnum):
    """
    Where an option is visible: everywhere, or only within its owning command.
    """
    PUBLIC = "public"
    PRIVATE = "private"


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize the fields shared by every spec ('descr' and 'type').

    - descr: optional short description; Absent becomes None, strings are
      trimmed and must stay non-empty.
    - type: must be a converter target conversions.convert understands.

    Raises
    - TypeError: descr is not a string/Text or type is not convertible.
    - ValueError: descr is an empty string after trimming.
    """
    if not isinstance(descr := metadata["descr"], str | Text | AbsentType):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if not converts(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be convertible from text")


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate and split option names into 'short' and 'long'.

    Rules
    - at least one name; every name is a string.
    - long names: r"--[^\W\d_](-?[^\W_]+)*" (e.g., "--recursive", "--dry-run").
    - short names: r"-[^\W\d_]" (a single letter, e.g., "-r").
    - exactly one long name and at most one short name; no duplicates.

    Side effects
    - Replaces metadata["names"] with an ordered tuple (short first) and fills
      metadata["short"] / metadata["long"].
    """
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    short = long = None
    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif name in (short, long):
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        elif re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", name):
            if long is not None:
                raise ValueError(f"{cls.__typename__} must have exactly one long name, got {long!r} and {name!r}")
            long = name
        elif re.fullmatch(r"-[^\W\d_]", name):
            if short is not None:
                raise ValueError(f"{cls.__typename__} can have at most one short name, got {short!r} and {name!r}")
            short = name
        else:
            raise ValueError(f"{cls.__typename__} name {name!r} must look like '-x' or '--name'")

    if long is None:
        raise ValueError(f"{cls.__typename__} must have a long name (for example: --name)")

    metadata["short"] = short
    metadata["long"] = long
    metadata["names"] = tuple(filter(None, (short, long)))


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate arity-dependent fields of an Option.

    - arity: Arity member or its string value.
    - metavar: only value-bearing options may declare one; non-empty when given;
      defaults to the option name.
    - type: presence-only options keep the default 'str' (their value is True).
    """
    try:
        metadata["arity"] = arity = Arity(metadata["arity"])
    except ValueError:
        raise ValueError(f"{cls.__typename__} 'arity' must be one of 'none', 'required' or 'optional'") from None

    if not isinstance(metavar := metadata["metavar"], str | AbsentType):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")

    if arity is Arity.NONE:
        if metavar is not Absent:
            raise TypeError(f"presence-only {cls.__typename__} cannot specify a 'metavar'")
        if metadata["type"] is not str:
            raise TypeError(f"presence-only {cls.__typename__} cannot specify a 'type'")
        metadata["metavar"] = None
    else:
        metadata["metavar"] = coalesce(metavar, metadata["long"].removeprefix("--"))


class Option(metaclass=IntrospectableType):
    """
    Named argument specification.

    An Option is identified by its long name; Option.name (the long name
    without dashes) is the key under which its value is stored in a Context.
    Options are immutable once built; the registry stamps the owning command
    of private options with copy.replace(option, owner=...).

    Highlights
    - Spellings: one long ("--recursive") and an optional short ("-r").
    - Arity: NONE (boolean-true when present), REQUIRED, OPTIONAL.
    - Conversion: values go through conversions.convert(option.type, raw).
    - Scope: derived from 'owner' (None → PUBLIC, command name → PRIVATE).
    """

    __introspectable__ = (
        "names",
        "short",
        "long",
        "arity",
        "type",
        "metavar",
        "descr",
        "hidden",
        "owner",
    )

    __displayable__ = (
        "names",
        "arity",
        "metavar",
        "descr",
        "owner",
    )

    def __new__(
            cls,
            *names,
            arity=Arity.NONE,
            type=str,
            metavar=Absent,
            descr=Absent,
            hidden=False,
            owner=None,
    ):
        """
        Construct an Option spec with the provided metadata.

        Parameters
        - names: "-x" and/or "--name" (exactly one long name).
        - arity: Arity | "none" | "required" | "optional".
        - type: converter target for the value (ignored for presence-only options).
        - metavar: value label in help; defaults to the name.
        - descr: short description for help.
        - hidden: suppress from help output.
        - owner: owning command name; None for public options.
        """
        metadata = {
            "names": names,
            "arity": arity,
            "type": type,
            "metavar": metavar,
            "descr": descr,
            "hidden": bool(hidden),
            "owner": owner,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)

        if not isinstance(owner, str | None):
            raise TypeError(f"{cls.__typename__} 'owner' must be a command name")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def name(self):
        """
        Context key: the long name without its leading dashes.
        """
        return self._long.removeprefix("--")

    @property
    def scope(self):
        return Scope.PUBLIC if self._owner is None else Scope.PRIVATE

    @property
    def takes_value(self):
        return self._arity is not Arity.NONE

    def __replace__(self, **overrides):
        names = overrides.pop("names", self._names)
        fields = {
            "arity": self._arity,
            "type": self._type,
            "metavar": self._metavar if self.takes_value else Absent,
            "descr": Absent if self._descr is None else self._descr,
            "hidden": self._hidden,
            "owner": self._owner,
        } | overrides
        return builtins.type(self)(*names, **fields)


class Positional(metaclass=IntrospectableType):
    """
    Positional argument specification.

    Shapes
    - nargs=None: required, exactly one token.
    - nargs="?":  optional, one token when available; Absent otherwise.
    - nargs="*":  variadic, every remaining token as a list ([] when none, or
                  Absent when declared with optional=True).

    The element converter is 'type'; variadics convert each token separately.
    """

    __introspectable__ = (
        "name",
        "type",
        "nargs",
        "descr",
        "optional",
    )

    def __new__(
            cls,
            name,
            /,
            type=str,
            nargs=None,
            descr=Absent,
            optional=False,
    ):
        """
        Construct a Positional spec.

        Parameters
        - name: identifier shown in help and used as the Context.positionals key.
        - type: converter target applied to each token.
        - nargs: None | "?" | "*".
        - descr: short description for help.
        - optional: for nargs="*" only; bind Absent instead of [] when empty.
        """
        metadata = {
            "name": name,
            "type": type,
            "nargs": nargs,
            "descr": descr,
            "optional": bool(optional),
        }
        _sanitize_metadata(cls, metadata)

        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not re.fullmatch(r"[^\W\d][\w-]*", name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' must be an identifier-like string")
        metadata["name"] = name

        if nargs not in (None, "?", "*"):
            raise ValueError(f"{cls.__typename__} 'nargs' must be None, '?' or '*'")
        if optional and nargs != "*":
            raise TypeError(f"only a variadic {cls.__typename__} can be declared optional; use nargs='?'")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def required(self):
        return self._nargs is None

    @property
    def variadic(self):
        return self._nargs == "*"

    @property
    def metavar(self):
        """
        Usage form: <name>, [name], <name...> or [name...].
        """
        match self._nargs:
            case None:
                return f"<{self._name}>"
            case "?":
                return f"[{self._name}]"
            case _:
                return f"[{self._name}...]" if self._optional else f"<{self._name}...>"


__all__ = (
    # Enumerations
    "Arity",
    "Scope",

    # Classes (specifications)
    "Option",
    "Positional",
)
