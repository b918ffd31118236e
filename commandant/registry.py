"""
Commandant registry: commands, public options and build-time validation.

What this module provides
- Command: a named handler with ordered positional parameters and private options.
- Registry: owns every Command and every public Option; built once, read-only after.
- build(commands, options): data-driven construction in one call.

Builder API
    registry = Registry()
    registry.option("-v", "--verbose", descr="say more")

    @registry.command("rmdir", descr="remove a directory")
    def rmdir(dir, context): ...

    rmdir.option("-r", "--recursive")
    rmdir.option("-q", "--quite", arity="required", metavar="quiet")
    rmdir.positional("dir")

    registry.build()

Validation (Registry.build, fail fast, in this order)
- (a) at least one command                      → NoCommandDefinedError
-     unique command names                       → DuplicateCommandError
- (b) public options never collide               → DuplicateOptionError
- (c) private options never collide with each other, and only collide with a
      public option as a same-long-name shadow   → DuplicateOptionError
- (d) positionals follow required*, optional?, variadic?
                                                 → InvalidPositionalShapeError
- The reserved help (-h/--help) and version (-V/--version) spellings cannot be
  claimed by any option (DuplicateOptionError).

Scope resolution
- lookup(command, spelling): the command's private options first, then the
  public options it does not shadow. visible(command) is the resulting table.
"""
import copy
import re
from types import MappingProxyType

from .arguments import Option, Positional, Scope
from .faults import *
from .utils import *

HELP = ("-h", "--help")
VERSION = ("-V", "--version")
RESERVED = HELP + VERSION


class Command(metaclass=IntrospectableType):
    """
    A named handler plus its positional signature and private options.

    Commands are callable: calling one forwards to its handler unchanged, so a
    decorated function keeps working as a plain function.

    Lifecycle
    - Mutable (option()/positional()) until the owning registry is built;
      afterwards every mutation raises TypeError.
    - Private options are stamped with owner=<command name> on entry.
    """

    __introspectable__ = (
        "name",
        "handler",
        "descr",
        "positionals",
        "options",
    )

    __displayable__ = (
        "name",
        "descr",
        "positionals",
        "options",
    )

    def __init__(self, name, handler, /, descr=Absent, positionals=(), options=()):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not re.fullmatch(r"[^\W_][\w.-]*", name := name.strip()):
            raise ValueError(f"{type(self).__typename__} name {name!r} must be a word (and cannot start with '-')")
        if not callable(handler):
            raise TypeError(f"{type(self).__typename__} 'handler' must be callable")
        if not isinstance(descr, str | AbsentType):
            raise TypeError(f"{type(self).__typename__} 'descr' must be a string")

        self._name = name
        self._handler = handler
        self._descr = coalesce(descr, None) if not isinstance(descr, str) else (descr.strip() or None)
        self._positionals = []
        self._options = []
        self._frozen = False

        for positional in positionals:
            self.positional(positional)
        for option in options:
            self.option(option)

    def __call__(self, *args, **kwargs):
        return self._handler(*args, **kwargs)

    def _check_mutable(self):
        if self._frozen:
            raise TypeError(f"{type(self).__typename__} {self._name!r} belongs to a built registry and is read-only")

    def option(self, *names, **metadata):
        """
        Attach a private option; accepts an Option or the Option(...) arguments.

        Returns the stored (owner-stamped) Option.
        """
        self._check_mutable()
        if len(names) == 1 and isinstance(option := names[0], Option):
            if metadata:
                raise TypeError("option() accepts either an option or option arguments, not both")
            if option.owner not in (None, self._name):
                raise ValueError(f"option {option.long!r} is already owned by command {option.owner!r}")
            option = copy.replace(option, owner=self._name) if option.owner is None else option
        else:
            option = Option(*names, **metadata | {"owner": self._name})
        self._options.append(option)
        return option

    def positional(self, source, /, **metadata):
        """
        Append a positional parameter; accepts a Positional or Positional(...) arguments.

        Shape rules are checked when the registry is built, not here.
        """
        self._check_mutable()
        positional = source if isinstance(source, Positional) else Positional(source, **metadata)
        if metadata and positional is source:
            raise TypeError("positional() accepts either a positional or positional arguments, not both")
        self._positionals.append(positional)
        return positional

    @property
    def required(self):
        return tuple(filter(lambda x: x.required, self._positionals))

    @property
    def optional(self):
        return next(filter(lambda x: x.nargs == "?", self._positionals), None)

    @property
    def variadic(self):
        return next(filter(lambda x: x.variadic, self._positionals), None)


class Registry(metaclass=IntrospectableType):
    """
    Owner of every Command and every public Option.

    Built once (build()), then read-only: the tokenizer and resolver only ever
    query it, so a built registry can be shared across any number of parses.
    """

    __introspectable__ = (
        "commands",
        "options",
    )

    def __init__(self, commands=(), options=()):
        self._commands = []
        self._options = []
        self._public = {}
        self._private = {}
        self._shadows = {}
        self._built = False

        for command in commands:
            self.command(command)
        for option in options:
            self.option(option)

    @property
    def built(self):
        return self._built

    def _check_mutable(self):
        if self._built:
            raise TypeError(f"{type(self).__typename__} is built and read-only")

    def command(self, source=Absent, /, handler=Absent, **metadata):
        """
        Add a command.

        Forms
        - command(Command(...))           → stores and returns it
        - command("name", handler, ...)   → builds, stores and returns a Command
        - @command("name", ...)           → decorator; returns the Command
        """
        self._check_mutable()
        if isinstance(source, Command):
            if handler is not Absent or metadata:
                raise TypeError("command() accepts either a command or command arguments, not both")
            self._commands.append(source)
            return source

        if handler is Absent:
            @rename("command")
            def wrapper(callback, /):
                if not callable(callback):
                    raise TypeError("@command() must be applied to a callable")
                return self.command(source, callback, **metadata)

            return wrapper

        return self.command(Command(source, handler, **metadata))

    def option(self, *names, **metadata):
        """
        Add a public option; accepts an Option or the Option(...) arguments.
        """
        self._check_mutable()
        if len(names) == 1 and isinstance(option := names[0], Option):
            if metadata:
                raise TypeError("option() accepts either an option or option arguments, not both")
        else:
            option = Option(*names, **metadata)
        if option.scope is not Scope.PUBLIC:
            raise ValueError(f"option {option.long!r} is private to command {option.owner!r}")
        self._options.append(option)
        return option

    def build(self):
        """
        Validate everything and freeze the registry.

        Returns
        - self, built (calling build() again is a no-op).

        Raises
        - RegistrationError subclasses (see the module docstring); the first
          violation aborts construction.
        """
        if self._built:
            return self

        # (a) at least one command, unique names
        if not self._commands:
            raise NoCommandDefinedError("at least one command must be defined", hint="add a command before building")

        names = set()
        for command in self._commands:
            if command.name in names:
                raise DuplicateCommandError(
                    "command %r is defined more than once" % command.name,
                    input=command.name,
                    hint="give every command a unique name",
                )
            names.add(command.name)

        # (b) public options
        public = {}
        for option in self._options:
            _claim(public, option, where="public options")

        # (c) private options, per command
        private = {}
        shadows = {}
        for command in self._commands:
            table = private[command.name] = {}
            shadowed = shadows[command.name] = set()
            for option in command.options:
                _claim(table, option, where="command %r" % command.name)
                for spelling in option.names:
                    peer = public.get(spelling)
                    if peer is None:
                        continue
                    if peer.long != option.long:
                        raise DuplicateOptionError(
                            "option %r of command %r collides with public option %r" % (spelling, command.name, peer.long),
                            input=spelling,
                            command=command.name,
                            hint="rename it, or give it the long name %r to shadow the public option" % peer.long,
                        )
                if option.long in public:
                    shadowed.add(public[option.long])

        # (d) positional shapes
        for command in self._commands:
            _check_shape(command)

        self._public = public
        self._private = private
        self._shadows = shadows
        self._built = True
        for command in self._commands:
            command._frozen = True
        return self

    def get(self, name, /):
        """
        Return the command named 'name', or None.
        """
        return next(filter(lambda x: x.name == name, self._commands), None)

    def __getitem__(self, name, /):
        if (command := self.get(name)) is None:
            raise KeyError(name)
        return command

    def __contains__(self, name, /):
        return self.get(name) is not None

    def __iter__(self):
        return iter(tuple(self._commands))

    def __len__(self):
        return len(self._commands)

    def _require_built(self):
        if not self._built:
            raise TypeError(f"{type(self).__typename__} must be built before it is queried")

    def lookup(self, command, spelling, /):
        """
        Two-tier scope lookup of an option spelling ('-r', '--recursive').

        - command: Command | str | None (None → public options only)
        Returns the effective Option or None when nothing is visible.
        """
        self._require_built()
        if command is not None:
            name = command if isinstance(command, str) else command.name
            if (option := self._private[name].get(spelling)) is not None:
                return option
            if (option := self._public.get(spelling)) is not None and option not in self._shadows[name]:
                return option
            return None
        return self._public.get(spelling)

    def visible(self, command=None, /):
        """
        Every option visible to a command, keyed by each spelling.

        Private options shadow public ones that share their long name.
        """
        self._require_built()
        if command is None:
            return MappingProxyType(dict(self._public))
        name = command if isinstance(command, str) else command.name
        table = {spelling: option for spelling, option in self._public.items() if option not in self._shadows[name]}
        return MappingProxyType(table | self._private[name])

    def shadowed(self, command, /):
        """
        Public options hidden by a private counterpart inside 'command'.
        """
        self._require_built()
        name = command if isinstance(command, str) else command.name
        return frozenset(self._shadows[name])


def _claim(table, option, *, where):
    """
    Register every spelling of option into table; duplicates and reserved
    spellings raise DuplicateOptionError.
    """
    for spelling in option.names:
        if spelling in RESERVED:
            raise DuplicateOptionError(
                "option %r in %s uses a reserved name" % (spelling, where),
                input=spelling,
                hint="%s are reserved for help and version" % ", ".join(RESERVED),
            )
        if (peer := table.get(spelling)) is not None:
            raise DuplicateOptionError(
                "option %r is defined twice in %s (%r and %r)" % (spelling, where, peer.long, option.long),
                input=spelling,
                hint="keep a single definition per name",
            )
        table[spelling] = option


def _check_shape(command):
    """
    Enforce required*, then optional?, then variadic? with unique names.
    """
    seen = set()
    stage = 0  # 0: required, 1: optional taken, 2: variadic taken
    for position, positional in enumerate(command.positionals, start=1):
        if positional.name in seen:
            raise InvalidPositionalShapeError(
                "positional %r of command %r is declared twice" % (positional.name, command.name),
                input=positional.name,
                index=position,
                command=command.name,
                hint="give every positional a unique name",
            )
        seen.add(positional.name)

        rank = {None: 0, "?": 1, "*": 2}[positional.nargs]
        if stage == 2 or (rank == stage and rank > 0) or rank < stage:
            raise InvalidPositionalShapeError(
                "positional %r of command %r at %s position breaks the required, optional, variadic order" % (
                    positional.name, command.name, ordinal(position)
                ),
                input=positional.name,
                index=position,
                command=command.name,
                hint="declare required positionals first, then at most one optional, then at most one variadic",
            )
        stage = rank


def build(commands, options=(), /):
    """
    Build a registry from materialized definitions in one call.

    Parameters
    - commands: Iterable[Command]
    - options: Iterable[Option] (public)

    Returns
    - a built, read-only Registry.
    """
    return Registry(commands, options).build()


__all__ = (
    "Command",
    "Registry",
    "build",
    "HELP",
    "VERSION",
    "RESERVED",
)
