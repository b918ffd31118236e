"""
Commandant dispatcher and runner.

- dispatch(bound): call the bound command's handler with its converted
  positional values followed by the runtime Context; return what it returns.
- Program: the outer runner. It owns a built registry, program metadata and
  the presentation flags, and turns one argv into exactly one outcome:
  help text, the version line, a handler call, or a single parse fault.
- run(registry, argv, **metadata): Program(registry, **metadata).run(argv).

Fault surfacing
- Registration faults are raised while the Program is constructed.
- Parse faults go through faults.trigger() together with the contextual usage
  line: raised when shell=False, printed to stderr with exit status 1 when
  shell=True.
"""
import os.path
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .faults import *
from .helper import Metadata, render, render_usage, render_version
from .registry import Registry
from .resolver import Bound, HelpRequest, VersionRequest, parse
from .utils import *


def dispatch(bound, /):
    """
    Invoke the handler of a successful parse.

    Call shape
    - handler(*required, optional, variadic, context), following the declared
      positional order; Absent stands in for an unfilled optional positional.

    Handler exceptions propagate untouched.
    """
    if not isinstance(bound, Bound):
        raise TypeError("dispatch() argument must be a bound parse result")
    return bound.command.handler(*bound.values, bound.context)


def _tokens(argv):
    if argv is Absent:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("run() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("run() argument must be a string or an iterable of strings")


class Program:
    """
    Runner binding a registry to program metadata and presentation flags.

    Parameters
    - registry: Registry (built here when it is not built yet).
    - name: program name shown in usage, help and fault headers; defaults to
      __main__.__prog__ or the script name.
    - version: version string (enables -V/--version in program help).
    - descr: program description shown in program help.
    - shell: print faults to stderr and exit(1) instead of raising.
    - colorful: style help and faults with the palette.
    - fancy: wrap help, version and faults in a panel.
    """

    def __init__(self, registry, /, name=Absent, version=None, descr=None, *, shell=False, colorful=False, fancy=False):
        if not isinstance(registry, Registry):
            raise TypeError(f"{type(self).__name__.lower()}() first argument must be a registry")
        if name is not Absent and not isinstance(name, str):
            raise TypeError(f"{type(self).__name__.lower()} 'name' must be a string")
        if not isinstance(version, str | None):
            raise TypeError(f"{type(self).__name__.lower()} 'version' must be a string")
        if not isinstance(descr, str | Text | None):
            raise TypeError(f"{type(self).__name__.lower()} 'descr' must be a string")

        self._registry = registry.build()
        self._metadata = Metadata(
            coalesce(name, None) or getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0])),
            version,
            descr,
        )
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

    registry = mirror("registry")
    shell = mirror("shell")
    colorful = mirror("colorful")
    fancy = mirror("fancy")

    @property
    def metadata(self):
        return self._metadata

    @property
    def name(self):
        return self._metadata.name

    def parse(self, argv=Absent, /):
        """
        Parse without dispatching; faults are raised as-is.

        Returns
        - Bound | HelpRequest | VersionRequest
        """
        return parse(
            self._registry,
            _tokens(argv),
            program=self._metadata,
            versioned=bool(self._metadata.version),
        )

    def _print(self, renderable, title):
        if self._fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[", " ", f"{self.name} {title}".upper(), " ", "]"),
                title_align="left",
            )
        Console().print(renderable)

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this program's runtime options (see faults.trigger).
        """
        trigger(fault, **{
            "program": self.name,
            "shell": self._shell,
            "colorful": self._colorful,
            "fancy": self._fancy,
        } | options)

    def run(self, argv=Absent, /):
        """
        Parse argv and act on the outcome.

        Parameters
        - argv: Absent (sys.argv[1:]), a shell-like string (shlex.split) or an
          iterable of strings.

        Returns
        - the handler's return value, or None after printing help/version.

        Raises
        - ParseError subclasses when shell=False (usage attached as 'usage').
        - SystemExit(1) on a parse fault when shell=True.
        """
        try:
            outcome = self.parse(argv)
        except ParseError as fault:
            usage = render_usage(self._registry, fault.command, program=self._metadata, colorful=self._colorful)
            self.trigger(fault, usage=usage)
            return None

        match outcome:
            case HelpRequest():
                self._print(render(
                    self._registry,
                    outcome.command,
                    program=self._metadata,
                    colorful=self._colorful,
                ), "help")
            case VersionRequest():
                self._print(render_version(self._metadata, colorful=self._colorful), "version")
            case Bound():
                return dispatch(outcome)
        return None

    def __repr__(self):
        return "program(name=%r, version=%r, commands=%r)" % (
            self.name, self._metadata.version, tuple(command.name for command in self._registry),
        )


def run(registry, argv=Absent, /, **metadata):
    """
    Shortcut for Program(registry, **metadata).run(argv).
    """
    return Program(registry, **metadata).run(argv)


__all__ = (
    "dispatch",
    "Program",
    "run",
)
