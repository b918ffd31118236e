"""
Commandant help, usage and version rendering.

Everything renders to rich Text; str(text) is the plain form. Styling is
applied only when colorful=True, using a palette that __main__.__styles__ can
override (same keys as listed in render()).

- render(registry, command=None, *, program=None): full help for the program
  (a "<name> <version>" header when a version is set, commands and public options) or for one command (its signature, positionals,
  private options, then the public options it does not shadow).
- render_usage(registry, command=None, *, program=None): the single usage line
  shown next to parse faults.
- render_version(program): "<name> <version>"; ValueError without a version.
"""
import os.path
import sys
from collections import defaultdict, namedtuple

from rich.text import Text

from .arguments import Arity
from .registry import HELP, VERSION

Metadata = namedtuple("Metadata", ("name", "version", "descr"), defaults=(None, None, None))
Metadata.__doc__ = """
Program metadata used verbatim by the help and version renderers.
"""

_indent = 2
_column = 24


def _palette(colorful):
    styles = defaultdict(str, {
        # === Head sections ===
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "program-version": "bold #00E6FF",
        "usage-section": "bold #36C5F0",
        "description-section": "italic #A3A3A3",

        # === Groups / arguments ===
        "group-label": "bold #FFFFFF",
        "argument-description": "#9CA3AF",
        "option-name": "bold #00E6FF",
        "flag-name": "bold #22C55E",
        "metavar": "bold #FFD600",
        "greedy-metavar": "bold italic #FFD600",
        "command-name": "bold #36C5F0",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def _text(fragment, style=""):
    if isinstance(fragment, Text):
        return fragment.copy()
    return Text(str(fragment), style)


def _name(program):
    return (program and program.name) or getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0]))


def _signature(command, styler):
    parts = []
    for positional in command.positionals:
        parts.append(_text(positional.metavar, styler("greedy-metavar" if positional.variadic else "metavar")))
    return Text(" ").join(parts)


def _label(names, arity, metavar, styler):
    """
    '-r, --recursive', '    --only-long', '-q, --quite <quiet>', '--level [<level>]'.
    """
    short = next((name for name in names if not name.startswith("--")), None)
    long = next(name for name in names if name.startswith("--"))
    style = styler("flag-name" if arity is Arity.NONE else "option-name")

    label = Text(" " * _indent)
    label.append(_text(short, style) + Text(", ") if short else Text(" " * 4))
    label.append(_text(long, style))
    match arity:
        case Arity.REQUIRED:
            label.append(" ").append(Text.assemble("<", _text(metavar, styler("metavar")), ">"))
        case Arity.OPTIONAL:
            label.append(" ").append(Text.assemble("[<", _text(metavar, styler("metavar")), ">]"))
    return label


def _rows(title, rows, styler):
    """
    A titled group of (label, description) rows with a hanging description column.
    """
    group = Text()
    group.append(_text(title, styler("group-label"))).append(":\n")
    for label, descr in rows:
        section = label.copy()
        if descr:
            if len(section) >= _column - 1:
                section.append("\n").append(" " * _column)
            else:
                section.append(" " * (_column - len(section)))
            section.append(_text(descr, styler("argument-description")))
        group.append(section).append("\n")
    return group


def _option_rows(options, styler):
    return [
        (_label(option.names, option.arity, option.metavar, styler), option.descr)
        for option in options
        if not option.hidden
    ]


def _builtin_rows(styler, *, version):
    rows = [(_label(HELP, Arity.NONE, None, styler), "show this help and exit")]
    if version:
        rows.append((_label(VERSION, Arity.NONE, None, styler), "show the version and exit"))
    return rows


def render_usage(registry, command=None, /, *, program=None, colorful=False):
    """
    One-line usage: 'usage: prog <command> [options]' or
    'usage: prog rmdir [options] <dir>'.
    """
    styler = _palette(colorful)
    if isinstance(command, str):
        command = registry[command]

    usage = Text()
    usage.append("usage", styler("usage-label")).append(": ")
    usage.append(_text(_name(program), styler("program-name")))
    if command is None:
        usage.append(" ").append(_text("<command>", styler("metavar")))
        usage.append(" ").append(_text("[options]", styler("usage-section")))
        usage.append(" ").append(_text("[args...]", styler("usage-section")))
    else:
        usage.append(" ").append(_text(command.name, styler("command-name")))
        usage.append(" ").append(_text("[options]", styler("usage-section")))
        if signature := _signature(command, styler):
            usage.append(" ").append(signature)
    return usage


def render(registry, command=None, /, *, program=None, colorful=False):
    """
    Render help text for the program or for one command.

    Parameters
    - registry: built Registry.
    - command: None (program help), a Command, or a command name.
    - program: Metadata (name, version, descr); the name defaults to the script name.
    - colorful: apply the palette.

    Palette keys
    - usage-label, program-name, program-version, usage-section, description-section
    - group-label, argument-description
    - option-name, flag-name, metavar, greedy-metavar, command-name

    Returns
    - rich.text.Text
    """
    styler = _palette(colorful)
    if isinstance(command, str):
        command = registry[command]
    version = bool(program and program.version)

    renders = [render_usage(registry, command, program=program, colorful=colorful)]

    if command is None:
        if version:
            renders.insert(0, render_version(program, colorful=colorful))
        if program and program.descr:
            renders.append(_text(program.descr, styler("description-section")))

        renders.append(_rows("commands", [
            (Text(" " * _indent) + _text(entry.name, styler("command-name")), entry.descr)
            for entry in registry
        ], styler))

        renders.append(_rows(
            "options", _builtin_rows(styler, version=version) + _option_rows(registry.options, styler), styler,
        ))
    else:
        if command.descr:
            renders.append(_text(command.descr, styler("description-section")))

        if command.positionals:
            renders.append(_rows("arguments", [
                (Text(" " * _indent) + _text(positional.metavar, styler("metavar")), positional.descr)
                for positional in command.positionals
            ], styler))

        if rows := _option_rows(command.options, styler):
            renders.append(_rows("options", rows, styler))

        shadowed = registry.shadowed(command)
        public = [option for option in registry.options if option not in shadowed]
        renders.append(_rows("global options", _builtin_rows(styler, version=False) + _option_rows(public, styler), styler))

    sections = []
    for section in renders:
        section = section.copy()
        section.rstrip()
        sections.append(section)
    return Text("\n\n").join(sections)


def render_version(program, /, *, colorful=False):
    """
    Render '<name> <version>' exactly as the version string was given.

    Raises
    - ValueError: the program declares no version.
    """
    if not (program and program.version):
        raise ValueError("render_version() requires a program version")
    styler = _palette(colorful)
    return Text(" ").join((
        _text(_name(program), styler("program-name")),
        _text(program.version, styler("program-version")),
    ))


__all__ = (
    "Metadata",
    "render",
    "render_usage",
    "render_version",
)
