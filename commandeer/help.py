"""
Commandeer help renderer.

render_help() turns one command declaration (plus the global options of its
parser and the command path leading to it) into a rich Text:

    <description>

    usage: app [options] sub [--verbose] [--color {red|green}] <file>

    global options:
      --verbose, -v       print more

    options:
      --color, -c {red|green}
                          pick a color

    parameters:
      file                input file

    commands:
      add                 add two numbers

Palette keys (overridable by a __styles__ mapping in __main__)
- usage-label, program-name, command-name
- option-name, parameter-name
- section-label, description

When colorful is False the result carries no styles; .plain gives the string.
"""
from collections import defaultdict, deque

from rich.console import Console
from rich.containers import Lines
from rich.text import Text

from .commands import CommandDecl
from .options import OptionKind
from .utils import Unset, coalesce


def render_help(decl, global_options=(), /, *, path=Unset, colorful=False, width=80):
    """
    Render help for `decl`.

    Parameters
    - decl: the CommandDecl to describe.
    - global_options: the parser's global OptionDecls, in declaration order.
    - path: command names from the root down to `decl` (defaults to decl.path).
    - colorful: apply the palette.
    - width: wrapping width in cells.
    """
    if not isinstance(decl, CommandDecl):
        raise TypeError("render_help() first argument must be a command-decl")
    if not isinstance(width, int) or width < 20:
        raise ValueError("render_help() 'width' must be an integer of at least 20")
    path = tuple(coalesce(path, [step.name for step in decl.path]))
    global_options = tuple(global_options)

    console = Console(width=width)
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",  # cyan headline
        "program-name": "bold #FF4D94",  # magenta-pink brand
        "command-name": "bold #36C5F0",  # sky-blue sub-commands
        "option-name": "bold #00E6FF",
        "parameter-name": "bold #FFD600",  # amber positionals
        "section-label": "bold #FFFFFF",
        "description": "#9CA3AF",  # muted gray
    } | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    def metavar(option):
        if option.domain:
            return Text.assemble("{", Text("|").join(text(value, "parameter-name") for value in option.domain), "}")
        return Text.assemble("<", text(option.name, "parameter-name"), ">")

    def names(option):
        label = text("--" + option.name, "option-name")
        if option.alias is not None:
            label.append(", ").append(text("-" + option.alias, "option-name"))
        if option.kind is OptionKind.VARIABLE:
            label.append(" ").append(metavar(option))
        return label

    options = [option for option in decl._local_options.values() if option.kind is not OptionKind.PARAMETER]

    # usage line, wrapped with a hanging indent under the first item
    usage = Text()
    usage.append(text("usage", "usage-label")).append(": ")
    usage.append(text(path[0], "program-name"))
    offset = len(usage) + 1

    inputs = deque()
    if global_options or options:
        inputs.append(Text("[options]"))
    for name in path[1:]:
        inputs.append(text(name, "command-name"))
    for option in (*global_options, *options):
        if option.kind is OptionKind.SWITCH:
            inputs.append(Text.assemble("[", text("--" + option.name, "option-name"), "]"))
        else:
            inputs.append(Text.assemble("[", text("--" + option.name, "option-name"), " ", metavar(option), "]"))
    for parameter in decl._parameters:
        inputs.append(metavar(parameter))

    lines = Lines()
    while inputs:
        item = inputs.popleft()
        if lines and len(lines[-1]) + 1 + len(item) <= width - offset:
            lines[-1].append(" ").append(item)
        else:
            lines.append(item)
    for index, line in enumerate(lines):
        usage.append(" " if index == 0 else "\n" + " " * offset).append(line)

    # details: two columns, the description wrapped under a hanging indent
    sections = [
        ("global options", [(names(option), option.descr) for option in global_options]),
        ("options", [(names(option), option.descr) for option in options]),
        ("parameters", [(text(parameter.name, "parameter-name"), parameter.descr) for parameter in decl._parameters]),
        ("commands", [(text(name, "command-name"), child.descr) for name, child in decl._subcommands.items()]),
    ]

    padding = 2
    indent = min(
        max((len(left) for _, rows in sections for left, _ in rows), default=0) + padding + 2,
        max(width // 3, padding + 4),
    )

    renders = []
    if decl.descr:
        renders.append(text(decl.descr, "description"))
    renders.append(usage)

    for label, rows in sections:
        if not rows:
            continue
        section = Text()
        section.append(text(label, "section-label")).append(":")
        for left, descr in rows:
            section.append("\n").append(" " * padding).append(left)
            if not descr:
                continue
            if padding + len(left) + 2 > indent:
                section.append("\n").append(" " * indent)
            else:
                section.append(" " * (indent - padding - len(left)))
            wrapped = text(descr, "description").wrap(console, width - indent)
            for index, line in enumerate(wrapped):
                if index:
                    section.append("\n").append(" " * indent)
                section.append(line)
        renders.append(section)

    return Text("\n\n").join(renders)


__all__ = (
    "render_help",
)
