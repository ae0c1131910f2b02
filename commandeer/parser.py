"""
Commandeer parser: the declaration root, global options, auto-help and the parse engine.

What this module provides
- Delimiter: how a value may be packed into its option token
  (WHITESPACE disables packing; EQUALS allows --name=value / -n=value; COLON
  allows --name:value / -n:value).
- CommandParser: owns the root CommandDecl, the parser-wide global options, the
  auto-help configuration and the result of the last parse.

Token classification (left to right, one pass, first error aborts)
- "--name[<d>value]": long option, resolved globally first, then against the
  local options of the current (deepest) block.
- "-c[<d>value]" / "-abc": alias, or a run of switch aliases.
- anything else ("-" included): a sub-command name of the current block, else
  the next unfilled parameter of the current block.

Results
- blocks: one CommandBlock per command of the matched path (root first).
- global values: name -> (value, index of the block that was current when the
  option first appeared).
- auto_help_triggered: the auto-help switch was seen; help was written to the
  configured sink and the result reset to a single empty root block.

Quick start
    >>> parser = CommandParser("app", "demo application")
    >>> parser.add_global_switch("verbose", "v")
    >>> parser.root.add_variable("name", "n")
    >>> parser.parse_args(["app", "--verbose", "-n", "Jane"])
    1
"""
import logging
import os.path
import shlex
import sys
from collections import namedtuple
from collections.abc import Iterable
from enum import Enum

from rich.console import Console

from .commands import CommandBlock, CommandDecl, Scope, ScopeRegistry
from .faults import *
from .help import render_help
from .options import OptionDecl, OptionKind, sanitize_alias, sanitize_name
from .utils import DeclarationType, Unset, coalesce, ordinal

logger = logging.getLogger(__name__)

AutoHelp = namedtuple("AutoHelp", ("name", "alias", "descr", "sink"))


class Delimiter(Enum):
    """Character allowed between an option token and a packed value."""
    WHITESPACE = None
    EQUALS = "="
    COLON = ":"


class CommandParser(metaclass=DeclarationType):
    """
    Parser front-end and parse engine.

    Responsibilities
    - Declaration: the root CommandDecl (named after the program) and the global
      options shared by every command.
    - Auto-help: an optional global switch that, when seen, writes help for the
      command it appeared in and turns the parse into an empty result.
    - Parsing: parse_args() walks argv once and records blocks and values.
    - Results: block/global accessors and help rendering.

    Configuration
    - delimiter: a Delimiter member (WHITESPACE by default).
    - colorful: style rich output (print_help, auto-help to a Console).
    - width: wrapping width for rendered help.
    """
    __introspectable__ = (
        "root",
        "delimiter",
        "global_options",
        "blocks",
        "auto_help_triggered",
        "colorful",
        "width",
    )

    __displayable__ = (
        "root",
        "delimiter",
        "global_options",
        "auto_help_triggered",
    )

    def __init__(self, name=Unset, descr=Unset, /, *, delimiter=Delimiter.WHITESPACE, colorful=False, width=80):
        if not isinstance(delimiter, Delimiter):
            raise TypeError(f"{type(self).__typename__} 'delimiter' must be a delimiter")
        if not isinstance(colorful, bool):
            raise TypeError(f"{type(self).__typename__} 'colorful' must be a boolean")
        if not isinstance(width, int) or width < 20:
            raise ValueError(f"{type(self).__typename__} 'width' must be an integer of at least 20")

        self._registry = ScopeRegistry()
        self._root = CommandDecl(coalesce(name, os.path.basename(sys.argv[0]) or "app"), descr, registry=self._registry)
        self._delimiter = delimiter
        self._colorful = colorful
        self._width = width

        self._global_options = {}
        self._global_aliases = {}
        self._auto_help = None
        self._help_option = None

        self._blocks = []
        self._global_values = {}
        self._auto_help_triggered = False

        self._tokens = ()
        self._index = 0
        self._parameter = 0

    # --- declaration -----------------------------------------------------

    def add_global_option(self, kind, name, alias=Unset, /):
        """
        Declare an option visible from every command and return its declaration.

        Raises
        - InvalidOptionTypeError: `kind` is PARAMETER.
        - DuplicateOptionError: the name or alias is already declared (globally,
          or locally by any command).
        """
        option = OptionDecl(kind, name)
        if kind is OptionKind.PARAMETER:
            raise InvalidOptionTypeError(f"parameter {name!r} cannot be declared global")
        alias = sanitize_alias(type(option), alias)

        collides = (config := self._auto_help) is not None and config.name not in self._global_options and (
            name == config.name or (alias is not None and alias == config.alias)
        )
        self._declare_global(option, alias)
        if collides:
            logger.info("global option %r collides with the auto-help option; auto-help disabled", name)
            self.disable_auto_help()
        return option

    def add_global_switch(self, name, alias=Unset, /):
        return self.add_global_option(OptionKind.SWITCH, name, alias)

    def add_global_variable(self, name, alias=Unset, /):
        return self.add_global_option(OptionKind.VARIABLE, name, alias)

    def _declare_global(self, option, alias, /):
        name = option.name
        if name in self._global_options:
            raise DuplicateOptionError(f"global option {name!r} is already declared", name=name)
        if alias is not None and alias in self._global_aliases:
            raise DuplicateOptionError(
                f"alias {alias!r} is already used by global option {self._global_aliases[alias].name!r}",
                name=name,
            )
        self._registry.claim(Scope.GLOBAL, name, alias)
        self._global_options[name] = option
        if alias is not None:
            option._set_alias(alias)
            self._global_aliases[alias] = option
        logger.debug("declared global %s %r", option.kind.label, name)
        return option

    def enable_auto_help(self, name="help", alias="h", sink=Unset, /, *, descr="show this help message and exit"):
        """
        Configure the auto-help switch; it is declared on the next parse.

        Parameters
        - name / alias: the switch's long name and optional one-character alias.
        - sink: a rich Console (styled when the parser is colorful) or any object
          with a write(str) method; defaults to a stdout Console.

        Raises
        - DuplicateOptionError: the name or alias is already used by a global option.
        """
        name = sanitize_name(OptionDecl, name)
        alias = sanitize_alias(OptionDecl, alias)
        if sink is Unset:
            sink = Console()
        if not isinstance(sink, Console) and not callable(getattr(sink, "write", None)):
            raise TypeError(f"{type(self).__typename__} auto-help sink must be a console or have a write() method")

        if (option := self._global_options.get(name)) is not None and option is not self._help_option:
            raise DuplicateOptionError(f"auto-help option {name!r} is already declared as a global option", name=name)
        if (option := self._global_aliases.get(alias)) is not None and option is not self._help_option:
            raise DuplicateOptionError(f"auto-help alias {alias!r} is already used by global option {option.name!r}", name=name)

        self._auto_help = AutoHelp(name, alias, descr, sink)
        return self

    def disable_auto_help(self):
        self._auto_help = None
        return self

    @property
    def auto_help_enabled(self):
        return self._auto_help is not None

    # --- parsing ---------------------------------------------------------

    def parse_args(self, argv=Unset, /):
        """
        Parse an argument vector (program name first) and return the block count.

        Parameters
        - argv:
          • Unset: sys.argv.
          • str: shell-like string, split via shlex.split.
          • Iterable[str]: used as-is.

        Raises
        - CommandSyntaxError (a subclass): the first offending token; the partial
          result is discarded on the next parse.
        - OutOfMemoryError: memory ran out while recording the result.
        """
        if argv is Unset:
            tokens = list(sys.argv)
        elif isinstance(argv, str):
            tokens = shlex.split(argv)
        elif isinstance(argv, Iterable):
            tokens = list(argv)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse_args() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse_args() argument must be a string or an iterable of strings")

        self._blocks.clear()
        self._global_values.clear()
        self._auto_help_triggered = False

        try:
            self._declare_auto_help()
            self._parseargs(tokens)
        except MemoryError as error:
            raise OutOfMemoryError("ran out of memory while parsing arguments") from error

        return len(self._blocks)

    def _declare_auto_help(self):
        if (config := self._auto_help) is None or config.name in self._global_options:
            return
        option = OptionDecl(OptionKind.SWITCH, config.name).set_description(config.descr)
        self._help_option = self._declare_global(option, config.alias)

    def _parseargs(self, tokens):
        self._tokens = tokens
        self._blocks.append(CommandBlock(self._root))
        self._parameter = 0
        self._index = 1

        while self._index < len(self._tokens):
            token = self._tokens[self._index]
            if token.startswith("--"):
                logger.debug("token %d %r: long option", self._index, token)
                self._parse_long(token)
            elif token.startswith("-") and len(token) > 1:
                logger.debug("token %d %r: alias", self._index, token)
                self._parse_short(token)
            else:
                logger.debug("token %d %r: plain argument", self._index, token)
                self._parse_plain(token)
            self._index += 1

        if (config := self._auto_help) is not None and config.name in self._global_values:
            _, index = self._global_values[config.name]
            logger.info("auto-help triggered for command %r", self._blocks[index].name)
            self._write_help(config.sink, index)
            self._blocks[:] = [CommandBlock(self._root)]
            self._global_values.clear()
            self._auto_help_triggered = True

    def _resolve(self, name, token):
        if (option := self._global_options.get(name)) is not None:
            return option
        option = self._blocks[-1].decl.find_option(name)
        if option is None or option.kind is OptionKind.PARAMETER:
            raise UnknownOptionError(
                f"{ordinal(self._index)} argument: unknown option {token!r} for command {self._blocks[-1].name!r}",
                token=token,
                index=self._index,
            )
        return option

    def _resolve_alias(self, alias, token):
        option = self._global_aliases.get(alias) or self._blocks[-1].decl.find_alias(alias)
        if option is None:
            raise UnknownOptionError(
                f"{ordinal(self._index)} argument: unknown option '-{alias}' in {token!r} for command {self._blocks[-1].name!r}",
                token=token,
                index=self._index,
            )
        return option

    def _unpack(self, body):
        # split "name<d>value"; value is None when nothing was packed
        if (delimiter := self._delimiter.value) is None:
            return body, None
        name, found, value = body.partition(delimiter)
        return name, value if found else None

    def _parse_long(self, token):
        name, packed = self._unpack(token[2:])
        option = self._resolve(name, token)
        self._parse_option(option, token, packed)

    def _parse_short(self, token):
        body = token[1:]
        if len(body) == 1 or (self._delimiter.value is not None and body[1] == self._delimiter.value):
            # body is '<alias>' or '<alias><delimiter><value>'
            packed = body[2:] if len(body) > 1 else None
            option = self._resolve_alias(body[0], token)
            self._parse_option(option, token, packed)
            return

        options = []
        for alias in body:
            option = self._resolve_alias(alias, token)
            if option.kind is not OptionKind.SWITCH:
                raise InvalidAliasError(
                    f"{ordinal(self._index)} argument: option '-{alias}' takes a value and cannot be grouped in {token!r}",
                    token=token,
                    index=self._index,
                )
            options.append(option)
        for option in options:
            self._record(option, "", token)

    def _parse_option(self, option, token, packed):
        if option.kind is OptionKind.SWITCH:
            if packed is not None:
                raise InvalidValueError(
                    f"{ordinal(self._index)} argument: switch {option.name!r} does not take a value (got {packed!r})",
                    token=token,
                    index=self._index,
                )
            self._record(option, "", token)
        elif packed is not None:
            self._record(option, packed, token)
        else:
            value = self._take_value(option, token)
            self._record(option, value, value)

    def _take_value(self, option, token):
        following = self._index + 1
        if following >= len(self._tokens) or self._tokens[following].startswith("-"):
            raise MissingVariableValueError(
                f"{ordinal(self._index)} argument: variable {option.name!r} expects a value after {token!r}",
                token=token,
                index=self._index,
            )
        self._index = following
        return self._tokens[following]

    def _parse_plain(self, token):
        block = self._blocks[-1]
        decl = block.decl
        if (child := decl.find_subcommand(token)) is not None:
            logger.debug("entering sub-command %r", token)
            self._blocks.append(CommandBlock(child))
            self._parameter = 0
        elif self._parameter < len(decl._parameters):
            self._record(decl._parameters[self._parameter], token, token)
            self._parameter += 1
        elif decl._parameters:
            raise TooManyParametersError(
                f"{ordinal(self._index)} argument: unexpected {token!r}, command {block.name!r} takes only "
                f"{len(decl._parameters)} parameter{"s" * (len(decl._parameters) != 1)}",
                token=token,
                index=self._index,
            )
        else:
            raise UnexpectedArgumentError(
                f"{ordinal(self._index)} argument: unexpected {token!r} for command {block.name!r}",
                token=token,
                index=self._index,
            )

    def _record(self, option, value, token):
        option._deliver(value, token=token, index=self._index)
        if self._global_options.get(option.name) is option:
            _, index = self._global_values.get(option.name, (None, len(self._blocks) - 1))
            self._global_values[option.name] = (value, index)
            logger.debug("stored global %s %r = %r (block %d)", option.kind.label, option.name, value, index)
        else:
            self._blocks[-1]._store(option.name, value)
            logger.debug("stored %s %r = %r in %r", option.kind.label, option.name, value, self._blocks[-1].name)

    # --- results ---------------------------------------------------------

    @property
    def block_count(self):
        return len(self._blocks)

    @property
    def last_block(self):
        return self.get_command_block(len(self._blocks) - 1)

    def get_command_block(self, index, /):
        """
        Return the parsed block at `index` (0 is the root).

        Raises
        - OutOfRangeError: no such block (including before any parse).
        """
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError("get_command_block() argument must be an integer")
        if not 0 <= index < len(self._blocks):
            raise OutOfRangeError(f"command block index {index} is out of range (0..{len(self._blocks) - 1})")
        return self._blocks[index]

    def is_global_option_set(self, name, /):
        return name in self._global_values

    def get_global_option_value(self, name, default=Unset, /):
        """
        Return the value recorded for global option `name` (switches record "").

        Raises
        - OptionNotFoundError: the option was not set and no default was given.
        """
        try:
            return self._global_values[name][0]
        except KeyError:
            if default is not Unset:
                return default
        raise OptionNotFoundError(f"global option {name!r} is not set", name=name)

    def get_global_option_block_index(self, name, /):
        """Return the index of the block that was current when `name` first appeared."""
        try:
            return self._global_values[name][1]
        except KeyError:
            raise OptionNotFoundError(f"global option {name!r} is not set", name=name) from None

    # --- help ------------------------------------------------------------

    def _render_help(self, index, /, *, colorful):
        block = self.get_command_block(index)
        return render_help(
            block.decl,
            self._global_options.values(),
            path=[entry.name for entry in self._blocks[:index + 1]],
            colorful=colorful,
            width=self._width,
        )

    def get_help_string(self, index=Unset, /):
        """
        Return plain-text help for the block at `index` (the last block by default).

        Raises
        - OutOfRangeError: no such block (including before any parse).
        """
        return self._render_help(coalesce(index, len(self._blocks) - 1), colorful=False).plain

    def print_help(self, index=Unset, /, console=Unset):
        """Print help for the block at `index` to `console` (stdout by default)."""
        help = self._render_help(coalesce(index, len(self._blocks) - 1), colorful=self._colorful)
        (Console() if console is Unset else console).print(help)

    def _write_help(self, sink, index, /):
        if isinstance(sink, Console):
            sink.print(self._render_help(index, colorful=self._colorful))
        else:
            sink.write(self._render_help(index, colorful=False).plain + "\n")


__all__ = (
    "Delimiter",
    "CommandParser",
)
