"""
Commandeer command layer: the declaration tree and per-parse result blocks.

What this module provides
- CommandDecl: one node of the declaration tree. Owns its local options (switches,
  variables and ordered parameters), its alias index and its named sub-commands.
- CommandBlock: the result of a parse for one command on the matched path; holds
  the values recorded for that command's local options.
- Scope / ScopeRegistry: the single name/alias namespace shared by a parser and
  every declaration of its tree. A name (or alias) is either global or local; a
  local name may be reused by several commands, a global one by none.

Core ideas
- Declarations are built once and then only read by the parse engine.
- Nodes keep a plain parent reference; the registry is the only shared state, so
  a declaration never needs to know about the parser that owns it.
- Values are keyed by option name; the last write wins.

Quick start
    >>> parser = CommandParser("app")
    >>> build = parser.root.add_subcommand("build", "compile the project")
    >>> build.add_switch("release", "r")
    >>> build.add_parameter("target")
"""
import logging
from enum import Enum, auto

from .faults import *
from .options import OptionDecl, OptionKind, sanitize_alias, sanitize_descr, sanitize_name
from .utils import DeclarationType, Unset, coalesce

logger = logging.getLogger(__name__)


class Scope(Enum):
    GLOBAL = auto()
    LOCAL = auto()


class ScopeRegistry:
    """
    Shared namespace of option names and aliases.

    claim() records the scope of a name/alias pair, failing when either key is
    already registered under the other scope. Claims are all-or-nothing.
    """

    def __init__(self):
        self._names = {}
        self._aliases = {}

    def claim(self, scope, name, alias=None, /):
        for key, registry, label in (name, self._names, "name"), (alias, self._aliases, "alias"):
            if key is not None and registry.get(key, scope) is not scope:
                raise DuplicateOptionError(
                    f"option {label} {key!r} is already declared as {registry[key].name.lower()}",
                    name=name,
                )
        self._names[name] = scope
        if alias is not None:
            self._aliases[alias] = scope


class CommandDecl(metaclass=DeclarationType):
    """
    Declared command (root or sub-command).

    Responsibilities
    - Declaration: add_option() and its add_switch/add_variable/add_parameter shorthands.
    - Composition: add_subcommand() creates and attaches a child declaration.
    - Navigation: parent/root/path, find_option()/find_alias() lookups.
    - Identity: an optional, untyped unique id for dispatching on parse results.

    Notes
    - The root declaration is created by CommandParser and named after the program.
    - Exposed containers are detached copies; mutate through the methods only.
    """
    __introspectable__ = (
        "name",
        "descr",
        "parent",
        "local_options",
        "aliases",
        "parameters",
        "subcommands",
    )

    # parent is left out to keep representations acyclic
    __displayable__ = (
        "name",
        "descr",
        "local_options",
        "parameters",
        "subcommands",
    )

    def __init__(self, name, descr=Unset, /, *, registry, parent=None):
        if not isinstance(registry, ScopeRegistry):
            raise TypeError(f"{type(self).__typename__} 'registry' must be a scope-registry")
        if not isinstance(parent, CommandDecl | None):
            raise TypeError(f"{type(self).__typename__} 'parent' must be a command-decl")
        self._name = sanitize_name(type(self), name)
        self._descr = sanitize_descr(type(self), descr)
        self._parent = parent
        self._registry = registry
        self._local_options = {}
        self._aliases = {}
        self._parameters = []
        self._subcommands = {}
        self._unique_id = Unset

    @property
    def root(self):
        """Return the topmost declaration of this tree."""
        decl = self
        while decl.parent is not None:
            decl = decl.parent
        return decl

    @property
    def path(self):
        """Return the declarations from the root down to this one, as a tuple."""
        path = [decl := self]
        while decl.parent is not None:
            path.append(decl := decl.parent)
        return tuple(reversed(path))

    def set_description(self, descr, /):
        self._descr = sanitize_descr(type(self), descr)
        return self

    def add_option(self, kind, name, alias=Unset, /):
        """
        Declare a local option and return its declaration.

        Raises
        - InvalidOptionTypeError: a parameter given an alias.
        - DuplicateOptionError: the name or alias is already taken in this command,
          or the name/alias is already declared global.
        - TypeError/ValueError: malformed kind, name or alias.
        """
        option = OptionDecl(kind, name)
        if kind is OptionKind.PARAMETER and coalesce(alias) is not None:
            raise InvalidOptionTypeError(f"parameter {name!r} cannot have an alias")
        alias = sanitize_alias(type(option), alias)

        if alias is not None and alias in self._aliases:
            raise DuplicateOptionError(
                f"alias {alias!r} is already used by option {self._aliases[alias].name!r} of command {self._name!r}",
                name=name,
            )
        if name in self._local_options:
            raise DuplicateOptionError(f"option {name!r} is already declared in command {self._name!r}", name=name)
        self._registry.claim(Scope.LOCAL, name, alias)

        self._local_options[name] = option
        if kind is OptionKind.PARAMETER:
            self._parameters.append(option)
        elif alias is not None:
            option._set_alias(alias)
            self._aliases[alias] = option
        logger.debug("declared %s %r in command %r", kind.label, name, self._name)
        return option

    def add_switch(self, name, alias=Unset, /):
        return self.add_option(OptionKind.SWITCH, name, alias)

    def add_variable(self, name, alias=Unset, /):
        return self.add_option(OptionKind.VARIABLE, name, alias)

    def add_parameter(self, name, /):
        return self.add_option(OptionKind.PARAMETER, name)

    def add_subcommand(self, name, descr=Unset, /):
        """
        Declare a sub-command and return its (empty) declaration.

        Raises
        - DuplicateCommandBlockError: a sub-command with this name already exists here.
        """
        name = sanitize_name(type(self), name)
        if name in self._subcommands:
            raise DuplicateCommandBlockError(f"command {self._name!r} already has a sub-command {name!r}", name=name)
        child = type(self)(name, descr, registry=self._registry, parent=self)
        self._subcommands[name] = child
        logger.debug("declared sub-command %r under %r", name, self._name)
        return child

    def find_subcommand(self, name, /):
        """Return the sub-command declared under `name`, or None."""
        return self._subcommands.get(name)

    def find_option(self, name, /):
        """Return the local option (any kind) declared under `name`, or None."""
        return self._local_options.get(name)

    def find_alias(self, alias, /):
        """Return the local option declared with the one-character `alias`, or None."""
        return self._aliases.get(alias)

    def set_unique_id(self, value, /):
        """Attach an arbitrary identifier (any object, None included)."""
        self._unique_id = value
        return self

    def get_unique_id(self, kind=object, /):
        """
        Return the identifier attached with set_unique_id().

        Raises
        - UniqueIdNotAssignedError: nothing was attached.
        - InvalidUniqueIdTypeError: the identifier is not an instance of `kind`.
        """
        if self._unique_id is Unset:
            raise UniqueIdNotAssignedError(f"command {self._name!r} has no unique id")
        if not isinstance(self._unique_id, kind):
            raise InvalidUniqueIdTypeError(
                f"unique id of command {self._name!r} is {type(self._unique_id).__name__!r}, not {kind.__name__!r}"
            )
        return self._unique_id

    @property
    def has_unique_id(self):
        return self._unique_id is not Unset


class CommandBlock(metaclass=DeclarationType):
    """
    Parse result for one command of the matched path.

    Holds the values recorded for the command's local options (parameters
    included); global option values live on the parser.
    """
    __introspectable__ = ("decl", "values")
    __displayable__ = ("name", "values")

    def __init__(self, decl, /):
        if not isinstance(decl, CommandDecl):
            raise TypeError(f"{type(self).__typename__} 'decl' must be a command-decl")
        self._decl = decl
        self._values = {}

    @property
    def name(self):
        return self._decl.name

    def is_option_set(self, name, /):
        return name in self._values

    def get_option_value(self, name, default=Unset, /):
        """
        Return the value recorded for local option `name` (switches record "").

        Raises
        - OptionNotFoundError: the option was not set and no default was given.
        """
        try:
            return self._values[name]
        except KeyError:
            if default is not Unset:
                return default
        raise OptionNotFoundError(f"option {name!r} of command {self.name!r} is not set", name=name)

    def get_parameter_value(self, name, default=Unset, /):
        """
        Return the value recorded for parameter `name`.

        Raises
        - ParameterNotFoundError: `name` is not a declared parameter, or it was not
          filled and no default was given.
        """
        if not any(parameter.name == name for parameter in self._decl._parameters):
            raise ParameterNotFoundError(f"command {self.name!r} has no parameter {name!r}", name=name)
        try:
            return self._values[name]
        except KeyError:
            if default is not Unset:
                return default
        raise ParameterNotFoundError(f"parameter {name!r} of command {self.name!r} is not set", name=name)

    def require(self, name, /):
        """
        Return the value of a declared option that must be present.

        Raises
        - OptionNotFoundError: `name` is not declared by this command.
        - OptionNotSetError: `name` is declared but was not given on the command line.
        """
        if (option := self._decl.find_option(name)) is None:
            raise OptionNotFoundError(f"command {self.name!r} has no option {name!r}", name=name)
        try:
            return self._values[name]
        except KeyError:
            raise OptionNotSetError(
                f"{option.kind.label} {name!r} is required by command {self.name!r}",
                token=name,
                name=name,
            ) from None

    def _store(self, name, value, /):
        self._values[name] = value


__all__ = (
    "Scope",
    "ScopeRegistry",
    "CommandDecl",
    "CommandBlock",
)
