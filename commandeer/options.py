r"""
Commandeer option declarations.

Overview
- OptionKind: the three option flavours.
  • SWITCH: presence-only, e.g. --verbose / -v. Never takes a value.
  • VARIABLE: named, value-bearing, e.g. --name Jane / --name=Jane / -n Jane.
  • PARAMETER: positional, ordered within its command; no dashes, no alias.
- OptionDecl: one declared option. Carries its kind, name, optional alias,
  description, optional domain (allowed values) and an optional value sink.

Binding
- bind(callback): raw sink, called with the raw string value on every match
  (the empty string for switches).
- bind_to(ref, converter=...): typed sink writing into a converters.Ref cell.
  Switches require a bool cell and set it to True on presence; other kinds run
  the converter (default: converters.converter_for(ref.type)) on the raw value.

Validation highlights
- Names are non-empty strings without whitespace that do not start with '-'.
- Aliases are a single printable, non-whitespace character other than '-'.
- Domains are iterables of distinct strings (empty lifts the restriction);
  switches cannot have one.
- A converter failure surfaces as InvalidValueError carrying the offending token;
  CommandSyntaxError raised by a converter propagates unchanged.

Quick example
    >>> threads = Ref(int, 1)
    >>> decl = OptionDecl(OptionKind.VARIABLE, "threads").bind_to(threads)
"""
import builtins
import logging
import re
from collections.abc import Iterable
from enum import Enum, auto

from .converters import Ref, converter_for
from .faults import CommandSyntaxError, InvalidOptionTypeError, InvalidValueError
from .utils import DeclarationType, Unset, coalesce, rename

logger = logging.getLogger(__name__)


class OptionKind(Enum):
    """Flavour of a declared option."""
    SWITCH = auto()
    VARIABLE = auto()
    PARAMETER = auto()

    @property
    def label(self):
        return self.name.lower()


def sanitize_name(cls, name, /):
    """
    Internal: validate an option or command name and return it.

    Raises
    - TypeError: if `name` is not a string.
    - ValueError: if `name` is empty, contains whitespace or starts with '-'.
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    if not name:
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    if not re.fullmatch(r"[^\s-]\S*", name):
        raise ValueError(f"{cls.__typename__} 'name' cannot start with '-' or contain whitespace")
    return name


def sanitize_alias(cls, alias, /):
    """
    Internal: validate an optional alias and return it (None when absent).

    Unset and None both mean "no alias".
    """
    if (alias := coalesce(alias)) is None:
        return None
    if not isinstance(alias, str):
        raise TypeError(f"{cls.__typename__} 'alias' must be a string")
    if len(alias) != 1 or alias == "-" or not alias.isprintable() or alias.isspace():
        raise ValueError(f"{cls.__typename__} 'alias' must be a single printable character other than '-'")
    return alias


def sanitize_descr(cls, descr, /):
    if not isinstance(descr, str | Unset | None):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    return coalesce(descr) and descr.strip() or None


class OptionDecl(metaclass=DeclarationType):
    """
    Declared option of a command (or a global option of a parser).

    Instances are created by CommandDecl.add_option / CommandParser.add_global_option;
    the setters return the declaration itself so calls can be chained.
    """
    __introspectable__ = ("kind", "name", "alias", "descr", "domain")

    def __init__(self, kind, name, /):
        if not isinstance(kind, OptionKind):
            raise TypeError(f"{type(self).__typename__} 'kind' must be an option-kind")
        self._kind = kind
        self._name = sanitize_name(type(self), name)
        self._alias = None
        self._descr = None
        self._domain = ()
        self._sink = Unset

    def set_description(self, descr, /):
        """Attach a help description (None clears it)."""
        self._descr = sanitize_descr(type(self), descr)
        return self

    def set_domain(self, domain, /):
        """
        Restrict accepted values to `domain` (an iterable of distinct strings).

        An empty iterable lifts the restriction.
        """
        if self._kind is OptionKind.SWITCH:
            raise InvalidOptionTypeError(f"switch {self._name!r} cannot have a domain")
        if isinstance(domain, str) or not isinstance(domain, Iterable):
            raise TypeError(f"{type(self).__typename__} 'domain' must be an iterable of strings")
        sanitized = []
        for value in domain:
            if not isinstance(value, str):
                raise TypeError(f"{type(self).__typename__} 'domain' values must be strings")
            if value in sanitized:
                raise ValueError(f"{type(self).__typename__} 'domain' cannot contain duplicates")
            sanitized.append(value)
        self._domain = tuple(sanitized)
        return self

    def bind(self, callback, /):
        """Install a raw sink receiving the unconverted string value."""
        if not builtins.callable(callback):
            raise TypeError(f"{type(self).__typename__} sink must be callable")
        self._sink = callback
        logger.debug("bound %s %r to %r", self._kind.label, self._name, callback)
        return self

    def bind_to(self, ref, /, converter=Unset):
        """
        Install a typed sink writing into `ref` (a converters.Ref).

        Raises
        - InvalidOptionTypeError: a switch bound to a non-bool cell, or given a converter.
        - TypeError: `ref` is not a Ref or `converter` is not callable.
        """
        if not isinstance(ref, Ref):
            raise TypeError(f"{type(self).__typename__} bind_to() target must be a ref")

        if self._kind is OptionKind.SWITCH:
            if not issubclass(ref.type, bool):
                raise InvalidOptionTypeError(
                    f"switch {self._name!r} can only be bound to a bool ref, not {ref.type.__name__!r}"
                )
            if converter is not Unset:
                raise InvalidOptionTypeError(f"switch {self._name!r} does not take a converter")

            @rename(f"set_{self._name}")
            def sink(value):
                ref.value = True
        else:
            converter = coalesce(converter, converter_for(ref.type))
            if not builtins.callable(converter):
                raise TypeError(f"{type(self).__typename__} converter must be callable")

            @rename(f"store_{self._name}")
            def sink(value):
                ref.value = converter(value)

        return self.bind(sink)

    def _set_alias(self, alias, /):
        # assigned by the owning scope once the alias is known to be free
        self._alias = alias

    def _deliver(self, value, /, token, index=None):
        """
        Internal: check `value` against the domain and hand it to the sink.

        `token` is the argv entry the value came from and `index` its position.
        """
        if self._domain and value not in self._domain:
            raise InvalidValueError(
                f"invalid value {value!r} for {self._kind.label} {self._name!r} "
                f"(choose from {", ".join(map(repr, self._domain))})",
                token=token,
                index=index,
                name=self._name,
            )
        if self._sink is Unset:
            return
        try:
            self._sink(value)
        except (CommandSyntaxError, MemoryError):
            raise
        except Exception as error:
            raise InvalidValueError(
                f"invalid value {value!r} for {self._kind.label} {self._name!r}: {error}",
                token=token,
                index=index,
                name=self._name,
            ) from error


__all__ = (
    "OptionKind",
    "OptionDecl",
)
