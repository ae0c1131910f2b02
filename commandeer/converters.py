r"""
Commandeer value binding: reference cells and default converters.

Overview
- Ref[_T]: a small mutable cell owned by the application. Binding an option to a
  Ref makes the parse engine write the converted value into `ref.value` every
  time the option is matched (last write wins).
- Char: marker type (a one-character str) selecting the "first character"
  conversion.
- converter_for(type): pick the default converter for a target type.
- convert(token, type): convert a raw token with the default converter.

Default conversion table (dispatch on the cell's type)
- str (and subclasses): identity.
- Char: first character of the token; the empty string is rejected.
- bool: case-sensitive table, true|1|yes|on / false|0|no|off.
- Integral types: full-string base-10 parse, optional sign, no surrounding
  whitespace and no digit separators.
- Other numbers (float, Decimal, Fraction, complex): the type's own parser,
  with surrounding whitespace and '_' separators rejected.
- Enum types: member lookup by name.
- Anything else: the type itself is called with the token (e.g. pathlib.Path).

Converters signal bad input by raising ValueError (or any exception); the
option layer normalizes such failures into InvalidValueError carrying the token.

Quick example
    >>> threads = Ref(int, 1)
    >>> convert("42", int)
    42
"""
import builtins
import enum
import functools
import numbers
import re

from .utils import rename


class Char(str):
    """
    Marker type for single-character values.

    Instances are plain one-character strings; use `Ref(Char)` to request the
    first-character conversion.
    """
    __slots__ = ()


class Ref[_T]:
    """
    Mutable cell the parse engine writes converted values into.

    Parameters
    - type: the target type; drives the default converter (str by default).
    - value: initial value, left untouched until the option is matched.

    Notes
    - Re-parsing does not reset the cell; call reset() between parses when needed.
    """
    __slots__ = ("type", "value", "_initial")

    def __init__(self, type=str, value=None, /):
        if not isinstance(type, builtins.type):
            raise TypeError("ref 'type' must be a type")
        self.type = type
        self.value = value
        self._initial = value

    def reset(self):
        """Restore the initial value."""
        self.value = self._initial

    def __repr__(self):
        return f"ref[{self.type.__name__}]({self.value!r})"


_BOOLEANS = {
    "true": True,
    "1": True,
    "yes": True,
    "on": True,
    "false": False,
    "0": False,
    "no": False,
    "off": False,
}


def _to_char(token):
    if not token:
        raise ValueError("a character value cannot be empty")
    return Char(token[0])


def _to_bool(token):
    try:
        return _BOOLEANS[token]
    except KeyError:
        raise ValueError(
            "expected one of %s" % ", ".join(_BOOLEANS)
        ) from None


def _to_integral(type, token):
    if not re.fullmatch(r"[+-]?\d+", token, re.ASCII):
        raise ValueError(f"{token!r} is not a whole number")
    return type(int(token))


def _to_number(type, token):
    if token != token.strip() or "_" in token or not token:
        raise ValueError(f"{token!r} is not a number")
    try:
        return type(token)
    except ArithmeticError:  # decimal.InvalidOperation
        raise ValueError(f"{token!r} is not a number") from None


def _to_member(type, token):
    try:
        return type[token]
    except KeyError:
        raise ValueError(
            "expected one of %s" % ", ".join(type.__members__)
        ) from None


@functools.cache
def converter_for(type, /):
    """
    Return the default converter (a callable taking the raw token) for `type`.

    Raises
    - TypeError: when `type` is not a type.
    """
    if not isinstance(type, builtins.type):
        raise TypeError("converter_for() argument must be a type")

    if issubclass(type, bool):
        return _to_bool
    if issubclass(type, Char):
        return _to_char
    if issubclass(type, str):
        return str if type is str else type
    if issubclass(type, enum.Enum):
        return rename(functools.partial(_to_member, type), f"to_{type.__name__.lower()}")
    if issubclass(type, numbers.Integral):
        return rename(functools.partial(_to_integral, type), f"to_{type.__name__.lower()}")
    if issubclass(type, numbers.Number):
        return rename(functools.partial(_to_number, type), f"to_{type.__name__.lower()}")
    return type


def convert(token, type=str, /):
    """
    Convert a raw token with the default converter for `type`.

    Raises
    - ValueError (or the target type's own error) when the token is rejected.
    """
    if not isinstance(token, str):
        raise TypeError("convert() first argument must be a string")
    return converter_for(type)(token)


__all__ = (
    "Char",
    "Ref",
    "converter_for",
    "convert",
)
