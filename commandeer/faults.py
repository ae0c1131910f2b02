"""
Commandeer faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault. Codes are
  grouped by channel to keep copy consistent and make logs/searches predictable.
- CommandFault: base type carrying message + options that knows how to render
  itself in a friendly, lowercased, and actionable way through rich.
- Two disjoint channels derive from it:
  • ApiError: misuse by the embedding program (duplicate declarations, bad
    casts, out-of-range indexes). Raised eagerly by declaration/accessor APIs.
  • CommandSyntaxError: bad end-user input met during parsing. Always carries
    the offending token and its position in argv.
- report(): print any fault to stderr via rich.
- getdoc(): optional description lookup for a code from the host application.

Integration
- The parse engine raises the first syntax error it meets; there is no recovery.
- Applications catch CommandSyntaxError around parse_args() and decide the exit
  code; report(error) gives the styled rendering.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - api errors (21xxx): declaration and accessor misuse by the host program.
    - syntax errors (22xxx): end-user input rejected by the parse engine.

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- api errors (21xxx) ---
    DUPLICATE_COMMAND_BLOCK  = 21101
    DUPLICATE_OPTION         = 21102
    OPTION_NOT_FOUND         = 21111
    PARAMETER_NOT_FOUND      = 21112
    INVALID_OPTION_TYPE      = 21121
    INVALID_UNIQUE_ID_TYPE   = 21122
    OUT_OF_RANGE             = 21131
    UNIQUE_ID_NOT_ASSIGNED   = 21132
    OUT_OF_MEMORY            = 21141

    # --- syntax errors (22xxx) ---
    UNKNOWN_OPTION           = 22101
    MISSING_VARIABLE_VALUE   = 22102
    UNEXPECTED_ARGUMENT      = 22111
    TOO_MANY_PARAMETERS      = 22112
    INVALID_VALUE            = 22121
    OPTION_NOT_SET           = 22122
    INVALID_ALIAS            = 22131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandFault(Exception):
    """
    Base of every fault raised by commandeer.

    Subclasses pin a default `code`, `title` and `hint`; instances may override
    any of them (and add context such as token/index/name) through keyword options.
    The options are exposed read-only via `options`.
    """
    code = Unset
    title = "fault"
    hint = Unset

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({
            "code": type(self).code,
            "title": type(self).title,
            "hint": type(self).hint,
        } | options)

    def __getattr__(self, name):
        # context options (token, index, name, ...) read as attributes
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __str__(self):
        return self.message

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[style] if colorful else "")

        prog = text(getattr(main, "__prog__", self.options.get("prog", "commandeer")), "prog-name")
        code = self.options["code"]

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code else "?", "code"),
            " | ",
            text(self.options["title"].title(), "error-title"),
            " ]"
        )
        renders = [header, text(self.message, "error-message")]
        if hint := coalesce(self.options["hint"]):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders[1:]), title=header, title_align="left")
        return Group(*renders)


class ApiError(CommandFault):
    """Misuse of the declaration or accessor API by the embedding program."""
    title = "api error"


class DuplicateCommandBlockError(ApiError, ValueError):
    code = FaultCode.DUPLICATE_COMMAND_BLOCK
    title = "duplicate command block"


class DuplicateOptionError(ApiError, ValueError):
    code = FaultCode.DUPLICATE_OPTION
    title = "duplicate option"


class OptionNotFoundError(ApiError, LookupError):
    code = FaultCode.OPTION_NOT_FOUND
    title = "option not found"


class ParameterNotFoundError(OptionNotFoundError):
    code = FaultCode.PARAMETER_NOT_FOUND
    title = "parameter not found"


class InvalidOptionTypeError(ApiError, TypeError):
    code = FaultCode.INVALID_OPTION_TYPE
    title = "invalid option type"


class InvalidUniqueIdTypeError(ApiError, TypeError):
    code = FaultCode.INVALID_UNIQUE_ID_TYPE
    title = "invalid unique id type"


class OutOfRangeError(ApiError, IndexError):
    code = FaultCode.OUT_OF_RANGE
    title = "out of range"


class UniqueIdNotAssignedError(ApiError, LookupError):
    code = FaultCode.UNIQUE_ID_NOT_ASSIGNED
    title = "unique id not assigned"


class OutOfMemoryError(ApiError, MemoryError):
    code = FaultCode.OUT_OF_MEMORY
    title = "out of memory"


class CommandSyntaxError(CommandFault):
    """
    Bad end-user input met by the parse engine.

    Always constructed with the offending `token`; `index` is its position in
    argv when the engine knows it (None for accessor-raised faults).
    """
    title = "syntax error"

    def __init__(self, message, /, token, **options):
        super().__init__(message, token=token, **{"index": None} | options)


class UnknownOptionError(CommandSyntaxError):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"
    hint = "run with --help to see the available options"


class MissingVariableValueError(CommandSyntaxError):
    code = FaultCode.MISSING_VARIABLE_VALUE
    title = "missing variable value"
    hint = "pass a value after the option (values cannot start with '-')"


class UnexpectedArgumentError(CommandSyntaxError):
    code = FaultCode.UNEXPECTED_ARGUMENT
    title = "unexpected argument"
    hint = "remove the extra value or check the sub-command spelling"


class TooManyParametersError(UnexpectedArgumentError):
    code = FaultCode.TOO_MANY_PARAMETERS
    title = "too many parameters"
    hint = "every positional parameter is already filled; remove the extra value"


class InvalidValueError(CommandSyntaxError):
    code = FaultCode.INVALID_VALUE
    title = "invalid value"


class OptionNotSetError(CommandSyntaxError):
    code = FaultCode.OPTION_NOT_SET
    title = "option not set"


class InvalidAliasError(CommandSyntaxError):
    code = FaultCode.INVALID_ALIAS
    title = "invalid alias"
    hint = "only switches can be grouped; pass value-taking options on their own"


stderr = Console(stderr=True)


def report(fault, /, console=Unset):
    """
    print a fault through rich (stderr by default).

    contract
    - fault must be a CommandFault (either channel).
    - console: optional rich Console to print to instead of the shared stderr one.
    """
    if not isinstance(fault, CommandFault):
        raise TypeError("report() argument must be a command fault")
    coalesce(console, stderr).print(fault)


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "CommandFault",
    "ApiError",
    "DuplicateCommandBlockError",
    "DuplicateOptionError",
    "OptionNotFoundError",
    "ParameterNotFoundError",
    "InvalidOptionTypeError",
    "InvalidUniqueIdTypeError",
    "OutOfRangeError",
    "UniqueIdNotAssignedError",
    "OutOfMemoryError",
    "CommandSyntaxError",
    "UnknownOptionError",
    "MissingVariableValueError",
    "UnexpectedArgumentError",
    "TooManyParametersError",
    "InvalidValueError",
    "OptionNotSetError",
    "InvalidAliasError",
    "report",
    "getdoc",
)
