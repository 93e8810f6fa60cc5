"""
Pennant faults (definition errors, parse faults and the help signal) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse fault.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- FlagDefinitionError family: construction-time errors raised while a flag set
  is built from a record (bad annotation grammar, duplicated names, bad field
  kinds). They are programming errors and are never rendered for end users.
- FlagException: base type of parse-time faults. It carries a message plus
  options and knows how to render itself in a friendly, lowercased, and
  actionable way.
- HelpRequest: the "user asked for help" signal. It is not a FlagException so
  callers can tell it apart from real failures.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

UX goals
- Position-first messages: every message that refers to a token includes its
  ordinal position (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The flag set raises faults directly; convenience wrappers catch them and call
  trigger(fault, shell=True, ...) to render via rich and exit.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_VERB, UNEXPECTED_ARGUMENT
    - flags (1111x)
      • UNKNOWN_FLAG, NEEDS_ARGUMENT, ALREADY_SPECIFIED
    - values (1112x)
      • CONVERSION_FAILED, UNSUPPORTED_TYPE
    - constraints (1113x)
      • OBLIGATORY_FLAG, MUTEX_CONFLICT

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired.
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_VERB                = 11101
    UNEXPECTED_ARGUMENT         = 11102

    # --- flag errors (11xxx) ---
    UNKNOWN_FLAG                = 11111
    NEEDS_ARGUMENT              = 11112
    ALREADY_SPECIFIED           = 11113

    # --- value errors (11xxx) ---
    CONVERSION_FAILED           = 11121
    UNSUPPORTED_TYPE            = 11122

    # --- constraint errors (11xxx) ---
    OBLIGATORY_FLAG             = 11131
    MUTEX_CONFLICT              = 11132

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class FlagDefinitionError(ValueError):
    """Raised when a record cannot be turned into a flag set."""


class TagSyntaxError(FlagDefinitionError):
    """
    Raised when an annotation string does not follow the flag grammar.

    `tag` is the whole annotation, `remainder` the part that failed to parse.
    """

    def __init__(self, message, /, tag="", remainder=""):
        super().__init__(message)
        self.tag = tag
        self.remainder = remainder


class DuplicateNameError(FlagDefinitionError):
    """Raised when two flags of one flag set share a short or long name."""


class FlagException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message or "")
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

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

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        flagset = self.options.get("flagset")
        code = self.options.get("code")
        prog = text(getattr(main, "__prog__", getattr(flagset, "name", "")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code is not None else "", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint"), styler("hint")))

        if fancy:
            width = console.width - 4
            try:
                width = int(width * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(message, hint), title=header, title_align="left", width=width)

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NeedsArgumentError(FlagException): ...
class AlreadySpecifiedError(FlagException): ...
class UnknownFlagError(FlagException): ...
class UnknownVerbError(FlagException): ...
class UnexpectedArgumentError(FlagException): ...
class ConversionError(FlagException): ...
class UnsupportedTypeError(FlagException): ...
class ObligatoryFlagError(FlagException): ...
class MutexConflictError(FlagException): ...


class HelpRequest(Exception):
    """
    the user asked for help.

    raised by the help flag's conversion and annotated by the owning flag set
    (`flagset`), so the caller knows which help to render. it short-circuits
    the obligatory and mutex checks.
    """

    def __init__(self, flagset=None):
        super().__init__("help requested")
        self.flagset = flagset


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see FlagException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.

    typical options
    - flagset, shell, fancy, colorful, deferred, title, code, hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "FlagDefinitionError",
    "TagSyntaxError",
    "DuplicateNameError",
    "FlagException",
    "NeedsArgumentError",
    "AlreadySpecifiedError",
    "UnknownFlagError",
    "UnknownVerbError",
    "UnexpectedArgumentError",
    "ConversionError",
    "UnsupportedTypeError",
    "ObligatoryFlagError",
    "MutexConflictError",
    "HelpRequest",
    "trigger",
)
