"""
climod faults (parse-time errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for user-facing parse errors.
- CommandException: base type that carries message + options and knows how to
  render itself as a one-line diagnostic on the error stream.
- trigger(): central entry point to surface a fault (respecting shell/colorful).

Integration
- The dispatcher builds a fault and calls trigger(fault, **options).
- In shell mode the fault is printed via rich and the process exits with
  status 1; outside shell mode the exception is raised to the caller.
- Handler failures are not faults: they propagate untouched.
"""
import copy
import difflib
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .utils import Unset, progname

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping
    - routing (1110x): UNKNOWN_COMMAND
    - switches (1111x): MALFORMED_TOKEN, UNKNOWN_SWITCH
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101

    # --- switch errors (11xxx) ---
    MALFORMED_TOKEN             = 11111
    UNKNOWN_SWITCH              = 11112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str), "fault message must be a string"
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def input(self):
        return self.options.get("input")

    @property
    def suggestions(self):
        return tuple(self.options.get("suggestions", ()))

    def __str__(self):
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-message": "#FF4DA6",  # friendly pinky message
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[style] if colorful else "")

        line = Text.assemble(
            text(self.options.get("prog") or progname(), "prog-name"),
            ": ",
            text(self.message, "error-message"),
        )
        if self.hint:
            line.append(" (").append_text(text(self.hint, "hint")).append(")")
        if self.code is not None:
            line.append(" [").append_text(text(self.code.normalize(), "code")).append("]")
        return line

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from None
        console.print(self, soft_wrap=True, highlight=False)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedTokenError(CommandException): ...
class UnknownOptionError(CommandException): ...
class UnknownCommandError(CommandException): ...


def suggest(input, candidates, /):
    """close matches for a mistyped name, best first (at most three)."""
    return difflib.get_close_matches(input, list(candidates), 3)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode the fault is printed and the process exits; otherwise it is raised.
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
    "CommandException",
    "MalformedTokenError",
    "UnknownOptionError",
    "UnknownCommandError",
    "suggest",
    "trigger",
)
