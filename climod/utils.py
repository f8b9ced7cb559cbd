"""
climod utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the registry, dispatcher and help renderer.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated handlers for clean tracebacks and help.

- aliases(value, what)
  • Normalize a flag alias declaration (one string or an iterable of strings)
    into an ordered, duplicate-free tuple.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> aliases("v", "short option")
    ('v',)
    >>> aliases(["verbose", "loud", "verbose"], "long option")
    ('verbose', 'loud')
"""
import builtins
import functools
import os.path
import re
import sys
from collections.abc import Iterable
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used where None is a legitimate user value (an option whose default is
    None must still seed the context), so “not provided” needs its own marker.
    """

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (updated in place)
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                # Some callables (e.g., built-ins) disallow attribute updates.
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def aliases(value, what, /):
    """
    Normalize a flag alias declaration into an ordered tuple of unique strings.

    Parameters
    - value: Unset | str | Iterable[str]
      Unset yields an empty tuple; a single string is one alias.
    - what: str
      Label used in error messages (e.g., "short option").

    Raises
    - TypeError: when value is neither a string nor an iterable of strings.
    """
    if value is Unset:
        return ()
    if isinstance(value, str):
        value = (value,)
    elif not isinstance(value, Iterable):
        raise TypeError(f"{what} aliases must be a string or an iterable of strings")
    result = []
    for alias in value:
        if not isinstance(alias, str):
            raise TypeError(f"{what} aliases must be a string or an iterable of strings")
        if alias not in result:
            result.append(alias)
    return tuple(result)


def progname(argv=None, /):
    """
    Name of the running program, as shown in usage lines and diagnostics.

    Lookup
    - a __prog__ string defined in __main__ wins.
    - otherwise the basename of the first argv entry that is not a python
      interpreter or one of its -m/-c switches.
    - "climod" when nothing usable remains.
    """
    if isinstance(prog := getattr(__import__("__main__"), "__prog__", None), str):
        return prog
    for token in sys.argv if argv is None else argv:
        name = os.path.basename(token)
        if not name or name in ("-m", "-c") or re.fullmatch(r"python[\d.]*(\.exe)?", name.lower()):
            continue
        if name == "__main__.py":
            name = os.path.basename(os.path.dirname(token)) or name
        return name
    return "climod"


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Distinct from None: an option declared with default=None seeds its key with
None, while an option without a default leaves its key absent.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "aliases",
    "progname",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
