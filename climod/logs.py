"""
climod logging: verbosity follows the ambient invocation context.

The built-in -v/--verbose option increments the context's loglevel. Records
logged under the "climod" logger (and its children, see getLogger) pass
through a filter that reads that loglevel from the current context:

    loglevel 0  → WARNING and above
    loglevel 1  → INFO and above
    loglevel 2+ → DEBUG and above

Two invocations running concurrently therefore log at their own verbosity.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

from .utils import Unset, coalesce

logger = logging.getLogger("climod")


def threshold(loglevel, /):
    """logging level unlocked by a context loglevel."""
    if loglevel >= 2:
        return logging.DEBUG
    if loglevel == 1:
        return logging.INFO
    return logging.WARNING


class ContextLevelFilter(logging.Filter):
    """Drop records below the verbosity of the current invocation."""

    def __init__(self, store):
        super().__init__()
        self.store = store

    def filter(self, record: logging.LogRecord) -> bool:
        context = self.store.get()
        loglevel = 0 if context is None else context.get("loglevel", 0)
        if not isinstance(loglevel, int):
            loglevel = 0
        record.loglevel = loglevel
        return record.levelno >= threshold(loglevel)


def install(store, target=Unset, /, *, console=Unset):
    """
    attach a RichHandler filtered by store's context to target (once per store).

    Returns the handler so callers can detach it again.
    """
    target = coalesce(target, logger)
    for handler in target.handlers:
        if any(isinstance(f, ContextLevelFilter) and f.store is store for f in handler.filters):
            return handler
    handler = RichHandler(
        console=coalesce(console, Console(stderr=True)),
        show_time=False,
        show_path=False,
    )
    handler.addFilter(ContextLevelFilter(store))
    target.addHandler(handler)
    # the handler filter decides, so the logger must let everything through;
    # records stop here so ancestor handlers never see unfiltered output
    target.setLevel(logging.DEBUG)
    target.propagate = False
    return handler


def getLogger(name=None):
    """
    logger under the climod hierarchy, e.g. getLogger("myapp") → "climod.myapp".

    Records propagate to the handler installed on "climod".
    """
    if not name:
        return logger
    return logger.getChild(name)


__all__ = (
    "ContextLevelFilter",
    "threshold",
    "install",
    "getLogger",
)
