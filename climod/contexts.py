"""
climod ambient invocation context.

Scope
- Context: the per-invocation key/value mapping handed to option handlers and
  made visible to the command handler (and anything it calls) without being
  passed around explicitly.
- ContextStore: a thin wrapper over one contextvars.ContextVar that scopes a
  Context to the dynamic extent of a callback, sync or async.

Isolation
- asyncio gives every Task its own copy of the current contextvars.Context, so
  two invocations running side by side (asyncio.gather, create_task) never see
  each other's value, however their awaits interleave.
- Tasks spawned from inside a handler copy the context at creation time and
  therefore inherit the invocation's Context.

Quick example
    >>> store = ContextStore("demo")
    >>> store.get() is None
    True
    >>> store.run(Context(loglevel=2), lambda: store.get().loglevel)
    2
"""
import inspect
from contextvars import ContextVar


class Context(dict):
    """
    mapping of option keys to values for a single invocation.

    keys are also reachable as attributes (ctx.loglevel is ctx["loglevel"]),
    which keeps option handlers short: ctx.config = argv.popleft().
    """
    __slots__ = ()

    def __getattr__(self, name, /):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"context has no key {name!r}") from None

    def __setattr__(self, name, value, /):
        self[name] = value

    def __delattr__(self, name, /):
        try:
            del self[name]
        except KeyError:
            raise AttributeError(f"context has no key {name!r}") from None

    def __repr__(self):
        return f"{type(self).__name__}({dict.__repr__(self)})"

    def __rich_repr__(self):
        yield from self.items()


class ContextStore:
    """
    call-scoped storage for the ambient Context.

    run(value, callback, *args)
    - sync callback: value is visible for the duration of the call.
    - async callback (returns an awaitable): the awaitable is wrapped so value
      is re-established around the await; the caller must await the result.

    get()
    - the Context of the caller's dynamic extent, or None outside any run().
    """
    __slots__ = ("_variable",)

    def __init__(self, name="climod.context", /):
        if not isinstance(name, str):
            raise TypeError("ContextStore() argument must be a string")
        self._variable = ContextVar(name, default=None)

    @property
    def name(self):
        return self._variable.name

    def get(self):
        return self._variable.get()

    def run(self, value, callback, /, *args):
        if not callable(callback):
            raise TypeError("run() second argument must be callable")
        token = self._variable.set(value)
        try:
            result = callback(*args)
        finally:
            self._variable.reset(token)
        if inspect.isawaitable(result):
            return self._bind(value, result)
        return result

    async def _bind(self, value, awaitable):
        token = self._variable.set(value)
        try:
            return await awaitable
        finally:
            self._variable.reset(token)

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


__all__ = (
    "Context",
    "ContextStore",
)
