"""
climod registry: commands and global options.

What this module provides
- CommandDescriptor: a command handler plus its one-line description.
- GlobalOption: a flag recognized before the command name; it carries the
  context key it manages, its short/long aliases, an optional default and the
  handle() that mutates the in-progress context when the flag is seen.
- Registry: the owned pair of mappings the dispatcher resolves against.

Rules
- register_command() overwrites silently: the last registration for a name wins.
- register_global_option() appends; registration order drives help listing
  order and decides which option wins when two declare the same alias.
- Command names are matched exactly. Long aliases are matched exactly too,
  so "--Verbose" is not "--verbose".

Quick example
    >>> registry = Registry()
    >>> @registry.command(description="Say hello")
    ... def hello(argv):
    ...     print("hello", *argv)
    ...     return 0
    >>> @registry.option("config", short="c", long="config", default="~/.config/app.json")
    ... def config(ctx, argv):
    ...     ctx.config = argv.popleft()
"""
from collections.abc import Mapping
from types import MappingProxyType

from .utils import *


class CommandDescriptor:
    """
    immutable pairing of a command handler and its description.

    handler(argv) receives the arguments left after the command name and
    returns an integer status (or an awaitable resolving to one).
    """
    __slots__ = ("_handler", "_description")

    def __init__(self, handler, description=Unset):
        if not callable(handler):
            raise TypeError("command handler must be callable")
        if not isinstance(description, str | UnsetType):
            raise TypeError("command description must be a string")
        object.__setattr__(self, "_handler", handler)
        object.__setattr__(self, "_description", coalesce(description))

    @property
    def handler(self):
        return self._handler

    @property
    def description(self):
        return self._description

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __repr__(self):
        return f"{type(self).__name__}({self._handler!r}, description={self._description!r})"


class GlobalOption:
    """
    immutable description of a global option.

    fields
    - key: context key owned by this option (seeded with default, if any).
    - handle(ctx, argv): called once per occurrence of any alias; argv is the
      shared token deque, so value-taking options popleft() their value.
    - shorts: tuple of one-character aliases (used as -x, clusterable as -xyz).
    - longs: tuple of long aliases (used as --name).
    - description: str or callable(ctx) -> str, rendered by help.
    - default: any value, or Unset when the key should not be seeded.
    """
    __slots__ = ("_key", "_handle", "_shorts", "_longs", "_description", "_default")

    def __init__(self, key, handle, /, short=Unset, long=Unset, description=Unset, default=Unset):
        if not isinstance(key, str):
            raise TypeError("option key must be a string")
        if not key:
            raise ValueError("option key must be a non-empty string")
        if key != key.strip():
            raise ValueError(f"option key {key!r} must not have surrounding whitespace")
        if not callable(handle):
            raise TypeError("option handle must be callable")
        if not isinstance(description, str | UnsetType) and not callable(description):
            raise TypeError("option description must be a string or a callable")

        shorts = aliases(short, "short option")
        longs = aliases(long, "long option")
        for alias in shorts:
            if len(alias) != 1 or alias == "-":
                raise ValueError(f"short option alias {alias!r} must be a single character other than '-'")
        for alias in longs:
            if not alias or alias.startswith("-"):
                raise ValueError(f"long option alias {alias!r} must be non-empty and written without dashes")

        object.__setattr__(self, "_key", key)
        object.__setattr__(self, "_handle", handle)
        object.__setattr__(self, "_shorts", shorts)
        object.__setattr__(self, "_longs", longs)
        object.__setattr__(self, "_description", coalesce(description, ""))
        object.__setattr__(self, "_default", default)

    @property
    def key(self):
        return self._key

    @property
    def handle(self):
        return self._handle

    @property
    def shorts(self):
        return self._shorts

    @property
    def longs(self):
        return self._longs

    @property
    def description(self):
        return self._description

    @property
    def default(self):
        return self._default

    @property
    def spellings(self):
        """every spelling a user can type, shorts first: ('-v', '--verbose')."""
        return tuple("-" + alias for alias in self._shorts) + tuple("--" + alias for alias in self._longs)

    def describe(self, context, /):
        """render the description, calling it with context when it is dynamic."""
        if callable(self._description):
            return str(self._description(context))
        return self._description

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __repr__(self):
        return f"{type(self).__name__}({self._key!r}, spellings={self.spellings!r}, default={self._default!r})"


class Registry:
    """
    owned command and global-option tables.

    Each Dispatcher holds one Registry, so independent CLIs (and tests) never
    share registrations.
    """
    __slots__ = ("_commands", "_options")

    def __init__(self):
        self._commands = {}
        self._options = []

    @property
    def commands(self):
        return MappingProxyType(self._commands)

    @property
    def options(self):
        return tuple(self._options)

    def register_command(self, name, descriptor, /):
        """
        insert or replace the command registered under name.

        descriptor may be a CommandDescriptor, a mapping with "handler" and an
        optional "description", or a bare handler callable.
        """
        if not isinstance(name, str):
            raise TypeError("command name must be a string")
        if isinstance(descriptor, Mapping):
            descriptor = CommandDescriptor(**descriptor)
        elif callable(descriptor):
            descriptor = CommandDescriptor(descriptor)
        elif not isinstance(descriptor, CommandDescriptor):
            raise TypeError("register_command() second argument must be a descriptor, a mapping or a callable")
        self._commands[name] = descriptor
        return descriptor

    def register_global_option(self, descriptor, /):
        """append a global option; no duplicate-key detection is performed."""
        if isinstance(descriptor, Mapping):
            fields = dict(descriptor)
            try:
                key, handle = fields.pop("key"), fields.pop("handle")
            except KeyError as error:
                raise TypeError(f"global option mapping is missing {error.args[0]!r}") from None
            descriptor = GlobalOption(key, handle, **fields)
        elif not isinstance(descriptor, GlobalOption):
            raise TypeError("register_global_option() argument must be a GlobalOption or a mapping")
        self._options.append(descriptor)
        return descriptor

    def command(self, name=Unset, /, description=Unset):
        """
        decorator form of register_command().

        - @registry.command                       → name from the function
        - @registry.command("name", description=…) → explicit name
        The decorated function is returned unchanged.
        """
        if callable(name):
            handler, name = name, Unset
            return self.command(name, description)(handler)

        @rename("command")
        def wrapper(handler, /):
            self.register_command(coalesce(name, handler.__name__), CommandDescriptor(handler, description))
            return handler

        return wrapper

    def option(self, key, /, **fields):
        """decorator form of register_global_option(); the function becomes handle."""

        @rename("option")
        def wrapper(handle, /):
            self.register_global_option(GlobalOption(key, handle, **fields))
            return handle

        return wrapper

    def defaults(self):
        """key → default for every option that declares one (later options win)."""
        return {option.key: option.default for option in self._options if option.default is not Unset}

    def lookup(self):
        """
        build (longs, shorts) alias tables.

        On collisions the first registered option keeps the alias.
        """
        longs = {}
        shorts = {}
        for option in self._options:
            for alias in option.longs:
                longs.setdefault(alias, option)
            for alias in option.shorts:
                shorts.setdefault(alias, option)
        return longs, shorts

    def __repr__(self):
        return f"{type(self).__name__}(commands={list(self._commands)!r}, options={[o.key for o in self._options]!r})"


__all__ = (
    "CommandDescriptor",
    "GlobalOption",
    "Registry",
)
