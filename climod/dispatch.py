"""
climod dispatcher: parse global options, pick the command, run it in context.

Command line shape

    <prog> [global opts] <command> [command args]

- "--name" looks up a long alias; "-xyz" looks up x, y and z in turn.
- Each matched option's handle(ctx, argv) runs immediately against the
  in-progress context; argv is the shared token deque, so an option that takes
  a value pops it (and a clustered flag after it sees whatever is left).
- The first token not starting with "-" is the command name; parsing stops
  there and everything after it belongs to the command.
- No tokens at all selects "help".

Faults
- unknown option, unknown command, or a bare "-"/"--" token: in shell mode a
  one-line diagnostic is printed to stderr and the process exits with status 1;
  otherwise the matching CommandException is raised.
- failures raised by option or command handlers propagate as-is.

Module-level API
- A default Dispatcher backs register_command(), register_global_option(),
  execute_command(), invoke(), get_context() and the command/option decorators.

Quick start
    from climod import command, get_context, invoke

    @command(description="Print the current verbosity")
    def level(argv):
        print(get_context().loglevel)
        return 0

    if __name__ == "__main__":
        raise SystemExit(invoke())   # prog -vv level  →  2
"""
import asyncio
import inspect
import shlex
import sys
from collections import deque
from collections.abc import Iterable

from . import helper
from .contexts import *
from .faults import *
from .logs import getLogger, install
from .registry import *
from .utils import *


def _verbose(ctx, argv, /):
    ctx.loglevel = ctx.get("loglevel", 0) + 1


def _tokenize(argv):
    """normalize the accepted argv forms into a list of strings."""
    if argv is Unset:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("execute() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("execute() argument must be a string or an iterable of strings")


class Dispatcher:
    """
    parser and dispatcher bound to one Registry and one ContextStore.

    options
    - registry: Registry to resolve against (a fresh one when omitted).
    - store: ContextStore for the ambient context (a fresh one when omitted).
    - prog: program name for usage and diagnostics (see utils.progname otherwise).
    - shell: print faults and exit (True) or raise them (False).
    - colorful: style help and diagnostics (rich drops styles on non-terminals anyway).
    - builtins: register the "help" command and the -v/--verbose option.
    - logs: attach the context-aware rich log handler to the "climod" logger.
    """

    def __init__(self, registry=Unset, /, *, store=Unset, prog=Unset, shell=True, colorful=True, builtins=True, logs=False):
        if not isinstance(registry, Registry | UnsetType):
            raise TypeError("Dispatcher() argument must be a Registry")
        if not isinstance(store, ContextStore | UnsetType):
            raise TypeError("Dispatcher() store must be a ContextStore")
        if not isinstance(prog, str | UnsetType):
            raise TypeError("Dispatcher() prog must be a string")
        self.registry = coalesce(registry, Registry())
        self.store = coalesce(store, ContextStore())
        self.prog = coalesce(prog)
        self.shell = bool(shell)
        self.colorful = bool(colorful)
        self.logger = getLogger("dispatch")

        if builtins:
            @rename("help")
            def help(argv, /):
                return helper.render(self, argv)

            self.registry.register_command("help", CommandDescriptor(help, helper.DESCRIPTION))
            self.registry.register_global_option(GlobalOption(
                "loglevel",
                _verbose,
                short="v",
                long="verbose",
                description=lambda ctx: f"Increase loglevel (current: {ctx.get('loglevel', 0)})",
                default=0,
            ))

        if logs:
            install(self.store)

    # registration passthroughs
    def register_command(self, name, descriptor, /):
        return self.registry.register_command(name, descriptor)

    def register_global_option(self, descriptor, /):
        return self.registry.register_global_option(descriptor)

    def command(self, name=Unset, /, description=Unset):
        return self.registry.command(name, description)

    def option(self, key, /, **fields):
        return self.registry.option(key, **fields)

    def get_context(self):
        return self.store.get()

    def trigger(self, fault, /, **options):
        trigger(fault, **options, prog=self.prog or progname(), shell=self.shell, colorful=self.colorful)

    async def _handle(self, option, options, tokens):
        result = option.handle(options, tokens)
        if inspect.isawaitable(result):
            await result

    async def _parseargs(self, tokens):
        """
        consume leading option tokens; return (command, options).

        tokens is left holding the command's own arguments.
        """
        command = "help"
        options = Context(self.registry.defaults())
        longs, shorts = self.registry.lookup()

        while tokens:
            token = tokens.popleft()

            if token in ("-", "--"):
                self.trigger(MalformedTokenError(
                    "bare %r is not an option" % token,
                    code=FaultCode.MALFORMED_TOKEN,
                    input=token,
                    hint="options are spelled -x or --name",
                ))
                continue

            if token.startswith("--"):
                name = token[2:]
                try:
                    option = longs[name]
                except KeyError:
                    suggestions = suggest(name, longs)
                    self.trigger(UnknownOptionError(
                        "unknown option %r" % name,
                        code=FaultCode.UNKNOWN_SWITCH,
                        input=token,
                        suggestions=suggestions,
                        hint="did you mean '--%s'?" % suggestions[0] if suggestions else None,
                    ))
                    continue
                await self._handle(option, options, tokens)
                continue

            if token.startswith("-"):
                for letter in token[1:]:
                    try:
                        option = shorts[letter]
                    except KeyError:
                        self.trigger(UnknownOptionError(
                            "unknown option %r" % letter,
                            code=FaultCode.UNKNOWN_SWITCH,
                            input="-" + letter,
                        ))
                        continue
                    await self._handle(option, options, tokens)
                continue

            command = token
            break

        return command, options

    def _call(self, name, descriptor, argv):
        self.logger.debug("parsed global options %r", dict(self.store.get()))
        self.logger.debug("running %r with arguments %r", name, argv)
        return descriptor.handler(argv)

    async def execute(self, argv=Unset, /):
        """
        parse argv and run the selected command; return its integer status.

        argv: Unset (sys.argv[1:]), a shell-like string, or an iterable of strings.
        """
        tokens = deque(_tokenize(argv))
        command, options = await self._parseargs(tokens)

        try:
            descriptor = self.registry.commands[command]
        except KeyError:
            suggestions = suggest(command, self.registry.commands)
            self.trigger(UnknownCommandError(
                "unknown command %r" % command,
                code=FaultCode.UNKNOWN_COMMAND,
                input=command,
                suggestions=suggestions,
                hint="did you mean %r?" % suggestions[0] if suggestions else "run 'help' to list the commands",
            ))
            return 1

        result = self.store.run(options, self._call, command, descriptor, list(tokens))
        if inspect.isawaitable(result):
            result = await result
        return result

    def invoke(self, argv=Unset, /):
        """synchronous execute(): run the event loop until the command finishes."""
        return asyncio.run(self.execute(argv))

    def __repr__(self):
        return f"{type(self).__name__}({self.registry!r}, store={self.store!r})"


default = Dispatcher(logs=True)


def register_command(name, descriptor, /):
    return default.register_command(name, descriptor)


def register_global_option(descriptor, /):
    return default.register_global_option(descriptor)


def command(name=Unset, /, description=Unset):
    return default.command(name, description)


def option(key, /, **fields):
    return default.option(key, **fields)


def get_context():
    return default.get_context()


async def execute_command(argv=Unset, /):
    return await default.execute(argv)


def invoke(argv=Unset, /):
    return default.invoke(argv)


__all__ = (
    "Dispatcher",
    "default",
    "register_command",
    "register_global_option",
    "command",
    "option",
    "get_context",
    "execute_command",
    "invoke",
)
