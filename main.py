from rich.pretty import pprint

from climod import *


@option(
    "config",
    short="c",
    long="config",
    description=lambda ctx: f"Set config file path (current: {ctx.get('config')})",
    default="~/.config/finwo/cli-module.json",
)
def config(ctx, argv):
    if not argv:
        default.trigger(MalformedTokenError(
            "option 'config' requires a value",
            code=FaultCode.MALFORMED_TOKEN,
            input="--config",
            hint="pass a file path after -c/--config",
        ))
    ctx.config = argv.popleft()


@command("dumpContext", description="Dumps the context and remaining arguments as given by the cli module")
def dump_context(argv):
    pprint({"ctx": get_context(), "argv": argv})
    return 0


if __name__ == '__main__':
    raise SystemExit(invoke())
