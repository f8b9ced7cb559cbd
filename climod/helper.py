"""
climod built-in help command.

Renders, on standard output:

    Usage: <prog> [global opts] <command> [local opts]

    Global options:
      -v --verbose  Increase loglevel (current: 0)

    Commands:
      help  Print global usage and available commands

Option spellings and command names are padded to the longest entry of their
block. Option descriptions given as callables are rendered against the
current invocation context.

Palette keys (override any of them through a __styles__ mapping in __main__)
- usage-label, program-name, usage-section
- group-label, option-name, option-description
- command-name, command-description
"""
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .utils import progname

DESCRIPTION = "Print global usage and available commands"


def render(dispatcher, argv, /):
    """print the global usage of dispatcher; always returns 0."""
    context = dispatcher.store.get()
    console = Console()
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "usage-section": "#36C5F0",  # SKY-BLUE → softer than cyan
        "group-label": "bold #FFFFFF",  # Pure white headers
        "option-name": "bold #00E6FF",
        "option-description": "#9CA3AF",  # Muted gray
        "command-name": "bold #36C5F0",
        "command-description": "#9CA3AF",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        return Text(str(fragment), styles[style] if dispatcher.colorful else "")

    def block(label, rows, name_style, description_style):
        if not rows:
            return Text()
        section = Text.assemble(text(label, "group-label"), ":\n")
        width = max(len(name) for name, _ in rows)
        for name, description in rows:
            section.append("  ").append_text(text(name, name_style))
            section.append(" " * (width - len(name) + 2))
            section.append_text(text(description, description_style)).append("\n")
        return section

    renders = [
        Text.assemble(
            text("Usage", "usage-label"), ": ",
            text(dispatcher.prog or progname(), "program-name"), " ",
            text("[global opts] <command> [local opts]", "usage-section"), "\n",
        ),
        block(
            "Global options",
            [(" ".join(option.spellings), option.describe(context)) for option in dispatcher.registry.options],
            "option-name",
            "option-description",
        ),
        block(
            "Commands",
            [(name, descriptor.description or "") for name, descriptor in dispatcher.registry.commands.items()],
            "command-name",
            "command-description",
        ),
    ]

    output = Text("\n").join(render for render in renders if render)
    output.rstrip()
    console.print(output, soft_wrap=True, highlight=False)
    return 0


__all__ = (
    "DESCRIPTION",
    "render",
)
