"""
Help command rendering tests.

Scope
- Exact layout of the usage, global options and commands blocks.
- Column alignment to the longest option spelling and command name.
- Dynamic option descriptions rendered against the live context.

Conventions
- Test method names follow CamelCase per project convention.
- Dispatchers are built with colorful=False so the captured output is plain text.
"""
import io
import textwrap
import unittest
from contextlib import redirect_stdout
from unittest import TestCase

from climod import Dispatcher


class TestHelp(TestCase):
    """Behavioral tests for the built-in help command."""

    def setUp(self):
        self.cli = Dispatcher(prog="tool", shell=False, colorful=False)

    def render(self, *argv):
        with redirect_stdout(io.StringIO()) as stdout:
            status = self.cli.invoke(list(argv))
        self.assertEqual(status, 0)
        return stdout.getvalue()

    def lines(self, *argv):
        return [line.rstrip() for line in self.render(*argv).splitlines()]

    def testDefaultLayout(self):
        self.assertEqual(self.render(), textwrap.dedent("""\
            Usage: tool [global opts] <command> [local opts]

            Global options:
              -v --verbose  Increase loglevel (current: 0)

            Commands:
              help  Print global usage and available commands
        """))

    def testExplicitHelpCommandMatchesDefault(self):
        self.assertEqual(self.render("help"), self.render())

    def testDynamicDescriptionSeesContext(self):
        self.assertIn("  -v --verbose  Increase loglevel (current: 2)", self.lines("-vv", "help"))

    def testCommandsAreAlignedToLongestName(self):
        self.cli.register_command("dumpContext", {
            "handler": lambda argv: 0,
            "description": "Dumps the context",
        })
        self.cli.register_command("x", lambda argv: 0)
        lines = self.lines()
        self.assertIn("  help         Print global usage and available commands", lines)
        self.assertIn("  dumpContext  Dumps the context", lines)
        self.assertIn("  x", lines)

    def testOptionsAreAlignedToLongestSpelling(self):
        @self.cli.option("config", short="c", long="config", default="~/.config/tool.json",
                         description=lambda ctx: f"Set config file path (current: {ctx.config})")
        def config(ctx, argv):
            ctx.config = argv.popleft()

        lines = self.lines("-c", "/tmp/x.json", "help")
        self.assertIn("  -v --verbose  Increase loglevel (current: 0)", lines)
        self.assertIn("  -c --config   Set config file path (current: /tmp/x.json)", lines)

    def testOptionsListedInRegistrationOrder(self):
        self.cli.register_global_option({"key": "quiet", "long": "quiet", "handle": lambda ctx, argv: None})
        lines = self.lines()
        self.assertLess(lines.index("  -v --verbose  Increase loglevel (current: 0)"), lines.index("  --quiet"))

    def testProgramNameFallsBackToArgv(self):
        cli = Dispatcher(shell=False, colorful=False)
        with redirect_stdout(io.StringIO()) as stdout:
            cli.invoke([])
        self.assertTrue(stdout.getvalue().startswith("Usage: "))


if __name__ == "__main__":
    unittest.main()
