"""
Registry module behavioral tests (descriptors, registration, lookup tables).

Scope
- CommandDescriptor / GlobalOption construction, normalization and immutability.
- Registry registration forms (descriptor, mapping, callable, decorators).
- Overwrite semantics, defaults seeding and first-match alias lookup.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from climod import CommandDescriptor, Context, GlobalOption, Registry


def _noop(ctx, argv):
    pass


class TestCommandDescriptor(TestCase):
    """Behavioral tests for CommandDescriptor."""

    def testDescriptionDefaultsToNone(self):
        self.assertIsNone(CommandDescriptor(lambda argv: 0).description)

    def testHandlerMustBeCallable(self):
        with self.assertRaises(TypeError):
            CommandDescriptor("not callable")

    def testDescriptionMustBeString(self):
        with self.assertRaises(TypeError):
            CommandDescriptor(lambda argv: 0, 42)

    def testIsReadOnly(self):
        descriptor = CommandDescriptor(lambda argv: 0, "demo")
        with self.assertRaises(AttributeError):
            descriptor.description = "changed"


class TestGlobalOption(TestCase):
    """Behavioral tests for GlobalOption."""

    def testSingleAliasesAreNormalizedToTuples(self):
        option = GlobalOption("loglevel", _noop, short="v", long="verbose")
        self.assertEqual(option.shorts, ("v",))
        self.assertEqual(option.longs, ("verbose",))

    def testAliasCollectionsKeepOrderAndDropDuplicates(self):
        option = GlobalOption("loglevel", _noop, short=["v", "V", "v"], long=("verbose", "loud"))
        self.assertEqual(option.shorts, ("v", "V"))
        self.assertEqual(option.longs, ("verbose", "loud"))

    def testSetAliasesAreAccepted(self):
        option = GlobalOption("loglevel", _noop, short={"v"})
        self.assertEqual(option.shorts, ("v",))

    def testMissingAliasesAreEmpty(self):
        option = GlobalOption("hidden", _noop)
        self.assertEqual(option.shorts, ())
        self.assertEqual(option.longs, ())
        self.assertEqual(option.spellings, ())

    def testSpellingsListShortsFirst(self):
        option = GlobalOption("config", _noop, short="c", long=["config", "cfg"])
        self.assertEqual(option.spellings, ("-c", "--config", "--cfg"))

    def testShortAliasMustBeOneCharacter(self):
        with self.assertRaises(ValueError):
            GlobalOption("loglevel", _noop, short="vv")
        with self.assertRaises(ValueError):
            GlobalOption("loglevel", _noop, short="-")

    def testLongAliasIsWrittenWithoutDashes(self):
        with self.assertRaises(ValueError):
            GlobalOption("loglevel", _noop, long="--verbose")
        with self.assertRaises(ValueError):
            GlobalOption("loglevel", _noop, long="")

    def testNonStringAliasRejected(self):
        with self.assertRaises(TypeError):
            GlobalOption("loglevel", _noop, short=3)
        with self.assertRaises(TypeError):
            GlobalOption("loglevel", _noop, long=["verbose", 3])

    def testKeyMustBeNonEmptyString(self):
        with self.assertRaises(TypeError):
            GlobalOption(1, _noop)
        with self.assertRaises(ValueError):
            GlobalOption("  ", _noop)
        with self.assertRaises(ValueError):
            GlobalOption("", _noop)

    def testKeyIsKeptAsRegistered(self):
        with self.assertRaises(ValueError):
            GlobalOption(" config ", _noop, default="x")
        self.assertEqual(GlobalOption("dry run", _noop).key, "dry run")

    def testHandleMustBeCallable(self):
        with self.assertRaises(TypeError):
            GlobalOption("loglevel", None)

    def testDescribeStaticDescription(self):
        option = GlobalOption("loglevel", _noop, description="Increase loglevel")
        self.assertEqual(option.describe(Context()), "Increase loglevel")

    def testDescribeCallsDynamicDescriptionWithContext(self):
        option = GlobalOption("loglevel", _noop, description=lambda ctx: f"current: {ctx.loglevel}")
        self.assertEqual(option.describe(Context(loglevel=4)), "current: 4")

    def testDescriptionDefaultsToEmpty(self):
        self.assertEqual(GlobalOption("loglevel", _noop).describe(Context()), "")

    def testIsReadOnly(self):
        option = GlobalOption("loglevel", _noop, default=0)
        with self.assertRaises(AttributeError):
            option.default = 1


class TestRegistry(TestCase):
    """Behavioral tests for Registry."""

    def setUp(self):
        self.registry = Registry()

    def testRegisterCommandOverwrites(self):
        first = self.registry.register_command("run", CommandDescriptor(lambda argv: 1, "first"))
        second = self.registry.register_command("run", CommandDescriptor(lambda argv: 2, "second"))
        self.assertIsNot(first, second)
        self.assertIs(self.registry.commands["run"], second)
        self.assertEqual(len(self.registry.commands), 1)

    def testRegisterCommandFromMapping(self):
        descriptor = self.registry.register_command("run", {"handler": lambda argv: 0, "description": "Run it"})
        self.assertIsInstance(descriptor, CommandDescriptor)
        self.assertEqual(descriptor.description, "Run it")

    def testRegisterCommandFromCallable(self):
        def run(argv):
            return 0

        self.assertIs(self.registry.register_command("run", run).handler, run)

    def testRegisterCommandRejectsOtherObjects(self):
        with self.assertRaises(TypeError):
            self.registry.register_command("run", 42)
        with self.assertRaises(TypeError):
            self.registry.register_command(42, lambda argv: 0)

    def testCommandNamesAreCaseSensitive(self):
        self.registry.register_command("Run", lambda argv: 0)
        self.assertNotIn("run", self.registry.commands)

    def testCommandDecoratorUsesFunctionName(self):
        @self.registry.command
        def deploy(argv):
            return 0

        self.assertIs(self.registry.commands["deploy"].handler, deploy)

    def testCommandDecoratorWithExplicitName(self):
        @self.registry.command("dumpContext", description="Dump it")
        def dump(argv):
            return 0

        self.assertEqual(self.registry.commands["dumpContext"].description, "Dump it")
        self.assertNotIn("dump", self.registry.commands)

    def testCommandsViewIsReadOnly(self):
        with self.assertRaises(TypeError):
            self.registry.commands["run"] = CommandDescriptor(lambda argv: 0)

    def testOptionsKeepRegistrationOrder(self):
        first = self.registry.register_global_option(GlobalOption("a", _noop))
        second = self.registry.register_global_option(GlobalOption("b", _noop))
        self.assertEqual(self.registry.options, (first, second))

    def testDuplicateKeysAreNotDetected(self):
        self.registry.register_global_option(GlobalOption("a", _noop, short="x"))
        self.registry.register_global_option(GlobalOption("a", _noop, short="y"))
        self.assertEqual(len(self.registry.options), 2)

    def testRegisterOptionFromMapping(self):
        option = self.registry.register_global_option({
            "key": "config",
            "short": "c",
            "long": "config",
            "handle": _noop,
            "default": "~/.config/app.json",
        })
        self.assertEqual(option.spellings, ("-c", "--config"))

    def testRegisterOptionMappingNeedsKeyAndHandle(self):
        with self.assertRaises(TypeError):
            self.registry.register_global_option({"key": "config"})

    def testOptionDecoratorRegistersHandle(self):
        @self.registry.option("config", short="c", default="path")
        def config(ctx, argv):
            ctx.config = argv.popleft()

        option, = self.registry.options
        self.assertIs(option.handle, config)
        self.assertEqual(option.default, "path")

    def testDefaultsSkipOptionsWithoutDefault(self):
        self.registry.register_global_option(GlobalOption("level", _noop, default=0))
        self.registry.register_global_option(GlobalOption("config", _noop, default=None))
        self.registry.register_global_option(GlobalOption("plain", _noop))
        self.assertEqual(self.registry.defaults(), {"level": 0, "config": None})

    def testLookupFirstRegistrationWins(self):
        first = self.registry.register_global_option(GlobalOption("a", _noop, short="x", long="same"))
        second = self.registry.register_global_option(GlobalOption("b", _noop, short="x", long=["same", "other"]))
        longs, shorts = self.registry.lookup()
        self.assertIs(longs["same"], first)
        self.assertIs(longs["other"], second)
        self.assertIs(shorts["x"], first)


if __name__ == "__main__":
    unittest.main()
