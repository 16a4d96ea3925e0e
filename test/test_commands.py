"""
Commands module behavioral tests (construction, usage, rendering).

Scope
- Validate Command construction, sanitation, and immutability of exposed state.
- Validate that cross-declaration rules are NOT enforced at construction.
- Validate usage synthesis and rich help/version rendering on a recording console.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is asserted on plain exported text (colorful=False by default).
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from argolis import Command, Positional, Option, render_help, render_version


def _console():
    return Console(file=io.StringIO(), record=True, width=160, color_system=None)


class TestCommand(TestCase):
    """Behavioral tests for Command specifications."""

    def testMinimal(self):
        c = Command("tool")
        self.assertEqual(c.name, "tool")
        self.assertIsNone(c.descr)
        self.assertIsNone(c.version)
        self.assertEqual(c.positionals, [])
        self.assertEqual(c.options, {})
        self.assertFalse(c.colorful)
        self.assertFalse(c.fancy)

    def testEmptyNameRejected(self):
        with self.assertRaises(ValueError):
            Command("  ")

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            Command(3)

    def testVersionIsTrimmed(self):
        self.assertEqual(Command("tool", version=" 1.0.0 ").version, "1.0.0")

    def testPositionalsMustBeDeclarations(self):
        with self.assertRaises(TypeError):
            Command("tool", positionals=["file"])
        with self.assertRaises(TypeError):
            Command("tool", positionals="file")

    def testDuplicatePositionalNamesRejected(self):
        with self.assertRaises(ValueError):
            Command("tool", positionals=[Positional("file"), Positional("file")])

    def testOptionsMustBeMapping(self):
        with self.assertRaises(TypeError):
            Command("tool", options=[Option()])

    def testOptionValuesMustBeDeclarations(self):
        with self.assertRaises(TypeError):
            Command("tool", options={"verbose": "boolean"})

    def testOptionKeysRejectDashes(self):
        with self.assertRaises(ValueError):
            Command("tool", options={"--verbose": Option(type="boolean")})

    def testOptionKeyCannotShadowPositional(self):
        with self.assertRaises(ValueError):
            Command("tool", positionals=[Positional("file")], options={"file": Option()})

    def testAliasReuseIsNotAConstructionError(self):
        c = Command("tool", options={"a": Option(alias="x"), "b": Option(alias="x")})
        self.assertEqual(list(c.options), ["a", "b"])

    def testBadPositionalOrderIsNotAConstructionError(self):
        c = Command("tool", positionals=[Positional("a"), Positional("b", required=True)])
        self.assertEqual([p.name for p in c.positionals], ["a", "b"])

    def testOptionsKeepDeclarationOrder(self):
        c = Command("tool", options={"zeta": Option(), "alpha": Option(), "mid": Option()})
        self.assertEqual(list(c.options), ["zeta", "alpha", "mid"])

    def testExposedStateIsCopied(self):
        options = {"verbose": Option(type="boolean")}
        c = Command("tool", options=options)
        options["extra"] = Option()
        c.options["other"] = Option()
        self.assertEqual(list(c.options), ["verbose"])

    def testUsageDetailed(self):
        c = Command("tool", positionals=[
            Positional("source", required=True),
            Positional("targets", variadic=True),
        ])
        self.assertEqual(c.usage(), "tool <source> [targets..] [options]")

    def testUsageSimple(self):
        c = Command("tool", positionals=[Positional("a", required=True), Positional("b")])
        self.assertEqual(c.usage(detailed=False), "tool <a> <b>")


class TestRendering(TestCase):
    """Rendering smoke tests for help and version output."""

    def setUp(self):
        self.command = Command(
            "tool",
            descr="copy files",
            version="1.2.3",
            positionals=[Positional("source", required=True, descr="file to copy")],
            options={
                "verbose": Option(type="boolean", alias="d", descr="chatty output"),
                "output": Option(required=True, descr="destination"),
                "maxRetries": Option(type="number", default=3),
            },
        )

    def testHelpEnumeratesEverything(self):
        console = _console()
        render_help(self.command, console=console)
        output = console.export_text()
        self.assertIn("usage: tool <source> [options]  copy files", output)
        self.assertIn("source", output)
        self.assertIn("file to copy", output)
        self.assertIn("-d,", output)
        self.assertIn("--verbose", output)
        self.assertIn("[boolean]", output)
        self.assertIn("--output", output)
        self.assertIn("[string][required]", output)
        self.assertIn("(default: 3)", output)
        self.assertIn("--help", output)
        self.assertIn("--version", output)

    def testHelpOmitsVersionWhenUndeclared(self):
        console = _console()
        render_help(Command("tool"), console=console)
        output = console.export_text()
        self.assertIn("--help", output)
        self.assertNotIn("--version", output)

    def testFancyHelpRendersPanel(self):
        console = _console()
        render_help(Command("tool", fancy=True), console=console)
        self.assertIn("TOOL HELP", console.export_text())

    def testVersion(self):
        console = _console()
        render_version(self.command, console=console)
        self.assertEqual(console.export_text().strip(), "tool — 1.2.3")

    def testVersionUnspecified(self):
        console = _console()
        render_version(Command("tool"), console=console)
        self.assertEqual(console.export_text().strip(), "tool — no version specified")

    def testRenderersRejectNonCommands(self):
        with self.assertRaises(TypeError):
            render_help("tool")
        with self.assertRaises(TypeError):
            render_version("tool")


if __name__ == "__main__":
    unittest.main()
