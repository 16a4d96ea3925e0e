"""
Shell runner behavioral tests.

Scope
- Validate parse_args() returning the result mapping on success.
- Validate help/version rendering followed by exit status 0.
- Validate fault printing on the stderr console followed by exit status 1.

Conventions
- Test method names follow CamelCase per project convention.
- Output goes to recording consoles; the stderr console is patched in place.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from argolis import Command, Positional, Option, parse_args


def _console():
    return Console(file=io.StringIO(), record=True, width=160, color_system=None)


class TestParseArgs(TestCase):
    """Process-facing behavior of parse_args()."""

    def setUp(self):
        self.command = Command(
            "tool",
            version="0.4.2",
            positionals=[Positional("source", required=True)],
            options={
                "verbose": Option(type="boolean", alias="d"),
                "maxRetries": Option(type="number", default=3),
            },
        )

    def testReturnsValues(self):
        self.assertEqual(
            parse_args(self.command, ["in.txt", "-d"]),
            {"source": "in.txt", "verbose": True, "maxRetries": 3},
        )

    def testReadsArgv(self):
        with mock.patch("sys.argv", ["tool", "in.txt", "--max-retries", "5"]):
            self.assertEqual(parse_args(self.command), {"source": "in.txt", "maxRetries": 5})

    def testHelpExitsZero(self):
        console = _console()
        with self.assertRaises(SystemExit) as context:
            parse_args(self.command, ["--help"], console=console)
        self.assertEqual(context.exception.code, 0)
        self.assertIn("usage: tool <source> [options]", console.export_text())

    def testVersionExitsZero(self):
        console = _console()
        with self.assertRaises(SystemExit) as context:
            parse_args(self.command, ["-v"], console=console)
        self.assertEqual(context.exception.code, 0)
        self.assertIn("tool — 0.4.2", console.export_text())

    def testFaultExitsOne(self):
        console = _console()
        with mock.patch("argolis.faults.console", console):
            with self.assertRaises(SystemExit) as context:
                parse_args(self.command, ["in.txt", "--bogus"])
        self.assertEqual(context.exception.code, 1)
        output = console.export_text()
        self.assertIn("[ tool — 11111 | Unknown Option ]", output)
        self.assertIn("unknown option: bogus", output)

    def testMissingPositionalNamesUsage(self):
        console = _console()
        with mock.patch("argolis.faults.console", console):
            with self.assertRaises(SystemExit):
                parse_args(self.command, [])
        self.assertIn("tool <source>", console.export_text())

    def testDeclaredShortVersionAliasWins(self):
        command = Command("tool", version="0.4.2", options={"verbose": Option(type="boolean", alias="v")})
        self.assertEqual(parse_args(command, ["-v"]), {"verbose": True})
        console = _console()
        with self.assertRaises(SystemExit) as context:
            parse_args(command, ["--version"], console=console)
        self.assertEqual(context.exception.code, 0)
        self.assertIn("tool — 0.4.2", console.export_text())

    def testRejectsNonCommand(self):
        with self.assertRaises(TypeError):
            parse_args("tool", [])


if __name__ == "__main__":
    unittest.main()
