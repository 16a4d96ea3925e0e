"""
Faults module behavioral tests.

Scope
- Validate FaultCode stability and host remapping through __main__.__codes__.
- Validate ResolveException options, copy.replace() merging, and rich rendering.
- Validate trigger() raising by default and printing/exiting in shell mode.

Conventions
- Test method names follow CamelCase per project convention.
- Host configuration is patched onto the running __main__ module and removed after.
"""

from __future__ import annotations

import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from argolis import (
    Command,
    FaultCode,
    ResolveException,
    UnknownOptionError,
    MissingPositionalError,
    trigger,
)


def _console():
    return Console(file=io.StringIO(), record=True, width=120, color_system=None)


def _fault(**options):
    return UnknownOptionError(
        "unknown option: bogus",
        title="unknown option",
        code=FaultCode.UNKNOWN_OPTION,
        hint="run 'tool --help' to see all available options",
        token="bogus",
        **options,
    )


class TestFaultCode(TestCase):
    """Stable numeric identifiers and host remapping."""

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.ALIAS_CONFLICT, 11101)
        self.assertEqual(FaultCode.UNKNOWN_OPTION, 11111)
        self.assertEqual(FaultCode.MISSING_POSITIONAL, 11121)

    def testCodesAreUnique(self):
        self.assertEqual(len({code.value for code in FaultCode}), len(FaultCode))

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.INVALID_VALUE.normalize(), "11115")

    def testNormalizeUsesHostMapping(self):
        codes = {FaultCode.UNKNOWN_OPTION: "E-UNKNOWN"}
        with mock.patch.object(sys.modules["__main__"], "__codes__", codes, create=True):
            self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "E-UNKNOWN")
            self.assertEqual(FaultCode.UNKNOWN_ARGUMENT.normalize(), "11122")


class TestResolveException(TestCase):
    """Message, options, and copy semantics."""

    def testMessageAndOptions(self):
        fault = _fault()
        self.assertEqual(fault.message, "unknown option: bogus")
        self.assertEqual(str(fault), "unknown option: bogus")
        self.assertEqual(fault.options["token"], "bogus")

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            _fault().options["token"] = "other"

    def testReplaceMergesOptions(self):
        fault = _fault()
        tool = Command("tool")
        replaced = copy.replace(fault, tool=tool, token="other")
        self.assertIsInstance(replaced, UnknownOptionError)
        self.assertIsNot(replaced, fault)
        self.assertIs(replaced.options["tool"], tool)
        self.assertEqual(replaced.options["token"], "other")
        self.assertEqual(fault.options["token"], "bogus")

    def testFamily(self):
        self.assertTrue(issubclass(MissingPositionalError, ResolveException))
        self.assertTrue(issubclass(ResolveException, Exception))

    def testPublicSurface(self):
        import argolis.faults

        exported = set(argolis.faults.__all__)
        self.assertEqual(exported - {name for name in exported if name.endswith("Error")}, {
            "ResolveException",
            "FaultCode",
            "trigger",
        })
        self.assertFalse(hasattr(argolis.faults, "getdoc"))


class TestRendering(TestCase):
    """Plain and fancy fault rendering."""

    def testPlainRendering(self):
        console = _console()
        console.print(_fault(tool=Command("tool")))
        output = console.export_text()
        self.assertIn("[ tool — 11111 | Unknown Option ]", output)
        self.assertIn("unknown option: bogus", output)
        self.assertIn("→ run 'tool --help'", output)

    def testProgramNameFallback(self):
        console = _console()
        console.print(_fault())
        self.assertIn("[ argolis — 11111", console.export_text())

    def testHostProgramName(self):
        console = _console()
        with mock.patch.object(sys.modules["__main__"], "__prog__", "mytool", create=True):
            console.print(_fault(tool=Command("tool")))
        self.assertIn("[ mytool — 11111", console.export_text())

    def testFancyRendering(self):
        console = _console()
        console.print(_fault(fancy=True))
        output = console.export_text()
        self.assertIn("Unknown Option", output)
        self.assertIn("╭", output)

    def testColorfulRenderingKeepsText(self):
        console = _console()
        console.print(_fault(colorful=True))
        self.assertIn("unknown option: bogus", console.export_text())


class TestTrigger(TestCase):
    """Raise versus print-and-exit."""

    def testRaisesByDefault(self):
        with self.assertRaises(UnknownOptionError) as context:
            trigger(_fault(), hint="other hint")
        self.assertEqual(context.exception.options["hint"], "other hint")

    def testShellPrintsAndExits(self):
        console = _console()
        with mock.patch("argolis.faults.console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(_fault(), shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("unknown option: bogus", console.export_text())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


if __name__ == "__main__":
    unittest.main()
