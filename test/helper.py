"""
Helper module behavioral tests (help, usage and version rendering).

Scope
- Program help lists commands, built-in flags and public options.
- Command help lists the positional signature, private options, and public
  options minus the ones the command shadows.
- Hidden options never render; colorful=False yields unstyled text.
"""
import unittest
from unittest import TestCase

from rich.text import Text

from commandant import Command, Metadata, Option, Positional, build, render, render_usage, render_version


def handler(*args):
    return args


def registry():
    rmdir = Command("rmdir", handler, descr="remove a directory", positionals=[
        Positional("a", descr="first"),
        Positional("b"),
        Positional("c", nargs="?"),
        Positional("d", nargs="*"),
    ], options=[
        Option("-r", "--recursive", descr="remove recursively"),
        Option("-q", "--quite", arity="required", metavar="quiet", descr="private quite"),
        Option("--secret", hidden=True),
    ])
    mkdir = Command("mkdir", handler, descr="make a directory", positionals=[Positional("dir")])
    return build([rmdir, mkdir], [
        Option("-v", "--verbose", descr="say more"),
        Option("-q", "--quite", descr="public quite"),
        Option("--level", arity="optional", type=int),
        Option("--debug", hidden=True),
    ])


PROGRAM = Metadata("demo", "1.2.3", "a demo program")


class TestProgramHelp(TestCase):
    def setUp(self):
        self.registry = registry()
        self.text = render(self.registry, program=PROGRAM)
        self.plain = str(self.text)

    def testReturnsText(self):
        self.assertIsInstance(self.text, Text)
        self.assertEqual(self.text.spans, [])

    def testVersionHeader(self):
        self.assertTrue(self.plain.startswith("demo 1.2.3\n\nusage: demo <command> [options] [args...]"))

    def testUsageAndDescription(self):
        self.assertIn("usage: demo <command> [options] [args...]", self.plain)
        self.assertIn("a demo program", self.plain)

    def testCommandsListed(self):
        self.assertIn("commands:", self.plain)
        self.assertRegex(self.plain, r"rmdir +remove a directory")
        self.assertRegex(self.plain, r"mkdir +make a directory")

    def testOptionsListed(self):
        self.assertRegex(self.plain, r"-h, --help +show this help and exit")
        self.assertRegex(self.plain, r"-V, --version +show the version and exit")
        self.assertRegex(self.plain, r"-v, --verbose +say more")
        self.assertRegex(self.plain, r"-q, --quite +public quite")
        self.assertIn("--level [<level>]", self.plain)

    def testHiddenOmitted(self):
        self.assertNotIn("--debug", self.plain)

    def testPrivateOptionsNotInProgramHelp(self):
        self.assertNotIn("--recursive", self.plain)

    def testVersionFlagNeedsVersion(self):
        plain = str(render(self.registry, program=Metadata("demo")))
        self.assertNotIn("--version", plain)
        self.assertTrue(plain.startswith("usage: demo <command>"))


class TestCommandHelp(TestCase):
    def setUp(self):
        self.registry = registry()
        self.plain = str(render(self.registry, "rmdir", program=PROGRAM))

    def testSignature(self):
        self.assertTrue(self.plain.startswith("usage: demo rmdir [options] <a> <b> [c] <d...>"))
        self.assertIn("remove a directory", self.plain)

    def testPositionalsListed(self):
        self.assertIn("arguments:", self.plain)
        self.assertRegex(self.plain, r"<a> +first")

    def testPrivateOptionsListed(self):
        self.assertRegex(self.plain, r"-r, --recursive +remove recursively")
        self.assertIn("-q, --quite <quiet>", self.plain)
        self.assertIn("private quite", self.plain)

    def testShadowedPublicHidden(self):
        self.assertNotIn("public quite", self.plain)
        self.assertIn("global options:", self.plain)
        self.assertRegex(self.plain, r"-v, --verbose +say more")

    def testHiddenOmitted(self):
        self.assertNotIn("--secret", self.plain)
        self.assertNotIn("--debug", self.plain)

    def testOtherCommandSeesPublic(self):
        plain = str(render(self.registry, self.registry["mkdir"], program=PROGRAM))
        self.assertIn("public quite", plain)
        self.assertNotIn("--recursive", plain)


class TestUsageAndVersion(TestCase):
    def setUp(self):
        self.registry = registry()

    def testProgramUsage(self):
        self.assertEqual(str(render_usage(self.registry, program=PROGRAM)), "usage: demo <command> [options] [args...]")

    def testCommandUsage(self):
        self.assertEqual(str(render_usage(self.registry, "mkdir", program=PROGRAM)), "usage: demo mkdir [options] <dir>")

    def testVersion(self):
        self.assertEqual(str(render_version(PROGRAM)), "demo 1.2.3")
        self.assertEqual(str(render_version(Metadata("demo", "2024.1-rc.1+local"))), "demo 2024.1-rc.1+local")
        with self.assertRaises(ValueError):
            render_version(Metadata("demo"))

    def testColorfulAddsStyles(self):
        self.assertTrue(render_usage(self.registry, program=PROGRAM, colorful=True).spans)


if __name__ == "__main__":
    unittest.main()
