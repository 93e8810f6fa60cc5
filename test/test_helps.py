"""
Help rendering tests (column alignment, default layout, custom templates).

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from io import StringIO
from typing import Annotated
from unittest import TestCase

import jinja2

from pennant import (
    FlagSet,
    Verbs,
    Help,
    DEFAULT_TEMPLATE,
    compile_template,
    default_help,
    render,
    tabulate,
    templated_help,
)


class Server:
    port: Annotated[int, "-p, --port, description='Port to listen on'"]


class Commands(Verbs):
    serve: Annotated[Server, "serve"]


class Options:
    name: Annotated[str, "-n, --name, description='User name', obligatory"]
    debug: Annotated[bool, "--debug, description='Debug output'"]
    help: Help
    verbs: Commands


class TestTabulate(TestCase):
    """Alignment of tab-terminated cells."""

    def testColumnsAreAligned(self):
        text = tabulate("a\tbb\tend\nccc\td\tend")
        self.assertEqual(text, "a   bb  end\nccc d   end")

    def testLastCellIsNotAColumn(self):
        self.assertEqual(tabulate("key\ta very long trailing cell\nk\tv"), "key a very long trailing cell\nk   v")

    def testPaddingAndMinimumWidth(self):
        self.assertEqual(tabulate("abcdef\tx", minwidth=2, padding=2), "abcdef  x")
        self.assertEqual(tabulate("a\tx", minwidth=2, padding=0), "a x")

    def testLinesWithoutTabsSplitBlocks(self):
        text = tabulate("a\tx\nheading\nlonger\ty")
        self.assertEqual(text, "a   x\nheading\nlonger y")

    def testPlainTextIsUntouched(self):
        self.assertEqual(tabulate("no tabs\nat all\n"), "no tabs\nat all\n")


class TestDefaultHelp(TestCase):
    """Layout produced by the default help callback."""

    def setUp(self):
        self.flagset = FlagSet("tool", Options())
        self.stream = StringIO()
        default_help(self.stream, self.flagset)
        self.text = self.stream.getvalue()

    def testUsageLine(self):
        self.assertIn("Usage: tool [global options] <verb> [verb options]", self.text)

    def testGlobalOptions(self):
        self.assertIn("    -n, --name  User name (*)", self.text)
        self.assertIn("        --debug Debug output", self.text)
        self.assertIn("    -h, --help  Show this help", self.text)

    def testVerbs(self):
        self.assertIn("Verbs:", self.text)
        self.assertIn("    serve:", self.text)
        self.assertIn("-p, --port", self.text)
        self.assertIn("Port to listen on", self.text)

    def testPrintHelpUsesCallback(self):
        stream = StringIO()
        self.flagset.print_help(stream)
        self.assertEqual(stream.getvalue(), self.text)


class TestTemplatedHelp(TestCase):
    """Custom jinja2 templates."""

    def testCustomTemplate(self):
        help = templated_help("{{ name }}:{% for flag in flags %} {{ flag.name }}{% endfor %}")
        stream = StringIO()
        flagset = FlagSet("tool", Options(), help=help)
        flagset.print_help(stream)
        self.assertEqual(stream.getvalue(), "tool: --name --debug --help")
        self.assertEqual(help.__name__, "help")

    def testCallbackIsSharedWithVerbs(self):
        help = templated_help("[{{ name }}]")
        flagset = FlagSet("tool", Options(), help=help)
        stream = StringIO()
        flagset.verbs["serve"].print_help(stream)
        self.assertEqual(stream.getvalue(), "[serve]")

    def testTemplateErrorsSurfaceEarly(self):
        with self.assertRaises(jinja2.TemplateSyntaxError):
            templated_help("{% for flag in flags %}")

    def testCompiledOncePerSource(self):
        source = "{{ name }} once"
        self.assertIs(compile_template(source), compile_template(source))
        self.assertIs(compile_template(DEFAULT_TEMPLATE), compile_template(DEFAULT_TEMPLATE))

    def testRenderExposesFlagSet(self):
        flagset = FlagSet("tool", Options())
        self.assertEqual(render("{{ flagset.verbs | length }}", flagset), "1")

    def testCompileRejectsNonString(self):
        with self.assertRaises(TypeError):
            compile_template(None)


if __name__ == "__main__":
    unittest.main()
