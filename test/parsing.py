"""
Parser behavioral tests (dispatch, binding, validation, typed getters, bootstrap).

Scope
- Validate the token grammar: long/short forms, inline and attached values.
- Validate positional binding and required-argument validation.
- Validate friendly faults for unknown arguments and missing values.
- Validate warnings for repeated arguments and empty inline values.
- Validate parser-level typed getters and reuse across parses.
- Validate the invoke() bootstrap (help exit, fault surfacing, shell mode).

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (ArgParser, invoke, outcomes, faults).
"""

from __future__ import annotations

import contextlib
import io
import unittest
import warnings
from unittest import TestCase

from argparser import ArgParser, invoke, Success, Failure, HelpRequested
from argparser.faults import (
    FaultCode,
    ArgumentError,
    UnknownArgumentError,
    MissingArgumentError,
    ParseError,
    ValidationError,
    EmptyValueWarning,
    RepeatedArgumentWarning,
)


def server():
    parser = ArgParser("server", "A tiny server", version="1.0")
    parser.add_option("p", "port", "listening port", 8080)
    parser.add_option("o", "output", "output file")
    parser.add_flag("v", "verbose", "verbose output")
    parser.add_option("r", "ratio", "sampling ratio")
    return parser


class TestDispatch(TestCase):
    """Behavioral tests for the token grammar."""

    def setUp(self):
        self.parser = server()

    def testEmptyInput(self):
        outcome = self.parser.parse([])
        self.assertIsInstance(outcome, Success)
        self.assertTrue(outcome.ok)
        self.assertIs(outcome.unwrap(), self.parser)

    def testDefaultUsedWhenNotGiven(self):
        self.parser.parse([])
        self.assertEqual(self.parser.get("port", int), 8080)
        self.assertEqual(self.parser.get_int("port"), 8080)
        self.assertFalse(self.parser.is_set("port"))

    def testUnmentionedFlag(self):
        self.parser.parse([])
        self.assertFalse(self.parser.is_set("verbose"))
        self.assertIs(self.parser.get("verbose", bool), False)
        self.assertFalse(self.parser.get_bool("verbose"))

    def testLongFlag(self):
        self.parser.parse(["--verbose"])
        self.assertTrue(self.parser.is_set("v"))
        self.assertTrue(self.parser.get_bool("verbose"))

    def testInlineEqualsSeparate(self):
        self.parser.parse(["--output=result.txt"])
        inline = self.parser.get_string("output")
        self.parser.parse(["--output", "result.txt"])
        self.assertEqual(inline, "result.txt")
        self.assertEqual(self.parser.get_string("output"), inline)

    def testInlineValueSplitsAtFirstEquals(self):
        self.parser.parse(["--output=key=value"])
        self.assertEqual(self.parser.get_string("output"), "key=value")

    def testAttachedEqualsSeparate(self):
        self.parser.parse(["-p8080"])
        attached = self.parser.get_int("port")
        self.parser.parse(["-p", "8080"])
        self.assertEqual(attached, 8080)
        self.assertEqual(self.parser.get_int("p"), attached)

    def testAttachedValueIsNotAFlagCluster(self):
        parser = ArgParser("tool")
        parser.add_option("a", "alpha")
        parser.add_flag("b")
        parser.add_flag("c")
        self.assertTrue(parser.parse(["-abc"]).ok)
        self.assertEqual(parser.get_string("alpha"), "bc")
        self.assertFalse(parser.is_set("b"))
        self.assertFalse(parser.is_set("c"))

    def testSeparateValueMayLookLikeAnOption(self):
        self.parser.parse(["--output", "-v"])
        self.assertEqual(self.parser.get_string("output"), "-v")
        self.assertFalse(self.parser.is_set("verbose"))

    def testShortFlagIgnoresTrailingCharacters(self):
        outcome = self.parser.parse(["-vx"])
        self.assertTrue(outcome.ok)
        self.assertTrue(self.parser.is_set("verbose"))

    def testLoneDashIsPositional(self):
        self.parser.parse(["-"])
        self.assertEqual(self.parser.positionals(), ("-",))

    def testGetDouble(self):
        self.parser.parse(["--ratio", "0.25"])
        self.assertEqual(self.parser.get_double("ratio"), 0.25)
        self.assertEqual(self.parser.get("ratio", float), 0.25)


class TestPositionals(TestCase):
    """Binding of positional values by declaration index."""

    def setUp(self):
        self.parser = ArgParser("copy")
        self.parser.add_flag("v", "verbose")
        self.parser.add_positional("src", "file to read", True)
        self.parser.add_positional("dst", "file to write")

    def testBindingIgnoresInterleavedOptions(self):
        self.parser.parse(["a", "-v", "b"])
        self.assertEqual(self.parser.get_string("src"), "a")
        self.assertEqual(self.parser.get_string("dst"), "b")
        self.assertTrue(self.parser.is_set("verbose"))

    def testSurplusValuesKept(self):
        self.parser.parse(["a", "b", "c"])
        self.assertEqual(self.parser.positionals(), ("a", "b", "c"))
        self.assertEqual(self.parser.get_string("dst"), "b")

    def testSurplusDeclarationsStayUnset(self):
        self.parser.parse(["a"])
        self.assertFalse(self.parser.is_set("dst"))
        self.assertIsNone(self.parser.get("dst"))

    def testMissingRequiredPositional(self):
        outcome = self.parser.parse(["-v"])
        self.assertIsInstance(outcome, Failure)
        self.assertIs(outcome.kind, MissingArgumentError)
        self.assertEqual(outcome.fault.options["input"], "src")
        self.assertIn("src", outcome.message)
        self.assertEqual(outcome.fault.code, FaultCode.MISSING_ARGUMENT)

    def testPositionalNameIsNotAnOption(self):
        outcome = self.parser.parse(["--src", "a"])
        self.assertIs(outcome.kind, UnknownArgumentError)

    def testPositionalValidator(self):
        self.parser.find("src").validator(lambda value: value.endswith(".txt"))
        outcome = self.parser.parse(["data.csv"])
        self.assertIs(outcome.kind, ValidationError)
        self.assertEqual(outcome.fault.code, FaultCode.INVALID_VALUE)


class TestRequired(TestCase):
    """Required options and flags are validated in declaration order."""

    def testRequiredOptionNamedByLongName(self):
        parser = ArgParser("tool")
        parser.add_option("c", "config").require()
        parser.add_positional("input", "", True)
        outcome = parser.parse([])
        self.assertEqual(outcome.fault.options["input"], "--config")

    def testRequiredOptionNamedByShortName(self):
        parser = ArgParser("tool")
        parser.add_option("c").require()
        outcome = parser.parse([])
        self.assertEqual(outcome.fault.options["input"], "-c")

    def testDefaultDoesNotSatisfyRequired(self):
        parser = ArgParser("tool")
        parser.add_option("c", "config", "", "app.toml").require()
        self.assertIs(parser.parse([]).kind, MissingArgumentError)
        self.assertTrue(parser.parse(["-c", "other.toml"]).ok)


class TestFaults(TestCase):
    """Fail-fast parse faults."""

    def setUp(self):
        self.parser = server()

    def testUnknownLongOption(self):
        outcome = self.parser.parse(["--bogus", "--output", "x"])
        self.assertIs(outcome.kind, UnknownArgumentError)
        self.assertEqual(outcome.fault.options["token"], "--bogus")
        self.assertEqual(outcome.fault.code, FaultCode.UNKNOWN_ARGUMENT)
        # Later tokens are never processed.
        self.assertFalse(self.parser.is_set("output"))

    def testUnknownShortOption(self):
        outcome = self.parser.parse(["-x"])
        self.assertIs(outcome.kind, UnknownArgumentError)
        self.assertEqual(outcome.fault.options["token"], "-x")

    def testUnknownInlineOptionKeepsRawToken(self):
        outcome = self.parser.parse(["--bogus=1"])
        self.assertEqual(outcome.fault.options["token"], "--bogus=1")
        self.assertEqual(outcome.fault.options["input"], "--bogus")

    def testNegativeNumberIsNotPositional(self):
        self.assertIs(self.parser.parse(["-5"]).kind, UnknownArgumentError)

    def testDoubleDashAloneIsUnknown(self):
        self.assertIs(self.parser.parse(["--"]).kind, UnknownArgumentError)

    def testSuggestion(self):
        outcome = self.parser.parse(["--verbos"])
        self.assertIn("--verbose", outcome.fault.options["suggestions"])

    def testUnknownPosition(self):
        outcome = self.parser.parse(["-v", "--bogus"])
        self.assertEqual(outcome.fault.options["index"], 2)
        self.assertIn("second", outcome.message)

    def testStateNotRolledBack(self):
        self.parser.parse(["-v", "--bogus"])
        self.assertTrue(self.parser.is_set("verbose"))

    def testMissingOptionValue(self):
        for tokens in (["--port"], ["-p"], ["-v", "--output"]):
            with self.subTest(tokens=tokens):
                outcome = self.parser.parse(tokens)
                self.assertIs(outcome.kind, ParseError)
                self.assertEqual(outcome.fault.code, FaultCode.MISSING_OPTION_VALUE)

    def testFlagWithInlineValue(self):
        outcome = self.parser.parse(["--verbose=yes"])
        self.assertIs(outcome.kind, ParseError)
        self.assertEqual(outcome.fault.code, FaultCode.FLAG_ASSIGNMENT)

    def testValidatorRejection(self):
        self.parser.find("output").validator(lambda value: value.endswith(".txt"))
        outcome = self.parser.parse(["--output", "result.csv"])
        self.assertIs(outcome.kind, ValidationError)
        self.assertEqual(outcome.fault.options["token"], "--output")
        self.assertFalse(self.parser.is_set("output"))

    def testFailureCarriesParser(self):
        outcome = self.parser.parse(["--bogus"])
        self.assertIs(outcome.fault.options["tool"], self.parser)
        self.assertFalse(outcome.fault.options["shell"])


class TestWarnings(TestCase):
    """Non-fatal diagnostics."""

    def setUp(self):
        self.parser = server()

    def testRepeatedOptionLastWins(self):
        with self.assertWarns(RepeatedArgumentWarning):
            outcome = self.parser.parse(["-p", "1", "--port", "2"])
        self.assertTrue(outcome.ok)
        self.assertEqual(self.parser.get_int("port"), 2)

    def testRepeatedFlag(self):
        with self.assertWarns(RepeatedArgumentWarning):
            self.parser.parse(["-v", "-v"])
        self.assertTrue(self.parser.is_set("verbose"))

    def testEmptyInlineValue(self):
        with self.assertWarns(EmptyValueWarning) as context:
            outcome = self.parser.parse(["--output="])
        self.assertTrue(outcome.ok)
        self.assertTrue(self.parser.is_set("output"))
        self.assertEqual(self.parser.get_string("output"), "")
        self.assertEqual(context.warning.code, FaultCode.EMPTY_INLINE_VALUE)

    def testEmptySeparateValueDoesNotWarn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            outcome = self.parser.parse(["--output", ""])
        self.assertTrue(outcome.ok)
        self.assertTrue(self.parser.is_set("output"))
        self.assertEqual(self.parser.warnings(), ())

    def testEscalatedWarningStillReturnsOutcome(self):
        parser = ArgParser("tool")
        parser.add_flag("v", "verbose")
        parser.add_positional("input", "", True)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            outcome = parser.parse(["-v", "file", "-v"])
        self.assertIsInstance(outcome, Success)
        # The pass ran to completion: positionals bound, requirements checked.
        self.assertEqual(parser.get_string("input"), "file")
        self.assertTrue(parser.is_set("verbose"))
        self.assertEqual([type(warning) for warning in parser.warnings()], [RepeatedArgumentWarning])

    def testEscalatedEmptyValueStillReturnsOutcome(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            outcome = self.parser.parse(["--output=", "-p", "1"])
        self.assertTrue(outcome.ok)
        self.assertEqual(self.parser.get_int("port"), 1)
        self.assertIsInstance(self.parser.warnings()[0], EmptyValueWarning)

    def testWarningsAreRecordedInOrder(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            self.parser.parse(["--output=", "-v", "-v"])
        kinds = [EmptyValueWarning, RepeatedArgumentWarning]
        self.assertEqual([type(warning) for warning in self.parser.warnings()], kinds)
        self.assertEqual([warning.category for warning in caught], kinds)
        self.assertIs(self.parser.warnings()[0].options["tool"], self.parser)


class TestHelp(TestCase):
    """Help is an outcome, never an exit."""

    def setUp(self):
        self.parser = server()

    def testLongHelp(self):
        outcome = self.parser.parse(["--help"])
        self.assertIsInstance(outcome, HelpRequested)
        self.assertEqual(outcome.help, self.parser.help())

    def testShortHelpAfterOtherTokens(self):
        self.assertIsInstance(self.parser.parse(["-v", "-h"]), HelpRequested)

    def testHelpStopsBeforeLaterFaults(self):
        self.assertIsInstance(self.parser.parse(["--help", "--bogus"]), HelpRequested)

    def testEarlierFaultWinsOverHelp(self):
        self.assertIsInstance(self.parser.parse(["--bogus", "--help"]), Failure)

    def testHelpSkipsRequiredValidation(self):
        parser = ArgParser("tool")
        parser.add_positional("input", "", True)
        self.assertIsInstance(parser.parse(["-h"]), HelpRequested)

    def testHelpTokenConsumedAsOptionValue(self):
        # Only tokens in command position are checked for help.
        self.assertTrue(self.parser.parse(["--output", "--help"]).ok)
        self.assertEqual(self.parser.get_string("output"), "--help")


class TestGetters(TestCase):
    """Parser-level typed getters."""

    def setUp(self):
        self.parser = server()

    def testUnknownNames(self):
        self.parser.parse([])
        self.assertIsNone(self.parser.get("missing"))
        self.assertIsNone(self.parser.get("missing", int))
        self.assertEqual(self.parser.get_string("missing"), "")
        self.assertFalse(self.parser.get_bool("missing"))
        self.assertFalse(self.parser.is_set("missing"))
        self.assertIsNone(self.parser.find("missing"))

    def testUnknownNumericRaises(self):
        for getter in (self.parser.get_int, self.parser.get_double):
            with self.subTest(getter=getter.__name__):
                with self.assertRaises(ArgumentError) as context:
                    getter("missing")
                self.assertEqual(context.exception.code, FaultCode.ARGUMENT_NOT_FOUND)

    def testNonNumericValue(self):
        self.parser.parse(["--port", "abc"])
        self.assertIsNone(self.parser.get("port", int))
        with self.assertRaises(ValidationError):
            self.parser.get_int("port")

    def testGettersAreIdempotent(self):
        self.parser.parse(["-p", "9000", "-v", "--output", "out.txt"])
        for _ in range(3):
            self.assertEqual(self.parser.get_int("port"), 9000)
            self.assertEqual(self.parser.get("output"), "out.txt")
            self.assertTrue(self.parser.get_bool("verbose"))

    def testLookupIsExact(self):
        self.parser.parse(["-p", "9000"])
        self.assertIsNone(self.parser.get("--port"))


class TestReuse(TestCase):
    """Every parse starts from a clean state."""

    def testStateResetBetweenParses(self):
        parser = server()
        parser.add_positional("input")
        parser.parse(["-v", "-p", "1", "file"])
        parser.parse([])
        self.assertFalse(parser.is_set("verbose"))
        self.assertEqual(parser.get_int("port"), 8080)
        self.assertEqual(parser.positionals(), ())
        self.assertFalse(parser.is_set("input"))

    def testNoRepeatedWarningAcrossParses(self):
        parser = server()
        parser.parse(["-v"])
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            self.assertTrue(parser.parse(["-v"]).ok)
        self.assertEqual(parser.warnings(), ())


class TestParserConfiguration(TestCase):
    """Metadata, argv handling and input validation."""

    def testFluentSetters(self):
        parser = ArgParser()
        self.assertIs(parser.program("tool").description("does things").release("2.0"), parser)
        self.assertEqual(parser.prog, "tool")
        self.assertEqual(parser.descr, "does things")
        self.assertEqual(parser.version, "2.0")

    def testParseArgvSetsProgram(self):
        parser = ArgParser()
        parser.add_flag("v", "verbose")
        outcome = parser.parse_argv(["mytool", "-v"])
        self.assertTrue(outcome.ok)
        self.assertEqual(parser.prog, "mytool")
        self.assertTrue(parser.is_set("verbose"))

    def testParseArgvKeepsConfiguredProgram(self):
        parser = ArgParser("configured")
        parser.parse_argv(["other"])
        self.assertEqual(parser.prog, "configured")

    def testParseArgvEmpty(self):
        self.assertTrue(ArgParser("tool").parse_argv([]).ok)

    def testParseRejectsNonTokens(self):
        parser = ArgParser("tool")
        with self.assertRaises(TypeError):
            parser.parse("-v")
        with self.assertRaises(TypeError):
            parser.parse(["-v", 5])
        with self.assertRaises(TypeError):
            parser.parse(5)

    def testMetadataRejectsNonString(self):
        with self.assertRaises(TypeError):
            ArgParser(5)

    def testDeclarationCollision(self):
        parser = ArgParser("tool")
        parser.add_flag("v", "verbose")
        with self.assertRaises(TypeError):
            parser.add_option("v", "volume")


class TestInvoke(TestCase):
    """The CLI bootstrap turns outcomes into exits."""

    def setUp(self):
        self.parser = server()

    def testSuccessReturnsParser(self):
        self.assertIs(invoke(self.parser, "-v --port 9000"), self.parser)
        self.assertEqual(self.parser.get_int("port"), 9000)

    def testIterablePrompt(self):
        self.assertIs(invoke(self.parser, ["--output", "a b.txt"]), self.parser)
        self.assertEqual(self.parser.get_string("output"), "a b.txt")

    def testShellQuoting(self):
        invoke(self.parser, "--output 'a b.txt'")
        self.assertEqual(self.parser.get_string("output"), "a b.txt")

    def testHelpExitsWithZero(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout), self.assertRaises(SystemExit) as context:
            invoke(self.parser, "--help")
        self.assertEqual(context.exception.code, 0)
        self.assertIn("Usage: server", stdout.getvalue())

    def testFaultRaisedOutsideShell(self):
        with self.assertRaises(UnknownArgumentError):
            invoke(self.parser, "--bogus")

    def testFaultExitsInShell(self):
        parser = ArgParser("server", shell=True)
        parser.add_flag("v", "verbose")
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            invoke(parser, "--bogus")
        self.assertEqual(context.exception.code, 1)
        self.assertIn("unknown argument '--bogus'", stderr.getvalue())

    def testWarningPrintedInShell(self):
        parser = ArgParser("server", shell=True)
        parser.add_flag("v", "verbose")
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), warnings.catch_warnings():
            warnings.simplefilter("error")
            invoke(parser, "-v -v")
        self.assertIn("already given", stderr.getvalue())

    def testRejectsNonInvokable(self):
        with self.assertRaises(TypeError):
            invoke(object(), "-v")

    def testRejectsNonStringTokens(self):
        with self.assertRaises(TypeError):
            invoke(self.parser, ["-v", 5])


if __name__ == "__main__":
    unittest.main()
