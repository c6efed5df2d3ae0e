"""
Basic engine tests - line emission and the directive dispatcher

Tests blank lines, labels, comments, passthrough lines, indent boosts,
dialogue, aliases and the fatal errors of the dispatcher.
"""

import pytest

from scenedown.lib.engine import Engine, transpile
from scenedown.lib.errors import (
    ScenedownError,
    ScriptSyntaxError,
    UnclosedDialogueError,
    MalformedAliasError,
    NarratorPunctuationError,
)
from scenedown.config import AppSettings


def compile_text(source: str) -> str:
    return Engine(source).compile()


class TestBlankLines:
    """Test blank-line structure preservation"""

    def test_empty_source(self):
        """Empty input is one empty line"""
        assert compile_text("") == "\n"

    def test_only_blank_lines(self):
        """Each blank line becomes one unindented blank line"""
        assert compile_text("\n\n") == "\n\n\n"

    def test_crlf_input(self):
        """CRLF line endings are treated like LF"""
        assert compile_text(";;start\r\n「はい。」") == 'label start:\n    "はい。"\n'


class TestStructuralLines:
    """Test labels, comments and passthrough lines"""

    def test_label(self):
        """;;name becomes a label declaration at indent 0"""
        assert compile_text(";;start") == "label start:\n"

    def test_comment(self):
        """Comments are kept verbatim at the default indent"""
        assert compile_text("# scene one") == "    # scene one\n"

    def test_comment_wins_over_dialogue(self):
        """A comment containing a dialogue bracket stays a comment"""
        assert compile_text("# A「draft") == "    # A「draft\n"

    def test_passthrough(self):
        """:text is emitted as-is at indent 0"""
        source = ':define e = Character("Eileen")'
        assert compile_text(source) == 'define e = Character("Eileen")\n'


class TestIndentBoost:
    """Test %in% indentation prefixes"""

    def test_single_boost(self):
        """One %in% adds one level to the default indent"""
        assert compile_text("%in%A「x」") == '        "A" "「x」"\n'

    def test_repeated_boost_on_label(self):
        """Boosts add to explicit levels too"""
        assert compile_text("%in%%in%;;inner") == "        label inner:\n"

    def test_boost_does_not_carry_over(self):
        """The boost applies to its own line only"""
        assert compile_text("%in%# a\n# b") == "        # a\n    # b\n"

    def test_boost_alone_is_syntax_error(self):
        """Nothing left after the prefix is invalid"""
        with pytest.raises(ScriptSyntaxError):
            compile_text("%in%")


class TestNarrator:
    """Test narrator lines"""

    def test_narrator(self):
        """Narrator text becomes a bare quoted statement"""
        engine = Engine("「こんにちは。」")
        assert engine.compile() == '    "こんにちは。"\n'
        assert engine.warnings == []

    def test_narrator_without_terminator_warns(self):
        """Missing terminator is reported but output is unchanged"""
        engine = Engine("\n「こんにちは」")
        assert engine.compile() == '\n    "こんにちは"\n'
        assert len(engine.warnings) == 1
        assert engine.warnings[0].startswith("[WARN:Narrator] Line 2:")

    def test_narrator_strict_mode(self):
        """Strict mode turns the warning into an error"""
        engine = Engine("「こんにちは」", settings=AppSettings(strict_mode=True))
        with pytest.raises(NarratorPunctuationError):
            engine.compile()

    def test_custom_terminators(self):
        """Configured terminators are accepted"""
        engine = Engine("「すごい！」", settings=AppSettings(narrator_terminators="。！"))
        engine.compile()
        assert engine.warnings == []


class TestCharacterDialogue:
    """Test speaker dialogue and alias resolution"""

    def test_unknown_speaker(self):
        """Unknown speakers are quoted"""
        assert compile_text("A「元気？」") == '    "A" "「元気？」"\n'

    def test_alias(self):
        """Known aliases resolve to their display name"""
        assert compile_text(";Bob:Robert\nBob「Hi」") == '\n    Robert "「Hi」"\n'

    def test_alias_defined_after_use(self):
        """Aliases only apply to later lines"""
        output = compile_text("A「x」\n;A:Alice\nA「y」")
        assert output == '    "A" "「x」"\n\n    Alice "「y」"\n'

    def test_alias_reassigned(self):
        """The most recent definition wins"""
        output = compile_text(";A:Alice\nA「x」\n;A:Anna\nA「y」")
        assert output == '\n    Alice "「x」"\n\n    Anna "「y」"\n'

    def test_alias_name_with_separator(self):
        """Only the first ':' separates alias from name"""
        assert compile_text(";D:Dr: Who\nD「hm」") == '\n    Dr: Who "「hm」"\n'

    def test_speaker_split_once(self):
        """Later opening brackets stay in the message"""
        assert compile_text("A「x「y」") == '    "A" "「x「y」"\n'


class TestDispatcherErrors:
    """Test fatal errors raised by the dispatcher"""

    def test_unclosed_dialogue(self):
        """Dialogue must close on the same line"""
        with pytest.raises(UnclosedDialogueError) as excinfo:
            compile_text("A「hello")
        assert str(excinfo.value) == "[ERR:Say] Line 1: Dialogue is not closed."

    def test_malformed_alias(self):
        """Alias definitions need a separator"""
        with pytest.raises(MalformedAliasError):
            compile_text(";Bob")

    def test_syntax_error_line_number(self):
        """Errors name the output line at which they were detected"""
        with pytest.raises(ScriptSyntaxError) as excinfo:
            compile_text("\n;;start\nhello")
        assert excinfo.value.line_number == 3
        assert excinfo.value.source_line == "hello"

    def test_errors_share_base_class(self):
        """Every fatal error is a ScenedownError"""
        with pytest.raises(ScenedownError):
            compile_text("what is this")


class TestTranspile:
    """Test the result-typed entry point"""

    def test_success(self):
        """Successful compiles carry output"""
        result = transpile("「こんにちは。」")
        assert result.ok is True
        assert result.output == '    "こんにちは。"\n'
        assert result.error is None

    def test_failure(self):
        """Failures carry the error and no partial output"""
        result = transpile("「ok。」\nbroken")
        assert result.ok is False
        assert result.output == ""
        assert isinstance(result.error, ScriptSyntaxError)
        assert result.error.line_number == 2

    def test_warnings_reported(self):
        """Warnings are returned with the result"""
        result = transpile("「no terminator」")
        assert result.ok is True
        assert len(result.warnings) == 1
