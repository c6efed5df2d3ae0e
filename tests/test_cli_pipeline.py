"""
CLI pipeline tests

Tests the pipeline stages behind the command line: path resolution,
reading, compiling with includes and failure exits.
"""

import pytest

from scenedown.__main__ import env_check, source_read, script_compile, results_report
from scenedown.models import ProgramState, pipeline


def make_state(tmp_path, source: str, **kwargs) -> ProgramState:
    inputdir = tmp_path / "in"
    inputdir.mkdir()
    (inputdir / "scene.scn").write_text(source, encoding="utf-8")
    return ProgramState(
        inputdir=inputdir,
        outputdir=tmp_path / "out",
        inputFile="scene.scn",
        verbosity=0,
        **kwargs,
    )


class TestPipeline:
    """Test the full stage sequence"""

    def test_compiles_to_rpy(self, tmp_path):
        """Output defaults to the input name with .rpy"""
        state = make_state(tmp_path, ";;start\n;A:Alice\nA「Hello」")
        final = pipeline(state, env_check, source_read, script_compile, results_report)

        output_file = tmp_path / "out" / "scene.rpy"
        assert final.scriptOutputFile == output_file
        assert output_file.read_text(encoding="utf-8") == 'label start:\n\n    Alice "「Hello」"\n'

    def test_output_file_option(self, tmp_path):
        """--outputFile names the script"""
        state = make_state(tmp_path, ";;start", outputFile="script.rpy")
        pipeline(state, env_check, source_read, script_compile)
        assert (tmp_path / "out" / "script.rpy").exists()

    def test_include_relative_to_input(self, tmp_path):
        """Includes resolve next to the input file"""
        state = make_state(tmp_path, "$include part.scn")
        (tmp_path / "in" / "part.scn").write_text(";;part", encoding="utf-8")
        final = pipeline(state, env_check, source_read, script_compile)
        assert final.compileResult.output == "label part:\n\n"


class TestWarnings:
    """Test that narrator warnings are reported once"""

    def test_printed_when_quiet(self, tmp_path, capsys):
        """Without logging, the stage prints each warning"""
        state = make_state(tmp_path, "「no terminator」")
        pipeline(state, env_check, source_read, script_compile)
        assert capsys.readouterr().err.count("[WARN:Narrator]") == 1

    def test_not_reprinted_when_logged(self, tmp_path, capsys):
        """At verbosity 1 the logger reports warnings; the stage does not repeat them"""
        state = make_state(tmp_path, "「no terminator」")
        state.verbosity = 1
        final = pipeline(state, env_check, source_read, script_compile)
        assert len(final.compileResult.warnings) == 1
        assert "[WARN:Narrator]" not in capsys.readouterr().err


class TestFailures:
    """Test exits on failure"""

    def test_missing_input(self, tmp_path):
        """A missing input file exits with status 1"""
        state = ProgramState(inputdir=tmp_path, outputdir=tmp_path, inputFile="nope.scn", verbosity=0)
        with pytest.raises(SystemExit) as excinfo:
            env_check(state)
        assert excinfo.value.code == 1

    def test_compile_error(self, tmp_path, capsys):
        """Notation errors exit with status 1 and name the line"""
        state = make_state(tmp_path, ";;start\nnot valid")
        with pytest.raises(SystemExit):
            pipeline(state, env_check, source_read, script_compile)
        assert "Line 2" in capsys.readouterr().err
        assert not (tmp_path / "out" / "scene.rpy").exists()

    def test_unreadable_include(self, tmp_path, capsys):
        """An undecodable include exits cleanly with a line-numbered message"""
        state = make_state(tmp_path, ";;start\n$include bad.scn")
        (tmp_path / "in" / "bad.scn").write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(SystemExit) as excinfo:
            pipeline(state, env_check, source_read, script_compile)
        assert excinfo.value.code == 1
        assert "[ERR:Expansion:Include] Line 2:" in capsys.readouterr().err
