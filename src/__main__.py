#!/usr/bin/env python3
"""
scenedown - Scenario notation to Ren'Py transpiler

Compiles a compact scenario shorthand into Ren'Py script. Authors write
dialogue as `A「Hello」`, labels as `;;start` and blocks of python as
`$python ... $endpy`; scenedown expands it to an indented .rpy file.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Usage:
    scenedown inputdir/ outputdir/ --inputFile scene.scn

    The compiled script is written to outputdir/ as scene.rpy unless
    --outputFile names another file.

Examples:
    # Basic compilation
    scenedown . game/ --inputFile chapter1.scn

    # Explicit output name
    scenedown story/ game/ --inputFile chapter1.scn --outputFile script.rpy

    # Verbose output
    scenedown . game/ --inputFile chapter1.scn -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import transpile, LocalFileAccess, __version__, LOG, state_connectToLogger
from .lib.lexer import source_highlight
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
                                 _
  ___  ___ ___ _ __   ___  __| | _____      ___ __
 / __|/ __/ _ \ '_ \ / _ \/ _` |/ _ \ \ /\ / / '_ \
 \__ \ (_|  __/ | | |  __/ (_| | (_) \ V  V /| | | |
 |___/\___\___|_| |_|\___|\__,_|\___/ \_/\_/ |_| |_|

  Scenario notation to Ren'Py transpiler
"""

# Define CLI arguments
parser = ArgumentParser(
    description="scenedown - Scenario notation to Ren'Py transpiler",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input scenario (.scn) file (relative to inputdir)"
)

parser.add_argument(
    "--outputFile",
    default=None,
    type=str,
    help="Output script name (relative to outputdir). Defaults to the input name with .rpy",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the scenario file
            - scriptOutputFile: Path the compiled script will be written to
            - envOK: True if environment is valid

    Exits:
        1 if the input file is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    if state.outputFile:
        output_name = state.outputFile
    else:
        output_name = Path(state.inputFile).with_suffix(appsettings.output_suffix).name

    state.scriptOutputFile = state.outputdir / output_name
    state.scriptOutputFile.parent.mkdir(parents=True, exist_ok=True)
    LOG(f"Output file: {state.scriptOutputFile}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the scenario source file.

    Returns:
        ProgramState with added field:
            - sourceText: Scenario source text

    Exits:
        1 if the file cannot be read
    """

    state = inputstate.copy()

    LOG("Reading source file...", level=1)

    try:
        state.sourceText = state.inputSourceFile.read_text(encoding=appsettings.encoding)
        LOG(f"Read {len(state.sourceText)} characters from {state.inputSourceFile.name}", level=2)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def script_compile(inputstate: ProgramState) -> ProgramState:
    """
    Transpile scenario text to Ren'Py script and write the output file.

    Includes resolve relative to the input file's directory.

    Returns:
        ProgramState with added field:
            - compileResult: CompileResult from the engine

    Exits:
        1 if compilation fails or the output cannot be written
    """

    state = inputstate.copy()

    LOG("Compiling scenario...", level=1)

    if state.sourceText is None:
        print("Error: No source text available", file=sys.stderr)
        sys.exit(1)

    file_access = LocalFileAccess(state.inputSourceFile.parent, encoding=appsettings.encoding)
    state.compileResult = transpile(state.sourceText, file_access=file_access)

    # At verbosity >= 1 the engine already logged each warning
    if state.verbosity < 1:
        for warning in state.compileResult.warnings:
            print(warning, file=sys.stderr)

    if not state.compileResult.ok:
        error = state.compileResult.error
        print(f"Compilation error: {error}", file=sys.stderr)
        if error.source_line is not None:
            print(source_highlight(error.source_line), end="", file=sys.stderr)
        sys.exit(1)

    try:
        state.scriptOutputFile.write_text(state.compileResult.output, encoding=appsettings.encoding)
    except OSError as e:
        print(f"Error writing output file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Wrote {state.scriptOutputFile}", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display compilation results to user.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if compileResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.compileResult:
        print("Error: Compilation failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        line_count = state.compileResult.output.count("\n")
        LOG("\n✓ Compilation successful!", level=1)
        LOG(f"  Output: {state.scriptOutputFile}", level=1)
        LOG(f"  Lines: {line_count}", level=1)
        LOG(f"  Warnings: {len(state.compileResult.warnings)}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="scenedown - Scenario notation to Ren'Py transpiler",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - compile a scenario file to Ren'Py script.

    Orchestrates the full pipeline:
        1. env_check: Validate paths and environment
        2. source_read: Read the scenario file
        3. script_compile: Transpile and write the .rpy file
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing scenario source files
        outputdir: Directory where the compiled script will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_read, script_compile, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
