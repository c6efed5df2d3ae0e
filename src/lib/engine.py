"""
Transpilation engine for scenedown scenario notation

Converts scenario notation into Ren'Py script in a single pass over the
input lines. The engine is a line scanner, not a parser: each line is
classified by its prefix and emitted immediately with the indentation the
current mode demands.

Example:
    >>> engine = Engine(";;start\\n;A:Alice\\nA「Hello」")
    >>> print(engine.compile(), end="")
    label start:
    <BLANKLINE>
        Alice "「Hello」"
"""

from typing import Dict, List, Optional

from ..models.instructions import (
    Mode,
    MODE_INDENTS,
    MODE_END_MARKERS,
    CONDITIONAL_END_MARKER,
    Decoration,
)
from ..models.engine import CompileResult
from ..config import AppSettings, appsettings
from .errors import (
    ScenedownError,
    ScriptSyntaxError,
    UnclosedDialogueError,
    MalformedAliasError,
    NarratorPunctuationError,
)
from .files import FileAccess
from .instructions import InstructionRegistry
from .log import LOG, WARN

# Line prefixes, checked in this order
INDENT_PREFIX = "%in%"
LABEL_PREFIX = ";;"
COMMENT_PREFIX = "#"
ALIAS_PREFIX = ";"
PASSTHROUGH_PREFIX = ":"
INSTRUCTION_PREFIX = "$"

DIALOGUE_OPEN = "「"
DIALOGUE_CLOSE = "」"
ALIAS_SEPARATOR = ":"


class Engine:
    """
    Single-pass transpiler for one compilation unit

    Responsibilities:
    - Track the scanning mode and emit lines at that mode's indentation
    - Skip lines inside false conditional blocks
    - Dispatch labels, comments, dialogue, aliases, passthrough lines
      and `$` instructions
    - Apply decorations and substitutions to dialogue text

    An engine consumes its input exactly once. Included files are compiled
    by fresh engines; no state is shared between instances.
    """

    def __init__(
        self,
        input_text: str,
        file_access: Optional[FileAccess] = None,
        settings: Optional[AppSettings] = None,
        registry: Optional[InstructionRegistry] = None,
    ) -> None:
        """
        Initialize engine

        Args:
            input_text: Whole scenario source text
            file_access: Capability used by $include (None = unavailable)
            settings: Application settings (default: module singleton)
            registry: Optional InstructionRegistry for `$` instructions

        Attributes:
            input_lines: Source lines (CRLF normalised to LF)
            output_text: Accumulated compiled output
            line_number: 1-based number of the next output line
            mode: Current scanning mode
            extra_indent: Indent boost for the line being processed
            characters: Alias -> display name
            decorations: Active decorations in push order
            substitutions: Token -> replacement, in definition order
            skip_depth: Nesting depth of false conditional blocks
            warnings: Advisory messages collected so far
        """
        self.input_text = input_text
        self.input_lines: List[str] = input_text.replace("\r\n", "\n").split("\n")
        self.output_text = ""
        self.file_access = file_access
        self.settings = settings or appsettings
        self.registry = registry or InstructionRegistry()

        self.line_number = 1
        self.mode = Mode.DEFAULT
        self.extra_indent = 0
        self.characters: Dict[str, str] = {}
        self.decorations: List[Decoration] = []
        self.substitutions: Dict[str, str] = {}
        self.skip_depth = 0
        self.warnings: List[str] = []

    def compile(self) -> str:
        """
        Compile every input line and return the output text

        Returns:
            Complete Ren'Py script, one "\\n"-terminated line per emission

        Raises:
            ScenedownError: On the first fatal problem; nothing is salvaged
        """
        LOG(f"Compiling {len(self.input_lines)} source lines", level=2)

        for line in self.input_lines:
            try:
                self.line_process(line)
            except ScenedownError as error:
                if error.source_line is None:
                    error.source_line = line
                raise

        LOG(f"Emitted {self.line_number - 1} lines", level=2)
        return self.output_text

    def line_add(self, line: str = "", indent: Optional[int] = None) -> None:
        """
        Append one line to the output

        Called with no arguments this is a blank emission: the source line is
        consumed without visible output but the line counter still advances.

        Args:
            line: Already-formatted target text
            indent: Explicit indentation level (default: derived from mode)
        """
        if indent is None:
            indent = MODE_INDENTS[self.mode]
        if line == "":
            indent = 0

        self.output_text += self.settings.indent_make(indent + self.extra_indent) + line + "\n"
        self.line_number += 1
        self.extra_indent = 0

    def mode_enter(self, mode: Mode) -> None:
        """Switch scanning mode"""
        LOG(f"Line {self.line_number}: mode {self.mode.value} -> {mode.value}", level=3)
        self.mode = mode

    def line_process(self, line: str) -> None:
        """
        Process one source line

        The conditional gate is checked first, then verbatim modes, then the
        directive dispatcher.
        """
        if self.skip_depth > 0:
            if line == CONDITIONAL_END_MARKER:
                self.skip_depth -= 1
            self.line_add()
            return

        if self.mode is not Mode.DEFAULT:
            if line == MODE_END_MARKERS[self.mode]:
                self.mode_enter(Mode.DEFAULT)
                self.line_add()
            else:
                self.line_add(line)
            return

        if line == "":
            self.line_add()
            return

        self.directive_process(line)

    def directive_process(self, line: str) -> None:
        """
        Classify a non-empty DEFAULT-mode line by prefix and emit it

        Raises:
            ScriptSyntaxError: If no construct matches
        """
        while line.startswith(INDENT_PREFIX):
            self.extra_indent += 1
            line = line[len(INDENT_PREFIX):]

        if line.startswith(LABEL_PREFIX):
            self.line_add(f"label {line[len(LABEL_PREFIX):]}:", 0)
        elif line.startswith(COMMENT_PREFIX):
            self.line_add(line)
        elif DIALOGUE_OPEN in line:
            self.dialogue_process(line)
        elif line.startswith(ALIAS_PREFIX):
            self.alias_define(line)
        elif line.startswith(PASSTHROUGH_PREFIX):
            self.line_add(line[len(PASSTHROUGH_PREFIX):], 0)
        elif line.startswith(INSTRUCTION_PREFIX):
            call = self.registry.call_parse(line[len(INSTRUCTION_PREFIX):], self.line_number)
            self.registry.dispatch(call, self)
        else:
            raise ScriptSyntaxError(self.line_number, "Invalid syntax.")

    def dialogue_process(self, line: str) -> None:
        """
        Emit narrator text or character dialogue

        Narrator:   「text。」        -> "text。"
        Alias:      A「text」         -> Alice "「text」"
        Otherwise:  Bob「text」       -> "Bob" "「text」"

        Raises:
            UnclosedDialogueError: If the closing bracket is missing
        """
        if DIALOGUE_CLOSE not in line:
            raise UnclosedDialogueError(self.line_number, "Dialogue is not closed.")

        if line.startswith(DIALOGUE_OPEN):
            message = line[1:-1]
            if not self.settings.narrator_isTerminated(message):
                self.narrator_warn()
            self.line_add(f'"{self.effects_apply(message)}"')
            return

        speaker, message = line[:-1].split(DIALOGUE_OPEN, 1)
        decorated = f"{DIALOGUE_OPEN}{self.effects_apply(message)}{DIALOGUE_CLOSE}"
        if speaker in self.characters:
            self.line_add(f'{self.characters[speaker]} "{decorated}"')
        else:
            self.line_add(f'"{speaker}" "{decorated}"')

    def narrator_warn(self) -> None:
        """
        Report narrator text that does not end with a terminator

        Raises:
            NarratorPunctuationError: In strict mode only
        """
        message = "Narrator text does not end with a terminator; check the wording."
        if self.settings.strict_mode:
            raise NarratorPunctuationError(self.line_number, message)

        warning = f"[WARN:Narrator] Line {self.line_number}: {message}"
        self.warnings.append(warning)
        WARN(warning)

    def alias_define(self, line: str) -> None:
        """
        Store a character alias from ";alias:Display Name"

        Raises:
            MalformedAliasError: If the separator is missing
        """
        if ALIAS_SEPARATOR not in line:
            raise MalformedAliasError(self.line_number, "Invalid alias definition.")

        alias, character = line[len(ALIAS_PREFIX):].split(ALIAS_SEPARATOR, 1)
        self.characters[alias] = character
        self.line_add()

    def effects_apply(self, text: str) -> str:
        """
        Apply decorations then substitutions to dialogue text

        Decorations wrap in push order, so the first pushed sits closest to
        the text. Substitutions then replace every occurrence of each token,
        in definition order, within the decorated string.
        """
        for decoration in self.decorations:
            text = decoration.wrap(text)

        for token, replacement in self.substitutions.items():
            text = text.replace(token, replacement)

        return text


def transpile(
    input_text: str,
    file_access: Optional[FileAccess] = None,
    settings: Optional[AppSettings] = None,
) -> CompileResult:
    """
    Compile scenario text without raising on notation errors

    Args:
        input_text: Whole scenario source text
        file_access: Capability used by $include (None = unavailable)
        settings: Application settings (default: module singleton)

    Returns:
        CompileResult with output on success, or the fatal error on failure

    Example:
        >>> result = transpile("「こんにちは。」")
        >>> result.ok, result.output
        (True, '    "こんにちは。"\\n')
    """
    engine = Engine(input_text, file_access=file_access, settings=settings)
    try:
        output = engine.compile()
    except ScenedownError as error:
        LOG(f"Compile failed: {error}", level=2)
        return CompileResult(ok=False, warnings=list(engine.warnings), error=error)

    return CompileResult(ok=True, output=output, warnings=list(engine.warnings))
