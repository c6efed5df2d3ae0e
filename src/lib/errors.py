"""
Fatal error taxonomy for the transpilation engine

Every error aborts the current compile and propagates to the caller,
through recursive includes. Each message names the output line number
at which the problem was detected:

    [ERR:Say] Line 12: Dialogue is not closed.
"""

from typing import Optional


class ScenedownError(Exception):
    """Base class for fatal compile errors"""

    tag = "Error"

    def __init__(self, line_number: int, message: str, source_line: Optional[str] = None):
        """
        Args:
            line_number: 1-based output line number where the error was detected
            message: Human-readable error description
            source_line: Raw source line being processed, when known
        """
        self.line_number = line_number
        self.message = message
        self.source_line = source_line
        super().__init__(f"[ERR:{self.tag}] Line {line_number}: {message}")


class ScriptSyntaxError(ScenedownError):
    """Raised when a line matches none of the recognized constructs"""
    tag = "Syntax"


class UnclosedDialogueError(ScenedownError):
    """Raised when a dialogue opening bracket has no closing bracket on the same line"""
    tag = "Say"


class MalformedAliasError(ScenedownError):
    """Raised when an alias definition is missing its ':' separator"""
    tag = "Alias"


class UnknownExtensionError(ScenedownError):
    """Raised when a `$` command is not a recognized instruction"""
    tag = "Expansion"


class ArgumentCountError(ScenedownError):
    """Raised when an instruction is invoked with the wrong number of arguments"""
    tag = "Expansion:Args"


class UnknownDecorationError(ScenedownError):
    """Raised when $style is given a name outside the decoration set"""
    tag = "Expansion:Style"


class IncludeUnavailableError(ScenedownError):
    """Raised when $include is used without a file-access capability"""
    tag = "Expansion:Include"


class IncludeArgumentError(ArgumentCountError):
    """Raised when $include is not given exactly one path"""
    tag = "Expansion:Include"


class IncludeNotFoundError(ScenedownError):
    """Raised when the $include path does not resolve to a file"""
    tag = "Expansion:Include"


class IncludeReadError(IncludeNotFoundError):
    """Raised when an existing $include file cannot be read or decoded"""
    tag = "Expansion:Include"


class NarratorPunctuationError(ScenedownError):
    """Raised in strict mode for narrator text without a terminator"""
    tag = "Narrator"
