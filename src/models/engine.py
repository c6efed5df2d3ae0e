"""
Engine-specific data models

Type-safe structures for engine operations and return values.
"""

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..lib.errors import ScenedownError


@dataclass
class InstructionCall:
    """
    A `$` extension instruction line split into command and arguments

    Returned by InstructionRegistry.call_parse() for a line such as
    "$define HELLO Konnichiwa".

    Attributes:
        command: Instruction name without the leading `$` (e.g., "define")
        args: Whitespace-separated argument tokens (e.g., ["HELLO", "Konnichiwa"])
        line_number: Output line number at which the instruction was read

    Example:
        InstructionCall(command="style", args=["b", "i"], line_number=4)
    """
    command: str
    args: List[str]
    line_number: int


@dataclass
class CompileResult:
    """
    Outcome of one compile through transpile()

    Either ok is True and output holds the complete target script, or ok is
    False and error holds the fatal error that aborted the compile. No partial
    output is returned on failure.

    Attributes:
        ok: Whether the compile ran to completion
        output: Complete compiled text ("" on failure)
        warnings: Advisory messages collected before completion or failure
        error: Fatal error, when ok is False
    """
    ok: bool
    output: str = ""
    warnings: List[str] = field(default_factory=list)
    error: Optional['ScenedownError'] = None
