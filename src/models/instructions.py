"""
Instruction specification and metadata models

Defines the scanning modes, text decorations and the structure of
`$` extension instructions used by the instruction registry.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional


class Mode(Enum):
    """
    Scanning modes of the transpilation engine

    Exactly one mode is active at a time. Every mode except DEFAULT passes
    lines through verbatim until its end marker.
    """
    DEFAULT = "default"          # directives and dialogue are interpreted
    VERBATIM = "renpy"           # $renpy ... $endrenpy
    INDENTED = "python"          # $python ... $endpy
    NESTED = "innerpython"       # $inpy ... $endinpy


# Indentation level applied to lines emitted without an explicit level
MODE_INDENTS: Dict[Mode, int] = {
    Mode.DEFAULT: 1,
    Mode.VERBATIM: 0,
    Mode.INDENTED: 1,
    Mode.NESTED: 2,
}

# Exact line that returns each verbatim mode to DEFAULT
MODE_END_MARKERS: Dict[Mode, str] = {
    Mode.VERBATIM: "$endrenpy",
    Mode.INDENTED: "$endpy",
    Mode.NESTED: "$endinpy",
}

# Exact line that closes a skipped conditional block
CONDITIONAL_END_MARKER = "$endif"


class InstructionCategory(Enum):
    """
    Categories of `$` extension instructions

    Used for organization and documentation of the registry.
    """
    MODE = "mode"                # $python, $renpy, $inpy
    INCLUDE = "include"          # $include
    DECORATION = "decoration"    # $style, $endstyle
    MACRO = "macro"              # $define
    CONDITIONAL = "conditional"  # $ifdef, $ifndef, $endif


@dataclass(frozen=True)
class Decoration:
    """
    A start/end text marker pair wrapped around dialogue text

    Attributes:
        name: Canonical decoration name (e.g., "bold")
        start: Opening marker (e.g., "{b}")
        end: Closing marker (e.g., "{/b}")
    """
    name: str
    start: str
    end: str

    def wrap(self, text: str) -> str:
        return f"{self.start}{text}{self.end}"


BOLD = Decoration("bold", "{b}", "{/b}")
ITALIC = Decoration("italic", "{i}", "{/i}")
STRIKETHROUGH = Decoration("strikethrough", "{s}", "{/s}")
UNDERLINE = Decoration("underline", "{u}", "{/u}")

# Short and long names accepted by $style
DECORATIONS: Dict[str, Decoration] = {
    'b': BOLD,
    'bold': BOLD,
    'i': ITALIC,
    'italic': ITALIC,
    's': STRIKETHROUGH,
    'strikethrough': STRIKETHROUGH,
    'u': UNDERLINE,
    'underline': UNDERLINE,
}


def decoration_lookup(name: str) -> Optional[Decoration]:
    """Resolve a short or long decoration name, or None if unknown"""
    return DECORATIONS.get(name)


@dataclass
class InstructionSpec:
    """
    Specification for a `$` extension instruction

    Defines metadata, argument rules and handler for an instruction.
    Used by InstructionRegistry to dispatch `$command args...` lines.

    Attributes:
        name: Instruction name (without leading `$`)
        category: Category for organization
        description: Human-readable description
        handler: Execution function (call, engine) -> None
        min_args: Minimum number of arguments accepted
        max_args: Maximum number of arguments accepted (None = unbounded)
        examples: Example usage strings
    """
    name: str
    category: InstructionCategory
    description: str
    handler: Callable
    min_args: int = 0
    max_args: Optional[int] = 0
    examples: List[str] = field(default_factory=list)

    def arity_accepts(self, count: int) -> bool:
        """Check whether an argument count is valid for this instruction"""
        if count < self.min_args:
            return False
        if self.max_args is not None and count > self.max_args:
            return False
        return True

    def arity_describe(self) -> str:
        """Human-readable expected argument count (e.g., "1", "at least 1")"""
        if self.max_args is None:
            return f"at least {self.min_args}"
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args} to {self.max_args}"
