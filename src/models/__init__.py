"""
Models package for scenedown

Contains data structures and type definitions for the transpilation engine
and the CLI pipeline.
"""

from .state import ProgramState, pipeline
from .instructions import (
    Mode,
    MODE_INDENTS,
    MODE_END_MARKERS,
    CONDITIONAL_END_MARKER,
    Decoration,
    DECORATIONS,
    InstructionSpec,
    InstructionCategory,
)
from .engine import InstructionCall, CompileResult

__all__ = [
    "ProgramState",
    "pipeline",
    "Mode",
    "MODE_INDENTS",
    "MODE_END_MARKERS",
    "CONDITIONAL_END_MARKER",
    "Decoration",
    "DECORATIONS",
    "InstructionSpec",
    "InstructionCategory",
    "InstructionCall",
    "CompileResult",
]
