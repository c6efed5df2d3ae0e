"""
scenedown - Scenario notation to Ren'Py transpiler

A line-oriented shorthand for writing visual-novel dialogue scripts.
"""

__version__ = "1.0.0"

from .lib import Engine, transpile, InstructionRegistry, LocalFileAccess, LOG, state_connectToLogger

__all__ = [
    "Engine",
    "transpile",
    "InstructionRegistry",
    "LocalFileAccess",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
