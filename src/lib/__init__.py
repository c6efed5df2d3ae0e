"""
scenedown - Scenario notation to Ren'Py transpiler

A line-oriented shorthand for writing visual-novel dialogue scripts.
"""

__version__ = "1.0.0"

from .engine import Engine, transpile
from .instructions import InstructionRegistry
from .files import FileAccess, LocalFileAccess
from .errors import ScenedownError
from .log import LOG, state_connectToLogger

__all__ = [
    "Engine",
    "transpile",
    "InstructionRegistry",
    "FileAccess",
    "LocalFileAccess",
    "ScenedownError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
