"""
Loguru logging for the engine and CLI, gated on the connected verbosity.

The CLI connects its ProgramState once; engine code then calls LOG() or
WARN() without carrying the state around. With no state connected (library
use, tests) both are silent and warnings are only collected on the engine.

Usage:
    from scenedown.lib.log import LOG, WARN, state_connectToLogger

    state_connectToLogger(state)

    LOG("Compiling 120 source lines", level=2)
    LOG("Line 7: mode default -> python", level=3)
    WARN("[WARN:Narrator] Line 9: ...")
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# Configure loguru with scenedown-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Call this at the start of the pipeline to make the state's verbosity
    setting available to LOG() calls throughout that context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose (-v)
        3 = Debug (-vv or higher)

    Example:
        LOG("Compiled 42 lines", level=2)
        LOG("Mode default -> python at line 7", level=3)
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def WARN(message: str) -> None:
    """
    Surface an advisory message if any logging context is connected.

    Warnings never alter output; they are shown whenever verbosity >= 1.
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= 1:
        logger.opt(depth=1).warning(message)
