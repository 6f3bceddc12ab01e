"""
Core command engine: catalog merge, availability gating, keyboard
selection and execution dispatch.
"""

from slash_engine.commands.availability import is_available
from slash_engine.commands.catalog import (
    builtin_commands,
    load_dynamic_commands,
    resolve_visible_commands,
)
from slash_engine.commands.dispatcher import CommandHistory, ExecutionDispatcher
from slash_engine.commands.models import (
    ActivityPhase,
    BuiltinCommand,
    Command,
    HistoryEntry,
    MessageRole,
    SessionSnapshot,
)
from slash_engine.commands.palette import CommandPalette
from slash_engine.commands.selection import (
    CloseRequested,
    CommandSelected,
    PaletteSignal,
    SelectionState,
)

__all__ = [
    "ActivityPhase",
    "BuiltinCommand",
    "CloseRequested",
    "Command",
    "CommandHistory",
    "CommandPalette",
    "CommandSelected",
    "ExecutionDispatcher",
    "HistoryEntry",
    "MessageRole",
    "PaletteSignal",
    "SelectionState",
    "SessionSnapshot",
    "builtin_commands",
    "is_available",
    "load_dynamic_commands",
    "resolve_visible_commands",
]
