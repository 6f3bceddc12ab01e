"""
Data model for the slash-command engine: commands, session-state
snapshots and history entries.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional


class BuiltinCommand(str, Enum):
    """Statically-known commands, one variant per dispatchable backend route."""

    init = "init"
    summarize = "summarize"
    revert = "revert"
    undo = "undo"
    unrevert = "unrevert"
    redo = "redo"
    abort = "abort"
    edit = "edit"
    clear = "clear"
    compact = "compact"

    @classmethod
    def parse(cls, name: str) -> Optional["BuiltinCommand"]:
        """Return the variant for an exact (case-sensitive) name, or None."""
        try:
            return cls(name)
        except ValueError:
            return None


class MessageRole(str, Enum):
    """Role of the most recent message in a session."""

    none = "none"
    user = "user"
    assistant = "assistant"


class ActivityPhase(str, Enum):
    """Whether the session is currently processing."""

    idle = "idle"
    busy = "busy"


@dataclass(frozen=True)
class Command:
    """A unit of action offered in the slash menu."""

    name: str
    description: Optional[str] = None
    agent: Optional[str] = None
    model: Optional[str] = None
    is_built_in: bool = False

    @classmethod
    def from_catalog_entry(cls, entry: Mapping[str, Any]) -> "Command":
        """Build a dynamic command from a catalog source record."""
        return cls(
            name=str(entry["name"]),
            description=entry.get("description"),
            agent=entry.get("agent"),
            model=entry.get("model"),
            is_built_in=False,
        )


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of session state used for availability gating."""

    message_count: int = 0
    last_message_role: MessageRole = MessageRole.none
    has_pending_revert: bool = False
    activity_phase: ActivityPhase = ActivityPhase.idle

    @property
    def has_messages(self) -> bool:
        return self.message_count > 0


@dataclass(frozen=True)
class HistoryEntry:
    """Audit record of a single execution attempt."""

    command_name: str
    timestamp: datetime
    succeeded: bool
    error_message: Optional[str] = None


BUILTIN_COMMANDS: tuple[Command, ...] = (
    Command("init", "Create/update AGENTS.md file", is_built_in=True),
    Command("summarize", "Generate a summary of the current session", is_built_in=True),
    Command("revert", "Revert session to previous state", is_built_in=True),
    Command("unrevert", "Undo revert operation", is_built_in=True),
    Command("abort", "Interrupt current operation", is_built_in=True),
    Command("undo", "Undo last action", is_built_in=True),
    Command("redo", "Redo last action", is_built_in=True),
    Command("edit", "Edit last message", is_built_in=True),
    Command("clear", "Clear current session", is_built_in=True),
    Command("compact", "Compact session history", is_built_in=True),
)
