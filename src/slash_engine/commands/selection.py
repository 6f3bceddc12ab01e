"""
Keyboard selection over the visible command list.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

from slash_engine.commands.models import Command


class PaletteSignal(Enum):
    """Logical input signals, decoded upstream from raw keys."""

    NAVIGATE_DOWN = "navigate-down"
    NAVIGATE_UP = "navigate-up"
    CONFIRM = "confirm"
    DISMISS = "dismiss"


@dataclass(frozen=True)
class CommandSelected:
    """The user confirmed ``command`` for execution."""

    command: Command


@dataclass(frozen=True)
class CloseRequested:
    """The user dismissed the palette."""


PaletteEvent = Union[CommandSelected, CloseRequested]


class SelectionState:
    """Highlighted index over an ordered list of visible commands.

    Navigation wraps in both directions. Replacing the list always
    resets the highlight to the first row.
    """

    def __init__(self, visible: Sequence[Command] = ()) -> None:
        self._visible: tuple[Command, ...] = tuple(visible)
        self.selected_index = 0

    @property
    def visible(self) -> tuple[Command, ...]:
        return self._visible

    @property
    def selected(self) -> Optional[Command]:
        if not self._visible:
            return None
        return self._visible[self._safe_index()]

    def replace(self, visible: Sequence[Command]) -> None:
        self._visible = tuple(visible)
        self.selected_index = 0

    def _safe_index(self) -> int:
        total = len(self._visible)
        return ((self.selected_index % total) + total) % total

    def handle(self, signal: PaletteSignal) -> Optional[PaletteEvent]:
        """Apply ``signal`` and return the resulting output event, if any."""
        if signal is PaletteSignal.DISMISS:
            return CloseRequested()

        total = len(self._visible)
        if total == 0:
            return None

        match signal:
            case PaletteSignal.NAVIGATE_DOWN:
                self.selected_index = (self.selected_index + 1) % total
            case PaletteSignal.NAVIGATE_UP:
                self.selected_index = (self.selected_index - 1 + total) % total
            case PaletteSignal.CONFIRM:
                return CommandSelected(self._visible[self._safe_index()])
        return None
