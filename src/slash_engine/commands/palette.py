"""
One command-palette instance per session: ties the catalog, selection
state and dispatcher together.
"""

import logging
from typing import Optional, Sequence

from slash_engine.commands.catalog import (
    CommandCatalogSource,
    builtin_commands,
    load_dynamic_commands,
    resolve_visible_commands,
)
from slash_engine.commands.dispatcher import ExecutionDispatcher
from slash_engine.commands.errors import CommandInFlight, NoActiveSession
from slash_engine.commands.models import Command, SessionSnapshot
from slash_engine.commands.selection import (
    PaletteEvent,
    PaletteSignal,
    SelectionState,
)

logger = logging.getLogger(__name__)


class CommandPalette:
    """Searchable, keyboard-navigable command menu for a single session.

    The visible list is recomputed from scratch whenever the query, the
    dynamic catalog or the session snapshot changes, and the highlight
    resets to the first row each time.
    """

    def __init__(
        self,
        dispatcher: ExecutionDispatcher,
        session_id: Optional[str],
        catalog_source: Optional[CommandCatalogSource] = None,
        builtins: Optional[Sequence[Command]] = None,
        snapshot: Optional[SessionSnapshot] = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.session_id = session_id
        self._catalog_source = catalog_source
        self._builtins: list[Command] = (
            list(builtins) if builtins is not None else builtin_commands()
        )
        self._dynamic: list[Command] = []
        self._query = ""
        self._snapshot = snapshot or SessionSnapshot()
        self._in_flight: set[str] = set()
        self.selection = SelectionState()
        self._recompute()

    @property
    def query(self) -> str:
        return self._query

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def visible(self) -> tuple[Command, ...]:
        return self.selection.visible

    @property
    def selected_index(self) -> int:
        return self.selection.selected_index

    @property
    def pending(self) -> frozenset[str]:
        """Names of commands currently executing."""
        return frozenset(self._in_flight)

    def _recompute(self) -> None:
        self.selection.replace(
            resolve_visible_commands(
                self._builtins, self._dynamic, self._query, self._snapshot
            )
        )

    async def refresh_catalog(self) -> None:
        """Reload dynamic commands; on failure only built-ins remain."""
        if self._catalog_source is None:
            self._dynamic = []
        else:
            self._dynamic = await load_dynamic_commands(self._catalog_source)
        logger.debug("Loaded %d dynamic commands", len(self._dynamic))
        self._recompute()

    def set_query(self, query: str) -> None:
        if query != self._query:
            self._query = query
            self._recompute()

    def update_snapshot(self, snapshot: SessionSnapshot) -> None:
        if snapshot != self._snapshot:
            self._snapshot = snapshot
            self._recompute()

    def handle_signal(self, signal: PaletteSignal) -> Optional[PaletteEvent]:
        return self.selection.handle(signal)

    def available(self) -> list[Command]:
        """All commands available in the current state, ignoring the query."""
        return resolve_visible_commands(
            self._builtins, self._dynamic, "", self._snapshot
        )

    def lookup(self, name: str) -> Optional[Command]:
        """Return the available command called ``name`` regardless of the query."""
        for command in self.available():
            if command.name == name:
                return command
        return None

    def empty_message(self) -> str:
        """Text shown when nothing is visible."""
        if self._query:
            return "No commands found"
        if self.session_id:
            return "No commands available in current context"
        return "No active session for commands"

    async def execute(self, command: Command, content: Optional[str] = None) -> bool:
        """Dispatch ``command`` for this palette's session.

        Returns False for dynamic commands, which the caller composes
        itself. A second execution of a command that is still running is
        refused with CommandInFlight and is not recorded in history.
        """
        if not command.is_built_in:
            return False
        if not self.session_id:
            raise NoActiveSession()
        if command.name in self._in_flight:
            raise CommandInFlight(command.name)

        self._in_flight.add(command.name)
        try:
            return await self.dispatcher.execute(command, self.session_id, content)
        finally:
            self._in_flight.discard(command.name)
