"""
Execution dispatcher: routes built-in commands to their backend and
records every attempt in an append-only history.
"""

import logging
from datetime import datetime, timezone
from typing import Iterator, Optional, Protocol

from slash_engine.commands.errors import (
    CommandError,
    EditContentRequired,
    NoEditableMessage,
    NoRevertTarget,
    RemoteOperationFailed,
    UnknownCommand,
)
from slash_engine.commands.models import BuiltinCommand, Command, HistoryEntry

logger = logging.getLogger(__name__)


class SessionOperations(Protocol):
    """Session-mutation collaborator."""

    async def revert_to_checkpoint(self, session_id: str, target_message_id: str) -> None: ...

    async def undo_revert(self, session_id: str) -> None: ...

    async def interrupt(self, session_id: str) -> None: ...

    async def init(self, session_id: str) -> None: ...

    async def summarize(self, session_id: str) -> None: ...


class DirectOperations(Protocol):
    """Direct network collaborator."""

    async def edit_message(self, session_id: str, message_id: str, content: str) -> None: ...

    async def clear_session(self, session_id: str) -> None: ...

    async def compact_session(self, session_id: str) -> None: ...


class MessageLocator(Protocol):
    """Resolves the message ids that revert and edit operate on."""

    async def revert_target(self, session_id: str) -> Optional[str]: ...

    async def editable_message(self, session_id: str) -> Optional[str]: ...


class CommandHistory:
    """Append-only, in-memory log of execution attempts."""

    def __init__(self) -> None:
        self._entries: list[HistoryEntry] = []

    def append(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self.entries)


class ExecutionDispatcher:
    """Routes confirmed built-in commands to the session and network collaborators.

    Every attempt on a built-in command appends exactly one HistoryEntry,
    whether it succeeds or fails. Failures are raised as CommandError after
    the entry is recorded. There is no retry; one attempt is one call.

    Attributes:
        history: The log of completed attempts, in completion order.
    """

    def __init__(
        self,
        session_ops: SessionOperations,
        direct_ops: DirectOperations,
        locator: MessageLocator,
        history: Optional[CommandHistory] = None,
    ) -> None:
        self._session_ops = session_ops
        self._direct_ops = direct_ops
        self._locator = locator
        self.history = history if history is not None else CommandHistory()

    async def execute(
        self, command: Command, session_id: str, content: Optional[str] = None
    ) -> bool:
        """Execute ``command`` against ``session_id``.

        Returns False without recording anything when ``command`` is a
        dynamic command; those are handed back to the caller for
        composition. Returns True once a built-in has run successfully.

        Raises:
            CommandError: the attempt failed (already recorded in history).
        """
        if not command.is_built_in:
            return False

        logger.info("Executing /%s on session %s", command.name, session_id)
        try:
            await self._route(command, session_id, content)
        except CommandError as e:
            self._record(command, succeeded=False, error_message=e.message)
            logger.warning("/%s failed: %s", command.name, e.message)
            raise
        except Exception as e:
            # Collaborator failures of any kind surface as one error type
            error = RemoteOperationFailed(str(e) or type(e).__name__)
            self._record(command, succeeded=False, error_message=error.message)
            logger.warning("/%s failed: %s", command.name, error.message)
            raise error from e

        self._record(command, succeeded=True)
        logger.info("/%s succeeded", command.name)
        return True

    def _record(
        self, command: Command, succeeded: bool, error_message: Optional[str] = None
    ) -> None:
        self.history.append(
            HistoryEntry(
                command_name=command.name,
                timestamp=datetime.now(timezone.utc),
                succeeded=succeeded,
                error_message=error_message,
            )
        )

    async def _route(
        self, command: Command, session_id: str, content: Optional[str]
    ) -> None:
        match BuiltinCommand.parse(command.name):
            case BuiltinCommand.revert | BuiltinCommand.undo:
                target = await self._locator.revert_target(session_id)
                if not target:
                    raise NoRevertTarget()
                await self._session_ops.revert_to_checkpoint(session_id, target)
            case BuiltinCommand.unrevert | BuiltinCommand.redo:
                await self._session_ops.undo_revert(session_id)
            case BuiltinCommand.abort:
                await self._session_ops.interrupt(session_id)
            case BuiltinCommand.edit:
                if content is None:
                    raise EditContentRequired()
                message_id = await self._locator.editable_message(session_id)
                if not message_id:
                    raise NoEditableMessage()
                await self._direct_ops.edit_message(session_id, message_id, content)
            case BuiltinCommand.clear:
                await self._direct_ops.clear_session(session_id)
            case BuiltinCommand.compact:
                await self._direct_ops.compact_session(session_id)
            case BuiltinCommand.init:
                await self._session_ops.init(session_id)
            case BuiltinCommand.summarize:
                await self._session_ops.summarize(session_id)
            case None:
                raise UnknownCommand(command.name)
