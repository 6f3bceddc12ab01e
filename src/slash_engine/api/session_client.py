"""
Session-scoped server operations: state lookup, the dynamic command
catalog, and the session-mutation endpoints used by built-in commands.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import quote

from slash_engine.api.http import HttpTransport
from slash_engine.commands.errors import CatalogFetchFailed
from slash_engine.commands.models import (
    ActivityPhase,
    Command,
    MessageRole,
    SessionSnapshot,
)


def _session_path(session_id: str, suffix: str = "") -> str:
    return f"/session/{quote(session_id, safe='')}{suffix}"


@dataclass(frozen=True)
class SessionState:
    """Server view of a session, as returned by ``GET /session/{id}/state``."""

    message_count: int = 0
    last_message_id: Optional[str] = None
    last_message_role: Optional[str] = None
    last_user_message_id: Optional[str] = None
    can_revert: bool = False
    can_unrevert: bool = False
    can_abort: bool = False

    @classmethod
    def from_json(cls, data: Any) -> "SessionState":
        if not isinstance(data, Mapping):
            data = {}
        return cls(
            message_count=int(data.get("messageCount") or 0),
            last_message_id=data.get("lastMessageId"),
            last_message_role=data.get("lastMessageRole"),
            last_user_message_id=data.get("lastUserMessageId"),
            can_revert=bool(data.get("canRevert", False)),
            can_unrevert=bool(data.get("canUnrevert", False)),
            can_abort=bool(data.get("canAbort", False)),
        )

    @property
    def revert_target(self) -> Optional[str]:
        """Message to revert to: the last user message, else the last message
        when the server reports the session as revertible."""
        if self.last_user_message_id:
            return self.last_user_message_id
        if self.can_revert:
            return self.last_message_id
        return None

    def to_snapshot(self) -> SessionSnapshot:
        try:
            role = MessageRole(self.last_message_role or MessageRole.none.value)
        except ValueError:
            role = MessageRole.none
        return SessionSnapshot(
            message_count=self.message_count,
            last_message_role=role,
            has_pending_revert=self.can_unrevert,
            activity_phase=ActivityPhase.busy if self.can_abort else ActivityPhase.idle,
        )


class SessionClient:
    """Session-mutation collaborator, catalog source and message locator."""

    def __init__(self, transport: HttpTransport) -> None:
        self._transport = transport

    async def list_commands(self) -> list[Mapping[str, Any]]:
        try:
            data = await self._transport.request("GET", "/command")
        except Exception as e:
            raise CatalogFetchFailed(str(e)) from e
        if not isinstance(data, list):
            raise CatalogFetchFailed("Command catalog response is not a list")
        return [entry for entry in data if isinstance(entry, dict) and entry.get("name")]

    async def get_session_state(self, session_id: str) -> SessionState:
        data = await self._transport.request("GET", _session_path(session_id, "/state"))
        return SessionState.from_json(data)

    async def get_snapshot(self, session_id: str) -> SessionSnapshot:
        state = await self.get_session_state(session_id)
        return state.to_snapshot()

    async def revert_target(self, session_id: str) -> Optional[str]:
        state = await self.get_session_state(session_id)
        return state.revert_target

    async def editable_message(self, session_id: str) -> Optional[str]:
        state = await self.get_session_state(session_id)
        if state.last_message_role == MessageRole.user.value:
            return state.last_message_id
        return None

    async def revert_to_checkpoint(self, session_id: str, target_message_id: str) -> None:
        await self._transport.request(
            "POST",
            _session_path(session_id, "/revert"),
            json={"messageID": target_message_id},
        )

    async def undo_revert(self, session_id: str) -> None:
        await self._transport.request("POST", _session_path(session_id, "/unrevert"))

    async def interrupt(self, session_id: str) -> None:
        await self._transport.request("POST", _session_path(session_id, "/abort"))

    async def init(self, session_id: str) -> None:
        await self._transport.request("POST", _session_path(session_id, "/init"))

    async def summarize(self, session_id: str) -> None:
        await self._transport.request("POST", _session_path(session_id, "/summarize"))

    async def send_command(
        self, session_id: str, command: Command, arguments: str = ""
    ) -> None:
        """Run a dynamic command in the session with free-form arguments."""
        body: dict[str, Any] = {"command": command.name, "arguments": arguments}
        if command.agent:
            body["agent"] = command.agent
        if command.model:
            body["model"] = command.model
        await self._transport.request(
            "POST", _session_path(session_id, "/command"), json=body
        )
