from pathlib import Path
from typing import Any, Mapping, Optional

import pytest

from slash_engine.commands.dispatcher import ExecutionDispatcher
from slash_engine.commands.models import (
    ActivityPhase,
    Command,
    MessageRole,
    SessionSnapshot,
)


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep log files and prompt history out of the real home directory."""
    data_home = tmp_path / "data"
    monkeypatch.setenv("XDG_DATA_HOME", str(data_home))
    return data_home


def make_snapshot(
    message_count: int = 0,
    last_message_role: MessageRole = MessageRole.none,
    has_pending_revert: bool = False,
    activity_phase: ActivityPhase = ActivityPhase.idle,
) -> SessionSnapshot:
    return SessionSnapshot(
        message_count=message_count,
        last_message_role=last_message_role,
        has_pending_revert=has_pending_revert,
        activity_phase=activity_phase,
    )


class FakeSessionOps:
    """Records session-mutation calls; raises ``fail_with`` if set."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.fail_with: Optional[Exception] = None

    async def _call(self, *call: Any) -> None:
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    async def revert_to_checkpoint(self, session_id: str, target_message_id: str) -> None:
        await self._call("revert_to_checkpoint", session_id, target_message_id)

    async def undo_revert(self, session_id: str) -> None:
        await self._call("undo_revert", session_id)

    async def interrupt(self, session_id: str) -> None:
        await self._call("interrupt", session_id)

    async def init(self, session_id: str) -> None:
        await self._call("init", session_id)

    async def summarize(self, session_id: str) -> None:
        await self._call("summarize", session_id)


class FakeDirectOps:
    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.fail_with: Optional[Exception] = None

    async def _call(self, *call: Any) -> None:
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    async def edit_message(self, session_id: str, message_id: str, content: str) -> None:
        await self._call("edit_message", session_id, message_id, content)

    async def clear_session(self, session_id: str) -> None:
        await self._call("clear_session", session_id)

    async def compact_session(self, session_id: str) -> None:
        await self._call("compact_session", session_id)


class FakeLocator:
    def __init__(
        self, revert_target: Optional[str] = "msg-user", editable: Optional[str] = "msg-last"
    ) -> None:
        self._revert_target = revert_target
        self._editable = editable

    async def revert_target(self, session_id: str) -> Optional[str]:
        return self._revert_target

    async def editable_message(self, session_id: str) -> Optional[str]:
        return self._editable


class FakeCatalogSource:
    def __init__(
        self,
        entries: Optional[list[Mapping[str, Any]]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.entries = entries or []
        self.error = error
        self.fetches = 0

    async def list_commands(self) -> list[Mapping[str, Any]]:
        self.fetches += 1
        if self.error is not None:
            raise self.error
        return list(self.entries)


class FakeSessionClient(FakeSessionOps, FakeLocator, FakeCatalogSource):
    """Everything the CLI and console need from the session API."""

    def __init__(
        self,
        snapshot: Optional[SessionSnapshot] = None,
        entries: Optional[list[Mapping[str, Any]]] = None,
        catalog_error: Optional[Exception] = None,
    ) -> None:
        FakeSessionOps.__init__(self)
        FakeLocator.__init__(self)
        FakeCatalogSource.__init__(self, entries, catalog_error)
        self.snapshot = snapshot or make_snapshot()
        self.sent: list[tuple[str, Command, str]] = []

    async def get_snapshot(self, session_id: str) -> SessionSnapshot:
        return self.snapshot

    async def send_command(self, session_id: str, command: Command, arguments: str = "") -> None:
        self.sent.append((session_id, command, arguments))


@pytest.fixture
def session_ops() -> FakeSessionOps:
    return FakeSessionOps()


@pytest.fixture
def direct_ops() -> FakeDirectOps:
    return FakeDirectOps()


@pytest.fixture
def locator() -> FakeLocator:
    return FakeLocator()


@pytest.fixture
def dispatcher(
    session_ops: FakeSessionOps, direct_ops: FakeDirectOps, locator: FakeLocator
) -> ExecutionDispatcher:
    return ExecutionDispatcher(session_ops, direct_ops, locator)
