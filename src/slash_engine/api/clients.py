from dataclasses import dataclass
from typing import Optional

from slash_engine.api.direct_client import DirectApiClient
from slash_engine.api.http import HttpTransport
from slash_engine.api.session_client import SessionClient
from slash_engine.commands.dispatcher import CommandHistory, ExecutionDispatcher
from slash_engine.commands.palette import CommandPalette
from slash_engine.runtime_config import RuntimeConfig


@dataclass
class ServerClients:
    """The collaborators a command palette needs, bound to one server."""

    session: SessionClient
    direct: DirectApiClient
    transport: Optional[HttpTransport] = None

    @classmethod
    def from_config(cls, config: RuntimeConfig) -> "ServerClients":
        transport = HttpTransport(config)
        return cls(
            session=SessionClient(transport),
            direct=DirectApiClient(transport),
            transport=transport,
        )

    def build_palette(
        self, session_id: Optional[str], history: Optional[CommandHistory] = None
    ) -> CommandPalette:
        dispatcher = ExecutionDispatcher(
            session_ops=self.session,
            direct_ops=self.direct,
            locator=self.session,
            history=history,
        )
        return CommandPalette(
            dispatcher, session_id=session_id, catalog_source=self.session
        )

    def close(self) -> None:
        if self.transport is not None:
            self.transport.close()
