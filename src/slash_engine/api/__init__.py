"""HTTP collaborators for the chat server API."""

from slash_engine.api.clients import ServerClients
from slash_engine.api.direct_client import DirectApiClient
from slash_engine.api.http import ApiError, HttpTransport
from slash_engine.api.session_client import SessionClient, SessionState

__all__ = [
    "ApiError",
    "DirectApiClient",
    "HttpTransport",
    "ServerClients",
    "SessionClient",
    "SessionState",
]
