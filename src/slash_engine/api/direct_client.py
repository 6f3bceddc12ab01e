"""
Direct server calls for commands the session API does not cover:
editing a message, clearing and compacting a session.
"""

from urllib.parse import quote

from slash_engine.api.http import HttpTransport


class DirectApiClient:
    """Direct network collaborator used by /edit, /clear and /compact."""

    def __init__(self, transport: HttpTransport) -> None:
        self._transport = transport

    async def edit_message(self, session_id: str, message_id: str, content: str) -> None:
        """
        Replace the content of a message.

        Args:
            session_id: The session ID
            message_id: The message ID to edit
            content: The new message content
        """
        await self._transport.request(
            "PATCH",
            f"/session/{quote(session_id, safe='')}/message/{quote(message_id, safe='')}",
            json={"content": content},
        )

    async def clear_session(self, session_id: str) -> None:
        await self._transport.request(
            "POST", f"/session/{quote(session_id, safe='')}/clear"
        )

    async def compact_session(self, session_id: str) -> None:
        await self._transport.request(
            "POST", f"/session/{quote(session_id, safe='')}/compact"
        )
