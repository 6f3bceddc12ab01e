"""
Shared HTTP transport for the chat server API.

Blocking ``requests`` calls are pushed onto a worker thread so callers can
await them from the prompt's event loop.
"""

import asyncio
import logging
from typing import Any, Optional

import requests

from slash_engine.runtime_config import RuntimeConfig

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A non-2xx response, carrying the server's human-readable message."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def error_message_from_response(response: requests.Response) -> str:
    """Extract a readable error message from a failed response."""
    try:
        error_data = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.reason}"

    if isinstance(error_data, dict):
        message = error_data.get("message") or error_data.get("error")
        if message:
            return str(message)
    return f"HTTP {response.status_code}"


class HttpTransport:
    """Thin wrapper over a ``requests.Session`` bound to one server."""

    def __init__(
        self, config: RuntimeConfig, session: Optional[requests.Session] = None
    ) -> None:
        self.base_url = config.server_url.rstrip("/")
        self.timeout = config.request_timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "X-Client-Version": config.client_version,
            }
        )

    def request_sync(
        self, method: str, path: str, json: Optional[dict[str, Any]] = None
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        response = self._session.request(method, url, json=json, timeout=self.timeout)
        if not response.ok:
            message = error_message_from_response(response)
            logger.info("%s %s failed: %s", method, url, message)
            raise ApiError(message, response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def request(
        self, method: str, path: str, json: Optional[dict[str, Any]] = None
    ) -> Any:
        return await asyncio.to_thread(self.request_sync, method, path, json)

    def close(self) -> None:
        self._session.close()
