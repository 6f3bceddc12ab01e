"""
Runtime configuration for the slash-command engine.

This module provides:
- load_envs(): load SLASH_ENGINE_SERVER_URL, SLASH_ENGINE_SESSION_ID and
  SLASH_ENGINE_LOG_LEVEL from a .env file if they are not already present
  in the environment.
- RuntimeConfig: a dataclass holding runtime settings for the HTTP
  collaborators and the console.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

# Environment variable names
SERVER_URL_ENV: str = "SLASH_ENGINE_SERVER_URL"
SESSION_ID_ENV: str = "SLASH_ENGINE_SESSION_ID"
LOG_LEVEL_ENV: str = "SLASH_ENGINE_LOG_LEVEL"

DEFAULT_SERVER_URL: str = "http://127.0.0.1:4096"
DEFAULT_CLIENT_VERSION: str = "1.0"


def load_envs(env_file: Optional[str] = None) -> None:
    """
    Load SLASH_ENGINE_* settings from a .env file into the process
    environment if they are not already set.
    """
    env_values = dotenv_values(env_file) if env_file else dotenv_values()
    for key in (SERVER_URL_ENV, SESSION_ID_ENV, LOG_LEVEL_ENV):
        if not os.environ.get(key):
            val = env_values.get(key)
            if val:
                os.environ[key] = str(val)


@dataclass(frozen=True)
class RuntimeConfig:
    """
    Holds runtime configuration for the slash-command engine.

    Attributes:
        server_url: Base URL of the chat server API.
        session_id: The active session commands are executed against (if any).
        request_timeout: Timeout in seconds for each HTTP request.
        client_version: Value sent in the X-Client-Version header.
    """

    server_url: str = DEFAULT_SERVER_URL
    session_id: Optional[str] = None
    request_timeout: float = 10.0
    client_version: str = DEFAULT_CLIENT_VERSION


def get_data_dir() -> Path:
    """
    Return the slash-engine data directory under XDG_DATA_HOME or fallback to ~/.local/share.
    """
    data_home = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return data_home / "slash_engine"
