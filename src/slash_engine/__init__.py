"""Slash-command engine for chat sessions."""

__version__ = "0.1.0"
