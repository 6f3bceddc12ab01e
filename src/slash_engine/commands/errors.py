"""
Error taxonomy for command catalog loading and execution.
"""


class CommandError(Exception):
    """Base class for command failures; ``message`` is shown to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class CatalogFetchFailed(CommandError):
    """The dynamic command catalog could not be loaded."""


class NoRevertTarget(CommandError):
    """There is no message to revert the session to."""

    def __init__(self, message: str = "No message to revert to") -> None:
        super().__init__(message)


class NoEditableMessage(CommandError):
    """The session has no trailing user message that can be edited."""

    def __init__(self, message: str = "No user message to edit") -> None:
        super().__init__(message)


class EditContentRequired(CommandError):
    """/edit was dispatched without replacement content."""

    def __init__(self, message: str = "Replacement content is required for /edit") -> None:
        super().__init__(message)


class UnknownCommand(CommandError):
    """The command name has no backend route."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown command: /{name}")
        self.name = name


class RemoteOperationFailed(CommandError):
    """A collaborator call failed; wraps its human-readable message."""


class CommandInFlight(CommandError):
    """The same command is already executing for this session."""

    def __init__(self, name: str) -> None:
        super().__init__(f"/{name} is already running")
        self.name = name


class NoActiveSession(CommandError):
    """A built-in command was executed with no session selected."""

    def __init__(self, message: str = "No active session for commands") -> None:
        super().__init__(message)
