"""
Session-state gates for built-in commands.
"""

from slash_engine.commands.models import (
    ActivityPhase,
    BuiltinCommand,
    Command,
    MessageRole,
    SessionSnapshot,
)


def is_available(command: Command, snapshot: SessionSnapshot) -> bool:
    """Return whether ``command`` may be offered given ``snapshot``.

    Dynamic commands are always available. Built-ins are gated by name;
    a built-in name without a gate is available.
    """
    if not command.is_built_in:
        return True

    match BuiltinCommand.parse(command.name):
        case BuiltinCommand.init:
            return snapshot.message_count == 0
        case BuiltinCommand.summarize:
            return snapshot.message_count > 0
        case BuiltinCommand.revert | BuiltinCommand.undo:
            return snapshot.message_count > 1
        case BuiltinCommand.unrevert | BuiltinCommand.redo:
            return snapshot.has_pending_revert
        case BuiltinCommand.abort:
            return snapshot.activity_phase == ActivityPhase.busy
        case BuiltinCommand.edit:
            return (
                snapshot.message_count > 0
                and snapshot.last_message_role == MessageRole.user
            )
        case BuiltinCommand.clear | BuiltinCommand.compact:
            return snapshot.message_count > 0
        case _:
            return True
