"""
Catalog merging and filtering.

Built-in commands are combined with the dynamic catalog, filtered by the
search query and session state, and sorted so that prefix matches come
first.
"""

import logging
from typing import Any, Iterable, Mapping, Protocol, Sequence

from slash_engine.commands.availability import is_available
from slash_engine.commands.models import (
    BUILTIN_COMMANDS,
    BuiltinCommand,
    Command,
    SessionSnapshot,
)

logger = logging.getLogger(__name__)


class CommandCatalogSource(Protocol):
    """Remote lookup of dynamically-registered commands. May raise."""

    async def list_commands(self) -> list[Mapping[str, Any]]: ...


async def load_dynamic_commands(source: CommandCatalogSource) -> list[Command]:
    """Fetch dynamic commands, returning an empty list if the source fails."""
    try:
        entries = await source.list_commands()
        return [Command.from_catalog_entry(entry) for entry in entries]
    except Exception as e:
        # Losing the dynamic source must never hide the built-ins
        logger.warning("Command catalog fetch failed, using built-ins only: %s", e)
        return []


def _matches(command: Command, needle: str) -> bool:
    description = command.description or ""
    return needle in command.name.lower() or needle in description.lower()


def resolve_visible_commands(
    builtins: Iterable[Command],
    dynamic_commands: Iterable[Command],
    query: str,
    snapshot: SessionSnapshot,
) -> list[Command]:
    """Return the ordered list of commands to show for ``query``.

    Dynamic commands replace built-ins of the same name. Matching is a
    case-insensitive substring test on name or description.
    """
    by_name: dict[str, Command] = {}
    for command in builtins:
        by_name[command.name] = command
    for command in dynamic_commands:
        by_name[command.name] = command

    needle = query.lower()
    candidates: Sequence[Command] = list(by_name.values())
    if needle:
        candidates = [cmd for cmd in candidates if _matches(cmd, needle)]

    visible = [
        cmd
        for cmd in candidates
        if not (cmd.name == BuiltinCommand.init.value and snapshot.has_messages)
        and is_available(cmd, snapshot)
    ]

    # Prefix matches first, then by name
    visible.sort(
        key=lambda cmd: (not cmd.name.lower().startswith(needle), cmd.name.lower(), cmd.name)
    )
    return visible


def builtin_commands() -> list[Command]:
    """Return a fresh list of the statically-defined commands."""
    return list(BUILTIN_COMMANDS)
