import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import typer
from typing_extensions import Annotated

from slash_engine.api.clients import ServerClients
from slash_engine.commands.errors import CommandError
from slash_engine.commands.palette import CommandPalette
from slash_engine.console.rendering import render_commands, render_notification
from slash_engine.console.repl_console import ReplConsole
from slash_engine.logger import setup_logging
from slash_engine.runtime_config import (
    DEFAULT_SERVER_URL,
    SERVER_URL_ENV,
    SESSION_ID_ENV,
    RuntimeConfig,
    load_envs,
)

logger = logging.getLogger(__name__)


class Console(Protocol):
    async def run(self) -> None: ...


@dataclass
class AppState:
    config: RuntimeConfig
    clients: ServerClients


# Global factory functions - set by create_app()
_clients_factory: Optional[Callable[[RuntimeConfig], ServerClients]] = None
_console_factory: Optional[Callable[[RuntimeConfig, ServerClients], Console]] = None


def default_clients_factory(config: RuntimeConfig) -> ServerClients:
    """Default factory for the HTTP collaborators."""
    return ServerClients.from_config(config)


def default_console_factory(config: RuntimeConfig, clients: ServerClients) -> Console:
    """Default factory for creating Console instances."""
    return ReplConsole(config, clients)


async def _prepare_palette(state: AppState) -> CommandPalette:
    palette = state.clients.build_palette(state.config.session_id)
    await palette.refresh_catalog()
    if state.config.session_id:
        palette.update_snapshot(
            await state.clients.session.get_snapshot(state.config.session_id)
        )
    return palette


def list_commands(
    ctx: typer.Context,
    query: Annotated[
        str, typer.Option("--query", "-q", help="Filter by name or description")
    ] = "",
) -> None:
    """List the commands available in the current session state."""
    state: AppState = ctx.obj

    async def _list() -> None:
        palette = await _prepare_palette(state)
        palette.set_query(query)
        render_commands(palette.visible, palette.empty_message())

    try:
        asyncio.run(_list())
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        state.clients.close()


def run_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Command name, without the leading /")],
    content: Annotated[
        Optional[str],
        typer.Option("--content", help="Replacement content for /edit"),
    ] = None,
    arguments: Annotated[
        str,
        typer.Option("--arguments", "-a", help="Arguments for a dynamic command"),
    ] = "",
) -> None:
    """Execute a single command against the session."""
    state: AppState = ctx.obj
    if not state.config.session_id:
        typer.echo("Error: --session-id is required to run commands", err=True)
        raise typer.Exit(code=1)
    session_id = state.config.session_id
    command_name = name.lstrip("/")

    async def _run() -> bool:
        palette = await _prepare_palette(state)
        command = palette.lookup(command_name)
        if command is None:
            render_notification(
                f"/{command_name} is unknown or unavailable in the current session state",
                succeeded=False,
            )
            return False
        if not command.is_built_in:
            await state.clients.session.send_command(session_id, command, arguments)
            render_notification(f"/{command.name} sent")
            return True
        try:
            await palette.execute(command, content)
        except CommandError as e:
            render_notification(e.message, succeeded=False)
            return False
        render_notification(f"/{command.name} completed")
        return True

    try:
        ok = asyncio.run(_run())
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        state.clients.close()
    if not ok:
        raise typer.Exit(code=1)


def create_app(
    clients_factory: Optional[Callable[[RuntimeConfig], ServerClients]] = None,
    console_factory: Optional[Callable[[RuntimeConfig, ServerClients], Console]] = None,
) -> typer.Typer:
    """
    Create and configure the Typer application.

    Args:
        clients_factory: Factory function to create the HTTP collaborators
        console_factory: Factory function to create Console instances

    Returns:
        Typer application
    """
    setup_logging()

    # Load server settings from .env if not already set in the environment
    load_envs()

    def main(
        ctx: typer.Context,
        server_url: Annotated[
            str,
            typer.Option(envvar=SERVER_URL_ENV, help="Chat server API base URL"),
        ] = DEFAULT_SERVER_URL,
        session_id: Annotated[
            Optional[str],
            typer.Option(envvar=SESSION_ID_ENV, help="Session to run commands against"),
        ] = None,
        timeout: Annotated[
            float, typer.Option("--timeout", help="HTTP request timeout in seconds")
        ] = 10.0,
    ) -> None:
        """SLASH ENGINE - browse and run slash commands against a chat session"""
        cfg = RuntimeConfig(
            server_url=server_url, session_id=session_id, request_timeout=timeout
        )
        factory = _clients_factory or default_clients_factory
        ctx.obj = AppState(config=cfg, clients=factory(cfg))

        # If no subcommand, run the interactive console
        if ctx.invoked_subcommand is None:
            logger.info("Starting console on %s for session %s", server_url, session_id)
            console_fact = _console_factory or default_console_factory
            console = console_fact(cfg, ctx.obj.clients)
            try:
                asyncio.run(console.run())
            except KeyboardInterrupt:
                print("\nExiting...")
            finally:
                ctx.obj.clients.close()

    # Set global factory functions
    global _clients_factory, _console_factory
    _clients_factory = clients_factory
    _console_factory = console_factory

    app = typer.Typer(rich_markup_mode=None)
    app.callback(invoke_without_command=True)(main)
    app.command("commands")(list_commands)
    app.command("run")(run_command)

    return app


def run() -> None:
    create_app()()


if __name__ == "__main__":
    run()
