import asyncio
import logging
from typing import Optional

from prompt_toolkit.history import FileHistory
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.shortcuts import PromptSession
from rich.panel import Panel

from slash_engine.api.clients import ServerClients
from slash_engine.commands.errors import CommandError
from slash_engine.commands.models import BuiltinCommand, Command
from slash_engine.commands.palette import CommandPalette
from slash_engine.console.rendering import (
    console,
    render_commands,
    render_history,
    render_notification,
)
from slash_engine.console.slash_commands import SlashCommandHandler, parse_slash_input
from slash_engine.runtime_config import RuntimeConfig, get_data_dir

logger = logging.getLogger(__name__)

EXIT_WORDS = ("exit", "quit", "/exit", "/quit")


class ReplConsole:
    """Interactive slash-command console for one session."""

    prompt_session: Optional[PromptSession[str]]

    _poll_task: Optional[asyncio.Task[None]]

    def __init__(
        self,
        config: RuntimeConfig,
        clients: ServerClients,
        poll_interval: float = 2.0,
    ) -> None:
        self.config = config
        self.clients = clients
        self.palette: CommandPalette = clients.build_palette(config.session_id)
        self.handler = SlashCommandHandler(self.palette)
        self.prompt_session = None
        self._poll_interval = poll_interval
        self._poll_task = None
        self._prefill = ""
        self._composing: Optional[str] = None

    async def refresh_snapshot(self) -> None:
        """Pull the session state; keep the previous snapshot on failure."""
        if not self.config.session_id:
            return
        try:
            snapshot = await self.clients.session.get_snapshot(self.config.session_id)
        except Exception as e:
            logger.warning("Failed to refresh session state: %s", e)
            return
        self.palette.update_snapshot(snapshot)

    async def _poll_loop(self) -> None:
        """Keep availability gates current while the prompt is idle."""
        try:
            while True:
                await asyncio.sleep(self._poll_interval)
                await self.refresh_snapshot()
                if self.prompt_session and self.prompt_session.app:
                    self.prompt_session.app.invalidate()
        except asyncio.CancelledError:
            pass

    async def _prompt_for_edit(self) -> Optional[str]:
        # Separate session: a leading "/" here is content, not a command
        content: str = await PromptSession().prompt_async("new content › ")
        return content if content.strip() else None

    async def run_builtin(self, command: Command) -> None:
        content: Optional[str] = None
        if command.name == BuiltinCommand.edit.value:
            content = await self._prompt_for_edit()
            if content is None:
                render_notification("Edit cancelled.", succeeded=False)
                return
        try:
            await self.palette.execute(command, content)
        except CommandError as e:
            render_notification(e.message, succeeded=False)
        else:
            render_notification(f"/{command.name} completed")

    async def run_dynamic(self, command: Command, arguments: str) -> None:
        """Compose a dynamic command: pre-fill first, send on the next submit."""
        if not arguments and self._composing != command.name:
            self._composing = command.name
            self._prefill = f"/{command.name} "
            return
        self._composing = None
        if not self.config.session_id:
            render_notification(self.palette.empty_message(), succeeded=False)
            return
        try:
            await self.clients.session.send_command(
                self.config.session_id, command, arguments
            )
        except Exception as e:
            logger.warning("Dynamic command /%s failed: %s", command.name, e)
            render_notification(str(e), succeeded=False)
        else:
            render_notification(f"/{command.name} sent")

    async def handle_input(self, user_input: str) -> bool:
        """Process one submitted line; returns whether to keep prompting."""
        text = user_input.strip()
        if not text:
            return True
        if text.lower() in EXIT_WORDS:
            return False

        parsed = parse_slash_input(text)
        if parsed is None:
            console.print("[dim]Type / to browse commands.[/dim]")
            return True

        name, arguments = parsed
        command = self.palette.lookup(name)
        if command is None and name == "history":
            render_history(self.palette.dispatcher.history)
            return True
        if command is None and name == "help":
            render_commands(self.palette.available(), self.palette.empty_message())
            return True
        if command is None:
            render_notification(
                f"Unknown or unavailable command: /{name}", succeeded=False
            )
            return True

        if command.is_built_in:
            await self.run_builtin(command)
        else:
            await self.run_dynamic(command, arguments)

        await self.refresh_snapshot()
        return True

    async def run(self) -> None:
        """Interactive REPL loop for the console interface."""
        console.print(
            Panel(
                f"[bold cyan]╭─ SLASH ENGINE ─╮[/bold cyan]\n\n"
                f"[dim]Server:[/dim] [dim cyan]{self.config.server_url}[/dim cyan]\n"
                f"[dim]Session:[/dim] [dim cyan]{self.config.session_id or '-'}[/dim cyan]",
                expand=False,
            )
        )

        await self.palette.refresh_catalog()
        await self.refresh_snapshot()

        # Store prompt history under the XDG data directory
        history_dir = get_data_dir()
        history_dir.mkdir(parents=True, exist_ok=True)
        history_path = history_dir / "prompt_history"

        self.prompt_session = PromptSession(
            message="\n› ",
            history=FileHistory(str(history_path)),
            auto_suggest=self.handler.auto_suggest,
            style=self.handler.style,
            key_bindings=self.handler.key_bindings(),
            bottom_toolbar=self.handler.toolbar,
        )
        self.prompt_session.default_buffer.on_text_changed += self.handler.on_text_changed

        self._poll_task = asyncio.create_task(self._poll_loop())
        try:
            with patch_stdout():
                should_continue = True
                while should_continue:
                    default, self._prefill = self._prefill, ""
                    user_input = await self.prompt_session.prompt_async(default=default)
                    should_continue = await self.handle_input(user_input)
        except (KeyboardInterrupt, EOFError):
            pass
        finally:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
