from typing import Optional

from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.styles import Style

from slash_engine.commands.palette import CommandPalette
from slash_engine.commands.selection import (
    CloseRequested,
    CommandSelected,
    PaletteSignal,
)
from slash_engine.console.key_bindings import get_palette_key_bindings

FOOTER = "↑↓ navigate • Enter select • Esc close"

# Words the console handles itself; typing one never opens the palette
CONSOLE_WORDS = frozenset({"help", "history", "exit", "quit"})


def parse_slash_input(user_input: str) -> Optional[tuple[str, str]]:
    """Split ``/name args`` into (name, args); None if not a slash command."""
    text = user_input.strip()
    if not text.startswith("/") or len(text) == 1:
        return None
    parts = text[1:].split(maxsplit=1)
    name = parts[0]
    args = parts[1] if len(parts) > 1 else ""
    return name, args


class SlashCommandHandler:
    """Connects a CommandPalette to a prompt_toolkit buffer.

    The palette is open while the buffer holds a bare ``/query`` (no
    whitespace yet) and the user has not dismissed it.
    """

    style: Style = Style.from_dict(
        {
            "bottom-toolbar": "noreverse",
            "palette.selected": "reverse bold",
            "palette.name": "bold",
            "palette.agent": "ansicyan",
            "palette.description": "ansigray",
            "palette.footer": "ansigray",
        }
    )

    def __init__(self, palette: CommandPalette) -> None:
        self.palette = palette
        self._open = False
        self._dismissed = False
        self._navigated = False

    def is_open(self) -> bool:
        return self._open and not self._dismissed

    def on_text_changed(self, buf: Buffer) -> None:
        text = buf.text
        self._navigated = False
        if not text.startswith("/"):
            self._open = False
            self._dismissed = False
            return
        query = text[1:]
        if any(ch.isspace() for ch in query) or query.lower() in CONSOLE_WORDS:
            self._open = False
            return
        self._open = True
        self.palette.set_query(query)

    def _confirm_selects(self) -> bool:
        """Whether Enter should take the highlighted row.

        Without up/down navigation the row is only taken when its name
        starts with the typed query; a description-only match or an empty
        list leaves the typed text to be submitted as is.
        """
        selected = self.palette.selection.selected
        if selected is None:
            return False
        if self._navigated:
            return True
        return selected.name.lower().startswith(self.palette.query.lower())

    def apply_signal(self, buffer: Buffer, signal: PaletteSignal) -> None:
        if signal is PaletteSignal.CONFIRM and not (
            self.is_open() and self._confirm_selects()
        ):
            self._open = False
            buffer.validate_and_handle()
            return
        if signal in (PaletteSignal.NAVIGATE_DOWN, PaletteSignal.NAVIGATE_UP):
            self._navigated = True
        match self.palette.handle_signal(signal):
            case CommandSelected(command=command):
                self._open = False
                buffer.text = f"/{command.name}"
                buffer.cursor_position = len(buffer.text)
                buffer.validate_and_handle()
            case CloseRequested():
                self._dismissed = True

    def key_bindings(self) -> KeyBindings:
        def _on_signal(event: KeyPressEvent, signal: PaletteSignal) -> None:
            self.apply_signal(event.current_buffer, signal)

        return get_palette_key_bindings(self.is_open, _on_signal)

    def toolbar(self) -> FormattedText:
        """Bottom-toolbar rendering of the open palette."""
        if not self.is_open():
            return FormattedText([])

        fragments: list[tuple[str, str]] = []
        visible = self.palette.visible
        if not visible:
            fragments.append(("class:palette.description", self.palette.empty_message()))
        for index, command in enumerate(visible):
            selected = index == self.palette.selected_index
            row_style = "class:palette.selected " if selected else ""
            fragments.append((row_style + "class:palette.name", f"/{command.name:<12}"))
            if command.agent:
                fragments.append((row_style + "class:palette.agent", f" [{command.agent}]"))
            if command.description:
                fragments.append(
                    (row_style + "class:palette.description", f" {command.description}")
                )
            fragments.append(("", "\n"))
        fragments.append(("class:palette.footer", FOOTER))
        return FormattedText(fragments)

    @property
    def auto_suggest(self) -> AutoSuggest:
        handler = self

        class _SlashAutoSuggest(AutoSuggest):
            def get_suggestion(
                self, buffer: Buffer, document: Document
            ) -> Optional[Suggestion]:
                text = document.text
                if not text.startswith("/") or len(text) <= 1:
                    return None
                typed = text[1:].lower()
                for command in handler.palette.visible:
                    name = command.name.lower()
                    if name.startswith(typed) and name != typed:
                        return Suggestion(command.name[len(typed) :])
                return None

        return _SlashAutoSuggest()
