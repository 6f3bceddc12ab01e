from typing import Callable, Optional

from prompt_toolkit.filters import Condition
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.keys import Keys

from slash_engine.commands.selection import PaletteSignal

# Raw key name -> logical palette signal
KEY_SIGNALS: dict[str, PaletteSignal] = {
    "down": PaletteSignal.NAVIGATE_DOWN,
    "up": PaletteSignal.NAVIGATE_UP,
    "enter": PaletteSignal.CONFIRM,
    "tab": PaletteSignal.CONFIRM,
    "escape": PaletteSignal.DISMISS,
}


def signal_for_key(key: str) -> Optional[PaletteSignal]:
    """Decode a prompt_toolkit key name into a palette signal."""
    return KEY_SIGNALS.get(key)


def get_palette_key_bindings(
    is_open: Callable[[], bool],
    on_signal: Callable[[KeyPressEvent, PaletteSignal], None],
) -> KeyBindings:
    """Return KeyBindings that drive the command palette while it is open.

    Args:
        is_open: Whether the palette currently owns navigation keys
        on_signal: Receives the key event and the decoded signal
    """
    kb = KeyBindings()
    palette_open = Condition(is_open)

    for key, signal in KEY_SIGNALS.items():

        def _handler(event: KeyPressEvent, signal: PaletteSignal = signal) -> None:
            on_signal(event, signal)

        # A lone Escape waits to see whether Enter follows (Alt+Enter newline)
        eager = key != "escape"
        kb.add(key, filter=palette_open, eager=eager)(_handler)

    # Support Ctrl+J for newline without submission.
    @kb.add("c-j", eager=True)
    def _(event: KeyPressEvent) -> None:
        """Insert newline on Ctrl+J (recommended Shift+Enter mapping in terminal)."""
        event.current_buffer.insert_text("\n")

    # Support Alt+Enter for newline without submission.
    @kb.add(Keys.Escape, Keys.Enter, eager=True)
    def _(event: KeyPressEvent) -> None:
        """Insert newline on Alt+Enter."""
        event.current_buffer.insert_text("\n")

    return kb
