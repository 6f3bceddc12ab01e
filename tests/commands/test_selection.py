from slash_engine.commands.models import Command
from slash_engine.commands.selection import (
    CloseRequested,
    CommandSelected,
    PaletteSignal,
    SelectionState,
)

THREE = [Command("abort"), Command("clear"), Command("compact")]


def test_navigate_down_wraps_to_first() -> None:
    state = SelectionState(THREE)
    state.selected_index = 2
    assert state.handle(PaletteSignal.NAVIGATE_DOWN) is None
    assert state.selected_index == 0


def test_navigate_up_wraps_to_last() -> None:
    state = SelectionState(THREE)
    state.handle(PaletteSignal.NAVIGATE_UP)
    assert state.selected_index == 2


def test_confirm_emits_highlighted_command() -> None:
    state = SelectionState(THREE)
    state.handle(PaletteSignal.NAVIGATE_DOWN)
    assert state.handle(PaletteSignal.CONFIRM) == CommandSelected(Command("clear"))


def test_confirm_normalizes_stale_index() -> None:
    state = SelectionState(THREE)
    state.selected_index = -4
    event = state.handle(PaletteSignal.CONFIRM)
    assert event == CommandSelected(Command("compact"))


def test_confirm_on_empty_list_is_noop() -> None:
    state = SelectionState([])
    assert state.handle(PaletteSignal.CONFIRM) is None
    assert state.selected is None


def test_navigation_on_empty_list_is_noop() -> None:
    state = SelectionState([])
    state.handle(PaletteSignal.NAVIGATE_DOWN)
    state.handle(PaletteSignal.NAVIGATE_UP)
    assert state.selected_index == 0


def test_dismiss_requests_close_even_when_empty() -> None:
    assert isinstance(SelectionState([]).handle(PaletteSignal.DISMISS), CloseRequested)
    assert isinstance(SelectionState(THREE).handle(PaletteSignal.DISMISS), CloseRequested)


def test_replace_resets_selection() -> None:
    state = SelectionState(THREE)
    state.handle(PaletteSignal.NAVIGATE_DOWN)
    state.replace(THREE[:2])
    assert state.selected_index == 0
    assert state.visible == tuple(THREE[:2])
