import pytest
from conftest import make_snapshot
from prompt_toolkit.auto_suggest import Suggestion
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document

from slash_engine.commands.dispatcher import ExecutionDispatcher
from slash_engine.commands.models import MessageRole
from slash_engine.commands.palette import CommandPalette
from slash_engine.commands.selection import PaletteSignal
from slash_engine.console.slash_commands import SlashCommandHandler, parse_slash_input


class SubmittingBuffer(Buffer):
    def __init__(self) -> None:
        super().__init__()
        self.submitted = False

    def validate_and_handle(self) -> None:
        self.submitted = True


@pytest.fixture
def handler(dispatcher: ExecutionDispatcher) -> SlashCommandHandler:
    palette = CommandPalette(dispatcher, session_id="s1")
    palette.update_snapshot(make_snapshot(message_count=3, last_message_role=MessageRole.user))
    return SlashCommandHandler(palette)


def type_text(handler: SlashCommandHandler, buf: Buffer, text: str) -> None:
    buf.text = text
    handler.on_text_changed(buf)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("/clear", ("clear", "")),
        ("  /review PR 12 ", ("review", "PR 12")),
        ("hello", None),
        ("/", None),
    ],
)
def test_parse_slash_input(text: str, expected: tuple[str, str] | None) -> None:
    assert parse_slash_input(text) == expected


def test_slash_opens_palette_and_sets_query(handler: SlashCommandHandler) -> None:
    buf = Buffer()
    type_text(handler, buf, "/co")
    assert handler.is_open()
    assert handler.palette.query == "co"
    assert handler.palette.visible[0].name == "compact"


def test_whitespace_closes_palette(handler: SlashCommandHandler) -> None:
    buf = Buffer()
    type_text(handler, buf, "/review some args")
    assert not handler.is_open()
    type_text(handler, buf, "plain text")
    assert not handler.is_open()


def test_confirm_fills_buffer_and_submits(handler: SlashCommandHandler) -> None:
    buf = SubmittingBuffer()
    type_text(handler, buf, "/c")
    handler.apply_signal(buf, PaletteSignal.NAVIGATE_DOWN)
    handler.apply_signal(buf, PaletteSignal.CONFIRM)
    assert buf.text == "/compact"
    assert buf.submitted


def test_dismiss_keeps_palette_closed_until_slash_is_retyped(
    handler: SlashCommandHandler,
) -> None:
    buf = Buffer()
    type_text(handler, buf, "/c")
    handler.apply_signal(buf, PaletteSignal.DISMISS)
    assert not handler.is_open()
    type_text(handler, buf, "/cl")
    assert not handler.is_open()
    type_text(handler, buf, "")
    type_text(handler, buf, "/")
    assert handler.is_open()


def test_toolbar_marks_selected_row(handler: SlashCommandHandler) -> None:
    buf = Buffer()
    type_text(handler, buf, "/")
    handler.apply_signal(buf, PaletteSignal.NAVIGATE_DOWN)
    fragments = list(handler.toolbar())
    selected = [text for style, text in fragments if "palette.selected" in style]
    assert selected[0].strip() == "/compact"


def test_toolbar_shows_empty_message(handler: SlashCommandHandler) -> None:
    buf = Buffer()
    type_text(handler, buf, "/zzz")
    texts = [text for _, text in handler.toolbar()]
    assert "No commands found" in texts


def test_toolbar_hidden_when_closed(handler: SlashCommandHandler) -> None:
    assert list(handler.toolbar()) == []


def test_auto_suggest_completes_first_visible_name(handler: SlashCommandHandler) -> None:
    buf = Buffer()
    type_text(handler, buf, "/sum")
    suggestion = handler.auto_suggest.get_suggestion(buf, Document("/sum"))
    assert isinstance(suggestion, Suggestion)
    assert suggestion.text == "marize"
    assert handler.auto_suggest.get_suggestion(buf, Document("/")) is None


@pytest.mark.parametrize("text", ["/history", "/help", "/exit", "/quit", "/HISTORY"])
def test_console_words_submit_unchanged(handler: SlashCommandHandler, text: str) -> None:
    buf = SubmittingBuffer()
    type_text(handler, buf, text)
    assert not handler.is_open()
    handler.apply_signal(buf, PaletteSignal.CONFIRM)
    assert buf.text == text
    assert buf.submitted


def test_confirm_with_no_matches_submits_typed_text(handler: SlashCommandHandler) -> None:
    buf = SubmittingBuffer()
    type_text(handler, buf, "/zzz")
    handler.apply_signal(buf, PaletteSignal.CONFIRM)
    assert buf.text == "/zzz"
    assert buf.submitted
    assert not handler.is_open()


def test_confirm_ignores_description_only_match(handler: SlashCommandHandler) -> None:
    # "histo" matches compact through its description, not its name
    buf = SubmittingBuffer()
    type_text(handler, buf, "/histo")
    assert handler.palette.visible[0].name == "compact"
    handler.apply_signal(buf, PaletteSignal.CONFIRM)
    assert buf.text == "/histo"
    assert buf.submitted


def test_navigating_selects_description_match(handler: SlashCommandHandler) -> None:
    buf = SubmittingBuffer()
    type_text(handler, buf, "/histo")
    handler.apply_signal(buf, PaletteSignal.NAVIGATE_DOWN)
    handler.apply_signal(buf, PaletteSignal.NAVIGATE_UP)
    handler.apply_signal(buf, PaletteSignal.CONFIRM)
    assert buf.text == "/compact"
    assert buf.submitted


def test_confirm_completes_name_prefix(handler: SlashCommandHandler) -> None:
    buf = SubmittingBuffer()
    type_text(handler, buf, "/comp")
    handler.apply_signal(buf, PaletteSignal.CONFIRM)
    assert buf.text == "/compact"
    assert buf.submitted
