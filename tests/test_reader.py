"""Tests for LineReader -- the read loop, history and password entry."""

from __future__ import annotations

import pytest

from keyline.completion import PrefixCompletionProvider
from keyline.config import ReaderOptions
from keyline.console import ProcessConsole
from keyline.keys import ConsoleKey, KeyEvent, Modifiers
from keyline.reader import LineReader

from .virtual_console import VirtualConsole

ENTER = KeyEvent(ConsoleKey.enter, character="\r")
UP = KeyEvent(ConsoleKey.up_arrow)
TAB = KeyEvent(ConsoleKey.tab, character="\t")


def make_reader(**options) -> tuple[VirtualConsole, LineReader]:
    console = VirtualConsole()
    completion = options.pop("completion", None)
    return console, LineReader(console, completion, ReaderOptions(**options))


class PasswordModeSpy(VirtualConsole):
    """Records password_mode each time a key is read."""

    def __init__(self) -> None:
        super().__init__()
        self.modes: list[bool] = []

    def read_key(self, intercept: bool) -> KeyEvent:
        self.modes.append(self.password_mode)
        return super().read_key(intercept)


class RawModeSpy(VirtualConsole):
    """Records raw_mode each time a key is read."""

    def __init__(self) -> None:
        super().__init__()
        self.modes: list[bool] = []

    def read_key(self, intercept: bool) -> KeyEvent:
        self.modes.append(self.raw_mode)
        return super().read_key(intercept)


# ---------------------------------------------------------------------------
# read
# ---------------------------------------------------------------------------


class TestRead:
    """read() returns the edited line once Enter is pressed."""

    def test_returns_typed_text(self) -> None:
        console, reader = make_reader()
        console.feed_line("hello")
        assert reader.read() == "hello"
        assert console.pending_keys == 0

    def test_writes_prompt_then_echo(self) -> None:
        console, reader = make_reader()
        console.feed_line("ls")
        reader.read("> ")
        assert console.row_text(0) == "> ls"

    def test_enter_moves_to_next_line(self) -> None:
        console, reader = make_reader()
        console.feed_line("ls")
        reader.read("> ")
        assert (console.cursor_column, console.cursor_row) == (0, 1)
        assert console.output.endswith("\n")

    def test_reads_with_intercept(self) -> None:
        console, reader = make_reader()
        console.feed_line("a")
        reader.read()
        assert console.intercepts == [True, True]

    def test_editing_keys_are_applied(self) -> None:
        console, reader = make_reader()
        console.feed_text("hello")
        console.feed(KeyEvent(ConsoleKey.left_arrow), KeyEvent(ConsoleKey.left_arrow))
        console.feed_text("XY")
        console.feed(ENTER)
        assert reader.read() == "helXYlo"

    def test_each_read_starts_with_empty_buffer(self) -> None:
        console, reader = make_reader()
        console.feed_line("first")
        console.feed_line("")
        assert reader.read() == "first"
        assert reader.read() == ""

    def test_enter_with_modifier_still_submits(self) -> None:
        console, reader = make_reader()
        console.feed_text("x")
        console.feed(KeyEvent(ConsoleKey.enter, Modifiers.SHIFT, "\r"))
        assert reader.read() == "x"

    def test_completion_through_reader(self) -> None:
        console = VirtualConsole()
        reader = LineReader(console, PrefixCompletionProvider({"git ": ["init", "clone"]}))
        console.feed_text("git ")
        console.feed(TAB, TAB, ENTER)
        assert reader.read() == "git clone"


class TestReadDefault:
    """A blank line falls back to the default."""

    def test_blank_line_returns_default(self) -> None:
        console, reader = make_reader()
        console.feed_line("")
        assert reader.read("> ", default="fallback") == "fallback"

    def test_whitespace_line_returns_default(self) -> None:
        console, reader = make_reader()
        console.feed_line("   ")
        assert reader.read(default="fallback") == "fallback"

    def test_non_blank_line_wins_over_default(self) -> None:
        console, reader = make_reader()
        console.feed_line("typed")
        assert reader.read(default="fallback") == "typed"

    def test_blank_default_is_ignored(self) -> None:
        console, reader = make_reader()
        console.feed_line("")
        assert reader.read(default="  ") == ""

    def test_default_is_not_recorded(self) -> None:
        console, reader = make_reader(history_enabled=True)
        console.feed_line("")
        reader.read(default="fallback")
        assert reader.history == []


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class TestReaderHistory:
    """History recording and recall across reads."""

    def test_recording_disabled_by_default(self) -> None:
        console, reader = make_reader()
        console.feed_line("ls")
        reader.read()
        assert reader.history_enabled is False
        assert reader.history == []

    def test_recording_enabled(self) -> None:
        console, reader = make_reader(history_enabled=True)
        console.feed_line("ls")
        console.feed_line("pwd")
        reader.read()
        reader.read()
        assert reader.history == ["ls", "pwd"]

    def test_recording_can_be_toggled(self) -> None:
        console, reader = make_reader()
        reader.history_enabled = True
        console.feed_line("ls")
        reader.read()
        assert reader.history == ["ls"]

    def test_blank_line_without_default_is_recorded(self) -> None:
        console, reader = make_reader(history_enabled=True)
        console.feed_line("")
        reader.read()
        assert reader.history == [""]

    def test_seeded_history_is_recalled(self) -> None:
        console, reader = make_reader()
        reader.history.extend(["ls -a", "dotnet run", "git init"])
        console.feed(UP, UP, ENTER)
        assert reader.read() == "dotnet run"

    def test_recorded_line_is_recalled_by_next_read(self) -> None:
        console, reader = make_reader(history_enabled=True)
        console.feed_line("make test")
        console.feed(UP, ENTER)
        reader.read()
        assert reader.read() == "make test"


# ---------------------------------------------------------------------------
# read_password
# ---------------------------------------------------------------------------


class TestReadPassword:
    """read_password suppresses echo for the duration of the read."""

    def test_returns_typed_text(self) -> None:
        console, reader = make_reader()
        console.feed_line("s3cret")
        assert reader.read_password("Password: ") == "s3cret"

    def test_password_is_not_echoed(self) -> None:
        console, reader = make_reader()
        console.feed_line("s3cret")
        reader.read_password("Password: ")
        assert console.row_text(0) == "Password:"

    def test_password_mode_during_and_after(self) -> None:
        console = PasswordModeSpy()
        reader = LineReader(console)
        console.feed_line("pw")
        reader.read_password()
        assert console.modes == [True, True, True]
        assert console.password_mode is False

    def test_password_mode_restored_when_read_fails(self) -> None:
        console, reader = make_reader()
        console.feed_text("pw")
        with pytest.raises(EOFError):
            reader.read_password()
        assert console.password_mode is False

    def test_password_is_not_recorded(self) -> None:
        console, reader = make_reader(history_enabled=True)
        console.feed_line("pw")
        reader.read_password()
        assert reader.history == []

    def test_editing_works_while_hidden(self) -> None:
        console, reader = make_reader()
        console.feed_text("pwx")
        console.feed(KeyEvent(ConsoleKey.backspace, character="\x08"), ENTER)
        assert reader.read_password() == "pw"


# ---------------------------------------------------------------------------
# Construction and errors
# ---------------------------------------------------------------------------


class TestReaderSetup:
    def test_defaults_to_process_console(self) -> None:
        reader = LineReader()
        assert isinstance(reader.console, ProcessConsole)

    def test_unknown_keybinding_action_raises(self) -> None:
        with pytest.raises(ValueError):
            LineReader(VirtualConsole(), options=ReaderOptions(keybindings={"bogus": "F1"}))

    def test_keybinding_options_are_used(self) -> None:
        console = VirtualConsole()
        reader = LineReader(console, options=ReaderOptions(keybindings={"clearLine": "F5"}))
        console.feed_text("abc")
        console.feed(KeyEvent(ConsoleKey.escape, character="\x1b"), ENTER)
        assert reader.read() == "abc"

    def test_console_errors_propagate(self) -> None:
        console, reader = make_reader()
        console.feed_text("abc")
        with pytest.raises(EOFError):
            reader.read()


class TestRawMode:
    """The console stays in raw mode for the whole read loop."""

    def test_raw_mode_during_read(self) -> None:
        console = RawModeSpy()
        reader = LineReader(console)
        console.feed_line("ab")
        reader.read()
        assert console.modes == [True, True, True]
        assert console.raw_mode is False

    def test_raw_mode_left_after_interrupt(self) -> None:
        console, reader = make_reader()

        def interrupt(intercept: bool) -> KeyEvent:
            raise KeyboardInterrupt

        console.read_key = interrupt  # type: ignore[method-assign]
        with pytest.raises(KeyboardInterrupt):
            reader.read()
        assert console.raw_mode is False

    def test_raw_mode_left_after_end_of_input(self) -> None:
        console, reader = make_reader()
        console.feed_text("ab")
        with pytest.raises(EOFError):
            reader.read()
        assert console.raw_mode is False
