"""Editor - the key-event state machine behind a line read.

The editor owns the text buffer, the logical cursor, the history cursor and
the tab-completion session. Each key event is mapped to an edit action
through the keybindings table; every action updates the buffer and repaints
only the affected part of the line on the console, keeping the physical
cursor in step with the logical one.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Mapping

import wcwidth

from keyline.buffer import EditBuffer, wrap_position
from keyline.completion import CompletionProvider, CompletionSession, find_completion_start
from keyline.console import Console
from keyline.keybindings import EditorAction, KeyBindings
from keyline.keys import ConsoleKey, KeyEvent, build_chord

logger = logging.getLogger(__name__)


def is_insertable(ch: str) -> bool:
    """True for a single printable character occupying a terminal cell."""
    return len(ch) == 1 and wcwidth.wcwidth(ch) > 0


class Editor:
    """Single-line editing state machine.

    *history* is borrowed from the caller for the lifetime of the editor;
    the editor only reads it. The history cursor starts past the last
    entry, which means "editing a fresh line".
    """

    def __init__(
        self,
        console: Console,
        history: list[str] | None = None,
        completion: CompletionProvider | None = None,
        keybindings: KeyBindings | None = None,
    ) -> None:
        self._console = console
        self._history = history if history is not None else []
        self._history_index = len(self._history)
        self._completion = completion
        self._session: CompletionSession | None = None
        self._buffer = EditBuffer()

        operations: dict[EditorAction, Callable[[], None]] = {
            "cursorLeft": self._move_left,
            "cursorRight": self._move_right,
            "cursorLineStart": self._move_home,
            "cursorLineEnd": self._move_end,
            "deleteCharBackward": self._backspace,
            "deleteCharForward": self._delete,
            "deleteWordBackward": self._delete_word_backward,
            "deleteToLineStart": self._delete_to_line_start,
            "deleteToLineEnd": self._delete_to_line_end,
            "clearLine": self._clear_line,
            "transposeChars": self._transpose_chars,
            "historyPrevious": self._prev_history,
            "historyNext": self._next_history,
            "completeNext": self._complete_next,
            "completePrevious": self._complete_previous,
        }
        kb = keybindings or KeyBindings()
        self._actions: Mapping[str, Callable[[], None]] = MappingProxyType(
            {chord: operations[action] for chord, action in kb.chords.items()}
        )

    # -- public -------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._buffer.text

    @property
    def cursor(self) -> int:
        return self._buffer.cursor

    @property
    def limit(self) -> int:
        return self._buffer.limit

    @property
    def history_index(self) -> int:
        return self._history_index

    @property
    def is_browsing_history(self) -> bool:
        return self._history_index != len(self._history)

    @property
    def completion_session(self) -> CompletionSession | None:
        return self._session

    def handle(self, event: KeyEvent) -> None:
        """Apply one key event to the buffer and the screen."""
        # Any key other than Tab (Shift+Tab included) keeps cycling going
        if self._session is not None and event.key != ConsoleKey.tab:
            self._session = None

        action = self._actions.get(build_chord(event))
        if action is not None:
            action()
        elif is_insertable(event.character):
            self._write_char(event.character)

    # -- cursor motion ------------------------------------------------------

    def _reposition(self, offset: int) -> None:
        column, row = wrap_position(
            self._console.cursor_column,
            self._console.cursor_row,
            offset,
            self._console.buffer_width,
        )
        self._console.set_cursor_position(column, row)

    def _move_left(self, count: int = 1) -> None:
        count = min(count, self._buffer.cursor)
        if count <= 0:
            return
        self._reposition(-count)
        self._buffer.cursor -= count

    def _move_right(self, count: int = 1) -> None:
        count = min(count, self._buffer.limit - self._buffer.cursor)
        if count <= 0:
            return
        self._reposition(count)
        self._buffer.cursor += count

    def _move_home(self) -> None:
        self._move_left(self._buffer.cursor)

    def _move_end(self) -> None:
        self._move_right(self._buffer.limit - self._buffer.cursor)

    # -- insertion ----------------------------------------------------------

    def _write_char(self, ch: str) -> None:
        buf = self._buffer
        if buf.is_end:
            buf.content.append(ch)
            buf.limit += 1
            self._console.write(ch)
            buf.cursor += 1
        else:
            column = self._console.cursor_column
            row = self._console.cursor_row
            suffix = buf.suffix()
            buf.content.insert(buf.cursor, ch)
            buf.limit += 1
            self._console.write(ch + suffix)
            self._console.set_cursor_position(column, row)
            self._move_right()

    def _write_string(self, text: str) -> None:
        for ch in text:
            self._write_char(ch)

    def _write_new_string(self, text: str) -> None:
        self._clear_line()
        self._write_string(text)

    # -- deletion -----------------------------------------------------------

    def _backspace(self, count: int = 1) -> None:
        count = min(count, self._buffer.cursor)
        if count <= 0:
            return
        self._move_left(count)
        buf = self._buffer
        del buf.content[buf.cursor : buf.cursor + count]
        buf.limit -= count
        column = self._console.cursor_column
        row = self._console.cursor_row
        self._console.write(buf.suffix() + " " * count)
        self._console.set_cursor_position(column, row)

    def _delete(self) -> None:
        buf = self._buffer
        if buf.is_end:
            return
        del buf.content[buf.cursor]
        buf.limit -= 1
        column = self._console.cursor_column
        row = self._console.cursor_row
        self._console.write(buf.suffix() + " ")
        self._console.set_cursor_position(column, row)

    def _delete_word_backward(self) -> None:
        buf = self._buffer
        while not buf.is_start and buf.content[buf.cursor - 1] != " ":
            self._backspace()

    def _delete_to_line_start(self) -> None:
        self._backspace(self._buffer.cursor)

    def _delete_to_line_end(self) -> None:
        pos = self._buffer.cursor
        self._move_end()
        self._backspace(self._buffer.cursor - pos)

    def _clear_line(self) -> None:
        self._move_end()
        self._backspace(self._buffer.cursor)

    # -- transpose ----------------------------------------------------------

    def _transpose_chars(self) -> None:
        buf = self._buffer
        if buf.is_start or buf.limit < 2:
            return

        # At end of line, swap the last two characters instead
        shift = 1 if buf.is_end else 0
        first = buf.cursor - 1 - shift
        second = buf.cursor - shift
        content = buf.content
        content[first], content[second] = content[second], content[first]

        target = min(buf.cursor + 1, buf.limit)
        self._write_new_string("".join(content))
        self._move_left(buf.limit - target)

    # -- history ------------------------------------------------------------

    def _prev_history(self) -> None:
        if self._history_index > 0:
            self._history_index -= 1
            self._write_new_string(self._history[self._history_index])

    def _next_history(self) -> None:
        if self._history_index < len(self._history):
            self._history_index += 1
            if self._history_index == len(self._history):
                self._clear_line()
            else:
                self._write_new_string(self._history[self._history_index])

    # -- completion ---------------------------------------------------------

    def _complete_next(self) -> None:
        if self._session is not None:
            self._cycle_completion(1)
            return

        if self._completion is None or not self._buffer.is_end:
            return

        text = self._buffer.text
        start = find_completion_start(text, self._completion.separators)
        candidates = self._completion.get_suggestions(text, start)
        if not candidates:
            return

        logger.debug("Completion: %d candidates from offset %d", len(candidates), start)
        self._session = CompletionSession(list(candidates), start)
        self._backspace(self._buffer.cursor - start)
        self._write_string(self._session.current)

    def _complete_previous(self) -> None:
        if self._session is not None:
            self._cycle_completion(-1)

    def _cycle_completion(self, delta: int) -> None:
        session = self._session
        self._backspace(self._buffer.cursor - session.start_offset)
        self._write_string(session.step(delta))
