"""LineReader - prompt, read keys until Enter, return the edited line."""

from __future__ import annotations

import logging

from keyline.completion import CompletionProvider
from keyline.config import ReaderOptions
from keyline.console import Console, ProcessConsole
from keyline.editor import Editor
from keyline.keybindings import KeyBindings
from keyline.keys import ConsoleKey

logger = logging.getLogger(__name__)


class LineReader:
    """Reads edited lines from a console, keeping an in-memory history.

    ``history`` belongs to the reader and is shared with the editor of each
    read. A reader is not safe for concurrent use: callers must not start a
    second ``read`` or ``read_password`` before the first one returns.
    """

    def __init__(
        self,
        console: Console | None = None,
        completion: CompletionProvider | None = None,
        options: ReaderOptions | None = None,
    ) -> None:
        options = options or ReaderOptions()
        self._console = console if console is not None else ProcessConsole()
        self._completion = completion
        self._keybindings = KeyBindings(options.keybindings)
        self.history: list[str] = []
        self.history_enabled: bool = options.history_enabled

    @property
    def console(self) -> Console:
        return self._console

    def read(self, prompt: str = "", default: str = "") -> str:
        """Read a line.

        A blank line is replaced by *default* when one is given; the
        default is never recorded in history.
        """
        self._console.write(prompt)
        text = self._read_text()

        if not text.strip() and default.strip():
            text = default
        elif self.history_enabled:
            self.history.append(text)

        return text

    def read_password(self, prompt: str = "") -> str:
        """Read a line with console echo suppressed. Never recorded in history."""
        self._console.write(prompt)
        self._console.password_mode = True
        try:
            return self._read_text()
        finally:
            self._console.password_mode = False

    def _read_text(self) -> str:
        editor = Editor(self._console, self.history, self._completion, self._keybindings)

        self._console.start()
        try:
            event = self._console.read_key(True)
            while event.key != ConsoleKey.enter:
                editor.handle(event)
                event = self._console.read_key(True)
        finally:
            self._console.stop()

        self._console.write_line("")
        logger.debug("Read finished with %d characters", editor.limit)
        return editor.text
