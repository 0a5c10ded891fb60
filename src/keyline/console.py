"""Console abstraction for the line editor.

Provides a ``Console`` protocol describing the terminal surface the editor
paints on, and a concrete ``ProcessConsole`` backed by ``sys.stdin`` /
``sys.stdout`` that reads keys with the terminal in raw mode and moves the
cursor with ANSI escape sequences.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import sys
import termios
import tty
from collections import deque
from typing import Protocol, TextIO

from keyline.buffer import wrap_position
from keyline.keys import KeyEvent, parse_key_event
from keyline.sequences import split_sequences

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_DOWN_FMT = "\x1b[{}B"
_CURSOR_COLUMN_FMT = "\x1b[{}G"

_CTRL_C = "\x03"

_READ_SIZE = 1024


# ---------------------------------------------------------------------------
# Console protocol
# ---------------------------------------------------------------------------


class Console(Protocol):
    """Interface for the terminal surface the editor draws on."""

    password_mode: bool

    @property
    def cursor_column(self) -> int: ...

    @property
    def cursor_row(self) -> int: ...

    @property
    def buffer_width(self) -> int: ...

    @property
    def buffer_height(self) -> int: ...

    def set_cursor_position(self, column: int, row: int) -> None: ...

    def write(self, text: str) -> None: ...

    def write_line(self, text: str) -> None: ...

    def read_key(self, intercept: bool) -> KeyEvent: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


# ---------------------------------------------------------------------------
# ProcessConsole implementation
# ---------------------------------------------------------------------------


class ProcessConsole:
    """Concrete console backed by the process's stdin and stdout.

    The physical cursor is tracked here rather than queried from the
    terminal: row 0 is the row the console was created on. Every write
    goes through this object, so the bookkeeping stays in step with the
    screen as long as nothing else writes to stdout meanwhile.

    While ``password_mode`` is set, writes render nothing and cursor
    positioning is a no-op.

    ``escape_timeout`` is how long, in seconds, to wait for the rest of an
    escape sequence before treating a lone ESC as the Escape key.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        *,
        escape_timeout: float = 0.01,
    ) -> None:
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._column = 0
        self._row = 0
        self.password_mode: bool = False
        self.escape_timeout = escape_timeout
        self._original_termios: list | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending: deque[str] = deque()
        self._partial = ""

    # -- properties ---------------------------------------------------------

    @property
    def cursor_column(self) -> int:
        return self._column

    @property
    def cursor_row(self) -> int:
        return self._row

    @property
    def buffer_width(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def buffer_height(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    # -- output -------------------------------------------------------------

    def set_cursor_position(self, column: int, row: int) -> None:
        """Move the cursor to (column, row) relative to the starting row."""
        if self.password_mode:
            return
        parts = []
        if row < self._row:
            parts.append(_CURSOR_UP_FMT.format(self._row - row))
        elif row > self._row:
            parts.append(_CURSOR_DOWN_FMT.format(row - self._row))
        parts.append(_CURSOR_COLUMN_FMT.format(column + 1))
        self._raw_write("".join(parts))
        self._column = column
        self._row = row

    def write(self, text: str) -> None:
        if self.password_mode or not text:
            return
        self._raw_write(text)
        self._column, self._row = wrap_position(
            self._column, self._row, len(text), self.buffer_width
        )
        if self._column == 0:
            # Terminals defer the wrap at the right margin; force it
            self._raw_write("\r\n")

    def write_line(self, text: str) -> None:
        self.write(text)
        self._raw_write("\r\n")
        self._column = 0
        self._row += 1

    # -- raw mode -----------------------------------------------------------

    def start(self) -> None:
        """Put the terminal in raw mode until ``stop`` is called.

        Input that is already queued is kept. When stdin is not a terminal
        the mode is left alone.
        """
        if self._original_termios is not None:
            return
        fd = self._stdin.fileno()
        if not os.isatty(fd):
            logger.debug("stdin is not a terminal; not entering raw mode")
            return
        self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd, termios.TCSANOW)

    def stop(self) -> None:
        """Restore the terminal attributes saved by ``start``."""
        if self._original_termios is None:
            return
        termios.tcsetattr(self._stdin.fileno(), termios.TCSADRAIN, self._original_termios)
        self._original_termios = None

    # -- input --------------------------------------------------------------

    def read_key(self, intercept: bool) -> KeyEvent:
        """Block until a recognised key arrives and return it.

        Keys that arrive together are queued and served by later calls.
        Raises ``KeyboardInterrupt`` on Ctrl+C and ``EOFError`` when stdin
        is closed.
        """
        while True:
            data = self._next_sequence()
            if data == _CTRL_C:
                raise KeyboardInterrupt
            event = parse_key_event(data)
            if event is not None:
                return event
            logger.debug("Ignoring unrecognised input %r", data)

    def _next_sequence(self) -> str:
        while not self._pending:
            self._fill()
        return self._pending.popleft()

    def _fill(self) -> None:
        """Read what stdin has and queue every complete key in it."""
        fd = self._stdin.fileno()
        if self._partial and not select.select([fd], [], [], self.escape_timeout)[0]:
            # Nothing more is coming: a lone ESC is the Escape key
            self._pending.append(self._partial)
            self._partial = ""
            return

        raw = os.read(fd, _READ_SIZE)
        if not raw:
            if self._partial:
                self._pending.append(self._partial)
                self._partial = ""
                return
            raise EOFError("stdin closed")

        sequences, self._partial = split_sequences(self._partial + self._decoder.decode(raw))
        self._pending.extend(sequences)

    # -- private: raw write ------------------------------------------------

    def _raw_write(self, data: str) -> None:
        """Write directly to stdout, bypassing buffering."""
        self._stdout.write(data)
        self._stdout.flush()
