"""Key events, chord canonicalization and raw terminal input decoding.

A ``KeyEvent`` carries a console key name (``"LeftArrow"``, ``"Tab"``,
``"B"``), the modifiers held, and the character the key produced. The
editor looks up bound actions by the canonical chord string built from an
event with ``build_chord``.

``parse_key_event`` turns one chunk of raw terminal input (legacy escape
sequences, control bytes, ESC-prefixed Alt chords, plain characters) into a
``KeyEvent`` for the process console.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Modifiers
# ---------------------------------------------------------------------------


class Modifiers(enum.Flag):
    """Modifier keys held during a key press."""

    NONE = 0
    SHIFT = enum.auto()
    ALT = enum.auto()
    CONTROL = enum.auto()


# xterm encodes modifiers as 1 + bitmask in CSI parameters
MODIFIER_BITS: dict[int, Modifiers] = {
    1: Modifiers.SHIFT,
    2: Modifiers.ALT,
    4: Modifiers.CONTROL,
}


def decode_modifier_param(param: int) -> Modifiers:
    """Decode an xterm ``1 + bitmask`` modifier parameter."""
    bits = max(param - 1, 0)
    mods = Modifiers.NONE
    for bit, flag in MODIFIER_BITS.items():
        if bits & bit:
            mods |= flag
    return mods


# ---------------------------------------------------------------------------
# Key names
# ---------------------------------------------------------------------------


class ConsoleKey:
    """Named console keys.

    Letters use their upper-case letter (``"A"``), digits use ``"D0"`` to
    ``"D9"``. Punctuation keys use the character itself.
    """

    backspace = "Backspace"
    tab = "Tab"
    enter = "Enter"
    escape = "Escape"
    spacebar = "Spacebar"
    page_up = "PageUp"
    page_down = "PageDown"
    end = "End"
    home = "Home"
    left_arrow = "LeftArrow"
    up_arrow = "UpArrow"
    right_arrow = "RightArrow"
    down_arrow = "DownArrow"
    insert = "Insert"
    delete = "Delete"
    clear = "Clear"

    @staticmethod
    def function(n: int) -> str:
        return f"F{n}"

    @staticmethod
    def for_char(ch: str) -> str:
        """Key name for the key that types *ch*."""
        if ch == " ":
            return ConsoleKey.spacebar
        if ch.isascii() and ch.isalpha():
            return ch.upper()
        if ch.isascii() and ch.isdigit():
            return f"D{ch}"
        return ch


# ---------------------------------------------------------------------------
# KeyEvent and chords
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """One key press as delivered by a console."""

    key: str
    modifiers: Modifiers = Modifiers.NONE
    character: str = "\x00"

    @classmethod
    def char(cls, ch: str) -> KeyEvent:
        """Event for typing the printable character *ch*."""
        mods = Modifiers.SHIFT if ch.isupper() else Modifiers.NONE
        return cls(ConsoleKey.for_char(ch), mods, ch)

    @classmethod
    def ctrl(cls, letter: str) -> KeyEvent:
        """Event for Control plus *letter*."""
        upper = letter.upper()
        return cls(upper, Modifiers.CONTROL, chr(ord(upper) - ord("A") + 1))


def build_chord(event: KeyEvent) -> str:
    """Canonical chord string used to look up key bindings.

    Only an exact Control or exact Shift modifier is kept. Alt and combined
    modifiers collapse onto the plain key name, so ``Alt+B`` and ``B`` are
    the same chord.
    """
    if event.modifiers == Modifiers.CONTROL:
        return f"Control{event.key}"
    if event.modifiers == Modifiers.SHIFT:
        return f"Shift{event.key}"
    return event.key


# ---------------------------------------------------------------------------
# Raw input decoding
# ---------------------------------------------------------------------------

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": ConsoleKey.up_arrow,
    "\x1b[B": ConsoleKey.down_arrow,
    "\x1b[C": ConsoleKey.right_arrow,
    "\x1b[D": ConsoleKey.left_arrow,
    "\x1b[H": ConsoleKey.home,
    "\x1b[F": ConsoleKey.end,
    "\x1bOA": ConsoleKey.up_arrow,
    "\x1bOB": ConsoleKey.down_arrow,
    "\x1bOC": ConsoleKey.right_arrow,
    "\x1bOD": ConsoleKey.left_arrow,
    "\x1bOH": ConsoleKey.home,
    "\x1bOF": ConsoleKey.end,
    "\x1bOP": "F1",
    "\x1bOQ": "F2",
    "\x1bOR": "F3",
    "\x1bOS": "F4",
    "\x1b[E": ConsoleKey.clear,
}

# Final byte of ``CSI 1;m X`` sequences
CSI_LETTER_KEYS: dict[str, str] = {
    "A": ConsoleKey.up_arrow,
    "B": ConsoleKey.down_arrow,
    "C": ConsoleKey.right_arrow,
    "D": ConsoleKey.left_arrow,
    "H": ConsoleKey.home,
    "F": ConsoleKey.end,
    "P": "F1",
    "Q": "F2",
    "R": "F3",
    "S": "F4",
}

# Numeric parameter of ``CSI n ~`` / ``CSI n;m ~`` sequences
CSI_TILDE_KEYS: dict[int, str] = {
    1: ConsoleKey.home,
    2: ConsoleKey.insert,
    3: ConsoleKey.delete,
    4: ConsoleKey.end,
    5: ConsoleKey.page_up,
    6: ConsoleKey.page_down,
    15: "F5",
    17: "F6",
    18: "F7",
    19: "F8",
    20: "F9",
    21: "F10",
    23: "F11",
    24: "F12",
}

_CSI_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)([ABCDHFPQRS])$")
_CSI_TILDE_RE = re.compile(r"^\x1b\[(\d+)(?:;(\d+))?~$")


def parse_key_event(data: str) -> KeyEvent | None:  # noqa: C901
    """Parse raw terminal input into a ``KeyEvent``, or ``None``."""
    if not data:
        return None

    # --- Legacy escape sequences ---
    key = LEGACY_KEY_SEQUENCES.get(data)
    if key is not None:
        return KeyEvent(key)

    match = _CSI_LETTER_RE.match(data)
    if match:
        return KeyEvent(
            CSI_LETTER_KEYS[match.group(2)],
            decode_modifier_param(int(match.group(1))),
        )

    match = _CSI_TILDE_RE.match(data)
    if match:
        key = CSI_TILDE_KEYS.get(int(match.group(1)))
        if key is None:
            return None
        mods = decode_modifier_param(int(match.group(2))) if match.group(2) else Modifiers.NONE
        return KeyEvent(key, mods)

    if data == "\x1b[Z":
        return KeyEvent(ConsoleKey.tab, Modifiers.SHIFT, "\t")

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return KeyEvent(ConsoleKey.escape, character="\x1b")
    if data == "\r" or data == "\n":
        return KeyEvent(ConsoleKey.enter, character="\r")
    if data == "\t":
        return KeyEvent(ConsoleKey.tab, character="\t")
    if data == "\x7f":
        return KeyEvent(ConsoleKey.backspace, character="\x08")

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return KeyEvent.ctrl(chr(ord(data) + ord("a") - 1))

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        inner = parse_key_event(data[1])
        if inner is None:
            return None
        return KeyEvent(inner.key, inner.modifiers | Modifiers.ALT, inner.character)

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return KeyEvent.char(data)

    return None
