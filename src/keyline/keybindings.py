"""Editor keybindings: which chord triggers which edit action."""

from __future__ import annotations

from types import MappingProxyType
from typing import Literal, Mapping, get_args

EditorAction = Literal[
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    "deleteWordBackward",
    "deleteToLineStart",
    "deleteToLineEnd",
    "clearLine",
    # Editing
    "transposeChars",
    # History
    "historyPrevious",
    "historyNext",
    # Completion
    "completeNext",
    "completePrevious",
]

EDITOR_ACTIONS: tuple[str, ...] = get_args(EditorAction)

Chord = str

KeyBindingsConfig = Mapping[EditorAction, Chord | list[Chord]]

DEFAULT_KEYBINDINGS: dict[EditorAction, Chord | list[Chord]] = {
    # Cursor movement
    "cursorLeft": ["LeftArrow", "ControlB"],
    "cursorRight": ["RightArrow", "ControlF"],
    "cursorLineStart": ["Home", "ControlA"],
    "cursorLineEnd": ["End", "ControlE"],
    # Deletion
    "deleteCharBackward": ["Backspace", "ControlH"],
    "deleteCharForward": ["Delete", "ControlD"],
    "deleteWordBackward": "ControlW",
    "deleteToLineStart": "ControlU",
    "deleteToLineEnd": "ControlK",
    "clearLine": ["ControlL", "Escape"],
    # Editing
    "transposeChars": "ControlT",
    # History
    "historyPrevious": ["UpArrow", "ControlP"],
    "historyNext": ["DownArrow", "ControlN"],
    # Completion
    "completeNext": "Tab",
    "completePrevious": "ShiftTab",
}


class KeyBindings:
    """Chord to action table built from the defaults plus overrides.

    An override replaces every default chord of the action it names. When
    two actions claim the same chord, the one listed later in
    ``DEFAULT_KEYBINDINGS`` wins, with overridden actions applied last.
    """

    def __init__(self, config: KeyBindingsConfig | None = None) -> None:
        self._action_to_keys: dict[EditorAction, list[Chord]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: KeyBindingsConfig) -> None:
        unknown = [action for action in config if action not in EDITOR_ACTIONS]
        if unknown:
            raise ValueError(f"Unknown editor action(s): {', '.join(sorted(unknown))}")

        # Start with defaults
        for action, keys in DEFAULT_KEYBINDINGS.items():
            if action in config:
                continue
            self._action_to_keys[action] = _as_list(keys)

        # Override with user config
        for action, keys in config.items():
            self._action_to_keys[action] = _as_list(keys)

        chord_to_action: dict[Chord, EditorAction] = {}
        for action, chords in self._action_to_keys.items():
            for chord in chords:
                chord_to_action[chord] = action
        self._chord_to_action = MappingProxyType(chord_to_action)

    @property
    def chords(self) -> Mapping[Chord, EditorAction]:
        """Read-only chord to action mapping."""
        return self._chord_to_action

    def action_for(self, chord: Chord) -> EditorAction | None:
        """Action bound to *chord*, if any."""
        return self._chord_to_action.get(chord)

    def get_keys(self, action: EditorAction) -> list[Chord]:
        """Chords bound to *action*."""
        return list(self._action_to_keys.get(action, []))


def _as_list(keys: Chord | list[Chord]) -> list[Chord]:
    return list(keys) if isinstance(keys, (list, tuple)) else [keys]
