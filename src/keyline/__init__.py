"""keyline: interactive line editing with history and tab completion."""

# Edit buffer and screen geometry
from keyline.buffer import EditBuffer, wrap_position

# Completion support
from keyline.completion import (
    DEFAULT_SEPARATORS,
    CompletionProvider,
    CompletionSession,
    PrefixCompletionProvider,
    find_completion_start,
)

# Configuration
from keyline.config import ReaderOptions

# Console interface and implementation
from keyline.console import Console, ProcessConsole

# Key-event state machine
from keyline.editor import Editor

# Keybindings
from keyline.keybindings import (
    DEFAULT_KEYBINDINGS,
    EditorAction,
    KeyBindings,
    KeyBindingsConfig,
)

# Keyboard input handling
from keyline.keys import ConsoleKey, KeyEvent, Modifiers, build_chord, parse_key_event

# Line reader
from keyline.reader import LineReader

__all__ = [
    # buffer
    "EditBuffer",
    "wrap_position",
    # completion
    "DEFAULT_SEPARATORS",
    "CompletionProvider",
    "CompletionSession",
    "PrefixCompletionProvider",
    "find_completion_start",
    # config
    "ReaderOptions",
    # console
    "Console",
    "ProcessConsole",
    # editor
    "Editor",
    # keybindings
    "DEFAULT_KEYBINDINGS",
    "EditorAction",
    "KeyBindings",
    "KeyBindingsConfig",
    # keys
    "ConsoleKey",
    "KeyEvent",
    "Modifiers",
    "build_chord",
    "parse_key_event",
    # reader
    "LineReader",
]
