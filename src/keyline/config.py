"""Configuration for line readers."""

from __future__ import annotations

from dataclasses import dataclass, field

from keyline.keybindings import KeyBindingsConfig


@dataclass
class ReaderOptions:
    """Reader behaviour.

    ``keybindings`` overrides the default chords of the actions it names,
    e.g. ``{"clearLine": "ControlL"}`` to stop Escape from clearing the line.
    """

    history_enabled: bool = False
    keybindings: KeyBindingsConfig = field(default_factory=dict)
