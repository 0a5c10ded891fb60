"""Tab-completion providers and the cycling session state."""

from __future__ import annotations

from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

DEFAULT_SEPARATORS = frozenset({" ", ".", "/", "\\", ":"})


class CompletionProvider(Protocol):
    """Source of completion candidates for the token ending the line."""

    separators: Collection[str]

    def get_suggestions(self, text: str, index: int) -> Sequence[str] | None:
        """Candidates replacing ``text[index:]``; ``None`` or empty for none."""
        ...


@dataclass
class CompletionSession:
    """Candidates being cycled with Tab / Shift+Tab.

    ``start_offset`` is the buffer index where the replaced token begins and
    ``index`` the candidate currently written there.
    """

    candidates: list[str]
    start_offset: int
    index: int = 0

    @property
    def current(self) -> str:
        return self.candidates[self.index]

    def step(self, delta: int) -> str:
        """Advance ``index`` by *delta* (wrapping) and return the candidate."""
        self.index = (self.index + delta) % len(self.candidates)
        return self.current


def find_completion_start(text: str, separators: Collection[str]) -> int:
    """Index just past the last separator in *text*, or 0 if there is none."""
    for i in range(len(text) - 1, -1, -1):
        if text[i] in separators:
            return i + 1
    return 0


class PrefixCompletionProvider:
    """Completes sub-commands for lines starting with a known command prefix.

    ``commands`` maps a line prefix such as ``"git "`` to the candidates
    offered for it. The first prefix the line starts with wins.
    """

    def __init__(
        self,
        commands: Mapping[str, Sequence[str]],
        separators: Collection[str] = DEFAULT_SEPARATORS,
    ) -> None:
        self.commands = {prefix: list(items) for prefix, items in commands.items()}
        self.separators = separators

    def get_suggestions(self, text: str, index: int) -> list[str] | None:
        for prefix, candidates in self.commands.items():
            if text.startswith(prefix):
                return list(candidates)
        return None
