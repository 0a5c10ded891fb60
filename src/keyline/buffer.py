"""Edit buffer state and the cursor-to-screen position mapping."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class EditBuffer:
    """The line being edited.

    ``limit`` tracks the length separately from ``content`` because the
    screen arithmetic runs independently of the content mutation; the
    editor keeps ``0 <= cursor <= limit == len(content)`` after every
    operation.
    """

    content: list[str] = field(default_factory=list)
    cursor: int = 0
    limit: int = 0

    @property
    def text(self) -> str:
        return "".join(self.content)

    @property
    def is_start(self) -> bool:
        return self.cursor == 0

    @property
    def is_end(self) -> bool:
        return self.cursor == self.limit

    def suffix(self) -> str:
        """Text from the cursor to the end."""
        return "".join(self.content[self.cursor :])


def wrap_position(column: int, row: int, offset: int, width: int) -> tuple[int, int]:
    """Physical position reached by moving *offset* cells from (column, row).

    Negative offsets move left. Moving left past column 0 continues at
    ``width - 1`` on the previous row; moving right past ``width - 1``
    continues at column 0 on the next row.
    """
    if width <= 0:
        return column + offset, row
    linear = row * width + column + offset
    return linear % width, linear // width
