"""Cursor coordinate model over a TextStore."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .buffer import TextStore


def scroll_to_cursor(cursor_line: int, top: int, visible_rows: int) -> int:
    """Return the new window top so cursor_line is visible.

    Scrolls by the minimal amount: the cursor ends up on the first row
    when it was above the window and on the last row when it was below.
    """
    if cursor_line < top:
        return cursor_line
    if cursor_line >= top + visible_rows:
        return cursor_line - max(visible_rows, 1) + 1
    return top


class Cursor:
    """A (line, col) position.

    Holds integers only; every query that needs a line length asks the
    buffer again. The column may equal the line length (caret after the
    last character). Vertical moves truncate the column and do not
    remember it.
    """

    def __init__(self, line: int = 0, col: int = 0):
        self.line = line
        self.col = col

    def position(self) -> tuple[int, int]:
        return (self.line, self.col)

    def set_position(self, line: int, col: int):
        self.line = line
        self.col = col

    def reset(self):
        self.set_position(0, 0)

    def _current_line_length(self, buffer: TextStore) -> int:
        return buffer.line_length(self.line)

    def can_move_up(self) -> bool:
        return self.line > 0

    def can_move_down(self, buffer: TextStore) -> bool:
        return self.line + 1 < buffer.line_count()

    def move_left(self, buffer: TextStore):
        if self.col > 0:
            self.col -= 1
        elif self.can_move_up():
            self.line -= 1
            self.col = self._current_line_length(buffer)

    def move_right(self, buffer: TextStore):
        if self.col < self._current_line_length(buffer):
            self.col += 1
        elif self.can_move_down(buffer):
            self.line += 1
            self.col = 0

    def move_up(self, buffer: TextStore):
        if self.can_move_up():
            self.line -= 1
            self.col = min(self.col, self._current_line_length(buffer))

    def move_down(self, buffer: TextStore):
        if self.can_move_down(buffer):
            self.line += 1
            self.col = min(self.col, self._current_line_length(buffer))

    def move_home(self):
        self.col = 0

    def move_end(self, buffer: TextStore):
        self.col = self._current_line_length(buffer)

    def clamp(self, buffer: TextStore):
        """Pull the position back inside the document."""
        self.line = min(max(self.line, 0), buffer.line_count() - 1)
        self.col = min(max(self.col, 0), self._current_line_length(buffer))

    def adjust_viewport(self, top: int, visible_rows: int) -> int:
        return scroll_to_cursor(self.line, top, visible_rows)

    def __repr__(self):
        return f"Cursor(line={self.line}, col={self.col})"
