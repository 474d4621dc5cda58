"""Viewport: which part of the buffer is on screen, and how it looks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .constants import EditorConstants
from .cursor import scroll_to_cursor

if TYPE_CHECKING:
    from .buffer import TextStore
    from .cursor import Cursor
    from .terminal import TerminalInterface


def display_text(raw: bytes) -> str:
    """Render line bytes one column per byte.

    Tabs show as a single space; anything outside printable ASCII
    shows as a placeholder so columns stay aligned with the cursor.
    """
    out = []
    for b in raw:
        if 32 <= b < 127:
            out.append(chr(b))
        elif b == EditorConstants.TAB_BYTE:
            out.append(' ')
        else:
            out.append(EditorConstants.UNPRINTABLE_PLACEHOLDER)
    return ''.join(out)


@dataclass
class Frame:
    """Everything the terminal needs to paint one screen."""
    gutters: list[str] = field(default_factory=list)
    texts: list[str] = field(default_factory=list)
    current_row: Optional[int] = None
    status_left: str = ""
    status_right: str = ""
    cursor_y: int = 0
    cursor_x: int = 0


class Viewport:
    """Visible window onto the buffer.

    Reads the buffer and cursor, never mutates them. The bottom row of
    the screen is the status bar, so ``visible_rows`` is one less than
    the height.
    """

    def __init__(self, width: int = 80, height: int = 24,
                 show_line_numbers: bool = True, label: Optional[str] = None):
        self.width = width
        self.height = height
        self.top = 0
        self.left = 0
        self.show_line_numbers = show_line_numbers
        self.label = label or EditorConstants.PRODUCT_NAME

    def update_size(self, width: int, height: int):
        self.width = width
        self.height = height

    def toggle_line_numbers(self):
        self.show_line_numbers = not self.show_line_numbers

    @property
    def visible_rows(self) -> int:
        return max(self.height - 1, 1)

    def text_start_column(self) -> int:
        return EditorConstants.LINE_NUMBERS_WIDTH if self.show_line_numbers else 0

    @property
    def text_width(self) -> int:
        return max(self.width - self.text_start_column(), 1)

    def reset(self):
        self.top = 0
        self.left = 0

    def follow_cursor(self, cursor: Cursor):
        """Scroll the minimal amount needed to keep the cursor on screen."""
        self.top = cursor.adjust_viewport(self.top, self.visible_rows)
        self.left = scroll_to_cursor(cursor.col, self.left, self.text_width)

    def visible_lines(self, buffer: TextStore) -> range:
        return range(self.top, min(self.top + self.visible_rows, buffer.line_count()))

    def _gutter(self, line: int) -> str:
        return f"{line + 1:4d} " + EditorConstants.LINE_NUMBERS_SEPARATOR

    def status_text(self, buffer: TextStore, cursor: Cursor,
                    modified: bool, filename: Optional[str]) -> str:
        name = filename or EditorConstants.NO_NAME
        line, col = cursor.position()
        marker = EditorConstants.MODIFIED_MARKER if modified else ""
        return (f" {name} | {line + 1}/{buffer.line_count()}"
                f" | {line + 1}:{col + 1} {marker}")

    def compose(self, buffer: TextStore, cursor: Cursor,
                modified: bool = False, filename: Optional[str] = None) -> Frame:
        """Build the frame for the current window without touching the screen."""
        frame = Frame()
        for row, line in enumerate(self.visible_lines(buffer)):
            text = display_text(buffer.get_line(line))
            frame.texts.append(text[self.left:self.left + self.text_width])
            frame.gutters.append(self._gutter(line) if self.show_line_numbers else "")
            if line == cursor.line:
                frame.current_row = row

        frame.status_left = self.status_text(buffer, cursor, modified, filename)
        frame.status_right = self.label

        line, col = cursor.position()
        frame.cursor_y = line - self.top
        frame.cursor_x = min(col, buffer.line_length(line)) - self.left + self.text_start_column()
        return frame

    def draw(self, terminal: TerminalInterface, buffer: TextStore, cursor: Cursor,
             modified: bool = False, filename: Optional[str] = None,
             status_override: Optional[str] = None):
        frame = self.compose(buffer, cursor, modified, filename)
        terminal.draw_frame(frame, status_override=status_override)
