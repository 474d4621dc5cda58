"""Terminal interface using Blessed for display and Curtsies for input."""

import logging
import select
import sys
from typing import TYPE_CHECKING, Optional

import blessed

if TYPE_CHECKING:
    from .viewport import Frame

logger = logging.getLogger(__name__)


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None

    def setup(self):
        """Enter fullscreen mode and start reading keys through curtsies."""
        print(self.term.enter_fullscreen, end='')
        print(self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        if self._curtsies_input is None:
            from curtsies import Input
            self._curtsies_input = Input(keynames='curtsies')
            self._curtsies_input.__enter__()

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(self.term.exit_fullscreen, end='')
            print(self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                self._curtsies_input.__exit__(None, None, None)
            except OSError as e:
                # Teardown continues so the screen is still restored.
                logger.warning(f"Could not restore terminal input mode: {e}")
            finally:
                self._curtsies_input = None

    def draw_frame(self, frame: "Frame", status_override: Optional[str] = None):
        """Paint a composed frame and place the cursor.

        Args:
            frame: Rows, status bar and cursor position from the viewport.
            status_override: Prompt or message shown instead of the status bar.
                When it contains ": " the cursor is placed after it, for input.
        """
        width = self.term.width
        out = [self.term.home + self.term.clear]

        for y, text in enumerate(frame.texts):
            out.append(self.term.move(y, 0))
            gutter = frame.gutters[y] if y < len(frame.gutters) else ""
            if gutter:
                if y == frame.current_row:
                    out.append(self.term.bold + gutter + self.term.normal)
                else:
                    out.append(gutter)
            out.append(text)

        status_row = self.term.height - 1
        if status_override:
            status = status_override[:width].ljust(width)
        else:
            left = frame.status_left
            right = frame.status_right
            room = width - len(right) - 1
            if room > len(left):
                status = left.ljust(room) + right + " "
            else:
                status = left[:width].ljust(width)
        out.append(self.term.move(status_row, 0))
        out.append(self.term.reverse + self.term.bold + status + self.term.normal)

        if status_override and ": " in status_override:
            out.append(self.term.move(status_row, min(len(status_override), width - 1)))
        else:
            out.append(self.term.move(frame.cursor_y, frame.cursor_x))
        out.append(self.term.normal_cursor)
        print(''.join(out), end='', flush=True)

    def get_key(self, timeout=None):
        """Get a single keypress from the user.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name as a string, or None when nothing arrived.
        """
        if self._curtsies_input is None:
            return None
        if timeout is not None:
            r, _, _ = select.select([sys.stdin], [], [], float(timeout))
            if not r:
                return None
        return str(next(self._curtsies_input))

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows."""
        return self.term.height
