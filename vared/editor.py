"""Editor session: owns the buffer, cursor and viewport and runs the input loop."""

import logging
import os
import select
import signal
import sys
import termios
from typing import Optional

from .buffer import TextStore
from .commands import CommandRegistry
from .constants import EditorConstants
from .cursor import Cursor
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .settings_persistence import SettingsPersistence, get_persistence
from .terminal import TerminalInterface
from .version import get_version_string
from .viewport import Viewport

logger = logging.getLogger(__name__)


class Editor:
    """One editing session over one document.

    Every key event is applied completely (edit, re-index, cursor clamp,
    scroll) before the next one is read.
    """

    def __init__(self, settings: Optional[SettingsPersistence] = None):
        """Initialize the editor components."""
        self.terminal = TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.settings = settings or get_persistence()
        self.buffer = TextStore()
        self.cursor = Cursor()
        self.viewport = Viewport(
            width=self.terminal.width,
            height=self.terminal.height,
            show_line_numbers=self.settings.get("show_line_numbers"),
            label=f"{EditorConstants.PRODUCT_NAME} {get_version_string()}",
        )
        self.command_registry = CommandRegistry()
        self.running = False
        # Resize signaling pipe, open only while run() is active
        self._resize_pipe_r: Optional[int] = None
        self._resize_pipe_w: Optional[int] = None
        # File handling
        self.filename: Optional[str] = None
        self.modified = False
        self.status_message: Optional[str] = None
        self.prompt_mode: Optional[str] = None  # None, 'save_filename', 'save_filename_quit' or 'quit_confirm'
        self.prompt_input = ""

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        # Write to pipe to wake up select()
        if self._resize_pipe_w is not None:
            os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def run(self):
        """Run the main editor loop."""
        self.terminal.setup()
        self.running = True
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
        old_settings = None

        try:
            try:
                # Let Ctrl-S and Ctrl-Q through instead of the tty using them for flow control
                old_settings = termios.tcgetattr(sys.stdin)
                new_settings = list(old_settings)
                new_settings[0] &= ~(termios.IXON | termios.IXOFF)
                termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
            except (termios.error, OSError) as e:
                logger.debug(f"Could not disable flow control: {e}")

            need_draw = True
            while self.running:
                if need_draw:
                    self._draw()
                    need_draw = False

                # Wait for input on stdin or resize pipe
                ready, _, _ = select.select([0, self._resize_pipe_r], [], [])

                if self._resize_pipe_r in ready:
                    os.read(self._resize_pipe_r, 1024)
                    logger.debug(f"Terminal resized to {self.terminal.width}x{self.terminal.height}")
                    need_draw = True
                elif 0 in ready:
                    key_event = self.keyboard.get_key_event(timeout=0)
                    if key_event:
                        self._handle_key_event(key_event)
                        need_draw = True

        except KeyboardInterrupt:
            logger.debug("Interrupted, leaving editor")
        finally:
            if old_settings is not None:
                try:
                    termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
                except (termios.error, OSError) as e:
                    logger.warning(f"Could not restore terminal settings: {e}")
            signal.signal(signal.SIGWINCH, original_winch_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self._resize_pipe_r = self._resize_pipe_w = None
            self.terminal.cleanup()

    def _status_override(self) -> Optional[str]:
        if self.prompt_mode in ('save_filename', 'save_filename_quit'):
            return EditorConstants.SAVE_PROMPT.format(self.prompt_input)
        if self.prompt_mode == 'quit_confirm':
            return EditorConstants.QUIT_CONFIRM_PROMPT
        if self.status_message:
            return f" {self.status_message}"
        return None

    def _draw(self):
        """Draw the current editor state to terminal."""
        self.viewport.update_size(self.terminal.width, self.terminal.height)
        self.viewport.follow_cursor(self.cursor)
        self.viewport.draw(
            self.terminal,
            self.buffer,
            self.cursor,
            modified=self.modified,
            filename=self.filename,
            status_override=self._status_override(),
        )

    def _handle_key_event(self, key_event: KeyEvent):
        """Handle a keyboard event.

        Args:
            key_event: KeyEvent object with parsed key information
        """
        # Clear status message on any keypress (except in prompt mode)
        if self.status_message and not self.prompt_mode:
            self.status_message = None

        if self._handle_prompt_mode(key_event):
            return

        if key_event.key_type == KeyType.SPECIAL and key_event.value == 'escape':
            return

        if self.command_registry.execute(self, key_event):
            self.modified = True
        self.cursor.clamp(self.buffer)
        self.viewport.follow_cursor(self.cursor)

    def _handle_prompt_mode(self, key_event: KeyEvent) -> bool:
        """Handle input in prompt mode.

        Returns:
            True if in prompt mode and event was handled
        """
        if self.prompt_mode in ('save_filename', 'save_filename_quit'):
            self._handle_filename_prompt(key_event)
            return True
        if self.prompt_mode == 'quit_confirm':
            self._handle_quit_confirm(key_event)
            return True
        return False

    def load_file(self, filename: str) -> bool:
        """Load a file into the editor.

        On failure the document is left as a single empty line, the
        filename is forgotten and the reason is shown on the status line.

        Returns:
            True if the file was read.
        """
        error = self.buffer.load(filename)
        self.cursor.reset()
        self.viewport.reset()
        self.modified = False
        if error is not None:
            self.filename = None
            self.status_message = EditorConstants.LOAD_FAILED_MESSAGE.format(error.message)
            return False
        self.filename = filename
        return True

    def save_file(self, filename: str) -> bool:
        """Save the current document to a file.

        On failure the document, filename and modified flag stay as they were.

        Returns:
            True if save succeeded, False otherwise
        """
        error = self.buffer.save(filename)
        if error is not None:
            self.status_message = EditorConstants.SAVE_FAILED_MESSAGE.format(error.message)
            return False
        self.filename = filename
        self.modified = False
        logger.debug(f"Saved {len(self.buffer.content)} bytes to {filename}")
        return True

    def toggle_line_numbers(self):
        self.viewport.toggle_line_numbers()
        self.settings.set("show_line_numbers", self.viewport.show_line_numbers)

    def _handle_save(self):
        """Handle Ctrl-S save command."""
        if self.filename:
            if self.save_file(self.filename):
                self.status_message = EditorConstants.SAVED_MESSAGE.format(self.filename)
        else:
            self.prompt_mode = 'save_filename'
            self.prompt_input = ""

    def _handle_quit(self):
        """Handle Ctrl-Q / Ctrl-X, asking to save a modified document first."""
        if self.modified:
            self.prompt_mode = 'quit_confirm'
        else:
            self.running = False

    def _handle_filename_prompt(self, key_event):
        """Handle keypress during filename prompt."""
        if (key_event.key_type == KeyType.SPECIAL and key_event.value == 'escape') or \
           (key_event.key_type == KeyType.CTRL and key_event.value == 'g'):  # ESC or Ctrl-G
            self.prompt_mode = None
            self.prompt_input = ""
        elif key_event.key_type == KeyType.SPECIAL and key_event.value == 'enter':
            if self.prompt_input:
                if self.save_file(self.prompt_input):
                    self.status_message = EditorConstants.SAVED_MESSAGE.format(self.prompt_input)
                    if self.prompt_mode == 'save_filename_quit':
                        self.running = False
                self.prompt_mode = None
                self.prompt_input = ""
        elif key_event.key_type == KeyType.SPECIAL and key_event.value == 'backspace':
            self.prompt_input = self.prompt_input[:-1]
        elif key_event.key_type == KeyType.REGULAR:
            char = key_event.value
            if len(char) == 1 and ord(char) >= 32:
                self.prompt_input += char

    def _handle_quit_confirm(self, key_event):
        """Handle keypress during quit confirmation."""
        if key_event.key_type != KeyType.REGULAR:
            return
        char = key_event.value.lower()
        if char == 'y':
            if self.filename:
                self.prompt_mode = None
                if self.save_file(self.filename):
                    self.running = False
            else:
                self.prompt_mode = 'save_filename_quit'
                self.prompt_input = ""
        elif char == 'n':
            self.prompt_mode = None
            self.running = False
        else:
            self.prompt_mode = None
