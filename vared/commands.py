"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .constants import EditorConstants
from .keyboard import KeyType

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command

        Returns:
            True if the command modified the document
        """


class MovementCommand(EditorCommand):
    """Base class for cursor movement commands."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        self._move(editor, key_event)
        return False

    @abstractmethod
    def _move(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the movement."""


class LeftCharCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.cursor.move_left(editor.buffer)


class RightCharCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.cursor.move_right(editor.buffer)


class UpLineCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.cursor.move_up(editor.buffer)


class DownLineCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.cursor.move_down(editor.buffer)


class BeginningOfLineCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.cursor.move_home()


class EndOfLineCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.cursor.move_end(editor.buffer)


class EditCommand(EditorCommand):
    """Base class for editing commands.

    The cursor is re-clamped against the buffer after every edit.
    """

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        changed = self._edit(editor, key_event)
        editor.cursor.clamp(editor.buffer)
        return changed

    @abstractmethod
    def _edit(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Perform the edit, returning whether the document changed."""


class InsertByteCommand(EditCommand):
    """Insert a typed character as one byte and advance the cursor."""

    def _edit(self, editor, key_event):
        value = key_event.value
        if len(value) != 1:
            return False
        byte = ord(value)
        if not (32 <= byte < 127 or byte == EditorConstants.TAB_BYTE):
            return False
        line, col = editor.cursor.position()
        editor.buffer.insert_byte(line, col, byte)
        editor.cursor.set_position(line, col + 1)
        return True


class InsertNewlineCommand(EditCommand):
    def _edit(self, editor, key_event):
        line, col = editor.cursor.position()
        editor.buffer.insert_byte(line, col, ord('\n'))
        # A newline typed at the very end of the document opens no new line
        if line + 1 < editor.buffer.line_count():
            editor.cursor.set_position(line + 1, 0)
        return True


class BackspaceCommand(EditCommand):
    def _edit(self, editor, key_event):
        line, col = editor.cursor.position()
        if line == 0 and col == 0:
            return False
        editor.cursor.set_position(*editor.buffer.delete_byte_before_cursor(line, col))
        return True


class SaveCommand(EditorCommand):
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        editor._handle_save()
        return False


class QuitCommand(EditorCommand):
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        editor._handle_quit()
        return False


class ToggleLineNumbersCommand(EditorCommand):
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        editor.toggle_line_numbers()
        return False


class CommandRegistry:
    """Maps key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._insert_command = InsertByteCommand()
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Movement commands
        self.register((KeyType.SPECIAL, 'left'), LeftCharCommand())
        self.register((KeyType.SPECIAL, 'right'), RightCharCommand())
        self.register((KeyType.SPECIAL, 'up'), UpLineCommand())
        self.register((KeyType.SPECIAL, 'down'), DownLineCommand())
        self.register((KeyType.SPECIAL, 'home'), BeginningOfLineCommand())
        self.register((KeyType.SPECIAL, 'end'), EndOfLineCommand())

        # Editing commands
        self.register((KeyType.SPECIAL, 'backspace'), BackspaceCommand())
        self.register((KeyType.SPECIAL, 'enter'), InsertNewlineCommand())

        # System commands
        self.register((KeyType.CTRL, 's'), SaveCommand())
        self.register((KeyType.CTRL, 'q'), QuitCommand())
        self.register((KeyType.CTRL, 'x'), QuitCommand())
        self.register((KeyType.CTRL, 't'), ToggleLineNumbersCommand())

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[EditorCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the document was modified
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command:
            return command.execute(editor, key_event)

        if key_event.key_type == KeyType.REGULAR:
            return self._insert_command.execute(editor, key_event)

        return False
