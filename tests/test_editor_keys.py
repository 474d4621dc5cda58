"""Key events drive the buffer and cursor through the command registry."""

import pytest

from vared.editor import Editor
from vared.keyboard import KeyEvent, KeyType
from vared.settings_persistence import SettingsPersistence


@pytest.fixture
def editor(tmp_path):
    return Editor(settings=SettingsPersistence(config_dir=tmp_path / "config"))


def special(name):
    return KeyEvent(KeyType.SPECIAL, name, f'<{name.upper()}>')


def ctrl(letter):
    return KeyEvent(KeyType.CTRL, letter, f'<Ctrl-{letter}>', is_ctrl=True)


def type_text(editor, text):
    for ch in text:
        if ch == '\n':
            editor._handle_key_event(special('enter'))
        else:
            editor._handle_key_event(KeyEvent(KeyType.REGULAR, ch, ch))


def test_typing_inserts_bytes(editor):
    type_text(editor, "hello")
    assert editor.buffer.text == b"hello"
    assert editor.cursor.position() == (0, 5)
    assert editor.modified


def test_enter_splits_line(editor):
    type_text(editor, "abcd")
    editor._handle_key_event(special('left'))
    editor._handle_key_event(special('left'))
    editor._handle_key_event(special('enter'))
    assert editor.buffer.text == b"ab\ncd"
    assert editor.cursor.position() == (1, 0)


def test_enter_at_end_of_document(editor):
    """The first Enter at the end only adds the final newline."""
    type_text(editor, "abc")
    editor._handle_key_event(special('enter'))
    assert editor.buffer.text == b"abc\n"
    assert editor.buffer.line_count() == 1
    assert editor.cursor.position() == (0, 3)

    editor._handle_key_event(special('enter'))
    assert editor.buffer.text == b"abc\n\n"
    assert editor.cursor.position() == (1, 0)

    type_text(editor, "x")
    assert editor.buffer.text == b"abc\nx\n"


def test_backspace_joins_lines(editor):
    editor.buffer.set_text(b"ab\ncd")
    editor.cursor.set_position(1, 0)
    editor._handle_key_event(special('backspace'))
    assert editor.buffer.text == b"abcd"
    assert editor.cursor.position() == (0, 2)
    assert editor.modified


def test_backspace_at_start_does_not_modify(editor):
    editor.buffer.set_text(b"abc")
    editor._handle_key_event(special('backspace'))
    assert editor.buffer.text == b"abc"
    assert not editor.modified


def test_arrow_keys_move_cursor(editor):
    editor.buffer.set_text(b"abc\nde")
    editor._handle_key_event(special('end'))
    assert editor.cursor.position() == (0, 3)
    editor._handle_key_event(special('down'))
    assert editor.cursor.position() == (1, 2)
    editor._handle_key_event(special('right'))
    assert editor.cursor.position() == (1, 2)
    editor._handle_key_event(special('up'))
    editor._handle_key_event(special('right'))
    editor._handle_key_event(special('right'))
    assert editor.cursor.position() == (1, 0)
    editor._handle_key_event(special('left'))
    assert editor.cursor.position() == (0, 3)
    editor._handle_key_event(special('home'))
    assert editor.cursor.position() == (0, 0)
    assert not editor.modified


def test_non_ascii_characters_are_ignored(editor):
    type_text(editor, "é")
    assert editor.buffer.text == b""
    assert not editor.modified


def test_tab_inserts_tab_byte(editor):
    editor._handle_key_event(KeyEvent(KeyType.REGULAR, '\t', '<TAB>'))
    assert editor.buffer.text == b"\t"


def test_escape_does_nothing(editor):
    editor._handle_key_event(special('escape'))
    assert editor.buffer.text == b""
    assert not editor.modified


def test_viewport_follows_cursor(editor):
    editor.viewport.update_size(40, 6)
    editor.buffer.set_text(b"\n".join(b"line" for _ in range(30)))
    for _ in range(12):
        editor._handle_key_event(special('down'))
    assert editor.cursor.line == 12
    assert editor.viewport.top == 8


def test_toggle_line_numbers_is_persisted(editor):
    assert editor.viewport.show_line_numbers
    editor._handle_key_event(ctrl('t'))
    assert not editor.viewport.show_line_numbers
    assert editor.settings.settings_file.exists()

    editor.settings.clear_cache()
    assert editor.settings.get("show_line_numbers") is False


def test_toggle_setting_read_at_startup(tmp_path):
    settings = SettingsPersistence(config_dir=tmp_path)
    settings.set("show_line_numbers", False)
    editor = Editor(settings=SettingsPersistence(config_dir=tmp_path))
    assert not editor.viewport.show_line_numbers


class TestQuit:
    """Ctrl-Q / Ctrl-X quitting, with confirmation when modified."""

    def test_quit_unmodified(self, editor):
        editor.running = True
        editor._handle_key_event(ctrl('q'))
        assert not editor.running

    def test_ctrl_x_also_quits(self, editor):
        editor.running = True
        editor._handle_key_event(ctrl('x'))
        assert not editor.running

    def test_quit_modified_asks_first(self, editor):
        editor.running = True
        type_text(editor, "a")
        editor._handle_key_event(ctrl('q'))
        assert editor.running
        assert editor.prompt_mode == 'quit_confirm'

        editor._handle_key_event(KeyEvent(KeyType.REGULAR, 'n', 'n'))
        assert not editor.running

    def test_quit_confirm_other_key_cancels(self, editor):
        editor.running = True
        type_text(editor, "a")
        editor._handle_key_event(ctrl('q'))
        editor._handle_key_event(KeyEvent(KeyType.REGULAR, 'c', 'c'))
        assert editor.running
        assert editor.prompt_mode is None

    def test_quit_confirm_yes_saves(self, editor, tmp_path):
        path = tmp_path / "doc.txt"
        editor.filename = str(path)
        editor.running = True
        type_text(editor, "data")
        editor._handle_key_event(ctrl('q'))
        editor._handle_key_event(KeyEvent(KeyType.REGULAR, 'y', 'y'))
        assert not editor.running
        assert path.read_bytes() == b"data"

    def test_quit_confirm_yes_without_name_prompts(self, editor, tmp_path):
        editor.running = True
        type_text(editor, "data")
        editor._handle_key_event(ctrl('q'))
        editor._handle_key_event(KeyEvent(KeyType.REGULAR, 'y', 'y'))
        assert editor.prompt_mode == 'save_filename_quit'

        type_text(editor, str(tmp_path / "new.txt"))
        editor._handle_key_event(special('enter'))
        assert not editor.running
        assert (tmp_path / "new.txt").read_bytes() == b"data"
