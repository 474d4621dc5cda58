import os
import signal
from unittest.mock import patch, MagicMock, PropertyMock

import pytest

from vared.editor import Editor
from vared.keyboard import KeyEvent, KeyType
from vared.settings_persistence import SettingsPersistence


@pytest.fixture
def editor(tmp_path):
    return Editor(settings=SettingsPersistence(config_dir=tmp_path))


def test_resize_signal_triggers_redraw(editor):
    """Test that SIGWINCH wakes the loop via the pipe and redraws."""
    quit_key_event = KeyEvent(
        key_type=KeyType.CTRL,
        value='q',
        raw='\x11',
        is_ctrl=True
    )  # Ctrl-Q
    pipes_seen = []
    real_close = os.close

    def fake_select(readers, writers, errors):
        pipe_r = readers[1]
        if not pipes_seen:
            pipes_seen.append(pipe_r)
            editor._handle_resize(signal.SIGWINCH, None)
            return ([pipe_r], [], [])  # Resize pipe ready
        return ([0], [], [])  # stdin ready

    with patch.object(editor.terminal, 'setup'):
        with patch.object(editor.terminal, 'cleanup') as mock_cleanup:
            with patch.object(type(editor.terminal), 'width', PropertyMock(return_value=80)):
                with patch.object(type(editor.terminal), 'height', PropertyMock(return_value=24)):
                    with patch.object(editor.keyboard, 'get_key_event', return_value=quit_key_event):
                        with patch.object(editor, '_draw') as mock_draw:
                            with patch('vared.editor.select.select', side_effect=fake_select), \
                                    patch('vared.editor.os.close', side_effect=real_close) as mock_close:
                                editor.run()

                                # Initial draw plus one after the resize
                                assert mock_draw.call_count == 2
                                assert editor.running == False
                                mock_cleanup.assert_called_once()

    # The pipe lives only for the duration of run()
    assert editor._resize_pipe_r is None
    assert editor._resize_pipe_w is None
    closed = [c.args[0] for c in mock_close.call_args_list]
    assert pipes_seen[0] in closed
    assert len(closed) == 2


def test_constructing_editor_opens_no_pipe(editor):
    assert editor._resize_pipe_r is None
    assert editor._resize_pipe_w is None
    # A resize arriving outside run() is ignored
    editor._handle_resize(signal.SIGWINCH, None)


def test_draw_uses_terminal_size(editor):
    editor.buffer.set_text(b"\n".join(b"row" for _ in range(50)))
    editor.cursor.set_position(40, 0)
    editor.terminal.draw_frame = MagicMock()

    with patch.object(type(editor.terminal), 'width', PropertyMock(return_value=60)):
        with patch.object(type(editor.terminal), 'height', PropertyMock(return_value=11)):
            editor._draw()

    assert editor.viewport.width == 60
    assert editor.viewport.visible_rows == 10
    assert editor.viewport.top == 31
    frame = editor.terminal.draw_frame.call_args.args[0]
    assert len(frame.texts) == 10
    assert frame.cursor_y == 9


def test_draw_shows_prompt(editor):
    editor.terminal.draw_frame = MagicMock()
    editor.prompt_mode = 'save_filename'
    editor.prompt_input = "out.txt"
    editor._draw()
    assert editor.terminal.draw_frame.call_args.kwargs["status_override"] == " File to save in: out.txt"
