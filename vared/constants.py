"""Constants and configuration for the VAR editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Line number gutter
    LINE_NUMBERS_WIDTH = 6  # "%4d " plus separator
    LINE_NUMBERS_SEPARATOR = "│"

    # Status bar
    PRODUCT_NAME = "VAR"
    NO_NAME = "[No Name]"
    MODIFIED_MARKER = "[+]"

    # Rendering of bytes that have no single-column glyph
    UNPRINTABLE_PLACEHOLDER = "?"

    # Keyboard
    TAB_BYTE = 0x09

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # Settings
    SETTINGS_APP_NAME = "vared"
    SETTINGS_FILENAME = "settings.json"

    # Status messages
    SAVED_MESSAGE = "Saved to {}"
    LOAD_FAILED_MESSAGE = "Error: {}"
    SAVE_FAILED_MESSAGE = "Error: {}"
    SAVE_PROMPT = " File to save in: {}"
    QUIT_CONFIRM_PROMPT = " Save file? (y, n) "
