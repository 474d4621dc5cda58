"""Decoding of curtsies key names into editor key events."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    CTRL = "ctrl"
    ALT = "alt"
    SPECIAL = "special"


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str  # The key name as delivered by the terminal
    is_ctrl: bool = False
    is_alt: bool = False


# Alternative spellings curtsies and terminals use for the same key
KEY_ALIASES = {
    'esc': 'escape',
    'pageup': 'page_up',
    'pagedown': 'page_down',
    'return': 'enter',
    'del': 'delete',
}


class KeyboardHandler:
    """Turns terminal key names into KeyEvents."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Read the next key and parse it, or return None if none arrived."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a key name into a KeyEvent.

        Accepts curtsies names such as ``<LEFT>``, ``<Ctrl-s>`` or
        ``<BACKSPACE>`` as well as single raw characters.
        """
        key_str = str(key)

        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            return self._parse_named(key_str)

        if len(key_str) == 1:
            o = ord(key_str)
            if o in (0x0A, 0x0D):
                return KeyEvent(KeyType.SPECIAL, 'enter', key_str)
            if o == 0x09:
                return KeyEvent(KeyType.REGULAR, '\t', key_str)
            if o in (0x08, 0x7F):
                return KeyEvent(KeyType.SPECIAL, 'backspace', key_str)
            if o == 0x1B:
                return KeyEvent(KeyType.SPECIAL, 'escape', key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z
                return KeyEvent(KeyType.CTRL, chr(ord('a') + o - 1), key_str, is_ctrl=True)

        return KeyEvent(KeyType.REGULAR, key_str, key_str)

    def _parse_named(self, key_str: str) -> KeyEvent:
        name = key_str[1:-1].lower().replace('+', '-')
        parts = name.split('-')
        base = KEY_ALIASES.get(parts[-1], parts[-1])
        mods = set(parts[:-1])

        if base in ('space', 'spacebar', 'spc') and not mods:
            return KeyEvent(KeyType.REGULAR, ' ', key_str)
        if base == 'tab' and not mods:
            return KeyEvent(KeyType.REGULAR, '\t', key_str)

        if 'ctrl' in mods and len(base) == 1:
            # Ctrl-J and Ctrl-M are what the terminal sends for Enter
            if base in ('j', 'm'):
                return KeyEvent(KeyType.SPECIAL, 'enter', key_str)
            if base == 'h':
                return KeyEvent(KeyType.SPECIAL, 'backspace', key_str)
            return KeyEvent(KeyType.CTRL, base, key_str, is_ctrl=True)

        if mods & {'alt', 'meta', 'esc'}:
            return KeyEvent(KeyType.ALT, base, key_str, is_alt=True)

        return KeyEvent(KeyType.SPECIAL, base, key_str)
