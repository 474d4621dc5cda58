"""VAR - a small terminal text editor built on a flat byte buffer."""

__version__ = "1.1.0"

from .buffer import TextStore, LoadError, SaveError, SaveErrorKind, build_line_index
from .cursor import Cursor, scroll_to_cursor
from .viewport import Viewport, Frame

__all__ = [
    'TextStore',
    'LoadError',
    'SaveError',
    'SaveErrorKind',
    'build_line_index',
    'Cursor',
    'scroll_to_cursor',
    'Viewport',
    'Frame',
]
