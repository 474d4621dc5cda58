"""Flat byte store with an incrementally maintained line-start index."""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

NEWLINE = 0x0A


class SaveErrorKind(Enum):
    """Reasons a save can fail."""
    EMPTY_FILENAME = "empty_filename"
    IO_FAILURE = "io_failure"


@dataclass
class LoadError:
    """Returned by TextStore.load when the file cannot be read."""
    path: str
    message: str


@dataclass
class SaveError:
    """Returned by TextStore.save when the document could not be written."""
    kind: SaveErrorKind
    path: str
    message: str


def build_line_index(data: bytes) -> list[int]:
    """Build the line-start table for data from scratch.

    A newline that is the very last byte does not start a new line, so
    ``b"ab\\n"`` is one line and ``b""`` is one empty line.
    """
    starts = [0]
    last = len(data) - 1
    pos = data.find(b'\n')
    while pos != -1 and pos < last:
        starts.append(pos + 1)
        pos = data.find(b'\n', pos + 1)
    return starts


class TextStore:
    """Document content plus its line-start offset table.

    ``line_starts`` always holds at least one entry and always equals
    ``build_line_index(content)``; every mutating method splices the
    content and repairs the table before it returns.
    """

    content: bytearray
    line_starts: list[int]

    def __init__(self, data: bytes = b""):
        self.content = bytearray(data)
        self.line_starts = build_line_index(self.content)

    # --- File I/O ---

    def load(self, path: str) -> Optional[LoadError]:
        """Replace the document with the raw bytes of path.

        Returns:
            None on success. On failure the store is reset to a single
            empty line and a LoadError is returned.
        """
        try:
            with open(path, 'rb') as f:
                data = f.read()
        except OSError as e:
            logger.warning(f"Could not load {path}: {e}")
            self._reset()
            return LoadError(path=path, message=f"Unable to open file: {path}")
        self.set_text(data)
        logger.debug(f"Loaded {len(data)} bytes, {self.line_count()} lines from {path}")
        return None

    def save(self, path: str) -> Optional[SaveError]:
        """Write the document to path exactly as held in memory.

        The file is truncated and rewritten in place. A write that fails
        part way may leave a partial file behind; the in-memory document
        is never touched.

        Returns:
            None on success, otherwise a SaveError.
        """
        if not path:
            return SaveError(SaveErrorKind.EMPTY_FILENAME, path, "No filename provided")

        try:
            f = open(path, 'wb')
        except OSError as e:
            logger.warning(f"Could not open {path} for writing: {e}")
            return SaveError(SaveErrorKind.IO_FAILURE, path,
                             f"Failed to open file for writing: {path}")

        try:
            with f:
                written = f.write(self.content)
                f.flush()
        except OSError as e:
            logger.warning(f"Write to {path} failed: {e}")
            return SaveError(SaveErrorKind.IO_FAILURE, path,
                             f"Failed to write to file: {path}")

        if written != len(self.content):
            logger.warning(f"Short write to {path}: {written} of {len(self.content)} bytes")
            return SaveError(SaveErrorKind.IO_FAILURE, path,
                             f"Failed to write to file: {path}")
        return None

    def _reset(self):
        self.content = bytearray()
        self.line_starts = [0]

    def set_text(self, data: bytes):
        """Replace the whole document and rebuild the index."""
        self.content = bytearray(data)
        self.line_starts = build_line_index(self.content)

    @property
    def text(self) -> bytes:
        return bytes(self.content)

    # --- Line lookup ---

    def line_count(self) -> int:
        return len(self.line_starts)

    def is_valid_line(self, line: int) -> bool:
        return 0 <= line < len(self.line_starts)

    def line_boundaries(self, line: int) -> tuple[int, int]:
        """Return (start, end) offsets of line, end excluding the newline."""
        start = self.line_starts[line]
        end = self.content.find(b'\n', start)
        return (start, end if end != -1 else len(self.content))

    def get_line(self, line: int) -> bytes:
        """Return the bytes of line without its newline.

        Lines outside the document come back empty.
        """
        if not self.is_valid_line(line):
            return b""
        start, end = self.line_boundaries(line)
        return bytes(self.content[start:end])

    def line_length(self, line: int) -> int:
        if not self.is_valid_line(line):
            return 0
        start, end = self.line_boundaries(line)
        return end - start

    def find_line_for_position(self, pos: int) -> int:
        """Index of the line whose start is the last one at or before pos."""
        return max(bisect_right(self.line_starts, pos) - 1, 0)

    def absolute_position(self, line: int, col: int) -> int:
        return self.line_starts[line] + col

    def _clamp_coordinates(self, line: int, col: int) -> tuple[int, int]:
        line = min(max(line, 0), self.line_count() - 1)
        col = min(max(col, 0), self.line_length(line))
        return line, col

    # --- Editing ---

    def insert_byte(self, line: int, col: int, byte: int):
        """Insert a single byte at (line, col) and repair the index."""
        line, col = self._clamp_coordinates(line, col)
        pos = self.absolute_position(line, col)
        self.content.insert(pos, byte)
        self._update_line_index_from(pos)

    def delete_byte_before_cursor(self, line: int, col: int) -> tuple[int, int]:
        """Delete the byte before (line, col), joining lines at column 0.

        Returns:
            The cursor position after the deletion.
        """
        line, col = self._clamp_coordinates(line, col)
        if line == 0 and col == 0:
            return (0, 0)

        if col > 0:
            pos = self.absolute_position(line, col - 1)
            del self.content[pos]
            self._update_line_index_from(pos)
            return (line, col - 1)

        # Length must be read before the join removes the line boundary.
        prev_length = self.line_length(line - 1)
        pos = self.line_starts[line] - 1
        del self.content[pos]
        self._update_line_index_from(pos)
        return (line - 1, prev_length)

    def _update_line_index_from(self, pos: int):
        """Rebuild the suffix of line_starts affected by an edit at pos.

        Entries at or before pos are unaffected by a splice at pos, except
        one that now lands exactly on the end of the content: that line was
        started by what is now the final newline.
        """
        line = self.find_line_for_position(pos)
        del self.line_starts[line + 1:]
        if line > 0 and self.line_starts[line] >= len(self.content):
            self.line_starts.pop()

        # A newline at pos - 1 may be unrecorded if it used to be the last byte.
        self._scan_for_newlines(max(self.line_starts[-1], pos - 1))

    def _scan_for_newlines(self, start: int):
        last = len(self.content) - 1
        nl = self.content.find(b'\n', start)
        while nl != -1 and nl < last:
            self.line_starts.append(nl + 1)
            nl = self.content.find(b'\n', nl + 1)
