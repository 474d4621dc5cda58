"""The incrementally repaired line index must match a full rebuild."""

import random

import pytest

from vared.buffer import TextStore, build_line_index


ALPHABET = b"ab\n\n \x00"


def assert_index_consistent(store: TextStore):
    assert store.line_starts == build_line_index(store.content)
    assert store.line_starts[0] == 0
    assert store.line_count() >= 1
    assert all(a < b for a, b in zip(store.line_starts, store.line_starts[1:]))


def random_coordinates(rng: random.Random, store: TextStore) -> tuple[int, int]:
    line = rng.randrange(store.line_count())
    col = rng.randint(0, store.line_length(line))
    return line, col


@pytest.mark.parametrize("seed", range(20))
def test_random_edits_match_rebuild(seed):
    rng = random.Random(seed)
    initial = bytes(rng.choice(ALPHABET) for _ in range(rng.randint(0, 20)))
    store = TextStore(initial)
    assert_index_consistent(store)

    for _ in range(300):
        line, col = random_coordinates(rng, store)
        if rng.random() < 0.6:
            store.insert_byte(line, col, rng.choice(ALPHABET))
        else:
            store.delete_byte_before_cursor(line, col)
        assert_index_consistent(store)


def test_typing_a_document_then_erasing_it():
    store = TextStore()
    # Typed back to front so every byte goes in at the document start
    for ch in reversed(b"first\nsecond\n\nfourth"):
        store.insert_byte(0, 0, ch)
        assert_index_consistent(store)

    assert store.text == b"first\nsecond\n\nfourth"
    assert store.line_count() == 4

    # Backspace from the end of the last line, as a cursor clamped to the
    # document after every edit would
    while True:
        line = store.line_count() - 1
        col = store.line_length(line)
        if (line, col) == (0, 0):
            break
        store.delete_byte_before_cursor(line, col)
        assert_index_consistent(store)

    # Erasing "s" left "first\n": the final newline starts no line, so it
    # is never before a reachable cursor position
    assert store.text == b"\n"
    assert store.line_starts == [0]
    assert store.get_line(0) == b""


def test_backspace_that_empties_the_last_line():
    store = TextStore(b"ab\nc")
    assert store.delete_byte_before_cursor(1, 1) == (1, 0)
    assert store.text == b"ab\n"
    assert store.line_count() == 1
    # The returned line no longer exists; reused as is it clamps to (0, 0)
    assert store.delete_byte_before_cursor(1, 0) == (0, 0)
    assert store.text == b"ab\n"


def test_newline_appended_at_end_adds_no_line():
    store = TextStore(b"abc")
    store.insert_byte(0, 3, ord('\n'))
    assert store.text == b"abc\n"
    assert store.line_starts == [0]


def test_second_trailing_newline_opens_a_line():
    store = TextStore(b"abc\n")
    store.insert_byte(0, 3, ord('\n'))
    assert store.text == b"abc\n\n"
    assert store.line_starts == [0, 4]


def test_splitting_a_middle_line():
    store = TextStore(b"one\ntwo\nthree")
    store.insert_byte(1, 1, ord('\n'))
    assert store.text == b"one\nt\nwo\nthree"
    assert store.line_starts == [0, 4, 6, 9]


def test_insert_at_line_start_keeps_earlier_entries():
    store = TextStore(b"one\ntwo\nthree")
    store.insert_byte(2, 0, ord('X'))
    assert store.line_starts == [0, 4, 8]
    assert store.get_line(2) == b"Xthree"


def test_joining_every_line():
    store = TextStore(b"a\nb\nc\nd")
    for line in (3, 2, 1):
        store.delete_byte_before_cursor(line, 0)
        assert_index_consistent(store)
    assert store.text == b"abcd"
