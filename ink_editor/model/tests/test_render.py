"""
Tests for per-cell display data.
"""

from conftest import carat_ink

from ink_editor.data.text_buffer import TextBuffer
from ink_editor.model.edit_session import Carat, EditSession, Range, Single
from ink_editor.model.render import (
    END_OF_FILE,
    END_OF_LINE,
    MARKER_WEIGHT,
    TEXT_WEIGHT,
    cell_view,
    visible_cells,
)


def test_characters_and_markers(metrics):
    session = EditSession(TextBuffer.from_string("ab\nc"), metrics)

    cell = cell_view(session, (0, 0))
    assert cell.char == 'a'
    assert cell.weight == TEXT_WEIGHT
    assert not cell.is_marker

    eol = cell_view(session, (0, 2))
    assert eol.char == END_OF_LINE
    assert eol.weight == MARKER_WEIGHT
    assert eol.is_marker

    assert cell_view(session, (1, 1)).char == END_OF_FILE
    assert cell_view(session, (0, 3)).char is None
    assert cell_view(session, (4, 0)).char is None


def test_guidelines_only_without_selection(metrics):
    session = EditSession(TextBuffer.from_string("abc"), metrics)
    assert cell_view(session, (0, 0)).guidelines
    session.selection = Single(Carat((0, 1)))
    assert not cell_view(session, (0, 0)).guidelines


def test_carat_ink_is_annotated(metrics):
    session = EditSession(TextBuffer.from_string("abc"), metrics)
    ink = carat_ink(0)
    session.selection = Single(Carat((0, 1), ink))
    assert cell_view(session, (0, 1)).annotations == [ink]
    assert cell_view(session, (0, 2)).annotations == []


def test_range_is_underlined(metrics):
    session = EditSession(TextBuffer.from_string("abcdef"), metrics)
    start, end = Carat((0, 1), carat_ink(0)), Carat((0, 4), carat_ink(0))
    session.selection = Range(start, end)

    underlined = [col for col in range(6) if cell_view(session, (0, col)).underline]
    assert underlined == [1, 2, 3]
    assert cell_view(session, (0, 1)).annotations == [start.ink]
    assert cell_view(session, (0, 4)).annotations == [end.ink]


def test_visible_cells_follow_origin(metrics):
    session = EditSession(TextBuffer.from_string("abc"), metrics, dimensions=(2, 3))
    cells = list(visible_cells(session))
    assert len(cells) == 6
    assert cells[0][0] == (0, 0)
    assert cells[-1][0] == (1, 2)

    session.origin = (1, 2)
    coords = [coord for coord, _ in visible_cells(session)]
    assert coords[0] == (1, 2)
    assert coords[-1] == (2, 4)


def test_full_viewport(metrics):
    session = EditSession(TextBuffer.empty(), metrics)
    assert sum(1 for _ in visible_cells(session)) == metrics.rows * metrics.cols
