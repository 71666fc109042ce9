"""
Per-cell display data for a renderer.

The core never draws; a renderer asks what each visible cell should show
and takes care of pixels itself.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ink_editor.data.ink import Ink
from ink_editor.data.text_buffer import Coord
from ink_editor.model.edit_session import EditSession, Normal, Range, Single

END_OF_LINE = '⏎'
END_OF_FILE = '⌧'

TEXT_WEIGHT = 0.9
MARKER_WEIGHT = 0.3


@dataclass
class CellView:
    char: Optional[str] = None
    weight: float = TEXT_WEIGHT
    is_marker: bool = False
    underline: bool = False
    guidelines: bool = True
    annotations: List[Ink] = field(default_factory=list)


def cell_view(session: EditSession, coord: Coord) -> CellView:
    cell = CellView()
    selection = session.selection

    if isinstance(selection, Normal):
        cell.guidelines = True
    elif isinstance(selection, Single):
        cell.guidelines = False
        if coord == selection.carat.coord:
            cell.annotations.append(selection.carat.ink)
    elif isinstance(selection, Range):
        cell.guidelines = False
        if coord == selection.start.coord:
            cell.annotations.append(selection.start.ink)
        if coord == selection.end.coord:
            cell.annotations.append(selection.end.ink)
        cell.underline = selection.start.coord <= coord < selection.end.coord

    row, col = coord
    lines = session.buffer.lines
    line = session.buffer.line(row)
    if line is not None:
        if col < len(line):
            cell.char = line[col]
        elif col == len(line):
            cell.char = END_OF_FILE if row + 1 == len(lines) else END_OF_LINE
            cell.weight = MARKER_WEIGHT
            cell.is_marker = True
    return cell


def visible_cells(session: EditSession) -> Iterator[Tuple[Coord, CellView]]:
    """Every cell of the session's viewport, row by row."""
    row_origin, col_origin = session.origin
    rows, cols = session.dimensions
    for row in range(row_origin, row_origin + rows):
        for col in range(col_origin, col_origin + cols):
            yield (row, col), cell_view(session, (row, col))
