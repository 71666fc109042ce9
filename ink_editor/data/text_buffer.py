"""
Coordinate-addressed text storage.

A buffer is a list of lines, each a list of single characters. Positions are
(row, col) coordinates in row-major order; the column equal to a line's
length is the virtual line break (or end of file on the last line).

All edits go through `Replace`, which is invertible:

    buffer = TextBuffer.from_string("hello")
    undo = buffer.replace(Replace.remove((0, 1), (0, 3)))   # "hlo"
    buffer.replace(undo)                                      # "hello"
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Coord = Tuple[int, int]


# =============================================================================
# Coordinate arithmetic
# =============================================================================

def diff_coord(start: Coord, end: Coord) -> Coord:
    """Shape of the text between two coordinates, as (lines, trailing cols)."""
    if start[0] == end[0]:
        return (0, end[1] - start[1])
    return (end[0] - start[0], end[1])


def add_coord(base: Coord, shape: Coord) -> Coord:
    """Inverse of `diff_coord`: where text of `shape` ends if it starts at `base`."""
    if shape[0] == 0:
        return (base[0], base[1] + shape[1])
    return (base[0] + shape[0], shape[1])


# =============================================================================
# Text Buffer
# =============================================================================

@dataclass
class TextBuffer:
    """Ordered lines of characters. There is always at least one line."""
    lines: List[List[str]] = field(default_factory=lambda: [[]])

    def __post_init__(self):
        if not self.lines:
            self.lines = [[]]

    @classmethod
    def empty(cls) -> 'TextBuffer':
        return cls()

    @classmethod
    def from_string(cls, text: str) -> 'TextBuffer':
        return cls([list(line) for line in text.split('\n')])

    @classmethod
    def padding(cls, shape: Coord) -> 'TextBuffer':
        """Blank text of the given shape: `rows` line breaks then `cols` spaces."""
        rows, cols = shape
        return cls([[] for _ in range(rows)] + [[' '] * cols])

    def content_string(self) -> str:
        return '\n'.join(''.join(line) for line in self.lines)

    def __str__(self) -> str:
        return self.content_string()

    @property
    def shape(self) -> Coord:
        return (len(self.lines) - 1, len(self.lines[-1]))

    def clone(self) -> 'TextBuffer':
        return TextBuffer([list(line) for line in self.lines])

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def line(self, row: int) -> Optional[List[str]]:
        if 0 <= row < len(self.lines):
            return self.lines[row]
        return None

    def char_at(self, coord: Coord) -> Optional[str]:
        """The stored character at `coord`, or None past the end of the line."""
        row, col = coord
        line = self.line(row)
        if line is None or not 0 <= col < len(line):
            return None
        return line[col]

    def copy(self, start: Coord, end: Coord) -> 'TextBuffer':
        """Text in [start, end), padded as a write would pad it."""
        padded = self.clone()
        padded.pad(*start)
        padded.pad(*end)
        return padded._split_range(start, end)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def pad(self, row: int, col: int):
        """Grow the buffer so that `(row, col)` is addressable."""
        while len(self.lines) <= row:
            self.lines.append([])
        line = self.lines[row]
        if len(line) < col:
            line.extend(' ' * (col - len(line)))

    def write(self, coord: Coord, char: str):
        row, col = coord
        self.pad(row, col + 1)
        self.lines[row][col] = char

    def remove(self, start: Coord, end: Coord):
        self._split_range(self.clip(start), self.clip(end))

    def splice(self, coord: Coord, other: 'TextBuffer'):
        """Insert `other` at `coord`, pushing the rest of the line after it."""
        row, col = coord
        self.pad(row, col)
        line = self.lines[row]
        head, tail = line[:col], line[col:]
        inserted = [list(l) for l in other.lines]
        inserted[0] = head + inserted[0]
        inserted[-1] = inserted[-1] + tail
        self.lines[row:row + 1] = inserted

    def append(self, other: 'TextBuffer'):
        self.lines[-1].extend(other.lines[0])
        self.lines.extend(list(l) for l in other.lines[1:])

    def clip(self, coord: Coord) -> Coord:
        """The nearest position at or before `coord` that exists in the buffer."""
        row, col = coord
        if row >= len(self.lines):
            return (len(self.lines) - 1, len(self.lines[-1]))
        return (row, min(col, len(self.lines[row])))

    def replace(self, replace: 'Replace') -> 'Replace':
        """
        Apply a replace in place and return the replace that undoes it.

        Text past the end of a line is absent, so the removed range is cut
        back to what exists. Blanks needed to reach `start` are inserted with
        the content, and the inverse removes them again.
        """
        start = replace.start
        end = max(replace.start, replace.end)
        at = self.clip(start)
        removed = self._split_range(at, max(at, self.clip(end)))
        inserted = TextBuffer.padding(diff_coord(at, start))
        inserted.append(replace.content)
        self.splice(at, inserted)
        return Replace(at, add_coord(at, inserted.shape), removed)

    def _split_range(self, start: Coord, end: Coord) -> 'TextBuffer':
        """Cut [start, end) out and return it. Both ends must exist."""
        if end <= start:
            return TextBuffer.empty()
        (r0, c0), (r1, c1) = start, end
        if r0 == r1:
            taken = [self.lines[r0][c0:c1]]
        else:
            taken = ([self.lines[r0][c0:]] +
                     [list(l) for l in self.lines[r0 + 1:r1]] +
                     [self.lines[r1][:c1]])
        self.lines[r0:r1 + 1] = [self.lines[r0][:c0] + self.lines[r1][c1:]]
        return TextBuffer(taken)


# =============================================================================
# Replace
# =============================================================================

@dataclass
class Replace:
    """Remove the text in [start, end) and splice `content` in its place."""
    start: Coord
    end: Coord
    content: TextBuffer = field(default_factory=TextBuffer)

    @classmethod
    def write(cls, coord: Coord, char: str) -> 'Replace':
        row, col = coord
        return cls(coord, (row, col + 1), TextBuffer.from_string(char))

    @classmethod
    def remove(cls, start: Coord, end: Coord) -> 'Replace':
        return cls(start, end, TextBuffer.empty())

    @classmethod
    def splice(cls, coord: Coord, content: TextBuffer) -> 'Replace':
        return cls(coord, coord, content)
