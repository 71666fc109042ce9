"""
Edit Session

Turns classified ink into buffer edits. The session owns the text buffer,
the selection state, the undo stack and the recent-recognition history;
recognizers, templates and the clipboard live in a SharedState that is
passed in explicitly with each ink event.

Selection state machine:

    Normal --carat--> Single --carat--> Range --gesture--> Normal
                                        Range --carat----> Normal

While a selection is pending, glyph ink is read as an editing gesture:
X = cut, C = copy, V = paste (at a single carat), S = fill with blanks.
"""

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional, Union

from ink_editor.configs.editor_config import NUM_RECENT_RECOGNITIONS, Metrics
from ink_editor.data.ink import Ink
from ink_editor.data.templates import TemplateStore
from ink_editor.data.text_buffer import (
    Coord,
    Replace,
    TextBuffer,
    add_coord,
    diff_coord,
)
from ink_editor.model.classifier import (
    CaratMark,
    Glyphs,
    Junk,
    Scratch,
    Strikethrough,
    classify,
)
from ink_editor.model.recognizer import (
    CharRecognizer,
    build_recognizers,
    ink_to_points,
    normalize_points,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Selection
# =============================================================================

@dataclass
class Carat:
    """An insertion point and the ink that placed it (kept for display)."""
    coord: Coord
    ink: Ink = field(default_factory=Ink)


@dataclass
class Normal:
    pass


@dataclass
class Single:
    carat: Carat


@dataclass
class Range:
    start: Carat
    end: Carat


Selection = Union[Normal, Single, Range]


def advance_selection(selection: Selection, carat: Carat) -> Selection:
    """Place a carat: one makes a point, two make a range, a third resets."""
    if isinstance(selection, Normal):
        return Single(carat=carat)
    if isinstance(selection, Single):
        original = selection.carat
        if carat.coord < original.coord:
            return Range(start=carat, end=original)
        return Range(start=original, end=carat)
    return Normal()


# =============================================================================
# Recognition history
# =============================================================================

@dataclass
class Recognition:
    """
    A recent recognition and how often its cell was rewritten since.

    If a character is rewritten just after it was written, the first guess
    was probably wrong, and its ink makes a good template for the second.
    """
    coord: Coord
    ink: Ink
    best_char: str
    overwrites: int = 0


@dataclass
class SharedState:
    """Recognition state shared by every text window of the editor."""
    templates: TemplateStore
    metrics: Metrics
    char_recognizer: CharRecognizer = field(default_factory=CharRecognizer)
    gesture_recognizer: CharRecognizer = field(default_factory=CharRecognizer)
    clipboard: Optional[TextBuffer] = None

    @classmethod
    def create(cls, templates: TemplateStore, metrics: Metrics) -> 'SharedState':
        state = cls(templates=templates, metrics=metrics)
        state.rebuild_recognizers()
        return state

    def rebuild_recognizers(self):
        self.char_recognizer, self.gesture_recognizer = build_recognizers(
            self.templates, self.metrics
        )

    def learn(self, recognition: Recognition) -> bool:
        """Keep the ink of a corrected recognition as a new template."""
        added = self.templates.add_template(recognition.best_char, recognition.ink)
        if added:
            logger.info("Saved template for %r from corrected ink at %s",
                        recognition.best_char, recognition.coord)
            self.rebuild_recognizers()
        return added


# =============================================================================
# Edit Session
# =============================================================================

class EditSession:
    """A text buffer being edited through a grid of ink cells."""

    def __init__(
        self,
        buffer: TextBuffer,
        metrics: Metrics,
        dimensions: Optional[Coord] = None,
        num_recent_recognitions: int = NUM_RECENT_RECOGNITIONS,
    ):
        self.buffer = buffer
        self.metrics = metrics
        self.dimensions: Coord = dimensions or (metrics.rows, metrics.cols)
        self.origin: Coord = (0, 0)
        self.selection: Selection = Normal()
        self.undos: Deque[Replace] = deque()
        self.num_recent_recognitions = num_recent_recognitions
        self.recognitions: Deque[Recognition] = deque()

    def page_relative(self, row_delta: int, col_delta: int):
        """Scroll by a page, keeping a few cells of context from the last one."""
        def page_round(current: int, delta: int, size: int) -> int:
            stride = max(size - 5, 1)
            return max(current + delta * stride, 0)

        row, col = self.origin
        self.origin = (
            page_round(row, row_delta, self.dimensions[0]),
            page_round(col, col_delta, self.dimensions[1]),
        )

    def carat(self, carat: Carat):
        self.selection = advance_selection(self.selection, carat)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def record_recognition(self, coord: Coord, ink: Ink, best_char: str) -> Optional[Recognition]:
        """Track a recognition; returns the record evicted from the window, if any."""
        for r in self.recognitions:
            if r.coord == coord:
                # Assume we got it wrong the first time!
                r.best_char = best_char
                r.overwrites += 1

        self.recognitions.append(Recognition(coord=coord, ink=ink, best_char=best_char))

        if len(self.recognitions) > self.num_recent_recognitions:
            return self.recognitions.popleft()
        return None

    def forget_recognitions(self, keep) -> None:
        self.recognitions = deque(r for r in self.recognitions if keep(r))

    def replace(self, replace: Replace):
        """Apply an edit, push its inverse and re-point the recognition history."""
        start = replace.start
        old_end = max(replace.start, replace.end)
        # Rewriting one cell keeps its record, so the rewrite counts as a correction.
        overwrite = old_end == (start[0], start[1] + 1) and replace.content.shape == (0, 1)
        undo = self.buffer.replace(replace)
        new_end = undo.end
        self.undos.appendleft(undo)

        kept: Deque[Recognition] = deque()
        for r in self.recognitions:
            if r.coord < start:
                kept.append(r)
            elif r.coord >= old_end:
                r.coord = add_coord(new_end, diff_coord(old_end, r.coord))
                kept.append(r)
            elif overwrite and r.coord == start:
                kept.append(r)
        self.recognitions = kept

    def undo(self) -> bool:
        if not self.undos:
            return False
        self.replace(self.undos.popleft())
        # TODO: move this onto a redo stack once redo exists.
        self.undos.popleft()
        return True

    # -------------------------------------------------------------------------
    # Ink
    # -------------------------------------------------------------------------

    def ink_row(self, ink: Ink, row: int, shared: SharedState):
        """Interpret one pen interaction on a grid row."""
        ink_type = classify(self.metrics, ink)
        col_origin = self.origin[1]

        if isinstance(ink_type, Scratch):
            coord = (row, col_origin + ink_type.col)
            self.replace(Replace.write(coord, ' '))
            self.forget_recognitions(lambda r: r.coord != coord)

        elif isinstance(ink_type, CaratMark):
            self.carat(Carat(coord=(row, col_origin + ink_type.col), ink=ink_type.ink))

        elif isinstance(ink_type, Strikethrough):
            start = (row, col_origin + ink_type.start)
            end = (row, col_origin + ink_type.end)
            self.replace(Replace.remove(start, end))
            self.forget_recognitions(lambda r: r.coord < start)

        elif isinstance(ink_type, Glyphs):
            if isinstance(self.selection, Normal):
                self._write_glyphs(ink_type, row, shared)
            else:
                self._apply_gesture(ink_type, shared)

        elif isinstance(ink_type, Junk):
            pass

    def _write_glyphs(self, glyphs: Glyphs, row: int, shared: SharedState):
        for col, ink in sorted(glyphs.tokens.items(), key=lambda item: item[0]):
            coord = (row, self.origin[1] + col)
            char = shared.char_recognizer.best_match(ink_to_points(ink, self.metrics), math.inf)
            if char is None:
                continue
            self.replace(Replace.write(coord, char))
            evicted = self.record_recognition(coord, ink, char)
            if evicted is not None and evicted.overwrites > 0:
                shared.learn(evicted)

    def _apply_gesture(self, glyphs: Glyphs, shared: SharedState):
        selection = self.selection
        self.selection = Normal()
        if not glyphs.tokens:
            return

        ink = glyphs.tokens[min(glyphs.tokens)]
        gesture = shared.gesture_recognizer.best_match(normalize_points(ink), math.inf)
        logger.debug("Gesture %r with selection %s", gesture, type(selection).__name__)

        if gesture == 'X':
            if isinstance(selection, Range):
                start, end = selection.start.coord, selection.end.coord
                shared.clipboard = self.buffer.copy(start, end)
                self.replace(Replace.remove(start, end))
        elif gesture == 'C':
            if isinstance(selection, Range):
                shared.clipboard = self.buffer.copy(selection.start.coord, selection.end.coord)
        elif gesture == 'V':
            if isinstance(selection, Single) and shared.clipboard is not None:
                clipboard, shared.clipboard = shared.clipboard, None
                self.replace(Replace.splice(selection.carat.coord, clipboard))
        elif gesture == 'S':
            if isinstance(selection, Range):
                start, end = selection.start.coord, selection.end.coord
                self.replace(Replace(start, end, TextBuffer.padding(diff_coord(start, end))))
