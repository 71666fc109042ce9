"""
Ink Classification

Decides what a bundle of ink written on one grid row means, before any
character recognition happens:

- Strikethrough: a long flat single stroke, deletes a column range
- Scratch: dense scribble over one cell, blanks it
- CaratMark: a short vertical bar on a cell boundary, an insertion point
- Glyphs: anything else, split into per-column tokens for recognition
- Junk: empty or ambiguous input, ignored

All thresholds are in cell units, so the same rules apply at any grid size.
The classification is a pure function of (metrics, ink).
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Tuple, Union

from ink_editor.configs.editor_config import Metrics
from ink_editor.data.ink import Ink

logger = logging.getLogger(__name__)

# Strokes centred this close to a cell boundary are ambiguous.
LIMINAL_SPACE = 0.2
STRIKE_MIN_WIDTH = 1.5
STRIKE_MAX_STRAIGHTNESS = 1.2
CARAT_MAX_WIDTH = 0.3
CARAT_MAX_OFFSET = 0.3
ERASE_MIN_AREA = 500
ERASE_MIN_DENSITY = 0.2


# =============================================================================
# Ink Types
# =============================================================================

@dataclass
class Strikethrough:
    start: int
    end: int


@dataclass
class Scratch:
    col: int


@dataclass
class Glyphs:
    tokens: Dict[int, Ink] = field(default_factory=dict)


@dataclass
class CaratMark:
    col: int
    ink: Ink


@dataclass
class Junk:
    pass


InkType = Union[Strikethrough, Scratch, Glyphs, CaratMark, Junk]


def round_half_away(value: float) -> int:
    """Round to nearest, with halves going away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def is_erase(ink: Ink) -> bool:
    """Naively, a scratch-out has a lot of ink per unit area and isn't tiny."""
    width, height = ink.bounds_size
    area = max(width * height, ERASE_MIN_AREA)
    return ink.ink_len / area >= ERASE_MIN_DENSITY


# =============================================================================
# Tokenizer
# =============================================================================

def tokenize(metrics: Metrics, ink: Ink) -> Dict[int, Ink]:
    """
    Split multi-stroke ink into one ink per column.

    A stroke whose centre is well inside a cell belongs to that cell. One
    centred near a boundary goes to whichever neighbouring cell was written
    closest in time, judged by the unambiguous strokes of those cells.
    """
    width = float(metrics.width)

    def column_center(stroke) -> float:
        return max(stroke.centroid[0] / width, 0.0)

    def is_liminal(center: float) -> bool:
        return abs(center - round_half_away(center)) <= LIMINAL_SPACE

    time_ranges: Dict[int, Tuple[float, float]] = {}
    for stroke in ink.strokes:
        center = column_center(stroke)
        if not is_liminal(center):
            index = int(center)
            t_min, t_max = stroke.t_range
            lo, hi = time_ranges.get(index, (math.inf, -math.inf))
            time_ranges[index] = (min(lo, t_min), max(hi, t_max))

    tokens: Dict[int, Ink] = {}
    for stroke in ink.strokes:
        center = column_center(stroke)
        if not is_liminal(center):
            index = int(center)
        else:
            right = round_half_away(center)
            if right == 0:
                index = 0
            else:
                left = right - 1
                left_range = time_ranges.get(left)
                right_range = time_ranges.get(right)
                if left_range is None and right_range is None:
                    index = right
                elif right_range is None:
                    index = left
                elif left_range is None:
                    index = right
                else:
                    t_min, t_max = stroke.t_range
                    left_gap = t_min - left_range[1]
                    right_gap = right_range[0] - t_max
                    index = left if left_gap < right_gap else right

        moved = Ink([stroke.translate(-index * width, 0.0)])
        tokens.setdefault(index, Ink()).append(moved, math.inf)

    return tokens


# =============================================================================
# Classifier
# =============================================================================

def classify(metrics: Metrics, ink: Ink) -> InkType:
    """What sort of ink is this?"""
    if len(ink) == 0:
        return Junk()

    min_x = ink.x_range[0] / metrics.width
    max_x = ink.x_range[1] / metrics.width
    min_y = ink.y_range[0] / metrics.height
    max_y = ink.y_range[1] / metrics.height

    # A strikethrough is a single stroke that's mostly horizontal.
    if max_x - min_x > STRIKE_MIN_WIDTH and len(ink.strokes) == 1:
        x_extent = ink.x_range[1] - ink.x_range[0]
        if ink.ink_len / x_extent < STRIKE_MAX_STRAIGHTNESS:
            result = Strikethrough(
                start=max(round_half_away(min_x), 0),
                end=max(round_half_away(max_x), 0),
            )
            logger.debug("Classified ink as %s", result)
            return result
        # TODO: a long wiggly stroke could be a single cursive character.
        return Junk()

    center = (min_x + max_x) / 2
    boundary = round_half_away(center)

    # Vertical, and very close to a cell boundary.
    if (min_y < 0.1 and max_y > 0.9
            and max_x - min_x < CARAT_MAX_WIDTH
            and abs(center - boundary) < CARAT_MAX_OFFSET
            and boundary >= 0):
        logger.debug("Classified ink as carat at column %d", boundary)
        return CaratMark(col=boundary, ink=ink.translate(-boundary * metrics.width, 0.0))

    if center < 0:
        return Junk()

    if is_erase(ink):
        logger.debug("Classified ink as scratch at column %d", int(center))
        return Scratch(col=int(center))

    return Glyphs(tokens=tokenize(metrics, ink))
