"""
Template Character Recognizer

Nearest-neighbour matching of ink against stored templates. Every drawing
is resampled to a fixed number of equidistant points along its path, put
into a canonical frame, and compared point-by-point:

- ink_to_points: cell frame (divided by cell height, position kept), used
  for literal characters where placement matters (',' vs "'")
- normalize_points: unit box centred on the centroid, used for editing
  gestures which may be drawn at any size

Usage:
    char_recognizer, gesture_recognizer = build_recognizers(store, metrics)
    char = char_recognizer.best_match(ink_to_points(ink, metrics), math.inf)
"""

import logging
import math
from typing import Iterable, List, Optional, Tuple

import numpy as np

from ink_editor.configs.editor_config import GESTURE_CHARS, RESAMPLE_POINTS, Metrics
from ink_editor.data.ink import Ink
from ink_editor.data.templates import TemplateStore

logger = logging.getLogger(__name__)


# =============================================================================
# Normalization
# =============================================================================

def resample(ink: Ink, n: int = RESAMPLE_POINTS) -> np.ndarray:
    """Resample the concatenated stroke path to `n` equidistant (x, y) points."""
    if len(ink) == 0:
        return np.zeros((0, 2))
    path = np.vstack([s.xy for s in ink.strokes])
    if len(path) == 1:
        return np.repeat(path, n, axis=0)

    seg = np.linalg.norm(np.diff(path, axis=0), axis=1)
    dist = np.concatenate([[0.0], np.cumsum(seg)])
    if dist[-1] == 0:
        return np.repeat(path[:1], n, axis=0)

    targets = np.linspace(0.0, dist[-1], n)
    x = np.interp(targets, dist, path[:, 0])
    y = np.interp(targets, dist, path[:, 1])
    return np.column_stack([x, y])


def ink_to_points(ink: Ink, metrics: Metrics, n: int = RESAMPLE_POINTS) -> np.ndarray:
    """Resample into cell units, keeping the position inside the cell."""
    return resample(ink, n) / float(metrics.height)


def normalize_points(ink: Ink, n: int = RESAMPLE_POINTS) -> np.ndarray:
    """Resample, scale into the unit box and centre on the centroid."""
    points = resample(ink, n)
    if len(points) == 0:
        return points
    size = (points.max(axis=0) - points.min(axis=0)).max()
    if size > 0:
        points = points / size
    return points - points.mean(axis=0)


# =============================================================================
# Recognizer
# =============================================================================

class CharRecognizer:
    """Nearest-neighbour matcher over fixed-size point sequences."""

    def __init__(self, templates: Iterable[Tuple[np.ndarray, str]] = ()):
        arrays: List[np.ndarray] = []
        self.chars: List[str] = []
        for points, char in templates:
            if len(points) == 0:
                continue
            arrays.append(points)
            self.chars.append(char)
        # [T, N, 2]
        self.points = np.stack(arrays) if arrays else np.zeros((0, RESAMPLE_POINTS, 2))

    def __len__(self) -> int:
        return len(self.chars)

    def distances(self, query: np.ndarray) -> np.ndarray:
        """Mean point-to-point distance from `query` to every template."""
        return np.linalg.norm(self.points - query[np.newaxis], axis=2).mean(axis=1)

    def best_match(self, query: np.ndarray, max_distance: float = math.inf) -> Optional[str]:
        if len(self.chars) == 0 or len(query) == 0:
            return None
        if query.shape != self.points.shape[1:]:
            logger.warning("Query of shape %s does not match templates of shape %s",
                           query.shape, self.points.shape[1:])
            return None
        distances = self.distances(query)
        best = int(np.argmin(distances))
        if distances[best] > max_distance:
            return None
        return self.chars[best]


def build_recognizers(store: TemplateStore, metrics: Metrics,
                      n: int = RESAMPLE_POINTS) -> Tuple[CharRecognizer, CharRecognizer]:
    """(literal recognizer, gesture recognizer) for the current template store."""
    char_recognizer = CharRecognizer(
        (ink_to_points(t.ink, metrics, n), ct.char)
        for ct in store for t in ct.templates
    )
    gesture_recognizer = CharRecognizer(
        (normalize_points(t.ink, n), ct.char)
        for ct in store if ct.char in GESTURE_CHARS
        for t in ct.templates
    )
    logger.debug("Built recognizers: %d character templates, %d gesture templates",
                 len(char_recognizer), len(gesture_recognizer))
    return char_recognizer, gesture_recognizer
