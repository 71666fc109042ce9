"""
Ink Data Structures

Raw pen input as captured from the tablet:
- Stroke: one pen-down to pen-up path of timestamped samples
- Ink: an unordered bundle of strokes with cached extents and path length

Usage:
    from ink_editor.data.ink import Ink

    ink = Ink()
    ink.push(10, 20, 0.00)
    ink.push(12, 40, 0.05)
    ink.pen_up()

    print(ink.x_range, ink.y_range, ink.ink_len)
    restored = Ink.from_string(ink.to_string())
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np


STROKE_SEPARATOR = ';'
SAMPLE_SEPARATOR = ' '


# =============================================================================
# Stroke
# =============================================================================

@dataclass
class Stroke:
    """A single stroke (pen down to pen up)."""
    points: np.ndarray  # [N, 3] for (x, y, t)

    @classmethod
    def from_points(cls, points) -> 'Stroke':
        """Create from [[x, y, t], ...]; samples without a timestamp get their index."""
        arr = np.asarray(points, dtype=np.float64)
        if arr.size == 0:
            return cls(points=np.zeros((0, 3)))
        arr = arr.reshape(len(arr), -1)
        if arr.shape[1] == 2:
            arr = np.column_stack([arr, np.arange(len(arr), dtype=np.float64)])
        return cls(points=arr[:, :3].copy())

    @property
    def num_points(self) -> int:
        return len(self.points)

    @property
    def xy(self) -> np.ndarray:
        return self.points[:, :2]

    @property
    def t_range(self) -> Tuple[float, float]:
        if self.num_points == 0:
            return (float('inf'), float('-inf'))
        return (float(self.points[:, 2].min()), float(self.points[:, 2].max()))

    @property
    def centroid(self) -> Tuple[float, float]:
        x, y = self.xy.mean(axis=0)
        return (float(x), float(y))

    @property
    def length(self) -> float:
        """Polyline length of the stroke in pixels."""
        if self.num_points < 2:
            return 0.0
        return float(np.linalg.norm(np.diff(self.xy, axis=0), axis=1).sum())

    def translate(self, dx: float, dy: float) -> 'Stroke':
        moved = self.points.copy()
        moved[:, 0] += dx
        moved[:, 1] += dy
        return Stroke(points=moved)

    def shift_time(self, dt: float) -> 'Stroke':
        moved = self.points.copy()
        moved[:, 2] += dt
        return Stroke(points=moved)


# =============================================================================
# Ink
# =============================================================================

class Ink:
    """
    All pen strokes recorded for one writing interaction.

    Extents and total path length are cached and refreshed whenever the
    stroke list changes.
    """

    def __init__(self, strokes: Optional[Iterable[Stroke]] = None):
        self._strokes: List[Stroke] = [s for s in (strokes or []) if s.num_points > 0]
        self._pending: List[Tuple[float, float, float]] = []
        self._update()

    @classmethod
    def from_arrays(cls, arrays: Iterable) -> 'Ink':
        """Create from a list of per-stroke [[x, y(, t)], ...] arrays."""
        return cls(Stroke.from_points(a) for a in arrays)

    def _update(self):
        if self._strokes:
            all_points = np.vstack([s.xy for s in self._strokes])
            x_min, y_min = all_points.min(axis=0)
            x_max, y_max = all_points.max(axis=0)
            self.x_range: Optional[Tuple[float, float]] = (float(x_min), float(x_max))
            self.y_range: Optional[Tuple[float, float]] = (float(y_min), float(y_max))
        else:
            self.x_range = None
            self.y_range = None
        self.ink_len = sum(s.length for s in self._strokes)

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def push(self, x: float, y: float, t: float):
        self._pending.append((x, y, t))

    def pen_up(self):
        if self._pending:
            self._strokes.append(Stroke.from_points(self._pending))
            self._pending = []
            self._update()

    def append(self, other: 'Ink', max_time_gap: float):
        """
        Merge another ink's strokes into this one.

        If `other` starts more than `max_time_gap` seconds after this ink
        ends, its timestamps are pulled back so the gap is `max_time_gap`.
        """
        strokes = list(other.strokes)
        if self._strokes and strokes:
            gap = other.t_range[0] - self.t_range[1]
            if gap > max_time_gap:
                strokes = [s.shift_time(max_time_gap - gap) for s in strokes]
        self._strokes.extend(strokes)
        self._update()

    def clear(self):
        self._strokes = []
        self._pending = []
        self._update()

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    @property
    def strokes(self) -> List[Stroke]:
        return self._strokes

    def __iter__(self) -> Iterator[Stroke]:
        return iter(self._strokes)

    def __len__(self) -> int:
        """Total number of samples."""
        return sum(s.num_points for s in self._strokes)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ink):
            return NotImplemented
        return (len(self._strokes) == len(other._strokes) and
                all(np.array_equal(a.points, b.points)
                    for a, b in zip(self._strokes, other._strokes)))

    def __repr__(self) -> str:
        return f"Ink(strokes={len(self._strokes)}, points={len(self)})"

    @property
    def t_range(self) -> Tuple[float, float]:
        ranges = [s.t_range for s in self._strokes]
        if not ranges:
            return (float('inf'), float('-inf'))
        return (min(r[0] for r in ranges), max(r[1] for r in ranges))

    @property
    def bounds_size(self) -> Tuple[float, float]:
        if self.x_range is None:
            return (0.0, 0.0)
        return (self.x_range[1] - self.x_range[0], self.y_range[1] - self.y_range[0])

    @property
    def centroid(self) -> Tuple[float, float]:
        if not self._strokes:
            return (0.0, 0.0)
        x, y = np.vstack([s.xy for s in self._strokes]).mean(axis=0)
        return (float(x), float(y))

    def translate(self, dx: float, dy: float) -> 'Ink':
        return Ink(s.translate(dx, dy) for s in self._strokes)

    def scale(self, factor: float) -> 'Ink':
        """Scale positions (not timestamps) about the origin."""
        scaled = []
        for s in self._strokes:
            points = s.points.copy()
            points[:, :2] *= factor
            scaled.append(Stroke(points=points))
        return Ink(scaled)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_string(self) -> str:
        """Serialize as `x,y,t x,y,t;x,y,t ...` (strokes separated by ';')."""
        return STROKE_SEPARATOR.join(
            SAMPLE_SEPARATOR.join('%.1f,%.1f,%.3f' % tuple(p) for p in s.points)
            for s in self._strokes
        )

    @classmethod
    def from_string(cls, text: str) -> 'Ink':
        """Parse the format produced by `to_string`; raises ValueError if malformed."""
        strokes = []
        for chunk in text.split(STROKE_SEPARATOR):
            samples = chunk.split()
            if not samples:
                continue
            points = []
            for sample in samples:
                fields = sample.split(',')
                if len(fields) != 3:
                    raise ValueError(f"Malformed ink sample {sample!r}")
                points.append([float(f) for f in fields])
            strokes.append(Stroke.from_points(points))
        return cls(strokes)
