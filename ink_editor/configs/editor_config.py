"""
Editor configuration.

Update these values to match your device. Paths follow the XDG base
directory layout; set XDG_DATA_HOME to move the template database.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

# Screen geometry (pixels)
SCREEN_WIDTH = 1404
SCREEN_HEIGHT = 1872
TOP_MARGIN = 100
LEFT_MARGIN = 100

# Grid cell geometry (pixels)
DEFAULT_CHAR_HEIGHT = 40
DEFAULT_CHAR_WIDTH = 24

# Recognition
NUM_RECENT_RECOGNITIONS = 16
RESAMPLE_POINTS = 32
GESTURE_CHARS = ('X', 'C', 'V', 'S')

# Template database
APP_PREFIX = "ink-editor"
TEMPLATE_FILE = "templates.json"


def data_dir() -> Path:
    """Directory holding persistent editor data (created lazily by writers)."""
    base = os.environ.get("XDG_DATA_HOME")
    root = Path(base) if base else Path.home() / ".local" / "share"
    return root / APP_PREFIX


def default_template_path() -> Path:
    return data_dir() / TEMPLATE_FILE


@dataclass(frozen=True)
class Metrics:
    """Pixel geometry of the character grid."""
    height: int
    width: int
    baseline: int
    rows: int
    cols: int

    @classmethod
    def for_cell(cls, height: int, width: int,
                 screen_width: int = SCREEN_WIDTH,
                 screen_height: int = SCREEN_HEIGHT,
                 top_margin: int = TOP_MARGIN,
                 left_margin: int = LEFT_MARGIN,
                 baseline: int = None) -> 'Metrics':
        """Fit as many cells as possible inside the screen margins."""
        rows = max(1, (screen_height - top_margin * 2) // height)
        cols = max(1, (screen_width - left_margin * 2) // width)
        if baseline is None:
            baseline = height * 3 // 4
        return cls(height=height, width=width, baseline=baseline, rows=rows, cols=cols)


@dataclass
class EditorConfig:
    """Configuration for an editing session."""
    char_height: int = DEFAULT_CHAR_HEIGHT
    char_width: int = DEFAULT_CHAR_WIDTH
    screen_width: int = SCREEN_WIDTH
    screen_height: int = SCREEN_HEIGHT
    top_margin: int = TOP_MARGIN
    left_margin: int = LEFT_MARGIN
    num_recent_recognitions: int = NUM_RECENT_RECOGNITIONS
    template_path: Path = field(default_factory=default_template_path)

    def metrics(self) -> Metrics:
        return Metrics.for_cell(
            self.char_height,
            self.char_width,
            screen_width=self.screen_width,
            screen_height=self.screen_height,
            top_margin=self.top_margin,
            left_margin=self.left_margin,
        )
