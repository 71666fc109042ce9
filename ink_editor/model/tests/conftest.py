"""
Shared fixtures: a 40x60 px grid and a handful of hand-made glyph shapes.

Shapes are polylines in cell-local pixels; `draw` places them in a column.
"""

import pytest

from ink_editor.configs.editor_config import Metrics
from ink_editor.data.ink import Ink
from ink_editor.data.templates import CharTemplates, Template, TemplateStore
from ink_editor.model.edit_session import SharedState

CELL_WIDTH = 40
CELL_HEIGHT = 60

SHAPES = {
    'h': [(8, 10), (8, 50), (8, 30), (24, 30), (24, 50)],
    'i': [(20, 20), (20, 50)],
    'X': [(5, 10), (35, 50), (5, 50), (35, 10)],
    'C': [(35, 15), (10, 15), (5, 30), (10, 45), (35, 45)],
    'V': [(5, 10), (20, 50), (35, 10)],
    'S': [(35, 12), (5, 20), (35, 40), (5, 50)],
}


def stroke(points, col=0, t0=0.0, dx=0.0):
    """One stroke placed in column `col`, sampled 10 ms apart from `t0`."""
    return [[x + col * CELL_WIDTH + dx, y, t0 + i * 0.01] for i, (x, y) in enumerate(points)]


def glyph(name, col=0, t0=0.0):
    return Ink.from_arrays([stroke(SHAPES[name], col, t0)])


def carat_ink(boundary):
    x = boundary * CELL_WIDTH
    return Ink.from_arrays([[[x, 2, 0.0], [x, 30, 0.05], [x, 58, 0.1]]])


def scratch_ink(col):
    x0 = col * CELL_WIDTH
    return Ink.from_arrays([[
        [x0 + (5 if k % 2 == 0 else 35), 15 + 3 * k, k * 0.01] for k in range(11)
    ]])


def strike_ink(x_start, x_end, y=30):
    return Ink.from_arrays([[[x_start, y, 0.0], [(x_start + x_end) / 2, y, 0.1], [x_end, y, 0.2]]])


@pytest.fixture
def metrics():
    return Metrics.for_cell(CELL_HEIGHT, CELL_WIDTH)


@pytest.fixture
def store():
    return TemplateStore([
        CharTemplates(name, [Template.from_ink(glyph(name))]) for name in SHAPES
    ])


@pytest.fixture
def shared(store, metrics):
    return SharedState.create(store, metrics)
