"""
Ink Editor Model

Modules:
    - classifier: what a bundle of row ink means (strike, scratch, carat, glyphs)
    - recognizer: nearest-neighbour template matching
    - edit_session: selection, gestures, undo and adaptive learning
    - render: per-cell display data for a renderer
    - editor: tabs, template authoring and document I/O
"""

from .classifier import (
    InkType,
    Strikethrough,
    Scratch,
    Glyphs,
    CaratMark,
    Junk,
    classify,
    tokenize,
)
from .recognizer import (
    CharRecognizer,
    build_recognizers,
    ink_to_points,
    normalize_points,
)
from .edit_session import (
    Carat,
    Selection,
    Normal,
    Single,
    Range,
    Recognition,
    SharedState,
    EditSession,
)
from .render import CellView, cell_view, visible_cells
from .editor import Editor, EditTab, TemplateTab, MetaTab, Side

__all__ = [
    # Classification
    'InkType',
    'Strikethrough',
    'Scratch',
    'Glyphs',
    'CaratMark',
    'Junk',
    'classify',
    'tokenize',
    # Recognition
    'CharRecognizer',
    'build_recognizers',
    'ink_to_points',
    'normalize_points',
    # Editing
    'Carat',
    'Selection',
    'Normal',
    'Single',
    'Range',
    'Recognition',
    'SharedState',
    'EditSession',
    # Rendering
    'CellView',
    'cell_view',
    'visible_cells',
    # Application
    'Editor',
    'EditTab',
    'TemplateTab',
    'MetaTab',
    'Side',
]
