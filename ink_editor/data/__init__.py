"""
Ink Editor Data Types

- Ink, Stroke: raw pen input
- TextBuffer, Replace: line/column text storage with invertible edits
- TemplateStore: recognizer templates and their JSON persistence
"""

from .ink import Ink, Stroke
from .text_buffer import (
    Coord,
    TextBuffer,
    Replace,
    add_coord,
    diff_coord,
)
from .templates import (
    Template,
    CharTemplates,
    TemplateStore,
    TemplateFileError,
    DEFAULT_ALPHABET,
)

__all__ = [
    'Ink',
    'Stroke',
    'Coord',
    'TextBuffer',
    'Replace',
    'add_coord',
    'diff_coord',
    'Template',
    'CharTemplates',
    'TemplateStore',
    'TemplateFileError',
    'DEFAULT_ALPHABET',
]
