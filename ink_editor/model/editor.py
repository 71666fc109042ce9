"""
Editor

Application-level state around an edit session, without any drawing:

- Edit tab: ink goes to the document session
- Template tab: ink edits the template database, one row per symbol
- Meta tab: a one-row session for typing a file path, with suggestions

I/O failures never propagate out of the editor. They are logged and kept in
`error_string` for the status line, and the session stays usable.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, TypeVar, Union

from ink_editor.configs.editor_config import EditorConfig
from ink_editor.data.ink import Ink
from ink_editor.data.templates import Template, TemplateStore
from ink_editor.data.text_buffer import TextBuffer
from ink_editor.model.classifier import Glyphs, Scratch, Strikethrough, classify
from ink_editor.model.edit_session import EditSession, SharedState

logger = logging.getLogger(__name__)

T = TypeVar('T')

NUM_SUGGESTIONS = 16
TEMPLATE_MERGE_GAP = 0.5


class Side(Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


@dataclass
class EditTab:
    pass


@dataclass
class TemplateTab:
    pass


@dataclass
class MetaTab:
    path_window: EditSession
    suggested: List[Path] = field(default_factory=list)


Tab = Union[EditTab, TemplateTab, MetaTab]


def suggestions(current_path: str) -> List[Path]:
    """Entries next to `current_path` whose names start with its last component."""
    if not current_path.startswith('/'):
        return []
    directory, _, prefix = current_path.rpartition('/')
    directory = directory or '/'
    results = []
    for name in sorted(os.listdir(directory)):
        if name.startswith(prefix):
            results.append(Path(directory) / name)
            if len(results) >= NUM_SUGGESTIONS:
                break
    return results


class Editor:
    """Tabs, documents and templates for one editing session."""

    def __init__(self, config: EditorConfig, document: str = "",
                 path: Optional[Path] = None,
                 templates: Optional[TemplateStore] = None):
        self.config = config
        self.metrics = config.metrics()
        self.error_string = ""
        self.tab: Tab = EditTab()
        self.template_offset = 0
        self.shared = SharedState.create(
            templates if templates is not None else TemplateStore(), self.metrics)
        self.path = path
        self.text = self._session(TextBuffer.from_string(document))
        self.dirty = False

    def _session(self, buffer: TextBuffer, dimensions=None) -> EditSession:
        return EditSession(
            buffer,
            self.metrics,
            dimensions or (self.metrics.rows, self.metrics.cols),
            num_recent_recognitions=self.config.num_recent_recognitions,
        )

    def report_error(self, operation: Callable[..., T], *args) -> Optional[T]:
        try:
            return operation(*args)
        except (OSError, ValueError) as e:
            self.error_string = f"Error: {e}"
            logger.warning("%s failed: %s", getattr(operation, '__name__', operation), e)
            return None

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------

    def load_templates(self):
        store = TemplateStore.load(self.config.template_path, self.metrics.height)
        store.seed()
        self.shared.templates = store
        self.shared.rebuild_recognizers()

    def save_templates(self):
        self.shared.templates.save(self.config.template_path, self.metrics.height)

    def _ink_template_row(self, row: int, ink: Ink):
        char_data = self.shared.templates.get(row)
        if char_data is None:
            return
        templates = char_data.templates
        ink_type = classify(self.metrics, ink)

        if isinstance(ink_type, Strikethrough):
            for t in templates[min(ink_type.start, len(templates)):min(ink_type.end, len(templates))]:
                t.clear()
        elif isinstance(ink_type, Scratch):
            if ink_type.col < len(templates):
                templates[ink_type.col].clear()
        elif isinstance(ink_type, Glyphs):
            for col, token in ink_type.tokens.items():
                while len(templates) <= col:
                    templates.append(Template.from_ink(Ink()))
                templates[col].ink.append(token, TEMPLATE_MERGE_GAP)
                templates[col].reserialize()

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def write(self, row: int, ink: Ink):
        if isinstance(self.tab, MetaTab):
            self.tab.path_window.ink_row(ink, row, self.shared)
            self.tab.suggested = self._suggest(self.tab.path_window.buffer.content_string())
        elif isinstance(self.tab, EditTab):
            self.dirty = True
            self.text.ink_row(ink, row, self.shared)
        elif isinstance(self.tab, TemplateTab):
            self._ink_template_row(self.template_offset + row, ink)

    def _suggest(self, path: str) -> List[Path]:
        try:
            return suggestions(path)
        except OSError as e:
            logger.debug("No suggestions for %s: %s", path, e)
            return []

    def meta_tab(self) -> MetaTab:
        """Path prompt prefilled with the current file, or the home directory."""
        if self.path is not None:
            current = str(self.path)
        else:
            current = os.environ.get('HOME', '') + '/'
        window = self._session(TextBuffer.from_string(current), (1, self.metrics.cols))
        return MetaTab(path_window=window, suggested=self._suggest(current))

    def switch_tab(self, tab: Tab):
        if isinstance(self.tab, TemplateTab) and not isinstance(tab, TemplateTab):
            self.report_error(self.save_templates)
            self.shared.rebuild_recognizers()
        self.tab = tab

    def swipe(self, towards: Side):
        if isinstance(self.tab, EditTab):
            movement = {
                Side.TOP: (1, 0),
                Side.BOTTOM: (-1, 0),
                Side.LEFT: (0, 1),
                Side.RIGHT: (0, -1),
            }[towards]
            self.text.page_relative(*movement)
        elif isinstance(self.tab, TemplateTab):
            stride = max(self.metrics.rows - 1, 1)
            if towards == Side.TOP:
                self.template_offset += stride
            elif towards == Side.BOTTOM:
                self.template_offset -= min(stride, self.template_offset)

    def undo(self) -> bool:
        if isinstance(self.tab, EditTab) and self.text.undo():
            self.dirty = True
            return True
        return False

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def open(self, path: Path):
        contents = self.report_error(Path(path).read_text, 'utf-8')
        if contents is None:
            return
        self.text = self._session(TextBuffer.from_string(contents))
        self.path = Path(path)
        self.tab = EditTab()
        self.dirty = False

    def _update_path_from_meta(self):
        if not isinstance(self.tab, MetaTab):
            return
        path = Path(self.tab.path_window.buffer.content_string())
        if self.path != path:
            self.path = path
            self.dirty = True
        self.tab = EditTab()

    def rename(self):
        self._update_path_from_meta()

    def new(self):
        self._update_path_from_meta()
        self.text = self._session(TextBuffer.empty())

    def save(self) -> bool:
        if self.path is None:
            return False
        written = self.report_error(self.path.write_text, self.text.buffer.content_string(), 'utf-8')
        if written is None:
            return False
        self.dirty = False
        return True
