"""
Template database for the character recognizer.

Each recognizable symbol owns an ordered list of hand-drawn templates. The
store is loaded once at startup, grows while editing (adaptive learning and
the template authoring tab) and is written back when leaving authoring mode.

File format (JSON):
    {
        "height": 40,
        "templates": [
            {"char": "a", "templates": [{"ink": "1.0,2.0,0.000 ..."}]},
            ...
        ]
    }
"""

import json
import logging
import os
import string
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from ink_editor.data.ink import Ink

logger = logging.getLogger(__name__)

DEFAULT_ALPHABET = string.ascii_letters + string.digits + string.punctuation


class TemplateFileError(ValueError):
    """The template file exists but cannot be understood."""


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class Template:
    """One reference drawing, kept alongside its serialized form."""
    ink: Ink
    serialized: str = ""

    @classmethod
    def from_ink(cls, ink: Ink) -> 'Template':
        return cls(ink=ink, serialized=ink.to_string())

    @classmethod
    def from_string(cls, serialized: str) -> 'Template':
        return cls(ink=Ink.from_string(serialized), serialized=serialized)

    @property
    def is_empty(self) -> bool:
        return len(self.ink) == 0

    def clear(self):
        self.ink.clear()
        self.serialized = ""

    def reserialize(self):
        self.serialized = self.ink.to_string()


@dataclass
class CharTemplates:
    """All templates for a single symbol."""
    char: str
    templates: List[Template] = field(default_factory=list)


class TemplateStore:
    """Ordered list of CharTemplates, one entry per symbol."""

    def __init__(self, entries: Optional[Iterable[CharTemplates]] = None):
        self.entries: List[CharTemplates] = list(entries or [])

    def seed(self, chars: str = DEFAULT_ALPHABET):
        """Make sure every symbol in `chars` has an entry, keeping existing ones."""
        for c in chars:
            self.entry(c, create=True)

    def __iter__(self) -> Iterator[CharTemplates]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> CharTemplates:
        return self.entries[index]

    def get(self, index: int) -> Optional[CharTemplates]:
        if 0 <= index < len(self.entries):
            return self.entries[index]
        return None

    def entry(self, char: str, create: bool = False) -> Optional[CharTemplates]:
        for ct in self.entries:
            if ct.char == char:
                return ct
        if create:
            ct = CharTemplates(char=char)
            self.entries.append(ct)
            return ct
        return None

    def add_template(self, char: str, ink: Ink) -> bool:
        """Append a template under an existing symbol. Returns False if unknown."""
        ct = self.entry(char)
        if ct is None:
            return False
        ct.templates.append(Template.from_ink(ink))
        return True

    def counts(self) -> Dict[str, int]:
        return {ct.char: sum(1 for t in ct.templates if not t.is_empty) for ct in self.entries}

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_json(self, height: int) -> Dict:
        return {
            'height': height,
            'templates': [
                {
                    'char': ct.char,
                    'templates': [{'ink': t.serialized} for t in ct.templates if not t.is_empty],
                }
                for ct in self.entries
            ],
        }

    @classmethod
    def from_json(cls, data: Dict, height: int) -> 'TemplateStore':
        """Build a store, rescaling ink drawn at another character height."""
        try:
            file_height = data.get('height') or height
            factor = height / file_height
            entries = []
            for item in data['templates']:
                templates = []
                for t in item['templates']:
                    template = Template.from_string(t['ink'])
                    if factor != 1:
                        template = Template.from_ink(template.ink.scale(factor))
                    templates.append(template)
                entries.append(CharTemplates(char=item['char'], templates=templates))
        except (KeyError, TypeError, ValueError, AttributeError, ZeroDivisionError) as e:
            raise TemplateFileError(f"Invalid template data: {e}") from e
        return cls(entries)

    @classmethod
    def load(cls, path: Union[str, Path], height: int) -> 'TemplateStore':
        """Load templates; a missing file is an empty store, not an error."""
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.info("No template file at %s, starting empty", path)
            return cls()
        except json.JSONDecodeError as e:
            raise TemplateFileError(f"{path}: {e}") from e
        store = cls.from_json(data, height)
        logger.info("Loaded %d templates for %d symbols from %s",
                    sum(store.counts().values()), len(store), path)
        return store

    def save(self, path: Union[str, Path], height: int):
        """Write the store, replacing the file only once fully written."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=path.name, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(self.to_json(height), f)
            os.replace(tmp_name, path)
        except BaseException:
            os.unlink(tmp_name)
            raise
        logger.info("Saved templates for %d symbols to %s", len(self), path)
