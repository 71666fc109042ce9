"""
Tests for the editor shell: tabs, template authoring and document I/O.
"""

import pytest
from conftest import carat_ink, glyph, scratch_ink, strike_ink

from ink_editor.configs.editor_config import EditorConfig
from ink_editor.data.ink import Ink
from ink_editor.data.templates import TemplateStore
from ink_editor.data.text_buffer import TextBuffer
from ink_editor.model.editor import (
    Editor,
    EditTab,
    MetaTab,
    Side,
    TemplateTab,
    suggestions,
)


@pytest.fixture
def config(tmp_path):
    return EditorConfig(char_height=60, char_width=40,
                        template_path=tmp_path / "config" / "templates.json")


@pytest.fixture
def editor(config, store):
    return Editor(config, document="hello", templates=store)


# =============================================================================
# Templates
# =============================================================================

def test_missing_template_file_seeds_alphabet(config):
    editor = Editor(config)
    editor.load_templates()
    assert editor.shared.templates.get(0).char == 'a'
    assert editor.shared.templates.entry('~') is not None
    assert all(count == 0 for count in editor.shared.templates.counts().values())


def test_loaded_templates_survive_seeding(config, store):
    store.save(config.template_path, 60)
    editor = Editor(config)
    editor.load_templates()
    assert len(editor.shared.templates.entry('h').templates) == 1
    assert editor.shared.templates.entry('a').templates == []
    assert 'h' in editor.shared.char_recognizer.chars


def test_template_authoring_round_trip(config):
    editor = Editor(config)
    editor.load_templates()
    editor.switch_tab(TemplateTab())

    editor.write(0, glyph('h', col=0))
    editor.write(0, glyph('i', col=2))
    templates = editor.shared.templates.get(0).templates
    assert len(templates) == 3
    assert templates[1].is_empty

    # A second glyph in the same column adds strokes to that template.
    editor.write(0, glyph('i', col=0))
    assert len(templates[0].ink.strokes) == 2

    editor.write(0, scratch_ink(2))
    assert templates[2].is_empty

    editor.switch_tab(EditTab())
    assert config.template_path.exists()
    reloaded = TemplateStore.load(config.template_path, 60)
    assert reloaded.counts()['a'] == 1
    assert len(reloaded.entry('a').templates) == 1
    assert 'a' in editor.shared.char_recognizer.chars


def test_template_strikethrough_clears_columns(config):
    editor = Editor(config)
    editor.load_templates()
    editor.switch_tab(TemplateTab())
    for col in range(3):
        editor.write(1, glyph('i', col=col))
    editor.write(1, strike_ink(5, 115))
    assert all(t.is_empty for t in editor.shared.templates.get(1).templates)


def test_template_rows_follow_offset(config):
    editor = Editor(config)
    editor.load_templates()
    editor.switch_tab(TemplateTab())

    editor.swipe(Side.BOTTOM)
    assert editor.template_offset == 0
    editor.swipe(Side.TOP)
    assert editor.template_offset == editor.metrics.rows - 1

    editor.write(0, glyph('h'))
    assert editor.shared.templates.get(editor.template_offset).templates
    editor.swipe(Side.BOTTOM)
    assert editor.template_offset == 0


def test_corrupt_template_file_is_reported(config):
    config.template_path.parent.mkdir(parents=True)
    config.template_path.write_text("{", 'utf-8')
    editor = Editor(config)
    assert editor.report_error(editor.load_templates) is None
    assert editor.error_string.startswith("Error:")


# =============================================================================
# Editing
# =============================================================================

def test_edit_tab_writes_and_undoes(editor):
    editor.write(0, strike_ink(45, 125))
    assert editor.text.buffer.content_string() == "hlo"
    assert editor.dirty
    assert editor.undo()
    assert editor.text.buffer.content_string() == "hello"


def test_undo_outside_edit_tab(editor):
    editor.write(0, strike_ink(45, 125))
    editor.switch_tab(TemplateTab())
    assert not editor.undo()


def test_swipe_pages_document(editor):
    editor.swipe(Side.LEFT)
    assert editor.text.origin == (0, 25)
    editor.swipe(Side.RIGHT)
    assert editor.text.origin == (0, 0)
    editor.swipe(Side.TOP)
    assert editor.text.origin == (22, 0)


def test_selection_survives_tab_switch(editor):
    editor.write(0, carat_ink(1))
    editor.switch_tab(TemplateTab())
    editor.switch_tab(EditTab())
    assert editor.text.selection.carat.coord == (0, 1)


# =============================================================================
# Documents
# =============================================================================

def test_save_and_open(editor, config, store, tmp_path):
    path = tmp_path / "doc.txt"
    assert not editor.save()

    editor.path = path
    editor.dirty = True
    assert editor.save()
    assert not editor.dirty
    assert path.read_text('utf-8') == "hello"

    other = Editor(config, templates=store)
    other.open(path)
    assert other.path == path
    assert other.text.buffer.content_string() == "hello"


def test_open_missing_file_keeps_document(editor, tmp_path):
    editor.open(tmp_path / "missing.txt")
    assert editor.error_string.startswith("Error:")
    assert editor.path is None
    assert editor.text.buffer.content_string() == "hello"


def test_save_to_missing_directory_fails(editor, tmp_path):
    editor.path = tmp_path / "nope" / "doc.txt"
    assert not editor.save()
    assert editor.error_string.startswith("Error:")


def test_rename_through_meta_tab(editor, tmp_path):
    editor.path = tmp_path / "doc.txt"
    tab = editor.meta_tab()
    assert tab.path_window.buffer.content_string() == str(tmp_path / "doc.txt")
    assert tab.path_window.dimensions == (1, editor.metrics.cols)

    editor.switch_tab(tab)
    tab.path_window.buffer = TextBuffer.from_string(str(tmp_path / "renamed.txt"))
    editor.rename()
    assert editor.path == tmp_path / "renamed.txt"
    assert editor.dirty
    assert isinstance(editor.tab, EditTab)
    assert editor.text.buffer.content_string() == "hello"


def test_new_document(editor, tmp_path):
    editor.switch_tab(editor.meta_tab())
    editor.tab.path_window.buffer = TextBuffer.from_string(str(tmp_path / "fresh.txt"))
    editor.new()
    assert editor.path == tmp_path / "fresh.txt"
    assert editor.text.buffer.content_string() == ""


def test_meta_tab_suggestions(editor, tmp_path):
    for name in ["alpha.txt", "alps.txt", "beta.txt"]:
        (tmp_path / name).write_text("", 'utf-8')
    editor.path = tmp_path / "al"
    tab = editor.meta_tab()
    assert tab.suggested == [tmp_path / "alpha.txt", tmp_path / "alps.txt"]

    editor.switch_tab(tab)
    editor.write(0, Ink())
    assert isinstance(editor.tab, MetaTab)
    assert editor.tab.suggested == [tmp_path / "alpha.txt", tmp_path / "alps.txt"]


def test_suggestions_edge_cases(tmp_path):
    assert suggestions("relative/path") == []
    with pytest.raises(OSError):
        suggestions(str(tmp_path / "missing" / "x"))
    assert suggestions(str(tmp_path) + "/") == []
