"""
Tests for the template store and its JSON file.
"""

import json

import pytest

from ink_editor.data.ink import Ink
from ink_editor.data.templates import (
    CharTemplates,
    Template,
    TemplateFileError,
    TemplateStore,
)


def stroke_ink(points):
    return Ink.from_arrays([[[x, y, i * 0.01] for i, (x, y) in enumerate(points)]])


def test_missing_file_is_empty_store(tmp_path):
    store = TemplateStore.load(tmp_path / "nope.json", 40)
    assert len(store) == 0


def test_save_and_load(tmp_path):
    path = tmp_path / "sub" / "templates.json"
    store = TemplateStore([
        CharTemplates('a', [Template.from_ink(stroke_ink([(0, 0), (10, 20)]))]),
        CharTemplates('b', [Template.from_ink(Ink())]),
    ])
    store.save(path, 40)
    store.save(path, 40)

    loaded = TemplateStore.load(path, 40)
    assert [ct.char for ct in loaded] == ['a', 'b']
    assert len(loaded[0].templates) == 1
    assert loaded[0].templates[0].ink.x_range == (0.0, 10.0)
    # Cleared templates are pruned on save.
    assert loaded[1].templates == []
    assert loaded.counts() == {'a': 1, 'b': 0}


def test_load_rescales_to_current_height(tmp_path):
    path = tmp_path / "templates.json"
    store = TemplateStore([CharTemplates('a', [Template.from_ink(stroke_ink([(0, 0), (10, 20)]))])])
    store.save(path, 40)

    loaded = TemplateStore.load(path, 80)
    assert loaded[0].templates[0].ink.x_range == (0.0, 20.0)
    assert loaded[0].templates[0].ink.y_range == (0.0, 40.0)


def test_schema(tmp_path):
    path = tmp_path / "templates.json"
    TemplateStore([CharTemplates('x', [Template.from_ink(stroke_ink([(1, 2)]))])]).save(path, 40)
    data = json.loads(path.read_text())
    assert data['height'] == 40
    assert data['templates'][0]['char'] == 'x'
    assert data['templates'][0]['templates'][0]['ink'] == "1.0,2.0,0.000"


@pytest.mark.parametrize("contents", [
    "not json",
    '{"templates": [{"char": "a"}]}',
    '{"templates": [{"char": "a", "templates": [{"ink": "1,2"}]}]}',
])
def test_malformed_file(tmp_path, contents):
    path = tmp_path / "templates.json"
    path.write_text(contents)
    with pytest.raises(TemplateFileError):
        TemplateStore.load(path, 40)


def test_add_template():
    store = TemplateStore()
    store.seed("ab")
    assert store.add_template('a', stroke_ink([(0, 0), (1, 1)]))
    assert not store.add_template('z', stroke_ink([(0, 0), (1, 1)]))
    assert store.counts() == {'a': 1, 'b': 0}
    assert store.entry('a').templates[0].serialized


def test_seed_keeps_existing_entries():
    store = TemplateStore([CharTemplates('b', [Template.from_ink(stroke_ink([(0, 0), (1, 1)]))])])
    store.seed("abca")
    assert [ct.char for ct in store] == ['b', 'a', 'c']
    assert store.counts() == {'a': 0, 'b': 1, 'c': 0}
