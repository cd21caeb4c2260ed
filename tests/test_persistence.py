# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for keyed stores, Workspace and configuration."""

import json
import logging

import pytest

from page_treestore import (
    DocumentEditor,
    JsonFileStore,
    MemoryStore,
    RehydrationError,
    StorageError,
    Workspace,
    to_plain,
)
from page_treestore.config import Config, StorageConfig, load_config


@pytest.fixture(params=['memory', 'json'])
def store(request, tmp_path):
    if request.param == 'memory':
        return MemoryStore()
    return JsonFileStore(tmp_path / 'documents.json')


class TestKeyedStore:
    """Tests shared by every KeyedStore."""

    def test_isolation_between_keys(self, store, make_page):
        """Test save/clear of one key leaves the others alone."""
        t1 = to_plain(make_page('docA'))
        t2 = to_plain(make_page('docB'))
        store.save('docA', t1)
        store.save('docB', t2)
        assert store.load('docA') == t1

        store.clear('docA')

        assert store.load('docA') is None
        assert store.load('docB') == t2

    def test_missing_key_is_absent(self, store):
        """Test loading a missing key gives None."""
        assert store.load('nothing') is None
        store.clear('nothing')
        assert store.keys() == []

    def test_save_replaces(self, store):
        """Test saving twice keeps the last tree."""
        store.save('a', {'id': 'a', 'v': 1})
        store.save('a', {'id': 'a', 'v': 2})
        assert store.load('a') == {'id': 'a', 'v': 2}
        assert len(store) == 1

    def test_keys_and_container_protocol(self, store):
        """Test keys(), in, iteration and len."""
        store.save('a', {'id': 'a'})
        store.save('b', {'id': 'b'})
        assert store.keys() == ['a', 'b']
        assert 'a' in store
        assert 'z' not in store
        assert list(store) == ['a', 'b']
        assert len(store) == 2

    def test_loaded_copy_is_independent(self, store):
        """Test mutating a loaded tree does not change the stored one."""
        store.save('a', {'id': 'a', 'children': {}})
        loaded = store.load('a')
        loaded['children']['x'] = {}
        assert store.load('a') == {'id': 'a', 'children': {}}

    def test_saved_tree_is_snapshotted(self, store):
        """Test mutating the saved object afterwards does not leak in."""
        plain = {'id': 'a', 'children': {}}
        store.save('a', plain)
        plain['children']['x'] = {}
        assert store.load('a') == {'id': 'a', 'children': {}}


class TestJsonFileStore:
    """Tests specific to the JSON file store."""

    def test_file_layout(self, tmp_path):
        """Test the file holds one object keyed by id."""
        path = tmp_path / 'documents.json'
        store = JsonFileStore(path)
        store.save('home', {'id': 'home'})
        assert json.loads(path.read_text(encoding='utf-8')) == {'home': {'id': 'home'}}

    def test_creates_parent_directories(self, tmp_path):
        """Test the first write creates missing directories."""
        path = tmp_path / 'deep' / 'dir' / 'documents.json'
        JsonFileStore(path).save('home', {'id': 'home'})
        assert path.exists()

    def test_no_temp_files_left(self, tmp_path):
        """Test writes leave only the data file behind."""
        store = JsonFileStore(tmp_path / 'documents.json')
        store.save('a', {'id': 'a'})
        store.save('b', {'id': 'b'})
        store.clear('a')
        assert [p.name for p in tmp_path.iterdir()] == ['documents.json']

    def test_corrupt_file_raises(self, tmp_path):
        """Test unreadable JSON is a storage error, not an empty store."""
        path = tmp_path / 'documents.json'
        path.write_text('{not json', encoding='utf-8')
        store = JsonFileStore(path)
        with pytest.raises(StorageError):
            store.load('home')
        with pytest.raises(StorageError):
            store.save('home', {'id': 'home'})
        assert path.read_text(encoding='utf-8') == '{not json'

    def test_non_object_file_raises(self, tmp_path):
        """Test a JSON file that is not an object is rejected."""
        path = tmp_path / 'documents.json'
        path.write_text('[1, 2]', encoding='utf-8')
        with pytest.raises(StorageError):
            JsonFileStore(path).keys()

    def test_unserializable_value_raises(self, tmp_path):
        """Test a failed write keeps the previous file."""
        path = tmp_path / 'documents.json'
        store = JsonFileStore(path)
        store.save('a', {'id': 'a'})
        with pytest.raises(StorageError):
            store.save('b', {'id': 'b', 'bad': object()})
        assert store.keys() == ['a']
        assert [p.name for p in tmp_path.iterdir()] == ['documents.json']

    def test_shared_file_between_instances(self, tmp_path):
        """Test two stores on one file see each other's writes."""
        path = tmp_path / 'documents.json'
        JsonFileStore(path).save('a', {'id': 'a'})
        assert JsonFileStore(path).load('a') == {'id': 'a'}


class TestWorkspace:
    """Tests for Workspace."""

    def test_open_missing_gives_empty(self):
        """Test an unknown id opens as an empty document."""
        ws = Workspace()
        doc = ws.open('home')
        assert doc.id == 'home'
        assert doc.rows() == []
        assert ws.load('home') is None

    def test_save_and_open(self, make_page):
        """Test a saved document opens with the same tree."""
        ws = Workspace()
        doc = make_page('home')
        plain = ws.save(doc)
        reopened = ws.open('home')
        assert to_plain(reopened) == plain
        assert [leaf.id for leaf in reopened.leaves()] == [leaf.id for leaf in doc.leaves()]
        assert ws.list_documents() == ['home']

    def test_reset(self, make_page):
        """Test reset drops the stored tree."""
        ws = Workspace()
        ws.save(make_page('home'))
        ws.save(make_page('about'))
        doc = ws.reset('home')
        assert doc.rows() == []
        assert ws.load('home') is None
        assert ws.load('about') is not None

    def test_delete(self, make_page):
        """Test delete removes one document."""
        ws = Workspace()
        ws.save(make_page('home'))
        ws.delete('home')
        assert ws.list_documents() == []

    def test_new_documents_use_workspace_defaults(self):
        """Test defaults are copied into each new document."""
        ws = Workspace()
        ws.defaults.palette.brand = '#0f766e'
        first = ws.new_document('a')
        first.root.global_settings.palette.brand = '#000000'
        second = ws.new_document('b')
        assert second.global_settings.palette.brand == '#0f766e'

    def test_edit(self):
        """Test edit returns an editor on the opened document."""
        ws = Workspace()
        editor = ws.edit('home')
        assert isinstance(editor, DocumentEditor)
        editor.insert_row(2)
        ws.save(editor.document)
        assert len(ws.open('home').rows()) == 1

    def test_load_with_mismatched_root_id(self, make_page, caplog):
        """Test the storage key wins over a stale root id."""
        ws = Workspace()
        ws.documents.save('home', to_plain(make_page('old')))
        with caplog.at_level(logging.WARNING):
            doc = ws.load('home')
        assert doc.id == 'home'
        assert "'old'" in caplog.text

    def test_templates(self, make_page):
        """Test saving, listing and applying a template."""
        ws = Workspace()
        source = make_page('home')
        ws.save_template('landing', source)
        assert ws.list_templates() == ['landing']
        assert ws.load_template('landing')['id'] == 'home'

        seeded = ws.apply_template('landing', 'promo')

        assert seeded.id == 'promo'
        assert [r.id for r in seeded.rows()] == [r.id for r in source.rows()]
        assert seeded.leaves()[0].text == 'Hello'
        assert seeded.global_settings.palette.brand == '#123456'
        assert ws.list_documents() == []

    def test_missing_template(self):
        """Test applying a missing template gives None."""
        ws = Workspace()
        assert ws.load_template('none') is None
        assert ws.apply_template('none', 'home') is None

    def test_delete_template(self, make_page):
        """Test delete_template removes one template."""
        ws = Workspace()
        ws.save_template('a', make_page())
        ws.save_template('b', make_page())
        ws.delete_template('a')
        assert ws.list_templates() == ['b']

    def test_storage_error_propagates(self, tmp_path):
        """Test backend failures reach the caller."""
        path = tmp_path / 'documents.json'
        path.write_text('oops', encoding='utf-8')
        ws = Workspace(documents=JsonFileStore(path))
        with pytest.raises(StorageError):
            ws.open('home')

    def test_corrupt_entry_raises(self):
        """Test a stored entry that is not a tree is a rehydration error."""
        ws = Workspace()
        ws.documents.save('home', ['not', 'a', 'tree'])
        with pytest.raises(RehydrationError):
            ws.load('home')
        with pytest.raises(RehydrationError):
            ws.open('home')

    def test_corrupt_template_raises(self):
        """Test applying a template that is not a tree raises."""
        ws = Workspace()
        ws.templates.save('broken', ['not', 'a', 'tree'])
        with pytest.raises(RehydrationError):
            ws.apply_template('broken', 'home')

    def test_from_config_json(self, tmp_path, make_page):
        """Test a json backend persists across workspaces."""
        config = Config(storage=StorageConfig(backend='json', directory=tmp_path))
        Workspace.from_config(config).save(make_page('home'))
        assert (tmp_path / 'documents.json').exists()
        doc = Workspace.from_config(config).open('home')
        assert len(doc.rows()) == 3

    def test_from_config_unknown_backend(self):
        """Test unknown backends raise ValueError."""
        config = Config(storage=StorageConfig(backend='redis'))
        with pytest.raises(ValueError):
            Workspace.from_config(config)

    def test_catalog(self):
        """Test the default catalog offers three row shapes."""
        ws = Workspace()
        assert [p.label for p in ws.catalog.layouts] == ['1', '1|1', '1|1|1']
        editor = ws.edit('home')
        editor.insert_row(ws.catalog.layout('1|1'))
        leaf = editor.place_leaf(
            ws.catalog.content('image-node'), editor.document.columns()[0]
        )
        assert leaf.text == 'Image'


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in ('PAGE_TREESTORE_CONFIG', 'PAGE_TREESTORE_BACKEND', 'PAGE_TREESTORE_DIR',
                'PAGE_TREESTORE_DOCUMENTS_FILE', 'PAGE_TREESTORE_TEMPLATES_FILE',
                'PAGE_TREESTORE_PALETTE_BRAND', 'PAGE_TREESTORE_STYLING_FONT_SIZE'):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path / 'config'))
    monkeypatch.setenv('XDG_DATA_HOME', str(tmp_path / 'data'))
    return tmp_path


class TestConfig:
    """Tests for load_config."""

    def test_defaults(self, clean_env):
        """Test built-in values without file or environment."""
        config = load_config()
        assert config.storage.backend == 'memory'
        assert config.storage.directory == clean_env / 'data' / 'page-treestore'
        assert config.defaults.global_settings().palette.text == '#000000'

    def test_toml_file(self, clean_env):
        """Test values read from config.toml."""
        path = clean_env / 'config.toml'
        path.write_text(
            '[storage]\n'
            'backend = "json"\n'
            f'directory = "{(clean_env / "sites").as_posix()}"\n'
            '\n'
            '[defaults.palette]\n'
            'brand = "#0f766e"\n'
            '\n'
            '[defaults.styling]\n'
            'fontSize = "18px"\n',
            encoding='utf-8',
        )
        config = load_config(path)
        assert config.storage.backend == 'json'
        assert config.storage.documents_path == clean_env / 'sites' / 'documents.json'
        defaults = config.defaults.global_settings()
        assert defaults.palette.brand == '#0f766e'
        assert defaults.styling.font_size == '18px'

    def test_env_overrides_file(self, clean_env, monkeypatch):
        """Test PAGE_TREESTORE_* variables win over the file."""
        path = clean_env / 'config.toml'
        path.write_text('[storage]\nbackend = "json"\n', encoding='utf-8')
        monkeypatch.setenv('PAGE_TREESTORE_CONFIG', str(path))
        monkeypatch.setenv('PAGE_TREESTORE_BACKEND', 'memory')
        monkeypatch.setenv('PAGE_TREESTORE_PALETTE_BRAND', '#111111')
        monkeypatch.setenv('PAGE_TREESTORE_STYLING_FONT_SIZE', '14px')
        config = load_config()
        assert config.storage.backend == 'memory'
        defaults = config.defaults.global_settings()
        assert defaults.palette.brand == '#111111'
        assert defaults.styling.font_size == '14px'

    def test_unknown_setting_in_file_is_ignored(self, clean_env, caplog):
        """Test unknown default keys are logged and skipped."""
        path = clean_env / 'config.toml'
        path.write_text('[defaults.palette]\nglow = "#ffffff"\n', encoding='utf-8')
        with caplog.at_level(logging.WARNING):
            config = load_config(path)
        assert config.defaults.palette == {}
        assert 'glow' in caplog.text

    def test_unreadable_file_falls_back(self, clean_env, caplog):
        """Test a broken config file is logged, not raised."""
        path = clean_env / 'config.toml'
        path.write_text('[storage\n', encoding='utf-8')
        with caplog.at_level(logging.WARNING):
            config = load_config(path)
        assert config.storage.backend == 'memory'
        assert 'config.toml' in caplog.text
