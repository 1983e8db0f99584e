"""
Tests for the canonical document stores.
"""

import json
from unittest.mock import MagicMock

import pytest

from jsongraph.storage import (
    DocumentStore,
    EVENT_PARSE_ERROR,
    EVENT_TEXT_CHANGE,
    EVENT_VALUE_CHANGE,
    FileDocumentStore,
    MemoryDocumentStore,
    create_store,
)
from jsongraph.edit import commit_node_edit
from jsongraph.field_codec import EditingBuffer
from jsongraph.storage import file_store
from jsongraph.storage.factory import SAMPLE_DOCUMENT


class TestMemoryDocumentStore:

    @pytest.fixture
    def store(self):
        return MemoryDocumentStore('{"a": 1}')

    def test_conforms_to_protocol(self, store):
        assert isinstance(store, DocumentStore)

    def test_initial_state(self, store):
        assert store.revision == 0
        assert store.get_canonical_text() == '{"a": 1}'
        assert store.get_canonical_value() == {"a": 1}

    def test_value_is_a_copy(self, store):
        value = store.get_canonical_value()
        value["a"] = 2
        assert store.get_canonical_value() == {"a": 1}

    def test_invalid_initial_text(self):
        store = MemoryDocumentStore("{oops")
        assert store.get_canonical_text() == "{oops"
        assert store.get_canonical_value() is None

    def test_text_write_reparses_value(self, store):
        on_text, on_value = MagicMock(), MagicMock()
        store.on(EVENT_TEXT_CHANGE, on_text)
        store.on(EVENT_VALUE_CHANGE, on_value)

        assert store.set_canonical_text('{"b": 2}') == 1
        assert store.get_canonical_value() == {"b": 2}
        assert on_text.call_args[0][0].text == '{"b": 2}'
        change = on_value.call_args[0][0]
        assert change.value == {"b": 2}
        assert change.revision == 1
        assert change.suppress_edit_surface_refresh is False

    def test_invalid_text_keeps_previous_value(self, store):
        on_error, on_value = MagicMock(), MagicMock()
        store.on(EVENT_PARSE_ERROR, on_error)
        store.on(EVENT_VALUE_CHANGE, on_value)

        store.set_canonical_text('{"b": ')
        assert store.get_canonical_text() == '{"b": '
        assert store.get_canonical_value() == {"a": 1}
        assert store.revision == 1
        on_value.assert_not_called()
        assert on_error.call_args[0][0].error

    def test_suppressed_text_write_does_not_reparse(self, store):
        on_text, on_value = MagicMock(), MagicMock()
        store.on(EVENT_TEXT_CHANGE, on_text)
        store.on(EVENT_VALUE_CHANGE, on_value)

        store.set_canonical_text('{"b": 2}', suppress_edit_surface_refresh=True)
        assert store.get_canonical_value() == {"a": 1}
        assert on_text.call_args[0][0].suppress_edit_surface_refresh is True
        on_value.assert_not_called()

    def test_apply_update_is_one_revision(self, store):
        seen = []

        def on_text(change):
            # Both forms are already written when the first listener runs.
            seen.append((change.revision, store.get_canonical_text(), store.get_canonical_value()))

        store.on(EVENT_TEXT_CHANGE, on_text)
        on_value = MagicMock()
        store.on(EVENT_VALUE_CHANGE, on_value)

        rev = store.apply_update('{"c": 3}', {"c": 3}, suppress_edit_surface_refresh=True)
        assert rev == 1
        assert seen == [(1, '{"c": 3}', {"c": 3})]
        change = on_value.call_args[0][0]
        assert change.revision == 1
        assert change.suppress_edit_surface_refresh is True

    def test_set_canonical_value(self, store):
        payload = {"d": [1]}
        store.set_canonical_value(payload)
        payload["d"].append(2)
        assert store.get_canonical_value() == {"d": [1]}
        assert store.revision == 1

    def test_failing_listener_does_not_break_write(self, store):
        store.on(EVENT_VALUE_CHANGE, MagicMock(side_effect=RuntimeError("boom")))
        other = MagicMock()
        store.on(EVENT_VALUE_CHANGE, other)

        store.set_canonical_value({"x": 1})
        assert store.get_canonical_value() == {"x": 1}
        other.assert_called_once()

    def test_off_and_unknown_event(self, store):
        cb = MagicMock()
        store.on(EVENT_VALUE_CHANGE, cb)
        store.off(EVENT_VALUE_CHANGE, cb)
        store.set_canonical_value({})
        cb.assert_not_called()
        # Removing twice is harmless
        store.off(EVENT_VALUE_CHANGE, cb)
        with pytest.raises(ValueError):
            store.on("node_moved", cb)


class TestFileDocumentStore:

    def test_missing_file_starts_empty(self, tmp_path):
        store = FileDocumentStore(tmp_path / "doc.json")
        assert store.get_canonical_text() == "{}"
        assert store.get_canonical_value() == {}
        assert not (tmp_path / "doc.json").exists()

    def test_loads_existing_file(self, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text(json.dumps({"name": "Zoë"}, ensure_ascii=False), encoding="utf-8")
        store = FileDocumentStore(path)
        assert store.get_canonical_value() == {"name": "Zoë"}

    def test_writes_persist(self, tmp_path):
        path = tmp_path / "nested" / "doc.json"
        store = FileDocumentStore(path)
        store.apply_update('{"a": 1}', {"a": 1})
        assert path.read_text(encoding="utf-8") == '{"a": 1}'

        store.set_canonical_text('{"a": 2}')
        assert FileDocumentStore(path).get_canonical_value() == {"a": 2}

    def test_failed_write_leaves_file_and_memory_untouched(self, tmp_path, monkeypatch):
        path = tmp_path / "doc.json"
        path.write_text('{"a": 1}', encoding="utf-8")
        store = FileDocumentStore(path)

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(file_store.os, "replace", fail_replace)
        with pytest.raises(OSError):
            store.apply_update('{"a": 2}', {"a": 2})

        assert path.read_text(encoding="utf-8") == '{"a": 1}'
        assert [p.name for p in tmp_path.iterdir()] == ["doc.json"]
        assert store.revision == 0
        assert store.get_canonical_value() == {"a": 1}

    def test_failed_write_fails_the_commit(self, tmp_path, monkeypatch):
        path = tmp_path / "doc.json"
        path.write_text('{"a": 1}', encoding="utf-8")
        store = FileDocumentStore(path)
        monkeypatch.setattr(file_store.os, "replace", MagicMock(side_effect=OSError("disk full")))

        result = commit_node_edit(store, ("a",), EditingBuffer.from_text("2"))

        assert not result.ok
        assert path.read_text(encoding="utf-8") == '{"a": 1}'

    def test_invalid_file_is_still_loaded_as_text(self, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text("{broken", encoding="utf-8")
        store = FileDocumentStore(path)
        assert store.get_canonical_text() == "{broken"
        assert store.get_canonical_value() is None


class TestCreateStore:

    def test_memory_store_with_sample(self):
        store = create_store()
        assert type(store) is MemoryDocumentStore
        assert store.get_canonical_text() == SAMPLE_DOCUMENT
        assert "customer" in store.get_canonical_value()

    def test_memory_store_with_text(self):
        assert create_store(initial_text="[1]").get_canonical_value() == [1]

    def test_file_store_for_path(self, tmp_path):
        store = create_store(tmp_path / "doc.json")
        assert isinstance(store, FileDocumentStore)
        assert store.path == tmp_path / "doc.json"
