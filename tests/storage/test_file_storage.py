import json
from datetime import timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

from formengine.builder import add_field, create_empty_schema, update_metadata
from formengine.errors import StorageException
from formengine.migration import load_schema
from formengine.storages.file import FileStorage


@pytest.fixture
def storage(tmp_path, now):
    ticks = iter(now + timedelta(minutes=i) for i in range(100))
    return FileStorage(tmp_path / "forms", clock=lambda: next(ticks))


@pytest.fixture
def schema(now):
    return add_field(create_empty_schema(now), "text", now=now)


def test_save_writes_document_and_index(storage, schema, now):
    saved = storage.save(schema)

    assert saved.id == schema.id
    assert saved.saved_at == now

    document = json.loads(storage.form_path(schema.id).read_text(encoding="utf-8"))
    assert document == schema.to_document()

    index = json.loads(storage.index_path.read_text(encoding="utf-8"))
    assert [entry["id"] for entry in index] == [schema.id]
    assert index[0]["schema"] == schema.to_document()
    assert "savedAt" in index[0]


def test_load_round_trip(storage, schema):
    storage.save(schema)
    assert storage.load(schema.id) == schema


def test_load_missing_returns_none(storage):
    assert storage.load("nope") is None


def test_load_corrupt_document_returns_none(storage, schema):
    storage.save(schema)
    storage.form_path(schema.id).write_text("{not json", encoding="utf-8")

    assert storage.load(schema.id) is None


def test_load_structurally_invalid_document_returns_none(storage, schema):
    storage.save(schema)
    storage.form_path(schema.id).write_text('{"id": "x"}', encoding="utf-8")

    assert storage.load(schema.id) is None


def test_load_migrates_stored_document(storage, country_state_document):
    country_state_document["version"] = "0.9.0"
    path = storage.form_path("address-form")
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps(country_state_document), encoding="utf-8")

    loaded = storage.load("address-form")

    assert loaded.version == "1.0.0"
    assert loaded.get_field("state").conditions.rules[0].value == "US"


def test_resave_replaces_index_entry_in_place(storage, schema, now):
    other = create_empty_schema(now)
    storage.save(schema)
    storage.save(other)

    renamed = update_metadata(schema, now, title="Renamed")
    storage.save(renamed)

    forms = storage.list()
    assert [f.id for f in forms] == [schema.id, other.id]
    assert forms[0].form.metadata.title == "Renamed"
    assert forms[0].saved_at == now + timedelta(minutes=2)


def test_list_skips_corrupt_entries(storage, schema):
    storage.save(schema)
    index = json.loads(storage.index_path.read_text(encoding="utf-8"))
    index.append({"id": "broken", "schema": {"version": 1}, "savedAt": "2026-01-01T00:00:00Z"})
    index.append({"schema": {}})
    storage.index_path.write_text(json.dumps(index), encoding="utf-8")

    assert [f.id for f in storage.list()] == [schema.id]


def test_list_tolerates_corrupt_index(storage):
    storage.index_path.parent.mkdir(parents=True)
    storage.index_path.write_text("[", encoding="utf-8")

    assert storage.list() == []


def test_list_empty_directory(storage):
    assert storage.list() == []


def test_delete_removes_document_and_entry(storage, schema):
    storage.save(schema)

    storage.delete(schema.id)

    assert not storage.form_path(schema.id).exists()
    assert storage.load(schema.id) is None
    assert storage.list() == []


def test_delete_missing_is_noop(storage):
    storage.delete("missing")
    assert storage.list() == []


@pytest.mark.parametrize("form_id", ["", ".", "..", "a/b", "a\\b"])
def test_invalid_ids_are_rejected(storage, form_id):
    with pytest.raises(StorageException, match="Invalid form id"):
        storage.form_path(form_id)


def test_write_failure_raises_storage_exception(storage, schema):
    with patch.object(Path, "write_text", side_effect=OSError("disk full")):
        with pytest.raises(StorageException, match="disk full"):
            storage.save(schema)
