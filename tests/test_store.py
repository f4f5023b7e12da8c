# tests/test_store.py
import json

import pytest

from inventory.database import JsonFileProductStore, MemoryProductStore, open_store
from inventory.errors import StorageUnavailable

RICE = {"name": "Rice 1kg", "price": 60, "quantity": 10, "category": "Grocery"}


def test_memory_store_crud():
    s = MemoryProductStore()
    p = s.create(RICE)
    assert p == {"id": p["id"], **RICE}

    updated = s.update(p["id"], {**RICE, "quantity": 3})
    assert updated["quantity"] == 3
    assert s.list_all() == [updated]

    assert s.delete(p["id"]) is True
    assert s.delete(p["id"]) is False
    assert s.list_all() == []


def test_update_missing_returns_none():
    s = MemoryProductStore()
    assert s.update("nope", RICE) is None


def test_update_replaces_all_mutable_fields():
    s = MemoryProductStore()
    p = s.create(RICE)
    updated = s.update(p["id"], {"name": "Dal", "price": 90})
    assert updated == {"id": p["id"], "name": "Dal", "price": 90, "quantity": None, "category": None}


def test_returned_records_are_copies():
    s = MemoryProductStore()
    p = s.create(RICE)
    p["quantity"] = 999
    s.list_all()[0]["name"] = "mutated"
    assert s.list_all()[0]["quantity"] == 10
    assert s.list_all()[0]["name"] == "Rice 1kg"


def test_ids_not_reused_after_delete():
    s = MemoryProductStore()
    seen = set()
    for _ in range(20):
        p = s.create(RICE)
        assert p["id"] not in seen
        seen.add(p["id"])
        s.delete(p["id"])


def test_file_store_persists_across_reopen(tmp_path):
    path = tmp_path / "products.json"
    s = JsonFileProductStore(str(path))
    a = s.create(RICE)
    b = s.create({**RICE, "name": "Soap", "category": ""})
    s.update(a["id"], {**RICE, "quantity": 3})
    s.delete(b["id"])

    reopened = JsonFileProductStore(str(path))
    assert reopened.list_all() == [{"id": a["id"], **RICE, "quantity": 3}]
    assert json.loads(path.read_text())["products"][0]["id"] == a["id"]


def test_file_store_starts_empty_without_file(tmp_path):
    s = JsonFileProductStore(str(tmp_path / "nested" / "db.json"))
    assert s.list_all() == []
    s.create(RICE)
    assert (tmp_path / "nested" / "db.json").exists()


def test_file_store_corrupt_file_is_unavailable(tmp_path):
    path = tmp_path / "products.json"
    path.write_text("{not json")
    with pytest.raises(StorageUnavailable):
        JsonFileProductStore(str(path))

    path.write_text(json.dumps({"products": "nope"}))
    with pytest.raises(StorageUnavailable):
        JsonFileProductStore(str(path))


def test_open_store_from_url(tmp_path):
    assert type(open_store("memory://")) is MemoryProductStore

    path = tmp_path / "db.json"
    s = open_store(f"file://{path}")
    assert isinstance(s, JsonFileProductStore)
    assert s.path == str(path)

    with pytest.raises(ValueError):
        open_store("mongodb://localhost/shop")
