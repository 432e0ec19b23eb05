import json
import os

import pytest

from opskins_manager.core.errors import PersistenceError
from opskins_manager.core.types import Item
from opskins_manager.io.persistence import FileStorage, cache_key


def test_cache_key_separates_accounts_and_games():
    keys = {
        cache_key("KEY", 730, 2),
        cache_key("KEY", 570, 2),
        cache_key("KEY", 730, 6),
        cache_key("OTHER", 730, 2),
    }
    assert len(keys) == 4
    assert cache_key("KEY", 730, 2) == "inventory_KEY_730_2.json"


def test_read_missing_file_returns_none(tmp_path):
    assert FileStorage(tmp_path / "inventory").read("nope.json") is None


def test_save_then_read_keeps_order(tmp_path):
    storage = FileStorage(tmp_path / "inventory")
    records = [Item(i, f"item {i}", 730, 2) for i in (3, 1, 2)]
    storage.save("k.json", records)
    assert storage.read("k.json") == [r.to_dict() for r in records]


def test_read_corrupt_file_returns_none(tmp_path):
    storage = FileStorage(tmp_path)
    storage.path_for("k.json").write_text("[{not json")
    assert storage.read("k.json") is None


def test_read_non_list_returns_none(tmp_path):
    storage = FileStorage(tmp_path)
    storage.path_for("k.json").write_text(json.dumps({"id": 1}))
    assert storage.read("k.json") is None


def test_failed_save_keeps_previous_file(tmp_path, monkeypatch):
    storage = FileStorage(tmp_path)
    storage.save("k.json", [Item(1, "A", 730, 2)])

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", boom)
    with pytest.raises(PersistenceError):
        storage.save("k.json", [Item(1, "A", 730, 2), Item(2, "B", 730, 2)])

    assert storage.read("k.json") == [{"id": 1, "name": "A", "appid": 730, "contextid": 2}]
    # no temp files left behind
    assert [p.name for p in tmp_path.iterdir()] == ["k.json"]


def test_unserializable_records_raise(tmp_path):
    storage = FileStorage(tmp_path)
    with pytest.raises(PersistenceError):
        storage.save("k.json", [object()])
    assert storage.read("k.json") is None


def test_read_non_object_entries_returns_none(tmp_path):
    storage = FileStorage(tmp_path)
    storage.path_for("k.json").write_text(json.dumps([1, None]))
    assert storage.read("k.json") is None
