import json
import os
import subprocess
import sys

import pytest

from dressshop.storage import JsonFileRepository, MemoryRepository, create_repository
from dressshop.utils.config import StorageSettings
from dressshop.utils.exceptions import StorageError


@pytest.fixture(params=["memory", "json"])
def repo(request, tmp_path):
    if request.param == "memory":
        return MemoryRepository()
    return JsonFileRepository(tmp_path / "data")


def test_insert_assigns_incrementing_ids(repo):
    first = repo.insert("products", {"title": "A"})
    second = repo.insert("products", {"title": "B"})
    assert (first["id"], second["id"]) == (1, 2)
    assert repo.get("products", 2)["title"] == "B"
    assert repo.get("products", "1")["title"] == "A"


def test_ids_are_not_reused_after_delete(repo):
    repo.insert("cart_items", {"product_id": 1})
    repo.delete("cart_items", 1)
    assert repo.insert("cart_items", {"product_id": 1})["id"] == 2


def test_find_matches_every_criterion(repo):
    repo.insert("cart_items", {"product_id": 1, "color": "Pink", "size": None})
    repo.insert("cart_items", {"product_id": 1, "color": None, "size": None})
    assert len(repo.find("cart_items", product_id=1)) == 2
    match = repo.find_one("cart_items", product_id=1, color=None, size=None)
    assert match["id"] == 2


def test_update_delete_clear(repo):
    repo.insert("orders", {"order_number": "DRS-AAAAAA"})
    assert repo.update("orders", 1, {"order_number": "DRS-BBBBBB"})["order_number"] == "DRS-BBBBBB"
    assert repo.update("orders", 99, {"x": 1}) is None
    assert repo.delete("orders", 1) is True
    assert repo.delete("orders", 1) is False
    repo.insert("orders", {})
    repo.insert("orders", {})
    assert repo.clear("orders") == 2
    assert repo.count("orders") == 0


def test_records_returned_are_copies(repo):
    record = repo.insert("products", {"images": ["a.jpg"]})
    record["images"].append("b.jpg")
    assert repo.get("products", 1)["images"] == ["a.jpg"]


def test_failed_transaction_leaves_no_changes(repo):
    repo.insert("cart_items", {"product_id": 1})
    with pytest.raises(RuntimeError):
        with repo.transaction():
            repo.insert("orders", {"order_number": "DRS-XXXXXX"})
            repo.clear("cart_items")
            raise RuntimeError("boom")
    assert repo.count("orders") == 0
    assert repo.count("cart_items") == 1


def test_string_keys_for_sessions(repo):
    repo.insert("sessions", {"token": "abc", "user_id": 1}, key="abc")
    assert repo.get("sessions", "abc")["user_id"] == 1
    with pytest.raises(StorageError):
        repo.insert("sessions", {"token": "abc", "user_id": 2}, key="abc")


def test_collection_access_needs_a_transaction(repo):
    with pytest.raises(StorageError, match="No active transaction"):
        repo._collection("orders")


def test_unknown_collection_is_rejected(repo):
    with pytest.raises(StorageError):
        repo.all("widgets")


def test_json_repository_survives_reload(tmp_path):
    data_dir = tmp_path / "data"
    JsonFileRepository(data_dir).insert("users", {"username": "admin"})

    reloaded = JsonFileRepository(data_dir)
    assert reloaded.find_one("users", username="admin")["id"] == 1
    assert reloaded.insert("users", {"username": "second"})["id"] == 2

    payload = json.loads((data_dir / "users.json").read_text(encoding="utf-8"))
    assert payload["next_id"] == 3
    assert set(payload["records"]) == {"1", "2"}
    assert not (data_dir / ".dressshop.lock").exists()


def test_json_repository_rejects_corrupt_file(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "orders.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError):
        JsonFileRepository(data_dir).all("orders")
    assert not (data_dir / ".dressshop.lock").exists()


def test_json_lock_timeout_raises_storage_error(tmp_path):
    data_dir = tmp_path / "data"
    repo = JsonFileRepository(data_dir, lock_timeout_seconds=0.1)
    (data_dir / ".dressshop.lock").write_text(str(os.getpid()), encoding="utf-8")
    with pytest.raises(StorageError):
        repo.all("orders")
    assert (data_dir / ".dressshop.lock").exists()


def test_json_lock_left_by_dead_process_is_reclaimed(tmp_path):
    finished = subprocess.Popen([sys.executable, "-c", "pass"])
    finished.wait()
    data_dir = tmp_path / "data"
    repo = JsonFileRepository(data_dir, lock_timeout_seconds=0.1)
    (data_dir / ".dressshop.lock").write_text(str(finished.pid), encoding="utf-8")

    assert repo.insert("orders", {"order_number": "DRS-AAAAAA"})["id"] == 1
    assert not (data_dir / ".dressshop.lock").exists()


def test_create_repository_selects_backend(tmp_path):
    assert isinstance(create_repository(StorageSettings(backend="memory")), MemoryRepository)
    json_repo = create_repository(StorageSettings(backend="json", data_dir=str(tmp_path / "d")))
    assert isinstance(json_repo, JsonFileRepository)
