import os

import pytest

from edubot.database.local_storage import LocalStorage
from edubot.errors import StorageError


def test_missing_key_returns_default(storage):
    assert storage.get("faqs") is None
    assert storage.get("faqs", []) == []


def test_set_writes_namespaced_file(storage):
    storage.set("faqs", [{"id": "1"}])

    assert (storage.root / "test_faqs.json").exists()
    assert storage.get("faqs") == [{"id": "1"}]
    assert storage.keys() == ["faqs"]


def test_failed_write_keeps_previous_value(storage):
    storage.set("conversations", [{"id": "a"}])

    with pytest.raises(StorageError):
        storage.set("conversations", [{"id": "b", "bad": object()}])

    assert storage.get("conversations") == [{"id": "a"}]
    leftovers = [p for p in os.listdir(storage.root) if p.endswith(".tmp")]
    assert leftovers == []


def test_corrupt_file_raises_storage_error(storage):
    (storage.root / "test_faqs.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        storage.get("faqs")


def test_remove(storage):
    storage.set("faqs", [])

    assert storage.remove("faqs") is True
    assert storage.remove("faqs") is False
    assert storage.get("faqs") is None


def test_namespaces_are_isolated(tmp_path):
    a = LocalStorage(str(tmp_path), namespace="a")
    b = LocalStorage(str(tmp_path), namespace="b")
    a.set("faqs", [1])

    assert b.get("faqs") is None
