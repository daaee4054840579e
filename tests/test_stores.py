"""Tests for object store implementations."""

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from certstore.exceptions import NotFoundError, ObjectExistsError
from certstore.stores import FileObjectStore, MemoryObjectStore, ObjectInfo


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    """Every local backend, so they are held to the same contract."""
    if request.param == "memory":
        return MemoryObjectStore()
    return FileObjectStore(tmp_path / "objects")


def test_get_put(store):
    """Test basic get/put operations."""
    store.put("certs/a.com/cert.pem", b"cert")

    assert store.get("certs/a.com/cert.pem") == b"cert"


def test_put_overwrites(store):
    """Test that a plain put replaces existing content."""
    store.put("a", b"one")
    store.put("a", b"two")

    assert store.get("a") == b"two"


def test_get_missing(store):
    """Test that missing objects raise NotFoundError."""
    with pytest.raises(NotFoundError) as exc_info:
        store.get("missing")

    assert exc_info.value.key == "missing"


def test_put_if_absent(store):
    """Test create-if-absent semantics."""
    store.put("a.lock", b"first", if_absent=True)

    with pytest.raises(ObjectExistsError):
        store.put("a.lock", b"second", if_absent=True)

    assert store.get("a.lock") == b"first"


def test_put_if_absent_after_delete(store):
    """Test that a deleted object can be created again."""
    store.put("a.lock", b"first", if_absent=True)
    store.delete("a.lock")

    store.put("a.lock", b"second", if_absent=True)

    assert store.get("a.lock") == b"second"


def test_delete(store):
    """Test object deletion."""
    store.put("a", b"data")

    store.delete("a")

    with pytest.raises(NotFoundError):
        store.get("a")


def test_delete_missing(store):
    """Test that deleting a missing object raises NotFoundError."""
    with pytest.raises(NotFoundError):
        store.delete("missing")


def test_list(store):
    """Test prefix listing is complete and sorted."""
    store.put("acme/b.com/cert.pem", b"1")
    store.put("acme/a.com/cert.pem", b"2")
    store.put("acme/a.com.lock", b"3")
    store.put("other/x", b"4")

    assert store.list("acme/") == [
        "acme/a.com.lock",
        "acme/a.com/cert.pem",
        "acme/b.com/cert.pem",
    ]
    assert store.list("acme/a.com") == ["acme/a.com.lock", "acme/a.com/cert.pem"]
    assert len(store.list()) == 4
    assert store.list("nothing") == []


def test_stat(store):
    """Test object metadata."""
    before = datetime.now(timezone.utc) - timedelta(seconds=2)
    store.put("a", b"12345")

    info = store.stat("a")

    assert isinstance(info, ObjectInfo)
    assert info.key == "a"
    assert info.size == 5
    assert info.modified.tzinfo is not None
    assert info.modified >= before


def test_stat_missing(store):
    """Test that stat on a missing object raises NotFoundError."""
    with pytest.raises(NotFoundError):
        store.stat("missing")


def test_clear(store):
    """Test clearing all objects."""
    store.put("a", b"1")
    store.put("b/c", b"2")

    store.clear()

    assert store.list() == []


# FileObjectStore Tests


def test_file_store_persistence(tmp_path):
    """Test that FileObjectStore persists across instances."""
    store1 = FileObjectStore(tmp_path)
    store1.put("certs/a.com/cert.pem", b"cert")

    # Create second store instance (simulates process restart)
    store2 = FileObjectStore(tmp_path)

    assert store2.get("certs/a.com/cert.pem") == b"cert"
    assert (tmp_path / "certs" / "a.com" / "cert.pem").read_bytes() == b"cert"


def test_file_store_directory_creation(tmp_path):
    """Test that FileObjectStore creates its directory if it doesn't exist."""
    nested_dir = tmp_path / "nested" / "path"
    store = FileObjectStore(nested_dir)

    assert nested_dir.is_dir()

    store.put("a", b"1")
    assert store.get("a") == b"1"


@pytest.mark.parametrize("key", ["", "../escape", "a//b", "a/./b", "/abs", "a/"])
def test_file_store_rejects_bad_keys(tmp_path, key):
    """Test that keys cannot escape the store directory."""
    store = FileObjectStore(tmp_path)

    with pytest.raises(ValueError):
        store.put(key, b"x")


def test_file_store_leaves_no_temp_files(tmp_path):
    """Test that writes clean up after themselves."""
    store = FileObjectStore(tmp_path)
    store.put("a.lock", b"1", if_absent=True)
    store.put("a.lock", b"2")
    with pytest.raises(ObjectExistsError):
        store.put("a.lock", b"3", if_absent=True)

    assert sorted(p.name for p in Path(tmp_path).iterdir()) == ["a.lock"]


def test_file_store_ignores_foreign_temp_files(tmp_path):
    """Test that in-flight temp files of other writers are not listed."""
    store = FileObjectStore(tmp_path)
    store.put("a", b"1")
    (tmp_path / ".certstore-0123.tmp").write_bytes(b"partial")

    assert store.list() == ["a"]


def test_file_store_stat_uses_mtime(tmp_path):
    """Test that stat reports the file modification time."""
    store = FileObjectStore(tmp_path)
    store.put("a", b"1")
    stamp = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc).timestamp()
    os.utime(tmp_path / "a", (stamp, stamp))

    assert store.stat("a").modified == datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_file_store_directory_is_not_an_object(tmp_path):
    """Test that intermediate directories are not objects."""
    store = FileObjectStore(tmp_path)
    store.put("certs/a.com/cert.pem", b"1")

    with pytest.raises(NotFoundError):
        store.get("certs/a.com")
    with pytest.raises(NotFoundError):
        store.stat("certs")
    with pytest.raises(NotFoundError):
        store.delete("certs")


def test_file_store_file_is_not_a_directory(tmp_path):
    """Test that keys below an existing object are reported as missing."""
    store = FileObjectStore(tmp_path)
    store.put("example.com", b"1")

    with pytest.raises(NotFoundError):
        store.get("example.com/cert.pem")
    with pytest.raises(NotFoundError):
        store.stat("example.com/cert.pem")
    with pytest.raises(NotFoundError):
        store.delete("example.com/cert.pem")
