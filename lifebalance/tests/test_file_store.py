"""
Tests for FileKeyValueStore.
"""

import os
import tempfile

import pytest

from lifebalance.core.errors import StoreError
from lifebalance.store.file_store import FileKeyValueStore


def test_get_missing_key_returns_none():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FileKeyValueStore(tmpdir)

        assert store.get("lifebalance_events") is None


def test_set_get_roundtrip():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FileKeyValueStore(tmpdir)
        store.set("lifebalance_events", '[{"id":"a"}]')

        assert store.get("lifebalance_events") == '[{"id":"a"}]'
        assert os.path.exists(os.path.join(tmpdir, "lifebalance_events.json"))


def test_set_replaces_value_and_leaves_no_temp_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FileKeyValueStore(tmpdir)
        store.set("k", "one")
        store.set("k", "two")

        assert store.get("k") == "two"
        assert not os.path.exists(os.path.join(tmpdir, "k.json.tmp"))


def test_values_survive_new_instance():
    with tempfile.TemporaryDirectory() as tmpdir:
        FileKeyValueStore(tmpdir).set("k", "persisted")

        assert FileKeyValueStore(tmpdir).get("k") == "persisted"


def test_delete_and_delete_missing():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FileKeyValueStore(tmpdir)
        store.set("k", "v")
        store.delete("k")
        store.delete("k")

        assert store.get("k") is None


def test_creates_directory():
    with tempfile.TemporaryDirectory() as tmpdir:
        nested = os.path.join(tmpdir, "a", "b")
        FileKeyValueStore(nested)

        assert os.path.isdir(nested)


@pytest.mark.parametrize("key", ["../escape", "a/b", "", "space key"])
def test_invalid_keys_rejected(key):
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FileKeyValueStore(tmpdir)

        with pytest.raises(StoreError):
            store.set(key, "v")


def test_failed_write_removes_temp_file_and_keeps_old_value(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        store = FileKeyValueStore(tmpdir)
        store.set("k", "old")

        def _fail_fsync(fd):
            raise OSError("disk full")

        monkeypatch.setattr(os, "fsync", _fail_fsync)

        with pytest.raises(StoreError, match="failed to write"):
            store.set("k", "new")

        assert not os.path.exists(os.path.join(tmpdir, "k.json.tmp"))
        assert store.get("k") == "old"
