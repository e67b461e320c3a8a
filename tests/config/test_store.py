"""Tests for key-value stores and store adapters."""

from __future__ import annotations

import json
import stat
from unittest.mock import patch

import msgspec
import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from bwbridge.config.keyring import KeyringStore, keyring_available
from bwbridge.config.store import (
    ENCRYPTION_KEY,
    EncryptedStoreAdapter,
    FileStore,
    MemoryStore,
    PlainStoreAdapter,
)
from bwbridge.errors.types import DecodeError, StoreError


class TestMemoryStore:
    """Tests for MemoryStore."""

    def test_get_missing_returns_none(self):
        assert MemoryStore().get_item("missing") is None

    def test_set_get_remove(self):
        store = MemoryStore()
        store.set_item("k", "v")
        assert store.get_item("k") == "v"
        store.remove_item("k")
        assert store.get_item("k") is None

    def test_remove_missing_is_noop(self):
        MemoryStore().remove_item("missing")


class TestFileStore:
    """Tests for FileStore."""

    def test_get_when_file_missing(self, tmp_path):
        assert FileStore(tmp_path / "store.json").get_item("k") is None

    def test_set_creates_file_with_private_permissions(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        store = FileStore(path)
        store.set_item("k", "v")

        assert path.exists()
        mode = path.stat().st_mode
        assert not mode & (stat.S_IRGRP | stat.S_IWGRP | stat.S_IROTH | stat.S_IWOTH)

    def test_values_persist_across_instances(self, tmp_path):
        path = tmp_path / "store.json"
        FileStore(path).set_item("k", "v")
        FileStore(path).set_item("other", "w")

        store = FileStore(path)
        assert store.get_item("k") == "v"
        assert store.get_item("other") == "w"

    def test_remove(self, tmp_path):
        store = FileStore(tmp_path / "store.json")
        store.set_item("k", "v")
        store.remove_item("k")
        assert store.get_item("k") is None

    def test_corrupt_file_raises_store_error(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json")
        with pytest.raises(StoreError):
            FileStore(path).get_item("k")

    def test_non_object_file_raises_store_error(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2]")
        with pytest.raises(StoreError):
            FileStore(path).get_item("k")

    def test_set_replaces_corrupt_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json")
        store = FileStore(path)

        store.set_item("k", "v")

        assert store.get_item("k") == "v"
        assert json.loads(path.read_text()) == {"k": "v"}

    def test_set_replaces_non_object_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2]")
        store = FileStore(path)

        store.set_item("k", "v")
        assert store.get_item("k") == "v"

    def test_remove_from_corrupt_file_is_noop(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json")

        FileStore(path).remove_item("k")
        assert path.read_text() == "{not json"

    def test_write_failure_raises_store_error(self, tmp_path):
        store = FileStore(tmp_path / "store.json")
        with patch("pathlib.Path.write_text", side_effect=OSError("disk full")):
            with pytest.raises(StoreError, match="disk full"):
                store.set_item("k", "v")


class TestPlainStoreAdapter:
    """Tests for PlainStoreAdapter."""

    def test_stores_plain_json(self):
        backing = MemoryStore()
        adapter = PlainStoreAdapter(backing)
        adapter.write("k", {"token": "abc"})

        assert msgspec.json.decode(backing.get_item("k")) == {"token": "abc"}
        assert adapter.read("k") == {"token": "abc"}

    def test_has_no_cipher(self):
        assert PlainStoreAdapter(MemoryStore()).cipher is None

    def test_read_missing(self):
        assert PlainStoreAdapter(MemoryStore()).read("k") is None

    def test_read_corrupt_raises_decode_error(self):
        adapter = PlainStoreAdapter(MemoryStore({"k": "{broken"}))
        with pytest.raises(DecodeError):
            adapter.read("k")


class TestEncryptedStoreAdapter:
    """Tests for EncryptedStoreAdapter."""

    def test_round_trip(self, store):
        store.write("k", {"clientId": "abc", "masterPassword": "pw"})
        assert store.read("k") == {"clientId": "abc", "masterPassword": "pw"}

    def test_stored_value_is_encrypted(self, store, memory_store):
        store.write("k", {"masterPassword": "hunter2"})
        raw = memory_store.get_item("k")
        assert "hunter2" not in raw
        assert set(msgspec.json.decode(raw)) == {"iv", "content"}

    def test_passphrase_generated_lazily_and_persisted(self, memory_store):
        adapter = EncryptedStoreAdapter(memory_store, install_id="node-7")
        assert memory_store.get_item(ENCRYPTION_KEY) is None

        adapter.write("k", {"v": 1})
        assert memory_store.get_item(ENCRYPTION_KEY) == "bwbridge-node-7"

    def test_passphrase_reused_by_new_adapter(self, memory_store):
        EncryptedStoreAdapter(memory_store).write("k", {"v": 1})
        passphrase = memory_store.get_item(ENCRYPTION_KEY)

        reopened = EncryptedStoreAdapter(memory_store)
        assert reopened.read("k") == {"v": 1}
        assert memory_store.get_item(ENCRYPTION_KEY) == passphrase

    def test_write_over_corrupt_file_store(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json")
        adapter = EncryptedStoreAdapter(FileStore(path), install_id="node-7")

        adapter.write("k", {"v": 1})

        assert adapter.read("k") == {"v": 1}
        assert json.loads(path.read_text())[ENCRYPTION_KEY] == "bwbridge-node-7"

    def test_read_missing(self, store):
        assert store.read("missing") is None

    def test_read_corrupt_raises_decode_error(self, store, memory_store):
        memory_store.set_item("k", '{"iv": "AAAA", "content": "AAAA"}')
        with pytest.raises(DecodeError):
            store.read("k")

    def test_remove(self, store, memory_store):
        store.write("k", {"v": 1})
        store.remove("k")
        assert memory_store.get_item("k") is None


class TestKeyringStore:
    """Tests for KeyringStore."""

    def test_get_item(self):
        with patch("keyring.get_password", return_value="value") as mock_get:
            assert KeyringStore().get_item("k") == "value"
            mock_get.assert_called_once_with("bwbridge", "k")

    def test_set_item(self):
        with patch("keyring.set_password") as mock_set:
            KeyringStore(service="custom").set_item("k", "v")
            mock_set.assert_called_once_with("custom", "k", "v")

    def test_remove_missing_is_ignored(self):
        with patch("keyring.delete_password", side_effect=PasswordDeleteError("gone")):
            KeyringStore().remove_item("k")

    def test_errors_become_store_errors(self):
        with patch("keyring.get_password", side_effect=KeyringError("locked")):
            with pytest.raises(StoreError, match="locked"):
                KeyringStore().get_item("k")

    def test_works_with_plain_adapter(self):
        stored: dict[str, str] = {}

        def fake_set(service, key, value):
            stored[key] = value

        def fake_get(service, key):
            return stored.get(key)

        with (
            patch("keyring.set_password", side_effect=fake_set),
            patch("keyring.get_password", side_effect=fake_get),
        ):
            adapter = PlainStoreAdapter(KeyringStore())
            adapter.write("k", {"token": "abc"})
            assert adapter.read("k") == {"token": "abc"}


class TestKeyringAvailable:
    """Tests for keyring_available."""

    def test_fail_backend_is_unavailable(self):
        from keyring.backends import fail

        with patch("keyring.get_keyring", return_value=fail.Keyring()):
            assert keyring_available() is False

    def test_real_backend_is_available(self):
        with patch("keyring.get_keyring", return_value=object()):
            assert keyring_available() is True

    def test_backend_errors_mean_unavailable(self):
        with patch("keyring.get_keyring", side_effect=RuntimeError("no dbus")):
            assert keyring_available() is False
