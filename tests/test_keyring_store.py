# Tests for the OS secret store adapter
#
# Coverage:
#   - Record format: service/account/base64 value
#   - Overwrite semantics
#   - Missing entries, backend failures and malformed values
#   - Process-wide keyring resolution when no backend is injected

import base64

import keyring
import pytest
from keyring.errors import KeyringError as BackendError

from mailvault.core.errors import InvalidData, KeyringError
from mailvault.core.storage.keyring_store import DEFAULT_SERVICE_NAME, SecretStoreAdapter

from conftest import USER, MemoryKeyring, RejectingKeyring


class BrokenKeyring(MemoryKeyring):
    def get_password(self, service, username):
        raise BackendError("dbus connection lost")

    def delete_password(self, service, username):
        raise BackendError("dbus connection lost")


def test_service_name_constant():
    assert DEFAULT_SERVICE_NAME == "email-manager-2925"


def test_put_writes_padded_standard_base64(store, backend):
    blob = b"\xfb\xff" + b"x" * 45
    store.put(USER, blob)
    raw = backend.entries[(DEFAULT_SERVICE_NAME, USER)]
    assert raw == base64.standard_b64encode(blob).decode("ascii")
    assert raw.endswith("=")
    assert "+" in raw or "/" in raw


def test_get_returns_stored_bytes(store):
    store.put(USER, b"\x00\x01\x02layer2")
    assert store.get(USER) == b"\x00\x01\x02layer2"


def test_put_overwrites_previous_value(store):
    store.put(USER, b"first")
    store.put(USER, b"second")
    assert store.get(USER) == b"second"


def test_entries_are_per_account(store):
    store.put(USER, b"one")
    store.put("b@2925.com", b"two")
    assert store.get(USER) == b"one"
    assert store.get("b@2925.com") == b"two"


def test_get_missing_entry_raises_keyring_error(store):
    with pytest.raises(KeyringError):
        store.get(USER)


def test_get_invalid_base64_raises_invalid_data(store, backend):
    backend.set_password(DEFAULT_SERVICE_NAME, USER, "not*base64!")
    with pytest.raises(InvalidData):
        store.get(USER)


def test_get_truncated_base64_raises_invalid_data(store, backend):
    backend.set_password(DEFAULT_SERVICE_NAME, USER, "QUJDRA")
    with pytest.raises(InvalidData):
        store.get(USER)


def test_put_rejected_by_backend_raises_keyring_error():
    store = SecretStoreAdapter(backend=RejectingKeyring())
    with pytest.raises(KeyringError) as exc_info:
        store.put(USER, b"blob")
    assert isinstance(exc_info.value.__cause__, BackendError)


def test_get_backend_failure_raises_keyring_error():
    with pytest.raises(KeyringError):
        SecretStoreAdapter(backend=BrokenKeyring()).get(USER)


def test_delete_removes_entry(store, backend):
    store.put(USER, b"blob")
    store.delete(USER)
    assert (DEFAULT_SERVICE_NAME, USER) not in backend.entries
    with pytest.raises(KeyringError):
        store.get(USER)


def test_delete_missing_entry_raises_keyring_error(store):
    with pytest.raises(KeyringError):
        store.delete(USER)


def test_delete_backend_failure_raises_keyring_error():
    with pytest.raises(KeyringError):
        SecretStoreAdapter(backend=BrokenKeyring()).delete(USER)


def test_contains(store, backend):
    assert store.contains(USER) is False
    backend.set_password(DEFAULT_SERVICE_NAME, USER, "not*base64!")
    assert store.contains(USER) is True


def test_contains_backend_failure_raises_keyring_error():
    with pytest.raises(KeyringError):
        SecretStoreAdapter(backend=BrokenKeyring()).contains(USER)


def test_custom_service_name_isolates_entries(backend):
    first = SecretStoreAdapter(service_name="svc-a", backend=backend)
    second = SecretStoreAdapter(service_name="svc-b", backend=backend)
    first.put(USER, b"a")
    with pytest.raises(KeyringError):
        second.get(USER)


def test_empty_service_name_rejected():
    with pytest.raises(ValueError):
        SecretStoreAdapter(service_name="")


def test_default_backend_resolved_from_keyring(monkeypatch):
    memory = MemoryKeyring()
    monkeypatch.setattr(keyring, "get_keyring", lambda: memory)
    store = SecretStoreAdapter()
    store.put(USER, b"blob")
    assert (DEFAULT_SERVICE_NAME, USER) in memory.entries
    assert store.get(USER) == b"blob"


def test_repr_has_no_entries(store):
    store.put(USER, b"blob")
    assert "blob" not in repr(store)
    assert DEFAULT_SERVICE_NAME in repr(store)
