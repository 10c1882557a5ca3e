"""
Shared pytest fixtures for the MailVault test suite.

Fixtures below isolate tests from the host machine:
  - Secret store    -> in-memory keyring backend (never touches the OS keychain)
  - Device identity -> static identifier (no registry/ioreg/machine-id reads)
  - Logging         -> console output disabled, package logger reset per test
"""

import logging

import pytest
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError, PasswordSetError

from mailvault.core.errors import EncryptionFailed
from mailvault.core.protector import CredentialProtector
from mailvault.core.storage.keyring_store import DEFAULT_SERVICE_NAME, SecretStoreAdapter


USER = "a@2925.com"
PASSWORD = "Secret123!"


class MemoryKeyring(KeyringBackend):
    """Keyring backend holding entries in a dict keyed by (service, account)."""

    priority = 1

    def __init__(self):
        super().__init__()
        self.entries = {}

    def get_password(self, service, username):
        return self.entries.get((service, username))

    def set_password(self, service, username, password):
        self.entries[(service, username)] = password

    def delete_password(self, service, username):
        try:
            del self.entries[(service, username)]
        except KeyError:
            raise PasswordDeleteError("Password not found")


class RejectingKeyring(MemoryKeyring):
    """Backend that refuses every write, like a locked keychain."""

    def set_password(self, service, username, password):
        raise PasswordSetError("store is locked")


class StaticDeviceSource:
    """Device identity stub returning a fixed identifier and counting lookups."""

    def __init__(self, device_id="0f3c9a7e5b2d4c11a8e6f2b9d0c7a153"):
        self.device_id = device_id
        self.calls = 0

    def get_device_id(self):
        self.calls += 1
        return self.device_id


class FailingDeviceSource:
    """Device identity stub for sandboxed/unsupported platforms."""

    def __init__(self):
        self.calls = 0

    def get_device_id(self):
        self.calls += 1
        raise EncryptionFailed("unable to obtain machine identifier")


@pytest.fixture(autouse=True)
def _isolate_logging(monkeypatch):
    """Keep CLI runs from attaching console handlers that outlive a test."""
    monkeypatch.setenv("MAILVAULT_LOGGING__ENABLE_CONSOLE", "false")
    monkeypatch.setenv("MAILVAULT_LOGGING__ENABLE_FILE", "false")
    yield
    package_logger = logging.getLogger("mailvault")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def backend():
    return MemoryKeyring()


@pytest.fixture
def store(backend):
    return SecretStoreAdapter(service_name=DEFAULT_SERVICE_NAME, backend=backend)


@pytest.fixture
def device():
    return StaticDeviceSource()


@pytest.fixture
def protector(device, store):
    return CredentialProtector(device_source=device, store=store)
