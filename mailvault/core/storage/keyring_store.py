"""
OS Secret Store Adapter
=======================

Persists one opaque blob per account in the platform keyring
(Windows Credential Manager, macOS Keychain, Secret Service on Linux).

Record Format:
    service = fixed constant (DEFAULT_SERVICE_NAME)
    account = the user's email address
    value   = standard base64 (padded) of the layer-2 blob

Writes overwrite any previous value (last write wins).
"""

from __future__ import annotations

import base64
import binascii
from typing import Final, Optional

import keyring
from keyring.backend import KeyringBackend
from keyring.errors import KeyringError as BackendError

from mailvault.core.errors import InvalidData, KeyringError

DEFAULT_SERVICE_NAME: Final[str] = "email-manager-2925"


class SecretStoreAdapter:
    """
    Thin keyring wrapper mapping backend failures onto KeyringError.

    Usage:
        store = SecretStoreAdapter()
        store.put("a@2925.com", blob)
        blob = store.get("a@2925.com")
        store.delete("a@2925.com")

    A backend may be injected; otherwise the process-wide keyring
    selected by the ``keyring`` package is resolved on every call.
    """

    __slots__ = ("_service", "_backend")

    def __init__(
        self,
        service_name: str = DEFAULT_SERVICE_NAME,
        backend: Optional[KeyringBackend] = None,
    ) -> None:
        if not service_name:
            raise ValueError("service_name cannot be empty")
        self._service = service_name
        self._backend = backend

    @property
    def service_name(self) -> str:
        return self._service

    def _keyring(self) -> KeyringBackend:
        if self._backend is not None:
            return self._backend
        try:
            return keyring.get_keyring()
        except (BackendError, RuntimeError) as e:
            raise KeyringError("secret store unavailable") from e

    def put(self, user_id: str, blob: bytes) -> None:
        """
        Store blob for the account, replacing any existing entry.

        Raises:
            KeyringError: If the store is unavailable or rejects the write
        """
        encoded = base64.b64encode(blob).decode("ascii")
        backend = self._keyring()
        try:
            backend.set_password(self._service, user_id, encoded)
        except (BackendError, OSError) as e:
            raise KeyringError("failed to save entry to secret store") from e

    def get(self, user_id: str) -> bytes:
        """
        Read and decode the account's blob.

        Raises:
            KeyringError: If no entry exists or the platform call fails
            InvalidData: If the stored text is not valid base64
        """
        backend = self._keyring()
        try:
            encoded = backend.get_password(self._service, user_id)
        except (BackendError, OSError) as e:
            raise KeyringError("failed to read entry from secret store") from e

        if encoded is None:
            raise KeyringError("no entry found in secret store")

        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidData("stored entry is not valid base64") from e

    def contains(self, user_id: str) -> bool:
        """
        Check whether an entry exists for the account.

        Raises:
            KeyringError: If the platform call fails
        """
        backend = self._keyring()
        try:
            return backend.get_password(self._service, user_id) is not None
        except (BackendError, OSError) as e:
            raise KeyringError("failed to read entry from secret store") from e

    def delete(self, user_id: str) -> None:
        """
        Remove the account's entry.

        Raises:
            KeyringError: If no entry exists or the platform call fails
        """
        backend = self._keyring()
        try:
            backend.delete_password(self._service, user_id)
        except (BackendError, OSError) as e:
            raise KeyringError("failed to delete entry from secret store") from e

    def __repr__(self) -> str:
        return f"SecretStoreAdapter(service={self._service!r})"
