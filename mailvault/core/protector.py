"""
Credential Protector
====================

Fixed three-stage pipeline protecting a mail password at rest.

Save Flow:
    password
        ↓ DeviceBoundLayer.encrypt
        ↓ UserBoundLayer.encrypt
        ↓ SecretStoreAdapter.put        (last step: nothing written on failure)

Read Flow:
    SecretStoreAdapter.get
        ↓ UserBoundLayer.decrypt
        ↓ DeviceBoundLayer.decrypt
        ↓ UTF-8 decode
    password

Error Propagation:
    Every stage raises one of EncryptionFailed, DecryptionFailed,
    KeyringError or InvalidData. The protector never converts one kind
    into another and never substitutes a fallback value.

Concurrency:
    No locking. Two concurrent protect() calls for the same account race
    and the last completed write wins. Callers needing ordering must
    serialize per account.
"""

from __future__ import annotations

import logging
from typing import Optional

from mailvault.core.config import SecureConfig
from mailvault.core.crypto.aes_gcm import RandomSource
from mailvault.core.crypto.layers import DeviceBoundLayer, UserBoundLayer
from mailvault.core.device import DeviceIdentitySource
from mailvault.core.errors import CredentialError, InvalidData
from mailvault.core.logging import mask_account
from mailvault.core.storage.keyring_store import SecretStoreAdapter
from mailvault.utils.validators import validate_password, validate_user_id

logger = logging.getLogger(__name__)


class CredentialProtector:
    """
    Orchestrates layered encryption and secret-store persistence.

    Usage:
        protector = CredentialProtector()
        protector.protect("Secret123!", "a@2925.com")
        password = protector.reveal("a@2925.com")
        protector.forget("a@2925.com")

    The instance holds only its collaborators; no key, salt or plaintext
    survives a call.
    """

    __slots__ = ("_device_layer", "_user_layer", "_store")

    def __init__(
        self,
        device_source: Optional[DeviceIdentitySource] = None,
        store: Optional[SecretStoreAdapter] = None,
        random_source: Optional[RandomSource] = None,
    ) -> None:
        """
        Args:
            device_source: Machine identifier provider (platform lookup by default)
            store: Secret store adapter (process keyring by default)
            random_source: Salt/nonce generator (OS CSPRNG by default)
        """
        self._device_layer = DeviceBoundLayer(
            device_source=device_source,
            random_source=random_source,
        )
        self._user_layer = UserBoundLayer(random_source=random_source)
        self._store = store or SecretStoreAdapter()

    @classmethod
    def from_config(
        cls,
        config: Optional[SecureConfig] = None,
        device_source: Optional[DeviceIdentitySource] = None,
    ) -> CredentialProtector:
        """Build the default pipeline using the configured service name."""
        config = config or SecureConfig.load()
        store = SecretStoreAdapter(service_name=config.keyring.service_name)
        return cls(device_source=device_source, store=store)

    def protect(self, password: str, user_id: str) -> None:
        """
        Encrypt password through both layers and store the result.

        Raises:
            ValidationError: If arguments violate the API contract
            EncryptionFailed: If key setup or device identity fails
            KeyringError: If the secret store rejects the write
        """
        validate_password(password)
        validate_user_id(user_id)

        try:
            inner = self._device_layer.encrypt(password.encode("utf-8"), user_id)
            outer = self._user_layer.encrypt(inner, user_id)
            self._store.put(user_id, outer)
        except CredentialError as e:
            logger.warning("Failed to save credential for %s: %s", mask_account(user_id), e.kind)
            raise

        logger.info("Credential saved for %s", mask_account(user_id))

    def reveal(self, user_id: str) -> str:
        """
        Load and decrypt the stored password.

        Raises:
            ValidationError: If user_id violates the API contract
            KeyringError: If no entry exists or the store call fails
            InvalidData: If the payload is malformed or not UTF-8
            DecryptionFailed: If either layer fails authentication
            EncryptionFailed: If the device identity is unavailable
        """
        validate_user_id(user_id)

        try:
            outer = self._store.get(user_id)
            inner = self._user_layer.decrypt(outer, user_id)
            plaintext = self._device_layer.decrypt(inner, user_id)
            try:
                password = plaintext.decode("utf-8")
            except UnicodeDecodeError:
                raise InvalidData("decrypted credential is not valid UTF-8") from None
        except CredentialError as e:
            logger.warning("Failed to load credential for %s: %s", mask_account(user_id), e.kind)
            raise

        logger.debug("Credential loaded for %s", mask_account(user_id))
        return password

    def forget(self, user_id: str) -> None:
        """
        Delete the stored credential.

        Raises:
            ValidationError: If user_id violates the API contract
            KeyringError: If no entry exists or the store call fails
        """
        validate_user_id(user_id)

        try:
            self._store.delete(user_id)
        except CredentialError as e:
            logger.warning("Failed to delete credential for %s: %s", mask_account(user_id), e.kind)
            raise

        logger.info("Credential deleted for %s", mask_account(user_id))

    def has_credential(self, user_id: str) -> bool:
        """
        Check whether an entry exists without decrypting it.

        Raises:
            KeyringError: If the store call itself fails
        """
        validate_user_id(user_id)
        return self._store.contains(user_id)

    def __repr__(self) -> str:
        return f"CredentialProtector(store={self._store!r})"
