"""
Layered Credential Encryption
=============================

Two nested AES-256-GCM layers applied to a password before it reaches the
OS secret store.

Encryption Flow:
    password (UTF-8)
        ↓ DeviceBoundLayer   key = PBKDF2(device_id || email, salt1, 100k)
    layer-1 blob
        ↓ UserBoundLayer     key = PBKDF2(email, salt2, 200k)
    layer-2 blob  ->  secret store

Decryption runs the same layers in reverse order. A blob that fails at
layer 2 never reaches layer-1 key derivation.

Blob Format (identical for both layers, no length prefix):
    SALT (32) | NONCE (12) | CIPHERTEXT + TAG (16)

WARNING:
    - The salt/nonce sizes and iteration counts are a storage contract
    - Any change must add an explicit format version instead
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Optional

from mailvault.core.crypto.aes_gcm import (
    AES_NONCE_SIZE,
    AesGcmCipher,
    RandomSource,
    system_random,
)
from mailvault.core.crypto.kdf import (
    DEVICE_LAYER_ITERATIONS,
    SALT_LENGTH,
    USER_LAYER_ITERATIONS,
    derive_key,
)
from mailvault.core.device import DeviceIdentitySource, MachineIdentitySource
from mailvault.core.errors import InvalidData

HEADER_SIZE: Final[int] = SALT_LENGTH + AES_NONCE_SIZE  # 44


@dataclass(frozen=True, slots=True)
class EncryptedBlob:
    """
    Immutable view of one layer's output.

    Attributes:
        salt: KDF salt, public
        nonce: GCM nonce, public
        ciphertext: Encrypted data with appended authentication tag
    """

    salt: bytes
    nonce: bytes
    ciphertext: bytes

    def to_bytes(self) -> bytes:
        """Serialize as ``salt || nonce || ciphertext``."""
        return b"".join([self.salt, self.nonce, self.ciphertext])

    @classmethod
    def from_bytes(cls, data: bytes) -> "EncryptedBlob":
        """
        Split a serialized blob positionally.

        Raises:
            InvalidData: If data is shorter than the salt and nonce header
        """
        if len(data) < HEADER_SIZE:
            raise InvalidData(
                f"encrypted payload too short ({len(data)} < {HEADER_SIZE} bytes)"
            )
        return cls(
            salt=bytes(data[:SALT_LENGTH]),
            nonce=bytes(data[SALT_LENGTH:HEADER_SIZE]),
            ciphertext=bytes(data[HEADER_SIZE:]),
        )

    def __repr__(self) -> str:
        return f"EncryptedBlob(ciphertext_len={len(self.ciphertext)})"


class _ProtectionLayer:
    """
    Shared salt/nonce/KDF/seal logic for one encryption layer.

    Subclasses choose the KDF input secret and iteration count.
    """

    iterations: int = 0

    def __init__(
        self,
        cipher: Optional[AesGcmCipher] = None,
        random_source: Optional[RandomSource] = None,
    ) -> None:
        self._cipher = cipher or AesGcmCipher()
        self._random = random_source or system_random

    def _key_secret(self, user_id: str) -> bytes:
        raise NotImplementedError

    def encrypt(self, plaintext: bytes, user_id: str) -> bytes:
        """
        Encrypt plaintext under a fresh salt and nonce.

        Returns:
            ``salt || nonce || ciphertext_with_tag``
        """
        secret = self._key_secret(user_id)
        salt = self._random(SALT_LENGTH)
        nonce = self._random(AES_NONCE_SIZE)
        key = derive_key(secret, salt, self.iterations)
        ciphertext = self._cipher.seal(key, nonce, plaintext)
        return EncryptedBlob(salt=salt, nonce=nonce, ciphertext=ciphertext).to_bytes()

    def decrypt(self, data: bytes, user_id: str) -> bytes:
        """
        Re-derive the key from the recorded salt and open the ciphertext.

        Raises:
            InvalidData: If data is shorter than 44 bytes
            DecryptionFailed: If the authentication tag does not verify
        """
        blob = EncryptedBlob.from_bytes(data)
        secret = self._key_secret(user_id)
        key = derive_key(secret, blob.salt, self.iterations)
        return self._cipher.open(key, blob.nonce, blob.ciphertext)


class DeviceBoundLayer(_ProtectionLayer):
    """
    Layer 1: binds plaintext to this machine and this account.

    A blob copied to another device cannot be opened there because the
    device identifier is part of the key material and is never stored.
    """

    iterations = DEVICE_LAYER_ITERATIONS

    def __init__(
        self,
        device_source: Optional[DeviceIdentitySource] = None,
        cipher: Optional[AesGcmCipher] = None,
        random_source: Optional[RandomSource] = None,
    ) -> None:
        super().__init__(cipher=cipher, random_source=random_source)
        self._device_source = device_source or MachineIdentitySource()

    def _key_secret(self, user_id: str) -> bytes:
        # Raises EncryptionFailed when the platform has no identifier
        device_id = self._device_source.get_device_id()
        return f"{device_id}{user_id}".encode("utf-8")


class UserBoundLayer(_ProtectionLayer):
    """Layer 2: re-wraps layer-1 output keyed by the account alone."""

    iterations = USER_LAYER_ITERATIONS

    def _key_secret(self, user_id: str) -> bytes:
        return user_id.encode("utf-8")
