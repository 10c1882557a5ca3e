"""
AES-256-GCM Authenticated Encryption
====================================

Seal/open primitive used by both protection layers.

Security Properties:
    - 256-bit key (128-bit security level)
    - 96-bit nonce (NIST recommended)
    - 128-bit authentication tag appended to the ciphertext

NIST SP 800-38D Compliance:
    - GCM mode with 96-bit IV
    - Unique nonce for each encryption under same key

WARNING:
    - Never reuse (key, nonce) pairs
    - Tag failures are reported with a single message, whatever the cause
"""

from __future__ import annotations

import secrets
from typing import Callable, Final

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from mailvault.core.errors import (
    AUTHENTICATION_FAILED,
    DecryptionFailed,
    EncryptionFailed,
)

AES_KEY_SIZE: Final[int] = 32  # 256 bits
AES_NONCE_SIZE: Final[int] = 12  # 96 bits (NIST recommended for GCM)
AES_TAG_SIZE: Final[int] = 16  # 128 bits

# Capability that returns n cryptographically secure random bytes
RandomSource = Callable[[int], bytes]


def system_random(length: int) -> bytes:
    """Return ``length`` bytes from the OS CSPRNG."""
    return secrets.token_bytes(length)


class AesGcmCipher:
    """
    AES-256-GCM Authenticated Encryption with Associated Data (AEAD).

    The cipher is stateless: key and nonce are supplied on every call and
    nothing is kept on the instance.

    Usage:
        cipher = AesGcmCipher()
        nonce = system_random(AES_NONCE_SIZE)
        sealed = cipher.seal(key, nonce, b"data")
        assert cipher.open(key, nonce, sealed) == b"data"
    """

    __slots__ = ()

    def seal(self, key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
        """
        Encrypt plaintext and append the authentication tag.

        Raises:
            EncryptionFailed: If key or nonce has the wrong size
        """
        if len(key) != AES_KEY_SIZE:
            raise EncryptionFailed(f"key must be exactly {AES_KEY_SIZE} bytes")
        if len(nonce) != AES_NONCE_SIZE:
            raise EncryptionFailed(f"nonce must be exactly {AES_NONCE_SIZE} bytes")

        try:
            return AESGCM(key).encrypt(nonce, plaintext, None)
        except (ValueError, OverflowError) as e:
            raise EncryptionFailed("cipher rejected input") from e

    def open(self, key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
        """
        Verify the tag and decrypt.

        Integrity is verified BEFORE any plaintext is returned.

        Raises:
            EncryptionFailed: If the key has the wrong size (programmer error)
            DecryptionFailed: If authentication fails for any reason
        """
        if len(key) != AES_KEY_SIZE:
            raise EncryptionFailed(f"key must be exactly {AES_KEY_SIZE} bytes")
        if len(nonce) != AES_NONCE_SIZE or len(ciphertext) < AES_TAG_SIZE:
            raise DecryptionFailed(AUTHENTICATION_FAILED)

        try:
            return AESGCM(key).decrypt(nonce, ciphertext, None)
        except InvalidTag:
            raise DecryptionFailed(AUTHENTICATION_FAILED) from None
