"""
Key Derivation
==============

PBKDF2-HMAC-SHA256 key derivation for the protection layers.

The iteration counts are part of the stored-blob format: changing either
one makes every previously saved credential unreadable.
"""

from __future__ import annotations

from typing import Final

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

KEY_LENGTH: Final[int] = 32  # 256 bits for AES-256
SALT_LENGTH: Final[int] = 32

DEVICE_LAYER_ITERATIONS: Final[int] = 100_000
USER_LAYER_ITERATIONS: Final[int] = 200_000


def derive_key(secret: bytes, salt: bytes, iterations: int) -> bytes:
    """
    Derive a 256-bit key using PBKDF2-HMAC-SHA256.

    Args:
        secret: Input keying material (device and/or user identity bytes)
        salt: 32-byte random salt recorded next to the ciphertext
        iterations: PBKDF2 round count

    Returns:
        32-byte derived key

    Deterministic: identical inputs always yield the identical key.
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(secret)
