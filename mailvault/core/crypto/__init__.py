"""
MailVault Cryptographic Core
============================

Layered authenticated encryption for a stored mail password.

Architecture:
    1. DeviceBoundLayer: AES-256-GCM keyed by device identity + account
    2. UserBoundLayer: AES-256-GCM keyed by account, double KDF cost
    3. OS secret store (see mailvault.core.storage)

Security Properties:
    - All encryption is authenticated (AEAD)
    - Keys are derived per call and never persisted
    - Fresh salt and nonce from the OS CSPRNG on every encryption

WARNING: This module handles sensitive cryptographic material.
         Incorrect usage can compromise security.
"""

from mailvault.core.crypto.aes_gcm import AesGcmCipher, system_random
from mailvault.core.crypto.kdf import derive_key
from mailvault.core.crypto.layers import (
    DeviceBoundLayer,
    EncryptedBlob,
    UserBoundLayer,
)

__all__ = [
    "AesGcmCipher",
    "system_random",
    "derive_key",
    "DeviceBoundLayer",
    "EncryptedBlob",
    "UserBoundLayer",
]
