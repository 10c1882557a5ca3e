"""
Core module - Contains configuration, logging, errors and the protection pipeline.
"""

from mailvault.core.config import SecureConfig
from mailvault.core.errors import (
    CredentialError,
    DecryptionFailed,
    EncryptionFailed,
    InvalidData,
    KeyringError,
)
from mailvault.core.logging import SecureLogFilter, get_secure_logger, mask_account
from mailvault.core.protector import CredentialProtector

__all__ = [
    "SecureConfig",
    "CredentialError",
    "DecryptionFailed",
    "EncryptionFailed",
    "InvalidData",
    "KeyringError",
    "SecureLogFilter",
    "get_secure_logger",
    "mask_account",
    "CredentialProtector",
]
