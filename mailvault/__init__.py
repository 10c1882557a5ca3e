"""
MailVault - Layered At-Rest Protection for Mail Credentials
===========================================================

Encrypts a mail-account password with a device-bound layer and a
user-bound layer before storing it in the OS secret store.

Security Notice:
- No secrets are logged
- Fail-closed design pattern
- Keys are derived per call and never persisted
"""

from mailvault.core.config import SecureConfig
from mailvault.core.errors import (
    CredentialError,
    DecryptionFailed,
    EncryptionFailed,
    InvalidData,
    KeyringError,
)
from mailvault.core.logging import get_secure_logger
from mailvault.core.protector import CredentialProtector

__version__ = "0.1.0"

__all__ = [
    "CredentialProtector",
    "CredentialError",
    "DecryptionFailed",
    "EncryptionFailed",
    "InvalidData",
    "KeyringError",
    "SecureConfig",
    "get_secure_logger",
    "__version__",
]
