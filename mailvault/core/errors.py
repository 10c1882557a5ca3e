"""
Credential Error Taxonomy
=========================

Four mutually exclusive failure kinds raised by the protection pipeline.

Kinds:
    EncryptionFailed  - cipher/KDF setup or device identity lookup failed
                        before anything was written. Retry after fixing the
                        platform condition.
    DecryptionFailed  - AEAD authentication failed (wrong device, wrong user,
                        or tampered data). Re-collect the password.
    KeyringError      - the OS secret store rejected the call or holds no
                        entry. Often transient (locked keychain).
    InvalidData       - structurally malformed payload (too short, bad
                        base64, non-UTF-8 plaintext). Re-save the credential.

Security Notes:
    - Messages never carry passwords, keys, device identifiers or blob bytes
    - DecryptionFailed never says whether the key or the data was wrong
"""

from __future__ import annotations

from typing import Final


class CredentialError(Exception):
    """Base class for every failure surfaced by the credential pipeline."""

    kind: str = "CredentialError"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class EncryptionFailed(CredentialError):
    """Raised when key derivation, cipher setup or device identity fails."""

    kind = "EncryptionFailed"


class DecryptionFailed(CredentialError):
    """
    Raised when an authentication tag does not verify.

    This is a HARD FAILURE - the credential material is unusable.
    """

    kind = "DecryptionFailed"


class KeyringError(CredentialError):
    """Raised when the platform secret store rejects an operation."""

    kind = "KeyringError"


class InvalidData(CredentialError):
    """Raised when a stored payload is structurally malformed."""

    kind = "InvalidData"


# Single message for every tag failure so callers cannot build an oracle
AUTHENTICATION_FAILED: Final[str] = "authentication failed"

ERROR_KINDS: Final[tuple[type[CredentialError], ...]] = (
    EncryptionFailed,
    DecryptionFailed,
    KeyringError,
    InvalidData,
)
