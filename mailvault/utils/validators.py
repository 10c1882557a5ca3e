"""
Validation Utilities
====================

Input validation for values crossing the public API.
"""

from __future__ import annotations

from typing import Final

# RFC 5321 upper bound on a forward-path address
MAX_USER_ID_LENGTH: Final[int] = 320


class ValidationError(ValueError):
    """Raised when a caller passes an argument outside the API contract."""
    pass


def _require_utf8(value: str, field_name: str) -> None:
    # Lone surrogates are valid str but cannot reach a KDF or a keyring
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValidationError(f"{field_name} is not valid UTF-8") from None


def validate_string_safe(
    value: str,
    max_length: int = 1000,
    field_name: str = "value",
) -> str:
    """
    Validate a non-empty string for use as a key derivation input and
    a keyring account name.

    Raises:
        ValidationError: If the value is not a string, is empty, is longer
            than max_length, contains a NUL or cannot be encoded as UTF-8
    """
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")

    if not value:
        raise ValidationError(f"{field_name} cannot be empty")

    if len(value) > max_length:
        raise ValidationError(
            f"{field_name} must be at most {max_length} characters"
        )

    # Null bytes break several keyring backends
    if "\x00" in value:
        raise ValidationError(f"{field_name} contains invalid characters")

    _require_utf8(value, field_name)
    return value


def validate_user_id(value: str) -> str:
    """Validate an account identifier (the user's email address)."""
    return validate_string_safe(
        value,
        max_length=MAX_USER_ID_LENGTH,
        field_name="user_id",
    )


def validate_password(value: str) -> str:
    """Validate a password before encryption. Content is never echoed."""
    if not isinstance(value, str):
        raise ValidationError("password must be a string")
    _require_utf8(value, "password")
    return value
