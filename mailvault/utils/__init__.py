"""
Utils module - Utility functions and helpers.
"""

from mailvault.utils.validators import (
    ValidationError,
    validate_password,
    validate_string_safe,
    validate_user_id,
)

__all__ = [
    "ValidationError",
    "validate_password",
    "validate_string_safe",
    "validate_user_id",
]
