"""
Storage module - OS secret store access.
"""

from mailvault.core.storage.keyring_store import DEFAULT_SERVICE_NAME, SecretStoreAdapter

__all__ = ["DEFAULT_SERVICE_NAME", "SecretStoreAdapter"]
