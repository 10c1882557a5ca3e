"""
Secure Configuration Module
===========================

Provides immutable, environment-aware configuration with security-first defaults.

Security Features:
- Immutable configuration after initialization
- Environment variable override support
- Sensitive-looking keys are never read from the environment
- OS-aware path handling

Iteration counts and blob framing sizes are deliberately absent: they are
part of the stored-credential format and live as module constants.
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Mapping, Optional

from mailvault.core.storage.keyring_store import DEFAULT_SERVICE_NAME


_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "key", "token", "api_key",
    "private", "credential", "auth", "salt",
})

_VALID_LOG_LEVELS: Final[frozenset[str]] = frozenset({
    "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL",
})


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_default_log_dir() -> Path:
    """Get OS-appropriate default log directory."""
    system = platform.system().lower()

    if system == "windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / "MailVault" / "Logs"
    elif system == "darwin":
        return Path.home() / "Library" / "Logs" / "MailVault"
    else:  # Linux and others
        return Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state")) / "MailVault" / "logs"


@dataclass(frozen=True, slots=True)
class PathConfig:
    """Immutable path configuration with OS-aware defaults."""

    log_dir: Path = field(default_factory=_get_default_log_dir)

    def __post_init__(self) -> None:
        if not self.log_dir.is_absolute():
            raise ValueError(f"log_dir must be an absolute path: {self.log_dir}")


@dataclass(frozen=True, slots=True)
class KeyringConfig:
    """Immutable secret store configuration."""

    service_name: str = DEFAULT_SERVICE_NAME

    def __post_init__(self) -> None:
        if not self.service_name.strip():
            raise ValueError("Keyring service name cannot be empty")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "INFO"
    max_file_size_bytes: int = 1024 * 1024  # 1 MB
    backup_count: int = 3
    enable_console: bool = True
    enable_file: bool = False

    def __post_init__(self) -> None:
        if self.level.upper() not in _VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.level}")


class SecureConfig:
    """
    Centralized, immutable configuration loader with environment override support.

    Usage:
        config = SecureConfig.load()
        service = config.keyring.service_name
        level = config.logging.level
    """

    __slots__ = ("_paths", "_keyring", "_logging", "_frozen")

    def __init__(
        self,
        paths: Optional[PathConfig] = None,
        keyring: Optional[KeyringConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ) -> None:
        """Initialize configuration. Use SecureConfig.load() for standard initialization."""
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_paths", paths or PathConfig())
        object.__setattr__(self, "_keyring", keyring or KeyringConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_frozen", True)

    @property
    def paths(self) -> PathConfig:
        return self._paths

    @property
    def keyring(self) -> KeyringConfig:
        return self._keyring

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @classmethod
    def load(
        cls,
        env_prefix: str = "MAILVAULT",
        environ: Optional[Mapping[str, str]] = None,
    ) -> SecureConfig:
        """
        Load configuration with environment variable overrides.

        Environment variables are prefixed with MAILVAULT_ and use
        double underscores for nested values.

        Examples:
            MAILVAULT_LOGGING__LEVEL=DEBUG
            MAILVAULT_LOGGING__ENABLE_FILE=true
            MAILVAULT_KEYRING__SERVICE_NAME=email-manager-test
            MAILVAULT_PATHS__LOG_DIR=/custom/path

        Args:
            env_prefix: Prefix for environment variables
            environ: Mapping to read instead of os.environ

        Returns:
            Configured SecureConfig instance
        """
        env_overrides = cls._parse_env_overrides(env_prefix, environ)

        paths_kwargs: dict[str, Any] = {}
        if "paths.log_dir" in env_overrides:
            paths_kwargs["log_dir"] = Path(env_overrides["paths.log_dir"])

        keyring_kwargs: dict[str, Any] = {}
        if "keyring.service_name" in env_overrides:
            keyring_kwargs["service_name"] = env_overrides["keyring.service_name"]

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"].upper()
        if "logging.enable_console" in env_overrides:
            logging_kwargs["enable_console"] = _parse_bool(env_overrides["logging.enable_console"])
        if "logging.enable_file" in env_overrides:
            logging_kwargs["enable_file"] = _parse_bool(env_overrides["logging.enable_file"])

        return cls(
            paths=PathConfig(**paths_kwargs) if paths_kwargs else None,
            keyring=KeyringConfig(**keyring_kwargs) if keyring_kwargs else None,
            logging=LoggingConfig(**logging_kwargs) if logging_kwargs else None,
        )

    @staticmethod
    def _parse_env_overrides(
        prefix: str,
        environ: Optional[Mapping[str, str]] = None,
    ) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"
        source = os.environ if environ is None else environ

        for key, value in source.items():
            if key.startswith(prefix_upper):
                # MAILVAULT_SECTION__KEY -> section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")

                # SECURITY: Skip sensitive keys from environment
                if _is_sensitive_key(config_key.rsplit(".", 1)[-1]):
                    continue

                overrides[config_key] = value

        return overrides

    def __repr__(self) -> str:
        """Safe string representation without sensitive data."""
        return f"SecureConfig(service={self._keyring.service_name!r}, log_level={self._logging.level})"

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent modification after initialization."""
        if getattr(self, "_frozen", False):
            raise AttributeError("SecureConfig is immutable after initialization")
        object.__setattr__(self, name, value)
