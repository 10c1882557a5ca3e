"""
Machine Identity
================

Reads the platform's stable machine identifier for device binding.

Identifier Sources:
- Windows: MachineGuid registry value
- Linux: /var/lib/dbus/machine-id, then /etc/machine-id
- macOS: IOPlatformUUID from ioreg
- FreeBSD/OpenBSD: /etc/hostid, then kenv smbios.system.uuid

Security Properties:
- The identifier is only ever used as KDF input
- It is never stored, logged or returned in error messages

WARNING:
- Identifiers change on OS reinstall; stored credentials then become
  unreadable and must be re-entered
- Sandboxed environments may hide the identifier entirely
"""

from __future__ import annotations

import platform
import re
import subprocess
from pathlib import Path
from typing import Final, Optional, Protocol, Sequence

from mailvault.core.errors import EncryptionFailed

LINUX_MACHINE_ID_PATHS: Final[tuple[Path, ...]] = (
    Path("/var/lib/dbus/machine-id"),
    Path("/etc/machine-id"),
)
BSD_HOSTID_PATH: Final[Path] = Path("/etc/hostid")
COMMAND_TIMEOUT_SECONDS: Final[int] = 5


class DeviceIdentitySource(Protocol):
    """Anything that can supply a stable per-device identifier."""

    def get_device_id(self) -> str:
        """Return the identifier or raise EncryptionFailed."""
        ...


class MachineIdentitySource:
    """
    OS-aware machine identifier lookup.

    Usage:
        source = MachineIdentitySource()
        device_id = source.get_device_id()

    The lookup has no side effects and is repeated on every call.
    """

    __slots__ = ("_platform", "_linux_paths")

    def __init__(
        self,
        system: Optional[str] = None,
        linux_paths: Sequence[Path] = LINUX_MACHINE_ID_PATHS,
    ) -> None:
        """
        Args:
            system: Platform name override (defaults to platform.system())
            linux_paths: Candidate machine-id files, in priority order
        """
        self._platform = (system or platform.system()).lower()
        self._linux_paths = tuple(linux_paths)

    def get_device_id(self) -> str:
        """
        Get this machine's identifier.

        Raises:
            EncryptionFailed: If the platform cannot supply one
        """
        if self._platform == "windows":
            device_id = self._read_windows_guid()
        elif self._platform == "darwin":
            device_id = self._read_darwin_uuid()
        elif self._platform in ("freebsd", "openbsd", "netbsd", "dragonfly"):
            device_id = self._read_bsd_hostid()
        else:
            device_id = self._read_first_file(self._linux_paths)

        if not device_id:
            raise EncryptionFailed(
                f"unable to obtain machine identifier on {self._platform or 'unknown platform'}"
            )
        return device_id

    @staticmethod
    def _read_first_file(paths: Sequence[Path]) -> Optional[str]:
        for path in paths:
            try:
                value = path.read_text(encoding="utf-8").strip()
            except OSError:
                continue
            if value:
                return value
        return None

    @staticmethod
    def _run(command: list[str]) -> Optional[str]:
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=COMMAND_TIMEOUT_SECONDS,
            )
        except (OSError, subprocess.SubprocessError):
            return None
        if result.returncode != 0:
            return None
        return result.stdout

    def _read_windows_guid(self) -> Optional[str]:
        try:
            import winreg
        except ImportError:
            return None

        try:
            key = winreg.OpenKey(
                winreg.HKEY_LOCAL_MACHINE,
                r"SOFTWARE\Microsoft\Cryptography",
                0,
                winreg.KEY_READ | winreg.KEY_WOW64_64KEY,
            )
            try:
                machine_guid, _ = winreg.QueryValueEx(key, "MachineGuid")
            finally:
                winreg.CloseKey(key)
        except OSError:
            return None
        return str(machine_guid).strip() or None

    def _read_darwin_uuid(self) -> Optional[str]:
        output = self._run(["ioreg", "-rd1", "-c", "IOPlatformExpertDevice"])
        if not output:
            return None
        match = re.search(r'"IOPlatformUUID"\s*=\s*"([^"]+)"', output)
        return match.group(1) if match else None

    def _read_bsd_hostid(self) -> Optional[str]:
        hostid = self._read_first_file((BSD_HOSTID_PATH,))
        if hostid:
            return hostid
        output = self._run(["kenv", "-q", "smbios.system.uuid"])
        return output.strip() if output and output.strip() else None


def get_device_id() -> str:
    """
    Get the current machine's identifier.

    Convenience function for simple usage.
    """
    return MachineIdentitySource().get_device_id()
