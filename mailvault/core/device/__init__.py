"""
MailVault Device Binding Module
===============================

Supplies the machine identifier that binds layer-1 ciphertext to a device.

Security Features:
- Identifier used only as key-derivation input
- Never persisted or logged
- Hard failure when the platform has no identifier

Components:
- machine_id.py: OS-aware identifier lookup
"""

from mailvault.core.device.machine_id import (
    DeviceIdentitySource,
    MachineIdentitySource,
    get_device_id,
)

__all__ = [
    "DeviceIdentitySource",
    "MachineIdentitySource",
    "get_device_id",
]
