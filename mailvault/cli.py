"""
mailvault CLI
=============

Command-line front end for the credential protector.

Usage:
    mailvault save <email>              # Prompt for password and store it
    mailvault save <email> --stdin      # Read password from stdin
    mailvault show <email>              # Print the stored password
    mailvault forget <email>            # Delete the stored password
    mailvault status <email>            # Report whether a password is stored
    mailvault device-id                 # Report whether a device id is available

Exit codes:
    0  success
    1  credential error (kind printed to stderr)
    2  usage or configuration error
"""

import argparse
import getpass
import sys
from typing import Optional

from mailvault import __version__
from mailvault.core.config import SecureConfig
from mailvault.core.device import DeviceIdentitySource, MachineIdentitySource
from mailvault.core.errors import CredentialError
from mailvault.core.logging import configure_logging
from mailvault.core.protector import CredentialProtector
from mailvault.utils.validators import ValidationError


def _read_password(from_stdin: bool) -> str:
    if from_stdin:
        return sys.stdin.readline().rstrip("\r\n")
    password = getpass.getpass("Password: ")
    confirm = getpass.getpass("Confirm password: ")
    if password != confirm:
        raise ValidationError("passwords do not match")
    return password


def cmd_save(args, protector: CredentialProtector) -> int:
    """Encrypt and store a password."""
    password = _read_password(args.stdin)
    protector.protect(password, args.email)
    print(f"Saved credential for {args.email}")
    return 0


def cmd_show(args, protector: CredentialProtector) -> int:
    """Print the decrypted password."""
    print(protector.reveal(args.email))
    return 0


def cmd_forget(args, protector: CredentialProtector) -> int:
    """Delete the stored password."""
    protector.forget(args.email)
    print(f"Deleted credential for {args.email}")
    return 0


def cmd_status(args, protector: CredentialProtector) -> int:
    """Report whether a credential is stored."""
    if protector.has_credential(args.email):
        print(f"{args.email}: stored")
    else:
        print(f"{args.email}: not stored")
    return 0


def cmd_device_id(args, device_source: DeviceIdentitySource) -> int:
    """Check that a device identifier is available without printing it."""
    device_source.get_device_id()
    print("Device identifier: available")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailvault",
        description="Layered at-rest protection for mail passwords",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("save", help="Encrypt and store a password")
    p.add_argument("email", help="Account email address")
    p.add_argument("--stdin", action="store_true", help="Read password from stdin")
    p.set_defaults(func=cmd_save)

    p = subparsers.add_parser("show", help="Print the stored password")
    p.add_argument("email", help="Account email address")
    p.set_defaults(func=cmd_show)

    p = subparsers.add_parser("forget", help="Delete the stored password")
    p.add_argument("email", help="Account email address")
    p.set_defaults(func=cmd_forget)

    p = subparsers.add_parser("status", help="Report whether a password is stored")
    p.add_argument("email", help="Account email address")
    p.set_defaults(func=cmd_status)

    p = subparsers.add_parser("device-id", help="Check device identifier availability")
    p.set_defaults(func=cmd_device_id)

    return parser


def main(
    argv: Optional[list] = None,
    protector: Optional[CredentialProtector] = None,
    device_source: Optional[DeviceIdentitySource] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = SecureConfig.load()
        configure_logging(config.logging, log_dir=config.paths.log_dir)
    except (ValueError, OSError) as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        return 2

    device_source = device_source or MachineIdentitySource()

    try:
        if args.func is cmd_device_id:
            return cmd_device_id(args, device_source)
        protector = protector or CredentialProtector.from_config(config, device_source=device_source)
        return args.func(args, protector)
    except ValidationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except CredentialError as e:
        print(str(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
