# Tests for the key derivation and AES-256-GCM primitives
#
# Coverage:
#   - PBKDF2-HMAC-SHA256 known answer, determinism, salt/iteration sensitivity
#   - AES-GCM seal/open, tag size, tamper and wrong-key rejection
#   - Uniform failure message for every authentication failure
#   - Key/nonce size contract

import secrets

import pytest

from mailvault.core.crypto.aes_gcm import (
    AES_KEY_SIZE,
    AES_NONCE_SIZE,
    AES_TAG_SIZE,
    AesGcmCipher,
    system_random,
)
from mailvault.core.crypto.kdf import (
    DEVICE_LAYER_ITERATIONS,
    KEY_LENGTH,
    USER_LAYER_ITERATIONS,
    derive_key,
)
from mailvault.core.errors import AUTHENTICATION_FAILED, DecryptionFailed, EncryptionFailed


# ── Key derivation ──────────────────────────────────────────────────


def test_iteration_counts_are_fixed():
    assert DEVICE_LAYER_ITERATIONS == 100_000
    assert USER_LAYER_ITERATIONS == 200_000


def test_pbkdf2_known_answer():
    """RFC 7914 section 11 vector, first 32 bytes."""
    key = derive_key(b"passwd", b"salt", 1)
    assert key.hex() == (
        "55ac046e56e3089fec1691c22544b605f94185216dde0465e68b9d57c20dacbc"
    )


def test_derive_is_deterministic():
    salt = bytes(range(32))
    assert derive_key(b"device|user", salt, 1000) == derive_key(b"device|user", salt, 1000)


def test_derive_returns_256_bit_key():
    assert len(derive_key(b"x", b"\x00" * 32, 1)) == KEY_LENGTH == 32


def test_derive_depends_on_salt_and_iterations():
    base = derive_key(b"secret", b"\x01" * 32, 10)
    assert derive_key(b"secret", b"\x02" * 32, 10) != base
    assert derive_key(b"secret", b"\x01" * 32, 11) != base
    assert derive_key(b"secreT", b"\x01" * 32, 10) != base


# ── AES-256-GCM ─────────────────────────────────────────────────────


@pytest.fixture
def cipher():
    return AesGcmCipher()


@pytest.fixture
def key():
    return secrets.token_bytes(AES_KEY_SIZE)


@pytest.fixture
def nonce():
    return secrets.token_bytes(AES_NONCE_SIZE)


def test_seal_open_round_trip(cipher, key, nonce):
    sealed = cipher.seal(key, nonce, b"hello mailbox")
    assert len(sealed) == len(b"hello mailbox") + AES_TAG_SIZE
    assert cipher.open(key, nonce, sealed) == b"hello mailbox"


def test_seal_empty_plaintext(cipher, key, nonce):
    sealed = cipher.seal(key, nonce, b"")
    assert len(sealed) == AES_TAG_SIZE
    assert cipher.open(key, nonce, sealed) == b""


def test_open_rejects_tampered_ciphertext(cipher, key, nonce):
    sealed = bytearray(cipher.seal(key, nonce, b"payload"))
    sealed[0] ^= 0x01
    with pytest.raises(DecryptionFailed):
        cipher.open(key, nonce, bytes(sealed))


def test_wrong_key_and_tamper_report_same_reason(cipher, key, nonce):
    sealed = cipher.seal(key, nonce, b"payload")
    tampered = sealed[:-1] + bytes([sealed[-1] ^ 0x80])

    with pytest.raises(DecryptionFailed) as wrong_key:
        cipher.open(secrets.token_bytes(AES_KEY_SIZE), nonce, sealed)
    with pytest.raises(DecryptionFailed) as corrupted:
        cipher.open(key, nonce, tampered)

    assert wrong_key.value.message == corrupted.value.message == AUTHENTICATION_FAILED
    assert wrong_key.value.__cause__ is None
    assert wrong_key.value.__suppress_context__


def test_open_rejects_ciphertext_shorter_than_tag(cipher, key, nonce):
    with pytest.raises(DecryptionFailed):
        cipher.open(key, nonce, b"\x00" * (AES_TAG_SIZE - 1))


@pytest.mark.parametrize("bad_len", [0, 16, 31, 33])
def test_seal_rejects_malformed_key(cipher, nonce, bad_len):
    with pytest.raises(EncryptionFailed):
        cipher.seal(b"\x00" * bad_len, nonce, b"data")


def test_seal_rejects_malformed_nonce(cipher, key):
    with pytest.raises(EncryptionFailed):
        cipher.seal(key, b"\x00" * 8, b"data")


def test_system_random_lengths_and_uniqueness():
    values = {system_random(12) for _ in range(64)}
    assert len(values) == 64
    assert all(len(v) == 12 for v in values)
