"""Tests for AES payload decryption and PKCS#7 padding."""

import pytest

from inform.crypto import (
    decrypt,
    decrypt_cbc,
    decrypt_gcm,
    encrypt,
    encrypted_size,
    pkcs7_pad,
    pkcs7_unpad,
)
from inform.errors import AuthenticationFailure, InvalidKey, InvalidPadding

from conftest import IV, KEY, cbc_decrypt_raw, cbc_encrypt


# Padding

def test_unpad_strips_padding():
    assert pkcs7_unpad(b"hello" + b"\x0b" * 11) == b"hello"
    assert pkcs7_unpad(b"\x10" * 16) == b""
    assert pkcs7_unpad(b"abc\x01") == b"abc"


def test_unpad_empty():
    with pytest.raises(InvalidPadding) as exc:
        pkcs7_unpad(b"")
    assert str(exc.value) == "invalid padding: no data"


@pytest.mark.parametrize("data", [b"abc\x00", b"\x05\x05\x05\x05", b"\x11" * 16])
def test_unpad_not_padded(data):
    with pytest.raises(InvalidPadding, match="data is not padded"):
        pkcs7_unpad(data)


def test_unpad_structure_invalid():
    with pytest.raises(InvalidPadding) as exc:
        pkcs7_unpad(b"hello world!\x04\x04\x03\x04")
    assert str(exc.value) == "invalid padding: structure invalid"
    assert exc.value.stage == "unpad"


def test_pad_always_adds_a_block_boundary():
    assert pkcs7_pad(b"") == b"\x10" * 16
    assert pkcs7_pad(b"a" * 15) == b"a" * 15 + b"\x01"
    assert len(pkcs7_pad(b"a" * 16)) == 32


# Key validation

@pytest.mark.parametrize("size", [0, 8, 15, 17, 24, 32])
@pytest.mark.parametrize("aead", [False, True])
def test_invalid_key_length(size, aead):
    with pytest.raises(InvalidKey) as exc:
        decrypt(b"k" * size, IV, b"\x00" * 32, aead=aead)
    assert str(exc.value) == "invalid key: must be 16 bytes long"


def test_invalid_key_checked_before_alignment():
    with pytest.raises(InvalidKey):
        decrypt_cbc(b"short", IV, b"\x00" * 5)


# CBC

def test_cbc_decrypt():
    ciphertext = cbc_encrypt(KEY, IV, b'{"model": "U7PG2"}')
    assert decrypt(KEY, IV, ciphertext) == b'{"model": "U7PG2"}'


@pytest.mark.parametrize("size", [1, 15, 17, 33])
def test_cbc_rejects_unaligned_ciphertext(size):
    with pytest.raises(InvalidPadding) as exc:
        decrypt_cbc(KEY, IV, b"\x00" * size)
    assert exc.value.reason == "data is not padded"


def _wrong_key_with_bad_structure(ciphertext: bytes) -> bytes:
    """A wrong key whose CBC output declares 2..16 pad bytes that disagree."""
    for i in range(1, 256):
        candidate = bytes([i]) * 16
        raw = cbc_decrypt_raw(candidate, IV, ciphertext)
        n = raw[-1]
        if 2 <= n <= len(raw) and raw[-2] != n:
            return candidate
    raise AssertionError("no suitable wrong key found")


def test_cbc_wrong_key_fails_padding_structure():
    ciphertext = cbc_encrypt(KEY, IV, b'{"version": "3.9.27.8537"}' * 4)
    wrong = _wrong_key_with_bad_structure(ciphertext)

    with pytest.raises(InvalidPadding) as exc:
        decrypt(wrong, IV, ciphertext)
    assert str(exc.value) == "invalid padding: structure invalid"


def test_cbc_wrong_key_rarely_unpads():
    ciphertext = cbc_encrypt(KEY, IV, b"x" * 100)
    failures = 0
    for i in range(1, 65):
        try:
            decrypt(bytes([i]) * 16, IV, ciphertext)
        except InvalidPadding:
            failures += 1
    assert failures >= 56


# GCM

def test_gcm_round_trip():
    aad = b"header bytes"
    ciphertext = encrypt(KEY, IV, b"payload", aead=True, aad=aad)
    assert len(ciphertext) == encrypted_size(len(b"payload"), aead=True) == 32
    assert decrypt(KEY, IV, ciphertext, aead=True, aad=aad) == b"payload"


def test_gcm_uses_full_iv_as_nonce():
    ciphertext = encrypt(KEY, IV, b"payload", aead=True)
    with pytest.raises(AuthenticationFailure):
        decrypt_gcm(KEY, IV[:12], ciphertext, b"")


def test_gcm_rejects_modified_aad():
    ciphertext = encrypt(KEY, IV, b"payload", aead=True, aad=b"header")
    with pytest.raises(AuthenticationFailure) as exc:
        decrypt(KEY, IV, ciphertext, aead=True, aad=b"HEADER")
    assert exc.value.stage == "decrypt"


def test_gcm_rejects_modified_ciphertext():
    ciphertext = bytearray(encrypt(KEY, IV, b"payload", aead=True))
    ciphertext[0] ^= 0x01
    with pytest.raises(AuthenticationFailure):
        decrypt(KEY, IV, bytes(ciphertext), aead=True)


def test_gcm_rejects_wrong_key():
    ciphertext = encrypt(KEY, IV, b"payload", aead=True)
    with pytest.raises(AuthenticationFailure):
        decrypt(b"\x11" * 16, IV, ciphertext, aead=True)


def test_gcm_does_not_require_block_alignment():
    ciphertext = encrypt(KEY, IV, b"payload", aead=True)
    assert len(ciphertext) % 16 == 0
    with pytest.raises(AuthenticationFailure):
        decrypt(KEY, IV, ciphertext[:-1], aead=True)


def test_cbc_encrypt_matches_reference():
    assert encrypt(KEY, IV, b"data") == cbc_encrypt(KEY, IV, b"data")
