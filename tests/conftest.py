"""Shared fixtures for inform tests."""

import json
import struct

import pytest
import snappy
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes


KEY = bytes.fromhex("e2c930683af3945e4d0d58d37a78c2a6")
MAC = bytes.fromhex("f09fc2796390")
IV = bytes.fromhex("000102030405060708090a0b0c0d0e0f")

DEVICE_INFO = {
    "mac": "f0:9f:c2:79:63:90",
    "version": "3.9.27.8537",
    "model": "U7PG2",
    "model_display": "UAP-AC-Pro-Gen2",
    "uptime": 123456,
    "hostname": "UAP-AC-Pro-Gen2",
}


def make_header(
    flags: int,
    payload_length: int,
    magic: bytes = b"TNBU",
    packet_version: int = 0,
    mac: bytes = MAC,
    iv: bytes = IV,
    payload_version: int = 1,
) -> bytes:
    return struct.pack(
        ">4sI6sH16sII",
        magic, packet_version, mac, flags, iv, payload_version, payload_length,
    )


def cbc_encrypt(key: bytes, iv: bytes, data: bytes) -> bytes:
    padder = padding.PKCS7(128).padder()
    padded = padder.update(data) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def cbc_decrypt_raw(key: bytes, iv: bytes, data: bytes) -> bytes:
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    return decryptor.update(data) + decryptor.finalize()


@pytest.fixture
def key():
    return KEY


@pytest.fixture
def device_json():
    return json.dumps(DEVICE_INFO).encode()


@pytest.fixture
def aes_snappy_packet(device_json):
    """AES-128-CBC encrypted, Snappy compressed packet built by hand."""
    body = cbc_encrypt(KEY, IV, snappy.compress(device_json))
    return make_header(0x01 | 0x04, len(body)) + body


@pytest.fixture
def plain_packet():
    """Unencrypted, uncompressed packet."""
    body = b'{"hello": "world"}'
    return make_header(0x00, len(body)) + body
