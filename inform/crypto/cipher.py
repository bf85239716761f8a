"""
Inform Payload Cipher

AES-128 decryption of inform payloads in one of two modes:

    CBC  - IV from the header, ciphertext must be block aligned
    GCM  - header IV used as nonce (its full length), the raw 40-byte
           header authenticated as associated data, 16-byte tag appended

Both modes are followed by PKCS#7 unpadding. Firmware pads before GCM
encryption too, so the unpad step is shared.

Dependencies:
- cryptography (OpenSSL backend)
"""

import logging

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..errors import AuthenticationFailure, InvalidKey, InvalidPadding
from .padding import BLOCK_SIZE, pkcs7_pad, pkcs7_unpad

logger = logging.getLogger("inform")

# AES-128 key size in bytes
KEY_SIZE = 16

# GCM authentication tag size in bytes
GCM_TAG_SIZE = 16


def _check_key(key: bytes) -> None:
    if not isinstance(key, (bytes, bytearray)) or len(key) != KEY_SIZE:
        raise InvalidKey()


def decrypt_cbc(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """
    Decrypt AES-128-CBC data and strip its padding.

    Raises:
        InvalidKey: If key is not 16 bytes
        InvalidPadding: If ciphertext is not block aligned or padding is bad
    """
    _check_key(key)
    if len(ciphertext) % BLOCK_SIZE != 0:
        raise InvalidPadding("data is not padded")

    cipher = Cipher(algorithms.AES(key), modes.CBC(iv), backend=default_backend())
    decryptor = cipher.decryptor()
    plaintext = decryptor.update(ciphertext) + decryptor.finalize()

    return pkcs7_unpad(plaintext)


def decrypt_gcm(key: bytes, nonce: bytes, ciphertext: bytes, aad: bytes) -> bytes:
    """
    Decrypt and verify AES-128-GCM data, then strip its padding.

    Args:
        key: 16-byte AES key
        nonce: Nonce of any length GCM accepts (the header IV)
        ciphertext: Encrypted data with the 16-byte tag appended
        aad: Associated data (the raw header)

    Raises:
        InvalidKey: If key is not 16 bytes
        AuthenticationFailure: If the tag does not verify
        InvalidPadding: If the plaintext padding is bad
    """
    _check_key(key)

    try:
        plaintext = AESGCM(key).decrypt(nonce, ciphertext, aad)
    except InvalidTag:
        raise AuthenticationFailure(
            "decryption failed: invalid tag (tampering or wrong key)"
        ) from None
    except ValueError as e:
        raise AuthenticationFailure(f"decryption failed: {e}") from e

    return pkcs7_unpad(plaintext)


def decrypt(key: bytes, iv: bytes, ciphertext: bytes, aead: bool = False, aad: bytes = b"") -> bytes:
    """
    Decrypt an inform payload.

    Args:
        key: 16-byte AES key
        iv: Header IV (CBC IV or GCM nonce)
        ciphertext: Payload bytes
        aead: Use AES-GCM instead of AES-CBC
        aad: Raw header bytes, authenticated in GCM mode

    Returns:
        bytes: Unpadded plaintext
    """
    _check_key(key)
    if aead:
        logger.debug(f"Decrypting {len(ciphertext)} bytes with AES-128-GCM")
        return decrypt_gcm(key, iv, ciphertext, aad)
    logger.debug(f"Decrypting {len(ciphertext)} bytes with AES-128-CBC")
    return decrypt_cbc(key, iv, ciphertext)


def encrypt(key: bytes, iv: bytes, plaintext: bytes, aead: bool = False, aad: bytes = b"") -> bytes:
    """
    Pad and encrypt a payload, the inverse of decrypt().

    In GCM mode the result carries the 16-byte tag, so its length is
    len(pkcs7_pad(plaintext)) + GCM_TAG_SIZE.

    Raises:
        InvalidKey: If key is not 16 bytes
    """
    _check_key(key)
    padded = pkcs7_pad(plaintext)

    if aead:
        return AESGCM(key).encrypt(iv, padded, aad)

    cipher = Cipher(algorithms.AES(key), modes.CBC(iv), backend=default_backend())
    encryptor = cipher.encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def encrypted_size(plaintext_size: int, aead: bool = False) -> int:
    """Ciphertext length produced by encrypt() for a plaintext size."""
    padded = (plaintext_size // BLOCK_SIZE + 1) * BLOCK_SIZE
    return padded + GCM_TAG_SIZE if aead else padded
