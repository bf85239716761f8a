"""
PKCS#7 Padding

Unpadding is strict: every pad byte is checked. When the wrong key is
used, CBC decryption yields random trailing bytes and this check is
where the failure surfaces.
"""

from cryptography.hazmat.primitives import padding

from ..errors import InvalidPadding

# AES block size in bytes
BLOCK_SIZE = 16


def pkcs7_unpad(data: bytes) -> bytes:
    """
    Remove PKCS#7 padding from decrypted data.

    Args:
        data: Decrypted, padded data

    Returns:
        bytes: Data without padding

    Raises:
        InvalidPadding: If data is empty or padding is inconsistent
    """
    if len(data) == 0:
        raise InvalidPadding("no data")

    n = data[-1]
    if n == 0 or n > len(data):
        raise InvalidPadding("data is not padded")

    for byte in data[-n:]:
        if byte != n:
            raise InvalidPadding("structure invalid")

    return data[:-n]


def pkcs7_pad(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """Pad data to a multiple of block_size bytes."""
    padder = padding.PKCS7(block_size * 8).padder()
    return padder.update(data) + padder.finalize()
