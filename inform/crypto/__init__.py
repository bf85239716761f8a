"""
Inform Cryptographic Module

Provides payload cryptography for inform packets:
- AES-128-CBC decryption with strict PKCS#7 unpadding
- AES-128-GCM authenticated decryption (header as AAD)
- The matching encryption used when building packets

All implementations use python3-cryptography (OpenSSL backend).
"""

from .cipher import (
    decrypt,
    decrypt_cbc,
    decrypt_gcm,
    encrypt,
    encrypted_size,
    KEY_SIZE,
    GCM_TAG_SIZE,
)

from .padding import (
    pkcs7_pad,
    pkcs7_unpad,
    BLOCK_SIZE,
)

__all__ = [
    # Cipher
    'decrypt',
    'decrypt_cbc',
    'decrypt_gcm',
    'encrypt',
    'encrypted_size',
    'KEY_SIZE',
    'GCM_TAG_SIZE',
    # Padding
    'pkcs7_pad',
    'pkcs7_unpad',
    'BLOCK_SIZE',
]
