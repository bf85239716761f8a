"""
Inform Decoding Errors

Every failure raised while reading or decoding a packet derives from
InformError. The ``stage`` attribute tells callers where decoding stopped:

    header      - magic or header structure rejected
    read        - not enough bytes for header or payload
    decrypt     - key or AEAD authentication rejected
    unpad       - PKCS#7 structure rejected
    decompress  - zlib/Snappy stream rejected or flag not implemented

None of these are retried internally. Decoding the same bytes with the
same key always fails the same way.
"""


class InformError(Exception):
    """Base exception for inform packet errors."""
    stage = "decode"


class MalformedHeader(InformError):
    """Exception raised when the cleartext header is structurally invalid."""
    stage = "header"


class InvalidMagic(MalformedHeader):
    """Exception raised when a header does not start with the variant magic."""

    def __init__(self, magic: bytes):
        self.magic = magic
        super().__init__(
            f"invalid packet: must begin with '{magic.decode('latin-1')}'"
        )


class IncompletePacket(InformError):
    """Exception raised when header or payload bytes are missing."""
    stage = "read"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"insufficient data: {reason}")


class InvalidKey(InformError):
    """Exception raised when the AES key is not 16 bytes long."""
    stage = "decrypt"

    def __init__(self):
        super().__init__("invalid key: must be 16 bytes long")


class InvalidPadding(InformError):
    """Exception raised for misaligned ciphertext or broken PKCS#7 padding."""
    stage = "unpad"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"invalid padding: {reason}")


class UnsupportedFlag(InformError):
    """Exception raised when a flag bit names a scheme the variant lacks."""
    stage = "decompress"

    def __init__(self, what: str):
        self.what = what
        super().__init__(f"unsupported flag: {what}")


class DecompressionError(InformError):
    """Exception raised for corrupt zlib or Snappy streams."""
    stage = "decompress"


class AuthenticationFailure(InformError):
    """Exception raised when AES-GCM tag verification fails."""
    stage = "decrypt"
