"""
Inform Header Field Catalog

Static description of the cleartext header: field names, their order on
the wire and the length of each one.

Header Format (40 bytes, big-endian):
    magic           (4 bytes)  - variant magic, 'TNBU' for UniFi
    packet_version  (4 bytes)  - packet format version
    mac             (6 bytes)  - device hardware address
    flags           (2 bytes)  - flag bitmask
    iv              (16 bytes) - AES IV (CBC) or nonce (GCM)
    payload_version (4 bytes)  - payload format version
    payload_length  (4 bytes)  - number of payload bytes after the header
"""

from enum import IntEnum
from typing import NamedTuple, Tuple


class HeaderField(IntEnum):
    """Header field identifiers."""
    MAGIC = 0
    PACKET_VERSION = 1
    MAC = 2
    FLAGS = 3
    IV = 4
    PAYLOAD_VERSION = 5
    PAYLOAD_LENGTH = 6


class FieldSpec(NamedTuple):
    """A single header field and its length in bytes."""
    name: HeaderField
    length: int


FIELD_ORDER: Tuple[FieldSpec, ...] = (
    FieldSpec(HeaderField.MAGIC, 4),
    FieldSpec(HeaderField.PACKET_VERSION, 4),
    FieldSpec(HeaderField.MAC, 6),
    FieldSpec(HeaderField.FLAGS, 2),
    FieldSpec(HeaderField.IV, 16),
    FieldSpec(HeaderField.PAYLOAD_VERSION, 4),
    FieldSpec(HeaderField.PAYLOAD_LENGTH, 4),
)

# Header size in bytes
HEADER_SIZE = sum(f.length for f in FIELD_ORDER)

MAC_SIZE = 6
IV_SIZE = 16


def header_size(fields: Tuple[FieldSpec, ...] = FIELD_ORDER) -> int:
    """Combined length of the given field catalog."""
    return sum(f.length for f in fields)
