"""
Inform Header Parser

Decodes the fixed 40-byte cleartext header that precedes every inform
payload. Fields are walked in catalog order and dispatched by name; the
raw header bytes are kept because AES-GCM authenticates them as AAD.
"""

import struct
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ..errors import IncompletePacket, InvalidMagic
from .fields import FIELD_ORDER, IV_SIZE, MAC_SIZE, FieldSpec, HeaderField, header_size
from .variants import DEFAULT_VARIANT, ProtocolVariant


@dataclass(frozen=True)
class PacketHeader:
    """
    Parsed inform header.

    ``raw`` is the exact header as received.
    """
    magic: bytes
    packet_version: int
    mac: bytes
    flags: int
    iv: bytes
    payload_version: int
    payload_length: int
    raw: bytes

    def to_bytes(self) -> bytes:
        """Serialize header to bytes."""
        return encode_header(
            magic=self.magic,
            packet_version=self.packet_version,
            mac=self.mac,
            flags=self.flags,
            iv=self.iv,
            payload_version=self.payload_version,
            payload_length=self.payload_length,
        )


def _update(values: Dict[str, Any], name: HeaderField, data: memoryview) -> None:
    """Store a single decoded field."""
    if name == HeaderField.PACKET_VERSION:
        values["packet_version"] = int.from_bytes(data, "big")
    elif name == HeaderField.MAC:
        values["mac"] = bytes(data)
    elif name == HeaderField.FLAGS:
        values["flags"] = int.from_bytes(data, "big")
    elif name == HeaderField.IV:
        values["iv"] = bytes(data)
    elif name == HeaderField.PAYLOAD_VERSION:
        values["payload_version"] = int.from_bytes(data, "big")


def parse_header(
    data: bytes,
    variant: ProtocolVariant = DEFAULT_VARIANT,
    fields: Tuple[FieldSpec, ...] = FIELD_ORDER,
) -> Tuple[PacketHeader, int]:
    """
    Parse an inform header from the start of a buffer.

    Args:
        data: Buffer holding at least the header
        variant: Protocol variant supplying the expected magic
        fields: Field catalog to walk

    Returns:
        Tuple[PacketHeader, int]: Parsed header and bytes consumed

    Raises:
        IncompletePacket: If the buffer is short or payload length is zero
        InvalidMagic: If the magic does not match the variant
    """
    size = header_size(fields)
    if len(data) < size:
        raise IncompletePacket("header too short")

    view = memoryview(data)[:size]
    values: Dict[str, Any] = {}
    off = 0
    for spec in fields:
        curr = view[off:off + spec.length]
        if spec.name == HeaderField.MAGIC:
            if curr != variant.magic:
                raise InvalidMagic(variant.magic)
            values["magic"] = bytes(curr)
        elif spec.name == HeaderField.PAYLOAD_LENGTH:
            values["payload_length"] = int.from_bytes(curr, "big")
        else:
            _update(values, spec.name, curr)
        off += spec.length

    if values["payload_length"] == 0:
        raise IncompletePacket("header does not define payload length")

    header = PacketHeader(raw=bytes(view), **values)
    return header, off


def encode_header(
    magic: bytes,
    packet_version: int,
    mac: bytes,
    flags: int,
    iv: bytes,
    payload_version: int,
    payload_length: int,
) -> bytes:
    """
    Build the 40-byte wire header.

    Raises:
        ValueError: If a fixed-size field has the wrong length or an
            integer field is out of range
    """
    if len(magic) != 4:
        raise ValueError(f"Magic must be 4 bytes: {len(magic)}")
    if len(mac) != MAC_SIZE:
        raise ValueError(f"MAC must be {MAC_SIZE} bytes: {len(mac)}")
    if len(iv) != IV_SIZE:
        raise ValueError(f"IV must be {IV_SIZE} bytes: {len(iv)}")
    if not 0 <= flags <= 0xFFFF:
        raise ValueError(f"Flags out of range: {flags:#x}")
    for name, value in (
        ("packet_version", packet_version),
        ("payload_version", payload_version),
        ("payload_length", payload_length),
    ):
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"{name} out of range: {value}")

    return struct.pack(
        ">4sI6sH16sII",
        magic,
        packet_version,
        mac,
        flags,
        iv,
        payload_version,
        payload_length,
    )
