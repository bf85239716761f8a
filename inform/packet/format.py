"""
Inform Packet Wire Format

Assembles Packet objects from a stream or a buffer and decodes their
payloads.

Packet Structure:
    Header (40 bytes) + Payload (payload_length bytes)

Decoding pipeline (each step conditional on the header flags):
    decrypt (AES-128-CBC or AES-128-GCM) -> PKCS#7 unpad -> zlib -> snappy

The decoded payload is a pure function of (packet, key) and is never
cached on the packet.
"""

import logging
import os
from dataclasses import dataclass
from typing import BinaryIO, Optional

from .. import compression
from ..crypto import cipher
from ..errors import IncompletePacket
from .fields import HEADER_SIZE, IV_SIZE
from .header import PacketHeader, encode_header, parse_header
from .variants import (
    DEFAULT_VARIANT,
    VARIANTS,
    PacketFlags,
    ProtocolVariant,
    VariantLike,
    detect_variant,
    get_variant,
)

logger = logging.getLogger("inform")


@dataclass(frozen=True)
class Packet:
    """
    A device-to-controller inform packet.

    Use data() rather than payload to get the cleartext.
    """
    packet_version: int
    payload_version: int
    device_address: bytes
    flags: int
    iv: bytes
    payload: bytes
    header_bytes: bytes
    variant: ProtocolVariant = DEFAULT_VARIANT

    @property
    def mac(self) -> str:
        """Device address as colon-separated hex."""
        return ":".join(f"{b:02x}" for b in self.device_address)

    @property
    def is_encrypted(self) -> bool:
        return self.variant.is_encrypted(self.flags)

    @property
    def is_aead(self) -> bool:
        return self.variant.is_aead(self.flags)

    @property
    def total_size(self) -> int:
        """Total packet size in bytes."""
        return len(self.header_bytes) + len(self.payload)

    def to_bytes(self) -> bytes:
        """Serialize packet to bytes."""
        return self.header_bytes + self.payload

    def data(self, key: bytes) -> bytes:
        """Decrypt and decompress the payload."""
        return decode_payload(self, key)

    @classmethod
    def from_header(
        cls,
        header: PacketHeader,
        payload: bytes,
        variant: ProtocolVariant,
    ) -> 'Packet':
        return cls(
            packet_version=header.packet_version,
            payload_version=header.payload_version,
            device_address=header.mac,
            flags=header.flags,
            iv=header.iv,
            payload=payload,
            header_bytes=header.raw,
            variant=variant,
        )


def decode_payload(packet: Packet, key: bytes) -> bytes:
    """
    Recover the cleartext payload of a packet.

    Args:
        packet: Parsed packet
        key: 16-byte AES key (ignored for unencrypted packets)

    Returns:
        bytes: Cleartext payload

    Raises:
        InvalidKey: If key is not 16 bytes
        InvalidPadding: If ciphertext alignment or padding is wrong
        AuthenticationFailure: If AES-GCM verification fails
        UnsupportedFlag: If the variant does not implement a flagged scheme
        DecompressionError: If a decompression stage fails
    """
    variant = packet.variant
    data = packet.payload

    compression.check_supported(packet.flags, variant)

    if variant.is_encrypted(packet.flags):
        data = cipher.decrypt(
            key,
            packet.iv,
            data,
            aead=variant.is_aead(packet.flags),
            aad=packet.header_bytes,
        )

    return compression.decompress(data, packet.flags, variant)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read up to size bytes, looping over short reads until EOF."""
    buf = bytearray()
    while len(buf) < size:
        chunk = stream.read(size - len(buf))
        if not chunk:
            break
        buf += chunk
    return bytes(buf)


def _resolve(data: bytes, variant: VariantLike) -> ProtocolVariant:
    if variant is None:
        return detect_variant(data, VARIANTS.values())
    return get_variant(variant)


def read_packet(stream: BinaryIO, variant: VariantLike = DEFAULT_VARIANT) -> Packet:
    """
    Read one packet from a binary stream.

    The stream is read twice: once for the fixed-size header and once
    for the payload whose length the header declares. It is not read
    to EOF.

    Args:
        stream: Readable binary stream
        variant: Variant, variant name, or None to detect from the magic

    Returns:
        Packet: Parsed packet

    Raises:
        IncompletePacket: If the header or payload is short
        InvalidMagic: If the magic does not match
    """
    try:
        head = _read_exact(stream, HEADER_SIZE)
    except OSError as e:
        raise IncompletePacket(f"reading header: {e}") from e
    if len(head) != HEADER_SIZE:
        raise IncompletePacket("header too short")

    resolved = _resolve(head, variant)
    header, _ = parse_header(head, resolved)

    try:
        payload = _read_exact(stream, header.payload_length)
    except OSError as e:
        raise IncompletePacket(f"reading payload: {e}") from e
    if len(payload) != header.payload_length:
        raise IncompletePacket(
            f"unexpected EOF: got {len(payload)} of {header.payload_length} payload bytes"
        )

    logger.debug(
        f"Read packet from {header.mac.hex(':')}: flags={header.flags:#06x} "
        f"payload={header.payload_length} bytes"
    )
    return Packet.from_header(header, payload, resolved)


def parse_packet(data: bytes, variant: VariantLike = DEFAULT_VARIANT) -> Packet:
    """
    Parse a packet from an in-memory buffer.

    Bytes beyond the declared payload are ignored.

    Raises:
        IncompletePacket: If the buffer holds less than header + payload
        InvalidMagic: If the magic does not match
    """
    if len(data) < HEADER_SIZE:
        raise IncompletePacket("header too short")

    resolved = _resolve(data, variant)
    header, off = parse_header(data, resolved)

    end = off + header.payload_length
    if len(data) < end:
        raise IncompletePacket(
            f"unexpected EOF: got {len(data) - off} of {header.payload_length} payload bytes"
        )

    return Packet.from_header(header, bytes(data[off:end]), resolved)


def build_packet(
    payload: bytes,
    key: Optional[bytes] = None,
    *,
    mac: bytes,
    flags: int = PacketFlags.ENCRYPTED | PacketFlags.ZLIB_COMPRESSED,
    iv: Optional[bytes] = None,
    packet_version: int = 0,
    payload_version: int = 1,
    variant: VariantLike = DEFAULT_VARIANT,
) -> bytes:
    """
    Build a wire-format inform packet.

    Args:
        payload: Cleartext payload (usually JSON)
        key: 16-byte AES key, required when flags request encryption
        mac: 6-byte device address
        flags: Header flags, interpreted by the variant
        iv: 16-byte IV/nonce (random if omitted)
        packet_version: Header packet version
        payload_version: Header payload version
        variant: Protocol variant or name

    Returns:
        bytes: Header followed by the encoded payload

    Raises:
        ValueError: If encryption is requested without a key or the
            encoded payload is empty
        InvalidKey: If key is not 16 bytes
        UnsupportedFlag: If the variant does not implement a flagged scheme
    """
    resolved = get_variant(variant)
    if iv is None:
        iv = os.urandom(IV_SIZE)

    body = compression.compress(payload, flags, resolved)

    def header(length: int) -> bytes:
        return encode_header(
            magic=resolved.magic,
            packet_version=packet_version,
            mac=mac,
            flags=flags,
            iv=iv,
            payload_version=payload_version,
            payload_length=length,
        )

    if resolved.is_encrypted(flags):
        if key is None:
            raise ValueError("Encrypted packets require a key")
        aead = resolved.is_aead(flags)
        head = header(cipher.encrypted_size(len(body), aead))
        body = cipher.encrypt(key, iv, body, aead=aead, aad=head)
    else:
        head = header(len(body))

    if len(body) == 0:
        raise ValueError("Payload must not be empty")

    return head + body

