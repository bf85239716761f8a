"""
Inform - UniFi Inform Packet Decoder

Decodes the binary "inform" packets managed devices POST to their
controller: a 40-byte cleartext header followed by a payload that may be
AES-128 encrypted (CBC or GCM) and zlib and/or Snappy compressed.

This package contains:
- packet/      : Header catalog, protocol variants, parsing and assembly
- crypto/      : AES payload decryption and PKCS#7 padding
- compression  : zlib/Snappy decompression stages
- errors       : Typed decoding failures
- config       : TOML configuration

Example:
    >>> with open("inform.dat", "rb") as f:
    ...     packet = read_packet(f)
    >>> payload = packet.data(bytes.fromhex(key_hex))
"""

__version__ = "0.1.0"

from .errors import (
    InformError,
    MalformedHeader,
    InvalidMagic,
    IncompletePacket,
    InvalidKey,
    InvalidPadding,
    UnsupportedFlag,
    DecompressionError,
    AuthenticationFailure,
)

from .packet import (
    Packet,
    PacketHeader,
    PacketFlags,
    ProtocolVariant,
    UNIFI,
    LEGACY,
    VARIANTS,
    get_variant,
    detect_variant,
    parse_header,
    read_packet,
    parse_packet,
    decode_payload,
    build_packet,
    HEADER_SIZE,
)

from .config import Config

__all__ = [
    # Errors
    'InformError',
    'MalformedHeader',
    'InvalidMagic',
    'IncompletePacket',
    'InvalidKey',
    'InvalidPadding',
    'UnsupportedFlag',
    'DecompressionError',
    'AuthenticationFailure',
    # Packet
    'Packet',
    'PacketHeader',
    'PacketFlags',
    'ProtocolVariant',
    'UNIFI',
    'LEGACY',
    'VARIANTS',
    'get_variant',
    'detect_variant',
    'parse_header',
    'read_packet',
    'parse_packet',
    'decode_payload',
    'build_packet',
    'HEADER_SIZE',
    # Config
    'Config',
]
