"""
Inform Packet Module

Handles the header field catalog, protocol variants, header parsing,
and packet assembly/decoding.
"""

from .fields import (
    HeaderField,
    FieldSpec,
    FIELD_ORDER,
    HEADER_SIZE,
)

from .variants import (
    PacketFlags,
    ProtocolVariant,
    UNIFI,
    LEGACY,
    DEFAULT_VARIANT,
    VARIANTS,
    get_variant,
    detect_variant,
)

from .header import (
    PacketHeader,
    parse_header,
    encode_header,
)

from .format import (
    Packet,
    read_packet,
    parse_packet,
    decode_payload,
    build_packet,
)

__all__ = [
    # Fields
    'HeaderField',
    'FieldSpec',
    'FIELD_ORDER',
    'HEADER_SIZE',
    # Variants
    'PacketFlags',
    'ProtocolVariant',
    'UNIFI',
    'LEGACY',
    'DEFAULT_VARIANT',
    'VARIANTS',
    'get_variant',
    'detect_variant',
    # Header
    'PacketHeader',
    'parse_header',
    'encode_header',
    # Format
    'Packet',
    'read_packet',
    'parse_packet',
    'decode_payload',
    'build_packet',
]
