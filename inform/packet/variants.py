"""
Inform Protocol Variants

Firmware releases disagree on the header magic and on what each flag bit
means. A ProtocolVariant captures one convention as an immutable value
that the parser and decoder consult instead of module constants.

Built-in variants:
    unifi   - 0x01 encrypted, 0x02 zlib, 0x04 snappy, 0x08 AES-GCM
    legacy  - 0x01 encrypted, 0x04 snappy; 0x02 is defined but not
              implemented, so packets carrying it are rejected
"""

from dataclasses import dataclass
from enum import IntFlag
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple, Union

from ..errors import InvalidMagic


class PacketFlags(IntFlag):
    """Flag bits of the current UniFi firmware."""
    NONE = 0x00
    ENCRYPTED = 0x01          # Payload is AES encrypted
    ZLIB_COMPRESSED = 0x02    # Payload is zlib compressed
    SNAPPY_COMPRESSED = 0x04  # Payload is Snappy compressed
    AES_GCM = 0x08            # Encryption uses AES-GCM instead of AES-CBC


@dataclass(frozen=True)
class ProtocolVariant:
    """
    Header and flag conventions of one firmware family.

    A bit mask of 0 means the variant has no bit for that capability.
    ``unsupported`` lists (bit, description) pairs for bits the variant
    defines without implementing them.
    """
    name: str
    magic: bytes = b"TNBU"
    encrypted: int = PacketFlags.ENCRYPTED
    aead: int = PacketFlags.AES_GCM
    zlib: int = PacketFlags.ZLIB_COMPRESSED
    snappy: int = PacketFlags.SNAPPY_COMPRESSED
    unsupported: Tuple[Tuple[int, str], ...] = ()

    def __post_init__(self):
        if len(self.magic) != 4:
            raise ValueError(f"Magic must be 4 bytes: {self.magic!r}")
        for bit in (self.encrypted, self.aead, self.zlib, self.snappy):
            if not 0 <= bit <= 0xFFFF:
                raise ValueError(f"Flag bit out of range: {bit:#x}")

    @property
    def supports_aead(self) -> bool:
        return self.aead != 0

    def is_encrypted(self, flags: int) -> bool:
        return bool(flags & self.encrypted)

    def is_aead(self, flags: int) -> bool:
        """AEAD applies only to encrypted payloads on variants that know it."""
        return self.is_encrypted(flags) and bool(flags & self.aead)

    def is_zlib(self, flags: int) -> bool:
        return bool(flags & self.zlib)

    def is_snappy(self, flags: int) -> bool:
        return bool(flags & self.snappy)

    def unsupported_in(self, flags: int) -> Optional[str]:
        """Description of the first unimplemented bit set in flags."""
        for bit, description in self.unsupported:
            if flags & bit:
                return description
        return None


UNIFI = ProtocolVariant(name="unifi")

LEGACY = ProtocolVariant(
    name="legacy",
    aead=0,
    zlib=0,
    unsupported=((0x02, "zlib compression"),),
)

DEFAULT_VARIANT = UNIFI

VARIANTS: Mapping[str, ProtocolVariant] = MappingProxyType({
    UNIFI.name: UNIFI,
    LEGACY.name: LEGACY,
})


VariantLike = Union[ProtocolVariant, str, None]


def get_variant(
    variant: VariantLike,
    registry: Mapping[str, ProtocolVariant] = VARIANTS,
) -> ProtocolVariant:
    """
    Resolve a variant argument.

    Args:
        variant: A ProtocolVariant, a registered name, or None for default
        registry: Name lookup table

    Returns:
        ProtocolVariant: Resolved variant

    Raises:
        ValueError: If the name is not registered
    """
    if variant is None:
        return DEFAULT_VARIANT
    if isinstance(variant, ProtocolVariant):
        return variant
    try:
        return registry[variant]
    except KeyError:
        raise ValueError(f"Unknown protocol variant: {variant}") from None


def detect_variant(
    data: bytes,
    candidates: Iterable[ProtocolVariant] = VARIANTS.values(),
) -> ProtocolVariant:
    """
    Pick the first candidate whose magic starts the buffer.

    Raises:
        InvalidMagic: If no candidate matches
    """
    head = bytes(data[:4])
    first = None
    for variant in candidates:
        if first is None:
            first = variant
        if variant.magic == head:
            return variant
    raise InvalidMagic((first or DEFAULT_VARIANT).magic)
