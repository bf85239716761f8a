"""
Inform Payload Compression

Decompression runs in a fixed order: zlib first, then Snappy, each
stage consuming the previous one's output. Which stages run depends on
the flag bits as interpreted by the packet's protocol variant.
"""

import logging
import zlib

import snappy

from .errors import DecompressionError, UnsupportedFlag
from .packet.variants import DEFAULT_VARIANT, ProtocolVariant

logger = logging.getLogger("inform")

# Read granularity for the streaming zlib decompressor
ZLIB_CHUNK_SIZE = 64 * 1024


def zlib_decompress(data: bytes) -> bytes:
    """
    Inflate a complete zlib stream.

    Raises:
        DecompressionError: On framing errors or a truncated stream
    """
    d = zlib.decompressobj()
    out = bytearray()
    try:
        for off in range(0, len(data), ZLIB_CHUNK_SIZE):
            out += d.decompress(data[off:off + ZLIB_CHUNK_SIZE])
            if d.eof:
                break
        out += d.flush()
    except zlib.error as e:
        raise DecompressionError(f"zlib: {e}") from e

    if not d.eof:
        raise DecompressionError("zlib: unexpected end of stream")

    return bytes(out)


def snappy_decompress(data: bytes) -> bytes:
    """
    Decode a Snappy block.

    Raises:
        DecompressionError: If the block is malformed
    """
    try:
        return snappy.decompress(data)
    except snappy.UncompressError as e:
        raise DecompressionError(f"snappy: {e}") from e


def check_supported(flags: int, variant: ProtocolVariant = DEFAULT_VARIANT) -> None:
    """
    Reject flag bits the variant defines but does not implement.

    Raises:
        UnsupportedFlag: If such a bit is set
    """
    what = variant.unsupported_in(flags)
    if what is not None:
        raise UnsupportedFlag(what)


def decompress(data: bytes, flags: int, variant: ProtocolVariant = DEFAULT_VARIANT) -> bytes:
    """
    Apply the decompression stages selected by flags.

    Args:
        data: Decrypted payload
        flags: Raw header flags
        variant: Protocol variant giving the bit meanings

    Returns:
        bytes: Decompressed payload (data unchanged if no stage applies)

    Raises:
        UnsupportedFlag: If an unimplemented scheme is flagged
        DecompressionError: If a stage fails
    """
    check_supported(flags, variant)

    if variant.is_zlib(flags):
        logger.debug(f"Inflating {len(data)} bytes (zlib)")
        data = zlib_decompress(data)

    if variant.is_snappy(flags):
        logger.debug(f"Decoding {len(data)} bytes (snappy)")
        data = snappy_decompress(data)

    return data


def compress(data: bytes, flags: int, variant: ProtocolVariant = DEFAULT_VARIANT) -> bytes:
    """
    Compress a payload so that decompress() with the same flags restores it.

    Snappy is applied first and zlib last, mirroring the decode order.

    Raises:
        UnsupportedFlag: If an unimplemented scheme is flagged
    """
    check_supported(flags, variant)

    if variant.is_snappy(flags):
        data = snappy.compress(data)

    if variant.is_zlib(flags):
        data = zlib.compress(data, 9)

    return data
