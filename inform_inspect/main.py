#!/usr/bin/env python3
"""
inform-inspect - Inform Packet Inspector

Decrypts and decompresses a captured inform packet and prints the
payload: JSON as text, anything else as a hex dump.

Usage:
    inform-inspect <key> <packet>
    inform-inspect -c config.toml --variant legacy <key> -

<key> is the device's 16-byte AES key as 32 hex characters.
<packet> is a file holding the raw POST body, or "-" for stdin.
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import BinaryIO, List, Optional

from inform import __version__
from inform.config import Config, DEFAULT_CONFIG_PATH
from inform.crypto.cipher import KEY_SIZE
from inform.errors import InformError
from inform.packet.format import Packet, read_packet


logger = logging.getLogger("inform")


def hexdump(data: bytes) -> str:
    """Format data like `hexdump -C`."""
    lines = []
    for off in range(0, len(data), 16):
        chunk = data[off:off + 16]
        left = " ".join(f"{b:02x}" for b in chunk[:8])
        right = " ".join(f"{b:02x}" for b in chunk[8:])
        text = "".join(chr(b) if 32 <= b < 127 else "." for b in chunk)
        lines.append(f"{off:08x}  {left:<23}  {right:<23}  |{text}|")
    return "\n".join(lines) + "\n" if lines else ""


def render(data: bytes) -> str:
    """JSON payloads verbatim, everything else as a hex dump."""
    if data[:1] in (b"{", b"["):
        return data.decode("utf-8", errors="replace")
    return hexdump(data)


def parse_key(value: str) -> bytes:
    """
    Decode a hex key.

    Raises:
        ValueError: If not 32 hex characters
    """
    try:
        key = bytes.fromhex(value)
    except ValueError:
        raise ValueError(f"key must be {KEY_SIZE * 2} characters long and hex-encoded") from None
    if len(key) != KEY_SIZE:
        raise ValueError(f"key must be {KEY_SIZE * 2} characters long and hex-encoded")
    return key


def _read(source: BinaryIO, config: Config, variant: Optional[str]) -> Packet:
    return read_packet(source, config.get_variant(variant))


def inspect(packet_path: str, key: bytes, config: Config, variant: Optional[str] = None) -> int:
    """Decode one packet file and print its payload."""
    try:
        if packet_path == "-":
            packet = _read(sys.stdin.buffer, config, variant)
        else:
            with open(packet_path, "rb") as f:
                packet = _read(f, config, variant)
    except OSError as e:
        logger.error(f"error opening {packet_path!r}: {e}")
        return 1
    except InformError as e:
        logger.error(f"cannot read packet: {e}")
        return 1

    logger.info(
        f"Packet from {packet.mac}: version={packet.packet_version} "
        f"payload_version={packet.payload_version} flags={packet.flags:#06x} "
        f"variant={packet.variant.name}"
    )

    try:
        data = packet.data(key)
    except InformError as e:
        logger.error(f"error decoding packet at {e.stage} stage: {e}")
        return 1

    if not data:
        logger.warning("no payload found")
        return 0

    sys.stdout.write(render(data))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="inform-inspect",
        description="Decode a UniFi inform packet",
    )
    parser.add_argument("key", help="AES key (32 hex characters)")
    parser.add_argument("packet", help="Packet file, or - for stdin")
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Configuration file path",
    )
    parser.add_argument(
        "--variant",
        help="Protocol variant (default: from config, else unifi)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"inform-inspect {__version__}",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # Load configuration
    try:
        config = Config.load(args.config)
        config.validate()
        if args.variant:
            config.get_variant(args.variant)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    # Set log level
    level = logging.DEBUG if args.verbose else getattr(logging, config.log_level)
    logging.getLogger().setLevel(level)
    if config.log_file:
        handler = logging.FileHandler(config.log_file)
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logging.getLogger().addHandler(handler)

    try:
        key = parse_key(args.key)
    except ValueError as e:
        logger.error(str(e))
        return 1

    return inspect(args.packet, key, config, args.variant)


if __name__ == "__main__":
    sys.exit(main())
