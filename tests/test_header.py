"""Tests for the header field catalog and parser."""

import pytest

from inform.errors import IncompletePacket, InvalidMagic, MalformedHeader
from inform.packet.fields import FIELD_ORDER, HEADER_SIZE, HeaderField, header_size
from inform.packet.header import encode_header, parse_header
from inform.packet.variants import LEGACY, UNIFI, ProtocolVariant

from conftest import IV, MAC, make_header


def test_field_catalog_layout():
    assert HEADER_SIZE == 40
    assert header_size() == 40
    assert [f.name for f in FIELD_ORDER] == list(HeaderField)

    offsets = {}
    off = 0
    for spec in FIELD_ORDER:
        offsets[spec.name] = off
        off += spec.length
    assert offsets[HeaderField.FLAGS] == 14
    assert offsets[HeaderField.IV] == 16
    assert offsets[HeaderField.PAYLOAD_LENGTH] == 36


def test_parse_fields():
    raw = make_header(flags=0x0d, payload_length=1234, packet_version=7, payload_version=3)
    header, consumed = parse_header(raw + b"trailing payload")

    assert consumed == 40
    assert header.magic == b"TNBU"
    assert header.packet_version == 7
    assert header.mac == MAC
    assert header.flags == 0x0d
    assert header.iv == IV
    assert header.payload_version == 3
    assert header.payload_length == 1234
    assert header.raw == raw


@pytest.mark.parametrize("flags,length,versions", [
    (0x0000, 1, (0, 1)),
    (0x0001, 16, (0, 1)),
    (0xffff, 0xffffffff, (0xffffffff, 0xffffffff)),
    (0x000b, 4096, (1, 0)),
])
def test_reencode_reproduces_header(flags, length, versions):
    raw = make_header(flags, length, packet_version=versions[0], payload_version=versions[1])
    header, _ = parse_header(raw)
    assert header.to_bytes() == raw


@pytest.mark.parametrize("size", [0, 1, 4, 39])
def test_short_buffer_is_incomplete(size):
    raw = make_header(0x01, 32)[:size]
    with pytest.raises(IncompletePacket, match="header too short"):
        parse_header(raw)


def test_zero_payload_length_is_incomplete():
    with pytest.raises(IncompletePacket) as exc:
        parse_header(make_header(0x01, 0))
    assert str(exc.value) == "insufficient data: header does not define payload length"
    assert exc.value.stage == "read"


def test_invalid_magic():
    with pytest.raises(InvalidMagic) as exc:
        parse_header(make_header(0x01, 32, magic=b"XXXX"))
    assert str(exc.value) == "invalid packet: must begin with 'TNBU'"
    assert isinstance(exc.value, MalformedHeader)
    assert exc.value.stage == "header"


def test_variant_magic_is_used():
    variant = ProtocolVariant(name="test", magic=b"ABCD")
    header, _ = parse_header(make_header(0x01, 32, magic=b"ABCD"), variant)
    assert header.magic == b"ABCD"

    with pytest.raises(InvalidMagic, match="'ABCD'"):
        parse_header(make_header(0x01, 32), variant)


def test_unknown_flag_bits_are_kept():
    header, _ = parse_header(make_header(0xff00, 32), LEGACY)
    assert header.flags == 0xff00


def test_encode_header_validates_lengths():
    with pytest.raises(ValueError):
        encode_header(b"TNBU", 0, MAC[:5], 0, IV, 1, 16)
    with pytest.raises(ValueError):
        encode_header(b"TNBU", 0, MAC, 0, IV[:12], 1, 16)
    with pytest.raises(ValueError):
        encode_header(b"TNB", 0, MAC, 0, IV, 1, 16)


def test_encode_header_matches_manual_layout():
    raw = encode_header(UNIFI.magic, 0, MAC, 0x05, IV, 1, 48)
    assert raw == make_header(0x05, 48)


def test_encode_header_range_checks():
    with pytest.raises(ValueError, match="Flags out of range"):
        encode_header(b"TNBU", 0, MAC, 0x10000, IV, 1, 16)
    with pytest.raises(ValueError, match="payload_length out of range"):
        encode_header(b"TNBU", 0, MAC, 0, IV, 1, 2 ** 32)
