"""Byte parsing helper tests."""

import pytest

from plumb.core.errors import ObjectFormatError, PackError
from plumb.utils.parsing import (parse_contributor, parse_string_until,
                                 read_offset_varint, read_varint_le, take_until)


class TestTakeUntil:

    def test_stops_at_delimiter(self):
        assert take_until(b'blob 12\0data', b' ') == b'blob'

    def test_from_offset(self):
        assert take_until(b'blob 12\0data', b'\0', 5) == b'12'

    def test_missing_delimiter_returns_rest(self):
        assert take_until(b'abc', b'\n', 1) == b'bc'

    def test_parse_string_rejects_bad_utf8(self):
        with pytest.raises(ObjectFormatError):
            parse_string_until(b'\xff\xfe\n', b'\n')


class TestParseContributor:

    def test_identity_line(self):
        line = b'author Jane Doe <jane@example.com> 1700000000 +0200\nrest'
        pos, name, email, ts, tz = parse_contributor(line, 7)
        assert (name, email, ts, tz) == ('Jane Doe', 'jane@example.com', 1700000000, '+0200')
        assert line[pos:] == b'rest'

    def test_invalid_timestamp(self):
        with pytest.raises(ObjectFormatError, match="Invalid timestamp"):
            parse_contributor(b'A <a@b> soon +0000\n')


class TestVarints:

    def test_single_byte(self):
        assert read_varint_le(bytes([0x05]), 0) == (5, 1)

    def test_little_endian_groups(self):
        assert read_varint_le(bytes([0xE5, 0x8E, 0x26]), 0) == (624485, 3)

    def test_truncated(self):
        with pytest.raises(PackError):
            read_varint_le(bytes([0x80, 0x80]), 0)

    def test_offset_single_byte(self):
        assert read_offset_varint(bytes([0x7F]), 0) == (127, 1)

    def test_offset_adds_one_per_continuation(self):
        assert read_offset_varint(bytes([0x80, 0x00]), 0) == (128, 2)
        assert read_offset_varint(bytes([0x81, 0x00]), 0) == (256, 2)

    def test_offset_matches_encoder(self, packs):
        for distance in (1, 127, 128, 16511, 16512, 2_000_000):
            encoded = packs.offset_encoding(distance)
            assert read_offset_varint(encoded, 0) == (distance, len(encoded))

    def test_offset_truncated(self):
        with pytest.raises(PackError):
            read_offset_varint(bytes([0x81]), 0)
