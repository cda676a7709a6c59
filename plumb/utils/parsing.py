"""Byte-level parsing helpers shared by the object model and pack decoder."""

from typing import Tuple

from plumb.core.errors import ObjectFormatError, PackError


def take_until(data: bytes, delimiter: bytes, start: int = 0) -> bytes:
    """
    Return the bytes from start up to (not including) delimiter.

    If the delimiter never occurs, everything from start is returned.
    """
    end = data.find(delimiter, start)
    if end == -1:
        return data[start:]
    return data[start:end]


def parse_string_until(data: bytes, delimiter: bytes, start: int = 0) -> str:
    """Like take_until(), decoded as UTF-8."""
    raw = take_until(data, delimiter, start)
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError as e:
        raise ObjectFormatError(f"Invalid UTF-8 in object: {e}") from e


def parse_contributor(data: bytes, start: int = 0) -> Tuple[int, str, str, int, str]:
    """
    Parse a ``Name <email> timestamp timezone\\n`` identity line.

    Args:
        data: Buffer holding the line
        start: Offset just past the ``author ``/``committer `` keyword

    Returns:
        Tuple of (offset after the newline, name, email, timestamp, timezone)
    """
    pos = start
    raw_name = parse_string_until(data, b'<', pos)
    pos += len(raw_name.encode('utf-8')) + 1

    email = parse_string_until(data, b'>', pos)
    pos += len(email.encode('utf-8')) + 2

    timestamp_str = parse_string_until(data, b' ', pos)
    pos += len(timestamp_str) + 1
    try:
        timestamp = int(timestamp_str)
    except ValueError as e:
        raise ObjectFormatError(f"Invalid timestamp: {timestamp_str!r}") from e

    timezone = parse_string_until(data, b'\n', pos)
    pos += len(timezone) + 1

    if pos > len(data):
        raise ObjectFormatError("Truncated identity line")

    return pos, raw_name.rstrip(' '), email, timestamp, timezone


def read_varint_le(data: bytes, pos: int) -> Tuple[int, int]:
    """
    Read a little-endian base-128 integer.

    Each byte contributes 7 bits, least-significant group first; a byte
    with the high bit clear ends the number.

    Returns:
        Tuple of (value, offset after the last byte)
    """
    value = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise PackError("Truncated variable-length integer")
        byte = data[pos]
        pos += 1
        value |= (byte & 0x7F) << shift
        shift += 7
        if not byte & 0x80:
            return value, pos


def read_offset_varint(data: bytes, pos: int) -> Tuple[int, int]:
    """
    Read the big-endian offset encoding used by offset-delta entries.

    Groups are most-significant first, and every byte but the last adds
    one before the next shift so each value has exactly one encoding.

    Returns:
        Tuple of (value, offset after the last byte)
    """
    if pos >= len(data):
        raise PackError("Truncated delta offset")
    byte = data[pos]
    pos += 1
    value = byte & 0x7F
    while byte & 0x80:
        if pos >= len(data):
            raise PackError("Truncated delta offset")
        byte = data[pos]
        pos += 1
        value = ((value + 1) << 7) | (byte & 0x7F)
    return value, pos
