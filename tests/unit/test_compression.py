"""zlib helper tests."""

import os
import zlib

import pytest

from plumb.core.errors import DecompressionError
from plumb.utils.compression import compress, decompress


def test_compress_is_zlib():
    assert zlib.decompress(compress(b'payload')) == b'payload'


def test_decompress_reports_consumed_bytes():
    stream = zlib.compress(b'first object')
    consumed, plain = decompress(stream + b'next entry')
    assert plain == b'first object'
    assert consumed == len(stream)


def test_decompress_memoryview():
    stream = zlib.compress(b'abc')
    consumed, plain = decompress(memoryview(b'xx' + stream)[2:])
    assert (consumed, plain) == (len(stream), b'abc')


def test_decompress_invalid_stream():
    with pytest.raises(DecompressionError, match="Invalid zlib stream"):
        decompress(b'definitely not zlib')


def test_decompress_truncated_stream():
    stream = zlib.compress(b'x' * 1000)
    with pytest.raises(DecompressionError):
        decompress(stream[:len(stream) // 2])


def test_decompress_ignores_large_trailing_buffer():
    stream = zlib.compress(b'entry')
    consumed, plain = decompress(stream + bytes(8 * 1024 * 1024))
    assert (consumed, plain) == (len(stream), b'entry')


def test_decompress_stream_spanning_several_slices():
    payload = os.urandom(20000)
    stream = zlib.compress(payload)
    consumed, plain = decompress(stream + b'next', buffer_size=1024)
    assert plain == payload
    assert consumed == len(stream)


def test_decompress_stream_ending_on_slice_boundary():
    stream = zlib.compress(b'boundary')
    consumed, plain = decompress(stream + b'tail', buffer_size=len(stream))
    assert (consumed, plain) == (len(stream), b'boundary')
