"""zlib compression helpers.

Stored objects and pack entries are zlib streams. Pack entries are laid
end to end with no length prefix for the compressed data, so decompress()
reports how many input bytes the stream occupied.
"""

import zlib
from typing import Tuple

from plumb.core.errors import DecompressionError

ZLIB_BUFSIZE = 4096


def compress(data: bytes) -> bytes:
    """Compress data at zlib's default level."""
    return zlib.compress(data, zlib.Z_DEFAULT_COMPRESSION)


def decompress(data: bytes, buffer_size: int = ZLIB_BUFSIZE) -> Tuple[int, bytes]:
    """
    Inflate one zlib stream from the start of data.

    Input is fed in buffer_size slices until the stream ends, so bytes
    after the stream are never copied.

    Args:
        data: Buffer starting with a zlib stream
        buffer_size: Size of each slice handed to zlib

    Returns:
        Tuple of (bytes consumed from data, inflated bytes)

    Raises:
        DecompressionError: If the stream is malformed or truncated
    """
    view = memoryview(data)
    decomp = zlib.decompressobj()
    chunks = []
    fed = 0

    try:
        while not decomp.eof and fed < len(view):
            add = view[fed:fed + buffer_size]
            fed += len(add)
            chunks.append(decomp.decompress(add))
        chunks.append(decomp.flush())
    except zlib.error as e:
        raise DecompressionError(f"Invalid zlib stream: {e}") from e

    if not decomp.eof:
        raise DecompressionError("Truncated zlib stream")

    return fed - len(decomp.unused_data), b''.join(chunks)
