"""Pack stream decoding for Plumb.

A version 2 pack is laid out as::

    "PACK" | version (4 bytes BE) | object count (4 bytes BE)
    entry*
    20-byte SHA-1 trailer

Each entry starts with a variable-length header carrying its type and
inflated size, followed by a zlib stream. Offset-delta entries add an
offset back to their base entry; ref-delta entries add the base's raw
hash. Bases must appear before the deltas that use them.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .errors import ApplyDeltaError, PackError, UnresolvedDeltaError
from .hash import DIGEST_SIZE, to_hex
from .objects import Blob, Commit, PlumbObject, Tree, decode_blob, decode_commit, decode_tree
from plumb.utils.compression import decompress
from plumb.utils.parsing import read_offset_varint, read_varint_le

logger = logging.getLogger(__name__)

PACK_SIGNATURE = b'PACK'
PACK_VERSION = 2
PACK_HEADER_SIZE = 12
PACK_TRAILER_SIZE = 20

OBJ_COMMIT = 1
OBJ_TREE = 2
OBJ_BLOB = 3
OBJ_TAG = 4
OBJ_OFS_DELTA = 6
OBJ_REF_DELTA = 7

DELTA_TYPES = (OBJ_OFS_DELTA, OBJ_REF_DELTA)

Decoder = Callable[[bytes], PlumbObject]

DECODERS: Dict[int, Decoder] = {
    OBJ_COMMIT: decode_commit,
    OBJ_TREE: decode_tree,
    OBJ_BLOB: decode_blob,
}

# A delta carries no type of its own; its result is decoded like its base.
BASE_DECODERS: Dict[type, Decoder] = {
    Blob: decode_blob,
    Tree: decode_tree,
    Commit: decode_commit,
}


@dataclass
class PackEntry:
    """One entry read from a pack stream, before delta resolution."""

    offset: int
    type_num: int
    size: int
    data: bytes
    length: int
    base_offset: Optional[int] = None
    base_hash: Optional[bytes] = None


def read_pack_header(data: bytes) -> Tuple[int, int]:
    """
    Validate the 12-byte pack header.

    Returns:
        Tuple of (version, declared object count)

    Raises:
        PackError: On bad signature or unsupported version
    """
    if len(data) < PACK_HEADER_SIZE:
        raise PackError(f"Pack too short for a header: {len(data)} bytes")
    if data[:4] != PACK_SIGNATURE:
        raise PackError(f"No PACK header in the pack file: {bytes(data[:4])!r}")
    version, count = struct.unpack('>LL', data[4:PACK_HEADER_SIZE])
    if version != PACK_VERSION:
        raise PackError(f"Unsupported pack version: {version}")
    return version, count


def read_entry_header(data: bytes, pos: int) -> Tuple[int, int, int]:
    """
    Read an entry's type and inflated size.

    Bits 4-6 of the first byte hold the type; its low 4 bits are the
    lowest bits of the size, and further bytes add 7 bits each while the
    high bit is set.

    Returns:
        Tuple of (type number, size, offset after the header)
    """
    if pos >= len(data):
        raise PackError(f"Truncated entry header at offset {pos}")
    first = data[pos]
    type_num = (first >> 4) & 0x07
    size = first & 0x0F
    pos += 1
    if first & 0x80:
        rest, pos = read_varint_le(data, pos)
        size |= rest << 4
    return type_num, size, pos


def read_pack_entry(data: bytes, offset: int) -> PackEntry:
    """
    Read the entry that starts at offset and inflate its data.

    Raises:
        PackError: On an unknown type or an inflated size that differs
            from the size declared in the entry header
    """
    type_num, size, pos = read_entry_header(data, offset)
    base_offset = None
    base_hash = None

    if type_num == OBJ_OFS_DELTA:
        distance, pos = read_offset_varint(data, pos)
        if distance == 0 or distance > offset:
            raise UnresolvedDeltaError(
                f"Delta at offset {offset} points outside the pack (distance {distance})"
            )
        base_offset = offset - distance
    elif type_num == OBJ_REF_DELTA:
        base_hash = bytes(data[pos:pos + DIGEST_SIZE])
        if len(base_hash) != DIGEST_SIZE:
            raise PackError(f"Truncated base hash at offset {offset}")
        pos += DIGEST_SIZE
    elif type_num not in DECODERS and type_num != OBJ_TAG:
        raise PackError(f"Unrecognized object type {type_num} at offset {offset}")

    consumed, content = decompress(memoryview(data)[pos:])
    if len(content) != size:
        raise PackError(
            f"Wrong object length at offset {offset}: "
            f"expected {size} got {len(content)}, obj_type {type_num}"
        )

    return PackEntry(
        offset=offset,
        type_num=type_num,
        size=size,
        data=content,
        length=pos + consumed - offset,
        base_offset=base_offset,
        base_hash=base_hash,
    )


def apply_delta(base: bytes, delta: bytes) -> bytes:
    """
    Rebuild a target buffer from base and a copy/insert delta.

    The delta opens with the source and target sizes as little-endian
    base-128 integers. Each following instruction either copies a range
    of base (high bit set; bits 0-3 select offset bytes, bits 4-5 select
    size bytes, a size of 0 means 0x10000) or inserts the next N literal
    bytes (high bit clear, N = the low 7 bits).

    Raises:
        ApplyDeltaError: On a size mismatch or malformed instruction
    """
    src_size, index = read_varint_le(delta, 0)
    if src_size != len(base):
        raise ApplyDeltaError(
            f"Wrong source length: expected {src_size} got {len(base)}"
        )
    dest_size, index = read_varint_le(delta, index)

    out = []
    delta_length = len(delta)
    while index < delta_length:
        cmd = delta[index]
        index += 1
        if cmd & 0x80:
            cp_off = 0
            cp_size = 0
            for i in range(4):
                if cmd & (1 << i):
                    if index >= delta_length:
                        raise ApplyDeltaError("Truncated copy instruction")
                    cp_off |= delta[index] << (i * 8)
                    index += 1
            for i in range(2):
                if cmd & (1 << (4 + i)):
                    if index >= delta_length:
                        raise ApplyDeltaError("Truncated copy instruction")
                    cp_size |= delta[index] << (i * 8)
                    index += 1
            if cp_size == 0:
                cp_size = 0x10000
            if cp_off + cp_size > src_size:
                raise ApplyDeltaError(
                    f"Copy of {cp_size} bytes at {cp_off} exceeds source length {src_size}"
                )
            out.append(base[cp_off:cp_off + cp_size])
        elif cmd:
            if index + cmd > delta_length:
                raise ApplyDeltaError("Insert instruction runs past end of delta")
            out.append(delta[index:index + cmd])
            index += cmd
        else:
            raise ApplyDeltaError("Invalid opcode 0")

    result = b''.join(out)
    if len(result) != dest_size:
        raise ApplyDeltaError(
            f"Wrong length after applying delta: expected {dest_size} got {len(result)}"
        )
    return result


def parse_pack(data: bytes) -> Dict[str, PlumbObject]:
    """
    Decode a whole pack stream into its objects.

    Args:
        data: Complete pack bytes, trailer included

    Returns:
        Mapping of hex hash to Blob, Tree or Commit. Tags are read but
        not returned.

    Raises:
        PackError: If anything in the pack is malformed; no objects are
            returned in that case
    """
    _, count = read_pack_header(data)
    logger.debug("Pack declares %d objects in %d bytes", count, len(data))

    offsets: Dict[int, bytes] = {}
    objects: Dict[bytes, Tuple[PlumbObject, bytes]] = {}
    entries_read = 0
    offset = PACK_HEADER_SIZE
    end = len(data) - PACK_TRAILER_SIZE

    while offset < end:
        entry = read_pack_entry(data, offset)
        entries_read += 1

        if entry.type_num in DELTA_TYPES:
            base_hash = _find_base(entry, offsets, objects)
            base_obj, base_payload = objects[base_hash]
            payload = apply_delta(base_payload, entry.data)
            obj = BASE_DECODERS[type(base_obj)](payload)
        elif entry.type_num == OBJ_TAG:
            offset += entry.length
            continue
        else:
            payload = entry.data
            obj = DECODERS[entry.type_num](payload)

        raw_hash, _ = obj.encode()
        objects[raw_hash] = (obj, payload)
        offsets[entry.offset] = raw_hash
        offset += entry.length

    if entries_read != count:
        raise PackError(
            f"Wrong number of objects in a pack: expected {count} got {entries_read}"
        )

    logger.debug("Decoded %d objects from pack", len(objects))
    return {to_hex(raw_hash): obj for raw_hash, (obj, _) in objects.items()}


def _find_base(entry: PackEntry,
               offsets: Dict[int, bytes],
               objects: Dict[bytes, Tuple[PlumbObject, bytes]]) -> bytes:
    if entry.base_hash is not None:
        base_hash = entry.base_hash
    else:
        base_hash = offsets.get(entry.base_offset)
        if base_hash is None:
            raise UnresolvedDeltaError(
                f"Could not find object at offset {entry.base_offset} "
                f"for delta at offset {entry.offset}"
            )
    if base_hash not in objects:
        raise UnresolvedDeltaError(f"Could not find object {to_hex(base_hash)}")
    return base_hash
