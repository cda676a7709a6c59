"""Hash utilities for Plumb."""

import hashlib

from plumb.core.errors import ObjectFormatError

DIGEST_SIZE = 20


def digest(data: bytes) -> bytes:
    """
    Compute the raw SHA-1 digest of data.

    Args:
        data: Bytes to hash

    Returns:
        20-byte digest
    """
    return hashlib.sha1(data).digest()


def hash_object(data: bytes) -> str:
    """
    Compute SHA-1 hash of data.

    Args:
        data: Bytes to hash

    Returns:
        40-character hex string
    """
    return hashlib.sha1(data).hexdigest()


def to_hex(raw: bytes) -> str:
    """Render a 20-byte digest as 40 lowercase hex characters."""
    return raw.hex()


def from_hex(hex_hash: str) -> bytes:
    """Parse a 40-character hex hash back into its raw digest."""
    try:
        raw = bytes.fromhex(hex_hash)
    except ValueError:
        raw = b''
    if len(raw) != DIGEST_SIZE:
        raise ObjectFormatError(f"Invalid object hash: {hex_hash!r}")
    return raw
