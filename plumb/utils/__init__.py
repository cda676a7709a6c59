"""Utilities module for common helper functions.

This module contains:
- Compression utilities (zlib streams)
- Byte parsing helpers shared by objects and packs
"""

from plumb.utils.compression import compress, decompress

__all__ = [
    'compress', 'decompress',
]
