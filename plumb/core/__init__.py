"""Core functionality for Plumb.

This module contains the core data structures:
- Git objects (Blob, Tree, Commit) and their canonical encoding
- Repository management and the loose object store
- Pack stream decoding
- Reference management
- Configuration management
- Hashing utilities

For the network protocol and cloning, see plumb.remote
For writing trees to disk, see plumb.operations
"""

from plumb.core.objects import (PlumbObject, Blob, Tree, TreeEntry, Commit, Contributor,
                                encode, decode, decode_blob, decode_tree, decode_commit,
                                content)
from plumb.core.repository import Repository, read_object, write_object
from plumb.core.hash import digest, hash_object, to_hex
from plumb.core.pack import parse_pack, apply_delta
from plumb.core.refs import RefManager
from plumb.core.config import Config, get_config

__all__ = [
    'PlumbObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'Commit',
    'Contributor',
    'encode',
    'decode',
    'decode_blob',
    'decode_tree',
    'decode_commit',
    'content',
    'Repository',
    'read_object',
    'write_object',
    'digest',
    'hash_object',
    'to_hex',
    'parse_pack',
    'apply_delta',
    'RefManager',
    'Config',
    'get_config',
]
