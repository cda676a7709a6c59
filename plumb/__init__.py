"""Plumb - a minimal Git client implemented in Python."""

import logging

__version__ = '0.1.0'

from plumb.core.objects import PlumbObject, Blob, Tree, TreeEntry, Commit, Contributor
from plumb.core.repository import Repository, read_object, write_object
from plumb.core.pack import parse_pack
from plumb.remote.protocol import fetch_ref, get_refs

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Repository',
    'PlumbObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'Commit',
    'Contributor',
    'read_object',
    'write_object',
    'parse_pack',
    'get_refs',
    'fetch_ref',
]
