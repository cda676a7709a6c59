"""Remote module for fetching from other repositories.

This module handles all remote-related functionality:
- Remote management (add, list)
- Ref discovery and pack retrieval over smart HTTP
- Clone operations
"""

from plumb.remote.protocol import Ref, get_refs, fetch_pack, fetch_ref
from plumb.remote.remote import RemoteManager

__all__ = [
    'Ref',
    'get_refs',
    'fetch_pack',
    'fetch_ref',
    'RemoteManager',
]
