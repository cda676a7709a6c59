"""Operations module for high-level Plumb operations.

This module contains the logic for writing stored objects back out
to a working directory.
"""

from plumb.operations.checkout import checkout_tree, checkout_commit

__all__ = [
    'checkout_tree', 'checkout_commit',
]
