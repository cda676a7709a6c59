"""Materialize stored trees onto the filesystem."""

import logging
import os
from pathlib import Path

from plumb.core.errors import ObjectFormatError
from plumb.core.objects import Blob, Commit, Tree

logger = logging.getLogger(__name__)

MODE_EXECUTABLE = 100755
MODE_SYMLINK = 120000
MODE_GITLINK = 160000

INVALID_NAMES = ('', '.', '..', '.git')


def validate_entry_name(name: str) -> bool:
    """Whether name is safe to create as one path element of a work tree."""
    if name.lower() in INVALID_NAMES:
        return False
    return not any(c in name for c in ('/', '\\', '\0'))


def checkout_tree(repo, tree_hash: str, path: Path) -> int:
    """
    Recursively write a tree's entries under path.

    Blobs become files (mode 100755 gets the executable bit, mode 120000
    becomes a symlink where the platform allows it), subtrees become
    directories. Submodule entries are skipped. Entry names that are
    empty, ".", "..", ".git" (any case), repeated, or hold a path separator
    are rejected before anything is created for them.

    Args:
        repo: Repository holding the objects
        tree_hash: Hash of the tree to write
        path: Directory to write into (created if missing)

    Returns:
        Number of files written
    """
    tree = repo.read_object(tree_hash)
    if not isinstance(tree, Tree):
        raise ObjectFormatError(f"Object {tree_hash} is a {tree.type}, not a tree")

    path.mkdir(parents=True, exist_ok=True)
    written = 0
    seen = set()

    for entry in tree.entries:
        if not validate_entry_name(entry.name) or entry.name in seen:
            raise ObjectFormatError(
                f"Refusing to check out tree {tree_hash}: invalid entry name {entry.name!r}"
            )
        seen.add(entry.name)
        entry_path = path / entry.name

        if entry.mode == MODE_GITLINK:
            continue

        if entry.type == 'tree':
            written += checkout_tree(repo, entry.hex, entry_path)
            continue

        blob = repo.read_object(entry.hex)
        if not isinstance(blob, Blob):
            raise ObjectFormatError(f"Object {entry.hex} is a {blob.type}, not a blob")

        if entry.mode == MODE_SYMLINK and hasattr(os, 'symlink'):
            try:
                os.symlink(blob.data.decode('utf-8'), entry_path)
            except OSError:
                entry_path.write_bytes(blob.data)
        else:
            entry_path.write_bytes(blob.data)
            if entry.mode == MODE_EXECUTABLE:
                entry_path.chmod(entry_path.stat().st_mode | 0o111)
        written += 1

    return written


def checkout_commit(repo, commit_hash: str) -> int:
    """Write the tree of commit_hash into the repository's work tree."""
    commit = repo.read_object(commit_hash)
    if not isinstance(commit, Commit):
        raise ObjectFormatError(f"Object {commit_hash} is a {commit.type}, not a commit")
    written = checkout_tree(repo, commit.tree, repo.work_tree)
    logger.debug("Checked out %d files from %s", written, commit_hash)
    return written
