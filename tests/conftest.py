"""Shared pytest fixtures for Plumb tests."""

import hashlib
import shutil
import struct
import tempfile
import zlib
from pathlib import Path

import pytest

from plumb.core.config import Config
from plumb.core.objects import Blob, Commit, Contributor, Tree
from plumb.core.repository import Repository


OBJ_COMMIT = 1
OBJ_TREE = 2
OBJ_BLOB = 3
OBJ_TAG = 4
OBJ_OFS_DELTA = 6
OBJ_REF_DELTA = 7


def entry_header(type_num, size):
    """Encode a pack entry header: type in bits 4-6, size in 4 + 7n bits."""
    byte = (type_num << 4) | (size & 0x0F)
    size >>= 4
    out = []
    while size:
        out.append(byte | 0x80)
        byte = size & 0x7F
        size >>= 7
    out.append(byte)
    return bytes(out)


def offset_encoding(distance):
    """Encode an offset-delta distance, most significant group first."""
    out = [distance & 0x7F]
    distance >>= 7
    while distance:
        distance -= 1
        out.insert(0, 0x80 | (distance & 0x7F))
        distance >>= 7
    return bytes(out)


def delta_size(size):
    """Encode a delta header size as a little-endian base-128 integer."""
    out = []
    while True:
        byte = size & 0x7F
        size >>= 7
        if size:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def pack_entry(type_num, payload, prefix=b''):
    """Build one pack entry; prefix holds the delta base reference."""
    return entry_header(type_num, len(payload)) + prefix + zlib.compress(payload)


def build_pack(entries, count=None, version=2):
    """Wrap raw entries in a pack header and SHA-1 trailer."""
    if count is None:
        count = len(entries)
    body = b'PACK' + struct.pack('>LL', version, count) + b''.join(entries)
    return body + hashlib.sha1(body).digest()


class PackBuilder:
    """Fixture-facing bundle of the pack helpers above."""

    entry_header = staticmethod(entry_header)
    offset_encoding = staticmethod(offset_encoding)
    delta_size = staticmethod(delta_size)
    pack_entry = staticmethod(pack_entry)
    build_pack = staticmethod(build_pack)


@pytest.fixture
def packs():
    """Helpers for assembling synthetic pack streams."""
    return PackBuilder


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep tests away from the user's global config and identity variables."""
    home = tmp_path_factory.mktemp('home')
    monkeypatch.setattr(Config, 'GLOBAL_CONFIG_PATH', home / '.plumbconfig')
    for var in ('GIT_AUTHOR_NAME', 'GIT_AUTHOR_EMAIL',
                'GIT_COMMITTER_NAME', 'GIT_COMMITTER_EMAIL',
                'PLUMB_USER_NAME', 'PLUMB_USER_EMAIL'):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository."""
    repo = Repository(str(temp_dir))
    repo.init()
    return repo


@pytest.fixture
def sample_blob():
    """Create a sample blob object."""
    return Blob(b"Hello, World!\n")


@pytest.fixture
def sample_tree(repo, sample_blob):
    """Create a sample tree with one blob."""
    blob_hash = repo.write_object(sample_blob)
    tree = Tree()
    tree.add_entry(100644, 'test.txt', blob_hash)
    return tree


@pytest.fixture
def sample_commit(sample_tree, repo):
    """Sample commit object."""
    tree_hash = repo.write_object(sample_tree)
    author = Contributor('Test User', 'test@example.com', 1698660000, '+0100')
    return Commit(
        tree=tree_hash,
        parents=[],
        author=author,
        committer=author,
        message='Test commit\n',
    )


@pytest.fixture
def remote_objects():
    """A small history: one commit whose tree holds a file and a subdirectory."""
    readme = Blob(b'# project\n')
    script = Blob(b'#!/bin/sh\necho hi\n')
    nested = Blob(b'nested content\n')

    subtree = Tree()
    subtree.add_entry(100644, 'nested.txt', nested.hash)

    root = Tree()
    root.add_entry(100644, 'README.md', readme.hash)
    root.add_entry(100755, 'run.sh', script.hash)
    root.add_entry(40000, 'src', subtree.hash)

    author = Contributor('Remote Author', 'remote@example.com', 1700000000, '-0500')
    commit = Commit(
        tree=root.hash,
        author=author,
        committer=author,
        message='Initial commit\n',
    )
    return {
        'commit': commit,
        'root': root,
        'subtree': subtree,
        'blobs': [readme, script, nested],
    }


@pytest.fixture
def remote_pack(remote_objects):
    """Pack stream holding every object in remote_objects, commit first."""
    entries = [pack_entry(OBJ_COMMIT, remote_objects['commit'].serialize()),
               pack_entry(OBJ_TREE, remote_objects['root'].serialize()),
               pack_entry(OBJ_TREE, remote_objects['subtree'].serialize())]
    entries += [pack_entry(OBJ_BLOB, blob.data) for blob in remote_objects['blobs']]
    return build_pack(entries)


def advertisement(refs, capabilities='multi_ack thin-pack side-band-64k ofs-delta'):
    """Render an info/refs body for (hash, name) pairs."""
    banner = '# service=git-upload-pack'
    lines = [f"{len(banner) + 5:04x}{banner}\n", '0000']
    for i, (obj_hash, name) in enumerate(refs):
        line = f"{obj_hash} {name}"
        if i == 0:
            line += '\0' + capabilities
        lines.append(f"{len(line) + 5:04x}{line}\n")
    lines.append('0000')
    return ''.join(lines)


@pytest.fixture
def make_advertisement():
    return advertisement
