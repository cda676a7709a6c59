"""Blob and canonical encoding tests."""

import hashlib
import tempfile
from pathlib import Path

import pytest
from plumb.core.errors import ObjectFormatError
from plumb.core.objects import Blob, Tree, decode, decode_blob, encode, content


def test_blob_creation():
    """Test blob creation with data."""
    blob = Blob(b'hello world')
    assert blob.data == b'hello world'
    assert blob.type == 'blob'


def test_blob_serialize():
    """Test blob payload is the raw data."""
    assert Blob(b'test data').serialize() == b'test data'


def test_blob_roundtrip():
    """Test blob encode/decode cycle."""
    blob = Blob(b'test content')
    _, encoded = encode(blob)
    assert decode(encoded) == blob
    assert decode_blob(blob.serialize()) == blob


def test_blob_canonical_encoding():
    """Test the header is '<type> <length>\\0'."""
    _, encoded = encode(Blob(b'hello\n'))
    assert encoded == b'blob 6\0hello\n'


def test_blob_hash_matches_git():
    """Test well-known hashes of git blobs."""
    assert Blob(b'hello\n').hash == 'ce013625030ba8dba906f756967f9e9ca394464a'
    assert Blob(b'').hash == 'e69de29bb2d1d6434b8b29ae775ad8c2e48c5391'


def test_encode_hash_is_sha1_of_encoding():
    """Test the digest is SHA-1 of the exact encoded buffer."""
    raw_hash, encoded = encode(Blob(b'some bytes'))
    assert raw_hash == hashlib.sha1(encoded).digest()


def test_blob_hash_deterministic():
    """Test blob hash determinism."""
    assert Blob(b'same data').hash == Blob(b'same data').hash


def test_blob_from_file():
    """Test blob creation from file."""
    with tempfile.NamedTemporaryFile(mode='w', delete=False) as f:
        f.write('file content')
        temp_path = f.name

    try:
        blob = Blob.from_file(temp_path)
        assert blob.data == b'file content'
    finally:
        Path(temp_path).unlink()


def test_blob_content_is_text():
    """Test blobs render as UTF-8 text."""
    assert content(Blob('héllo\n'.encode())) == 'héllo\n'


def test_blob_content_rejects_binary():
    """Test non-UTF-8 blobs cannot be rendered."""
    with pytest.raises(ObjectFormatError):
        content(Blob(b'\xff\xfe\x00'))


def test_empty_tree_hash_matches_git():
    """Test the well-known empty tree hash."""
    assert Tree().hash == '4b825dc642cb6eb9a060e54bf8d69288fbee4904'


def test_decode_unsupported_type():
    """Test an unknown type token is reported by name."""
    with pytest.raises(ObjectFormatError, match="Unsupported object type: tag"):
        decode(b'tag 3\0abc')


def test_decode_size_mismatch():
    """Test a header length that disagrees with the payload fails."""
    with pytest.raises(ObjectFormatError, match="size mismatch"):
        decode(b'blob 10\0short')


def test_decode_missing_nul():
    """Test a header without its NUL terminator fails."""
    with pytest.raises(ObjectFormatError):
        decode(b'blob 5 hello')


def test_decode_invalid_length():
    """Test a non-numeric length fails."""
    with pytest.raises(ObjectFormatError, match="Invalid blob object length"):
        decode(b'blob x\0')
