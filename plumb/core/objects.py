"""Git objects for Plumb.

Every object is stored and hashed in its canonical encoding::

    <type> <payload length>\\0<payload>

The three kinds (blob, tree, commit) form a closed set; OBJECT_TYPES maps
each type token to its class and is the only dispatch table.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Type, Union

from .errors import ObjectFormatError
from .hash import DIGEST_SIZE, digest, from_hex, to_hex
from plumb.utils.parsing import parse_contributor, parse_string_until, take_until


class PlumbObject(ABC):
    """Base class for all Plumb objects."""

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize object payload to bytes.

        Returns:
            bytes: Payload without the ``<type> <length>\\0`` header
        """
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """
        Deserialize object from its payload.

        Args:
            data: Payload without the header
        """
        pass

    @abstractmethod
    def content(self) -> str:
        """Render the object as human-readable text."""
        pass

    @property
    def type(self) -> str:
        """
        Return object type name.

        Returns:
            str: Object type (blob, tree, commit)
        """
        return self.__class__.__name__.lower()

    def encode(self) -> Tuple[bytes, bytes]:
        """
        Encode object in canonical form.

        Returns:
            Tuple of (20-byte SHA-1 digest, canonical bytes)
        """
        data = self.serialize()
        encoded = f"{self.type} {len(data)}\0".encode() + data
        return digest(encoded), encoded

    @property
    def hash(self) -> str:
        """
        Get object hash.

        Returns:
            str: 40-character SHA-1 hash
        """
        return to_hex(self.encode()[0])


class Blob(PlumbObject):
    """
    Represents file content.

    A blob stores the raw content of a file without any metadata
    like filename or permissions.
    """

    def __init__(self, data: Optional[bytes] = None):
        self.data = data or b''

    def serialize(self) -> bytes:
        return self.data

    def deserialize(self, data: bytes) -> None:
        self.data = bytes(data)

    def content(self) -> str:
        try:
            return self.data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ObjectFormatError(f"Blob is not valid UTF-8: {e}") from e

    @classmethod
    def from_file(cls, filepath: str) -> 'Blob':
        """
        Create blob from file.

        Args:
            filepath: Path to file

        Returns:
            Blob: New blob containing file content
        """
        with open(filepath, 'rb') as f:
            return cls(f.read())

    def __eq__(self, other) -> bool:
        return isinstance(other, Blob) and self.data == other.data

    def __repr__(self) -> str:
        return f"Blob(hash={self.hash[:7]}, size={len(self.data)})"


@dataclass
class TreeEntry:
    """
    A single entry in a tree.

    mode is the numeric file mode as written in the tree (``100644``,
    ``100755``, ``120000``, ``40000``); hash is the raw 20-byte digest.
    """

    mode: int
    name: str
    hash: bytes

    @property
    def type(self) -> str:
        """Object kind the entry points to, judged from its mode."""
        return 'blob' if str(self.mode).startswith('1') else 'tree'

    @property
    def hex(self) -> str:
        return to_hex(self.hash)

    def __lt__(self, other: 'TreeEntry') -> bool:
        return self.name < other.name

    def __repr__(self) -> str:
        return f"TreeEntry({self.mode} {self.type} {self.hex[:7]} {self.name})"


class Tree(PlumbObject):
    """
    Represents directory structure.

    A tree contains entries pointing to blobs (files) and other trees
    (subdirectories). Entries built with add_entry() are kept sorted by
    name; entries read from a payload keep their stored order.
    """

    def __init__(self, entries: Optional[List[TreeEntry]] = None):
        self.entries: List[TreeEntry] = list(entries or [])

    def add_entry(self, mode: int, name: str, obj_hash: Union[bytes, str]) -> None:
        """
        Add entry to tree.

        Args:
            mode: File mode, e.g. 0o100644 written as the integer 100644
            name: Entry name (no NUL, no '/')
            obj_hash: Raw digest or 40-character hex hash
        """
        if not name or '\0' in name or '/' in name:
            raise ObjectFormatError(f"Invalid tree entry name: {name!r}")
        if isinstance(obj_hash, str):
            obj_hash = from_hex(obj_hash)
        self.entries.append(TreeEntry(mode, name, obj_hash))
        self.entries.sort()

    def serialize(self) -> bytes:
        """
        Serialize tree entries in stored order.

        Format per entry: <mode> <name>\\0<20-byte hash>
        """
        return b''.join(
            f"{entry.mode} {entry.name}".encode() + b'\0' + entry.hash
            for entry in self.entries
        )

    def deserialize(self, data: bytes) -> None:
        entries = []
        pos = 0

        while pos < len(data):
            mode_bytes = take_until(data, b' ', pos)
            try:
                mode = int(mode_bytes.decode('ascii'))
            except (UnicodeDecodeError, ValueError) as e:
                raise ObjectFormatError(f"Invalid tree entry mode: {mode_bytes!r}") from e
            pos += len(mode_bytes) + 1

            null_pos = data.find(b'\0', pos)
            if null_pos == -1:
                raise ObjectFormatError("Tree entry name is not NUL-terminated")
            name = parse_string_until(data, b'\0', pos)
            pos = null_pos + 1

            obj_hash = bytes(data[pos:pos + DIGEST_SIZE])
            if len(obj_hash) != DIGEST_SIZE:
                raise ObjectFormatError(f"Truncated hash for tree entry {name!r}")
            pos += DIGEST_SIZE

            entries.append(TreeEntry(mode, name, obj_hash))

        self.entries = entries

    def content(self) -> str:
        return ''.join(
            f"{entry.mode:06d} {entry.type} {entry.hex}    {entry.name}\n"
            for entry in self.entries
        )

    @classmethod
    def from_directory(cls, repo, directory: str) -> 'Tree':
        """
        Build tree from directory contents, writing every blob and subtree.

        The .git directory is skipped, as are subdirectories that hold
        nothing to track.

        Args:
            repo: Repository instance
            directory: Path to directory

        Returns:
            Tree: New tree object (not yet written)
        """
        import stat

        tree = cls()

        for item in sorted(Path(directory).iterdir()):
            if item.name == '.git':
                continue

            if item.is_symlink():
                blob = Blob(str(item.readlink()).encode())
                tree.add_entry(120000, item.name, repo.write_object(blob))

            elif item.is_file():
                blob = Blob.from_file(str(item))
                obj_hash = repo.write_object(blob)
                mode = 100755 if item.stat().st_mode & stat.S_IXUSR else 100644
                tree.add_entry(mode, item.name, obj_hash)

            elif item.is_dir():
                subtree = Tree.from_directory(repo, str(item))
                if subtree.entries:
                    tree.add_entry(40000, item.name, repo.write_object(subtree))

        return tree

    def __eq__(self, other) -> bool:
        return isinstance(other, Tree) and self.entries == other.entries

    def __repr__(self) -> str:
        return f"Tree(entries={len(self.entries)})"


@dataclass
class Contributor:
    """Author or committer identity with its timestamp."""

    name: str
    email: str
    timestamp: int
    timezone: str = '+0000'

    @classmethod
    def from_identity(cls, identity: str, timestamp: int, timezone: str) -> 'Contributor':
        """Split a ``Name <email>`` string into a Contributor."""
        name, sep, rest = identity.partition('<')
        if not sep or not rest.endswith('>'):
            raise ObjectFormatError(f"Invalid identity: {identity!r}")
        return cls(name.strip(), rest[:-1], timestamp, timezone)

    def __str__(self) -> str:
        return f"{self.name} <{self.email}> {self.timestamp} {self.timezone}"


def local_timezone(timestamp: Optional[int] = None) -> str:
    """Format the local UTC offset at timestamp as ``+HHMM``/``-HHMM``."""
    if timestamp is None:
        timestamp = int(time.time())
    offset = time.localtime(timestamp).tm_gmtoff // 60
    sign = '+' if offset >= 0 else '-'
    hours, minutes = divmod(abs(offset), 60)
    return f"{sign}{hours:02d}{minutes:02d}"


class Commit(PlumbObject):
    """
    Represents a commit with metadata.

    A commit captures:
    - Snapshot of project (tree hash)
    - Parent commit(s) for history
    - Author and committer identity with timestamps
    - Commit message, kept verbatim

    Header lines other than tree/parent/author/committer (gpgsig, encoding,
    mergetag) are kept as raw bytes in extra_headers so that re-encoding a
    fetched commit reproduces its hash.
    """

    def __init__(
        self,
        tree: str = '',
        parents: Optional[List[str]] = None,
        author: Optional[Contributor] = None,
        committer: Optional[Contributor] = None,
        message: str = '',
        extra_headers: bytes = b'',
    ):
        self.tree = tree
        self.parents: List[str] = list(parents or [])
        self.author = author or Contributor('', '', 0)
        self.committer = committer or Contributor('', '', 0)
        self.message = message
        self.extra_headers = extra_headers

    def serialize(self) -> bytes:
        """
        Serialize commit payload.

        Format:
        tree <tree-hash>
        parent <parent-hash>  (zero or more)
        author Name <email> <timestamp> <timezone>
        committer Name <email> <timestamp> <timezone>

        <commit message>
        """
        lines = [f'tree {self.tree}\n']
        for parent in self.parents:
            lines.append(f'parent {parent}\n')
        lines.append(f'author {self.author}\n')
        lines.append(f'committer {self.committer}\n')

        header = ''.join(lines).encode() + self.extra_headers
        return header + b'\n' + self.message.encode()

    def deserialize(self, data: bytes) -> None:
        if not data.startswith(b'tree '):
            raise ObjectFormatError("Commit does not start with a tree line")
        pos = 5
        self.tree = parse_string_until(data, b'\n', pos)
        pos += len(self.tree) + 1

        self.parents = []
        while data.startswith(b'parent ', pos):
            pos += 7
            parent = parse_string_until(data, b'\n', pos)
            pos += len(parent) + 1
            self.parents.append(parent)

        if not data.startswith(b'author ', pos):
            raise ObjectFormatError("Commit is missing its author line")
        pos, name, email, timestamp, timezone = parse_contributor(data, pos + 7)
        self.author = Contributor(name, email, timestamp, timezone)

        if not data.startswith(b'committer ', pos):
            raise ObjectFormatError("Commit is missing its committer line")
        pos, name, email, timestamp, timezone = parse_contributor(data, pos + 10)
        self.committer = Contributor(name, email, timestamp, timezone)

        headers_start = pos
        while pos < len(data) and data[pos:pos + 1] != b'\n':
            line_end = data.find(b'\n', pos)
            if line_end == -1:
                raise ObjectFormatError("Commit header is not newline-terminated")
            pos = line_end + 1
        self.extra_headers = bytes(data[headers_start:pos])

        if pos >= len(data):
            raise ObjectFormatError("Commit is missing the blank line before its message")
        try:
            self.message = data[pos + 1:].decode('utf-8')
        except UnicodeDecodeError as e:
            raise ObjectFormatError(f"Commit message is not valid UTF-8: {e}") from e

    def content(self) -> str:
        try:
            return self.serialize().decode('utf-8')
        except UnicodeDecodeError as e:
            raise ObjectFormatError(f"Commit is not valid UTF-8: {e}") from e

    @classmethod
    def create(
        cls,
        tree_hash: str,
        parent_hashes: List[str],
        author: str,
        committer: str,
        message: str,
        timestamp: Optional[int] = None,
        timezone: Optional[str] = None
    ) -> 'Commit':
        """
        Create a new commit.

        Args:
            tree_hash: Hash of tree object
            parent_hashes: List of parent commit hashes
            author: Author name and email (e.g., "Name <email>")
            committer: Committer name and email
            message: Commit message
            timestamp: Unix timestamp (defaults to current time)
            timezone: Offset such as "+0000" (defaults to the local offset)

        Returns:
            Commit: New commit object
        """
        if timestamp is None:
            timestamp = int(time.time())
        if timezone is None:
            timezone = local_timezone(timestamp)

        return cls(
            tree=tree_hash,
            parents=parent_hashes,
            author=Contributor.from_identity(author, timestamp, timezone),
            committer=Contributor.from_identity(committer, timestamp, timezone),
            message=message,
        )

    def __eq__(self, other) -> bool:
        return isinstance(other, Commit) and (
            self.tree, self.parents, self.author, self.committer,
            self.message, self.extra_headers,
        ) == (
            other.tree, other.parents, other.author, other.committer,
            other.message, other.extra_headers,
        )

    def __repr__(self) -> str:
        parent_info = f", parents={len(self.parents)}" if self.parents else ""
        msg_preview = self.message.split('\n')[0][:50]
        return f"Commit(hash={self.hash[:7]}{parent_info}, msg='{msg_preview}')"


OBJECT_TYPES: Dict[bytes, Type[PlumbObject]] = {
    b'blob': Blob,
    b'tree': Tree,
    b'commit': Commit,
}


def encode(obj: PlumbObject) -> Tuple[bytes, bytes]:
    """Return (digest, canonical bytes) for obj."""
    return obj.encode()


def _decode_payload(cls: Type[PlumbObject], payload: bytes) -> PlumbObject:
    obj = cls()
    obj.deserialize(payload)
    return obj


def decode_blob(payload: bytes) -> Blob:
    return _decode_payload(Blob, payload)


def decode_tree(payload: bytes) -> Tree:
    return _decode_payload(Tree, payload)


def decode_commit(payload: bytes) -> Commit:
    return _decode_payload(Commit, payload)


def decode(data: bytes) -> PlumbObject:
    """
    Decode a canonical object encoding.

    Args:
        data: ``<type> <length>\\0<payload>`` bytes

    Returns:
        PlumbObject: Blob, Tree or Commit

    Raises:
        ObjectFormatError: If the type is unsupported or the header is invalid
    """
    type_token = take_until(data, b' ')
    cls = OBJECT_TYPES.get(type_token)
    if cls is None:
        raise ObjectFormatError(
            f"Unsupported object type: {type_token.decode('utf-8', 'replace')}"
        )

    null_idx = data.find(b'\0')
    if null_idx == -1:
        raise ObjectFormatError(f"No NUL after {type_token.decode()} object header")

    size_str = data[len(type_token) + 1:null_idx]
    payload = data[null_idx + 1:]
    try:
        size = int(size_str)
    except ValueError as e:
        raise ObjectFormatError(
            f"Invalid {type_token.decode()} object length: {size_str!r}"
        ) from e
    if len(payload) != size:
        raise ObjectFormatError(
            f"{type_token.decode()} object size mismatch: expected {size}, got {len(payload)}"
        )

    return _decode_payload(cls, payload)


def content(obj: PlumbObject) -> str:
    """Render obj as the text cat-file -p prints."""
    return obj.content()
