"""Repository management for Plumb."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from .errors import ObjectNotFoundError, PlumbError, RepositoryError
from .objects import PlumbObject, decode
from plumb.utils.compression import compress, decompress

logger = logging.getLogger(__name__)


class Repository:
    """
    Represents a Git repository rooted at an explicit path.

    A repository manages the .git directory structure and provides
    methods for reading and writing loose objects.
    """

    def __init__(self, path: Union[str, Path] = '.'):
        """
        Initialize repository.

        Args:
            path: Path to repository root (the directory holding .git)
        """
        self.work_tree = Path(path).resolve()
        self.git_dir = self.work_tree / '.git'
        self.objects_dir = self.git_dir / 'objects'
        self.refs_dir = self.git_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.tags_dir = self.refs_dir / 'tags'
        self.remotes_dir = self.refs_dir / 'remotes'
        self.head_file = self.git_dir / 'HEAD'
        self.config_file = self.git_dir / 'config'

        # Lazy loading to avoid circular import
        self._ref_manager = None
        self._remote_manager = None

    @property
    def refs(self):
        """Get RefManager instance."""
        if self._ref_manager is None:
            from .refs import RefManager
            self._ref_manager = RefManager(self)
        return self._ref_manager

    @property
    def remote(self):
        """Get RemoteManager instance."""
        if self._remote_manager is None:
            from plumb.remote.remote import RemoteManager
            self._remote_manager = RemoteManager(self)
        return self._remote_manager

    def init(self) -> 'Repository':
        """
        Initialize a new repository.

        Creates the .git directory structure:
        .git/
        ├── objects/       # Object database
        ├── refs/
        │   ├── heads/     # Branch references
        │   ├── tags/      # Tag references
        │   └── remotes/   # Remote references
        ├── HEAD           # Current branch/commit
        └── config         # Repository configuration

        Returns:
            Repository: self for method chaining

        Raises:
            RepositoryError: If repository already exists
        """
        if self.git_dir.exists():
            raise RepositoryError(f"Repository already exists at {self.git_dir}")

        self.work_tree.mkdir(parents=True, exist_ok=True)
        self.git_dir.mkdir()
        self.objects_dir.mkdir()
        self.refs_dir.mkdir()
        self.heads_dir.mkdir()
        self.tags_dir.mkdir()
        self.remotes_dir.mkdir()

        self.head_file.write_text('ref: refs/heads/master\n')
        self.config_file.write_text('[core]\n\trepositoryformatversion = 0\n')

        logger.debug("Initialized repository in %s", self.git_dir)
        return self

    @classmethod
    def find_repository(cls, path: str = '.') -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Args:
            path: Starting path for search

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / '.git').is_dir():
                return cls(str(current))

            if current == current.parent:
                return None

            current = current.parent

    def object_path(self, obj_hash: str) -> Path:
        """
        Get filesystem path for an object.

        Objects are stored in subdirectories named by the first 2 characters
        of the hash, with the remaining 38 characters as the filename.

        Args:
            obj_hash: 40-character SHA-1 hash

        Returns:
            Path: Full path to object file
        """
        return self.objects_dir / obj_hash[:2] / obj_hash[2:]

    def write_object(self, obj: PlumbObject) -> str:
        """
        Write object to repository.

        The zlib-compressed canonical encoding is written to a lock file
        next to its final path and renamed into place. An object that is
        already present is left untouched.

        Args:
            obj: Object to write

        Returns:
            str: SHA-1 hash of the object
        """
        raw_hash, encoded = obj.encode()
        obj_hash = raw_hash.hex()
        path = self.object_path(obj_hash)

        if path.exists():
            return obj_hash

        lock_path = path.with_name(path.name + '.lock')
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            lock_path.write_bytes(compress(encoded))
            os.replace(lock_path, path)
        except OSError as e:
            if lock_path.exists():
                lock_path.unlink()
            raise PlumbError(f"Failed to write object {obj_hash}: {e}") from e

        logger.debug("Wrote %s %s", obj.type, obj_hash)
        return obj_hash

    def read_object(self, obj_hash: str) -> PlumbObject:
        """
        Read object from repository.

        Args:
            obj_hash: 40-character SHA-1 hash

        Returns:
            PlumbObject: Decoded object (Blob, Tree, or Commit)

        Raises:
            ObjectNotFoundError: If the object file does not exist
            DecompressionError: If the file is not a valid zlib stream
            ObjectFormatError: If the decompressed bytes are not an object
        """
        path = self.object_path(obj_hash)

        try:
            compressed = path.read_bytes()
        except FileNotFoundError as e:
            raise ObjectNotFoundError(obj_hash) from e
        except OSError as e:
            raise PlumbError(f"Failed to read object {obj_hash}: {e}") from e

        _, encoded = decompress(compressed)
        return decode(encoded)

    def object_exists(self, obj_hash: str) -> bool:
        """Check if object exists in repository."""
        return self.object_path(obj_hash).exists()

    def __repr__(self) -> str:
        return f"Repository(path={self.work_tree})"


def write_object(root: Union[str, Path], obj: PlumbObject) -> str:
    """Store obj in the repository at root and return its hex hash."""
    return Repository(root).write_object(obj)


def read_object(root: Union[str, Path], obj_hash: str) -> PlumbObject:
    """Load the object with obj_hash from the repository at root."""
    return Repository(root).read_object(obj_hash)
