"""Exception classes for Plumb.

Every failure raised by the library derives from PlumbError, so callers
can report and abort with a single except clause. Lower-level failures
(I/O, zlib, UTF-8, HTTP transport) are chained with ``raise ... from``.
"""


class PlumbError(Exception):
    """Base class for all Plumb errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RepositoryError(PlumbError):
    """Repository directory is missing or already initialized."""


class ObjectNotFoundError(PlumbError):
    """Object file does not exist in the store."""

    def __init__(self, obj_hash: str):
        super().__init__(f"Object {obj_hash} not found")
        self.hash = obj_hash


class DecompressionError(PlumbError):
    """A zlib stream is malformed or truncated."""


class ObjectFormatError(PlumbError):
    """Object bytes do not follow the canonical encoding."""


class PackError(PlumbError):
    """Pack stream is malformed."""


class UnresolvedDeltaError(PackError):
    """Delta entry refers to a base object that has not been seen."""


class ApplyDeltaError(PackError):
    """Delta instruction stream cannot be applied to its base."""


class ProtocolError(PlumbError):
    """Remote server response does not follow the wire protocol."""
