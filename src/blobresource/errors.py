class BlobResourceError(Exception):
    """Base class for every error raised by a blob resource."""

    pass


class MalformedLocationError(BlobResourceError, ValueError):
    """Raised when a location string is not a valid blob location."""

    pass


class BlobNotFoundError(BlobResourceError, FileNotFoundError):
    """Raised when a requested blob or its container does not exist."""

    pass


class UnsupportedOperationError(BlobResourceError, NotImplementedError):
    """Raised for capabilities a remote blob cannot provide, like a local path."""

    pass


class StorageIOError(BlobResourceError, OSError):
    """Raised when the storage service fails. The SDK error is the cause."""

    pass
