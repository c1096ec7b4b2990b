from datetime import datetime
from typing import IO, Any, Iterator, Protocol, runtime_checkable


class BlobPropertiesLike(Protocol):
    """Snapshot of a blob's server-side properties."""

    size: int
    last_modified: datetime


class StreamDownloader(Protocol):
    """A started download of a blob's content."""

    def chunks(self) -> Iterator[bytes]:
        """Iterate the content in the order it is stored."""
        ...


class BlobClientLike(Protocol):
    """Client for a single blob, as published by a container client."""

    container_name: str
    blob_name: str

    @property
    def url(self) -> str:
        """Canonical URL of the blob at the storage endpoint."""
        ...

    def exists(self) -> bool: ...

    def download_blob(self, **kwargs: Any) -> StreamDownloader: ...

    def upload_blob(self, data: bytes | IO[bytes], **kwargs: Any) -> Any: ...

    def get_blob_properties(self, **kwargs: Any) -> BlobPropertiesLike: ...


class ContainerClientLike(Protocol):
    """Client for a container/bucket in storage."""

    container_name: str

    def exists(self) -> bool: ...

    def create_container(self, **kwargs: Any) -> Any: ...

    def get_blob_client(self, blob: str) -> BlobClientLike:
        """Return a client for a blob in this container."""
        ...


class BlobServiceClientLike(Protocol):
    """The account-level client shared by every resource built from it."""

    def get_container_client(self, container: str) -> ContainerClientLike:
        """Return a client for a container."""
        ...


@runtime_checkable
class Resource(Protocol):
    """Read side of a resource addressed by a location string."""

    def exists(self) -> bool: ...

    def is_readable(self) -> bool: ...

    def is_open(self) -> bool: ...

    def is_file(self) -> bool: ...

    def open_read(self) -> IO[bytes]:
        """Open a fresh forward-only stream over the current content."""
        ...

    def content_length(self) -> int: ...

    def last_modified(self) -> int: ...

    def url(self) -> str: ...

    def filename(self) -> str | None: ...

    def description(self) -> str: ...

    def create_relative(self, relative_path: str) -> "Resource": ...

    def get_file(self) -> Any:
        """Return a local filesystem path for the resource."""
        ...


@runtime_checkable
class WritableResource(Resource, Protocol):
    """A resource that can also be written."""

    def is_writable(self) -> bool: ...

    def open_write(self) -> IO[bytes]:
        """Open a sink that replaces the content once closed."""
        ...
