import io
import logging
from enum import Enum

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.storage.blob import ContentSettings

from .errors import BlobNotFoundError, StorageIOError
from .storage_protocols import BlobClientLike, StreamDownloader

logger = logging.getLogger(__name__)

MSG_FAIL_READ = "Failed to read input stream of blob"
MSG_FAIL_COMMIT = "Failed to commit output stream of blob"


class WriteState(Enum):
    OPEN = "open"  # Accepting bytes
    CLOSING = "closing"  # Commit in progress
    CLOSED = "closed"  # Terminal, committed or aborted


class BlobReader(io.RawIOBase):
    """
    Forward-only byte stream over a started blob download.
    Pulls chunks from the downloader on demand.
    """

    def __init__(self, downloader: StreamDownloader, description: str = "") -> None:
        super().__init__()
        self._chunks = downloader.chunks()
        self._pending = b""
        self._description = description

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed blob stream.")
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
            except ResourceNotFoundError as e:
                raise BlobNotFoundError(
                    f"Blob disappeared while reading: {self._description}"
                ) from e
            except AzureError as e:
                logger.exception("%s: %s", MSG_FAIL_READ, self._description)
                raise StorageIOError(MSG_FAIL_READ) from e

        size = min(len(b), len(self._pending))
        b[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        self._pending = b""
        super().close()


class BlobWriter(io.RawIOBase):
    """
    Write sink for a block blob.

    Bytes are buffered locally and committed with a single ``upload_blob``
    call when the writer is closed, so the blob is replaced atomically.
    Chunking of large uploads is left to the storage client.
    Leaving a ``with`` block through an exception aborts without committing.
    """

    def __init__(
        self,
        blob_client: BlobClientLike,
        content_type: str | None = None,
        description: str = "",
    ) -> None:
        super().__init__()
        self._blob_client = blob_client
        self._content_type = content_type
        self._description = description
        self._buffer = io.BytesIO()
        self.state = WriteState.OPEN

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        if self.state is not WriteState.OPEN:
            raise ValueError("I/O operation on closed blob stream.")
        return self._buffer.write(b)

    def abort(self) -> None:
        """Discard buffered bytes without touching the remote blob."""
        if self.state is WriteState.CLOSED:
            return
        self._finish()

    def close(self) -> None:
        if self.state is not WriteState.OPEN:
            return
        self.state = WriteState.CLOSING
        try:
            self._commit()
        finally:
            self._finish()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.abort()
        else:
            self.close()

    def __del__(self) -> None:
        # Never commit from the garbage collector.
        if getattr(self, "state", WriteState.CLOSED) is not WriteState.CLOSED:
            self.abort()

    def _commit(self) -> None:
        kwargs = {"overwrite": True}
        if self._content_type:
            kwargs["content_settings"] = ContentSettings(
                content_type=self._content_type
            )
        try:
            self._blob_client.upload_blob(self._buffer.getvalue(), **kwargs)
        except AzureError as e:
            logger.exception("%s: %s", MSG_FAIL_COMMIT, self._description)
            raise StorageIOError(MSG_FAIL_COMMIT) from e

    def _finish(self) -> None:
        self.state = WriteState.CLOSED
        self._buffer.close()
        super().close()
