import io
import logging
from typing import Any
from urllib.parse import urlparse

from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from azure.storage.blob import BlobServiceClient

from .blob_handle import BlobHandle
from .errors import BlobNotFoundError, StorageIOError, UnsupportedOperationError
from .storage_protocols import (
    BlobPropertiesLike,
    BlobServiceClientLike,
    WritableResource,
)
from .streams import BlobReader, BlobWriter

logger = logging.getLogger(__name__)

MSG_FAIL_GET = "Failed to get blob or container"
MSG_FAIL_OPEN_OUTPUT = "Failed to open output stream of blob"
MSG_FAIL_CHECK_EXIST = "Failed to check existence of blob or container"
MSG_FAIL_OPEN_INPUT = "Failed to open input stream of blob"


def _is_auth_failure(error: AzureError) -> bool:
    if isinstance(error, ClientAuthenticationError):
        return True
    return getattr(error, "status_code", None) in (401, 403)


class BlobStorageResource(WritableResource):
    """
    Readable and writable resource for one blob in an Azure storage account.

    An instance is an immutable handle addressed by ``blob://<container>/<blob>``.
    It holds no network state of its own: every call goes to the shared
    service client, and properties are fetched fresh each time.
    """

    def __init__(
        self,
        blob_service_client: BlobServiceClientLike,
        location: str,
        auto_create: bool | None = False,
        content_type: str | None = None,
    ) -> None:
        self._handle = BlobHandle.resolve(
            blob_service_client,
            location,
            auto_create=auto_create,
            content_type=content_type,
        )

    @classmethod
    def from_connection_string(
        cls, connection_string: str, location: str, **kwargs: Any
    ) -> "BlobStorageResource":
        """
        Convenience builder: create a service client from a connection string.
        The caller owns the client and closes it through ``service_client``.
        """
        client = BlobServiceClient.from_connection_string(connection_string)
        return cls(client, location, **kwargs)

    @property
    def location(self) -> str:
        return self._handle.location

    @property
    def container_name(self) -> str:
        return self._handle.parsed.container

    @property
    def blob_name(self) -> str:
        return self._handle.parsed.name

    @property
    def auto_create(self) -> bool:
        return self._handle.auto_create

    @property
    def content_type(self) -> str:
        return self._handle.content_type

    @property
    def service_client(self) -> BlobServiceClientLike:
        return self._handle.service_client

    def exists(self) -> bool:
        """
        True only when both the container and the blob exist.
        Absence and transport failures give False; authorization failures raise.
        """
        try:
            return self._probe_exists()
        except ResourceNotFoundError:
            return False
        except AzureError as e:
            if _is_auth_failure(e):
                logger.exception("%s: %s", MSG_FAIL_CHECK_EXIST, self.description())
                raise StorageIOError(MSG_FAIL_CHECK_EXIST) from e
            logger.warning(
                "%s: %s (%s)", MSG_FAIL_CHECK_EXIST, self.description(), e
            )
            return False

    def is_readable(self) -> bool:
        return self.exists()

    def is_writable(self) -> bool:
        return True

    def is_open(self) -> bool:
        # Every call to open_read returns a fresh stream.
        return False

    def is_file(self) -> bool:
        return False

    def open_read(self) -> io.BufferedReader:
        self._assert_exists()
        try:
            downloader = self._handle.blob_client.download_blob()
        except ResourceNotFoundError as e:
            raise BlobNotFoundError(
                f"Blob or container does not exist: {self.location}"
            ) from e
        except AzureError as e:
            logger.exception("%s: %s", MSG_FAIL_OPEN_INPUT, self.description())
            raise StorageIOError(MSG_FAIL_OPEN_INPUT) from e
        return io.BufferedReader(BlobReader(downloader, self.description()))

    def open_write(self) -> BlobWriter:
        """
        Open a sink that replaces the blob when closed.
        With auto_create the container is created if needed; the blob
        itself only appears once the writer commits.
        """
        try:
            if not self._check_exists():
                if not self.auto_create:
                    raise BlobNotFoundError(f"The blob was not found: {self.location}")
                self._create_container()
        except AzureError as e:
            logger.exception("%s: %s", MSG_FAIL_OPEN_OUTPUT, self.description())
            raise StorageIOError(MSG_FAIL_OPEN_OUTPUT) from e
        return BlobWriter(
            self._handle.blob_client,
            content_type=self.content_type or None,
            description=self.description(),
        )

    def read_bytes(self) -> bytes:
        with self.open_read() as stream:
            return stream.read()

    def write_bytes(self, data: bytes) -> None:
        with self.open_write() as sink:
            sink.write(data)

    def content_length(self) -> int:
        return self._properties().size

    def last_modified(self) -> int:
        """Last modification time in epoch seconds."""
        return int(self._properties().last_modified.timestamp())

    def url(self) -> str:
        url = self._handle.blob_client.url
        parts = urlparse(url)
        if not parts.scheme or not parts.netloc:
            logger.error("Storage client published an invalid blob URL: %r", url)
            raise StorageIOError(f"Invalid blob URL '{url}' for {self.description()}")
        return url

    def filename(self) -> str:
        return self._handle.parsed.filename

    def description(self) -> str:
        blob_client = self._handle.blob_client
        return (
            "Azure storage account blob resource "
            f"[container='{blob_client.container_name}', blob='{blob_client.blob_name}']"
        )

    def create_relative(self, relative_path: str) -> "BlobStorageResource":
        """
        Resource for ``<location>/<relative_path>`` in the same account.
        The path is appended as is; '..' and '//' are not normalized.
        """
        return BlobStorageResource(
            self._handle.service_client,
            f"{self.location}/{relative_path}",
            auto_create=self.auto_create,
        )

    def get_file(self):
        raise UnsupportedOperationError(
            f"{self.description()} cannot be resolved to absolute file path"
        )

    def _assert_exists(self) -> None:
        if not self._check_exists():
            raise BlobNotFoundError(f"Blob or container does not exist: {self.location}")

    def _probe_exists(self) -> bool:
        return (
            self._handle.container_client.exists()
            and self._handle.blob_client.exists()
        )

    def _check_exists(self) -> bool:
        # Strict probe for read/write paths: only absence gives False.
        try:
            return self._probe_exists()
        except ResourceNotFoundError:
            return False
        except AzureError as e:
            logger.exception("%s: %s", MSG_FAIL_CHECK_EXIST, self.description())
            raise StorageIOError(MSG_FAIL_CHECK_EXIST) from e

    def _create_container(self) -> None:
        container_client = self._handle.container_client
        if container_client.exists():
            return
        logger.debug(
            "Blob container %s doesn't exist, now creating it",
            container_client.container_name,
        )
        try:
            container_client.create_container()
        except ResourceExistsError:
            logger.debug(
                "Blob container %s was created concurrently",
                container_client.container_name,
            )

    def _properties(self) -> BlobPropertiesLike:
        try:
            return self._handle.blob_client.get_blob_properties()
        except AzureError as e:
            logger.exception("%s: %s", MSG_FAIL_GET, self.description())
            raise StorageIOError(MSG_FAIL_GET) from e

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BlobStorageResource):
            return NotImplemented
        return self.location == other.location

    def __hash__(self) -> int:
        return hash(self.location)

    def __repr__(self) -> str:
        return (
            f"BlobStorageResource({self.location!r}, auto_create={self.auto_create}, "
            f"content_type={self.content_type!r})"
        )

    def __str__(self) -> str:
        return self.description()
