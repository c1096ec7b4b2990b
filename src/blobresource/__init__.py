"""
blobresource
============

Readable/writable resource handle for a single Azure Storage blob, addressed
by a location string of the form ``blob://<container>/<path/to/blob>``.

Main entry points:
- BlobStorageResource: the resource adapter
- parse_location, BlobLocation: location parsing
- content_type_for: extension based MIME lookup
- BlobNotFoundError, MalformedLocationError, StorageIOError,
  UnsupportedOperationError: exceptions

Example:
    from azure.storage.blob import BlobServiceClient
    from blobresource import BlobStorageResource

    client = BlobServiceClient.from_connection_string(conn_str)
    resource = BlobStorageResource(client, "blob://data/reports/2024.csv")
    with resource.open_read() as stream:
        data = stream.read()
"""

from .blob_resource import BlobStorageResource
from .blob_handle import BlobHandle
from .content_types import DEFAULT_CONTENT_TYPE, content_type_for
from .errors import (
    BlobNotFoundError,
    BlobResourceError,
    MalformedLocationError,
    StorageIOError,
    UnsupportedOperationError,
)
from .location import BLOB_SCHEME, BlobLocation, is_blob_location, parse_location
from .storage_protocols import (
    BlobServiceClientLike,
    ContainerClientLike,
    BlobClientLike,
    Resource,
    WritableResource,
)
from .streams import BlobReader, BlobWriter, WriteState

import importlib.metadata

try:
    __version__ = importlib.metadata.version(__name__)
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "BlobStorageResource",
    "BlobHandle",
    "DEFAULT_CONTENT_TYPE",
    "content_type_for",
    "BlobNotFoundError",
    "BlobResourceError",
    "MalformedLocationError",
    "StorageIOError",
    "UnsupportedOperationError",
    "BLOB_SCHEME",
    "BlobLocation",
    "is_blob_location",
    "parse_location",
    "BlobServiceClientLike",
    "ContainerClientLike",
    "BlobClientLike",
    "Resource",
    "WritableResource",
    "BlobReader",
    "BlobWriter",
    "WriteState",
]
