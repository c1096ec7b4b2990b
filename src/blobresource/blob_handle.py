from dataclasses import dataclass

from .content_types import resolve_content_type
from .location import BlobLocation, parse_location
from .storage_protocols import (
    BlobClientLike,
    BlobServiceClientLike,
    ContainerClientLike,
)


@dataclass(frozen=True)
class BlobHandle:
    """
    Resolved clients for one blob plus the flags that govern writes.
    The service client is shared and never closed from here.
    Building a handle makes no network calls.
    """

    location: str
    parsed: BlobLocation
    service_client: BlobServiceClientLike
    container_client: ContainerClientLike
    blob_client: BlobClientLike
    auto_create: bool = False
    content_type: str = ""

    @classmethod
    def resolve(
        cls,
        service_client: BlobServiceClientLike,
        location: str,
        auto_create: bool | None = False,
        content_type: str | None = None,
    ) -> "BlobHandle":
        parsed = parse_location(location)
        container_client = service_client.get_container_client(parsed.container)
        blob_client = container_client.get_blob_client(parsed.name)
        return cls(
            location=location,
            parsed=parsed,
            service_client=service_client,
            container_client=container_client,
            blob_client=blob_client,
            auto_create=bool(auto_create),
            content_type=resolve_content_type(parsed.name, content_type),
        )
