from dataclasses import dataclass

from .errors import MalformedLocationError

BLOB_SCHEME = "blob"
_PREFIX = f"{BLOB_SCHEME}://"


@dataclass(frozen=True)
class BlobLocation:
    """A parsed ``blob://<container>/<name>`` location."""

    container: str
    name: str
    scheme: str = BLOB_SCHEME

    @property
    def filename(self) -> str:
        return self.name.rsplit("/", 1)[-1]

    def __str__(self) -> str:
        return f"{self.scheme}://{self.container}/{self.name}"


def is_blob_location(location: str | None) -> bool:
    """Return True if the location uses the blob scheme. Never raises."""
    if not isinstance(location, str):
        return False
    return location.startswith(_PREFIX)


def parse_location(location: str) -> BlobLocation:
    """
    Split a location string into container and blob name.
    Blob names are opaque: further '/' stay in the name and nothing is normalized.
    """
    if not isinstance(location, str) or not location.startswith(_PREFIX):
        raise MalformedLocationError(
            f"Location '{location}' is not a valid blob location, "
            f"expected '{_PREFIX}<container>/<blob>'"
        )

    container, sep, name = location[len(_PREFIX) :].partition("/")
    if not container:
        raise MalformedLocationError(
            f"Location '{location}' does not name a container"
        )
    if not sep or not name:
        raise MalformedLocationError(f"Location '{location}' does not name a blob")
    if name.endswith("/"):
        # A trailing slash leaves an empty final segment; blob names are not directories.
        raise MalformedLocationError(
            f"Location '{location}' ends with '/' and does not name a blob"
        )
    return BlobLocation(container=container, name=name)
