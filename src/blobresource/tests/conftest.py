import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import SimpleNamespace
from urllib.parse import quote

import pytest
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from dotenv import load_dotenv

load_dotenv()

# Azure config
CONN_STR = os.environ.get("AZURE_CONN_STR")


# ---------------------------
# In-memory storage client
# ---------------------------
@dataclass
class FakeBlob:
    data: bytes
    content_type: str
    last_modified: datetime


@dataclass
class FakeStorageAccount:
    """Shared state behind every fake client; records mutations and injects failures."""

    name: str = "devaccount"
    containers: dict[str, dict[str, FakeBlob]] = field(default_factory=dict)
    mutations: list[tuple[str, ...]] = field(default_factory=list)
    failures: dict[str, Exception] = field(default_factory=dict)
    chunk_size: int = 4
    now: datetime = datetime(2024, 3, 1, 12, 30, 45, tzinfo=timezone.utc)

    @property
    def url(self) -> str:
        return f"https://{self.name}.blob.core.windows.net"

    def fail(self, operation: str) -> None:
        error = self.failures.get(operation)
        if error is not None:
            raise error

    def add_blob(
        self,
        container: str,
        name: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> None:
        self.containers.setdefault(container, {})[name] = FakeBlob(
            data, content_type, self.now
        )


class FakeDownloader:
    def __init__(self, account: FakeStorageAccount, data: bytes) -> None:
        self._account = account
        self._data = data

    def chunks(self):
        size = self._account.chunk_size
        for start in range(0, len(self._data), size):
            if start:
                self._account.fail("chunks")
            yield self._data[start : start + size]

    def readall(self) -> bytes:
        return self._data


class FakeBlobClient:
    def __init__(self, account: FakeStorageAccount, container: str, blob: str) -> None:
        self._account = account
        self.container_name = container
        self.blob_name = blob

    @property
    def url(self) -> str:
        return f"{self._account.url}/{self.container_name}/{quote(self.blob_name)}"

    def _blob(self) -> FakeBlob:
        container = self._account.containers.get(self.container_name)
        if container is None:
            raise ResourceNotFoundError("The specified container does not exist.")
        if self.blob_name not in container:
            raise ResourceNotFoundError("The specified blob does not exist.")
        return container[self.blob_name]

    def exists(self, **kwargs) -> bool:
        self._account.fail("blob_exists")
        container = self._account.containers.get(self.container_name, {})
        return self.blob_name in container

    def download_blob(self, **kwargs) -> FakeDownloader:
        self._account.fail("download_blob")
        return FakeDownloader(self._account, self._blob().data)

    def upload_blob(self, data, overwrite=False, content_settings=None, **kwargs):
        self._account.fail("upload_blob")
        container = self._account.containers.get(self.container_name)
        if container is None:
            raise ResourceNotFoundError("The specified container does not exist.")
        if self.blob_name in container and not overwrite:
            raise ResourceExistsError("The specified blob already exists.")
        if hasattr(data, "read"):
            data = data.read()
        content_type = (
            content_settings.content_type
            if content_settings is not None
            else "application/octet-stream"
        )
        container[self.blob_name] = FakeBlob(bytes(data), content_type, self._account.now)
        self._account.mutations.append(
            ("upload_blob", self.container_name, self.blob_name)
        )
        return {"etag": uuid.uuid4().hex}

    def get_blob_properties(self, **kwargs):
        self._account.fail("get_blob_properties")
        blob = self._blob()
        return SimpleNamespace(
            size=len(blob.data),
            last_modified=blob.last_modified,
            content_settings=SimpleNamespace(content_type=blob.content_type),
        )


class FakeContainerClient:
    def __init__(self, account: FakeStorageAccount, container: str) -> None:
        self._account = account
        self.container_name = container

    def exists(self, **kwargs) -> bool:
        self._account.fail("container_exists")
        return self.container_name in self._account.containers

    def create_container(self, **kwargs):
        self._account.fail("create_container")
        if self.container_name in self._account.containers:
            raise ResourceExistsError("The specified container already exists.")
        self._account.containers[self.container_name] = {}
        self._account.mutations.append(("create_container", self.container_name))

    def delete_container(self, **kwargs):
        self._account.containers.pop(self.container_name, None)

    def get_blob_client(self, blob: str) -> FakeBlobClient:
        return FakeBlobClient(self._account, self.container_name, blob)


class FakeBlobServiceClient:
    def __init__(self, account: FakeStorageAccount) -> None:
        self.account = account
        self.closed = False

    def get_container_client(self, container: str) -> FakeContainerClient:
        return FakeContainerClient(self.account, container)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def account() -> FakeStorageAccount:
    return FakeStorageAccount()


@pytest.fixture
def service_client(account) -> FakeBlobServiceClient:
    return FakeBlobServiceClient(account)


# ---------------------------
# Backend factory
# ---------------------------
@dataclass
class Backend:
    client: object
    unique: bool
    created: list[str] = field(default_factory=list)

    def container(self, base: str) -> str:
        """Container name for a scenario; unique per test on a real account."""
        name = f"{base}-{uuid.uuid4().hex[:12]}" if self.unique else base
        self.created.append(name)
        return name

    def put(self, container: str, blob: str, data: bytes) -> None:
        container_client = self.client.get_container_client(container)
        try:
            container_client.create_container()
        except ResourceExistsError:
            pass
        container_client.get_blob_client(blob).upload_blob(data, overwrite=True)

    def make_container(self, container: str) -> None:
        try:
            self.client.get_container_client(container).create_container()
        except ResourceExistsError:
            pass


@pytest.fixture(
    params=[
        pytest.param("azure", marks=pytest.mark.azure),
        pytest.param("memory", marks=pytest.mark.memory),
    ]
)
def backend(request):
    """Fixture that provides either a real Azure account or the in-memory client."""
    if request.param == "azure":
        if not CONN_STR:
            pytest.skip("Azure backend not configured (AZURE_CONN_STR missing)")

        from azure.storage.blob import BlobServiceClient

        client = BlobServiceClient.from_connection_string(CONN_STR)
        backend = Backend(client, unique=True)
        yield backend

        # Cleanup for Azure after test
        for name in backend.created:
            try:
                client.delete_container(name)
            except ResourceNotFoundError:
                pass
        client.close()

    elif request.param == "memory":
        yield Backend(FakeBlobServiceClient(FakeStorageAccount()), unique=False)
