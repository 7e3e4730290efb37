"""Storage adapter binding one configuration to one remote session."""

import threading
from collections.abc import Callable
from functools import lru_cache

import structlog

from remote_storage.buffer import LocalBuffer
from remote_storage.clients import RemoteStorageClient, open_client
from remote_storage.config import StorageConfig, resolve_config
from remote_storage.file import RemoteFile

logger = structlog.get_logger()

ClientFactory = Callable[[StorageConfig], RemoteStorageClient]


class StorageAdapter:
    """Persist uploaded files to a remote storage provider.

    The remote client is opened on the first store or retrieve and reused
    for the adapter's lifetime. Opening it is guarded by a lock so
    concurrent callers share a single session.

    Example:
        adapter = StorageAdapter(resolve_config())
        handle = adapter.store(UploadedFile(data, filename="rails.png"),
                               "images/42/rails.png")
        handle.url()
    """

    def __init__(
        self,
        config: StorageConfig,
        client_factory: ClientFactory = open_client,
    ):
        """Initialize the adapter.

        Args:
            config: Resolved storage configuration
            client_factory: Builds the remote client from the configuration
        """
        self.config = config
        self._client_factory = client_factory
        self._client: RemoteStorageClient | None = None
        self._lock = threading.Lock()

    @property
    def is_bound(self) -> bool:
        """Whether the remote client has been opened."""
        return self._client is not None

    @property
    def client(self) -> RemoteStorageClient:
        """Get or open the remote client.

        Raises:
            ConfigurationError: If required credentials are missing
        """
        if self._client is None:
            with self._lock:
                if self._client is None:
                    logger.info(
                        "Opening remote storage client",
                        provider=self.config.provider,
                        access_type=self.config.access_type,
                    )
                    self._client = self._client_factory(self.config)
        return self._client

    def store(self, file: LocalBuffer, store_path: str) -> RemoteFile:
        """Upload a local buffer and return a handle for it.

        Args:
            file: Uploaded file held locally
            store_path: Logical destination path, e.g. "images/42/rails.png"

        Returns:
            Handle with the buffer attached

        Raises:
            ConfigurationError: If the client cannot be opened
            RemoteTransportError: If the upload fails
        """
        handle = RemoteFile(store_path, self.client, self.config)
        handle.store(file)
        return handle

    def retrieve(self, path: str) -> RemoteFile:
        """Return a handle for a file already in remote storage.

        No network call is made; the URL is resolved on first use.

        Raises:
            ConfigurationError: If the client cannot be opened
        """
        return RemoteFile(path, self.client, self.config)


@lru_cache
def get_adapter() -> StorageAdapter:
    """Get an adapter configured from the environment.

    Uses LRU cache to ensure a single adapter per process.
    """
    return StorageAdapter(resolve_config())
