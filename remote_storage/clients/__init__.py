"""Remote storage client factory."""

from remote_storage.config import StorageConfig
from remote_storage.exceptions import ConfigurationError

from .base import RemoteObject, RemoteStorageClient
from .dropbox_client import DropboxClient
from .s3_client import S3Client

CLIENTS: dict[str, type[RemoteStorageClient]] = {
    "dropbox": DropboxClient,
    "s3": S3Client,
}


def open_client(config: StorageConfig) -> RemoteStorageClient:
    """Open a client for the configured provider.

    Args:
        config: Resolved storage configuration

    Returns:
        Client bound to the configured credentials

    Raises:
        ConfigurationError: If the provider is unknown or credentials are missing
    """
    client_class = CLIENTS.get(config.provider)
    if client_class is None:
        raise ConfigurationError(
            f"Unknown storage provider: {config.provider}. "
            f"Supported providers: {', '.join(CLIENTS)}"
        )
    return client_class(config)


__all__ = [
    "DropboxClient",
    "RemoteObject",
    "RemoteStorageClient",
    "S3Client",
    "open_client",
]
