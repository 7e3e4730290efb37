"""Remote storage adapter for file uploads."""

from remote_storage.adapter import StorageAdapter, get_adapter
from remote_storage.buffer import LocalBuffer, UploadedFile
from remote_storage.clients import RemoteObject, RemoteStorageClient, open_client
from remote_storage.config import StorageConfig, load_config, resolve_config
from remote_storage.exceptions import (
    ConfigurationError,
    RemoteFileNotFoundError,
    RemoteTransportError,
    StorageError,
    UnsupportedOperationError,
)
from remote_storage.file import RemoteFile
from remote_storage.sanitize import sanitize_filename, split_extension

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "LocalBuffer",
    "RemoteFile",
    "RemoteFileNotFoundError",
    "RemoteObject",
    "RemoteStorageClient",
    "RemoteTransportError",
    "StorageAdapter",
    "StorageConfig",
    "StorageError",
    "UnsupportedOperationError",
    "UploadedFile",
    "get_adapter",
    "load_config",
    "open_client",
    "resolve_config",
    "sanitize_filename",
    "split_extension",
]
