"""Pytest fixtures for testing."""

import os
from typing import BinaryIO

import pytest

from remote_storage.clients.base import RemoteObject, RemoteStorageClient
from remote_storage.config import StorageConfig
from remote_storage.exceptions import RemoteFileNotFoundError, RemoteTransportError

# Keep developer credentials out of the tests
for _name in list(os.environ):
    if _name.startswith("REMOTE_STORAGE_"):
        del os.environ[_name]


class InMemoryClient(RemoteStorageClient):
    """Remote storage client keeping objects in a dict.

    Every call is recorded in ``calls`` as ``(operation, *paths)``.
    """

    name = "memory"

    def __init__(self, config: StorageConfig | None = None):
        self.config = config
        self.objects: dict[str, bytes] = {}
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()

    def _check(self, operation: str, path: str) -> None:
        if operation in self.fail_on:
            raise RemoteTransportError(
                f"Simulated {operation} failure", operation=operation, path=path
            )

    def _require(self, operation: str, path: str) -> None:
        if path not in self.objects:
            raise RemoteFileNotFoundError(
                f"Not found: {path}", operation=operation, path=path
            )

    def upload(
        self,
        path: str,
        file: BinaryIO,
        content_type: str | None = None,
    ) -> RemoteObject:
        self.calls.append(("upload", path))
        self._check("upload", path)
        self.objects[path] = file.read()
        return RemoteObject(path=path, size=len(self.objects[path]), revision="1")

    def media_url(self, path: str) -> str:
        self.calls.append(("media_url", path))
        self._check("media_url", path)
        self._require("media_url", path)
        return f"https://files.example.com{path}"

    def move(self, from_path: str, to_path: str) -> RemoteObject:
        self.calls.append(("move", from_path, to_path))
        self._check("move", from_path)
        self._require("move", from_path)
        self.objects[to_path] = self.objects.pop(from_path)
        return RemoteObject(path=to_path)

    def copy(self, from_path: str, to_path: str) -> RemoteObject:
        self.calls.append(("copy", from_path, to_path))
        self._check("copy", from_path)
        self._require("copy", from_path)
        self.objects[to_path] = self.objects[from_path]
        return RemoteObject(path=to_path)

    def delete(self, path: str) -> None:
        self.calls.append(("delete", path))
        self._check("delete", path)
        self._require("delete", path)
        del self.objects[path]


@pytest.fixture
def config() -> StorageConfig:
    """Full-access Dropbox configuration with dummy credentials."""
    return StorageConfig(
        app_key="test-app-key",
        app_secret="test-app-secret",
        access_token="test-access-token",
        access_token_secret="test-access-token-secret",
        user_id="12345",
    )


@pytest.fixture
def app_folder_config(config: StorageConfig) -> StorageConfig:
    """App-folder configuration with dummy credentials."""
    return config.model_copy(update={"access_type": "app_folder"})


@pytest.fixture
def client() -> InMemoryClient:
    """In-memory remote storage client."""
    return InMemoryClient()


@pytest.fixture
def png_bytes() -> bytes:
    """PNG-like payload of 13036 bytes."""
    header = b"\x89PNG\r\n\x1a\n"
    return header + bytes(range(256)) * 50 + b"\x00" * (13036 - 8 - 256 * 50)
