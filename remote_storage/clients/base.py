"""Remote storage client interface."""

from abc import ABC, abstractmethod
from typing import BinaryIO

from pydantic import BaseModel

from remote_storage.exceptions import UnsupportedOperationError


class RemoteObject(BaseModel):
    """What the provider reports about a stored file."""

    path: str
    size: int | None = None
    revision: str | None = None


class RemoteStorageClient(ABC):
    """Abstract remote storage client.

    This interface defines the capability set the adapter needs from a
    cloud storage provider. Implementations translate provider SDK
    failures into ``RemoteTransportError``.
    """

    name: str = "remote"

    @abstractmethod
    def upload(
        self,
        path: str,
        file: BinaryIO,
        content_type: str | None = None,
    ) -> RemoteObject:
        """Upload file content, overwriting whatever is at the path.

        Args:
            path: Destination path in the provider's namespace
            file: Binary stream positioned at the start of the content
            content_type: MIME type, for providers that store one

        Returns:
            Metadata of the stored object

        Raises:
            RemoteTransportError: If the upload fails
        """

    @abstractmethod
    def media_url(self, path: str) -> str:
        """Get a URL from which the file can be downloaded.

        Args:
            path: Path in the provider's namespace

        Returns:
            Public or temporary download URL

        Raises:
            RemoteFileNotFoundError: If nothing is stored at the path
            RemoteTransportError: If the lookup fails
        """

    @abstractmethod
    def move(self, from_path: str, to_path: str) -> RemoteObject:
        """Move a file to a new path.

        Raises:
            RemoteFileNotFoundError: If nothing is stored at from_path
            RemoteTransportError: If the move fails
        """

    def copy(self, from_path: str, to_path: str) -> RemoteObject:
        """Copy a file to a new path.

        Raises:
            UnsupportedOperationError: If the provider has no copy operation
        """
        raise UnsupportedOperationError(f"{self.name} storage does not support copy")

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete the file at path.

        Raises:
            RemoteTransportError: If the deletion fails
        """
