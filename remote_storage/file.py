"""Handle for a single file held by a remote storage provider."""

import mimetypes
import posixpath

import regex
import structlog

from remote_storage.buffer import LocalBuffer
from remote_storage.clients.base import RemoteStorageClient
from remote_storage.config import StorageConfig
from remote_storage.exceptions import RemoteFileNotFoundError, RemoteTransportError
from remote_storage.sanitize import SANITIZE_REGEXP, sanitize_filename, split_extension

logger = structlog.get_logger()


def _check_path(path: str) -> None:
    if not path:
        raise ValueError("RemoteFile path must not be empty")


class RemoteFile:
    """A file in remote storage, presented like a local uploaded file.

    The handle is cheap to build and makes no network calls until asked
    for its URL, existence, or a remote mutation. Lazily fetched values
    (URL, content, content type) are cached on the handle only.

    Attributes:
        path: Logical path in the remote namespace
        original_filename: Unsanitized basename of the path
    """

    # Override in a subclass to allow, for example, non-Latin filenames
    sanitize_regexp: regex.Pattern = SANITIZE_REGEXP

    def __init__(
        self,
        path: str,
        client: RemoteStorageClient,
        config: StorageConfig,
        buffer: LocalBuffer | None = None,
    ):
        """Create a handle.

        Args:
            path: Logical path in the remote namespace
            client: Client used for remote operations
            config: Configuration of the owning adapter
            buffer: Local copy of the content, when there is one

        Raises:
            ValueError: If path is empty
        """
        _check_path(path)

        self._client = client
        self._config = config
        self._set_path(path)
        self.file = buffer
        self._content: bytes | None = None
        self._content_type: str | None = None

    def _set_path(self, path: str) -> None:
        self.path = path
        self.original_filename = posixpath.basename(path.replace("\\", "/"))
        self._url: str | None = None
        self._derived_content_type: str | None = None

    @property
    def remote_path(self) -> str:
        """Path as sent to the client; rooted in full-access mode."""
        return self._rooted(self.path)

    def _rooted(self, path: str) -> str:
        if self._config.full_access and not path.startswith("/"):
            return f"/{path}"
        return path

    # Names

    @property
    def filename(self) -> str:
        """Filename sanitized to strip out any unsafe characters."""
        return sanitize_filename(self.original_filename, self.sanitize_regexp)

    identifier = filename

    @property
    def basename(self) -> str:
        """Part of the filename before the extension ("test" for "test.jpeg")."""
        return split_extension(self.filename)[0]

    @property
    def extension(self) -> str:
        return split_extension(self.filename)[1]

    @property
    def is_path(self) -> bool:
        return False

    # Content

    @property
    def size(self) -> int:
        """Size in bytes of the attached local buffer, or 0 without one."""
        if self.file is None:
            return 0
        return self.file.size

    @property
    def content_type(self) -> str | None:
        """MIME type: explicit value, then the buffer's, then by extension."""
        if self._content_type:
            return self._content_type
        if self._derived_content_type is None:
            buffer_type = getattr(self.file, "content_type", None)
            if buffer_type:
                self._derived_content_type = str(buffer_type).strip()
            else:
                self._derived_content_type = mimetypes.guess_type(self.path)[0]
        return self._derived_content_type

    @content_type.setter
    def content_type(self, value: str | None) -> None:
        self._content_type = value

    def read(self) -> bytes | None:
        """Return the content of the attached buffer.

        The buffer is rewound, read fully and closed; the content is
        cached for later calls. Returns None when no buffer is attached.
        """
        if self._content is not None:
            return self._content
        if self.file is None:
            return None

        self.file.rewind()
        self._content = self.file.read()
        if not self.file.closed:
            self.file.close()
        return self._content

    def to_file(self):
        """Underlying local file of the attached buffer, or None."""
        if self.file is None:
            return None
        return self.file.to_underlying_file()

    # Remote state

    def url(self) -> str:
        """Download URL for the file, fetched once and cached.

        Raises:
            RemoteFileNotFoundError: If nothing is stored at the path
            RemoteTransportError: If the lookup fails
        """
        if self._url is None:
            url = self._client.media_url(self.remote_path)
            logger.debug("Resolved remote URL", path=self.remote_path)
            self._url = url or None
        return self._url or ""

    def is_known_to_exist(self) -> bool:
        """Whether a URL has already been resolved. Never touches the network."""
        return bool(self._url)

    def exists(self) -> bool:
        """Whether the file exists remotely.

        Resolves the URL on first call; a successful resolution is cached.

        Raises:
            RemoteTransportError: If the lookup fails for a reason other
                than the file being absent
        """
        if self._url:
            return True
        try:
            return bool(self.url())
        except RemoteFileNotFoundError:
            return False

    def is_empty(self) -> bool:
        """True when there is no local content and no remote file."""
        return self.size == 0 and not self.exists()

    # Remote operations

    def store(self, buffer: LocalBuffer) -> bool:
        """Upload a local buffer to this handle's path and attach it.

        Raises:
            RemoteTransportError: If the upload fails
        """
        location = self.remote_path
        logger.info("Uploading file", path=location, size=buffer.size)

        buffer.rewind()
        result = self._client.upload(
            location,
            buffer.to_underlying_file(),
            content_type=buffer.content_type,
        )

        self.file = buffer
        self._content = None
        self._derived_content_type = None
        self._url = None
        logger.info("File uploaded", path=result.path, revision=result.revision)
        return True

    def move_to(self, new_path: str) -> "RemoteFile":
        """Move the file to new_path and point this handle at it.

        Raises:
            ValueError: If new_path is empty
            RemoteFileNotFoundError: If nothing is stored at the current path
            RemoteTransportError: If the move fails
        """
        _check_path(new_path)
        source, target = self.remote_path, self._rooted(new_path)
        logger.info("Moving file", from_path=source, to_path=target)
        self._client.move(source, target)
        self._set_path(new_path)
        return self

    def copy_to(self, new_path: str) -> "RemoteFile":
        """Copy the file to new_path.

        Returns:
            A new handle for the copy, sharing this handle's cached content

        Raises:
            ValueError: If new_path is empty
            RemoteFileNotFoundError: If nothing is stored at the current path
            RemoteTransportError: If the copy fails
            UnsupportedOperationError: If the provider cannot copy
        """
        _check_path(new_path)
        source, target = self.remote_path, self._rooted(new_path)
        logger.info("Copying file", from_path=source, to_path=target)
        self._client.copy(source, target)

        copy = RemoteFile(new_path, self._client, self._config)
        copy._content = self._content
        copy._content_type = self._content_type
        copy._derived_content_type = self.content_type
        return copy

    def delete(self) -> bool:
        """Delete the file remotely.

        Provider failures are logged and reported through the return
        value; they are never raised.

        Returns:
            True if the provider confirmed the deletion, False otherwise
        """
        location = self.remote_path
        try:
            self._client.delete(location)
        except RemoteTransportError as e:
            logger.warning("Remote delete failed", path=location, error=str(e))
            return False

        self._url = None
        logger.info("File deleted", path=location)
        return True

    def __repr__(self) -> str:
        return f"RemoteFile(path={self.path!r})"
