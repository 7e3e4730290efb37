"""Local buffer abstraction for files received by the upload pipeline."""

import io
import mimetypes
import os
from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class LocalBuffer(Protocol):
    """Capabilities the adapter needs from an uploaded file held locally."""

    @property
    def size(self) -> int:
        """Length of the content in bytes."""
        ...

    @property
    def content_type(self) -> str | None:
        """MIME type reported by the client, if any."""
        ...

    @property
    def closed(self) -> bool:
        """Whether the underlying stream has been closed."""
        ...

    def to_underlying_file(self) -> BinaryIO:
        """Return the binary stream holding the content."""
        ...

    def rewind(self) -> None:
        """Seek the underlying stream back to the start."""
        ...

    def read(self) -> bytes:
        """Read the remaining content of the underlying stream."""
        ...

    def close(self) -> None:
        """Close the underlying stream."""
        ...


class UploadedFile:
    """Uploaded file backed by bytes, a local path, or an open binary stream.

    Bytes and path sources are reopened on demand after ``close()``; a
    caller-supplied stream is not, but its size is remembered.

    Example:
        buffer = UploadedFile(Path("/tmp/upload-1234"), filename="rails.png")
        adapter.store(buffer, "images/42/rails.png")
    """

    def __init__(
        self,
        source: bytes | str | Path | BinaryIO,
        filename: str | None = None,
        content_type: str | None = None,
    ):
        """Wrap an uploaded file.

        Args:
            source: Raw bytes, a path to a local temp file, or an open binary stream
            filename: Name supplied by the client (defaults to the source's name)
            content_type: MIME type supplied by the client

        Raises:
            FileNotFoundError: If source is a path that doesn't exist
        """
        self._path: Path | None = None
        self._data: bytes | None = None
        self._stream: BinaryIO | None = None
        self._closed_size: int | None = None

        if isinstance(source, (bytes, bytearray)):
            self._data = bytes(source)
        elif isinstance(source, (str, Path)):
            self._path = Path(source)
            if not self._path.is_file():
                raise FileNotFoundError(f"Uploaded file not found: {source}")
        else:
            self._stream = source

        if filename is None:
            if self._path is not None:
                filename = self._path.name
            else:
                filename = os.path.basename(str(getattr(source, "name", "") or ""))
        self.filename = filename or None
        self._content_type = content_type

    @property
    def path(self) -> Path | None:
        """Local path of the file, when backed by one."""
        return self._path

    @property
    def content_type(self) -> str | None:
        if self._content_type:
            return self._content_type
        if self.filename:
            return mimetypes.guess_type(self.filename)[0]
        return None

    @property
    def size(self) -> int:
        if self._data is not None:
            return len(self._data)
        if self._path is not None:
            return self._path.stat().st_size
        if self._stream.closed:
            return self._closed_size or 0

        current = self._stream.tell()
        self._stream.seek(0, io.SEEK_END)
        size = self._stream.tell()
        self._stream.seek(current)
        return size

    @property
    def closed(self) -> bool:
        return self._stream is not None and self._stream.closed

    def to_underlying_file(self) -> BinaryIO:
        if self._stream is None or self._stream.closed:
            if self._data is not None:
                self._stream = io.BytesIO(self._data)
            elif self._path is not None:
                self._stream = open(self._path, "rb")
        return self._stream

    def rewind(self) -> None:
        self.to_underlying_file().seek(0)

    def read(self) -> bytes:
        return self.to_underlying_file().read()

    def close(self) -> None:
        if self._stream is None or self._stream.closed:
            return
        if self._data is None and self._path is None:
            self._closed_size = self.size
        self._stream.close()

    def __repr__(self) -> str:
        return f"UploadedFile(filename={self.filename!r}, size={self.size})"
