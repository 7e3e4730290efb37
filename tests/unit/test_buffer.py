"""Unit tests for the local upload buffer."""

import io
from pathlib import Path

import pytest

from remote_storage.buffer import LocalBuffer, UploadedFile


class TestUploadedFileFromBytes:
    """Tests for buffers built from raw bytes."""

    def test_size_and_content(self):
        """Test size and read for an in-memory buffer."""
        buffer = UploadedFile(b"hello world", filename="hello.txt")

        assert buffer.size == 11
        assert buffer.read() == b"hello world"

    def test_content_type_from_filename(self):
        """Test MIME type falls back to the filename."""
        assert UploadedFile(b"", filename="rails.png").content_type == "image/png"

    def test_explicit_content_type_wins(self):
        """Test a client-supplied MIME type is kept."""
        buffer = UploadedFile(b"", filename="rails.png", content_type="application/x-foo")
        assert buffer.content_type == "application/x-foo"

    def test_reopens_after_close(self):
        """Test bytes-backed buffers can be read again after closing."""
        buffer = UploadedFile(b"abc")
        buffer.read()
        buffer.close()

        assert buffer.size == 3
        buffer.rewind()
        assert buffer.read() == b"abc"

    def test_satisfies_protocol(self):
        """Test UploadedFile implements LocalBuffer."""
        assert isinstance(UploadedFile(b"abc"), LocalBuffer)


class TestUploadedFileFromPath:
    """Tests for buffers backed by a local file."""

    def test_reads_file(self, tmp_path: Path):
        """Test reading a temp file from disk."""
        path = tmp_path / "notes.txt"
        path.write_bytes(b"line one\n")

        buffer = UploadedFile(path)

        assert buffer.filename == "notes.txt"
        assert buffer.size == 9
        assert buffer.read() == b"line one\n"
        buffer.close()
        assert buffer.closed is True

    def test_missing_file_raises(self, tmp_path: Path):
        """Test a missing path is rejected up front."""
        with pytest.raises(FileNotFoundError):
            UploadedFile(tmp_path / "missing.bin")


class TestUploadedFileFromStream:
    """Tests for buffers wrapping a caller-supplied stream."""

    def test_size_does_not_move_position(self):
        """Test measuring size keeps the stream position."""
        stream = io.BytesIO(b"0123456789")
        stream.seek(4)
        buffer = UploadedFile(stream, filename="digits.txt")

        assert buffer.size == 10
        assert stream.tell() == 4

    def test_size_is_remembered_after_close(self):
        """Test size of a closed caller stream."""
        buffer = UploadedFile(io.BytesIO(b"0123456789"))
        buffer.close()

        assert buffer.closed is True
        assert buffer.size == 10

    def test_filename_from_stream_name(self, tmp_path: Path):
        """Test the filename is taken from a named stream."""
        path = tmp_path / "report.pdf"
        path.write_bytes(b"%PDF")

        with open(path, "rb") as f:
            buffer = UploadedFile(f)
            assert buffer.filename == "report.pdf"
            assert buffer.content_type == "application/pdf"
