"""Exceptions raised by the remote storage adapter."""


class StorageError(Exception):
    """Base class for all remote storage errors."""

    def __init__(self, message: str, recoverable: bool = False):
        self.message = message
        self.recoverable = recoverable
        super().__init__(self.message)


class ConfigurationError(StorageError):
    """A required credential is missing or a setting is invalid."""


class RemoteTransportError(StorageError):
    """The remote provider rejected or failed an operation."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        path: str | None = None,
        recoverable: bool = False,
    ):
        self.operation = operation
        self.path = path
        super().__init__(message, recoverable=recoverable)


class RemoteFileNotFoundError(RemoteTransportError):
    """The remote provider reports that the path does not exist."""


class UnsupportedOperationError(StorageError):
    """The remote provider cannot perform the requested operation."""
