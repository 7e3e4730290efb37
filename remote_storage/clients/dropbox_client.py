"""Dropbox storage client (API v2)."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

import dropbox
import requests
import structlog
from dropbox.exceptions import ApiError, AuthError, DropboxException
from dropbox.files import WriteMode

from remote_storage.clients.base import RemoteObject, RemoteStorageClient
from remote_storage.config import StorageConfig
from remote_storage.exceptions import (
    ConfigurationError,
    RemoteFileNotFoundError,
    RemoteTransportError,
)

logger = structlog.get_logger()

REQUIRED_FIELDS = ("app_key", "app_secret", "access_token")

# Union tags that wrap a LookupError in the errors returned by the
# get_temporary_link, move/copy and delete endpoints
_LOOKUP_TAGS = ("path", "from_lookup", "path_lookup")


def _is_not_found(error: ApiError) -> bool:
    """Check whether an ApiError means the path does not exist."""
    reason = error.error
    for tag in _LOOKUP_TAGS:
        is_tag = getattr(reason, f"is_{tag}", None)
        if is_tag is not None and is_tag():
            lookup = getattr(reason, f"get_{tag}")()
            is_not_found = getattr(lookup, "is_not_found", None)
            return bool(is_not_found and is_not_found())
    return False


@contextmanager
def _translate_errors(operation: str, path: str) -> Iterator[None]:
    """Re-raise Dropbox SDK and transport failures as storage errors."""
    try:
        yield
    except AuthError as e:
        raise RemoteTransportError(
            f"Dropbox rejected the credentials during {operation}: {e.error}",
            operation=operation,
            path=path,
        ) from e
    except ApiError as e:
        if _is_not_found(e):
            raise RemoteFileNotFoundError(
                f"Dropbox path not found: {path}",
                operation=operation,
                path=path,
            ) from e
        raise RemoteTransportError(
            f"Dropbox {operation} failed for {path}: {e.error}",
            operation=operation,
            path=path,
        ) from e
    except (DropboxException, requests.exceptions.RequestException) as e:
        raise RemoteTransportError(
            f"Dropbox {operation} failed for {path}: {e}",
            operation=operation,
            path=path,
            recoverable=True,
        ) from e


class DropboxClient(RemoteStorageClient):
    """Dropbox storage through the official SDK.

    Bearer-token authentication is used; ``access_token_secret`` and
    ``user_id`` are accepted for compatibility with OAuth1-era settings
    but the v2 API does not need them. SDK-level retries are disabled.
    """

    name = "dropbox"

    def __init__(self, config: StorageConfig, session: dropbox.Dropbox | None = None):
        """Open a Dropbox session.

        Args:
            config: Resolved storage configuration
            session: Pre-built SDK client (skips credential checks)

        Raises:
            ConfigurationError: If a required credential is missing
        """
        self.config = config
        if session is None:
            missing = [name for name in REQUIRED_FIELDS if not getattr(config, name)]
            if missing:
                raise ConfigurationError(
                    f"Missing Dropbox credentials: {', '.join(missing)}"
                )
            session = dropbox.Dropbox(
                oauth2_access_token=config.access_token,
                app_key=config.app_key,
                app_secret=config.app_secret,
                max_retries_on_error=0,
                max_retries_on_rate_limit=0,
                user_agent="remote-storage/0.1.0",
            )
        self._dbx = session

        logger.info(
            "Dropbox session opened",
            access_type=config.access_type,
            user_id=config.user_id,
        )

    @staticmethod
    def _api_path(path: str) -> str:
        """API v2 paths are always rooted, even inside an app folder."""
        return path if path.startswith("/") else f"/{path}"

    @staticmethod
    def _to_remote_object(metadata) -> RemoteObject:
        return RemoteObject(
            path=metadata.path_display,
            size=getattr(metadata, "size", None),
            revision=getattr(metadata, "rev", None),
        )

    def upload(
        self,
        path: str,
        file: BinaryIO,
        content_type: str | None = None,
    ) -> RemoteObject:
        api_path = self._api_path(path)
        with _translate_errors("upload", api_path):
            metadata = self._dbx.files_upload(
                file.read(),
                api_path,
                mode=WriteMode.overwrite,
            )
        return self._to_remote_object(metadata)

    def media_url(self, path: str) -> str:
        api_path = self._api_path(path)
        with _translate_errors("media_url", api_path):
            result = self._dbx.files_get_temporary_link(api_path)
        return result.link

    def move(self, from_path: str, to_path: str) -> RemoteObject:
        source = self._api_path(from_path)
        with _translate_errors("move", source):
            result = self._dbx.files_move_v2(source, self._api_path(to_path))
        return self._to_remote_object(result.metadata)

    def copy(self, from_path: str, to_path: str) -> RemoteObject:
        source = self._api_path(from_path)
        with _translate_errors("copy", source):
            result = self._dbx.files_copy_v2(source, self._api_path(to_path))
        return self._to_remote_object(result.metadata)

    def delete(self, path: str) -> None:
        api_path = self._api_path(path)
        with _translate_errors("delete", api_path):
            self._dbx.files_delete_v2(api_path)
