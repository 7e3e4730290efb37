"""S3/MinIO storage client."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from remote_storage.clients.base import RemoteObject, RemoteStorageClient
from remote_storage.config import StorageConfig
from remote_storage.exceptions import (
    ConfigurationError,
    RemoteFileNotFoundError,
    RemoteTransportError,
)

logger = structlog.get_logger()

REQUIRED_FIELDS = ("access_token", "access_token_secret", "bucket")
NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


@contextmanager
def _translate_errors(operation: str, key: str) -> Iterator[None]:
    """Re-raise botocore failures as storage errors."""
    try:
        yield
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "")
        if code in NOT_FOUND_CODES:
            raise RemoteFileNotFoundError(
                f"S3 object not found: {key}",
                operation=operation,
                path=key,
            ) from e
        raise RemoteTransportError(
            f"S3 {operation} failed for {key}: {code or e}",
            operation=operation,
            path=key,
        ) from e
    except BotoCoreError as e:
        raise RemoteTransportError(
            f"S3 {operation} failed for {key}: {e}",
            operation=operation,
            path=key,
            recoverable=True,
        ) from e


class S3Client(RemoteStorageClient):
    """S3-compatible object storage (AWS S3, MinIO).

    The access-token pair is used as the access key ID and secret key.
    Object keys never start with "/", so rooted paths are stripped.
    """

    name = "s3"

    def __init__(self, config: StorageConfig, session=None):
        """Create the boto3 client.

        Args:
            config: Resolved storage configuration
            session: Pre-built boto3 S3 client (skips credential checks)

        Raises:
            ConfigurationError: If a required setting is missing
        """
        self.config = config
        if session is None:
            missing = [name for name in REQUIRED_FIELDS if not getattr(config, name)]
            if missing:
                raise ConfigurationError(f"Missing S3 settings: {', '.join(missing)}")
            session = boto3.client(
                "s3",
                endpoint_url=config.endpoint_url,
                aws_access_key_id=config.access_token,
                aws_secret_access_key=config.access_token_secret,
                region_name=config.region,
                config=Config(signature_version="s3v4", retries={"max_attempts": 0}),
            )
        self.client = session
        self.bucket = config.bucket

        logger.info("S3 client created", bucket=self.bucket, endpoint=config.endpoint_url)

    @staticmethod
    def _key(path: str) -> str:
        return path.lstrip("/")

    def upload(
        self,
        path: str,
        file: BinaryIO,
        content_type: str | None = None,
    ) -> RemoteObject:
        key = self._key(path)
        with _translate_errors("upload", key):
            response = self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=file,
                ContentType=content_type or "application/octet-stream",
            )
        return RemoteObject(path=key, revision=response.get("ETag"))

    def media_url(self, path: str) -> str:
        key = self._key(path)
        with _translate_errors("media_url", key):
            # Presigning never touches the network, so confirm the object first
            self.client.head_object(Bucket=self.bucket, Key=key)
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=self.config.url_expires_in,
            )

    def copy(self, from_path: str, to_path: str) -> RemoteObject:
        source, target = self._key(from_path), self._key(to_path)
        with _translate_errors("copy", source):
            response = self.client.copy_object(
                Bucket=self.bucket,
                Key=target,
                CopySource={"Bucket": self.bucket, "Key": source},
            )
        etag = response.get("CopyObjectResult", {}).get("ETag")
        return RemoteObject(path=target, revision=etag)

    def move(self, from_path: str, to_path: str) -> RemoteObject:
        # S3 has no rename
        result = self.copy(from_path, to_path)
        self.delete(from_path)
        return result

    def delete(self, path: str) -> None:
        key = self._key(path)
        with _translate_errors("delete", key):
            self.client.delete_object(Bucket=self.bucket, Key=key)
