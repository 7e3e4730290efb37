"""Configuration for the remote storage adapter.

A ``StorageConfig`` is resolved once by the caller and handed to the
adapter; nothing downstream mutates it. Values come from explicit
overrides, an external provider (``StorageSettings`` reads the
environment), or a YAML file.
"""

import os
import re
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from remote_storage.exceptions import ConfigurationError

FULL_ACCESS = "dropbox"
APP_FOLDER = "app_folder"

CREDENTIAL_FIELDS = (
    "app_key",
    "app_secret",
    "access_token",
    "access_token_secret",
    "access_type",
    "user_id",
)
PROVIDER_FIELDS = ("provider", "bucket", "endpoint_url", "region", "url_expires_in")


class StorageConfig(BaseModel):
    """Immutable credentials and provider settings for one adapter."""

    model_config = ConfigDict(frozen=True)

    provider: Literal["dropbox", "s3"] = "dropbox"
    app_key: str | None = None
    app_secret: str | None = None
    access_token: str | None = None
    access_token_secret: str | None = None
    access_type: Literal["dropbox", "app_folder"] = FULL_ACCESS
    user_id: str | None = None

    # S3-compatible stores only
    bucket: str | None = None
    endpoint_url: str | None = None
    region: str | None = None

    url_expires_in: int = Field(default=3600, gt=0)

    @field_validator("access_type", mode="before")
    @classmethod
    def default_access_type(cls, v: Any) -> Any:
        """Treat an unset access type as full-access mode."""
        return v or FULL_ACCESS

    @property
    def full_access(self) -> bool:
        """Whether paths are rooted at the account root."""
        return self.access_type == FULL_ACCESS

    def __repr__(self) -> str:
        return (
            f"StorageConfig(provider={self.provider!r}, "
            f"access_type={self.access_type!r}, user_id={self.user_id!r})"
        )


class StorageSettings(BaseSettings):
    """Storage settings loaded from the environment.

    Each field maps to ``REMOTE_STORAGE_<FIELD>``, e.g.
    ``REMOTE_STORAGE_APP_KEY``.
    """

    model_config = SettingsConfigDict(
        env_prefix="REMOTE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = "dropbox"
    app_key: str | None = None
    app_secret: str | None = None
    access_token: str | None = None
    access_token_secret: str | None = None
    access_type: str | None = None
    user_id: str | None = None
    bucket: str | None = None
    endpoint_url: str | None = None
    region: str | None = None
    url_expires_in: int = 3600

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> StorageSettings:
    """Get cached settings instance."""
    return StorageSettings()


def _lookup(source: Any, name: str, prefix: str | None) -> Any:
    """Read one setting from a mapping or attribute-style provider."""
    keys = [f"{prefix}_{name}", name] if prefix else [name]
    for key in keys:
        if isinstance(source, Mapping):
            value = source.get(key)
        else:
            value = getattr(source, key, None)
        if value is not None:
            return value
    return None


def resolve_config(
    source: Any = None,
    prefix: str | None = None,
    **overrides: Any,
) -> StorageConfig:
    """Resolve a StorageConfig from overrides and a configuration provider.

    Explicit overrides win; each remaining field is read exactly once from
    ``source``. A populated field is never overwritten by a later lookup.

    Args:
        source: Mapping or object exposing the settings (defaults to
            ``get_settings()``)
        prefix: Optional attribute prefix, e.g. "dropbox" to read
            ``dropbox_app_key`` style attributes
        **overrides: Values that take precedence over the provider

    Returns:
        Validated, immutable configuration

    Raises:
        ConfigurationError: If the resolved values are invalid
    """
    if source is None:
        source = get_settings()

    values = {k: v for k, v in overrides.items() if v is not None}
    for name in CREDENTIAL_FIELDS + PROVIDER_FIELDS:
        if values.get(name) is None:
            value = _lookup(source, name, prefix)
            if value is not None:
                values[name] = value

    return _build_config(values)


def load_config(config_path: str | Path) -> StorageConfig:
    """Load configuration from YAML file with environment variable substitution.

    The settings may sit at the top level or under a ``storage`` key.

    Args:
        config_path: Path to the configuration YAML file

    Returns:
        Validated StorageConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If config is invalid
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path, encoding="utf-8") as f:
        try:
            raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigurationError(f"Expected a mapping in {config_path}")

    data = raw_config.get("storage", raw_config)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping under 'storage' in {config_path}")

    return _build_config(_expand_env_vars(data))


def get_default_config() -> dict:
    """Return default configuration as a dictionary.

    This can be used to generate a config.yaml.example file.

    Returns:
        Default configuration dictionary
    """
    return {
        "storage": {
            "provider": "dropbox",
            "app_key": "${DROPBOX_APP_KEY}",
            "app_secret": "${DROPBOX_APP_SECRET}",
            "access_token": "${DROPBOX_ACCESS_TOKEN}",
            "access_token_secret": "${DROPBOX_ACCESS_TOKEN_SECRET}",
            "access_type": FULL_ACCESS,
            "user_id": "${DROPBOX_USER_ID}",
            "url_expires_in": 3600,
        },
    }


def _expand_env_vars(data: dict | list | str) -> dict | list | str:
    """Recursively substitute ${VAR_NAME} with environment variable values.

    Unset variables are left untouched.
    """
    if isinstance(data, dict):
        return {k: _expand_env_vars(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    if isinstance(data, str):
        return re.sub(
            r"\$\{([^}]+)\}",
            lambda m: os.environ.get(m.group(1)) or m.group(0),
            data,
        )
    return data


def _build_config(values: dict[str, Any]) -> StorageConfig:
    try:
        return StorageConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid storage configuration: {e}") from e
