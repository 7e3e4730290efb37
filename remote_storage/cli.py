"""Remote storage command line tool.

Operator commands for checking credentials and paths against a live
account.

Commands:
    store        - Upload a local file
    url          - Print the download URL of a stored file
    move         - Move a stored file
    copy         - Copy a stored file
    delete       - Delete a stored file
    init-config  - Write an example configuration file
"""

from pathlib import Path
from typing import NoReturn

import structlog
import typer
import yaml

from remote_storage.adapter import StorageAdapter
from remote_storage.buffer import UploadedFile
from remote_storage.config import get_default_config, get_settings, load_config, resolve_config
from remote_storage.exceptions import StorageError
from remote_storage.log import setup_logging

app = typer.Typer(
    name="remote-storage",
    help="Store and manage uploaded files in remote storage",
    add_completion=False,
)


def _config_option():
    return typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file (defaults to REMOTE_STORAGE_* variables)",
    )


def _build_adapter(config_path: Path | None) -> StorageAdapter:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    if config_path is not None:
        config = load_config(config_path)
    else:
        config = resolve_config(settings)
    return StorageAdapter(config)


def _fail(error: Exception) -> NoReturn:
    structlog.get_logger().error("Command failed", error=str(error))
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


@app.command()
def store(
    local_path: Path = typer.Argument(..., help="Local file to upload"),
    store_path: str = typer.Argument(..., help="Destination path in remote storage"),
    config_path: Path = _config_option(),
) -> None:
    """Upload a local file and print its stored metadata."""
    try:
        adapter = _build_adapter(config_path)
        buffer = UploadedFile(local_path)
    except (StorageError, FileNotFoundError) as e:
        _fail(e)

    try:
        handle = adapter.store(buffer, store_path)
    except StorageError as e:
        _fail(e)
    finally:
        buffer.close()

    typer.echo(f"Stored:       {handle.remote_path}")
    typer.echo(f"Filename:     {handle.filename}")
    typer.echo(f"Size:         {handle.size}")
    typer.echo(f"Content type: {handle.content_type}")


@app.command()
def url(
    path: str = typer.Argument(..., help="Path in remote storage"),
    config_path: Path = _config_option(),
) -> None:
    """Print the download URL of a stored file."""
    try:
        handle = _build_adapter(config_path).retrieve(path)
        typer.echo(handle.url())
    except (StorageError, FileNotFoundError) as e:
        _fail(e)


@app.command()
def move(
    path: str = typer.Argument(..., help="Current path in remote storage"),
    new_path: str = typer.Argument(..., help="New path in remote storage"),
    config_path: Path = _config_option(),
) -> None:
    """Move a stored file to a new path."""
    try:
        handle = _build_adapter(config_path).retrieve(path).move_to(new_path)
    except (StorageError, FileNotFoundError) as e:
        _fail(e)

    typer.echo(f"Moved to {handle.remote_path}")


@app.command()
def copy(
    path: str = typer.Argument(..., help="Path in remote storage"),
    new_path: str = typer.Argument(..., help="Path of the copy"),
    config_path: Path = _config_option(),
) -> None:
    """Copy a stored file to a new path."""
    try:
        handle = _build_adapter(config_path).retrieve(path).copy_to(new_path)
    except (StorageError, FileNotFoundError) as e:
        _fail(e)

    typer.echo(f"Copied to {handle.remote_path}")


@app.command()
def delete(
    path: str = typer.Argument(..., help="Path in remote storage"),
    config_path: Path = _config_option(),
) -> None:
    """Delete a stored file."""
    try:
        deleted = _build_adapter(config_path).retrieve(path).delete()
    except (StorageError, FileNotFoundError) as e:
        _fail(e)

    if not deleted:
        typer.echo(f"Delete of {path} was not confirmed by the provider", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Deleted {path}")


@app.command()
def init_config(
    output: Path = typer.Option(
        Path("storage.yaml.example"),
        "--output",
        "-o",
        help="Output file path",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing file",
    ),
) -> None:
    """Generate an example configuration file."""
    if output.exists() and not force:
        typer.echo(f"File already exists: {output}")
        typer.echo("Use --force to overwrite")
        raise typer.Exit(1)

    with open(output, "w", encoding="utf-8") as f:
        yaml.dump(get_default_config(), f, default_flow_style=False, sort_keys=False)

    typer.echo(f"Example configuration written to {output}")


if __name__ == "__main__":
    app()
