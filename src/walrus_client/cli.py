"""CLI for walrus-client."""

from pathlib import Path
from typing import List, Optional
import json
import logging
import os

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .blob import BlobClient
from .client import WalrusClient
from .config import ClientConfig, load_config
from .errors import ApiError, ConfigError, HttpRequestError, WalrusError
from .api import atomic_write, upload_files_as_quilt
from .quilt import QuiltClient
from .utils import describe_store_result, humanize_size


app = typer.Typer(help="""\
Store and read blobs and quilts on a Walrus aggregator/publisher pair.
Blobs are single payloads; quilts bundle several named files that can be
read back one at a time.""")

console = Console()


class CliState:
    """Options shared by all commands (set by the app callback)."""

    def __init__(self):
        self.aggregator: Optional[str] = None
        self.publisher: Optional[str] = None
        self.config_path: Optional[Path] = None

    def config(self) -> ClientConfig:
        try:
            cfg = load_config(self.config_path)
        except ConfigError as e:
            console.print(f"[red]✗[/red] {escape(str(e))}")
            raise typer.Exit(1)
        return ClientConfig(
            aggregator_url=self.aggregator or cfg.aggregator_url,
            publisher_url=self.publisher or cfg.publisher_url,
            default_epochs=cfg.default_epochs,
            timeout=cfg.timeout,
        )

    def client(self) -> WalrusClient:
        try:
            return self.config().make_client()
        except WalrusError as e:
            fail(e)


state = CliState()


def fail(e: WalrusError) -> None:
    """Print a WalrusError with a hint and exit with code 1."""
    console.print(f"[red]✗[/red] {escape(str(e))}")
    if isinstance(e, HttpRequestError):
        console.print("[dim]Check your network connection and the endpoint URLs (walrus-client config)[/dim]")
    elif isinstance(e, ApiError) and e.status == 404:
        console.print("[dim]Hint: Did you mistype the id?[/dim]")
    if os.environ.get("DEBUG"):
        console.print_exception()
    raise typer.Exit(1)


def _write_output(data: bytes, output: Optional[Path], name: str) -> None:
    if output is None:
        typer.echo(data, nl=False)
        return
    target = output / name if output.is_dir() else output
    atomic_write(data, target)
    console.print(f"[green]✓[/green] Wrote {humanize_size(len(data))} to {target}")


@app.callback()
def main(
    aggregator: Optional[str] = typer.Option(None, "--aggregator", help="Aggregator base URL"),
    publisher: Optional[str] = typer.Option(None, "--publisher", help="Publisher base URL"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file (default: ~/.walrus-client/config.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Walrus blob/quilt client."""
    state.aggregator = aggregator
    state.publisher = publisher
    state.config_path = config_path
    if verbose or os.environ.get("DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def store(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to store"),
    epochs: Optional[int] = typer.Option(None, help="Storage epochs (default: from config)"),
    deletable: Optional[bool] = typer.Option(None, "--deletable/--no-deletable", help="Store as deletable"),
    permanent: Optional[bool] = typer.Option(None, "--permanent/--no-permanent", help="Store as permanent"),
    send_object_to: Optional[str] = typer.Option(None, "--send-object-to", help="Address to receive the blob object"),
):
    """Store a file as a blob."""
    cfg = state.config()
    client = state.client()
    data = file.read_bytes()
    try:
        result = BlobClient(client).store_blob(
            data,
            epochs=epochs if epochs is not None else cfg.default_epochs,
            deletable=deletable,
            permanent=permanent,
            send_object_to=send_object_to,
        )
    except WalrusError as e:
        fail(e)

    console.print(f"[green]✓[/green] Stored {file.name}: {describe_store_result(result)}")
    console.print(f"Blob ID: [cyan]{result.blob_id}[/cyan]")
    if result.is_newly_created:
        console.print(f"Object ID: [cyan]{result.newly_created.blob_object.id}[/cyan]")


@app.command()
def read(
    blob_id: str = typer.Argument(..., help="Blob id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file or directory (default: stdout)"),
):
    """Read a blob by blob id."""
    try:
        data = BlobClient(state.client()).read_blob_by_id(blob_id)
    except WalrusError as e:
        fail(e)
    _write_output(data, output, blob_id)


@app.command("read-object")
def read_object(
    object_id: str = typer.Argument(..., help="On-chain object id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file or directory (default: stdout)"),
):
    """Read a blob by its object id."""
    try:
        data = BlobClient(state.client()).read_blob_by_object_id(object_id)
    except WalrusError as e:
        fail(e)
    _write_output(data, output, object_id)


@app.command("store-quilt")
def store_quilt(
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Files to bundle"),
    metadata_file: Optional[Path] = typer.Option(
        None, "--metadata", exists=True, dir_okay=False,
        help='JSON file: [{"identifier": "a.txt", "tags": {"k": "v"}}, ...]',
    ),
    epochs: Optional[int] = typer.Option(None, help="Storage epochs (default: from config)"),
    deletable: Optional[bool] = typer.Option(None, "--deletable/--no-deletable", help="Store as deletable"),
    permanent: Optional[bool] = typer.Option(None, "--permanent/--no-permanent", help="Store as permanent"),
    send_object_to: Optional[str] = typer.Option(None, "--send-object-to", help="Address to receive the quilt object"),
):
    """Store several files as one quilt (identified by file name)."""
    metadata = None
    if metadata_file:
        try:
            metadata = json.loads(metadata_file.read_text())
        except ValueError as e:
            console.print(f"[red]✗[/red] Invalid metadata JSON in {metadata_file}: {e}")
            raise typer.Exit(1)

    cfg = state.config()
    try:
        response = upload_files_as_quilt(
            files,
            client=state.client(),
            metadata=metadata,
            epochs=epochs if epochs is not None else cfg.default_epochs,
            deletable=deletable,
            permanent=permanent,
            send_object_to=send_object_to,
        )
    except WalrusError as e:
        fail(e)

    console.print(f"[green]✓[/green] Stored quilt: {describe_store_result(response.blob_store_result)}")
    console.print(f"Quilt ID: [cyan]{response.quilt_id}[/cyan]")

    table = Table(title="Quilt members")
    table.add_column("Identifier", style="cyan")
    table.add_column("Patch ID")
    for blob in response.stored_quilt_blobs:
        table.add_row(blob.identifier, blob.quilt_patch_id)
    console.print(table)


@app.command("read-quilt")
def read_quilt(
    patch_id: str = typer.Argument(..., help="Quilt patch id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file or directory (default: stdout)"),
):
    """Read one quilt member by patch id."""
    try:
        data = QuiltClient(state.client()).read_quilt_blob_by_patch_id(patch_id)
    except WalrusError as e:
        fail(e)
    _write_output(data, output, patch_id)


@app.command("read-quilt-member")
def read_quilt_member(
    quilt_id: str = typer.Argument(..., help="Quilt blob id"),
    identifier: str = typer.Argument(..., help="Member identifier"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file or directory (default: stdout)"),
):
    """Read one quilt member by quilt id and identifier."""
    try:
        data = QuiltClient(state.client()).read_quilt_blob_by_quilt_id_and_identifier(quilt_id, identifier)
    except WalrusError as e:
        fail(e)
    _write_output(data, output, identifier)


@app.command()
def config():
    """Show the effective endpoints."""
    cfg = state.config()
    console.print(f"Aggregator: [cyan]{cfg.aggregator_url}[/cyan]")
    console.print(f"Publisher:  [cyan]{cfg.publisher_url}[/cyan]")
    console.print(f"Epochs:     {cfg.default_epochs}")
    if cfg.timeout is not None:
        console.print(f"Timeout:    {cfg.timeout}s")


if __name__ == "__main__":
    app()
