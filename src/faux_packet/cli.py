"""
Faux Packet CLI.

Usage:
    faux-packet serve --seed topology.yaml
    faux-packet serve --metadata-device <device-id>
    faux-packet seed-check topology.yaml
"""

import os
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from faux_packet import __version__
from faux_packet.config import settings
from faux_packet.logging_config import LogConfig, configure_logging
from faux_packet.services.seed import SeedError, load_seed
from faux_packet.services.store import MemoryStore

app = typer.Typer(
    name="faux-packet",
    help="In-memory Packet API for exercising clients without a live backend.",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"Faux Packet v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
):
    """Faux Packet - an in-memory Packet API."""
    pass


# =============================================================================
# Server Command
# =============================================================================


@app.command()
def serve(
    host: Annotated[
        str,
        typer.Option("--host", "-h", help="Host to bind to"),
    ] = settings.host,
    port: Annotated[
        int,
        typer.Option("--port", "-p", help="Port to bind to"),
    ] = settings.port,
    metadata_device: Annotated[
        Optional[str],
        typer.Option("--metadata-device", "-m", help="Device ID served on /metadata"),
    ] = settings.metadata_device,
    seed: Annotated[
        Optional[Path],
        typer.Option("--seed", "-s", help="YAML topology to load at start-up", exists=True),
    ] = settings.seed_file,
    log_format: Annotated[
        str,
        typer.Option("--log-format", help="json or human"),
    ] = settings.log_format,
    reload: Annotated[
        bool,
        typer.Option("--reload", help="Enable auto-reload for development"),
    ] = False,
):
    """Start the Faux Packet API server."""
    import uvicorn

    configure_logging(LogConfig(level=settings.log_level, format=log_format))

    console.print(f"Starting Faux Packet API server on [bold]{host}:{port}[/bold]")
    console.print(f"API docs: http://{host}:{port}/docs")

    if reload:
        # the reloader imports the app in a fresh process that reads these
        if metadata_device:
            os.environ["FPK_METADATA_DEVICE"] = metadata_device
        if seed:
            os.environ["FPK_SEED_FILE"] = str(seed)
        uvicorn.run(
            "faux_packet.api.app:create_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
        )
        return

    try:
        from faux_packet.api.app import create_app

        api = create_app(metadata_device=metadata_device, seed_file=seed)
    except SeedError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if api.state.metadata_device:
        console.print(f"Metadata device: [bold]{api.state.metadata_device}[/bold]")
    uvicorn.run(api, host=host, port=port, log_config=None)


# =============================================================================
# Seed Commands
# =============================================================================


@app.command("seed-check")
def seed_check(
    path: Annotated[Path, typer.Argument(help="Seed file to validate", exists=True)],
):
    """Load a seed file into a scratch store and show what it creates."""
    store = MemoryStore.from_settings()
    try:
        result = load_seed(store, path)
    except SeedError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Seed file [bold]{path}[/bold] is valid")

    devices, _ = store.list_devices()
    if devices:
        table = Table(title="Devices")
        table.add_column("ID", style="cyan")
        table.add_column("Hostname", style="green")
        table.add_column("Facility")
        table.add_column("Plan")
        table.add_column("Volumes")

        for device in devices:
            marker = " [bold](metadata)[/bold]" if device.id == result.metadata_device else ""
            table.add_row(
                device.id,
                f"{device.hostname}{marker}",
                device.facility.code,
                device.plan.slug if device.plan else "-",
                str(len(device.volumes)),
            )
        console.print(table)

    volumes, _ = store.list_volumes()
    if volumes:
        table = Table(title="Volumes")
        table.add_column("ID", style="cyan")
        table.add_column("Name", style="green")
        table.add_column("Size")
        table.add_column("Attachments")

        for volume in volumes:
            table.add_row(
                volume.id,
                volume.name,
                f"{volume.size} GB",
                str(len(volume.attachments)),
            )
        console.print(table)


if __name__ == "__main__":
    app()
