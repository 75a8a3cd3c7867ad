from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from powerstrip.mock_device import run_mock_device
from powerstrip.transport import DEFAULT_PORT


def register(app: typer.Typer) -> None:
    @app.command()
    def mock(
        host: str = typer.Option("0.0.0.0", "--host", help="Address to bind"),
        port: int = typer.Option(DEFAULT_PORT, "--port", "-p", help="UDP/TCP port"),
        outlets: int = typer.Option(6, "--outlets", "-n", min=1, help="Outlet count"),
        alias: str = typer.Option("Mock Power Strip", "--alias", help="Strip alias"),
    ) -> None:
        """Run a mock power strip for development."""
        console = Console()
        console.print(f"Starting mock strip '{alias}' on port {port}...")
        console.print("Press Ctrl+C to stop.\n")

        try:
            asyncio.run(
                run_mock_device(host=host, port=port, outlets=outlets, alias=alias)
            )
        except KeyboardInterrupt:
            console.print("\n[green]Mock strip stopped.[/green]")
