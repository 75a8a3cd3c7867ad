from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from powerstrip.errors import NotFoundError, PowerStripError
from powerstrip.models import RelayState, check_reply

from .common import connect_or_exit, load_settings_or_exit
from .info import HostOption

AliasArgument = Annotated[list[str], typer.Argument(help="Outlet alias(es)")]


def list_outlets(host: HostOption = None) -> None:
    """List the outlets of a strip with their live state."""
    settings = load_settings_or_exit()
    controller = connect_or_exit(host, settings)

    try:
        snapshot = controller.fetch_system_info()
    except PowerStripError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    table = Table()
    table.add_column("Alias", style="cyan")
    table.add_column("ID")
    table.add_column("State")
    table.add_column("On for")

    for child in snapshot.children:
        state = "[green]on[/green]" if child.is_on else "[red]off[/red]"
        table.add_row(child.alias, child.id, state, f"{child.on_time}s")

    Console().print(table)


def _switch(host: str | None, aliases: list[str], state: RelayState) -> None:
    settings = load_settings_or_exit()
    controller = connect_or_exit(host, settings)
    console = Console()

    try:
        reply = controller.toggle_outlets(aliases, state)
        check_reply(reply, "system", "set_relay_state")
    except NotFoundError as exc:
        typer.echo(str(exc), err=True)
        known = ", ".join(controller.snapshot.aliases)
        typer.echo(f"Known outlets: {known}", err=True)
        raise typer.Exit(1) from exc
    except PowerStripError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    for alias in aliases:
        console.print(f"[green]✓[/green] {alias} → {state.name}")


def turn_on(aliases: AliasArgument, host: HostOption = None) -> None:
    """Switch outlets on."""
    _switch(host, aliases, RelayState.ON)


def turn_off(aliases: AliasArgument, host: HostOption = None) -> None:
    """Switch outlets off."""
    _switch(host, aliases, RelayState.OFF)


def register(app: typer.Typer) -> None:
    app.command("outlets")(list_outlets)
    app.command("on")(turn_on)
    app.command("off")(turn_off)
