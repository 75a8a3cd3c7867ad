from __future__ import annotations

from typing import Annotated, cast

import typer

from powerstrip.utils.logging import LogLevel, setup_logging

from . import config as config_cmd
from .info import register as register_info
from .mock import register as register_mock
from .outlets import register as register_outlets

app = typer.Typer(
    help="powerstrip - control the outlets of a LAN smart power strip",
    no_args_is_help=True,
)

app.add_typer(config_cmd.app, name="config")

register_info(app)
register_outlets(app)
register_mock(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="CRITICAL, ERROR, WARNING, INFO or DEBUG"),
    ] = None,
) -> None:
    """powerstrip CLI."""
    level = cast(LogLevel, log_level.upper()) if log_level else None
    setup_logging(level)

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"powerstrip version {get_version('powerstrip')}")
        raise typer.Exit()
