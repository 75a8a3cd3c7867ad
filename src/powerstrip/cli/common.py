from __future__ import annotations

from pathlib import Path

import typer

from powerstrip.config import Settings, get_settings, resolve_config_path
from powerstrip.controller import DeviceController
from powerstrip.errors import PowerStripError


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def connect_or_exit(host: str | None, settings: Settings) -> DeviceController:
    device = settings.device
    target = host or device.host
    if not target:
        typer.echo("No host given and device.host is not configured", err=True)
        raise typer.Exit(1)

    try:
        return DeviceController.connect(
            target,
            device_id=device.device_id,
            timeout=device.timeout,
            transport=device.transport,
            port=device.port,
        )
    except PowerStripError as exc:
        typer.echo(f"Could not read system info from {target}: {exc}", err=True)
        raise typer.Exit(1) from exc
