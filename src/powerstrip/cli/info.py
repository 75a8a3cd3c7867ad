from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from powerstrip.utils.redaction import Redactor

from .common import connect_or_exit, load_settings_or_exit

HostOption = Annotated[
    str | None,
    typer.Option("--host", "-H", help="Device IP address. Uses config if omitted."),
]


def register(app: typer.Typer) -> None:
    @app.command()
    def info(
        host: HostOption = None,
        redact: Annotated[
            bool,
            typer.Option("--redact", help="Redact identifying values in output"),
        ] = False,
    ) -> None:
        """Show system information reported by the strip."""
        settings = load_settings_or_exit()
        controller = connect_or_exit(host, settings)
        snapshot = controller.snapshot
        redactor = Redactor(enabled=redact)

        table = Table(show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")

        table.add_row("Host", redactor.redact_ip(host or settings.device.host or ""))
        table.add_row("Alias", snapshot.alias)
        table.add_row("Model", snapshot.model)
        table.add_row("Device ID", redactor.redact_identifier(controller.device_id))
        table.add_row("Hardware ID", redactor.redact_identifier(snapshot.hw_id))
        table.add_row("OEM ID", redactor.redact_identifier(snapshot.oem_id))
        table.add_row("MAC", redactor.redact_mac(snapshot.mac))
        table.add_row("Hardware", snapshot.hw_ver)
        table.add_row("Software", snapshot.sw_ver)
        table.add_row("RSSI", f"{snapshot.rssi} dBm")
        table.add_row(
            "Location",
            f"{redactor.redact_coordinate(snapshot.latitude_i)}, "
            f"{redactor.redact_coordinate(snapshot.longitude_i)}",
        )
        table.add_row("LED", "off" if snapshot.led_off else "on")
        table.add_row("Status", snapshot.status)
        table.add_row("Updating", "yes" if snapshot.updating else "no")
        table.add_row("Outlets", str(len(snapshot.children)))

        Console().print(table)
