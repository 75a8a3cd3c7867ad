from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Redactor:
    enabled: bool = True

    def redact_ip(self, ip: str) -> str:
        if not self.enabled:
            return ip
        parts = ip.split(".")
        if len(parts) == 4 and all(part.isdigit() for part in parts):
            return f"x.x.x.{parts[3]}"
        return ip

    def redact_mac(self, mac: str) -> str:
        if not self.enabled:
            return mac
        parts = mac.split(":")
        if len(parts) != 6:
            return mac
        return ":".join(parts[:3] + ["xx", "xx", "xx"])

    def redact_identifier(self, value: str) -> str:
        """Keep the last four characters of a device or hardware id."""
        if not self.enabled or len(value) <= 4:
            return value
        return "*" * (len(value) - 4) + value[-4:]

    def redact_coordinate(self, value: int) -> str:
        if not self.enabled:
            return str(value)
        return "x"
