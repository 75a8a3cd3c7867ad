"""powerstrip - LAN control of multi-outlet smart power strips."""

from __future__ import annotations

from importlib.metadata import version

from .codec import deobfuscate, obfuscate
from .controller import DeviceController, composite_address
from .errors import (
    ConfigurationError,
    EncodingError,
    NotFoundError,
    PowerStripError,
    ProtocolError,
    TransportError,
)
from .models import ChildOutlet, DeviceSnapshot, RelayState
from .transport import Transport, TransportClient

__all__ = [
    "ChildOutlet",
    "ConfigurationError",
    "DeviceController",
    "DeviceSnapshot",
    "EncodingError",
    "NotFoundError",
    "PowerStripError",
    "ProtocolError",
    "RelayState",
    "Transport",
    "TransportClient",
    "TransportError",
    "__version__",
    "composite_address",
    "deobfuscate",
    "obfuscate",
]

__version__ = version("powerstrip")
