"""Exceptions raised by the powerstrip client."""

from __future__ import annotations


class PowerStripError(Exception):
    """Base class for all powerstrip errors."""


class TransportError(PowerStripError):
    """Connect, send or receive failed, or the device did not answer in time."""


class ProtocolError(PowerStripError):
    """Reply is not a well-formed protocol envelope."""


class ConfigurationError(PowerStripError):
    """A command was attempted without a snapshot or device identifier."""


class NotFoundError(PowerStripError, LookupError):
    """No child outlet carries the requested alias."""


class EncodingError(PowerStripError, ValueError):
    """Deobfuscated reply bytes are not valid UTF-8."""
