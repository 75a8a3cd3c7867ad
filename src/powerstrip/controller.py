"""Outlet addressing and command dispatch for a single power strip."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from powerstrip.errors import ConfigurationError, NotFoundError
from powerstrip.models import (
    DeviceSnapshot,
    GetSysInfoRequest,
    RelayState,
    SetRelayStateRequest,
    encode_request,
    parse_system_info,
)
from powerstrip.transport import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    Transport,
    TransportClient,
)

logger = logging.getLogger(__name__)

GET_SYSINFO = encode_request(GetSysInfoRequest())


class CommandSender(Protocol):
    def send(self, command: str, transport: Transport) -> str: ...


def composite_address(device_id: str, child_id: str) -> str:
    """Address of one outlet: parent id immediately followed by child id."""
    return device_id + child_id


def fetch_system_info(sender: CommandSender, transport: Transport) -> DeviceSnapshot:
    return parse_system_info(sender.send(GET_SYSINFO, transport))


class DeviceController:
    """A power strip whose system info has been fetched at least once.

    Use :meth:`connect`; it performs the first ``get_sysinfo`` round trip and
    only returns a controller when that succeeds. The cached snapshot is never
    refreshed, call :meth:`fetch_system_info` for live state.

    Instances are not safe for concurrent use from several threads.
    """

    def __init__(
        self,
        sender: CommandSender,
        snapshot: DeviceSnapshot,
        device_id: str,
        transport: Transport = Transport.UDP,
    ) -> None:
        self._sender = sender
        self._snapshot = snapshot
        self._device_id = device_id
        self._transport = transport

    @classmethod
    def connect(
        cls,
        ip: str,
        device_id: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Transport = Transport.UDP,
        port: int = DEFAULT_PORT,
        sender: CommandSender | None = None,
    ) -> DeviceController:
        """Fetch the initial snapshot and build a controller.

        An explicit ``device_id`` takes precedence over the one reported by the
        device. Transport, protocol and encoding errors propagate.
        """
        if sender is None:
            sender = TransportClient(ip, port=port, timeout=timeout)

        snapshot = fetch_system_info(sender, transport)
        resolved = device_id if device_id is not None else snapshot.device_id
        logger.info(
            "Connected to '%s' (%s) at %s with %d outlets",
            snapshot.alias,
            snapshot.model,
            ip,
            len(snapshot.children),
        )
        return cls(sender, snapshot, resolved, transport)

    @property
    def snapshot(self) -> DeviceSnapshot:
        return self._snapshot

    @property
    def device_id(self) -> str:
        return self._device_id

    @property
    def transport(self) -> Transport:
        return self._transport

    def fetch_system_info(self) -> DeviceSnapshot:
        """Query the device now; the cached snapshot is left untouched."""
        return fetch_system_info(self._sender, self._transport)

    def resolve(self, alias: str) -> str:
        """Composite address of the outlet labelled ``alias``."""
        if not self._device_id:
            raise ConfigurationError("Device identifier is not known")

        child = self._snapshot.find_child_by_alias(alias)
        if child is None:
            raise NotFoundError(
                f"No outlet with alias '{alias}' on '{self._snapshot.alias}'"
            )
        return composite_address(self._device_id, child.id)

    def toggle_outlet(self, alias: str, state: RelayState | bool) -> str:
        """Switch one outlet and return the raw reply text.

        The reply is returned unparsed; receiving it is the only confirmation.
        """
        return self.toggle_outlets([alias], state)

    def toggle_outlets(self, aliases: Sequence[str], state: RelayState | bool) -> str:
        """Switch several outlets with a single command.

        Every alias is resolved before anything is sent.
        """
        if isinstance(state, bool):
            state = RelayState.from_bool(state)

        child_ids = [self.resolve(alias) for alias in aliases]
        command = encode_request(SetRelayStateRequest.for_children(child_ids, state))
        logger.info("Setting %s to %s", ", ".join(aliases), state.name)
        return self._sender.send(command, self._transport)

    def turn_on(self, alias: str) -> str:
        return self.toggle_outlet(alias, RelayState.ON)

    def turn_off(self, alias: str) -> str:
        return self.toggle_outlet(alias, RelayState.OFF)
