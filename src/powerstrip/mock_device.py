"""Mock multi-outlet power strip for development and testing.

Serves the obfuscated JSON protocol on one port over both UDP and TCP (TCP
frames carry the 4-byte length header).
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from powerstrip.codec import (
    HEADER,
    HEADER_SIZE,
    deobfuscate,
    obfuscate,
    read_length_prefix,
)
from powerstrip.transport import DEFAULT_PORT

if TYPE_CHECKING:
    from asyncio import StreamReader, StreamWriter

logger = logging.getLogger(__name__)

ERR_MODULE_NOT_SUPPORTED = -1
ERR_METHOD_NOT_SUPPORTED = -2
ERR_CHILD_NOT_FOUND = -14
ERR_INVALID_ARGUMENT = -3


@dataclass
class MockOutlet:
    alias: str
    id: str
    state: int = 0
    switched_at: float | None = None

    def set_state(self, state: int) -> None:
        if state and not self.state:
            self.switched_at = time.monotonic()
        elif not state:
            self.switched_at = None
        self.state = 1 if state else 0

    def sysinfo(self) -> dict[str, Any]:
        on_time = 0
        if self.switched_at is not None:
            on_time = int(time.monotonic() - self.switched_at)
        return {
            "id": self.id,
            "state": self.state,
            "alias": self.alias,
            "on_time": on_time,
            "next_action": {"type": -1},
        }


def default_outlets(count: int) -> list[MockOutlet]:
    return [MockOutlet(alias=f"Plug {i + 1}", id=f"{i:02d}") for i in range(count)]


@dataclass
class MockPowerStrip:
    """Simulated strip answering ``get_sysinfo`` and ``set_relay_state``."""

    alias: str = "Mock Power Strip"
    device_id: str = "80067AC4FDBD41C54C55896BFA28EAD38A87A5A4"
    hw_id: str = "955F433CBA24823A248A59AA64571A73"
    oem_id: str = "32BD0B21AA9BF8E84737D1DB1C66E883"
    mac: str = "B0:BE:76:12:34:56"
    model: str = "HS300(US)"
    sw_ver: str = "1.0.6 Build 200821 Rel.090909"
    hw_ver: str = "1.0"
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    outlets: list[MockOutlet] = field(default_factory=lambda: default_outlets(6))

    _server: asyncio.Server | None = field(default=None, repr=False)
    _datagrams: asyncio.DatagramTransport | None = field(default=None, repr=False)

    async def start(self) -> None:
        """Listen on TCP and UDP; a port of 0 picks a free port for both."""
        self._server = await asyncio.start_server(
            self._handle_client, self.host, self.port
        )
        self.port = self._server.sockets[0].getsockname()[1]

        loop = asyncio.get_running_loop()
        self._datagrams, _ = await loop.create_datagram_endpoint(
            lambda: _DatagramHandler(self), local_addr=(self.host, self.port)
        )
        logger.info("Mock strip '%s' listening on port %d", self.alias, self.port)

    async def stop(self) -> None:
        if self._datagrams:
            self._datagrams.close()
            self._datagrams = None
        if self._server:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
            logger.info("Mock strip '%s' stopped", self.alias)

    async def run_forever(self) -> None:
        await self.start()
        if self._server:
            await self._server.serve_forever()

    def sysinfo(self) -> dict[str, Any]:
        return {
            "sw_ver": self.sw_ver,
            "hw_ver": self.hw_ver,
            "model": self.model,
            "deviceId": self.device_id,
            "oemId": self.oem_id,
            "hwId": self.hw_id,
            "rssi": -52,
            "latitude_i": 0,
            "longitude_i": 0,
            "alias": self.alias,
            "status": "new",
            "mic_type": "IOT.SMARTPLUGSWITCH",
            "feature": "TIM",
            "mac": self.mac,
            "updating": 0,
            "led_off": 0,
            "child_num": len(self.outlets),
            "children": [outlet.sysinfo() for outlet in self.outlets],
            "err_code": 0,
        }

    def handle_request(self, request: dict[str, Any]) -> dict[str, Any]:
        context = request.get("context") or {}
        response: dict[str, Any] = {}

        for module, methods in request.items():
            if module == "context":
                continue
            if module != "system" or not isinstance(methods, dict):
                response[module] = {
                    "err_code": ERR_MODULE_NOT_SUPPORTED,
                    "err_msg": "module not support",
                }
                continue

            response[module] = {
                method: self._handle_system(method, params, context)
                for method, params in methods.items()
            }

        return response

    def handle_text(self, text: str) -> str:
        try:
            request = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed request: %r", text)
            return json.dumps(
                {"err_code": ERR_INVALID_ARGUMENT, "err_msg": "json decode error"}
            )
        if not isinstance(request, dict):
            logger.warning("Ignoring non-object request: %r", text)
            return json.dumps(
                {"err_code": ERR_INVALID_ARGUMENT, "err_msg": "invalid argument"}
            )
        return json.dumps(self.handle_request(request), separators=(",", ":"))

    def handle_payload(self, payload: bytes) -> bytes:
        """Deobfuscate a request and return the obfuscated reply."""
        text = deobfuscate(payload).decode("latin-1")
        logger.debug("Received %s", text)
        return obfuscate(self.handle_text(text).encode("utf-8"))

    def _handle_system(
        self, method: str, params: Any, context: dict[str, Any]
    ) -> dict[str, Any]:
        if method == "get_sysinfo":
            return self.sysinfo()
        if method == "set_relay_state":
            return self._set_relay_state(params, context)
        return {"err_code": ERR_METHOD_NOT_SUPPORTED, "err_msg": "member not support"}

    def _set_relay_state(self, params: Any, context: dict[str, Any]) -> dict[str, Any]:
        if not isinstance(params, dict) or params.get("state") not in (0, 1):
            return {"err_code": ERR_INVALID_ARGUMENT, "err_msg": "invalid argument"}

        child_ids = context.get("child_ids")
        if child_ids is None:
            targets = list(self.outlets)
        else:
            by_address = {self.device_id + outlet.id: outlet for outlet in self.outlets}
            if any(child_id not in by_address for child_id in child_ids):
                return {"err_code": ERR_CHILD_NOT_FOUND, "err_msg": "entry not exist"}
            targets = [by_address[child_id] for child_id in child_ids]

        for outlet in targets:
            outlet.set_state(params["state"])
            logger.info(
                "Outlet '%s' turned %s", outlet.alias, "ON" if outlet.state else "OFF"
            )
        return {"err_code": 0}

    async def _handle_client(self, reader: StreamReader, writer: StreamWriter) -> None:
        addr = writer.get_extra_info("peername")
        logger.debug("TCP client connected: %s", addr)
        try:
            length = read_length_prefix(await reader.readexactly(HEADER_SIZE))
            payload = await reader.readexactly(length)
            reply = self.handle_payload(payload)
            writer.write(HEADER.pack(len(reply)) + reply)
            await writer.drain()
        except (asyncio.IncompleteReadError, ConnectionResetError, BrokenPipeError):
            logger.debug("TCP client disconnected early: %s", addr)
        finally:
            writer.close()
            await writer.wait_closed()


class _DatagramHandler(asyncio.DatagramProtocol):
    def __init__(self, device: MockPowerStrip) -> None:
        self.device = device
        self.transport: asyncio.DatagramTransport | None = None

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport  # type: ignore[assignment]

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        if self.transport is not None:
            self.transport.sendto(self.device.handle_payload(data), addr)


async def run_mock_device(
    host: str = "0.0.0.0",
    port: int = DEFAULT_PORT,
    outlets: int = 6,
    alias: str = "Mock Power Strip",
) -> None:
    """Run a mock power strip until cancelled."""
    device = MockPowerStrip(
        alias=alias, host=host, port=port, outlets=default_outlets(outlets)
    )
    await device.run_forever()
