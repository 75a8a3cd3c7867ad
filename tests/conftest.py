from __future__ import annotations

import asyncio
import copy
import json
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import pytest

from powerstrip.config import get_settings
from powerstrip.mock_device import MockPowerStrip, default_outlets
from powerstrip.transport import Transport

RELAY_OK = '{"system":{"set_relay_state":{"err_code":0}}}'

SYSINFO: dict[str, Any] = {
    "sw_ver": "1.0.12 Build 200810 Rel.091043",
    "hw_ver": "1.0",
    "model": "HS300(US)",
    "deviceId": "ABC123",
    "oemId": "5C9E6254BEBAED63B2B6102966D24C17",
    "hwId": "34C41AA028022D0CCEA5E678E8547C54",
    "rssi": -48,
    "latitude_i": 523001,
    "longitude_i": 48902,
    "alias": "Office Strip",
    "status": "new",
    "mic_type": "IOT.SMARTPLUGSWITCH",
    "feature": "TIM:ENE",
    "mac": "B0:95:75:AA:BB:CC",
    "updating": 0,
    "led_off": 0,
    "child_num": 3,
    "children": [
        {
            "id": "01",
            "state": 0,
            "alias": "Plug 5",
            "on_time": 0,
            "next_action": {"type": -1},
        },
        {
            "id": "02",
            "state": 1,
            "alias": "Desk Lamp",
            "on_time": 3512,
            "next_action": {"type": -1},
        },
        {
            "id": "03",
            "state": 0,
            "alias": "Desk Lamp",
            "on_time": 0,
            "next_action": {"type": 1},
        },
    ],
    "err_code": 0,
}


class StubSender:
    """Answers get_sysinfo with a canned reply and records every command."""

    def __init__(self, sysinfo_text: str, reply: str = RELAY_OK) -> None:
        self.sysinfo_text = sysinfo_text
        self.reply = reply
        self.sent: list[tuple[str, Transport]] = []

    def send(self, command: str, transport: Transport) -> str:
        self.sent.append((command, transport))
        if "get_sysinfo" in command:
            return self.sysinfo_text
        return self.reply


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.delenv("POWERSTRIP_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sysinfo() -> dict[str, Any]:
    return copy.deepcopy(SYSINFO)


@pytest.fixture
def sysinfo_text(sysinfo: dict[str, Any]) -> str:
    return json.dumps({"system": {"get_sysinfo": sysinfo}})


@pytest.fixture
def sender(sysinfo_text: str) -> StubSender:
    return StubSender(sysinfo_text)


@contextmanager
def serve_mock(device: MockPowerStrip) -> Iterator[MockPowerStrip]:
    """Run the mock strip on a background event loop."""
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    asyncio.run_coroutine_threadsafe(device.start(), loop).result(timeout=5)
    try:
        yield device
    finally:
        asyncio.run_coroutine_threadsafe(device.stop(), loop).result(timeout=5)
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=5)
        loop.close()


@pytest.fixture
def mock_strip() -> Iterator[MockPowerStrip]:
    device = MockPowerStrip(host="127.0.0.1", port=0, outlets=default_outlets(3))
    with serve_mock(device):
        yield device


@pytest.fixture
def crowded_mock_strip() -> Iterator[MockPowerStrip]:
    """Strip whose get_sysinfo reply exceeds the UDP receive buffer."""
    device = MockPowerStrip(host="127.0.0.1", port=0, outlets=default_outlets(40))
    with serve_mock(device):
        yield device
