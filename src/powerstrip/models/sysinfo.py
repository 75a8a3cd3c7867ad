"""System information reply models.

Parsing is strict: every field must be present with its wire type. Unknown
extra keys sent by newer firmware are ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from powerstrip.errors import ProtocolError

_STRICT = ConfigDict(frozen=True, strict=True, populate_by_name=True)


class NextAction(BaseModel):
    model_config = _STRICT

    action_type: int = Field(alias="type")


class ChildOutlet(BaseModel):
    """One relay of a multi-outlet strip."""

    model_config = _STRICT

    alias: str
    id: str
    next_action: NextAction
    on_time: int
    state: int

    @property
    def is_on(self) -> bool:
        return self.state != 0


class DeviceSnapshot(BaseModel):
    """Body of a ``get_sysinfo`` reply."""

    model_config = _STRICT

    alias: str
    child_num: int
    children: list[ChildOutlet]
    device_id: str = Field(alias="deviceId")
    err_code: int
    feature: str
    hw_id: str = Field(alias="hwId")
    hw_ver: str
    latitude_i: int
    led_off: int
    longitude_i: int
    mac: str
    mic_type: str
    model: str
    oem_id: str = Field(alias="oemId")
    rssi: int
    status: str
    sw_ver: str
    updating: int

    @property
    def aliases(self) -> list[str]:
        return [child.alias for child in self.children]

    def find_child_by_alias(self, alias: str) -> ChildOutlet | None:
        """Return the first child whose alias matches exactly.

        The firmware does not enforce unique aliases; with duplicates only the
        first child in device order is reachable by alias.
        """
        for child in self.children:
            if child.alias == alias:
                return child
        return None


class GetSysInfoBody(BaseModel):
    model_config = _STRICT

    get_sysinfo: DeviceSnapshot


class SystemInfoResponse(BaseModel):
    model_config = _STRICT

    system: GetSysInfoBody


def parse_system_info(text: str) -> DeviceSnapshot:
    try:
        return SystemInfoResponse.model_validate_json(text).system.get_sysinfo
    except ValidationError as exc:
        raise ProtocolError(f"Malformed get_sysinfo reply: {exc}") from exc


def dump_system_info(snapshot: DeviceSnapshot) -> str:
    """Serialize a snapshot back into the wire envelope."""
    envelope = SystemInfoResponse(system=GetSysInfoBody(get_sysinfo=snapshot))
    return envelope.model_dump_json(by_alias=True)
