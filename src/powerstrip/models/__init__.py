"""Protocol message models."""

from powerstrip.models.replies import CommandReply, check_reply
from powerstrip.models.requests import (
    GetSysInfoRequest,
    RelayState,
    SetRelayStateRequest,
    encode_request,
)
from powerstrip.models.sysinfo import (
    ChildOutlet,
    DeviceSnapshot,
    NextAction,
    SystemInfoResponse,
    dump_system_info,
    parse_system_info,
)

__all__ = [
    "ChildOutlet",
    "CommandReply",
    "DeviceSnapshot",
    "GetSysInfoRequest",
    "NextAction",
    "RelayState",
    "SetRelayStateRequest",
    "SystemInfoResponse",
    "check_reply",
    "dump_system_info",
    "encode_request",
    "parse_system_info",
]
