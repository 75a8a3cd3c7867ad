"""Request envelopes sent to the strip."""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum

from pydantic import BaseModel, Field


class RelayState(IntEnum):
    OFF = 0
    ON = 1

    @classmethod
    def from_bool(cls, on: bool) -> RelayState:
        return cls.ON if on else cls.OFF


class EmptyParams(BaseModel):
    model_config = {"frozen": True}


class GetSysInfoCommand(BaseModel):
    model_config = {"frozen": True}

    get_sysinfo: EmptyParams = Field(default_factory=EmptyParams)


class GetSysInfoRequest(BaseModel):
    """``{"system":{"get_sysinfo":{}}}``"""

    model_config = {"frozen": True}

    system: GetSysInfoCommand = Field(default_factory=GetSysInfoCommand)


class RelayStateParams(BaseModel):
    model_config = {"frozen": True}

    state: RelayState


class SetRelayStateCommand(BaseModel):
    model_config = {"frozen": True}

    set_relay_state: RelayStateParams


class ChildContext(BaseModel):
    model_config = {"frozen": True}

    child_ids: list[str]


class SetRelayStateRequest(BaseModel):
    """Switch the relays named by composite child addresses."""

    model_config = {"frozen": True}

    context: ChildContext
    system: SetRelayStateCommand

    @classmethod
    def for_children(
        cls, child_ids: Sequence[str], state: RelayState
    ) -> SetRelayStateRequest:
        return cls(
            context=ChildContext(child_ids=list(child_ids)),
            system=SetRelayStateCommand(
                set_relay_state=RelayStateParams(state=state)
            ),
        )


def encode_request(request: BaseModel) -> str:
    """Compact JSON text, ready for the codec."""
    return request.model_dump_json()
