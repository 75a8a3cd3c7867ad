"""Tests for protocol message models."""

from __future__ import annotations

import json

import pytest

from powerstrip.errors import ProtocolError
from powerstrip.models import (
    GetSysInfoRequest,
    RelayState,
    SetRelayStateRequest,
    check_reply,
    dump_system_info,
    encode_request,
    parse_system_info,
)


def _envelope(sysinfo) -> str:
    return json.dumps({"system": {"get_sysinfo": sysinfo}})


def test_parse_maps_wire_names(sysinfo_text):
    snapshot = parse_system_info(sysinfo_text)

    assert snapshot.device_id == "ABC123"
    assert snapshot.hw_id == "34C41AA028022D0CCEA5E678E8547C54"
    assert snapshot.oem_id == "5C9E6254BEBAED63B2B6102966D24C17"
    assert snapshot.rssi == -48
    assert [child.id for child in snapshot.children] == ["01", "02", "03"]
    assert snapshot.children[2].next_action.action_type == 1


def test_child_state(sysinfo):
    snapshot = parse_system_info(_envelope(sysinfo))
    assert [child.is_on for child in snapshot.children] == [False, True, False]


@pytest.mark.parametrize("field", ["deviceId", "children", "mac", "updating"])
def test_missing_field_is_protocol_error(sysinfo, field):
    del sysinfo[field]
    with pytest.raises(ProtocolError):
        parse_system_info(_envelope(sysinfo))


def test_missing_child_field_is_protocol_error(sysinfo):
    del sysinfo["children"][0]["next_action"]
    with pytest.raises(ProtocolError):
        parse_system_info(_envelope(sysinfo))


def test_mistyped_field_is_protocol_error(sysinfo):
    sysinfo["children"][0]["state"] = "0"
    with pytest.raises(ProtocolError):
        parse_system_info(_envelope(sysinfo))


def test_unknown_fields_are_ignored(sysinfo):
    sysinfo["ntc_state"] = 0
    assert parse_system_info(_envelope(sysinfo)).alias == "Office Strip"


def test_invalid_json_is_protocol_error():
    with pytest.raises(ProtocolError):
        parse_system_info('{"system":')


def test_device_error_reply_is_protocol_error():
    reply = '{"system":{"get_sysinfo":{"err_code":-1,"err_msg":"not support"}}}'
    with pytest.raises(ProtocolError):
        parse_system_info(reply)


def test_snapshot_wire_round_trip(sysinfo_text):
    snapshot = parse_system_info(sysinfo_text)
    wire = dump_system_info(snapshot)

    body = json.loads(wire)["system"]["get_sysinfo"]
    assert body["deviceId"] == "ABC123"
    assert "hwId" in body and "oemId" in body
    assert "device_id" not in body
    assert body["children"][0]["next_action"] == {"type": -1}
    assert parse_system_info(wire) == snapshot


def test_find_child_by_alias_is_exact(sysinfo_text):
    snapshot = parse_system_info(sysinfo_text)

    child = snapshot.find_child_by_alias("Plug 5")
    assert child is not None and child.id == "01"
    assert snapshot.find_child_by_alias("plug 5") is None
    assert snapshot.find_child_by_alias("Plug") is None


def test_find_child_by_alias_returns_first_duplicate(sysinfo_text):
    snapshot = parse_system_info(sysinfo_text)

    child = snapshot.find_child_by_alias("Desk Lamp")
    assert child is not None and child.id == "02"
    assert snapshot.aliases == ["Plug 5", "Desk Lamp", "Desk Lamp"]


def test_get_sysinfo_request():
    assert encode_request(GetSysInfoRequest()) == '{"system":{"get_sysinfo":{}}}'


def test_set_relay_state_request():
    request = SetRelayStateRequest.for_children(["ABC12301"], RelayState.ON)
    assert encode_request(request) == (
        '{"context":{"child_ids":["ABC12301"]},'
        '"system":{"set_relay_state":{"state":1}}}'
    )


def test_set_relay_state_request_for_several_children():
    request = SetRelayStateRequest.for_children(["A1", "A2"], RelayState.OFF)
    body = json.loads(encode_request(request))
    assert body["context"]["child_ids"] == ["A1", "A2"]
    assert body["system"]["set_relay_state"]["state"] == 0


def test_relay_state_from_bool():
    assert RelayState.from_bool(True) is RelayState.ON
    assert RelayState.from_bool(False) is RelayState.OFF


def test_check_reply_accepts_success():
    text = '{"system":{"set_relay_state":{"err_code":0}}}'
    reply = check_reply(text, "system", "set_relay_state")
    assert reply.err_code == 0


def test_check_reply_raises_on_device_error():
    text = (
        '{"system":{"set_relay_state":'
        '{"err_code":-14,"err_msg":"entry not exist"}}}'
    )
    with pytest.raises(ProtocolError, match="entry not exist"):
        check_reply(text, "system", "set_relay_state")


def test_check_reply_raises_on_missing_method():
    with pytest.raises(ProtocolError):
        check_reply('{"system":{}}', "system", "set_relay_state")
