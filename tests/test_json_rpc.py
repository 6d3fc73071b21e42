from __future__ import annotations

import json

import pytest

from phpactor_complete.rpc.json_rpc import (
    MalformedResponse,
    ServiceUnavailable,
    decode_rpc_response,
    encode_rpc_request,
)


def test_encode_complete_request():
    raw = encode_rpc_request("complete", {"source": "<?php $a", "offset": 8})

    assert json.loads(raw) == {"action": "complete", "parameters": {"source": "<?php $a", "offset": 8}}


def test_decode_unwraps_nested_value():
    raw = json.dumps(
        {
            "version": "1.0.0",
            "action": "return",
            "parameters": {"value": {"suggestions": [{"name": "foo"}], "issues": []}},
        }
    )

    assert decode_rpc_response(raw) == {"suggestions": [{"name": "foo"}], "issues": []}


def test_decode_accepts_bytes():
    raw = json.dumps({"action": "return", "parameters": {"value": {"suggestions": []}}}).encode("utf-8")

    assert decode_rpc_response(raw) == {"suggestions": []}


def test_error_action_is_service_unavailable():
    raw = json.dumps({"action": "error", "parameters": {"message": "Could not parse source", "details": "..."}})

    with pytest.raises(ServiceUnavailable) as exc_info:
        decode_rpc_response(raw)

    assert exc_info.value.kind == "service_error"
    assert "Could not parse source" in str(exc_info.value)


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "not json",
        "[]",
        json.dumps({"action": "return"}),
        json.dumps({"action": "return", "parameters": []}),
        json.dumps({"action": "return", "parameters": {}}),
        json.dumps({"action": "return", "parameters": {"value": "oops"}}),
    ],
)
def test_malformed_envelopes(raw):
    with pytest.raises(MalformedResponse) as exc_info:
        decode_rpc_response(raw)

    assert exc_info.value.kind == "malformed"
