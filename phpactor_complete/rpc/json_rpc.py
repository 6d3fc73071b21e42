"""Envelope helpers for the phpactor ``rpc`` command (one JSON document per call)."""

from __future__ import annotations

import json
from typing import Any


class PhpactorError(RuntimeError):
    def __init__(self, message: str, *, kind: str = "phpactor_error") -> None:
        super().__init__(message)
        self.kind = kind


class ServiceUnavailable(PhpactorError):
    """The intelligence process could not be reached or refused the request."""

    def __init__(self, message: str, *, kind: str = "process_failed") -> None:
        super().__init__(message, kind=kind)


class MalformedResponse(PhpactorError):
    """The response envelope is missing fields the client relies on."""

    def __init__(self, message: str) -> None:
        super().__init__(message, kind="malformed")


def encode_rpc_request(action: str, parameters: dict[str, Any] | None = None) -> str:
    payload = {
        "action": str(action or ""),
        "parameters": parameters if isinstance(parameters, dict) else {},
    }
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def decode_rpc_response(raw: str | bytes) -> dict[str, Any]:
    """Parse a response and return the ``parameters.value`` mapping.

    ``{"action": "error", "parameters": {"message": ...}}`` is reported as
    ``ServiceUnavailable``; anything that does not carry the nested
    ``parameters`` / ``value`` objects is a ``MalformedResponse``.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    text = str(raw or "").strip()
    if not text:
        raise MalformedResponse("Empty response from phpactor.")

    try:
        decoded = json.loads(text)
    except ValueError as exc:
        raise MalformedResponse(f"Response is not valid JSON: {exc}") from exc

    if not isinstance(decoded, dict):
        raise MalformedResponse(f"Response root must be an object, found {type(decoded).__name__}.")

    parameters = decoded.get("parameters")
    if not isinstance(parameters, dict):
        raise MalformedResponse("Response has no 'parameters' object.")

    action = str(decoded.get("action") or "").strip().lower()
    if action == "error":
        message = str(parameters.get("message") or "phpactor reported an error").strip()
        raise ServiceUnavailable(message, kind="service_error")

    value = parameters.get("value")
    if not isinstance(value, dict):
        raise MalformedResponse("Response has no 'parameters.value' object.")
    return value
