from __future__ import annotations

from copy import deepcopy
from typing import Any, Mapping, TypedDict


class CompletionSettings(TypedDict, total=False):
    enabled: bool
    request_async: bool
    phpactor_path: str
    working_dir: str
    timeout_ms: int


_COMPLETION_DEFAULTS: CompletionSettings = {
    "enabled": True,
    "request_async": True,
    "phpactor_path": "phpactor",
    "working_dir": "",
    "timeout_ms": 2000,
}


def default_completion_settings() -> CompletionSettings:
    return deepcopy(_COMPLETION_DEFAULTS)


def normalize_completion_settings(cfg: Mapping[str, Any] | None) -> CompletionSettings:
    merged: dict[str, Any] = dict(_COMPLETION_DEFAULTS)
    if isinstance(cfg, Mapping):
        merged.update(cfg)

    out: CompletionSettings = {
        "enabled": bool(merged.get("enabled", True)),
        "request_async": bool(merged.get("request_async", True)),
        "phpactor_path": str(merged.get("phpactor_path") or "").strip() or "phpactor",
        "working_dir": str(merged.get("working_dir") or "").strip(),
    }
    try:
        timeout_ms = int(merged.get("timeout_ms", 2000))
    except (TypeError, ValueError):
        timeout_ms = 2000
    out["timeout_ms"] = max(100, min(30000, timeout_ms))
    return out
