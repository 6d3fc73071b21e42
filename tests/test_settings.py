from __future__ import annotations

import json

from phpactor_complete.settings_models import default_completion_settings, normalize_completion_settings
from phpactor_complete.settings_store import JsonSettingsStore


def test_defaults():
    assert default_completion_settings() == {
        "enabled": True,
        "request_async": True,
        "phpactor_path": "phpactor",
        "working_dir": "",
        "timeout_ms": 2000,
    }


def test_normalize_coerces_and_clamps():
    cfg = normalize_completion_settings(
        {"request_async": 0, "phpactor_path": "  ", "timeout_ms": "999999", "working_dir": " /srv/app "}
    )

    assert cfg["request_async"] is False
    assert cfg["phpactor_path"] == "phpactor"
    assert cfg["timeout_ms"] == 30000
    assert cfg["working_dir"] == "/srv/app"


def test_normalize_bad_timeout_falls_back():
    assert normalize_completion_settings({"timeout_ms": "soon"})["timeout_ms"] == 2000
    assert normalize_completion_settings({"timeout_ms": 1})["timeout_ms"] == 100


def test_missing_file_loads_defaults(tmp_path):
    store = JsonSettingsStore(tmp_path / "settings.json")

    assert store.load() == default_completion_settings()
    assert store.last_error is None


def test_load_merges_user_values(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"completion": {"request_async": False}, "editor": {"tabs": 4}}), encoding="utf-8")
    store = JsonSettingsStore(path)

    store.load()

    cfg = store.completion_settings()
    assert cfg["request_async"] is False
    assert cfg["phpactor_path"] == "phpactor"


def test_malformed_file_is_reported_and_not_overwritten(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonSettingsStore(path)

    cfg = store.load()

    assert store.last_error
    assert cfg == default_completion_settings()
    assert path.read_text(encoding="utf-8") == "{not json"


def test_non_object_root_is_reported(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]", encoding="utf-8")
    store = JsonSettingsStore(path)

    store.load()

    assert "must be a JSON object" in store.last_error


def test_non_object_completion_section_is_reported(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"completion": "off"}), encoding="utf-8")
    store = JsonSettingsStore(path)

    assert store.load() == default_completion_settings()
    assert "'completion'" in store.last_error
