from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from phpactor_complete.settings_models import CompletionSettings, normalize_completion_settings


class JsonSettingsStore:
    """Read-only view of the ``completion`` section of a JSON settings file.

    The file may hold other editor settings; only ``completion`` is read.
    A broken file is reported through ``last_error`` and defaults apply.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.completion: Mapping[str, Any] = {}
        self.last_error: str | None = None

    def load(self) -> CompletionSettings:
        self.completion = {}
        self.last_error = None
        if not self.path.exists():
            return self.completion_settings()

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            self.last_error = str(exc)
            return self.completion_settings()

        if not isinstance(raw, dict):
            self.last_error = (
                f"Settings root in '{self.path}' must be a JSON object, "
                f"found {type(raw).__name__}."
            )
            return self.completion_settings()

        section = raw.get("completion", {})
        if isinstance(section, Mapping):
            self.completion = section
        else:
            self.last_error = f"'completion' in '{self.path}' must be a JSON object."
        return self.completion_settings()

    def completion_settings(self) -> CompletionSettings:
        return normalize_completion_settings(self.completion)
