"""Presentable completion candidates built from phpactor suggestions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from phpactor_complete.rpc.types import Suggestion

CALLABLE_KINDS = frozenset({"method", "function"})


@dataclass(frozen=True)
class Candidate:
    display_text: str
    annotation: str
    kind: str
    class_import: str | None = None

    @property
    def is_callable(self) -> bool:
        return self.kind in CALLABLE_KINDS


def build_candidate(suggestion: Suggestion) -> Candidate:
    kind = suggestion.kind or ""
    return Candidate(
        display_text=suggestion.name or "",
        annotation=suggestion.short_description or "",
        kind=kind,
        class_import=(suggestion.class_import or None) if kind == "class" else None,
    )


def build_candidates(suggestions: Iterable[Suggestion]) -> list[Candidate]:
    return [build_candidate(s) for s in suggestions]
