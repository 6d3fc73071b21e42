"""Editor-facing completion backend: one method per completion-UI command."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from phpactor_complete.services.candidates import Candidate
from phpactor_complete.services.language_provider import BufferView, EditingPrimitives
from phpactor_complete.services.symbol_at_cursor import symbol_at_cursor
from phpactor_complete.ui.completion_manager import CandidatesCallback, CompletionManager


@dataclass(frozen=True)
class AsyncCandidates:
    """Handle returned when candidates arrive later; ``fetch(callback)`` starts the request."""

    fetch: Callable[[CandidatesCallback], None]


@dataclass(frozen=True)
class DocBuffer:
    title: str
    text: str


class CompletionBackend:
    def __init__(
            self,
            manager: CompletionManager,
            buffer_id: str,
            view: BufferView,
            editing: EditingPrimitives,
    ):
        self._manager = manager
        self._buffer_id = str(buffer_id)
        self._view = view
        self._editing = editing
        manager.open_buffer(self._buffer_id, self._buffer_state)

    @property
    def buffer_id(self) -> str:
        return self._buffer_id

    @property
    def manager(self) -> CompletionManager:
        return self._manager

    def prefix(self) -> str | None:
        if not self._manager.is_enabled():
            return None
        return symbol_at_cursor(self._view.source_text(), self._view.cursor_offset())

    def candidates(self, prefix: str) -> list[Candidate] | AsyncCandidates:
        if not self._manager.is_async():
            return self._manager.candidates(self._buffer_id, prefix)

        if not self._manager.is_enabled():
            return []
        hit = self._manager.cached(self._buffer_id, prefix)
        if hit is not None:
            return hit
        return AsyncCandidates(
            fetch=lambda callback: self._manager.candidates_async(self._buffer_id, prefix, callback)
        )

    def post_completion(self, candidate: Candidate):
        target = self._manager.import_target_of(candidate)
        if target:
            self._editing.import_class(target)
        if candidate.is_callable:
            self._editing.insert_parens()

    def annotation(self, candidate: Candidate) -> str:
        return self._manager.annotation_for(candidate)

    def meta(self, candidate: Candidate) -> str:
        return self._manager.annotation_for(candidate)

    def doc_buffer(self, candidate: Candidate) -> DocBuffer:
        lines = [candidate.display_text]
        kind = self._manager.kind_of(candidate)
        if kind:
            lines.append(f"Type: {kind}")
        annotation = self._manager.annotation_for(candidate)
        if annotation:
            lines.extend(["", annotation])
        target = self._manager.import_target_of(candidate)
        if target:
            lines.extend(["", f"Import: {target}"])
        return DocBuffer(title=candidate.display_text, text="\n".join(lines))

    def close(self):
        self._manager.close_buffer(self._buffer_id)

    def _buffer_state(self) -> tuple[str, int]:
        return self._view.source_text(), self._view.cursor_offset()
