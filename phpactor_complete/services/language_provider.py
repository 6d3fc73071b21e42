"""Collaborator contracts (pure Python).

The completion provider only talks to the editor and to the intelligence
process through these protocols, so either side can be swapped without
touching the cache or the orchestration code.
"""

from __future__ import annotations

import concurrent.futures
from typing import Callable, Mapping, Protocol

from phpactor_complete.rpc.types import Suggestion

BufferState = Callable[[], "tuple[str, int]"]


class SuggestionSource(Protocol):
    def query(self, source: str, offset: int) -> list[Suggestion]:
        ...

    def query_async(
        self,
        source: str,
        offset: int,
        callback: Callable[[list[Suggestion], BaseException | None], None],
    ) -> concurrent.futures.Future:
        ...

    def update_settings(self, cfg: Mapping[str, object]) -> None:
        ...

    def shutdown(self) -> None:
        ...


class BufferView(Protocol):
    def source_text(self) -> str:
        ...

    def cursor_offset(self) -> int:
        ...


class EditingPrimitives(Protocol):
    def insert_parens(self) -> None:
        """Insert ``()`` after the completed name and leave the cursor inside."""
        ...

    def import_class(self, fqn: str) -> None:
        ...
