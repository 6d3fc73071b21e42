"""Prefix-keyed completion cache for a single editing buffer.

Results are remembered per typed prefix. A complete result for a shorter
prefix answers any longer prefix by filtering, so typing forward does not go
back to phpactor; an incomplete result only answers its own exact prefix.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from phpactor_complete.services.candidates import Candidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    candidates: tuple[Candidate, ...]
    complete: bool


def matches_prefix(candidate: Candidate, prefix: str) -> bool:
    return candidate.display_text.startswith(prefix)


class PrefixCache:
    def __init__(self):
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._entries

    def put(self, prefix: str, candidates: Iterable[Candidate], complete: bool) -> CacheEntry:
        entry = CacheEntry(candidates=tuple(candidates), complete=bool(complete))
        self._entries[str(prefix)] = entry
        return entry

    def get(self, prefix: str) -> CacheEntry | None:
        prefix = str(prefix)
        key = self._longest_known_prefix(prefix)
        if key is None:
            return None

        entry = self._entries[key]
        if key == prefix:
            logger.debug("prefix cache hit: %r", prefix)
            return entry
        if not entry.complete:
            # A partial result cannot be narrowed; the caller has to re-query.
            return None

        narrowed = [c for c in entry.candidates if matches_prefix(c, prefix)]
        logger.debug("prefix cache narrowed %r -> %r (%d of %d)", key, prefix, len(narrowed), len(entry.candidates))
        return self.put(prefix, narrowed, complete=True)

    def clear(self):
        self._entries.clear()

    def _longest_known_prefix(self, prefix: str) -> str | None:
        for length in range(len(prefix), -1, -1):
            key = prefix[:length]
            if key in self._entries:
                return key
        return None
