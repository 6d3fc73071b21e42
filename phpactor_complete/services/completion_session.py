from __future__ import annotations

import concurrent.futures

from phpactor_complete.services.language_provider import BufferState
from phpactor_complete.services.prefix_cache import PrefixCache


class CompletionSession:
    """Completion state owned by one open buffer.

    Created when the buffer opens and discarded when it closes; the cache is
    never shared with other buffers because candidates depend on the
    buffer's own symbols.
    """

    def __init__(self, buffer_id: str, buffer_state: BufferState):
        self.buffer_id = str(buffer_id)
        self.cache = PrefixCache()
        self.latest_token = 0
        self.reported_errors: set[str] = set()
        self.closed = False
        self._buffer_state = buffer_state
        self._pending: concurrent.futures.Future | None = None

    def buffer_state(self) -> tuple[str, int]:
        source, offset = self._buffer_state()
        return str(source or ""), int(offset)

    def next_token(self) -> int:
        self.latest_token += 1
        return self.latest_token

    def is_current(self, token: int) -> bool:
        return not self.closed and int(token) == self.latest_token

    def replace_pending(self, future: concurrent.futures.Future | None):
        previous = self._pending
        self._pending = future
        if previous is not None and previous is not future:
            previous.cancel()

    def close(self):
        self.closed = True
        self.replace_pending(None)
        self.cache.clear()
