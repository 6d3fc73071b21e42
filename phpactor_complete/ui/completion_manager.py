from __future__ import annotations

import concurrent.futures
import logging
import queue
from dataclasses import dataclass
from typing import Callable, Mapping

from PySide6.QtCore import QObject, QTimer, Signal

from phpactor_complete.rpc import PhpactorClient, PhpactorError
from phpactor_complete.rpc.types import Suggestion
from phpactor_complete.services.candidates import Candidate, build_candidates
from phpactor_complete.services.completion_session import CompletionSession
from phpactor_complete.services.language_provider import BufferState, SuggestionSource
from phpactor_complete.settings_models import CompletionSettings, normalize_completion_settings

logger = logging.getLogger(__name__)

CandidatesCallback = Callable[[list[Candidate]], None]


@dataclass
class _QueryResult:
    buffer_id: str
    prefix: str
    token: int
    suggestions: list[Suggestion]
    error: BaseException | None
    callback: CandidatesCallback


class CompletionManager(QObject):
    """Answers completion requests from the per-buffer prefix cache or phpactor.

    Asynchronous results are handed over from the worker threads through a
    queue that a ``QTimer`` drains on the UI thread, so cache writes and
    callbacks never run concurrently with editor code.
    """

    completionReady = Signal(object)
    statusMessage = Signal(str)

    def __init__(
            self,
            client: SuggestionSource | None = None,
            settings: Mapping[str, object] | None = None,
            parent=None,
    ):
        super().__init__(parent)
        self._completion_cfg: CompletionSettings = normalize_completion_settings(settings)
        if client is None:
            client = PhpactorClient(
                phpactor_path=self._completion_cfg["phpactor_path"],
                working_dir=self._completion_cfg["working_dir"],
                timeout_ms=self._completion_cfg["timeout_ms"],
            )
        self._client = client
        self._sessions: dict[str, CompletionSession] = {}
        self._result_queue: queue.Queue[_QueryResult] = queue.Queue()

        self._result_pump = QTimer(self)
        self._result_pump.setInterval(16)
        self._result_pump.timeout.connect(self.drain_results)
        self._result_pump.start()

    # ---------- Public API ----------

    def update_settings(self, completion_cfg: Mapping[str, object]):
        self._completion_cfg = normalize_completion_settings(completion_cfg)
        self._client.update_settings(self._completion_cfg)
        if not self._completion_cfg["enabled"]:
            for session in self._sessions.values():
                session.next_token()
                session.replace_pending(None)

    def settings(self) -> CompletionSettings:
        return dict(self._completion_cfg)

    def is_enabled(self) -> bool:
        return self._completion_cfg["enabled"]

    def is_async(self) -> bool:
        return self._completion_cfg["request_async"]

    def open_buffer(self, buffer_id: str, buffer_state: BufferState) -> CompletionSession:
        key = str(buffer_id)
        previous = self._sessions.pop(key, None)
        if previous is not None:
            previous.close()
        session = CompletionSession(key, buffer_state)
        self._sessions[key] = session
        return session

    def close_buffer(self, buffer_id: str):
        session = self._sessions.pop(str(buffer_id), None)
        if session is not None:
            session.close()

    def session(self, buffer_id: str) -> CompletionSession | None:
        return self._sessions.get(str(buffer_id))

    def cached(self, buffer_id: str, prefix: str) -> list[Candidate] | None:
        """Cache-only lookup; supersedes any request still in flight for the buffer."""
        session = self._require_session(buffer_id)
        session.next_token()
        session.replace_pending(None)
        entry = session.cache.get(prefix)
        if entry is None:
            return None
        return list(entry.candidates)

    def candidates(self, buffer_id: str, prefix: str) -> list[Candidate]:
        session = self._require_session(buffer_id)
        if not self.is_enabled():
            return []
        hit = self.cached(buffer_id, prefix)
        if hit is not None:
            return hit

        source, offset = session.buffer_state()
        try:
            suggestions = self._client.query(source, offset)
        except (PhpactorError, ValueError) as exc:
            self._report_failure(session, exc)
            return []

        items = build_candidates(suggestions)
        session.cache.put(prefix, items, complete=True)
        self._emit_ready(session, prefix, session.latest_token, items)
        return items

    def candidates_async(self, buffer_id: str, prefix: str, callback: CandidatesCallback):
        """Deliver candidates through ``callback``.

        Cache hits are delivered before this method returns. Misses are
        delivered from ``drain_results`` unless a newer request for the same
        buffer was made in the meantime, in which case the result is only
        cached under its own prefix.
        """
        session = self._require_session(buffer_id)
        if not self.is_enabled():
            callback([])
            return
        hit = self.cached(buffer_id, prefix)
        if hit is not None:
            callback(hit)
            return

        token = session.latest_token
        key = session.buffer_id
        source, offset = session.buffer_state()

        def _on_result(suggestions: list[Suggestion], error: BaseException | None):
            self._result_queue.put(
                _QueryResult(
                    buffer_id=key,
                    prefix=prefix,
                    token=token,
                    suggestions=list(suggestions or []),
                    error=error,
                    callback=callback,
                )
            )

        try:
            future = self._client.query_async(source, offset, _on_result)
        except ValueError as exc:
            self._report_failure(session, exc)
            callback([])
            return
        session.replace_pending(future)

    def request(self, buffer_id: str, prefix: str, callback: CandidatesCallback):
        if self.is_async():
            self.candidates_async(buffer_id, prefix, callback)
            return
        callback(self.candidates(buffer_id, prefix))

    def annotation_for(self, candidate: Candidate) -> str:
        return candidate.annotation

    def kind_of(self, candidate: Candidate) -> str:
        return candidate.kind

    def import_target_of(self, candidate: Candidate) -> str | None:
        return candidate.class_import

    def drain_results(self):
        while True:
            try:
                result = self._result_queue.get_nowait()
            except queue.Empty:
                return
            try:
                self._on_query_result(result)
            except Exception:
                logger.exception("completion callback failed for buffer %s", result.buffer_id)

    def shutdown(self):
        self._result_pump.stop()
        for session in list(self._sessions.values()):
            session.close()
        self._sessions.clear()
        self._client.shutdown()

    # ---------- Internals ----------

    def _require_session(self, buffer_id: str) -> CompletionSession:
        session = self._sessions.get(str(buffer_id))
        if session is None:
            raise KeyError(f"No completion session for buffer {buffer_id!r}")
        return session

    def _on_query_result(self, result: _QueryResult):
        session = self._sessions.get(result.buffer_id)
        if session is None or session.closed:
            return
        if isinstance(result.error, concurrent.futures.CancelledError):
            return

        current = session.is_current(result.token)
        if result.error is not None:
            self._report_failure(session, result.error)
            if current:
                result.callback([])
                self._emit_ready(session, result.prefix, result.token, [])
            return

        items = build_candidates(result.suggestions)
        if current:
            session.cache.put(result.prefix, items, complete=True)
            result.callback(items)
            self._emit_ready(session, result.prefix, result.token, items)
            return

        # Superseded: keep the answer for its own prefix, never for the live one.
        if result.prefix not in session.cache:
            session.cache.put(result.prefix, items, complete=True)
        logger.debug(
            "stale completion for %r ignored (token %d, latest %d)",
            result.prefix,
            result.token,
            session.latest_token,
        )

    def _report_failure(self, session: CompletionSession, exc: BaseException):
        kind = str(getattr(exc, "kind", "") or type(exc).__name__)
        logger.warning("phpactor completion failed for %s: %s", session.buffer_id, exc)
        if kind in session.reported_errors:
            return
        session.reported_errors.add(kind)
        self.statusMessage.emit(f"phpactor completion unavailable: {exc}")

    def _emit_ready(self, session: CompletionSession, prefix: str, token: int, items: list[Candidate]):
        self.completionReady.emit(
            {
                "buffer_id": session.buffer_id,
                "prefix": prefix,
                "token": int(token),
                "items": list(items),
            }
        )
