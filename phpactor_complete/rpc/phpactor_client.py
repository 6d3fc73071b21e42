from __future__ import annotations

import concurrent.futures
import logging
import os
import subprocess
from typing import Callable, Mapping

from .json_rpc import MalformedResponse, ServiceUnavailable, decode_rpc_response, encode_rpc_request
from .types import Suggestion, utf8_units_for_prefix

logger = logging.getLogger(__name__)

QueryCallback = Callable[[list[Suggestion], "BaseException | None"], None]


class PhpactorClient:
    """Issues ``complete`` requests to ``phpactor rpc``.

    Every request spawns one short-lived process; phpactor reads the request
    from stdin and answers with a single JSON document on stdout.
    """

    def __init__(
            self,
            *,
            phpactor_path: str = "phpactor",
            working_dir: str = "",
            timeout_ms: int = 2000,
            max_workers: int = 2,
    ):
        self._phpactor_path = str(phpactor_path or "").strip() or "phpactor"
        self._working_dir = str(working_dir or "").strip()
        self._timeout_s = max(0.1, int(timeout_ms) / 1000.0)
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix="phpactor-complete",
        )

    def update_settings(self, cfg: Mapping[str, object]) -> None:
        self._phpactor_path = str(cfg.get("phpactor_path") or "").strip() or "phpactor"
        self._working_dir = str(cfg.get("working_dir") or "").strip()
        self._timeout_s = max(0.1, int(cfg.get("timeout_ms") or 2000) / 1000.0)

    # ---------- Public API ----------

    def query(self, source: str, offset: int) -> list[Suggestion]:
        source = source or ""
        offset = _checked_offset(source, offset)
        request_text = encode_rpc_request(
            "complete",
            {"source": source, "offset": utf8_units_for_prefix(source, offset)},
        )
        logger.debug("phpactor complete: offset=%d length=%d", offset, len(source))
        value = decode_rpc_response(self._run(request_text))

        raw_suggestions = value.get("suggestions")
        if not isinstance(raw_suggestions, list):
            raise MalformedResponse("Response value has no 'suggestions' list.")

        issues = value.get("issues")
        if isinstance(issues, list) and issues:
            logger.debug("phpactor reported issues: %s", issues)

        return [Suggestion.from_payload(item) for item in raw_suggestions if isinstance(item, dict)]

    def query_async(self, source: str, offset: int, callback: QueryCallback) -> concurrent.futures.Future:
        """Run ``query`` on the worker pool; ``callback`` fires exactly once.

        An offset outside ``source`` raises ``ValueError`` here, before any
        request is issued.
        """
        _checked_offset(source or "", offset)
        try:
            future = self._executor.submit(self.query, source, offset)
        except RuntimeError as exc:
            # Pool already shut down.
            error = ServiceUnavailable(f"Completion worker is not running: {exc}")
            failed: concurrent.futures.Future = concurrent.futures.Future()
            failed.set_exception(error)
            callback([], error)
            return failed

        def _deliver(fut: concurrent.futures.Future):
            if fut.cancelled():
                callback([], concurrent.futures.CancelledError())
                return
            error = fut.exception()
            if error is not None:
                callback([], error)
                return
            callback(fut.result(), None)

        future.add_done_callback(_deliver)
        return future

    def shutdown(self):
        self._executor.shutdown(wait=False, cancel_futures=True)

    # ---------- Internals ----------

    def _run(self, request_text: str) -> str:
        cwd = self._working_dir if self._working_dir and os.path.isdir(self._working_dir) else None
        command = [self._phpactor_path, "rpc", f"--working-dir={cwd or os.getcwd()}"]
        try:
            proc = subprocess.run(
                command,
                input=request_text,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self._timeout_s,
            )
        except subprocess.TimeoutExpired as exc:
            raise ServiceUnavailable(
                f"phpactor did not answer within {self._timeout_s:.1f}s.",
                kind="timeout",
            ) from exc
        except OSError as exc:
            raise ServiceUnavailable(
                f"Could not start phpactor ({self._phpactor_path}).",
                kind="not_installed",
            ) from exc

        stdout = proc.stdout or ""
        if proc.returncode != 0 and not stdout.strip():
            stderr = (proc.stderr or "").strip().splitlines()
            detail = stderr[-1] if stderr else "no output"
            raise ServiceUnavailable(f"phpactor exited with status {proc.returncode}: {detail}")
        return stdout


def _checked_offset(source: str, offset: int) -> int:
    offset = int(offset)
    if offset < 0 or offset > len(source):
        raise ValueError(f"Offset {offset} is outside the source text (length {len(source)}).")
    return offset
