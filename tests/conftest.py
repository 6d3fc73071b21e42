from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass, field

import pytest
from PySide6.QtCore import QCoreApplication

from phpactor_complete.rpc.types import Suggestion
from phpactor_complete.ui.completion_manager import CompletionManager


def suggestion(name: str, kind: str = "method", description: str = "", class_import: str | None = None) -> Suggestion:
    return Suggestion(name=name, short_description=description, kind=kind, class_import=class_import)


@dataclass
class PendingQuery:
    source: str
    offset: int
    callback: object
    future: concurrent.futures.Future

    def resolve(self, suggestions: list[Suggestion]):
        """Deliver a response, even if the request was cancelled meanwhile."""
        self.callback(list(suggestions), None)

    def fail(self, error: BaseException):
        self.callback([], error)


@dataclass
class FakeClient:
    """In-memory stand-in for ``PhpactorClient``; async calls resolve on demand."""

    suggestions: list[Suggestion] = field(default_factory=list)
    error: BaseException | None = None
    calls: list[tuple[str, int]] = field(default_factory=list)
    pending: list[PendingQuery] = field(default_factory=list)
    settings: dict | None = None
    shut_down: bool = False

    def query(self, source: str, offset: int) -> list[Suggestion]:
        self.calls.append((source, offset))
        if self.error is not None:
            raise self.error
        return list(self.suggestions)

    def query_async(self, source: str, offset: int, callback) -> concurrent.futures.Future:
        self.calls.append((source, offset))
        future: concurrent.futures.Future = concurrent.futures.Future()
        self.pending.append(PendingQuery(source, offset, callback, future))
        return future

    def update_settings(self, cfg):
        self.settings = dict(cfg)

    def shutdown(self):
        self.shut_down = True


class BufferStub:
    def __init__(self, text: str = "", offset: int | None = None):
        self.text = text
        self.offset = len(text) if offset is None else offset

    def source_text(self) -> str:
        return self.text

    def cursor_offset(self) -> int:
        return self.offset

    def type(self, chars: str):
        self.text = self.text[: self.offset] + chars + self.text[self.offset:]
        self.offset += len(chars)


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def buffer():
    return BufferStub("<?php\n$this->fo", None)


@pytest.fixture
def make_manager(qapp, client):
    created: list[CompletionManager] = []

    def _make(**settings) -> CompletionManager:
        manager = CompletionManager(client=client, settings=settings)
        created.append(manager)
        return manager

    yield _make
    for manager in created:
        manager.shutdown()
