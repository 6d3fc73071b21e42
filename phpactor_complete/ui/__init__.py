from .completion_manager import CompletionManager
from .editor_backend import AsyncCandidates, CompletionBackend, DocBuffer

__all__ = [
    "AsyncCandidates",
    "CompletionBackend",
    "CompletionManager",
    "DocBuffer",
]
