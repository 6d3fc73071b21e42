from .candidates import Candidate, build_candidates
from .completion_session import CompletionSession
from .prefix_cache import CacheEntry, PrefixCache
from .symbol_at_cursor import symbol_at_cursor

__all__ = [
    "CacheEntry",
    "Candidate",
    "CompletionSession",
    "PrefixCache",
    "build_candidates",
    "symbol_at_cursor",
]
