"""Domain models."""
from .search import Line, SearchResult, SearchResultBuilder
from .history import ReplaceHistoryEntry, ReplaceOutcome
from .session import ResourceMetadata, SessionSnapshot, SessionState

__all__ = [
    "Line",
    "SearchResult",
    "SearchResultBuilder",
    "ReplaceHistoryEntry",
    "ReplaceOutcome",
    "ResourceMetadata",
    "SessionSnapshot",
    "SessionState",
]
