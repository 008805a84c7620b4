"""Session domain models."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .history import ReplaceHistoryEntry
from .search import SearchResult

_KB = 1024
_MB = _KB * 1024
_GB = _MB * 1024


class SessionState(Enum):
    """Lifecycle of the edit buffer."""
    UNBOUND = "unbound"                # no resource chosen
    BOUND_CLEAN = "bound_clean"        # reads go to the line source
    BUFFERED_DIRTY = "buffered_dirty"  # buffer holds unsaved replacements
    BUFFERED_CLEAN = "buffered_clean"  # buffer matches the last save


@dataclass(frozen=True)
class ResourceMetadata:
    """Name and size of a resource."""
    name: str
    size_bytes: int

    @property
    def display_size(self) -> str:
        size = self.size_bytes
        if size < _KB:
            return f"{size} B"
        if size < _MB:
            return f"{size // _KB} KB"
        if size < _GB:
            return f"{size // _MB} MB"
        return f"{size // _GB} GB"


@dataclass(frozen=True)
class SessionSnapshot:
    """Point-in-time view of every observable session field."""
    resource_id: Optional[str]
    metadata: Optional[ResourceMetadata]
    state: SessionState
    query: str
    replacement: str
    results: tuple[SearchResult, ...]
    visible_results: tuple[SearchResult, ...]
    remaining_count: int
    progress: float
    searching: bool
    replacing: bool
    has_unsaved_replacements: bool
    history: tuple[ReplaceHistoryEntry, ...]
    error_message: Optional[str]
    success_message: Optional[str]
