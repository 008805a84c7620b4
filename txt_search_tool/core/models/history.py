"""Replacement history models."""
import time
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReplaceHistoryEntry:
    """One bulk replacement."""
    query: str
    replacement: str
    count: int
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class ReplaceOutcome:
    """Result of a replace operation handed back to the caller."""
    content: str
    count: int  # occurrences for bulk mode, modified lines for single mode
