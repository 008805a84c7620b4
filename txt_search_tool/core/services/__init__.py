"""Core business services."""
from .search_engine import SearchEngine
from .replace_engine import ReplaceEngine
from .ignore_filter import IgnoreFilter
from .search_task import CancellationToken, SearchTask
from .session import Session
from .quick_phrase_service import QuickPhraseService

__all__ = [
    "SearchEngine",
    "ReplaceEngine",
    "IgnoreFilter",
    "CancellationToken",
    "SearchTask",
    "Session",
    "QuickPhraseService",
]
