"""Ignore filter - dismissed rows and windows."""

import logging
from typing import Iterable

from ..models.search import SearchResult

logger = logging.getLogger(__name__)


class IgnoreFilter:
    """Tracks what the user has dismissed.

    Suppressed line numbers only hide rows of the current result list and are
    reset with it. Suppressed windows are fed into every later search and
    live as long as the filter.
    """

    def __init__(self):
        self._lines: set[int] = set()
        self._windows: set[str] = set()

    @property
    def ignored_lines(self) -> frozenset[int]:
        return frozenset(self._lines)

    @property
    def ignored_windows(self) -> frozenset[str]:
        return frozenset(self._windows)

    def ignore_by_lines(self, line_numbers: Iterable[int]) -> None:
        self._lines.update(line_numbers)

    def ignore_by_window(self, line_numbers: Iterable[int], display_text: str) -> None:
        self.ignore_by_lines(line_numbers)
        self._windows.add(display_text)
        logger.info(f"Window ignored for future searches: '{display_text}'")

    def is_hidden(self, result: SearchResult) -> bool:
        return any(n in self._lines for n in result.line_numbers)

    def visible(self, results: Iterable[SearchResult]) -> list[SearchResult]:
        return [r for r in results if not self.is_hidden(r)]

    def reset_lines(self) -> None:
        self._lines.clear()
