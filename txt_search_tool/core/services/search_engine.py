"""Search engine - keyword scan with context windows and merging."""

import logging
from typing import Callable, Iterable, Iterator, Optional

from ..matching import extract_window, find_occurrences
from ..models.search import SearchResult, SearchResultBuilder

logger = logging.getLogger(__name__)


class SearchEngine:
    """Finds keyword occurrences and merges them by rendered window."""

    def __init__(self, context_size: int = 3):
        """Initialize search engine.

        Args:
            context_size: Default characters kept on each side of a match.
        """
        self._context_size = context_size

    @property
    def context_size(self) -> int:
        return self._context_size

    def iter_search(
        self,
        lines: Iterable[str],
        query: str,
        context_size: Optional[int] = None,
        ignored_windows: frozenset[str] | set[str] = frozenset(),
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> Iterator[SearchResult]:
        """Scan lines and yield one merged result per distinct window.

        The whole line sequence is materialized first: an occurrence on line i
        records the text of line i+1, which is unknown until it has been read.
        Nothing is yielded until the scan is complete.

        Args:
            lines: Line texts, line 1 first.
            query: Keyword, matched case-insensitively.
            context_size: Override for the default context size.
            ignored_windows: Window texts to drop entirely.
            should_stop: Polled per line and per emission; True stops the scan.

        Yields:
            Merged results in first-encounter order.
        """
        if not query:
            return

        context_size = self._context_size if context_size is None else context_size
        stop = should_stop or (lambda: False)

        all_lines = list(lines)
        builders: dict[str, SearchResultBuilder] = {}

        for index, line in enumerate(all_lines):
            if stop():
                logger.debug(f"Search stopped at line {index + 1}")
                return

            for match_index in find_occurrences(line, query):
                window = extract_window(line, match_index, len(query), context_size)
                if window in ignored_windows:
                    continue

                builder = builders.get(window)
                if builder is None:
                    builder = SearchResultBuilder(display_text=window, match_position=match_index)
                    builders[window] = builder

                previous_line = all_lines[index - 1] if index > 0 else ""
                next_line = all_lines[index + 1] if index < len(all_lines) - 1 else ""
                builder.add(index + 1, line, previous_line, next_line)

        logger.info(
            f"Search: {len(builders)} windows over {len(all_lines)} lines for '{query[:50]}'"
        )

        for builder in builders.values():
            if stop():
                return
            yield builder.build()

    def search(
        self,
        lines: Iterable[str],
        query: str,
        context_size: Optional[int] = None,
        ignored_windows: frozenset[str] | set[str] = frozenset(),
    ) -> list[SearchResult]:
        """Collect every merged result for query."""
        return list(self.iter_search(lines, query, context_size, ignored_windows))
