"""Case-insensitive literal matching shared by search and replace.

Search counts and replace substitutions both come from the same compiled
pattern, so the number of occurrences found in a line always equals the
number of substitutions made in it.
"""

import re
from functools import lru_cache


@lru_cache(maxsize=256)
def compile_query(query: str) -> re.Pattern:
    """Compile a literal query for case-insensitive scanning."""
    return re.compile(re.escape(query), re.IGNORECASE)


def find_occurrences(line: str, query: str) -> list[int]:
    """Start offsets of non-overlapping occurrences, left to right.

    Scanning resumes at ``match + len(query)`` after each hit.
    """
    if not query:
        return []
    return [m.start() for m in compile_query(query).finditer(line)]


def count_occurrences(line: str, query: str) -> int:
    return len(find_occurrences(line, query))


def replace_occurrences(line: str, query: str, replacement: str) -> tuple[str, int]:
    """Replace every occurrence of query literally.

    Returns:
        Tuple of (new line, number of substitutions).
    """
    if not query:
        return line, 0
    return compile_query(query).subn(lambda _: replacement, line)


def extract_window(line: str, match_index: int, query_length: int, context_size: int) -> str:
    """Slice ``context_size`` characters either side of a match, clamped to the line."""
    start = max(0, match_index - context_size)
    end = min(len(line), match_index + query_length + context_size)
    return line[start:end]
