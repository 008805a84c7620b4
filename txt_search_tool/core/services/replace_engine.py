"""Replace engine - bulk and single-result substitution."""

import logging
from typing import Iterable

from ..matching import replace_occurrences

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"


class ReplaceEngine:
    """Literal, case-insensitive replacement over a line sequence.

    Output content is always joined with a single newline, so a trailing line
    terminator of the original resource is not reproduced.
    """

    def replace_all(
        self, lines: Iterable[str], query: str, replacement: str
    ) -> tuple[str, int]:
        """Replace every occurrence in every line.

        Args:
            lines: Line texts.
            query: Keyword.
            replacement: Literal replacement text.

        Returns:
            Tuple of (new content, total occurrences replaced).
        """
        total = 0
        new_lines = []
        for line in lines:
            new_line, count = replace_occurrences(line, query, replacement)
            total += count
            new_lines.append(new_line)

        logger.info(f"Replace all: {total} occurrences of '{query[:50]}'")
        return LINE_SEPARATOR.join(new_lines), total

    def replace_one(
        self,
        lines: Iterable[str],
        query: str,
        replacement: str,
        target_line_numbers: Iterable[int],
    ) -> tuple[str, int]:
        """Replace every occurrence inside the targeted lines only.

        A targeted line loses all of its occurrences, including ones that
        belong to a different merged result.

        Args:
            lines: Line texts.
            query: Keyword.
            replacement: Literal replacement text.
            target_line_numbers: 1-based line numbers; out-of-range ones are skipped.

        Returns:
            Tuple of (new content, number of lines whose text changed). A
            targeted line without an occurrence is not counted, even though
            it is in range.
        """
        all_lines = list(lines)
        modified = 0

        for line_number in sorted(set(target_line_numbers)):
            if not 1 <= line_number <= len(all_lines):
                logger.debug(f"Replace one: skip out-of-range line {line_number}")
                continue
            index = line_number - 1
            new_line, count = replace_occurrences(all_lines[index], query, replacement)
            if count:
                all_lines[index] = new_line
                modified += 1

        logger.info(f"Replace one: {modified} lines changed for '{query[:50]}'")
        return LINE_SEPARATOR.join(all_lines), modified
