"""Search domain models."""
from dataclasses import dataclass, field
from typing import Iterator, NamedTuple


class Line(NamedTuple):
    """Numbered line of one content snapshot (1-indexed)."""
    number: int
    text: str


@dataclass(frozen=True)
class SearchResult:
    """All occurrences across the document that render the same window.

    The per-occurrence tuples are parallel: index ``i`` of each one describes
    the same occurrence.
    """
    line_numbers: tuple[int, ...]
    display_text: str
    match_lines: tuple[str, ...]
    previous_lines: tuple[str, ...]
    next_lines: tuple[str, ...]
    match_position: int

    @property
    def primary_line_number(self) -> int:
        """Line number of the first occurrence, 0 if there is none."""
        return self.line_numbers[0] if self.line_numbers else 0

    @property
    def match_count(self) -> int:
        return len(self.line_numbers)

    @property
    def occurrences(self) -> Iterator[Line]:
        """Member lines in scan order."""
        for number, text in zip(self.line_numbers, self.match_lines):
            yield Line(number, text)


@dataclass
class SearchResultBuilder:
    """Accumulator for one window while a scan is in progress."""
    display_text: str
    match_position: int
    line_numbers: list[int] = field(default_factory=list)
    match_lines: list[str] = field(default_factory=list)
    previous_lines: list[str] = field(default_factory=list)
    next_lines: list[str] = field(default_factory=list)

    def add(self, line_number: int, line: str, previous_line: str, next_line: str) -> None:
        self.line_numbers.append(line_number)
        self.match_lines.append(line)
        self.previous_lines.append(previous_line)
        self.next_lines.append(next_line)

    def build(self) -> SearchResult:
        return SearchResult(
            line_numbers=tuple(self.line_numbers),
            display_text=self.display_text,
            match_lines=tuple(self.match_lines),
            previous_lines=tuple(self.previous_lines),
            next_lines=tuple(self.next_lines),
            match_position=self.match_position,
        )
