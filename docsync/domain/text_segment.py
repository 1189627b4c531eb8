"""Text segment data model."""
from typing import NamedTuple


class TextSegment(NamedTuple):
    """A half-open `[start, end)` range over a source text.

    Segments are ranges, not copies; callers slice the source themselves.
    """
    start: int
    end: int
    delimited: bool = False
    """True if the cut consumed a delimiter that immediately follows `end`."""

    @property
    def length(self) -> int:
        return self.end - self.start

    def slice(self, text: str) -> str:
        return text[self.start:self.end]
