"""Delimiter-aware, length-bounded text chunking.

`chunk()` returns `TextSegment` ranges rather than substrings so large
documents are not copied; use `materialize()` or `TextSegment.slice()` when the
text itself is needed.
"""
from typing import Iterable

from docsync.domain.text_segment import TextSegment
from docsync.exceptions import InvalidBoundsError


def _validate(delimiter: str, min_length: int, max_length: int) -> None:
    if not delimiter or not isinstance(delimiter, str):
        raise InvalidBoundsError(min_length, max_length, delimiter)
    if isinstance(min_length, bool) or isinstance(max_length, bool):
        raise InvalidBoundsError(min_length, max_length, delimiter)
    if not isinstance(min_length, int) or not isinstance(max_length, int):
        raise InvalidBoundsError(min_length, max_length, delimiter)
    if not 0 < min_length <= max_length:
        raise InvalidBoundsError(min_length, max_length, delimiter)


def chunk(text: str, delimiter: str, min_length: int, max_length: int) -> list[TextSegment]:
    """Split `text` into ordered segments of at most `max_length` characters.

    Each segment starts at `start` and is at least `min_length` long, ending at
    the first `delimiter` found in `[start + min_length, start + max_length]`.
    With no delimiter in that window, the cut backtracks to the nearest
    delimiter after `start` (which may yield a segment shorter than
    `min_length`), or else hard-cuts at `start + max_length`.

    Delimiter cuts consume the delimiter: it belongs to neither neighbour.
    Hard cuts consume nothing.
    """
    _validate(delimiter, min_length, max_length)

    segments: list[TextSegment] = []
    size = len(text)
    dlen = len(delimiter)
    start = 0
    while start < size:
        end = start + min_length
        if end >= size:
            segments.append(TextSegment(start, size))
            break

        bound = start + max_length
        # find() only matches occurrences that fit entirely before the stop index
        cut = text.find(delimiter, end, min(bound + dlen, size))
        if cut != -1:
            segments.append(TextSegment(start, cut, delimited=True))
            start = cut + dlen
            continue

        if bound >= size:
            segments.append(TextSegment(start, size))
            break

        cut = text.rfind(delimiter, start + 1, bound + dlen)
        if cut != -1:
            segments.append(TextSegment(start, cut, delimited=True))
            start = cut + dlen
            continue

        segments.append(TextSegment(start, bound))
        start = bound

    return segments


def materialize(text: str, segments: Iterable[TextSegment]) -> list[str]:
    return [segment.slice(text) for segment in segments]


def reassemble(text: str, segments: Iterable[TextSegment], delimiter: str) -> str:
    """Rebuild the source from its segments, re-inserting consumed delimiters."""
    parts = []
    for segment in segments:
        parts.append(segment.slice(text))
        if segment.delimited:
            parts.append(delimiter)
    return "".join(parts)


class TextChunker:
    """Chunker bound to one delimiter and bounds, validated once up front."""

    def __init__(self, delimiter: str = "\n\n", min_length: int = 1000, max_length: int = 4000):
        _validate(delimiter, min_length, max_length)
        self.delimiter = delimiter
        self.min_length = min_length
        self.max_length = max_length

    def chunk(self, text: str) -> list[TextSegment]:
        return chunk(text, self.delimiter, self.min_length, self.max_length)

    def split(self, text: str) -> list[str]:
        return materialize(text, self.chunk(text))

    def with_overrides(self, delimiter=None, min_length=None, max_length=None) -> "TextChunker":
        """Return a chunker with any non-None settings replaced."""
        return TextChunker(
            delimiter=delimiter if delimiter is not None else self.delimiter,
            min_length=min_length if min_length is not None else self.min_length,
            max_length=max_length if max_length is not None else self.max_length,
        )
