"""Structure-aware recursive splitter.

The text is never copied into fragments while splitting. Every step works on
``(start, end)`` slices of the original string, so offsets survive any number
of splits and merges, and repeated passages cannot be mis-located.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from docchunker.models import ChunkingOptions, RawChunk
from docchunker.utils.text import trim_span

LOGGER = logging.getLogger(__name__)

SEPARATORS: Tuple[str, ...] = ("\n\n", "\n", ". ", " ")

Slice = Tuple[int, int]


def split_recursive(
    text: str, options: ChunkingOptions, separators: Sequence[str] = SEPARATORS
) -> List[RawChunk]:
    """Split text into chunks of at most ``chunk_size`` characters.

    Separators are tried in priority order; oversized fragments move down to
    the next separator, and only text with no separator left is hard-cut with
    ``chunk_overlap``.
    """
    if not text.strip():
        return []

    if len(text) <= options.chunk_size:
        slices: List[Slice] = [(0, len(text))]
    else:
        slices = _split_slice(text, 0, len(text), 0, options, separators)

    chunks: List[RawChunk] = []
    for start, end in slices:
        chunk = trim_span(text, start, end)
        if chunk is not None:
            chunks.append(chunk)
    return chunks


def _split_slice(
    text: str,
    start: int,
    end: int,
    level: int,
    options: ChunkingOptions,
    separators: Sequence[str],
) -> List[Slice]:
    size = options.chunk_size
    if end - start <= size:
        return [(start, end)]

    found = _pick_separator(text, start, end, level, separators)
    if found is None:
        return _hard_cut(start, end, options)

    index, separator = found
    slices: List[Slice] = []
    group: Optional[List[int]] = None

    for frag_start, frag_end in _fragments(text, start, end, separator):
        if frag_end - frag_start < size:
            if group is not None and frag_end - group[0] > size:
                slices.append((group[0], group[1]))
                group = None
            if group is None:
                group = [frag_start, frag_end]
            else:
                group[1] = frag_end
            continue

        if group is not None:
            slices.append((group[0], group[1]))
            group = None
        slices.extend(_split_slice(text, frag_start, frag_end, index + 1, options, separators))

    if group is not None:
        slices.append((group[0], group[1]))
    return slices


def _pick_separator(
    text: str, start: int, end: int, level: int, separators: Sequence[str]
) -> Optional[Tuple[int, str]]:
    """First separator from ``level`` onward that occurs inside the slice."""
    for index in range(level, len(separators)):
        separator = separators[index]
        if separator and text.find(separator, start, end) != -1:
            return index, separator
    return None


def _fragments(text: str, start: int, end: int, separator: str) -> Iterator[Slice]:
    cursor = start
    while True:
        hit = text.find(separator, cursor, end)
        if hit == -1:
            yield cursor, end
            return
        yield cursor, hit
        cursor = hit + len(separator)


def _hard_cut(start: int, end: int, options: ChunkingOptions) -> List[Slice]:
    """Fixed windows of ``chunk_size`` stepping back by ``chunk_overlap``."""
    size = options.chunk_size
    stride = max(size - options.chunk_overlap, 1)
    slices: List[Slice] = []
    cursor = start
    while True:
        slices.append((cursor, min(cursor + size, end)))
        if cursor + size >= end:
            break
        cursor += stride
    LOGGER.debug("Hard-cut %d characters into %d windows", end - start, len(slices))
    return slices
