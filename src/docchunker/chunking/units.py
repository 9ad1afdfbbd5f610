"""Greedy accumulation of structural units (sentences, paragraphs) into chunks."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from docchunker.models import ChunkPosition, RawChunk
from docchunker.utils.text import trim_span

Span = Tuple[int, int]


def accumulate_units(
    text: str,
    spans: Sequence[Span],
    chunk_size: int,
    *,
    number_field: str,
) -> List[RawChunk]:
    """Pack consecutive unit spans into chunks no longer than ``chunk_size``.

    A unit that would push the running chunk past ``chunk_size`` starts a new
    chunk. A single unit longer than ``chunk_size`` is emitted on its own.
    ``number_field`` names the ``ChunkPosition`` field that receives the
    1-based number of the first unit in each chunk.
    """
    chunks: List[RawChunk] = []
    group_start: int | None = None
    group_end = 0
    first_number = 0

    def flush() -> None:
        position = ChunkPosition(**{number_field: first_number})
        chunk = trim_span(text, group_start, group_end, position)
        if chunk is not None:
            chunks.append(chunk)

    for number, (start, end) in enumerate(spans, start=1):
        if group_start is not None and end - group_start > chunk_size:
            flush()
            group_start = None
        if group_start is None:
            unit = text[start:end]
            group_start = start + len(unit) - len(unit.lstrip())
            first_number = number
        group_end = end

    if group_start is not None:
        flush()
    return chunks


def blank_filtered(text: str, spans: Sequence[Span]) -> List[Span]:
    return [(start, end) for start, end in spans if text[start:end].strip()]
