"""Text helpers shared by the splitters and extractors."""

from __future__ import annotations

from typing import Iterable, Optional

from docchunker.models import ChunkPosition, RawChunk


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens."""
    return len(text.split())


def trim_span(
    text: str, start: int, end: int, position: Optional[ChunkPosition] = None
) -> Optional[RawChunk]:
    """Trim ``text[start:end]`` and return it with offsets moved onto the trimmed slice.

    Returns ``None`` when the slice is blank.
    """
    piece = text[start:end]
    stripped = piece.strip()
    if not stripped:
        return None
    lead = len(piece) - len(piece.lstrip())
    begin = start + lead
    return RawChunk(
        text=stripped,
        start_index=begin,
        end_index=begin + len(stripped),
        position=position or ChunkPosition(),
    )


def normalize_whitespace(lines: Iterable[str]) -> str:
    """Collapse whitespace and join lines."""
    return "\n".join(line.strip() for line in lines if line.strip())
