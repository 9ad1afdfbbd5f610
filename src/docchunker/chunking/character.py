"""Fixed-size sliding window splitter."""

from __future__ import annotations

from typing import List

from docchunker.models import ChunkingOptions, RawChunk


def split_characters(text: str, options: ChunkingOptions) -> List[RawChunk]:
    """Split text into overlapping character windows.

    Windows keep their raw text so that, without overlap, the chunks
    concatenate back to the input. Blank windows are dropped.
    """
    if not text:
        return []

    step = options.chunk_size - options.chunk_overlap
    chunks: List[RawChunk] = []
    for start in range(0, len(text), step):
        window = text[start : start + options.chunk_size]
        if not window.strip():
            continue
        chunks.append(RawChunk(text=window, start_index=start, end_index=start + len(window)))
    return chunks
