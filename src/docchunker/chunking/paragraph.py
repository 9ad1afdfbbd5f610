"""Blank-line paragraph splitter."""

from __future__ import annotations

import re
from typing import List

from docchunker.chunking.units import Span, accumulate_units, blank_filtered
from docchunker.models import ChunkingOptions, RawChunk

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def paragraph_spans(text: str) -> List[Span]:
    spans: List[Span] = []
    cursor = 0
    for match in PARAGRAPH_BREAK.finditer(text):
        spans.append((cursor, match.start()))
        cursor = match.end()
    spans.append((cursor, len(text)))
    return blank_filtered(text, spans)


def split_paragraphs(text: str, options: ChunkingOptions) -> List[RawChunk]:
    return accumulate_units(
        text, paragraph_spans(text), options.chunk_size, number_field="paragraph_number"
    )
