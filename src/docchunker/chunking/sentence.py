"""Sentence-boundary splitter."""

from __future__ import annotations

import re
from typing import List

from docchunker.chunking.units import Span, accumulate_units, blank_filtered
from docchunker.models import ChunkingOptions, RawChunk

SENTENCE_END = re.compile(r"[.!?]+(?=\s|$)")


def sentence_spans(text: str) -> List[Span]:
    """Locate sentences; trailing text without terminal punctuation is a sentence too."""
    spans: List[Span] = []
    cursor = 0
    for match in SENTENCE_END.finditer(text):
        spans.append((cursor, match.end()))
        cursor = match.end()
    if cursor < len(text):
        spans.append((cursor, len(text)))
    return blank_filtered(text, spans)


def split_sentences(text: str, options: ChunkingOptions) -> List[RawChunk]:
    return accumulate_units(
        text, sentence_spans(text), options.chunk_size, number_field="sentence_number"
    )
