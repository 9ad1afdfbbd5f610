"""Uniform metadata enrichment for strategy output."""

from __future__ import annotations

import re
from dataclasses import fields
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from docchunker.models import (
    ChunkingOptions,
    ChunkMetadata,
    ChunkPosition,
    DocumentInfo,
    Language,
    RawChunk,
    SplittingMethod,
    TextChunk,
)
from docchunker.utils.text import count_words

ARABIC_CHAR = re.compile(r"[\u0600-\u06FF]")
LATIN_CHAR = re.compile(r"[a-zA-Z]")
URL_PATTERN = re.compile(r"https?://|www\.")
DIGIT = re.compile(r"\d")

ARABIC_THRESHOLD = 0.2
LATIN_THRESHOLD = 0.05

# Strategies whose boundaries carry context on their own.
ZERO_OVERLAP_METHODS = frozenset(
    {SplittingMethod.SENTENCE, SplittingMethod.PARAGRAPH, SplittingMethod.MARKDOWN}
)


def has_arabic(text: str) -> bool:
    return ARABIC_CHAR.search(text) is not None


def has_latin_script(text: str) -> bool:
    return LATIN_CHAR.search(text) is not None


def contains_urls(text: str) -> bool:
    return URL_PATTERN.search(text) is not None


def contains_numbers(text: str) -> bool:
    return DIGIT.search(text) is not None


def detect_language(text: str) -> Language:
    """Classify by the share of Arabic and Latin letters among all letters."""
    arabic = len(ARABIC_CHAR.findall(text))
    latin = len(LATIN_CHAR.findall(text))
    letters = arabic + latin
    if letters == 0:
        return Language.ENGLISH

    if arabic / letters >= ARABIC_THRESHOLD:
        if latin / letters >= LATIN_THRESHOLD:
            return Language.MIXED
        return Language.ARABIC
    return Language.ENGLISH


def readability_score(text: str) -> float:
    """Cheap ease-of-reading heuristic in ``[0, 100]``; longer, denser text scores lower."""
    words = count_words(text)
    if words == 0:
        return 100.0
    average_word_length = len(re.sub(r"\s", "", text)) / words
    score = 100 - words / 10 - average_word_length / 10
    return max(0.0, min(100.0, score))


def effective_overlap(method: SplittingMethod, requested: int) -> int:
    return 0 if method in ZERO_OVERLAP_METHODS else requested


def merge_position(metadata: ChunkMetadata, position: ChunkPosition) -> ChunkMetadata:
    """Copy every position field the strategy set; unset fields stay untouched."""
    for item in fields(ChunkPosition):
        value = getattr(position, item.name)
        if value is not None:
            setattr(metadata, item.name, value)
    return metadata


def enhance_chunks(
    chunks: Sequence[RawChunk],
    document: DocumentInfo,
    options: ChunkingOptions,
    *,
    processed_at: Optional[datetime] = None,
) -> List[TextChunk]:
    """Turn strategy output into indexed, fully annotated chunks."""
    stamp = (processed_at or datetime.now(timezone.utc)).isoformat()
    uploaded_at = document.uploaded_at.isoformat()
    overlap = effective_overlap(options.method, options.chunk_overlap)
    last = len(chunks) - 1

    enhanced: List[TextChunk] = []
    for index, raw in enumerate(chunks):
        text = raw.text
        metadata = ChunkMetadata(
            file_id=document.file_id,
            file_name=document.file_name,
            file_type=document.file_type,
            uploaded_at=uploaded_at,
            splitting_method=options.method,
            chunk_size=options.chunk_size,
            chunk_overlap=overlap,
            requested_chunk_overlap=options.chunk_overlap,
            language=detect_language(text),
            has_arabic=has_arabic(text),
            has_latin_script=has_latin_script(text),
            contains_numbers=contains_numbers(text),
            contains_urls=contains_urls(text),
            readability_score=readability_score(text),
            previous_chunk_index=index - 1 if index > 0 else None,
            next_chunk_index=index + 1 if index < last else None,
            processed_at=stamp,
        )
        merge_position(metadata, raw.position)
        enhanced.append(
            TextChunk(
                index=index,
                text=text,
                character_count=len(text),
                word_count=count_words(text),
                start_index=raw.start_index,
                end_index=raw.end_index,
                metadata=metadata,
            )
        )
    return enhanced
