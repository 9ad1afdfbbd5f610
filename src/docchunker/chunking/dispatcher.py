"""Chunking entry points: strategy dispatch and the full enrichment pipeline."""

from __future__ import annotations

import bisect
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from docchunker.chunking.character import split_characters
from docchunker.chunking.enhancer import enhance_chunks
from docchunker.chunking.markdown import split_markdown
from docchunker.chunking.paragraph import split_paragraphs
from docchunker.chunking.recursive import split_recursive
from docchunker.chunking.sentence import split_sentences
from docchunker.chunking.stats import compute_statistics
from docchunker.models import (
    ChunkingOptions,
    ChunkingResult,
    DocumentInfo,
    RawChunk,
    SplittingMethod,
)

LOGGER = logging.getLogger(__name__)

Splitter = Callable[[str, ChunkingOptions], List[RawChunk]]

SPLITTERS: Dict[SplittingMethod, Splitter] = {
    SplittingMethod.CHARACTER: split_characters,
    SplittingMethod.SENTENCE: split_sentences,
    SplittingMethod.PARAGRAPH: split_paragraphs,
    SplittingMethod.MARKDOWN: split_markdown,
    SplittingMethod.RECURSIVE: split_recursive,
}


def split_text(text: str, options: ChunkingOptions) -> List[RawChunk]:
    """Validate options and run the strategy selected by ``options.method``."""
    options.validate()
    chunks = SPLITTERS[options.method](text, options)
    LOGGER.debug(
        "Split %d characters with %s into %d chunks",
        len(text),
        options.method.value,
        len(chunks),
    )
    return chunks


def annotate_extraction(
    chunks: Sequence[RawChunk],
    *,
    page_starts: Sequence[int] = (),
    confidence: Optional[float] = None,
) -> None:
    """Attach page numbers and OCR confidence known from extraction.

    Fields a strategy already set are left alone.
    """
    for chunk in chunks:
        position = chunk.position
        if page_starts and position.page_number is None:
            position.page_number = max(bisect.bisect_right(page_starts, chunk.start_index), 1)
        if confidence is not None and position.confidence is None:
            position.confidence = confidence


def chunk_document(
    text: str,
    document: DocumentInfo,
    options: ChunkingOptions,
    *,
    page_starts: Sequence[int] = (),
    confidence: Optional[float] = None,
) -> ChunkingResult:
    """Split, enrich and summarise one document."""
    processed_at = datetime.now(timezone.utc)
    raw_chunks = split_text(text, options)
    annotate_extraction(raw_chunks, page_starts=page_starts, confidence=confidence)
    chunks = enhance_chunks(raw_chunks, document, options, processed_at=processed_at)
    statistics = compute_statistics(chunks)
    LOGGER.info(
        "Chunked %s: %d chunks, %d characters",
        document.file_name,
        statistics.total_chunks,
        statistics.total_characters,
    )
    return ChunkingResult(
        document=document,
        options=options,
        chunks=chunks,
        statistics=statistics,
        processed_at=processed_at,
    )
