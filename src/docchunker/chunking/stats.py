"""Aggregate statistics over enriched chunks."""

from __future__ import annotations

from typing import List, Sequence

from docchunker.models import ChunkStatistics, TextChunk


def compute_statistics(chunks: Sequence[TextChunk]) -> ChunkStatistics:
    total = len(chunks)
    total_characters = sum(chunk.character_count for chunk in chunks)
    total_words = sum(chunk.word_count for chunk in chunks)

    languages: List[str] = []
    for chunk in chunks:
        language = chunk.metadata.language
        if language is not None and language.value not in languages:
            languages.append(language.value)

    return ChunkStatistics(
        total_chunks=total,
        total_characters=total_characters,
        total_words=total_words,
        average_chunk_size=total_characters / total if total else 0.0,
        average_word_count=total_words / total if total else 0.0,
        languages=languages,
        arabic_chunks=sum(1 for chunk in chunks if chunk.metadata.has_arabic),
        latin_chunks=sum(1 for chunk in chunks if chunk.metadata.has_latin_script),
    )
