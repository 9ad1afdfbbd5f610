"""Tests for chunk statistics."""

from __future__ import annotations

from datetime import datetime, timezone

from docchunker.chunking.enhancer import enhance_chunks
from docchunker.chunking.stats import compute_statistics
from docchunker.models import ChunkingOptions, DocumentInfo, FileType, RawChunk


def _chunks(*texts: str):
    document = DocumentInfo(
        file_id="f",
        file_name="f.txt",
        file_type=FileType.TEXT,
        uploaded_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    raw = []
    cursor = 0
    for text in texts:
        raw.append(RawChunk(text, cursor, cursor + len(text)))
        cursor += len(text) + 1
    return enhance_chunks(raw, document, ChunkingOptions())


class TestComputeStatistics:
    """Test compute_statistics."""

    def test_empty(self) -> None:
        """No chunks gives zero totals and averages."""
        stats = compute_statistics([])

        assert stats.total_chunks == 0
        assert stats.total_characters == 0
        assert stats.average_chunk_size == 0.0
        assert stats.average_word_count == 0.0
        assert stats.languages == []

    def test_totals_and_averages(self) -> None:
        stats = compute_statistics(_chunks("one two", "three four five six"))

        assert stats.total_chunks == 2
        assert stats.total_characters == 7 + 19
        assert stats.total_words == 6
        assert stats.average_chunk_size == 13.0
        assert stats.average_word_count == 3.0

    def test_languages_distinct_in_first_seen_order(self) -> None:
        stats = compute_statistics(_chunks("مرحبا", "hello", "مرحبا بكم", "hi مرحبا"))

        assert stats.languages == ["arabic", "english", "mixed"]
        assert stats.arabic_chunks == 3
        assert stats.latin_chunks == 2

    def test_to_dict_rounds_averages(self) -> None:
        data = compute_statistics(_chunks("ab", "abc")).to_dict()

        assert data["totalChunks"] == 2
        assert data["avgChunkSize"] == 2
        assert data["avgWordCount"] == 1
