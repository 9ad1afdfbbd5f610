"""Core docchunker data models."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

LOGGER = logging.getLogger(__name__)


class SplittingMethod(str, Enum):
    CHARACTER = "character"
    RECURSIVE = "recursive"
    SENTENCE = "sentence"
    PARAGRAPH = "paragraph"
    MARKDOWN = "markdown"

    @classmethod
    def parse(cls, value: "str | SplittingMethod | None") -> "SplittingMethod":
        """Map a method tag to a member, defaulting to recursive for unknown tags."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            LOGGER.warning("Unknown splitting method %r, using recursive", value)
            return cls.RECURSIVE


class FileType(str, Enum):
    PDF = "pdf"
    TEXT = "text"
    IMAGE = "image"

    @classmethod
    def from_mimetype(cls, mimetype: str) -> "FileType":
        if mimetype == "application/pdf":
            return cls.PDF
        if mimetype.startswith("image/"):
            return cls.IMAGE
        return cls.TEXT


class Language(str, Enum):
    ENGLISH = "english"
    ARABIC = "arabic"
    MIXED = "mixed"


class InvalidChunkingOptions(ValueError):
    """Raised when chunking options are out of range."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


@dataclass(slots=True, frozen=True)
class ChunkingOptions:
    chunk_size: int = 1000
    chunk_overlap: int = 200
    method: SplittingMethod = SplittingMethod.RECURSIVE

    def __post_init__(self) -> None:
        # Plain string tags are accepted; unknown ones become recursive.
        object.__setattr__(self, "method", SplittingMethod.parse(self.method))

    def validate(self) -> None:
        if not isinstance(self.chunk_size, int) or self.chunk_size <= 0:
            raise InvalidChunkingOptions("chunk_size", "must be a positive integer")
        if not isinstance(self.chunk_overlap, int) or self.chunk_overlap < 0:
            raise InvalidChunkingOptions("chunk_overlap", "must be zero or greater")
        if self.chunk_overlap >= self.chunk_size:
            raise InvalidChunkingOptions(
                "chunk_overlap", f"must be smaller than chunk_size ({self.chunk_size})"
            )


@dataclass(slots=True, frozen=True)
class DocumentInfo:
    """Identity of the document being chunked."""

    file_id: str
    file_name: str
    file_type: FileType
    uploaded_at: datetime


@dataclass(slots=True)
class ChunkPosition:
    """Structural position of a chunk, known only to some strategies."""

    page_number: Optional[int] = None
    paragraph_number: Optional[int] = None
    sentence_number: Optional[int] = None
    section_number: Optional[int] = None
    header_level: Optional[int] = None
    is_header: Optional[bool] = None
    confidence: Optional[float] = None


@dataclass(slots=True)
class RawChunk:
    """Strategy output before enrichment: a trimmed slice of the original text."""

    text: str
    start_index: int
    end_index: int
    position: ChunkPosition = field(default_factory=ChunkPosition)


@dataclass(slots=True)
class ChunkMetadata:
    # Document info
    file_id: str
    file_name: str
    file_type: FileType
    uploaded_at: str

    # Chunking info
    splitting_method: SplittingMethod
    chunk_size: int
    chunk_overlap: int
    requested_chunk_overlap: int

    # Position info
    page_number: Optional[int] = None
    paragraph_number: Optional[int] = None
    sentence_number: Optional[int] = None
    section_number: Optional[int] = None
    header_level: Optional[int] = None

    # Content info
    language: Optional[Language] = None
    has_arabic: bool = False
    has_latin_script: bool = False
    contains_numbers: bool = False
    contains_urls: bool = False

    # Quality
    confidence: Optional[float] = None
    readability_score: Optional[float] = None
    is_header: Optional[bool] = None

    # Relationships
    previous_chunk_index: Optional[int] = None
    next_chunk_index: Optional[int] = None

    processed_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "fileId": self.file_id,
            "fileName": self.file_name,
            "fileType": self.file_type.value,
            "uploadedAt": self.uploaded_at,
            "splittingMethod": self.splitting_method.value,
            "chunkSize": self.chunk_size,
            "chunkOverlap": self.chunk_overlap,
            "requestedChunkOverlap": self.requested_chunk_overlap,
            "pageNumber": self.page_number,
            "paragraphNumber": self.paragraph_number,
            "sentenceNumber": self.sentence_number,
            "sectionNumber": self.section_number,
            "headerLevel": self.header_level,
            "language": self.language.value if self.language else None,
            "hasArabic": self.has_arabic,
            "hasLatinScript": self.has_latin_script,
            "containsNumbers": self.contains_numbers,
            "containsUrls": self.contains_urls,
            "confidence": self.confidence,
            "readabilityScore": self.readability_score,
            "isHeader": self.is_header,
            "previousChunkIndex": self.previous_chunk_index,
            "nextChunkIndex": self.next_chunk_index,
            "processedAt": self.processed_at,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass(slots=True)
class TextChunk:
    """Chunk of document text paired with metadata."""

    index: int
    text: str
    character_count: int
    word_count: int
    start_index: int
    end_index: int
    metadata: ChunkMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "text": self.text,
            "characterCount": self.character_count,
            "wordCount": self.word_count,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "metadata": self.metadata.to_dict(),
        }


@dataclass(slots=True)
class ChunkStatistics:
    total_chunks: int = 0
    total_characters: int = 0
    total_words: int = 0
    average_chunk_size: float = 0.0
    average_word_count: float = 0.0
    languages: List[str] = field(default_factory=list)
    arabic_chunks: int = 0
    latin_chunks: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalChunks": self.total_chunks,
            "totalCharacters": self.total_characters,
            "totalWords": self.total_words,
            "avgChunkSize": round(self.average_chunk_size),
            "avgWordCount": round(self.average_word_count),
            "languages": list(self.languages),
            "arabicChunks": self.arabic_chunks,
            "latinChunks": self.latin_chunks,
        }


@dataclass(slots=True)
class ChunkingResult:
    document: DocumentInfo
    options: ChunkingOptions
    chunks: List[TextChunk]
    statistics: ChunkStatistics
    processed_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileId": self.document.file_id,
            "fileName": self.document.file_name,
            "fileType": self.document.file_type.value,
            "splittingMethod": self.options.method.value,
            "chunkSize": self.options.chunk_size,
            "chunkOverlap": self.options.chunk_overlap,
            "chunks": [chunk.to_dict() for chunk in self.chunks],
            "statistics": self.statistics.to_dict(),
            "processedAt": self.processed_at.isoformat(),
        }
