"""Markdown header splitter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from docchunker.chunking.paragraph import split_paragraphs
from docchunker.models import ChunkingOptions, ChunkPosition, RawChunk
from docchunker.utils.text import trim_span

HEADER_LINE = re.compile(r"^(#+)[ \t]+", re.MULTILINE)


@dataclass(slots=True)
class Section:
    start: int
    end: int
    header_level: Optional[int] = None


def find_sections(text: str) -> List[Section]:
    """Cut text at header lines; text before the first header is its own section."""
    sections: List[Section] = []
    matches = list(HEADER_LINE.finditer(text))
    if not matches:
        if text.strip():
            sections.append(Section(0, len(text)))
        return sections

    if text[: matches[0].start()].strip():
        sections.append(Section(0, matches[0].start()))
    for current, following in zip(matches, matches[1:] + [None]):
        end = following.start() if following is not None else len(text)
        sections.append(Section(current.start(), end, header_level=len(current.group(1))))
    return sections


def split_markdown(text: str, options: ChunkingOptions) -> List[RawChunk]:
    """Emit one chunk per markdown section, or paragraph chunks when there is no structure."""
    sections = find_sections(text)
    if len(sections) < 2:
        return split_paragraphs(text, options)

    chunks: List[RawChunk] = []
    for section in sections:
        body = text[section.start : section.end]
        position = ChunkPosition(
            section_number=len(chunks) + 1,
            header_level=section.header_level,
            is_header=True if section.header_level and len(body.strip().splitlines()) == 1 else None,
        )
        chunk = trim_span(text, section.start, section.end, position)
        if chunk is not None:
            chunks.append(chunk)
    return chunks
