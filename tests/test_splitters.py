"""Tests for the character, sentence, paragraph and markdown splitters."""

from __future__ import annotations

from docchunker.chunking.character import split_characters
from docchunker.chunking.markdown import find_sections, split_markdown
from docchunker.chunking.paragraph import paragraph_spans, split_paragraphs
from docchunker.chunking.sentence import sentence_spans, split_sentences
from docchunker.models import ChunkingOptions, SplittingMethod


def _options(method: SplittingMethod, size: int, overlap: int = 0) -> ChunkingOptions:
    return ChunkingOptions(chunk_size=size, chunk_overlap=overlap, method=method)


class TestCharacterSplitter:
    """Test split_characters."""

    def test_windows_concatenate_without_overlap(self) -> None:
        """Chunks should rebuild the original text when overlap is zero."""
        text = "abcdefghij"
        chunks = split_characters(text, _options(SplittingMethod.CHARACTER, 4))

        assert [c.text for c in chunks] == ["abcd", "efgh", "ij"]
        assert "".join(c.text for c in chunks) == text

    def test_overlap_reduces_stride(self) -> None:
        """Consecutive windows should start chunk_size - overlap apart."""
        chunks = split_characters("abcdefghij", _options(SplittingMethod.CHARACTER, 4, 2))

        assert [c.start_index for c in chunks] == [0, 2, 4, 6, 8]
        assert chunks[0].text[-2:] == chunks[1].text[:2]

    def test_blank_windows_dropped(self) -> None:
        """Whitespace-only windows should not produce chunks."""
        chunks = split_characters("abcd    efgh", _options(SplittingMethod.CHARACTER, 4))

        assert [c.text for c in chunks] == ["abcd", "efgh"]
        assert [c.start_index for c in chunks] == [0, 8]

    def test_empty_text(self) -> None:
        """Should return no chunks for empty text."""
        assert split_characters("", _options(SplittingMethod.CHARACTER, 10)) == []

    def test_offsets_match_text(self) -> None:
        """Offsets should address the chunk inside the original text."""
        text = "The quick brown fox jumps over the lazy dog"
        for chunk in split_characters(text, _options(SplittingMethod.CHARACTER, 7, 3)):
            assert text[chunk.start_index : chunk.end_index] == chunk.text


class TestSentenceSplitter:
    """Test sentence detection and accumulation."""

    def test_whole_sentences_within_limit(self) -> None:
        """Sentences should be packed greedily without exceeding chunk_size."""
        text = "Hello world. This is a test. Final sentence."
        chunks = split_sentences(text, _options(SplittingMethod.SENTENCE, 30))

        assert [c.text for c in chunks] == ["Hello world. This is a test.", "Final sentence."]
        assert all(len(c.text) <= 30 for c in chunks)
        assert (chunks[1].start_index, chunks[1].end_index) == (29, 44)

    def test_sentence_numbers(self) -> None:
        """Each chunk should record the number of its first sentence."""
        text = "Hello world. This is a test. Final sentence."
        chunks = split_sentences(text, _options(SplittingMethod.SENTENCE, 30))

        assert [c.position.sentence_number for c in chunks] == [1, 3]

    def test_trailing_text_without_punctuation(self) -> None:
        """Text after the last terminator should be kept."""
        spans = sentence_spans("One. Two")

        assert len(spans) == 2
        assert spans[1] == (4, 8)

    def test_decimal_point_is_not_a_boundary(self) -> None:
        """A period inside a number should not end a sentence."""
        chunks = split_sentences("Pi is 3.14 today. Yes.", _options(SplittingMethod.SENTENCE, 18))

        assert [c.text for c in chunks] == ["Pi is 3.14 today.", "Yes."]

    def test_oversized_sentence_kept_whole(self) -> None:
        """A single sentence longer than chunk_size becomes its own chunk."""
        chunks = split_sentences(
            "This sentence is long. Short.", _options(SplittingMethod.SENTENCE, 10)
        )

        assert [c.text for c in chunks] == ["This sentence is long.", "Short."]

    def test_no_punctuation(self) -> None:
        """Text without terminators is one sentence."""
        chunks = split_sentences("no punctuation here", _options(SplittingMethod.SENTENCE, 100))

        assert len(chunks) == 1
        assert chunks[0].text == "no punctuation here"

    def test_whitespace_only(self) -> None:
        """Blank input yields nothing."""
        assert split_sentences("   \n ", _options(SplittingMethod.SENTENCE, 10)) == []


class TestParagraphSplitter:
    """Test paragraph detection and accumulation."""

    TEXT = "First para.\n\nSecond para.\n\n\nThird para."

    def test_paragraph_spans(self) -> None:
        """Two or more line breaks should separate paragraphs."""
        assert paragraph_spans(self.TEXT) == [(0, 11), (13, 25), (28, 39)]

    def test_accumulation(self) -> None:
        """Paragraphs should be packed while they fit."""
        chunks = split_paragraphs(self.TEXT, _options(SplittingMethod.PARAGRAPH, 30))

        assert [c.text for c in chunks] == ["First para.\n\nSecond para.", "Third para."]
        assert [c.position.paragraph_number for c in chunks] == [1, 3]

    def test_single_line_breaks_do_not_split(self) -> None:
        """A lone newline stays inside the paragraph."""
        chunks = split_paragraphs("line one\nline two", _options(SplittingMethod.PARAGRAPH, 5))

        assert len(chunks) == 1
        assert chunks[0].text == "line one\nline two"

    def test_offsets_match_text(self) -> None:
        """Offsets should address the trimmed chunk."""
        text = "\n\n  Alpha.\n\nBeta.  \n\n"
        for chunk in split_paragraphs(text, _options(SplittingMethod.PARAGRAPH, 5)):
            assert text[chunk.start_index : chunk.end_index] == chunk.text


class TestMarkdownSplitter:
    """Test header-based sections."""

    def test_sections_per_header(self) -> None:
        """Each header should start a new chunk."""
        text = "# Title\nIntro text.\n## Part\nBody here."
        chunks = split_markdown(text, _options(SplittingMethod.MARKDOWN, 1000))

        assert [c.text for c in chunks] == ["# Title\nIntro text.", "## Part\nBody here."]
        assert [c.position.header_level for c in chunks] == [1, 2]
        assert [c.position.section_number for c in chunks] == [1, 2]
        assert chunks[1].start_index == 20

    def test_preamble_is_a_section(self) -> None:
        """Text before the first header should not be lost."""
        sections = find_sections("Preface.\n# One\nText")

        assert len(sections) == 2
        assert sections[0].header_level is None
        assert (sections[0].start, sections[1].start) == (0, 9)

    def test_header_only_section_flagged(self) -> None:
        """A section with nothing but its header line is flagged as a header."""
        chunks = split_markdown("# A\n# B\nbody", _options(SplittingMethod.MARKDOWN, 1000))

        assert chunks[0].text == "# A"
        assert chunks[0].position.is_header is True
        assert chunks[1].position.is_header is None

    def test_hash_without_space_is_not_header(self) -> None:
        """Hashtags are not headers."""
        sections = find_sections("#hashtag text")

        assert len(sections) == 1
        assert sections[0].header_level is None

    def test_no_headers_falls_back_to_paragraphs(self) -> None:
        """Without headers the output should equal the paragraph splitter's."""
        text = "First para.\n\nSecond para.\n\n\nThird para."
        options = _options(SplittingMethod.MARKDOWN, 30)

        assert split_markdown(text, options) == split_paragraphs(text, options)

    def test_single_header_falls_back_to_paragraphs(self) -> None:
        """One section is not enough structure."""
        text = "# Only\n\nPara one.\n\nPara two."
        options = _options(SplittingMethod.MARKDOWN, 12)

        assert split_markdown(text, options) == split_paragraphs(text, options)
