"""Text extraction for uploaded documents.

Uses PyMuPDF (fitz) for PDF text and Tesseract (via pytesseract) for images.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import fitz  # PyMuPDF

from docchunker.chunking.enhancer import has_arabic
from docchunker.models import FileType
from docchunker.utils.text import normalize_whitespace

LOGGER = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


class UnsupportedFileType(ValueError):
    """Raised for MIME types the extractors cannot read."""


class ExtractionError(RuntimeError):
    """Raised when a supported document cannot be read."""


@dataclass(slots=True)
class ExtractionResult:
    text: str
    file_type: FileType
    extraction_method: str
    page_count: Optional[int] = None
    # Offset in ``text`` where each page starts, first page first.
    page_starts: List[int] = field(default_factory=list)
    confidence: Optional[float] = None

    @property
    def character_count(self) -> int:
        return len(self.text)


def is_supported(mimetype: str) -> bool:
    return mimetype in ("text/plain", "application/pdf") or mimetype.startswith("image/")


def extract_pdf_text(data: bytes) -> Tuple[str, List[int]]:
    """Return the text of a PDF with pages joined by a blank line, and page start offsets."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:
        LOGGER.error("Failed to open PDF: %s", exc)
        raise ExtractionError(f"Failed to open PDF: {exc}") from exc

    pages: List[str] = []
    try:
        for index in range(len(doc)):
            try:
                text = doc[index].get_text() or ""
            except Exception as exc:
                LOGGER.warning("Failed to read page %s: %s", index, exc)
                text = ""
            pages.append(normalize_whitespace(text.splitlines()))
    finally:
        doc.close()

    page_starts: List[int] = []
    cursor = 0
    for page in pages:
        page_starts.append(cursor)
        cursor += len(page) + len(PAGE_SEPARATOR)
    return PAGE_SEPARATOR.join(pages), page_starts


def _ocr_languages(data: bytes, filename: str) -> str:
    sample = data[:1000].decode("utf-8", errors="ignore") + filename
    return "ara+eng" if has_arabic(sample) else "eng"


def extract_image_text(data: bytes, filename: str = "") -> Tuple[str, Optional[float]]:
    """OCR an image and return its text with the mean word confidence (0-100)."""
    try:
        import pytesseract
        from PIL import Image
    except ImportError as exc:  # pragma: no cover - depends on optional extra
        raise ExtractionError(
            "OCR support is not installed. Install it with \"python -m pip install '.[ocr]'\""
        ) from exc

    languages = _ocr_languages(data, filename)
    try:
        image = Image.open(io.BytesIO(data))
        text = pytesseract.image_to_string(image, lang=languages) or ""
        details = pytesseract.image_to_data(
            image, lang=languages, output_type=pytesseract.Output.DICT
        )
    except Exception as exc:
        LOGGER.error("OCR failed for %s: %s", filename or "image", exc)
        raise ExtractionError(f"Image OCR failed: {exc}") from exc

    scores = [float(value) for value in details.get("conf", []) if float(value) >= 0]
    confidence = round(sum(scores) / len(scores), 2) if scores else None
    LOGGER.debug("OCR (%s) read %d characters from %s", languages, len(text), filename)
    return text.strip(), confidence


def extract_text(data: bytes, mimetype: str, filename: str = "") -> ExtractionResult:
    """Dispatch on MIME type and return the document text."""
    if mimetype == "text/plain":
        return ExtractionResult(
            text=data.decode("utf-8", errors="replace"),
            file_type=FileType.TEXT,
            extraction_method="utf-8",
        )
    if mimetype == "application/pdf":
        text, page_starts = extract_pdf_text(data)
        return ExtractionResult(
            text=text,
            file_type=FileType.PDF,
            extraction_method="pymupdf",
            page_count=len(page_starts),
            page_starts=page_starts,
        )
    if mimetype.startswith("image/"):
        text, confidence = extract_image_text(data, filename)
        return ExtractionResult(
            text=text,
            file_type=FileType.IMAGE,
            extraction_method="tesseract",
            confidence=confidence,
        )
    raise UnsupportedFileType(
        f"File type '{mimetype}' is not supported. Please upload PDF, text, or image files."
    )
