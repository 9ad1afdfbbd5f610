"""Utility helpers for working with files."""

from __future__ import annotations

import hashlib
import mimetypes
from pathlib import Path

TEXT_SUFFIXES = {".txt", ".md", ".markdown", ".rst", ".csv", ".log"}


def guess_mimetype(path: Path) -> str:
    """Best-effort MIME type; any text-like file is treated as plain text."""
    if path.suffix.lower() in TEXT_SUFFIXES:
        return "text/plain"
    mimetype, _ = mimetypes.guess_type(path.name)
    if mimetype is None:
        return "application/octet-stream"
    if mimetype.startswith("text/"):
        return "text/plain"
    return mimetype


def compute_sha256(path: Path) -> str:
    """Compute SHA256 hash for a file."""
    sha = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1 << 20), b""):
            sha.update(chunk)
    return sha.hexdigest()
