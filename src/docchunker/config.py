"""Application configuration defaults."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from docchunker.models import ChunkingOptions, SplittingMethod


def _get_default_db_path() -> Path:
    """Get the default chunk database path based on platform and execution context."""
    user_db = Path.home() / "Documents" / "DocChunker" / "docchunker.db"

    if getattr(sys, "frozen", False):
        return user_db

    # When running from source, prefer local data/ if it exists
    local_db = Path("data/docchunker.db")
    if local_db.exists():
        return local_db

    return user_db


@dataclass(slots=True)
class AppConfig:
    db_path: Path | None = None
    chunk_size: int = 1000
    chunk_overlap: int = 200
    method: str = SplittingMethod.RECURSIVE.value
    upload_ttl_seconds: int = 3600
    preview_chars: int = 500

    def __post_init__(self) -> None:
        if self.db_path is None:
            self.db_path = _get_default_db_path()

    def resolve_db_path(self, base_dir: Path | None = None) -> Path:
        if self.db_path is None:
            self.db_path = _get_default_db_path()
        if Path(self.db_path).is_absolute() or base_dir is None:
            return Path(self.db_path)
        return base_dir / self.db_path

    def default_options(self) -> ChunkingOptions:
        return ChunkingOptions(
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap,
            method=SplittingMethod.parse(self.method),
        )
