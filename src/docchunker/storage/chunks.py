"""SQLite persistence for enriched chunks."""

from __future__ import annotations

import json
import logging
import re
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

LOGGER = logging.getLogger(__name__)

TABLE_PREFIX = "chunks_"
MAX_NAME_LENGTH = 55


class ChunkStoreError(ValueError):
    """Raised for unknown chunk tables or unusable table names."""


@dataclass(slots=True)
class ChunkTable:
    id: int
    name: str
    description: Optional[str]
    chunk_count: int
    created_at: str
    updated_at: str


def sanitize_table_name(name: str) -> str:
    """Map a user supplied name onto ``chunks_<lowercase_alnum>``."""
    cleaned = re.sub(r"[^a-z0-9_]", "_", name.strip().lower())
    if cleaned.startswith(TABLE_PREFIX):
        cleaned = cleaned[len(TABLE_PREFIX) :]
    cleaned = cleaned[:MAX_NAME_LENGTH]
    if not cleaned.strip("_"):
        raise ChunkStoreError(f"Invalid table name: {name!r}")
    return f"{TABLE_PREFIX}{cleaned}"


class ChunkStore:
    """Persistence layer for chunk tables and their chunks."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")
        self._conn.execute("PRAGMA foreign_keys=ON;")
        self._ensure_schema()

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            yield self._conn
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise

    def _ensure_schema(self) -> None:
        with self.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS chunk_tables (
                    id INTEGER PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    description TEXT,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS chunks (
                    id INTEGER PRIMARY KEY,
                    table_id INTEGER NOT NULL,
                    chunk_index INTEGER NOT NULL,
                    chunk_text TEXT NOT NULL,
                    character_count INTEGER,
                    word_count INTEGER,
                    start_index INTEGER,
                    end_index INTEGER,
                    splitting_method TEXT,
                    file_name TEXT,
                    file_id TEXT,
                    page_number INTEGER,
                    language TEXT,
                    has_arabic INTEGER DEFAULT 0,
                    has_latin INTEGER DEFAULT 0,
                    contains_urls INTEGER DEFAULT 0,
                    contains_numbers INTEGER DEFAULT 0,
                    readability_score REAL,
                    confidence REAL,
                    metadata_json TEXT,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    FOREIGN KEY(table_id) REFERENCES chunk_tables(id) ON DELETE CASCADE
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_chunks_table_id ON chunks(table_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_chunks_file_id ON chunks(file_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_chunks_language ON chunks(language)")

    def create_table(self, name: str, description: str | None = None) -> ChunkTable:
        """Create a chunk table, or touch it if it already exists."""
        table_name = sanitize_table_name(name)
        with self.transaction() as conn:
            conn.execute(
                """
                INSERT INTO chunk_tables(name, description) VALUES (?, ?)
                ON CONFLICT(name) DO UPDATE SET updated_at = CURRENT_TIMESTAMP
                """,
                (table_name, description),
            )
        return self._require_table(table_name)

    def get_table(self, name: str) -> ChunkTable | None:
        row = self._conn.execute(
            """
            SELECT t.id, t.name, t.description, t.created_at, t.updated_at,
                   COUNT(c.id) AS chunk_count
            FROM chunk_tables t
            LEFT JOIN chunks c ON c.table_id = t.id
            WHERE t.name = ?
            GROUP BY t.id
            """,
            (name,),
        ).fetchone()
        return self._row_to_table(row) if row else None

    def list_tables(self) -> List[ChunkTable]:
        rows = self._conn.execute(
            """
            SELECT t.id, t.name, t.description, t.created_at, t.updated_at,
                   COUNT(c.id) AS chunk_count
            FROM chunk_tables t
            LEFT JOIN chunks c ON c.table_id = t.id
            GROUP BY t.id
            ORDER BY t.name DESC
            """
        ).fetchall()
        return [self._row_to_table(row) for row in rows]

    def delete_table(self, name: str) -> bool:
        with self.transaction() as conn:
            cursor = conn.execute("DELETE FROM chunk_tables WHERE name = ?", (name,))
        return cursor.rowcount > 0

    def save_chunks(
        self,
        table_name: str,
        chunks: Sequence[Mapping[str, Any]],
        *,
        file_id: str | None = None,
        file_name: str | None = None,
    ) -> int:
        """Insert chunks in their wire form (``TextChunk.to_dict()``) into a table.

        ``file_id`` and ``file_name`` fill in for chunks whose metadata lacks them.
        """
        table = self._require_table(table_name)
        with self.transaction() as conn:
            for chunk in chunks:
                metadata = chunk.get("metadata") or {}
                conn.execute(
                    """
                    INSERT INTO chunks(
                        table_id, chunk_index, chunk_text, character_count, word_count,
                        start_index, end_index, splitting_method, file_name, file_id,
                        page_number, language, has_arabic, has_latin, contains_urls,
                        contains_numbers, readability_score, confidence, metadata_json
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        table.id,
                        chunk["index"],
                        chunk["text"],
                        chunk.get("characterCount", len(chunk["text"])),
                        chunk.get("wordCount"),
                        chunk.get("startIndex"),
                        chunk.get("endIndex"),
                        metadata.get("splittingMethod", "unknown"),
                        metadata.get("fileName", file_name),
                        metadata.get("fileId", file_id),
                        metadata.get("pageNumber"),
                        metadata.get("language"),
                        bool(metadata.get("hasArabic")),
                        bool(metadata.get("hasLatinScript")),
                        bool(metadata.get("containsUrls")),
                        bool(metadata.get("containsNumbers")),
                        metadata.get("readabilityScore"),
                        metadata.get("confidence"),
                        json.dumps(metadata, ensure_ascii=False),
                    ),
                )
            conn.execute(
                "UPDATE chunk_tables SET updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (table.id,),
            )
        LOGGER.info("Saved %d chunks to %s", len(chunks), table.name)
        return len(chunks)

    def get_chunks(
        self,
        table_name: str,
        *,
        file_id: str | None = None,
        language: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        table = self._require_table(table_name)
        query = "SELECT * FROM chunks WHERE table_id = ?"
        params: List[Any] = [table.id]
        if file_id:
            query += " AND file_id = ?"
            params.append(file_id)
        if language:
            query += " AND language = ?"
            params.append(language)
        query += " ORDER BY chunk_index ASC, id ASC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        results: List[Dict[str, Any]] = []
        for row in self._conn.execute(query, params).fetchall():
            item = dict(row)
            item["metadata"] = json.loads(item.pop("metadata_json") or "{}")
            for flag in ("has_arabic", "has_latin", "contains_urls", "contains_numbers"):
                item[flag] = bool(item[flag])
            results.append(item)
        return results

    def get_stats(self, table_name: str) -> Dict[str, Any]:
        table = self._require_table(table_name)
        row = self._conn.execute(
            """
            SELECT
                COUNT(*) AS total_chunks,
                COALESCE(SUM(character_count), 0) AS total_characters,
                COALESCE(SUM(word_count), 0) AS total_words,
                COALESCE(AVG(character_count), 0) AS avg_chunk_size,
                COALESCE(AVG(word_count), 0) AS avg_word_count,
                COUNT(DISTINCT file_id) AS files_processed,
                COUNT(DISTINCT language) AS languages_count,
                COALESCE(SUM(has_arabic), 0) AS arabic_chunks,
                COALESCE(SUM(has_latin), 0) AS latin_chunks,
                AVG(readability_score) AS avg_readability
            FROM chunks
            WHERE table_id = ?
            """,
            (table.id,),
        ).fetchone()
        return dict(row)

    def _require_table(self, name: str) -> ChunkTable:
        table = self.get_table(name)
        if table is None:
            raise ChunkStoreError(f"Chunk table not found: {name}")
        return table

    @staticmethod
    def _row_to_table(row: sqlite3.Row) -> ChunkTable:
        return ChunkTable(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            chunk_count=row["chunk_count"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
