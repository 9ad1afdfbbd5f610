"""FastAPI application exposing document chunking over HTTP."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Literal

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from docchunker.chunking.dispatcher import chunk_document
from docchunker.config import AppConfig
from docchunker.ingestion.extractors import ExtractionError, UnsupportedFileType, extract_text
from docchunker.models import (
    ChunkingOptions,
    DocumentInfo,
    FileType,
    InvalidChunkingOptions,
    SplittingMethod,
)
from docchunker.storage.chunks import ChunkStore, ChunkStoreError, sanitize_table_name
from docchunker.storage.uploads import UploadStore

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="DocChunker Web", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

uploads = UploadStore(ttl_seconds=AppConfig().upload_ttl_seconds)


class ChunkPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_id: str = Field(alias="fileId")
    splitting_method: str = Field(default=SplittingMethod.RECURSIVE.value, alias="splittingMethod")
    chunk_size: int = Field(default=AppConfig().chunk_size, alias="chunkSize")
    chunk_overlap: int = Field(default=AppConfig().chunk_overlap, alias="chunkOverlap")


class SaveChunksPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_id: str = Field(alias="fileId")
    file_name: str = Field(alias="fileName")
    chunks: List[Dict[str, Any]]
    storage_mode: Literal["new_table", "existing_table"] = Field(alias="storageMode")
    custom_table_name: str | None = Field(default=None, alias="customTableName")
    table_name: str | None = Field(default=None, alias="tableName")
    description: str | None = None
    db: str | None = None


def _resolve_db_path(db: Path | str | None) -> Path:
    config = AppConfig(db_path=Path(db) if db is not None else AppConfig().db_path)
    return config.resolve_db_path(Path.cwd())


def _ensure_db_parent(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)


def _open_existing_store(db: str | None) -> ChunkStore:
    resolved_db = _resolve_db_path(db)
    if not resolved_db.exists():
        raise HTTPException(status_code=404, detail=f"Database not found at {resolved_db}")
    return ChunkStore(resolved_db)


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.get("/health")
async def health() -> dict[str, Any]:
    return {"status": "ok", "uploads": len(uploads)}


@app.post("/api/upload-document")
async def upload_document(file: UploadFile = File(...)) -> dict[str, str]:
    data = await file.read()
    upload = uploads.add(
        file.filename or "document",
        file.content_type or "application/octet-stream",
        data,
    )
    return {"fileId": upload.file_id, "filename": upload.filename}


@app.post("/api/chunk-document")
async def chunk_uploaded_document(payload: ChunkPayload) -> dict[str, Any]:
    upload = uploads.get(payload.file_id)
    if upload is None:
        raise HTTPException(status_code=404, detail="File not found")

    options = ChunkingOptions(
        chunk_size=payload.chunk_size,
        chunk_overlap=payload.chunk_overlap,
        method=SplittingMethod.parse(payload.splitting_method),
    )
    try:
        options.validate()
    except InvalidChunkingOptions as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        extraction = await asyncio.to_thread(
            extract_text, upload.data, upload.mimetype, upload.filename
        )
    except UnsupportedFileType as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ExtractionError as exc:
        LOGGER.error("Extraction failed for %s: %s", upload.filename, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    document = DocumentInfo(
        file_id=upload.file_id,
        file_name=upload.filename,
        file_type=FileType.from_mimetype(upload.mimetype),
        uploaded_at=upload.uploaded_at,
    )
    result = await asyncio.to_thread(
        chunk_document,
        extraction.text,
        document,
        options,
        page_starts=extraction.page_starts,
        confidence=extraction.confidence,
    )

    return {
        "success": True,
        "data": {
            "fileId": upload.file_id,
            "fileName": upload.filename,
            "fileType": upload.mimetype,
            "extractedText": extraction.text[: AppConfig().preview_chars],
            "chunks": [chunk.to_dict() for chunk in result.chunks],
            "statistics": result.statistics.to_dict(),
        },
    }


@app.post("/api/save-chunks")
async def save_chunks(payload: SaveChunksPayload) -> dict[str, Any]:
    if not payload.chunks:
        raise HTTPException(status_code=400, detail="No chunks provided")

    if payload.storage_mode == "new_table":
        if not payload.custom_table_name:
            raise HTTPException(
                status_code=400, detail="customTableName is required for new_table mode"
            )
        requested_name = payload.custom_table_name
    else:
        if not payload.table_name:
            raise HTTPException(
                status_code=400, detail="tableName is required for existing_table mode"
            )
        requested_name = payload.table_name

    try:
        table_name = sanitize_table_name(requested_name)
    except ChunkStoreError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    resolved_db = _resolve_db_path(payload.db)
    _ensure_db_parent(resolved_db)
    store = ChunkStore(resolved_db)
    try:
        if payload.storage_mode == "new_table":
            store.create_table(table_name, payload.description)
        saved = store.save_chunks(
            table_name,
            payload.chunks,
            file_id=payload.file_id,
            file_name=payload.file_name,
        )
    except ChunkStoreError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    finally:
        store.close()

    return {
        "success": True,
        "data": {
            "tableId": table_name,
            "tableName": table_name,
            "savedChunks": saved,
            "totalChunks": len(payload.chunks),
            "message": f"Successfully saved {saved} chunks to {table_name}",
            "storageMode": payload.storage_mode,
        },
    }


@app.get("/api/chunk-tables")
async def list_chunk_tables(db: str | None = None) -> dict[str, Any]:
    resolved_db = _resolve_db_path(db)
    if not resolved_db.exists():
        return {"success": True, "data": []}

    store = ChunkStore(resolved_db)
    try:
        tables = store.list_tables()
    finally:
        store.close()
    return {"success": True, "data": [asdict(table) for table in tables]}


@app.get("/api/chunks")
async def get_chunks(
    table_id: str = Query(..., alias="tableId"),
    file_id: str | None = Query(None, alias="fileId"),
    language: str | None = None,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: str | None = None,
) -> dict[str, Any]:
    store = _open_existing_store(db)
    try:
        chunks = store.get_chunks(
            table_id, file_id=file_id, language=language, limit=limit, offset=offset
        )
    except ChunkStoreError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    finally:
        store.close()

    return {
        "success": True,
        "data": {"chunks": chunks, "count": len(chunks), "limit": limit, "offset": offset},
    }


@app.get("/api/chunk-stats")
async def get_chunk_stats(
    table_id: str = Query(..., alias="tableId"),
    db: str | None = None,
) -> dict[str, Any]:
    store = _open_existing_store(db)
    try:
        stats = store.get_stats(table_id)
    except ChunkStoreError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    finally:
        store.close()
    return {"success": True, "data": stats}
