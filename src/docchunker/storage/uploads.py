"""In-memory store for uploaded documents awaiting chunking."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class UploadedFile:
    file_id: str
    filename: str
    mimetype: str
    data: bytes
    uploaded_at: datetime

    @property
    def size(self) -> int:
        return len(self.data)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UploadStore:
    """Keeps uploads in memory and forgets them after ``ttl_seconds``."""

    def __init__(self, *, ttl_seconds: int = 3600, clock: Callable[[], datetime] = _utcnow) -> None:
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._files: Dict[str, UploadedFile] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)

    def add(self, filename: str, mimetype: str, data: bytes) -> UploadedFile:
        upload = UploadedFile(
            file_id=str(uuid.uuid4()),
            filename=filename or "document",
            mimetype=mimetype,
            data=data,
            uploaded_at=self._clock(),
        )
        with self._lock:
            self._purge_expired()
            self._files[upload.file_id] = upload
        LOGGER.info("Stored upload %s (%s, %d bytes)", upload.file_id, upload.filename, upload.size)
        return upload

    def get(self, file_id: str) -> Optional[UploadedFile]:
        with self._lock:
            self._purge_expired()
            return self._files.get(file_id)

    def remove(self, file_id: str) -> bool:
        with self._lock:
            return self._files.pop(file_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._files.clear()

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge_expired()

    def _purge_expired(self) -> int:
        cutoff = self._clock() - self.ttl
        expired = [key for key, item in self._files.items() if item.uploaded_at < cutoff]
        for key in expired:
            del self._files[key]
        if expired:
            LOGGER.debug("Expired %d uploads", len(expired))
        return len(expired)
