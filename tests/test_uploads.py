"""Tests for the in-memory upload store."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from docchunker.storage.uploads import UploadStore


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


class TestUploadStore:
    """Test UploadStore."""

    def test_add_and_get(self) -> None:
        store = UploadStore()
        upload = store.add("doc.txt", "text/plain", b"hello")

        assert store.get(upload.file_id) == upload
        assert upload.size == 5
        assert len(store) == 1

    def test_unique_ids(self) -> None:
        store = UploadStore()
        first = store.add("a.txt", "text/plain", b"a")
        second = store.add("a.txt", "text/plain", b"a")

        assert first.file_id != second.file_id

    def test_missing_filename_defaults(self) -> None:
        upload = UploadStore().add("", "text/plain", b"x")

        assert upload.filename == "document"

    def test_unknown_id(self) -> None:
        assert UploadStore().get("nope") is None

    def test_remove_and_clear(self) -> None:
        store = UploadStore()
        upload = store.add("a.txt", "text/plain", b"a")
        store.add("b.txt", "text/plain", b"b")

        assert store.remove(upload.file_id) is True
        assert store.remove(upload.file_id) is False
        store.clear()
        assert len(store) == 0

    def test_expiry(self) -> None:
        """Uploads older than the TTL are forgotten."""
        clock = FakeClock()
        store = UploadStore(ttl_seconds=60, clock=clock)
        upload = store.add("a.txt", "text/plain", b"a")

        clock.advance(60)
        assert store.get(upload.file_id) is not None

        clock.advance(1)
        assert store.get(upload.file_id) is None

    def test_purge_expired_counts(self) -> None:
        clock = FakeClock()
        store = UploadStore(ttl_seconds=10, clock=clock)
        store.add("a.txt", "text/plain", b"a")
        clock.advance(5)
        store.add("b.txt", "text/plain", b"b")
        clock.advance(6)

        assert store.purge_expired() == 1
        assert len(store) == 1
