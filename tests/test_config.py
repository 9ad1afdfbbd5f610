"""Tests for application configuration."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from docchunker.config import AppConfig
from docchunker.models import SplittingMethod


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self) -> None:
        """Should create config with default values."""
        config = AppConfig()

        assert config.db_path is not None
        assert config.db_path.name == "docchunker.db"
        assert config.chunk_size == 1000
        assert config.chunk_overlap == 200
        assert config.method == "recursive"
        assert config.upload_ttl_seconds == 3600
        assert config.preview_chars == 500

    def test_custom_config(self) -> None:
        """Should create config with custom values."""
        config = AppConfig(
            db_path=Path("/custom/path.db"),
            chunk_size=800,
            chunk_overlap=100,
            method="sentence",
        )

        assert config.db_path == Path("/custom/path.db")
        assert config.chunk_size == 800
        assert config.chunk_overlap == 100

    def test_default_prefers_local_data_dir(self) -> None:
        """A local data/docchunker.db should win when running from source."""
        with patch("docchunker.config.Path.exists", return_value=True):
            config = AppConfig()

        assert config.db_path == Path("data/docchunker.db")

    def test_resolve_db_path_absolute(self) -> None:
        """Should return absolute path as-is."""
        config = AppConfig(db_path=Path("/absolute/path/db.db"))

        assert config.resolve_db_path() == Path("/absolute/path/db.db")

    def test_resolve_db_path_relative_no_base(self) -> None:
        """Should return relative path when no base_dir provided."""
        config = AppConfig(db_path=Path("relative/db.db"))

        assert config.resolve_db_path(base_dir=None) == Path("relative/db.db")

    def test_resolve_db_path_relative_with_base(self) -> None:
        """Should resolve relative path against base_dir."""
        config = AppConfig(db_path=Path("relative/db.db"))

        resolved = config.resolve_db_path(base_dir=Path("/base/directory"))

        assert resolved == Path("/base/directory/relative/db.db")

    def test_default_options(self) -> None:
        """Should build chunking options from the configured defaults."""
        options = AppConfig(chunk_size=300, chunk_overlap=30, method="paragraph").default_options()

        assert options.chunk_size == 300
        assert options.chunk_overlap == 30
        assert options.method == SplittingMethod.PARAGRAPH

    def test_default_options_unknown_method(self) -> None:
        options = AppConfig(method="fancy").default_options()

        assert options.method == SplittingMethod.RECURSIVE
