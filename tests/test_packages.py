"""Tests for package enumeration."""

from __future__ import annotations

from pathlib import Path

import pytest

from linkfarm.errors import ConfigurationError
from linkfarm.packages import enumerate_packages


class TestEnumeratePackages:
    """Tests for enumerate_packages."""

    def test_lists_subdirectories(self, source_root: Path, target_root: Path) -> None:
        """Should return one package per subdirectory, sorted."""
        packages = enumerate_packages(source_root, target_root)

        assert [p.name for p in packages] == ["agent", "command", "skill"]

    def test_ignores_files_and_hidden(self, source_root: Path, target_root: Path) -> None:
        """Should skip plain files and hidden directories."""
        (source_root / ".cache").mkdir()

        names = [p.name for p in enumerate_packages(source_root, target_root)]

        assert "README.md" not in names
        assert ".cache" not in names

    def test_paths(self, source_root: Path, target_root: Path) -> None:
        """Should derive source and target paths from the name."""
        package = enumerate_packages(source_root, target_root)[0]

        assert package.source_path == (source_root / "agent").absolute()
        assert package.target_path == target_root / "agent"

    def test_empty_source(self, tmp_path: Path) -> None:
        """Should return an empty list for an empty source root."""
        source = tmp_path / "empty"
        source.mkdir()

        assert enumerate_packages(source, tmp_path / "t") == []

    def test_missing_source(self, tmp_path: Path) -> None:
        """Should fail fast when the source root is missing."""
        with pytest.raises(ConfigurationError) as exc_info:
            enumerate_packages(tmp_path / "missing", tmp_path / "t")

        assert "missing" in str(exc_info.value)
