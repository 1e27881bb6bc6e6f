"""Package discovery from the source root."""

from __future__ import annotations

from pathlib import Path

from linkfarm.errors import ConfigurationError
from linkfarm.logging import get_logger
from linkfarm.models import Package

logger = get_logger("packages")


def enumerate_packages(source_root: Path, target_root: Path) -> list[Package]:
    """List installable packages, one per immediate subdirectory.

    Hidden directories and plain files are ignored. The result is sorted by
    name so that batches and reports are deterministic.

    Raises:
        ConfigurationError: if ``source_root`` is not a directory.
    """
    if not source_root.is_dir():
        raise ConfigurationError(
            f"Source directory not found: {source_root}",
            hint="Run from the repository root or set 'source_dir' in linkfarm.yaml",
        )

    packages = [
        Package(
            name=item.name,
            source_path=item.absolute(),
            target_path=target_root / item.name,
        )
        for item in sorted(source_root.iterdir())
        if item.is_dir() and not item.name.startswith(".")
    ]
    logger.debug("Found %d packages in %s", len(packages), source_root)
    return packages
