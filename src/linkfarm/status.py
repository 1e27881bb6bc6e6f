"""
Target root inspection: status reporting and dangling link cleanup.

There is no manifest of installed packages. Every call scans the target
root, so the report always reflects the filesystem as it is.
"""

from __future__ import annotations

import os
from pathlib import Path

from linkfarm.logging import get_logger
from linkfarm.models import BackendKind, EntryKind, StatusEntry, StatusReport

logger = get_logger("status")


def classify_entry(path: Path, extension_path: Path | None = None) -> StatusEntry:
    """Classify one target root entry."""
    if path.is_symlink():
        return StatusEntry(
            name=path.name,
            path=path,
            kind=EntryKind.LINKED,
            destination=os.readlink(path),
            dangling=not path.exists(),
        )
    if extension_path is not None and path == extension_path:
        return StatusEntry(name=path.name, path=path, kind=EntryKind.EXTENSION)
    return StatusEntry(name=path.name, path=path, kind=EntryKind.FOREIGN)


def collect_status(
    target_root: Path,
    backend: BackendKind,
    extension_path: Path | None = None,
) -> StatusReport:
    """Scan ``target_root`` and classify each non-hidden entry.

    An absent target root yields ``installed=False``; it is not an error.
    """
    if not target_root.is_dir():
        return StatusReport(backend=backend, target_root=target_root, installed=False)

    report = StatusReport(backend=backend, target_root=target_root, installed=True)
    for path in sorted(target_root.iterdir()):
        if path.name.startswith("."):
            continue
        entry = classify_entry(path, extension_path)
        if entry.kind == EntryKind.FOREIGN:
            logger.warning("%s is not a symlink", path)
        elif entry.dangling:
            logger.warning("%s -> %s is a broken symlink", path, entry.destination)
        report.entries.append(entry)
    return report


def clean_dangling(target_root: Path, skip: set[Path] | None = None) -> list[Path]:
    """Delete broken symlinks anywhere under ``target_root``.

    Symlinked directories are not followed and directories listed in ``skip``
    (the extension clone) are not descended into. Valid symlinks and regular
    files are never touched. Returns the removed paths.
    """
    if not target_root.is_dir():
        return []

    skip = skip or set()
    removed: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(target_root):
        base = Path(dirpath)
        dirnames[:] = [d for d in dirnames if base / d not in skip]
        for name in sorted(dirnames + filenames):
            path = base / name
            if path.is_symlink() and not path.exists():
                try:
                    path.unlink()
                except FileNotFoundError:
                    continue
                logger.info("Removed broken symlink %s", path)
                removed.append(path)
    return removed
