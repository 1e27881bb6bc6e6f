"""Backend selection."""

from __future__ import annotations

import shutil
from pathlib import Path

from linkfarm.backends.base import LinkBackend
from linkfarm.backends.manual import ManualSymlinkBackend
from linkfarm.backends.stow import StowBackend
from linkfarm.logging import get_logger
from linkfarm.models import BackendKind

logger = get_logger("backends.probe")

_CHOICES = {
    "stow": BackendKind.FARM_MANAGER,
    "manual": BackendKind.MANUAL_SYMLINK,
}


def probe_backend(command: str = "stow") -> BackendKind:
    """Pick the farm manager when ``command`` is on PATH, else manual links."""
    path = shutil.which(command)
    if path:
        logger.debug("Using %s: %s", command, path)
        return BackendKind.FARM_MANAGER
    logger.debug("%s not found - using manual symlinks", command)
    return BackendKind.MANUAL_SYMLINK


def select_backend(choice: str = "auto", command: str = "stow") -> BackendKind:
    """Resolve a configured backend choice; ``auto`` probes."""
    if choice == "auto":
        return probe_backend(command)
    return _CHOICES[choice]


def create_backend(
    kind: BackendKind,
    source_root: Path,
    target_root: Path,
    command: str = "stow",
) -> LinkBackend:
    """Instantiate the backend for ``kind``."""
    if kind == BackendKind.FARM_MANAGER:
        return StowBackend(source_root, target_root, command=command)
    return ManualSymlinkBackend(source_root, target_root)
