"""
Base link backend interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from linkfarm.models import BackendKind, BatchResult, Package


class LinkBackend(ABC):
    """
    Abstract base class for link backends.

    A backend projects every package of the source root into the target root
    as one symlink per package, and removes those links again. Implementations
    are chosen once per run and must be safe to re-run after an interrupted
    previous run.
    """

    kind: BackendKind

    def __init__(self, source_root: Path, target_root: Path) -> None:
        self.source_root = source_root
        self.target_root = target_root

    @abstractmethod
    def install_all(self, packages: list[Package]) -> BatchResult:
        """Link every package into the target root."""
        pass

    @abstractmethod
    def uninstall_all(self, packages: list[Package]) -> BatchResult:
        """Remove the links of every package."""
        pass

    def restow_all(self, packages: list[Package]) -> BatchResult:
        """Refresh all links. Defaults to uninstall followed by install."""
        self.uninstall_all(packages)
        result = self.install_all(packages)
        result.operation = "restow"
        return result

    def ensure_target(self) -> None:
        """Create the target root if it does not exist."""
        self.target_root.mkdir(parents=True, exist_ok=True)
