"""
GNU Stow backend.

The source root is stowed as a single stow package: its parent is the stow
directory, so each subdirectory folds into one symlink in the target root.
Stow does its own conflict detection; when it refuses, nothing is linked by
this backend and the failure is raised as :class:`InstallError`. Stow plans
the whole transaction before touching the filesystem, but an I/O error while
executing the plan can leave earlier links in place.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from linkfarm.backends.base import LinkBackend
from linkfarm.errors import InstallError
from linkfarm.logging import get_logger
from linkfarm.models import BackendKind, BatchResult, LinkOutcome, Package

logger = get_logger("backends.stow")


class StowBackend(LinkBackend):
    """Delegates whole batches to the ``stow`` executable."""

    kind = BackendKind.FARM_MANAGER

    def __init__(
        self,
        source_root: Path,
        target_root: Path,
        command: str = "stow",
    ) -> None:
        super().__init__(source_root, target_root)
        self.command = command

    def build_command(self, action: str | None = None) -> list[str]:
        """Build the stow invocation for ``action`` (None, "delete", "restow")."""
        cmd = [
            self.command,
            f"--dir={self.source_root.parent}",
            f"--target={self.target_root}",
        ]
        if action:
            cmd.append(f"--{action}")
        cmd.append(self.source_root.name)
        return cmd

    def _run(self, action: str | None, operation: str) -> None:
        cmd = self.build_command(action)
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise InstallError(f"Could not run {self.command}: {e}") from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout).strip()
            raise InstallError(
                f"Stow {operation} failed (exit {result.returncode})"
                + (f": {detail}" if detail else ""),
                hint="Check for conflicting files in the target directory",
            )

    def _batch(self, operation: str, packages: list[Package], outcome: LinkOutcome) -> BatchResult:
        batch = BatchResult(operation=operation, backend=self.kind)
        for package in packages:
            batch.add(package, outcome)
        return batch

    def install_all(self, packages: list[Package]) -> BatchResult:
        self.ensure_target()
        self._run(None, "install")
        return self._batch("install", packages, LinkOutcome.LINKED)

    def uninstall_all(self, packages: list[Package]) -> BatchResult:
        if not self.target_root.is_dir():
            return self._batch("uninstall", packages, LinkOutcome.ABSENT)
        self._run("delete", "uninstall")
        return self._batch("uninstall", packages, LinkOutcome.UNLINKED)

    def restow_all(self, packages: list[Package]) -> BatchResult:
        self.ensure_target()
        self._run("restow", "restow")
        return self._batch("restow", packages, LinkOutcome.LINKED)
