"""
Extension lifecycle: clone, fast-forward, remove and inspect.

The extension is a real git clone living directly in the target root,
unlike regular packages which are symlinks back into the source root.

    absent --install--> present --update--> present
       ^                   |
       +------remove-------+
"""

from __future__ import annotations

import shutil
from pathlib import Path

from linkfarm.errors import (
    AlreadyInstalledError,
    FetchError,
    GitError,
    HygieneError,
    NotInstalledError,
    RemoveError,
    UpdateError,
)
from linkfarm.git import GitClient
from linkfarm.hygiene import HygieneChecker
from linkfarm.logging import get_logger
from linkfarm.models import ExtensionSpec, ExtensionStatus

logger = get_logger("extension")


class ExtensionManager:
    """Manages the single git-sourced extension package."""

    def __init__(
        self,
        spec: ExtensionSpec,
        git: GitClient | None = None,
        hygiene: HygieneChecker | None = None,
    ) -> None:
        self.spec = spec
        self.git = git or GitClient()
        self.hygiene = hygiene

    @property
    def path(self) -> Path:
        return self.spec.target_path

    @property
    def installed(self) -> bool:
        return self.path.exists() or self.path.is_symlink()

    def install(self) -> None:
        """Clone the extension and register it in the ignore list.

        Raises:
            AlreadyInstalledError: the target path already exists.
            FetchError: the clone failed; no partial directory is left.
        """
        if self.installed:
            raise AlreadyInstalledError(
                f"{self.spec.name} already installed at {self.path}",
                hint="Run 'linkfarm update-extension' to update or "
                "'linkfarm remove-extension' to remove",
            )

        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Cloning %s into %s", self.spec.url, self.path)
        try:
            self.git.clone(self.spec.url, self.path)
        except GitError as e:
            if self.path.exists():
                shutil.rmtree(self.path, ignore_errors=True)
            raise FetchError(f"Failed to clone {self.spec.name}: {e}") from e

        if self.hygiene is not None:
            try:
                self.hygiene.repair()
            except HygieneError as e:
                logger.warning("Installed %s but could not update ignore file: %s", self.spec.name, e)

    def update(self) -> None:
        """Fast-forward the clone. The clone is left as-is on failure."""
        if not self.installed:
            raise NotInstalledError(
                f"{self.spec.name} not installed",
                hint="Run 'linkfarm install-extension' first",
            )

        logger.info("Updating %s from origin/%s", self.spec.name, self.spec.branch)
        try:
            self.git.pull(self.path, self.spec.branch)
        except GitError as e:
            raise UpdateError(f"Failed to update {self.spec.name}: {e}") from e

    def remove(self) -> bool:
        """Delete the clone. Returns False if there was nothing to remove."""
        if not self.installed:
            logger.debug("%s not installed - nothing to remove", self.spec.name)
            return False

        try:
            if self.path.is_symlink():
                self.path.unlink()
            else:
                shutil.rmtree(self.path)
        except OSError as e:
            raise RemoveError(f"Failed to remove {self.path}: {e}") from e
        logger.info("Removed %s", self.path)
        return True

    def status(self, remote: bool = False) -> ExtensionStatus:
        """Report branch and latest commit; ``remote`` also fetches."""
        if not self.installed:
            return ExtensionStatus(installed=False, path=self.path)

        status = ExtensionStatus(
            installed=True,
            path=self.path,
            branch=self.git.current_branch(self.path),
            latest_commit=self.git.latest_commit(self.path),
        )
        if remote:
            status.remote_status = self.git.tracking_status(self.path)
        return status
