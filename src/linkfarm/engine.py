"""
Main linkfarm engine.

Ties the configured paths, the backend chosen for this run, the extension
manager and the hygiene checker together behind one object. The CLI maps
each command onto one engine method.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from linkfarm.backends import LinkBackend, create_backend, select_backend
from linkfarm.config import LinkFarmConfig
from linkfarm.extension import ExtensionManager
from linkfarm.git import GitClient
from linkfarm.hygiene import HygieneChecker
from linkfarm.logging import get_logger
from linkfarm.models import (
    BackendKind,
    BatchResult,
    ExtensionStatus,
    HygieneReport,
    Package,
    StatusReport,
)
from linkfarm.packages import enumerate_packages
from linkfarm.status import clean_dangling, collect_status

logger = get_logger("engine")


@dataclass
class SetupCheck:
    """Result of verifying the setup before installing."""

    backend: BackendKind
    source_root: Path
    package_count: int
    stow_path: str | None = None
    stowrc_present: bool = False


class LinkFarmEngine:
    """
    Installs packages as symlinks and manages the extension clone.

    The backend is resolved once, in the constructor, and used for the whole
    lifetime of the engine.

    Example:
        engine = LinkFarmEngine(LinkFarmConfig(target_root=Path("/tmp/t")))
        result = engine.install()
        print(result.succeeded, result.skipped, result.failed)
    """

    def __init__(
        self,
        config: LinkFarmConfig | None = None,
        backend_kind: BackendKind | None = None,
        git: GitClient | None = None,
    ) -> None:
        self.config = config or LinkFarmConfig()
        self.backend_kind = backend_kind or select_backend(
            self.config.backend, self.config.stow_command
        )
        self.backend: LinkBackend = create_backend(
            self.backend_kind,
            self.source_root,
            self.target_root,
            command=self.config.stow_command,
        )
        self.hygiene = HygieneChecker(
            self.config.ignore_path,
            self.config.ignore_entry,
            label=self.config.extension.label,
        )
        self.extension = ExtensionManager(
            self.config.extension_spec(),
            git=git,
            hygiene=self.hygiene,
        )
        logger.debug(
            "Engine ready: backend=%s source=%s target=%s",
            self.backend_kind.value,
            self.source_root,
            self.target_root,
        )

    @property
    def source_root(self) -> Path:
        return self.config.source_root

    @property
    def target_root(self) -> Path:
        return self.config.target_path

    # ------------------------------------------------------------------
    # Packages
    # ------------------------------------------------------------------

    def packages(self) -> list[Package]:
        return enumerate_packages(self.source_root, self.target_root)

    def check(self) -> SetupCheck:
        """Verify the source root exists and report how links will be made."""
        packages = self.packages()
        check = SetupCheck(
            backend=self.backend_kind,
            source_root=self.source_root,
            package_count=len(packages),
        )
        if self.backend_kind == BackendKind.FARM_MANAGER:
            check.stow_path = shutil.which(self.config.stow_command)
            check.stowrc_present = (self.config.repo_root / ".stowrc").is_file()
        return check

    def install(self) -> BatchResult:
        packages = self.packages()
        logger.info("Installing %d packages with %s", len(packages), self.backend_kind.value)
        return self.backend.install_all(packages)

    def uninstall(self) -> BatchResult:
        packages = self.packages()
        logger.info("Uninstalling %d packages with %s", len(packages), self.backend_kind.value)
        return self.backend.uninstall_all(packages)

    def restow(self) -> BatchResult:
        packages = self.packages()
        logger.info("Restowing %d packages with %s", len(packages), self.backend_kind.value)
        return self.backend.restow_all(packages)

    def status(self) -> StatusReport:
        return collect_status(
            self.target_root,
            self.backend_kind,
            extension_path=self.extension.path,
        )

    def clean(self) -> list[Path]:
        """Remove broken symlinks under the target root."""
        return clean_dangling(self.target_root, skip={self.extension.path})

    # ------------------------------------------------------------------
    # Extension
    # ------------------------------------------------------------------

    def install_extension(self) -> None:
        self.extension.install()

    def update_extension(self) -> None:
        self.extension.update()

    def remove_extension(self) -> bool:
        return self.extension.remove()

    def extension_status(self, remote: bool = False) -> ExtensionStatus:
        return self.extension.status(remote=remote)

    def git_check(self) -> HygieneReport:
        """Check that a present extension is excluded from version control."""
        name = self.config.extension.name
        present = self.extension.installed or (self.source_root / name).is_dir()
        return self.hygiene.check(present)

    def repair_gitignore(self) -> bool:
        return self.hygiene.repair()
