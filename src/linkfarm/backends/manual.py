"""
Manual symlink backend.

Links packages one at a time with ``os.symlink``. A package whose target path
is occupied by a real file or directory is reported as a conflict and the
batch continues with the next package.
"""

from __future__ import annotations

import os
from pathlib import Path

from linkfarm.backends.base import LinkBackend
from linkfarm.logging import get_logger
from linkfarm.models import BackendKind, BatchResult, LinkOutcome, Package

logger = get_logger("backends.manual")


def force_symlink(source: Path, link: Path) -> None:
    """Point ``link`` at ``source``, replacing an existing symlink atomically.

    The new link is created under a temporary name and renamed over ``link``,
    so an interrupted run leaves either the old link or the new one. Raises
    ``OSError`` if ``link`` is a directory.
    """
    tmp = link.with_name(f".{link.name}.linkfarm-{os.getpid()}")
    try:
        tmp.unlink()
    except FileNotFoundError:
        pass
    os.symlink(source, tmp, target_is_directory=True)
    try:
        os.replace(tmp, link)
    except OSError:
        tmp.unlink()
        raise


class ManualSymlinkBackend(LinkBackend):
    """Per-package ``ln -sfn`` equivalent."""

    kind = BackendKind.MANUAL_SYMLINK

    def install_all(self, packages: list[Package]) -> BatchResult:
        self.ensure_target()
        batch = BatchResult(operation="install", backend=self.kind)

        for package in packages:
            link = package.target_path
            if link.exists() and not link.is_symlink():
                logger.warning("%s exists and is not a symlink - skipping", link)
                batch.add(package, LinkOutcome.CONFLICT, "exists and is not a symlink")
                continue

            try:
                force_symlink(package.source_path, link)
            except IsADirectoryError:
                # Became a real directory after the check above.
                logger.warning("%s exists and is not a symlink - skipping", link)
                batch.add(package, LinkOutcome.CONFLICT, "exists and is not a symlink")
                continue
            except OSError as e:
                logger.error("Failed to link %s: %s", package.name, e)
                batch.add(package, LinkOutcome.FAILED, str(e))
                continue

            logger.debug("Linked %s -> %s", link, package.source_path)
            batch.add(package, LinkOutcome.LINKED)

        return batch

    def uninstall_all(self, packages: list[Package]) -> BatchResult:
        batch = BatchResult(operation="uninstall", backend=self.kind)

        for package in packages:
            link = package.target_path
            if link.is_symlink():
                try:
                    link.unlink()
                except FileNotFoundError:
                    batch.add(package, LinkOutcome.ABSENT)
                    continue
                except OSError as e:
                    logger.error("Failed to remove %s: %s", link, e)
                    batch.add(package, LinkOutcome.FAILED, str(e))
                    continue
                logger.debug("Removed %s", link)
                batch.add(package, LinkOutcome.UNLINKED)
            elif link.exists():
                logger.warning("%s is not a symlink - leaving it in place", link)
                batch.add(package, LinkOutcome.CONFLICT, "not a symlink")
            else:
                batch.add(package, LinkOutcome.ABSENT)

        return batch
