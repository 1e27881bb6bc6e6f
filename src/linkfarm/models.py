"""
Core data models for linkfarm.

Nothing here is persisted: installation state is always recomputed from the
filesystem, so these models only describe what a scan or a batch observed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class BackendKind(str, Enum):
    """Strategy used to create and remove package links."""

    FARM_MANAGER = "farm-manager"  # GNU Stow
    MANUAL_SYMLINK = "manual-symlink"  # os.symlink


@dataclass(frozen=True)
class Package:
    """A named directory under the source root, projected as one symlink."""

    name: str
    source_path: Path
    target_path: Path


class LinkOutcome(str, Enum):
    """Per-package result of a link or unlink step."""

    LINKED = "linked"
    UNLINKED = "unlinked"
    ABSENT = "absent"  # nothing to unlink
    CONFLICT = "conflict"  # a non-symlink occupies the target path
    FAILED = "failed"

    @property
    def ok(self) -> bool:
        return self in (LinkOutcome.LINKED, LinkOutcome.UNLINKED, LinkOutcome.ABSENT)


@dataclass
class PackageResult:
    """Outcome for a single package."""

    package: Package
    outcome: LinkOutcome
    message: str = ""

    @property
    def name(self) -> str:
        return self.package.name


@dataclass
class BatchResult:
    """Summary of an install/uninstall/restow batch."""

    operation: str
    backend: BackendKind
    results: list[PackageResult] = field(default_factory=list)

    def add(self, package: Package, outcome: LinkOutcome, message: str = "") -> PackageResult:
        result = PackageResult(package=package, outcome=outcome, message=message)
        self.results.append(result)
        return result

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.outcome.ok)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.outcome == LinkOutcome.CONFLICT)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.outcome == LinkOutcome.FAILED)

    @property
    def conflicts(self) -> list[PackageResult]:
        return [r for r in self.results if r.outcome == LinkOutcome.CONFLICT]

    @property
    def ok(self) -> bool:
        """True when nothing failed; conflicts alone do not count as failure."""
        return self.failed == 0


class EntryKind(str, Enum):
    """Classification of an entry found under the target root."""

    LINKED = "linked"
    EXTENSION = "extension"
    FOREIGN = "foreign"


@dataclass
class StatusEntry:
    """One entry of the target root."""

    name: str
    path: Path
    kind: EntryKind
    destination: str | None = None  # raw link text for symlinks
    dangling: bool = False


@dataclass
class StatusReport:
    """Result of scanning the target root."""

    backend: BackendKind
    target_root: Path
    installed: bool
    entries: list[StatusEntry] = field(default_factory=list)

    def by_kind(self, kind: EntryKind) -> list[StatusEntry]:
        return [e for e in self.entries if e.kind == kind]

    @property
    def linked(self) -> list[str]:
        return [e.name for e in self.by_kind(EntryKind.LINKED)]

    @property
    def foreign(self) -> list[str]:
        return [e.name for e in self.by_kind(EntryKind.FOREIGN)]


@dataclass(frozen=True)
class ExtensionSpec:
    """The singleton package cloned from a git remote."""

    name: str
    url: str
    branch: str
    target_path: Path

    @property
    def present(self) -> bool:
        return self.target_path.exists()


@dataclass
class ExtensionStatus:
    """Introspection of the extension clone."""

    installed: bool
    path: Path
    branch: str = ""
    latest_commit: str = ""
    remote_status: str | None = None


@dataclass
class HygieneReport:
    """Whether the extension is excluded from the enclosing repository."""

    ignore_file: Path
    entry: str
    extension_present: bool
    ignored: bool

    @property
    def needs_repair(self) -> bool:
        return self.extension_present and not self.ignored
