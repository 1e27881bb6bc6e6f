"""
linkfarm - install configuration packages as a symlink farm.

Every immediate subdirectory of a source root is a package. Installing a
package creates one symlink in the target root pointing back at it, using
GNU Stow when available and plain symlinks otherwise. One additional
package, the extension, is cloned from a git remote instead.

Example:
    from linkfarm import LinkFarmConfig, LinkFarmEngine

    engine = LinkFarmEngine(LinkFarmConfig())
    result = engine.install()
    for entry in engine.status().entries:
        print(entry.name, entry.kind.value)
"""

from linkfarm.backends import (
    LinkBackend,
    ManualSymlinkBackend,
    StowBackend,
    create_backend,
    probe_backend,
)
from linkfarm.config import ExtensionConfig, LinkFarmConfig
from linkfarm.engine import LinkFarmEngine, SetupCheck
from linkfarm.errors import (
    AlreadyInstalledError,
    ConfigurationError,
    ExtensionStateError,
    FetchError,
    GitError,
    InstallError,
    LinkFarmError,
    NotInstalledError,
    UpdateError,
)
from linkfarm.extension import ExtensionManager
from linkfarm.git import GitClient
from linkfarm.hygiene import HygieneChecker
from linkfarm.models import (
    BackendKind,
    BatchResult,
    EntryKind,
    ExtensionSpec,
    ExtensionStatus,
    HygieneReport,
    LinkOutcome,
    Package,
    PackageResult,
    StatusEntry,
    StatusReport,
)
from linkfarm.packages import enumerate_packages
from linkfarm.status import clean_dangling, collect_status

__version__ = "0.1.0"

__all__ = [
    # Engine
    "LinkFarmEngine",
    "SetupCheck",
    # Config
    "LinkFarmConfig",
    "ExtensionConfig",
    # Backends
    "LinkBackend",
    "ManualSymlinkBackend",
    "StowBackend",
    "create_backend",
    "probe_backend",
    # Components
    "ExtensionManager",
    "GitClient",
    "HygieneChecker",
    "enumerate_packages",
    "collect_status",
    "clean_dangling",
    # Models
    "BackendKind",
    "BatchResult",
    "EntryKind",
    "ExtensionSpec",
    "ExtensionStatus",
    "HygieneReport",
    "LinkOutcome",
    "Package",
    "PackageResult",
    "StatusEntry",
    "StatusReport",
    # Errors
    "LinkFarmError",
    "ConfigurationError",
    "InstallError",
    "GitError",
    "FetchError",
    "UpdateError",
    "ExtensionStateError",
    "AlreadyInstalledError",
    "NotInstalledError",
]
