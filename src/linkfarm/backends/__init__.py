"""Link backends: GNU Stow or plain symlinks."""

from linkfarm.backends.base import LinkBackend
from linkfarm.backends.manual import ManualSymlinkBackend, force_symlink
from linkfarm.backends.probe import create_backend, probe_backend, select_backend
from linkfarm.backends.stow import StowBackend

__all__ = [
    "LinkBackend",
    "ManualSymlinkBackend",
    "StowBackend",
    "create_backend",
    "force_symlink",
    "probe_backend",
    "select_backend",
]
