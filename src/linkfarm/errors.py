"""
Error kinds raised by linkfarm operations.

Per-package conflicts are not exceptions: they are collected as
``LinkOutcome.CONFLICT`` results so a batch always runs to completion.
"""

from __future__ import annotations


class LinkFarmError(Exception):
    """Base class for all linkfarm errors.

    ``hint`` carries optional guidance shown to the user below the message.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(LinkFarmError):
    """Raised when the setup is unusable (e.g. the source root is missing)."""


class InstallError(LinkFarmError):
    """Raised when a farm-manager batch link/unlink fails."""


class GitError(LinkFarmError):
    """Raised when a git command exits non-zero."""

    def __init__(self, message: str, stderr: str = "", returncode: int = 1) -> None:
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode


class FetchError(LinkFarmError):
    """Raised when cloning the extension fails."""


class UpdateError(LinkFarmError):
    """Raised when fast-forwarding the extension clone fails."""


class ExtensionStateError(LinkFarmError):
    """Precondition violation on the extension lifecycle."""


class AlreadyInstalledError(ExtensionStateError):
    """The extension is already present at its target path."""


class NotInstalledError(ExtensionStateError):
    """The extension is not present at its target path."""


class HygieneError(LinkFarmError):
    """Raised when the ignore file cannot be read or appended to."""


class RemoveError(LinkFarmError):
    """Raised when the extension clone cannot be deleted."""
