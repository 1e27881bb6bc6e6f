"""
Thin wrapper around the ``git`` executable.

Only the handful of primitives the extension lifecycle needs. Calls have no
timeout; a hung network operation blocks the run.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from linkfarm.errors import GitError
from linkfarm.logging import get_logger

logger = get_logger("git")


class GitClient:
    """Runs git commands and raises :class:`GitError` on failure."""

    def __init__(self, executable: str = "git") -> None:
        self.executable = executable

    def run(self, args: list[str], cwd: Path | None = None) -> str:
        """Run ``git <args>`` and return stripped stdout."""
        cmd = [self.executable, *args]
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                cwd=str(cwd) if cwd else None,
            )
        except OSError as e:
            raise GitError(f"Could not run {self.executable}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise GitError(
                f"git {args[0]} failed: {stderr or f'exit code {result.returncode}'}",
                stderr=stderr,
                returncode=result.returncode,
            )
        return result.stdout.strip()

    def clone(self, url: str, dest: Path) -> None:
        self.run(["clone", url, str(dest)])

    def pull(self, repo: Path, branch: str, remote: str = "origin") -> None:
        """Fast-forward ``repo`` to ``remote/branch``; refuses to merge."""
        self.run(["pull", "--ff-only", remote, branch], cwd=repo)

    def current_branch(self, repo: Path) -> str:
        return self.run(["branch", "--show-current"], cwd=repo)

    def latest_commit(self, repo: Path) -> str:
        return self.run(["log", "-1", "--oneline"], cwd=repo)

    def tracking_status(self, repo: Path) -> str:
        """Fetch, then return the ``Your branch ...`` line of ``git status``."""
        self.run(["fetch"], cwd=repo)
        output = self.run(["status", "-uno"], cwd=repo)
        for line in output.splitlines():
            if line.startswith("Your branch"):
                return line
        return ""
