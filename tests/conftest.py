"""Shared pytest fixtures for linkfarm tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from linkfarm import LinkFarmConfig, LinkFarmEngine
from linkfarm.errors import GitError
from linkfarm.git import GitClient
from linkfarm.models import BackendKind


class FakeGit(GitClient):
    """GitClient that works on the local filesystem only."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, Path]] = []
        self.fail_clone = False
        self.fail_pull = False

    def clone(self, url: str, dest: Path) -> None:
        self.calls.append(("clone", dest))
        dest.mkdir(parents=True)
        (dest / ".git").mkdir()
        if self.fail_clone:
            raise GitError("git clone failed: could not resolve host")
        (dest / "README.md").write_text("# extension\n")

    def pull(self, repo: Path, branch: str, remote: str = "origin") -> None:
        self.calls.append(("pull", repo))
        if self.fail_pull:
            raise GitError("git pull failed: Not possible to fast-forward, aborting.")
        (repo / "CHANGELOG.md").write_text("updated\n")

    def current_branch(self, repo: Path) -> str:
        return "main"

    def latest_commit(self, repo: Path) -> str:
        return "abc1234 Initial commit"

    def tracking_status(self, repo: Path) -> str:
        self.calls.append(("fetch", repo))
        return "Your branch is up to date with 'origin/main'."


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Repository with an ``opencode`` source dir holding three packages."""
    root = tmp_path / "repo"
    source = root / "opencode"
    for name in ("agent", "command", "skill"):
        (source / name).mkdir(parents=True)
        (source / name / f"{name}.md").write_text(f"# {name}\n")
    (source / "README.md").write_text("not a package\n")
    (root / ".gitignore").write_text("*.pyc\n")
    return root


@pytest.fixture
def source_root(repo_root: Path) -> Path:
    return repo_root / "opencode"


@pytest.fixture
def target_root(tmp_path: Path) -> Path:
    return tmp_path / "home" / ".config" / "opencode"


@pytest.fixture
def config(repo_root: Path, target_root: Path) -> LinkFarmConfig:
    return LinkFarmConfig(
        repo_root=repo_root,
        source_dir=Path("opencode"),
        target_root=target_root,
        backend="manual",
    )


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture
def engine(config: LinkFarmConfig, fake_git: FakeGit) -> LinkFarmEngine:
    """Engine using manual symlinks and a filesystem-only git."""
    return LinkFarmEngine(
        config=config,
        backend_kind=BackendKind.MANUAL_SYMLINK,
        git=fake_git,
    )
