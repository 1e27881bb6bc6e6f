"""Tests for CLI commands."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from linkfarm.cli import _create_engine, main
from linkfarm.models import BackendKind


class MockArgs:
    """Mock argparse namespace for testing."""

    def __init__(self, **kwargs):
        self.config = kwargs.get("config")
        self.source = kwargs.get("source")
        self.target = kwargs.get("target")
        self.backend = kwargs.get("backend")
        self.strict = kwargs.get("strict")


@pytest.fixture
def cli_args(
    repo_root: Path, source_root: Path, target_root: Path, tmp_path: Path, fake_git, monkeypatch
) -> list[str]:
    """Global options pointing the CLI at the test repository."""
    monkeypatch.chdir(repo_root)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in ("LINKFARM_SOURCE", "LINKFARM_TARGET", "LINKFARM_BACKEND"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("linkfarm.extension.GitClient", type(fake_git))
    return ["--source", str(source_root), "--target", str(target_root), "--backend", "manual"]


class TestCreateEngine:
    """Tests for _create_engine helper."""

    def test_overrides(self, cli_args, source_root: Path, target_root: Path) -> None:
        """Should apply CLI overrides on top of the config."""
        args = MockArgs(source=str(source_root), target=str(target_root), backend="manual", strict=True)

        engine = _create_engine(args)

        assert engine.source_root == source_root
        assert engine.target_root == target_root
        assert engine.backend_kind == BackendKind.MANUAL_SYMLINK
        assert engine.config.strict is True

    def test_config_file(self, cli_args, repo_root: Path, target_root: Path) -> None:
        """Should read settings from --config."""
        config_file = repo_root / "custom.yaml"
        config_file.write_text(f"backend: manual\ntarget_root: {target_root}\n")

        engine = _create_engine(MockArgs(config=str(config_file)))

        assert engine.target_root == target_root
        assert engine.source_root == repo_root / "opencode"

    def test_relative_source_uses_working_directory(
        self, cli_args, tmp_path: Path, target_root: Path, monkeypatch
    ) -> None:
        """Should resolve a relative --source against the working directory, not the config file."""
        config_dir = tmp_path / "home" / ".config" / "linkfarm"
        config_dir.mkdir(parents=True)
        config_file = config_dir / "config.yaml"
        config_file.write_text(f"backend: manual\ntarget_root: {target_root}\n")
        work = tmp_path / "work"
        (work / "pkgs" / "a").mkdir(parents=True)
        monkeypatch.chdir(work)

        main(["-c", str(config_file), "--source", "pkgs", "install"])

        assert (target_root / "a").is_symlink()
        assert (target_root / "a").resolve() == (work / "pkgs" / "a").resolve()


class TestPackageCommands:
    """Tests for install, uninstall, restow, status, list and clean."""

    def test_install(self, cli_args, target_root: Path, capsys) -> None:
        """Should link every package and print a summary."""
        main([*cli_args, "install"])

        out = capsys.readouterr().out
        assert "Installing with ln -s" in out
        assert "3 ok, 0 skipped, 0 failed" in out
        assert (target_root / "agent").is_symlink()

    def test_install_conflict_is_warning(self, cli_args, target_root: Path, capsys) -> None:
        """Should exit zero with a conflict unless strict."""
        (target_root / "command").mkdir(parents=True)

        main([*cli_args, "install"])

        out = capsys.readouterr().out
        assert "command exists and is not a symlink" in out
        assert "2 ok, 1 skipped, 0 failed" in out

    def test_install_conflict_strict(self, cli_args, target_root: Path) -> None:
        """Should exit non-zero with a conflict in strict mode."""
        (target_root / "command").mkdir(parents=True)

        with pytest.raises(SystemExit) as exc_info:
            main([*cli_args, "--strict", "install"])

        assert exc_info.value.code == 1
        assert (target_root / "agent").is_symlink()

    def test_missing_source(self, cli_args, tmp_path: Path, capsys) -> None:
        """Should exit non-zero when the source root is missing."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--source", str(tmp_path / "nope"), "--backend", "manual", "install"])

        assert exc_info.value.code == 1
        assert "Source directory not found" in capsys.readouterr().out

    def test_uninstall(self, cli_args, target_root: Path, capsys) -> None:
        """Should remove the links."""
        main([*cli_args, "install"])
        main([*cli_args, "uninstall"])

        assert "Uninstallation complete" in capsys.readouterr().out
        assert list(target_root.iterdir()) == []

    def test_restow(self, cli_args, target_root: Path, capsys) -> None:
        """Should leave every package linked."""
        main([*cli_args, "restow"])

        assert "Restow complete" in capsys.readouterr().out
        assert len(list(target_root.iterdir())) == 3

    def test_status_not_installed(self, cli_args, capsys) -> None:
        """Should say not installed when the target root is absent."""
        main([*cli_args, "status"])

        assert "Not installed" in capsys.readouterr().out

    def test_status(self, cli_args, target_root: Path, capsys) -> None:
        """Should list links and foreign entries."""
        main([*cli_args, "install"])
        (target_root / "notes").mkdir()
        capsys.readouterr()

        main([*cli_args, "status"])

        out = capsys.readouterr().out
        assert "agent" in out
        assert "notes" in out
        assert "3 linked, 1 foreign" in out

    def test_list(self, cli_args, capsys) -> None:
        """Should list available packages."""
        main([*cli_args, "list"])

        out = capsys.readouterr().out
        assert "Available packages:" in out
        assert "  agent" in out
        assert "README.md" not in out

    def test_clean(self, cli_args, target_root: Path, tmp_path: Path, capsys) -> None:
        """Should remove broken links."""
        target_root.mkdir(parents=True)
        (target_root / "old").symlink_to(tmp_path / "gone")

        main([*cli_args, "clean"])

        assert "1 removed" in capsys.readouterr().out
        assert not (target_root / "old").is_symlink()

    def test_check(self, cli_args, capsys) -> None:
        """Should verify the setup."""
        main([*cli_args, "check"])

        out = capsys.readouterr().out
        assert "Using ln -s" in out
        assert "Setup verified" in out


class TestExtensionCommands:
    """Tests for the extension commands."""

    def test_install_extension(self, cli_args, repo_root: Path, capsys) -> None:
        """Should clone and register the extension in .gitignore."""
        main([*cli_args, "install-extension"])

        assert "installed successfully" in capsys.readouterr().out
        assert "opencode/superpowers/" in (repo_root / ".gitignore").read_text()

    def test_install_extension_twice(self, cli_args, capsys) -> None:
        """Should exit non-zero with guidance on the second install."""
        main([*cli_args, "install-extension"])

        with pytest.raises(SystemExit) as exc_info:
            main([*cli_args, "install-extension"])

        assert exc_info.value.code == 1
        assert "update-extension" in capsys.readouterr().out

    def test_update_not_installed(self, cli_args, capsys) -> None:
        """Should exit non-zero when there is nothing to update."""
        with pytest.raises(SystemExit) as exc_info:
            main([*cli_args, "update-extension"])

        assert exc_info.value.code == 1
        assert "not installed" in capsys.readouterr().out

    def test_remove_absent(self, cli_args, capsys) -> None:
        """Should report a no-op and exit zero."""
        main([*cli_args, "remove-extension"])

        assert "not installed" in capsys.readouterr().out

    def test_status_after_remove(self, cli_args, capsys) -> None:
        """Should report not installed after removal."""
        main([*cli_args, "install-extension"])
        main([*cli_args, "extension-status"])
        assert "Current branch: main" in capsys.readouterr().out

        main([*cli_args, "remove-extension"])
        main([*cli_args, "extension-status"])

        assert "not installed" in capsys.readouterr().out

    def test_git_check_and_repair(self, cli_args, target_root: Path, capsys) -> None:
        """Should warn about a missing entry and fix it."""
        (target_root / "superpowers").mkdir(parents=True)

        main([*cli_args, "git-check"])
        assert "WARNING" in capsys.readouterr().out

        main([*cli_args, "gitignore-extension"])
        assert "Added superpowers" in capsys.readouterr().out

        main([*cli_args, "git-check"])
        assert "properly excluded" in capsys.readouterr().out

    def test_install_all_and_uninstall_all(self, cli_args, target_root: Path, capsys) -> None:
        """Should install and remove packages plus the extension."""
        main([*cli_args, "install-all"])
        assert "Complete installation finished" in capsys.readouterr().out
        assert (target_root / "superpowers").is_dir()

        main([*cli_args, "uninstall-all"])
        assert "Complete uninstallation finished" in capsys.readouterr().out
        assert list(target_root.iterdir()) == []

    def test_uninstall_all_removal_failure(self, cli_args, capsys) -> None:
        """Should report a failed extension removal and exit non-zero."""
        main([*cli_args, "install-all"])
        capsys.readouterr()

        with patch("linkfarm.extension.shutil.rmtree", side_effect=PermissionError("denied")):
            with pytest.raises(SystemExit) as exc_info:
                main([*cli_args, "uninstall-all"])

        assert exc_info.value.code == 1
        assert "Failed to remove" in capsys.readouterr().out

    def test_git_check_non_utf8_ignore_file(self, cli_args, repo_root: Path, target_root: Path, capsys) -> None:
        """Should stay advisory when the ignore file is not UTF-8."""
        (target_root / "superpowers").mkdir(parents=True)
        (repo_root / ".gitignore").write_bytes(b"caf\xe9/\nopencode/superpowers/\n")

        main([*cli_args, "git-check"])

        assert "properly excluded" in capsys.readouterr().out


class TestConfigCommands:
    """Tests for config subcommands."""

    def test_config_init(self, cli_args, repo_root: Path, capsys) -> None:
        """Should write a default config file."""
        main(["config", "init"])

        assert (repo_root / "linkfarm.yaml").is_file()
        assert "Created config file" in capsys.readouterr().out

    def test_config_init_exists(self, cli_args, repo_root: Path) -> None:
        """Should refuse to overwrite an existing file."""
        (repo_root / "linkfarm.yaml").write_text("backend: manual\n")

        with pytest.raises(SystemExit):
            main(["config", "init"])

    def test_config_show(self, cli_args, capsys) -> None:
        """Should print the effective configuration."""
        main(["config", "show"])

        out = capsys.readouterr().out
        assert "No config file found" in out
        assert "superpowers" in out

    def test_log_file(self, cli_args, tmp_path: Path) -> None:
        """Should write a debug log when --log-file is given."""
        log_file = tmp_path / "linkfarm.log"

        main(["--log-file", str(log_file), *cli_args, "install"])

        assert "linkfarm.backends.manual" in log_file.read_text()

    def test_no_command(self, cli_args, capsys) -> None:
        """Should print help without a command."""
        main([])

        assert "usage" in capsys.readouterr().out.lower()
