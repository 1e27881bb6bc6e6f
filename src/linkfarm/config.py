"""
Configuration models for linkfarm.

Provides a configuration system that can be loaded from YAML files,
overridden from the environment, or constructed programmatically.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml

from linkfarm.errors import ConfigurationError
from linkfarm.models import ExtensionSpec

BackendChoice = Literal["auto", "stow", "manual"]

DEFAULT_SOURCE_DIR = "opencode"
DEFAULT_TARGET_ROOT = "~/.config/opencode"
DEFAULT_EXTENSION_URL = "https://github.com/obra/superpowers.git"


def config_search_paths() -> list[Path]:
    """Config file locations, highest priority first."""
    return [
        Path.cwd() / "linkfarm.yaml",
        Path.cwd() / ".linkfarm.yaml",
        Path.home() / ".config" / "linkfarm" / "config.yaml",
    ]


def _backend_choice(value: str | None) -> BackendChoice:
    val = (value or "auto").lower()
    if val in ("auto", "stow", "manual"):
        return val  # type: ignore[return-value]
    raise ConfigurationError(
        f"Unknown backend: {value!r}",
        hint="Use one of: auto, stow, manual",
    )


@dataclass
class ExtensionConfig:
    """Settings for the git-sourced extension package."""

    name: str = "superpowers"
    url: str = DEFAULT_EXTENSION_URL
    branch: str = "main"
    label: str = "OpenCode superpowers extension (external git repo)"


@dataclass
class LinkFarmConfig:
    """
    Main configuration for linkfarm.

    Relative ``source_dir`` and ``ignore_file`` are resolved against
    ``repo_root``; ``target_root`` may use ``~``.

    Example YAML:
        source_dir: opencode
        target_root: ~/.config/opencode
        backend: auto
        strict: false
        extension:
          name: superpowers
          url: https://github.com/obra/superpowers.git
          branch: main
    """

    repo_root: Path = field(default_factory=Path.cwd)
    source_dir: Path = Path(DEFAULT_SOURCE_DIR)
    target_root: Path = Path(DEFAULT_TARGET_ROOT)

    backend: BackendChoice = "auto"
    stow_command: str = "stow"
    strict: bool = False  # conflicts force a non-zero exit

    ignore_file: Path = Path(".gitignore")
    extension: ExtensionConfig = field(default_factory=ExtensionConfig)

    @property
    def source_root(self) -> Path:
        path = self.source_dir.expanduser()
        if not path.is_absolute():
            path = self.repo_root / path
        return path.absolute()

    @property
    def target_path(self) -> Path:
        return self.target_root.expanduser().absolute()

    @property
    def ignore_path(self) -> Path:
        path = self.ignore_file.expanduser()
        if not path.is_absolute():
            path = self.repo_root / path
        return path

    @property
    def ignore_entry(self) -> str:
        """Ignore-list line for the extension, relative to ``repo_root``."""
        try:
            rel = self.source_root.relative_to(self.repo_root.absolute())
        except ValueError:
            rel = Path(self.source_root.name)
        return f"{rel.as_posix()}/{self.extension.name}/"

    def extension_spec(self) -> ExtensionSpec:
        ext = self.extension
        return ExtensionSpec(
            name=ext.name,
            url=ext.url,
            branch=ext.branch,
            target_path=self.target_path / ext.name,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any], repo_root: Path | None = None) -> LinkFarmConfig:
        """Create config from a dictionary."""
        ext_data = data.get("extension") or {}
        if not isinstance(ext_data, dict):
            raise ConfigurationError("'extension' must be a mapping")
        defaults = ExtensionConfig()
        extension = ExtensionConfig(
            name=ext_data.get("name", defaults.name),
            url=ext_data.get("url", defaults.url),
            branch=ext_data.get("branch", defaults.branch),
            label=ext_data.get("label", defaults.label),
        )

        root = data.get("repo_root")
        return cls(
            repo_root=Path(root) if root else (repo_root or Path.cwd()),
            source_dir=Path(data.get("source_dir", DEFAULT_SOURCE_DIR)),
            target_root=Path(data.get("target_root", DEFAULT_TARGET_ROOT)),
            backend=_backend_choice(data.get("backend")),
            stow_command=data.get("stow_command", "stow"),
            strict=bool(data.get("strict", False)),
            ignore_file=Path(data.get("ignore_file", ".gitignore")),
            extension=extension,
        )

    @classmethod
    def from_yaml(cls, path: Path) -> LinkFarmConfig:
        """Load config from a YAML file; relative paths anchor at its directory."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid config file {path}: {e}") from e
        return cls.from_dict(data or {}, repo_root=path.parent.absolute())

    @classmethod
    def from_yaml_string(cls, content: str) -> LinkFarmConfig:
        """Load config from a YAML string."""
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid config: {e}") from e
        return cls.from_dict(data or {})

    @classmethod
    def load(cls, path: Path | None = None) -> tuple[LinkFarmConfig, Path | None]:
        """
        Load config from ``path`` or the first existing search path.

        Environment overrides (``LINKFARM_SOURCE``, ``LINKFARM_TARGET``,
        ``LINKFARM_BACKEND``) are applied last. Returns the config and the file
        it was read from, if any.
        """
        loaded_from: Path | None = None
        if path is not None:
            if not path.is_file():
                raise ConfigurationError(f"Config file not found: {path}")
            config = cls.from_yaml(path)
            loaded_from = path
        else:
            config = cls()
            for candidate in config_search_paths():
                if candidate.is_file():
                    config = cls.from_yaml(candidate)
                    loaded_from = candidate
                    break

        config.apply_env()
        return config, loaded_from

    def apply_env(self) -> None:
        """Apply ``LINKFARM_*`` environment overrides in place.

        A relative ``LINKFARM_SOURCE`` is taken from the working directory,
        not from the config file location.
        """
        if source := os.environ.get("LINKFARM_SOURCE"):
            self.source_dir = Path(source).expanduser().absolute()
        if target := os.environ.get("LINKFARM_TARGET"):
            self.target_root = Path(target)
        if backend := os.environ.get("LINKFARM_BACKEND"):
            self.backend = _backend_choice(backend)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a dictionary."""
        return {
            "repo_root": str(self.repo_root),
            "source_dir": str(self.source_dir),
            "target_root": str(self.target_root),
            "backend": self.backend,
            "stow_command": self.stow_command,
            "strict": self.strict,
            "ignore_file": str(self.ignore_file),
            "extension": {
                "name": self.extension.name,
                "url": self.extension.url,
                "branch": self.extension.branch,
                "label": self.extension.label,
            },
        }
