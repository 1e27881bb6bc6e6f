"""
Command-line interface for linkfarm.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from pathlib import Path

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from linkfarm.config import LinkFarmConfig, config_search_paths
from linkfarm.engine import LinkFarmEngine
from linkfarm.errors import AlreadyInstalledError, LinkFarmError
from linkfarm.logging import setup_logging
from linkfarm.models import BackendKind, BatchResult, EntryKind, LinkOutcome

console = Console()

_BACKEND_LABELS = {
    BackendKind.FARM_MANAGER: "stow",
    BackendKind.MANUAL_SYMLINK: "ln -s",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Install configuration packages as a symlink farm",
        prog="linkfarm",
    )

    # Global options
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output (debug logging)",
    )
    parser.add_argument("--log-file", help="Also write a debug log to this file")
    parser.add_argument("-c", "--config", help="Config file (default: search paths)")
    parser.add_argument("--source", help="Source directory holding the packages")
    parser.add_argument("--target", help="Target directory receiving the links")
    parser.add_argument(
        "--backend",
        choices=["auto", "stow", "manual"],
        help="Link backend (default: auto-detect stow)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Exit non-zero when a package conflicts",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("check", help="Verify setup")
    subparsers.add_parser("install", help="Install all packages")
    subparsers.add_parser("uninstall", help="Uninstall all packages")
    subparsers.add_parser("restow", help="Refresh all package links")
    subparsers.add_parser("status", help="Show installation status")
    subparsers.add_parser("list", help="List available packages")
    subparsers.add_parser("clean", help="Remove broken symlinks in target")

    subparsers.add_parser("install-extension", help="Clone the extension")
    subparsers.add_parser("update-extension", help="Fast-forward the extension")
    subparsers.add_parser("remove-extension", help="Delete the extension")
    ext_status_parser = subparsers.add_parser(
        "extension-status", help="Show extension branch and commit"
    )
    ext_status_parser.add_argument(
        "--remote",
        action="store_true",
        help="Fetch and compare with the remote branch",
    )
    subparsers.add_parser("git-check", help="Check the extension is git-ignored")
    subparsers.add_parser("gitignore-extension", help="Add the extension to the ignore file")

    subparsers.add_parser("install-all", help="Install packages and the extension")
    subparsers.add_parser("uninstall-all", help="Uninstall packages and the extension")

    # Config command with subcommands
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_command", help="Config commands")
    config_subparsers.add_parser("show", help="Show current configuration")
    config_init_parser = config_subparsers.add_parser("init", help="Initialize a new config file")
    config_init_parser.add_argument(
        "-o",
        "--output",
        default="linkfarm.yaml",
        help="Output file path",
    )
    config_subparsers.add_parser("path", help="Show config file paths")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        "DEBUG" if getattr(args, "verbose", False) else "WARNING",
        log_file=getattr(args, "log_file", None),
    )

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return

    try:
        handler(args)
    except LinkFarmError as e:
        _print_error(e)
        sys.exit(1)


def _print_error(error: LinkFarmError) -> None:
    if isinstance(error, AlreadyInstalledError):
        console.print(f"[yellow]⚠ {escape(str(error))}[/yellow]")
    else:
        console.print(f"[red]✗ {escape(str(error))}[/red]")
    if error.hint:
        console.print(f"  {error.hint}")


def _create_engine(args: argparse.Namespace) -> LinkFarmEngine:
    """Create an engine from the config file and CLI overrides."""
    config_path = getattr(args, "config", None)
    config, _ = LinkFarmConfig.load(Path(config_path) if config_path else None)

    if getattr(args, "source", None):
        config.source_dir = Path(args.source).expanduser().absolute()
    if getattr(args, "target", None):
        config.target_root = Path(args.target)
    if getattr(args, "backend", None):
        config.backend = args.backend
    if getattr(args, "strict", None) is not None:
        config.strict = args.strict

    return LinkFarmEngine(config=config)


def _print_batch(result: BatchResult) -> None:
    for r in result.results:
        if r.outcome == LinkOutcome.LINKED:
            console.print(f"  [green]✓[/green] {r.name}")
        elif r.outcome == LinkOutcome.UNLINKED:
            console.print(f"  Removed {r.name}")
        elif r.outcome == LinkOutcome.CONFLICT:
            console.print(f"  [yellow]✗ {r.name} {r.message} - skipping[/yellow]")
        elif r.outcome == LinkOutcome.FAILED:
            console.print(f"  [red]✗ {r.name}: {r.message}[/red]")

    console.print(
        f"\n[bold]Summary:[/bold] {result.succeeded} ok, "
        f"{result.skipped} skipped, {result.failed} failed"
    )


def _finish_batch(engine: LinkFarmEngine, result: BatchResult, done: str) -> None:
    _print_batch(result)
    if not result.ok or (engine.config.strict and result.skipped):
        console.print(f"[red]✗ {result.operation.capitalize()} finished with problems[/red]")
        sys.exit(1)
    console.print(f"[green]✓ {done}[/green]")


def cmd_check(args: argparse.Namespace) -> None:
    """Verify setup."""
    engine = _create_engine(args)
    check = engine.check()

    if check.backend == BackendKind.FARM_MANAGER:
        console.print(f"[green]✓[/green] Using stow: {check.stow_path or engine.config.stow_command}")
        if not check.stowrc_present:
            console.print("[yellow]Warning: .stowrc not found[/yellow]")
    elif engine.config.backend == "manual":
        console.print("[green]✓[/green] Using ln -s")
    else:
        console.print("[yellow]⚠ stow not found - will use ln -s instead[/yellow]")

    console.print(f"[green]✓[/green] {check.package_count} packages in {check.source_root}")
    console.print("[green]✓ Setup verified[/green]")


def cmd_install(args: argparse.Namespace) -> None:
    """Install all packages."""
    engine = _create_engine(args)
    console.print(f"Installing with {_BACKEND_LABELS[engine.backend_kind]}...")
    _finish_batch(engine, engine.install(), "Installation complete")


def cmd_uninstall(args: argparse.Namespace) -> None:
    """Uninstall all packages."""
    engine = _create_engine(args)
    console.print(f"Uninstalling with {_BACKEND_LABELS[engine.backend_kind]}...")
    _finish_batch(engine, engine.uninstall(), "Uninstallation complete")


def cmd_restow(args: argparse.Namespace) -> None:
    """Refresh all package links."""
    engine = _create_engine(args)
    console.print(f"Restowing with {_BACKEND_LABELS[engine.backend_kind]}...")
    _finish_batch(engine, engine.restow(), "Restow complete")


def cmd_status(args: argparse.Namespace) -> None:
    """Show installation status."""
    engine = _create_engine(args)
    report = engine.status()

    console.print(f"Installation method: {_BACKEND_LABELS[report.backend]}")
    console.print(f"Target: {report.target_root}\n")

    if not report.installed:
        console.print("Installed packages:\n  Not installed")
        return

    table = Table(title="Installed packages")
    table.add_column("Name", style="cyan")
    table.add_column("State")
    table.add_column("Destination", style="dim")

    for entry in report.entries:
        if entry.kind == EntryKind.LINKED:
            state = "[red]✗ broken[/red]" if entry.dangling else "[green]✓ linked[/green]"
            table.add_row(entry.name, state, entry.destination or "")
        elif entry.kind == EntryKind.EXTENSION:
            table.add_row(entry.name, "[green]✓ extension[/green]", str(entry.path))
        else:
            table.add_row(entry.name, "[yellow]⚠ not a symlink[/yellow]", "")

    console.print(table)
    console.print(
        f"\n[dim]Total: {len(report.linked)} linked, {len(report.foreign)} foreign[/dim]"
    )


def cmd_list(args: argparse.Namespace) -> None:
    """List available packages."""
    engine = _create_engine(args)
    packages = engine.packages()

    console.print("Available packages:")
    if not packages:
        console.print("  None found")
        return
    for package in packages:
        console.print(f"  {package.name}")


def cmd_clean(args: argparse.Namespace) -> None:
    """Remove broken symlinks in the target root."""
    engine = _create_engine(args)
    console.print(f"Cleaning broken symlinks in {engine.target_root}...")
    removed = engine.clean()
    for path in removed:
        console.print(f"  Removed {path}")
    console.print(f"[green]✓ Cleanup complete[/green] ({len(removed)} removed)")


def cmd_install_extension(args: argparse.Namespace) -> None:
    """Clone the extension."""
    engine = _create_engine(args)
    name = engine.config.extension.name
    console.print(f"Installing {name}...")
    engine.install_extension()
    console.print(f"[green]✓ {name} installed successfully[/green]")
    console.print("\nNext steps:\n  1. Restart OpenCode Server")
    console.print(f"  2. {name} will be available in your extensions")


def cmd_update_extension(args: argparse.Namespace) -> None:
    """Fast-forward the extension clone."""
    engine = _create_engine(args)
    name = engine.config.extension.name
    console.print(f"Updating {name}...")
    engine.update_extension()
    console.print(f"[green]✓ {name} updated successfully[/green]")
    console.print("  Restart OpenCode Server to apply changes")


def cmd_remove_extension(args: argparse.Namespace) -> None:
    """Delete the extension clone."""
    engine = _create_engine(args)
    name = engine.config.extension.name
    if engine.remove_extension():
        console.print(f"[green]✓ {name} uninstalled[/green]")
    else:
        console.print(f"[yellow]⚠ {name} not installed[/yellow]")


def cmd_extension_status(args: argparse.Namespace) -> None:
    """Show extension branch and latest commit."""
    engine = _create_engine(args)
    name = engine.config.extension.name
    status = engine.extension_status(remote=getattr(args, "remote", False))

    if not status.installed:
        console.print(f"[red]✗ {name} not installed[/red]")
        console.print("  Run 'linkfarm install-extension' to install")
        return

    console.print(f"[green]✓[/green] {name} installed at: {status.path}\n")
    console.print(f"Current branch: {status.branch}")
    console.print(f"Latest commit: {status.latest_commit}")
    if status.remote_status is not None:
        console.print(f"Remote status: {status.remote_status}")


def cmd_git_check(args: argparse.Namespace) -> None:
    """Check the extension is excluded from git."""
    engine = _create_engine(args)
    report = engine.git_check()
    name = engine.config.extension.name

    if not report.extension_present:
        console.print(f"[dim]{name} not present - nothing to check[/dim]")
    elif report.ignored:
        console.print(f"[green]✓[/green] {name} properly excluded from git")
    else:
        console.print(
            f"[yellow]⚠ WARNING: {name} directory exists but not in {report.ignore_file.name}[/yellow]"
        )
        console.print("  Run 'linkfarm gitignore-extension' to fix this")


def cmd_gitignore_extension(args: argparse.Namespace) -> None:
    """Add the extension to the ignore file."""
    engine = _create_engine(args)
    name = engine.config.extension.name
    ignore_name = engine.config.ignore_path.name
    if engine.repair_gitignore():
        console.print(f"[green]✓[/green] Added {name} to {ignore_name}")
    else:
        console.print(f"[green]✓[/green] {name} already in {ignore_name}")


def cmd_install_all(args: argparse.Namespace) -> None:
    """Install packages, then the extension."""
    engine = _create_engine(args)
    console.print(f"Installing with {_BACKEND_LABELS[engine.backend_kind]}...")
    result = engine.install()
    _print_batch(result)

    failed = not result.ok or (engine.config.strict and result.skipped > 0)
    try:
        engine.install_extension()
        console.print(f"[green]✓ {engine.config.extension.name} installed successfully[/green]")
    except LinkFarmError as e:
        _print_error(e)
        failed = True

    if failed:
        sys.exit(1)
    console.print("\n[green]✓ Complete installation finished[/green]")


def cmd_uninstall_all(args: argparse.Namespace) -> None:
    """Uninstall packages and remove the extension."""
    engine = _create_engine(args)
    result = engine.uninstall()
    _print_batch(result)

    failed = not result.ok
    try:
        engine.remove_extension()
    except LinkFarmError as e:
        _print_error(e)
        failed = True

    if failed:
        sys.exit(1)
    console.print("\n[green]✓ Complete uninstallation finished[/green]")


def cmd_config(args: argparse.Namespace) -> None:
    """Configuration management commands."""
    if args.config_command == "show":
        _config_show(args)
    elif args.config_command == "init":
        _config_init(args.output)
    elif args.config_command == "path":
        _config_path()
    else:
        console.print("[yellow]Usage: linkfarm config <show|init|path>[/yellow]")


def _config_show(args: argparse.Namespace) -> None:
    """Show current configuration."""
    config_path = getattr(args, "config", None)
    config, loaded_from = LinkFarmConfig.load(Path(config_path) if config_path else None)

    if loaded_from is None:
        console.print("[dim]No config file found. Using defaults.[/dim]")
    else:
        console.print(f"[dim]Loaded from: {loaded_from}[/dim]\n")

    console.print("[bold]Current Configuration:[/bold]\n")
    console.print(yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False))


def _config_init(output: str) -> None:
    """Initialize a new config file."""
    output_path = Path(output)

    if output_path.exists():
        console.print(f"[red]File already exists: {output_path}[/red]")
        sys.exit(1)

    data = LinkFarmConfig().to_dict()
    data.pop("repo_root")

    with open(output_path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    console.print(f"[green]Created config file: {output_path}[/green]")


def _config_path() -> None:
    """Show config file search paths."""
    console.print("[bold]Config file search paths:[/bold]\n")
    for path in config_search_paths():
        exists = "[green]✓[/green]" if path.exists() else "[dim]·[/dim]"
        console.print(f"  {exists} {path}")


COMMANDS: dict[str, Callable[[argparse.Namespace], None]] = {
    "check": cmd_check,
    "install": cmd_install,
    "uninstall": cmd_uninstall,
    "restow": cmd_restow,
    "status": cmd_status,
    "list": cmd_list,
    "clean": cmd_clean,
    "install-extension": cmd_install_extension,
    "update-extension": cmd_update_extension,
    "remove-extension": cmd_remove_extension,
    "extension-status": cmd_extension_status,
    "git-check": cmd_git_check,
    "gitignore-extension": cmd_gitignore_extension,
    "install-all": cmd_install_all,
    "uninstall-all": cmd_uninstall_all,
    "config": cmd_config,
}


if __name__ == "__main__":
    main()
