"""
Ignore-list hygiene for the extension clone.

The extension is someone else's git repository; it must never be committed
into the enclosing repository. The checker only appends lines to the ignore
file and never rewrites or reorders what is already there.
"""

from __future__ import annotations

from pathlib import Path

from linkfarm.errors import HygieneError
from linkfarm.logging import get_logger
from linkfarm.models import HygieneReport

logger = get_logger("hygiene")


class HygieneChecker:
    """Checks and repairs the ignore-list entry for the extension."""

    def __init__(self, ignore_file: Path, entry: str, label: str = "") -> None:
        self.ignore_file = ignore_file
        self.entry = entry
        self.label = label

    def _read(self) -> str:
        # Undecodable bytes never match the entry, so they are replaced
        try:
            return self.ignore_file.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return ""
        except OSError as e:
            raise HygieneError(f"Cannot read {self.ignore_file}: {e}") from e

    def is_ignored(self) -> bool:
        """True if a non-comment, non-negated line mentions the entry."""
        needle = self.entry.rstrip("/")
        for line in self._read().splitlines():
            line = line.strip()
            if not line or line.startswith(("#", "!")):
                continue
            if needle in line:
                return True
        return False

    def check(self, extension_present: bool) -> HygieneReport:
        """Advisory check; a missing or unreadable ignore file counts as empty."""
        try:
            ignored = self.is_ignored()
        except HygieneError as e:
            logger.warning("%s", e)
            ignored = False

        report = HygieneReport(
            ignore_file=self.ignore_file,
            entry=self.entry,
            extension_present=extension_present,
            ignored=ignored,
        )
        if report.needs_repair:
            logger.warning("%s is not listed in %s", self.entry, self.ignore_file)
        return report

    def repair(self) -> bool:
        """Append the entry if missing. Returns True if the file was changed.

        Raises:
            HygieneError: the ignore file cannot be read or written.
        """
        if self.is_ignored():
            logger.debug("%s already in %s", self.entry, self.ignore_file)
            return False

        lines = ["", f"# {self.label}"] if self.label else [""]
        lines.append(self.entry)
        block = "\n".join(lines) + "\n"

        existing = self._read()
        if existing and not existing.endswith("\n"):
            block = "\n" + block

        try:
            with open(self.ignore_file, "a", encoding="utf-8") as f:
                f.write(block)
        except OSError as e:
            raise HygieneError(
                f"Cannot update {self.ignore_file}: {e}",
                hint=f"Add '{self.entry}' to {self.ignore_file.name} by hand",
            ) from e
        logger.info("Added %s to %s", self.entry, self.ignore_file)
        return True
