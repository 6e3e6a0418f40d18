"""Markdown vault event source adapter."""

import logging
from dataclasses import dataclass
from pathlib import Path

from tickler.core.events import EventRecord
from tickler.core.parser import parse_note
from tickler.core.paths import should_exclude_file

logger = logging.getLogger(__name__)


@dataclass
class VaultStats:
    """Summary of what the vault cache holds."""

    file_count: int
    event_count: int


class MarkdownVault:
    """
    Folder of markdown notes as an event source.

    Implements EventSource protocol. Parsed records are cached per file and
    only re-parsed when the file's modification time changes.
    """

    def __init__(self, vault_dir: Path | str, excluded_folders: list[str] | None = None):
        self.vault_dir = Path(vault_dir).expanduser()
        self.excluded_folders = list(excluded_folders or [])
        self._cache: dict[str, list[EventRecord]] = {}
        self._mtimes: dict[str, tuple[int, int]] = {}

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.vault_dir).as_posix()

    def _is_hidden(self, path: Path) -> bool:
        """Inside a dot-folder such as .trash or .obsidian."""
        return any(part.startswith(".") for part in path.relative_to(self.vault_dir).parts)

    def _note_paths(self) -> list[Path]:
        if not self.vault_dir.is_dir():
            logger.warning(f"Vault directory not found: {self.vault_dir}")
            return []
        return sorted(
            p
            for p in self.vault_dir.rglob("*.md")
            if p.is_file()
            and not self._is_hidden(p)
            and not should_exclude_file(self._relative(p), self.excluded_folders)
        )

    def update_file(self, path: Path) -> None:
        """Re-parse one note and replace its cached records."""
        rel_path = self._relative(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read {rel_path}: {e}")
            self.remove_file(rel_path)
            return

        records = parse_note(content, rel_path)
        if records:
            self._cache[rel_path] = records
        else:
            self._cache.pop(rel_path, None)
        logger.debug(f"Indexed {rel_path}: {len(records)} events")

    def remove_file(self, rel_path: str) -> None:
        """Drop a note from the cache."""
        self._cache.pop(rel_path, None)
        self._mtimes.pop(rel_path, None)

    def refresh(self) -> None:
        """Re-index changed notes and forget deleted ones."""
        seen = set()
        for path in self._note_paths():
            rel_path = self._relative(path)
            seen.add(rel_path)
            try:
                stat = path.stat()
            except OSError as e:
                logger.warning(f"Failed to stat {rel_path}: {e}")
                continue
            mtime = (stat.st_mtime_ns, stat.st_size)
            if self._mtimes.get(rel_path) == mtime:
                continue
            self._mtimes[rel_path] = mtime
            self.update_file(path)

        for rel_path in list(self._mtimes):
            if rel_path not in seen:
                logger.debug(f"Note removed: {rel_path}")
                self.remove_file(rel_path)

    def fetch_events(self) -> list[EventRecord]:
        """All event records in the vault, in path then line order."""
        self.refresh()
        events: list[EventRecord] = []
        for rel_path in sorted(self._cache):
            events.extend(self._cache[rel_path])
        return events

    def stats(self) -> VaultStats:
        return VaultStats(
            file_count=len(self._cache),
            event_count=sum(len(records) for records in self._cache.values()),
        )
