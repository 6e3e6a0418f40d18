"""Tests for the markdown vault adapter."""

import os
from datetime import date

import pytest

from tickler.adapters.markdown_vault import MarkdownVault


@pytest.fixture
def vault_dir(tmp_path):
    (tmp_path / "Daily").mkdir()
    (tmp_path / "Archive").mkdir()
    (tmp_path / "home.md").write_text(
        "# Home\n"
        "- [ ] Rent 📆 2025-02-01 🔁 month 1️⃣ day 🔔\n"
        "- [ ] Plain task 📆 2025-02-01\n",
        encoding="utf-8",
    )
    (tmp_path / "Daily" / "2025-01-15.md").write_text(
        "- [x] Dentist 📆 2025-01-20 2️⃣ day 🔔 ^dent01\n",
        encoding="utf-8",
    )
    (tmp_path / "Archive" / "old.md").write_text(
        "- [ ] Old thing 📆 2020-01-01 🔔\n",
        encoding="utf-8",
    )
    (tmp_path / ".trash").mkdir()
    (tmp_path / ".trash" / "deleted.md").write_text(
        "- [ ] Gone 📆 2025-01-15 🔔\n",
        encoding="utf-8",
    )
    (tmp_path / ".obsidian").mkdir()
    (tmp_path / ".obsidian" / "template.md").write_text(
        "- [ ] Template 📆 2025-01-15 🔔\n",
        encoding="utf-8",
    )
    (tmp_path / "notes.txt").write_text("- [ ] Not markdown 📆 2025-01-01 🔔\n")
    return tmp_path


def touch_later(path):
    """Bump the mtime so the change is seen even on coarse clocks."""
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 2_000_000_000))


class TestMarkdownVault:
    def test_fetch_events_in_path_order(self, vault_dir):
        events = MarkdownVault(vault_dir).fetch_events()

        assert [(e.file_path, e.title) for e in events] == [
            ("Archive/old.md", "Old thing"),
            ("Daily/2025-01-15.md", "Dentist"),
            ("home.md", "Rent"),
        ]
        rent = events[2]
        assert rent.line_number == 2
        assert rent.event_date == date(2025, 2, 1)
        assert rent.repeat_interval == "month"

    def test_skips_hidden_folders(self, vault_dir):
        events = MarkdownVault(vault_dir).fetch_events()
        assert not [e for e in events if e.file_path.startswith(".")]
        assert "Gone" not in [e.title for e in events]

    def test_excluded_folders(self, vault_dir):
        events = MarkdownVault(vault_dir, ["Archive"]).fetch_events()
        assert [e.title for e in events] == ["Dentist", "Rent"]

    def test_stats(self, vault_dir):
        vault = MarkdownVault(vault_dir)
        vault.fetch_events()
        stats = vault.stats()
        assert stats.file_count == 3
        assert stats.event_count == 3

    def test_picks_up_changes(self, vault_dir):
        vault = MarkdownVault(vault_dir)
        assert len(vault.fetch_events()) == 3

        home = vault_dir / "home.md"
        home.write_text(
            home.read_text(encoding="utf-8") + "- [ ] Insurance 📆 2025-06-01 🔁 year 🔔\n",
            encoding="utf-8",
        )
        touch_later(home)

        titles = [e.title for e in vault.fetch_events()]
        assert titles[-2:] == ["Rent", "Insurance"]

    def test_forgets_deleted_files(self, vault_dir):
        vault = MarkdownVault(vault_dir)
        vault.fetch_events()

        (vault_dir / "home.md").unlink()

        assert [e.title for e in vault.fetch_events()] == ["Old thing", "Dentist"]
        assert vault.stats().file_count == 2

    def test_file_losing_all_events_is_dropped(self, vault_dir):
        vault = MarkdownVault(vault_dir)
        vault.fetch_events()

        home = vault_dir / "home.md"
        home.write_text("# Home\nnothing here\n", encoding="utf-8")
        touch_later(home)

        vault.refresh()
        assert vault.stats().event_count == 2

    def test_unchanged_files_not_reparsed(self, vault_dir, monkeypatch):
        vault = MarkdownVault(vault_dir)
        vault.fetch_events()

        calls = []
        monkeypatch.setattr(vault, "update_file", lambda path: calls.append(path))
        vault.fetch_events()

        assert calls == []

    def test_missing_vault_dir(self, tmp_path, caplog):
        vault = MarkdownVault(tmp_path / "nope")
        assert vault.fetch_events() == []
        assert "Vault directory not found" in caplog.text

    def test_undecodable_file_is_skipped(self, vault_dir, caplog):
        (vault_dir / "broken.md").write_bytes(b"\xff\xfe\xfa not utf-8")
        events = MarkdownVault(vault_dir).fetch_events()
        assert len(events) == 3
        assert "Failed to read broken.md" in caplog.text
