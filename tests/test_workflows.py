"""Tests for the shared workflow layer."""

from datetime import date

import pytest

from tickler.config import Config
from tickler.core.events import EventRecord, ReminderOffset
from tickler.workflows import (
    VaultNotConfigured,
    acknowledge,
    assign_block_ids,
    collect_notifications,
    compile_digest,
    find_notifications,
    get_vault,
    resolve_reference_date,
    unacknowledge,
)


@pytest.fixture
def vault_dir(tmp_path):
    vault = tmp_path / "vault"
    vault.mkdir()
    (vault / "events.md").write_text(
        "- [ ] Dentist 📆 2025-01-15 1️⃣ day 🔔\n"
        "- [ ] Rent 📆 2024-11-15 🔁 month 🔔\n"
        "- [ ] Conference 📆 2025-02-01 2️⃣ week 🔔\n",
        encoding="utf-8",
    )
    return vault


@pytest.fixture
def config(tmp_path, vault_dir):
    return Config(
        vault_dir=str(vault_dir),
        acknowledgements_file=str(tmp_path / "acks.json"),
    )


class TestGetVault:
    def test_requires_vault_dir(self):
        with pytest.raises(VaultNotConfigured, match="VAULT_DIR"):
            get_vault(Config())

    def test_requires_existing_dir(self, tmp_path):
        with pytest.raises(VaultNotConfigured, match="not found"):
            get_vault(Config(vault_dir=str(tmp_path / "missing")))

    def test_passes_exclusions(self, vault_dir):
        vault = get_vault(Config(vault_dir=str(vault_dir), excluded_folders=["Archive"]))
        assert vault.vault_dir == vault_dir
        assert vault.excluded_folders == ["Archive"]


class TestResolveReferenceDate:
    def test_defaults_to_today(self):
        assert resolve_reference_date(Config(), today=date(2025, 1, 15)) == date(2025, 1, 15)

    def test_uses_note_date(self):
        result = resolve_reference_date(
            Config(), "Daily/2026-01-07 Notes.md", today=date(2025, 1, 15)
        )
        assert result == date(2026, 1, 7)

    def test_note_without_date(self):
        result = resolve_reference_date(Config(), "Projects/plan.md", today=date(2025, 1, 15))
        assert result == date(2025, 1, 15)

    def test_file_date_disabled(self):
        result = resolve_reference_date(
            Config(use_file_date=False), "Daily/2026-01-07.md", today=date(2025, 1, 15)
        )
        assert result == date(2025, 1, 15)


class TestCollectNotifications:
    def test_event_and_recurring_matches(self, config):
        active = collect_notifications(config, date(2025, 1, 15))
        assert [(n.event.title, n.context) for n in active] == [
            ("Dentist", "today"),
            ("Rent", "today"),
        ]

    def test_reminders(self, config):
        active = collect_notifications(config, date(2025, 1, 18))
        assert [(n.event.title, n.context) for n in active] == [
            ("Dentist", "3 days ago"),
            ("Conference", "2 weeks early"),
        ]

    def test_lookback_override(self, config):
        active = collect_notifications(config, date(2025, 1, 18), lookback_days=1)
        assert [n.event.title for n in active] == ["Conference"]

    def test_config_lookback(self, config):
        config.lookback_days = 0
        assert [n.event.title for n in collect_notifications(config, date(2025, 1, 16))] == []

    def test_acknowledged_are_filtered(self, config):
        acknowledge(config, "events.md:1:event", date(2025, 1, 16))

        active = collect_notifications(config, date(2025, 1, 17))
        assert active == []

        everything = collect_notifications(config, date(2025, 1, 17), include_acknowledged=True)
        assert [n.event.title for n in everything] == ["Dentist"]

    def test_unacknowledge_restores(self, config):
        acknowledge(config, "events.md:1:event", date(2025, 1, 15))
        assert unacknowledge(config, "events.md:1:event") is True
        assert len(collect_notifications(config, date(2025, 1, 15))) == 2


class TestCompileDigest:
    def test_digest(self, config):
        digest = compile_digest(config, date(2025, 1, 15))
        lines = digest.split("\n")
        assert lines[0] == "- [ ] [[events.md|Dentist]] 📆 2025-01-15 — *today*"
        assert lines[1] == "- [ ] [[events.md|Rent]] 📆 2024-11-15 — *today*"

    def test_digest_hides_acknowledged(self, config):
        acknowledge(config, "events.md:2:event", date(2025, 1, 15))
        digest = compile_digest(config, date(2025, 1, 15))
        assert "Rent" not in digest

    def test_digest_can_show_acknowledged(self, config):
        acknowledge(config, "events.md:2:event", date(2025, 1, 15))
        digest = compile_digest(config, date(2025, 1, 15), include_acknowledged=True)
        assert "- [x] [[events.md|Rent]]" in digest

    def test_empty_digest(self, config):
        assert compile_digest(config, date(2025, 3, 1)) == "No notifications for today"


class TestAssignBlockIds:
    def test_assigns_and_is_idempotent(self, config, vault_dir):
        assert assign_block_ids(config) == 3
        assert assign_block_ids(config) == 0

        content = (vault_dir / "events.md").read_text(encoding="utf-8")
        assert content.count(" ^") == 3


class FakeSource:
    def __init__(self, events):
        self.events = events

    def fetch_events(self):
        return self.events


class FakeStore:
    def __init__(self, acks=None):
        self.acks = acks or {}

    def load(self):
        return dict(self.acks)

    def acknowledge(self, key, on):
        self.acks[key] = on

    def unacknowledge(self, key):
        return self.acks.pop(key, None) is not None


class TestFindNotifications:
    def test_any_source_and_store(self):
        events = [
            EventRecord("Call mum", date(2025, 1, 12), "week", file_path="x.md", line_number=1),
            EventRecord(
                "Taxes", date(2025, 4, 30), None, [ReminderOffset(3, "month")],
                file_path="x.md", line_number=2,
            ),
        ]
        store = FakeStore({"x.md:1:event": date(2025, 1, 26)})

        active = find_notifications(FakeSource(events), store, date(2025, 1, 30), 3)
        assert [n.context for n in active] == ["3 months early"]

        sunday = find_notifications(FakeSource(events), store, date(2025, 1, 26), 3)
        assert sunday == []

        next_sunday = find_notifications(FakeSource(events), store, date(2025, 2, 2), 3)
        assert [n.event.title for n in next_sunday] == ["Call mum"]
