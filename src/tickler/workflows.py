"""Shared workflow layer between CLI and Telegram.

Wires the vault, the acknowledgement store and the matcher together. The
core stays pure; everything that touches files or the clock lives here.
"""

import logging
from datetime import date
from pathlib import Path

from .adapters.block_ids import BlockIdWriter
from .adapters.json_acks import JsonAcknowledgementStore
from .adapters.markdown_vault import MarkdownVault
from .config import Config
from .core.acks import filter_unacknowledged
from .core.digest import format_digest
from .core.events import ActiveNotification
from .core.matcher import get_active_notifications
from .core.parser import extract_date_from_filename
from .ports import AcknowledgementStore, EventSource

logger = logging.getLogger(__name__)


class VaultNotConfigured(Exception):
    """Raised when no usable vault directory is configured."""


def get_vault(config: Config) -> MarkdownVault:
    """Resolve the vault from config."""
    if not config.vault_dir:
        raise VaultNotConfigured("VAULT_DIR not configured. Add it to tickler.conf")
    vault_dir = Path(config.vault_dir).expanduser()
    if not vault_dir.is_dir():
        raise VaultNotConfigured(f"Vault directory not found: {vault_dir}")
    return MarkdownVault(vault_dir, config.excluded_folders)


def get_ack_store(config: Config) -> JsonAcknowledgementStore:
    return JsonAcknowledgementStore(config.acknowledgements_path)


def resolve_reference_date(
    config: Config,
    note: str | None = None,
    today: date | None = None,
) -> date:
    """
    Date notifications are computed for.

    A daily note's own date wins when use_file_date is on and the note's
    name starts with one; otherwise today.
    """
    today = today or date.today()
    if note and config.use_file_date:
        file_date = extract_date_from_filename(note)
        if file_date is not None:
            logger.debug(f"Using date {file_date} from note {note}")
            return file_date
    return today


def find_notifications(
    source: EventSource,
    store: AcknowledgementStore,
    reference_date: date,
    lookback_days: int,
    include_acknowledged: bool = False,
) -> list[ActiveNotification]:
    """Run the matcher over a source's events, dropping acknowledged ones."""
    events = source.fetch_events()
    active = get_active_notifications(events, reference_date, lookback_days)
    logger.debug(
        f"{len(active)} active notifications for {reference_date} from {len(events)} events"
    )
    if include_acknowledged:
        return active
    return filter_unacknowledged(active, store.load())


def collect_notifications(
    config: Config,
    reference_date: date,
    lookback_days: int | None = None,
    include_acknowledged: bool = False,
) -> list[ActiveNotification]:
    """Notifications from the configured vault."""
    if lookback_days is None:
        lookback_days = config.lookback_days
    return find_notifications(
        get_vault(config),
        get_ack_store(config),
        reference_date,
        lookback_days,
        include_acknowledged,
    )


def compile_digest(
    config: Config,
    reference_date: date,
    lookback_days: int | None = None,
    include_acknowledged: bool = False,
) -> str:
    """Markdown digest of active notifications."""
    active = collect_notifications(
        config, reference_date, lookback_days, include_acknowledged=True
    )
    acks = get_ack_store(config).load()
    return format_digest(active, acks, include_acknowledged=include_acknowledged)


def acknowledge(config: Config, key: str, on: date | None = None) -> None:
    get_ack_store(config).acknowledge(key, on or date.today())


def unacknowledge(config: Config, key: str) -> bool:
    return get_ack_store(config).unacknowledge(key)


def assign_block_ids(config: Config) -> int:
    """Give every notification line without one a block id. Returns the count."""
    vault = get_vault(config)
    events = vault.fetch_events()
    missing = [e for e in events if not e.block_id]
    if not missing:
        return 0
    updated = BlockIdWriter(vault.vault_dir).assign(missing)
    return sum(1 for e in updated if e.block_id)
