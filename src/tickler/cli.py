"""Tickler CLI - date-driven notifications from a markdown vault."""

import json
import logging
import sys
from datetime import date

import click

from .config import configure_logging, load_config
from .core.acks import is_notification_acknowledged, notification_key
from .core.digest import format_digest, format_event_table
from .workflows import (
    VaultNotConfigured,
    acknowledge,
    assign_block_ids,
    collect_notifications,
    get_ack_store,
    get_vault,
    resolve_reference_date,
    unacknowledge,
)


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        click.echo(f"Error: invalid date {value!r}, expected YYYY-MM-DD", err=True)
        sys.exit(1)


@click.group()
@click.version_option(package_name="tickler")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Tickler - notifications for dated events in your notes."""
    configure_logging(debug or load_config().debug_logging)


@main.command()
@click.option("--date", "-d", "target_date", default=None,
              help="Reference date (YYYY-MM-DD), defaults to today")
@click.option("--note", "-n", default=None,
              help="Note path whose file-name date is used as the reference date")
@click.option("--lookback", "-l", type=click.IntRange(min=0), default=None,
              help="Override the lookback window (days)")
@click.option("--all", "show_all", is_flag=True, help="Include acknowledged notifications")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def today(target_date: str | None, note: str | None, lookback: int | None,
          show_all: bool, as_json: bool):
    """Show notifications active for a date."""
    config = load_config()
    explicit = _parse_date(target_date)
    reference = explicit or resolve_reference_date(config, note)

    try:
        active = collect_notifications(config, reference, lookback, include_acknowledged=True)
    except VaultNotConfigured as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    acks = get_ack_store(config).load()

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "key": notification_key(n),
                        "title": n.event.title,
                        "event_date": n.event.event_date.isoformat(),
                        "repeat": n.event.repeat_interval,
                        "offset": n.offset.key() if n.offset else None,
                        "context": n.context,
                        "trigger_date": n.trigger_date.isoformat(),
                        "acknowledged": is_notification_acknowledged(acks, n),
                        "file": n.event.file_path,
                        "line": n.event.line_number,
                    }
                    for n in active
                    if show_all or not is_notification_acknowledged(acks, n)
                ],
                indent=2,
            )
        )
        return

    click.echo(f"Notifications for {reference.strftime('%A, %b %d %Y')}\n")
    click.echo(format_digest(active, acks, include_acknowledged=show_all))


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_events(as_json: bool):
    """List every notification event found in the vault."""
    config = load_config()
    try:
        vault = get_vault(config)
    except VaultNotConfigured as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    events = vault.fetch_events()

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "title": e.title,
                        "event_date": e.event_date.isoformat(),
                        "repeat": e.repeat_interval,
                        "reminders": [o.key() for o in e.reminder_offsets],
                        "file": e.file_path,
                        "line": e.line_number,
                        "block_id": e.block_id or None,
                    }
                    for e in events
                ],
                indent=2,
            )
        )
        return

    stats = vault.stats()
    click.echo(f"{stats.event_count} events in {stats.file_count} notes\n")
    click.echo(format_event_table(events))


@main.command()
@click.argument("key")
@click.option("--date", "-d", "ack_date", default=None,
              help="Acknowledgement date (YYYY-MM-DD), defaults to the reference date")
@click.option("--note", "-n", default=None,
              help="Note path whose file-name date is used as the acknowledgement date")
def ack(key: str, ack_date: str | None, note: str | None):
    """Dismiss a notification by its key (see `today --json`).

    Pass the same --date or --note used with `today` so the acknowledgement
    covers the notification's trigger date.
    """
    config = load_config()
    on = _parse_date(ack_date) or resolve_reference_date(config, note)
    acknowledge(config, key, on)
    click.echo(f"✓ Acknowledged {key} on {on.isoformat()}")


@main.command()
@click.argument("key")
def unack(key: str):
    """Restore a dismissed notification."""
    config = load_config()
    if unacknowledge(config, key):
        click.echo(f"✓ Restored {key}")
    else:
        click.echo(f"No acknowledgement for {key}.")


@main.command("add-ids")
def add_ids():
    """Append block ids to notification lines that have none."""
    config = load_config()
    try:
        count = assign_block_ids(config)
    except VaultNotConfigured as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if count:
        click.echo(f"✓ Added block ids to {count} events")
    else:
        click.echo("Every notification line already has a block id.")


@main.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def bot(debug: bool):
    """Run the Telegram bot."""
    # The bot reports its schedule and deliveries at INFO
    logging.getLogger().setLevel(logging.DEBUG if debug else logging.INFO)

    try:
        from .telegram_bot import run_bot
        click.echo("Starting Tickler Telegram bot...")
        click.echo("Press Ctrl+C to stop")
        run_bot()
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nBot stopped.")


if __name__ == "__main__":
    main()
