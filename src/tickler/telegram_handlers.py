"""Telegram command handlers and message formatting."""

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

import telegramify_markdown
from telegram import Update
from telegram.ext import ContextTypes

from .config import Config, load_config
from .workflows import VaultNotConfigured, compile_digest

logger = logging.getLogger(__name__)

MESSAGE_LIMIT = 4000


async def send_markdown(bot_or_msg, text: str, *, chat_id: int | None = None):
    """Send markdown text to Telegram, converting to MarkdownV2.

    bot_or_msg: a Bot instance (pass chat_id) or an Update.message (calls reply_text).
    """
    converted = telegramify_markdown.markdownify(text)
    chunks = [converted[i : i + MESSAGE_LIMIT] for i in range(0, len(converted), MESSAGE_LIMIT)]
    for chunk in chunks:
        if chat_id is not None:
            await bot_or_msg.send_message(chat_id=chat_id, text=chunk, parse_mode="MarkdownV2")
        else:
            await bot_or_msg.reply_text(chunk, parse_mode="MarkdownV2")


def digest_date(config: Config) -> date:
    """Today in the configured time zone, which the daily digest runs in."""
    return datetime.now(ZoneInfo(config.timezone or "America/Toronto")).date()


def build_digest_message(reference_date: date, config=None) -> str:
    """Digest text with a dated header, unacknowledged notifications only."""
    if config is None:
        config = load_config()
    digest = compile_digest(config, reference_date)
    return f"*Notifications for {reference_date.strftime('%A, %b %d')}*\n\n{digest}"


async def start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        "Hi! I'm Tickler. I'll send you the events and reminders due each day.\n\n"
        "Commands:\n"
        "/today - Today's notifications\n"
        "/help - Show all commands"
    )


async def help_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await update.message.reply_text(
        "*Tickler Commands*\n\n"
        "/today - Events and reminders due today\n"
        "/help - Show this message\n",
        parse_mode="Markdown",
    )


async def today_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /today command - today's unacknowledged notifications."""
    try:
        config = load_config()
        message = build_digest_message(digest_date(config), config)
    except VaultNotConfigured as e:
        await update.message.reply_text(f"Vault not available: {e}")
        return
    await send_markdown(update.message, message)
