"""Tickler Telegram Bot."""

import logging

from telegram import Bot, Update
from telegram.ext import Application, CommandHandler, MessageHandler, filters
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .config import Config, load_config
from .core.digest import EMPTY_DIGEST
from .telegram_handlers import (
    build_digest_message,
    digest_date,
    help_handler,
    send_markdown,
    start_handler,
    today_handler,
)
from .workflows import VaultNotConfigured

logger = logging.getLogger(__name__)


class AuthFilter(filters.BaseFilter):
    """Filter to only allow authorized users."""

    def __init__(self, allowed_users: list[int]):
        super().__init__()
        self.allowed_users = allowed_users

    def check_update(self, update: Update) -> bool:
        if not self.allowed_users:
            return True  # No restriction if no users configured
        user = update.effective_user
        if user is None:
            return False
        return user.id in self.allowed_users


def create_application(config: Config | None = None) -> Application:
    """Create and configure the Telegram bot application."""
    if config is None:
        config = load_config()

    if not config.telegram_bot_token:
        raise ValueError(
            "TELEGRAM_BOT_TOKEN not configured. "
            "Get a token from @BotFather on Telegram and add it to tickler.conf"
        )

    app = Application.builder().token(config.telegram_bot_token).build()

    auth_filter = AuthFilter(config.telegram_allowed_users)

    app.add_handler(CommandHandler("start", start_handler, filters=auth_filter))
    app.add_handler(CommandHandler("help", help_handler, filters=auth_filter))
    app.add_handler(CommandHandler("today", today_handler, filters=auth_filter))

    async def unauthorized_handler(update: Update, context):
        user = update.effective_user
        logger.warning(f"Unauthorized access attempt from user {user.id} ({user.username})")
        await update.message.reply_text(
            "Unauthorized. This bot is private.\n"
            "If you're the owner, add your Telegram user ID to TELEGRAM_ALLOWED_USERS in tickler.conf"
        )

    if config.telegram_allowed_users:
        app.add_handler(MessageHandler(~auth_filter & filters.ALL, unauthorized_handler))

    return app


def parse_digest_time(value: str) -> tuple[int, int]:
    """'07:30' -> (7, 30). Raises ValueError on anything else."""
    hour, minute = map(int, value.split(":"))
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Time out of range: {value}")
    return hour, minute


def setup_scheduler(app: Application, config: Config | None = None) -> AsyncIOScheduler:
    """Schedule the daily digest."""
    if config is None:
        config = load_config()

    scheduler = AsyncIOScheduler(timezone=config.timezone or "America/Toronto")

    if config.telegram_digest_time and config.telegram_allowed_users:
        try:
            hour, minute = parse_digest_time(config.telegram_digest_time)
            scheduler.add_job(
                send_daily_digest,
                CronTrigger(hour=hour, minute=minute),
                args=[app.bot, config.telegram_allowed_users, config],
                id="daily_digest",
            )
            logger.info(f"Scheduled daily digest at {hour:02d}:{minute:02d}")
        except ValueError:
            logger.warning(f"Invalid digest time format: {config.telegram_digest_time}")

    return scheduler


async def send_daily_digest(bot: Bot, user_ids: list[int], config: Config):
    """Send today's notifications to all authorized users, if there are any."""
    today = digest_date(config)
    try:
        message = build_digest_message(today, config)
    except VaultNotConfigured as e:
        logger.error(f"Cannot build digest: {e}")
        return

    if message.endswith(EMPTY_DIGEST):
        logger.info(f"No notifications for {today}, skipping digest")
        return

    logger.info("Sending daily digest")
    for user_id in user_ids:
        try:
            await send_markdown(bot, message, chat_id=user_id)
        except Exception as e:
            logger.error(f"Failed to send digest to user {user_id}: {e}")


def run_bot():
    """Run the Telegram bot."""
    config = load_config()
    app = create_application(config)
    scheduler = setup_scheduler(app, config)

    async def post_init(application: Application) -> None:
        """Start scheduler after event loop is running."""
        scheduler.start()
        logger.info("Scheduler started")

    app.post_init = post_init

    if config.telegram_allowed_users:
        logger.info(f"Bot authorized for users: {config.telegram_allowed_users}")
    else:
        logger.warning("No TELEGRAM_ALLOWED_USERS configured - bot is open to anyone!")

    logger.info("Starting Tickler Telegram bot...")

    app.run_polling(allowed_updates=Update.ALL_TYPES)
