"""Main entry point for the Telegram train bot."""

import sys

from telegram import Update
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from trainbot.bot.handlers import TrainBotHandlers
from trainbot.bot.platform import ChatPlatform, LogPlatform, TelegramPlatform
from trainbot.schedule.store import ScheduleStore, ScheduleStoreMissingError
from trainbot.utils.config import get_settings
from trainbot.utils.logger import setup_logger, get_logger

logger = get_logger()

HANDLERS_KEY = "handlers"


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Handle errors in the bot."""
    logger.error(f"Update {update} caused error {context.error}")


async def on_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Route a text update to the train bot handlers."""
    handlers: TrainBotHandlers = context.bot_data[HANDLERS_KEY]
    await handlers.handle_update(update, context)


def build_application(store: ScheduleStore) -> Application:
    """
    Create the Telegram application around an opened schedule store.

    Args:
        store: Opened schedule store, closed again on shutdown

    Returns:
        Configured Application
    """
    settings = get_settings()

    async def post_init(application: Application) -> None:
        platform: ChatPlatform
        if settings.dry_run:
            platform = LogPlatform(identity=str(application.bot.id))
        else:
            platform = TelegramPlatform(application.bot)

        handlers = TrainBotHandlers(store, platform, settings)
        application.bot_data[HANDLERS_KEY] = handlers
        await handlers.announce_first_run()

    async def post_shutdown(application: Application) -> None:
        store.close()

    application = (
        Application.builder()
        .token(settings.telegram_bot_token)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    application.add_handler(MessageHandler(filters.TEXT, on_message))
    application.add_error_handler(error_handler)

    return application


def main():
    """Start the bot."""
    settings = get_settings()
    setup_logger(settings)

    logger.info("Starting train bot...")
    logger.info(f"Bot name: {settings.bot_name}")
    logger.info(f"Schedule database: {settings.db_path}")
    logger.info(f"Dry run: {settings.dry_run}")

    if not settings.telegram_bot_token:
        logger.error("TELEGRAM_BOT_TOKEN not configured! Please set it in .env file")
        return

    store = ScheduleStore(settings.db_path)
    try:
        store.open()
    except ScheduleStoreMissingError as e:
        logger.error(str(e))
        sys.exit(1)

    application = build_application(store)

    logger.info("Bot is starting polling...")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
