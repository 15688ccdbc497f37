"""
Dev bot: Telegram polling + the same flow as the webhook.
Run: USE_POLLING=1 python -m bot (from repo root, with .env or env vars set).
"""
import logging
import os

from peoplebook.config import load_env, load_settings

load_env()

from telegram import Update
from telegram.ext import Application, CallbackQueryHandler, ContextTypes, MessageHandler, filters

from api.telegram_ui import ChatSessions, process_update
from peoplebook.di import define_modules
from peoplebook.presentation import PersonViewModel

SESSIONS_KEY = "chat_sessions"
SETTINGS_KEY = "settings"

logger = logging.getLogger(__name__)


async def handle_update(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    settings = context.bot_data[SETTINGS_KEY]
    await process_update(
        update,
        context.bot,
        context.bot_data[SESSIONS_KEY],
        phone_region=settings.phone_region,
        animation_duration=settings.animation_duration,
    )


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level,
    )
    use_polling = os.environ.get("USE_POLLING", "").strip().lower() in ("1", "true", "yes")
    if not use_polling:
        raise SystemExit(
            "For production use the FastAPI backend: uvicorn api.main:app "
            "and set the Telegram webhook to https://<your-domain>/webhook/telegram. "
            "For local dev with polling set USE_POLLING=1 and run python -m bot again."
        )
    if not settings.telegram_bot_token:
        raise SystemExit(
            "Set TELEGRAM_BOT_TOKEN (e.g. in .env). Get a token from @BotFather."
        )
    container = define_modules(settings)
    app = Application.builder().token(settings.telegram_bot_token).build()
    app.bot_data[SETTINGS_KEY] = settings
    app.bot_data[SESSIONS_KEY] = ChatSessions(
        lambda: container.get(PersonViewModel), settings.max_sessions
    )
    app.add_handler(CallbackQueryHandler(handle_update))
    app.add_handler(MessageHandler(filters.ALL, handle_update))
    logger.info("Bot running (polling, dev), store: %s", settings.store)
    try:
        app.run_polling(allowed_updates=Update.ALL_TYPES)
    finally:
        container.close()


if __name__ == "__main__":
    main()
