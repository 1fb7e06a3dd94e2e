import logging
import sys

from telegram.ext import Application, MessageHandler, filters

from commandbot import config
from commandbot.bot.keyboards import BUTTON_COMMANDS
from commandbot.bot.telegram_handler import handle_error, handle_message
from commandbot.core.assistant import select_assistant
from commandbot.core.confirmations import ConfirmationStore
from commandbot.core.errors import ConfigurationError, PersistenceError
from commandbot.core.router import CommandRouter
from commandbot.core.texts import BRAND
from commandbot.integrations.command_gateway import CommandGatewayClient
from commandbot.integrations.llm_gateway import LLMGatewayClient
from commandbot.integrations.nova import NovaClient
from commandbot.memory.usage_store import UsageStore

logger = logging.getLogger("commandbot")


def open_store(path):
    if not path:
        logger.warning("⚠️ Database not configured (optional)")
        return None
    try:
        store = UsageStore(path)
        store.ping()
    except PersistenceError as e:
        logger.warning(f"⚠️ Database connection failed: {e}")
        return None
    logger.info(f"✅ Database: {path}")
    return store


def build_router():
    store = open_store(config.DATABASE_PATH)
    assistant = select_assistant(NovaClient(), LLMGatewayClient())
    return CommandRouter(
        gateway=CommandGatewayClient(),
        assistant=assistant,
        confirmations=ConfirmationStore(),
        store=store,
        aliases=BUTTON_COMMANDS,
    )


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # python-telegram-bot logs every getUpdates poll through httpx at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    try:
        config.validate()
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    logger.info(f"🚀 Starting {BRAND['name']} v{BRAND['version']}...")
    logger.info(f"Command Gateway: {config.COMMAND_GATEWAY_URL}")

    app = (
        Application.builder()
        .token(config.TELEGRAM_BOT_TOKEN)
        .concurrent_updates(True)
        .build()
    )
    app.bot_data["router"] = build_router()
    app.add_handler(MessageHandler(filters.TEXT, handle_message))
    app.add_error_handler(handle_error)

    if config.WEBHOOK_URL:
        webhook_url = f"{config.WEBHOOK_URL.rstrip('/')}/webhook"
        logger.info(f"✅ Running in webhook mode on port {config.PORT} ({webhook_url})")
        app.run_webhook(listen="0.0.0.0", port=config.PORT, url_path="webhook", webhook_url=webhook_url)
    else:
        logger.info("✅ Running in polling mode. Send a message on Telegram.")
        app.run_polling()


if __name__ == "__main__":
    main()
