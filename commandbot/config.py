"""Configuration loaded from environment variables."""

import os

from dotenv import load_dotenv

from commandbot.core.errors import ConfigurationError

load_dotenv()


# Telegram
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
WEBHOOK_URL = os.getenv("WEBHOOK_URL", "")
PORT = int(os.getenv("PORT", "3000"))

# Structured-action backend
COMMAND_GATEWAY_URL = os.getenv("COMMAND_GATEWAY_URL", "http://localhost:3300")
COMMAND_GATEWAY_TOKEN = os.getenv("COMMAND_GATEWAY_TOKEN", "command_bot")

# Fallback LLM gateway
LLM_GATEWAY_URL = os.getenv("LLM_GATEWAY_URL", "http://localhost:3200")
LLM_GATEWAY_API_KEY = os.getenv("LLM_GATEWAY_API_KEY", "")
LLM_DEFAULT_MODEL = os.getenv("LLM_DEFAULT_MODEL", "ollama/llama3.1:8b")

# Primary assistant (Nova). Empty URL means "not configured".
NOVA_API_URL = os.getenv("NOVA_API_URL", "")
NOVA_API_KEY = os.getenv("NOVA_API_KEY", "")
NOVA_DEFAULT_PROVIDER = os.getenv("NOVA_DEFAULT_PROVIDER", "nova")

# Database. Empty path disables the usage store.
DATABASE_PATH = os.getenv("DATABASE_PATH", "./data/db/commandbot.db")

# Contact info shown by /contacto
CONTACT_EMAIL = os.getenv("CONTACT_EMAIL", "hola@stayarta.com")
CONTACT_PHONE = os.getenv("CONTACT_PHONE", "+34 662 652 300")

# Agent
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def validate():
    """Fail fast on settings the bot cannot start without."""
    if not TELEGRAM_BOT_TOKEN:
        raise ConfigurationError(
            "Missing TELEGRAM_BOT_TOKEN. Set it in .env and restart the service."
        )
