import logging

from telegram import Update
from telegram.constants import ParseMode
from telegram.error import BadRequest, TelegramError
from telegram.ext import ContextTypes

from commandbot.bot.keyboards import main_menu, remove_keyboard
from commandbot.core import texts
from commandbot.core.router import InboundMessage

logger = logging.getLogger(__name__)


def to_inbound(update: Update):
    message = update.effective_message
    user = update.effective_user
    chat = update.effective_chat
    return InboundMessage(
        conversation_id=chat.id,
        sender_id=user.id,
        text=message.text,
        message_id=message.message_id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        language_code=user.language_code,
        chat_type=chat.type,
        date=int(message.date.timestamp()) if message.date else None,
    )


def replier(message):
    """Build the `send` coroutine the router replies through."""
    async def send(reply):
        markup = remove_keyboard if reply.provisional else main_menu
        if not reply.markdown:
            await message.reply_text(reply.text, parse_mode=None, reply_markup=markup)
            return
        try:
            await message.reply_text(reply.text, parse_mode=ParseMode.MARKDOWN, reply_markup=markup)
        except BadRequest as e:
            # Backend text with a stray "_" or "*" breaks legacy Markdown.
            logger.warning(f"Markdown rejected ({e}), resending as plain text")
            await message.reply_text(reply.text, parse_mode=None, reply_markup=markup)
    return send


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle every incoming text message, commands included."""
    message = update.effective_message
    if message is None or not message.text or update.effective_user is None:
        return
    router = context.application.bot_data["router"]
    await router.dispatch(to_inbound(update), replier(message))


async def handle_error(update: object, context: ContextTypes.DEFAULT_TYPE):
    logger.error("❌ Bot error", exc_info=context.error)
    if isinstance(update, Update) and update.effective_message:
        try:
            await update.effective_message.reply_text(texts.TECHNICAL_ERROR, reply_markup=main_menu)
        except TelegramError as e:
            logger.error(f"Failed to send error message: {e}")
