"""Tests for the python-telegram-bot adapter."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove
from telegram.constants import ParseMode
from telegram.error import BadRequest

from commandbot.bot.keyboards import BUTTON_COMMANDS, MAIN_MENU_LAYOUT
from commandbot.bot.telegram_handler import handle_error, handle_message, to_inbound
from commandbot.core import texts
from commandbot.core.router import Reply


def fake_update(text="/tasks"):
    message = SimpleNamespace(
        text=text,
        message_id=9,
        date=datetime(2026, 1, 2, tzinfo=timezone.utc),
        reply_text=AsyncMock(),
    )
    user = SimpleNamespace(id=7, username="ada", first_name="Ada", last_name="L", language_code="es")
    chat = SimpleNamespace(id=100, type="private")
    return SimpleNamespace(effective_message=message, effective_user=user, effective_chat=chat)


def fake_context(router):
    return SimpleNamespace(application=SimpleNamespace(bot_data={"router": router}))


def test_to_inbound():
    inbound = to_inbound(fake_update("/orders shipped"))
    assert inbound.conversation_id == 100
    assert inbound.sender_id == 7
    assert inbound.is_command
    assert inbound.language_code == "es"
    assert inbound.date == int(datetime(2026, 1, 2, tzinfo=timezone.utc).timestamp())


def test_every_button_has_a_command():
    labels = {label for row in MAIN_MENU_LAYOUT for label in row}
    assert labels == set(BUTTON_COMMANDS)


@pytest.mark.asyncio
async def test_replies_map_to_telegram_options():
    update = fake_update()

    class Router:
        async def dispatch(self, message, send):
            await send(Reply("working", provisional=True))
            await send(Reply("*done*", markdown=True))

    await handle_message(update, fake_context(Router()))

    first, second = update.effective_message.reply_text.await_args_list
    assert first.args == ("working",)
    assert first.kwargs["parse_mode"] is None
    assert isinstance(first.kwargs["reply_markup"], ReplyKeyboardRemove)
    assert second.args == ("*done*",)
    assert second.kwargs["parse_mode"] == ParseMode.MARKDOWN
    assert isinstance(second.kwargs["reply_markup"], ReplyKeyboardMarkup)


@pytest.mark.asyncio
async def test_rejected_markdown_is_resent_as_plain_text():
    update = fake_update()
    reply_text = update.effective_message.reply_text
    reply_text.side_effect = [BadRequest("Can't parse entities: can't find end of the entity"), None]

    class Router:
        async def dispatch(self, message, send):
            await send(Reply("• in_progress: *1*", markdown=True))

    await handle_message(update, fake_context(Router()))

    first, second = reply_text.await_args_list
    assert first.kwargs["parse_mode"] == ParseMode.MARKDOWN
    assert second.args == ("• in_progress: *1*",)
    assert second.kwargs["parse_mode"] is None
    assert isinstance(second.kwargs["reply_markup"], ReplyKeyboardMarkup)


@pytest.mark.asyncio
async def test_non_text_updates_are_ignored():
    update = fake_update(text=None)
    router = MagicMock()
    router.dispatch = AsyncMock()
    await handle_message(update, fake_context(router))
    router.dispatch.assert_not_awaited()


@pytest.mark.asyncio
async def test_error_handler_replies_technical_error(monkeypatch):
    update = MagicMock()
    update.effective_message.reply_text = AsyncMock()
    monkeypatch.setattr("commandbot.bot.telegram_handler.Update", type(update))

    await handle_error(update, SimpleNamespace(error=RuntimeError("boom")))

    update.effective_message.reply_text.assert_awaited_once()
    assert update.effective_message.reply_text.await_args.args == (texts.TECHNICAL_ERROR,)
