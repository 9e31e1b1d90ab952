from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from telegram import InlineKeyboardMarkup, InlineQueryResultArticle
from telegram.constants import ChatType
from telegram.error import BadRequest

import security.rate_limiter
from handlers.game_handler import (
    GAME_SERVICE_KEY,
    NEW_GAME_TITLE,
    callback_query_handler,
    inline_query_handler,
)
from handlers.keyboards import START_GAME_LABEL, board_keyboard
from handlers.start_handler import GREETING_TEXT, greeting_message, start_command
from models.exceptions import CellOccupied, GameNotFound, MalformedToken, NotYourTurn
from repositories.game_repo import game_key
from security.rate_limiter import RateLimiter
from utils.move_token import MoveToken

BOT_ID = 999


@pytest.fixture(autouse=True)
def fresh_rate_limiter(monkeypatch):
    monkeypatch.setattr(security.rate_limiter, "_limiter", RateLimiter(1000, 60))


@pytest.fixture
def context(service):
    ctx = MagicMock()
    ctx.bot.id = BOT_ID
    ctx.bot_data = {GAME_SERVICE_KEY: service}
    return ctx


def tg_user(player, is_bot=False):
    user = MagicMock()
    user.id = player.id
    user.username = player.username
    user.first_name = player.first_name
    user.is_bot = is_bot
    return user


def inline_update(user):
    update = MagicMock()
    update.effective_user = user
    update.inline_query.from_user = user
    update.inline_query.answer = AsyncMock()
    return update


def callback_update(user, data):
    update = MagicMock()
    update.effective_user = user
    query = update.callback_query
    query.from_user = user
    query.data = data
    query.answer = AsyncMock()
    query.edit_message_text = AsyncMock()
    return update


# ── Inline queries ────────────────────────────────────────

async def test_inline_query_creates_game(context, service, alice):
    update = inline_update(tg_user(alice))

    await inline_query_handler(update, context)

    game = await service.repo.load(1)
    assert game.host == alice

    update.inline_query.answer.assert_awaited_once()
    (results,), kwargs = update.inline_query.answer.call_args
    assert kwargs == {"cache_time": 0, "is_personal": True}
    article = results[0]
    assert isinstance(article, InlineQueryResultArticle)
    assert article.title == NEW_GAME_TITLE
    assert article.input_message_content.message_text == game.render_status_text()
    assert article.reply_markup == board_keyboard(game)


async def test_inline_query_from_bot_is_ignored(context, fake_redis, alice):
    update = inline_update(tg_user(alice, is_bot=True))

    await inline_query_handler(update, context)

    update.inline_query.answer.assert_not_awaited()
    assert fake_redis.data == {}


async def test_inline_query_store_failure_answers_nothing(context, fake_redis, alice):
    fake_redis.fail_with = RedisConnectionError("down")
    update = inline_update(tg_user(alice))

    await inline_query_handler(update, context)

    update.inline_query.answer.assert_not_awaited()


# ── Callback queries ──────────────────────────────────────

async def test_accepted_move_edits_message(context, service, alice, bob):
    await service.new_game(alice)
    update = callback_update(tg_user(bob), "1_1_1")

    await callback_query_handler(update, context)

    game = await service.repo.load(1)
    query = update.callback_query
    query.answer.assert_awaited_once_with()
    query.edit_message_text.assert_awaited_once_with(
        "It's Alice's turn\n\nAlice vs Bob",
        reply_markup=board_keyboard(game),
    )
    keyboard = query.edit_message_text.call_args.kwargs["reply_markup"]
    assert isinstance(keyboard, InlineKeyboardMarkup)
    assert keyboard.inline_keyboard[0][0].text == "⭕"


@pytest.mark.parametrize(
    "actor_name, data, error",
    [
        ("alice", "1_1_1", CellOccupied),
        ("bob", "1_2_2", NotYourTurn),
        ("alice", "1_4_1", MalformedToken),
        ("alice", "garbage", MalformedToken),
        ("alice", "5_1_1", GameNotFound),
    ],
)
async def test_rejected_move_only_answers_notice(
    context, service, fake_redis, alice, bob, actor_name, data, error
):
    await service.new_game(alice)
    await service.play_move(bob, MoveToken(1, 1, 1))
    stored = fake_redis.data[game_key(1)]
    actor = {"alice": alice, "bob": bob}[actor_name]
    update = callback_update(tg_user(actor), data)

    await callback_query_handler(update, context)

    update.callback_query.answer.assert_awaited_once_with(error.notice)
    update.callback_query.edit_message_text.assert_not_awaited()
    assert fake_redis.data[game_key(1)] == stored


async def test_edit_failure_is_logged_not_raised(context, service, alice, bob):
    await service.new_game(alice)
    update = callback_update(tg_user(bob), "1_1_1")
    update.callback_query.edit_message_text.side_effect = BadRequest("Message is not modified")

    await callback_query_handler(update, context)

    assert (await service.repo.load(1)).guest == bob


# ── Greeting ──────────────────────────────────────────────

def message_update(user, chat_type):
    update = MagicMock()
    update.effective_user = user
    update.effective_chat.type = chat_type
    update.effective_message.reply_text = AsyncMock()
    return update


async def test_private_text_gets_greeting(context, alice):
    update = message_update(tg_user(alice), ChatType.PRIVATE)

    await greeting_message(update, context)

    update.effective_message.reply_text.assert_awaited_once()
    (text,), kwargs = update.effective_message.reply_text.call_args
    assert text == GREETING_TEXT
    button = kwargs["reply_markup"].inline_keyboard[0][0]
    assert button.text == START_GAME_LABEL
    assert button.switch_inline_query == ""


async def test_group_text_is_ignored(context, alice):
    update = message_update(tg_user(alice), ChatType.GROUP)

    await greeting_message(update, context)

    update.effective_message.reply_text.assert_not_awaited()


async def test_start_command_sends_greeting(context, alice):
    update = message_update(tg_user(alice), ChatType.PRIVATE)

    await start_command(update, context)

    assert update.effective_message.reply_text.call_args.args == (GREETING_TEXT,)
