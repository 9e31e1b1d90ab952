"""
handlers/game_handler.py
-------------------------
Handles inline queries (new games) and board button presses (moves).
Delegates all game logic to the GameService found in ``context.bot_data``.
"""

from telegram import InlineQueryResultArticle, InputTextMessageContent, Update
from telegram.error import BadRequest
from telegram.ext import ContextTypes

from handlers.keyboards import board_keyboard
from models.exceptions import GameError, StoreError
from models.player import Player
from security.rate_limiter import rate_limited
from services.game_service import GameService
from utils.logger import get_logger
from utils.move_token import decode_move_token

logger = get_logger(__name__)

GAME_SERVICE_KEY = "game_service"
NEW_GAME_TITLE = "Start Tic Tac Toe Game"


def get_game_service(context: ContextTypes.DEFAULT_TYPE) -> GameService:
    return context.bot_data[GAME_SERVICE_KEY]


@rate_limited
async def inline_query_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle an inline query by creating a new game.

    The answer holds a single article; sending it posts the game card
    with an empty board into the chosen chat.
    """
    query = update.inline_query
    user = query.from_user
    if user.is_bot or user.id == context.bot.id:
        return

    try:
        game = await get_game_service(context).new_game(Player.from_telegram(user))
    except StoreError as e:
        logger.error(f"Could not create a game for user {user.id}: {e}")
        return

    article = InlineQueryResultArticle(
        id=str(game.game_id),
        title=NEW_GAME_TITLE,
        input_message_content=InputTextMessageContent(game.render_status_text()),
        reply_markup=board_keyboard(game),
    )
    # Every query creates its own game, so results must never be reused.
    await query.answer([article], cache_time=0, is_personal=True)


@rate_limited
async def callback_query_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle a board button press.

    Rejected moves only get a short notice; accepted moves also redraw
    the game message.
    """
    query = update.callback_query
    actor = Player.from_telegram(query.from_user)

    try:
        token = decode_move_token(query.data)
        game = await get_game_service(context).play_move(actor, token)
    except GameError as e:
        logger.info(f"Move by user {actor.id} rejected ({type(e).__name__}): {e}")
        await query.answer(e.notice)
        return

    await query.answer()

    try:
        await query.edit_message_text(
            game.render_status_text(),
            reply_markup=board_keyboard(game),
        )
    except BadRequest as e:
        logger.error(f"Error editing game message {game.game_id}: {e}")
