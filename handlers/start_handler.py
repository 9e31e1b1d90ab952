"""
handlers/start_handler.py
--------------------------
Handles /start, /help and any other text sent to the bot in private.
None of these touch game state.
"""

from telegram import Update
from telegram.constants import ChatType
from telegram.ext import ContextTypes

from handlers.keyboards import start_game_keyboard
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)

GREETING_TEXT = "Hello! Let's play Tic Tac Toe."

HELP_TEXT = (
    "🎮 *Tic Tac Toe*\n\n"
    "Press *Start Game*, pick a chat and send the game card there.\n"
    "The first other person to tap a square becomes your opponent "
    "and makes the first move.\n\n"
    "/start - show the Start Game button\n"
    "/help - show this message"
)


async def _send_greeting(update: Update) -> None:
    await update.effective_message.reply_text(GREETING_TEXT, reply_markup=start_game_keyboard())


@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - show the Start Game button."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")
    await _send_greeting(update)


@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command."""
    await update.effective_message.reply_text(HELP_TEXT, parse_mode="Markdown")


@rate_limited
async def greeting_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Answer any plain text in a private chat with the greeting."""
    if update.effective_chat is None or update.effective_chat.type != ChatType.PRIVATE:
        return
    await _send_greeting(update)
