"""
handlers/keyboards.py
---------------------
Builds the inline keyboards sent with bot messages.
"""

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from models.game import Game

START_GAME_LABEL = "Start Game"


def board_keyboard(game: Game) -> InlineKeyboardMarkup:
    """One button per cell; pressing it sends the cell's move token back."""
    return InlineKeyboardMarkup(
        [
            [InlineKeyboardButton(label, callback_data=token) for label, token in row]
            for row in game.render_board_controls()
        ]
    )


def start_game_keyboard() -> InlineKeyboardMarkup:
    """A single button that opens inline mode in a chat of the user's choice."""
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton(START_GAME_LABEL, switch_inline_query="")]]
    )
