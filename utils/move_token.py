"""
utils/move_token.py
-------------------
Codec for the callback data attached to every board button.

A move token is ``"<game_id>_<row>_<col>"`` with 1-based row and column.
Telegram hands it back verbatim when the button is pressed, so decoding
treats it as untrusted input.
"""

import re
from typing import NamedTuple, Union

from models.exceptions import MalformedToken

# Telegram limits callback_data to 64 bytes.
MAX_TOKEN_BYTES = 64

_TOKEN_RE = re.compile(r"([0-9]+)_([1-3])_([1-3])", re.ASCII)


class MoveToken(NamedTuple):
    game_id: int
    row: int
    col: int


def encode_move_token(game_id: int, row: int, col: int) -> str:
    """
    Encode a button press target.

    Raises:
        ValueError: If the id is negative or row/col are outside 1..3.
    """
    if game_id < 0:
        raise ValueError(f"Game id must be non-negative, got {game_id}")
    if row not in (1, 2, 3) or col not in (1, 2, 3):
        raise ValueError(f"Row and column must be in 1..3, got ({row}, {col})")
    return f"{game_id}_{row}_{col}"


def decode_move_token(data: Union[str, bytes, None]) -> MoveToken:
    """
    Decode callback data back into a MoveToken.

    Raises:
        MalformedToken: For anything that ``encode_move_token`` could not
            have produced. No other exception escapes.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("ascii")
        except UnicodeDecodeError as e:
            raise MalformedToken(f"Non-ASCII move token: {data!r}") from e
    if not isinstance(data, str):
        raise MalformedToken(f"Move token must be text, got {type(data).__name__}")
    if len(data) > MAX_TOKEN_BYTES:
        raise MalformedToken("Move token is too long")

    match = _TOKEN_RE.fullmatch(data)
    if match is None:
        raise MalformedToken(f"Unrecognised move token: {data!r}")
    game_id, row, col = (int(group) for group in match.groups())
    return MoveToken(game_id, row, col)
