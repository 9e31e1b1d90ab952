"""
models/exceptions.py
--------------------
Error taxonomy for game handling.

Every error carries a short ``notice`` that handlers show to the acting
user as a transient callback answer. None of them is fatal: the event is
dropped and the stored game stays as it was.

Hierarchy:
- GameError
  - CellOccupied
  - NotYourTurn
  - GameOver
  - MalformedToken
  - StoreError
    - GameNotFound
    - GameBusy
"""


class GameError(Exception):
    """Base exception for everything a single move or game request can fail with."""
    notice: str = "something went wrong"


class CellOccupied(GameError):
    notice = "space occupied"


class NotYourTurn(GameError):
    notice = "not your turn!!"


class GameOver(GameError):
    notice = "this game is over"


class MalformedToken(GameError):
    notice = "invalid move"


# =========================
# Store exceptions
# =========================

class StoreError(GameError):
    """Raised when the session store cannot be read or written."""
    notice = "something went wrong, try again"


class GameNotFound(StoreError):
    notice = "game not found"


class GameBusy(StoreError):
    """The per-game lock could not be acquired in time."""
    notice = "game is busy, try again"
