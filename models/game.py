"""
models/game.py
--------------
Domain model for a single Tic Tac Toe game between two Telegram users.

Turn convention:
    ``current_turn`` starts at 1 and the slot to move is ``current_turn % 2``.
    Slot 1 (the guest) therefore moves first, and that first move is also
    what binds the guest to the game. Slot 0 plays ``Cell.HOST`` marks and
    slot 1 plays ``Cell.GUEST`` marks.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from models.board import BOARD_SIZE, Board, Cell
from models.exceptions import GameOver, NotYourTurn
from models.player import Player
from utils.move_token import encode_move_token

HOST_SLOT = 0
GUEST_SLOT = 1


class GameStatus(str, Enum):
    AWAITING_SECOND_PLAYER = "awaiting_second_player"
    IN_PROGRESS = "in_progress"
    WON = "won"
    TIED = "tied"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.WON, GameStatus.TIED)


def _empty_slots() -> list[Optional[Player]]:
    return [None, None]


@dataclass
class Game:
    """
    A game and everything needed to render and continue it.

    Attributes:
        game_id: Identifier handed out by the repository's counter.
        board: The 3x3 grid.
        players: ``[host, guest]``; the guest slot stays None until bound.
        current_turn: Turn counter, see the module docstring.
        winner: Mark placed by the winning move, None while nobody has won.
    """
    game_id: int
    board: Board = field(default_factory=Board)
    players: list[Optional[Player]] = field(default_factory=_empty_slots)
    current_turn: int = 1
    winner: Optional[Cell] = None

    @classmethod
    def create(cls, creator: Player, game_id: int) -> "Game":
        return cls(game_id=game_id, players=[creator, None])

    # ── State ─────────────────────────────────────────────

    @property
    def host(self) -> Player:
        return self.players[HOST_SLOT]

    @property
    def guest(self) -> Optional[Player]:
        return self.players[GUEST_SLOT]

    @property
    def status(self) -> GameStatus:
        if self.winner is not None:
            return GameStatus.WON
        if self.board.is_full():
            return GameStatus.TIED
        if self.guest is None:
            return GameStatus.AWAITING_SECOND_PLAYER
        return GameStatus.IN_PROGRESS

    @property
    def current_slot(self) -> int:
        return self.current_turn % 2

    @property
    def current_player(self) -> Optional[Player]:
        return self.players[self.current_slot]

    @property
    def winner_player(self) -> Optional[Player]:
        if self.winner is None:
            return None
        return self.players[int(self.winner)]

    # ── Moves ─────────────────────────────────────────────

    def apply_move(self, actor: Player, row: int, col: int) -> None:
        """
        Apply a move by ``actor`` at 1-based ``(row, col)``.

        The first non-creator to move claims the guest slot. On any failure
        the game is left exactly as it was.

        Raises:
            ValueError: If row or col is outside 1..3.
            GameOver: If the game is already won or tied.
            NotYourTurn: If it is the other player's turn, or the host tries
                to move before a guest has joined.
            CellOccupied: If the target cell already holds a mark.
        """
        if not (1 <= row <= BOARD_SIZE and 1 <= col <= BOARD_SIZE):
            raise ValueError(f"Move ({row}, {col}) is outside the board")
        if self.status.is_terminal:
            raise GameOver(f"Game {self.game_id} is already finished")

        claims_guest_slot = self.guest is None and not actor.is_same_user(self.host)
        players = [self.host, actor] if claims_guest_slot else self.players

        slot = self.current_slot
        if not actor.is_same_user(players[slot]):
            raise NotYourTurn(f"Player {actor.id} moved out of turn in game {self.game_id}")

        mark = Cell(slot)
        self.board.place(row - 1, col - 1, mark)
        self.players = players

        if self.board.winner() == mark:
            self.winner = mark
        elif not self.board.is_full():
            self.current_turn += 1

    # ── Rendering ─────────────────────────────────────────

    def render_status_text(self) -> str:
        status = self.status
        if status == GameStatus.AWAITING_SECOND_PLAYER:
            return (
                "Waiting for the second player to join...\n\n"
                f"{self.host.name} is waiting for an opponent."
            )

        versus = f"{self.host.name} vs {self.guest.name}"
        if status == GameStatus.WON:
            return f"🎉 {self.winner_player.name} wins! 🎉\n\n{versus}"
        if status == GameStatus.TIED:
            return f"It's a tie!\n\n{versus}"
        return f"It's {self.current_player.name}'s turn\n\n{versus}"

    def render_board_controls(self) -> list[list[tuple[str, str]]]:
        """Return a 3x3 grid of ``(label, move token)`` pairs."""
        return [
            [
                (cell.symbol, encode_move_token(self.game_id, r + 1, c + 1))
                for c, cell in enumerate(row)
            ]
            for r, row in enumerate(self.board.rows())
        ]

    # ── Serialization ─────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "game_id": self.game_id,
            "grid": self.board.to_list(),
            "players": [p.to_dict() if p is not None else None for p in self.players],
            "current_turn": self.current_turn,
            "winner": int(self.winner) if self.winner is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Game":
        """
        Rebuild a game from its stored form.

        Records written before the winning mark was stored get it from the
        board instead.

        Raises:
            KeyError, TypeError, ValueError: If the data is not a game record.
        """
        board = Board.from_list(data["grid"])
        players = [Player.from_dict(p) if p is not None else None for p in data["players"]]
        if len(players) != 2 or players[HOST_SLOT] is None:
            raise ValueError("A game needs a host and exactly two player slots")

        if "winner" in data:
            winner = Cell(data["winner"]) if data["winner"] is not None else None
        else:
            winner = board.winner()
        if winner is not None:
            if winner == Cell.EMPTY or players[int(winner)] is None:
                raise ValueError(f"Stored winner {winner!r} is not a bound player's mark")
            if board.winner() != winner:
                raise ValueError(f"Stored winner {winner!r} does not match the board")

        return cls(
            game_id=int(data["game_id"]),
            board=board,
            players=players,
            current_turn=int(data["current_turn"]),
            winner=winner,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str) -> "Game":
        return cls.from_dict(json.loads(raw))
