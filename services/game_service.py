"""
services/game_service.py
-------------------------
Business logic for creating games and applying moves.
Orchestrates between the Game model and the GameRepository.
"""

from models.game import Game
from models.player import Player
from repositories.game_repo import GameRepository
from utils.logger import get_logger
from utils.move_token import MoveToken

logger = get_logger(__name__)


class GameService:
    """
    Handles the load-mutate-store cycle of a game.

    Workflow for a move:
        1. Take the per-game lock.
        2. Load the stored game.
        3. Apply the move to it.
        4. Store it back, only if the move was accepted and the lock is still ours.
    """

    def __init__(self, repo: GameRepository):
        self.repo = repo

    async def new_game(self, creator: Player) -> Game:
        """Create and store a fresh game hosted by ``creator``."""
        game_id = await self.repo.next_id()
        game = Game.create(creator, game_id)
        await self.repo.save(game)
        logger.info(f"Game {game_id} created by user {creator.id}")
        return game

    async def play_move(self, actor: Player, token: MoveToken) -> Game:
        """
        Apply ``actor``'s move and persist the result.

        Returns:
            The updated game.

        Raises:
            GameError: Any rejection; the stored game is left untouched.
        """
        async with self.repo.lock(token.game_id) as lock_token:
            game = await self.repo.load(token.game_id)
            had_guest = game.guest is not None
            game.apply_move(actor, token.row, token.col)
            await self.repo.save(game, lock_token=lock_token)

        if not had_guest:
            logger.info(f"User {actor.id} joined game {game.game_id} as second player")
        logger.info(
            f"Game {game.game_id}: user {actor.id} played ({token.row}, {token.col}), "
            f"status={game.status.value}"
        )
        return game
