"""
models/player.py
----------------
Domain model for a Telegram user occupying a player slot.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Player:
    """
    Identity of a player.

    Attributes:
        id: Telegram user ID. The only field used to tell players apart.
        username: Telegram @username, if the user has one.
        first_name: Telegram first name.
    """
    id: int
    username: Optional[str] = None
    first_name: Optional[str] = None

    @property
    def name(self) -> str:
        """Name shown in the status text."""
        return self.username or self.first_name or str(self.id)

    def is_same_user(self, other: Optional["Player"]) -> bool:
        return other is not None and other.id == self.id

    @classmethod
    def from_telegram(cls, user) -> "Player":
        """Build a Player from a ``telegram.User``."""
        return cls(id=user.id, username=user.username, first_name=user.first_name)

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "first_name": self.first_name}

    @classmethod
    def from_dict(cls, data: dict) -> "Player":
        return cls(
            id=int(data["id"]),
            username=data.get("username"),
            first_name=data.get("first_name"),
        )
