"""Where game sessions live in between two calls of the service (implemented in memory and with SQLAlchemy)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """
    Session store keyed by game id.

    NOTE: a repository works with snapshots. Changing a GameModel you got back does not change the stored session, only `save_game` does.
    """

    def add_game(self, game: GameModel) -> UUID:
        """Store a new session, returns the id it is known by from now on."""
        ...

    def load_game(self, game_id: UUID) -> GameModel | None:
        """Latest snapshot of the session, None if there is no such session."""
        ...

    def save_game(self, game_id: UUID, game: GameModel) -> bool:
        """Replace the snapshot of an existing session. False if there is no such session (nothing gets stored then)."""
        ...

    def remove_game(self, game_id: UUID) -> bool:
        """End the session for good. False if there was no such session."""
        ...
