"""Implementation of (Game)Repository that keeps every game session in memory (gone when the process stops)"""

from dataclasses import replace
from uuid import UUID, uuid4

from src.core.models import GameModel


class InMemoryGameRepository:
    """Dictionary of snapshots, copied on the way in and on the way out."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def add_game(self, game: GameModel) -> UUID:
        game_id = uuid4()
        self._games[game_id] = replace(game)
        return game_id

    def load_game(self, game_id: UUID) -> GameModel | None:
        game = self._games.get(game_id)
        return replace(game) if game else None

    def save_game(self, game_id: UUID, game: GameModel) -> bool:
        if game_id not in self._games:
            return False
        self._games[game_id] = replace(game)
        return True

    def remove_game(self, game_id: UUID) -> bool:
        return self._games.pop(game_id, None) is not None

    def __len__(self) -> int:
        return len(self._games)
