"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.orm import Session, sessionmaker

from src.chess.game import Game
from src.core.exceptions import GameStateError, InvalidPositionError, RepositoryError
from src.core.models import GameModel
from src.core.shared_types import Status
from src.db.schema import DBGame

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """
    Game sessions as rows of the `games` table.

    Every call opens its own short-lived session, committed and closed on the way out.
    So the repository never holds on to a connection in between two calls of the service.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def add_game(self, game: GameModel) -> UUID:
        game_id = uuid4()
        with self.session_factory.begin() as db:
            db.add(DBGame(id=game_id, **_to_columns(game)))
        return game_id

    def load_game(self, game_id: UUID) -> GameModel | None:
        """Rows that do not describe a playable game (ex. edited by hand) raise RepositoryError."""
        with self.session_factory() as db:
            game_db = db.get(DBGame, game_id)
            if game_db is None:
                return None
            return _to_model(game_db)

    def save_game(self, game_id: UUID, game: GameModel) -> bool:
        with self.session_factory.begin() as db:
            game_db = db.get(DBGame, game_id)
            if game_db is None:
                return False
            for column, value in _to_columns(game).items():
                setattr(game_db, column, value)
        return True

    def remove_game(self, game_id: UUID) -> bool:
        with self.session_factory.begin() as db:
            game_db = db.get(DBGame, game_id)
            if game_db is None:
                return False
            db.delete(game_db)
        return True


def _to_columns(game: GameModel) -> dict[str, Any]:
    """A finished game is won by the side whose turn it still is (the turn does not pass on the mating move)."""
    return {
        "position": game.position,
        "current_turn": game.current_turn,
        "status": Status.CHECKMATE if game.is_game_over else Status.IN_PROGRESS,
        "winner": game.current_turn if game.is_game_over else None,
        "opponent_color": game.opponent_color,
    }


def _to_model(game_db: DBGame) -> GameModel:
    """Convert a row back into a snapshot, and make sure the engine can actually load it."""
    model = GameModel(
        position=game_db.position,
        current_turn=game_db.current_turn,
        is_game_over=game_db.status == Status.CHECKMATE,
        opponent_color=game_db.opponent_color,
    )
    try:
        Game.from_model(model)
    except (GameStateError, InvalidPositionError) as error:
        logger.error("Stored game %s cannot be loaded: %s", game_db.id, error)
        raise RepositoryError(f"Stored game {game_db.id} is corrupt: {error}") from error
    return model
