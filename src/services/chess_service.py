"""Orchestration of communication from the outer layer (UI/API) to the rules engine and persistence layers (and the reverse direction)."""

import logging
import random
from typing import Optional
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    MoveRequest,
    MoveResponse,
    OpponentMoveRequest,
    ResetGameRequest,
    ValidMovesRequest,
    ValidMovesResponse,
)
from src.chess.game import Game
from src.chess.opponent import HeuristicOpponent
from src.chess.pieces import Color as DomainColor
from src.chess.square import Square
from src.core.config import Settings, configure_logging
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.core.shared_types import Color, Status
from src.db.database import create_session_factory
from src.db.memory_repository import InMemoryGameRepository
from src.db.repository import GameRepository
from src.db.sql_repository import SQLGameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """
    Orchestration of layers for chess games.

    Every call loads one game from the repository, lets the Game apply the rules, and stores the result.
    Games never share any state, so any number of them can be played side by side.
    """

    def __init__(
        self, repository: GameRepository, settings: Optional[Settings] = None
    ) -> None:
        self.repo = repository
        self.settings = settings or Settings()
        self.rng = random.Random(self.settings.opponent_seed)

    # -- Routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a game. Standard starting position (White to move), unless a starting position is requested."""

        new_game = Game.new_game(starting_position=request.starting_position)
        created_game_data = new_game.to_model()
        created_game_data.opponent_color = (
            str(request.opponent_color) if request.opponent_color else None
        )

        game_id = self.repo.add_game(created_game_data)
        logger.info(
            "Created game %s (opponent: %s)", game_id, request.opponent_color or "none"
        )
        return self._create_game_response(game_id, created_game_data)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend, ex. to find out whether the computer has moved yet.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def reset_game(self, request: ResetGameRequest) -> GameResponse:
        """Start over in the same session (and against the same opponent)."""
        stored_model = self._fetch_game(request.game_id)

        game = Game.from_model(stored_model)
        game.reset()

        after_reset = self._store_game(request.game_id, game, stored_model)
        logger.info("Reset game %s", request.game_id)
        return self._create_game_response(request.game_id, after_reset)

    def valid_moves(self, request: ValidMovesRequest) -> ValidMovesResponse:
        """The squares the piece on the requested square may move to (for highlighting)."""
        stored_model = self._fetch_game(request.game_id)
        game = Game.from_model(stored_model)

        square = Square.from_algebraic(request.square)
        return ValidMovesResponse(
            game_id=request.game_id,
            square=request.square,
            valid_moves=[target.to_algebraic() for target in game.valid_moves(square)],
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. An illegal move is not an error: the response says it was not accepted."""
        stored_model = self._fetch_game(request.game_id)
        game = Game.from_model(stored_model)

        accepted = game.move_piece(
            Square.from_algebraic(request.from_square),
            Square.from_algebraic(request.to_square),
        )
        if not accepted:
            logger.info(
                "Game %s: move %s%s rejected",
                request.game_id,
                request.from_square,
                request.to_square,
            )
            return MoveResponse(
                accepted=False,
                game=self._create_game_response(request.game_id, stored_model),
            )

        after_move = self._store_game(request.game_id, game, stored_model)
        return MoveResponse(
            accepted=True, game=self._create_game_response(request.game_id, after_move)
        )

    def opponent_move(self, request: OpponentMoveRequest) -> MoveResponse:
        """
        Let the computer play its move.
        ---
        Not accepted when the game has no computer opponent, it is not the computer's turn, or it has no legal move.
        (The frontend decides when to ask: ex. after a short pause following the human's move)
        """
        stored_model = self._fetch_game(request.game_id)
        if stored_model.opponent_color is None:
            return MoveResponse(
                accepted=False,
                game=self._create_game_response(request.game_id, stored_model),
            )

        game = Game.from_model(stored_model)
        opponent = HeuristicOpponent(
            DomainColor[stored_model.opponent_color.upper()], rng=self.rng
        )
        move = opponent.make_move(game)
        if move is None:
            return MoveResponse(
                accepted=False,
                game=self._create_game_response(request.game_id, stored_model),
            )

        logger.info("Game %s: opponent played %s", request.game_id, move)
        after_move = self._store_game(request.game_id, game, stored_model)
        return MoveResponse(
            accepted=True, game=self._create_game_response(request.game_id, after_move)
        )

    def delete_game(self, request: DeleteGameRequest) -> None:
        """End a session for good."""
        if not self.repo.remove_game(request.game_id):
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _store_game(
        self, game_id: UUID, game: Game, stored_model: GameModel
    ) -> GameModel:
        """Capture the updated game (keeping the session's opponent) and persist it."""
        model = game.to_model()
        model.opponent_color = stored_model.opponent_color
        if not self.repo.save_game(game_id, model):
            raise RepositoryError(f"Game with {game_id=} not found.")
        return model

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        game = Game.from_model(model)
        king_in_check = next(
            (color for color in DomainColor if game.is_king_in_check(color)), None
        )
        return GameResponse(
            game_id=game_id,
            position=model.position,
            current_turn=Color[game.current_turn.name],
            status=Status.CHECKMATE if game.is_game_over else Status.IN_PROGRESS,
            is_game_over=game.is_game_over,
            winner=Color[game.winner.name] if game.winner else None,
            king_in_check=Color[king_in_check.name] if king_in_check else None,
            opponent_color=model.opponent_color,
            material={
                Color[color.name]: points
                for color, points in game.board.count_material().items()
            },
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.load_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model


def build_service(settings: Optional[Settings] = None) -> ChessService:
    """Wire up the service: an SQL backed repository if a database is configured, otherwise everything lives in memory."""
    settings = settings or Settings.from_env()
    configure_logging(settings)
    if settings.database_url is None:
        repository: GameRepository = InMemoryGameRepository()
    else:
        repository = SQLGameRepository(create_session_factory(settings.database_url))
    return ChessService(repository, settings)
