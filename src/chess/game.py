"""
The Game class will be the entrypoint into the domain layer for the service layer (and for anything else that wants to play, like the heuristic opponent).
It is responsible for orchestrating all the rules required to play a turn:
whose turn it is, not leaving your own king in check, promotion, and detecting checkmate.

NOTE: Illegal moves are never raised as exceptions here (only an unplayable custom starting position is). A rejected move returns False, an impossible query returns an empty list.
Whatever got rejected, the game is left exactly as it was before the call.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Self

from src.chess.board import Board
from src.chess.moves import Move, can_move
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square, all_squares
from src.core.exceptions import GameStateError, InvalidPositionError
from src.core.models import GameModel

logger = logging.getLogger(__name__)

# The far edge of the board, seen from each side
PROMOTION_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: BOARD_DIMENSIONS[0] - 1}


@dataclass
class Game:
    # --- DOMAIN LAYER API ---

    board: Board
    current_turn: Color
    is_game_over: bool = False

    @classmethod
    def new_game(
        cls,
        starting_position: Optional[str] = None,
        current_turn: Color = Color.WHITE,
    ) -> Self:
        """
        Standard starting position with White to move, unless told otherwise (handy for setting up test positions)
        ---

        A custom position must be playable: exactly one king per color, and the side that is NOT to move may not be in check
        (otherwise its king could simply be taken). Raises InvalidPositionError if it is not.
        """
        if not starting_position:
            return cls(board=Board.starting_position(), current_turn=current_turn)

        game = cls(board=Board.from_fen(starting_position), current_turn=current_turn)
        game._validate_starting_position()
        return game

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        turn_name = model.current_turn.upper()
        if turn_name not in Color.__members__:
            raise GameStateError(
                f"Invalid color to move: {model.current_turn!r}. \nPick one from {','.join([color.name.lower() for color in Color])}"
            )

        board = Board.from_fen(model.position)
        return cls(board, Color[turn_name], model.is_game_over)

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            position=self.board.to_fen(),
            current_turn=self.current_turn.name.lower(),
            is_game_over=self.is_game_over,
        )

    def reset(self) -> None:
        """Back to the standard starting position, White to move. Same object, so whoever holds on to this game keeps playing it."""
        self.board = Board.starting_position()
        self.current_turn = Color.WHITE
        self.is_game_over = False

    @property
    def winner(self) -> Optional[Color]:
        """
        The turn does not pass after the move that delivers checkmate.
        So once the game is over, the player whose turn it (still) is, is the one who won.
        """
        if not self.is_game_over:
            return None
        return self.current_turn

    def move_piece(self, from_square: Square, to_square: Square) -> bool:
        """
        Attempt to make a move
        -----

        1. the game should not be over yet
        2. there should be a piece of the color to move on the starting square
        3. the move should not leave your own king in check
        4. the board must accept the move (movement rules of the piece, not capturing your own piece)

        Afterwards:
        5. promote a pawn that reached the far edge of the board
        6. check if the opponent is mated. If not, it is their turn.
        """
        move = Move(from_square, to_square)

        # make sure the game is (still) in progress
        if self.is_game_over:
            logger.debug("Move %s rejected: game is over.", move)
            return False

        if not (from_square.is_within_bounds() and to_square.is_within_bounds()):
            logger.debug("Move %s rejected: square not on the board.", move)
            return False

        if move.is_null_move():
            logger.debug("Move %s rejected: piece has to leave its square.", move)
            return False

        # make sure it is your piece, and your turn
        piece = self.board.piece(from_square)
        if piece is None or piece.color != self.current_turn:
            logger.debug("Move %s rejected: no %s piece to move.", move, self.current_turn.name)
            return False

        if self._leaves_king_in_check(move, self.current_turn):
            logger.debug("Move %s rejected: king would be in check.", move)
            return False

        if not self.board.move_piece(move):
            return False

        if self._is_promotion(piece, to_square):
            self.board.promote_piece(to_square)

        # check for the end condition. The turn does not pass on the final move.
        opponent_color = self.current_turn.opponent
        if self.is_checkmate(opponent_color):
            self.is_game_over = True
            logger.info("Game over: %s is in checkmate.", opponent_color.name)
            return True

        self.current_turn = opponent_color
        return True

    def valid_moves(self, square: Square) -> list[Square]:
        """
        The squares the piece on `square` can legally go to
        ----

        ----
        Used for highlighting squares to the user, for the opponent's planning, and for checkmate detection.
        So this is the single source of truth of what a legal move is:

        1. the movement rule of the piece allows it
        2. the target square does not hold a friendly piece
        3. after (speculatively) making the move, your own king is not in check

        NOTE: Does not care whose turn it is. Empty squares, or squares that are not on the board, have no moves.
        """
        if not square.is_within_bounds():
            return []

        piece = self.board.piece(square)
        if piece is None:
            return []

        valid_targets: list[Square] = []
        for target in all_squares():
            if not can_move(square, target, self.board):
                continue

            piece_on_target = self.board.piece(target)
            if piece_on_target is not None and not piece_on_target.is_opponent_of(piece):
                continue

            if self._leaves_king_in_check(Move(square, target), piece.color):
                continue

            valid_targets.append(target)
        return valid_targets

    def find_king(self, color: Color) -> Optional[Square]:
        return self.board.find_king(color)

    def is_king_in_check(self, color: Color) -> bool:
        """
        Can any of the opponent's pieces move onto the king's square?

        NOTE: it does not matter whose turn it is. We need to ask this in the middle of your own turn, to test if your move would leave your king hanging.
        (A board without a king of this color is never in check)
        """
        king_square = self.find_king(color)
        if king_square is None:
            return False

        return any(
            can_move(attacker_square, king_square, self.board)
            for attacker_square in self.board.locate_color(color.opponent)
        )

    def is_checkmate(self, color: Color) -> bool:
        """In check, and not a single piece has a legal move to get out of it."""
        if not self.is_king_in_check(color):
            return False
        return not self._has_valid_move(color)

    # -- PRIVATE HELPERS ---
    def _validate_starting_position(self) -> None:
        for color in Color:
            king_count = sum(
                1
                for square in self.board.locate_color(color)
                if self.board.piece(square).type == PieceType.KING
            )
            if king_count != 1:
                raise InvalidPositionError(
                    f"{color.name.lower()} needs exactly one king, found {king_count}."
                )

        waiting_color = self.current_turn.opponent
        if self.is_king_in_check(waiting_color):
            raise InvalidPositionError(
                f"{waiting_color.name.lower()} is in check while it is {self.current_turn.name.lower()}'s turn."
            )

    def _has_valid_move(self, color: Color) -> bool:
        return any(self.valid_moves(square) for square in self.board.locate_color(color))

    def _leaves_king_in_check(self, move: Move, color: Color) -> bool:
        """Self-check: make the move without any checks, look at the king, and put everything back."""
        with self.board.speculative_move(move):
            return self.is_king_in_check(color)

    def _is_promotion(self, piece: Piece, to_square: Square) -> bool:
        return piece.type == PieceType.PAWN and to_square.row == PROMOTION_ROW[piece.color]
