"""The Game board owns the pieces and implements the raw relocation of pieces (the `position` in chess: the configuration of pieces on the board)"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Self

from src.chess.fen import STARTING_POSITION, is_valid_position
from src.chess.moves import Move, can_move
from src.chess.pieces import PAWN_HOME_ROW, PROMOTION_PIECE, Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square, all_squares
from src.core.exceptions import InvalidPositionError

logger = logging.getLogger(__name__)

SquareKey = Square | tuple[int, int]


@dataclass
class Board:
    """
    8x8 grid. Every square of the board is a key of `position`, an empty square maps to None.
    """

    position: dict[Square, Optional[Piece]]

    @classmethod
    def empty(cls) -> Self:
        return cls({square: None for square in all_squares()})

    @classmethod
    def starting_position(cls) -> Self:
        """Black's pieces on rows 0 and 1, White's pieces on rows 6 and 7"""
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank (row 1) entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank (row 7) are the white pieces.

        NOTE: FEN does not tell if a pawn has moved. A pawn that is not on its home row must have moved (pawns never go back).
        """
        if not is_valid_position(fen_str):
            raise InvalidPositionError(
                f"Cannot interpret supplied string as a board position: {fen_str!r}"
            )

        board = cls.empty()
        for row, fen_one_rank in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_rank:
                if character.isalpha():
                    # simple case: a letter directly denotes the piece that should be created
                    piece = Piece.from_fen(character)
                    if piece.type == PieceType.PAWN:
                        piece.has_moved = row != PAWN_HOME_ROW[piece.color]
                    board.position[Square(row, col)] = piece
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._rank_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _rank_to_fen(self, row: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[1]):
            piece = self.piece(Square(row, col))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- READING THE BOARD ---
    def piece(self, square: Square) -> Optional[Piece]:
        """The piece on the square. None for an empty square (and for squares that are not on the board)."""
        return self.position.get(square)

    def __getitem__(self, key: SquareKey) -> Optional[Piece]:
        """board[row, col], the way a renderer walks over the grid"""
        return self.piece(_to_square(key))

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square
            for square, piece in self.position.items()
            if piece is not None and piece.color == color
        ]

    def find_king(self, color: Color) -> Optional[Square]:
        """There should always be exactly one. None only for boards set up without a king."""
        return next(
            (
                square
                for square, piece in self.position.items()
                if piece is not None and piece.type == PieceType.KING and piece.color == color
            ),
            None,
        )

    # --- BARE SLOT ASSIGNMENT ---
    def __setitem__(self, key: SquareKey, piece: Optional[Piece]) -> None:
        """
        Bare assignment: no rule is checked at all.
        The engine uses this for its speculative checks, tests use it to set up positions.
        """
        square = _to_square(key)
        if not square.is_within_bounds():
            raise IndexError(f"{square} is not on the board")
        self.position[square] = piece

    @contextmanager
    def speculative_move(self, move: Move) -> Iterator[Optional[Piece]]:
        """
        Scoped make-move/undo
        ---

        Move the piece without any rule checking, hand control to the caller to inspect the board, then put both
        affected squares back the way they were. Restoration happens even if the inspection raises.

        Yields the piece that was standing on the target square (None if it was empty).

        ex)
        with board.speculative_move(move):
            leaves_king_in_check = ...
        """
        moving_piece = self.position[move.from_square]
        displaced_piece = self.position[move.to_square]
        self[move.to_square] = moving_piece
        self[move.from_square] = None
        try:
            yield displaced_piece
        finally:
            self[move.from_square] = moving_piece
            self[move.to_square] = displaced_piece

    # --- UPDATING THE BOARD ---
    def move_piece(self, move: Move) -> bool:
        """
        Update the position on the board, if the movement rules allow it.
        ---

        Checks (again) that there is a piece to move, that it does not land on a friendly piece,
        and that the piece's movement rule allows it. An enemy piece on the target square is captured (removed from the board).

        Returns False (and leaves the board untouched) if the move is rejected.
        """
        if not (move.from_square.is_within_bounds() and move.to_square.is_within_bounds()):
            logger.debug("Move %s rejected: square not on the board.", move)
            return False

        piece_to_move = self.piece(move.from_square)
        if piece_to_move is None:
            logger.debug("Move %s rejected: no piece at the source square.", move)
            return False

        if move.is_null_move():
            logger.debug("Move %s rejected: piece has to leave its square.", move)
            return False

        piece_at_destination = self.piece(move.to_square)
        if piece_at_destination is not None and not piece_at_destination.is_opponent_of(piece_to_move):
            logger.debug("Move %s rejected: square occupied by a friendly piece.", move)
            return False

        if not can_move(move.from_square, move.to_square, self):
            logger.debug("Move %s rejected: invalid move for %s.", move, piece_to_move.type.name)
            return False

        if piece_to_move.type == PieceType.PAWN:
            piece_to_move.has_moved = True

        self.position[move.to_square] = piece_to_move
        self.position[move.from_square] = None
        logger.debug(
            "Moved %s %s %s",
            piece_to_move.color.name,
            piece_to_move.type.name,
            move,
        )
        return True

    def promote_piece(self, square: Square) -> None:
        """Replace the piece on the square by a brand-new piece of the promotion type (same color)."""
        piece = self.piece(square)
        if piece is None:
            return
        self.position[square] = Piece(PROMOTION_PIECE, piece.color)
        logger.debug(
            "%s pawn on %s promoted to %s",
            piece.color.name,
            square.to_algebraic(),
            PROMOTION_PIECE.name,
        )

    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {color: self._count_material_player(color) for color in Color}

    def _player_pieces(self, color: Color) -> list[Piece]:
        """find all pieces of a given color"""
        return [self.position[square] for square in self.locate_color(color)]

    def _count_material_player(self, color: Color) -> int:
        """Tally the points of material for a specific player"""
        return sum([piece.points for piece in self._player_pieces(color)])


def _to_square(key: SquareKey) -> Square:
    if isinstance(key, Square):
        return key
    row, col = key
    return Square(row, col)

