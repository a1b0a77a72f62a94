"""
Geometry/Base movement rules

Key idea: Use strategy pattern to define the movement rule of each piece type.
Every rule is a pure predicate: "may the piece standing on `from_square` go to `to_square` on this board?"

The rules do NOT know whose turn it is, nor do they care if the target holds a friendly piece.
(The only exception is the pawn: whether it can move diagonally/forward depends on what stands on the target square)
Legality (turn order, friendly pieces, not leaving your own king in check) is checked later by Game.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square


class Board(Protocol):
    """Just the parts the movement rules need"""

    def piece(self, square: Square) -> Optional[Piece]: ...


Vector = tuple[int, int]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square

    @property
    def delta(self) -> Vector:
        return (
            self.to_square.row - self.from_square.row,
            self.to_square.col - self.from_square.col,
        )

    def is_null_move(self) -> bool:
        """Standing still is never a move (even though the king's movement rule would allow it)"""
        return self.from_square == self.to_square

    def __str__(self) -> str:
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def path_is_clear(from_square: Square, to_square: Square, board: Board) -> bool:
    """
    Line-of-sight check for the sliding pieces
    ---

    Walk from `from_square` towards `to_square` one step at the time and make sure every square strictly in between is empty.
    The end points themselves are not inspected.

    NOTE: only meaningful for straight lines (same row, same column, or a diagonal), which the callers guarantee.
    Leaving the board on the way short-circuits to False.
    """
    d_row = _sign(to_square.row - from_square.row)
    d_col = _sign(to_square.col - from_square.col)
    row = from_square.row + d_row
    col = from_square.col + d_col
    while (row, col) != (to_square.row, to_square.col):
        square = Square(row, col)
        if not square.is_within_bounds():
            return False
        if board.piece(square) is not None:
            return False
        row += d_row
        col += d_col
    return True


def is_diagonal(from_square: Square, to_square: Square) -> bool:
    d_row, d_col = Move(from_square, to_square).delta
    return abs(d_row) == abs(d_col) and d_row != 0


def is_straight(from_square: Square, to_square: Square) -> bool:
    """Same row or same column (but not the same square)"""
    same_row = from_square.row == to_square.row
    same_col = from_square.col == to_square.col
    return (same_row or same_col) and not (same_row and same_col)


# --- MOVEMENT RULES ---
def pawn_can_move(from_square: Square, to_square: Square, board: Board) -> bool:
    """
    A pawn:
    - moves by a single square forward, onto an empty square
    - It can move by two in their first move, if both squares in front of it are empty
    - takes diagonally forward (only if an opponent's piece stands there: no en passant)

    White moves UP the board (decreasing row), Black moves DOWN the board (increasing row)
    """
    pawn = board.piece(from_square)
    if pawn is None:
        return False

    direction = -1 if pawn.color == Color.WHITE else 1
    d_row, d_col = Move(from_square, to_square).delta

    # pawns never move backwards or sideways
    if d_row * direction <= 0:
        return False

    target = board.piece(to_square)

    # pawn pushes: straight ahead, never capturing
    if d_col == 0:
        if d_row == direction:
            return target is None
        if d_row == 2 * direction and not pawn.has_moved:
            middle_square = Square(from_square.row + direction, from_square.col)
            return board.piece(middle_square) is None and target is None
        return False

    # pawns take diagonally
    if abs(d_col) == 1 and d_row == direction:
        return target is not None and target.is_opponent_of(pawn)

    return False


def knight_can_move(from_square: Square, to_square: Square, board: Board) -> bool:
    """Knights jump: |delta_row|, |delta_col| is (2, 1) or (1, 2). Nothing can block them."""
    d_row, d_col = Move(from_square, to_square).delta
    return {abs(d_row), abs(d_col)} == {1, 2}


def bishop_can_move(from_square: Square, to_square: Square, board: Board) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|, with nothing standing in between"""
    return is_diagonal(from_square, to_square) and path_is_clear(
        from_square, to_square, board
    )


def rook_can_move(from_square: Square, to_square: Square, board: Board) -> bool:
    """Rooks move either horizontally or vertically, with nothing standing in between"""
    return is_straight(from_square, to_square) and path_is_clear(
        from_square, to_square, board
    )


def queen_can_move(from_square: Square, to_square: Square, board: Board) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return rook_can_move(from_square, to_square, board) or bishop_can_move(
        from_square, to_square, board
    )


def king_can_move(from_square: Square, to_square: Square, board: Board) -> bool:
    """
    The king can move by a single square at the time (in any direction).

    NOTE: (0, 0) passes as well. Same-square "moves" are rejected by Board/Game before a rule gets asked.
    """
    d_row, d_col = Move(from_square, to_square).delta
    return abs(d_row) <= 1 and abs(d_col) <= 1


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CanMoveFn = Callable[[Square, Square, Board], bool]
MOVEMENT_RULES: dict[PieceType, CanMoveFn] = {
    PieceType.PAWN: pawn_can_move,
    PieceType.KNIGHT: knight_can_move,
    PieceType.BISHOP: bishop_can_move,
    PieceType.ROOK: rook_can_move,
    PieceType.QUEEN: queen_can_move,
    PieceType.KING: king_can_move,
}


def can_move(from_square: Square, to_square: Square, board: Board) -> bool:
    """Look up the rule belonging to the piece on `from_square`. An empty square cannot move anywhere."""
    piece = board.piece(from_square)
    if piece is None:
        return False
    movement_rule = MOVEMENT_RULES[piece.type]
    return movement_rule(from_square, to_square, board)
