"""
The piece placement part of FEN notation.

FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
Only its first field is used here: the placement of the pieces. Everything else a full FEN carries
(castling rights, en passant square, move counters) has no meaning in this game.

ex) The standard starting position:
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
* ranks are separated by slashes, read from the 8th rank (row 0 of the board, Black's side) down to the 1st rank (row 7)
* inside a rank, read from the a-file to the h-file
* a letter is a piece (capital letters for the white pieces, small letters for the black pieces)
* a number denotes that many consecutive empty squares
"""

from src.chess.pieces import FEN_TO_PIECE
from src.chess.square import BOARD_DIMENSIONS

# A digit stands for that many empty squares in a row (at least one, at most a full rank)
EMPTY_RUN_DIGITS = [str(count) for count in range(1, BOARD_DIMENSIONS[1] + 1)]

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_POSITION = "/".join(["8"] * BOARD_DIMENSIONS[0])


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_rows, num_cols = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_rows:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character in EMPTY_RUN_DIGITS:
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != num_cols:
            return False
    return True
