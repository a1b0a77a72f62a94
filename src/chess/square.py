"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)

# Names of the files (a-h) and ranks (1-8)
FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[1]]
RANK_NAMES = [str(rank) for rank in range(1, BOARD_DIMENSIONS[0] + 1)]


@dataclass(frozen=True)
class Square:
    """
    Grid coordinate: row 0 is Black's home edge (the 8th rank), row 7 is White's (the 1st rank).
    Column 0 is the a-file.
    """

    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' gets converted to (0, 0), 'h1' to (7, 7)"""
        col = ord(sq[0]) - ord("a")
        row = BOARD_DIMENSIONS[0] - int(sq[1:])
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{chr(self.col + ord('a'))}{BOARD_DIMENSIONS[0] - self.row}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )


def all_squares() -> list[Square]:
    """Every square of the board, row by row (the order used whenever the whole board gets scanned)"""
    return [
        Square(row, col)
        for row in range(BOARD_DIMENSIONS[0])
        for col in range(BOARD_DIMENSIONS[1])
    ]


def is_square_name(name: str) -> bool:
    """Algebraic name of a square on the board, ex. 'e4'. Anything else ('e9', 'i1', 'e²') is not."""
    return len(name) >= 2 and name[0] in FILE_NAMES and name[1:] in RANK_NAMES
