"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"


# --- NOTE: the domain layer (src/chess/pieces.py) has its own Color enum.
# --- This string version is what crosses the boundary to the API/DB layers. Same name, the imports show which is which.


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

