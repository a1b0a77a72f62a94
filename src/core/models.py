"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Both the API layer (higher) and the domain/db layers (lower) use the model defined here to send to/receive from the Service.
"""

from dataclasses import dataclass
from typing import Optional

# Type aliases to make GameModel easier to read
PieceColor = str
Placement = str


@dataclass
class GameModel:
    """Transport-safe representation of a game session used between API, Service, DB, and Game layers."""

    position: Placement
    current_turn: PieceColor
    is_game_over: bool
    opponent_color: Optional[PieceColor] = None
