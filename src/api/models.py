"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.fen import is_valid_position
from src.chess.square import is_square_name
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Status

Placement = str
SquareName = str


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    """`opponent_color`: the color the computer plays. Leave it out for a game between two humans."""

    opponent_color: Optional[Color] = None
    starting_position: Optional[Placement] = None

    @field_validator("starting_position")
    @classmethod
    def validate_starting_position(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        value = value.strip()
        if not is_valid_position(value):
            raise InvalidRequestError(
                f"Cannot interpret starting_position: {value!r} as the piece placement part of a FEN string."
            )
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class ResetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class OpponentMoveRequest(BaseModel):
    game_id: UUID


class ValidMovesRequest(BaseModel):
    game_id: UUID
    square: SquareName

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not is_square_name(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: SquareName
    to_square: SquareName

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not is_square_name(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    position: Placement
    current_turn: Color
    status: Status
    is_game_over: bool
    winner: Optional[Color]
    king_in_check: Optional[Color]
    opponent_color: Optional[Color]
    # points of material each side still has on the board (score display)
    material: dict[Color, int]


class MoveResponse(BaseModel):
    """`accepted` is False when the move was illegal. The game is then unchanged."""

    accepted: bool
    game: GameResponse


class ValidMovesResponse(BaseModel):
    game_id: UUID
    square: SquareName
    valid_moves: list[SquareName]
