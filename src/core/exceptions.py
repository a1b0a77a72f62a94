"""
Custom exceptions.

NOTE: the rules engine itself (src/chess/) reports illegal moves through return values (False / empty lists), never by raising.
These are for the layers around it: parsing input, validating requests, and looking up stored sessions.
"""


class ChessAppError(Exception):
    """Top-level exception of the application. Catch this one if you do not care about the specific cause."""


class InvalidRequestError(ChessAppError):
    """A request field cannot be interpreted (raised from the pydantic validators)."""


class InvalidPositionError(ChessAppError):
    """The piece placement string is not a valid board position."""


class RepositoryError(ChessAppError):
    """The requested game session is not stored in the repository."""


class GameStateError(ChessAppError):
    """Stored game data that does not describe a valid game (ex. an unknown color to move)."""
