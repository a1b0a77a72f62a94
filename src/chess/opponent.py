"""
Heuristic (computer) opponent.

Greedy: grab the most valuable piece it can capture right now, otherwise play any legal move.
Ties are broken at random by shuffling the candidate moves before scoring them (first one seen wins).

It only uses the public surface of Game (valid_moves / move_piece), so it can never play a move a human could not.
"""

import logging
import random
from typing import Optional

from src.chess.game import Game
from src.chess.moves import Move
from src.chess.pieces import Color

logger = logging.getLogger(__name__)


class HeuristicOpponent:
    def __init__(self, color: Color, rng: Optional[random.Random] = None) -> None:
        self.color = color
        self.rng = rng or random.Random()

    def make_move(self, game: Game) -> Optional[Move]:
        """
        Play one move for this opponent's color
        ----

        Does nothing (returns None) when it is not its turn, or when there is nothing legal to play.
        """
        if game.is_game_over or game.current_turn != self.color:
            return None

        candidate_moves = self.all_valid_moves(game)
        if not candidate_moves:
            logger.debug("%s opponent has no legal move.", self.color.name)
            return None

        capture_moves = self.capture_moves(game, candidate_moves)
        selected_move = self.select_best_move(game, capture_moves or candidate_moves)

        # exact same entry point as a human move
        if not game.move_piece(selected_move.from_square, selected_move.to_square):
            return None
        logger.debug("%s opponent played %s", self.color.name, selected_move)
        return selected_move

    def all_valid_moves(self, game: Game) -> list[Move]:
        """Every legal move of every piece of this color, in random order"""
        moves = [
            Move(from_square, to_square)
            for from_square in game.board.locate_color(self.color)
            for to_square in game.valid_moves(from_square)
        ]
        self.rng.shuffle(moves)
        return moves

    def capture_moves(self, game: Game, moves: list[Move]) -> list[Move]:
        """The moves that land on one of the opponent's pieces (order is kept)"""
        return [
            move
            for move in moves
            if (target := game.board.piece(move.to_square)) is not None
            and target.color != self.color
        ]

    def select_best_move(self, game: Game, moves: list[Move]) -> Move:
        """Highest scoring move. On a tie, the earliest in the list wins."""
        best_move = moves[0]
        best_score = self.move_score(game, best_move)
        for move in moves[1:]:
            score = self.move_score(game, move)
            if score > best_score:
                best_move, best_score = move, score
        return best_move

    def move_score(self, game: Game, move: Move) -> int:
        """Worth of the piece that gets captured. The king is worth 0: it can never be taken anyway."""
        target = game.board.piece(move.to_square)
        if target is None or target.color == self.color:
            return 0
        return target.points
