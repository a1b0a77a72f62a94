"""Unit tests for /src/chess/game.py"""

from copy import deepcopy

import pytest

from src.chess.fen import STARTING_POSITION
from src.chess.game import Board, Color, Game, GameModel, Piece, PieceType, Square
from src.core.exceptions import GameStateError, InvalidPositionError

FOOLS_MATE = [("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4")]
FOOLS_MATE_POSITION = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR"

# white bishop on e2 is pinned to its king by the black rook on e7
PINNED_BISHOP = "4k3/4r3/8/8/8/8/4B3/4K3"

# white king on e1 is attacked by the black rook on h1
WHITE_IN_CHECK = "4k3/8/8/8/8/8/8/4K2r"


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def play(game: Game, moves: list[tuple[str, str]]) -> list[bool]:
    """Play a list of moves in algebraic notation, returns what got accepted"""
    return [game.move_piece(sq(from_name), sq(to_name)) for from_name, to_name in moves]


@pytest.fixture
def game() -> Game:
    return Game.new_game()


# -- CREATION LOGIC --
def test_new_game(game: Game) -> None:
    assert game.board == Board.starting_position()
    assert game.current_turn == Color.WHITE
    assert not game.is_game_over
    assert game.winner is None


def test_new_game_from_position() -> None:
    game = Game.new_game(starting_position=PINNED_BISHOP, current_turn=Color.BLACK)
    assert game.board == Board.from_fen(PINNED_BISHOP)
    assert game.current_turn == Color.BLACK


@pytest.mark.parametrize(
    "position",
    [
        "8/8/8/8/8/8/8/4K3",  # no black king
        "4k3/8/8/8/8/8/8/8",  # no white king
        "4k3/8/8/8/8/8/8/K3K3",  # two white kings
        "k3k3/8/8/8/8/8/8/4K3",  # two black kings
    ],
)
def test_new_game_needs_one_king_per_color(position: str) -> None:
    with pytest.raises(InvalidPositionError):
        _ = Game.new_game(starting_position=position)


def test_new_game_side_waiting_in_check() -> None:
    """White to move, with the black king already attacked by the rook on h8: White would just take the king"""
    with pytest.raises(InvalidPositionError):
        _ = Game.new_game(starting_position="4k2R/8/8/8/8/8/8/4K3")

    # the same position is fine when it is Black's turn to get out of check
    game = Game.new_game(starting_position="4k2R/8/8/8/8/8/8/4K3", current_turn=Color.BLACK)
    assert game.is_king_in_check(Color.BLACK)


def test_game_creation_from_model_roundtrip() -> None:
    """Create a Game from a GameModel and convert back into GameModel"""
    expected_model = GameModel(
        position="2kr1b1r/p1p1pppp/2p2n2/3q2B1/6Q1/2NP4/PPP2PPP/R4RK1",
        current_turn="black",
        is_game_over=False,
    )
    game = Game.from_model(expected_model)
    assert game.current_turn == Color.BLACK
    assert game.to_model() == expected_model


def test_invalid_color_in_model() -> None:
    """Try creating a game with a non-existing color (just to make sure a frontend later does not make some kind of odd choice)"""
    model = GameModel(position=STARTING_POSITION, current_turn="green", is_game_over=False)
    with pytest.raises(GameStateError):
        _ = Game.from_model(model)


def test_invalid_position_in_model() -> None:
    model = GameModel(position="rnbqkbnr", current_turn="white", is_game_over=False)
    with pytest.raises(InvalidPositionError):
        _ = Game.from_model(model)


def test_reset_reinitializes_in_place(game: Game) -> None:
    play(game, FOOLS_MATE)
    assert game.is_game_over

    same_game = game
    game.reset()
    assert same_game is game
    assert game.board == Board.starting_position()
    assert game.current_turn == Color.WHITE
    assert not game.is_game_over


# -- MAKING MOVES --
def test_accepted_move_passes_the_turn(game: Game) -> None:
    assert game.move_piece(sq("e2"), sq("e4"))
    assert game.board.piece(sq("e4")) == Piece(PieceType.PAWN, Color.WHITE, has_moved=True)
    assert game.board.piece(sq("e2")) is None
    assert game.current_turn == Color.BLACK

    assert game.move_piece(sq("e7"), sq("e5"))
    assert game.current_turn == Color.WHITE


def test_cannot_move_opponents_piece(game: Game) -> None:
    before = deepcopy(game)
    assert not game.move_piece(sq("e7"), sq("e5"))
    assert game == before


@pytest.mark.parametrize(
    "from_name, to_name",
    [
        ("e4", "e5"),  # empty square
        ("e2", "e5"),  # not a pawn move
        ("d1", "d2"),  # own piece on target
        ("f1", "c4"),  # bishop blocked
        ("g1", "g1"),  # standing still
    ],
)
def test_rejected_move_changes_nothing(game: Game, from_name: str, to_name: str) -> None:
    before = deepcopy(game)
    assert not game.move_piece(sq(from_name), sq(to_name))
    assert game == before


def test_squares_off_the_board_rejected(game: Game) -> None:
    before = deepcopy(game)
    assert not game.move_piece(sq("e2"), Square(-1, 4))
    assert not game.move_piece(Square(8, 8), sq("e4"))
    assert game == before


def test_king_cannot_stand_still() -> None:
    game = Game.new_game(starting_position="4k3/8/8/8/8/8/8/4K3")
    assert not game.move_piece(sq("e1"), sq("e1"))
    assert game.current_turn == Color.WHITE


def test_pinned_piece_cannot_move() -> None:
    """Moving the bishop would expose the king to the rook"""
    game = Game.new_game(starting_position=PINNED_BISHOP)
    before = deepcopy(game)
    assert not game.move_piece(sq("e2"), sq("d3"))
    assert game == before


def test_must_get_out_of_check() -> None:
    """With the king in check, only moves that resolve the check are accepted"""
    game = Game.new_game(starting_position="4k3/8/8/8/8/8/P7/4K2r")
    assert not game.move_piece(sq("a2"), sq("a3"))
    assert not game.move_piece(sq("e1"), sq("f1"))
    assert game.move_piece(sq("e1"), sq("e2"))
    assert not game.is_king_in_check(Color.WHITE)


def test_capture(game: Game) -> None:
    play(game, [("e2", "e4"), ("d7", "d5")])
    assert game.move_piece(sq("e4"), sq("d5"))
    assert game.board.piece(sq("d5")).color == Color.WHITE
    assert game.board.count_material()[Color.BLACK] == 38


def test_pawn_double_step_only_once(game: Game) -> None:
    play(game, [("e2", "e3"), ("a7", "a6")])
    assert not game.move_piece(sq("e3"), sq("e5"))
    assert game.move_piece(sq("e3"), sq("e4"))


def test_pawn_diagonal_without_victim(game: Game) -> None:
    assert not game.move_piece(sq("e2"), sq("d3"))


def test_pawn_cannot_capture_straight_ahead(game: Game) -> None:
    play(game, [("e2", "e4"), ("e7", "e5")])
    assert not game.move_piece(sq("e4"), sq("e5"))


def test_blocked_slider_rejected_even_onto_legal_square() -> None:
    """d1 -> d4 would be fine for the queen if d2 was empty"""
    game = Game.new_game(starting_position="4k3/8/8/8/8/8/3P4/3QK3")
    assert not game.move_piece(sq("d1"), sq("d4"))
    assert game.move_piece(sq("d1"), sq("c2"))


# -- PROMOTION --
def test_white_pawn_promotes_on_row_0() -> None:
    game = Game.new_game(starting_position="7k/P7/8/8/8/8/8/4K3")
    pawn = game.board.piece(sq("a7"))
    assert game.move_piece(sq("a7"), sq("a8"))
    queen = game.board.piece(sq("a8"))
    assert queen == Piece(PieceType.QUEEN, Color.WHITE)
    assert queen is not pawn


def test_black_pawn_promotes_on_row_7() -> None:
    game = Game.new_game(starting_position="4k3/8/8/8/8/8/7p/K7", current_turn=Color.BLACK)
    assert game.move_piece(sq("h2"), sq("h1"))
    assert game.board.piece(sq("h1")) == Piece(PieceType.QUEEN, Color.BLACK)


def test_promotion_by_capture() -> None:
    game = Game.new_game(starting_position="1r5k/P7/8/8/8/8/8/4K3")
    assert game.move_piece(sq("a7"), sq("b8"))
    assert game.board.piece(sq("b8")) == Piece(PieceType.QUEEN, Color.WHITE)


@pytest.mark.parametrize(
    "position, current_turn, from_name, to_name",
    [
        ("4k3/8/P7/8/8/8/8/4K3", Color.WHITE, "a6", "a7"),
        ("4k3/8/8/8/8/1p6/8/K7", Color.BLACK, "b3", "b2"),
    ],
)
def test_no_promotion_one_step_short(
    position: str, current_turn: Color, from_name: str, to_name: str
) -> None:
    game = Game.new_game(starting_position=position, current_turn=current_turn)
    assert game.move_piece(sq(from_name), sq(to_name))
    assert game.board.piece(sq(to_name)).type == PieceType.PAWN


def test_promotion_delivering_mate() -> None:
    """Back rank mate: the new queen checks along the 8th rank, the black pawns take away every escape"""
    game = Game.new_game(starting_position="6k1/P4ppp/8/8/8/8/8/4K3")
    assert game.move_piece(sq("a7"), sq("a8"))
    assert game.is_game_over
    assert game.winner == Color.WHITE


# -- VALID MOVES --
def test_valid_moves_from_starting_position(game: Game) -> None:
    assert set(game.valid_moves(sq("g1"))) == {sq("f3"), sq("h3")}
    assert set(game.valid_moves(sq("e2"))) == {sq("e3"), sq("e4")}
    assert game.valid_moves(sq("a1")) == []
    assert game.valid_moves(sq("e1")) == []


def test_valid_moves_empty_square(game: Game) -> None:
    assert game.valid_moves(sq("e4")) == []


@pytest.mark.parametrize("square", [Square(-1, 0), Square(0, 8), Square(8, 8)])
def test_valid_moves_outside_the_board(game: Game, square: Square) -> None:
    assert game.valid_moves(square) == []


def test_valid_moves_ignore_whose_turn_it_is(game: Game) -> None:
    """Black can be asked about its moves while White is to move (ex. for highlighting)"""
    assert set(game.valid_moves(sq("b8"))) == {sq("a6"), sq("c6")}


def test_valid_moves_of_pinned_piece() -> None:
    """A rook pinned along the file may still slide along that file"""
    game = Game.new_game(starting_position="4k3/4r3/8/8/8/8/4R3/4K3")
    assert set(game.valid_moves(sq("e2"))) == {
        sq("e3"),
        sq("e4"),
        sq("e5"),
        sq("e6"),
        sq("e7"),
    }
    pinned_bishop = Game.new_game(starting_position=PINNED_BISHOP)
    assert pinned_bishop.valid_moves(sq("e2")) == []


def test_king_avoids_attacked_squares() -> None:
    game = Game.new_game(starting_position="4k3/8/8/8/8/8/3r4/4K3")
    assert set(game.valid_moves(sq("e1"))) == {sq("d2"), sq("f1")}


def test_valid_moves_is_deterministic_and_restores_board(game: Game) -> None:
    play(game, [("e2", "e4"), ("e7", "e5"), ("d1", "h5")])
    before = deepcopy(game.board)
    first = game.valid_moves(sq("h5"))
    second = game.valid_moves(sq("h5"))
    assert first == second
    assert game.board == before


# -- CHECK --
def test_no_check_in_starting_position(game: Game) -> None:
    assert not game.is_king_in_check(Color.WHITE)
    assert not game.is_king_in_check(Color.BLACK)


def test_king_in_check() -> None:
    game = Game.new_game(starting_position=WHITE_IN_CHECK)
    assert game.is_king_in_check(Color.WHITE)
    assert not game.is_king_in_check(Color.BLACK)


def test_check_ignores_whose_turn_it_is() -> None:
    """Built from the board directly: a new game refuses to start like this"""
    game = Game(Board.from_fen(WHITE_IN_CHECK), Color.BLACK)
    assert game.is_king_in_check(Color.WHITE)


def test_check_blocked_by_piece() -> None:
    game = Game.new_game(starting_position="4k3/8/8/8/8/8/8/4KB1r")
    assert not game.is_king_in_check(Color.WHITE)


def test_missing_king_is_never_in_check() -> None:
    game = Game(Board.from_fen("4k3/8/8/8/8/8/8/7r"), Color.WHITE)
    assert game.find_king(Color.WHITE) is None
    assert not game.is_king_in_check(Color.WHITE)
    assert not game.is_checkmate(Color.WHITE)


def test_find_king(game: Game) -> None:
    assert game.find_king(Color.WHITE) == sq("e1")
    assert game.find_king(Color.BLACK) == sq("e8")


# -- CHECKMATE --
def test_checkmate_position() -> None:
    game = Game.new_game(starting_position=FOOLS_MATE_POSITION)
    before = deepcopy(game.board)
    assert game.is_checkmate(Color.WHITE)
    assert not game.is_checkmate(Color.BLACK)
    assert game.board == before


def test_check_with_escape_is_not_checkmate() -> None:
    game = Game.new_game(starting_position=WHITE_IN_CHECK)
    assert game.is_king_in_check(Color.WHITE)
    assert not game.is_checkmate(Color.WHITE)


def test_stalemate_is_not_checkmate() -> None:
    """No draw detection: a king without moves that is not in check is simply not mated"""
    game = Game.new_game(starting_position="7k/5Q2/6K1/8/8/8/8/8", current_turn=Color.BLACK)
    assert not game.is_checkmate(Color.BLACK)


def test_fools_mate(game: Game) -> None:
    """The game ends on Black's move, and the turn stays with Black: the winner"""
    accepted = play(game, FOOLS_MATE)
    assert accepted == [True, True, True, True]
    assert game.is_game_over
    assert game.current_turn == Color.BLACK
    assert game.winner == Color.BLACK
    assert game.board.to_fen() == FOOLS_MATE_POSITION


def test_no_moves_after_game_over(game: Game) -> None:
    play(game, FOOLS_MATE)
    before = deepcopy(game)
    assert not game.move_piece(sq("e1"), sq("f2"))
    assert not game.move_piece(sq("a7"), sq("a6"))
    assert not game.move_piece(sq("a2"), sq("a3"))
    assert game == before


def test_game_over_survives_model_roundtrip(game: Game) -> None:
    play(game, FOOLS_MATE)
    model = game.to_model()
    assert model.current_turn == "black"
    assert model.is_game_over

    restored = Game.from_model(model)
    assert restored.is_game_over
    assert restored.winner == Color.BLACK
    assert not restored.move_piece(sq("a2"), sq("a3"))
