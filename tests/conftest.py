"""Shared pytest fixtures and configuration for all tests."""

import pytest
import sys
import os

# Add parent directory to path so we can import modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from game_store import MemoryStore
from go_game import GoGame
from go_board import BLACK, WHITE


def play_sequence(game, moves):
    """Play (x, y) moves in order, None meaning pass; every move must succeed."""
    for move in moves:
        if move is None:
            assert game.pass_turn(), "pass was refused"
        else:
            assert game.play(*move), f"move {move} was refused"


@pytest.fixture
def small_board_size():
    """Small board size for quick tests."""
    return 5


@pytest.fixture
def game_5x5():
    """Fixture for an empty 5x5 game without persistence."""
    return GoGame(5)


@pytest.fixture
def game_9x9():
    """Fixture for an empty 9x9 game without persistence."""
    return GoGame(9)


@pytest.fixture
def memory_store():
    """Fixture for an empty in-memory snapshot store."""
    return MemoryStore()


@pytest.fixture
def stored_game(memory_store):
    """Fixture for a 9x9 game saving to an in-memory store."""
    return GoGame(9, store=memory_store)


@pytest.fixture
def ko_game():
    """Fixture for a 5x5 game one move before a ko capture.

    . B W . .
    B W . W .
    . B W . .
    . . . . .
    . . . . .

    Black to play; black at (2, 1) captures the white stone at (1, 1).
    """
    game = GoGame(5)
    play_sequence(game, [
        (1, 0), (2, 0),
        (0, 1), (1, 1),
        (1, 2), (3, 1),
        (4, 4), (2, 2),
    ])
    assert game.current_player == BLACK
    return game


@pytest.fixture
def capture_position():
    """Fixture for a 9x9 game where black captures a white stone at (4, 4) by playing (4, 5)."""
    game = GoGame(9)
    play_sequence(game, [
        (3, 4), (4, 4),
        (5, 4), (0, 0),
        (4, 3), (0, 1),
    ])
    assert game.current_player == BLACK
    assert game.board.get(4, 4) == WHITE
    return game
