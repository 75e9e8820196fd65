"""
Tests for undo/redo, passes, game end and comments.
"""

import random

import pytest

from go_board import EMPTY, BLACK, WHITE
from go_game import GoGame
from go_history import Move, MoveHistory
from conftest import play_sequence


def snapshot_of(game):
    return (game.board.cells.tobytes(), game.current_player, game.move_count, dict(game.captures))


class TestUndoRedo:

    @pytest.mark.unit
    def test_undo_with_empty_history(self, game_9x9):
        assert not game_9x9.undo()
        assert game_9x9.move_count == 0

    @pytest.mark.unit
    def test_redo_with_empty_buffer(self, game_9x9):
        assert not game_9x9.redo()
        game_9x9.play(4, 4)
        assert not game_9x9.redo()

    @pytest.mark.unit
    def test_undo_placement(self, game_9x9):
        game = game_9x9
        game.play(4, 4)
        assert game.undo()
        assert game.board.get(4, 4) == EMPTY
        assert game.current_player == BLACK
        assert game.move_count == 0
        assert len(game.history.redo_stack) == 1

    @pytest.mark.unit
    def test_undo_restores_captured_stones(self, capture_position):
        game = capture_position
        game.play(4, 5)
        assert game.captures[BLACK] == 1

        assert game.undo()
        assert game.board.get(4, 4) == WHITE
        assert game.board.get(4, 5) == EMPTY
        assert game.captures[BLACK] == 0
        assert game.current_player == BLACK

    @pytest.mark.unit
    def test_redo_replays_capture(self, capture_position):
        game = capture_position
        game.play(4, 5)
        after = snapshot_of(game)
        game.undo()
        assert game.redo()
        assert snapshot_of(game) == after
        assert game.history.last_move.captured == [(4, 4)]

    @pytest.mark.unit
    def test_undo_redo_pass(self, game_9x9):
        game = game_9x9
        game.play(4, 4)
        game.pass_turn()
        assert game.current_player == BLACK
        assert game.undo()
        assert game.current_player == WHITE
        assert game.move_count == 1
        assert game.redo()
        assert game.current_player == BLACK
        assert game.history.last_move.is_pass

    @pytest.mark.unit
    def test_redo_order_is_most_recent_first(self, game_9x9):
        game = game_9x9
        play_sequence(game, [(0, 0), (1, 1), (2, 2)])
        game.undo()
        game.undo()
        assert game.redo()
        assert game.board.get(1, 1) == WHITE
        assert game.board.get(2, 2) == EMPTY
        assert game.redo()
        assert game.board.get(2, 2) == BLACK

    @pytest.mark.unit
    def test_new_move_clears_redo_buffer(self, game_9x9):
        game = game_9x9
        play_sequence(game, [(0, 0), (1, 1)])
        game.undo()
        assert game.play(5, 5)
        assert game.history.redo_stack == []
        assert not game.redo()
        assert game.board.get(1, 1) == EMPTY

    @pytest.mark.unit
    def test_pass_clears_redo_buffer(self, game_9x9):
        game = game_9x9
        play_sequence(game, [(0, 0), (1, 1)])
        game.undo()
        assert game.pass_turn()
        assert not game.redo()

    @pytest.mark.unit
    def test_move_numbers_follow_history_length(self, game_9x9):
        game = game_9x9
        play_sequence(game, [(0, 0), None, (2, 2)])
        assert [m.move_number for m in game.history.moves] == [1, 2, 3]
        game.undo()
        game.redo()
        assert [m.move_number for m in game.history.moves] == [1, 2, 3]
        assert game.move_count == len(game.history)

    @pytest.mark.integration
    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_undo_redo_symmetry_on_random_games(self, seed):
        rng = random.Random(seed)
        game = GoGame(5)
        for _ in range(60):
            if game.game_over:
                break
            candidates = [(x, y) for y in range(5) for x in range(5) if game.is_valid_move(x, y)]
            if not candidates or rng.random() < 0.05:
                game.pass_turn()
            else:
                game.play(*rng.choice(candidates))

            before = snapshot_of(game)
            assert game.undo()
            assert game.redo()
            assert snapshot_of(game) == before


class TestPassAndEnd:

    @pytest.mark.unit
    def test_double_pass_ends_game(self, game_9x9):
        game = game_9x9
        assert game.pass_turn()
        assert not game.game_over
        assert game.pass_turn()
        assert game.game_over
        assert not game.play(4, 4)
        assert not game.pass_turn()
        assert game.move_count == 2

    @pytest.mark.unit
    def test_passes_separated_by_move_do_not_end(self, game_9x9):
        game = game_9x9
        play_sequence(game, [None, (4, 4), None])
        assert not game.game_over

    @pytest.mark.unit
    def test_end_game(self, game_9x9):
        game = game_9x9
        game.play(4, 4)
        game.end_game()
        assert game.game_over
        assert not game.play(3, 3)
        assert not game.pass_turn()

    @pytest.mark.unit
    def test_undo_keeps_finished_game_over(self, game_9x9):
        game = game_9x9
        game.pass_turn()
        game.pass_turn()
        assert game.undo()
        assert game.game_over
        assert not game.pass_turn()
        assert game.redo()
        assert game.game_over
        assert game.move_count == 2

    @pytest.mark.unit
    def test_undo_after_end_game_stays_ended(self, game_9x9):
        game = game_9x9
        game.play(0, 0)
        game.end_game()
        assert game.undo()
        assert game.game_over
        assert game.board.get(0, 0) == EMPTY
        assert not game.play(0, 0)
        game.reset()
        assert not game.game_over

    @pytest.mark.unit
    def test_reset(self, game_9x9):
        game = game_9x9
        play_sequence(game, [(0, 0), (1, 1)])
        game.add_comment(0, 0, "opening")
        game.undo()
        game.end_game()
        game.reset()
        assert game.move_count == 0
        assert game.current_player == BLACK
        assert game.captures == {BLACK: 0, WHITE: 0}
        assert not game.game_over
        assert game.comments == []
        assert game.history.redo_stack == []
        assert game.board.count(EMPTY) == 81


class TestComments:

    @pytest.mark.unit
    def test_comment_records_context(self, game_9x9):
        game = game_9x9
        game.play(4, 4)
        assert game.add_comment(4, 4, "strong center")
        comment = game.comments[0]
        assert (comment.x, comment.y, comment.text) == (4, 4, "strong center")
        assert comment.move_number == 1
        assert comment.player == WHITE
        assert comment.timestamp > 0

    @pytest.mark.unit
    def test_off_board_comment_is_refused(self, game_9x9):
        assert not game_9x9.add_comment(9, 9, "nowhere")
        assert game_9x9.comments == []

    @pytest.mark.unit
    def test_undo_and_redo_carry_comments(self, game_9x9):
        game = game_9x9
        game.play(4, 4)
        game.add_comment(4, 4, "first")
        game.play(3, 3)
        game.add_comment(3, 3, "second")

        assert game.undo()
        assert [c.text for c in game.comments] == ["first"]
        assert [c.text for c in game.history.redo_stack[-1].comments] == ["second"]

        assert game.undo()
        assert game.comments == []

        assert game.redo()
        assert [c.text for c in game.comments] == ["first"]
        assert game.redo()
        assert [c.text for c in game.comments] == ["first", "second"]

    @pytest.mark.unit
    def test_clear_comments(self, game_9x9):
        game = game_9x9
        game.play(4, 4)
        game.add_comment(4, 4, "first")
        game.play(3, 3)
        game.add_comment(3, 3, "second")
        game.undo()

        game.clear_comments()
        assert game.comments == []
        # comments travelling with an undone move come back on redo
        assert game.redo()
        assert [c.text for c in game.comments] == ["second"]

    @pytest.mark.unit
    def test_comments_before_first_move_survive_undo(self, game_9x9):
        game = game_9x9
        game.add_comment(0, 0, "before play")
        game.play(4, 4)
        game.undo()
        assert [c.text for c in game.comments] == ["before play"]


class TestMoveHistory:

    @pytest.mark.unit
    def test_record_assigns_move_numbers(self):
        history = MoveHistory()
        history.record(Move(player=BLACK, x=0, y=0))
        history.record(Move(player=WHITE))
        assert len(history) == 2
        assert history.last_move.move_number == 2
        assert history.last_move.is_pass

    @pytest.mark.unit
    def test_consecutive_passes(self):
        history = MoveHistory()
        history.record(Move(player=BLACK))
        assert not history.consecutive_passes()
        history.record(Move(player=WHITE))
        assert history.consecutive_passes()

    @pytest.mark.unit
    def test_move_round_trip(self):
        move = Move(player=WHITE, x=2, y=1, captured=[(1, 1)], captured_color=BLACK, move_number=7)
        assert Move.from_dict(move.to_dict()) == move
        pass_move = Move(player=BLACK, move_number=8)
        assert Move.from_dict(pass_move.to_dict()) == pass_move
