"""
Game controller: the single entry point that mutates a game and persists it
"""
import logging
import time
from typing import Dict, List, Optional

from go_board import GoBoard, EMPTY, BLACK, WHITE, COLOR_NAMES, opponent
from go_history import Comment, Move, MoveHistory
from go_rules import find_captures, move_violation, resolve_captures
from go_scoring import DEFAULT_KOMI, calculate_score, count_territory
from go_state import GameState

logger = logging.getLogger(__name__)


class GoGame:
    """A Go game with undo/redo, comments and optional snapshot persistence.

    Illegal actions are refused by returning False and leave the game untouched.
    If a store is given, the game starts from its snapshot when one is usable
    and writes a new snapshot after every successful change.
    """

    def __init__(self, size: int = 19, komi: float = DEFAULT_KOMI, store=None):
        self.size = size
        self.komi = komi
        self.store = store
        self.persistence_error: Optional[str] = None
        self.state = GameState(size=size)
        if store is not None:
            self._load()

    # ---------- queries ----------

    @property
    def board(self) -> GoBoard:
        return self.state.board

    @property
    def current_player(self) -> int:
        return self.state.current_player

    @property
    def move_count(self) -> int:
        return self.state.move_count

    @property
    def captures(self) -> Dict[int, int]:
        return self.state.captures

    @property
    def game_over(self) -> bool:
        return self.state.game_over

    @property
    def history(self) -> MoveHistory:
        return self.state.history

    @property
    def comments(self) -> List[Comment]:
        return self.state.history.comments

    def is_valid_move(self, x: int, y: int) -> bool:
        if self.state.game_over:
            return False
        return move_violation(self.board, x, y, self.current_player, self.history.last_move) is None

    # ---------- actions ----------

    def play(self, x: int, y: int) -> bool:
        """Place a stone for the current player"""
        if self.state.game_over:
            return False
        color = self.current_player
        violation = move_violation(self.board, x, y, color, self.history.last_move)
        if violation is not None:
            logger.debug("Refused %s move at (%s, %s): %s", COLOR_NAMES[color], x, y, violation)
            return False

        self.board.set(x, y, color)
        captured = resolve_captures(self.board, x, y, color, self.state.captures)
        self.history.record(Move(
            player=color,
            x=x,
            y=y,
            captured=captured,
            captured_color=opponent(color) if captured else EMPTY,
        ))
        self.state.current_player = opponent(color)
        self._save()
        return True

    def pass_turn(self) -> bool:
        if self.state.game_over:
            return False
        self.history.record(Move(player=self.current_player))
        self.state.current_player = opponent(self.current_player)
        if self.history.consecutive_passes():
            self.state.game_over = True
            logger.info("Game ended after two consecutive passes at move %d", self.move_count)
        self._save()
        return True

    def undo(self) -> bool:
        move = self.history.undo(self.board, self.state.captures)
        if move is None:
            return False
        self.state.current_player = move.player
        self._save()
        return True

    def redo(self) -> bool:
        move = self.history.redo(self.board, self.state.captures)
        if move is None:
            return False
        self.state.current_player = opponent(move.player)
        self._save()
        return True

    def add_comment(self, x: int, y: int, text: str) -> bool:
        if not self.board.in_bounds(x, y):
            return False
        self.history.add_comment(Comment(
            x=x,
            y=y,
            text=text,
            move_number=self.move_count,
            player=self.current_player,
            timestamp=time.time(),
        ))
        self._save()
        return True

    def clear_comments(self):
        """Drop the live comments; comments carried by undone moves are kept"""
        self.history.comments.clear()
        logger.info("Cleared comments at move %d", self.move_count)
        self._save()

    def end_game(self):
        self.state.game_over = True
        logger.info("Game ended at move %d", self.move_count)
        self._save()

    def reset(self):
        self.state = GameState(size=self.size)
        logger.info("New %dx%d game", self.size, self.size)
        self._save()

    # ---------- scoring ----------

    def score(self) -> Dict[str, float]:
        return calculate_score(self.board, self.komi)

    def would_capture(self, x: int, y: int) -> int:
        """Number of stones the current player would capture at (x, y)"""
        if not self.board.in_bounds(x, y) or self.board.get(x, y) != EMPTY:
            return 0
        return len(find_captures(self.board, x, y, self.current_player))

    def get_state(self) -> Dict:
        """JSON friendly view of the game for clients"""
        last = self.history.last_move
        last_move = None
        if last is not None and not last.is_pass:
            last_move = {'x': last.x, 'y': last.y}
        return {
            'size': self.size,
            'board': self.board.to_rows(),
            'currentPlayer': COLOR_NAMES[self.current_player],
            'moveCount': self.move_count,
            'captures': {'black': self.captures[BLACK], 'white': self.captures[WHITE]},
            'gameOver': self.game_over,
            'lastMove': last_move,
            'comments': [c.to_dict() for c in self.comments],
            'canUndo': len(self.history) > 0,
            'canRedo': len(self.history.redo_stack) > 0,
            'territory': count_territory(self.board),
            'score': self.score(),
        }

    # ---------- persistence ----------

    def _load(self):
        try:
            snapshot = self.store.load()
            if snapshot is None:
                return
            self.state = GameState.from_dict(snapshot, size=self.size)
            logger.info("Restored game at move %d", self.move_count)
        except (OSError, ValueError) as e:
            # includes SnapshotError
            logger.warning("Failed to load game state, starting a new game: %s", e)
            self.persistence_error = str(e)
            self.state = GameState(size=self.size)

    def _save(self) -> bool:
        if self.store is None:
            return True
        try:
            self.store.save(self.state.to_dict())
        except Exception as e:
            logger.warning("Failed to save game state: %s", e)
            self.persistence_error = str(e)
            return False
        self.persistence_error = None
        return True
