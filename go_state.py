"""
Game state value type and its versioned snapshot encoding
"""
from dataclasses import dataclass, field
from typing import Any, Dict

from go_board import GoBoard, BLACK, WHITE
from go_history import Move, Comment, MoveHistory

SCHEMA_VERSION = 1


class SnapshotError(ValueError):
    """A stored snapshot cannot be read or does not match the current schema"""


@dataclass
class GameState:
    size: int = 19
    board: GoBoard = None
    current_player: int = BLACK
    captures: Dict[int, int] = field(default_factory=lambda: {BLACK: 0, WHITE: 0})
    history: MoveHistory = field(default_factory=MoveHistory)
    game_over: bool = False

    def __post_init__(self):
        if self.board is None:
            self.board = GoBoard(self.size)

    @property
    def move_count(self) -> int:
        return len(self.history)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': SCHEMA_VERSION,
            'size': self.size,
            'board': self.board.to_rows(),
            'currentPlayer': self.current_player,
            'moveCount': self.move_count,
            'captures': {'black': self.captures[BLACK], 'white': self.captures[WHITE]},
            'history': [m.to_dict() for m in self.history.moves],
            'comments': [c.to_dict() for c in self.history.comments],
            'redoHistory': [m.to_dict() for m in self.history.redo_stack],
            'gameOver': self.game_over,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], size: int = None) -> 'GameState':
        """Decode a snapshot, raising SnapshotError when it is unusable.

        If `size` is given the snapshot must be for a board of that size.
        """
        if not isinstance(data, dict):
            raise SnapshotError("Snapshot is not an object")
        version = data.get('version')
        if version != SCHEMA_VERSION:
            raise SnapshotError(f"Unsupported snapshot version: {version!r}")

        try:
            board = GoBoard.from_rows(data['board'])
            if size is not None and board.size != size:
                raise SnapshotError(f"Snapshot board size {board.size} does not match {size}")
            if int(data['size']) != board.size:
                raise SnapshotError("Snapshot size field does not match its board")

            history = MoveHistory()
            history.moves = [Move.from_dict(m) for m in data['history']]
            history.redo_stack = [Move.from_dict(m) for m in data['redoHistory']]
            history.comments = [Comment.from_dict(c) for c in data['comments']]
            _check_positions(board, history)

            current_player = int(data['currentPlayer'])
            captures = {BLACK: int(data['captures']['black']), WHITE: int(data['captures']['white'])}
            move_count = int(data['moveCount'])
            game_over = data.get('gameOver', False)
            if not isinstance(game_over, bool):
                raise SnapshotError(f"Game over flag must be true or false, not {game_over!r}")
        except SnapshotError:
            raise
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise SnapshotError(f"Malformed snapshot: {e}") from e

        if current_player not in (BLACK, WHITE):
            raise SnapshotError(f"Invalid current player: {current_player}")
        if move_count != len(history.moves):
            raise SnapshotError(f"Move count {move_count} does not match history length {len(history.moves)}")
        if captures[BLACK] < 0 or captures[WHITE] < 0:
            raise SnapshotError("Capture counters cannot be negative")

        return cls(
            size=board.size,
            board=board,
            current_player=current_player,
            captures=captures,
            history=history,
            game_over=game_over,
        )


def _check_positions(board: GoBoard, history: MoveHistory):
    """Every recorded point must lie on the board"""
    for move in history.moves + history.redo_stack:
        points = list(move.captured)
        if not move.is_pass:
            points.append((move.x, move.y))
        for comment in move.comments:
            points.append((comment.x, comment.y))
        for x, y in points:
            if not board.in_bounds(x, y):
                raise SnapshotError(f"Move {move.move_number} refers to off-board point ({x}, {y})")
    for comment in history.comments:
        if not board.in_bounds(comment.x, comment.y):
            raise SnapshotError(f"Comment refers to off-board point ({comment.x}, {comment.y})")
