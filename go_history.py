"""
Move history with undo/redo and per-move comments
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from go_board import GoBoard, EMPTY, BLACK, WHITE


@dataclass
class Comment:
    x: int
    y: int
    text: str
    move_number: int
    player: int
    timestamp: float

    def to_dict(self) -> Dict:
        return {
            'x': self.x,
            'y': self.y,
            'comment': self.text,
            'moveNumber': self.move_number,
            'player': self.player,
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Comment':
        return cls(
            x=int(data['x']),
            y=int(data['y']),
            text=str(data['comment']),
            move_number=int(data['moveNumber']),
            player=_player(data['player']),
            timestamp=float(data['timestamp']),
        )


@dataclass
class Move:
    """A placement, or a pass when x and y are None"""
    player: int
    x: Optional[int] = None
    y: Optional[int] = None
    captured: List[Tuple[int, int]] = field(default_factory=list)
    captured_color: int = EMPTY
    move_number: int = 0
    comments: List[Comment] = field(default_factory=list)

    @property
    def is_pass(self) -> bool:
        return self.x is None

    def to_dict(self) -> Dict:
        return {
            'x': self.x,
            'y': self.y,
            'player': self.player,
            'captured': [{'x': cx, 'y': cy} for cx, cy in self.captured],
            'capturedColor': self.captured_color,
            'isPass': self.is_pass,
            'moveNumber': self.move_number,
            'comments': [c.to_dict() for c in self.comments],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Move':
        if data['isPass']:
            x = y = None
        else:
            x, y = int(data['x']), int(data['y'])
        captured = [(int(c['x']), int(c['y'])) for c in data['captured']]
        captured_color = int(data['capturedColor'])
        if captured and captured_color not in (BLACK, WHITE):
            raise ValueError(f"Invalid captured color: {captured_color}")
        return cls(
            player=_player(data['player']),
            x=x,
            y=y,
            captured=captured,
            captured_color=captured_color,
            move_number=int(data['moveNumber']),
            comments=[Comment.from_dict(c) for c in data.get('comments', [])],
        )


def _player(value) -> int:
    player = int(value)
    if player not in (BLACK, WHITE):
        raise ValueError(f"Invalid player: {value}")
    return player


class MoveHistory:
    """Applied moves, the redo stack and the live comment list.

    Board and capture counters are borrowed from the caller on undo/redo.
    """

    def __init__(self):
        self.moves: List[Move] = []
        self.redo_stack: List[Move] = []
        self.comments: List[Comment] = []

    def __len__(self):
        return len(self.moves)

    @property
    def last_move(self) -> Optional[Move]:
        return self.moves[-1] if self.moves else None

    def record(self, move: Move):
        """Append a newly played move; any undone moves can no longer be redone"""
        move.move_number = len(self.moves) + 1
        self.moves.append(move)
        self.redo_stack.clear()

    def consecutive_passes(self) -> bool:
        return len(self.moves) >= 2 and self.moves[-1].is_pass and self.moves[-2].is_pass

    def add_comment(self, comment: Comment):
        self.comments.append(comment)

    def undo(self, board: GoBoard, captures: Dict[int, int]) -> Optional[Move]:
        if not self.moves:
            return None

        move = self.moves.pop()
        move.comments = [c for c in self.comments if c.move_number == move.move_number]
        self.comments = [c for c in self.comments if c.move_number != move.move_number]

        if not move.is_pass:
            board.set(move.x, move.y, EMPTY)
            for cx, cy in move.captured:
                board.set(cx, cy, move.captured_color)
            captures[move.player] -= len(move.captured)

        self.redo_stack.append(move)
        return move

    def redo(self, board: GoBoard, captures: Dict[int, int]) -> Optional[Move]:
        if not self.redo_stack:
            return None

        move = self.redo_stack.pop()
        self.comments.extend(move.comments)
        move.comments = []

        if not move.is_pass:
            board.set(move.x, move.y, move.player)
            for cx, cy in move.captured:
                board.set(cx, cy, EMPTY)
            captures[move.player] += len(move.captured)

        self.moves.append(move)
        return move

    def clear(self):
        self.moves.clear()
        self.redo_stack.clear()
        self.comments.clear()
