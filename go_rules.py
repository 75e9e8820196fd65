"""
Move validation (bounds, occupancy, ko, suicide) and capture resolution
"""
from typing import Dict, List, Optional, Tuple

from go_board import GoBoard, EMPTY, opponent

OFF_BOARD = 'off_board'
OCCUPIED = 'occupied'
KO = 'ko'
SUICIDE = 'suicide'


def find_captures(board: GoBoard, x: int, y: int, color: int) -> List[Tuple[int, int]]:
    """Opponent stones that a stone of `color` placed at (x, y) would capture.

    The stone is placed only temporarily; the board is left as it was.
    """
    opp = opponent(color)
    captured = set()
    board.set(x, y, color)
    try:
        for nx, ny in board.neighbors(x, y):
            if board.get(nx, ny) != opp or (nx, ny) in captured:
                continue
            group, liberties = board.group_and_liberties(nx, ny)
            if liberties == 0:
                captured |= group
    finally:
        board.set(x, y, EMPTY)
    return sorted(captured)


def is_suicide(board: GoBoard, x: int, y: int, color: int) -> bool:
    """True if a stone at (x, y) leaves its own group without liberties.

    Captures are not considered; callers check them first.
    """
    board.set(x, y, color)
    try:
        return board.count_liberties(x, y) == 0
    finally:
        board.set(x, y, EMPTY)


def is_ko_recapture(x: int, y: int, captured: List[Tuple[int, int]], last_move) -> bool:
    """Single stone recapture of the stone that just captured a single stone"""
    if last_move is None or last_move.is_pass:
        return False
    if len(captured) != 1 or len(last_move.captured) != 1:
        return False
    return (x, y) == tuple(last_move.captured[0]) and captured[0] == (last_move.x, last_move.y)


def move_violation(board: GoBoard, x: int, y: int, color: int, last_move=None) -> Optional[str]:
    """Why a placement is illegal, or None when it may be played"""
    if not board.in_bounds(x, y):
        return OFF_BOARD
    if board.get(x, y) != EMPTY:
        return OCCUPIED

    captured = find_captures(board, x, y, color)
    if is_ko_recapture(x, y, captured, last_move):
        return KO
    if not captured and is_suicide(board, x, y, color):
        return SUICIDE
    return None


def is_legal(board: GoBoard, x: int, y: int, color: int, last_move=None) -> bool:
    return move_violation(board, x, y, color, last_move) is None


def resolve_captures(board: GoBoard, x: int, y: int, color: int,
                     captures: Dict[int, int]) -> List[Tuple[int, int]]:
    """Remove opponent groups left without liberties by the stone just placed at (x, y).

    Credits the removed stones to `color` in `captures` and returns their positions.
    """
    opp = opponent(color)
    captured = set()
    for nx, ny in board.neighbors(x, y):
        if board.get(nx, ny) != opp:
            continue
        group, liberties = board.group_and_liberties(nx, ny)
        if liberties == 0:
            for gx, gy in group:
                board.set(gx, gy, EMPTY)
            captured |= group
    captures[color] += len(captured)
    return sorted(captured)
