"""
Area scoring: stones on the board plus empty regions bordered by a single color
"""
from typing import Dict

import numpy as np

from go_board import GoBoard, EMPTY, BLACK, WHITE

DEFAULT_KOMI = 7.5


def count_territory(board: GoBoard) -> Dict[str, Dict[str, int]]:
    """Stones and territory per color.

    A region bordered by both colors, or by no stones at all, belongs to nobody.
    """
    territory = {BLACK: 0, WHITE: 0}
    visited = np.zeros(board.size * board.size, dtype=np.bool_)

    for index in np.flatnonzero(board.cells == EMPTY):
        if visited[index]:
            continue
        x, y = board.position(index)
        region, colors = board.get_empty_region(x, y)
        for rx, ry in region:
            visited[board.index(rx, ry)] = True
        if len(colors) == 1:
            territory[colors.pop()] += len(region)

    return {
        'black': {'stones': board.count(BLACK), 'territory': territory[BLACK]},
        'white': {'stones': board.count(WHITE), 'territory': territory[WHITE]},
    }


def calculate_score(board: GoBoard, komi: float = DEFAULT_KOMI) -> Dict[str, float]:
    counts = count_territory(board)
    return {
        'black': float(counts['black']['stones'] + counts['black']['territory']),
        'white': float(counts['white']['stones'] + counts['white']['territory'] + komi),
    }
