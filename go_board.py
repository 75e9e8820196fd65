"""
Go board grid and connectivity analysis (groups, liberties, empty regions)
"""
import numpy as np
from typing import Set, Tuple, List, Iterator
from numba import njit

# Constants for board representation
EMPTY = 0
BLACK = 1
WHITE = 2

COLOR_NAMES = {BLACK: 'black', WHITE: 'white'}


def opponent(color: int) -> int:
    """Get opponent color"""
    return WHITE if color == BLACK else BLACK


@njit
def _flood_fill(cells, size, start):
    """Iterative flood fill from `start` over cells of the same value.

    Returns the region indices, the number of distinct empty cells touching
    the region, and a mask of the cell values found on its border.
    """
    n = size * size
    color = cells[start]
    visited = np.zeros(n, dtype=np.bool_)
    touched = np.zeros(n, dtype=np.bool_)
    stack = np.empty(n, dtype=np.int64)
    region = np.empty(n, dtype=np.int64)
    borders = np.zeros(3, dtype=np.bool_)

    top = 0
    count = 0
    liberties = 0
    stack[top] = start
    top += 1
    visited[start] = True

    while top > 0:
        top -= 1
        idx = stack[top]
        region[count] = idx
        count += 1
        x = idx % size
        y = idx // size

        for k in range(4):
            if k == 0:
                if x == 0:
                    continue
                nb = idx - 1
            elif k == 1:
                if x == size - 1:
                    continue
                nb = idx + 1
            elif k == 2:
                if y == 0:
                    continue
                nb = idx - size
            else:
                if y == size - 1:
                    continue
                nb = idx + size

            value = cells[nb]
            if value == color:
                if not visited[nb]:
                    visited[nb] = True
                    stack[top] = nb
                    top += 1
            else:
                borders[value] = True
                if value == EMPTY and not touched[nb]:
                    touched[nb] = True
                    liberties += 1

    return region[:count], liberties, borders


class GoBoard:
    """Fixed-size Go grid stored as a flat int8 array indexed by y * size + x"""

    def __init__(self, size: int = 19):
        if not isinstance(size, (int, np.integer)) or size <= 0 or size % 2 == 0:
            raise ValueError(f"Invalid board size: {size}. Must be a positive odd integer.")
        self._size = int(size)
        self.cells = np.zeros(self._size * self._size, dtype=np.int8)

    @property
    def size(self) -> int:
        return self._size

    def __eq__(self, other):
        if not isinstance(other, GoBoard):
            return NotImplemented
        return self._size == other._size and np.array_equal(self.cells, other.cells)

    def __repr__(self):
        symbols = {EMPTY: '.', BLACK: 'X', WHITE: 'O'}
        rows = []
        for y in range(self._size):
            rows.append(' '.join(symbols[int(v)] for v in self.cells[y * self._size:(y + 1) * self._size]))
        return '\n'.join(rows)

    def copy(self) -> 'GoBoard':
        """Fast copy of the grid"""
        new_board = GoBoard(self._size)
        new_board.cells = self.cells.copy()
        return new_board

    def clear(self):
        self.cells[:] = EMPTY

    # ---------- cell access ----------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._size and 0 <= y < self._size

    def index(self, x: int, y: int) -> int:
        return y * self._size + x

    def position(self, index: int) -> Tuple[int, int]:
        y, x = divmod(int(index), self._size)
        return x, y

    def get(self, x: int, y: int) -> int:
        return int(self.cells[y * self._size + x])

    def set(self, x: int, y: int, color: int):
        self.cells[y * self._size + x] = color

    def neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int]]:
        """Orthogonal neighbors inside the board"""
        if x > 0:
            yield x - 1, y
        if x < self._size - 1:
            yield x + 1, y
        if y > 0:
            yield x, y - 1
        if y < self._size - 1:
            yield x, y + 1

    def count(self, color: int) -> int:
        return int(np.count_nonzero(self.cells == color))

    def to_rows(self) -> List[List[int]]:
        """Board as a list of rows, board[y][x]"""
        return self.cells.reshape(self._size, self._size).tolist()

    @classmethod
    def from_rows(cls, rows: List[List[int]]) -> 'GoBoard':
        board = cls(len(rows))
        values = np.array(rows)
        if values.shape != (board.size, board.size):
            raise ValueError("Board rows must form a square grid")
        if not np.isin(values, (EMPTY, BLACK, WHITE)).all():
            raise ValueError("Board cells must be 0 (empty), 1 (black) or 2 (white)")
        board.cells = values.astype(np.int8).reshape(-1)
        return board

    # ---------- connectivity ----------

    def _fill(self, x: int, y: int):
        return _flood_fill(self.cells, self._size, self.index(x, y))

    def get_group(self, x: int, y: int) -> Set[Tuple[int, int]]:
        """All stones connected to (x, y) with the same color. Empty cells have no group."""
        if self.get(x, y) == EMPTY:
            return set()
        region, _, _ = self._fill(x, y)
        return {self.position(i) for i in region}

    def count_liberties(self, x: int, y: int) -> int:
        """Distinct empty cells adjacent to any stone of the group at (x, y)"""
        if self.get(x, y) == EMPTY:
            return 0
        _, liberties, _ = self._fill(x, y)
        return int(liberties)

    def group_and_liberties(self, x: int, y: int) -> Tuple[Set[Tuple[int, int]], int]:
        if self.get(x, y) == EMPTY:
            return set(), 0
        region, liberties, _ = self._fill(x, y)
        return {self.position(i) for i in region}, int(liberties)

    def get_empty_region(self, x: int, y: int) -> Tuple[Set[Tuple[int, int]], Set[int]]:
        """Maximal empty region containing (x, y) and the stone colors bordering it"""
        if self.get(x, y) != EMPTY:
            return set(), set()
        region, _, borders = self._fill(x, y)
        colors = {color for color in (BLACK, WHITE) if borders[color]}
        return {self.position(i) for i in region}, colors
