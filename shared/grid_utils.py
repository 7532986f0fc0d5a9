"""Square-grid math using (x, y) coordinates.

x is the column and y is the row, both zero-indexed.
"""

from typing import Iterator

from shared.constants import GRID_SIZE


def in_bounds(x: int, y: int, size: int = GRID_SIZE) -> bool:
    return 0 <= x < size and 0 <= y < size


def chebyshev_distance(x1: int, y1: int, x2: int, y2: int) -> int:
    """King-move distance: max(|dx|, |dy|)."""
    return max(abs(x1 - x2), abs(y1 - y2))


def all_cells(size: int = GRID_SIZE) -> Iterator[tuple[int, int]]:
    """Yield every (x, y) on the board in row-major order."""
    for y in range(size):
        for x in range(size):
            yield (x, y)
