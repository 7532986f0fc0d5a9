"""Server-side board occupancy: which role marks which cell."""

from typing import Optional
from shared.constants import GRID_SIZE, Role
from shared.grid_utils import in_bounds, all_cells


class Grid:
    """A square board of cells, each empty or marked with one role."""

    def __init__(self, size: int = GRID_SIZE):
        self.size = size
        # Indexed cells[y][x]
        self.cells: list[list[Optional[Role]]] = [[None] * size for _ in range(size)]

    def in_bounds(self, x: int, y: int) -> bool:
        return in_bounds(x, y, self.size)

    def get(self, x: int, y: int) -> Optional[Role]:
        return self.cells[y][x]

    def is_occupied(self, x: int, y: int) -> bool:
        return self.cells[y][x] is not None

    def place(self, role: Role, x: int, y: int):
        if self.cells[y][x] is not None:
            raise ValueError(f"Cell ({x}, {y}) already holds {self.cells[y][x].value}")
        self.cells[y][x] = role

    def clear(self, x: int, y: int):
        self.cells[y][x] = None

    def clear_all(self):
        for row in self.cells:
            for x in range(self.size):
                row[x] = None

    def find(self, role: Role) -> list[tuple[int, int]]:
        return [(x, y) for (x, y) in all_cells(self.size) if self.cells[y][x] == role]

    def empty_cells(self) -> list[tuple[int, int]]:
        return [(x, y) for (x, y) in all_cells(self.size) if self.cells[y][x] is None]

    def to_rows(self) -> list[list[Optional[Role]]]:
        return [list(row) for row in self.cells]
