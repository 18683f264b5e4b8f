from __future__ import annotations

from typing import List, Optional

from sweetswap.components.grid import Coord, Grid
from sweetswap.components.piece import Piece
from sweetswap.factories.pieces import PieceFactory


def settle(grid: Grid) -> Grid:
    """Drop every piece to the bottom of its column, keeping column order."""
    rows: List[List[Optional[Piece]]] = [[None] * grid.width for _ in range(grid.height)]
    for x in range(grid.width):
        column = [grid.cells[y][x] for y in range(grid.height) if grid.cells[y][x] is not None]
        offset = grid.height - len(column)
        for index, piece in enumerate(column):
            rows[offset + index][x] = piece
    return Grid.from_rows(rows)


def needs_settle(grid: Grid) -> bool:
    """True when some piece sits above an empty cell in its column."""
    for x in range(grid.width):
        gap = False
        for y in range(grid.height - 1, -1, -1):
            if grid.cells[y][x] is None:
                gap = True
            elif gap:
                return True
    return False


def fill(grid: Grid, factory: PieceFactory) -> tuple[Grid, List[Coord]]:
    """Put a fresh random piece into every empty cell; returns the new grid and filled cells."""
    if needs_settle(grid):
        raise RuntimeError("Cannot refill a grid with pieces floating above gaps")
    spawned = grid.empty_cells()
    return grid.replace({coord: factory.create_piece() for coord in spawned}), spawned
