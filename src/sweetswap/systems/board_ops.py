from __future__ import annotations

from typing import List, Optional, Tuple

from sweetswap.components.grid import Coord, Grid
from sweetswap.components.piece import Piece
from sweetswap.constants import BOARD_GENERATION_ATTEMPTS, GRID_COLS, GRID_ROWS
from sweetswap.factories.pieces import PieceFactory
from sweetswap.systems.match import find_matches
from sweetswap.systems.swap import evaluate_swap


def find_valid_swaps(grid: Grid) -> List[Tuple[Coord, Coord]]:
    """Enumerate adjacent swaps that would be accepted, right then down from each cell."""
    swaps: List[Tuple[Coord, Coord]] = []
    for x, y in grid.coords():
        pos = (x, y)
        right = (x + 1, y)
        if x + 1 < grid.width and evaluate_swap(grid, pos, right).accepted:
            swaps.append((pos, right))
        down = (x, y + 1)
        if y + 1 < grid.height and evaluate_swap(grid, pos, down).accepted:
            swaps.append((pos, down))
    return swaps


def _completes_run(rows: List[List[Optional[Piece]]], x: int, y: int, color: str) -> bool:
    if x >= 2 and rows[y][x - 1].color == color and rows[y][x - 2].color == color:
        return True
    return y >= 2 and rows[y - 1][x].color == color and rows[y - 2][x].color == color


def generate_board(
    factory: PieceFactory,
    *,
    width: int = GRID_COLS,
    height: int = GRID_ROWS,
    max_attempts: int = BOARD_GENERATION_ATTEMPTS,
    require_move: bool = True,
) -> Grid:
    """Fill a fresh board that contains no matches (and, by default, at least one legal move).

    Cells are placed row-major; a cell is redrawn whenever it would complete
    a run of three with its left or upper neighbours.
    """
    for _ in range(max_attempts):
        rows: List[List[Optional[Piece]]] = [[None] * width for _ in range(height)]
        for y in range(height):
            for x in range(width):
                piece = factory.create_piece()
                # Bounded so a one- or two-colour palette cannot spin forever.
                for _ in range(max_attempts):
                    if not _completes_run(rows, x, y, piece.color):
                        break
                    piece = factory.create_piece()
                rows[y][x] = piece
        grid = Grid.from_rows(rows)
        if find_matches(grid):
            continue
        if require_move and not find_valid_swaps(grid):
            continue
        return grid
    raise RuntimeError("Unable to generate board without matches and valid swaps")
