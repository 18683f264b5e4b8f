from __future__ import annotations

from typing import Dict, List

from sweetswap.components.grid import Coord, Grid
from sweetswap.components.match import HORIZONTAL, VERTICAL, Match
from sweetswap.constants import MIN_MATCH_LENGTH


def _runs(colors: Dict[Coord, str], lines: List[List[Coord]], orientation: str) -> List[Match]:
    matches: List[Match] = []
    for line in lines:
        run: List[Coord] = []
        last = None
        for coord in line:
            color = colors.get(coord)
            if color is not None and color == last:
                run.append(coord)
            else:
                if len(run) >= MIN_MATCH_LENGTH:
                    matches.append(Match(tuple(run), last, orientation))
                run = [coord] if color is not None else []
                last = color
        if len(run) >= MIN_MATCH_LENGTH:
            matches.append(Match(tuple(run), last, orientation))
    return matches


def find_matches(grid: Grid) -> List[Match]:
    """Detect every maximal horizontal or vertical run of length >= 3.

    Horizontal runs come first, row by row, then vertical runs column by
    column. Runs crossing in an L/T/+ shape stay separate matches that share
    the crossing cell.
    """
    colors = grid.color_map()
    if not colors:
        return []
    rows = [[(x, y) for x in range(grid.width)] for y in range(grid.height)]
    cols = [[(x, y) for y in range(grid.height)] for x in range(grid.width)]
    matches = _runs(colors, rows, HORIZONTAL) + _runs(colors, cols, VERTICAL)
    cell_sets = [set(m.cells) for m in matches]
    unique: List[Match] = []
    for index, match in enumerate(matches):
        covered = any(
            other_index != index
            and cell_sets[index] <= other
            and (len(other) > len(cell_sets[index]) or other_index < index)
            for other_index, other in enumerate(cell_sets)
        )
        if not covered:
            unique.append(match)
    return unique


def has_line_match(grid: Grid, coord: Coord) -> bool:
    """Return True if a horizontal or vertical run of >= 3 passes through coord."""
    piece = grid.at(coord)
    color = piece.match_color if piece is not None else None
    if color is None:
        return False
    x, y = coord

    def same(cx: int, cy: int) -> bool:
        if not grid.in_bounds((cx, cy)):
            return False
        other = grid.cells[cy][cx]
        return other is not None and other.match_color == color

    h_run = 1
    c_left = x - 1
    while same(c_left, y):
        h_run += 1
        c_left -= 1
    c_right = x + 1
    while same(c_right, y):
        h_run += 1
        c_right += 1
    if h_run >= MIN_MATCH_LENGTH:
        return True
    v_run = 1
    r_up = y - 1
    while same(x, r_up):
        v_run += 1
        r_up -= 1
    r_down = y + 1
    while same(x, r_down):
        v_run += 1
        r_down += 1
    return v_run >= MIN_MATCH_LENGTH
