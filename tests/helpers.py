from __future__ import annotations

import itertools
from typing import Dict, List, Optional

from sweetswap.components.grid import Coord, Grid
from sweetswap.components.piece import Piece, SpecialKind
from sweetswap.factories.pieces import PieceFactory

COLOR_CODES = {
    'R': 'red',
    'O': 'orange',
    'Y': 'yellow',
    'G': 'green',
    'B': 'blue',
    'P': 'purple',
}

_ids = itertools.count(100000)


def make_grid(*rows: str, specials: Dict[Coord, SpecialKind] | None = None) -> Grid:
    """Build a grid from compact row strings.

    ``.`` is a filler piece with a colour unique to its cell (it can never
    match), ``_`` is an empty cell, ``*`` a bomb, ``@`` a rainbow and the
    letters in COLOR_CODES are plain pieces. ``specials`` upgrades the piece
    at a coordinate to a special kind, keeping its colour.
    """
    specials = specials or {}
    cells: List[List[Optional[Piece]]] = []
    for y, row in enumerate(rows):
        line: List[Optional[Piece]] = []
        for x, code in enumerate(row):
            if code == '_':
                line.append(None)
                continue
            if code == '*':
                line.append(Piece(next(_ids), None, SpecialKind.BOMB))
                continue
            if code == '@':
                line.append(Piece(next(_ids), None, SpecialKind.RAINBOW))
                continue
            color = COLOR_CODES.get(code, f'filler-{x}-{y}')
            special = specials.get((x, y))
            if special is not None and special.is_colorless:
                color = None
            line.append(Piece(next(_ids), color, special))
        cells.append(line)
    return Grid.from_rows(cells)


def colors(grid: Grid) -> List[List[Optional[str]]]:
    return [[piece.color if piece else None for piece in row] for row in grid.cells]


class FreshColorFactory(PieceFactory):
    """Factory whose refills never match anything: every piece gets a new colour."""

    def __init__(self) -> None:
        super().__init__(('fresh',))
        self._colors = itertools.count()

    def random_color(self) -> str:
        return f'fresh-{next(self._colors)}'
