from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple

from sweetswap.components.effect import Effect, EffectKind
from sweetswap.components.grid import Coord, Grid
from sweetswap.components.piece import Piece, SpecialKind


@dataclass(frozen=True, slots=True)
class CascadeResult:
    cells: frozenset
    effects: Tuple[Effect, ...]
    activated: Tuple[Coord, ...]


def row_cells(grid: Grid, y: int) -> List[Coord]:
    return [(x, y) for x in range(grid.width)]


def column_cells(grid: Grid, x: int) -> List[Coord]:
    return [(x, y) for y in range(grid.height)]


def color_cells(grid: Grid, color: str) -> List[Coord]:
    return [coord for coord, piece in grid.pieces() if piece.color == color]


def dominant_color(grid: Grid) -> Optional[str]:
    """Most common piece colour; ties go to the colour seen first in row-major order."""
    counts = Counter(piece.color for _, piece in grid.pieces() if piece.color is not None)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def activation_cells(grid: Grid, coord: Coord, piece: Piece) -> Tuple[List[Coord], Optional[Effect]]:
    """Cells a special piece sweeps when caught in a clear, plus the matching effect."""
    x, y = coord
    special = piece.special
    if special is SpecialKind.STRIPED_ROW:
        return row_cells(grid, y), Effect(EffectKind.ROW_CLEAR, index=y)
    if special is SpecialKind.STRIPED_COLUMN:
        return column_cells(grid, x), Effect(EffectKind.COLUMN_CLEAR, index=x)
    if special is SpecialKind.RAINBOW:
        cells = list(grid.coords())
        return cells, Effect(EffectKind.FULL_CLEAR, coordinates=tuple(cells))
    if special is SpecialKind.WRAPPED:
        color = piece.color
    elif special is SpecialKind.BOMB:
        color = dominant_color(grid)
    else:
        return [], None
    if color is None:
        return [], None
    cells = color_cells(grid, color)
    return cells, Effect(EffectKind.COLOR_CLEAR, coordinates=tuple(cells), color=color)


def expand_clear_set(
    grid: Grid,
    initial: Iterable[Coord],
    *,
    processed: Iterable[Coord] = (),
) -> CascadeResult:
    """Grow a clear-set by detonating every special piece caught inside it.

    Passes repeat until one adds no new cell. Each special fires at most once,
    so the loop is bounded by the number of cells on the grid. Coordinates in
    ``processed`` are treated as already fired.
    """
    to_clear: Set[Coord] = {grid.require(coord) for coord in initial}
    done: Set[Coord] = set(processed)
    effects: List[Effect] = []
    activated: List[Coord] = []
    grew = True
    while grew:
        grew = False
        for coord in sorted(to_clear, key=lambda c: (c[1], c[0])):
            if coord in done:
                continue
            piece = grid.at(coord)
            if piece is None or piece.special is None:
                continue
            done.add(coord)
            activated.append(coord)
            cells, effect = activation_cells(grid, coord, piece)
            if effect is not None:
                effects.append(effect)
            for cell in cells:
                if cell not in to_clear:
                    to_clear.add(cell)
                    grew = True
    return CascadeResult(frozenset(to_clear), tuple(effects), tuple(activated))
