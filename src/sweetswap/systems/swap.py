from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from sweetswap.components.effect import Effect, EffectKind
from sweetswap.components.grid import Coord, Grid
from sweetswap.components.piece import Piece, SpecialKind
from sweetswap.constants import CASCADE_POINTS_PER_PIECE
from sweetswap.systems.cascade import color_cells, column_cells, row_cells
from sweetswap.systems.match import has_line_match

# Reasons reported with a rejected swap.
REJECT_NOT_ADJACENT = 'not_adjacent'
REJECT_EMPTY_CELL = 'empty_cell'
REJECT_NO_MATCH = 'no_match'

ACTIVATION_COMBO = 'combo'
ACTIVATION_RAINBOW = 'rainbow'
ACTIVATION_BOMB = 'bomb'
ACTIVATION_MATCH = 'match'


@dataclass(frozen=True, slots=True)
class SwapOutcome:
    """Result of evaluating a proposed swap.

    ``cleared`` is the immediate clear-set of a special activation (empty for
    an ordinary swap, whose clearing is left to match resolution).
    """
    accepted: bool
    grid: Grid
    effects: Tuple[Effect, ...] = ()
    points: int = 0
    cleared: frozenset = field(default_factory=frozenset)
    activation: Optional[str] = None
    reason: Optional[str] = None


def is_adjacent(a: Coord, b: Coord) -> bool:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def swap_cells(grid: Grid, a: Coord, b: Coord) -> Grid:
    return grid.replace({a: grid.at(b), b: grid.at(a)})


def _activate(grid: Grid, cells: Iterable[Coord], effects: List[Effect], activation: str) -> SwapOutcome:
    cleared = frozenset(cells)
    occupied = [coord for coord in cleared if grid.at(coord) is not None]
    new_grid = grid.replace({coord: None for coord in cleared})
    return SwapOutcome(
        accepted=True,
        grid=new_grid,
        effects=tuple(effects),
        points=len(occupied) * CASCADE_POINTS_PER_PIECE,
        cleared=cleared,
        activation=activation,
    )


def _full_clear(grid: Grid, activation: str) -> SwapOutcome:
    cells = list(grid.coords())
    return _activate(grid, cells, [Effect(EffectKind.FULL_CLEAR, coordinates=tuple(cells))], activation)


def _combine(grid: Grid, a: Coord, b: Coord, piece_a: Piece, piece_b: Piece) -> Optional[SwapOutcome]:
    kinds = {piece_a.special, piece_b.special}
    if kinds <= {SpecialKind.BOMB, SpecialKind.RAINBOW}:
        return _full_clear(grid, ACTIVATION_COMBO)

    cells: Set[Coord] = {a, b}
    effects: List[Effect] = []
    if piece_a.special.is_striped and piece_b.special.is_striped:
        x, y = a
        cells.update(row_cells(grid, y))
        cells.update(column_cells(grid, x))
        effects.append(Effect(EffectKind.ROW_CLEAR, index=y))
        effects.append(Effect(EffectKind.COLUMN_CLEAR, index=x))
        return _activate(grid, cells, effects, ACTIVATION_COMBO)

    if SpecialKind.BOMB in kinds and (piece_a.special.is_striped or piece_b.special.is_striped):
        striped, (x, y) = (piece_a, a) if piece_a.special.is_striped else (piece_b, b)
        # Three-wide band centred on the striped piece's own line.
        if striped.special is SpecialKind.STRIPED_ROW:
            for row in (y - 1, y, y + 1):
                if 0 <= row < grid.height:
                    cells.update(row_cells(grid, row))
                    effects.append(Effect(EffectKind.ROW_CLEAR, index=row))
        else:
            for col in (x - 1, x, x + 1):
                if 0 <= col < grid.width:
                    cells.update(column_cells(grid, col))
                    effects.append(Effect(EffectKind.COLUMN_CLEAR, index=col))
        return _activate(grid, cells, effects, ACTIVATION_COMBO)
    return None


def evaluate_swap(grid: Grid, a: Coord, b: Coord) -> SwapOutcome:
    """Decide whether swapping a and b is a legal move and what it triggers.

    Out-of-bounds coordinates raise IndexError; every other illegal swap is
    rejected with the grid untouched. Cascades and gravity are not run here.
    """
    grid.require(a)
    grid.require(b)
    if not is_adjacent(a, b):
        return SwapOutcome(False, grid, reason=REJECT_NOT_ADJACENT)
    piece_a = grid.at(a)
    piece_b = grid.at(b)
    if piece_a is None or piece_b is None:
        return SwapOutcome(False, grid, reason=REJECT_EMPTY_CELL)

    if piece_a.is_special and piece_b.is_special:
        combined = _combine(grid, a, b, piece_a, piece_b)
        if combined is not None:
            return combined

    if piece_a.special is SpecialKind.RAINBOW or piece_b.special is SpecialKind.RAINBOW:
        return _full_clear(grid, ACTIVATION_RAINBOW)

    if piece_a.special is SpecialKind.BOMB or piece_b.special is SpecialKind.BOMB:
        bomb_cell, other = (a, piece_b) if piece_a.special is SpecialKind.BOMB else (b, piece_a)
        if other.color is not None:
            cells = color_cells(grid, other.color)
            effect = Effect(EffectKind.COLOR_CLEAR, coordinates=tuple(cells), color=other.color)
            return _activate(grid, set(cells) | {bomb_cell}, [effect], ACTIVATION_BOMB)

    swapped = swap_cells(grid, a, b)
    if has_line_match(swapped, a) or has_line_match(swapped, b):
        return SwapOutcome(True, swapped, activation=ACTIVATION_MATCH)
    return SwapOutcome(False, grid, reason=REJECT_NO_MATCH)
