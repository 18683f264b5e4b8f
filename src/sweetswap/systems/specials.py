from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from sweetswap.components.grid import Coord, Grid
from sweetswap.components.match import Match
from sweetswap.components.piece import Piece, SpecialKind
from sweetswap.constants import (
    BOMB_UNLOCK_LEVEL,
    RAINBOW_UNLOCK_LEVEL,
    STRIPED_UNLOCK_LEVEL,
    WRAPPED_UNLOCK_LEVEL,
)
from sweetswap.factories.pieces import PieceFactory


@dataclass(frozen=True, slots=True)
class SpecialPlacement:
    coord: Coord
    piece: Piece


def _crossing(matches: Sequence[Match]) -> tuple[Optional[Coord], int]:
    """Return the first cell shared by two matches and the count of distinct matched cells."""
    counts: Dict[Coord, int] = {}
    for match in matches:
        for coord in match.cells:
            counts[coord] = counts.get(coord, 0) + 1
    crossing = next((coord for coord, count in counts.items() if count > 1), None)
    return crossing, len(counts)


def decide_special(
    matches: Sequence[Match],
    grid: Grid,
    level: int,
    factory: PieceFactory,
) -> SpecialPlacement | None:
    """Pick the special piece (if any) a resolution step should leave behind.

    Rules are tried in priority order: crossing shape -> wrapped, then the
    longest match decides between rainbow, bomb and striped. Ties between
    equally long matches go to the one found first.
    """
    if not matches:
        return None

    crossing, total = _crossing(matches)
    if crossing is not None and total >= 5 and level >= WRAPPED_UNLOCK_LEVEL:
        piece = grid.at(crossing)
        if piece is not None and piece.color is not None:
            return SpecialPlacement(crossing, factory.create_piece(SpecialKind.WRAPPED, piece.color))

    primary: Match = matches[0]
    for match in matches[1:]:
        if len(match) > len(primary):
            primary = match
    first = primary.cells[0]
    piece = grid.at(first)
    if piece is None or piece.color is None:
        return None

    length = len(primary)
    if length >= 6 and level >= RAINBOW_UNLOCK_LEVEL:
        return SpecialPlacement(first, factory.create_piece(SpecialKind.RAINBOW))
    if length == 5 and level >= BOMB_UNLOCK_LEVEL:
        return SpecialPlacement(first, factory.create_piece(SpecialKind.BOMB))
    if length == 4 and level >= STRIPED_UNLOCK_LEVEL:
        # The stripe clears the line perpendicular to the run that made it.
        kind = SpecialKind.STRIPED_COLUMN if primary.is_horizontal else SpecialKind.STRIPED_ROW
        return SpecialPlacement(first, factory.create_piece(kind, piece.color))
    return None

