from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SpecialKind(str, Enum):
    STRIPED_ROW = 'striped-row'
    STRIPED_COLUMN = 'striped-column'
    BOMB = 'bomb'
    WRAPPED = 'wrapped'
    RAINBOW = 'rainbow'

    @property
    def is_striped(self) -> bool:
        return self in (SpecialKind.STRIPED_ROW, SpecialKind.STRIPED_COLUMN)

    @property
    def is_colorless(self) -> bool:
        """Bomb and rainbow pieces never take part in colour matching."""
        return self in (SpecialKind.BOMB, SpecialKind.RAINBOW)


@dataclass(frozen=True, slots=True)
class Piece:
    """A single candy occupying one grid cell.

    ``id`` only lets a presentation layer follow the piece across moves; the
    engine never reads it. ``color`` is None for bomb and rainbow pieces.
    """
    id: int
    color: Optional[str]
    special: Optional[SpecialKind] = None

    @property
    def is_special(self) -> bool:
        return self.special is not None

    @property
    def match_color(self) -> Optional[str]:
        if self.special is not None and self.special.is_colorless:
            return None
        return self.color
