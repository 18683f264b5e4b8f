from __future__ import annotations

import itertools
import random
from typing import Iterable, Optional

from sweetswap.components.piece import Piece, SpecialKind
from sweetswap.constants import PIECE_COLORS

# Shared so pieces from different factories never collide on id.
_PIECE_IDS = itertools.count(1)


class PieceFactory:
    """Creates pieces with fresh ids and uniformly random base colours."""

    def __init__(self, palette: Iterable[str] = PIECE_COLORS, *, rng: random.Random | None = None) -> None:
        self.palette = tuple(palette)
        if not self.palette:
            raise ValueError("Piece palette must contain at least one colour")
        self.rng = rng or random.Random()

    def next_id(self) -> int:
        return next(_PIECE_IDS)

    def random_color(self) -> str:
        return self.rng.choice(self.palette)

    def create_piece(self, special: Optional[SpecialKind] = None, color: Optional[str] = None) -> Piece:
        if special is not None and special.is_colorless:
            color = None
        elif color is None:
            color = self.random_color()
        return Piece(id=self.next_id(), color=color, special=special)
