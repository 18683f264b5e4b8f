"""Match-resolution engine for a tile-matching puzzle game."""

from sweetswap.components.effect import Effect, EffectKind
from sweetswap.components.grid import Coord, Grid
from sweetswap.components.piece import Piece, SpecialKind
from sweetswap.components.session_state import SessionState
from sweetswap.factories.pieces import PieceFactory
from sweetswap.session import (
    MoveResult,
    attempt_swap,
    is_level_complete,
    level_up,
    new_game,
    reset_game,
    resume_game,
    snapshot,
)

__all__ = [
    "Coord",
    "Effect",
    "EffectKind",
    "Grid",
    "MoveResult",
    "Piece",
    "PieceFactory",
    "SessionState",
    "SpecialKind",
    "attempt_swap",
    "is_level_complete",
    "level_up",
    "new_game",
    "reset_game",
    "resume_game",
    "snapshot",
]
