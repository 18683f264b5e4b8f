from dataclasses import dataclass

from sweetswap.components.grid import Grid


@dataclass(frozen=True, slots=True)
class SessionState:
    """Everything needed to continue one attempt at a level.

    chain_depth counts automatic match clears within the latest accepted move
    and is only reset when the next swap is accepted.
    """
    grid: Grid
    score: int = 0
    level: int = 1
    moves_remaining: int = 0
    game_over: bool = False
    chain_depth: int = 0
