import random

from esper import World

from sweetswap.components.session_state import SessionState
from sweetswap.components.turn_state import TurnState
from sweetswap.constants import GRID_COLS, GRID_ROWS, PIECE_COLORS
from sweetswap.events.bus import EventBus
from sweetswap.factories.pieces import PieceFactory
from sweetswap.session import new_game


def create_world(
    event_bus: EventBus,
    *,
    level: int = 1,
    rows: int = GRID_ROWS,
    cols: int = GRID_COLS,
    palette=PIECE_COLORS,
    rng: random.Random | None = None,
    state: SessionState | None = None,
) -> World:
    """Build the ECS world holding one game session.

    A ``state`` (for example a resumed snapshot) is used as-is; otherwise a
    fresh match-free board is dealt for ``level``.
    """
    world = World()
    setattr(world, "random", rng or random.Random())
    factory = PieceFactory(palette, rng=world.random)
    setattr(world, "piece_factory", factory)
    setattr(world, "event_bus", event_bus)

    if state is None:
        state = new_game(level, factory=factory, width=cols, height=rows)
    world.create_entity(state, TurnState())
    return world
