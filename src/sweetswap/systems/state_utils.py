from esper import World

from sweetswap.components.session_state import SessionState
from sweetswap.components.turn_state import TurnState
from sweetswap.factories.pieces import PieceFactory


def get_or_create_turn_state(world: World) -> TurnState:
    """Return the shared TurnState component, creating it if absent."""
    existing = list(world.get_component(TurnState))
    if existing:
        return existing[0][1]
    world.create_entity(TurnState())
    return list(world.get_component(TurnState))[0][1]


def get_session_state(world: World) -> SessionState:
    for _, state in world.get_component(SessionState):
        return state
    raise RuntimeError("SessionState not found")


def set_session_state(world: World, state: SessionState) -> None:
    """Replace the session snapshot; the previous one is left untouched."""
    for entity, _ in world.get_component(SessionState):
        world.add_component(entity, state)
        return
    world.create_entity(state)


def get_piece_factory(world: World) -> PieceFactory:
    factory = getattr(world, "piece_factory", None)
    if isinstance(factory, PieceFactory):
        return factory
    factory = PieceFactory(rng=getattr(world, "random", None))
    setattr(world, "piece_factory", factory)
    return factory
