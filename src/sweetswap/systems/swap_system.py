from esper import World

from sweetswap.events.bus import (
    EVENT_MOVES_CHANGED,
    EVENT_SCORE_CHANGED,
    EVENT_SPECIAL_ACTIVATED,
    EVENT_TILE_SWAP_FINALIZE,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
    EventBus,
)
from sweetswap.session import begin_move
from sweetswap.systems.state_utils import get_or_create_turn_state, get_session_state, set_session_state
from sweetswap.systems.swap import ACTIVATION_MATCH

REJECT_BUSY = 'busy'


class SwapSystem:
    """Validates swap requests against the session board and applies accepted ones."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        src = tuple(src)
        dst = tuple(dst)
        # Only one move may be in flight at a time.
        if get_or_create_turn_state(self.world).resolving:
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=REJECT_BUSY)
            return
        state = get_session_state(self.world)
        new_state, outcome = begin_move(state, src, dst)
        if not outcome.accepted:
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=outcome.reason)
            return
        set_session_state(self.world, new_state)
        self.event_bus.emit(
            EVENT_TILE_SWAP_VALID,
            src=src,
            dst=dst,
            activation=outcome.activation,
            effects=list(outcome.effects),
            points=outcome.points,
        )
        if outcome.activation != ACTIVATION_MATCH:
            positions = sorted(outcome.cleared, key=lambda c: (c[1], c[0]))
            self.event_bus.emit(
                EVENT_SPECIAL_ACTIVATED,
                activation=outcome.activation,
                positions=positions,
                effects=list(outcome.effects),
            )
        if outcome.points:
            self.event_bus.emit(EVENT_SCORE_CHANGED, score=new_state.score, delta=outcome.points)
        self.event_bus.emit(EVENT_MOVES_CHANGED, moves_remaining=new_state.moves_remaining)
        self.event_bus.emit(EVENT_TILE_SWAP_FINALIZE, src=src, dst=dst, source='swap')
