"""High-level coordinator for level transitions."""
from __future__ import annotations

import logging

from esper import World

from sweetswap.events.bus import (
    EVENT_CASCADE_COMPLETE,
    EVENT_GAME_OVER,
    EVENT_GAME_RESET_REQUEST,
    EVENT_GAME_RESUME_REQUEST,
    EVENT_GAME_RESUMED,
    EVENT_LEVEL_COMPLETE,
    EVENT_LEVEL_STARTED,
    EVENT_LEVEL_UP_REQUEST,
    EventBus,
)
from sweetswap.factories.pieces import PieceFactory
from sweetswap.session import is_level_complete, level_up, reset_game, resume_game
from sweetswap.systems.scoring import target_score
from sweetswap.systems.state_utils import (
    get_or_create_turn_state,
    get_piece_factory,
    get_session_state,
    set_session_state,
)

logger = logging.getLogger(__name__)


class GameFlowSystem:
    """Announces level completion and game over, and starts new levels on request."""

    def __init__(self, world: World, event_bus: EventBus, *, factory: PieceFactory | None = None) -> None:
        self.world = world
        self.event_bus = event_bus
        self.factory = factory or get_piece_factory(world)
        self.event_bus.subscribe(EVENT_CASCADE_COMPLETE, self._on_cascade_complete)
        self.event_bus.subscribe(EVENT_LEVEL_UP_REQUEST, self._on_level_up_request)
        self.event_bus.subscribe(EVENT_GAME_RESET_REQUEST, self._on_reset_request)
        self.event_bus.subscribe(EVENT_GAME_RESUME_REQUEST, self._on_resume_request)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_cascade_complete(self, sender, **payload) -> None:
        state = get_session_state(self.world)
        target = target_score(state.level)
        if state.game_over:
            self.event_bus.emit(EVENT_GAME_OVER, level=state.level, score=state.score, target=target)
        elif is_level_complete(state):
            self.event_bus.emit(EVENT_LEVEL_COMPLETE, level=state.level, score=state.score, target=target)

    def _on_level_up_request(self, sender, **payload) -> None:
        state = get_session_state(self.world)
        if self._busy() or not is_level_complete(state):
            logger.debug("level up ignored: level %d not complete", state.level)
            return
        self._start(level_up(state, factory=self.factory))

    def _on_reset_request(self, sender, **payload) -> None:
        if self._busy():
            return
        self._start(reset_game(get_session_state(self.world), factory=self.factory))

    def _on_resume_request(self, sender, **payload) -> None:
        snapshot = payload.get("snapshot") or {}
        state = resume_game(
            snapshot["board"],
            score=snapshot.get("score", 0),
            level=snapshot.get("level", 1),
            moves_remaining=snapshot["movesLeft"],
        )
        get_or_create_turn_state(self.world).resolving = False
        set_session_state(self.world, state)
        self.event_bus.emit(
            EVENT_GAME_RESUMED,
            level=state.level,
            moves_remaining=state.moves_remaining,
            score=state.score,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _busy(self) -> bool:
        return get_or_create_turn_state(self.world).resolving

    def _start(self, state) -> None:
        set_session_state(self.world, state)
        self.event_bus.emit(
            EVENT_LEVEL_STARTED,
            level=state.level,
            moves_remaining=state.moves_remaining,
            target=target_score(state.level),
            score=state.score,
        )
