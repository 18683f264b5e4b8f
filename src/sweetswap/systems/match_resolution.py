from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from esper import World

from sweetswap.components.effect import Effect
from sweetswap.components.grid import Coord, Grid
from sweetswap.components.match import Match
from sweetswap.constants import MAX_RESOLUTION_STEPS, RESOLUTION_STEP_DELAY
from sweetswap.events.bus import (
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_COMBO_ACHIEVED,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_SCORE_CHANGED,
    EVENT_SPECIAL_CREATED,
    EVENT_TICK,
    EVENT_TILE_SWAP_FINALIZE,
    EventBus,
)
from sweetswap.factories.pieces import PieceFactory
from sweetswap.systems.cascade import expand_clear_set
from sweetswap.systems.gravity import fill, needs_settle, settle
from sweetswap.systems.match import find_matches
from sweetswap.systems.scoring import cascade_points, combo_bonus, match_points
from sweetswap.systems.specials import SpecialPlacement, decide_special
from sweetswap.systems.state_utils import get_piece_factory, get_session_state, get_or_create_turn_state, set_session_state

logger = logging.getLogger(__name__)

PHASE_CLEAR = 'clear'
PHASE_SETTLE = 'settle'
PHASE_FILL = 'fill'


@dataclass(frozen=True, slots=True)
class ResolutionStep:
    """One transition of the detect -> clear -> settle -> fill loop."""
    phase: str
    grid: Grid
    chain_depth: int
    points: int = 0
    matches: Tuple[Match, ...] = ()
    cleared: frozenset = field(default_factory=frozenset)
    effects: Tuple[Effect, ...] = ()
    special: Optional[SpecialPlacement] = None
    spawned: Tuple[Coord, ...] = ()


@dataclass(frozen=True, slots=True)
class Resolution:
    grid: Grid
    points: int
    chain_depth: int
    combo_bonus: int
    effects: Tuple[Effect, ...]
    steps: Tuple[ResolutionStep, ...]


def clear_matches(
    grid: Grid,
    matches: List[Match],
    level: int,
    chain_depth: int,
    factory: PieceFactory,
) -> ResolutionStep:
    """Clear one detected match set, detonating specials and leaving any earned special behind."""
    initial = {coord for match in matches for coord in match.cells}
    points = sum(match_points(len(match)) for match in matches)
    cascade = expand_clear_set(grid, initial)
    extra = [coord for coord in cascade.cells - initial if grid.at(coord) is not None]
    points += cascade_points(len(extra))
    special = decide_special(matches, grid, level, factory)
    updates = {coord: None for coord in cascade.cells}
    if special is not None and special.coord in cascade.cells:
        updates[special.coord] = special.piece
    return ResolutionStep(
        phase=PHASE_CLEAR,
        grid=grid.replace(updates),
        chain_depth=chain_depth + 1,
        points=points,
        matches=tuple(matches),
        cleared=cascade.cells,
        effects=cascade.effects,
        special=special,
    )


def resolve_step(grid: Grid, level: int, chain_depth: int, factory: PieceFactory) -> ResolutionStep | None:
    """Advance the board by one step, or return None once it is stable.

    Matches are always cleared before gravity runs, and the board is only
    refilled once nothing floats above a gap.
    """
    matches = find_matches(grid)
    if matches:
        return clear_matches(grid, matches, level, chain_depth, factory)
    if needs_settle(grid):
        return ResolutionStep(PHASE_SETTLE, settle(grid), chain_depth)
    if not grid.is_full():
        filled, spawned = fill(grid, factory)
        return ResolutionStep(PHASE_FILL, filled, chain_depth, spawned=tuple(spawned))
    return None


def resolve(
    grid: Grid,
    level: int,
    factory: PieceFactory,
    *,
    chain_depth: int = 0,
    max_steps: int = MAX_RESOLUTION_STEPS,
) -> Resolution:
    """Run resolution to a fixed point: full grid, no matches."""
    steps: List[ResolutionStep] = []
    points = 0
    while True:
        step = resolve_step(grid, level, chain_depth, factory)
        if step is None:
            break
        if len(steps) >= max_steps:
            raise RuntimeError(f"Board failed to settle within {max_steps} resolution steps")
        steps.append(step)
        grid = step.grid
        chain_depth = step.chain_depth
        points += step.points
    bonus = combo_bonus(chain_depth)
    effects = tuple(effect for step in steps for effect in step.effects)
    return Resolution(grid, points + bonus, chain_depth, bonus, effects, tuple(steps))


class MatchResolutionSystem:
    """Drives resolution of the session board after every accepted swap.

    With ``step_delay`` of zero the board resolves synchronously inside the
    swap event; otherwise one step runs per ``step_delay`` seconds of ticks.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        factory: PieceFactory | None = None,
        step_delay: float = RESOLUTION_STEP_DELAY,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.factory = factory or get_piece_factory(world)
        self.step_delay = step_delay
        self.event_bus.subscribe(EVENT_TILE_SWAP_FINALIZE, self.on_swap_finalize)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    def on_swap_finalize(self, sender, **kwargs):
        turn = get_or_create_turn_state(self.world)
        turn.action_source = kwargs.get('source', 'swap')
        turn.resolving = True
        turn.elapsed = 0.0
        turn.steps = 0
        turn.points = 0
        if self.step_delay <= 0:
            while turn.resolving:
                self.advance()

    def on_tick(self, sender, **kwargs):
        turn = get_or_create_turn_state(self.world)
        if not turn.resolving or self.step_delay <= 0:
            return
        turn.elapsed += kwargs.get('dt', 0.0)
        while turn.resolving and turn.elapsed >= self.step_delay:
            turn.elapsed -= self.step_delay
            self.advance()

    def advance(self) -> None:
        """Apply a single resolution step to the session board."""
        turn = get_or_create_turn_state(self.world)
        state = get_session_state(self.world)
        step = resolve_step(state.grid, state.level, state.chain_depth, self.factory)
        if step is None:
            self._complete()
            return
        turn.steps += 1
        if turn.steps > MAX_RESOLUTION_STEPS:
            turn.resolving = False
            raise RuntimeError(f"Board failed to settle within {MAX_RESOLUTION_STEPS} resolution steps")
        turn.points += step.points
        set_session_state(
            self.world,
            replace(state, grid=step.grid, score=state.score + step.points, chain_depth=step.chain_depth),
        )
        logger.debug("resolution step %d: %s (+%d)", turn.steps, step.phase, step.points)
        if step.phase == PHASE_CLEAR:
            self._emit_clear(step, state.score + step.points)
        elif step.phase == PHASE_SETTLE:
            self.event_bus.emit(EVENT_GRAVITY_APPLIED, grid=step.grid)
        else:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=list(step.spawned), grid=step.grid)

    def _emit_clear(self, step: ResolutionStep, score: int) -> None:
        positions = sorted({coord for match in step.matches for coord in match.cells}, key=lambda c: (c[1], c[0]))
        self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), depth=step.chain_depth)
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=step.chain_depth, positions=positions)
        self.event_bus.emit(
            EVENT_MATCH_CLEARED,
            positions=sorted(step.cleared, key=lambda c: (c[1], c[0])),
            effects=list(step.effects),
            points=step.points,
        )
        if step.special is not None:
            self.event_bus.emit(EVENT_SPECIAL_CREATED, position=step.special.coord, piece=step.special.piece)
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=score, delta=step.points)

    def _complete(self) -> None:
        from sweetswap.session import finish_move

        turn = get_or_create_turn_state(self.world)
        state = get_session_state(self.world)
        bonus = combo_bonus(state.chain_depth)
        if bonus:
            state = replace(state, score=state.score + bonus)
            turn.points += bonus
            self.event_bus.emit(EVENT_COMBO_ACHIEVED, depth=state.chain_depth, bonus=bonus)
            self.event_bus.emit(EVENT_SCORE_CHANGED, score=state.score, delta=bonus)
        state = finish_move(state)
        set_session_state(self.world, state)
        turn.resolving = False
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=state.chain_depth, combo_bonus=bonus, points=turn.points)
