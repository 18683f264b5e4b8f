"""Functional engine API: one immutable SessionState in, a new one out.

These functions are what the event-driven systems call; they can equally be
used directly by a presentation layer that does not want the event bus.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sweetswap.components.effect import Effect
from sweetswap.components.grid import Coord, Grid
from sweetswap.components.piece import Piece
from sweetswap.constants import GRID_COLS, GRID_ROWS
from sweetswap.factories.pieces import PieceFactory
from sweetswap.components.session_state import SessionState
from sweetswap.systems.board_ops import generate_board
from sweetswap.systems.cascade import expand_clear_set
from sweetswap.systems.match_resolution import resolve
from sweetswap.systems.scoring import cascade_points, moves_for_level, target_score
from sweetswap.systems.swap import SwapOutcome, evaluate_swap

logger = logging.getLogger(__name__)

REJECT_GAME_OVER = 'game_over'


@dataclass(frozen=True, slots=True)
class MoveResult:
    state: SessionState
    accepted: bool
    effects: Tuple[Effect, ...] = ()
    points: int = 0
    reason: Optional[str] = None


def new_game(
    level: int = 1,
    *,
    factory: PieceFactory | None = None,
    width: int = GRID_COLS,
    height: int = GRID_ROWS,
    score: int = 0,
) -> SessionState:
    """Start a level on a freshly generated, match-free board."""
    if level < 1:
        raise ValueError(f"Level must be positive, got {level}")
    grid = generate_board(factory or PieceFactory(), width=width, height=height)
    logger.debug("new game at level %d", level)
    return SessionState(grid=grid, score=score, level=level, moves_remaining=moves_for_level(level))


def resume_game(
    grid: Grid | Sequence[Sequence[Optional[Piece]]],
    *,
    score: int,
    level: int,
    moves_remaining: int,
) -> SessionState:
    """Rebuild a session from a saved snapshot.

    The grid is taken as-is: a saved board is mid-game and may legitimately
    hold specials or even pending gaps.
    """
    if not isinstance(grid, Grid):
        grid = Grid.from_rows(grid)
    if grid.width == 0 or grid.height == 0:
        raise ValueError("Saved grid is empty")
    state = SessionState(grid=grid, score=score, level=level, moves_remaining=moves_remaining)
    return finish_move(state)


def snapshot(state: SessionState) -> Dict[str, Any]:
    """Plain board/score/level/moves mapping for a persistence layer."""
    return {
        'board': [list(row) for row in state.grid.cells],
        'score': state.score,
        'level': state.level,
        'movesLeft': state.moves_remaining,
    }


def is_level_complete(state: SessionState) -> bool:
    return state.score >= target_score(state.level)


def finish_move(state: SessionState) -> SessionState:
    """Flag game over once the moves run out short of the target; never clears the flag."""
    if state.game_over:
        return state
    if state.moves_remaining <= 0 and not is_level_complete(state):
        logger.debug("game over at level %d with %d points", state.level, state.score)
        return replace(state, game_over=True)
    return state


def begin_move(state: SessionState, a: Coord, b: Coord) -> Tuple[SessionState, SwapOutcome]:
    """Validate a swap and apply its immediate effect, without resolving the board.

    An accepted swap consumes a move and resets the chain depth. Special
    activations are expanded through any specials they catch; the two
    swapped cells count as already fired.
    """
    if state.game_over or state.moves_remaining <= 0:
        state.grid.require(a)
        state.grid.require(b)
        return state, SwapOutcome(False, state.grid, reason=REJECT_GAME_OVER)
    outcome = evaluate_swap(state.grid, a, b)
    if not outcome.accepted:
        logger.debug("swap %s -> %s rejected: %s", a, b, outcome.reason)
        return state, outcome

    if outcome.cleared:
        cascade = expand_clear_set(state.grid, outcome.cleared, processed=(a, b))
        extra = cascade.cells - outcome.cleared
        occupied = [coord for coord in extra if state.grid.at(coord) is not None]
        outcome = replace(
            outcome,
            grid=outcome.grid.replace({coord: None for coord in extra}),
            effects=outcome.effects + cascade.effects,
            points=outcome.points + cascade_points(len(occupied)),
            cleared=cascade.cells,
        )
    logger.debug("swap %s -> %s accepted (%s, +%d)", a, b, outcome.activation, outcome.points)
    new_state = replace(
        state,
        grid=outcome.grid,
        score=state.score + outcome.points,
        moves_remaining=state.moves_remaining - 1,
        chain_depth=0,
    )
    return new_state, outcome


def attempt_swap(
    state: SessionState,
    a: Coord,
    b: Coord,
    *,
    factory: PieceFactory | None = None,
) -> MoveResult:
    """Play one move to completion: swap, cascade, gravity and refill until stable."""
    new_state, outcome = begin_move(state, a, b)
    if not outcome.accepted:
        return MoveResult(state, False, reason=outcome.reason)
    resolution = resolve(new_state.grid, new_state.level, factory or PieceFactory(), chain_depth=new_state.chain_depth)
    new_state = replace(
        new_state,
        grid=resolution.grid,
        score=new_state.score + resolution.points,
        chain_depth=resolution.chain_depth,
    )
    new_state = finish_move(new_state)
    effects: List[Effect] = list(outcome.effects) + list(resolution.effects)
    return MoveResult(new_state, True, tuple(effects), outcome.points + resolution.points)


def level_up(state: SessionState, *, factory: PieceFactory | None = None) -> SessionState:
    """Advance to the next level, keeping the score and dealing a fresh board."""
    level = state.level + 1
    logger.debug("level up to %d", level)
    return new_game(
        level,
        factory=factory,
        width=state.grid.width,
        height=state.grid.height,
        score=state.score,
    )


def reset_game(state: SessionState, *, factory: PieceFactory | None = None) -> SessionState:
    return new_game(1, factory=factory, width=state.grid.width, height=state.grid.height)
