import random
from dataclasses import replace

from sweetswap.components.effect import EffectKind
from sweetswap.components.piece import SpecialKind
from sweetswap.factories.pieces import PieceFactory
from sweetswap.session import (
    REJECT_GAME_OVER,
    attempt_swap,
    begin_move,
    finish_move,
    is_level_complete,
    level_up,
    new_game,
    reset_game,
    resume_game,
    snapshot,
)
from sweetswap.systems.match import find_matches
from tests.helpers import FreshColorFactory, make_grid

EMPTY_ROWS = ["........"] * 6


def three_match_board():
    # Swapping (2,0) and (2,1) lines up three reds on row 0.
    return make_grid(
        "RR......",
        "..R.....",
        *EMPTY_ROWS,
    )


def specials_on(grid):
    return [(coord, piece.special) for coord, piece in grid.pieces() if piece.special is not None]


def test_new_game_starts_level_one():
    state = new_game(factory=PieceFactory(rng=random.Random(11)))
    assert (state.level, state.score, state.moves_remaining) == (1, 0, 30)
    assert not state.game_over and state.chain_depth == 0
    assert find_matches(state.grid) == []


def test_three_match_scenario():
    state = resume_game(three_match_board(), score=0, level=1, moves_remaining=30)
    result = attempt_swap(state, (2, 0), (2, 1), factory=FreshColorFactory())
    assert result.accepted
    assert result.state.score == 30
    assert result.state.moves_remaining == 29
    for coord in [(0, 0), (1, 0), (2, 0)]:
        assert result.state.grid.at(coord) is not None
    assert result.state.grid.is_full()
    assert find_matches(result.state.grid) == []
    assert result.state.chain_depth == 1


def test_four_match_scores_sixty_and_leaves_column_striped():
    grid = make_grid(
        "RR.R....",
        "..R.....",
        *EMPTY_ROWS,
    )
    state = resume_game(grid, score=0, level=5, moves_remaining=26)
    result = attempt_swap(state, (2, 0), (2, 1), factory=FreshColorFactory())
    assert result.state.score == 60
    assert specials_on(result.state.grid) == [((0, 0), SpecialKind.STRIPED_COLUMN)]
    assert result.state.grid.at((0, 0)).color == 'red'


def test_vertical_four_match_leaves_row_striped():
    grid = make_grid(
        "R.......",
        "R.......",
        ".R......",
        "R.......",
        "........",
        "........",
    )
    state = resume_game(grid, score=0, level=5, moves_remaining=26)
    result = attempt_swap(state, (0, 2), (1, 2), factory=FreshColorFactory())
    found = specials_on(result.state.grid)
    # The striped piece falls into the gap left below it.
    assert found == [((0, 3), SpecialKind.STRIPED_ROW)]


def test_four_match_below_level_five_leaves_no_special():
    grid = make_grid(
        "RR.R....",
        "..R.....",
        *EMPTY_ROWS,
    )
    state = resume_game(grid, score=0, level=4, moves_remaining=27)
    result = attempt_swap(state, (2, 0), (2, 1), factory=FreshColorFactory())
    assert specials_on(result.state.grid) == []


def test_five_match_scores_hundred():
    grid = make_grid(
        "RR.RR...",
        "..R.....",
        *EMPTY_ROWS,
    )
    state = resume_game(grid, score=0, level=1, moves_remaining=30)
    result = attempt_swap(state, (2, 0), (2, 1), factory=FreshColorFactory())
    assert result.state.score == 100


def test_rejected_swap_consumes_no_move():
    state = resume_game(three_match_board(), score=0, level=1, moves_remaining=30)
    result = attempt_swap(state, (5, 5), (6, 5), factory=FreshColorFactory())
    assert not result.accepted
    assert result.state is state
    assert result.state.moves_remaining == 30


def test_striped_piece_caught_in_match_clears_its_column():
    grid = make_grid(
        "RR......",
        "..R.....",
        *EMPTY_ROWS,
        specials={(1, 0): SpecialKind.STRIPED_COLUMN},
    )
    state = resume_game(grid, score=0, level=1, moves_remaining=30)
    result = attempt_swap(state, (2, 0), (2, 1), factory=FreshColorFactory())
    # 30 for the match, 10 for each of the seven other pieces in column 1.
    assert result.state.score == 100
    assert (EffectKind.COLUMN_CLEAR, 1) in [(e.kind, e.index) for e in result.effects]


def chain_board():
    # Clearing column 2 drops the green at (2,1) next to the greens on the bottom row.
    return make_grid(
        ".....",
        "..G..",
        "..R..",
        "..R..",
        "GG.R.",
    )


def test_chain_reaction_earns_combo_bonus():
    state = resume_game(chain_board(), score=0, level=1, moves_remaining=30)
    result = attempt_swap(state, (2, 4), (3, 4), factory=FreshColorFactory())
    assert result.accepted
    assert result.state.chain_depth == 2
    # Two plain 3-matches plus 50 for the second link in the chain.
    assert result.state.score == 30 + 30 + 50
    assert result.points == 110


def test_chain_depth_persists_until_next_accepted_swap():
    state = resume_game(chain_board(), score=0, level=1, moves_remaining=30)
    state = attempt_swap(state, (2, 4), (3, 4), factory=FreshColorFactory()).state
    assert state.chain_depth == 2

    rejected = attempt_swap(state, (0, 0), (2, 0), factory=FreshColorFactory())
    assert not rejected.accepted
    assert rejected.state.chain_depth == 2

    state = replace(state, grid=make_grid("RR...", "..R..", ".....", ".....", "....."))
    started, _ = begin_move(state, (2, 0), (2, 1))
    assert started.chain_depth == 0
    finished = attempt_swap(state, (2, 0), (2, 1), factory=FreshColorFactory()).state
    assert finished.chain_depth == 1
    assert finished.score == state.score + 30


def test_bomb_swap_scores_every_cleared_piece():
    grid = make_grid(
        "*R...",
        ".....",
        "...R.",
        ".....",
        "....R",
    )
    state = resume_game(grid, score=0, level=10, moves_remaining=21)
    result = attempt_swap(state, (0, 0), (1, 0), factory=FreshColorFactory())
    assert result.accepted
    assert result.state.moves_remaining == 20
    assert result.state.score == 40
    assert result.state.chain_depth == 0
    assert result.effects[0].kind is EffectKind.COLOR_CLEAR
    assert result.state.grid.is_full()


def test_special_swap_detonates_caught_specials():
    grid = make_grid(
        "*R...",
        ".....",
        "...R.",
        ".....",
        ".....",
        specials={(3, 2): SpecialKind.STRIPED_ROW},
    )
    state = resume_game(grid, score=0, level=10, moves_remaining=21)
    result = attempt_swap(state, (0, 0), (1, 0), factory=FreshColorFactory())
    # bomb + two reds, then the striped red sweeps the four other pieces of row 2.
    assert result.state.score == 30 + 40
    assert EffectKind.ROW_CLEAR in [e.kind for e in result.effects]


def test_swapped_specials_do_not_fire_twice():
    grid = make_grid(
        "....",
        ".RB.",
        "....",
        "....",
        specials={(1, 1): SpecialKind.STRIPED_ROW, (2, 1): SpecialKind.STRIPED_COLUMN},
    )
    state = resume_game(grid, score=0, level=5, moves_remaining=26)
    result = attempt_swap(state, (1, 1), (2, 1), factory=FreshColorFactory())
    # Row 1 and column 1 only: 4 + 3 pieces.
    assert result.state.score == 70


def test_game_over_when_moves_run_out_short_of_target():
    state = resume_game(three_match_board(), score=200, level=1, moves_remaining=1)
    result = attempt_swap(state, (2, 0), (2, 1), factory=FreshColorFactory())
    assert result.state.moves_remaining == 0
    assert result.state.score == 230
    assert result.state.game_over

    again = attempt_swap(result.state, (0, 0), (1, 0), factory=FreshColorFactory())
    assert not again.accepted and again.reason == REJECT_GAME_OVER


def test_finish_move_flags_game_over_only_below_target():
    state = resume_game(three_match_board(), score=200, level=1, moves_remaining=2)
    assert finish_move(replace(state, moves_remaining=0)).game_over
    assert not finish_move(replace(state, moves_remaining=0, score=500)).game_over
    assert not finish_move(state).game_over


def test_level_complete_then_level_up():
    state = resume_game(three_match_board(), score=480, level=1, moves_remaining=5)
    state = attempt_swap(state, (2, 0), (2, 1), factory=FreshColorFactory()).state
    assert state.score == 510
    assert is_level_complete(state)
    assert not state.game_over

    promoted = level_up(state, factory=PieceFactory(rng=random.Random(5)))
    assert promoted.level == 2
    assert promoted.moves_remaining == 29
    assert promoted.score == 510
    assert promoted.chain_depth == 0
    assert promoted.grid.is_full()
    assert find_matches(promoted.grid) == []


def test_reset_game_returns_to_level_one():
    state = resume_game(three_match_board(), score=900, level=3, moves_remaining=2)
    state = reset_game(state, factory=PieceFactory(rng=random.Random(9)))
    assert (state.level, state.score, state.moves_remaining, state.game_over) == (1, 0, 30, False)


def test_resume_accepts_saved_grid_as_is():
    saved = make_grid(
        "RRR",
        "_._",
    )
    state = resume_game(saved, score=120, level=2, moves_remaining=7)
    assert state.grid is saved
    data = snapshot(state)
    assert data['score'] == 120 and data['level'] == 2 and data['movesLeft'] == 7
    assert data['board'][1][0] is None

    rows = [list(row) for row in saved.cells]
    assert resume_game(rows, score=0, level=1, moves_remaining=3).grid == saved
