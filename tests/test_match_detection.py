from sweetswap.components.match import HORIZONTAL, VERTICAL
from sweetswap.components.piece import SpecialKind
from sweetswap.systems.match import find_matches, has_line_match
from tests.helpers import make_grid


def test_no_matches_returns_empty_list():
    grid = make_grid(
        "RR.",
        "..R",
        "R..",
    )
    assert find_matches(grid) == []


def test_horizontal_and_vertical_runs():
    grid = make_grid(
        "RRR..",
        ".....",
        "....B",
        "....B",
        "....B",
    )
    matches = find_matches(grid)
    assert [m.cells for m in matches] == [
        ((0, 0), (1, 0), (2, 0)),
        ((4, 2), (4, 3), (4, 4)),
    ]
    assert matches[0].orientation == HORIZONTAL and matches[0].color == 'red'
    assert matches[1].orientation == VERTICAL and matches[1].color == 'blue'


def test_long_run_is_a_single_match():
    grid = make_grid(
        "GGGGG.",
        "......",
    )
    matches = find_matches(grid)
    assert len(matches) == 1
    assert len(matches[0]) == 5


def test_l_shape_keeps_both_runs_sharing_corner():
    grid = make_grid(
        "Y....",
        "Y....",
        "YYY..",
        ".....",
    )
    matches = find_matches(grid)
    assert len(matches) == 2
    horizontal, vertical = matches
    assert horizontal.is_horizontal and not vertical.is_horizontal
    assert set(horizontal.cells) & set(vertical.cells) == {(0, 2)}


def test_bomb_and_rainbow_never_match_and_break_runs():
    grid = make_grid(
        "RR*RR",
        "@@@..",
    )
    assert find_matches(grid) == []


def test_striped_piece_matches_by_colour():
    grid = make_grid(
        "RRR..",
        specials={(1, 0): SpecialKind.STRIPED_ROW},
    )
    matches = find_matches(grid)
    assert len(matches) == 1 and (1, 0) in matches[0].cells


def test_empty_cells_break_runs():
    grid = make_grid(
        "RR_RR",
    )
    assert find_matches(grid) == []


def test_detection_is_deterministic():
    grid = make_grid(
        "B..B.",
        "BRRRB",
        "B..B.",
    )
    first = find_matches(grid)
    assert first == find_matches(grid)
    assert [m.orientation for m in first] == [HORIZONTAL, VERTICAL]


def test_has_line_match_through_cell():
    grid = make_grid(
        ".R.",
        ".R.",
        ".R.",
    )
    assert has_line_match(grid, (1, 1))
    assert not has_line_match(grid, (0, 1))
