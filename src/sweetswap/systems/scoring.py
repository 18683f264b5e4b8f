from sweetswap.constants import (
    CASCADE_POINTS_PER_PIECE,
    COMBO_BONUS_PER_CHAIN,
    LONG_MATCH_POINTS_PER_PIECE,
    MATCH_POINTS,
    MIN_MOVES_PER_LEVEL,
    MOVES_PER_LEVEL_BASE,
)


def match_points(length: int) -> int:
    return MATCH_POINTS.get(length, LONG_MATCH_POINTS_PER_PIECE * length)


def cascade_points(extra_pieces: int) -> int:
    return extra_pieces * CASCADE_POINTS_PER_PIECE


def combo_bonus(chain_depth: int) -> int:
    if chain_depth <= 1:
        return 0
    return COMBO_BONUS_PER_CHAIN * (chain_depth - 1)


def target_score(level: int) -> int:
    """Score needed to finish a level.

    Each level adds 300 + 200 * level on top of the previous target:
    500, 1200, 2100, ...
    """
    return level * 500 + 200 * (level - 1) * level // 2


def moves_for_level(level: int) -> int:
    return max(MIN_MOVES_PER_LEVEL, MOVES_PER_LEVEL_BASE - (level - 1))
