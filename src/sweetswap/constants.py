GRID_ROWS = 8
GRID_COLS = 8

# Base candy colours, in spawn order. Bomb and rainbow pieces carry no colour.
PIECE_COLORS = ('red', 'orange', 'yellow', 'green', 'blue', 'purple')

MIN_MATCH_LENGTH = 3

# Moves granted at level 1; every later level gets one fewer, never below the floor.
MOVES_PER_LEVEL_BASE = 30
MIN_MOVES_PER_LEVEL = 10

# Points for a matched run, keyed by run length. Longer runs score LONG_MATCH_POINTS_PER_PIECE each.
MATCH_POINTS = {3: 30, 4: 60, 5: 100}
LONG_MATCH_POINTS_PER_PIECE = 25
# Flat points for every piece removed by a special activation rather than a match.
CASCADE_POINTS_PER_PIECE = 10
# Awarded once per move for every chain step after the first.
COMBO_BONUS_PER_CHAIN = 50

# Level from which each special piece can be created by a match.
STRIPED_UNLOCK_LEVEL = 5
WRAPPED_UNLOCK_LEVEL = 7
BOMB_UNLOCK_LEVEL = 10
RAINBOW_UNLOCK_LEVEL = 12

# Seconds between paced resolution steps (cosmetic only).
RESOLUTION_STEP_DELAY = 0.15
# Upper bound on detect/clear/settle/fill steps for a single move.
MAX_RESOLUTION_STEPS = 1000
# Attempts at generating a match-free board that still has a legal move.
BOARD_GENERATION_ATTEMPTS = 200
