from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# SWAPS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(x,y), dst=(x,y)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src, dst, activation=str, effects=list[Effect], points=int
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src, dst, reason=str
EVENT_TILE_SWAP_FINALIZE = "tile_swap_finalize"    # payload: src, dst, source=str
EVENT_SPECIAL_ACTIVATED = "special_activated"      # payload: activation=str, positions=[(x,y),...], effects=list[Effect]


# ============================================================================
# MATCH RESOLUTION
# ============================================================================
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(x,y),...], size=int, depth=int
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(x,y),...]
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(x,y),...], effects=list[Effect], points=int
EVENT_SPECIAL_CREATED = "special_created"          # payload: position=(x,y), piece=Piece
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: grid=Grid
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(x,y),...], grid=Grid
EVENT_COMBO_ACHIEVED = "combo_achieved"            # payload: depth=int, bonus=int
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, combo_bonus=int, points=int


# ============================================================================
# SESSION COUNTERS
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int
EVENT_MOVES_CHANGED = "moves_changed"              # payload: moves_remaining=int


# ============================================================================
# GAME FLOW
# ============================================================================
EVENT_LEVEL_COMPLETE = "level_complete"            # payload: level=int, score=int, target=int
EVENT_GAME_OVER = "game_over"                      # payload: level=int, score=int, target=int
EVENT_LEVEL_UP_REQUEST = "level_up_request"        # payload: None
EVENT_GAME_RESET_REQUEST = "game_reset_request"    # payload: None
EVENT_GAME_RESUME_REQUEST = "game_resume_request"  # payload: snapshot=dict
EVENT_LEVEL_STARTED = "level_started"              # payload: level=int, moves_remaining=int, target=int, score=int
EVENT_GAME_RESUMED = "game_resumed"                # payload: level=int, moves_remaining=int, score=int
