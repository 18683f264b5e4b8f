from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class TurnState:
    """Tracks progress of the resolution loop for the move in flight."""

    action_source: Optional[str] = None
    resolving: bool = False
    elapsed: float = 0.0
    steps: int = 0
    points: int = 0
