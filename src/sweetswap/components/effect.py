from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from sweetswap.components.grid import Coord


class EffectKind(str, Enum):
    ROW_CLEAR = 'row-clear'
    COLUMN_CLEAR = 'column-clear'
    COLOR_CLEAR = 'color-clear'
    FULL_CLEAR = 'full-clear'


@dataclass(frozen=True, slots=True)
class Effect:
    """Presentation hint describing why a group of cells disappeared.

    ``index`` is the row (row-clear) or column (column-clear) number; colour
    and full clears list the affected cells instead. Dropping effects never
    changes game state.
    """
    kind: EffectKind
    index: Optional[int] = None
    coordinates: Tuple[Coord, ...] = ()
    color: Optional[str] = None
