from dataclasses import dataclass
from typing import Tuple

from sweetswap.components.grid import Coord

HORIZONTAL = 'horizontal'
VERTICAL = 'vertical'


@dataclass(frozen=True, slots=True)
class Match:
    """A straight run of three or more same-coloured pieces.

    Cells are ordered left-to-right for horizontal runs and top-to-bottom for
    vertical runs, so ``cells[0]`` is the run's first cell.
    """
    cells: Tuple[Coord, ...]
    color: str
    orientation: str

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def is_horizontal(self) -> bool:
        return self.orientation == HORIZONTAL
