from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from sweetswap.components.piece import Piece

# (x, y): column first, row 0 at the top.
Coord = Tuple[int, int]
Cells = Tuple[Tuple[Optional[Piece], ...], ...]


@dataclass(frozen=True, slots=True)
class Grid:
    """Immutable rows x columns container of optional pieces.

    Every stage of the engine receives a Grid and returns a new one, so a
    snapshot can be handed to the presentation layer without copying.
    """
    cells: Cells

    def __post_init__(self) -> None:
        widths = {len(row) for row in self.cells}
        if len(widths) > 1:
            raise ValueError(f"Grid rows have differing widths: {sorted(widths)}")

    @classmethod
    def empty(cls, width: int, height: int) -> 'Grid':
        return cls(tuple(tuple(None for _ in range(width)) for _ in range(height)))

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[Optional[Piece]]]) -> 'Grid':
        return cls(tuple(tuple(row) for row in rows))

    @property
    def height(self) -> int:
        return len(self.cells)

    @property
    def width(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def in_bounds(self, coord: Coord) -> bool:
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    def require(self, coord: Coord) -> Coord:
        if not self.in_bounds(coord):
            raise IndexError(f"Coordinate {coord} outside {self.width}x{self.height} grid")
        return coord

    def at(self, coord: Coord) -> Optional[Piece]:
        x, y = self.require(coord)
        return self.cells[y][x]

    def coords(self) -> Iterator[Coord]:
        """Row-major walk over every cell."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)

    def pieces(self) -> Iterator[Tuple[Coord, Piece]]:
        for coord in self.coords():
            piece = self.cells[coord[1]][coord[0]]
            if piece is not None:
                yield coord, piece

    def empty_cells(self) -> List[Coord]:
        return [coord for coord in self.coords() if self.cells[coord[1]][coord[0]] is None]

    def is_full(self) -> bool:
        return all(piece is not None for row in self.cells for piece in row)

    def replace(self, updates: Mapping[Coord, Optional[Piece]]) -> 'Grid':
        if not updates:
            return self
        rows = [list(row) for row in self.cells]
        for coord, piece in updates.items():
            x, y = self.require(coord)
            rows[y][x] = piece
        return Grid.from_rows(rows)

    def color_map(self) -> Dict[Coord, str]:
        """Map every matchable cell to its colour."""
        mapping: Dict[Coord, str] = {}
        for coord, piece in self.pieces():
            color = piece.match_color
            if color is not None:
                mapping[coord] = color
        return mapping
