"""
Flood reveal for empty cells.

Invoked by CellGrid once an empty cell has been revealed. Number,
question and surprise neighbours are opened but never expanded; empty
neighbours are opened and expanded in turn.
"""
from typing import TYPE_CHECKING, List, Tuple

from .cell import CellType

if TYPE_CHECKING:
    from .grid import CellGrid


class RevealEngine:
    """Cascading reveal over a single grid."""

    def __init__(self, grid: "CellGrid") -> None:
        self._grid = grid

    def cascade(self, row: int, col: int) -> List[Tuple[int, int]]:
        """
        Open the region around a freshly revealed empty cell.

        Args:
            row: Row of the empty cell that was just revealed.
            col: Column of the empty cell that was just revealed.

        Returns:
            Positions revealed by the cascade, in visiting order. The
            starting cell is not included.
        """
        revealed: List[Tuple[int, int]] = []
        self._expand(row, col, revealed)
        return revealed

    def _expand(
        self, row: int, col: int, revealed: List[Tuple[int, int]]
    ) -> None:
        """Recursively reveal hidden, unflagged neighbours."""
        for neighbor_row, neighbor_col in self._grid.neighbors(row, col):
            neighbor = self._grid.get_cell(neighbor_row, neighbor_col)
            # Flagged cells are not hidden, so they are skipped here too
            if not neighbor.is_hidden:
                continue
            if neighbor.type == CellType.MINE:
                continue
            neighbor.reveal()
            revealed.append((neighbor_row, neighbor_col))
            if neighbor.type == CellType.EMPTY:
                self._expand(neighbor_row, neighbor_col, revealed)
