"""
Grid module for the two-board minesweeper duel.

Implements one player's board: randomized allocation with exact
special-cell counts, adjacency numbers, first-click mine relocation,
flagging and revealing.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .cascade import RevealEngine
from .cell import Cell, CellType
from .questions import Question

logger = logging.getLogger(__name__)

Position = Tuple[int, int]

_ORDINARY_TYPES = (CellType.EMPTY, CellType.NUMBER)


# ============================================================================
# CellGrid Class
# ============================================================================

@dataclass
class CellGrid:
    """
    A rows x cols board owned by a single player.

    Cells start as hidden empty cells; ``allocate`` places mines,
    question cells and surprise cells and derives the number cells.
    """

    rows: int
    cols: int
    rng: random.Random = field(default_factory=random.Random, repr=False)
    first_click_done: bool = False
    num_mines: int = 0
    num_questions: int = 0
    num_surprises: int = 0
    _cells: List[List[Cell]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        if self.rows < 1 or self.cols < 1:
            raise ValueError("Board dimensions must be positive")
        self._engine = RevealEngine(self)
        self._init_grid()

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create a grid of hidden empty cells."""
        self._cells = [
            [Cell() for _ in range(self.cols)]
            for _ in range(self.rows)
        ]

    def allocate(
        self,
        mine_count: int,
        question_count: int,
        surprise_count: int,
        question_pool: Sequence[Question] = (),
    ) -> None:
        """
        Place special cells at uniformly random positions.

        The first ``mine_count`` positions of a random permutation become
        mines, the next ``question_count`` question cells and the next
        ``surprise_count`` surprise cells. Questions are drawn from a
        shuffled copy of the pool, cycling when the pool runs out.

        When the board is too small for all requested cells, whatever fits
        is placed (mines first) and the rest stays ordinary.

        Args:
            mine_count: Exact number of mines.
            question_count: Exact number of question cells.
            surprise_count: Exact number of surprise cells.
            question_pool: Questions to attach to question cells.
        """
        self._init_grid()
        self.first_click_done = False
        self.num_mines = mine_count
        self.num_questions = question_count
        self.num_surprises = surprise_count

        positions = list(self.positions())
        self.rng.shuffle(positions)

        questions = list(question_pool)
        self.rng.shuffle(questions)
        question_iter = self._cycle_questions(questions)

        mine_end = mine_count
        question_end = mine_end + question_count
        surprise_end = question_end + surprise_count

        for row, col in positions[:mine_end]:
            self._cells[row][col].make_mine()
        for row, col in positions[mine_end:question_end]:
            self._cells[row][col].make_question(next(question_iter))
        for row, col in positions[question_end:surprise_end]:
            self._cells[row][col].make_surprise()

        self._calculate_adjacent_mines()
        self._verify_and_repair(question_iter)

        logger.debug(
            "Allocated %dx%d grid: %d mines, %d questions, %d surprises",
            self.rows, self.cols,
            self.count_type(CellType.MINE),
            self.count_type(CellType.QUESTION),
            self.count_type(CellType.SURPRISE),
        )

    @staticmethod
    def _cycle_questions(
        questions: List[Question],
    ) -> Iterator[Optional[Question]]:
        """Yield questions round-robin, or None forever for an empty pool."""
        index = 0
        while True:
            if not questions:
                yield None
                continue
            if index >= len(questions):
                index = 0
            yield questions[index]
            index += 1

    def _verify_and_repair(
        self, question_iter: Iterator[Optional[Question]]
    ) -> None:
        """Bring each special-cell count back to its configured target."""
        targets = (
            (CellType.MINE, self.num_mines),
            (CellType.QUESTION, self.num_questions),
            (CellType.SURPRISE, self.num_surprises),
        )
        repaired = False
        for cell_type, required in targets:
            actual = self.count_type(cell_type)
            if actual < required:
                repaired |= self._fill_shortfall(
                    cell_type, required - actual, question_iter
                )
            elif actual > required:
                self._trim_excess(cell_type, actual - required)
                repaired = True

        if repaired:
            self._calculate_adjacent_mines()

    def _fill_shortfall(
        self,
        cell_type: CellType,
        missing: int,
        question_iter: Iterator[Optional[Question]],
    ) -> bool:
        """Convert ordinary cells, row-major, into the missing type."""
        converted = 0
        for row, col in self.positions():
            if converted == missing:
                break
            cell = self._cells[row][col]
            if cell.type not in _ORDINARY_TYPES:
                continue
            if cell_type == CellType.MINE:
                cell.make_mine()
            elif cell_type == CellType.QUESTION:
                cell.make_question(next(question_iter))
            else:
                cell.make_surprise()
            converted += 1

        if converted < missing:
            logger.debug(
                "Board too small: %d %s cell(s) could not be placed",
                missing - converted, cell_type.name.lower(),
            )
        return converted > 0

    def _trim_excess(self, cell_type: CellType, excess: int) -> None:
        """Convert surplus cells of a type back to empty, row-major."""
        for row, col in self.positions():
            if excess == 0:
                return
            cell = self._cells[row][col]
            if cell.type == cell_type:
                cell.make_empty()
                excess -= 1

    def _calculate_adjacent_mines(self) -> None:
        """Derive number/empty variants for every ordinary cell."""
        for row, col in self.positions():
            cell = self._cells[row][col]
            if cell.is_special:
                continue
            count = self.count_adjacent_mines(row, col)
            if count > 0:
                cell.make_number(count)
            elif cell.type == CellType.NUMBER:
                cell.make_empty()

    def count_adjacent_mines(self, row: int, col: int) -> int:
        """Count mines among the up-to-8 neighbours of a cell."""
        if not self.is_valid_position(row, col):
            return 0
        count = 0
        for neighbor_row, neighbor_col in self.neighbors(row, col):
            if self._cells[neighbor_row][neighbor_col].is_mine:
                count += 1
        return count

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def neighbors(self, row: int, col: int) -> List[Position]:
        """
        Get valid neighbouring cell positions.

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            List of (row, col) tuples for valid neighbors.
        """
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self.is_valid_position(new_row, new_col):
                    neighbors.append((new_row, new_col))
        return neighbors

    def is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def positions(self) -> Iterator[Position]:
        """All positions in row-major order."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield row, col

    # ========================================================================
    # Player Actions (Mid-level)
    # ========================================================================

    def reveal(self, row: int, col: int) -> bool:
        """
        Reveal a cell at the given position.

        A flagged target is unflagged first. The first reveal on the grid
        never lands on a mine when a mine can be moved outside the target's
        neighbourhood. Revealing an empty cell cascades.

        Args:
            row: Row index to reveal.
            col: Column index to reveal.

        Returns:
            True if a mine was hit, False otherwise (including no-ops).
        """
        if not self.is_valid_position(row, col):
            return False

        cell = self._cells[row][col]
        if cell.is_flagged:
            cell.toggle_flag()
        if cell.is_revealed:
            return False

        if not self.first_click_done:
            self.first_click_done = True
            if cell.is_mine:
                self._relocate_mine(row, col)

        cell.reveal()

        if cell.type == CellType.MINE:
            return True
        if cell.type == CellType.EMPTY:
            self._engine.cascade(row, col)
        return False

    def _relocate_mine(self, row: int, col: int) -> bool:
        """Move a first-click mine to the first non-mine cell outside its 3x3."""
        for other_row, other_col in self.positions():
            if abs(other_row - row) <= 1 and abs(other_col - col) <= 1:
                continue
            other = self._cells[other_row][other_col]
            if other.is_mine:
                continue
            other.make_mine()
            self._cells[row][col].make_empty()
            self._calculate_adjacent_mines()
            logger.debug(
                "First click at (%d, %d) hit a mine; moved to (%d, %d)",
                row, col, other_row, other_col,
            )
            return True

        logger.debug("No cell available to relocate mine at (%d, %d)", row, col)
        return False

    def toggle_flag(self, row: int, col: int) -> bool:
        """
        Toggle flag on a hidden or flagged cell.

        Returns:
            True if the flag was toggled, False for revealed or
            out-of-bounds cells.
        """
        if not self.is_valid_position(row, col):
            return False
        return self._cells[row][col].toggle_flag()

    def reveal_all(self) -> None:
        """Unflag and reveal every cell."""
        for row, col in self.positions():
            cell = self._cells[row][col]
            if cell.is_flagged:
                cell.toggle_flag()
            cell.reveal()

    def uncover_random_mine(
        self, rng: Optional[random.Random] = None
    ) -> Optional[Position]:
        """Reveal one concealed mine without consequence."""
        rng = rng or self.rng
        candidates = [
            (row, col) for row, col in self.positions()
            if self._cells[row][col].is_mine
            and not self._cells[row][col].is_revealed
        ]
        if not candidates:
            return None
        row, col = rng.choice(candidates)
        cell = self._cells[row][col]
        if cell.is_flagged:
            cell.toggle_flag()
        cell.reveal()
        return row, col

    def reveal_random_area(
        self, rng: Optional[random.Random] = None
    ) -> List[Position]:
        """Reveal the hidden non-mine cells of a random 3x3 window."""
        rng = rng or self.rng
        center_row = rng.randrange(self.rows)
        center_col = rng.randrange(self.cols)
        window = [(center_row, center_col)] + self.neighbors(center_row, center_col)

        revealed = []
        for row, col in window:
            cell = self._cells[row][col]
            if cell.is_mine or not cell.is_hidden:
                continue
            cell.reveal()
            revealed.append((row, col))
        return revealed

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    def is_fully_cleared(self) -> bool:
        """Check if every non-mine cell is revealed."""
        for row, col in self.positions():
            cell = self._cells[row][col]
            if not cell.is_mine and not cell.is_revealed:
                return False
        return True

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self.is_valid_position(row, col):
            return None
        return self._cells[row][col]

    def count_type(self, cell_type: CellType) -> int:
        """Count cells of a given variant."""
        return sum(
            1 for row, col in self.positions()
            if self._cells[row][col].type == cell_type
        )

    def get_valid_actions(self) -> List[Position]:
        """Positions of cells that are still hidden."""
        return [
            (row, col) for row, col in self.positions()
            if self._cells[row][col].is_hidden
        ]

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array.

        Returns:
            2D int8 array of ``Cell.to_observation`` codes.
        """
        obs = np.zeros((self.rows, self.cols), dtype=np.int8)
        for row, col in self.positions():
            obs[row, col] = self._cells[row][col].to_observation()
        return obs
