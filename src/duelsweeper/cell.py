"""
Cell module for the two-board minesweeper duel.

A cell is a tagged union: its ``type`` selects which auxiliary fields
carry meaning (adjacent count for numbers, the question for question
cells, one-shot activation flags for question and surprise cells).
"""
from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional

from .questions import Question


# ============================================================================
# Constants
# ============================================================================

class CellType(Enum):
    """Content variants a cell can hold."""

    MINE = auto()
    NUMBER = auto()
    EMPTY = auto()
    SURPRISE = auto()
    QUESTION = auto()


class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# Observation codes for revealed special cells
OBS_HIDDEN = -1
OBS_FLAGGED = -2
OBS_MINE = 9
OBS_QUESTION = 10
OBS_SURPRISE = 11

SPECIAL_TYPES = frozenset({CellType.MINE, CellType.QUESTION, CellType.SURPRISE})


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell on one player's grid.

    Attributes:
        type: Content variant of the cell.
        state: Current visual state (hidden, revealed, or flagged).
        adjacent_mines: Neighbouring mine count, only meaningful for NUMBER.
        question: Question attached to a QUESTION cell (may be None when
            the pool was empty).
        question_opened: Whether a QUESTION cell has been activated.
        surprise_activated: Whether a SURPRISE cell has been activated.
        flag_scored: Whether flagging this cell has already been scored.
    """

    type: CellType = CellType.EMPTY
    state: CellState = CellState.HIDDEN
    adjacent_mines: int = 0
    question: Optional[Question] = None
    question_opened: bool = False
    surprise_activated: bool = False
    flag_scored: bool = False

    # ========================================================================
    # Type Conversion
    # ========================================================================

    def make_mine(self) -> None:
        """Turn this cell into a mine, keeping its visual state."""
        self._set_type(CellType.MINE)

    def make_empty(self) -> None:
        """Turn this cell into an ordinary empty cell."""
        self._set_type(CellType.EMPTY)

    def make_number(self, count: int) -> None:
        """Turn this cell into a number cell with the given count."""
        self._set_type(CellType.NUMBER)
        self.adjacent_mines = count

    def make_question(self, question: Optional[Question]) -> None:
        """Turn this cell into a question cell."""
        self._set_type(CellType.QUESTION)
        self.question = question

    def make_surprise(self) -> None:
        """Turn this cell into a surprise cell."""
        self._set_type(CellType.SURPRISE)

    def _set_type(self, cell_type: CellType) -> None:
        """Switch variant and clear payload belonging to the old one."""
        self.type = cell_type
        self.adjacent_mines = 0
        self.question = None
        self.question_opened = False
        self.surprise_activated = False

    # ========================================================================
    # State Changes
    # ========================================================================

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Returns:
            True if cell was successfully revealed, False if already
            revealed or flagged.
        """
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.REVEALED
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is revealed.
        """
        if self.state == CellState.REVEALED:
            return False
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
        else:
            self.state = CellState.HIDDEN
        return True

    def mark_question_opened(self) -> bool:
        """
        Record the one-time activation of a question cell.

        Returns:
            True on first activation, False if not a question cell or
            already opened.
        """
        if self.type != CellType.QUESTION or self.question_opened:
            return False
        self.question_opened = True
        return True

    def mark_surprise_activated(self) -> bool:
        """Record the one-time activation of a surprise cell."""
        if self.type != CellType.SURPRISE or self.surprise_activated:
            return False
        self.surprise_activated = True
        return True

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    @property
    def is_mine(self) -> bool:
        """Check if cell holds a mine."""
        return self.type == CellType.MINE

    @property
    def is_special(self) -> bool:
        """Mines, questions and surprises never carry a number."""
        return self.type in SPECIAL_TYPES

    def display_value(self) -> str:
        """Short glyph used by text renderers."""
        if self.state == CellState.HIDDEN:
            return ""
        if self.state == CellState.FLAGGED:
            return "F"
        if self.type == CellType.MINE:
            return "*"
        if self.type == CellType.NUMBER:
            return str(self.adjacent_mines)
        if self.type == CellType.QUESTION:
            return "?"
        if self.type == CellType.SURPRISE:
            return "!"
        return ""

    def to_observation(self) -> int:
        """
        Convert cell to an integer observation value.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed empty/number cell with adjacent mine count
            9: Revealed mine
            10: Revealed question cell
            11: Revealed surprise cell
        """
        if self.state == CellState.HIDDEN:
            return OBS_HIDDEN
        if self.state == CellState.FLAGGED:
            return OBS_FLAGGED
        if self.type == CellType.MINE:
            return OBS_MINE
        if self.type == CellType.QUESTION:
            return OBS_QUESTION
        if self.type == CellType.SURPRISE:
            return OBS_SURPRISE
        if self.type == CellType.NUMBER:
            return self.adjacent_mines
        return 0
