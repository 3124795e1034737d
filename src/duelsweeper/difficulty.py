"""
Difficulty tiers and the resource table derived from them.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict


# ============================================================================
# Constants
# ============================================================================

class Difficulty(IntEnum):
    """Difficulty tier chosen at match setup."""

    EASY = 1
    MEDIUM = 2
    HARD = 3

    @classmethod
    def from_level(cls, level: int) -> "Difficulty":
        """Map a setup level (1-3) to a tier."""
        try:
            return cls(int(level))
        except ValueError:
            raise ValueError(f"Unknown difficulty level: {level}") from None

    @property
    def label(self) -> str:
        """Human-readable name, e.g. 'Easy'."""
        return self.name.capitalize()


@dataclass(frozen=True)
class DifficultyConfig:
    """
    Board and resource settings for one difficulty tier.

    Attributes:
        rows: Number of rows on each player's board.
        cols: Number of columns on each player's board.
        num_mines: Mines placed on each board.
        num_questions: Question cells placed on each board.
        num_surprises: Surprise cells placed on each board.
        lives: Size of the shared life pool.
        activation_cost: Points paid to activate a question or surprise.
        surprise_points: Points won or lost by a surprise activation.
    """

    rows: int
    cols: int
    num_mines: int
    num_questions: int
    num_surprises: int
    lives: int
    activation_cost: int
    surprise_points: int

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.cols < 1:
            raise ValueError("Board dimensions must be positive")
        if min(self.num_mines, self.num_questions, self.num_surprises) < 0:
            raise ValueError("Special cell counts cannot be negative")
        if self.lives < 1:
            raise ValueError("Shared lives must be at least 1")

    @property
    def total_cells(self) -> int:
        return self.rows * self.cols


# Preset difficulty levels
EASY = DifficultyConfig(9, 9, 10, 6, 2, 10, 5, 8)
MEDIUM = DifficultyConfig(13, 13, 26, 7, 3, 8, 8, 12)
HARD = DifficultyConfig(16, 16, 44, 11, 4, 6, 12, 16)

_PRESETS: Dict[Difficulty, DifficultyConfig] = {
    Difficulty.EASY: EASY,
    Difficulty.MEDIUM: MEDIUM,
    Difficulty.HARD: HARD,
}


def get_config(difficulty: Difficulty) -> DifficultyConfig:
    """Return the preset configuration for a tier."""
    return _PRESETS[Difficulty.from_level(difficulty)]
