"""
Base agent interface for duel players.

Defines the abstract interface that all agents must implement.
"""
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np


# ============================================================================
# Base Agent Interface
# ============================================================================

class BaseAgent(ABC):
    """
    Abstract base class for duel agents.

    Actions follow DuelEnv: indices below rows*cols reveal a cell, the
    rest flag one.
    """

    def __init__(self, board_height: int, board_width: int) -> None:
        """
        Initialize the agent.

        Args:
            board_height: Number of rows in each board.
            board_width: Number of columns in each board.
        """
        self.board_height = board_height
        self.board_width = board_width
        self.total_cells = board_height * board_width

    @abstractmethod
    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select an action based on the current observation.

        Args:
            observation: Array of shape (2, rows, cols) of cell codes.
            valid_actions: Optional mask of valid actions.

        Returns:
            Action index.
        """
        pass

    def action_to_move(self, action: int) -> Tuple[bool, int, int]:
        """Convert an action index to (is_flag, row, col)."""
        flag = action >= self.total_cells
        row, col = divmod(action % self.total_cells, self.board_width)
        return flag, row, col

    def move_to_action(self, row: int, col: int, flag: bool = False) -> int:
        """Convert a move to its action index."""
        index = row * self.board_width + col
        return index + self.total_cells if flag else index

    def get_valid_actions_from_obs(self, observation: np.ndarray) -> np.ndarray:
        """
        Get valid actions mask from observation.

        Hidden cells may be revealed or flagged; flagged cells may be
        revealed (which unflags them).
        """
        own = observation[0].flatten()
        reveal = (own == -1) | (own == -2)
        flag = own == -1
        return np.concatenate([reveal, flag])

    def reset(self) -> None:
        """Reset agent state for new match."""
        pass
