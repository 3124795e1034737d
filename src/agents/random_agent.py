"""
Random agent for the duel.

Serves as a baseline by selecting random valid actions.
"""
from typing import Optional

import numpy as np

from .base_agent import BaseAgent


# ============================================================================
# Random Agent
# ============================================================================

class RandomAgent(BaseAgent):
    """
    Agent that selects actions uniformly at random.

    ``flag_probability`` biases the choice between reveal and flag
    actions so matches are not dominated by flag spam.
    """

    def __init__(
        self,
        board_height: int = 9,
        board_width: int = 9,
        flag_probability: float = 0.1,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the random agent.

        Args:
            board_height: Number of rows in each board.
            board_width: Number of columns in each board.
            flag_probability: Chance of choosing a flag action when both
                kinds are available.
            seed: Random seed for reproducibility.
        """
        super().__init__(board_height, board_width)
        self.flag_probability = flag_probability
        self.rng = np.random.default_rng(seed)

    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select a random valid action.

        Returns:
            Random action index from valid actions.
        """
        if valid_actions is None:
            valid_actions = self.get_valid_actions_from_obs(observation)

        reveal_indices = np.where(valid_actions[:self.total_cells])[0]
        flag_indices = np.where(valid_actions[self.total_cells:])[0] + self.total_cells

        if len(reveal_indices) == 0 and len(flag_indices) == 0:
            # No valid actions, return any action (will be rejected)
            return 0
        if len(flag_indices) and (
            len(reveal_indices) == 0 or self.rng.random() < self.flag_probability
        ):
            return int(self.rng.choice(flag_indices))
        return int(self.rng.choice(reveal_indices))
