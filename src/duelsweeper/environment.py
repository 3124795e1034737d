"""
Gymnasium environment wrapper for the two-board duel.

Both seats are played through a single action stream: each step acts
for whichever player currently holds the turn.
"""
from typing import Any, Dict, Optional, Sequence, SupportsFloat, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .cell import OBS_FLAGGED, OBS_HIDDEN, OBS_MINE, OBS_QUESTION, OBS_SURPRISE
from .controller import GameController, GameSession
from .difficulty import Difficulty, get_config
from .match import MatchPhase, MatchState
from .questions import Question

_GLYPHS = {
    OBS_HIDDEN: ".",
    OBS_FLAGGED: "F",
    OBS_MINE: "*",
    OBS_QUESTION: "?",
    OBS_SURPRISE: "!",
    0: " ",
}


# ============================================================================
# Duel Environment
# ============================================================================

class DuelEnv(gym.Env):
    """
    Gymnasium environment for a two-player duel.

    Observation:
        int8 array of shape (2, rows, cols): channel 0 is the acting
        player's board, channel 1 the opponent's, using the
        ``Cell.to_observation`` codes.

    Actions:
        Discrete action space of size 2 * rows * cols. Action i < rows*cols
        reveals cell (i // cols, i % cols); the second half flags.

    Rewards:
        - change in the combined score
        - +10 when the acting player clears their board
        - -10 when the shared lives run out
        - -0.1 for a rejected action
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        difficulty: Union[Difficulty, int] = Difficulty.EASY,
        question_pool: Sequence[Question] = (),
        player_names: Tuple[str, str] = ("Player 1", "Player 2"),
        max_steps: int = 1000,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the duel environment.

        Args:
            difficulty: Tier of every match played in this environment.
            question_pool: Questions attached to question cells.
            player_names: Names used for narration.
            max_steps: Steps before an episode is truncated.
            render_mode: How to render the environment.
        """
        super().__init__()

        self.difficulty = Difficulty.from_level(difficulty)
        self.config = get_config(self.difficulty)
        self.player_names = player_names
        self.max_steps = max_steps
        self.render_mode = render_mode
        self.session = GameSession(question_pool=list(question_pool))
        self.controller = GameController(self.session)

        self._cells = self.config.rows * self.config.cols
        self.observation_space = spaces.Box(
            low=OBS_FLAGGED,
            high=OBS_SURPRISE,
            shape=(2, self.config.rows, self.config.cols),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(2 * self._cells)

        self._steps = 0
        self.controller.start_match(*self.player_names, self.difficulty)

    @property
    def match(self) -> MatchState:
        return self.controller.match

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new match.

        Args:
            seed: Random seed for reproducible allocation and draws.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if seed is not None:
            self.session.rng.seed(seed)
        self.controller.start_match(*self.player_names, self.difficulty)
        self._steps = 0
        return self._get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action for the player holding the turn.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        flag, row, col = self._decode_action(int(action))
        player = self.match.current_player
        score_before = self.match.combined_score
        self._steps += 1

        if flag:
            result = self.controller.handle_flag(row, col, player)
        else:
            result = self.controller.handle_reveal(row, col, player)

        if not result.accepted:
            reward = -0.1
        else:
            reward = float(self.match.combined_score - score_before)
            if self.match.game_over:
                reward += 10.0 if self.match.phase == MatchPhase.WON else -10.0

        terminated = self.match.game_over
        truncated = not terminated and self._steps >= self.max_steps
        return (
            self._get_observation(),
            reward,
            terminated,
            truncated,
            self._get_info(),
        )

    def _decode_action(self, action: int) -> Tuple[bool, int, int]:
        """Split an action into (is_flag, row, col)."""
        flag = action >= self._cells
        row, col = divmod(action % self._cells, self.config.cols)
        return flag, row, col

    def _get_observation(self) -> np.ndarray:
        player = self.match.current_player
        opponent = 2 if player == 1 else 1
        return np.stack([
            self.match.get_board(player).get_observation(),
            self.match.get_board(opponent).get_observation(),
        ])

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "current_player": self.match.current_player,
            "score": self.match.combined_score,
            "lives": self.match.shared_lives,
            "phase": self.match.phase.name,
            "winner": self.match.winner,
        }

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions for the acting player.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if self.match.game_over:
            return mask
        board = self.match.current_board
        for row, col in board.positions():
            cell = board.get_cell(row, col)
            index = row * self.config.cols + col
            if not cell.is_revealed:
                mask[index] = True
            if cell.is_hidden:
                mask[self._cells + index] = True
        return mask

    # ========================================================================
    # Rendering
    # ========================================================================

    def render(self) -> Optional[str]:
        """Render both boards side by side."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render boards as ASCII text."""
        match = self.match
        left = match.grid1.get_observation()
        right = match.grid2.get_observation()
        width = 2 * self.config.cols

        lines = [
            f"Score: {match.combined_score}  "
            f"Lives: {match.shared_lives}/{match.total_lives}  "
            f"Turn: {match.current_player_name}",
            f"{match.player1_name:<{width}}   {match.player2_name}",
        ]
        for row in range(self.config.rows):
            left_str = "".join(self._glyph(v) + " " for v in left[row])
            right_str = "".join(self._glyph(v) + " " for v in right[row])
            lines.append(f"{left_str}  {right_str}")
        return "\n".join(lines)

    @staticmethod
    def _glyph(value: int) -> str:
        return _GLYPHS.get(int(value), str(int(value)))
