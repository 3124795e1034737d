"""
Match state for a two-player duel.

Each player owns an independent CellGrid; both share one score and one
life pool. Winning is two-phase: clearing a board sets ``game_won`` and
``winner`` but leaves the match open until the caller acknowledges it
with ``set_game_over(True)``.
"""
import logging
import random
from enum import Enum, auto
from typing import Optional, Sequence, Union

from .cell import CellState
from .difficulty import Difficulty, DifficultyConfig, get_config
from .grid import CellGrid
from .observers import GameObserver, ObserverRegistry
from .questions import Question

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class MatchPhase(Enum):
    """Coarse lifecycle of a match."""

    ACTIVE = auto()
    WON = auto()
    LOST = auto()


PLAYER_ONE = 1
PLAYER_TWO = 2
NO_WINNER = 0


# ============================================================================
# MatchState Class
# ============================================================================

class MatchState:
    """
    Turn, resource and win/loss arbitration for two independent grids.

    Every mutating operation notifies registered observers synchronously,
    in registration order, right after the state has changed.
    """

    def __init__(
        self,
        player1_name: str,
        player2_name: str,
        difficulty: Union[Difficulty, int] = Difficulty.EASY,
        question_pool: Sequence[Question] = (),
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Create both boards and the shared pools for a new match.

        Args:
            player1_name: Display name of player 1.
            player2_name: Display name of player 2.
            difficulty: Tier (or setup level 1-3) fixing board size and
                resource counts.
            question_pool: Questions attached to question cells.
            rng: Source of randomness for both allocations.
        """
        self.player1_name = player1_name
        self.player2_name = player2_name
        self.difficulty = Difficulty.from_level(difficulty)
        self.config: DifficultyConfig = get_config(self.difficulty)

        self._rng = rng or random.Random()
        self._current_player = PLAYER_ONE
        self._combined_score = 0
        self._total_lives = self.config.lives
        self._shared_lives = self._total_lives
        self._game_over = False
        self._game_won = False
        self._winner = NO_WINNER
        self._observers = ObserverRegistry()

        self.grid1 = self._create_grid(question_pool)
        self.grid2 = self._create_grid(question_pool)

        logger.info(
            "Match started: %s vs %s on %s (%dx%d, %d lives)",
            player1_name, player2_name, self.difficulty.label,
            self.config.rows, self.config.cols, self._total_lives,
        )

    def _create_grid(self, question_pool: Sequence[Question]) -> CellGrid:
        """Build and allocate one player's board."""
        grid = CellGrid(self.config.rows, self.config.cols, rng=self._rng)
        grid.allocate(
            self.config.num_mines,
            self.config.num_questions,
            self.config.num_surprises,
            question_pool,
        )
        return grid

    # ========================================================================
    # Observers
    # ========================================================================

    def add_observer(self, observer: GameObserver) -> None:
        """Register an observer (held weakly)."""
        self._observers.add(observer)

    def remove_observer(self, observer: GameObserver) -> None:
        """Unregister an observer."""
        self._observers.remove(observer)

    def _notify_score_changed(self) -> None:
        score = self._combined_score
        self._observers.notify(lambda obs: obs.on_score_changed(score))

    def _notify_lives_changed(self) -> None:
        lives, total = self._shared_lives, self._total_lives
        self._observers.notify(lambda obs: obs.on_lives_changed(lives, total))

    def _notify_turn_changed(self) -> None:
        player, name = self._current_player, self.current_player_name
        self._observers.notify(lambda obs: obs.on_turn_changed(player, name))

    def _notify_game_over(self, won: bool, winner: int) -> None:
        self._observers.notify(lambda obs: obs.on_game_over(won, winner))

    def _notify_cell_revealed(self, row: int, col: int, player: int) -> None:
        self._observers.notify(
            lambda obs: obs.on_cell_revealed(row, col, player)
        )

    # ========================================================================
    # Turn and Board Actions
    # ========================================================================

    def switch_turn(self) -> None:
        """Hand the turn to the other player unless the match is over."""
        if self._game_over:
            return
        self._current_player = (
            PLAYER_TWO if self._current_player == PLAYER_ONE else PLAYER_ONE
        )
        self._notify_turn_changed()

    def reveal_cell(self, row: int, col: int) -> bool:
        """
        Reveal a cell on the current player's board.

        Clearing the board records a win but does not end the match.

        Returns:
            True if a mine was hit, False otherwise.
        """
        if self._game_over:
            return False

        player = self._current_player
        mine_hit = self.current_board.reveal(row, col)
        if not mine_hit:
            self.check_win()

        self._notify_cell_revealed(row, col, player)
        return mine_hit

    def check_win(self) -> bool:
        """Record a win for the current player if their board is cleared."""
        if self.current_board.is_fully_cleared():
            self._game_won = True
            self._winner = self._current_player
            return True
        return False

    def flag_cell(self, row: int, col: int) -> None:
        """Toggle a flag on the current player's board."""
        if self._game_over:
            return
        self.current_board.toggle_flag(row, col)

    def can_reveal_cell(self, row: int, col: int, player: int) -> bool:
        """Check whether ``player`` may reveal (row, col) right now."""
        if self._game_over or player != self._current_player:
            return False
        return self.get_board(player).get_cell(row, col) is not None

    def can_flag_cell(self, row: int, col: int, player: int) -> bool:
        """Check whether ``player`` may toggle a flag on (row, col)."""
        if self._game_over or player != self._current_player:
            return False
        cell = self.get_board(player).get_cell(row, col)
        return cell is not None and cell.state in (
            CellState.HIDDEN, CellState.FLAGGED
        )

    def reveal_all_cells(self) -> None:
        """Disclose both boards; no per-cell notifications are sent."""
        self.grid1.reveal_all()
        self.grid2.reveal_all()

    # ========================================================================
    # Shared Resources
    # ========================================================================

    def decrease_shared_lives(self) -> bool:
        """
        Spend one shared life.

        Returns:
            True if this exhausted the pool and ended the match.
        """
        self._shared_lives = max(0, self._shared_lives - 1)
        self._notify_lives_changed()
        if self._shared_lives <= 0:
            self._game_over = True
            self._winner = NO_WINNER
            logger.info("Shared lives exhausted; match lost")
            self._notify_game_over(False, NO_WINNER)
            return True
        return False

    def add_shared_score(self, delta: int) -> None:
        """Add (or subtract) points from the combined score."""
        self._combined_score += delta
        self._notify_score_changed()

    def set_combined_score(self, score: int) -> None:
        """Overwrite the combined score."""
        self._combined_score = score
        self._notify_score_changed()

    def add_shared_life(self) -> None:
        """Restore one shared life, never above the pool size."""
        if self._shared_lives < self._total_lives:
            self._shared_lives += 1
            self._notify_lives_changed()

    def set_shared_lives(self, lives: int) -> None:
        """Set the life pool, clamped to [0, total_lives]."""
        self._shared_lives = max(0, min(lives, self._total_lives))
        self._notify_lives_changed()

    def set_game_over(self, game_over: bool) -> None:
        """Finalize (or reopen) the match; finalizing notifies observers."""
        self._game_over = game_over
        if game_over:
            logger.info(
                "Match finalized: won=%s winner=%d score=%d",
                self._game_won, self._winner, self._combined_score,
            )
            self._notify_game_over(self._game_won, self._winner)

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def current_player(self) -> int:
        return self._current_player

    @property
    def current_player_name(self) -> str:
        return self.player_name(self._current_player)

    def player_name(self, player: int) -> str:
        """Name of player 1 or 2."""
        return self.player1_name if player == PLAYER_ONE else self.player2_name

    @property
    def current_board(self) -> CellGrid:
        return self.get_board(self._current_player)

    def get_board(self, player: int) -> CellGrid:
        """Board owned by player 1 or 2."""
        return self.grid1 if player == PLAYER_ONE else self.grid2

    @property
    def shared_lives(self) -> int:
        return self._shared_lives

    @property
    def total_lives(self) -> int:
        return self._total_lives

    @property
    def combined_score(self) -> int:
        return self._combined_score

    @property
    def game_over(self) -> bool:
        return self._game_over

    @property
    def game_won(self) -> bool:
        return self._game_won

    @property
    def winner(self) -> int:
        """Winning player, meaningful once the match is won or over."""
        return self._winner

    @property
    def phase(self) -> MatchPhase:
        """ACTIVE, WON or LOST, derived from the win/over flags."""
        if self._game_over:
            if self._game_won and self._winner != NO_WINNER:
                return MatchPhase.WON
            return MatchPhase.LOST
        if self._game_won:
            return MatchPhase.WON
        return MatchPhase.ACTIVE
