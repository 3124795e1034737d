"""
Headless game controller.

Drives a MatchState and ScoringRules for each player action: gating the
move, revealing or flagging, scoring the result, applying the deltas to
the shared pools, switching turns and finalizing the match.
"""
import logging
import random
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from .cell import Cell, CellType
from .difficulty import Difficulty
from .grid import CellGrid
from .history import HistoryLog, MatchRecord
from .match import MatchState
from .questions import Question
from .scoring import BonusEffect, ScoreOutcome, ScoringRules

logger = logging.getLogger(__name__)


# ============================================================================
# Session and Results
# ============================================================================

@dataclass
class GameSession:
    """
    Explicit context shared by everything a controller touches.

    Attributes:
        history: Audit sink receiving narration lines.
        question_pool: Questions available to question cells.
        rng: Random source for allocation and scoring draws.
    """

    history: HistoryLog = field(default_factory=HistoryLog)
    question_pool: Sequence[Question] = ()
    rng: random.Random = field(default_factory=random.Random, repr=False)


@dataclass
class MoveResult:
    """
    Outcome of one controller action.

    Attributes:
        accepted: False when the move was rejected before touching the board.
        reason: Why a move was rejected.
        mine_hit: Whether the reveal landed on a mine.
        cell_type: Type of the targeted cell after the move.
        outcomes: Scoring rules applied, in order.
        question_pending: A revealed question cell is waiting to be opened.
        match_over: Whether the match ended with this move.
    """

    accepted: bool
    reason: str = ""
    mine_hit: bool = False
    cell_type: Optional[CellType] = None
    outcomes: List[ScoreOutcome] = field(default_factory=list)
    question_pending: bool = False
    match_over: bool = False

    @property
    def score_delta(self) -> int:
        return sum(outcome.score_delta for outcome in self.outcomes)

    @property
    def life_delta(self) -> int:
        return sum(outcome.life_delta for outcome in self.outcomes)


def _rejected(reason: str) -> MoveResult:
    return MoveResult(accepted=False, reason=reason)


# ============================================================================
# GameController
# ============================================================================

class GameController:
    """Per-action flow for a two-player match."""

    def __init__(self, session: Optional[GameSession] = None) -> None:
        self.session = session or GameSession()
        self.rules = ScoringRules(self.session.history, self.session.rng)
        self.match: Optional[MatchState] = None
        self.record: Optional[MatchRecord] = None
        self._started_at = 0.0

    def start_match(
        self,
        player1_name: str,
        player2_name: str,
        difficulty: Union[Difficulty, int] = Difficulty.EASY,
    ) -> MatchState:
        """Create a fresh match and forget any previous one."""
        self.match = MatchState(
            player1_name,
            player2_name,
            difficulty,
            self.session.question_pool,
            rng=self.session.rng,
        )
        self.record = None
        self._started_at = time.monotonic()
        self._narrate(
            f"Match started: {player1_name} vs {player2_name} "
            f"({self.match.difficulty.label})"
        )
        return self.match

    def _require_match(self) -> MatchState:
        if self.match is None:
            raise RuntimeError("No match in progress; call start_match() first")
        return self.match

    def _narrate(self, line: str) -> None:
        self.session.history.append(line)

    def _gate(self, match: MatchState, player: int) -> Optional[str]:
        """Reason a player may not act right now, or None."""
        if match.game_over:
            return "game over"
        if player != match.current_player:
            return "not your turn"
        return None

    # ========================================================================
    # Player Actions
    # ========================================================================

    def handle_reveal(self, row: int, col: int, player: int) -> MoveResult:
        """
        Reveal a cell for ``player`` and score it.

        An already revealed, unopened question cell is reported as pending
        instead of being revealed again. Any completed reveal passes the
        turn unless it ended the match.
        """
        match = self._require_match()
        if not match.can_reveal_cell(row, col, player):
            reason = self._gate(match, player) or "out of bounds"
            logger.debug("Reveal (%d, %d) by player %d rejected: %s",
                         row, col, player, reason)
            return _rejected(reason)

        cell = match.get_board(player).get_cell(row, col)
        if cell.is_revealed:
            if cell.type == CellType.QUESTION and not cell.question_opened:
                return MoveResult(
                    accepted=True, cell_type=cell.type, question_pending=True
                )
            return _rejected("already revealed")

        name = match.current_player_name
        mine_hit = match.reveal_cell(row, col)
        outcome = self.rules.score_reveal(name, cell)
        self._apply(outcome)

        result = MoveResult(
            accepted=True,
            mine_hit=mine_hit,
            cell_type=cell.type,
            outcomes=[outcome],
        )

        if match.game_over or match.game_won:
            self._conclude()
        else:
            result.question_pending = (
                cell.type == CellType.QUESTION and not cell.question_opened
            )
            match.switch_turn()

        result.match_over = match.game_over
        return result

    def handle_flag(self, row: int, col: int, player: int) -> MoveResult:
        """
        Toggle a flag for ``player``.

        The first time a cell becomes flagged it is scored: a mine earns a
        point, anything else costs three. Flagging keeps the turn.
        """
        match = self._require_match()
        if not match.can_flag_cell(row, col, player):
            reason = self._gate(match, player) or "cell cannot be flagged"
            return _rejected(reason)

        match.flag_cell(row, col)
        cell = match.get_board(player).get_cell(row, col)
        result = MoveResult(accepted=True, cell_type=cell.type)

        if cell.is_flagged and not cell.flag_scored:
            cell.flag_scored = True
            outcome = self.rules.score_flag(match.current_player_name, cell)
            self._apply(outcome)
            result.outcomes.append(outcome)

        if match.game_over:
            self._conclude()
        result.match_over = match.game_over
        return result

    def open_question(
        self, row: int, col: int, player: int, answer: str
    ) -> MoveResult:
        """
        Activate a revealed question cell with the player's answer.

        Pays the activation cost, scores the answer, then applies the
        solution table for the question's tier including any board bonus.
        """
        match = self._require_match()
        reason = self._gate(match, player)
        if reason:
            return _rejected(reason)

        board = match.get_board(player)
        cell = board.get_cell(row, col)
        if cell is None or cell.type != CellType.QUESTION or not cell.is_revealed:
            return _rejected("not a revealed question cell")
        if cell.question_opened:
            return _rejected("question already opened")
        if cell.question is None:
            return _rejected("no question available")

        cell.mark_question_opened()
        question = cell.question
        correct = question.is_correct(answer)
        name = match.current_player_name

        result = MoveResult(accepted=True, cell_type=cell.type)
        # Activation (cost and +1/-3 for the answer) stacks with the solution entry
        activation = self.rules.question_activated(name, match.difficulty, correct)
        self._apply(activation)
        result.outcomes.append(activation)

        if not match.game_over:
            solution = self.rules.solution_used(
                name, match.difficulty, question.difficulty, correct
            )
            self._apply(solution)
            result.outcomes.append(solution)
            if not match.game_over:
                self._apply_effect(solution.effect, board)

        if match.game_over or match.game_won:
            self._conclude()
        result.match_over = match.game_over
        return result

    def activate_surprise(self, row: int, col: int, player: int) -> MoveResult:
        """Activate a revealed surprise cell once."""
        match = self._require_match()
        reason = self._gate(match, player)
        if reason:
            return _rejected(reason)

        cell = match.get_board(player).get_cell(row, col)
        if cell is None or cell.type != CellType.SURPRISE or not cell.is_revealed:
            return _rejected("not a revealed surprise cell")
        if not cell.mark_surprise_activated():
            return _rejected("surprise already activated")

        outcome = self.rules.surprise_activated(
            match.current_player_name, match.difficulty
        )
        self._apply(outcome)

        if match.game_over:
            self._conclude()
        return MoveResult(
            accepted=True,
            cell_type=cell.type,
            outcomes=[outcome],
            match_over=match.game_over,
        )

    # ========================================================================
    # Resource Application
    # ========================================================================

    def _apply(self, outcome: ScoreOutcome) -> None:
        """Push a rule's deltas into the shared pools."""
        match = self._require_match()
        if outcome.score_delta:
            match.add_shared_score(outcome.score_delta)
        for _ in range(max(0, outcome.life_delta)):
            match.add_shared_life()
        for _ in range(max(0, -outcome.life_delta)):
            if match.decrease_shared_lives():
                break

    def _apply_effect(self, effect: BonusEffect, board: CellGrid) -> None:
        """Apply a solution bonus to the acting player's board."""
        if effect == BonusEffect.UNCOVER_MINE:
            position = board.uncover_random_mine(self.session.rng)
            if position is not None:
                self._narrate(f"A mine was uncovered at {position}")
        elif effect == BonusEffect.REVEAL_AREA:
            revealed = board.reveal_random_area(self.session.rng)
            self._narrate(f"{len(revealed)} cells were revealed by a bonus")
            self._require_match().check_win()

    # ========================================================================
    # Match End
    # ========================================================================

    def _conclude(self) -> None:
        """Finalize a won or lost match exactly once."""
        match = self._require_match()
        if self.record is not None:
            return

        if match.game_won and match.winner:
            winner_name = match.player_name(match.winner)
            self._narrate(f"{winner_name} revealed all cells on their board")
            bonus = self.rules.lives_to_points(match.difficulty, match.shared_lives)
            if bonus.score_delta:
                match.add_shared_score(bonus.score_delta)
            if not match.game_over:
                match.set_game_over(True)
            self._narrate(f"{winner_name} wins with {match.combined_score} points")
        else:
            self._narrate(
                f"Shared lives exhausted; match lost with "
                f"{match.combined_score} points"
            )

        match.reveal_all_cells()
        self.record = MatchRecord(
            difficulty=match.difficulty,
            player1_name=match.player1_name,
            player2_name=match.player2_name,
            combined_score=match.combined_score,
            remaining_lives=match.shared_lives,
            winner=match.winner,
            duration_seconds=int(time.monotonic() - self._started_at),
        )

    def finish(self) -> Optional[MatchRecord]:
        """Record of the finished match, or None while it is still running."""
        return self.record

    # ========================================================================
    # Queries
    # ========================================================================

    def cell(self, row: int, col: int, player: int) -> Optional[Cell]:
        """Look up a cell on a player's board."""
        return self._require_match().get_board(player).get_cell(row, col)
