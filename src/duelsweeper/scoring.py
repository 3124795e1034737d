"""
Scoring policy for the shared score and life pools.

Rules are looked up by (cell type, action, outcome, difficulty) and
return a ScoreOutcome; applying the deltas to a match is the caller's
job. Each rule also appends one narration line to the audit sink.
Randomized rules draw independent fair coins from the injected rng.
"""
import random
from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Dict, Optional, Tuple, Union

from .cell import Cell, CellType
from .difficulty import Difficulty, get_config
from .history import HistoryLog


# ============================================================================
# Constants
# ============================================================================

class SolutionType(IntEnum):
    """Tier of a question whose solution was used."""

    EASY = 1
    MEDIUM = 2
    HARD = 3
    EXPERT = 4

    @property
    def label(self) -> str:
        return f"{self.name.capitalize()} Question"


class BonusEffect(Enum):
    """Board side effects granted by some correct solutions."""

    NONE = auto()
    UNCOVER_MINE = auto()
    REVEAL_AREA = auto()


@dataclass(frozen=True)
class ScoreOutcome:
    """
    Result of applying a scoring rule.

    Attributes:
        score_delta: Points to add to the combined score (may be negative).
        life_delta: Shared lives to add (may be negative).
        message: Narration line written to the audit sink.
        effect: Board bonus the controller should apply.
    """

    score_delta: int
    life_delta: int = 0
    message: str = ""
    effect: BonusEffect = BonusEffect.NONE


@dataclass(frozen=True)
class _Reward:
    points: int
    lives: int = 0
    effect: BonusEffect = BonusEffect.NONE


# Points/lives for using a question's solution, keyed by
# (match difficulty, question tier, answered correctly). Two entries mean
# a fair coin picks one.
_SOLUTION_TABLE: Dict[Tuple[Difficulty, SolutionType, bool], Tuple[_Reward, ...]] = {
    # Easy match
    (Difficulty.EASY, SolutionType.EASY, True): (_Reward(3, 1),),
    (Difficulty.EASY, SolutionType.MEDIUM, True): (
        _Reward(6, 0, BonusEffect.UNCOVER_MINE),),
    (Difficulty.EASY, SolutionType.HARD, True): (
        _Reward(10, 0, BonusEffect.REVEAL_AREA),),
    (Difficulty.EASY, SolutionType.EXPERT, True): (_Reward(15, 2),),
    (Difficulty.EASY, SolutionType.EASY, False): (_Reward(-3), _Reward(0)),
    (Difficulty.EASY, SolutionType.MEDIUM, False): (_Reward(-6), _Reward(0)),
    (Difficulty.EASY, SolutionType.HARD, False): (_Reward(-10),),
    (Difficulty.EASY, SolutionType.EXPERT, False): (_Reward(-15, -1),),
    # Medium match
    (Difficulty.MEDIUM, SolutionType.EASY, True): (_Reward(8, 1),),
    (Difficulty.MEDIUM, SolutionType.MEDIUM, True): (_Reward(10, 1),),
    (Difficulty.MEDIUM, SolutionType.HARD, True): (_Reward(15, 1),),
    (Difficulty.MEDIUM, SolutionType.EXPERT, True): (_Reward(20, 2),),
    (Difficulty.MEDIUM, SolutionType.EASY, False): (_Reward(-8),),
    (Difficulty.MEDIUM, SolutionType.MEDIUM, False): (
        _Reward(-10, -1), _Reward(0)),
    (Difficulty.MEDIUM, SolutionType.HARD, False): (_Reward(-15, -1),),
    (Difficulty.MEDIUM, SolutionType.EXPERT, False): (
        _Reward(-20, -1), _Reward(-20, -2)),
    # Hard match
    (Difficulty.HARD, SolutionType.EASY, True): (_Reward(10, 1),),
    (Difficulty.HARD, SolutionType.MEDIUM, True): (
        _Reward(15, 1), _Reward(15, 2)),
    (Difficulty.HARD, SolutionType.HARD, True): (_Reward(20, 2),),
    (Difficulty.HARD, SolutionType.EXPERT, True): (_Reward(40, 3),),
    (Difficulty.HARD, SolutionType.EASY, False): (_Reward(-10, -1),),
    (Difficulty.HARD, SolutionType.MEDIUM, False): (
        _Reward(-15, -1), _Reward(-15, -2)),
    (Difficulty.HARD, SolutionType.HARD, False): (_Reward(-20, -2),),
    (Difficulty.HARD, SolutionType.EXPERT, False): (_Reward(-40, -3),),
}

CORRECT_REVEAL_POINTS = 1
WRONG_FLAG_PENALTY = -3
QUESTION_CORRECT_POINTS = 1
QUESTION_WRONG_POINTS = -3


def _signed(value: int) -> str:
    return f"+{value}" if value >= 0 else str(value)


def _lives_word(value: int) -> str:
    return "life" if abs(value) == 1 else "lives"


# ============================================================================
# ScoringRules
# ============================================================================

class ScoringRules:
    """
    Policy table translating player actions into score/life deltas.

    The only state held is the audit sink and the random source.
    """

    def __init__(
        self,
        sink: Optional[HistoryLog] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Args:
            sink: Audit log receiving narration lines (anything with an
                ``append(str)`` method works), or None to discard them.
            rng: Random source for the coin-flip rules.
        """
        self._sink = sink
        self._rng = rng or random.Random()

    def _emit(self, outcome: ScoreOutcome) -> ScoreOutcome:
        if self._sink is not None:
            self._sink.append(outcome.message)
        return outcome

    def _coin(self) -> bool:
        """One fair Bernoulli draw."""
        return self._rng.random() < 0.5

    # ========================================================================
    # Fixed-outcome Rules
    # ========================================================================

    def mine_flagged_correctly(self, player: str) -> ScoreOutcome:
        return self._emit(ScoreOutcome(
            1, 0, f"{player} flagged a mine correctly (+1pt)"))

    def mine_flagged_incorrectly(self, player: str) -> ScoreOutcome:
        return self._emit(ScoreOutcome(
            -1, 0, f"{player} flagged a non-mine cell as a mine (-1pt)"))

    def mine_hit(self, player: str) -> ScoreOutcome:
        return self._emit(ScoreOutcome(
            0, -1, f"{player} hit a mine (-1 shared life)"))

    def number_revealed(self, player: str, value: int) -> ScoreOutcome:
        return self._emit(ScoreOutcome(
            CORRECT_REVEAL_POINTS, 0,
            f"{player} revealed numbered cell {value} correctly (+1pt)"))

    def number_flagged_incorrectly(self, player: str, value: int) -> ScoreOutcome:
        return self._emit(ScoreOutcome(
            WRONG_FLAG_PENALTY, 0,
            f"{player} flagged numbered cell {value} incorrectly (-3pts)"))

    def empty_revealed(self, player: str) -> ScoreOutcome:
        return self._emit(ScoreOutcome(
            CORRECT_REVEAL_POINTS, 0,
            f"{player} revealed empty cell correctly (+1pt)"))

    def empty_flagged_incorrectly(self, player: str) -> ScoreOutcome:
        return self._emit(ScoreOutcome(
            WRONG_FLAG_PENALTY, 0,
            f"{player} flagged empty cell incorrectly (-3pts)"))

    def question_revealed(self, player: str) -> ScoreOutcome:
        return self._emit(ScoreOutcome(
            CORRECT_REVEAL_POINTS, 0,
            f"{player} revealed question cell correctly (+1pt)"))

    def question_flagged_incorrectly(self, player: str) -> ScoreOutcome:
        return self._emit(ScoreOutcome(
            WRONG_FLAG_PENALTY, 0,
            f"{player} flagged question cell incorrectly (-3pts)"))

    def surprise_revealed(self, player: str) -> ScoreOutcome:
        return self._emit(ScoreOutcome(
            CORRECT_REVEAL_POINTS, 0,
            f"{player} revealed surprise cell correctly (+1pt)"))

    def surprise_flagged_incorrectly(self, player: str) -> ScoreOutcome:
        return self._emit(ScoreOutcome(
            WRONG_FLAG_PENALTY, 0,
            f"{player} flagged surprise cell incorrectly (-3pts)"))

    def score_reveal(self, player: str, cell: Cell) -> ScoreOutcome:
        """Pick the reveal rule matching the cell's type."""
        if cell.type == CellType.MINE:
            return self.mine_hit(player)
        if cell.type == CellType.NUMBER:
            return self.number_revealed(player, cell.adjacent_mines)
        if cell.type == CellType.QUESTION:
            return self.question_revealed(player)
        if cell.type == CellType.SURPRISE:
            return self.surprise_revealed(player)
        return self.empty_revealed(player)

    def score_flag(self, player: str, cell: Cell) -> ScoreOutcome:
        """Pick the flag rule matching the cell's type."""
        if cell.type == CellType.MINE:
            return self.mine_flagged_correctly(player)
        if cell.type == CellType.NUMBER:
            return self.number_flagged_incorrectly(player, cell.adjacent_mines)
        if cell.type == CellType.QUESTION:
            return self.question_flagged_incorrectly(player)
        if cell.type == CellType.SURPRISE:
            return self.surprise_flagged_incorrectly(player)
        return self.empty_flagged_incorrectly(player)

    # ========================================================================
    # Activation Rules
    # ========================================================================

    @staticmethod
    def activation_cost(difficulty: Union[Difficulty, int]) -> int:
        """Points paid to activate a question or surprise cell."""
        return get_config(difficulty).activation_cost

    def question_activated(
        self,
        player: str,
        difficulty: Union[Difficulty, int],
        correct: bool,
    ) -> ScoreOutcome:
        """Pay the activation cost, then +1 or -3 for the answer."""
        difficulty = Difficulty.from_level(difficulty)
        cost = self.activation_cost(difficulty)
        answer_points = QUESTION_CORRECT_POINTS if correct else QUESTION_WRONG_POINTS
        result = "correctly" if correct else "incorrectly"
        return self._emit(ScoreOutcome(
            answer_points - cost, 0,
            f"{player} activated question cell ({difficulty.label}: "
            f"-{cost}pts cost, answered {result} {_signed(answer_points)}pts)"))

    def surprise_activated(
        self, player: str, difficulty: Union[Difficulty, int]
    ) -> ScoreOutcome:
        """Pay the activation cost, then a fair coin picks good or bad."""
        difficulty = Difficulty.from_level(difficulty)
        config = get_config(difficulty)
        cost = config.activation_cost
        good = self._coin()
        points = config.surprise_points if good else -config.surprise_points
        lives = 1 if good else -1
        outcome = "good" if good else "bad"
        return self._emit(ScoreOutcome(
            points - cost, lives,
            f"{player} activated surprise cell ({outcome}: -{cost}pts cost, "
            f"{_signed(points)}pts, {_signed(lives)} shared life)"))

    def solution_used(
        self,
        player: str,
        difficulty: Union[Difficulty, int],
        solution_type: Union[SolutionType, int],
        correct: bool,
    ) -> ScoreOutcome:
        """
        Bonus or penalty for using a question's solution.

        Looks up (difficulty, solution type, correctness) in the solution
        table; entries with two alternatives are settled by a fair coin.
        """
        difficulty = Difficulty.from_level(difficulty)
        solution_type = SolutionType(int(solution_type))
        choices = _SOLUTION_TABLE[(difficulty, solution_type, bool(correct))]
        reward = choices[0]
        if len(choices) > 1 and not self._coin():
            reward = choices[1]

        result = "correctly" if correct else "incorrectly"
        life_part = ""
        if reward.lives:
            life_part = f", {_signed(reward.lives)} shared {_lives_word(reward.lives)}"
        return self._emit(ScoreOutcome(
            reward.points, reward.lives,
            f"{player} used the {solution_type.label} solution {result} "
            f"({difficulty.label}: {_signed(reward.points)}pts{life_part})",
            reward.effect))

    def lives_to_points(
        self, difficulty: Union[Difficulty, int], remaining_lives: int
    ) -> ScoreOutcome:
        """Convert leftover shared lives into points at match end."""
        if remaining_lives <= 0:
            return ScoreOutcome(0, 0, "")
        cost = self.activation_cost(difficulty)
        points = remaining_lives * cost
        return self._emit(ScoreOutcome(
            points, 0,
            f"Game ended: {remaining_lives} remaining shared "
            f"{_lives_word(remaining_lives)} converted to "
            f"{points} points ({remaining_lives} x {cost})"))
