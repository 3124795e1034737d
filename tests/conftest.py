"""
Pytest configuration and shared fixtures.
"""
import random
import pytest
import sys
from pathlib import Path
from typing import Iterable, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from duelsweeper import (
    Cell,
    CellGrid,
    Difficulty,
    GameController,
    GameObserver,
    GameSession,
    HistoryLog,
    MatchState,
    Question,
    ScoringRules,
)


Positions = Iterable[Tuple[int, int]]


# ============================================================================
# Helpers
# ============================================================================

class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value: float, seed: int = 0) -> None:
        super().__init__(seed)
        self.value = value

    def random(self) -> float:
        return self.value


HEADS = 0.0  # coin comes up "first option"
TAILS = 0.9  # coin comes up "second option"


def build_grid(
    rows: int,
    cols: int,
    mines: Positions = (),
    questions: Positions = (),
    surprises: Positions = (),
    question: Question = None,
) -> CellGrid:
    """Hand-build a grid with special cells at fixed positions."""
    grid = CellGrid(rows, cols, rng=random.Random(0))
    for row, col in mines:
        grid.get_cell(row, col).make_mine()
    for row, col in questions:
        grid.get_cell(row, col).make_question(question)
    for row, col in surprises:
        grid.get_cell(row, col).make_surprise()
    grid._calculate_adjacent_mines()
    grid.first_click_done = True
    return grid


class RecordingObserver(GameObserver):
    """Observer that records every callback as a tuple."""

    def __init__(self, tag: str = "") -> None:
        self.tag = tag
        self.events = []

    def on_score_changed(self, new_score: int) -> None:
        self.events.append(("score", new_score))

    def on_lives_changed(self, new_lives: int, total_lives: int) -> None:
        self.events.append(("lives", new_lives, total_lives))

    def on_turn_changed(self, player: int, player_name: str) -> None:
        self.events.append(("turn", player, player_name))

    def on_game_over(self, won: bool, winner: int) -> None:
        self.events.append(("game_over", won, winner))

    def on_cell_revealed(self, row: int, col: int, player: int) -> None:
        self.events.append(("cell", row, col, player))


# ============================================================================
# Question Fixtures
# ============================================================================

@pytest.fixture
def sample_question() -> Question:
    """An easy question whose answer is B."""
    return Question(1, "2 + 2 = ?", "3", "4", "5", "22", "B", 1)


@pytest.fixture
def question_pool() -> list:
    """Two distinct questions."""
    return [
        Question(1, "First?", "a", "b", "c", "d", "A", 1),
        Question(2, "Second?", "a", "b", "c", "d", "D", 4),
    ]


# ============================================================================
# Grid Fixtures
# ============================================================================

@pytest.fixture
def seeded_grid() -> CellGrid:
    """A 9x9 grid allocated with the easy counts."""
    grid = CellGrid(9, 9, rng=random.Random(42))
    grid.allocate(10, 6, 2, [])
    return grid


@pytest.fixture
def empty_grid() -> CellGrid:
    """A 5x5 grid with no special cells."""
    return build_grid(5, 5)


@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden empty cell."""
    return Cell()


# ============================================================================
# Match Fixtures
# ============================================================================

@pytest.fixture
def easy_match() -> MatchState:
    """An easy match with a seeded allocation."""
    return MatchState("Alice", "Bob", Difficulty.EASY, rng=random.Random(7))


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def history() -> HistoryLog:
    return HistoryLog()


@pytest.fixture
def rules(history: HistoryLog) -> ScoringRules:
    """Scoring rules writing to a fresh history log."""
    return ScoringRules(history, random.Random(3))


@pytest.fixture
def controller() -> GameController:
    """A controller with an easy match already started."""
    session = GameSession(rng=random.Random(11))
    ctrl = GameController(session)
    ctrl.start_match("Alice", "Bob", Difficulty.EASY)
    return ctrl
