"""
Two-board minesweeper duel.

Provides the core game logic: cell grids with quiz and surprise cells,
the shared-resource match state, scoring rules and a headless controller.
"""
from .cell import Cell, CellState, CellType
from .questions import Question, SAMPLE_QUESTIONS
from .difficulty import Difficulty, DifficultyConfig, get_config, EASY, MEDIUM, HARD
from .cascade import RevealEngine
from .grid import CellGrid
from .observers import GameObserver, ObserverRegistry
from .match import MatchState, MatchPhase
from .scoring import ScoringRules, ScoreOutcome, SolutionType, BonusEffect
from .history import HistoryLog, MatchRecord
from .controller import GameController, GameSession, MoveResult
from .environment import DuelEnv

__all__ = [
    "Cell",
    "CellState",
    "CellType",
    "Question",
    "SAMPLE_QUESTIONS",
    "Difficulty",
    "DifficultyConfig",
    "get_config",
    "EASY",
    "MEDIUM",
    "HARD",
    "RevealEngine",
    "CellGrid",
    "GameObserver",
    "ObserverRegistry",
    "MatchState",
    "MatchPhase",
    "ScoringRules",
    "ScoreOutcome",
    "SolutionType",
    "BonusEffect",
    "HistoryLog",
    "MatchRecord",
    "GameController",
    "GameSession",
    "MoveResult",
    "DuelEnv",
]
