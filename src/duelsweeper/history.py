"""
Audit log and end-of-match records.

The audit log receives human-readable narration lines from scoring and
the controller. Storage of finished-match records is handled elsewhere;
this module only defines the record.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Iterator, List

from .difficulty import Difficulty


class HistoryLog:
    """In-memory append-only audit sink."""

    def __init__(self) -> None:
        self._lines: List[str] = []

    def append(self, line: str) -> None:
        """Record one narration line."""
        self._lines.append(line)

    @property
    def lines(self) -> List[str]:
        """Copy of all lines recorded so far."""
        return list(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._lines))

    def __len__(self) -> int:
        return len(self._lines)


@dataclass(frozen=True)
class MatchRecord:
    """
    Summary of a finished match.

    Attributes:
        difficulty: Tier the match was played on.
        player1_name: Name of player 1.
        player2_name: Name of player 2.
        combined_score: Final shared score.
        remaining_lives: Shared lives left at the end.
        winner: Winning player (1 or 2), or 0 when lives ran out.
        duration_seconds: Wall-clock length of the match.
        played_on: Calendar date of the match.
    """

    difficulty: Difficulty
    player1_name: str
    player2_name: str
    combined_score: int
    remaining_lives: int
    winner: int
    duration_seconds: int = 0
    played_on: date = field(default_factory=date.today)

    @property
    def formatted_date(self) -> str:
        return self.played_on.strftime("%Y-%m-%d")

    @property
    def formatted_duration(self) -> str:
        """Duration as m:ss."""
        minutes, seconds = divmod(self.duration_seconds, 60)
        return f"{minutes}:{seconds:02d}"

    @property
    def winner_name(self) -> str:
        """Winner's name, or an empty string for a lost match."""
        if self.winner == 1:
            return self.player1_name
        if self.winner == 2:
            return self.player2_name
        return ""
