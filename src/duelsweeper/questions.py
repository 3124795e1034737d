"""
Question pool entries consumed by question cells.

Question banks are loaded and edited elsewhere; the engine only reads
entries, so they are frozen dataclasses.
"""
from dataclasses import dataclass
from typing import List, Tuple


ANSWER_LETTERS = ("A", "B", "C", "D")


@dataclass(frozen=True)
class Question:
    """
    A multiple-choice question attached to a question cell.

    Attributes:
        id: Identifier within the question bank.
        text: The question prompt.
        option_a..option_d: The four answer options.
        correct_answer: Letter of the correct option (A-D).
        difficulty: Question tier, 1 (easy) through 4 (expert).
    """

    id: int
    text: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_answer: str
    difficulty: int = 1

    def __post_init__(self) -> None:
        """Validate the answer letter and difficulty tier."""
        letter = self.correct_answer.strip().upper()
        if letter not in ANSWER_LETTERS:
            raise ValueError(f"Correct answer must be one of A-D, got {self.correct_answer!r}")
        if not 1 <= self.difficulty <= 4:
            raise ValueError(f"Question difficulty must be 1-4, got {self.difficulty}")
        object.__setattr__(self, "correct_answer", letter)

    @property
    def options(self) -> Tuple[str, str, str, str]:
        """Options in A-D order."""
        return (self.option_a, self.option_b, self.option_c, self.option_d)

    def is_correct(self, answer: str) -> bool:
        """Check an answer letter, case-insensitively."""
        return answer.strip().upper() == self.correct_answer


# Small built-in bank used by the scripts when no external pool is supplied
SAMPLE_QUESTIONS: List[Question] = [
    Question(1, "Which data structure uses FIFO ordering?",
             "Stack", "Queue", "Heap", "Tree", "B", 1),
    Question(2, "What is the time complexity of binary search?",
             "O(n)", "O(n log n)", "O(log n)", "O(1)", "C", 1),
    Question(3, "Which keyword defines a generator in Python?",
             "return", "yield", "async", "lambda", "B", 2),
    Question(4, "Which HTTP status code means 'Not Found'?",
             "200", "301", "500", "404", "D", 2),
    Question(5, "Which sorting algorithm is stable?",
             "Merge sort", "Quick sort", "Heap sort", "Selection sort", "A", 3),
    Question(6, "What does ACID's 'I' stand for?",
             "Integrity", "Isolation", "Indexing", "Idempotence", "B", 3),
    Question(7, "Which graph algorithm handles negative edge weights?",
             "Dijkstra", "Prim", "Bellman-Ford", "Kruskal", "C", 4),
    Question(8, "What is the amortized cost of append on a dynamic array?",
             "O(1)", "O(log n)", "O(n)", "O(n^2)", "A", 4),
]
