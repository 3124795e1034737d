"""
Unit tests for CellGrid.

Tests allocation exactness, question cycling, adjacency numbers,
first-click mine relocation, reveal/flag behavior and bonus reveals.
"""
import random

import numpy as np
import pytest

from conftest import build_grid
from duelsweeper import CellGrid, CellType, Question


def type_counts(grid: CellGrid) -> dict:
    return {cell_type: grid.count_type(cell_type) for cell_type in CellType}


# ============================================================================
# Construction Tests
# ============================================================================

class TestGridConstruction:
    """Test grid creation and initial state."""

    def test_new_grid_all_cells_empty_and_hidden(self) -> None:
        grid = CellGrid(4, 6)
        for row, col in grid.positions():
            cell = grid.get_cell(row, col)
            assert cell.type == CellType.EMPTY
            assert cell.is_hidden is True

    def test_zero_dimension_raises_error(self) -> None:
        with pytest.raises(ValueError, match="dimensions must be positive"):
            CellGrid(0, 5)

    def test_get_cell_out_of_bounds_returns_none(self) -> None:
        grid = CellGrid(3, 3)
        assert grid.get_cell(-1, 0) is None
        assert grid.get_cell(0, 3) is None


# ============================================================================
# Allocation Tests
# ============================================================================

class TestAllocation:
    """Test exact-count allocation."""

    @pytest.mark.parametrize(
        "rows, cols, mines, questions, surprises",
        [
            (9, 9, 10, 6, 2),
            (13, 13, 26, 7, 3),
            (16, 16, 44, 11, 4),
            (3, 3, 8, 1, 0),
            (2, 2, 1, 1, 2),
            (5, 5, 0, 0, 0),
        ],
    )
    @pytest.mark.parametrize("seed", range(5))
    def test_counts_are_exact(
        self, rows: int, cols: int, mines: int, questions: int,
        surprises: int, seed: int,
    ) -> None:
        """Every special type appears exactly as often as requested."""
        grid = CellGrid(rows, cols, rng=random.Random(seed))
        grid.allocate(mines, questions, surprises, [])
        counts = type_counts(grid)
        assert counts[CellType.MINE] == mines
        assert counts[CellType.QUESTION] == questions
        assert counts[CellType.SURPRISE] == surprises

    def test_allocation_resets_first_click(self, seeded_grid: CellGrid) -> None:
        seeded_grid.reveal(0, 0)
        seeded_grid.allocate(10, 6, 2, [])
        assert seeded_grid.first_click_done is False

    def test_allocation_records_targets(self, seeded_grid: CellGrid) -> None:
        assert (seeded_grid.num_mines, seeded_grid.num_questions,
                seeded_grid.num_surprises) == (10, 6, 2)

    def test_questions_cycle_when_pool_is_small(self, question_pool) -> None:
        """Six question cells over a pool of two use each question three times."""
        grid = CellGrid(9, 9, rng=random.Random(5))
        grid.allocate(10, 6, 2, question_pool)

        attached = [
            grid.get_cell(r, c).question for r, c in grid.positions()
            if grid.get_cell(r, c).type == CellType.QUESTION
        ]
        assert len(attached) == 6
        assert sorted(q.id for q in attached) == [1, 1, 1, 2, 2, 2]

    def test_empty_pool_leaves_question_unset(self) -> None:
        grid = CellGrid(4, 4, rng=random.Random(1))
        grid.allocate(0, 3, 0, [])
        questions = [
            grid.get_cell(r, c) for r, c in grid.positions()
            if grid.get_cell(r, c).type == CellType.QUESTION
        ]
        assert len(questions) == 3
        assert all(cell.question is None for cell in questions)

    def test_pool_is_not_mutated(self, question_pool) -> None:
        original = list(question_pool)
        grid = CellGrid(9, 9, rng=random.Random(2))
        grid.allocate(10, 6, 2, question_pool)
        assert question_pool == original

    def test_overfull_board_fills_what_fits(self) -> None:
        """Mines take precedence; the shortfall is left unplaced."""
        grid = CellGrid(2, 2, rng=random.Random(0))
        grid.allocate(3, 3, 3, [])
        counts = type_counts(grid)
        assert counts[CellType.MINE] == 3
        assert counts[CellType.QUESTION] == 1
        assert counts[CellType.SURPRISE] == 0

    def test_single_cell_single_mine(self) -> None:
        grid = CellGrid(1, 1, rng=random.Random(0))
        grid.allocate(1, 0, 0, [])
        assert grid.get_cell(0, 0).is_mine is True

    def test_repair_restores_counts_and_numbers(self) -> None:
        """Missing mines are refilled, a surplus surprise is trimmed."""
        grid = CellGrid(6, 6, rng=random.Random(3))
        grid.allocate(5, 3, 2, [])

        mines = [p for p in grid.positions() if grid.get_cell(*p).is_mine]
        for row, col in mines[:2]:
            grid.get_cell(row, col).make_empty()
        ordinary = next(
            p for p in grid.positions()
            if grid.get_cell(*p).type in (CellType.EMPTY, CellType.NUMBER)
        )
        grid.get_cell(*ordinary).make_surprise()
        assert grid.count_type(CellType.MINE) == 3
        assert grid.count_type(CellType.SURPRISE) == 3

        grid._verify_and_repair(grid._cycle_questions([]))

        counts = type_counts(grid)
        assert counts[CellType.MINE] == 5
        assert counts[CellType.QUESTION] == 3
        assert counts[CellType.SURPRISE] == 2
        for row, col in grid.positions():
            cell = grid.get_cell(row, col)
            if cell.is_special:
                continue
            count = grid.count_adjacent_mines(row, col)
            if count > 0:
                assert cell.type == CellType.NUMBER
                assert cell.adjacent_mines == count
            else:
                assert cell.type == CellType.EMPTY

    def test_repair_fills_questions_from_pool(self, question_pool) -> None:
        grid = CellGrid(4, 4, rng=random.Random(6))
        grid.allocate(0, 3, 0, question_pool)

        questions = [
            p for p in grid.positions()
            if grid.get_cell(*p).type == CellType.QUESTION
        ]
        for row, col in questions[:2]:
            grid.get_cell(row, col).make_empty()

        grid._verify_and_repair(grid._cycle_questions(list(question_pool)))

        refilled = [
            grid.get_cell(r, c) for r, c in grid.positions()
            if grid.get_cell(r, c).type == CellType.QUESTION
        ]
        assert len(refilled) == 3
        assert all(cell.question is not None for cell in refilled)
        assert {cell.question.id for cell in refilled} <= {1, 2}


# ============================================================================
# Adjacency Tests
# ============================================================================

class TestAdjacency:
    """Test number cell derivation."""

    @pytest.mark.parametrize("seed", range(10))
    def test_number_cells_match_neighbour_mines(self, seed: int) -> None:
        grid = CellGrid(9, 9, rng=random.Random(seed))
        grid.allocate(10, 6, 2, [])
        for row, col in grid.positions():
            cell = grid.get_cell(row, col)
            count = grid.count_adjacent_mines(row, col)
            if cell.type == CellType.NUMBER:
                assert cell.adjacent_mines == count
                assert count > 0
            elif cell.type == CellType.EMPTY:
                assert count == 0

    def test_special_cells_never_become_numbers(self) -> None:
        grid = build_grid(3, 3, mines=[(0, 0)], questions=[(0, 1)],
                          surprises=[(1, 0)])
        assert grid.get_cell(0, 1).type == CellType.QUESTION
        assert grid.get_cell(1, 0).type == CellType.SURPRISE
        assert grid.get_cell(1, 1).type == CellType.NUMBER

    def test_count_adjacent_mines_corner(self) -> None:
        grid = build_grid(3, 3, mines=[(0, 1), (1, 0), (1, 1)])
        assert grid.count_adjacent_mines(0, 0) == 3
        assert grid.count_adjacent_mines(2, 2) == 1

    def test_count_adjacent_mines_out_of_bounds(self) -> None:
        grid = build_grid(3, 3, mines=[(0, 0)])
        assert grid.count_adjacent_mines(5, 5) == 0


# ============================================================================
# First Click Tests
# ============================================================================

class TestFirstClick:
    """Test first-reveal mine relocation."""

    @pytest.mark.parametrize("seed", range(20))
    def test_first_click_never_hits_mine(self, seed: int) -> None:
        """Whatever cell is clicked first, it is not a mine afterwards."""
        rng = random.Random(seed)
        grid = CellGrid(9, 9, rng=rng)
        grid.allocate(10, 6, 2, [])
        row, col = rng.randrange(9), rng.randrange(9)
        assert grid.reveal(row, col) is False
        assert grid.get_cell(row, col).is_mine is False

    def test_first_click_on_mine_relocates_it(self) -> None:
        grid = build_grid(4, 4, mines=[(0, 0)])
        grid.first_click_done = False

        assert grid.reveal(0, 0) is False
        assert grid.get_cell(0, 0).is_mine is False
        assert grid.count_type(CellType.MINE) == 1
        # First candidate outside the 3x3 around (0, 0), row-major
        assert grid.get_cell(0, 2).is_mine is True

    def test_relocation_updates_numbers(self) -> None:
        grid = build_grid(4, 4, mines=[(0, 0)])
        grid.first_click_done = False
        grid.reveal(0, 0)
        assert grid.get_cell(1, 1).type == CellType.NUMBER
        assert grid.get_cell(1, 1).adjacent_mines == 1
        # (1, 0) touched only the old mine
        assert grid.get_cell(1, 0).type == CellType.EMPTY

    def test_single_cell_mine_cannot_move(self) -> None:
        """A 1x1 board has no cell outside the neighbourhood."""
        grid = CellGrid(1, 1, rng=random.Random(0))
        grid.allocate(1, 0, 0, [])
        assert grid.reveal(0, 0) is True
        assert grid.get_cell(0, 0).is_mine is True

    def test_only_first_reveal_relocates(self) -> None:
        grid = build_grid(4, 4, mines=[(3, 3)])
        grid.first_click_done = False
        grid.reveal(0, 0)
        assert grid.reveal(3, 3) is True


# ============================================================================
# Reveal Tests
# ============================================================================

class TestReveal:
    """Test cell revealing behavior."""

    def test_reveal_mine_returns_true(self) -> None:
        grid = build_grid(3, 3, mines=[(0, 0)])
        assert grid.reveal(0, 0) is True
        assert grid.get_cell(0, 0).is_revealed is True

    def test_reveal_number_does_not_cascade(self) -> None:
        grid = build_grid(3, 3, mines=[(0, 0)])
        assert grid.reveal(1, 1) is False
        revealed = [p for p in grid.positions() if grid.get_cell(*p).is_revealed]
        assert revealed == [(1, 1)]

    def test_reveal_empty_cascades(self, empty_grid: CellGrid) -> None:
        empty_grid.reveal(2, 2)
        assert empty_grid.is_fully_cleared() is True

    def test_reveal_twice_returns_false(self) -> None:
        grid = build_grid(3, 3, mines=[(0, 0)])
        grid.reveal(2, 2)
        assert grid.reveal(2, 2) is False

    def test_reveal_out_of_bounds_is_noop(self, empty_grid: CellGrid) -> None:
        assert empty_grid.reveal(-1, 0) is False
        assert empty_grid.reveal(0, 99) is False
        assert empty_grid.get_valid_actions() == list(empty_grid.positions())

    def test_reveal_flagged_cell_unflags_first(self) -> None:
        grid = build_grid(3, 3, mines=[(0, 0)])
        grid.toggle_flag(1, 1)
        assert grid.reveal(1, 1) is False
        assert grid.get_cell(1, 1).is_revealed is True

    def test_reveal_question_does_not_cascade(self) -> None:
        grid = build_grid(3, 3, questions=[(1, 1)])
        grid.reveal(1, 1)
        assert grid.get_cell(0, 0).is_hidden is True


# ============================================================================
# Flag Tests
# ============================================================================

class TestFlag:
    """Test flag toggling."""

    def test_flag_cycles(self, empty_grid: CellGrid) -> None:
        assert empty_grid.toggle_flag(0, 0) is True
        assert empty_grid.get_cell(0, 0).is_flagged is True
        assert empty_grid.toggle_flag(0, 0) is True
        assert empty_grid.get_cell(0, 0).is_hidden is True

    def test_flag_revealed_cell_unchanged(self) -> None:
        grid = build_grid(3, 3, mines=[(0, 0)])
        grid.reveal(1, 1)
        assert grid.toggle_flag(1, 1) is False
        assert grid.get_cell(1, 1).is_revealed is True

    def test_flag_out_of_bounds(self, empty_grid: CellGrid) -> None:
        assert empty_grid.toggle_flag(10, 10) is False


# ============================================================================
# Board-wide Operations
# ============================================================================

class TestBoardOperations:
    """Test clearing checks, disclosure and bonus reveals."""

    def test_fully_cleared_ignores_mines(self) -> None:
        grid = build_grid(2, 2, mines=[(0, 0)])
        for position in [(0, 1), (1, 0), (1, 1)]:
            assert grid.is_fully_cleared() is False
            grid.reveal(*position)
        assert grid.is_fully_cleared() is True

    def test_reveal_all_reveals_flagged_cells(self) -> None:
        grid = build_grid(3, 3, mines=[(0, 0)])
        grid.toggle_flag(0, 0)
        grid.reveal_all()
        assert all(grid.get_cell(*p).is_revealed for p in grid.positions())

    def test_uncover_random_mine(self) -> None:
        grid = build_grid(3, 3, mines=[(2, 2)])
        assert grid.uncover_random_mine(random.Random(0)) == (2, 2)
        assert grid.get_cell(2, 2).is_revealed is True
        assert grid.uncover_random_mine(random.Random(0)) is None

    def test_reveal_random_area_skips_mines(self) -> None:
        grid = build_grid(3, 3, mines=[(1, 1)])
        revealed = grid.reveal_random_area(random.Random(0))
        assert revealed
        assert grid.get_cell(1, 1).is_hidden is True
        assert all(grid.get_cell(*p).is_revealed for p in revealed)

    def test_observation(self) -> None:
        grid = build_grid(2, 3, mines=[(0, 0)], questions=[(1, 2)])
        grid.toggle_flag(0, 0)
        grid.reveal(1, 2)
        obs = grid.get_observation()
        assert obs.shape == (2, 3)
        assert obs.dtype == np.int8
        assert obs[0, 0] == -2
        assert obs[1, 2] == 10
        assert obs[0, 1] == -1
