"""Tests for cell values and the board state machine."""

import pytest

from hexhunt.engine import FRAGILE, OPEN, WALL, Board, Cell, CellKind
from hexhunt.errors import UnknownCoordinate

from .helpers import full_board


class TestCell:
    @pytest.mark.parametrize(
        "code, expected",
        [
            (-1, WALL),
            (0, OPEN),
            (0.5, FRAGILE),
            (1, Cell(CellKind.DURABLE, 1)),
            (3, Cell(CellKind.DURABLE, 3)),
            (3.0, Cell(CellKind.DURABLE, 3)),
        ],
    )
    def test_from_code(self, code, expected):
        assert Cell.from_code(code) == expected

    @pytest.mark.parametrize("code", [4, 1.5, -2, None, "1", True, float("nan")])
    def test_malformed_codes_become_walls(self, code):
        assert Cell.from_code(code) == WALL

    def test_cost(self):
        assert FRAGILE.cost == 1.0
        assert Cell.durable(2).cost == 2.0
        assert WALL.cost is None
        assert OPEN.cost is None

    def test_code_round_trip(self):
        for code in (-1, 0, 0.5, 1, 2, 3):
            assert Cell.from_code(code).code == code

    def test_invalid_durability(self):
        with pytest.raises(ValueError):
            Cell.durable(0)


class TestBoardLayout:
    def test_missing_entries_default_to_wall(self):
        board = Board(2, 3, [[1, 2], []])
        assert board.to_layout() == [[1, 2, -1], [-1, -1, -1]]

    def test_invalid_dimensions(self):
        with pytest.raises(ValueError):
            Board(0, 7)

    def test_copy_is_independent(self, board):
        clone = board.copy()
        clone.dig(0, 0)
        clone.set_hidden(1, 1, True)
        assert board.cell(0, 0) == Cell.durable(1)
        assert not board.is_hidden(1, 1)


class TestDig:
    def test_durable_loses_one_hit(self):
        board = full_board(3)
        changed = board.dig(1, 1)
        assert changed == [(1, 1, Cell.durable(2))]
        assert board.cell(1, 1) == Cell.durable(2)

    def test_durable_opens_at_zero(self):
        board = full_board(2)
        board.dig(1, 1)
        board.dig(1, 1)
        assert board.cell(1, 1) == OPEN

    def test_wall_and_open_are_noops(self):
        board = Board(1, 2, [[-1, 0]])
        assert board.dig(0, 0) == []
        assert board.dig(0, 1) == []
        assert board.dig(0, 1) == []
        assert board.to_layout() == [[-1, 0]]

    def test_out_of_bounds(self, board):
        with pytest.raises(UnknownCoordinate):
            board.dig(4, 0)
        with pytest.raises(UnknownCoordinate):
            board.dig(0, -1)

    def test_durable_one_next_to_two_fragiles(self):
        board = full_board(3)
        board.set_cell(1, 2, 1)
        board.set_cell(1, 3, 0.5)
        board.set_cell(0, 2, 0.5)

        changed = board.dig(1, 2)

        assert {(r, c) for r, c, _ in changed} == {(1, 2), (1, 3), (0, 2)}
        assert all(cell == OPEN for _, _, cell in changed)
        assert changed[0] == (1, 2, OPEN)

    def test_fragile_opens_instantly(self):
        board = full_board(3)
        board.set_cell(2, 2, 0.5)
        assert board.dig(2, 2) == [(2, 2, OPEN)]

    def test_chain_reaction_follows_connected_fragiles_only(self):
        board = full_board(2)
        for cell in [(1, 3), (1, 4), (1, 5), (1, 6)]:
            board.set_cell(*cell, 0.5)
        board.set_cell(3, 0, 0.5)  # not connected
        board.set_cell(1, 2, 1)

        board.dig(1, 2)

        opened = {(r, c) for r, c in board.coords() if board.cell(r, c) == OPEN}
        assert opened == {(1, 2), (1, 3), (1, 4), (1, 5), (1, 6)}
        assert board.cell(3, 0) == FRAGILE

    def test_chain_does_not_break_durable_neighbours(self):
        board = full_board(1)
        board.set_cell(0, 1, 0.5)
        board.dig(0, 0)
        assert board.cell(0, 0) == OPEN
        assert board.cell(0, 1) == OPEN
        assert board.cell(1, 0) == Cell.durable(1)

    def test_chain_is_order_independent(self):
        # A fragile ring reachable two ways opens exactly once per cell.
        board = full_board(3)
        for cell in [(0, 1), (0, 2), (1, 1), (1, 2)]:
            board.set_cell(*cell, 0.5)
        changed = board.dig(0, 1)
        coords = [(r, c) for r, c, _ in changed]
        assert len(coords) == len(set(coords))
        assert set(coords) == {(0, 1), (0, 2), (1, 1), (1, 2)}

    def test_repeated_digs_on_cleared_cell(self):
        board = full_board(1)
        board.dig(2, 2)
        for _ in range(3):
            assert board.dig(2, 2) == []


class TestSetCellAndEligibility:
    def test_set_cell_bypasses_rules(self, board):
        board.set_cell(0, 0, 0.5)
        assert board.cell(0, 0) == FRAGILE
        assert board.cell(0, 1) == Cell.durable(1)

    def test_wall_clears_hidden_marker(self, board):
        board.set_hidden(2, 2, True)
        board.set_cell(2, 2, -1)
        assert not board.is_hidden(2, 2)

    def test_can_host_shape_cell(self):
        board = Board(1, 4, [[-1, 0, 1, 0.5]])
        assert not board.can_host_shape_cell(0, 0)
        assert not board.can_host_shape_cell(0, 1)
        assert board.can_host_shape_cell(0, 2)
        assert board.can_host_shape_cell(0, 3)
        board.set_hidden(0, 3, True)
        assert not board.can_host_shape_cell(0, 3)
        assert not board.can_host_shape_cell(0, 4)

    def test_commit_and_anchor_allow_open_cells(self):
        board = Board(1, 3, [[-1, 0, 2]])
        assert board.can_commit_cell(0, 1)
        assert board.can_anchor(0, 1)
        assert not board.can_commit_cell(0, 0)
        assert not board.can_anchor(0, 0)

    def test_format_board_marks_hidden_cells(self, board):
        board.set_hidden(0, 0, True)
        text = board.format_board(show_hidden=True, color=False)
        assert "1*" in text
        assert "*" not in board.format_board(show_hidden=False, color=False)
