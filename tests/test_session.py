"""Tests for the puzzle session action boundary."""

import pytest

from hexhunt.engine import FRAGILE, OPEN, Cell
from hexhunt.session import PuzzleSession

from .helpers import full_board


@pytest.fixture
def session():
    s = PuzzleSession()
    s.init_board("stage1")
    return s


def available_ids(session):
    return [shape.id for shape in session.available_shapes()]


class TestInit:
    def test_init_board_loads_stage(self, session):
        assert session.stage_id == "stage1"
        assert session.board.cell(0, 0).code == -1
        assert session.board.cell(1, 0) == Cell.durable(1)
        assert available_ids(session) == [101, 102, 103, 104]
        assert session.result.scoring
        assert len(session.result.top()) == 3

    def test_init_board_resets_everything(self, session):
        session.place(101, [(0, 0)], 1, 1)
        session.dig(2, 2)
        session.select_shape(102)
        session.init_board("stage1")
        assert session.registry.placed == []
        assert session.board.hidden_cells() == set()
        assert session.board.cell(2, 2) == Cell.durable(1)
        assert session.selected_shape_id is None
        assert not session.placement_mode

    def test_unknown_stage_gives_empty_board(self, session):
        result = session.init_board("nope")
        assert session.board.minable_cells() == []
        assert not result.scoring


class TestDig:
    def test_dig_returns_changes_and_scores(self, session):
        status, payload = session.dig(1, 1)
        assert status == 1
        assert payload["changed_cells"] == [(1, 1, OPEN)]
        assert payload["scores"] is session.result
        assert (1, 1) not in session.result.scores
        assert payload["treasure_found"] is False

    def test_dig_on_open_or_wall_is_noop(self, session):
        session.dig(1, 1)
        assert session.dig(1, 1)[0] == 0
        assert session.dig(0, 0)[0] == 0

    def test_dig_out_of_bounds_is_rejected(self, session):
        status, payload = session.dig(9, 9)
        assert status == -1
        assert "outside" in payload["error"]

    def test_dig_reports_treasure(self, session):
        session.place(101, [(0, 0)], 2, 2)
        status, payload = session.dig(2, 2)
        assert status == 1
        assert payload["treasure_found"]
        assert "Treasure found" in session.status_message

    def test_dig_breaks_fragile_chain(self, session):
        session.set_edit_cell(1, 3, 0.5)
        session.set_edit_cell(0, 2, 0.5)
        status, payload = session.dig(1, 2)
        assert {(r, c) for r, c, _ in payload["changed_cells"]} == {(1, 2), (1, 3), (0, 2)}


class TestPlacement:
    def test_place_removes_shape_from_pool(self, session):
        status, payload = session.place(103, [(0, 0), (0, -1), (0, 1)], 1, 3)
        assert status == 1
        assert payload["cells"] == [(1, 3), (0, 3), (2, 3)]
        assert 103 not in available_ids(session)
        assert 103 not in session.result.configuration_counts

    def test_rejected_place_leaves_state(self, session):
        before = session.board.to_layout()
        status, payload = session.place(103, [(0, 0), (0, -1), (0, 1)], 0, 0)
        assert status == -1
        assert payload["error"]
        assert session.registry.placed == []
        assert session.board.hidden_cells() == set()
        assert session.board.to_layout() == before

    def test_unknown_shape_is_rejected(self, session):
        assert session.place(999, [(0, 0)], 1, 1)[0] == -1

    def test_remove_placement_returns_shape(self, session):
        session.place(101, [(0, 0)], 1, 1)
        status, payload = session.remove_placement(0)
        assert status == 1
        assert payload["removed"].shape_id == 101
        assert 101 in available_ids(session)
        assert session.board.hidden_cells() == set()

    def test_remove_unknown_index(self, session):
        assert session.remove_placement(3)[0] == -1

    def test_scores_cleared_when_everything_is_placed(self, session):
        assert session.result.scores
        session.place(101, [(0, 0)], 1, 0)
        session.place(102, [(0, 0), (0, 1)], 1, 1)
        session.place(103, [(0, 0), (0, -1), (0, 1)], 1, 3)
        session.place(104, [(0, 0), (1, 0), (0, 1)], 1, 5)
        assert available_ids(session) == []
        assert not session.result.scoring
        assert session.result.scores == {}
        assert session.result.top() == []


class TestSingleShapeExample:
    def test_single_point_shape_on_open_board(self):
        session = PuzzleSession()
        session.board = full_board(1)
        session.registry.load([])
        session.add_shape([(0, 0)])
        result = session.solve()
        assert all(result.coverage_at(r, c) == 1 for r, c in session.board.coords())

        shape_id = session.available_shapes()[0].id
        status, _ = session.place(shape_id, [(0, 0)], 1, 3)
        assert status == 1
        assert not session.result.scoring
        assert all(session.result.coverage_at(r, c) == 0 for r, c in session.board.coords())


class TestEditAndModes:
    def test_set_edit_cell(self, session):
        status, payload = session.set_edit_cell(1, 1, 0.5)
        assert status == 1
        assert session.board.cell(1, 1) == FRAGILE
        assert payload["cell"] == FRAGILE

    def test_set_edit_cell_out_of_bounds(self, session):
        assert session.set_edit_cell(-1, 0, 1)[0] == -1

    def test_click_dispatches_by_mode(self, session):
        session.set_mode("edit")
        session.set_edit_value(3)
        session.click(1, 1)
        assert session.board.cell(1, 1) == Cell.durable(3)

        session.set_mode("play")
        session.click(1, 1)
        assert session.board.cell(1, 1) == Cell.durable(2)

        session.select_shape(101)
        assert session.placement_mode
        status, _ = session.click(2, 2)
        assert status == 1
        assert session.board.is_hidden(2, 2)
        assert not session.placement_mode
        assert session.selected_shape_id is None

    def test_invalid_mode(self, session):
        with pytest.raises(ValueError):
            session.set_mode("build")

    def test_click_in_placement_mode_without_selection(self, session):
        session.toggle_placement_mode()
        assert session.click(1, 1)[0] == 0
        assert session.board.cell(1, 1) == Cell.durable(1)


class TestSelection:
    def test_select_and_rotate(self, session):
        assert session.select_shape(103) == 103
        assert session.rotate_selection(1) == ((0, 0), (1, -1), (-1, 1))
        assert session.rotate_selection(-1) == ((0, 0), (0, -1), (0, 1))

    def test_select_twice_deselects(self, session):
        session.select_shape(103)
        assert session.select_shape(103) is None
        assert session.current_points == ()

    def test_placed_shape_cannot_be_selected(self, session):
        session.place(101, [(0, 0)], 1, 1)
        assert session.select_shape(101) is None

    def test_preview(self, session):
        session.select_shape(103)
        cells, valid = session.preview_placement(1, 3)
        assert valid
        assert cells == [(1, 3), (0, 3), (2, 3)]
        cells, valid = session.preview_placement(0, 0)
        assert not valid
        assert cells == [(0, 0), (1, 0)]

    def test_toggle_placement_mode_clears_selection(self, session):
        session.select_shape(103)
        assert session.toggle_placement_mode() is False
        assert session.selected_shape_id is None


class TestCatalog:
    def test_toggle_shape_active(self, session):
        session.toggle_shape_active(104)
        assert 104 not in available_ids(session)
        assert 104 not in session.result.configuration_counts

    def test_add_and_delete_shape(self, session):
        status, payload = session.add_shape([(0, 0), (1, 0)])
        assert status == 1
        assert payload["shape"].id == 105
        assert session.delete_shape(105)[0] == 1
        assert 105 not in available_ids(session)

    def test_add_invalid_shape(self, session):
        assert session.add_shape([(5, 5)])[0] == -1

    def test_delete_unknown_shape(self, session):
        assert session.delete_shape(42)[0] == -1

    def test_new_shape_after_deleting_placed_one_is_available(self, session):
        session.place(104, [(0, 0), (1, 0), (0, 1)], 1, 3)
        session.delete_shape(104)
        status, payload = session.add_shape([(0, 0), (1, 0)])
        assert status == 1
        new_id = payload["shape"].id
        assert new_id == 105
        assert new_id in available_ids(session)
        assert new_id in session.result.configuration_counts
        assert session.select_shape(new_id) == new_id


class TestMalformedInput:
    @pytest.mark.parametrize("points", [[(0, 0, 0)], [("a", 0)]])
    def test_place_with_malformed_offsets(self, session, points):
        before = session.board.to_layout()
        status, payload = session.place(101, points, 1, 3)
        assert status == -1
        assert "Malformed" in payload["error"]
        assert session.registry.placed == []
        assert session.board.hidden_cells() == set()
        assert session.board.to_layout() == before
        assert 101 in available_ids(session)
