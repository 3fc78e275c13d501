"""
Puzzle session: the single object owning board, registry and selection state.

Every action runs to completion, re-runs the solver and returns a
(status, payload) pair:
    -  1: the action was applied
    -  0: nothing changed (e.g. digging an open cell)
    - -1: the action was rejected; payload["error"] says why
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import DEFAULT_CHAIN_POLICY, DEFAULT_COLS, DEFAULT_ROWS, DEFAULT_STAGE, HIT_LIMIT, TOP_RANKS
from .engine import Board, Cell, ChangedCell
from .errors import HexHuntError, UnknownCoordinate
from .hexmath import Axial, Coord, project, rotate60_ccw, rotate60_cw
from .registry import TreasureRegistry
from .shapes import TreasureShape
from .solver import PlacementSolver, SolveResult
from .stages import DEFAULT_TREASURES, load_stage, parse_catalog

logger = logging.getLogger(__name__)

Result = Tuple[int, Dict[str, Any]]

MODES = ("play", "edit")


class PuzzleSession:
    """Owns the board, hidden grid, treasure registry and UI selection state."""

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        chain_policy: str = DEFAULT_CHAIN_POLICY,
        top_ranks: int = TOP_RANKS,
    ) -> None:
        """
        Create an empty session (all walls, default catalog).

        Call init_board() to load a stage.
        """
        self.rows = rows
        self.cols = cols
        self.chain_policy = chain_policy
        self.top_ranks = top_ranks

        self.board = Board(rows, cols)
        self.registry = TreasureRegistry(parse_catalog(DEFAULT_TREASURES))
        self.stage_id: Optional[str] = None

        self.mode: str = "play"
        self.edit_value: Any = HIT_LIMIT

        self.placement_mode: bool = False
        self.selected_shape_id: Optional[int] = None
        self.current_points: Tuple[Axial, ...] = ()

        self.result: SolveResult = SolveResult(scoring=False)
        self.status_message: str = ""

        # Validates chain_policy / top_ranks up front.
        self._solver()

    # -------------------------------------------------------------------------
    # Solver plumbing
    # -------------------------------------------------------------------------

    def _solver(self) -> PlacementSolver:
        return PlacementSolver(self.board, self.registry, top_ranks=self.top_ranks, chain_policy=self.chain_policy)

    def solve(self) -> SolveResult:
        """Recompute every score from scratch, replacing the previous result."""
        self.result = self._solver().solve()
        self.status_message = self.result.message
        logger.info(self.status_message)
        return self.result

    def _reject(self, exc: Exception) -> Result:
        logger.warning(f"Action rejected: {exc}")
        self.status_message = str(exc)
        return -1, {"error": str(exc), "scores": self.result}

    def _clear_selection(self) -> None:
        self.selected_shape_id = None
        self.current_points = ()

    # -------------------------------------------------------------------------
    # External operations
    # -------------------------------------------------------------------------

    def init_board(self, stage_id: str = DEFAULT_STAGE) -> SolveResult:
        """Load a stage, reset board, hidden grid, registry and selection, then solve."""
        layout, shapes = load_stage(stage_id, self.rows, self.cols)
        self.board = Board(self.rows, self.cols, layout)
        self.registry.load(shapes)
        self.stage_id = stage_id
        self.placement_mode = False
        self._clear_selection()
        logger.debug(f"Loaded stage {stage_id!r} with {len(shapes)} treasure templates")
        return self.solve()

    def dig(self, row: int, col: int) -> Result:
        """
        Hit one cell in play mode.

        Returns:
            (status, payload) where payload holds "changed_cells" (list of
            (row, col, Cell)), "scores" (SolveResult) and "treasure_found"
            (True if a committed treasure lies under the cell).
        """
        try:
            changed: List[ChangedCell] = self.board.dig(row, col)
        except UnknownCoordinate as exc:
            return self._reject(exc)

        treasure_found = self.board.is_hidden(row, col)
        if changed:
            self.solve()
        if treasure_found:
            self.status_message = f"Treasure found at ({row}, {col})!"
            logger.info(self.status_message)

        return (1 if changed else 0), {
            "changed_cells": changed,
            "scores": self.result,
            "treasure_found": treasure_found,
        }

    def place(self, shape_id: int, rotated_points: Sequence[Axial], anchor_row: int, anchor_col: int) -> Result:
        """
        Commit a treasure at an anchor with already-rotated offsets.

        A rejection leaves every piece of state unchanged.
        """
        try:
            placed = self.registry.commit(self.board, shape_id, rotated_points, (anchor_row, anchor_col))
        except HexHuntError as exc:
            return self._reject(exc)

        if self.selected_shape_id == shape_id:
            self._clear_selection()
            self.placement_mode = False
        self.solve()
        return 1, {"placed": placed, "cells": placed.cells(), "scores": self.result}

    def remove_placement(self, index: int) -> Result:
        """Take a committed treasure off the board, returning its shape to the pool."""
        try:
            removed = self.registry.remove(self.board, index)
        except HexHuntError as exc:
            return self._reject(exc)
        self.solve()
        return 1, {"removed": removed, "scores": self.result}

    def set_edit_cell(self, row: int, col: int, value: Any) -> Result:
        """Overwrite a cell value directly, bypassing dig and chain rules."""
        try:
            cell = self.board.set_cell(row, col, value)
        except HexHuntError as exc:
            return self._reject(exc)
        self.solve()
        return 1, {"cell": cell, "scores": self.result}

    # -------------------------------------------------------------------------
    # Modes and clicks
    # -------------------------------------------------------------------------

    def set_mode(self, mode: str) -> None:
        """Switch between "play" and "edit"; leaving edit mode re-solves."""
        if mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {mode!r}.")
        previous, self.mode = self.mode, mode
        if previous == "edit" and mode == "play":
            self.solve()

    def set_edit_value(self, value: Any) -> Cell:
        """Choose the value painted by clicks in edit mode."""
        self.edit_value = value
        return Cell.from_code(value)

    def click(self, row: int, col: int) -> Result:
        """
        Apply a board click the way the current mode dictates.

        Placement mode with a selected shape places it at (row, col); edit mode
        paints the edit value; otherwise the cell is dug.
        """
        if self.placement_mode:
            if self.selected_shape_id is None:
                return 0, {"scores": self.result}
            return self.place(self.selected_shape_id, self.current_points, row, col)
        if self.mode == "edit":
            return self.set_edit_cell(row, col, self.edit_value)
        return self.dig(row, col)

    # -------------------------------------------------------------------------
    # Placement selection
    # -------------------------------------------------------------------------

    def toggle_placement_mode(self) -> bool:
        self.placement_mode = not self.placement_mode
        if not self.placement_mode:
            self._clear_selection()
        return self.placement_mode

    def select_shape(self, shape_id: int) -> Optional[int]:
        """
        Select an available shape for placement, or deselect it if already selected.

        Selecting turns placement mode on. Returns the selected id (None after deselect).
        """
        if self.selected_shape_id == shape_id:
            self._clear_selection()
            return None

        if not any(shape.id == shape_id for shape in self.available_shapes()):
            self.status_message = f"Treasure {shape_id} is not available for placement."
            logger.warning(self.status_message)
            return self.selected_shape_id

        self.selected_shape_id = shape_id
        self.current_points = self.registry.get(shape_id).points
        self.placement_mode = True
        return shape_id

    def rotate_selection(self, direction: int = 1) -> Tuple[Axial, ...]:
        """Rotate the selected shape 60 degrees: direction 1 clockwise, -1 counter-clockwise."""
        if self.selected_shape_id is None:
            return self.current_points
        turn = rotate60_cw if direction >= 0 else rotate60_ccw
        self.current_points = tuple(turn(q, r) for q, r in self.current_points)
        return self.current_points

    def preview_placement(self, row: int, col: int) -> Tuple[List[Coord], bool]:
        """
        Cells the selected shape would cover at (row, col) and whether placing there is valid.

        Off-board cells are left out of the returned list.
        """
        if self.selected_shape_id is None:
            return [], False
        cells = project((row, col), self.current_points)
        valid = all(self.board.can_commit_cell(r, c) for r, c in cells)
        return [(r, c) for r, c in cells if self.board.in_bounds(r, c)], valid

    # -------------------------------------------------------------------------
    # Catalog management
    # -------------------------------------------------------------------------

    def available_shapes(self) -> List[TreasureShape]:
        """Active shapes that can still be placed."""
        return self.registry.available()

    def toggle_shape_active(self, shape_id: int) -> Result:
        try:
            shape = self.registry.toggle_active(shape_id)
        except HexHuntError as exc:
            return self._reject(exc)
        if not shape.active and self.selected_shape_id == shape_id:
            self._clear_selection()
        self.solve()
        return 1, {"shape": shape, "scores": self.result}

    def add_shape(self, points: Sequence[Sequence[int]]) -> Result:
        """Save a shape drawn in the editor as a new active template."""
        try:
            shape = self.registry.add_template(points)
        except ValueError as exc:
            return self._reject(exc)
        self.solve()
        return 1, {"shape": shape, "scores": self.result}

    def delete_shape(self, shape_id: int) -> Result:
        try:
            shape = self.registry.delete_template(shape_id)
        except HexHuntError as exc:
            return self._reject(exc)
        if self.selected_shape_id == shape_id:
            self._clear_selection()
        self.solve()
        return 1, {"shape": shape, "scores": self.result}
