"""Catalog of treasure templates and the list of committed placements."""

import logging
from dataclasses import replace
from itertools import chain
from typing import Iterable, List, Optional, Sequence

from .engine import Board
from .errors import InvalidPlacement, UnknownPlacement, UnknownShapeId
from .hexmath import Axial, Coord, project
from .shapes import PlacedTreasure, TreasureShape, make_shape, validate_editor_points

logger = logging.getLogger(__name__)


class TreasureRegistry:
    """
    Treasure templates (toggled active/inactive) and the treasures the user
    has committed to fixed board locations.

    A committed shape leaves the pool of placeable shapes until its placement
    is removed again.
    """

    def __init__(self, shapes: Optional[Iterable[TreasureShape]] = None) -> None:
        self.catalog: List[TreasureShape] = []
        self.placed: List[PlacedTreasure] = []
        if shapes is not None:
            self.load(shapes)

    def load(self, shapes: Iterable[TreasureShape]) -> None:
        """Replace the catalog and forget every committed placement."""
        self.catalog = list(shapes)
        self.placed = []

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def _index_of(self, shape_id: int) -> int:
        for i, shape in enumerate(self.catalog):
            if shape.id == shape_id:
                return i
        raise UnknownShapeId(shape_id)

    def get(self, shape_id: int) -> TreasureShape:
        return self.catalog[self._index_of(shape_id)]

    def set_active(self, shape_id: int, active: bool) -> TreasureShape:
        i = self._index_of(shape_id)
        self.catalog[i] = replace(self.catalog[i], active=active)
        return self.catalog[i]

    def toggle_active(self, shape_id: int) -> TreasureShape:
        return self.set_active(shape_id, not self.get(shape_id).active)

    def add_template(self, points: Iterable[Sequence[int]]) -> TreasureShape:
        """
        Add a shape authored in the editor.

        Raises:
            ValueError: If the offsets are empty or leave the editor disk.
        """
        offsets = validate_editor_points(points)
        # Placements of deleted templates keep their ids reserved.
        used_ids = chain((shape.id for shape in self.catalog), (pt.shape_id for pt in self.placed))
        next_id = max(used_ids, default=0) + 1
        shape = make_shape(next_id, offsets)
        self.catalog.append(shape)
        logger.debug(f"Added treasure template {shape.id} with {shape.size} cells")
        return shape

    def delete_template(self, shape_id: int) -> TreasureShape:
        """Remove a template; placements already committed for it stay on the board."""
        return self.catalog.pop(self._index_of(shape_id))

    # -------------------------------------------------------------------------
    # Placements
    # -------------------------------------------------------------------------

    def is_committed(self, shape_id: int) -> bool:
        return any(pt.shape_id == shape_id for pt in self.placed)

    def available(self) -> List[TreasureShape]:
        """Active templates that are not committed yet, in catalog order."""
        return [shape for shape in self.catalog if shape.active and not self.is_committed(shape.id)]

    def placement_cells(self, board: Board, points: Sequence[Axial], anchor: Coord) -> List[Coord]:
        """
        Absolute cells of a prospective placement, validated for commit.

        Raises:
            InvalidPlacement: If any cell is off the board, a wall, already
                hidden under another treasure, or covered twice.
        """
        cells = project(anchor, points)
        if not cells:
            raise InvalidPlacement("A treasure must cover at least one cell.")
        if len(set(cells)) != len(cells):
            raise InvalidPlacement("Treasure offsets overlap each other.")
        for row, col in cells:
            if not board.in_bounds(row, col):
                raise InvalidPlacement(f"Cell ({row}, {col}) is outside the board.")
            if not board.can_commit_cell(row, col):
                raise InvalidPlacement(f"Cannot place here: cell ({row}, {col}) is blocked.")
        return cells

    def commit(
        self,
        board: Board,
        shape_id: int,
        points: Sequence[Axial],
        anchor: Coord,
    ) -> PlacedTreasure:
        """
        Fix a treasure at `anchor` with already-rotated offsets.

        On failure nothing changes.

        Raises:
            UnknownShapeId: If no template has `shape_id`.
            InvalidPlacement: If the shape is already placed or a cell is not placeable.
        """
        self.get(shape_id)
        if self.is_committed(shape_id):
            raise InvalidPlacement(f"Treasure {shape_id} is already placed.")

        try:
            offsets = tuple((int(q), int(r)) for q, r in points)
        except (TypeError, ValueError) as exc:
            raise InvalidPlacement("Malformed treasure offsets.") from exc
        cells = self.placement_cells(board, offsets, anchor)

        for row, col in cells:
            board.set_hidden(row, col, True)

        placed = PlacedTreasure(shape_id, offsets, (int(anchor[0]), int(anchor[1])))
        self.placed.append(placed)
        logger.debug(f"Committed treasure {shape_id} at {placed.anchor}: {cells}")
        return placed

    def remove(self, board: Board, index: int) -> PlacedTreasure:
        """
        Undo a committed placement and clear its hidden markers.

        Raises:
            UnknownPlacement: If `index` does not name a placement.
        """
        if not 0 <= index < len(self.placed):
            raise UnknownPlacement(index)

        placed = self.placed[index]
        for row, col in placed.cells():
            if board.in_bounds(row, col):
                board.set_hidden(row, col, False)

        del self.placed[index]
        logger.debug(f"Removed treasure {placed.shape_id} from {placed.anchor}")
        return placed
