"""Treasure templates and committed treasure placements."""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .config import EDITOR_RADIUS
from .hexmath import Axial, Coord, project, rotate_points


@dataclass(frozen=True)
class TreasureShape:
    """
    A treasure template: axial offsets around an implicit (0, 0) anchor.

    Templates are immutable; rotation and activation produce new values.
    """

    id: int
    points: Tuple[Axial, ...]
    active: bool = True

    def rotated(self, steps: int) -> Tuple[Axial, ...]:
        """Offsets after `steps` clockwise 60 degree turns."""
        return rotate_points(self.points, steps)

    def rotations(self) -> List[Tuple[Axial, ...]]:
        """All six rotations, starting with the unrotated offsets."""
        return [self.rotated(k) for k in range(6)]

    @property
    def size(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class PlacedTreasure:
    """A treasure committed at a fixed anchor with already-rotated offsets."""

    shape_id: int
    points: Tuple[Axial, ...]
    anchor: Coord

    def cells(self) -> List[Coord]:
        """Absolute grid cells covered by this placement (not bounds-checked)."""
        return project(self.anchor, self.points)


def make_shape(shape_id: int, points: Iterable[Sequence[int]], active: bool = True) -> TreasureShape:
    """Helper to create a shape from (q, r) pairs, dropping duplicate offsets."""
    unique: List[Axial] = []
    for q, r in points:
        p = (int(q), int(r))
        if p not in unique:
            unique.append(p)
    return TreasureShape(shape_id, tuple(unique), active)


def hex_radius(q: int, r: int) -> int:
    """Hex distance of an axial offset from the origin."""
    return max(abs(q), abs(r), abs(q + r))


def validate_editor_points(points: Iterable[Sequence[int]]) -> Tuple[Axial, ...]:
    """
    Check offsets authored in the shape editor.

    The editor grid is a hex disk of radius EDITOR_RADIUS whose centre cell is
    always selected.

    Raises:
        ValueError: If no cell is selected or an offset lies outside the disk.
    """
    shape = make_shape(0, points)
    if not shape.points:
        raise ValueError("At least one cell must be selected.")
    for q, r in shape.points:
        if hex_radius(q, r) > EDITOR_RADIUS:
            raise ValueError(f"Offset ({q}, {r}) is outside the editor radius {EDITOR_RADIUS}.")
    if (0, 0) not in shape.points:
        return ((0, 0),) + shape.points
    return shape.points
