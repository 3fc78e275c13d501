"""
Hex coordinate helpers for the odd-q offset board.

Grid coordinates are (row, col) pairs as laid out on screen, with odd columns
shifted half a cell down. Axial coordinates (q, r) are used for every
neighbour and rotation computation.
"""

from typing import Dict, Iterable, List, Sequence, Tuple

Coord = Tuple[int, int]  # (row, col)
Axial = Tuple[int, int]  # (q, r)

AXIAL_DIRECTIONS: Tuple[Axial, ...] = (
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
)

# Module-level cache: (rows, cols) -> {(row, col): ((nrow, ncol), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[Tuple[int, int], Dict[Coord, Tuple[Coord, ...]]] = {}


def to_axial(row: int, col: int) -> Axial:
    """Convert an odd-q grid coordinate to axial (q, r)."""
    return col, row - (col - (col & 1)) // 2


def to_grid(q: int, r: int) -> Coord:
    """Convert an axial coordinate back to an odd-q grid (row, col)."""
    return r + (q - (q & 1)) // 2, q


def rotate60_cw(q: int, r: int) -> Axial:
    """Rotate an axial vector 60 degrees clockwise about the origin."""
    return -r, q + r


def rotate60_ccw(q: int, r: int) -> Axial:
    """Rotate 60 degrees counter-clockwise (five clockwise steps)."""
    for _ in range(5):
        q, r = rotate60_cw(q, r)
    return q, r


def rotate_points(points: Iterable[Axial], steps: int) -> Tuple[Axial, ...]:
    """
    Rotate every offset by `steps` clockwise 60 degree turns.

    Negative steps rotate counter-clockwise. The input is never modified.
    """
    turns = steps % 6
    rotated: List[Axial] = []
    for q, r in points:
        for _ in range(turns):
            q, r = rotate60_cw(q, r)
        rotated.append((q, r))
    return tuple(rotated)


def project(anchor: Coord, points: Sequence[Axial]) -> List[Coord]:
    """
    Translate axial offsets around an anchor and return grid coordinates.

    The result is not bounds-checked; callers decide what an off-board cell means.
    """
    aq, ar = to_axial(*anchor)
    return [to_grid(aq + q, ar + r) for q, r in points]


def in_bounds(row: int, col: int, rows: int, cols: int) -> bool:
    return 0 <= row < rows and 0 <= col < cols


def neighbors(row: int, col: int, rows: int, cols: int) -> List[Coord]:
    """Return the in-bounds hex neighbours of (row, col), in direction order."""
    q, r = to_axial(row, col)
    out: List[Coord] = []
    for dq, dr in AXIAL_DIRECTIONS:
        nrow, ncol = to_grid(q + dq, r + dr)
        if in_bounds(nrow, ncol, rows, cols):
            out.append((nrow, ncol))
    return out


def get_neighborhoods(rows: int, cols: int) -> Dict[Coord, Tuple[Coord, ...]]:
    """
    Precompute and cache hex neighbour coordinates for every cell in a board.

    Args:
        rows: Board height. Must be positive.
        cols: Board width. Must be positive.

    Returns:
        Mapping from each cell (row, col) to a tuple of its in-bounds neighbours.

    Raises:
        ValueError: If rows or cols is non-positive.
    """
    if rows <= 0 or cols <= 0:
        raise ValueError("rows and cols must be positive.")

    key = (rows, cols)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: Dict[Coord, Tuple[Coord, ...]] = {}
    for row in range(rows):
        for col in range(cols):
            neighborhoods[(row, col)] = tuple(neighbors(row, col, rows, cols))

    _NEIGHBORHOODS_CACHE[key] = neighborhoods
    return neighborhoods
