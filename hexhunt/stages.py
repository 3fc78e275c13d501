"""Built-in stage layouts and treasure catalogs."""

import logging
from typing import Any, Dict, List, Mapping, Tuple

from .config import DEFAULT_COLS, DEFAULT_ROWS
from .engine import WALL, Cell
from .shapes import TreasureShape, make_shape

logger = logging.getLogger(__name__)

# Layout codes: -1 wall, 0 open, 0.5 fragile, 1..3 durable.
STAGE_DATA: Dict[str, Dict[str, Any]] = {
    "stage1": {
        "layout": [
            [-1, 1, 1, 1, 1, 1, -1],
            [1, 1, 1, 1, 1, 1, 1],
            [1, 1, 1, 1, 1, 1, 1],
            [-1, -1, 1, -1, 1, -1, -1],
        ],
        "treasures": [
            {"id": 101, "points": [(0, 0)], "active": True},
            {"id": 102, "points": [(0, 0), (0, 1)], "active": True},
            {"id": 103, "points": [(0, 0), (0, -1), (0, 1)], "active": True},
            {"id": 104, "points": [(0, 0), (1, 0), (0, 1)], "active": True},
        ],
    },
}

# Catalog used before any stage is loaded.
DEFAULT_TREASURES: List[Dict[str, Any]] = [
    {"id": 1, "points": [(0, 0)], "active": True},
    {"id": 2, "points": [(0, 0), (0, -1), (0, 1)], "active": True},
    {"id": 3, "points": [(0, 0), (1, 0), (0, 1)], "active": True},
]


def stage_names() -> List[str]:
    return list(STAGE_DATA.keys())


def parse_layout(table: Any, rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS) -> List[List[Cell]]:
    """
    Build a rows x cols cell table from raw layout data.

    Missing rows or columns and malformed values become walls.
    """
    out: List[List[Cell]] = []
    source = table if isinstance(table, (list, tuple)) else []
    for row in range(rows):
        values = source[row] if row < len(source) and isinstance(source[row], (list, tuple)) else []
        out.append([Cell.from_code(values[col]) if col < len(values) else WALL for col in range(cols)])
    return out


def parse_catalog(entries: Any) -> List[TreasureShape]:
    """
    Build treasure templates from raw catalog entries.

    Entries without an integer id or with unusable points are skipped, as are
    duplicate ids.
    """
    shapes: List[TreasureShape] = []
    seen = set()
    for entry in entries if isinstance(entries, (list, tuple)) else []:
        if not isinstance(entry, Mapping):
            logger.warning(f"Skipping malformed treasure entry: {entry!r}")
            continue
        shape_id = entry.get("id")
        if isinstance(shape_id, bool) or not isinstance(shape_id, int) or shape_id in seen:
            logger.warning(f"Skipping treasure entry with bad or duplicate id: {entry!r}")
            continue
        try:
            shape = make_shape(shape_id, entry.get("points") or [], bool(entry.get("active", True)))
        except (TypeError, ValueError):
            logger.warning(f"Skipping treasure {shape_id} with malformed points")
            continue
        if not shape.points:
            logger.warning(f"Skipping treasure {shape_id} without points")
            continue
        seen.add(shape_id)
        shapes.append(shape)
    return shapes


def load_stage(
    stage_id: str,
    rows: int = DEFAULT_ROWS,
    cols: int = DEFAULT_COLS,
    stages: Mapping[str, Mapping[str, Any]] = STAGE_DATA,
) -> Tuple[List[List[Cell]], List[TreasureShape]]:
    """
    Resolve a stage id to a validated layout and treasure catalog.

    Unknown stages give an all-wall layout and an empty catalog.

    Returns:
        Tuple of (layout, shapes).
    """
    info = stages.get(stage_id)
    if info is None:
        logger.warning(f"Unknown stage {stage_id!r}; using an empty board")
        info = {"layout": [], "treasures": []}
    return parse_layout(info.get("layout"), rows, cols), parse_catalog(info.get("treasures"))
