"""
Hex Treasure Hunt Solver

A dig advisor for a hex-grid "minesweeper with treasures" puzzle:
- Board: breakable cells with durability and fragile chain reactions
- Treasure registry: shape templates and committed placements
- Placement solver: enumerates every legal placement of the unplaced
  treasures and ranks cells by coverage per hit
"""

from .engine import FRAGILE, OPEN, WALL, Board, Cell, CellKind
from .errors import HexHuntError, InvalidPlacement, UnknownCoordinate, UnknownPlacement, UnknownShapeId
from .hexmath import neighbors, rotate60_ccw, rotate60_cw, to_axial, to_grid
from .registry import TreasureRegistry
from .session import PuzzleSession
from .shapes import PlacedTreasure, TreasureShape, make_shape
from .solver import CellScore, PlacementSolver, SolveResult
from .stages import STAGE_DATA, load_stage
from .analysis import (
    format_score_map,
    run_hunt_single_test,
    run_hunt_many_tests,
    run_strategy_comparison,
)

__version__ = "1.0.0"

__all__ = [
    # Hex math
    "to_axial",
    "to_grid",
    "rotate60_cw",
    "rotate60_ccw",
    "neighbors",
    # Core classes
    "Board",
    "Cell",
    "CellKind",
    "WALL",
    "OPEN",
    "FRAGILE",
    "TreasureShape",
    "PlacedTreasure",
    "make_shape",
    "TreasureRegistry",
    "PlacementSolver",
    "SolveResult",
    "CellScore",
    "PuzzleSession",
    # Stages
    "STAGE_DATA",
    "load_stage",
    # Errors
    "HexHuntError",
    "InvalidPlacement",
    "UnknownCoordinate",
    "UnknownShapeId",
    "UnknownPlacement",
    # Analysis functions
    "format_score_map",
    "run_hunt_single_test",
    "run_hunt_many_tests",
    "run_strategy_comparison",
]
