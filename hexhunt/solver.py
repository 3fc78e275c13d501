"""Placement-enumeration solver ranking cells by how informative digging them is."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import DefaultDict, Dict, FrozenSet, List, Optional, Set, Tuple

import numpy as np

from .config import CHAIN_POLICIES, DEFAULT_CHAIN_POLICY, TOP_RANKS
from .engine import Board, CellKind
from .hexmath import Axial, Coord, project
from .registry import TreasureRegistry
from .shapes import TreasureShape

logger = logging.getLogger(__name__)

# (shape id, sorted covered cells): identifies one configuration of one shape.
ConfigKey = Tuple[int, Tuple[Coord, ...]]

MSG_ALL_FIXED = "All treasure positions are fixed."
MSG_NO_POSITIONS = "No possible positions."


@dataclass(frozen=True)
class Configuration:
    """One legal placement of a shape: the first anchor/rotation that produced its cells."""

    shape_id: int
    anchor: Coord
    points: Tuple[Axial, ...]
    cells: FrozenSet[Coord]

    @property
    def key(self) -> ConfigKey:
        return self.shape_id, tuple(sorted(self.cells))


@dataclass(frozen=True)
class CellScore:
    """
    Strategy score of a single minable cell.

    Attributes:
        coverage: Distinct configurations covering the cell itself.
        chain_bonus: Extra configurations counted through fragile neighbours.
        cost: Hits needed to open the cell.
        score: (coverage + chain_bonus) / cost.
        rank: 1..TOP_RANKS for recommended cells, None otherwise.
    """

    row: int
    col: int
    coverage: int
    chain_bonus: int
    cost: float
    score: float
    rank: Optional[int] = None

    @property
    def coord(self) -> Coord:
        return self.row, self.col


@dataclass
class SolveResult:
    """Outcome of one solver run."""

    scoring: bool
    scores: Dict[Coord, CellScore] = field(default_factory=dict)
    ranking: List[CellScore] = field(default_factory=list)
    configuration_counts: Dict[int, int] = field(default_factory=dict)
    message: str = ""

    def top(self) -> List[CellScore]:
        """Ranked recommendations, best first."""
        return [s for s in self.ranking if s.rank is not None]

    def score_at(self, row: int, col: int) -> float:
        item = self.scores.get((row, col))
        return item.score if item is not None else 0.0

    def coverage_at(self, row: int, col: int) -> int:
        item = self.scores.get((row, col))
        return item.coverage if item is not None else 0

    def as_array(self, rows: int, cols: int) -> np.ndarray:
        """Scores as a rows x cols matrix; unscored cells are NaN."""
        out = np.full((rows, cols), np.nan)
        for (row, col), item in self.scores.items():
            out[row, col] = item.score
        return out


class PlacementSolver:
    """
    Enumerates every legal placement of the unplaced treasure shapes and turns
    the resulting coverage into a per-cell dig priority.

    The solver keeps no state between runs; every call to solve() recomputes
    from the current board and registry.
    """

    def __init__(
        self,
        board: Board,
        registry: TreasureRegistry,
        top_ranks: int = TOP_RANKS,
        chain_policy: str = DEFAULT_CHAIN_POLICY,
    ) -> None:
        """
        Args:
            board: Board to read cell values and hidden markers from.
            registry: Registry providing the pool of unplaced, active shapes.
            top_ranks: Number of best cells flagged with a rank.
            chain_policy: How fragile neighbours feed into a cell's score.
                "union" (default): count the distinct configurations seen at the
                cell and its fragile neighbours together.
                "sum": add the neighbours' coverage counts to the cell's own,
                counting shared configurations more than once.
        """
        if chain_policy not in CHAIN_POLICIES:
            raise ValueError(f"chain_policy must be one of {CHAIN_POLICIES}, got {chain_policy!r}.")
        if top_ranks < 0:
            raise ValueError("top_ranks must be non-negative.")
        self.board = board
        self.registry = registry
        self.top_ranks = top_ranks
        self.chain_policy = chain_policy

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    def _rotation_cells(self, anchor: Coord, points: Tuple[Axial, ...]) -> Optional[List[Coord]]:
        """Cells of one anchored rotation, or None if any cell is unusable."""
        cells = project(anchor, points)
        for row, col in cells:
            if not self.board.can_host_shape_cell(row, col):
                return None
        return cells

    def shape_configurations(self, shape: TreasureShape) -> Dict[ConfigKey, Configuration]:
        """
        Enumerate the distinct configurations of one shape on the board.

        Every anchor that is neither a wall nor under a committed treasure is
        tried with all six rotations. A rotation is kept only if every cell it
        covers could still hide a treasure. Placements covering the same cell
        set collapse into one configuration.

        Returns:
            Mapping from configuration key to the first placement producing it,
            in enumeration order.
        """
        configs: Dict[ConfigKey, Configuration] = {}
        rotations = shape.rotations()

        for row, col in self.board.coords():
            if not self.board.can_anchor(row, col):
                continue
            for points in rotations:
                cells = self._rotation_cells((row, col), points)
                if cells is None:
                    continue
                config = Configuration(shape.id, (row, col), points, frozenset(cells))
                configs.setdefault(config.key, config)

        return configs

    def enumerate_configurations(self) -> Dict[int, Dict[ConfigKey, Configuration]]:
        """Configurations of every unplaced active shape, keyed by shape id."""
        out: Dict[int, Dict[ConfigKey, Configuration]] = {}
        for shape in self.registry.available():
            configs = self.shape_configurations(shape)
            logger.debug(f"Shape {shape.id}: {len(configs)} distinct configurations")
            out[shape.id] = configs
        return out

    @staticmethod
    def coverage_map(
        per_shape: Dict[int, Dict[ConfigKey, Configuration]],
    ) -> DefaultDict[Coord, Set[ConfigKey]]:
        """Cell -> keys of the configurations covering it."""
        covering: DefaultDict[Coord, Set[ConfigKey]] = defaultdict(set)
        for configs in per_shape.values():
            for key, config in configs.items():
                for cell in config.cells:
                    covering[cell].add(key)
        return covering

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def chain_neighbors(self, row: int, col: int) -> List[Coord]:
        """
        Fragile neighbours that would break together with (row, col).

        Only a cell that opens on the next hit (durability 1 or fragile)
        triggers a chain reaction.
        """
        cell = self.board.cells[row][col]
        if not (cell.kind is CellKind.FRAGILE or (cell.kind is CellKind.DURABLE and cell.hp == 1)):
            return []
        return [
            (nr, nc)
            for nr, nc in self.board.neighbors(row, col)
            if self.board.cells[nr][nc].kind is CellKind.FRAGILE
        ]

    def _numerator(self, coord: Coord, covering: DefaultDict[Coord, Set[ConfigKey]]) -> int:
        own = covering.get(coord, set())
        chained = self.chain_neighbors(*coord)
        if self.chain_policy == "union":
            combined: Set[ConfigKey] = set(own)
            for n in chained:
                combined.update(covering.get(n, set()))
            return len(combined)
        return len(own) + sum(len(covering.get(n, set())) for n in chained)

    def score_cells(self, covering: DefaultDict[Coord, Set[ConfigKey]]) -> List[CellScore]:
        """Unranked scores of every minable cell, in row-major order."""
        scored: List[CellScore] = []
        for row, col in self.board.coords():
            cost = self.board.cells[row][col].cost
            if cost is None or cost <= 0:
                continue
            base = len(covering.get((row, col), set()))
            total = self._numerator((row, col), covering)
            scored.append(CellScore(row, col, base, total - base, cost, total / cost))
        return scored

    def rank(self, scored: List[CellScore]) -> List[CellScore]:
        """Sort by descending score (stable) and flag the best positive cells."""
        ordered = sorted(scored, key=lambda s: s.score, reverse=True)
        ranked: List[CellScore] = []
        for i, item in enumerate(ordered):
            if i < self.top_ranks and item.score > 0:
                item = CellScore(item.row, item.col, item.coverage, item.chain_bonus, item.cost, item.score, i + 1)
            ranked.append(item)
        return ranked

    def solve(self) -> SolveResult:
        """
        Score every minable cell for the current board and registry.

        Returns:
            A SolveResult. When no unplaced active shape remains, `scoring` is
            False and the score map is empty.
        """
        if not self.registry.available():
            logger.debug("No unplaced active treasures; scoring skipped")
            return SolveResult(scoring=False, message=MSG_ALL_FIXED)

        per_shape = self.enumerate_configurations()
        covering = self.coverage_map(per_shape)
        ranking = self.rank(self.score_cells(covering))

        result = SolveResult(
            scoring=True,
            scores={item.coord: item for item in ranking},
            ranking=ranking,
            configuration_counts={shape_id: len(configs) for shape_id, configs in per_shape.items()},
        )

        top = result.top()
        if top:
            result.message = f"Top {len(top)} positions found (best strategy score: {top[0].score:.1f})"
        else:
            result.message = MSG_NO_POSITIONS
        return result
