"""Hex treasure board engine: cell durability, digging and chain reactions."""

import logging
import math
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, List, Optional, Sequence, Set, Tuple, Union

from .config import DEFAULT_COLS, DEFAULT_ROWS, HIT_LIMIT
from .errors import UnknownCoordinate
from .hexmath import Coord, get_neighborhoods

logger = logging.getLogger(__name__)

LayoutValue = Union[int, float]


class CellKind(Enum):
    WALL = "wall"
    OPEN = "open"
    DURABLE = "durable"
    FRAGILE = "fragile"


@dataclass(frozen=True)
class Cell:
    """
    Tagged cell value.

    Stage layouts use numeric codes: -1 wall, 0 open, 0.5 fragile and
    1..HIT_LIMIT for durable blocks with that many hit points.
    """

    kind: CellKind
    hp: int = 0

    @classmethod
    def durable(cls, hp: int) -> "Cell":
        if not 1 <= hp <= HIT_LIMIT:
            raise ValueError(f"Durability must be between 1 and {HIT_LIMIT}, got {hp}.")
        return cls(CellKind.DURABLE, hp)

    @classmethod
    def from_code(cls, value: object) -> "Cell":
        """Parse a layout code; anything unrecognised becomes a wall."""
        if isinstance(value, Cell):
            return value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return WALL
        if isinstance(value, float) and not math.isfinite(value):
            return WALL
        if value == 0.5:
            return FRAGILE
        if value == 0:
            return OPEN
        if value == int(value) and 1 <= value <= HIT_LIMIT:
            return cls(CellKind.DURABLE, int(value))
        return WALL

    @property
    def code(self) -> LayoutValue:
        if self.kind is CellKind.WALL:
            return -1
        if self.kind is CellKind.OPEN:
            return 0
        if self.kind is CellKind.FRAGILE:
            return 0.5
        return self.hp

    @property
    def minable(self) -> bool:
        return self.kind in (CellKind.DURABLE, CellKind.FRAGILE)

    @property
    def cost(self) -> Optional[float]:
        """Hits needed to open the cell; None for walls and open cells."""
        if self.kind is CellKind.FRAGILE:
            return 1.0
        if self.kind is CellKind.DURABLE:
            return float(self.hp)
        return None

    def hit(self) -> "Cell":
        """Value after one hit (minable cells only)."""
        if self.kind is CellKind.FRAGILE or (self.kind is CellKind.DURABLE and self.hp <= 1):
            return OPEN
        if self.kind is CellKind.DURABLE:
            return Cell(CellKind.DURABLE, self.hp - 1)
        return self

    def symbol(self) -> str:
        if self.kind is CellKind.WALL:
            return "#"
        if self.kind is CellKind.OPEN:
            return "."
        if self.kind is CellKind.FRAGILE:
            return "w"
        return str(self.hp)


WALL = Cell(CellKind.WALL)
OPEN = Cell(CellKind.OPEN)
FRAGILE = Cell(CellKind.FRAGILE)

ChangedCell = Tuple[int, int, Cell]


class Board:
    """Mutable grid of cell values plus the hidden-treasure overlay."""

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        layout: Optional[Sequence[Sequence[object]]] = None,
    ) -> None:
        """
        Initialize a board.

        Args:
            rows: Board height (number of rows), must be > 0.
            cols: Board width (number of columns), must be > 0.
            layout: Optional table of Cell values or layout codes. Missing or
                malformed entries become walls. When omitted every cell is a wall.

        Raises:
            ValueError: If dimensions are invalid.
        """
        if rows <= 0 or cols <= 0:
            raise ValueError("Rows and cols must be positive.")

        self.rows: int = rows
        self.cols: int = cols

        self.cells: List[List[Cell]] = [[WALL for _ in range(cols)] for _ in range(rows)]
        self.hidden: List[List[bool]] = [[False for _ in range(cols)] for _ in range(rows)]

        if layout is not None:
            for row, values in enumerate(layout[:rows]):
                for col, value in enumerate(list(values)[:cols]):
                    self.cells[row][col] = Cell.from_code(value)

        self._neighborhoods: Dict[Coord, Tuple[Coord, ...]] = get_neighborhoods(rows, cols)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def _check(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise UnknownCoordinate(f"Cell ({row}, {col}) is outside the {self.rows}x{self.cols} board.")

    def cell(self, row: int, col: int) -> Cell:
        self._check(row, col)
        return self.cells[row][col]

    def neighbors(self, row: int, col: int) -> Tuple[Coord, ...]:
        """Return precomputed neighbour coordinates for a cell."""
        return self._neighborhoods[(row, col)]

    def coords(self) -> List[Coord]:
        return [(row, col) for row in range(self.rows) for col in range(self.cols)]

    def minable_cells(self) -> List[Coord]:
        return [(row, col) for row, col in self.coords() if self.cells[row][col].minable]

    # -------------------------------------------------------------------------
    # Hidden treasure overlay
    # -------------------------------------------------------------------------

    def is_hidden(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col) and self.hidden[row][col]

    def set_hidden(self, row: int, col: int, value: bool) -> None:
        self._check(row, col)
        self.hidden[row][col] = value

    def hidden_cells(self) -> Set[Coord]:
        return {(row, col) for row, col in self.coords() if self.hidden[row][col]}

    def can_anchor(self, row: int, col: int) -> bool:
        """True if (row, col) may serve as the anchor of a candidate placement."""
        if not self.in_bounds(row, col):
            return False
        return self.cells[row][col].kind is not CellKind.WALL and not self.hidden[row][col]

    def can_host_shape_cell(self, row: int, col: int) -> bool:
        """True if an unrevealed treasure could still occupy (row, col)."""
        if not self.in_bounds(row, col):
            return False
        kind = self.cells[row][col].kind
        if kind is CellKind.WALL or kind is CellKind.OPEN:
            return False
        return not self.hidden[row][col]

    def can_commit_cell(self, row: int, col: int) -> bool:
        """True if a user-committed treasure may cover (row, col); open cells are allowed."""
        if not self.in_bounds(row, col):
            return False
        return self.cells[row][col].kind is not CellKind.WALL and not self.hidden[row][col]

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set_cell(self, row: int, col: int, value: object) -> Cell:
        """
        Overwrite a cell directly (edit mode); no dig or chain rules apply.

        Args:
            row: Cell row.
            col: Cell column.
            value: A Cell or a layout code.

        Returns:
            The stored Cell.

        Raises:
            UnknownCoordinate: If the coordinates are outside the board.
        """
        self._check(row, col)
        cell = Cell.from_code(value)
        self.cells[row][col] = cell
        if cell.kind is CellKind.WALL and self.hidden[row][col]:
            logger.debug(f"Clearing hidden marker under new wall at ({row}, {col})")
            self.hidden[row][col] = False
        return cell

    def chain_break(self, row: int, col: int) -> List[ChangedCell]:
        """
        Break every fragile cell connected to the just-opened cell at (row, col).

        Args:
            row: Row of the cell that was just opened.
            col: Column of the cell that was just opened.

        Returns:
            A list of newly opened cells as (row, col, Cell), in breadth-first order.
        """
        frontier: Deque[Coord] = deque([(row, col)])
        visited: Set[Coord] = {(row, col)}
        opened: List[ChangedCell] = []

        while frontier:
            cr, cc = frontier.popleft()
            for nr, nc in self.neighbors(cr, cc):
                if (nr, nc) in visited:
                    continue
                if self.cells[nr][nc].kind is not CellKind.FRAGILE:
                    continue
                visited.add((nr, nc))
                self.cells[nr][nc] = OPEN
                opened.append((nr, nc, OPEN))
                frontier.append((nr, nc))

        return opened

    def dig(self, row: int, col: int) -> List[ChangedCell]:
        """
        Hit a single cell once.

        Walls and open cells are left untouched. A fragile cell opens at once;
        a durable cell loses one hit point and opens when it reaches zero.
        Opening a cell breaks the connected fragile cells around it.

        Args:
            row: Cell row.
            col: Cell column.

        Returns:
            Every changed cell as (row, col, new Cell), the dug cell first.
            Empty for no-op digs.

        Raises:
            UnknownCoordinate: If the coordinates are outside the board.
        """
        self._check(row, col)
        cell = self.cells[row][col]
        if not cell.minable:
            return []

        new_cell = cell.hit()
        self.cells[row][col] = new_cell
        changed: List[ChangedCell] = [(row, col, new_cell)]

        if new_cell.kind is CellKind.OPEN:
            changed.extend(self.chain_break(row, col))

        return changed

    # -------------------------------------------------------------------------
    # Conversion and display
    # -------------------------------------------------------------------------

    def copy(self) -> "Board":
        board = Board(self.rows, self.cols)
        board.cells = [list(row) for row in self.cells]
        board.hidden = [list(row) for row in self.hidden]
        return board

    def to_layout(self) -> List[List[LayoutValue]]:
        return [[cell.code for cell in row] for row in self.cells]

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_TREASURE = "\033[93m"

    def _c(self, s: str) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}"

    def _t(self, s: str) -> str:
        """Wrap string in treasure color."""
        return f"{self._ANSI_TREASURE}{s}{self._ANSI_RESET}"

    def format_board(self, show_hidden: bool = False, color: bool = True) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Walls are '#', open cells '.', fragile blocks 'w' and durable blocks
        their hit points. Cells of committed treasures are marked with '*'.

        Args:
            show_hidden: If True, mark cells covered by committed treasures.
            color: If False, emit plain text without ANSI escapes.

        Returns:
            A formatted multi-line string with coordinate labels and the grid.
        """
        c = self._c if color else str
        t = self._t if color else str

        def cell_str(row: int, col: int) -> str:
            s = self.cells[row][col].symbol()
            if show_hidden and self.hidden[row][col]:
                return t(s + "*")
            return s + " "

        header_cells = " ".join(f"{col:2d}" for col in range(self.cols))
        out = [c("   ") + c(header_cells)]
        out.append(c("   " + "-" * (3 * self.cols - 1)))

        for row in range(self.rows):
            row_cells = " ".join(f"{cell_str(row, col)}" for col in range(self.cols))
            out.append(c(f"{row:2d} ") + c("|") + row_cells)

        return "\n".join(out)
