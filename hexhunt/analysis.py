"""Analysis and benchmarking tools for the treasure dig heuristic."""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Set, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .config import DEFAULT_STAGE
from .hexmath import Coord
from .session import PuzzleSession
from .solver import Configuration, PlacementSolver, SolveResult

logger = logging.getLogger(__name__)

STRATEGIES = ("ranked", "random")


def format_score_map(result: SolveResult, rows: int, cols: int, *, show_coords: bool = True) -> str:
    """
    Format a solver result as a text grid.

    Unscored cells are shown as '.', scored cells with one decimal and ranked
    cells with a trailing '#rank'.
    """

    def cell_str(row: int, col: int) -> str:
        item = result.scores.get((row, col))
        if item is None:
            return f"{'.':>7}"
        text = f"{item.score:.1f}"
        if item.rank is not None:
            text += f"#{item.rank}"
        return f"{text:>7}"

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{col:>7d}" for col in range(cols))
        lines.append("   " + header)
        lines.append("   " + "-" * (8 * cols - 1))

    for row in range(rows):
        body = " ".join(cell_str(row, col) for col in range(cols))
        lines.append(f"{row:2d} |" + body if show_coords else body)

    if not result.scoring:
        lines.append(result.message or "No scoring.")
    return "\n".join(lines)


def place_random_treasures(session: PuzzleSession, rng: np.random.Generator) -> List[Configuration]:
    """
    Pick a hidden, non-overlapping configuration for every available shape.

    The session is not modified. Shapes with no room left are skipped.
    """
    solver = PlacementSolver(session.board, session.registry)
    used: Set[Coord] = set()
    truth: List[Configuration] = []
    for shape in session.available_shapes():
        candidates = [c for c in solver.shape_configurations(shape).values() if not (c.cells & used)]
        if not candidates:
            logger.debug(f"No room left for treasure {shape.id}")
            continue
        config = candidates[int(rng.integers(len(candidates)))]
        truth.append(config)
        used |= config.cells
    return truth


def _pick_cell(session: PuzzleSession, strategy: str, rng: np.random.Generator) -> Optional[Coord]:
    minable = session.board.minable_cells()
    if not minable:
        return None
    if strategy == "ranked":
        top = session.result.top()
        if top:
            return top[0].coord
        return minable[0]
    return minable[int(rng.integers(len(minable)))]


def run_hunt_single_test(
    stage_id: str = DEFAULT_STAGE,
    strategy: str = "ranked",
    *,
    seed: Optional[int] = None,
    max_hits: int = 200,
    chain_policy: str = "union",
    show_boards: bool = False,
) -> Dict[str, object]:
    """
    Play one self-guided hunt on a fresh session.

    Every active treasure is hidden at a random legal configuration. The
    player then hits cells chosen by `strategy` ("ranked" follows the top
    recommendation, "random" hits any minable cell). As soon as a hit opens
    a cell of a hidden treasure, that treasure counts as found and is
    committed to the board at its true position.

    Returns:
        Dict with "hits", "treasures", "found", "solved" and "opened_cells".
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"strategy must be one of {STRATEGIES}, got {strategy!r}.")

    rng = np.random.default_rng(seed)
    session = PuzzleSession(chain_policy=chain_policy)
    session.init_board(stage_id)

    truth = place_random_treasures(session, rng)
    remaining = {config.shape_id: config for config in truth}
    hits = 0
    opened = 0

    while remaining and hits < max_hits:
        target = _pick_cell(session, strategy, rng)
        if target is None:
            break
        status, payload = session.dig(*target)
        if status != 1:
            raise RuntimeError(f"Dig at {target} was not applied (status {status}).")
        hits += 1

        open_now = {(r, c) for r, c, cell in payload["changed_cells"] if not cell.minable}
        opened += len(open_now)
        for shape_id, config in list(remaining.items()):
            if config.cells & open_now:
                status, payload = session.place(shape_id, config.points, *config.anchor)
                if status != 1:
                    raise RuntimeError(f"Treasure {shape_id} could not be committed: {payload.get('error')}")
                del remaining[shape_id]

    if show_boards:
        print(f"Stage {stage_id!r}, strategy {strategy!r}: {hits} hits")
        print(session.board.format_board(show_hidden=True))

    return {
        "hits": hits,
        "treasures": len(truth),
        "found": len(truth) - len(remaining),
        "solved": not remaining,
        "opened_cells": opened,
    }


def run_hunt_many_tests(
    stage_id: str = DEFAULT_STAGE,
    runs: int = 100,
    strategy: str = "ranked",
    *,
    seed: Optional[int] = None,
    max_hits: int = 200,
    chain_policy: str = "union",
) -> Dict[str, float]:
    """
    Run many independent hunts and return averaged metrics.

    Returns:
        avg_hits, std_hits, avg_found, avg_opened_cells, solve_rate, and
        hits_per_treasure.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    seeds = np.random.SeedSequence(seed).spawn(runs)
    columns: Dict[str, List[float]] = defaultdict(list)
    solved = 0

    for child in seeds:
        out = run_hunt_single_test(
            stage_id,
            strategy,
            seed=int(child.generate_state(1)[0]),
            max_hits=max_hits,
            chain_policy=chain_policy,
        )
        columns["hits"].append(float(out["hits"]))
        columns["found"].append(float(out["found"]))
        columns["treasures"].append(float(out["treasures"]))
        columns["opened_cells"].append(float(out["opened_cells"]))
        solved += int(bool(out["solved"]))

    hits = np.asarray(columns["hits"])
    found = np.asarray(columns["found"])
    total_found = float(found.sum())

    return {
        "avg_hits": float(hits.mean()),
        "std_hits": float(hits.std()),
        "avg_found": float(found.mean()),
        "avg_treasures": float(np.mean(columns["treasures"])),
        "avg_opened_cells": float(np.mean(columns["opened_cells"])),
        "solve_rate": solved / runs,
        "hits_per_treasure": float(hits.sum()) / total_found if total_found > 0 else 0.0,
    }


def run_strategy_comparison(
    runs: int,
    stage_ids: Sequence[str] = (DEFAULT_STAGE,),
    *,
    seed: Optional[int] = None,
    show: bool = True,
) -> Dict[Tuple[str, str], Dict[str, float]]:
    """
    Compare dig strategies and chain policies on each stage and plot the results.

    Returns:
        Mapping from (stage_id, variant) to the metrics of run_hunt_many_tests().
        Variants are "ranked/union", "ranked/sum" and "random".
    """
    variants: Dict[str, Tuple[str, str]] = {
        "ranked/union": ("ranked", "union"),
        "ranked/sum": ("ranked", "sum"),
        "random": ("random", "union"),
    }

    results: Dict[Tuple[str, str], Dict[str, float]] = {}
    for stage_id in stage_ids:
        for name, (strategy, policy) in variants.items():
            results[(stage_id, name)] = run_hunt_many_tests(
                stage_id, runs, strategy, seed=seed, chain_policy=policy
            )
            logger.info(f"{stage_id} {name}: {results[(stage_id, name)]['avg_hits']:.2f} hits")

    x = np.arange(len(stage_ids))
    bar_w = 0.25
    names = list(variants.keys())

    # 1) Average hits until every treasure is found
    plt.figure()  # type: ignore[misc]
    for i, name in enumerate(names):
        values = [results[(s, name)]["avg_hits"] for s in stage_ids]
        plt.bar(x + (i - 1) * bar_w, values, width=bar_w, label=name)  # type: ignore[misc]
    plt.xticks(x, list(stage_ids))  # type: ignore[misc]
    plt.ylabel("Average hits")  # type: ignore[misc]
    plt.title("Hits until every treasure is found")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()

    # 2) Hits per found treasure
    plt.figure()  # type: ignore[misc]
    for i, name in enumerate(names):
        values = [results[(s, name)]["hits_per_treasure"] for s in stage_ids]
        plt.bar(x + (i - 1) * bar_w, values, width=bar_w, label=name)  # type: ignore[misc]
    plt.xticks(x, list(stage_ids))  # type: ignore[misc]
    plt.ylabel("Hits per treasure")  # type: ignore[misc]
    plt.title("Dig efficiency by strategy")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()

    if show:
        plt.show()  # type: ignore[misc]

    return results
