"""
Quickstart example for the hex treasure hunt solver.

This script demonstrates basic usage of a puzzle session.
"""

from hexhunt import (
    PuzzleSession,
    format_score_map,
    run_hunt_many_tests,
)


def main():
    print("=" * 60)
    print("Hex Treasure Hunt - Quickstart Example")
    print("=" * 60)

    # Example 1: Load a stage and look at the recommendations
    print("\n1. Loading stage1...")
    print("-" * 60)

    session = PuzzleSession()
    result = session.init_board("stage1")
    print(session.board.format_board())
    print()
    print(format_score_map(result, session.rows, session.cols))
    print(result.message)

    # Example 2: Dig the best cell
    print("\n2. Digging the top recommendation...")
    print("-" * 60)

    best = result.top()[0]
    status, payload = session.dig(best.row, best.col)
    print(f"Dug ({best.row}, {best.col}) -> status {status}")
    print(f"Changed cells: {[(r, c) for r, c, _ in payload['changed_cells']]}")

    # Example 3: Commit a treasure and watch it leave the pool
    print("\n3. Placing treasure 103 rotated once at (1, 3)...")
    print("-" * 60)

    shape = session.registry.get(103)
    status, payload = session.place(103, shape.rotated(1), 1, 3)
    if status == 1:
        print(f"Placed on cells {payload['cells']}")
    else:
        print(f"Rejected: {payload['error']}")
    print(f"Still available: {[s.id for s in session.available_shapes()]}")
    print(format_score_map(session.result, session.rows, session.cols))

    # Example 4: Benchmark the heuristic against random digging
    print("\n4. Average hits to find every treasure (50 hunts each)...")
    print("-" * 60)

    for strategy in ("ranked", "random"):
        stats = run_hunt_many_tests("stage1", runs=50, strategy=strategy, seed=7)
        print(f"{strategy:8s}: {stats['avg_hits']:5.1f} hits, solve rate {stats['solve_rate']*100:5.1f}%")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
