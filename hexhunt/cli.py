"""
Terminal driver for a treasure hunt session.

Example:
    python -m hexhunt
    python -m hexhunt --stage stage1 --policy sum --verbose
"""

import argparse
import logging
from typing import List, Optional

from .analysis import format_score_map
from .config import CHAIN_POLICIES, DEFAULT_CHAIN_POLICY, DEFAULT_STAGE, configure_logging
from .session import PuzzleSession
from .stages import stage_names

HELP = """Commands (coordinates are 0-based row col):
  dig R C                 hit a cell
  place ID ROT R C        place treasure ID rotated ROT steps clockwise, anchored at R C
  remove N                remove the N-th placed treasure
  edit R C V              set a cell (-1 wall, 0 open, 0.5 fragile, 1-3 durable)
  toggle ID               activate/deactivate a treasure template
  list                    show treasures and placements
  board                   show the board
  q                       quit"""


def _print_state(session: PuzzleSession) -> None:
    print(session.board.format_board(show_hidden=True))
    print()
    print(format_score_map(session.result, session.rows, session.cols))
    print(session.status_message)


def _print_lists(session: PuzzleSession) -> None:
    print("Available treasures:")
    for shape in session.available_shapes():
        print(f"  {shape.id}: {list(shape.points)}")
    print("Placed treasures:")
    for i, placed in enumerate(session.registry.placed):
        print(f"  [{i}] {placed.shape_id} at {placed.anchor}: {list(placed.points)}")


def play_cli(session: PuzzleSession) -> None:
    """
    Run a simple terminal UI over a session.

    Args:
        session: An initialised PuzzleSession.
    """
    print("Hex treasure hunt. Type 'help' for commands, 'q' to quit.\n")
    _print_state(session)

    while True:
        s = input("\n> ").strip()
        if not s:
            continue
        if s.lower() in {"q", "quit", "exit"}:
            print("Quit.")
            return

        parts = s.replace(",", " ").split()
        cmd, args = parts[0].lower(), parts[1:]

        try:
            if cmd == "help":
                print(HELP)
                continue
            if cmd == "list":
                _print_lists(session)
                continue
            if cmd == "board":
                _print_state(session)
                continue
            if cmd == "dig" and len(args) == 2:
                status, payload = session.dig(int(args[0]), int(args[1]))
            elif cmd == "place" and len(args) == 4:
                shape_id, steps, row, col = (int(a) for a in args)
                shape = session.registry.get(shape_id)
                status, payload = session.place(shape_id, shape.rotated(steps), row, col)
            elif cmd == "remove" and len(args) == 1:
                status, payload = session.remove_placement(int(args[0]))
            elif cmd == "edit" and len(args) == 3:
                status, payload = session.set_edit_cell(int(args[0]), int(args[1]), float(args[2]))
            elif cmd == "toggle" and len(args) == 1:
                status, payload = session.toggle_shape_active(int(args[0]))
            else:
                print("Invalid input. Type 'help' for commands.")
                continue
        except ValueError:
            print("Invalid input. Arguments must be numbers.")
            continue
        except LookupError as exc:
            print(exc)
            continue

        if status == -1:
            print(f"Rejected: {payload['error']}")
        elif status == 0:
            print("Nothing happened.")
        _print_state(session)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Hex treasure hunt dig advisor")
    parser.add_argument("--stage", default=DEFAULT_STAGE, choices=stage_names(), help="Stage to load")
    parser.add_argument(
        "--policy",
        default=DEFAULT_CHAIN_POLICY,
        choices=CHAIN_POLICIES,
        help="How fragile neighbours contribute to a cell's score",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    session = PuzzleSession(chain_policy=args.policy)
    session.init_board(args.stage)
    play_cli(session)
    return 0
