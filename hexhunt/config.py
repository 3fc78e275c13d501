"""Board-size defaults, solver knobs and logging setup."""

import logging
from typing import Optional, Tuple

DEFAULT_ROWS: int = 4
DEFAULT_COLS: int = 7

# Number of recommended dig cells flagged with a rank.
TOP_RANKS: int = 3

# Hex radius of the shape editor grid around the (0, 0) anchor.
EDITOR_RADIUS: int = 2

DEFAULT_STAGE: str = "stage1"

CHAIN_POLICIES: Tuple[str, ...] = ("union", "sum")
DEFAULT_CHAIN_POLICY: str = "union"

# Highest durability a Durable cell can carry.
HIT_LIMIT: int = 3

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def configure_logging(level: int = logging.INFO, logfile: Optional[str] = None) -> None:
    """
    Configure root logging for the CLI and analysis scripts.

    Args:
        level: Root log level.
        logfile: Optional path of an extra log file (overwritten each run).
    """
    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(logfile, mode="w", encoding="utf-8"))
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=handlers,
    )
