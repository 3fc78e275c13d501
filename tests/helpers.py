from hexhunt.engine import Board


def full_board(value=1, rows=4, cols=7):
    """Board filled with a single layout code."""
    return Board(rows, cols, [[value] * cols for _ in range(rows)])
